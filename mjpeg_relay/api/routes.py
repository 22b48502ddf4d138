"""
Relay routes - viewer page, still image, MJPEG stream, frame upload, status.
"""

from aiohttp import web

from mjpeg_relay.relay.broadcaster import CONTENT_TYPE
from mjpeg_relay.relay.hub import RelayHub
from mjpeg_relay.relay.ingest import IngestHandler

from .channel import ResponseChannel

INDEX_HTML = (
    '<body style="margin: 0; padding: 0; background-color: black;">'
    '<img src="/mjpeg" style="height: 100vh; display: block; '
    'margin-left: auto; margin-right: auto;">'
    "</body>"
)


def setup_routes(app: web.Application) -> None:
    """Register relay routes."""
    app.router.add_get("/", index_handler)
    app.router.add_get("/still", still_handler)
    app.router.add_get("/mjpeg", stream_handler)
    app.router.add_post("/mjpeg", upload_handler)
    app.router.add_get("/status", status_handler)


async def index_handler(request: web.Request) -> web.Response:
    """GET / - Viewer page embedding the stream."""
    return web.Response(text=INDEX_HTML, content_type="text/html")


async def still_handler(request: web.Request) -> web.Response:
    """GET /still - Current frame (or fallback); empty body when neither exists."""
    hub: RelayHub = request.app["hub"]
    frame = hub.current_frame()
    return web.Response(body=frame or b"", content_type="image/jpeg")


async def stream_handler(request: web.Request) -> web.StreamResponse:
    """GET /mjpeg - Register a viewer and keep the multipart response open."""
    hub: RelayHub = request.app["hub"]

    response = web.StreamResponse(
        status=200,
        headers={"Content-Type": CONTENT_TYPE, "Cache-Control": "no-cache"},
    )
    await response.prepare(request)

    channel = ResponseChannel(request, response)
    client = hub.add_client(channel)
    try:
        await channel.wait_closed()
    finally:
        hub.remove_client(client.client_id)
        await channel.aclose()
    return response


async def upload_handler(request: web.Request) -> web.Response:
    """POST /mjpeg - One complete JPEG frame from the capture process."""
    ingest: IngestHandler = request.app["ingest"]
    data = await request.read()
    result = ingest.accept_frame(data)
    if not result.accepted:
        return web.Response(status=400, text=result.error, content_type="text/plain")
    return web.Response(status=200)


async def status_handler(request: web.Request) -> web.Response:
    """GET /status - Relay, ingest and capture state."""
    hub: RelayHub = request.app["hub"]
    ingest: IngestHandler = request.app["ingest"]
    supervisor = request.app.get("supervisor")

    result = hub.snapshot()
    result["ingest"] = {
        "accepted": ingest.accepted_count,
        "rejected": ingest.rejected_count,
    }
    result["capture"] = supervisor.snapshot() if supervisor is not None else None
    return web.json_response(result)
