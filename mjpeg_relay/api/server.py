"""
Relay Server - aiohttp HTTP front end for the broadcast engine.
"""

from typing import Optional

from aiohttp import web

from mjpeg_relay.core.logging_utils import get_module_logger
from mjpeg_relay.relay.hub import RelayHub
from mjpeg_relay.relay.ingest import IngestHandler
from mjpeg_relay.relay.supervisor import CaptureSupervisor

from .middleware import error_handling_middleware, request_logging_middleware
from .routes import setup_routes


logger = get_module_logger("RelayServer")

DEFAULT_MAX_FRAME_BYTES = 16 * 1024 * 1024


def create_app(
    hub: RelayHub,
    ingest: IngestHandler,
    supervisor: Optional[CaptureSupervisor] = None,
    *,
    max_frame_bytes: int = DEFAULT_MAX_FRAME_BYTES,
) -> web.Application:
    """Create and configure the aiohttp application."""
    app = web.Application(
        middlewares=[request_logging_middleware, error_handling_middleware],
        client_max_size=max_frame_bytes,
    )
    app["hub"] = hub
    app["ingest"] = ingest
    app["supervisor"] = supervisor
    setup_routes(app)
    return app


class RelayServer:
    """
    HTTP server for the relay.

    Integrates with the running asyncio loop through ``AppRunner`` so it can
    share the loop with the capture supervisor.
    """

    def __init__(
        self,
        app: web.Application,
        host: str = "0.0.0.0",
        port: int = 1234,
        shutdown_timeout: float = 2.0,
    ):
        self.app = app
        self.host = host
        self.port = port
        self.shutdown_timeout = shutdown_timeout

        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None
        self._running = False

    async def start(self) -> None:
        """Start serving (non-blocking)."""
        if self._running:
            logger.warning("Relay server already running")
            return

        self._runner = web.AppRunner(
            self.app, handle_signals=False, shutdown_timeout=self.shutdown_timeout
        )
        await self._runner.setup()

        self._site = web.TCPSite(self._runner, self.host, self.port)
        await self._site.start()

        self._running = True
        logger.info("Listening on port %d", self.port)

    async def stop(self) -> None:
        """Stop the server gracefully."""
        if not self._running:
            return

        logger.info("Stopping relay server...")

        if self._runner:
            await self._runner.cleanup()
            self._runner = None
        self._site = None
        self._running = False

        logger.info("Relay server stopped")

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"
