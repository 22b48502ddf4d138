"""Fan-out of frames to every registered viewer as multipart chunks."""

from __future__ import annotations

from typing import Optional

from .client_registry import Client, ClientRegistry

BOUNDARY = "stream"
CONTENT_TYPE = f"multipart/x-mixed-replace; boundary={BOUNDARY}"
CHUNK_SEPARATOR = b"\r\n\r\n"


def format_chunk(frame: bytes, *, first: bool) -> bytes:
    """Build the multipart chunk carrying ``frame``.

    Every chunk after a client's first is prefixed with a blank-line
    separator so the previous part's payload is terminated.
    """
    head = (
        f"--{BOUNDARY}\r\n"
        "Content-Type: image/jpeg\r\n"
        f"Content-Length: {len(frame)}\r\n"
        "\r\n"
    ).encode("ascii")
    if first:
        return head + frame
    return CHUNK_SEPARATOR + head + frame


class Broadcaster:
    """Writes frames to clients, skipping any channel that is busy or gone."""

    def __init__(self, registry: ClientRegistry) -> None:
        self.registry = registry

    def send_to(self, frame: Optional[bytes], client: Client) -> bool:
        if frame is None:
            return False
        channel = client.channel
        if not channel.writable:
            return False
        channel.write(format_chunk(frame, first=client.frames_sent == 0))
        client.record_frame()
        return True

    def broadcast(self, frame: Optional[bytes]) -> int:
        """Send ``frame`` to all clients; returns how many were written to."""
        if frame is None:
            return 0
        delivered = 0
        for client in self.registry.snapshot():
            if self.send_to(frame, client):
                delivered += 1
        return delivered
