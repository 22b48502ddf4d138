"""aiohttp-backed output channel for one MJPEG viewer."""

from __future__ import annotations

import asyncio
import contextlib
from typing import Optional

from aiohttp import web

from mjpeg_relay.core.asyncio_utils import create_logged_task
from mjpeg_relay.core.logging_utils import get_module_logger

logger = get_module_logger("ResponseChannel")

DEFAULT_POLL_INTERVAL = 1.0


class ResponseChannel:
    """Write-or-skip wrapper around a prepared ``StreamResponse``.

    ``write`` hands the chunk to a background task and returns immediately;
    until that task finishes the channel reports itself as not writable, so
    a stalled viewer simply misses frames instead of holding up the others.
    """

    def __init__(self, request: web.BaseRequest, response: web.StreamResponse) -> None:
        self._request = request
        self._response = response
        self._pending: Optional[asyncio.Task] = None
        self._closed = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def _transport_open(self) -> bool:
        transport = self._request.transport
        return transport is not None and not transport.is_closing()

    @property
    def writable(self) -> bool:
        if self.closed or not self._transport_open():
            return False
        return self._pending is None or self._pending.done()

    def write(self, data: bytes) -> None:
        self._pending = create_logged_task(self._write(data), logger=logger)

    async def _write(self, data: bytes) -> None:
        try:
            await self._response.write(data)
        except OSError as exc:
            logger.debug("Viewer write failed: %s", exc)
            self.close()

    def close(self) -> None:
        self._closed.set()

    async def wait_closed(self, poll_interval: float = DEFAULT_POLL_INTERVAL) -> None:
        """Block until the viewer goes away or the channel is closed."""
        while not self.closed:
            if not self._transport_open():
                self.close()
                break
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(self._closed.wait(), timeout=poll_interval)

    async def aclose(self) -> None:
        self.close()
        if self._pending is not None and not self._pending.done():
            await asyncio.wait({self._pending})
