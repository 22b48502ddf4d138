"""Top-level wiring of hub, ingest handler, capture supervisor and HTTP server."""

from __future__ import annotations

import asyncio
from typing import Optional

from mjpeg_relay.api.server import RelayServer, create_app
from mjpeg_relay.core.asyncio_utils import create_logged_task
from mjpeg_relay.core.logging_utils import get_module_logger
from mjpeg_relay.core.scheduler import LoopScheduler, Scheduler
from mjpeg_relay.relay.config import RelayConfig
from mjpeg_relay.relay.frames import load_fallback_frame
from mjpeg_relay.relay.hub import RelayHub
from mjpeg_relay.relay.ingest import IngestHandler
from mjpeg_relay.relay.supervisor import CaptureSupervisor, ProcessFactory, spawn_capture_process


class RelaySystem:

    def __init__(
        self,
        config: RelayConfig,
        *,
        scheduler: Optional[Scheduler] = None,
        process_factory: ProcessFactory = spawn_capture_process,
    ):
        self.config = config
        self.scheduler = scheduler or LoopScheduler()
        self.process_factory = process_factory
        self.logger = get_module_logger("RelaySystem")

        self.hub: Optional[RelayHub] = None
        self.ingest: Optional[IngestHandler] = None
        self.supervisor: Optional[CaptureSupervisor] = None
        self.server: Optional[RelayServer] = None

        self._stopped = asyncio.Event()
        self._stop_task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        fallback = await load_fallback_frame(self.config.fallback_image)

        self.hub = RelayHub(
            self.scheduler,
            fallback=fallback,
            watchdog_interval=self.config.watchdog_interval,
        )
        self.ingest = IngestHandler(self.hub)
        self.supervisor = CaptureSupervisor(
            self.hub,
            self.config.capture,
            self.config.port,
            self.scheduler,
            process_factory=self.process_factory,
        )

        app = create_app(self.hub, self.ingest, self.supervisor)
        self.server = RelayServer(app, host=self.config.host, port=self.config.port)

        # ffmpeg posts to our own /mjpeg, so the server must be up first.
        await self.server.start()
        await self.supervisor.start()

    async def stop(self) -> None:
        if self._stopped.is_set():
            return
        self.logger.info("Shutting down relay")

        if self.supervisor is not None:
            await self.supervisor.stop()
        if self.hub is not None:
            self.hub.close()
        if self.server is not None:
            await self.server.stop()

        self._stopped.set()

    def request_shutdown(self) -> None:
        """Schedule stop() from a signal handler."""
        if self._stop_task is None:
            self._stop_task = create_logged_task(
                self.stop(), logger=self.logger, context="relay-shutdown"
            )

    async def wait_stopped(self) -> None:
        await self._stopped.wait()
