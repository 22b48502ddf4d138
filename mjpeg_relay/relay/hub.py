"""
Relay Hub - the one owned bundle of relay state.

Groups the frame store, client registry, broadcaster and watchdog so the
ingest handler, capture supervisor and HTTP layer all share one explicitly
constructed (and explicitly closed) object instead of module globals.
"""

from __future__ import annotations

import random
from typing import Any, Dict, Optional

from mjpeg_relay.core.logging_utils import get_module_logger
from mjpeg_relay.core.scheduler import Scheduler

from .broadcaster import Broadcaster
from .client_registry import Client, ClientRegistry, FrameChannel
from .frame_store import FrameStore
from .watchdog import DEFAULT_INTERVAL, FrameWatchdog


class RelayHub:

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        fallback: Optional[bytes] = None,
        watchdog_interval: float = DEFAULT_INTERVAL,
        rng: Optional[random.Random] = None,
    ):
        self.logger = get_module_logger("RelayHub")
        self.store = FrameStore(fallback)
        self.registry = ClientRegistry(rng)
        self.broadcaster = Broadcaster(self.registry)
        self.watchdog = FrameWatchdog(scheduler, interval=watchdog_interval)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def current_frame(self) -> Optional[bytes]:
        return self.store.get_current()

    def add_client(self, channel: FrameChannel) -> Client:
        """Register a viewer and push it the current frame right away."""
        client = self.registry.register(channel)
        self.logger.info("New client ID %d", client.client_id)
        self.broadcaster.send_to(self.store.get_current(), client)
        return client

    def remove_client(self, client_id: int) -> None:
        if self.registry.unregister(client_id) is not None:
            self.logger.info("Client ID %d has closed", client_id)

    def broadcast(self, frame: Optional[bytes]) -> int:
        return self.broadcaster.broadcast(frame)

    def show_fallback(self) -> int:
        """Drop the live frame and push whatever the store now falls back to."""
        self.store.clear()
        return self.broadcaster.broadcast(self.store.get_current())

    def snapshot(self) -> Dict[str, Any]:
        return {
            "clients": len(self.registry),
            "live_frame": self.store.has_live_frame,
            "frames_received": self.store.frames_stored,
            "fallback_configured": self.store.fallback is not None,
            "watchdog": {
                "state": self.watchdog.state.value,
                "threshold": self.watchdog.threshold,
                "alarms": self.watchdog.alarm_count,
            },
        }

    def close(self) -> None:
        if self._closed:
            return
        self.watchdog.stop()
        self.registry.for_each(lambda client: client.channel.close())
        self.registry.clear()
        self._closed = True
