"""Validation and publication of frames uploaded by the capture process."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from mjpeg_relay.core.logging_utils import get_module_logger

from .frames import MalformedFrameError, ensure_jpeg
from .hub import RelayHub


@dataclass(frozen=True)
class IngestResult:
    """Outcome of one upload."""
    accepted: bool
    frame_size: int
    clients_reached: int = 0
    error: Optional[str] = None


class IngestHandler:

    def __init__(self, hub: RelayHub):
        self.hub = hub
        self.logger = get_module_logger("Ingest")
        self.accepted_count = 0
        self.rejected_count = 0

    def accept_frame(self, data: bytes) -> IngestResult:
        """Store, re-arm the watchdog and fan out ``data`` if it is a JPEG.

        Malformed uploads are discarded without touching the store or the
        watchdog.
        """
        try:
            frame = ensure_jpeg(data)
        except MalformedFrameError as exc:
            self.rejected_count += 1
            self.logger.debug("Rejected upload: %s", exc)
            return IngestResult(accepted=False, frame_size=exc.size, error=exc.message)

        self.hub.store.set_current(frame)
        self.hub.watchdog.reset()
        reached = self.hub.broadcast(frame)
        self.accepted_count += 1
        return IngestResult(accepted=True, frame_size=len(frame), clients_reached=reached)
