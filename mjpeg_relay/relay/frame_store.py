"""Single-slot store for the frame currently being relayed."""

from __future__ import annotations

from typing import Optional


class FrameStore:
    """Holds the latest valid frame, falling back to a static image.

    Frames are immutable ``bytes`` and the slot is swapped by a single
    assignment, so a reader always sees either the old or the new frame.
    """

    def __init__(self, fallback: Optional[bytes] = None) -> None:
        self._fallback = fallback
        self._current: Optional[bytes] = None
        self._frames_stored = 0

    @property
    def fallback(self) -> Optional[bytes]:
        return self._fallback

    @property
    def has_live_frame(self) -> bool:
        return self._current is not None

    @property
    def frames_stored(self) -> int:
        return self._frames_stored

    def set_current(self, frame: bytes) -> None:
        self._current = frame
        self._frames_stored += 1

    def get_current(self) -> Optional[bytes]:
        if self._current is not None:
            return self._current
        return self._fallback

    def clear(self) -> None:
        self._current = None
