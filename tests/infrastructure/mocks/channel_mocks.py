"""Mock viewer channel recording every chunk written to it."""

from __future__ import annotations

from typing import List


class MockChannel:
    """In-memory FrameChannel.

    With ``hold_writes`` set, each write leaves the channel busy (not
    writable) until :meth:`drain` is called, like a slow network peer.
    """

    def __init__(self, writable: bool = True, hold_writes: bool = False):
        self.chunks: List[bytes] = []
        self.accepting = writable
        self.hold_writes = hold_writes
        self.busy = False
        self.closed = False

    @property
    def writable(self) -> bool:
        return self.accepting and not self.busy and not self.closed

    def write(self, data: bytes) -> None:
        self.chunks.append(bytes(data))
        if self.hold_writes:
            self.busy = True

    def drain(self) -> None:
        self.busy = False

    def close(self) -> None:
        self.closed = True

    @property
    def received(self) -> bytes:
        return b"".join(self.chunks)
