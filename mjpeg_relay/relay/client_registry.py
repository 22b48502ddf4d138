"""Registry of connected MJPEG viewers."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Protocol

from mjpeg_relay.core.logging_utils import get_module_logger

CLIENT_ID_SPACE = 1_000_000_000
MAX_ID_ATTEMPTS = 32


class FrameChannel(Protocol):
    """Output side of a viewer connection.

    ``write`` must not block: the channel accepts the bytes and delivers them
    in the background, reporting ``writable == False`` until it can take
    another chunk.
    """

    @property
    def writable(self) -> bool: ...

    def write(self, data: bytes) -> None: ...

    def close(self) -> None: ...


@dataclass
class Client:
    """A connected viewer and the number of chunks sent to it."""
    client_id: int
    channel: FrameChannel
    frames_sent: int = 0
    connected_at: float = field(default_factory=time.time)

    def record_frame(self) -> None:
        self.frames_sent += 1


class ClientRegistry:

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.logger = get_module_logger("ClientRegistry")
        self._clients: Dict[int, Client] = {}
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._clients

    def __iter__(self) -> Iterator[Client]:
        return iter(self.snapshot())

    def _allocate_id(self) -> int:
        candidate = 0
        for _ in range(MAX_ID_ATTEMPTS):
            candidate = self._rng.randrange(CLIENT_ID_SPACE)
            if candidate not in self._clients:
                return candidate

        # Saturated draw: walk forward from the last candidate to a free slot.
        self.logger.debug("Random id draw exhausted, probing from %d", candidate)
        while candidate in self._clients:
            candidate = (candidate + 1) % CLIENT_ID_SPACE
        return candidate

    def register(self, channel: FrameChannel) -> Client:
        client = Client(client_id=self._allocate_id(), channel=channel)
        self._clients[client.client_id] = client
        return client

    def unregister(self, client_id: int) -> Optional[Client]:
        return self._clients.pop(client_id, None)

    def get(self, client_id: int) -> Optional[Client]:
        return self._clients.get(client_id)

    def snapshot(self) -> List[Client]:
        return list(self._clients.values())

    def for_each(self, fn: Callable[[Client], None]) -> None:
        # Iterate a copy so callbacks may unregister clients.
        for client in self.snapshot():
            fn(client)

    def clear(self) -> None:
        self._clients.clear()
