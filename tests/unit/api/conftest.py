"""Pytest fixtures for relay HTTP tests.

Builds a real RelayHub/IngestHandler pair behind the aiohttp application so
routes are exercised end to end, without a capture process.
"""

from __future__ import annotations

import asyncio
import random
from typing import Any, Coroutine, Optional, TypeVar

import pytest
from aiohttp.test_utils import TestClient, TestServer

from mjpeg_relay.api.server import create_app
from mjpeg_relay.core.scheduler import LoopScheduler
from mjpeg_relay.relay.hub import RelayHub
from mjpeg_relay.relay.ingest import IngestHandler
from tests.infrastructure.helpers import make_jpeg


T = TypeVar("T")

FALLBACK_FRAME = make_jpeg(64, fill=b"F")


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run an async coroutine synchronously for testing."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


class RelayFixture:
    """Hub, ingest handler and app wired together for one test."""

    def __init__(self, fallback: Optional[bytes] = None, supervisor: Any = None):
        self.hub = RelayHub(LoopScheduler(), fallback=fallback, rng=random.Random(17))
        self.ingest = IngestHandler(self.hub)
        self.app = create_app(self.hub, self.ingest, supervisor)

    def client(self) -> TestClient:
        return TestClient(TestServer(self.app))


def create_relay(fallback: Optional[bytes] = None, supervisor: Any = None) -> RelayFixture:
    return RelayFixture(fallback=fallback, supervisor=supervisor)


@pytest.fixture
def relay() -> RelayFixture:
    """Relay without a fallback image."""
    return create_relay()


@pytest.fixture
def relay_with_fallback() -> RelayFixture:
    """Relay serving FALLBACK_FRAME until a live frame arrives."""
    return create_relay(fallback=FALLBACK_FRAME)
