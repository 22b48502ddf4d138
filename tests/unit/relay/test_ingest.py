"""Tests for IngestHandler frame acceptance."""

import random

import pytest

from mjpeg_relay.relay.hub import RelayHub
from mjpeg_relay.relay.ingest import IngestHandler
from mjpeg_relay.relay.watchdog import WatchdogState
from tests.infrastructure.helpers import make_jpeg, parse_multipart
from tests.infrastructure.mocks import ManualScheduler, MockChannel


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def hub(scheduler):
    return RelayHub(scheduler, rng=random.Random(2))


@pytest.fixture
def ingest(hub):
    return IngestHandler(hub)


def test_valid_frame_is_stored_and_broadcast(hub, ingest):
    channels = [MockChannel(), MockChannel()]
    for channel in channels:
        hub.add_client(channel)
    frame = make_jpeg(50)

    result = ingest.accept_frame(frame)

    assert result.accepted
    assert result.frame_size == 50
    assert result.clients_reached == 2
    assert hub.current_frame() == frame
    for channel in channels:
        assert parse_multipart(channel.received) == [frame]
    assert ingest.accepted_count == 1


def test_valid_frame_arms_watchdog(hub, ingest, scheduler):
    ingest.accept_frame(make_jpeg(10))
    assert hub.watchdog.state is WatchdogState.ARMED
    assert hub.watchdog.deadline == scheduler.time() + 10.0


def test_malformed_frame_is_rejected_without_side_effects(hub, ingest):
    good = make_jpeg(30)
    ingest.accept_frame(good)
    channel = MockChannel()
    hub.add_client(channel)
    deadline = hub.watchdog.deadline

    result = ingest.accept_frame(b"\x00\x01not a jpeg")

    assert not result.accepted
    assert result.error == "Not JPEG format"
    assert result.frame_size == 12
    assert hub.current_frame() == good
    assert hub.watchdog.deadline == deadline
    assert parse_multipart(channel.received) == [good]
    assert ingest.rejected_count == 1


def test_empty_upload_is_rejected(ingest):
    result = ingest.accept_frame(b"")
    assert not result.accepted
    assert result.frame_size == 0


def test_frames_keep_watchdog_quiet(hub, ingest, scheduler):
    alarms = []
    hub.watchdog.on_alarm = alarms.append
    for _ in range(5):
        ingest.accept_frame(make_jpeg(10))
        scheduler.advance(9.0)
    assert alarms == []
    scheduler.advance(1.0)
    assert alarms == [10.0]
