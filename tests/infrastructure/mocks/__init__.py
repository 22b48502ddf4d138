"""Stand-ins for viewer channels, timers and the capture process.

Usage:
    from tests.infrastructure.mocks import MockChannel, ManualScheduler

    scheduler = ManualScheduler()
    hub = RelayHub(scheduler)
    hub.add_client(MockChannel())
    scheduler.advance(10.0)
"""

from .channel_mocks import MockChannel
from .process_mocks import FakeProcess, FakeProcessFactory
from .scheduler_mocks import ManualScheduler, ManualTimer

__all__ = [
    "FakeProcess",
    "FakeProcessFactory",
    "ManualScheduler",
    "ManualTimer",
    "MockChannel",
]
