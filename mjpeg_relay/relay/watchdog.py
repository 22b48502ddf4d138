"""
Frame Watchdog - reports prolonged silence from the capture process.

The watchdog is purely diagnostic.  Every accepted frame re-arms it; while
no frame arrives it keeps firing, once per interval, each time reporting the
total silence so far (10s, 20s, 30s, ...).  It never stops or restarts the
capture process.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from mjpeg_relay.core.logging_utils import get_module_logger
from mjpeg_relay.core.scheduler import Scheduler, TimerHandle

DEFAULT_INTERVAL = 10.0


class WatchdogState(Enum):
    IDLE = "idle"      # Never armed, or stopped
    ARMED = "armed"    # Waiting for the next frame


AlarmCallback = Callable[[float], None]


class FrameWatchdog:
    """
    Escalating no-frame alarm.

    State transitions:
    - IDLE -> ARMED: reset() (first accepted frame)
    - ARMED -> ARMED: reset() (threshold back to the initial value)
    - ARMED -> ARMED: fire() (threshold grows by one interval)
    - any -> IDLE: stop()
    """

    def __init__(
        self,
        scheduler: Scheduler,
        interval: float = DEFAULT_INTERVAL,
        on_alarm: Optional[AlarmCallback] = None,
    ):
        self.logger = get_module_logger("Watchdog")
        self.scheduler = scheduler
        self.interval = interval
        self.on_alarm = on_alarm

        self.state = WatchdogState.IDLE
        self.threshold = interval
        self.alarm_count = 0
        self.deadline: Optional[float] = None
        self._handle: Optional[TimerHandle] = None

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        self.deadline = self.scheduler.time() + self.interval
        self._handle = self.scheduler.call_later(self.interval, self.fire)

    def reset(self) -> None:
        """Re-arm at the initial threshold; called once per accepted frame."""
        self._cancel()
        self.threshold = self.interval
        self.state = WatchdogState.ARMED
        self._schedule()

    def fire(self) -> None:
        """Timer expiry: report the silence and arm the next, later alarm."""
        if self.state is not WatchdogState.ARMED:
            return
        self._handle = None
        elapsed = self.threshold
        self.alarm_count += 1
        self.logger.warning("Frame has not been received in %g seconds!", elapsed)
        if self.on_alarm:
            self.on_alarm(elapsed)
        self.threshold = elapsed + self.interval
        self._schedule()

    def stop(self) -> None:
        self._cancel()
        self.deadline = None
        self.state = WatchdogState.IDLE
