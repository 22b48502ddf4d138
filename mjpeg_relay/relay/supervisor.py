"""
Capture Supervisor - keeps the ffmpeg capture process alive.

Every exit (clean, crash, signal or a failed spawn) is handled the same way:
viewers are switched to the fallback image, the tail of ffmpeg's stderr is
logged, and a new process is started after a fixed delay.  Only stop()
ends the cycle.
"""

from __future__ import annotations

import asyncio
import contextlib
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Sequence

from mjpeg_relay.core.asyncio_utils import cancel_and_wait, create_logged_task
from mjpeg_relay.core.logging_utils import get_module_logger
from mjpeg_relay.core.scheduler import Scheduler, TimerHandle

from .command import build_ffmpeg_command
from .config import CaptureConfig
from .hub import RelayHub

MAX_OUTPUT_CHARS = 4096
_READ_CHUNK = 4096


class CaptureState(Enum):
    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    RESTARTING = "restarting"


ProcessFactory = Callable[[Sequence[str]], Awaitable[asyncio.subprocess.Process]]


async def spawn_capture_process(command: Sequence[str]) -> asyncio.subprocess.Process:
    return await asyncio.create_subprocess_exec(
        *command,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.DEVNULL,
        stderr=asyncio.subprocess.PIPE,
    )


class CaptureSupervisor:
    """
    Owns the lifecycle of the external capture process.

    State transitions:
    - STOPPED -> STARTING: start()
    - STARTING -> RUNNING: process spawned
    - STARTING/RUNNING -> RESTARTING: process_exited() (any cause)
    - RESTARTING -> STARTING: restart timer fired
    - any -> STOPPED: stop()
    """

    def __init__(
        self,
        hub: RelayHub,
        config: CaptureConfig,
        port: int,
        scheduler: Scheduler,
        process_factory: ProcessFactory = spawn_capture_process,
    ):
        self.hub = hub
        self.config = config
        self.port = port
        self.scheduler = scheduler
        self.process_factory = process_factory
        self.logger = get_module_logger("CaptureSupervisor")

        self.state = CaptureState.STOPPED
        self.process: Optional[asyncio.subprocess.Process] = None
        self.last_output: Optional[str] = None
        self.last_returncode: Optional[int] = None
        self.restart_count = 0

        self._stopping = False
        self._restart_handle: Optional[TimerHandle] = None
        self._spawn_task: Optional[asyncio.Task] = None
        self._stderr_task: Optional[asyncio.Task] = None
        self._monitor_task: Optional[asyncio.Task] = None

    @property
    def command(self) -> List[str]:
        return build_ffmpeg_command(self.config, self.port)

    @property
    def pid(self) -> Optional[int]:
        return self.process.pid if self.process is not None else None

    def is_running(self) -> bool:
        return self.process is not None and self.process.returncode is None

    async def start(self) -> None:
        if self.state is not CaptureState.STOPPED:
            self.logger.warning("Capture supervisor already started (%s)", self.state.value)
            return
        self._stopping = False
        await self._spawn()

    async def _spawn(self) -> None:
        if self._stopping:
            return

        self.state = CaptureState.STARTING
        self.last_output = None
        command = self.command
        self.logger.info("Starting recording with args '%s'...", " ".join(command[1:]))

        try:
            process = await self.process_factory(command)
        except Exception as exc:
            self.logger.error("Failed to start capture process: %s", exc, exc_info=True)
            self.last_output = str(exc)
            self.process_exited(None)
            return

        self.process = process
        self.state = CaptureState.RUNNING
        self.logger.info("Capture process started with PID: %d", process.pid)

        self._stderr_task = create_logged_task(
            self._stderr_reader(process), logger=self.logger, context="capture-stderr"
        )
        self._monitor_task = create_logged_task(
            self._process_monitor(process, self._stderr_task),
            logger=self.logger,
            context="capture-monitor",
        )

    async def _stderr_reader(self, process: asyncio.subprocess.Process) -> None:
        stream = process.stderr
        if stream is None:
            return

        tail = ""
        while True:
            chunk = await stream.read(_READ_CHUNK)
            if not chunk:
                break
            tail = (tail + chunk.decode(errors="replace"))[-MAX_OUTPUT_CHARS:]
            self.last_output = tail

    async def _process_monitor(
        self, process: asyncio.subprocess.Process, stderr_task: asyncio.Task
    ) -> None:
        returncode = await process.wait()
        # Let the reader drain what ffmpeg printed right before exiting.
        await asyncio.wait({stderr_task}, timeout=1.0)

        if self.process is process:
            self.process = None

        if self._stopping:
            self.logger.info("Capture process exited with code %s (shutdown)", returncode)
            return

        self.process_exited(returncode)

    def process_exited(self, returncode: Optional[int]) -> None:
        """Transition into RESTARTING after any exit of the capture process."""
        if self._stopping:
            return

        self.state = CaptureState.RESTARTING
        self.process = None
        self.last_returncode = returncode
        self.hub.show_fallback()

        self.logger.warning(
            "Capture process closed (exit code %s)! Restarting in %gs\n%s",
            returncode,
            self.config.restart_delay,
            self.last_output or "No capture output",
        )
        self._restart_handle = self.scheduler.call_later(
            self.config.restart_delay, self._on_restart_timer
        )

    def _on_restart_timer(self) -> None:
        self._restart_handle = None
        if self._stopping or self.state is not CaptureState.RESTARTING:
            return
        self.restart_count += 1
        self._spawn_task = create_logged_task(
            self._spawn(), logger=self.logger, context="capture-spawn"
        )

    async def stop(self, timeout: float = 5.0) -> None:
        """Stop the process and cancel any pending restart."""
        self._stopping = True

        if self._restart_handle is not None:
            self._restart_handle.cancel()
            self._restart_handle = None

        if self._spawn_task is not None and not self._spawn_task.done():
            await asyncio.wait({self._spawn_task})

        process = self.process
        if process is not None and process.returncode is None:
            self.logger.info("Stopping capture process (PID %d)", process.pid)
            with contextlib.suppress(ProcessLookupError):
                process.terminate()
            try:
                await asyncio.wait_for(process.wait(), timeout=timeout)
            except asyncio.TimeoutError:
                self.logger.warning("Capture process did not terminate, killing...")
                with contextlib.suppress(ProcessLookupError):
                    process.kill()
                await process.wait()

        await cancel_and_wait(self._monitor_task)
        await cancel_and_wait(self._stderr_task)
        self._monitor_task = None
        self._stderr_task = None
        self._spawn_task = None

        self.process = None
        self.state = CaptureState.STOPPED
        self.logger.info("Capture supervisor stopped")

    def snapshot(self) -> dict:
        return {
            "state": self.state.value,
            "pid": self.pid,
            "restarts": self.restart_count,
            "last_returncode": self.last_returncode,
        }
