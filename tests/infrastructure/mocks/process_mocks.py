"""Fake capture process compatible with ``asyncio.subprocess.Process``.

Must be constructed inside a running event loop (it owns a StreamReader).
"""

from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence


class FakeProcess:

    def __init__(self, pid: int = 4242, ignore_terminate: bool = False):
        self.pid = pid
        self.returncode: Optional[int] = None
        self.stderr = asyncio.StreamReader()
        self.ignore_terminate = ignore_terminate
        self.terminated = False
        self.killed = False
        self._exited = asyncio.Event()

    def emit_stderr(self, text: str) -> None:
        self.stderr.feed_data(text.encode())

    def exit(self, code: int) -> None:
        """Simulate the process ending with ``code``."""
        if self.returncode is not None:
            return
        self.returncode = code
        self.stderr.feed_eof()
        self._exited.set()

    async def wait(self) -> int:
        await self._exited.wait()
        return self.returncode

    def terminate(self) -> None:
        self.terminated = True
        if not self.ignore_terminate:
            self.exit(-15)

    def kill(self) -> None:
        self.killed = True
        self.exit(-9)


class FakeProcessFactory:
    """Process factory recording every command it was asked to run.

    Set ``error`` to make the next spawns fail like a missing executable.
    """

    def __init__(self, ignore_terminate: bool = False):
        self.commands: List[List[str]] = []
        self.processes: List[FakeProcess] = []
        self.error: Optional[OSError] = None
        self.ignore_terminate = ignore_terminate

    async def __call__(self, command: Sequence[str]) -> FakeProcess:
        self.commands.append(list(command))
        if self.error is not None:
            raise self.error
        process = FakeProcess(pid=1000 + len(self.processes), ignore_terminate=self.ignore_terminate)
        self.processes.append(process)
        return process

    @property
    def last(self) -> FakeProcess:
        return self.processes[-1]
