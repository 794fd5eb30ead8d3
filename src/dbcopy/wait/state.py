"""Watcher outcomes and the mutable state of one wait run."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Coroutine, Optional, Union

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Started:
    """The job signaled that it began."""

    key: str


@dataclass(frozen=True)
class Failed:
    """The job published an error marker with ``detail`` as its content."""

    key: str
    detail: str


@dataclass(frozen=True)
class Completed:
    """The job finished and its artifact has ``size`` bytes."""

    key: str
    size: int


WaitOutcome = Union[Started, Failed, Completed]


class RunScope:
    """
    Cancellation scope shared by every task of one run.

    Tasks are spawned through the scope so that a single ``cancel`` reaches
    all of them, and ``join`` guarantees none outlives the run.
    """

    def __init__(self):
        self._tasks: set[asyncio.Task] = set()
        self._cancelled = False
        self.cause: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def spawn(self, coro: Coroutine, name: Optional[str] = None) -> asyncio.Task:
        if self._cancelled:
            coro.close()
            raise RuntimeError("Cannot spawn a task in a cancelled scope")
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        return task

    def cancel(self, cause: Optional[str] = None, exclude: Optional[asyncio.Task] = None) -> None:
        """Cancel every unfinished task except ``exclude``.

        Only the first call records its ``cause``; later calls just make
        sure no task is left running.
        """
        if not self._cancelled:
            self._cancelled = True
            self.cause = cause
            log.debug("Run scope cancelled (cause: %s)", cause or "completion")
        for task in self._tasks:
            if task is not exclude and not task.done():
                task.cancel()

    async def join(self) -> None:
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)


class RunState:
    """
    State of a single wait run, owned by the coordinator.

    The terminal slot is written once: whichever of ``succeed`` or
    ``fail`` is called first wins, later calls return False.
    """

    def __init__(self, job_name: str, timeout: Optional[float]):
        self.job_name = job_name
        self.timeout = timeout
        self.scope = RunScope()
        self.started_at = time.monotonic()
        self._terminal = False
        self._size: Optional[int] = None
        self._error: Optional[BaseException] = None

    @property
    def terminal(self) -> bool:
        return self._terminal

    @property
    def deadline(self) -> Optional[float]:
        if self.timeout is None:
            return None
        return self.started_at + self.timeout

    def elapsed(self) -> float:
        return time.monotonic() - self.started_at

    def remaining(self) -> Optional[float]:
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def succeed(self, size: int) -> bool:
        if self._terminal:
            return False
        self._terminal = True
        self._size = size
        return True

    def fail(self, error: BaseException) -> bool:
        if self._terminal:
            log.debug("Ignoring late failure of %s: %s", self.job_name, error)
            return False
        self._terminal = True
        self._error = error
        return True

    def result(self) -> int:
        """Return the size or raise the failure. Requires a terminal state."""
        if not self._terminal:
            raise RuntimeError(f"Run for {self.job_name!r} has no outcome yet")
        if self._error is not None:
            raise self._error
        return self._size
