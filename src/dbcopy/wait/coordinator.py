"""
Wait coordinator: races the marker watchers of a job and resolves the run.

Known race: the ok and error markers are written by the same upstream job
and nothing orders them. If both appear within one poll interval, the
outcome the coordinator observes first wins.
"""

import asyncio
import logging
from typing import Optional

from rich.console import Console

from ..common.humanize import format_size
from ..storage.base import ObjectStoreClient
from .exceptions import RemoteJobError, WaitCancelledError, WaitError
from .keys import JobKeys
from .progress import DEFAULT_TICK_INTERVAL, ProgressSink
from .state import Completed, Failed, RunState, Started
from .watchers import ErrorWatcher, OkWatcher, StartedWatcher

log = logging.getLogger(__name__)


class WaitCoordinator:
    """
    Runs the started, error and ok watchers of a job concurrently.

    The first terminal outcome wins: an error marker or a watcher failure
    ends the run with that error, the ok marker ends it with the artifact
    size. Either way the remaining watchers and the progress renderer are
    cancelled and awaited before ``run`` returns.
    """

    def __init__(
        self,
        store: ObjectStoreClient,
        console: Optional[Console] = None,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
    ):
        self.store = store
        self.console = console
        self.tick_interval = tick_interval
        self._state: Optional[RunState] = None

    def cancel(self, cause: str = "cancelled by user") -> bool:
        """Cancel the run in flight. Returns False when nothing is running."""
        state = self._state
        if state is None or state.terminal:
            return False
        log.debug("Cancelling wait for %r: %s", state.job_name, cause)
        state.scope.cancel(cause)
        return True

    async def run(self, job_name: str, timeout: Optional[float]) -> int:
        """
        Wait for ``job_name`` to finish and return its artifact size.

        Args:
            job_name: Job name the marker keys are derived from.
            timeout: Seconds each watcher waits for its marker.

        Returns:
            Size in bytes of ``<job_name>.bz2.crypt``.

        Raises:
            RemoteJobError: The job published an error marker.
            WaitTimeoutError: A marker did not appear before the timeout.
            WatcherError: The store failed.
            WaitCancelledError: ``cancel`` was called before an outcome.
        """
        if self._state is not None:
            raise RuntimeError("WaitCoordinator.run is already in progress")
        keys = JobKeys(job_name)
        state = RunState(job_name, timeout)
        self._state = state
        sink = ProgressSink(console=self.console, tick_interval=self.tick_interval)
        scope = state.scope

        try:
            renderer = scope.spawn(sink.run(state), name=f"progress:{job_name}")
            renderer.add_done_callback(lambda _: sink.close())
            await sink.log("waiting for %s", keys.artifact)

            def completed() -> None:
                scope.cancel(exclude=asyncio.current_task())

            watchers = [
                StartedWatcher(self.store, sink, keys, timeout),
                ErrorWatcher(self.store, sink, keys, timeout),
                OkWatcher(self.store, sink, keys, timeout, completed=completed),
            ]
            pending: set = set()
            # cancel() may already have arrived while the first line rendered
            if not scope.cancelled:
                pending = {
                    scope.spawn(watcher.watch(), name=f"watch:{watcher.key}")
                    for watcher in watchers
                }
            while pending:
                done, pending = await asyncio.wait(
                    pending, return_when=asyncio.FIRST_COMPLETED
                )
                for task in done:
                    self._collect(task, state)
        finally:
            scope.cancel()
            await scope.join()
            self._state = None

        if not state.terminal:
            if scope.cause is not None:
                raise WaitCancelledError(scope.cause, job_name=job_name)
            raise WaitError(
                f"wait for {job_name!r}: watchers stopped without an outcome",
                job_name=job_name,
            )

        size = state.result()
        log.info("size: %s", format_size(size, iec=True))
        return size

    def _collect(self, task: asyncio.Task, state: RunState) -> None:
        """Fold one finished watcher into the run state."""
        if task.cancelled():
            return

        error = task.exception()
        if error is not None:
            if state.fail(error):
                log.debug("%s failed: %s", task.get_name(), error)
                state.scope.cancel()
            return

        outcome = task.result()
        if isinstance(outcome, Started):
            log.debug("Job %r started", state.job_name)
        elif isinstance(outcome, Failed):
            if state.fail(
                RemoteJobError(outcome.detail, job_name=state.job_name, key=outcome.key)
            ):
                state.scope.cancel()
        elif isinstance(outcome, Completed):
            state.succeed(outcome.size)
