"""Watchers for the lifecycle markers of a transfer job."""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from ..storage.base import ObjectMeta, ObjectStoreClient
from ..storage.exceptions import StorageError, StorageTimeoutError
from .exceptions import WaitTimeoutError, WatcherError
from .keys import ERROR_EXT, OK_EXT, STARTED_EXT, JobKeys
from .progress import ProgressSink
from .state import Completed, Failed, Started, WaitOutcome

log = logging.getLogger(__name__)


class Watcher(ABC):
    """Waits for one marker key and turns its appearance into an outcome."""

    marker: str = ""

    def __init__(
        self,
        store: ObjectStoreClient,
        sink: ProgressSink,
        keys: JobKeys,
        timeout: Optional[float],
    ):
        self.store = store
        self.sink = sink
        self.keys = keys
        self.timeout = timeout

    @property
    @abstractmethod
    def key(self) -> str:
        """The marker key this watcher waits for."""

    async def watch(self) -> WaitOutcome:
        """Wait for the marker, then handle it.

        Raises:
            WaitTimeoutError: If the marker did not appear in time.
            WatcherError: If the store failed while waiting or reading.
        """
        meta = await self._wait_marker()
        await self.sink.log("got %s", self.marker)
        return await self.on_marker(meta)

    @abstractmethod
    async def on_marker(self, meta: ObjectMeta) -> WaitOutcome:
        """Handle the marker once it exists."""

    async def _wait_marker(self) -> ObjectMeta:
        log.debug("Watching %r (timeout: %s)", self.key, self.timeout)
        try:
            return await self.store.wait_until_exists(self.key, self.timeout)
        except StorageTimeoutError as e:
            raise WaitTimeoutError(
                f"wait for {self.key!r}: {e}", job_name=self.keys.name, key=self.key
            ) from e
        except StorageError as e:
            raise WatcherError(
                f"wait for {self.key!r}: {e}", key=self.key, cause=e, job_name=self.keys.name
            ) from e


class StartedWatcher(Watcher):
    marker = STARTED_EXT

    @property
    def key(self) -> str:
        return self.keys.started

    async def on_marker(self, meta: ObjectMeta) -> WaitOutcome:
        return Started(key=self.key)


class ErrorWatcher(Watcher):
    """Reads the error marker's body as the remote failure detail."""

    marker = ERROR_EXT

    @property
    def key(self) -> str:
        return self.keys.error

    async def on_marker(self, meta: ObjectMeta) -> WaitOutcome:
        try:
            body = await self.store.get_object(self.key)
        except StorageError as e:
            raise WatcherError(
                f"reading {self.key!r}: {e}", key=self.key, cause=e, job_name=self.keys.name
            ) from e
        return Failed(key=self.key, detail=body.decode("utf-8", errors="replace"))


class OkWatcher(Watcher):
    """
    Resolves the artifact size once the ok marker exists.

    ``completed`` is called before returning so the coordinator can stop
    the other watchers right away.
    """

    marker = OK_EXT

    @property
    def key(self) -> str:
        return self.keys.ok

    def __init__(
        self,
        store: ObjectStoreClient,
        sink: ProgressSink,
        keys: JobKeys,
        timeout: Optional[float],
        completed: Callable[[], None],
    ):
        super().__init__(store, sink, keys, timeout)
        self._completed = completed

    async def on_marker(self, meta: ObjectMeta) -> WaitOutcome:
        artifact = self.keys.artifact
        try:
            artifact_meta = await self.store.head_object(artifact)
        except StorageError as e:
            raise WatcherError(
                f"heading {artifact!r}: {e}", key=artifact, cause=e, job_name=self.keys.name
            ) from e
        self._completed()
        return Completed(key=artifact, size=artifact_meta.size)
