"""Abstract base class for object storage backends."""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from .exceptions import StorageNotFoundError, StorageTimeoutError

log = logging.getLogger(__name__)

DEFAULT_MIN_DELAY = 5.0
DEFAULT_MAX_DELAY = 120.0


@dataclass(frozen=True)
class ObjectMeta:
    """Metadata of a stored object, as returned by a HEAD request."""

    key: str
    size: int
    etag: str | None = None
    last_modified: datetime | None = None


class ObjectStoreClient(ABC):
    """Backend-agnostic interface for the read side of a blob store.

    Subclasses implement ``head_object`` and ``get_object``;
    ``wait_until_exists`` polls ``head_object`` with exponential backoff.
    """

    def __init__(
        self,
        min_delay: float = DEFAULT_MIN_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
    ):
        if min_delay <= 0 or max_delay < min_delay:
            raise ValueError(
                f"Invalid poll delays: min_delay={min_delay}, max_delay={max_delay}"
            )
        self._min_delay = min_delay
        self._max_delay = max_delay

    @abstractmethod
    async def head_object(self, key: str) -> ObjectMeta:
        """Fetch metadata only. Raises StorageNotFoundError if missing."""

    @abstractmethod
    async def get_object(self, key: str) -> bytes:
        """Download the full content of an object."""

    async def wait_until_exists(self, key: str, timeout: float | None) -> ObjectMeta:
        """Block until ``key`` exists or ``timeout`` seconds have elapsed.

        Args:
            key: Object key to wait for.
            timeout: Maximum wait in seconds, measured from this call.
                ``None`` waits indefinitely.

        Returns:
            The object's metadata once it exists.

        Raises:
            StorageTimeoutError: If the deadline elapsed first.
            StorageError: On any other backend failure.
            asyncio.CancelledError: If the calling task is cancelled.
        """
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout
        delay = self._min_delay
        attempt = 0

        while True:
            attempt += 1
            try:
                return await self.head_object(key)
            except StorageNotFoundError:
                pass

            if deadline is None:
                pause = delay
            else:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise StorageTimeoutError(
                        f"exceeded max wait time for {key!r} after {attempt} attempts",
                        key=key,
                    )
                pause = min(delay, remaining)

            log.debug("Object %r not found (attempt %d), retrying in %.2fs", key, attempt, pause)
            await asyncio.sleep(pause)
            delay = min(delay * 2, self._max_delay)
