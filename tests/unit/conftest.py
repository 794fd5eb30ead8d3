"""Shared pytest fixtures for the wait engine tests."""

import asyncio
import io

import pytest
from rich.console import Console

from dbcopy.storage.base import ObjectMeta, ObjectStoreClient
from dbcopy.storage.exceptions import StorageError, StorageNotFoundError


class FakeObjectStore(ObjectStoreClient):
    """In-memory store polled with millisecond delays."""

    def __init__(self, min_delay: float = 0.005, max_delay: float = 0.02):
        super().__init__(min_delay=min_delay, max_delay=max_delay)
        self.objects: dict[str, bytes] = {}
        self.failures: dict[str, StorageError] = {}
        self.head_calls: list[str] = []
        self.get_calls: list[str] = []

    def put(self, key: str, data: bytes = b"") -> None:
        self.objects[key] = data

    def put_later(self, key: str, data: bytes = b"", delay: float = 0.05) -> None:
        asyncio.get_running_loop().call_later(delay, self.put, key, data)

    async def head_object(self, key: str) -> ObjectMeta:
        self.head_calls.append(key)
        await asyncio.sleep(0)
        if key in self.failures:
            raise self.failures[key]
        if key not in self.objects:
            raise StorageNotFoundError(f"{key} not found", key=key)
        return ObjectMeta(key=key, size=len(self.objects[key]))

    async def get_object(self, key: str) -> bytes:
        self.get_calls.append(key)
        await asyncio.sleep(0)
        if key in self.failures:
            raise self.failures[key]
        if key not in self.objects:
            raise StorageNotFoundError(f"{key} not found", key=key)
        return self.objects[key]


class RecordingSink:
    """Stand-in for ProgressSink that just records log calls."""

    def __init__(self):
        self.messages: list[str] = []

    async def emit(self, event) -> None:
        event()

    async def log(self, message: str, *args, **kwargs) -> None:
        self.messages.append(message % args if args else message)


@pytest.fixture
def fake_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=100, force_terminal=False)
