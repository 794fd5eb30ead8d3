"""Tests for the marker watchers."""

from unittest.mock import MagicMock

import pytest

from dbcopy.storage.exceptions import StorageConnectionError, StoragePermissionError
from dbcopy.wait.exceptions import WaitTimeoutError, WatcherError
from dbcopy.wait.keys import JobKeys
from dbcopy.wait.state import Completed, Failed, Started
from dbcopy.wait.watchers import ErrorWatcher, OkWatcher, StartedWatcher

KEYS = JobKeys("nightly")


class TestStartedWatcher:
    @pytest.mark.asyncio
    async def test_reports_started(self, fake_store, recording_sink):
        fake_store.put("nightly.started")
        watcher = StartedWatcher(fake_store, recording_sink, KEYS, timeout=1)

        outcome = await watcher.watch()

        assert outcome == Started(key="nightly.started")
        assert recording_sink.messages == ["got .started"]

    @pytest.mark.asyncio
    async def test_timeout_is_not_a_remote_error(self, fake_store, recording_sink):
        watcher = StartedWatcher(fake_store, recording_sink, KEYS, timeout=0.05)

        with pytest.raises(WaitTimeoutError) as exc_info:
            await watcher.watch()

        assert exc_info.value.key == "nightly.started"
        assert exc_info.value.job_name == "nightly"
        assert recording_sink.messages == []


class TestErrorWatcher:
    @pytest.mark.asyncio
    async def test_reads_error_body(self, fake_store, recording_sink):
        fake_store.put("nightly.error", b"disk full\n")
        watcher = ErrorWatcher(fake_store, recording_sink, KEYS, timeout=1)

        outcome = await watcher.watch()

        assert outcome == Failed(key="nightly.error", detail="disk full\n")
        assert fake_store.get_calls == ["nightly.error"]
        assert recording_sink.messages == ["got .error"]

    @pytest.mark.asyncio
    async def test_undecodable_bytes_are_replaced(self, fake_store, recording_sink):
        fake_store.put("nightly.error", b"bad \xff byte")
        watcher = ErrorWatcher(fake_store, recording_sink, KEYS, timeout=1)

        outcome = await watcher.watch()

        assert outcome.detail == "bad � byte"

    @pytest.mark.asyncio
    async def test_wait_failure_is_wrapped_with_key(self, fake_store, recording_sink):
        fake_store.failures["nightly.error"] = StorageConnectionError("no route to host")
        watcher = ErrorWatcher(fake_store, recording_sink, KEYS, timeout=1)

        with pytest.raises(WatcherError) as exc_info:
            await watcher.watch()

        assert exc_info.value.key == "nightly.error"
        assert isinstance(exc_info.value.cause, StorageConnectionError)
        assert "wait for 'nightly.error'" in str(exc_info.value)


class TestOkWatcher:
    @pytest.mark.asyncio
    async def test_resolves_artifact_size_and_signals_completion(self, fake_store, recording_sink):
        fake_store.put("nightly.ok")
        fake_store.put("nightly.bz2.crypt", b"x" * 2048)
        completed = MagicMock()
        watcher = OkWatcher(fake_store, recording_sink, KEYS, timeout=1, completed=completed)

        outcome = await watcher.watch()

        assert outcome == Completed(key="nightly.bz2.crypt", size=2048)
        completed.assert_called_once_with()
        assert recording_sink.messages == ["got .ok"]

    @pytest.mark.asyncio
    async def test_missing_artifact_does_not_signal_completion(self, fake_store, recording_sink):
        fake_store.put("nightly.ok")
        fake_store.failures["nightly.bz2.crypt"] = StoragePermissionError("denied")
        completed = MagicMock()
        watcher = OkWatcher(fake_store, recording_sink, KEYS, timeout=1, completed=completed)

        with pytest.raises(WatcherError, match="heading 'nightly.bz2.crypt'"):
            await watcher.watch()

        completed.assert_not_called()

    @pytest.mark.asyncio
    async def test_waits_for_marker_to_appear(self, fake_store, recording_sink):
        fake_store.put("nightly.bz2.crypt", b"done")
        fake_store.put_later("nightly.ok", delay=0.03)
        watcher = OkWatcher(fake_store, recording_sink, KEYS, timeout=1, completed=MagicMock())

        outcome = await watcher.watch()

        assert outcome.size == 4
        assert fake_store.head_calls.count("nightly.ok") > 1
