"""Concurrent wait engine for job lifecycle markers."""

from .coordinator import WaitCoordinator
from .exceptions import (
    RemoteJobError,
    WaitCancelledError,
    WaitError,
    WaitTimeoutError,
    WatcherError,
)
from .keys import JobKeys
from .progress import ProgressSink
from .state import Completed, Failed, RunScope, RunState, Started, WaitOutcome

__all__ = [
    "Completed",
    "Failed",
    "JobKeys",
    "ProgressSink",
    "RemoteJobError",
    "RunScope",
    "RunState",
    "Started",
    "WaitCancelledError",
    "WaitCoordinator",
    "WaitError",
    "WaitOutcome",
    "WaitTimeoutError",
    "WatcherError",
]
