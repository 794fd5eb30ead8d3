"""Exceptions raised by the wait engine."""

from ..storage.exceptions import StorageError


class WaitError(Exception):
    """Base exception for a failed wait run."""

    def __init__(self, message: str, job_name: str | None = None, key: str | None = None):
        self.job_name = job_name
        self.key = key
        super().__init__(message)


class WatcherError(WaitError):
    """A marker watcher hit a storage failure (unreachable, access denied...)."""

    def __init__(self, message: str, key: str, cause: StorageError, job_name: str | None = None):
        self.cause = cause
        super().__init__(message, job_name=job_name, key=key)


class WaitTimeoutError(WaitError):
    """A marker did not appear before the wait deadline."""


class RemoteJobError(WaitError):
    """The job published an error marker; ``detail`` holds its content."""

    def __init__(self, detail: str, job_name: str | None = None, key: str | None = None):
        self.detail = detail
        super().__init__(f"remote error:\n{detail}", job_name=job_name, key=key)


class WaitCancelledError(WaitError):
    """The run was cancelled from outside before reaching an outcome."""

    def __init__(self, cause: str = "cancelled", job_name: str | None = None):
        self.cause = cause
        super().__init__(f"wait cancelled: {cause}", job_name=job_name)
