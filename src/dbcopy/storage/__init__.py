"""Read-only object storage clients used by the wait engine."""

from .base import ObjectMeta, ObjectStoreClient
from .exceptions import (
    StorageConnectionError,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageTimeoutError,
)
from .factory import create_storage_client

__all__ = [
    "ObjectMeta",
    "ObjectStoreClient",
    "StorageConnectionError",
    "StorageError",
    "StorageNotFoundError",
    "StoragePermissionError",
    "StorageTimeoutError",
    "create_storage_client",
]
