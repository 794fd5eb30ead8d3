"""Per-invocation application context."""

from dataclasses import dataclass

from .config import Settings
from .storage import ObjectStoreClient, create_storage_client


@dataclass
class AppContext:
    """Everything a command needs, constructed once and passed explicitly."""

    settings: Settings
    store: ObjectStoreClient

    @classmethod
    def create(cls, settings: Settings) -> "AppContext":
        return cls(settings=settings, store=create_storage_client(settings))
