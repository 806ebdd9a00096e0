"""Services package."""

from points_tracker.services.storage import (
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LedgerStorageInterface,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
    "LedgerStorageInterface",
    "StorageConnectionError",
    "StorageError",
]
