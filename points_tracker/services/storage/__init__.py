"""
Storage Services Package

Provides the abstract ledger storage interface and its implementations:
in-memory and one JSON file per month.
"""

from points_tracker.services.storage.interface import (
    LedgerStorageInterface,
    StorageConnectionError,
    StorageError,
    parse_record,
)
from points_tracker.services.storage.local import (
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    record_key,
)

__all__ = [
    # Interface
    "LedgerStorageInterface",
    "parse_record",
    # Exceptions
    "StorageConnectionError",
    "StorageError",
    # Local implementations
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
    "record_key",
]
