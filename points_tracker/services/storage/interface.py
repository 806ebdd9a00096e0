"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for ledger persistence.
This allows us to:
1. Keep a one-record-per-month JSON layout on disk
2. Use in-memory storage for testing
3. Keep the ledger store decoupled from storage implementation

The interface is two operations. Each period key holds exactly one record,
and every save fully overwrites it.
"""

import json
from abc import ABC, abstractmethod
from typing import Optional

import structlog
from pydantic import ValidationError

from points_tracker.models.entry import LedgerState


logger = structlog.get_logger(__name__)


class LedgerStorageInterface(ABC):
    """
    Abstract interface for monthly ledger storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load(self, period_key: str) -> Optional[LedgerState]:
        """
        Load the ledger saved under a period key.

        Args:
            period_key: The month the ledger belongs to (e.g. "October 2026")

        Returns:
            The saved state, or None if nothing usable is stored.
            A malformed record is treated the same as a missing one.

        Raises:
            StorageError: If the backend itself cannot be reached
        """
        pass

    @abstractmethod
    def save(self, period_key: str, state: LedgerState) -> None:
        """
        Store the ledger under a period key, replacing any prior record.

        Raises:
            StorageError: If the write fails
        """
        pass


def parse_record(period_key: str, raw: Optional[str]) -> Optional[LedgerState]:
    """
    Parse a persisted JSON record.

    Returns None for a missing, unparsable or schema-invalid record.
    A record nested too deeply to decode counts as unparsable.
    """
    if raw is None or not raw.strip():
        return None
    try:
        return LedgerState.model_validate(json.loads(raw))
    except (ValueError, ValidationError, TypeError, RecursionError) as e:
        logger.warning(
            "malformed_ledger_record",
            period_key=period_key,
            error=str(e),
        )
        return None


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageConnectionError(StorageError):
    """The storage backend could not be reached or read."""
    pass
