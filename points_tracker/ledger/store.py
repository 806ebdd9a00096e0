"""
Ledger Store

Owns the ordered entries of the current period and the derived balance.

INVARIANT: balance == BASE_POINTS + sum(entry.delta for entry in entries)

The balance is adjusted incrementally by each mutation (append adds the
delta, edit adds the difference, delete subtracts the removed delta) and
the result is checked against a full recomputation before it is committed.
Each mutation builds the new entry list and balance first and swaps both
in together, so a failing mutation leaves the store untouched.

After every committed mutation the store saves itself. A failed save is
logged and remembered in `last_persistence_error`; the in-memory ledger
stays authoritative for the session.
"""

from datetime import date
from typing import Callable, Optional

import structlog

from points_tracker.audit import AuditLogger
from points_tracker.ledger.errors import IndexOutOfRange, LedgerInvariantError
from points_tracker.ledger.period import DEFAULT_DATE_FORMAT, format_entry_date
from points_tracker.models.actions import (
    AppendEntry,
    DeleteEntry,
    EditEntry,
    PendingAction,
)
from points_tracker.models.catalog import BASE_POINTS
from points_tracker.models.entry import Entry, LedgerState
from points_tracker.services.storage import LedgerStorageInterface, StorageError


logger = structlog.get_logger(__name__)


class LedgerStore:
    """The entry log and balance of one period."""

    def __init__(
        self,
        period_key: str,
        state: Optional[LedgerState] = None,
        storage: Optional[LedgerStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        date_format: str = DEFAULT_DATE_FORMAT,
        today: Callable[[], date] = date.today,
    ):
        state = state or LedgerState.fresh()
        if not state.is_consistent:
            raise LedgerInvariantError(
                f"Balance {state.balance} does not match entries "
                f"(expected {state.expected_balance})"
            )
        self._period_key = period_key
        self._entries: list[Entry] = list(state.entries)
        self._balance = state.balance
        self._storage = storage
        self._audit_logger = audit_logger
        self._date_format = date_format
        self._today = today
        self._last_persistence_error: Optional[str] = None

    @classmethod
    def open(
        cls,
        period_key: str,
        storage: LedgerStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        **kwargs,
    ) -> "LedgerStore":
        """
        Open the ledger for a period, starting fresh if nothing usable is stored.

        A stored balance that disagrees with its entries is recomputed from
        the entries.

        Raises:
            StorageError: If the storage backend cannot be read at all
        """
        state = storage.load(period_key)
        if state is None:
            state = LedgerState.fresh()
        elif not state.is_consistent:
            logger.warning(
                "ledger_balance_mismatch",
                period_key=period_key,
                stored=state.balance,
                recomputed=state.expected_balance,
            )
            if audit_logger:
                audit_logger.log_balance_repaired(
                    period_key, state.balance, state.expected_balance
                )
            state = LedgerState(balance=state.expected_balance, entries=state.entries)

        store = cls(period_key, state, storage=storage, audit_logger=audit_logger, **kwargs)
        if audit_logger:
            audit_logger.log_ledger_opened(period_key, store.balance, len(store))
        return store

    @property
    def period_key(self) -> str:
        return self._period_key

    @property
    def balance(self) -> int:
        return self._balance

    @property
    def entries(self) -> tuple[Entry, ...]:
        return tuple(self._entries)

    @property
    def last_persistence_error(self) -> Optional[str]:
        """Message of the most recent failed save, cleared by the next successful one."""
        return self._last_persistence_error

    def __len__(self) -> int:
        return len(self._entries)

    def snapshot(self) -> LedgerState:
        """Read-only view of the last committed state."""
        return LedgerState(balance=self._balance, entries=tuple(self._entries))

    # Mutations

    def append(self, description: str, delta: int) -> int:
        """Add an entry dated today. Returns its position."""
        entry = Entry(
            description=description,
            delta=delta,
            date=format_entry_date(self._today(), self._date_format),
        )
        self._commit(self._entries + [entry], self._balance + entry.delta)

        index = len(self._entries) - 1
        if self._audit_logger:
            self._audit_logger.log_entry_appended(
                self._period_key, index, entry.description, entry.delta, self._balance
            )
        self._persist()
        return index

    def edit(self, index: int, new_description: str, new_date: str, new_delta: int) -> None:
        """
        Replace the fields of an existing entry.

        Raises:
            IndexOutOfRange: If there is no entry at `index`
        """
        self._check_index(index)
        old = self._entries[index]
        replacement = Entry(description=new_description, delta=new_delta, date=new_date)

        entries = list(self._entries)
        entries[index] = replacement
        self._commit(entries, self._balance + (replacement.delta - old.delta))

        if self._audit_logger:
            self._audit_logger.log_entry_edited(
                self._period_key, index, old.delta, replacement.delta, self._balance
            )
        self._persist()

    def delete(self, index: int) -> None:
        """
        Remove an entry.

        Raises:
            IndexOutOfRange: If there is no entry at `index`
        """
        self._check_index(index)
        removed = self._entries[index]
        entries = self._entries[:index] + self._entries[index + 1:]
        self._commit(entries, self._balance - removed.delta)

        if self._audit_logger:
            self._audit_logger.log_entry_deleted(
                self._period_key, index, removed.description, removed.delta, self._balance
            )
        self._persist()

    def apply(self, action: PendingAction) -> Optional[int]:
        """Run a pending action. Returns the new index for appends."""
        if isinstance(action, AppendEntry):
            return self.append(action.description, action.delta)
        if isinstance(action, EditEntry):
            self.edit(action.index, action.description, action.date, action.delta)
            return None
        if isinstance(action, DeleteEntry):
            self.delete(action.index)
            return None
        raise TypeError(f"Unsupported ledger action: {action!r}")

    # Internals

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._entries):
            raise IndexOutOfRange(index, len(self._entries))

    def _commit(self, entries: list[Entry], balance: int) -> None:
        expected = BASE_POINTS + sum(entry.delta for entry in entries)
        if balance != expected:
            raise LedgerInvariantError(
                f"Balance {balance} does not match entries (expected {expected})"
            )
        self._entries = entries
        self._balance = balance

    def _persist(self) -> None:
        if self._storage is None:
            return
        try:
            self._storage.save(self._period_key, self.snapshot())
        except StorageError as e:
            self._last_persistence_error = str(e)
            logger.warning("ledger_save_failed", period_key=self._period_key, error=str(e))
            if self._audit_logger:
                self._audit_logger.log_save_failed(self._period_key, str(e))
            return

        self._last_persistence_error = None
        if self._audit_logger:
            self._audit_logger.log_ledger_saved(self._period_key, len(self._entries))
