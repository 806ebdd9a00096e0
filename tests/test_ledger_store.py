"""Tests for LedgerStore: mutations, balance invariant and persistence."""

import random
from datetime import date

import pytest

from points_tracker.audit import AuditLogger
from points_tracker.ledger import IndexOutOfRange, LedgerInvariantError, LedgerStore
from points_tracker.models.actions import AppendEntry, DeleteEntry, EditEntry
from points_tracker.models.audit import AuditEventType
from points_tracker.models.catalog import BASE_POINTS
from points_tracker.models.entry import Entry, LedgerState
from points_tracker.services.storage import (
    InMemoryLedgerStorage,
    LedgerStorageInterface,
    StorageError,
)


PERIOD = "October 2026"


def fixed_today() -> date:
    return date(2026, 10, 19)


def reconstructed_balance(store: LedgerStore) -> int:
    return BASE_POINTS + sum(entry.delta for entry in store.entries)


class FailingStorage(LedgerStorageInterface):
    """Storage whose writes always fail."""

    def __init__(self):
        self.save_attempts = 0

    def load(self, period_key):
        return None

    def save(self, period_key, state):
        self.save_attempts += 1
        raise StorageError("quota exceeded")


class FlakyStorage(InMemoryLedgerStorage):
    """In-memory storage that fails until told otherwise."""

    def __init__(self):
        super().__init__()
        self.fail = True

    def save(self, period_key, state):
        if self.fail:
            raise StorageError("storage unavailable")
        super().save(period_key, state)


@pytest.fixture
def storage():
    return InMemoryLedgerStorage()


@pytest.fixture
def store(storage):
    return LedgerStore(PERIOD, storage=storage, today=fixed_today)


class TestAppend:

    def test_new_store_starts_at_base_points(self, store):
        assert store.balance == 100
        assert store.entries == ()

    def test_append_adds_entry_and_adjusts_balance(self, store):
        index = store.append("Late", -2)
        assert index == 0
        assert store.balance == 98
        assert store.entries[0] == Entry(description="Late", delta=-2, date="10/19/2026")

    def test_append_preserves_order(self, store):
        store.append("Late", -2)
        store.append("Positive feedback", 5)
        store.append("Absence", -3)
        assert [e.description for e in store.entries] == ["Late", "Positive feedback", "Absence"]
        assert store.balance == 100

    def test_append_uses_configured_date_format(self, storage):
        store = LedgerStore(PERIOD, storage=storage, date_format="%d.%m.%Y", today=fixed_today)
        store.append("Late", -2)
        assert store.entries[0].date == "19.10.2026"

    def test_invalid_append_leaves_store_untouched(self, store):
        with pytest.raises(ValueError):
            store.append("", 3)
        assert store.balance == 100
        assert len(store) == 0


class TestEdit:

    def test_edit_applies_delta_difference(self, store):
        store.append("Late", -2)
        store.edit(0, "Absence", "10/18/2026", -3)
        assert store.balance == 97
        assert store.entries[0] == Entry(description="Absence", delta=-3, date="10/18/2026")

    def test_edit_recomputes_is_positive(self, store):
        store.append("Late", -2)
        assert store.entries[0].is_positive is False
        store.edit(0, "Positive feedback", "10/19/2026", 5)
        assert store.entries[0].is_positive is True

    def test_noop_edit_changes_nothing(self, store):
        store.append("Late", -2)
        store.append("Positive feedback", 5)
        before = store.snapshot()
        entry = store.entries[1]
        store.edit(1, entry.description, entry.date, entry.delta)
        assert store.snapshot() == before

    def test_edit_out_of_range(self, store):
        store.append("Late", -2)
        before = store.snapshot()
        with pytest.raises(IndexOutOfRange):
            store.edit(1, "x", "d", 1)
        with pytest.raises(IndexOutOfRange):
            store.edit(-1, "x", "d", 1)
        assert store.snapshot() == before

    def test_invalid_edit_is_atomic(self, store):
        store.append("Late", -2)
        before = store.snapshot()
        with pytest.raises(ValueError):
            store.edit(0, "", "10/19/2026", 4)
        assert store.snapshot() == before


class TestDelete:

    def test_delete_adjusts_balance_and_keeps_order(self, store):
        store.append("Late", -2)
        store.append("Positive feedback", 5)
        store.append("Absence", -3)
        removed = store.entries[1]
        balance_before = store.balance

        store.delete(1)

        assert store.balance == balance_before - removed.delta
        assert [e.description for e in store.entries] == ["Late", "Absence"]

    def test_delete_out_of_range(self, store):
        with pytest.raises(IndexOutOfRange) as exc_info:
            store.delete(0)
        assert exc_info.value.size == 0
        # Also a plain IndexError for callers that expect one
        assert isinstance(exc_info.value, IndexError)


class TestBalanceInvariant:

    def test_random_operation_sequences(self, storage):
        rng = random.Random(20261019)
        for _ in range(25):
            store = LedgerStore(PERIOD, storage=storage, today=fixed_today)
            for _ in range(40):
                op = rng.choice(["append", "append", "edit", "delete"])
                if op == "append" or len(store) == 0:
                    store.append(f"entry {rng.randint(0, 999)}", rng.randint(-10, 10))
                elif op == "edit":
                    index = rng.randrange(len(store))
                    store.edit(index, "edited", "10/01/2026", rng.randint(-10, 10))
                else:
                    store.delete(rng.randrange(len(store)))
                assert store.balance == reconstructed_balance(store)

    def test_inconsistent_initial_state_rejected(self):
        state = LedgerState(balance=90, entries=(Entry(description="Late", delta=-2, date="d"),))
        with pytest.raises(LedgerInvariantError):
            LedgerStore(PERIOD, state)


class TestApply:

    def test_apply_dispatches_each_kind(self, store):
        assert store.apply(AppendEntry(description="Late", delta=-2)) == 0
        store.apply(EditEntry(index=0, description="Absence", date="d", delta=-3))
        assert store.balance == 97
        store.apply(DeleteEntry(index=0))
        assert store.balance == 100
        assert len(store) == 0


class TestPersistence:

    def test_every_mutation_is_saved(self, storage, store):
        store.append("Late", -2)
        assert storage.load(PERIOD) == store.snapshot()
        store.edit(0, "Absence", "d", -3)
        assert storage.load(PERIOD) == store.snapshot()
        store.delete(0)
        assert storage.load(PERIOD) == store.snapshot()

    def test_reopen_reconstructs_state(self, storage, store):
        store.append("Late", -2)
        store.append("Positive feedback", 5)
        reopened = LedgerStore.open(PERIOD, storage)
        assert reopened.snapshot() == store.snapshot()

    def test_open_without_record_starts_fresh(self, storage):
        store = LedgerStore.open("November 2026", storage)
        assert store.snapshot() == LedgerState.fresh()

    def test_open_with_malformed_record_starts_fresh(self, storage):
        storage.put_raw(PERIOD, "{not json")
        store = LedgerStore.open(PERIOD, storage)
        assert store.balance == 100
        assert store.entries == ()

    def test_open_with_deeply_nested_record_starts_fresh(self, storage):
        storage.put_raw(PERIOD, '{"points": 100, "history": ' + "[" * 100000)
        store = LedgerStore.open(PERIOD, storage)
        assert store.snapshot() == LedgerState.fresh()

    def test_open_repairs_mismatched_balance(self, storage):
        storage.put_raw(PERIOD, '{"points": 500, "history": ['
                                '{"description": "Late", "points": -2, "date": "d", "isPositive": false}]}')
        audit = AuditLogger()
        store = LedgerStore.open(PERIOD, storage, audit_logger=audit)
        assert store.balance == 98
        assert AuditEventType.LEDGER_BALANCE_REPAIRED in [e.event_type for e in audit.events]

    def test_save_failure_is_not_fatal(self):
        failing = FailingStorage()
        audit = AuditLogger()
        store = LedgerStore(PERIOD, storage=failing, audit_logger=audit, today=fixed_today)

        store.append("Late", -2)

        assert store.balance == 98
        assert failing.save_attempts == 1
        assert "quota exceeded" in store.last_persistence_error
        assert AuditEventType.SAVE_FAILED in [e.event_type for e in audit.events]

    def test_successful_save_clears_error(self):
        flaky = FlakyStorage()
        store = LedgerStore(PERIOD, storage=flaky, today=fixed_today)
        store.append("Late", -2)
        assert store.last_persistence_error is not None

        flaky.fail = False
        store.append("Absence", -3)
        assert store.last_persistence_error is None
        assert flaky.load(PERIOD).balance == 95


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
