"""
Tests for Points Tracker

Test strategy:
1. Unit tests for individual components (models, store, gate, grading)
2. Flow tests through the session with in-memory storage
3. No files outside pytest's tmp_path, no network
"""

import json

import pytest
from pydantic import ValidationError

from points_tracker.audit import AuditLogger
from points_tracker.models.actions import AppendEntry, DeleteEntry, EditEntry
from points_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from points_tracker.models.catalog import (
    BASE_POINTS,
    BONUSES,
    DEDUCTIONS,
    GRADE_EXPECTATIONS,
    CatalogItem,
    EntryType,
    GradeThreshold,
    find_catalog_item,
)
from points_tracker.models.entry import Entry, LedgerState


class TestEntryModel:
    """Tests for the Entry model."""

    def test_entry_creation(self):
        """Test Entry creation by field name."""
        entry = Entry(description="Late", delta=-2, date="10/19/2026")
        assert entry.description == "Late"
        assert entry.delta == -2
        assert entry.is_positive is False

    def test_entry_creation_by_alias(self):
        """Test Entry creation from the persisted field names."""
        entry = Entry.model_validate(
            {"description": "Positive feedback", "points": 5, "date": "10/19/2026"}
        )
        assert entry.delta == 5
        assert entry.is_positive is True

    def test_zero_delta_is_not_positive(self):
        entry = Entry(description="Math grade: 60", delta=0, date="10/19/2026")
        assert entry.is_positive is False

    def test_stored_is_positive_is_ignored(self):
        """A stale isPositive flag in a record cannot override the delta."""
        entry = Entry.model_validate(
            {"description": "Late", "points": -2, "date": "d", "isPositive": True}
        )
        assert entry.is_positive is False

    def test_entry_serializes_to_record_shape(self):
        entry = Entry(description="Late", delta=-2, date="10/19/2026")
        assert entry.model_dump(by_alias=True) == {
            "description": "Late",
            "points": -2,
            "date": "10/19/2026",
            "isPositive": False,
        }

    def test_entry_rejects_empty_description(self):
        with pytest.raises(ValidationError):
            Entry(description="   ", delta=1, date="10/19/2026")

    def test_entry_rejects_non_integer_delta(self):
        with pytest.raises(ValidationError):
            Entry(description="x", delta="5", date="10/19/2026")

    def test_entry_is_immutable(self):
        entry = Entry(description="Late", delta=-2, date="10/19/2026")
        with pytest.raises(ValidationError):
            entry.delta = 3


class TestLedgerState:
    """Tests for LedgerState (snapshot and persisted record)."""

    def test_fresh_state(self):
        state = LedgerState.fresh()
        assert state.balance == BASE_POINTS
        assert state.entries == ()
        assert state.is_consistent

    def test_record_round_trip(self):
        state = LedgerState(
            balance=103,
            entries=(
                Entry(description="Late", delta=-2, date="10/01/2026"),
                Entry(description="Positive feedback", delta=5, date="10/02/2026"),
            ),
        )
        record = json.loads(state.to_record_json())
        assert record["points"] == 103
        assert record["history"][1]["isPositive"] is True
        assert LedgerState.model_validate(record) == state

    def test_inconsistent_state_detected(self):
        state = LedgerState(
            balance=50,
            entries=(Entry(description="Late", delta=-2, date="d"),),
        )
        assert state.expected_balance == 98
        assert state.is_consistent is False


class TestCatalog:
    """Tests for the static catalogs."""

    def test_deductions_are_negative(self):
        assert all(item.points < 0 for item in DEDUCTIONS)

    def test_bonuses_are_positive(self):
        assert all(item.points > 0 for item in BONUSES)

    def test_wrong_sign_rejected(self):
        with pytest.raises(ValidationError, match="negative"):
            CatalogItem(label="Oops", points=3, category=EntryType.DEDUCTION)

    def test_threshold_band_validation(self):
        with pytest.raises(ValidationError, match="cannot exceed"):
            GradeThreshold(min=80, target=70)

    def test_grade_expectations(self):
        assert GRADE_EXPECTATIONS["Math"] == GradeThreshold(min=55, target=65)
        assert len(GRADE_EXPECTATIONS) == 10
        assert all(t.min <= t.target for t in GRADE_EXPECTATIONS.values())

    def test_find_catalog_item(self):
        item = find_catalog_item(EntryType.DEDUCTION, "Negative teacher call")
        assert item.points == -5
        assert find_catalog_item(EntryType.BONUS, "Late") is None

    def test_grade_type_has_no_catalog(self):
        with pytest.raises(ValueError):
            find_catalog_item(EntryType.GRADE, "Math")


class TestActions:
    """Tests for pending action models."""

    def test_actions_are_tagged(self):
        assert AppendEntry(description="Late", delta=-2).kind == "append"
        assert EditEntry(index=0, description="x", date="d", delta=1).kind == "edit"
        assert DeleteEntry(index=0).kind == "delete"

    def test_actions_compare_by_value(self):
        assert DeleteEntry(index=2) == DeleteEntry(index=2)
        assert AppendEntry(description="A", delta=1) != AppendEntry(description="B", delta=1)


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.ENTRY_APPENDED,
            description="Entry added",
        )
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        event = AuditEventBuilder.entry_appended("October 2026", 0, "Late", -2, 98)
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "entry_appended"
        assert log_dict["period_key"] == "October 2026"
        assert log_dict["details"]["balance"] == 98

    def test_credential_rejected_is_warning(self):
        event = AuditEventBuilder.credential_rejected("delete")
        assert event.severity == AuditSeverity.WARNING
        assert event.is_user_action is True

    def test_logger_keeps_only_recent_events(self):
        audit = AuditLogger(max_events=3)
        for index in range(5):
            audit.log_entry_appended("October 2026", index, "Late", -2, 100 - 2 * (index + 1))
        assert [e.details["index"] for e in audit.events] == [2, 3, 4]

    def test_logger_can_skip_keeping_events(self):
        audit = AuditLogger(keep_events=False)
        audit.log_credential_rejected("delete")
        assert audit.events == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
