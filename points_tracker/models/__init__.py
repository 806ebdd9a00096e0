"""
Data Models Package

This package contains all Pydantic models used in the Points Tracker system.
Ledger entries, pending actions, catalogs and audit events are all defined here.
"""

from points_tracker.models.actions import (
    AppendEntry,
    DeleteEntry,
    EditEntry,
    PendingAction,
)
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
    catalog_for,
    find_catalog_item,
)
from points_tracker.models.entry import Entry, LedgerState
from points_tracker.models.validation import ValidationIssue, ValidationResult

__all__ = [
    # Ledger models
    "Entry",
    "LedgerState",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Pending actions
    "AppendEntry",
    "DeleteEntry",
    "EditEntry",
    "PendingAction",
    # Catalogs
    "BASE_POINTS",
    "BONUSES",
    "DEDUCTIONS",
    "GRADE_EXPECTATIONS",
    "CatalogItem",
    "EntryType",
    "GradeThreshold",
    "catalog_for",
    "find_catalog_item",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
