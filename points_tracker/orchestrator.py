"""
Main Orchestrator for Points Tracker

This module ties together all the components and defines the flows the
presentation layer uses:
1. Add entry (form input → validate → [grade rule] → gate → ledger → save)
2. Edit / delete entry (form input → validate → gate → ledger → save)
3. Admin code (code → gate → pending action runs)
4. Export (ledger → CSV)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing changes the ledger without passing the admin gate
- Nothing reaches the gate without passing input validation
- Every step is audited
"""

from datetime import date
from typing import Callable, Optional

from points_tracker.audit import AuditLogger
from points_tracker.config import LedgerSettings, get_settings
from points_tracker.export import CSVExporter, export_filename
from points_tracker.ledger import (
    AdminGate,
    GateResult,
    GradeEvaluator,
    LedgerStore,
    current_period_key,
)
from points_tracker.models.actions import AppendEntry, DeleteEntry, EditEntry
from points_tracker.models.catalog import BASE_POINTS, EntryType, find_catalog_item
from points_tracker.models.entry import LedgerState
from points_tracker.models.validation import ValidationResult
from points_tracker.services.storage import (
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LedgerStorageInterface,
)
from points_tracker.validation import EntryInputValidator


class InvalidInputError(ValueError):
    """Form input failed validation; nothing was sent to the gate."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
        super().__init__(messages or "Invalid input")


class PointsSession:
    """
    One running session of the points tracker.

    Owns the ledger store for the current period, the admin gate, the grade
    evaluator and the audit logger. Created once per application load and
    passed explicitly to the presentation layer.
    """

    def __init__(
        self,
        store: LedgerStore,
        admin_code: str,
        evaluator: Optional[GradeEvaluator] = None,
        validator: Optional[EntryInputValidator] = None,
        exporter: Optional[CSVExporter] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._gate = AdminGate(admin_code, store.apply, audit_logger=audit_logger)
        self._evaluator = evaluator or GradeEvaluator()
        # Subjects are validated against the same table the evaluator grades with
        self._validator = validator or EntryInputValidator(self._evaluator.expectations)
        self._exporter = exporter or CSVExporter()

    @property
    def store(self) -> LedgerStore:
        return self._store

    @property
    def gate(self) -> AdminGate:
        return self._gate

    @property
    def evaluator(self) -> GradeEvaluator:
        return self._evaluator

    @property
    def validator(self) -> EntryInputValidator:
        return self._validator

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self._audit_logger

    @property
    def period_key(self) -> str:
        return self._store.period_key

    def snapshot(self) -> LedgerState:
        return self._store.snapshot()

    # Adding entries

    def add_catalog_entry(self, entry_type: EntryType, label: str) -> GateResult:
        """Add a deduction or bonus from the point-value catalog."""
        item = find_catalog_item(entry_type, label)
        if item is None:
            raise KeyError(f"No {entry_type.value} named {label!r}")
        return self._gate.require_authorization(
            AppendEntry(description=item.label, delta=item.points)
        )

    def add_grade(self, subject: str, grade: str) -> GateResult:
        """
        Add a grade entry.

        The grade is validated and evaluated before the gate is involved, so
        an unknown subject never leaves a pending action behind. With the
        default validator an unknown subject is an input error; UnknownSubject
        only surfaces when a validator with a wider subject table is supplied.

        Raises:
            InvalidInputError: If the subject is unknown or the grade is malformed
            UnknownSubject: If the evaluator has no expectations for the subject
        """
        result = self._validator.validate_grade(subject, grade)
        if result.has_errors:
            raise InvalidInputError(result)
        evaluation = self._evaluator.evaluate(result.subject, result.grade)
        return self._gate.require_authorization(
            AppendEntry(description=evaluation.description, delta=evaluation.delta)
        )

    def add_custom(self, description: str, points: str) -> GateResult:
        """Add a free-form entry."""
        result = self._validator.validate_custom_entry(description, points)
        if result.has_errors:
            raise InvalidInputError(result)
        return self._gate.require_authorization(
            AppendEntry(description=result.description, delta=result.points)
        )

    # Changing entries

    def edit_entry(self, index: int, description: str, date_text: str, points: str) -> GateResult:
        result = self._validator.validate_edit(description, date_text, points)
        if result.has_errors:
            raise InvalidInputError(result)
        return self._gate.require_authorization(EditEntry(
            index=index,
            description=result.description,
            date=result.date,
            delta=result.points,
        ))

    def delete_entry(self, index: int) -> GateResult:
        return self._gate.require_authorization(DeleteEntry(index=index))

    # Admin code prompt

    def submit_code(self, value: str) -> GateResult:
        return self._gate.submit_credential(value)

    def cancel(self) -> GateResult:
        return self._gate.cancel()

    # Views

    def export_csv(self) -> tuple[str, str]:
        """Returns (filename, csv text) for the current period."""
        content = self._exporter.render(self._store.entries)
        return export_filename(self.period_key), content

    def bonus_summary(self) -> str:
        """Line shown under the balance."""
        balance = self._store.balance
        if balance >= BASE_POINTS:
            return f"{balance} shekels ({BASE_POINTS} base + {balance - BASE_POINTS} bonus)"
        return "Keep collecting points! 💫"


def create_storage(settings: LedgerSettings) -> LedgerStorageInterface:
    """Build the configured storage backend."""
    if settings.storage_backend == "memory":
        return InMemoryLedgerStorage()
    if settings.storage_backend == "json":
        return JsonFileLedgerStorage(settings.data_dir)
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")


def create_session(
    settings: Optional[LedgerSettings] = None,
    storage: Optional[LedgerStorageInterface] = None,
    today: Callable[[], date] = date.today,
) -> PointsSession:
    """
    Factory function to create a session for the current month.

    Args:
        settings: Ledger settings; loaded from the environment if omitted
        storage: Storage backend; built from settings if omitted
        today: Clock used for the period key and new entry dates

    Returns:
        A session whose gate starts locked
    """
    settings = settings or get_settings().ledger
    storage = storage or create_storage(settings)
    audit_logger = AuditLogger()

    period_key = current_period_key(today(), settings.period_key_format)
    store = LedgerStore.open(
        period_key,
        storage,
        audit_logger=audit_logger,
        date_format=settings.date_format,
        today=today,
    )
    return PointsSession(
        store,
        admin_code=settings.admin_code.get_secret_value(),
        audit_logger=audit_logger,
    )
