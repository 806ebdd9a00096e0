"""
Ledger Engine Package

The entry log and balance, the admin gate that authorizes changes to it,
and the grade-to-points rule.
"""

from points_tracker.ledger.errors import (
    IndexOutOfRange,
    LedgerError,
    LedgerInvariantError,
    UnknownSubject,
)
from points_tracker.ledger.gate import AdminGate, GateResult, GateState, GateStatus
from points_tracker.ledger.grading import GradeEvaluation, GradeEvaluator
from points_tracker.ledger.period import current_period_key, format_entry_date
from points_tracker.ledger.store import LedgerStore

__all__ = [
    # Errors
    "IndexOutOfRange",
    "LedgerError",
    "LedgerInvariantError",
    "UnknownSubject",
    # Gate
    "AdminGate",
    "GateResult",
    "GateState",
    "GateStatus",
    # Grading
    "GradeEvaluation",
    "GradeEvaluator",
    # Periods
    "current_period_key",
    "format_entry_date",
    # Store
    "LedgerStore",
]
