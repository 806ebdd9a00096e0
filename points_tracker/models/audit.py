"""
Audit Models for Points Tracker

Every gate decision, ledger mutation and persistence outcome produces an
audit event. Events go to the structured log; they are a trace of what
happened in the session, not a tamper-proof record.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Period lifecycle
    LEDGER_OPENED = "ledger_opened"
    LEDGER_BALANCE_REPAIRED = "ledger_balance_repaired"

    # Admin gate
    ACTION_DEFERRED = "action_deferred"
    CREDENTIAL_ACCEPTED = "credential_accepted"
    CREDENTIAL_REJECTED = "credential_rejected"
    ACTION_CANCELLED = "action_cancelled"

    # Ledger mutations
    ENTRY_APPENDED = "entry_appended"
    ENTRY_EDITED = "entry_edited"
    ENTRY_DELETED = "entry_deleted"

    # Persistence
    LEDGER_SAVED = "ledger_saved"
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clip(text: str, limit: int = 200) -> str:
    return text if len(text) <= limit else text[: limit - 3] + "..."


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    period_key: Optional[str] = Field(
        default=None,
        description="Ledger period the event belongs to"
    )
    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "period_key": self.period_key,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_appended("October 2026", 0, "Late", -2, 98)
        event = AuditEventBuilder.credential_rejected("DeleteEntry")
    """

    @staticmethod
    def ledger_opened(period_key: str, balance: int, entry_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_OPENED,
            period_key=period_key,
            description=f"Ledger opened with {entry_count} entries, balance {balance}",
            details={"balance": balance, "entry_count": entry_count},
        )

    @staticmethod
    def ledger_balance_repaired(
        period_key: str,
        stored_balance: int,
        recomputed_balance: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_BALANCE_REPAIRED,
            severity=AuditSeverity.WARNING,
            period_key=period_key,
            description=(
                f"Stored balance {stored_balance} did not match entries, "
                f"using {recomputed_balance}"
            ),
            details={
                "stored_balance": stored_balance,
                "recomputed_balance": recomputed_balance,
            },
        )

    @staticmethod
    def action_deferred(action_kind: str, replaced: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACTION_DEFERRED,
            description=f"Action '{action_kind}' waiting for admin code",
            details={"action": action_kind, "replaced": replaced},
            is_user_action=True,
        )

    @staticmethod
    def credential_accepted(pending_kind: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CREDENTIAL_ACCEPTED,
            description="Admin code accepted, changes unlocked for this session",
            details={"pending_action": pending_kind},
            is_user_action=True,
        )

    @staticmethod
    def credential_rejected(pending_kind: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CREDENTIAL_REJECTED,
            severity=AuditSeverity.WARNING,
            description="Incorrect admin code",
            details={"pending_action": pending_kind},
            is_user_action=True,
        )

    @staticmethod
    def action_cancelled(pending_kind: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACTION_CANCELLED,
            description="Pending action cancelled",
            details={"pending_action": pending_kind},
            is_user_action=True,
        )

    @staticmethod
    def entry_appended(
        period_key: str,
        index: int,
        description: str,
        delta: int,
        balance: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_APPENDED,
            period_key=period_key,
            description=f"Entry added: {_clip(description)} ({delta:+d})",
            details={"index": index, "delta": delta, "balance": balance},
        )

    @staticmethod
    def entry_edited(
        period_key: str,
        index: int,
        old_delta: int,
        new_delta: int,
        balance: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_EDITED,
            period_key=period_key,
            description=f"Entry {index} edited ({old_delta:+d} -> {new_delta:+d})",
            details={
                "index": index,
                "old_delta": old_delta,
                "new_delta": new_delta,
                "balance": balance,
            },
        )

    @staticmethod
    def entry_deleted(
        period_key: str,
        index: int,
        description: str,
        delta: int,
        balance: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_DELETED,
            period_key=period_key,
            description=f"Entry deleted: {_clip(description)} ({delta:+d})",
            details={"index": index, "delta": delta, "balance": balance},
        )

    @staticmethod
    def ledger_saved(period_key: str, entry_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_SAVED,
            severity=AuditSeverity.DEBUG,
            period_key=period_key,
            description=f"Ledger saved with {entry_count} entries",
            details={"entry_count": entry_count},
        )

    @staticmethod
    def save_failed(period_key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.WARNING,
            period_key=period_key,
            description="Ledger could not be saved; changes are kept in memory",
            error_message=error_message,
        )
