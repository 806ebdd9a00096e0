"""
Audit Logger

DESIGN DECISION: Every gate decision and every ledger mutation is logged.
This provides:
1. A trace of who unlocked what during a session
2. Debugging capability when a balance looks wrong
3. Visibility into persistence failures that the UI only shows as a warning

The audit logger never raises; a logging failure must not break the ledger.
"""

from collections import deque
from typing import Optional

import structlog

from points_tracker.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


DEFAULT_MAX_EVENTS = 200


class AuditLogger:
    """
    Central audit logging service.

    Writes each event to the structured log at the level matching its
    severity, and keeps the most recent events in memory so the
    presentation layer can show recent activity. Older events are only
    in the log.
    """

    def __init__(self, keep_events: bool = True, max_events: int = DEFAULT_MAX_EVENTS):
        self._logger = structlog.get_logger("points_tracker.audit")
        self._keep_events = keep_events
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    @property
    def events(self) -> list[AuditEvent]:
        """Most recent events of this session, oldest first."""
        return list(self._events)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        if self._keep_events:
            self._events.append(event)

        log_dict = event.to_log_dict()
        try:
            if event.severity.value == "error":
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Logging is best effort; the ledger keeps working
            structlog.get_logger().error(
                "audit_log_failed",
                error=str(e),
                event_id=str(event.event_id),
            )

    # Ledger lifecycle

    def log_ledger_opened(self, period_key: str, balance: int, entry_count: int) -> None:
        self.log(AuditEventBuilder.ledger_opened(period_key, balance, entry_count))

    def log_balance_repaired(
        self,
        period_key: str,
        stored_balance: int,
        recomputed_balance: int,
    ) -> None:
        self.log(AuditEventBuilder.ledger_balance_repaired(
            period_key, stored_balance, recomputed_balance
        ))

    # Gate decisions

    def log_action_deferred(self, action_kind: str, replaced: Optional[str]) -> None:
        self.log(AuditEventBuilder.action_deferred(action_kind, replaced))

    def log_credential_accepted(self, pending_kind: Optional[str]) -> None:
        self.log(AuditEventBuilder.credential_accepted(pending_kind))

    def log_credential_rejected(self, pending_kind: Optional[str]) -> None:
        self.log(AuditEventBuilder.credential_rejected(pending_kind))

    def log_action_cancelled(self, pending_kind: Optional[str]) -> None:
        self.log(AuditEventBuilder.action_cancelled(pending_kind))

    # Mutations

    def log_entry_appended(
        self,
        period_key: str,
        index: int,
        description: str,
        delta: int,
        balance: int,
    ) -> None:
        self.log(AuditEventBuilder.entry_appended(
            period_key, index, description, delta, balance
        ))

    def log_entry_edited(
        self,
        period_key: str,
        index: int,
        old_delta: int,
        new_delta: int,
        balance: int,
    ) -> None:
        self.log(AuditEventBuilder.entry_edited(
            period_key, index, old_delta, new_delta, balance
        ))

    def log_entry_deleted(
        self,
        period_key: str,
        index: int,
        description: str,
        delta: int,
        balance: int,
    ) -> None:
        self.log(AuditEventBuilder.entry_deleted(
            period_key, index, description, delta, balance
        ))

    # Persistence

    def log_ledger_saved(self, period_key: str, entry_count: int) -> None:
        self.log(AuditEventBuilder.ledger_saved(period_key, entry_count))

    def log_save_failed(self, period_key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(period_key, error_message))
