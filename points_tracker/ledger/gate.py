"""
Admin Confirmation Gate

DESIGN DECISION: No ledger mutation runs until the shared admin code has
been entered once in the session.

    LOCKED --(correct code)--> UNLOCKED

While locked, a requested action is parked as the single pending action
(a newer request replaces it; last request wins) and the caller is told
to prompt for the code. A wrong code keeps the pending action so the user
can retry. Once unlocked, the gate stays unlocked for the rest of the
session and every request runs immediately.

Pending actions are tagged descriptions (see models.actions), executed by
the executor the gate was built with, normally LedgerStore.apply.
"""

import hmac
from enum import Enum
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, SecretStr

from points_tracker.audit import AuditLogger
from points_tracker.models.actions import PendingAction


class GateState(str, Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"


class GateStatus(str, Enum):
    """Outcome of a gate call, for the presentation layer."""
    EXECUTED = "executed"    # action ran
    PROMPT = "prompt"        # action parked, ask for the code
    REJECTED = "rejected"    # wrong code, action still parked
    UNLOCKED = "unlocked"    # right code, nothing was pending
    CANCELLED = "cancelled"  # pending action dropped


class GateResult(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: GateStatus
    action: Optional[PendingAction] = None
    result: Any = None

    @property
    def needs_credential(self) -> bool:
        return self.status in (GateStatus.PROMPT, GateStatus.REJECTED)


class AdminGate:
    """
    Single-secret authorization gate for ledger mutations.

    One gate per running session; its state is never persisted.
    """

    def __init__(
        self,
        secret: Union[str, SecretStr],
        executor: Callable[[PendingAction], Any],
        audit_logger: Optional[AuditLogger] = None,
    ):
        if isinstance(secret, SecretStr):
            secret = secret.get_secret_value()
        if not secret:
            raise ValueError("Admin secret must not be empty")
        self._secret = secret.encode("utf-8")
        self._executor = executor
        self._audit_logger = audit_logger
        self._state = GateState.LOCKED
        self._pending: Optional[PendingAction] = None
        self._prompt_open = False

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_unlocked(self) -> bool:
        return self._state == GateState.UNLOCKED

    @property
    def pending(self) -> Optional[PendingAction]:
        return self._pending

    @property
    def prompt_open(self) -> bool:
        """Whether the collaborator should be showing the code prompt."""
        return self._prompt_open

    def require_authorization(self, action: PendingAction) -> GateResult:
        """Run the action now if unlocked, otherwise park it and ask for the code."""
        if self.is_unlocked:
            return GateResult(
                status=GateStatus.EXECUTED,
                action=action,
                result=self._executor(action),
            )

        replaced = self._pending
        self._pending = action
        self._prompt_open = True
        if self._audit_logger:
            self._audit_logger.log_action_deferred(
                action.kind, replaced.kind if replaced else None
            )
        return GateResult(status=GateStatus.PROMPT, action=action)

    def submit_credential(self, value: str) -> GateResult:
        """
        Check a submitted code.

        On success the gate unlocks and the pending action, if any, runs
        exactly once. On failure nothing changes except the caller learns
        the code was wrong.
        """
        pending = self._pending
        pending_kind = pending.kind if pending else None

        if not hmac.compare_digest(value.encode("utf-8"), self._secret):
            if self._audit_logger:
                self._audit_logger.log_credential_rejected(pending_kind)
            return GateResult(status=GateStatus.REJECTED, action=pending)

        self._state = GateState.UNLOCKED
        self._prompt_open = False
        self._pending = None
        if self._audit_logger:
            self._audit_logger.log_credential_accepted(pending_kind)

        if pending is None:
            return GateResult(status=GateStatus.UNLOCKED)
        return GateResult(
            status=GateStatus.EXECUTED,
            action=pending,
            result=self._executor(pending),
        )

    def cancel(self) -> GateResult:
        """Drop the pending action and close the prompt; lock state is unchanged."""
        dropped = self._pending
        self._pending = None
        self._prompt_open = False
        if self._audit_logger:
            self._audit_logger.log_action_cancelled(dropped.kind if dropped else None)
        return GateResult(status=GateStatus.CANCELLED, action=dropped)
