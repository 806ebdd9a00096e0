"""Tests for AdminGate."""

import pytest

from points_tracker.audit import AuditLogger
from points_tracker.ledger import AdminGate, GateState, GateStatus, IndexOutOfRange
from points_tracker.models.actions import AppendEntry, DeleteEntry
from points_tracker.models.audit import AuditEventType


SECRET = "102030"


class RecordingExecutor:
    """Executor that records the actions it was asked to run."""

    def __init__(self):
        self.executed = []

    def __call__(self, action):
        self.executed.append(action)
        return len(self.executed)


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def gate(executor):
    return AdminGate(SECRET, executor)


ACTION_A = AppendEntry(description="Late", delta=-2)
ACTION_B = AppendEntry(description="Positive feedback", delta=5)


class TestLockedGate:

    def test_initially_locked(self, gate):
        assert gate.state == GateState.LOCKED
        assert gate.pending is None
        assert gate.prompt_open is False

    def test_request_while_locked_is_deferred(self, gate, executor):
        result = gate.require_authorization(ACTION_A)
        assert result.status == GateStatus.PROMPT
        assert result.needs_credential
        assert gate.pending == ACTION_A
        assert gate.prompt_open is True
        assert executor.executed == []

    def test_correct_credential_runs_pending_once(self, gate, executor):
        gate.require_authorization(ACTION_A)
        result = gate.submit_credential(SECRET)
        assert result.status == GateStatus.EXECUTED
        assert result.action == ACTION_A
        assert result.result == 1
        assert executor.executed == [ACTION_A]
        assert gate.pending is None
        assert gate.is_unlocked
        assert gate.prompt_open is False

    def test_correct_credential_without_pending(self, gate, executor):
        result = gate.submit_credential(SECRET)
        assert result.status == GateStatus.UNLOCKED
        assert gate.is_unlocked
        assert executor.executed == []


class TestReplayAndRetry:

    def test_last_request_wins(self, gate, executor):
        gate.require_authorization(ACTION_A)
        gate.require_authorization(ACTION_B)
        gate.submit_credential(SECRET)
        assert executor.executed == [ACTION_B]

    def test_wrong_credential_preserves_pending(self, gate, executor):
        gate.require_authorization(ACTION_A)
        result = gate.submit_credential("000000")
        assert result.status == GateStatus.REJECTED
        assert gate.state == GateState.LOCKED
        assert gate.pending == ACTION_A
        assert gate.prompt_open is True
        assert executor.executed == []

        gate.submit_credential(SECRET)
        assert executor.executed == [ACTION_A]

    def test_pending_runs_only_once(self, gate, executor):
        gate.require_authorization(ACTION_A)
        gate.submit_credential(SECRET)
        gate.submit_credential(SECRET)
        assert executor.executed == [ACTION_A]


class TestCancel:

    def test_cancel_clears_pending_and_stays_locked(self, gate, executor):
        gate.require_authorization(ACTION_A)
        result = gate.cancel()
        assert result.status == GateStatus.CANCELLED
        assert result.action == ACTION_A
        assert gate.pending is None
        assert gate.prompt_open is False
        assert gate.state == GateState.LOCKED

        gate.submit_credential(SECRET)
        assert executor.executed == []

    def test_cancel_when_unlocked_keeps_unlocked(self, gate):
        gate.submit_credential(SECRET)
        gate.cancel()
        assert gate.is_unlocked


class TestUnlockedGate:

    def test_unlocked_runs_immediately(self, gate, executor):
        gate.submit_credential(SECRET)
        result = gate.require_authorization(ACTION_A)
        assert result.status == GateStatus.EXECUTED
        assert gate.pending is None
        assert executor.executed == [ACTION_A]

    def test_never_relocks(self, gate, executor):
        gate.submit_credential(SECRET)
        gate.submit_credential("wrong")
        gate.require_authorization(ACTION_B)
        assert executor.executed == [ACTION_B]


class TestExecutorFailure:

    def test_failed_pending_action_is_cleared(self):
        def failing_executor(action):
            raise IndexOutOfRange(action.index, 0)

        gate = AdminGate(SECRET, failing_executor)
        gate.require_authorization(DeleteEntry(index=3))
        with pytest.raises(IndexOutOfRange):
            gate.submit_credential(SECRET)
        assert gate.pending is None
        assert gate.is_unlocked


class TestGateConstruction:

    def test_empty_secret_rejected(self, executor):
        with pytest.raises(ValueError):
            AdminGate("", executor)

    def test_decisions_are_audited(self, executor):
        audit = AuditLogger()
        gate = AdminGate(SECRET, executor, audit_logger=audit)
        gate.require_authorization(ACTION_A)
        gate.submit_credential("nope")
        gate.submit_credential(SECRET)
        assert [e.event_type for e in audit.events] == [
            AuditEventType.ACTION_DEFERRED,
            AuditEventType.CREDENTIAL_REJECTED,
            AuditEventType.CREDENTIAL_ACCEPTED,
        ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
