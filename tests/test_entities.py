"""Tests for domain entities and the triage state machine."""

import pytest

from opstrack.domain.entities import (
    LEGACY_STATE_VALUES,
    Operation,
    OperationState,
    RuleKind,
    TagRule,
)
from opstrack.domain.errors import ConflictError, DomainError, StorageError
from opstrack.domain.state_machine import TRANSITIONS, Trigger, is_transition, next_state


def _operation(**overrides):
    values = dict(
        id=1,
        date="2024-01-15",
        type="card",
        type_display="Card payment",
        details="COFFEE",
        amount_in_cents=-350,
        hash="h1",
        state=OperationState.OK,
        ignored_from_charts=False,
        bank_account_id=1,
        tags_ids=frozenset({2, 3}),
    )
    values.update(overrides)
    return Operation(**values)


class TestOperationState:
    """Tests for the persisted state encoding."""

    @pytest.mark.parametrize("state", list(OperationState))
    def test_storage_encoding_round_trip(self, state):
        assert OperationState.from_storage(state.to_storage()) is state

    def test_storage_values(self):
        assert OperationState.PENDING_TRIAGE.to_storage() == "pending_triage"
        assert OperationState.OK.to_storage() == "ok"

    def test_unknown_value_rejected(self):
        with pytest.raises(ValueError, match="Unknown operation state"):
            OperationState.from_storage("Archived")

    def test_legacy_values_map_to_current_encoding(self):
        assert LEGACY_STATE_VALUES == {
            "PendingTriage": OperationState.PENDING_TRIAGE.value,
            "Ok": OperationState.OK.value,
        }


class TestOperation:
    """Tests for Operation entity."""

    def test_operation_immutability(self):
        operation = _operation()
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            operation.state = OperationState.PENDING_TRIAGE

    def test_needs_triage(self):
        assert not _operation().needs_triage
        assert _operation(state=OperationState.PENDING_TRIAGE).needs_triage

    def test_operation_equality_ignores_tag_order(self):
        assert _operation(tags_ids=frozenset({3, 2})) == _operation(tags_ids=frozenset({2, 3}))

    def test_tag_rule_defaults(self):
        rule = TagRule(id=1, tag_id=4, kind=RuleKind.DETAILS_CONTAINS, pattern="RENT")
        assert rule.min_amount_in_cents is None
        assert rule.max_amount_in_cents is None


class TestStateMachine:
    """Tests for triage transitions."""

    def test_collision_moves_ok_into_triage(self):
        assert next_state(OperationState.OK, Trigger.COLLISION) is OperationState.PENDING_TRIAGE
        assert is_transition(OperationState.OK, Trigger.COLLISION)

    def test_collision_on_pending_is_noop(self):
        assert next_state(OperationState.PENDING_TRIAGE, Trigger.COLLISION) is OperationState.PENDING_TRIAGE
        assert not is_transition(OperationState.PENDING_TRIAGE, Trigger.COLLISION)

    @pytest.mark.parametrize("state", list(OperationState))
    def test_edit_always_resolves(self, state):
        assert next_state(state, Trigger.EDIT) is OperationState.OK

    def test_every_state_trigger_pair_defined(self):
        assert len(TRANSITIONS) == len(OperationState) * len(Trigger)

    def test_undefined_transition_raises_conflict(self, monkeypatch):
        monkeypatch.delitem(TRANSITIONS, (OperationState.OK, Trigger.EDIT))
        with pytest.raises(ConflictError):
            next_state(OperationState.OK, Trigger.EDIT)


def test_error_hierarchy():
    """Domain errors stay ValueErrors; storage failures do not."""
    assert issubclass(ConflictError, DomainError)
    assert issubclass(DomainError, ValueError)
    assert not issubclass(StorageError, ValueError)
