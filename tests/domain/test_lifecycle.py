"""Unit tests for the order lifecycle table."""

import pytest

from dinepay.domain.exceptions import InvalidTransitionError
from dinepay.domain.model.lifecycle import (
    OrderStatus,
    Trigger,
    check_transition,
    is_terminal,
    trigger_for,
)


class TestCheckTransition:

    @pytest.mark.parametrize(
        "current, trigger, expected",
        [
            (OrderStatus.PENDING, Trigger.SETTLE, OrderStatus.CONFIRMED),
            (OrderStatus.PENDING, Trigger.CANCEL, OrderStatus.CANCELLED),
            (OrderStatus.CONFIRMED, Trigger.CANCEL, OrderStatus.CANCELLED),
            (OrderStatus.CONFIRMED, Trigger.FULFIL, OrderStatus.COMPLETED),
        ],
    )
    def test_legal_transitions(self, current, trigger, expected):
        assert check_transition(current, trigger) == expected

    @pytest.mark.parametrize(
        "current, trigger",
        [
            (OrderStatus.CONFIRMED, Trigger.SETTLE),
            (OrderStatus.COMPLETED, Trigger.SETTLE),
            (OrderStatus.CANCELLED, Trigger.SETTLE),
            (OrderStatus.COMPLETED, Trigger.CANCEL),
            (OrderStatus.CANCELLED, Trigger.CANCEL),
            (OrderStatus.PENDING, Trigger.FULFIL),
            (OrderStatus.CANCELLED, Trigger.FULFIL),
        ],
    )
    def test_illegal_transitions_raise(self, current, trigger):
        with pytest.raises(InvalidTransitionError) as info:
            check_transition(current, trigger)
        assert info.value.current == current.value
        assert trigger.value in info.value.attempted


class TestTriggerFor:

    def test_requestable_targets(self):
        assert trigger_for(OrderStatus.PENDING, OrderStatus.CANCELLED) == Trigger.CANCEL
        assert trigger_for(OrderStatus.CONFIRMED, OrderStatus.COMPLETED) == Trigger.FULFIL

    @pytest.mark.parametrize("target", [OrderStatus.CONFIRMED, OrderStatus.PENDING])
    def test_unrequestable_targets(self, target):
        with pytest.raises(InvalidTransitionError) as info:
            trigger_for(OrderStatus.PENDING, target)
        assert info.value.attempted == target.value


def test_terminal_statuses():
    assert is_terminal(OrderStatus.COMPLETED)
    assert is_terminal(OrderStatus.CANCELLED)
    assert not is_terminal(OrderStatus.PENDING)
    assert not is_terminal(OrderStatus.CONFIRMED)
