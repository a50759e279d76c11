"""Order lifecycle — statuses and the legal transitions between them.

The table below is the single source of truth for status changes::

    SETTLE   PENDING             -> CONFIRMED   (payment becomes PAID)
    CANCEL   PENDING | CONFIRMED -> CANCELLED   (payment must be UNPAID)
    FULFIL   CONFIRMED           -> COMPLETED

Guards that depend on the payment status live on the Order aggregate;
this module only knows which status a trigger may start from.
"""

from __future__ import annotations

from enum import Enum

from dinepay.domain.exceptions import InvalidTransitionError


class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class PaymentStatus(Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"


class Trigger(Enum):
    SETTLE = "SETTLE"
    CANCEL = "CANCEL"
    FULFIL = "FULFIL"


_TRANSITIONS: dict[Trigger, tuple[frozenset[OrderStatus], OrderStatus]] = {
    Trigger.SETTLE: (frozenset({OrderStatus.PENDING}), OrderStatus.CONFIRMED),
    Trigger.CANCEL: (
        frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED}),
        OrderStatus.CANCELLED,
    ),
    Trigger.FULFIL: (frozenset({OrderStatus.CONFIRMED}), OrderStatus.COMPLETED),
}

# Statuses a caller may ask for directly.  CONFIRMED is only reachable by
# settling a payment, and nothing ever goes back to PENDING.
_REQUESTABLE: dict[OrderStatus, Trigger] = {
    OrderStatus.CANCELLED: Trigger.CANCEL,
    OrderStatus.COMPLETED: Trigger.FULFIL,
}


def check_transition(current: OrderStatus, trigger: Trigger) -> OrderStatus:
    """Return the status *trigger* leads to from *current*.

    Raises InvalidTransitionError for anything outside the table.
    """
    sources, target = _TRANSITIONS[trigger]
    if current not in sources:
        raise InvalidTransitionError(current.value, f"{trigger.value} -> {target.value}")
    return target


def trigger_for(current: OrderStatus, target: OrderStatus) -> Trigger:
    """Resolve a requested target status to the trigger that reaches it."""
    try:
        return _REQUESTABLE[target]
    except KeyError:
        raise InvalidTransitionError(current.value, target.value) from None


def is_terminal(status: OrderStatus) -> bool:
    return not any(status in sources for sources, _ in _TRANSITIONS.values())
