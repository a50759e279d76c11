"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items.
All business invariants are enforced here; the legal status changes
come from ``lifecycle``.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from dinepay.domain.exceptions import (
    AlreadySettledError,
    InvalidTransitionError,
    InvariantViolation,
    OrderLineNotFoundError,
    OrderNotEditableError,
    ValidationError,
)
from dinepay.domain.model import lifecycle
from dinepay.domain.model.lifecycle import OrderStatus, PaymentStatus, Trigger
from dinepay.domain.model.value_objects import DEFAULT_TAX_RATE, Money, Quantity

logger = logging.getLogger("dinepay.orders")


class OrderOrigin(Enum):
    CUSTOMER_SELF = "CUSTOMER_SELF"
    CASHIER_ASSISTED = "CASHIER_ASSISTED"


class PaymentMethod(Enum):
    CASH = "CASH"
    QR_CODE = "QR_CODE"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_order_number(now: datetime | None = None) -> str:
    now = now or _utcnow()
    return f"ORD-{now:%Y%m%d}-{uuid.uuid4().hex[:8].upper()}"


@dataclass
class OrderLine:
    """One menu item on an order.

    Name and unit price are captured when the line is added; later menu
    price changes never alter historical totals.
    """

    menu_item_id: str
    menu_item_name: str
    quantity: Quantity
    unit_price: Money  # locked when the line is added

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for restaurant orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.

    Invariant: ``payment_status`` is PAID only while ``status`` is
    CONFIRMED or COMPLETED.
    """

    order_number: str
    origin: OrderOrigin
    customer_name: str
    lines: list[OrderLine]
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    payment_method: PaymentMethod | None = None
    tax_rate: Decimal = DEFAULT_TAX_RATE
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    paid_at: datetime | None = None
    version: int = 0

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        origin: OrderOrigin,
        customer_name: str,
        lines: list[OrderLine],
        tax_rate: Decimal = DEFAULT_TAX_RATE,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not customer_name or not customer_name.strip():
            raise ValidationError("Customer name is required")

        now = _utcnow()
        order = Order(
            order_number=generate_order_number(now),
            origin=origin,
            customer_name=customer_name.strip(),
            lines=[],
            tax_rate=tax_rate,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order._merge_line(line)
        return order

    # --- Line editing (PENDING only) ------------------------------------------

    def ensure_editable(self) -> None:
        if self.status != OrderStatus.PENDING or self.is_paid:
            raise OrderNotEditableError(self.order_number, self.status.value)

    def add_line(self, line: OrderLine) -> None:
        """Add a line, merging quantity into an existing line for the same item."""
        self.ensure_editable()
        self._merge_line(line)
        self._touch()

    def remove_line(self, menu_item_id: str) -> None:
        self.ensure_editable()
        self.lines.remove(self._find_line(menu_item_id))
        self._touch()

    def set_quantity(self, menu_item_id: str, quantity: int) -> None:
        self.ensure_editable()
        line = self._find_line(menu_item_id)
        line.quantity = Quantity(quantity)
        self._touch()

    # --- State transitions ----------------------------------------------------

    def mark_paid(self, method: PaymentMethod) -> None:
        """Record a settled payment: PAID and CONFIRMED in one update.

        The payment itself must already be verified by the settlement
        service before calling this.
        """
        if self.payment_status == PaymentStatus.PAID:
            raise AlreadySettledError(self.order_number)
        target = lifecycle.check_transition(self.status, Trigger.SETTLE)
        if not self.lines:
            logger.critical("Order %s reached settlement with no lines", self.order_number)
            raise InvariantViolation(
                f"Order {self.order_number} cannot be paid without line items"
            )

        now = _utcnow()
        self.payment_status = PaymentStatus.PAID
        self.payment_method = method
        self.status = target
        self.paid_at = now
        self.updated_at = now

    def cancel(self) -> None:
        """Transition PENDING|CONFIRMED -> CANCELLED while still unpaid."""
        target = lifecycle.check_transition(self.status, Trigger.CANCEL)
        if self.payment_status == PaymentStatus.PAID:
            raise InvalidTransitionError(
                f"{self.status.value}/{self.payment_status.value}",
                f"{Trigger.CANCEL.value} -> {target.value}",
            )
        self.status = target
        self._touch()

    def complete(self) -> None:
        """Transition CONFIRMED -> COMPLETED once the food is served."""
        self.status = lifecycle.check_transition(self.status, Trigger.FULFIL)
        self._touch()

    def apply(self, trigger: Trigger) -> None:
        """Fire a caller-requested trigger (settlement has its own path)."""
        if trigger == Trigger.CANCEL:
            self.cancel()
        elif trigger == Trigger.FULFIL:
            self.complete()
        else:
            raise InvalidTransitionError(self.status.value, trigger.value)

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        result = Money.zero()
        for line in self.lines:
            result = result + line.line_total
        return result

    @property
    def tax(self) -> Money:
        return self.subtotal.apply_rate(self.tax_rate)

    @property
    def total(self) -> Money:
        return self.subtotal + self.tax

    @property
    def item_count(self) -> int:
        return sum(line.quantity.value for line in self.lines)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    @property
    def is_closed(self) -> bool:
        return lifecycle.is_terminal(self.status)

    # --- Internal helpers -----------------------------------------------------

    def _merge_line(self, line: OrderLine) -> None:
        for existing in self.lines:
            if existing.menu_item_id == line.menu_item_id:
                existing.quantity = existing.quantity + line.quantity
                return
        self.lines.append(line)

    def _find_line(self, menu_item_id: str) -> OrderLine:
        for line in self.lines:
            if line.menu_item_id == menu_item_id:
                return line
        raise OrderLineNotFoundError(self.order_number, menu_item_id)

    def _touch(self) -> None:
        self.updated_at = _utcnow()
