"""Invoice — the immutable record of a paid order.

Exactly zero or one invoice exists per order.  Invoices are created by
the issuance coordinator and never mutated or deleted afterwards.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from dinepay.domain.exceptions import OrderNotPaidError
from dinepay.domain.model.order import Order, PaymentMethod
from dinepay.domain.model.value_objects import Money


def generate_invoice_number(now: datetime) -> str:
    return f"INV-{now:%Y%m%d}-{uuid.uuid4().hex[:8].upper()}"


@dataclass(frozen=True)
class Invoice:
    invoice_number: str
    order_number: str
    total_amount: Money  # subtotal before tax
    tax_amount: Money
    final_amount: Money
    payment_method: PaymentMethod
    issuing_cashier_id: str | None
    issued_at: datetime

    @staticmethod
    def issue(order: Order, issuing_cashier_id: str | None = None) -> Invoice:
        """Snapshot the totals of a paid order into a new invoice."""
        if not order.is_paid or order.payment_method is None:
            raise OrderNotPaidError(order.order_number)

        now = datetime.now(timezone.utc)
        return Invoice(
            invoice_number=generate_invoice_number(now),
            order_number=order.order_number,
            total_amount=order.subtotal,
            tax_amount=order.tax,
            final_amount=order.total,
            payment_method=order.payment_method,
            issuing_cashier_id=issuing_cashier_id,
            issued_at=now,
        )
