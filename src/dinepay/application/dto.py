"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI (or any other caller) and the
application layer without exposing domain internals.  Money is
rendered as a formatted string, timestamps as ISO-8601.
"""

from __future__ import annotations

from dataclasses import dataclass

from dinepay.domain.model.invoice import Invoice
from dinepay.domain.model.order import Order


@dataclass(frozen=True)
class OrderLineSpec:
    """Input: what the customer asked for (menu item id + quantity)."""

    menu_item_id: str
    quantity: int


@dataclass(frozen=True)
class OrderLineDTO:
    """Output: a single line as displayed to the user."""

    menu_item_id: str
    name: str
    quantity: int
    unit_price: str  # formatted, e.g. "10,000.00"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    order_number: str
    origin: str
    customer_name: str
    status: str
    payment_status: str
    payment_method: str | None
    items: list[OrderLineDTO]
    subtotal: str
    tax: str
    total: str
    item_count: int
    closed: bool
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class InvoiceDTO:
    invoice_number: str
    order_number: str
    total_amount: str
    tax_amount: str
    final_amount: str
    payment_method: str
    issuing_cashier_id: str | None
    issued_at: str


@dataclass(frozen=True)
class SettlementResult:
    """Output of a successful settlement.  Failures are raised instead."""

    order_number: str
    payment_method: str
    amount_due: str
    amount_tendered: str
    change: str
    invoice_number: str


@dataclass(frozen=True)
class PaymentRequestDTO:
    """What a QR code for an order encodes."""

    order_number: str
    amount: str
    payload: str


@dataclass(frozen=True)
class TopItemDTO:
    name: str
    quantity: int
    revenue: str


@dataclass(frozen=True)
class SalesReportDTO:
    start: str
    end: str
    total_orders: int
    pending_orders: int
    paid_orders: int
    cancelled_orders: int
    revenue: str
    tax_collected: str
    top_items: list[TopItemDTO]


# --- Mapping ------------------------------------------------------------------


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        order_number=order.order_number,
        origin=order.origin.value,
        customer_name=order.customer_name,
        status=order.status.value,
        payment_status=order.payment_status.value,
        payment_method=order.payment_method.value if order.payment_method else None,
        items=[
            OrderLineDTO(
                menu_item_id=line.menu_item_id,
                name=line.menu_item_name,
                quantity=line.quantity.value,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
            )
            for line in order.lines
        ],
        subtotal=str(order.subtotal),
        tax=str(order.tax),
        total=str(order.total),
        item_count=order.item_count,
        closed=order.is_closed,
        created_at=order.created_at.isoformat(timespec="seconds"),
        updated_at=order.updated_at.isoformat(timespec="seconds"),
    )


def invoice_to_dto(invoice: Invoice) -> InvoiceDTO:
    return InvoiceDTO(
        invoice_number=invoice.invoice_number,
        order_number=invoice.order_number,
        total_amount=str(invoice.total_amount),
        tax_amount=str(invoice.tax_amount),
        final_amount=str(invoice.final_amount),
        payment_method=invoice.payment_method.value,
        issuing_cashier_id=invoice.issuing_cashier_id,
        issued_at=invoice.issued_at.isoformat(timespec="seconds"),
    )
