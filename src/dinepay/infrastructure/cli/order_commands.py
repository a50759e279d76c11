"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import datetime, time, timezone

import click

from dinepay.application.create_order import CreateOrderHandler
from dinepay.application.dto import OrderDTO, OrderLineSpec
from dinepay.application.edit_order_lines import EditOrderLinesHandler
from dinepay.application.payment_request import PaymentRequestHandler
from dinepay.application.settle_payment import SettlePaymentHandler
from dinepay.application.show_order import ListOrdersHandler, ShowOrderHandler
from dinepay.application.transition_order import TransitionOrderHandler
from dinepay.domain.exceptions import DomainException
from dinepay.domain.model.lifecycle import OrderStatus
from dinepay.domain.model.order import OrderOrigin, PaymentMethod
from dinepay.infrastructure.bootstrap import (
    invoice_coordinator,
    menu_repository,
    notifications,
    order_locks,
    order_repository,
    settings,
    settlement_service,
)

_METHODS = {"cash": PaymentMethod.CASH, "qr": PaymentMethod.QR_CODE}
_TARGETS = {"completed": OrderStatus.COMPLETED, "cancelled": OrderStatus.CANCELLED}


def _parse_items(raw: str) -> list[OrderLineSpec]:
    """Parse '1:2,3:1' (menu id : quantity) into OrderLineSpec list."""
    specs: list[OrderLineSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'MenuId:Quantity'."
            )
        menu_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for menu item '{menu_id}'."
            )
        specs.append(OrderLineSpec(menu_item_id=menu_id.strip(), quantity=qty))
    return specs


def _day_range(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    return (
        datetime.combine(start.date(), time.min, tzinfo=timezone.utc),
        datetime.combine(end.date(), time.max, tzinfo=timezone.utc),
    )


def _edit_handler() -> EditOrderLinesHandler:
    return EditOrderLinesHandler(
        order_repo=order_repository(),
        menu_repo=menu_repository(),
        locks=order_locks(),
        notifications=notifications(),
    )


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    closed = ", closed" if dto.closed else ""
    click.echo(
        f"Order {dto.order_number}  (status={dto.status}, payment={dto.payment_status}{closed})"
    )
    click.echo(f"Customer: {dto.customer_name}  [{dto.origin}]")
    click.echo(f"Created:  {dto.created_at}")
    if dto.payment_method:
        click.echo(f"Paid by:  {dto.payment_method}")
    click.echo()
    click.echo(f"  {'Item':<24} {'Qty':>5} {'Price':>12} {'Total':>12}")
    click.echo(f"  {'-'*56}")
    for item in dto.items:
        click.echo(
            f"  {item.name:<24} {item.quantity:>5} {item.unit_price:>12} {item.line_total:>12}"
        )
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Subtotal':<30} {dto.subtotal:>25}")
    click.echo(f"  {'Tax':<30} {dto.tax:>25}")
    click.echo(f"  {'Total':<30} {dto.total:>25}")


@click.command("create")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--items", required=True, help="Items as 'MenuId:Qty,MenuId:Qty'.")
@click.option(
    "--cashier-assisted", is_flag=True, default=False,
    help="Entered by a cashier rather than the customer.",
)
def order_create(customer: str, items: str, cashier_assisted: bool) -> None:
    """Create a new order."""
    specs = _parse_items(items)

    handler = CreateOrderHandler(
        order_repo=order_repository(),
        menu_repo=menu_repository(),
        notifications=notifications(),
        tax_rate=settings().tax_rate,
    )
    origin = OrderOrigin.CASHIER_ASSISTED if cashier_assisted else OrderOrigin.CUSTOMER_SELF

    try:
        dto = handler.handle(origin=origin, customer_name=customer, line_specs=specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} created")
    _display_order(dto)


@click.command("show")
@click.option("--number", "order_number", required=True, help="Order number.")
def order_show(order_number: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--from", "start", required=True, type=click.DateTime(["%Y-%m-%d"]))
@click.option("--to", "end", required=True, type=click.DateTime(["%Y-%m-%d"]))
def order_list(start: datetime, end: datetime) -> None:
    """List orders created between two dates (inclusive)."""
    handler = ListOrdersHandler(order_repo=order_repository())

    try:
        dtos = handler.handle(*_day_range(start, end))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not dtos:
        click.echo("No orders found.")
        return

    click.echo(f"{'Order':<22} {'Customer':<16} {'Status':<10} {'Payment':<8} {'Total':>12}")
    click.echo("-" * 72)
    for dto in dtos:
        click.echo(
            f"{dto.order_number:<22} {dto.customer_name:<16} {dto.status:<10} "
            f"{dto.payment_status:<8} {dto.total:>12}"
        )


@click.command("add-item")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.option("--item", "menu_item_id", required=True, help="Menu item ID.")
@click.option("--quantity", default=1, show_default=True, type=int)
def order_add_item(order_number: str, menu_item_id: str, quantity: int) -> None:
    """Add an item to a pending order."""
    try:
        dto = _edit_handler().add_line(order_number, menu_item_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _display_order(dto)


@click.command("remove-item")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.option("--item", "menu_item_id", required=True, help="Menu item ID.")
def order_remove_item(order_number: str, menu_item_id: str) -> None:
    """Remove an item from a pending order."""
    try:
        dto = _edit_handler().remove_line(order_number, menu_item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _display_order(dto)


@click.command("set-qty")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.option("--item", "menu_item_id", required=True, help="Menu item ID.")
@click.option("--quantity", required=True, type=int)
def order_set_quantity(order_number: str, menu_item_id: str, quantity: int) -> None:
    """Change the quantity of an item on a pending order."""
    try:
        dto = _edit_handler().set_quantity(order_number, menu_item_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _display_order(dto)


@click.command("pay")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.option("--method", required=True, type=click.Choice(sorted(_METHODS)))
@click.option("--tendered", default=None, help="Cash handed over (cash payments).")
@click.option("--token", default=None, help="Payment rail confirmation (QR payments).")
@click.option("--cashier", "cashier_id", default=None, help="Cashier taking the payment.")
@click.option("--timeout", default=None, type=float, help="Seconds to wait for the rail.")
def order_pay(
    order_number: str,
    method: str,
    tendered: str | None,
    token: str | None,
    cashier_id: str | None,
    timeout: float | None,
) -> None:
    """Settle an order by cash or QR code (issues the invoice)."""
    payment_method = _METHODS[method]
    if payment_method == PaymentMethod.CASH and tendered is None:
        raise click.ClickException("Cash payments require --tendered")
    if payment_method == PaymentMethod.QR_CODE and token is None:
        raise click.ClickException("QR payments require --token")

    handler = SettlePaymentHandler(
        order_repo=order_repository(),
        settlement=settlement_service(),
        invoices=invoice_coordinator(),
        locks=order_locks(),
        notifications=notifications(),
        verify_timeout=settings().verify_timeout_seconds,
    )
    payload = tendered if payment_method == PaymentMethod.CASH else token

    try:
        result = handler.handle(
            order_number, payment_method, payload, cashier_id=cashier_id, timeout=timeout
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {result.order_number} paid by {result.payment_method}.")
    click.echo(f"  Amount due: {result.amount_due}")
    click.echo(f"  Tendered:   {result.amount_tendered}")
    click.echo(f"  Change:     {result.change}")
    click.echo(f"  Invoice:    {result.invoice_number}")


@click.command("status")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.option("--to", "target", required=True, type=click.Choice(sorted(_TARGETS)))
def order_status(order_number: str, target: str) -> None:
    """Complete or cancel an order."""
    handler = TransitionOrderHandler(
        order_repo=order_repository(),
        locks=order_locks(),
        notifications=notifications(),
    )

    try:
        dto = handler.handle(order_number, _TARGETS[target])
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} is now {dto.status}.")


@click.command("payment-request")
@click.option("--number", "order_number", required=True, help="Order number.")
def order_payment_request(order_number: str) -> None:
    """Print the text a payment QR code for the order encodes."""
    handler = PaymentRequestHandler(order_repo=order_repository(), merchant=settings().merchant)

    try:
        dto = handler.handle(order_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Amount: {dto.amount}")
    click.echo(dto.payload)
