"""CLI commands for invoices."""

from __future__ import annotations

import click

from dinepay.application.dto import InvoiceDTO
from dinepay.application.issue_invoice import (
    GenerateMissingInvoicesHandler,
    IssueInvoiceHandler,
    ShowInvoiceHandler,
)
from dinepay.domain.exceptions import DomainException
from dinepay.infrastructure.bootstrap import (
    invoice_coordinator,
    order_locks,
    order_repository,
)


def _display_invoice(dto: InvoiceDTO) -> None:
    click.echo(f"Invoice {dto.invoice_number}  (order {dto.order_number})")
    click.echo(f"Issued:   {dto.issued_at}")
    click.echo(f"Method:   {dto.payment_method}")
    if dto.issuing_cashier_id:
        click.echo(f"Cashier:  {dto.issuing_cashier_id}")
    click.echo(f"  {'Subtotal':<12} {dto.total_amount:>16}")
    click.echo(f"  {'Tax':<12} {dto.tax_amount:>16}")
    click.echo(f"  {'Total':<12} {dto.final_amount:>16}")


@click.command("issue")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.option("--cashier", "cashier_id", default=None, help="Issuing cashier.")
def invoice_issue(order_number: str, cashier_id: str | None) -> None:
    """Issue (or re-print) the invoice of a paid order."""
    handler = IssueInvoiceHandler(
        order_repo=order_repository(),
        invoices=invoice_coordinator(),
        locks=order_locks(),
    )

    try:
        dto = handler.handle(order_number, cashier_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_invoice(dto)


@click.command("show")
@click.option("--number", "order_number", required=True, help="Order number.")
def invoice_show(order_number: str) -> None:
    """Show the invoice issued for an order."""
    handler = ShowInvoiceHandler(invoices=invoice_coordinator())

    try:
        dto = handler.handle(order_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_invoice(dto)


@click.command("sweep")
def invoice_sweep() -> None:
    """Issue invoices for paid orders that are missing one."""
    handler = GenerateMissingInvoicesHandler(
        order_repo=order_repository(),
        invoices=invoice_coordinator(),
        locks=order_locks(),
    )

    try:
        issued = handler.handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not issued:
        click.echo("Every paid order already has an invoice.")
        return
    for dto in issued:
        click.echo(f"Issued {dto.invoice_number} for order {dto.order_number}")
