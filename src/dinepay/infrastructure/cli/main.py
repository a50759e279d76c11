import click

from dinepay.infrastructure.bootstrap import settings
from dinepay.infrastructure.cli.invoice_commands import (
    invoice_issue,
    invoice_show,
    invoice_sweep,
)
from dinepay.infrastructure.cli.menu_commands import menu_add, menu_list
from dinepay.infrastructure.cli.order_commands import (
    order_add_item,
    order_create,
    order_list,
    order_pay,
    order_payment_request,
    order_remove_item,
    order_set_quantity,
    order_show,
    order_status,
)
from dinepay.infrastructure.cli.report_commands import report_sales
from dinepay.infrastructure.logging_config import configure_logging


@click.group()
@click.option(
    "--log-level", default=None,
    help="Logging level (defaults to DINEPAY_LOG_LEVEL or WARNING).",
)
def cli(log_level: str | None) -> None:
    """DinePay — restaurant orders, payments and invoices"""
    try:
        configure_logging(log_level or settings().log_level)
    except ValueError as exc:
        raise click.ClickException(str(exc))


@cli.group()
def order() -> None:
    """Manage orders and payments."""


@cli.group()
def menu() -> None:
    """Look up menu items."""


@cli.group()
def invoice() -> None:
    """Issue and show invoices."""


@cli.group()
def report() -> None:
    """Sales reports."""


# Register subcommands
order.add_command(order_add_item)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_pay)
order.add_command(order_payment_request)
order.add_command(order_remove_item)
order.add_command(order_set_quantity)
order.add_command(order_show)
order.add_command(order_status)
menu.add_command(menu_add)
menu.add_command(menu_list)
invoice.add_command(invoice_issue)
invoice.add_command(invoice_show)
invoice.add_command(invoice_sweep)
report.add_command(report_sales)
