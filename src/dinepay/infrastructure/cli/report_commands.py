"""CLI commands for sales reporting."""

from __future__ import annotations

from datetime import datetime, time, timezone

import click

from dinepay.application.sales_report import SalesReportHandler
from dinepay.domain.exceptions import DomainException
from dinepay.infrastructure.bootstrap import order_repository


@click.command("sales")
@click.option("--from", "start", required=True, type=click.DateTime(["%Y-%m-%d"]))
@click.option("--to", "end", required=True, type=click.DateTime(["%Y-%m-%d"]))
def report_sales(start: datetime, end: datetime) -> None:
    """Summarize orders and revenue between two dates (inclusive)."""
    handler = SalesReportHandler(order_repo=order_repository())

    try:
        report = handler.handle(
            datetime.combine(start.date(), time.min, tzinfo=timezone.utc),
            datetime.combine(end.date(), time.max, tzinfo=timezone.utc),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sales {start:%Y-%m-%d} .. {end:%Y-%m-%d}")
    click.echo(f"  Orders:       {report.total_orders}")
    click.echo(f"  Pending:      {report.pending_orders}")
    click.echo(f"  Paid:         {report.paid_orders}")
    click.echo(f"  Cancelled:    {report.cancelled_orders}")
    click.echo(f"  Revenue:      {report.revenue}")
    click.echo(f"  Tax:          {report.tax_collected}")

    if report.top_items:
        click.echo()
        click.echo(f"  {'Top items':<24} {'Qty':>5} {'Revenue':>14}")
        for item in report.top_items:
            click.echo(f"  {item.name:<24} {item.quantity:>5} {item.revenue:>14}")
