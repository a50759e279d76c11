"""CLI commands for the menu (read-only lookups plus local seeding)."""

from __future__ import annotations

import click

from dinepay.application.add_menu_item import AddMenuItemHandler
from dinepay.domain.exceptions import DomainException
from dinepay.infrastructure.bootstrap import menu_repository


@click.command("add")
@click.option("--id", "menu_item_id", required=True, help="Menu item ID.")
@click.option("--name", required=True, help="Menu item name.")
@click.option("--price", required=True, help="Regular price (e.g. 10000).")
@click.option("--promo-price", default=None, help="Promotional price, if any.")
@click.option("--unavailable", is_flag=True, default=False, help="Add as sold out.")
def menu_add(
    menu_item_id: str,
    name: str,
    price: str,
    promo_price: str | None,
    unavailable: bool,
) -> None:
    """Add an item to the menu."""
    handler = AddMenuItemHandler(menu_repo=menu_repository())

    try:
        item = handler.handle(
            menu_item_id=menu_item_id,
            name=name,
            price=price,
            promo_price=promo_price,
            available=not unavailable,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Menu item #{item.id} '{item.name}' added at {item.current_price}")


@click.command("list")
def menu_list() -> None:
    """List every menu item with its current price."""
    items = menu_repository().list_all()

    if not items:
        click.echo("No menu items found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Price':>12} {'Available':>10}")
    click.echo("-" * 55)
    for m in items:
        flag = "yes" if m.available else "no"
        click.echo(f"{m.id:<6} {m.name:<24} {str(m.current_price):>12} {flag:>10}")
