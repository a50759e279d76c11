"""Application service: put an item on the menu (seeding for local use)."""

from __future__ import annotations

from dinepay.domain.exceptions import ValidationError
from dinepay.domain.model.menu_item import MenuItem
from dinepay.domain.model.value_objects import Money
from dinepay.domain.repository.menu_repository import MenuRepository


class AddMenuItemHandler:

    def __init__(self, menu_repo: MenuRepository) -> None:
        self._menu_repo = menu_repo

    def handle(
        self,
        menu_item_id: str,
        name: str,
        price: str,
        promo_price: str | None = None,
        available: bool = True,
    ) -> MenuItem:
        """Add a new item to the menu."""
        if not menu_item_id or not menu_item_id.strip():
            raise ValidationError("Menu item id is required")
        if not name or not name.strip():
            raise ValidationError("Menu item name is required")

        if self._menu_repo.get_by_id(menu_item_id.strip()) is not None:
            raise ValidationError(f"Menu item '{menu_item_id}' already exists")

        regular = Money.of(price)
        if regular.amount <= 0:
            raise ValidationError("Menu price must be greater than zero")

        item = MenuItem(
            id=menu_item_id.strip(),
            name=name.strip(),
            price=regular,
            available=available,
            promo_price=Money.of(promo_price) if promo_price is not None else None,
        )
        self._menu_repo.save(item)
        return item
