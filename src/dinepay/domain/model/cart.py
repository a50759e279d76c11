"""Cart — what a customer has picked before checking out.

The cart is an explicit value owned by whoever holds the customer's
session; the engine never stores it.  Prices captured here are for
display only: checkout re-reads the menu and ignores them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from dinepay.domain.exceptions import (
    CartItemNotFoundError,
    MenuItemUnavailableError,
    ValidationError,
)
from dinepay.domain.model.menu_item import MenuItem
from dinepay.domain.model.value_objects import DEFAULT_TAX_RATE, Money, Quantity


@dataclass
class CartItem:
    menu_item_id: str
    name: str
    unit_price: Money  # display snapshot, not honoured at checkout
    quantity: Quantity
    image_url: str | None = None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class CartSummary:
    lines: tuple[CartItem, ...]
    subtotal: Money
    tax: Money
    total: Money
    total_item_count: int


@dataclass
class Cart:
    items: dict[str, CartItem] = field(default_factory=dict)

    def add(self, menu_item: MenuItem, quantity: int = 1) -> None:
        """Add *quantity* of an item, merging with what is already there."""
        qty = Quantity(quantity)
        if not menu_item.available:
            raise MenuItemUnavailableError(menu_item.name)

        existing = self.items.get(menu_item.id)
        if existing is not None:
            existing.quantity = existing.quantity + qty
            return
        self.items[menu_item.id] = CartItem(
            menu_item_id=menu_item.id,
            name=menu_item.name,
            unit_price=menu_item.current_price,
            quantity=qty,
            image_url=menu_item.image_url,
        )

    def set_quantity(self, menu_item_id: str, quantity: int) -> None:
        if not isinstance(quantity, int) or quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        self._get(menu_item_id).quantity = Quantity(quantity)

    def remove(self, menu_item_id: str) -> None:
        self._get(menu_item_id)
        del self.items[menu_item_id]

    def clear(self) -> None:
        self.items.clear()

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items.values())

    def summary(self, tax_rate: Decimal = DEFAULT_TAX_RATE) -> CartSummary:
        lines = tuple(self.items.values())
        subtotal = Money.zero()
        for line in lines:
            subtotal = subtotal + line.line_total
        tax = subtotal.apply_rate(tax_rate)
        return CartSummary(
            lines=lines,
            subtotal=subtotal,
            tax=tax,
            total=subtotal + tax,
            total_item_count=self.item_count,
        )

    def to_line_requests(self) -> list[tuple[str, int]]:
        """Flatten to (menu item id, quantity) pairs for order creation."""
        return [(item.menu_item_id, item.quantity.value) for item in self.items.values()]

    def _get(self, menu_item_id: str) -> CartItem:
        item = self.items.get(menu_item_id)
        if item is None:
            raise CartItemNotFoundError(menu_item_id)
        return item
