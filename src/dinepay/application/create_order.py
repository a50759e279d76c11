"""Application service: Create Order use case.

Orchestrates the flow between the menu lookup and the Order aggregate.
Each line is priced from the menu *as it is now*; any price the caller
may have shown the customer earlier is ignored.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from dinepay.application.dto import OrderDTO, OrderLineSpec, order_to_dto
from dinepay.application.notifications import NotificationEmitter
from dinepay.domain.exceptions import MenuItemNotFoundError, MenuItemUnavailableError
from dinepay.domain.model.order import Order, OrderLine, OrderOrigin
from dinepay.domain.model.value_objects import DEFAULT_TAX_RATE, Quantity
from dinepay.domain.repository.menu_repository import MenuRepository
from dinepay.domain.repository.order_repository import OrderRepository

logger = logging.getLogger("dinepay.orders")


def price_line(menu_repo: MenuRepository, spec: OrderLineSpec) -> OrderLine:
    """Build an OrderLine from the menu's current name and price."""
    item = menu_repo.get_by_id(spec.menu_item_id)
    if item is None:
        raise MenuItemNotFoundError(spec.menu_item_id)
    if not item.available:
        raise MenuItemUnavailableError(item.name)
    return OrderLine(
        menu_item_id=item.id,
        menu_item_name=item.name,
        quantity=Quantity(spec.quantity),
        unit_price=item.current_price,  # <-- price snapshot
    )


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        menu_repo: MenuRepository,
        notifications: NotificationEmitter | None = None,
        tax_rate: Decimal = DEFAULT_TAX_RATE,
    ) -> None:
        self._order_repo = order_repo
        self._menu_repo = menu_repo
        self._notifications = notifications or NotificationEmitter()
        self._tax_rate = tax_rate

    def handle(
        self,
        origin: OrderOrigin,
        customer_name: str,
        line_specs: list[OrderLineSpec],
    ) -> OrderDTO:
        """Create a new PENDING, UNPAID order.

        Steps:
        1. Resolve each menu item id (fail if missing or unavailable).
        2. Build OrderLines with *current* prices (snapshot).
        3. Let the Order aggregate validate the rest.
        4. Persist, notify and return a DTO.
        """
        lines = [price_line(self._menu_repo, spec) for spec in line_specs]

        order = Order.create(
            origin=origin,
            customer_name=customer_name,
            lines=lines,
            tax_rate=self._tax_rate,
        )
        self._order_repo.save(order)
        logger.info(
            "Created %s order %s for %s (%d items, total %s)",
            origin.value, order.order_number, order.customer_name,
            order.item_count, order.total,
        )

        self._notifications.order_changed(order)
        return order_to_dto(order)
