"""Application service: add, remove and re-quantify lines on a PENDING order."""

from __future__ import annotations

from collections.abc import Callable

from dinepay.application.create_order import price_line
from dinepay.application.dto import OrderDTO, OrderLineSpec, order_to_dto
from dinepay.application.notifications import NotificationEmitter
from dinepay.application.order_locks import OrderLockRegistry
from dinepay.domain.exceptions import OrderNotFoundError
from dinepay.domain.model.order import Order
from dinepay.domain.repository.menu_repository import MenuRepository
from dinepay.domain.repository.order_repository import OrderRepository


class EditOrderLinesHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        menu_repo: MenuRepository,
        locks: OrderLockRegistry,
        notifications: NotificationEmitter | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._menu_repo = menu_repo
        self._locks = locks
        self._notifications = notifications or NotificationEmitter()

    def add_line(self, order_number: str, menu_item_id: str, quantity: int) -> OrderDTO:
        """Add an item at today's menu price (merged if already on the order)."""
        def add(order: Order) -> None:
            order.ensure_editable()
            order.add_line(
                price_line(self._menu_repo, OrderLineSpec(menu_item_id, quantity))
            )

        return self._edit(order_number, add)

    def remove_line(self, order_number: str, menu_item_id: str) -> OrderDTO:
        return self._edit(order_number, lambda order: order.remove_line(menu_item_id))

    def set_quantity(self, order_number: str, menu_item_id: str, quantity: int) -> OrderDTO:
        return self._edit(
            order_number, lambda order: order.set_quantity(menu_item_id, quantity)
        )

    def _edit(self, order_number: str, change: Callable[[Order], None]) -> OrderDTO:
        with self._locks.hold(order_number):
            order = self._order_repo.get_by_number(order_number)
            if order is None:
                raise OrderNotFoundError(order_number)
            change(order)
            self._order_repo.save(order)

        self._notifications.order_changed(order, refresh_dashboard=False)
        return order_to_dto(order)
