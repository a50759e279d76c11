"""Application service: move an order to a new status (cancel, complete).

CONFIRMED is reached only by settling a payment, so asking for it here
is an InvalidTransitionError like any other move outside the lifecycle.
"""

from __future__ import annotations

import logging

from dinepay.application.dto import OrderDTO, order_to_dto
from dinepay.application.notifications import NotificationEmitter
from dinepay.application.order_locks import OrderLockRegistry
from dinepay.domain.exceptions import OrderNotFoundError
from dinepay.domain.model import lifecycle
from dinepay.domain.model.lifecycle import OrderStatus
from dinepay.domain.repository.order_repository import OrderRepository

logger = logging.getLogger("dinepay.orders")


class TransitionOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        locks: OrderLockRegistry,
        notifications: NotificationEmitter | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._locks = locks
        self._notifications = notifications or NotificationEmitter()

    def handle(self, order_number: str, target: OrderStatus) -> OrderDTO:
        with self._locks.hold(order_number):
            order = self._order_repo.get_by_number(order_number)
            if order is None:
                raise OrderNotFoundError(order_number)

            previous = order.status
            order.apply(lifecycle.trigger_for(order.status, target))
            self._order_repo.save(order)

        logger.info(
            "Order %s moved %s -> %s", order_number, previous.value, order.status.value
        )
        self._notifications.order_changed(order)
        return order_to_dto(order)
