"""Application service: build the text a payment QR code encodes.

Format: ``order_number=<n>&amount=<final total>&merchant=<name>``.
Rendering it as an image is left to the presentation layer.
"""

from __future__ import annotations

from dinepay.application.dto import PaymentRequestDTO
from dinepay.domain.exceptions import AlreadySettledError, OrderNotFoundError
from dinepay.domain.model import lifecycle
from dinepay.domain.model.lifecycle import Trigger
from dinepay.domain.repository.order_repository import OrderRepository


class PaymentRequestHandler:

    def __init__(self, order_repo: OrderRepository, merchant: str) -> None:
        self._order_repo = order_repo
        self._merchant = merchant

    def handle(self, order_number: str) -> PaymentRequestDTO:
        order = self._order_repo.get_by_number(order_number)
        if order is None:
            raise OrderNotFoundError(order_number)
        if order.is_paid:
            raise AlreadySettledError(order_number)
        lifecycle.check_transition(order.status, Trigger.SETTLE)

        amount = f"{order.total.amount:.2f}"
        return PaymentRequestDTO(
            order_number=order_number,
            amount=amount,
            payload=f"order_number={order_number}&amount={amount}&merchant={self._merchant}",
        )
