"""Application service: turn a customer's cart into a self-service order."""

from __future__ import annotations

from dinepay.application.create_order import CreateOrderHandler
from dinepay.application.dto import OrderDTO, OrderLineSpec
from dinepay.domain.exceptions import ValidationError
from dinepay.domain.model.cart import Cart
from dinepay.domain.model.order import OrderOrigin


class CheckoutCartHandler:

    def __init__(self, create_order: CreateOrderHandler) -> None:
        self._create_order = create_order

    def handle(self, cart: Cart, customer_name: str) -> OrderDTO:
        """Create the order and empty the cart.

        Only menu ids and quantities leave the cart; prices are read
        from the menu again, so a stale cart price is never honoured.
        The cart is left untouched if order creation fails.
        """
        if cart.is_empty:
            raise ValidationError("Cart is empty")

        specs = [
            OrderLineSpec(menu_item_id=menu_item_id, quantity=quantity)
            for menu_item_id, quantity in cart.to_line_requests()
        ]
        dto = self._create_order.handle(OrderOrigin.CUSTOMER_SELF, customer_name, specs)
        cart.clear()
        return dto
