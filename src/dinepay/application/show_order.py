"""Application services: order queries."""

from __future__ import annotations

from datetime import datetime, timezone

from dinepay.application.dto import OrderDTO, order_to_dto
from dinepay.domain.exceptions import OrderNotFoundError, ValidationError
from dinepay.domain.repository.order_repository import OrderRepository


def utc_range(start: datetime, end: datetime) -> tuple[datetime, datetime]:
    """Validate a date range; naive datetimes are taken to be UTC."""
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    if end.tzinfo is None:
        end = end.replace(tzinfo=timezone.utc)
    if end < start:
        raise ValidationError("End of the date range is before its start")
    return start, end


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_number: str) -> OrderDTO:
        order = self._order_repo.get_by_number(order_number)
        if order is None:
            raise OrderNotFoundError(order_number)
        return order_to_dto(order)


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, start: datetime, end: datetime) -> list[OrderDTO]:
        """Orders created between *start* and *end* inclusive, oldest first."""
        start, end = utc_range(start, end)
        orders = self._order_repo.list_by_date_range(start, end)
        return [order_to_dto(o) for o in sorted(orders, key=lambda o: o.created_at)]
