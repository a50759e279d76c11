"""Application service: sales summary over a date range.

Revenue counts each paid order once, at its final (tax-inclusive)
amount.  Top items are ranked by quantity sold on paid orders.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime

from dinepay.application.dto import SalesReportDTO, TopItemDTO
from dinepay.application.show_order import utc_range
from dinepay.domain.model.lifecycle import OrderStatus
from dinepay.domain.model.value_objects import Money
from dinepay.domain.repository.order_repository import OrderRepository

TOP_ITEMS_LIMIT = 5


class SalesReportHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(
        self,
        start: datetime,
        end: datetime,
        top_limit: int = TOP_ITEMS_LIMIT,
    ) -> SalesReportDTO:
        start, end = utc_range(start, end)

        orders = self._order_repo.list_by_date_range(start, end)
        paid = [o for o in orders if o.is_paid]

        revenue = Money.zero()
        tax = Money.zero()
        quantities: dict[str, int] = defaultdict(int)
        takings: dict[str, Money] = defaultdict(Money.zero)
        for order in paid:
            revenue = revenue + order.total
            tax = tax + order.tax
            for line in order.lines:
                quantities[line.menu_item_name] += line.quantity.value
                takings[line.menu_item_name] = takings[line.menu_item_name] + line.line_total

        ranked = sorted(quantities.items(), key=lambda kv: (-kv[1], kv[0]))[:top_limit]

        return SalesReportDTO(
            start=start.isoformat(timespec="seconds"),
            end=end.isoformat(timespec="seconds"),
            total_orders=len(orders),
            pending_orders=sum(1 for o in orders if o.status == OrderStatus.PENDING),
            paid_orders=len(paid),
            cancelled_orders=sum(1 for o in orders if o.status == OrderStatus.CANCELLED),
            revenue=str(revenue),
            tax_collected=str(tax),
            top_items=[
                TopItemDTO(name=name, quantity=qty, revenue=str(takings[name]))
                for name, qty in ranked
            ],
        )
