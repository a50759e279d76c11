"""Integration tests for the sales report."""

from datetime import datetime, timedelta, timezone

import pytest

from dinepay.application.create_order import CreateOrderHandler
from dinepay.application.dto import OrderLineSpec
from dinepay.application.sales_report import SalesReportHandler
from dinepay.domain.exceptions import ValidationError
from dinepay.domain.model.order import OrderOrigin, PaymentMethod
from tests.fakes import FakeMenuRepository, FakeOrderRepository, standard_menu


def _window() -> tuple[datetime, datetime]:
    now = datetime.now(timezone.utc)
    return now - timedelta(hours=1), now + timedelta(hours=1)


@pytest.fixture
def populated():
    order_repo = FakeOrderRepository()
    create = CreateOrderHandler(order_repo, FakeMenuRepository(standard_menu()))

    def order(specs, pay=False, cancel=False):
        number = create.handle(OrderOrigin.CUSTOMER_SELF, "Sari", specs).order_number
        stored = order_repo.get_by_number(number)
        if pay:
            stored.mark_paid(PaymentMethod.CASH)
        if cancel:
            stored.cancel()
        order_repo.save(stored)

    # paid: 2x Nasi Goreng + 1x Es Teh = 27,500.00
    order([OrderLineSpec("1", 2), OrderLineSpec("2", 1)], pay=True)
    # paid: 3x Es Teh = 16,500.00
    order([OrderLineSpec("2", 3)], pay=True)
    order([OrderLineSpec("3", 5)])
    order([OrderLineSpec("1", 9)], cancel=True)
    return SalesReportHandler(order_repo)


class TestSalesReport:

    def test_counts_by_status(self, populated):
        report = populated.handle(*_window())
        assert report.total_orders == 4
        assert report.paid_orders == 2
        assert report.pending_orders == 1
        assert report.cancelled_orders == 1

    def test_revenue_counts_paid_orders_only(self, populated):
        report = populated.handle(*_window())
        assert report.revenue == "44,000.00"
        assert report.tax_collected == "4,000.00"

    def test_top_items_by_quantity(self, populated):
        report = populated.handle(*_window())
        assert [(i.name, i.quantity) for i in report.top_items] == [
            ("Es Teh", 4),
            ("Nasi Goreng", 2),
        ]
        assert report.top_items[0].revenue == "20,000.00"

    def test_top_limit(self, populated):
        report = populated.handle(*_window(), top_limit=1)
        assert len(report.top_items) == 1

    def test_window_outside_orders_is_empty(self, populated):
        start, _ = _window()
        report = populated.handle(start - timedelta(days=2), start - timedelta(days=1))
        assert report.total_orders == 0
        assert report.revenue == "0.00"
        assert report.top_items == []

    def test_reversed_window_rejected(self, populated):
        start, end = _window()
        with pytest.raises(ValidationError):
            populated.handle(end, start)
