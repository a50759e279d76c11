"""Integration tests for invoice issuance, lookup and the catch-up sweep."""

import pytest

from dinepay.application.create_order import CreateOrderHandler
from dinepay.application.dto import OrderLineSpec
from dinepay.application.issue_invoice import (
    GenerateMissingInvoicesHandler,
    IssueInvoiceHandler,
    ShowInvoiceHandler,
)
from dinepay.application.order_locks import OrderLockRegistry
from dinepay.domain.exceptions import (
    InvoiceNotFoundError,
    OrderNotFoundError,
    OrderNotPaidError,
)
from dinepay.domain.model.order import OrderOrigin, PaymentMethod
from dinepay.domain.service.invoice_coordinator import InvoiceIssuanceCoordinator
from tests.fakes import (
    FakeInvoiceRepository,
    FakeMenuRepository,
    FakeOrderRepository,
    standard_menu,
)


class Env:

    def __init__(self) -> None:
        self.order_repo = FakeOrderRepository()
        self.invoice_repo = FakeInvoiceRepository()
        coordinator = InvoiceIssuanceCoordinator(self.invoice_repo)
        locks = OrderLockRegistry()
        self.create = CreateOrderHandler(self.order_repo, FakeMenuRepository(standard_menu()))
        self.issue = IssueInvoiceHandler(self.order_repo, coordinator, locks)
        self.sweep = GenerateMissingInvoicesHandler(self.order_repo, coordinator, locks)
        self.show = ShowInvoiceHandler(coordinator)

    def order(self, paid: bool) -> str:
        """An order whose payment was recorded without going through settlement."""
        number = self.create.handle(
            OrderOrigin.CASHIER_ASSISTED, "Budi", [OrderLineSpec("1", 2), OrderLineSpec("2", 1)]
        ).order_number
        if paid:
            order = self.order_repo.get_by_number(number)
            order.mark_paid(PaymentMethod.QR_CODE)
            self.order_repo.save(order)
        return number


class TestIssueInvoice:

    def test_issue_for_paid_order(self):
        env = Env()
        number = env.order(paid=True)
        dto = env.issue.handle(number, cashier_id="cashier-1")
        assert dto.order_number == number
        assert dto.total_amount == "25,000.00"
        assert dto.tax_amount == "2,500.00"
        assert dto.final_amount == "27,500.00"
        assert dto.payment_method == "QR_CODE"
        assert dto.issuing_cashier_id == "cashier-1"

    def test_issue_twice_returns_same_invoice(self):
        env = Env()
        number = env.order(paid=True)
        first = env.issue.handle(number)
        second = env.issue.handle(number)
        assert first.invoice_number == second.invoice_number
        assert len(env.invoice_repo.list_all()) == 1

    def test_unpaid_order_rejected(self):
        env = Env()
        with pytest.raises(OrderNotPaidError):
            env.issue.handle(env.order(paid=False))

    def test_unknown_order(self):
        with pytest.raises(OrderNotFoundError):
            Env().issue.handle("ORD-NOPE")


class TestShowInvoice:

    def test_show_existing(self):
        env = Env()
        number = env.order(paid=True)
        issued = env.issue.handle(number)
        assert env.show.handle(number) == issued

    def test_show_missing(self):
        env = Env()
        with pytest.raises(InvoiceNotFoundError):
            env.show.handle(env.order(paid=True))


class TestGenerateMissingInvoices:

    def test_sweep_covers_only_paid_orders_without_invoice(self):
        env = Env()
        already = env.order(paid=True)
        env.issue.handle(already)
        missing = env.order(paid=True)
        env.order(paid=False)

        issued = env.sweep.handle()

        assert [dto.order_number for dto in issued] == [missing]
        assert len(env.invoice_repo.list_all()) == 2

    def test_sweep_is_idempotent(self):
        env = Env()
        env.order(paid=True)
        env.order(paid=True)
        assert len(env.sweep.handle()) == 2
        assert env.sweep.handle() == []
        assert len(env.invoice_repo.list_all()) == 2
