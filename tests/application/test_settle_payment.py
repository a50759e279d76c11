"""Integration tests for the SettlePayment use case.

Covers cash and QR settlement, invoice issuance on success, and the
exactly-once guarantee under concurrent attempts.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from dinepay.application.create_order import CreateOrderHandler
from dinepay.application.dto import OrderLineSpec
from dinepay.application.edit_order_lines import EditOrderLinesHandler
from dinepay.application.notifications import NotificationEmitter
from dinepay.application.order_locks import OrderLockRegistry
from dinepay.application.settle_payment import SettlePaymentHandler
from dinepay.domain.exceptions import (
    AlreadySettledError,
    ConcurrencyConflictError,
    InsufficientPaymentError,
    InvalidTransitionError,
    InvoiceIssuanceError,
    OrderNotFoundError,
    PaymentDeclinedError,
)
from dinepay.domain.gateway.payment_verifier import VerificationOutcome
from dinepay.domain.model.lifecycle import OrderStatus, PaymentStatus
from dinepay.domain.model.order import OrderOrigin, PaymentMethod
from dinepay.domain.service.invoice_coordinator import InvoiceIssuanceCoordinator
from dinepay.domain.service.payment_settlement_service import PaymentSettlementService
from tests.fakes import (
    FailingNotificationSink,
    FakeInvoiceRepository,
    FakeMenuRepository,
    FakeOrderRepository,
    FakePaymentVerifier,
    RecordingNotificationSink,
    standard_menu,
)


class Env:
    """Wires a SettlePaymentHandler over in-memory fakes."""

    def __init__(self, verifier=None, sink=None, invoice_repo=None) -> None:
        self.order_repo = FakeOrderRepository()
        self.menu_repo = FakeMenuRepository(standard_menu())
        self.invoice_repo = invoice_repo or FakeInvoiceRepository()
        self.verifier = verifier or FakePaymentVerifier()
        self.sink = sink or RecordingNotificationSink()
        self.locks = OrderLockRegistry()
        emitter = NotificationEmitter(self.sink)
        self.create = CreateOrderHandler(self.order_repo, self.menu_repo)
        self.edit = EditOrderLinesHandler(self.order_repo, self.menu_repo, self.locks)
        self.settle = SettlePaymentHandler(
            self.order_repo,
            PaymentSettlementService(self.verifier),
            InvoiceIssuanceCoordinator(self.invoice_repo),
            self.locks,
            emitter,
            verify_timeout=1.0,
        )

    def new_order(self) -> str:
        """Subtotal 25000, tax 2500, total 27500."""
        return self.create.handle(
            OrderOrigin.CASHIER_ASSISTED,
            "Budi",
            [OrderLineSpec("1", 2), OrderLineSpec("2", 1)],
        ).order_number


class TestCashSettlement:

    def test_over_tender_returns_change_and_issues_invoice(self):
        env = Env()
        number = env.new_order()

        result = env.settle.handle(number, PaymentMethod.CASH, "30000", cashier_id="cashier-7")

        assert result.amount_due == "27,500.00"
        assert result.amount_tendered == "30,000.00"
        assert result.change == "2,500.00"
        assert result.payment_method == "CASH"

        order = env.order_repo.get_by_number(number)
        assert order.status == OrderStatus.CONFIRMED
        assert order.payment_status == PaymentStatus.PAID
        assert order.payment_method == PaymentMethod.CASH

        invoice = env.invoice_repo.get_by_order_number(number)
        assert invoice.invoice_number == result.invoice_number
        assert str(invoice.final_amount) == "27,500.00"
        assert invoice.issuing_cashier_id == "cashier-7"

    def test_exact_tender(self):
        env = Env()
        result = env.settle.handle(env.new_order(), PaymentMethod.CASH, "27500")
        assert result.change == "0.00"

    def test_insufficient_tender_leaves_order_open(self):
        env = Env()
        number = env.new_order()

        with pytest.raises(InsufficientPaymentError):
            env.settle.handle(number, PaymentMethod.CASH, "20000")

        order = env.order_repo.get_by_number(number)
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.UNPAID
        assert env.invoice_repo.list_all() == []
        # a failed attempt does not lock the order against edits
        env.edit.add_line(number, "2", 1)

    def test_second_settlement_reports_already_settled(self):
        env = Env()
        number = env.new_order()
        env.settle.handle(number, PaymentMethod.CASH, "30000")

        with pytest.raises(AlreadySettledError):
            env.settle.handle(number, PaymentMethod.CASH, "30000")
        assert len(env.invoice_repo.list_all()) == 1

    def test_unknown_order(self):
        with pytest.raises(OrderNotFoundError):
            Env().settle.handle("ORD-NOPE", PaymentMethod.CASH, "1")


class TestQrSettlement:

    def test_confirmed(self):
        env = Env()
        number = env.new_order()
        result = env.settle.handle(number, PaymentMethod.QR_CODE, "rail-token")
        assert result.payment_method == "QR_CODE"
        assert result.amount_tendered == result.amount_due
        assert result.change == "0.00"
        assert env.verifier.tokens == ["rail-token"]

    def test_rejected(self):
        env = Env(verifier=FakePaymentVerifier(VerificationOutcome.REJECTED))
        number = env.new_order()
        with pytest.raises(PaymentDeclinedError):
            env.settle.handle(number, PaymentMethod.QR_CODE, "rail-token")
        assert not env.order_repo.get_by_number(number).is_paid

    def test_timeout_is_declined(self):
        release = threading.Event()
        env = Env(verifier=FakePaymentVerifier(release=release))
        number = env.new_order()
        try:
            with pytest.raises(PaymentDeclinedError, match="timed out"):
                env.settle.handle(number, PaymentMethod.QR_CODE, "tok", timeout=0.05)
        finally:
            release.set()
        assert not env.order_repo.get_by_number(number).is_paid


class TestSettlementPreconditions:

    def test_cancelled_order_cannot_be_settled(self):
        env = Env()
        number = env.new_order()
        order = env.order_repo.get_by_number(number)
        order.cancel()
        env.order_repo.save(order)

        with pytest.raises(InvalidTransitionError):
            env.settle.handle(number, PaymentMethod.CASH, "99999")


class TestConcurrentSettlement:

    @pytest.mark.parametrize("attempts", [2, 8])
    def test_exactly_one_attempt_wins(self, attempts):
        env = Env()
        number = env.new_order()
        start = threading.Barrier(attempts)

        def attempt(i: int):
            start.wait()
            try:
                return env.settle.handle(number, PaymentMethod.CASH, "30000", cashier_id=f"c{i}")
            except AlreadySettledError as exc:
                return exc

        with ThreadPoolExecutor(max_workers=attempts) as pool:
            outcomes = list(pool.map(attempt, range(attempts)))

        wins = [o for o in outcomes if not isinstance(o, Exception)]
        losses = [o for o in outcomes if isinstance(o, AlreadySettledError)]
        assert len(wins) == 1
        assert len(losses) == attempts - 1
        assert len(env.invoice_repo.list_all()) == 1
        assert env.invoice_repo.list_all()[0].invoice_number == wins[0].invoice_number

    def test_mixed_methods_race(self):
        env = Env()
        number = env.new_order()
        start = threading.Barrier(2)

        def pay(method, payload):
            start.wait()
            try:
                return env.settle.handle(number, method, payload)
            except AlreadySettledError as exc:
                return exc

        with ThreadPoolExecutor(max_workers=2) as pool:
            cash = pool.submit(pay, PaymentMethod.CASH, "27500")
            qr = pool.submit(pay, PaymentMethod.QR_CODE, "tok")
            outcomes = [cash.result(), qr.result()]

        assert sum(1 for o in outcomes if isinstance(o, AlreadySettledError)) == 1
        order = env.order_repo.get_by_number(number)
        winner = next(o for o in outcomes if not isinstance(o, Exception))
        assert order.payment_method.value == winner.payment_method


class TestSideEffectFailures:

    def test_failing_sink_does_not_undo_payment(self):
        env = Env(sink=FailingNotificationSink())
        number = env.new_order()
        result = env.settle.handle(number, PaymentMethod.CASH, "30000")
        assert result.change == "2,500.00"
        assert env.order_repo.get_by_number(number).is_paid

    def test_notifies_once_on_success(self):
        env = Env()
        number = env.new_order()
        env.settle.handle(number, PaymentMethod.CASH, "30000")
        assert [o.payment_status for o in env.sink.orders] == ["PAID"]
        assert env.sink.refreshes == 1

    def test_invoice_failure_keeps_payment(self):
        class BrokenInvoices(FakeInvoiceRepository):
            def add(self, invoice):
                raise ConcurrencyConflictError("invoice store unavailable")

        env = Env(invoice_repo=BrokenInvoices())
        number = env.new_order()

        with pytest.raises(InvoiceIssuanceError, match="was recorded"):
            env.settle.handle(number, PaymentMethod.CASH, "30000")
        assert env.order_repo.get_by_number(number).is_paid
        with pytest.raises(AlreadySettledError):
            env.settle.handle(number, PaymentMethod.CASH, "30000")
