"""Application service: Settle Payment use case.

Runs entirely under the order's lock, so of any number of concurrent
attempts on one order exactly one moves it UNPAID -> PAID and every
other one observes AlreadySettledError.

Steps:
1. Load the order.
2. Let the settlement service authorize the attempt (cash or QR).
3. Mark the order PAID/CONFIRMED and save it (version-checked).
4. Issue the invoice before returning.
5. Notify listeners (best effort).
"""

from __future__ import annotations

import logging

from dinepay.application.dto import SettlementResult
from dinepay.application.notifications import NotificationEmitter
from dinepay.application.order_locks import OrderLockRegistry
from dinepay.domain.exceptions import (
    DomainException,
    InvoiceIssuanceError,
    OrderNotFoundError,
)
from dinepay.domain.model.order import PaymentMethod
from dinepay.domain.repository.order_repository import OrderRepository
from dinepay.domain.service.invoice_coordinator import InvoiceIssuanceCoordinator
from dinepay.domain.service.payment_settlement_service import PaymentSettlementService

logger = logging.getLogger("dinepay.settlement")

DEFAULT_VERIFY_TIMEOUT = 5.0


class SettlePaymentHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        settlement: PaymentSettlementService,
        invoices: InvoiceIssuanceCoordinator,
        locks: OrderLockRegistry,
        notifications: NotificationEmitter | None = None,
        verify_timeout: float = DEFAULT_VERIFY_TIMEOUT,
    ) -> None:
        self._order_repo = order_repo
        self._settlement = settlement
        self._invoices = invoices
        self._locks = locks
        self._notifications = notifications or NotificationEmitter()
        self._verify_timeout = verify_timeout

    def handle(
        self,
        order_number: str,
        method: PaymentMethod,
        payload: object,
        cashier_id: str | None = None,
        timeout: float | None = None,
    ) -> SettlementResult:
        """Settle *order_number* with a cash amount or a QR confirmation token."""
        with self._locks.hold(order_number):
            order = self._order_repo.get_by_number(order_number)
            if order is None:
                raise OrderNotFoundError(order_number)

            receipt = self._settlement.authorize(
                order,
                method,
                payload,
                timeout=timeout if timeout is not None else self._verify_timeout,
            )

            order.mark_paid(receipt.method)
            self._order_repo.save(order)
            logger.info(
                "Order %s settled by %s: due %s, tendered %s, change %s",
                order_number, receipt.method.value, receipt.amount_due,
                receipt.amount_tendered, receipt.change,
            )

            try:
                invoice = self._invoices.ensure_invoice(order, cashier_id)
            except DomainException as exc:
                logger.error("Order %s paid but invoice issuance failed: %s", order_number, exc)
                raise InvoiceIssuanceError(
                    f"Payment for order {order_number} was recorded but the "
                    f"invoice could not be issued: {exc}"
                ) from exc

        self._notifications.order_changed(order)
        return SettlementResult(
            order_number=order_number,
            payment_method=receipt.method.value,
            amount_due=str(receipt.amount_due),
            amount_tendered=str(receipt.amount_tendered),
            change=str(receipt.change),
            invoice_number=invoice.invoice_number,
        )
