"""Application services: invoice issuance, lookup and the catch-up sweep.

Every path goes through ``InvoiceIssuanceCoordinator.ensure_invoice``
under the order's lock, so no combination of retries and sweeps can
produce a second invoice for an order.
"""

from __future__ import annotations

import logging

from dinepay.application.dto import InvoiceDTO, invoice_to_dto
from dinepay.application.order_locks import OrderLockRegistry
from dinepay.domain.exceptions import InvoiceNotFoundError, OrderNotFoundError
from dinepay.domain.repository.order_repository import OrderRepository
from dinepay.domain.service.invoice_coordinator import InvoiceIssuanceCoordinator

logger = logging.getLogger("dinepay.invoices")


class IssueInvoiceHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        invoices: InvoiceIssuanceCoordinator,
        locks: OrderLockRegistry,
    ) -> None:
        self._order_repo = order_repo
        self._invoices = invoices
        self._locks = locks

    def handle(self, order_number: str, cashier_id: str | None = None) -> InvoiceDTO:
        """Return the order's invoice, issuing it if the order is paid."""
        with self._locks.hold(order_number):
            order = self._order_repo.get_by_number(order_number)
            if order is None:
                raise OrderNotFoundError(order_number)
            invoice = self._invoices.ensure_invoice(order, cashier_id)
        return invoice_to_dto(invoice)


class GenerateMissingInvoicesHandler:
    """Issue invoices for paid orders that somehow lack one.

    Safe to run any number of times: orders that already have an
    invoice are left alone and not counted.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        invoices: InvoiceIssuanceCoordinator,
        locks: OrderLockRegistry,
    ) -> None:
        self._order_repo = order_repo
        self._invoices = invoices
        self._locks = locks

    def handle(self) -> list[InvoiceDTO]:
        issued: list[InvoiceDTO] = []
        for paid in self._order_repo.list_paid():
            with self._locks.hold(paid.order_number):
                if self._invoices.find_invoice(paid.order_number) is not None:
                    continue
                # Reload under the lock; the listed copy may be stale.
                order = self._order_repo.get_by_number(paid.order_number)
                if order is None:
                    continue
                issued.append(invoice_to_dto(self._invoices.ensure_invoice(order)))

        logger.info("Invoice sweep issued %d missing invoice(s)", len(issued))
        return issued


class ShowInvoiceHandler:

    def __init__(self, invoices: InvoiceIssuanceCoordinator) -> None:
        self._invoices = invoices

    def handle(self, order_number: str) -> InvoiceDTO:
        invoice = self._invoices.find_invoice(order_number)
        if invoice is None:
            raise InvoiceNotFoundError(order_number)
        return invoice_to_dto(invoice)
