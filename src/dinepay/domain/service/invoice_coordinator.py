"""Domain service: Invoice Issuance Coordinator.

The single path through which invoices come into existence.  Both the
post-payment issuance and the "generate missing invoices" sweep call
``ensure_invoice``, so the one-invoice-per-order rule is checked in
exactly one place.
"""

from __future__ import annotations

import logging

from dinepay.domain.exceptions import ConcurrencyConflictError, OrderNotPaidError
from dinepay.domain.model.invoice import Invoice
from dinepay.domain.model.order import Order
from dinepay.domain.repository.invoice_repository import InvoiceRepository

logger = logging.getLogger("dinepay.invoices")


class InvoiceIssuanceCoordinator:

    def __init__(self, invoice_repo: InvoiceRepository) -> None:
        self._invoice_repo = invoice_repo

    def ensure_invoice(self, order: Order, issuing_cashier_id: str | None = None) -> Invoice:
        """Return the order's invoice, issuing it on first request.

        Idempotent: an existing invoice is returned unchanged, whoever
        asked for it first.
        """
        existing = self._invoice_repo.get_by_order_number(order.order_number)
        if existing is not None:
            return existing

        if not order.is_paid:
            raise OrderNotPaidError(order.order_number)

        invoice = Invoice.issue(order, issuing_cashier_id)
        try:
            self._invoice_repo.add(invoice)
        except ConcurrencyConflictError:
            # Another writer issued one between our read and our insert.
            winner = self._invoice_repo.get_by_order_number(order.order_number)
            if winner is None:
                raise
            return winner

        logger.info(
            "Issued invoice %s for order %s (%s)",
            invoice.invoice_number, order.order_number, invoice.final_amount,
        )
        return invoice

    def find_invoice(self, order_number: str) -> Invoice | None:
        return self._invoice_repo.get_by_order_number(order_number)
