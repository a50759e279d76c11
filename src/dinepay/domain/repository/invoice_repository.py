"""Abstract repository for issued invoices."""

from __future__ import annotations

from abc import ABC, abstractmethod

from dinepay.domain.model.invoice import Invoice


class InvoiceRepository(ABC):

    @abstractmethod
    def get_by_order_number(self, order_number: str) -> Invoice | None:
        """Return the invoice issued for an order, or None."""

    @abstractmethod
    def get_by_invoice_number(self, invoice_number: str) -> Invoice | None:
        """Return an invoice by its own number, or None."""

    @abstractmethod
    def list_all(self) -> list[Invoice]:
        """Return every issued invoice."""

    @abstractmethod
    def add(self, invoice: Invoice) -> None:
        """Insert an invoice.

        Must raise ConcurrencyConflictError if an invoice already exists
        for the same order; invoices are never replaced.
        """
