"""JSON-file-backed implementation of InvoiceRepository (append-only)."""

from __future__ import annotations

import json
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from dinepay.domain.exceptions import ConcurrencyConflictError
from dinepay.domain.model.invoice import Invoice
from dinepay.domain.model.order import PaymentMethod
from dinepay.domain.model.value_objects import Money
from dinepay.domain.repository.invoice_repository import InvoiceRepository


class JsonInvoiceRepository(InvoiceRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._ensure_file()

    # --- InvoiceRepository interface ------------------------------------------

    def get_by_order_number(self, order_number: str) -> Invoice | None:
        for raw in self._load_raw():
            if raw["order_number"] == order_number:
                return self._to_domain(raw)
        return None

    def get_by_invoice_number(self, invoice_number: str) -> Invoice | None:
        for raw in self._load_raw():
            if raw["invoice_number"] == invoice_number:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Invoice]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def add(self, invoice: Invoice) -> None:
        with self._lock:
            records = self._load_raw()
            for raw in records:
                if raw["order_number"] == invoice.order_number:
                    raise ConcurrencyConflictError(
                        f"Order {invoice.order_number} already has invoice "
                        f"{raw['invoice_number']}"
                    )
                if raw["invoice_number"] == invoice.invoice_number:
                    raise ConcurrencyConflictError(
                        f"Invoice number {invoice.invoice_number} is already taken"
                    )
            records.append(self._to_raw(invoice))
            self._persist_raw(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(invoice: Invoice) -> dict:
        return {
            "invoice_number": invoice.invoice_number,
            "order_number": invoice.order_number,
            "total_amount": str(invoice.total_amount.amount),
            "tax_amount": str(invoice.tax_amount.amount),
            "final_amount": str(invoice.final_amount.amount),
            "payment_method": invoice.payment_method.value,
            "issuing_cashier_id": invoice.issuing_cashier_id,
            "issued_at": invoice.issued_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Invoice:
        return Invoice(
            invoice_number=raw["invoice_number"],
            order_number=raw["order_number"],
            total_amount=Money(Decimal(raw["total_amount"])),
            tax_amount=Money(Decimal(raw["tax_amount"])),
            final_amount=Money(Decimal(raw["final_amount"])),
            payment_method=PaymentMethod(raw["payment_method"]),
            issuing_cashier_id=raw.get("issuing_cashier_id"),
            issued_at=datetime.fromisoformat(raw["issued_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(records, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
