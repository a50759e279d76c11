"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import json
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from dinepay.domain.exceptions import ConcurrencyConflictError
from dinepay.domain.model.lifecycle import OrderStatus, PaymentStatus
from dinepay.domain.model.order import Order, OrderLine, OrderOrigin, PaymentMethod
from dinepay.domain.model.value_objects import Money, Quantity
from dinepay.domain.repository.order_repository import OrderRepository


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def get_by_number(self, order_number: str) -> Order | None:
        for raw in self._load_raw():
            if raw["order_number"] == order_number:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def list_by_date_range(self, start: datetime, end: datetime) -> list[Order]:
        return [o for o in self.list_all() if start <= o.created_at <= end]

    def list_paid(self) -> list[Order]:
        return [
            self._to_domain(raw)
            for raw in self._load_raw()
            if raw["payment_status"] == PaymentStatus.PAID.value
        ]

    def save(self, order: Order) -> None:
        # Read-compare-write must not interleave with another save.
        with self._lock:
            orders = self._load_raw()

            index = None
            for i, raw in enumerate(orders):
                if raw["order_number"] == order.order_number:
                    index = i
                    break

            stored_version = orders[index]["version"] if index is not None else 0
            if index is None and order.version != 0:
                raise ConcurrencyConflictError(
                    f"Order {order.order_number} no longer exists in the store"
                )
            if index is not None and stored_version != order.version:
                raise ConcurrencyConflictError(
                    f"Order {order.order_number} was modified concurrently "
                    f"(stored v{stored_version}, loaded v{order.version})"
                )

            raw = self._to_raw(order)
            raw["version"] = order.version + 1
            if index is None:
                orders.append(raw)
            else:
                orders[index] = raw
            self._persist_raw(orders)
            order.version += 1

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "order_number": order.order_number,
            "origin": order.origin.value,
            "customer_name": order.customer_name,
            "status": order.status.value,
            "payment_status": order.payment_status.value,
            "payment_method": order.payment_method.value if order.payment_method else None,
            "tax_rate": str(order.tax_rate),
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "paid_at": order.paid_at.isoformat() if order.paid_at else None,
            "version": order.version,
            "lines": [
                {
                    "menu_item_id": line.menu_item_id,
                    "menu_item_name": line.menu_item_name,
                    "quantity": line.quantity.value,
                    "unit_price": str(line.unit_price.amount),
                }
                for line in order.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        lines = [
            OrderLine(
                menu_item_id=i["menu_item_id"],
                menu_item_name=i["menu_item_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unit_price"])),
            )
            for i in raw["lines"]
        ]
        return Order(
            order_number=raw["order_number"],
            origin=OrderOrigin(raw["origin"]),
            customer_name=raw["customer_name"],
            lines=lines,
            status=OrderStatus(raw["status"]),
            payment_status=PaymentStatus(raw["payment_status"]),
            payment_method=(
                PaymentMethod(raw["payment_method"]) if raw.get("payment_method") else None
            ),
            tax_rate=Decimal(raw["tax_rate"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
            paid_at=datetime.fromisoformat(raw["paid_at"]) if raw.get("paid_at") else None,
            version=raw.get("version", 0),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, orders: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(orders, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
