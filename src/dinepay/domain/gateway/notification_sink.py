"""Gateway to the real-time push channel (cashier dashboards, customer screens)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class NotificationSink(ABC):
    """Fire-and-forget receiver of order change events.

    Implementations may fail; the engine never lets that roll back an
    order or a payment.
    """

    @abstractmethod
    def on_order_changed(self, snapshot: Any) -> None:
        """An order changed; *snapshot* is its read model."""

    @abstractmethod
    def on_dashboard_should_refresh(self) -> None:
        """Aggregate numbers (revenue, pending orders) may have moved."""
