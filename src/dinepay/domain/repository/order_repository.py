"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from dinepay.domain.model.order import Order


class OrderRepository(ABC):
    """Key-based store for orders, keyed by order number.

    ``save`` is a compare-and-swap on ``Order.version``: it must raise
    ConcurrencyConflictError when the stored version differs from the
    one the caller loaded (or when a new order's number is taken), and
    bump ``order.version`` on success.
    """

    @abstractmethod
    def get_by_number(self, order_number: str) -> Order | None:
        """Return an order by its number, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, oldest first."""

    @abstractmethod
    def list_by_date_range(self, start: datetime, end: datetime) -> list[Order]:
        """Return orders created between *start* and *end* inclusive."""

    @abstractmethod
    def list_paid(self) -> list[Order]:
        """Return every order whose payment has been settled."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order (version-checked)."""
