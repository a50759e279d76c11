"""Abstract repository for menu lookups.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, SQL, in-memory)
live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from dinepay.domain.model.menu_item import MenuItem


class MenuRepository(ABC):

    @abstractmethod
    def get_by_id(self, menu_item_id: str) -> MenuItem | None:
        """Return a menu item with its current price, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[MenuItem]:
        """Return every item on the menu."""

    @abstractmethod
    def save(self, item: MenuItem) -> None:
        """Persist a new or updated menu item."""
