"""JSON-file-backed implementation of MenuRepository."""

from __future__ import annotations

import json
import threading
from decimal import Decimal
from pathlib import Path

from dinepay.domain.model.menu_item import MenuItem
from dinepay.domain.model.value_objects import Money
from dinepay.domain.repository.menu_repository import MenuRepository


class JsonMenuRepository(MenuRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._ensure_file()

    # --- MenuRepository interface ---------------------------------------------

    def get_by_id(self, menu_item_id: str) -> MenuItem | None:
        return self._load().get(menu_item_id)

    def list_all(self) -> list[MenuItem]:
        return list(self._load().values())

    def save(self, item: MenuItem) -> None:
        with self._lock:
            items = self._load()
            items[item.id] = item
            self._persist(items)

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, MenuItem]:
        with self._lock:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        return {
            entry["id"]: MenuItem(
                id=entry["id"],
                name=entry["name"],
                price=Money(Decimal(entry["price"])),
                available=entry.get("available", True),
                promo_price=(
                    Money(Decimal(entry["promo_price"]))
                    if entry.get("promo_price") is not None
                    else None
                ),
                image_url=entry.get("image_url"),
            )
            for entry in raw
        }

    def _persist(self, items: dict[str, MenuItem]) -> None:
        raw = [
            {
                "id": m.id,
                "name": m.name,
                "price": str(m.price.amount),
                "available": m.available,
                "promo_price": str(m.promo_price.amount) if m.promo_price else None,
                "image_url": m.image_url,
            }
            for m in items.values()
        ]
        self._file_path.write_text(
            json.dumps(raw, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
