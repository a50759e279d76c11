"""Tests for the JSON-file repositories (round trips and write conflicts)."""

import threading

import pytest

from dinepay.domain.exceptions import ConcurrencyConflictError
from dinepay.domain.model.invoice import Invoice
from dinepay.domain.model.menu_item import MenuItem
from dinepay.domain.model.order import Order, OrderLine, OrderOrigin, PaymentMethod
from dinepay.domain.model.value_objects import Money, Quantity
from dinepay.infrastructure.persistence.json_invoice_repository import JsonInvoiceRepository
from dinepay.infrastructure.persistence.json_menu_repository import JsonMenuRepository
from dinepay.infrastructure.persistence.json_order_repository import JsonOrderRepository


def _order() -> Order:
    return Order.create(
        OrderOrigin.CASHIER_ASSISTED,
        "Budi",
        [
            OrderLine("1", "Nasi Goreng", Quantity(2), Money.of("10000")),
            OrderLine("2", "Es Teh", Quantity(1), Money.of("5000")),
        ],
    )


class TestJsonOrderRepository:

    def test_creates_missing_file(self, tmp_path):
        path = tmp_path / "nested" / "orders.json"
        JsonOrderRepository(path)
        assert path.read_text(encoding="utf-8") == "[]"

    def test_round_trip(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order()
        order.mark_paid(PaymentMethod.QR_CODE)
        repo.save(order)

        loaded = repo.get_by_number(order.order_number)
        assert loaded == order
        assert loaded.total == Money.of("27500")
        assert loaded.version == 1

    def test_unknown_order(self, tmp_path):
        assert JsonOrderRepository(tmp_path / "orders.json").get_by_number("ORD-NOPE") is None

    def test_stale_write_rejected(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order()
        repo.save(order)

        first = repo.get_by_number(order.order_number)
        second = repo.get_by_number(order.order_number)
        first.set_quantity("1", 5)
        repo.save(first)

        second.cancel()
        with pytest.raises(ConcurrencyConflictError):
            repo.save(second)
        assert repo.get_by_number(order.order_number).item_count == 6

    def test_new_order_with_nonzero_version_rejected(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = _order()
        order.version = 3
        with pytest.raises(ConcurrencyConflictError):
            repo.save(order)

    def test_list_paid(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        paid, unpaid = _order(), _order()
        paid.mark_paid(PaymentMethod.CASH)
        repo.save(paid)
        repo.save(unpaid)
        assert [o.order_number for o in repo.list_paid()] == [paid.order_number]
        assert len(repo.list_all()) == 2


class TestJsonInvoiceRepository:

    def _invoice(self) -> Invoice:
        order = _order()
        order.mark_paid(PaymentMethod.CASH)
        return Invoice.issue(order, "cashier-7")

    def test_round_trip(self, tmp_path):
        repo = JsonInvoiceRepository(tmp_path / "invoices.json")
        invoice = self._invoice()
        repo.add(invoice)
        assert repo.get_by_order_number(invoice.order_number) == invoice
        assert repo.get_by_invoice_number(invoice.invoice_number) == invoice

    def test_second_invoice_for_order_rejected(self, tmp_path):
        repo = JsonInvoiceRepository(tmp_path / "invoices.json")
        invoice = self._invoice()
        repo.add(invoice)
        with pytest.raises(ConcurrencyConflictError):
            repo.add(invoice)
        assert len(repo.list_all()) == 1


class TestJsonMenuRepository:

    def test_round_trip(self, tmp_path):
        repo = JsonMenuRepository(tmp_path / "menu.json")
        item = MenuItem(
            id="3",
            name="Sate Ayam",
            price=Money.of("20000"),
            promo_price=Money.of("15000"),
            image_url="https://img.example/sate.png",
        )
        repo.save(item)
        repo.save(MenuItem(id="4", name="Rendang", price=Money.of("30000"), available=False))

        assert repo.get_by_id("3") == item
        assert repo.get_by_id("4").available is False
        assert [m.id for m in repo.list_all()] == ["3", "4"]

    def test_concurrent_saves_keep_every_item(self, tmp_path):
        repo = JsonMenuRepository(tmp_path / "menu.json")
        start = threading.Barrier(8)

        def add(i: int) -> None:
            start.wait()
            repo.save(MenuItem(id=str(i), name=f"Dish {i}", price=Money.of("1000")))

        threads = [threading.Thread(target=add, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(m.id for m in repo.list_all()) == [str(i) for i in range(8)]
