"""Sepet ve sipariş akışı testleri."""
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from katalog.cart import Cart, discounted_price, item_total, make_variant_id
from katalog.comparison import CompareList
from katalog.models import Product
from katalog.orders import APPROVED, PENDING, REJECTED, OrderBook, OrderError

BILLING = {
    "company_name": "ACME Ltd.",
    "tax_office": "Kadıköy",
    "tax_number": "1234567890",
    "contact_person": "Ayşe Yılmaz",
    "phone": "+90 555 000 00 00",
    "email": "ayse@acme.com",
    "address": "Moda Cad. 1",
    "city": "İstanbul",
    "invoice_created_by": "Muhasebe",
}


def make(code="K1", list_price=100.0, name="Kalem"):
    return Product(stock_code=code, name=name, company="ACME", list_price_incl_tax=list_price, currency="TL")


class TestVariantId:

    def test_plain_stock_code(self):
        assert make_variant_id(make("K1")) == "K1"

    def test_with_variant(self):
        assert make_variant_id(make("K1"), "Koyu Mavi") == "K1-koyu-mavi"

    def test_missing_stock_code(self):
        assert make_variant_id(make(""), "SIYAH") == "no-stock-siyah"
        assert make_variant_id(make("")).startswith("fallback-")


class TestCart:

    def test_same_variant_merges(self):
        cart = Cart()
        cart.add(make(), 1, "SIYAH")
        cart.add(make(), 2, "SIYAH")
        assert len(cart.items) == 1
        assert cart.item_count() == 3

    def test_different_variants_are_separate_items(self):
        cart = Cart()
        a = cart.add(make(), 1, "SIYAH")
        b = cart.add(make(), 1, "BEYAZ")
        assert len(cart.items) == 2
        assert a.cart_id != b.cart_id

    def test_discount_and_totals(self):
        cart = Cart()
        item = cart.add(make(list_price=200.0), 3)
        cart.apply_discount(item.cart_id, 15)

        assert discounted_price(item) == pytest.approx(170.0)
        assert item_total(item) == pytest.approx(510.0)
        assert cart.grand_total() == pytest.approx(510.0)

    def test_invalid_discount(self):
        cart = Cart()
        item = cart.add(make())
        with pytest.raises(ValueError):
            cart.apply_discount(item.cart_id, 20)

    def test_zero_quantity_removes_item(self):
        cart = Cart()
        item = cart.add(make())
        cart.update_quantity(item.cart_id, 0)
        assert cart.is_empty()

    def test_update_quantity(self):
        cart = Cart()
        item = cart.add(make())
        cart.update_quantity(item.cart_id, 7)
        assert cart.item_count() == 7

    def test_unknown_cart_id(self):
        with pytest.raises(KeyError):
            Cart().update_quantity("yok", 2)

    def test_order_lines(self):
        cart = Cart()
        item = cart.add(make(list_price=50.0), 2, "SIYAH")
        cart.apply_discount(item.cart_id, 10)
        line = cart.to_order_lines()[0]
        assert line["variant_id"] == "K1-siyah"
        assert line["discounted_price"] == pytest.approx(45.0)
        assert line["total"] == pytest.approx(90.0)
        assert line["currency"] == "TL"


class TestOrderBook:

    def _cart(self):
        cart = Cart()
        cart.add(make(list_price=10.0), 2)
        return cart

    def test_place_order_creates_pending_and_clears_cart(self):
        book = OrderBook()
        cart = self._cart()
        order = book.place_order("u1", cart, BILLING)

        assert order.status == PENDING
        assert order.total_amount == pytest.approx(20.0)
        assert cart.is_empty()
        assert book.orders_for_user("u1") == [order]

    def test_empty_cart_rejected(self):
        with pytest.raises(OrderError):
            OrderBook().place_order("u1", Cart(), BILLING)

    def test_missing_billing_field(self):
        billing = dict(BILLING, tax_number="")
        cart = self._cart()
        with pytest.raises(OrderError):
            OrderBook().place_order("u1", cart, billing)
        assert not cart.is_empty()

    def test_approve(self):
        book = OrderBook()
        order = book.place_order("u1", self._cart(), BILLING)
        book.approve(order.id, "admin")

        assert order.status == APPROVED
        assert order.approved_by == "admin"
        assert order.approved_at is not None
        assert book.list_orders(PENDING) == []

    def test_cannot_decide_twice(self):
        book = OrderBook()
        order = book.place_order("u1", self._cart(), BILLING)
        book.reject(order.id, "admin")
        assert order.status == REJECTED
        with pytest.raises(OrderError):
            book.approve(order.id, "admin")

    def test_unknown_order(self):
        with pytest.raises(OrderError):
            OrderBook().approve(99, "admin")

    def test_product_stats_use_only_approved_orders(self):
        book = OrderBook()

        cart = Cart()
        cart.add(make("K1", 10.0), 2)
        cart.add(make("S1", 4.0, name="Silgi"), 1)
        first = book.place_order("u1", cart, BILLING)

        cart.add(make("K1", 10.0), 3)
        second = book.place_order("u2", cart, BILLING)

        cart.add(make("S1", 4.0, name="Silgi"), 5)
        rejected = book.place_order("u3", cart, BILLING)

        book.approve(first.id, "admin")
        book.approve(second.id, "admin")
        book.reject(rejected.id, "admin")

        stats = book.product_stats()
        assert [s["stock_code"] for s in stats] == ["K1", "S1"]
        assert stats[0]["order_count"] == 2
        assert stats[0]["total_quantity"] == 5
        assert stats[0]["total_revenue"] == pytest.approx(50.0)
        assert stats[1]["name"] == "Silgi"
        assert stats[1]["total_quantity"] == 1
        assert book.product_stats(limit=1)[0]["stock_code"] == "K1"

    def test_product_stats_empty(self):
        assert OrderBook().product_stats() == []


class TestCompareList:

    def test_toggle_and_limit(self):
        compare = CompareList(max_items=3)
        for code in ["A", "B", "C"]:
            assert compare.toggle(make(code)) is True
        assert compare.toggle(make("D")) is False
        assert len(compare.products) == 3

        assert compare.toggle(make("B")) is False
        assert not compare.contains(make("B"))
        assert compare.toggle(make("D")) is True

    def test_clear(self):
        compare = CompareList()
        compare.toggle(make("A"))
        compare.clear()
        assert compare.products == []
