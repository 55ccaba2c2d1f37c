"""
Unit tests for the session cart and catalog pricing.

Prices always come from the catalog, never from what is stored in the
session, and products that stop being sold fall out of the cart.
"""

from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from myskin.schemas.dtos import MAX_LINE_QUANTITY, CartItemRequest
from myskin.services.cart_service import SESSION_KEY, CartService, price_cart_items


def _product(product_id, price, name=None):
    return SimpleNamespace(
        id=product_id, name=name or f"Product {product_id}", price=Decimal(price), image_url=None
    )


@pytest.fixture
def catalog():
    repo = Mock()
    products = {1: _product(1, "2500.00"), 2: _product(2, "1200.50")}
    repo.get_active_by_ids.side_effect = lambda ids: [products[i] for i in ids if i in products]
    return repo


@pytest.mark.services
class TestCartService:
    def test_add_item_accumulates_quantity(self):
        session = {}
        cart = CartService(session)

        cart.add_item(1, 2)
        cart.add_item(1, 3)

        assert cart.get_cart() == {1: 5}
        assert session[SESSION_KEY] == {"1": 5}

    def test_add_item_clamps_to_line_maximum(self):
        cart = CartService({})
        cart.add_item(1, MAX_LINE_QUANTITY + 50)
        assert cart.get_cart()[1] == MAX_LINE_QUANTITY

    def test_update_quantity_to_zero_removes_line(self):
        cart = CartService({})
        cart.add_item(1, 2)
        cart.update_quantity(1, 0)
        assert cart.get_cart() == {}

    def test_malformed_session_entries_are_ignored(self):
        session = {SESSION_KEY: {"1": 2, "abc": 1, "3": "x", "4": 0, "-5": 1}}
        assert CartService(session).get_cart() == {1: 2}

    def test_clear_empties_cart(self):
        session = {}
        cart = CartService(session)
        cart.add_item(2)
        cart.clear()
        assert SESSION_KEY not in session
        assert cart.items() == []

    def test_summary_uses_catalog_prices_and_drops_stale_products(self, catalog):
        session = {SESSION_KEY: {"1": 2, "2": 1, "99": 4}}
        summary = CartService(session).summary(catalog)

        assert [line.product_id for line in summary.lines] == [1, 2]
        assert summary.total_items == 3
        assert summary.total_price == Decimal("6200.50")
        assert session[SESSION_KEY] == {"1": 2, "2": 1}


@pytest.mark.services
class TestPriceCartItems:
    def test_reports_missing_products(self, catalog):
        missing = []
        summary = price_cart_items(
            [CartItemRequest(product_id=1, quantity=1), CartItemRequest(product_id=7, quantity=1)],
            catalog,
            missing,
        )
        assert missing == [7]
        assert summary.total_price == Decimal("2500.00")

    def test_summary_to_dict(self, catalog):
        summary = price_cart_items([CartItemRequest(product_id=2, quantity=2)], catalog)
        data = summary.to_dict()
        assert data["total_items"] == 2
        assert data["total_price"] == pytest.approx(2401.0)
        assert data["items"][0]["line_total"] == pytest.approx(2401.0)
