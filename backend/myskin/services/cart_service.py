"""
Shopping cart kept in the signed Flask session.

The session stores only ``{product_id: quantity}``; names and prices are
always read from the catalog when the cart is summarized, so a price change
or a deactivated product is reflected on the next request.
"""

import logging
from typing import Dict, List, MutableMapping, Optional

from myskin.domain.entities import CartLine, CartSummary
from myskin.repositories.catalog_repository import ProductRepository
from myskin.schemas.dtos import MAX_LINE_QUANTITY, CartItemRequest

logger = logging.getLogger(__name__)

SESSION_KEY = "cart"


class CartService:
    """Cart operations over a session-like mapping."""

    def __init__(self, session: MutableMapping):
        self.session = session

    def get_cart(self) -> Dict[int, int]:
        """Return the cleaned cart, dropping malformed entries and clamping quantities."""
        raw = self.session.get(SESSION_KEY) or {}
        cart: Dict[int, int] = {}
        if not isinstance(raw, dict):
            return cart
        for key, value in raw.items():
            try:
                product_id = int(key)
                quantity = int(value)
            except (TypeError, ValueError):
                continue
            if product_id < 1 or quantity < 1:
                continue
            cart[product_id] = min(quantity, MAX_LINE_QUANTITY)
        return cart

    def _save(self, cart: Dict[int, int]) -> None:
        # Session serializers need string keys
        self.session[SESSION_KEY] = {str(pid): qty for pid, qty in cart.items()}

    def add_item(self, product_id: int, quantity: int = 1) -> Dict[int, int]:
        cart = self.get_cart()
        cart[product_id] = max(1, min(cart.get(product_id, 0) + quantity, MAX_LINE_QUANTITY))
        self._save(cart)
        return cart

    def update_quantity(self, product_id: int, quantity: int) -> Dict[int, int]:
        cart = self.get_cart()
        if quantity <= 0:
            cart.pop(product_id, None)
        else:
            cart[product_id] = min(quantity, MAX_LINE_QUANTITY)
        self._save(cart)
        return cart

    def remove_item(self, product_id: int) -> Dict[int, int]:
        cart = self.get_cart()
        cart.pop(product_id, None)
        self._save(cart)
        return cart

    def clear(self) -> None:
        self.session.pop(SESSION_KEY, None)

    def items(self) -> List[CartItemRequest]:
        return [CartItemRequest(product_id=pid, quantity=qty) for pid, qty in self.get_cart().items()]

    def summary(self, products: ProductRepository) -> CartSummary:
        """Price the session cart and forget products that are no longer sold."""
        cart = self.get_cart()
        summary = price_cart_items(
            [CartItemRequest(product_id=pid, quantity=qty) for pid, qty in cart.items()],
            products,
        )
        priced_ids = {line.product_id for line in summary.lines}
        stale = [pid for pid in cart if pid not in priced_ids]
        if stale:
            logger.info(
                "Dropping unavailable products from cart",
                extra={"context": {"product_ids": stale}},
            )
            self._save({pid: qty for pid, qty in cart.items() if pid in priced_ids})
        return summary


def price_cart_items(
    items: List[CartItemRequest], products: ProductRepository, missing: Optional[List[int]] = None
) -> CartSummary:
    """
    Price cart entries from the active catalog.

    Args:
        items: Requested product ids and quantities
        products: Catalog repository
        missing: If given, receives ids that are unknown or inactive

    Returns:
        CartSummary whose lines keep the request order
    """
    by_id = {product.id: product for product in products.get_active_by_ids(i.product_id for i in items)}
    lines: List[CartLine] = []
    for item in items:
        product = by_id.get(item.product_id)
        if product is None:
            if missing is not None:
                missing.append(item.product_id)
            continue
        lines.append(
            CartLine(
                product_id=product.id,
                name=product.name,
                unit_price=product.price,
                quantity=item.quantity,
                image_url=product.image_url,
            )
        )
    return CartSummary(lines=lines)
