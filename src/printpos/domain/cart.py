from __future__ import annotations

from dataclasses import dataclass

from printpos.domain.calculations import cart_line, cart_totals
from printpos.domain.models import CartLine, CartTotals, Product


@dataclass(frozen=True)
class Cart:
    """Lines being rung up before a sale is recorded. Every change returns a new cart."""

    lines: tuple[CartLine, ...] = ()

    def add(self, product: Product, quantity: int = 1) -> "Cart":
        for idx, line in enumerate(self.lines):
            if line.product.id == product.id:
                updated = cart_line(product, line.quantity + quantity)
                return Cart(self.lines[:idx] + (updated,) + self.lines[idx + 1:])
        return Cart(self.lines + (cart_line(product, quantity),))

    def set_quantity(self, product_id: str, quantity: int) -> "Cart":
        if quantity <= 0:
            return self.remove(product_id)
        return Cart(tuple(
            cart_line(line.product, quantity) if line.product.id == product_id else line
            for line in self.lines
        ))

    def remove(self, product_id: str) -> "Cart":
        return Cart(tuple(line for line in self.lines if line.product.id != product_id))

    def clear(self) -> "Cart":
        return Cart()

    def quantity_of(self, product_id: str) -> int:
        return next((line.quantity for line in self.lines if line.product.id == product_id), 0)

    def totals(self) -> CartTotals:
        return cart_totals(self.lines)

    def is_empty(self) -> bool:
        return not self.lines
