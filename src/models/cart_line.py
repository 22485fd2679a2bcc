# src/models/cart_line.py

"""Cart line model: one product's quantity entry in the cart."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CartLine:
    """Quantity of one product plus the price it was added at."""

    product_id: int
    quantity: int
    price_snapshot: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.price_snapshot * self.quantity
