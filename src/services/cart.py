# src/services/cart.py

"""Cart engine: quantity-keyed cart lines with write-through persistence."""

import logging
from collections.abc import Callable
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal

from src.exceptions import PersistenceError
from src.models.cart_line import CartLine
from src.models.product import Product
from src.storage.persistence import PersistenceAdapter

logger = logging.getLogger("storefront.cart")

_CENTS = Decimal("0.01")

PriceLookup = Callable[[int], Product | None]
CartListener = Callable[[tuple[CartLine, ...]], None]


class CartEngine:
    """Add, remove and re-quantify cart lines.

    Invariants: at most one line per product and every quantity is a
    positive integer.  Calls that would break them are rejected as
    logged no-ops and return the unchanged lines.
    """

    def __init__(
        self,
        persistence: PersistenceAdapter,
        lookup: PriceLookup,
    ) -> None:
        self.persistence = persistence
        self._lookup = lookup
        self._lines: dict[int, CartLine] = {}
        self.last_error: PersistenceError | None = None
        self.on_cart_visible: list[CartListener] = []
        self.on_checkout: list[CartListener] = []

    # ── Read model ───────────────────────────────────────

    @property
    def lines(self) -> tuple[CartLine, ...]:
        """Cart lines in the order products were first added."""
        return tuple(self._lines.values())

    def line_for(self, product_id: int) -> CartLine | None:
        return self._lines.get(product_id)

    def total(self) -> Decimal:
        """Sum of ``price_snapshot * quantity``, rounded to cents."""
        raw = sum(
            (line.line_total for line in self._lines.values()),
            Decimal("0"),
        )
        return raw.quantize(_CENTS, rounding=ROUND_HALF_UP)

    def item_count(self) -> int:
        """Total units across all lines."""
        return sum(line.quantity for line in self._lines.values())

    # ── Mutations ────────────────────────────────────────

    def load(self) -> tuple[CartLine, ...]:
        """Replace the in-memory cart with the stored one."""
        self._lines = {
            line.product_id: line
            for line in self.persistence.load_cart()
        }
        return self.lines

    def add(self, product_id: int, quantity: int = 1) -> tuple[CartLine, ...]:
        """Add *quantity* units, creating the line on first add."""
        if quantity < 1:
            logger.warning(
                "Rejected add of %d units of product %d",
                quantity,
                product_id,
            )
            return self.lines

        existing = self._lines.get(product_id)
        if existing is not None:
            self._lines[product_id] = replace(
                existing, quantity=existing.quantity + quantity
            )
        else:
            product = self._lookup(product_id)
            if product is None:
                logger.warning(
                    "Rejected add of unknown product %d", product_id
                )
                return self.lines
            self._lines[product_id] = CartLine(
                product_id=product_id,
                quantity=quantity,
                price_snapshot=product.price,
            )

        logger.info(
            "Added %d x product %d (now %d)",
            quantity,
            product_id,
            self._lines[product_id].quantity,
        )
        self._persist()
        self._notify(self.on_cart_visible)
        return self.lines

    def remove(self, product_id: int) -> tuple[CartLine, ...]:
        """Delete the line for *product_id*; absent ids are a no-op."""
        if self._lines.pop(product_id, None) is None:
            logger.debug(
                "Remove ignored, product %d not in cart", product_id
            )
            return self.lines
        logger.info("Removed product %d from cart", product_id)
        self._persist()
        return self.lines

    def update_quantity(
        self, product_id: int, new_quantity: int,
    ) -> tuple[CartLine, ...]:
        """Set the line quantity; values below 1 are rejected."""
        if new_quantity < 1:
            logger.warning(
                "Rejected quantity %d for product %d "
                "(use remove to delete a line)",
                new_quantity,
                product_id,
            )
            return self.lines

        existing = self._lines.get(product_id)
        if existing is None:
            logger.debug(
                "Quantity update ignored, product %d not in cart",
                product_id,
            )
            return self.lines

        self._lines[product_id] = replace(existing, quantity=new_quantity)
        logger.info(
            "Set product %d quantity to %d", product_id, new_quantity
        )
        self._persist()
        return self.lines

    def checkout(self) -> tuple[CartLine, ...]:
        """Signal checkout subscribers; the cart itself is left untouched."""
        logger.info(
            "Checkout requested: %d lines, total %s",
            len(self._lines),
            self.total(),
        )
        self._notify(self.on_checkout)
        return self.lines

    # ── Internals ────────────────────────────────────────

    def _persist(self) -> None:
        try:
            self.persistence.save_cart(self._lines.values())
            self.last_error = None
        except PersistenceError as exc:
            self.last_error = exc
            logger.error(
                "Cart write failed, keeping in-memory cart: %s",
                exc,
                exc_info=True,
            )

    def _notify(self, listeners: list[CartListener]) -> None:
        snapshot = self.lines
        for listener in listeners:
            listener(snapshot)
