# src/storage/persistence.py

"""Typed adapter between the engines and the untyped key-value store.

Values are JSON.  Anything missing or unreadable loads as an empty
collection so a damaged store never blocks a session; write failures
are raised as :class:`PersistenceError` for the caller to report.
"""

import json
import logging
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation
from typing import Any

from src.config.settings import Settings
from src.exceptions import PersistenceError
from src.models.cart_line import CartLine
from src.storage.kv_store import KeyValueStore

logger = logging.getLogger("storefront.storage")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class PersistenceAdapter:
    """Reads and writes the favorites set and the cart lines."""

    def __init__(
        self,
        store: KeyValueStore,
        favorites_key: str = Settings.FAVORITES_KEY,
        cart_key: str = Settings.CART_KEY,
    ) -> None:
        self.store = store
        self.favorites_key = favorites_key
        self.cart_key = cart_key

    # ── Raw access ───────────────────────────────────────

    def _read_list(self, key: str) -> list[Any]:
        try:
            raw = self.store.get(key)
        except Exception as exc:
            logger.error(
                "Reading key '%s' failed, using empty collection: %s",
                key,
                exc,
                exc_info=True,
            )
            return []
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(
                "Key '%s' holds invalid JSON, using empty collection",
                key,
            )
            return []
        if not isinstance(data, list):
            logger.warning(
                "Key '%s' holds %s instead of a list, "
                "using empty collection",
                key,
                type(data).__name__,
            )
            return []
        return data

    def _write(self, key: str, payload: list[Any]) -> None:
        try:
            self.store.set(key, json.dumps(payload))
        except Exception as exc:
            raise PersistenceError(
                "WRITE_FAILED", str(exc), key=key,
            ) from exc

    # ── Favorites ────────────────────────────────────────

    def load_favorites(self) -> set[int]:
        """Return the stored favorite ids, skipping non-integer entries."""
        entries = self._read_list(self.favorites_key)
        favorites = {e for e in entries if _is_int(e)}
        skipped = len(entries) - sum(1 for e in entries if _is_int(e))
        if skipped:
            logger.warning(
                "Skipped %d invalid favorite entries", skipped
            )
        logger.debug("Loaded %d favorites", len(favorites))
        return favorites

    def save_favorites(self, favorites: Iterable[int]) -> None:
        """Persist the whole favorites set (sorted for stable output)."""
        self._write(self.favorites_key, sorted(favorites))

    # ── Cart ─────────────────────────────────────────────

    @staticmethod
    def _parse_line(entry: Any) -> CartLine | None:
        if not isinstance(entry, dict):
            return None
        product_id = entry.get("productId")
        quantity = entry.get("quantity")
        if not _is_int(product_id) or not _is_int(quantity):
            return None
        if quantity < 1:
            return None
        try:
            price = Decimal(str(entry.get("priceSnapshot")))
        except InvalidOperation:
            return None
        if not price.is_finite() or price < 0:
            return None
        return CartLine(
            product_id=product_id,
            quantity=quantity,
            price_snapshot=price,
        )

    def load_cart(self) -> list[CartLine]:
        """Return stored cart lines in saved order.

        Invalid entries are skipped; a repeated product id is folded
        into its first line so the one-line-per-product rule holds.
        """
        lines: dict[int, CartLine] = {}
        skipped = 0
        for entry in self._read_list(self.cart_key):
            line = self._parse_line(entry)
            if line is None:
                skipped += 1
                continue
            existing = lines.get(line.product_id)
            if existing is not None:
                line = CartLine(
                    product_id=existing.product_id,
                    quantity=existing.quantity + line.quantity,
                    price_snapshot=existing.price_snapshot,
                )
            lines[line.product_id] = line
        if skipped:
            logger.warning("Skipped %d invalid cart entries", skipped)
        logger.debug("Loaded %d cart lines", len(lines))
        return list(lines.values())

    def save_cart(self, lines: Iterable[CartLine]) -> None:
        """Persist every cart line."""
        payload = [
            {
                "productId": line.product_id,
                "quantity": line.quantity,
                "priceSnapshot": str(line.price_snapshot),
            }
            for line in lines
        ]
        self._write(self.cart_key, payload)
