# src/services/favorites.py

"""Favorites engine: a persisted set of product ids."""

import logging

from src.exceptions import PersistenceError
from src.storage.persistence import PersistenceAdapter

logger = logging.getLogger("storefront.favorites")


class FavoritesEngine:
    """Toggle product ids in and out of the favorites set.

    Every toggle writes the full set through the adapter.  A failed
    write is logged and kept on ``last_error``; the in-memory set stays
    authoritative for the rest of the session.
    """

    def __init__(self, persistence: PersistenceAdapter) -> None:
        self.persistence = persistence
        self._ids: set[int] = set()
        self.last_error: PersistenceError | None = None

    @property
    def favorites(self) -> frozenset[int]:
        return frozenset(self._ids)

    def load(self) -> frozenset[int]:
        """Replace the in-memory set with the stored one."""
        self._ids = self.persistence.load_favorites()
        return self.favorites

    def is_favorite(self, product_id: int) -> bool:
        return product_id in self._ids

    def toggle(self, product_id: int) -> frozenset[int]:
        """Add *product_id* if absent, remove it if present."""
        if product_id in self._ids:
            self._ids.discard(product_id)
            logger.info("Removed product %d from favorites", product_id)
        else:
            self._ids.add(product_id)
            logger.info("Added product %d to favorites", product_id)
        self._persist()
        return self.favorites

    def _persist(self) -> None:
        try:
            self.persistence.save_favorites(self._ids)
            self.last_error = None
        except PersistenceError as exc:
            self.last_error = exc
            logger.error(
                "Favorites write failed, keeping in-memory set: %s",
                exc,
                exc_info=True,
            )
