# src/services/session.py

"""Per-session storefront state: the single owner of every engine.

One :class:`StorefrontSession` exists per running shopper session.
The presentation layer reads its read models and calls its mutating
methods; nothing here is module-global.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Any

from src.config.settings import Settings
from src.exceptions import FetchError
from src.filters.derivation import available_categories, derive
from src.models.cart_line import CartLine
from src.models.display_state import (
    DisplayState,
    LoadPhase,
    SelectionState,
    SortOrder,
)
from src.models.product import Product
from src.services.cart import CartEngine
from src.services.catalog_loader import CatalogLoader
from src.services.favorites import FavoritesEngine
from src.services.navigator import SelectionNavigator
from src.storage.kv_store import SqliteKeyValueStore
from src.storage.persistence import PersistenceAdapter

logger = logging.getLogger("storefront.session")


class StorefrontSession:
    """Catalog, browse inputs, favorites, cart and product view for one session."""

    def __init__(
        self,
        loader: CatalogLoader | None = None,
        persistence: PersistenceAdapter | None = None,
        search_descriptions: bool = Settings.SEARCH_DESCRIPTIONS,
    ) -> None:
        self._owned_store: SqliteKeyValueStore | None = None
        if persistence is None:
            self._owned_store = SqliteKeyValueStore()
            persistence = PersistenceAdapter(self._owned_store)

        self.loader = loader or CatalogLoader()
        self.persistence = persistence
        self.search_descriptions = search_descriptions
        self._by_id: dict[int, Product] = {}
        self._closed = False

        self.display = DisplayState(
            sort_order=SortOrder.parse(Settings.DEFAULT_SORT)
        )
        self.favorites_engine = FavoritesEngine(persistence)
        self.cart_engine = CartEngine(persistence, self._by_id.get)
        self.navigator = SelectionNavigator(
            lambda: self.display.source_catalog
        )

    # ── Lifecycle ────────────────────────────────────────

    async def start(self) -> None:
        """Load favorites and cart, then fetch the catalog.

        A failed fetch leaves the catalog empty; the error is exposed
        through :attr:`load_error`.
        """
        self.favorites_engine.load()
        self.cart_engine.load()
        try:
            products = await self.loader.load_async()
        except FetchError:
            logger.warning("Session started without a catalog")
            return
        if self._closed:
            logger.info("Session closed during fetch, discarding catalog")
            return
        self.set_catalog(products)

    def close(self) -> None:
        """Tear the session down; a fetch still in flight is discarded."""
        self._closed = True
        self.navigator.close()
        if self._owned_store is not None:
            self._owned_store.close()
            self._owned_store = None
        logger.debug("Session closed")

    # ── Read models ──────────────────────────────────────

    @property
    def phase(self) -> LoadPhase:
        return self.loader.phase

    @property
    def load_error(self) -> FetchError | None:
        return self.loader.error

    @property
    def catalog(self) -> tuple[Product, ...]:
        return self.display.source_catalog

    @property
    def derived_list(self) -> tuple[Product, ...]:
        return self.display.derived_list

    @property
    def categories(self) -> list[str]:
        return available_categories(self.display.source_catalog)

    @property
    def favorites(self) -> frozenset[int]:
        return self.favorites_engine.favorites

    @property
    def cart_lines(self) -> tuple[CartLine, ...]:
        return self.cart_engine.lines

    @property
    def cart_total(self) -> Decimal:
        return self.cart_engine.total()

    @property
    def cart_count(self) -> int:
        return self.cart_engine.item_count()

    @property
    def selection(self) -> SelectionState:
        return self.navigator.state

    def product(self, product_id: int) -> Product | None:
        return self._by_id.get(product_id)

    # ── Browse inputs ────────────────────────────────────

    def _rederive(self, **changes: Any) -> tuple[Product, ...]:
        staged = replace(self.display, **changes)
        # Swap the whole state so readers never see a stale derived list
        self.display = replace(
            staged,
            derived_list=derive(
                staged.source_catalog,
                staged.category_filter,
                staged.search_text,
                staged.sort_order,
                self.search_descriptions,
            ),
        )
        return self.display.derived_list

    def set_catalog(self, products: list[Product]) -> tuple[Product, ...]:
        self._by_id.clear()
        self._by_id.update((p.id, p) for p in products)
        return self._rederive(source_catalog=tuple(products))

    def set_category(self, category: str) -> tuple[Product, ...]:
        return self._rederive(category_filter=category)

    def set_search(self, text: str) -> tuple[Product, ...]:
        return self._rederive(search_text=text)

    def set_sort(self, order: str | SortOrder) -> tuple[Product, ...]:
        return self._rederive(sort_order=SortOrder.parse(order))

    # ── Favorites & cart ─────────────────────────────────

    def toggle_favorite(self, product_id: int) -> frozenset[int]:
        return self.favorites_engine.toggle(product_id)

    def add_to_cart(
        self, product_id: int, quantity: int = 1,
    ) -> tuple[CartLine, ...]:
        return self.cart_engine.add(product_id, quantity)

    def remove_from_cart(self, product_id: int) -> tuple[CartLine, ...]:
        return self.cart_engine.remove(product_id)

    def update_quantity(
        self, product_id: int, quantity: int,
    ) -> tuple[CartLine, ...]:
        return self.cart_engine.update_quantity(product_id, quantity)

    def checkout(self) -> tuple[CartLine, ...]:
        return self.cart_engine.checkout()

    # ── Product view ─────────────────────────────────────

    def open_product(self, product_id: int) -> SelectionState:
        product = self._by_id.get(product_id)
        if product is None:
            logger.warning("Cannot open unknown product %d", product_id)
            return self.navigator.state
        return self.navigator.open(product)

    def close_product(self) -> SelectionState:
        return self.navigator.close()

    def next_image(self) -> SelectionState:
        return self.navigator.next_image()

    def prev_image(self) -> SelectionState:
        return self.navigator.prev_image()

    def select_related(self, product_id: int) -> SelectionState:
        return self.navigator.select_related(product_id)
