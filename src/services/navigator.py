# src/services/navigator.py

"""Product view navigation: selected product, image cursor, related items."""

import logging
from collections.abc import Callable, Sequence

from src.config.settings import Settings
from src.models.display_state import ModalState, SelectionState
from src.models.product import Product

logger = logging.getLogger("storefront.navigator")


def related_products(
    catalog: Sequence[Product],
    product: Product,
    limit: int = Settings.RELATED_LIMIT,
) -> tuple[Product, ...]:
    """Up to *limit* same-category products, in catalog order, excluding *product*."""
    related: list[Product] = []
    for candidate in catalog:
        if len(related) >= limit:
            break
        if candidate.id == product.id:
            continue
        if candidate.category == product.category:
            related.append(candidate)
    return tuple(related)


class SelectionNavigator:
    """Two-state (closed/open) machine for the product view."""

    def __init__(
        self,
        catalog: Callable[[], Sequence[Product]],
        related_limit: int = Settings.RELATED_LIMIT,
    ) -> None:
        self._catalog = catalog
        self.related_limit = related_limit
        self.state = SelectionState()

    @property
    def is_open(self) -> bool:
        return self.state.status is ModalState.OPEN

    def open(self, product: Product) -> SelectionState:
        """Select *product*, rewind the image cursor and derive related items."""
        self.state = SelectionState(
            status=ModalState.OPEN,
            selected_product=product,
            image_index=0,
            related_products=related_products(
                self._catalog(), product, self.related_limit
            ),
        )
        logger.debug(
            "Opened product %d (%d related)",
            product.id,
            len(self.state.related_products),
        )
        return self.state

    def close(self) -> SelectionState:
        self.state = SelectionState()
        return self.state

    def select_related(self, product_id: int) -> SelectionState:
        """Re-open on a related product; unknown ids leave the view as is."""
        if not self.is_open:
            return self.state
        for product in self.state.related_products:
            if product.id == product_id:
                return self.open(product)
        logger.debug(
            "Product %d is not among the related items", product_id
        )
        return self.state

    def next_image(self) -> SelectionState:
        return self._step(1)

    def prev_image(self) -> SelectionState:
        return self._step(-1)

    def _step(self, delta: int) -> SelectionState:
        product = self.state.selected_product
        if not self.is_open or product is None:
            return self.state
        count = len(product.images)
        if count == 0:
            return self.state
        self.state = SelectionState(
            status=ModalState.OPEN,
            selected_product=product,
            image_index=(self.state.image_index + delta) % count,
            related_products=self.state.related_products,
        )
        return self.state
