# src/filters/derivation.py

"""Browse pipeline: catalog + category + search + sort → display list."""

import logging
from collections.abc import Iterable, Sequence

from src.models.display_state import SortOrder
from src.models.product import Product

logger = logging.getLogger("storefront.derive")

ALL_CATEGORIES = "all"


def filter_by_category(
    products: Iterable[Product], category: str,
) -> list[Product]:
    """Keep products whose category equals *category* exactly."""
    if category == ALL_CATEGORIES:
        return list(products)
    return [p for p in products if p.category == category]


def filter_by_search(
    products: Iterable[Product],
    search_text: str,
    search_descriptions: bool = False,
) -> list[Product]:
    """Keep products whose title contains *search_text*, ignoring case.

    With ``search_descriptions`` a match in the description also counts.
    """
    if not search_text:
        return list(products)

    needle = search_text.lower()
    kept: list[Product] = []
    for product in products:
        if needle in product.title.lower():
            kept.append(product)
        elif search_descriptions and needle in product.description.lower():
            kept.append(product)
    return kept


def _rating_key(product: Product) -> tuple[bool, float]:
    # Unrated products rank below every rated one
    if product.rating is None:
        return (False, 0.0)
    return (True, product.rating.rate)


def sort_products(
    products: Iterable[Product], order: SortOrder,
) -> list[Product]:
    """Stable sort by price or rating; ties keep their input order."""
    if order is SortOrder.PRICE_ASC:
        return sorted(products, key=lambda p: p.price)
    if order is SortOrder.PRICE_DESC:
        return sorted(products, key=lambda p: p.price, reverse=True)
    return sorted(products, key=_rating_key, reverse=True)


def derive(
    catalog: Sequence[Product],
    category_filter: str = ALL_CATEGORIES,
    search_text: str = "",
    sort_order: SortOrder = SortOrder.PRICE_ASC,
    search_descriptions: bool = False,
) -> tuple[Product, ...]:
    """Compute the display list for the given browse inputs.

    Pure and deterministic: the same inputs always yield the same
    ordered tuple, and *catalog* is never modified.
    """
    products = filter_by_category(catalog, category_filter)
    products = filter_by_search(
        products, search_text, search_descriptions
    )
    result = tuple(sort_products(products, sort_order))
    logger.debug(
        "Derived %d of %d products "
        "(category=%r, search=%r, sort=%s)",
        len(result),
        len(catalog),
        category_filter,
        search_text,
        sort_order.value,
    )
    return result


def available_categories(catalog: Iterable[Product]) -> list[str]:
    """Distinct categories in first-seen catalog order."""
    seen: dict[str, None] = {}
    for product in catalog:
        if product.category:
            seen.setdefault(product.category, None)
    return list(seen)
