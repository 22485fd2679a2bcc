# src/filters/product_validator.py

"""Catalog record validation: drop unusable records before browsing."""

import logging
from dataclasses import replace
from typing import Any

from src.models.product import Product

logger = logging.getLogger("storefront.catalog")


class ProductValidator:
    """Turn raw service records into Products, dropping invalid ones."""

    @staticmethod
    def validate(
        records: list[Any],
    ) -> tuple[list[Product], int]:
        """Parse records, dropping malformed, blank, mispriced or repeated ones.

        Records keep their service order; for a repeated id the first
        occurrence wins.  A rating outside 0-5 or with a negative count
        is cleared rather than dropping the product.  Returns the valid products and the count of
        dropped records.
        """
        valid: list[Product] = []
        seen_ids: set[int] = set()
        dropped = 0

        for index, record in enumerate(records):
            if not isinstance(record, dict):
                logger.debug(
                    "Dropped non-object record at index %d", index
                )
                dropped += 1
                continue
            try:
                product = Product.from_api(record)
            except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
                logger.debug(
                    "Dropped malformed record at index %d: %r",
                    index,
                    exc,
                )
                dropped += 1
                continue
            if not product.title.strip():
                logger.debug(
                    "Dropped product with empty title (id=%d)",
                    product.id,
                )
                dropped += 1
                continue
            if not product.price.is_finite() or product.price < 0:
                logger.debug(
                    "Dropped product with invalid price "
                    "(id=%d, price=%s)",
                    product.id,
                    product.price,
                )
                dropped += 1
                continue
            rating = product.rating
            if rating is not None and not (
                0 <= rating.rate <= 5 and rating.count >= 0
            ):
                logger.debug(
                    "Cleared out-of-range rating (id=%d, rate=%s, count=%s)",
                    product.id,
                    rating.rate,
                    rating.count,
                )
                product = replace(product, rating=None)
            if product.id in seen_ids:
                logger.debug(
                    "Dropped repeated product id %d", product.id
                )
                dropped += 1
                continue
            seen_ids.add(product.id)
            valid.append(product)

        if dropped:
            logger.info(
                "Validation dropped %d invalid catalog records",
                dropped,
            )

        return valid, dropped
