# src/models/product.py

"""Catalog product model shared by every component."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class Rating:
    """Average review score (0-5) and number of reviews."""

    rate: float
    count: int = 0


@dataclass(frozen=True)
class Product:
    """A single catalog entry, immutable once loaded."""

    id: int
    title: str
    price: Decimal
    category: str = ""
    description: str = ""
    image: str = ""
    rating: Rating | None = None
    gallery: tuple[str, ...] = field(default=(), compare=False)

    @property
    def images(self) -> tuple[str, ...]:
        """Image URLs the product view can cycle through."""
        if self.gallery:
            return self.gallery
        return (self.image,) if self.image else ()

    @classmethod
    def from_api(cls, record: dict[str, Any]) -> "Product":
        """Build a Product from one catalog-service JSON record.

        Raises ``KeyError``, ``TypeError``, ``ValueError`` or
        ``ArithmeticError`` when a required field is missing or
        malformed.
        """
        raw_rating = record.get("rating")
        rating: Rating | None = None
        if isinstance(raw_rating, dict) and raw_rating.get("rate") is not None:
            rating = Rating(
                rate=float(raw_rating["rate"]),
                count=int(raw_rating.get("count") or 0),
            )

        raw_images = record.get("images") or ()
        gallery = tuple(str(url) for url in raw_images if url)

        return cls(
            id=int(record["id"]),
            title=str(record["title"]),
            price=Decimal(str(record["price"])),
            category=str(record.get("category", "")),
            description=str(record.get("description", "")),
            image=str(record.get("image", "")),
            rating=rating,
            gallery=gallery,
        )
