# src/models/display_state.py

"""Read models for the browse view, the product view and catalog loading."""

from dataclasses import dataclass, field
from enum import Enum

from src.models.product import Product


class SortOrder(str, Enum):
    """Ordering applied to the derived product list."""

    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    RATING_DESC = "rating_desc"

    @classmethod
    def parse(cls, value: "str | SortOrder") -> "SortOrder":
        """Resolve an enum value, accepting the short ``asc``/``desc`` forms."""
        if isinstance(value, SortOrder):
            return value
        aliases = {"asc": cls.PRICE_ASC, "desc": cls.PRICE_DESC}
        lowered = value.strip().lower()
        if lowered in aliases:
            return aliases[lowered]
        return cls(lowered)


class LoadPhase(str, Enum):
    """Observable phases of the catalog fetch."""

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class DisplayState:
    """Browse inputs plus the list derived from them.

    ``derived_list`` is only ever produced by the derivation pipeline
    from the other four fields; a new state is swapped in whole.
    """

    source_catalog: tuple[Product, ...] = ()
    category_filter: str = "all"
    search_text: str = ""
    sort_order: SortOrder = SortOrder.PRICE_ASC
    derived_list: tuple[Product, ...] = ()


class ModalState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


@dataclass(frozen=True)
class SelectionState:
    """The product currently inspected in the product view."""

    status: ModalState = ModalState.CLOSED
    selected_product: Product | None = None
    image_index: int = 0
    related_products: tuple[Product, ...] = field(default=())
