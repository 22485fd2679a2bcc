# tests/test_session.py

"""Tests for the per-session storefront state."""

import tempfile
import unittest
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock, patch

from src.exceptions import FetchError
from src.models.display_state import LoadPhase, ModalState, SortOrder
from src.services.catalog_loader import CatalogLoader
from src.services.session import StorefrontSession
from src.storage.kv_store import SqliteKeyValueStore
from src.storage.persistence import PersistenceAdapter

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _make_loader(text: str, status_code: int = 200) -> CatalogLoader:
    with patch("src.services.catalog_loader.curl_requests.Session"):
        loader = CatalogLoader()
    mock_resp = MagicMock()
    mock_resp.status_code = status_code
    mock_resp.text = text
    loader.session = MagicMock()
    loader.session.get.return_value = mock_resp
    return loader


def _fixture_text() -> str:
    return (FIXTURES_DIR / "catalog.json").read_text(encoding="utf-8")


class TestStorefrontSession(unittest.IsolatedAsyncioTestCase):
    """Browse, favorites, cart and product view through one session."""

    async def asyncSetUp(self) -> None:
        self.tmp_dir = tempfile.mkdtemp()
        self.store = SqliteKeyValueStore(Path(self.tmp_dir) / "store.db")
        self.addCleanup(self.store.close)
        self.adapter = PersistenceAdapter(self.store)
        self.session = StorefrontSession(
            loader=_make_loader(_fixture_text()), persistence=self.adapter
        )
        await self.session.start()

    def _ids(self) -> list[int]:
        return [p.id for p in self.session.derived_list]

    # ── Start-up ─────────────────────────────────────────

    async def test_start_loads_catalog(self) -> None:
        self.assertIs(self.session.phase, LoadPhase.LOADED)
        self.assertEqual(len(self.session.catalog), 8)
        self.assertIsNone(self.session.load_error)

    async def test_initial_list_price_ascending(self) -> None:
        self.assertEqual(self._ids(), [19, 18, 2, 3, 9, 10, 1, 5])

    async def test_categories_first_seen_order(self) -> None:
        self.assertEqual(
            self.session.categories,
            ["men's clothing", "jewelery", "electronics", "women's clothing"],
        )

    async def test_failed_fetch_leaves_empty_catalog(self) -> None:
        session = StorefrontSession(
            loader=_make_loader("", 500), persistence=self.adapter
        )
        await session.start()
        self.assertIs(session.phase, LoadPhase.FAILED)
        self.assertIsInstance(session.load_error, FetchError)
        self.assertEqual(session.derived_list, ())
        self.assertEqual(session.categories, [])

    async def test_close_during_fetch_discards_result(self) -> None:
        loader = _make_loader(_fixture_text())
        session = StorefrontSession(loader=loader, persistence=self.adapter)
        real_load = loader.load

        def load_then_close() -> list:
            products = real_load()
            session.close()
            return products

        loader.load = load_then_close  # type: ignore[method-assign]
        await session.start()
        self.assertEqual(session.catalog, ())

    # ── Browse inputs ────────────────────────────────────

    async def test_set_category(self) -> None:
        self.session.set_category("men's clothing")
        self.assertEqual(self._ids(), [2, 3, 1])

    async def test_set_search_case_insensitive(self) -> None:
        self.session.set_search("SHORT sleeve")
        self.assertEqual(self._ids(), [19, 18])

    async def test_search_without_match_is_empty(self) -> None:
        self.session.set_search("zzz")
        self.assertEqual(self.session.derived_list, ())

    async def test_set_sort_rating(self) -> None:
        self.session.set_sort(SortOrder.RATING_DESC)
        self.assertEqual(self._ids(), [3, 5, 19, 2, 1, 9, 10, 18])

    async def test_set_sort_accepts_string(self) -> None:
        self.session.set_sort("price_desc")
        self.assertEqual(self._ids()[0], 5)

    async def test_inputs_compose(self) -> None:
        self.session.set_category("electronics")
        self.session.set_sort("price_desc")
        self.session.set_search("ssd")
        self.assertEqual(self._ids(), [10])
        self.session.set_search("")
        self.assertEqual(self._ids(), [10, 9])

    async def test_catalog_not_mutated_by_derivation(self) -> None:
        before = self.session.catalog
        self.session.set_sort("rating_desc")
        self.session.set_category("jewelery")
        self.assertEqual(self.session.catalog, before)

    async def test_unknown_sort_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.session.set_sort("newest")

    # ── Favorites & cart ─────────────────────────────────

    async def test_cart_uses_catalog_price(self) -> None:
        self.session.add_to_cart(3)
        self.session.add_to_cart(3)
        self.assertEqual(self.session.cart_count, 2)
        self.assertEqual(self.session.cart_total, Decimal("111.98"))

    async def test_state_survives_new_session(self) -> None:
        self.session.toggle_favorite(5)
        self.session.add_to_cart(2, quantity=2)
        self.session.close()

        reopened = StorefrontSession(
            loader=_make_loader(_fixture_text()), persistence=self.adapter
        )
        await reopened.start()
        self.assertEqual(reopened.favorites, frozenset({5}))
        self.assertEqual(reopened.cart_total, Decimal("44.60"))

    async def test_cart_restored_without_catalog(self) -> None:
        self.session.add_to_cart(1)
        offline = StorefrontSession(
            loader=_make_loader("", 500), persistence=self.adapter
        )
        await offline.start()
        self.assertEqual(len(offline.cart_lines), 1)
        self.assertEqual(offline.add_to_cart(2), offline.cart_lines)
        self.assertEqual(len(offline.cart_lines), 1)

    async def test_non_finite_prices_never_reach_cart(self) -> None:
        text = (
            '[{"id": 1, "title": "a", "price": NaN},'
            ' {"id": 2, "title": "b", "price": "Infinity"},'
            ' {"id": 3, "title": "c", "price": 3}]'
        )
        session = StorefrontSession(
            loader=_make_loader(text), persistence=self.adapter
        )
        await session.start()
        self.assertIs(session.phase, LoadPhase.LOADED)
        self.assertEqual([p.id for p in session.catalog], [3])

        self.assertEqual(session.add_to_cart(2), ())
        session.add_to_cart(3)
        self.assertEqual(
            [line.product_id for line in session.cart_lines], [3]
        )
        self.assertEqual(session.cart_total, Decimal("3.00"))

    # ── Product view ─────────────────────────────────────

    async def test_open_product(self) -> None:
        state = self.session.open_product(1)
        self.assertIs(state.status, ModalState.OPEN)
        self.assertEqual([p.id for p in state.related_products], [2, 3])

    async def test_open_unknown_product_ignored(self) -> None:
        state = self.session.open_product(999)
        self.assertIs(state.status, ModalState.CLOSED)
        self.assertIsNone(self.session.selection.selected_product)

    async def test_gallery_cycling(self) -> None:
        self.session.open_product(5)
        self.assertEqual(self.session.prev_image().image_index, 1)
        self.assertEqual(self.session.next_image().image_index, 0)

    async def test_related_uses_full_catalog(self) -> None:
        self.session.set_category("electronics")
        state = self.session.open_product(9)
        self.assertEqual([p.id for p in state.related_products], [10])
        state = self.session.select_related(10)
        assert state.selected_product is not None
        self.assertEqual(state.selected_product.id, 10)

    async def test_close_product(self) -> None:
        self.session.open_product(1)
        self.assertIs(self.session.close_product().status, ModalState.CLOSED)


if __name__ == "__main__":
    unittest.main()
