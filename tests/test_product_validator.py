# tests/test_product_validator.py

"""Tests for ProductValidator catalog record validation."""

import json
import unittest
from decimal import Decimal
from pathlib import Path
from typing import Any

from src.filters.product_validator import ProductValidator

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_catalog_fixture() -> list[dict[str, Any]]:
    """Raw catalog records as the service returns them."""
    with open(FIXTURES_DIR / "catalog.json", encoding="utf-8") as f:
        data: list[dict[str, Any]] = json.load(f)
    return data


def _record(pid: int, title: str = "Item", price: Any = 10) -> dict[str, Any]:
    return {"id": pid, "title": title, "price": price, "category": "a"}


class TestProductValidator(unittest.TestCase):
    """ProductValidator.validate behaviour."""

    def test_fixture_catalog_all_valid(self) -> None:
        products, dropped = ProductValidator.validate(
            load_catalog_fixture()
        )
        self.assertEqual(len(products), 8)
        self.assertEqual(dropped, 0)

    def test_keeps_service_order(self) -> None:
        products, _ = ProductValidator.validate(
            [_record(3), _record(1), _record(2)]
        )
        self.assertEqual([p.id for p in products], [3, 1, 2])

    def test_zero_price_is_valid(self) -> None:
        """Free items are allowed; only negative prices are dropped."""
        products, dropped = ProductValidator.validate([_record(1, price=0)])
        self.assertEqual(len(products), 1)
        self.assertEqual(products[0].price, Decimal("0"))
        self.assertEqual(dropped, 0)

    def test_negative_price_dropped(self) -> None:
        products, dropped = ProductValidator.validate([_record(1, price=-5)])
        self.assertEqual(products, [])
        self.assertEqual(dropped, 1)

    def test_non_finite_prices_dropped(self) -> None:
        """NaN and Infinity prices are dropped without failing the batch."""
        records = json.loads(
            '[{"id": 1, "title": "a", "price": NaN},'
            ' {"id": 2, "title": "b", "price": Infinity},'
            ' {"id": 3, "title": "c", "price": "-Infinity"},'
            ' {"id": 4, "title": "d", "price": "sNaN"},'
            ' {"id": 5, "title": "e", "price": 3}]'
        )
        products, dropped = ProductValidator.validate(records)
        self.assertEqual([p.id for p in products], [5])
        self.assertEqual(dropped, 4)

    def test_out_of_range_rating_cleared(self) -> None:
        records = [
            {**_record(1), "rating": {"rate": 9, "count": 10}},
            {**_record(2), "rating": {"rate": 4.0, "count": -3}},
            {**_record(3), "rating": {"rate": -0.5, "count": 1}},
            {**_record(4), "rating": {"rate": 5, "count": 0}},
        ]
        products, dropped = ProductValidator.validate(records)
        self.assertEqual(dropped, 0)
        self.assertEqual([p.id for p in products], [1, 2, 3, 4])
        self.assertIsNone(products[0].rating)
        self.assertIsNone(products[1].rating)
        self.assertIsNone(products[2].rating)
        assert products[3].rating is not None
        self.assertEqual(products[3].rating.rate, 5.0)

    def test_whitespace_title_dropped(self) -> None:
        products, dropped = ProductValidator.validate(
            [_record(1, title="   ")]
        )
        self.assertEqual(products, [])
        self.assertEqual(dropped, 1)

    def test_malformed_records_dropped(self) -> None:
        """Missing ids, bad prices and non-objects are all skipped."""
        records: list[Any] = [
            {"title": "No id", "price": 1},
            _record(2, price="not a number"),
            _record(3, price=None),
            "just a string",
            _record(4),
        ]
        products, dropped = ProductValidator.validate(records)
        self.assertEqual([p.id for p in products], [4])
        self.assertEqual(dropped, 4)

    def test_repeated_id_keeps_first(self) -> None:
        products, dropped = ProductValidator.validate(
            [_record(1, title="First"), _record(1, title="Second")]
        )
        self.assertEqual(len(products), 1)
        self.assertEqual(products[0].title, "First")
        self.assertEqual(dropped, 1)

    def test_empty_input(self) -> None:
        products, dropped = ProductValidator.validate([])
        self.assertEqual(products, [])
        self.assertEqual(dropped, 0)


if __name__ == "__main__":
    unittest.main()
