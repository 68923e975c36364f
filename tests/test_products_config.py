# tests/test_products_config.py

"""Tests for loading the tracked product list."""

import json
import tempfile
import unittest
from decimal import Decimal
from pathlib import Path
from typing import Any

from src.config.products import (
    AMAZON_FRACTION_SELECTOR,
    AMAZON_WHOLE_SELECTOR,
    load_products,
    parse_product,
)
from src.exceptions import ConfigError


class TestParseProduct(unittest.TestCase):
    """parse_product() turns one JSON entry into a Product."""

    def test_bare_amazon_class_gets_fraction(self) -> None:
        """'a-price-whole' expands to the Amazon selector pair."""
        product = parse_product({
            "name": "Headphones",
            "url": "https://www.amazon.co.uk/dp/B0D8JWPPDK/",
            "selector": "a-price-whole",
        })
        self.assertEqual(product.locator.whole, AMAZON_WHOLE_SELECTOR)
        self.assertEqual(product.locator.fraction, AMAZON_FRACTION_SELECTOR)
        self.assertIsNone(product.target_price)

    def test_custom_selectors(self) -> None:
        """Explicit CSS selectors are kept as given."""
        product = parse_product({
            "name": "Monitor",
            "url": "https://example.com/m",
            "selector": "#corePrice span.whole",
            "fraction_selector": "#corePrice span.cents",
        })
        self.assertEqual(product.locator.whole, "#corePrice span.whole")
        self.assertEqual(product.locator.fraction, "#corePrice span.cents")

    def test_single_selector_has_no_fraction(self) -> None:
        """Non-Amazon selectors have no implied fraction."""
        product = parse_product({
            "name": "Lamp",
            "url": "https://example.com/l",
            "selector": "span.price",
        })
        self.assertIsNone(product.locator.fraction)

    def test_target_price_parsed_as_decimal(self) -> None:
        """Numeric and string targets both become Decimals."""
        for raw, expected in ((100, "100"), ("59.99", "59.99"), (12.5, "12.5")):
            with self.subTest(raw=raw):
                product = parse_product({
                    "name": "X", "url": "u", "selector": ".p",
                    "target_price": raw,
                })
                self.assertEqual(product.target_price, Decimal(expected))

    def test_invalid_target_raises(self) -> None:
        """Non-numeric, negative or boolean targets are rejected."""
        for raw in ("cheap", -1, True):
            with self.subTest(raw=raw):
                with self.assertRaises(ConfigError):
                    parse_product({
                        "name": "X", "url": "u", "selector": ".p",
                        "target_price": raw,
                    })

    def test_missing_keys_raise(self) -> None:
        """name, url and selector are required."""
        with self.assertRaises(ConfigError):
            parse_product({"name": "X", "selector": ".p"})


class TestLoadProducts(unittest.TestCase):
    """load_products() reads the JSON file."""

    def setUp(self) -> None:
        """Create a temp directory for product files."""
        self.tmp_dir = Path(tempfile.mkdtemp())

    def _write(self, data: Any) -> Path:
        path = self.tmp_dir / "products.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    def test_preserves_order(self) -> None:
        """Products come back in file order."""
        path = self._write([
            {"name": n, "url": f"https://example.com/{n}", "selector": ".p"}
            for n in ("C", "A", "B")
        ])
        self.assertEqual([p.name for p in load_products(path)], ["C", "A", "B"])

    def test_duplicate_names_rejected(self) -> None:
        """Names must be unique within a run."""
        path = self._write([
            {"name": "A", "url": "u1", "selector": ".p"},
            {"name": "A", "url": "u2", "selector": ".p"},
        ])
        with self.assertRaises(ConfigError):
            load_products(path)

    def test_not_a_list_rejected(self) -> None:
        """The document must be a list."""
        with self.assertRaises(ConfigError):
            load_products(self._write({"name": "A"}))

    def test_missing_file_rejected(self) -> None:
        """A missing file is a configuration error."""
        with self.assertRaises(ConfigError):
            load_products(self.tmp_dir / "missing.json")

    def test_bundled_products_file_loads(self) -> None:
        """The default products.json is valid."""
        products = load_products()
        self.assertGreaterEqual(len(products), 1)


if __name__ == "__main__":
    unittest.main()
