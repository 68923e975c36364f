# tests/test_price_parser.py

"""Tests for price fragment normalisation."""

import re
import unittest
from decimal import Decimal

from src.pricing.price_parser import normalize, to_numeric

_CANONICAL = re.compile(r"^\d+\.\d+$")


class TestNormalize(unittest.TestCase):
    """normalize() combines whole and fraction fragments."""

    def test_dot_in_whole_is_grouping(self) -> None:
        """A dot in the whole part is a thousands separator."""
        self.assertEqual(normalize("1.234", "99"), "1234.99")

    def test_both_absent(self) -> None:
        """Missing fragments default to zero."""
        self.assertEqual(normalize(None, None), "0.0")

    def test_missing_fraction(self) -> None:
        """A missing fraction defaults to "0"."""
        self.assertEqual(normalize("59", None), "59.0")

    def test_missing_whole(self) -> None:
        """A missing whole part defaults to "0"."""
        self.assertEqual(normalize(None, "99"), "0.99")

    def test_amazon_trailing_dot(self) -> None:
        """Amazon's whole text ends with the decimal point."""
        self.assertEqual(normalize("59.", "99"), "59.99")

    def test_keeps_grouping_comma(self) -> None:
        """Comma grouping is kept in the stored text."""
        self.assertEqual(normalize("1,299.", "00"), "1,299.00")

    def test_preserves_trailing_zero(self) -> None:
        """Fraction digits are kept exactly, no rounding."""
        self.assertEqual(normalize("99", "50"), "99.50")

    def test_strips_currency_and_whitespace(self) -> None:
        """Currency symbols and spaces never reach the result."""
        self.assertEqual(normalize(" £1 299 ", " 95 "), "1299.95")

    def test_empty_strings(self) -> None:
        """Empty fragments behave like missing ones."""
        self.assertEqual(normalize("", ""), "0.0")

    def test_canonical_shape_for_messy_inputs(self) -> None:
        """Output matches ^\\d+\\.\\d+$ once grouping commas are removed."""
        samples = [
            ("1.234", "99"),
            (None, None),
            ("", "5"),
            (",", ","),
            ("abc", "xyz"),
            ("1,,234.", "9"),
            (",12,", "00"),
            ("€ 3.499,", "-"),
            ("\n 42 \t", None),
        ]
        for whole, fraction in samples:
            with self.subTest(whole=whole, fraction=fraction):
                result = normalize(whole, fraction)
                self.assertRegex(result.replace(",", ""), _CANONICAL)


class TestToNumeric(unittest.TestCase):
    """to_numeric() is for comparisons only."""

    def test_plain(self) -> None:
        """Plain decimal strings parse exactly."""
        self.assertEqual(to_numeric("99.50"), Decimal("99.50"))

    def test_strips_commas(self) -> None:
        """Grouping commas are removed before parsing."""
        self.assertEqual(to_numeric("1,299.00"), Decimal("1299"))

    def test_zero(self) -> None:
        """The default "0.0" is numerically zero."""
        self.assertEqual(to_numeric(normalize(None, None)), 0)

    def test_invalid_raises(self) -> None:
        """Non-numeric text raises ValueError."""
        with self.assertRaises(ValueError):
            to_numeric("N/A")

    def test_nan_rejected(self) -> None:
        """NaN is not a price."""
        with self.assertRaises(ValueError):
            to_numeric("NaN")


if __name__ == "__main__":
    unittest.main()
