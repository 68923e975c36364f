# tests/test_product_model.py

"""Tests for the Product, PriceObservation and AlertDecision models."""

import dataclasses
import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from src.models.alert_decision import AlertDecision
from src.models.price_observation import (
    PriceObservation,
    format_timestamp,
    parse_timestamp,
)
from src.models.product import PriceLocator, Product


class TestProductModel(unittest.TestCase):
    """Product dataclass unit tests."""

    def test_defaults(self) -> None:
        """Target price and fraction selector are optional."""
        product = Product(
            name="Widget",
            url="https://example.com/w",
            locator=PriceLocator(whole=".price"),
        )
        self.assertIsNone(product.target_price)
        self.assertIsNone(product.locator.fraction)

    def test_is_immutable(self) -> None:
        """Products cannot be changed during a run."""
        product = Product(
            name="Widget",
            url="https://example.com/w",
            locator=PriceLocator(whole=".price"),
        )
        with self.assertRaises(dataclasses.FrozenInstanceError):
            product.name = "Other"  # type: ignore[misc]


class TestPriceObservation(unittest.TestCase):
    """PriceObservation serialisation tests."""

    def test_to_dict_shape(self) -> None:
        """Records serialise to {timestamp, price} only."""
        obs = PriceObservation(
            timestamp=datetime(2025, 6, 1, 8, 30, tzinfo=timezone.utc),
            price_text="59.99",
        )
        self.assertEqual(
            obs.to_dict(),
            {"timestamp": "2025-06-01T08:30:00.000Z", "price": "59.99"},
        )

    def test_price_value_is_decimal(self) -> None:
        """price_value strips grouping commas."""
        obs = PriceObservation(
            timestamp=datetime(2025, 1, 1, tzinfo=timezone.utc),
            price_text="1,299.00",
        )
        self.assertEqual(obs.price_value, Decimal("1299.00"))

    def test_from_dict_reads_javascript_timestamps(self) -> None:
        """toISOString()-style timestamps are parsed as UTC."""
        obs = PriceObservation.from_dict(
            {"timestamp": "2025-03-04T05:06:07.089Z", "price": "10.5"}
        )
        self.assertEqual(
            obs.timestamp,
            datetime(2025, 3, 4, 5, 6, 7, 89000, tzinfo=timezone.utc),
        )
        self.assertEqual(obs.price_text, "10.5")

    def test_from_dict_missing_price_raises(self) -> None:
        """A record without a price is rejected."""
        with self.assertRaises(KeyError):
            PriceObservation.from_dict({"timestamp": "2025-01-01T00:00:00Z"})

    def test_timestamp_truncated_to_milliseconds(self) -> None:
        """Sub-millisecond precision is dropped on construction."""
        obs = PriceObservation(
            timestamp=datetime(2025, 1, 1, 0, 0, 0, 123456, tzinfo=timezone.utc),
            price_text="1.0",
        )
        self.assertEqual(obs.timestamp.microsecond, 123000)

    def test_naive_timestamp_treated_as_utc(self) -> None:
        """Naive datetimes are assumed to be UTC."""
        obs = PriceObservation(
            timestamp=datetime(2025, 1, 1, 12, 0), price_text="1.0",
        )
        self.assertEqual(obs.timestamp.tzinfo, timezone.utc)
        self.assertEqual(obs.timestamp.hour, 12)

    def test_format_timestamp_converts_offsets(self) -> None:
        """Non-UTC datetimes are converted before formatting."""
        plus_two = timezone(timedelta(hours=2))
        moment = datetime(2025, 1, 1, 12, 0, tzinfo=plus_two)
        self.assertEqual(
            format_timestamp(moment), "2025-01-01T10:00:00.000Z"
        )

    def test_parse_timestamp_accepts_offsets(self) -> None:
        """Explicit offsets are honoured."""
        moment = parse_timestamp("2025-01-01T12:00:00+02:00")
        self.assertEqual(moment.hour, 10)
        self.assertEqual(moment.tzinfo, timezone.utc)


class TestAlertDecision(unittest.TestCase):
    """AlertDecision value semantics."""

    def test_equality(self) -> None:
        """Two decisions with identical fields are equal."""
        a = AlertDecision("Widget", Decimal("99.50"), Decimal("100"))
        b = AlertDecision("Widget", Decimal("99.50"), Decimal("100"))
        self.assertEqual(a, b)


if __name__ == "__main__":
    unittest.main()
