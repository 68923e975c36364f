# src/models/product.py

"""Tracked product configuration."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PriceLocator:
    """CSS selectors for the price fragments on a product page.

    ``whole`` is also the element the fetcher waits for.
    """

    whole: str
    fraction: str | None = None


@dataclass(frozen=True)
class Product:
    """A product page to watch, immutable for the duration of a run."""

    name: str
    url: str
    locator: PriceLocator
    target_price: Decimal | None = None
