# src/config/products.py

"""Load the list of tracked products from JSON."""

import json
import logging
import re
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from src.config.settings import Settings
from src.exceptions import ConfigError
from src.models.product import PriceLocator, Product

logger = logging.getLogger("price_watch.config")

AMAZON_WHOLE_SELECTOR = ".a-price-whole"
AMAZON_FRACTION_SELECTOR = ".a-price-fraction"

# A bare class name such as "a-price-whole"
_BARE_CLASS_RE = re.compile(r"^[A-Za-z_][\w-]*$")


def _to_selector(raw: str) -> str:
    """Accept a bare class name as shorthand for ``.class``."""
    selector = raw.strip()
    if _BARE_CLASS_RE.match(selector) and "-" in selector:
        return f".{selector}"
    return selector


def _parse_target(name: str, raw: Any) -> Decimal | None:
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ConfigError(f"Invalid target_price for '{name}': {raw!r}")
    try:
        target = Decimal(str(raw))
    except InvalidOperation as exc:
        raise ConfigError(
            f"Invalid target_price for '{name}': {raw!r}"
        ) from exc
    if not target.is_finite() or target < 0:
        raise ConfigError(f"Invalid target_price for '{name}': {raw!r}")
    return target


def parse_product(entry: dict[str, Any]) -> Product:
    """Build a :class:`Product` from one configuration entry."""
    missing = [
        key for key in ("name", "url", "selector")
        if not str(entry.get(key) or "").strip()
    ]
    if missing:
        raise ConfigError(
            f"Product entry missing {', '.join(missing)}: {entry!r}"
        )

    name = str(entry["name"]).strip()
    whole = _to_selector(str(entry["selector"]))
    fraction_raw = entry.get("fraction_selector")
    if fraction_raw:
        fraction: str | None = _to_selector(str(fraction_raw))
    elif whole == AMAZON_WHOLE_SELECTOR:
        fraction = AMAZON_FRACTION_SELECTOR
    else:
        fraction = None

    return Product(
        name=name,
        url=str(entry["url"]).strip(),
        locator=PriceLocator(whole=whole, fraction=fraction),
        target_price=_parse_target(name, entry.get("target_price")),
    )


def load_products(path: Path | None = None) -> list[Product]:
    """Read the product list, preserving file order.

    Raises:
        ConfigError: The file is unreadable, not a list of objects,
            or contains duplicate product names.
    """
    source = path or Settings.PRODUCTS_PATH
    try:
        with open(source, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(
            f"Cannot read products file {source}: {exc}"
        ) from exc

    if not isinstance(data, list):
        raise ConfigError(f"Products file {source} must hold a list")

    products: list[Product] = []
    seen: set[str] = set()
    for entry in data:
        if not isinstance(entry, dict):
            raise ConfigError(f"Product entry is not an object: {entry!r}")
        product = parse_product(entry)
        if product.name in seen:
            raise ConfigError(f"Duplicate product name: '{product.name}'")
        seen.add(product.name)
        products.append(product)

    logger.info("Loaded %d products from %s", len(products), source)
    return products
