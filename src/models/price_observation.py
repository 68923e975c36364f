# src/models/price_observation.py

"""A single recorded price for a product at a point in time."""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from src.pricing.price_parser import to_numeric


def format_timestamp(moment: datetime) -> str:
    """Render *moment* as UTC ISO-8601 with milliseconds and a ``Z``.

    Matches the ``2025-06-01T08:30:00.000Z`` form already present in
    existing history files.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + (
        f"{utc.microsecond // 1000:03d}Z"
    )


def parse_timestamp(raw: str) -> datetime:
    """Parse any ISO-8601 timestamp into an aware UTC datetime."""
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


@dataclass(frozen=True)
class PriceObservation:
    """One ledger entry.  ``price_text`` is the durable value.

    Timestamps are kept in UTC at millisecond precision, the resolution
    of the on-disk format, so an observation survives a save/load
    cycle unchanged.
    """

    timestamp: datetime
    price_text: str

    def __post_init__(self) -> None:
        moment = self.timestamp
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        moment = moment.astimezone(timezone.utc)
        moment = moment.replace(
            microsecond=moment.microsecond // 1000 * 1000
        )
        object.__setattr__(self, "timestamp", moment)

    @property
    def price_value(self) -> Decimal:
        """Numeric price, for comparisons only."""
        return to_numeric(self.price_text)

    def to_dict(self) -> dict[str, str]:
        """Serialise to the on-disk ``{timestamp, price}`` record."""
        return {
            "timestamp": format_timestamp(self.timestamp),
            "price": self.price_text,
        }

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> "PriceObservation":
        """Build from an on-disk record.

        Raises:
            KeyError: A required field is missing.
            ValueError: The timestamp is not ISO-8601.
        """
        return cls(
            timestamp=parse_timestamp(str(record["timestamp"])),
            price_text=str(record["price"]),
        )
