# src/storage/history_store.py

"""JSON-file price history ledger.

The ledger is a single document mapping each product name to its
observations, oldest first::

    {
      "Wireless Headphones": [
        {"timestamp": "2025-06-01T08:30:00.000Z", "price": "59.99"}
      ]
    }

The store only reads and writes the whole document.  A run loads it
once, appends in memory and saves the full ledger back.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from src.config.settings import Settings
from src.exceptions import PersistenceError
from src.models.price_observation import PriceObservation

logger = logging.getLogger("price_watch.history")

HistoryLedger = dict[str, list[PriceObservation]]


def _decode(document: Any, path: Path) -> HistoryLedger:
    """Validate the raw JSON document and build a ledger from it."""
    if not isinstance(document, dict):
        raise PersistenceError(
            f"History file {path} is not a JSON object"
        )
    ledger: HistoryLedger = {}
    for name, records in document.items():
        if not isinstance(records, list):
            raise PersistenceError(
                f"History for '{name}' in {path} is not a list"
            )
        try:
            ledger[name] = [
                PriceObservation.from_dict(r) for r in records
            ]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise PersistenceError(
                f"Malformed history entry for '{name}' in {path}: {exc}"
            ) from exc
    return ledger


def _encode(ledger: HistoryLedger) -> dict[str, list[dict[str, str]]]:
    return {
        name: [obs.to_dict() for obs in observations]
        for name, observations in ledger.items()
    }


class JsonHistoryStore:
    """Owns persistence of the price history ledger."""

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path or Settings.HISTORY_PATH

    # ── I/O boundary ─────────────────────────────────────

    def load(self) -> HistoryLedger:
        """Read the ledger, creating an empty document if none exists.

        Raises:
            PersistenceError: The file cannot be created, read or parsed.
        """
        try:
            if not self.path.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text("{}\n", encoding="utf-8")
                logger.info(
                    "Created empty price history at %s", self.path,
                )
            with open(self.path, encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as exc:
            raise PersistenceError(
                f"History file {self.path} is not valid JSON: {exc}"
            ) from exc
        except OSError as exc:
            raise PersistenceError(
                f"Cannot read history file {self.path}: {exc}"
            ) from exc

        ledger = _decode(document, self.path)
        logger.debug(
            "Loaded history for %d products from %s",
            len(ledger),
            self.path,
        )
        return ledger

    def save(self, ledger: HistoryLedger) -> None:
        """Overwrite the persisted ledger with *ledger*.

        Writes to a temporary sibling file first and swaps it in, so a
        crash mid-write leaves the previous document intact.

        Raises:
            PersistenceError: The file cannot be written.
        """
        payload = json.dumps(
            _encode(ledger), ensure_ascii=False, indent=2,
        )
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.write("\n")
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            raise PersistenceError(
                f"Cannot write history file {self.path}: {exc}"
            ) from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
        logger.debug(
            "Saved history for %d products to %s",
            len(ledger),
            self.path,
        )

    # ── In-memory operations ─────────────────────────────

    @staticmethod
    def append(
        ledger: HistoryLedger,
        product_name: str,
        observation: PriceObservation,
    ) -> HistoryLedger:
        """Append *observation* to *product_name*'s sequence in place."""
        ledger.setdefault(product_name, []).append(observation)
        return ledger

    @staticmethod
    def trend_summary(
        ledger: HistoryLedger, product_name: str,
    ) -> dict[str, object] | None:
        """Compute min / max / latest price for a product.

        Entries whose price text is not numeric are ignored.  Returns
        ``None`` when the product has no usable history.
        """
        observations = ledger.get(product_name, [])
        priced: list[tuple[PriceObservation, Any]] = []
        for obs in observations:
            try:
                priced.append((obs, obs.price_value))
            except ValueError:
                logger.warning(
                    "Skipping non-numeric price %r for '%s'",
                    obs.price_text,
                    product_name,
                )
        if not priced:
            return None
        cheapest = min(priced, key=lambda p: p[1])
        dearest = max(priced, key=lambda p: p[1])
        latest = priced[-1]
        return {
            "min": cheapest[0].price_text,
            "min_at": cheapest[0].timestamp,
            "max": dearest[0].price_text,
            "max_at": dearest[0].timestamp,
            "latest": latest[0].price_text,
            "latest_at": latest[0].timestamp,
            "count": len(priced),
        }
