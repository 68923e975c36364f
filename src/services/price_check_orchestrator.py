# src/services/price_check_orchestrator.py

"""Runs one price check over the configured products."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from src.config.settings import Settings
from src.exceptions import FetchError, NotifyError, PersistenceError
from src.models.price_observation import PriceObservation
from src.models.product import Product
from src.notifications.base import NotificationResult, Notifier
from src.pricing.price_parser import normalize, to_numeric
from src.pricing.threshold import evaluate
from src.scrapers.base_fetcher import PageFetcher
from src.storage.history_store import HistoryLedger, JsonHistoryStore

logger = logging.getLogger("price_watch.orchestrator")

SUCCEEDED = "succeeded"
FAILED = "failed"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _target_text(product: Product) -> str | None:
    if product.target_price is None:
        return None
    return str(product.target_price)


@dataclass
class ProductOutcome:
    """Terminal state of one product in a run."""

    name: str
    status: str
    price_text: str | None = None
    target_price: str | None = None
    alert_fired: bool = False
    notify_error: str | None = None
    error_kind: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == SUCCEEDED


@dataclass
class RunSummary:
    """Per-product outcomes of a run, in input order."""

    started_at: datetime
    finished_at: datetime | None = None
    outcomes: list[ProductOutcome] = field(
        default_factory=lambda: list[ProductOutcome]()
    )

    @property
    def succeeded(self) -> list[ProductOutcome]:
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> list[ProductOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def alerts(self) -> list[ProductOutcome]:
        return [o for o in self.outcomes if o.alert_fired]


class PriceCheckOrchestrator:
    """Fetches, records and evaluates each product, one after another.

    A failure on one product page never stops the others: fetch errors
    and unexpected exceptions become a failed :class:`ProductOutcome`.
    Only a :class:`~src.exceptions.PersistenceError` from the history
    store ends the run early.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        store: JsonHistoryStore,
        notifier: Notifier,
        timeout: float | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.fetcher = fetcher
        self.store = store
        self.notifier = notifier
        self.timeout = (
            timeout if timeout is not None else Settings.FETCH_TIMEOUT
        )
        self._clock = clock

    # ── Private helpers ──────────────────────────────────

    def _next_timestamp(
        self, ledger: HistoryLedger, name: str,
    ) -> datetime:
        """Clock reading, never earlier than the product's last entry."""
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        previous = ledger.get(name)
        if previous and previous[-1].timestamp > now:
            logger.warning(
                "Clock is behind last entry for '%s'; reusing %s",
                name,
                previous[-1].timestamp.isoformat(),
            )
            return previous[-1].timestamp
        return now

    async def _dispatch_alert(
        self,
        product: Product,
        price_value: Decimal,
        outcome: ProductOutcome,
    ) -> None:
        """Evaluate the target; notify and record the result on *outcome*."""
        decision = evaluate(
            price_value, product.target_price, product.name,
        )
        if decision is None:
            return

        logger.info(
            "%s at %s is at or below target %s",
            product.name,
            decision.observed_value,
            decision.target_price,
        )
        outcome.alert_fired = True
        try:
            result: NotificationResult = await asyncio.to_thread(
                self.notifier.notify,
                decision.product_name,
                decision.observed_value,
                decision.target_price,
                product.url,
            )
        except Exception as exc:
            logger.error(
                "Notifier raised for %s: %s",
                product.name,
                exc,
                exc_info=True,
            )
            result = NotificationResult(
                success=False, error=NotifyError(str(exc)),
            )

        if not result.success:
            reason = str(result.error or "unknown notifier failure")
            outcome.notify_error = reason
            logger.warning(
                "Alert for %s was not delivered: %s",
                product.name,
                reason,
            )

    async def _check_product(
        self, product: Product, ledger: HistoryLedger,
    ) -> ProductOutcome:
        """Fetch -> parse -> record -> evaluate for a single product."""
        outcome = ProductOutcome(
            name=product.name,
            status=FAILED,
            target_price=_target_text(product),
        )

        try:
            fragments = await asyncio.to_thread(
                self.fetcher.fetch_fragments,
                product.url,
                product.locator,
                self.timeout,
                product.name,
            )
        except FetchError as exc:
            outcome.error_kind = exc.kind
            outcome.error = exc.message
            logger.warning(
                "Failed to read price for %s (%s): %s",
                product.name,
                exc.kind,
                exc,
            )
            return outcome

        price_text = normalize(
            fragments.whole_text, fragments.fraction_text,
        )
        outcome.price_text = price_text
        logger.info("%s -> %s", product.name, price_text)

        observation = PriceObservation(
            timestamp=self._next_timestamp(ledger, product.name),
            price_text=price_text,
        )
        self.store.append(ledger, product.name, observation)
        # PersistenceError propagates and ends the run
        await asyncio.to_thread(self.store.save, ledger)

        outcome.status = SUCCEEDED
        await self._dispatch_alert(
            product, to_numeric(price_text), outcome,
        )
        return outcome

    # ── Entry point ──────────────────────────────────────

    async def run(self, products: list[Product]) -> RunSummary:
        """Check every product in order and return the run summary.

        The fetcher is opened before the first product and closed on
        every exit path.

        Raises:
            PersistenceError: The ledger could not be loaded or saved.
        """
        summary = RunSummary(started_at=self._clock())
        ledger = await asyncio.to_thread(self.store.load)

        await asyncio.to_thread(self.fetcher.open)
        try:
            for product in products:
                logger.info("Checking price for %s", product.name)
                try:
                    outcome = await self._check_product(product, ledger)
                except PersistenceError:
                    raise
                except Exception as exc:
                    logger.error(
                        "Unexpected error checking %s: %s",
                        product.name,
                        exc,
                        exc_info=True,
                    )
                    outcome = ProductOutcome(
                        name=product.name,
                        status=FAILED,
                        target_price=_target_text(product),
                        error_kind="unexpected",
                        error=str(exc),
                    )
                summary.outcomes.append(outcome)
        finally:
            await asyncio.to_thread(self.fetcher.close)

        summary.finished_at = self._clock()
        logger.info(
            "Price check finished: %d succeeded, %d failed, %d alerts",
            len(summary.succeeded),
            len(summary.failed),
            len(summary.alerts),
        )
        return summary
