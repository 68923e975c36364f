# src/notifications/log_notifier.py

"""Notifier that only writes alerts to the log (``--dry-run``)."""

import logging
from decimal import Decimal

from src.config.settings import Settings
from src.notifications.base import NotificationResult, Notifier

logger = logging.getLogger("price_watch.alerts")


class LogNotifier(Notifier):
    """Log the alert instead of delivering it."""

    def notify(
        self,
        product_name: str,
        observed_value: Decimal,
        target_price: Decimal,
        url: str | None = None,
    ) -> NotificationResult:
        logger.warning(
            "[dry-run] %s is %s%s (target %s%s)",
            product_name,
            Settings.CURRENCY_SYMBOL,
            observed_value,
            Settings.CURRENCY_SYMBOL,
            target_price,
        )
        return NotificationResult(success=True)
