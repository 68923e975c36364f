# src/notifications/base.py

"""Notifier capability for price alerts."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from src.exceptions import NotifyError


@dataclass
class NotificationResult:
    """Result of dispatching one alert."""

    success: bool
    error: NotifyError | None = None


class Notifier(ABC):
    """Sends a price alert for a single product."""

    @abstractmethod
    def notify(
        self,
        product_name: str,
        observed_value: Decimal,
        target_price: Decimal,
        url: str | None = None,
    ) -> NotificationResult:
        """Dispatch an alert.

        Implementations report delivery problems through the returned
        result rather than by raising.
        """
        ...
