# src/models/alert_decision.py

"""Outcome of a positive threshold check."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class AlertDecision:
    """A product observed at or below its target price."""

    product_name: str
    observed_value: Decimal
    target_price: Decimal
