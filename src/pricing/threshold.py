# src/pricing/threshold.py

"""Target-price check."""

from decimal import Decimal

from src.models.alert_decision import AlertDecision


def evaluate(
    observed_value: Decimal,
    target_price: Decimal | None,
    product_name: str = "",
) -> AlertDecision | None:
    """Return an :class:`AlertDecision` when the price is at or below target.

    The boundary is inclusive.  A product without a target never alerts.
    """
    if target_price is None:
        return None
    if observed_value <= target_price:
        return AlertDecision(
            product_name=product_name,
            observed_value=observed_value,
            target_price=target_price,
        )
    return None
