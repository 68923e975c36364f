# src/notifications/email_notifier.py

"""Price alert e-mails over SMTP (Gmail app passwords by default)."""

import logging
import smtplib
import ssl
from decimal import Decimal
from email.message import EmailMessage

from src.config.settings import Settings
from src.exceptions import NotifyError
from src.notifications.base import NotificationResult, Notifier

logger = logging.getLogger("price_watch.email")

_SMTP_TIMEOUT = 30  # seconds


def build_alert_message(
    product_name: str,
    observed_value: Decimal,
    target_price: Decimal,
    sender: str,
    recipient: str,
    url: str | None = None,
    currency: str = Settings.CURRENCY_SYMBOL,
) -> EmailMessage:
    """Compose the alert e-mail for a product at or below target."""
    msg = EmailMessage()
    msg["Subject"] = f"Price Alert: {product_name}"
    msg["From"] = sender
    msg["To"] = recipient
    body = (
        f"{product_name} is now {currency}{observed_value}, which is at "
        f"or below your target price of {currency}{target_price}!"
    )
    if url:
        body += f"\n\n{url}"
    msg.set_content(body)
    return msg


class EmailNotifier(Notifier):
    """Send price alerts through an SMTP-over-SSL relay."""

    def __init__(
        self,
        user: str | None = None,
        password: str | None = None,
        recipient: str | None = None,
        host: str | None = None,
        port: int | None = None,
    ) -> None:
        self.user = user or Settings.EMAIL_USER
        self.password = password or Settings.EMAIL_PASS
        self.recipient = recipient or Settings.EMAIL_TO
        self.host = host or Settings.SMTP_HOST
        self.port = port or Settings.smtp_port()

    @property
    def configured(self) -> bool:
        """True when sender credentials and a recipient are set."""
        return bool(self.user and self.password and self.recipient)

    def notify(
        self,
        product_name: str,
        observed_value: Decimal,
        target_price: Decimal,
        url: str | None = None,
    ) -> NotificationResult:
        """E-mail a price alert; failures come back in the result."""
        if not self.configured:
            return NotificationResult(
                success=False,
                error=NotifyError(
                    "E-mail not configured "
                    "(set EMAIL_USER, EMAIL_PASS and EMAIL_TO)"
                ),
            )

        msg = build_alert_message(
            product_name,
            observed_value,
            target_price,
            sender=str(self.user),
            recipient=str(self.recipient),
            url=url,
        )
        try:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(
                self.host,
                self.port,
                context=context,
                timeout=_SMTP_TIMEOUT,
            ) as smtp:
                smtp.login(str(self.user), str(self.password))
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(
                "Failed to send alert for %s: %s",
                product_name,
                exc,
                exc_info=True,
            )
            return NotificationResult(
                success=False,
                error=NotifyError(f"SMTP delivery failed: {exc}"),
            )

        logger.info("Alert e-mail sent for %s", product_name)
        return NotificationResult(success=True)
