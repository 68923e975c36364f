# src/config/settings.py

"""Central configuration for the price_watch tracker."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

from src.exceptions import ConfigError

load_dotenv()


class Settings:
    """Central configuration for the price_watch tracker."""

    # --- Fetching ---
    FETCH_TIMEOUT: float = 10.0         # Max seconds to wait for a price fragment
    REQUEST_DELAY: float = 2.0          # Seconds between polls / retries
    MAX_RETRIES: int = 3                # Attempts per fetch before giving up
    MAX_DELAY_MULTIPLIER: int = 8       # Cap for adaptive backoff
    CAPTCHA_KEYWORDS: list[str] = [
        "captcha",
        "verify you are human",
        "unusual traffic",
        "automated requests",
        "enter the characters you see below",
    ]

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-GB,en;q=0.9",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "sec-fetch-dest": "document",
        "sec-fetch-mode": "navigate",
        "sec-fetch-site": "none",
        "sec-fetch-user": "?1",
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Alerts ---
    CURRENCY_SYMBOL: str = "£"
    SMTP_HOST: str = os.getenv("SMTP_HOST", "smtp.gmail.com")
    SMTP_PORT: str = os.getenv("SMTP_PORT", "465")
    EMAIL_USER: str | None = os.getenv("EMAIL_USER")
    EMAIL_PASS: str | None = os.getenv("EMAIL_PASS")
    EMAIL_TO: str | None = os.getenv("EMAIL_TO")

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    PRODUCTS_PATH: Path = BASE_DIR / "src" / "config" / "products.json"
    LOGS_DIR: Path = BASE_DIR / "logs"
    HISTORY_PATH: Path = LOGS_DIR / "price-history.json"
    SNAPSHOTS_DIR: Path = LOGS_DIR

    @classmethod
    def smtp_port(cls) -> int:
        """``SMTP_PORT`` as a number, parsed when mail is first needed."""
        try:
            port = int(cls.SMTP_PORT)
        except (TypeError, ValueError):
            raise ConfigError(
                f"SMTP_PORT must be a port number, got {cls.SMTP_PORT!r}"
            ) from None
        if not 0 < port < 65536:
            raise ConfigError(f"SMTP_PORT out of range: {port}")
        return port
