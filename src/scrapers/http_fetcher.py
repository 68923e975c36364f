# src/scrapers/http_fetcher.py

"""Page fetcher backed by a browser-impersonating HTTP session."""

import logging
import re
import time
from pathlib import Path
from typing import Any, cast

import cloudscraper  # type: ignore[import-untyped]
from bs4 import BeautifulSoup, Tag
from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.exceptions import FetchError, FragmentTimeoutError
from src.models.product import PriceLocator
from src.scrapers.base_fetcher import Fragments, PageFetcher

_DIGIT = re.compile(r"\d")


def safe_name(name: str) -> str:
    """File-system friendly form of a product name."""
    return re.sub(r"[^a-zA-Z0-9_]", "", re.sub(r"\s", "_", name))


class HttpPageFetcher(PageFetcher):
    """Fetches product pages with curl_cffi and parses them with lxml.

    The page is polled until the whole-price selector shows up or the
    wait bound runs out.  Each fetch retries with adaptive delay on
    rate limiting and bot walls, then falls back to cloudscraper once.
    Requests, retries and sleeps all share one deadline.
    """

    def __init__(
        self,
        snapshot_dir: Path | None = None,
        save_snapshots: bool = True,
    ) -> None:
        self.logger = logging.getLogger("price_watch.fetcher")
        self.settings = Settings()
        self.session: curl_requests.Session | None = None
        self.snapshot_dir: Path = (
            snapshot_dir or self.settings.SNAPSHOTS_DIR
        )
        self.save_snapshots = save_snapshots
        self._current_delay: float = self.settings.REQUEST_DELAY

    # ── Session lifecycle ────────────────────────────────

    def open(self) -> None:
        """Start the impersonating HTTP session."""
        if self.session is None:
            self.session = curl_requests.Session(
                impersonate=self.settings.IMPERSONATE_BROWSER
            )
            self.logger.debug(
                "HTTP session opened (impersonate=%s)",
                self.settings.IMPERSONATE_BROWSER,
            )

    def close(self) -> None:
        """Close the HTTP session if one is open."""
        if self.session is not None:
            try:
                self.session.close()
            finally:
                self.session = None
            self.logger.debug("HTTP session closed")

    # ── Response checks & backoff ────────────────────────

    def _validate_html(self, text: str) -> bool:
        """Reject CAPTCHA and bot-wall pages."""
        lower = text.lower()
        # Real product pages are large and may mention "captcha" in scripts
        if "<body" in lower and len(text) > 5000:
            return True
        for keyword in self.settings.CAPTCHA_KEYWORDS:
            if keyword in lower:
                self.logger.warning(
                    "Bot check keyword '%s' detected", keyword,
                )
                return False
        return True

    def _escalate_delay(self) -> None:
        """Double the current delay up to the configured max."""
        max_delay = (
            self.settings.REQUEST_DELAY
            * self.settings.MAX_DELAY_MULTIPLIER
        )
        self._current_delay = min(self._current_delay * 2, max_delay)
        self.logger.warning(
            "Rate-limited, delay escalated to %.1fs",
            self._current_delay,
        )

    # ── Fetching ─────────────────────────────────────────

    def _sleep_within(self, deadline: float, seconds: float) -> None:
        """Sleep for *seconds*, cut short at *deadline*."""
        remaining = deadline - time.monotonic()
        if remaining > 0:
            time.sleep(min(seconds, remaining))

    def _fetch_html(self, url: str, deadline: float) -> str | None:
        """GET *url* with retries; ``None`` once retries or time run out."""
        self.open()
        session = cast(curl_requests.Session, self.session)
        headers: dict[str, str] = dict(self.settings.DEFAULT_HEADERS)

        for attempt in range(self.settings.MAX_RETRIES):
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                self.logger.warning(
                    "Wait bound reached for %s after %d attempt(s)",
                    url,
                    attempt,
                )
                break
            try:
                resp = session.get(
                    url, headers=headers, timeout=remaining,
                )
                if resp.status_code == 200:
                    if not self._validate_html(resp.text):
                        self._escalate_delay()
                        self._sleep_within(deadline, self._current_delay)
                        continue
                    self._current_delay = self.settings.REQUEST_DELAY
                    return str(resp.text)
                self.logger.warning(
                    "HTTP %d for %s on attempt %d",
                    resp.status_code,
                    url,
                    attempt + 1,
                )
                if resp.status_code in (429, 403, 503):
                    self._escalate_delay()
                    self._sleep_within(deadline, self._current_delay)
            except Exception as exc:
                self.logger.warning(
                    "Request error for %s on attempt %d: %s",
                    url,
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
                self._sleep_within(
                    deadline, self._current_delay * (attempt + 1),
                )
        return None

    def _fetch_html_fallback(self, url: str, deadline: float) -> str | None:
        """Single cloudscraper attempt after curl_cffi gave up."""
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return None
        self.logger.info(
            "curl_cffi exhausted for %s, falling back to cloudscraper",
            url,
        )
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            resp: Any = scraper.get(
                url,
                headers=dict(self.settings.DEFAULT_HEADERS),
                timeout=remaining,
            )
            if resp.status_code == 200 and self._validate_html(
                str(resp.text)
            ):
                return str(resp.text)
            self.logger.warning(
                "cloudscraper got HTTP %d for %s",
                resp.status_code,
                url,
            )
        except Exception as exc:
            self.logger.error(
                "cloudscraper fallback failed for %s: %s",
                url,
                exc,
                exc_info=True,
            )
        return None

    def _load_page(self, url: str, deadline: float) -> str:
        """Return the page HTML or raise :class:`FetchError`."""
        html = self._fetch_html(url, deadline)
        if html is None:
            html = self._fetch_html_fallback(url, deadline)
        if html is None:
            raise FetchError(url, "Page did not load")
        return html

    def _save_snapshot(self, name: str, html: str) -> None:
        """Keep the fetched HTML for debugging selector changes."""
        if not self.save_snapshots or not name:
            return
        path = self.snapshot_dir / f"{safe_name(name)}.html"
        try:
            self.snapshot_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(html, encoding="utf-8")
            self.logger.debug("Saved page snapshot to %s", path)
        except OSError as exc:
            self.logger.warning(
                "Could not save snapshot %s: %s", path, exc,
            )

    # ── Extraction ───────────────────────────────────────

    @staticmethod
    def _find_fraction(
        soup: BeautifulSoup, whole_el: Tag, selector: str,
    ) -> str | None:
        """Prefer the fraction next to the whole part, else the first on the page."""
        fraction_el = None
        if isinstance(whole_el.parent, Tag):
            fraction_el = whole_el.parent.select_one(selector)
        if fraction_el is None:
            fraction_el = soup.select_one(selector)
        if fraction_el is None:
            return None
        text = fraction_el.get_text(strip=True)
        return text or None

    def fetch_fragments(
        self,
        url: str,
        locator: PriceLocator,
        timeout: float,
        name: str = "",
    ) -> Fragments:
        """Poll *url* until ``locator.whole`` shows digits or *timeout* elapses."""
        deadline = time.monotonic() + timeout

        for poll in range(1, self.settings.MAX_RETRIES + 1):
            if time.monotonic() >= deadline:
                break
            html = self._load_page(url, deadline)
            self._save_snapshot(name, html)

            soup = BeautifulSoup(html, "lxml")
            whole_el = soup.select_one(locator.whole)
            if whole_el is not None:
                whole_text = whole_el.get_text(strip=True)
                # "Currently unavailable" and the like are not prices
                if _DIGIT.search(whole_text):
                    fraction_text = (
                        self._find_fraction(soup, whole_el, locator.fraction)
                        if locator.fraction
                        else None
                    )
                    return Fragments(
                        whole_text=whole_text,
                        fraction_text=fraction_text,
                    )

            self.logger.debug(
                "Selector '%s' not found on %s (poll %d)",
                locator.whole,
                url,
                poll,
            )
            if poll < self.settings.MAX_RETRIES:
                self._sleep_within(deadline, self._current_delay)

        raise FragmentTimeoutError(
            url,
            f"Selector '{locator.whole}' not found within {timeout:g}s",
        )
