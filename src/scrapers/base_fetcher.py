# src/scrapers/base_fetcher.py

"""Abstract page fetcher used by the price check orchestrator."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import TracebackType

from src.models.product import PriceLocator


@dataclass(frozen=True)
class Fragments:
    """Raw price text located on a product page."""

    whole_text: str
    fraction_text: str | None = None


class PageFetcher(ABC):
    """Loads a product page and returns its price fragments.

    Implementations own their network session.  ``open`` is called once
    before the first fetch of a run and ``close`` once at the end,
    whatever happened in between.
    """

    def open(self) -> None:
        """Acquire session resources."""

    def close(self) -> None:
        """Release session resources."""

    def __enter__(self) -> "PageFetcher":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @abstractmethod
    def fetch_fragments(
        self,
        url: str,
        locator: PriceLocator,
        timeout: float,
        name: str = "",
    ) -> Fragments:
        """Fetch *url* and extract the fragments named by *locator*.

        Raises:
            FetchError: The page could not be loaded.
            FragmentTimeoutError: The whole-price fragment did not
                appear (or was empty) within *timeout* seconds.
        """
        ...
