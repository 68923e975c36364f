# src/exceptions.py

"""Error taxonomy for the price observation pipeline.

Per-product errors (:class:`FetchError` and its subclass
:class:`FragmentTimeoutError`) are caught by the orchestrator and turned
into a failed outcome.  :class:`PersistenceError` and :class:`ConfigError`
end the run.  :class:`NotifyError` is only ever carried inside a
notification result.
"""


class PriceWatchError(Exception):
    """Base class for all price_watch errors."""


class FetchError(PriceWatchError):
    """The product page could not be loaded."""

    kind = "fetch"

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{message} ({url})")
        self.url = url
        self.message = message


class FragmentTimeoutError(FetchError):
    """The price fragment never appeared within the wait bound."""

    kind = "selector_timeout"


class PersistenceError(PriceWatchError):
    """The history ledger could not be read or written."""


class NotifyError(PriceWatchError):
    """An alert could not be dispatched."""


class ConfigError(PriceWatchError):
    """The product configuration is missing or malformed."""
