"""Exception types raised by the collector."""


class CollectorError(Exception):
    """Base class for collector errors."""


class ValidationError(CollectorError):
    """Request rejected before a run starts."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class RateLimitExceeded(CollectorError):
    def __init__(self, key: str, retry_after: float):
        self.key = key
        self.retry_after = retry_after
        super().__init__(f"Too many requests for {key}, retry after {retry_after:.0f}s")


class FetcherInitError(CollectorError):
    """The fetch resource (HTTP session, browser) could not be started."""


class FetchError(CollectorError):
    """A single page could not be fetched."""


class NetworkError(FetchError):
    """Timeout, connection failure or non-2xx HTTP response."""


class NavigationError(FetchError):
    """Browser navigation returned non-2xx or the content never appeared."""


class FetchAbortedError(FetchError):
    """The fetch was cancelled before completing."""
