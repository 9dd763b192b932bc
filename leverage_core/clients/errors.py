"""Typed failures raised by quote adapters."""

from __future__ import annotations


class QuoteError(Exception):
    """Raised when quote retrieval fails."""

    def __init__(self, message: str, venue: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.venue = venue


class QuoteRequestError(QuoteError, ValueError):
    """Raised before any I/O when a request cannot be served as stated."""


class VenueError(QuoteError):
    """Venue-level failure (liquidity, aggregator error body, reverted quoter call)."""


class MalformedQuoteError(VenueError):
    """Venue answered but the payload failed validation."""


class UnsupportedMethodError(VenueError):
    """Aggregator returned a contract method outside the allow-list."""

    def __init__(self, method: str, venue: str | None = None) -> None:
        super().__init__(f"Unsupported aggregator method: {method}", venue=venue)
        self.method = method


class QuoteTransportError(QuoteError):
    """HTTP non-2xx response or network failure."""

    def __init__(
        self,
        message: str,
        venue: str | None = None,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message, venue=venue)
        self.status_code = status_code
        self.url = url
