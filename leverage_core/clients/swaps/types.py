"""Quote adapter contract."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from leverage_core.models.quote import Quote, QuoteRequest


@runtime_checkable
class QuoteFn(Protocol):
    """Async callable ``(QuoteRequest) -> Quote``.

    Adapters are configured at construction time and only perform read-only
    chain calls or HTTP GETs when invoked. Failures raise a ``QuoteError``
    subclass; an adapter never returns a zero quote in place of an error.
    """

    async def __call__(self, request: QuoteRequest) -> Quote: ...
