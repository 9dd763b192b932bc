"""
Base HTTP client

Shared httpx plumbing for HTTP-backed quote adapters: client lifecycle,
timeout management, and transport error normalization. Requests are issued
exactly once; retry policy belongs to callers.
"""

import asyncio
from typing import Any, Dict, Optional

import httpx

from leverage_core.clients.errors import QuoteTransportError
from leverage_core.logging import log


class BaseHTTPClient:
    """
    Holder for one ``httpx.AsyncClient`` per event loop.

    Provides:
    - HTTP client management (lazy, rebound when the running loop changes)
    - Request timeout management
    - ``QuoteTransportError`` for non-2xx responses and network failures
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        venue: str = "http",
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize base HTTP client.

        Args:
            base_url: Base URL for the API
            timeout: Request timeout in seconds
            venue: Venue name attached to raised errors
            client: Optional externally owned client (shared pools, tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.venue = venue
        self._client: Optional[httpx.AsyncClient] = client
        self._owns_client = client is None
        self._client_loop_id: Optional[int] = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        """
        Ensure HTTP client is initialized and bound to current event loop.

        Returns:
            httpx.AsyncClient instance
        """
        if not self._owns_client:
            return self._client

        current_loop_id = id(asyncio.get_running_loop())
        if self._client is None or self._client_loop_id != current_loop_id:
            # A client bound to a previous loop cannot be closed from this one
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
            )
            self._client_loop_id = current_loop_id

        return self._client

    async def get_json(
        self,
        path: str,
        params: Dict[str, str],
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Issue one GET and decode the JSON body.

        Raises:
            QuoteTransportError: network failure, non-2xx status or non-JSON body
        """
        client = await self._ensure_client()
        url = f"{self.base_url}{path}"
        try:
            response = await client.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise QuoteTransportError(
                f"{self.venue} request failed: {exc}",
                venue=self.venue,
                url=url,
            ) from exc

        if response.status_code < 200 or response.status_code >= 300:
            raise QuoteTransportError(
                f"{self.venue} quote failed: {response.status_code} {response.reason_phrase}",
                venue=self.venue,
                status_code=response.status_code,
                url=str(response.request.url),
            )

        try:
            return response.json()
        except ValueError as exc:
            raise QuoteTransportError(
                f"{self.venue} returned a non-JSON body",
                venue=self.venue,
                status_code=response.status_code,
                url=str(response.request.url),
            ) from exc

    async def close(self):
        """Close HTTP client if this instance created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            self._client_loop_id = None
        log.debug(f"HTTP client closed venue={self.venue}")
