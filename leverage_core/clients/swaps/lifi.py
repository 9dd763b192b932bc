"""LiFi quote adapter, same-chain only (bridges disabled).

Exact-in quotes go through `/v1/quote`, exact-out quotes through
`/v1/quote/toAmount`; both return one step whose transaction request is
executed by the multicall executor.
"""

from __future__ import annotations

from typing import Any, Final, Literal

import httpx
from web3 import Web3

from leverage_core.clients.base_client import BaseHTTPClient
from leverage_core.clients.errors import MalformedQuoteError, VenueError
from leverage_core.clients.swaps.codec import is_native, normalize_address
from leverage_core.clients.swaps.slippage import (
    apply_slippage_floor,
    bps_to_decimal_string,
    exact_out_max_in,
    validate_slippage_bps,
)
from leverage_core.logging import log
from leverage_core.models.quote import Call, HEX_DATA_REGEX, Quote, QuoteRequest

DEFAULT_LIFI_BASE_URL: Final[str] = "https://li.quest"
LIFI_EXACT_IN_PATH: Final[str] = "/v1/quote"
LIFI_EXACT_OUT_PATH: Final[str] = "/v1/quote/toAmount"

LifiOrder = Literal["CHEAPEST", "FASTEST"]


def _parse_uint(value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    raise MalformedQuoteError(f"LiFi amount is not a non-negative integer: {value!r}", venue="lifi")


class LifiQuoteAdapter:
    """Quotes through LiFi's ``/v1/quote`` endpoints with ``fromChain == toChain``.

    The router (or an explicit ``from_address``, e.g. the multicall executor)
    is the quoted sender since the swap executes inside the router flow.
    """

    venue = "lifi"

    def __init__(
        self,
        router: str,
        chain_id: int = 8453,
        from_address: str | None = None,
        slippage_bps: int = 50,
        base_url: str = DEFAULT_LIFI_BASE_URL,
        api_key: str | None = None,
        integrator: str | None = None,
        order: LifiOrder = "CHEAPEST",
        allow_bridges: str = "none",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        self.router = normalize_address(router)
        self.chain_id = int(chain_id)
        self.from_address = normalize_address(from_address) if from_address else self.router
        self.slippage_bps = validate_slippage_bps(slippage_bps)
        self.api_key = api_key
        self.integrator = integrator
        self.order = order
        self.allow_bridges = allow_bridges
        self.http = BaseHTTPClient(base_url, timeout=timeout, venue=self.venue, client=http_client)

    def headers(self) -> dict[str, str]:
        headers = {"content-type": "application/json"}
        if self.api_key:
            headers["x-lifi-api-key"] = self.api_key
        return headers

    def _slippage(self, request: QuoteRequest) -> int:
        return request.slippage_bps if request.slippage_bps is not None else self.slippage_bps

    def build_params(self, request: QuoteRequest) -> dict[str, str]:
        params = {
            "fromChain": str(self.chain_id),
            "toChain": str(self.chain_id),
            "fromToken": normalize_address(request.in_token),
            "toToken": normalize_address(request.out_token),
            "fromAddress": self.from_address,
            "slippage": bps_to_decimal_string(self._slippage(request)),
            "order": self.order,
        }
        if request.intent == "exactOut":
            params["toAmount"] = str(request.amount_out)
        else:
            params["fromAmount"] = str(request.amount_in)
        if self.integrator:
            params["integrator"] = self.integrator
        if self.allow_bridges:
            params["allowBridges"] = self.allow_bridges
        return params

    async def __call__(self, request: QuoteRequest) -> Quote:
        params = self.build_params(request)
        path = LIFI_EXACT_OUT_PATH if request.intent == "exactOut" else LIFI_EXACT_IN_PATH
        step = await self.http.get_json(path, params, headers=self.headers())
        if isinstance(step, dict) and step.get("message") and not step.get("transactionRequest"):
            message = str(step["message"])
            log.error(f"LiFi error from API message={message} intent={request.intent}")
            raise VenueError(message, venue=self.venue)

        quote = self._map_step(step, request, self._slippage(request))
        log.debug(
            f"LiFi quote intent={request.intent} in={request.in_token} out={request.out_token} "
            f"amount_in={quote.amount_in} out_amount={quote.out} min_out={quote.min_out} max_in={quote.max_in}"
        )
        return quote

    def _map_step(self, step: Any, request: QuoteRequest, slippage_bps: int) -> Quote:
        if not isinstance(step, dict):
            raise MalformedQuoteError("LiFi response is not an object", venue=self.venue)
        estimate = step.get("estimate") or {}
        tx = step.get("transactionRequest") or {}

        approval_target = estimate.get("approvalAddress") or tx.get("to")
        if not approval_target or not Web3.is_address(approval_target):
            raise MalformedQuoteError("LiFi quote missing approval target", venue=self.venue)
        tx_to = tx.get("to") or approval_target
        if not Web3.is_address(tx_to):
            raise MalformedQuoteError(f"LiFi transaction target is invalid: {tx_to!r}", venue=self.venue)

        data = tx.get("data")
        if not isinstance(data, str) or len(data) <= 2 or not HEX_DATA_REGEX.match(data):
            raise MalformedQuoteError("LiFi quote missing transaction data", venue=self.venue)

        to_amount = _parse_uint(estimate.get("toAmount"))
        to_amount_min = _parse_uint(estimate.get("toAmountMin"))
        wants_native_in = is_native(request.in_token)

        if request.intent == "exactOut":
            from_amount = _parse_uint(estimate.get("fromAmount"))
            if not from_amount:
                raise MalformedQuoteError("LiFi exact-out quote missing input amount", venue=self.venue)
            out = to_amount if to_amount is not None else int(request.amount_out)
            max_in = exact_out_max_in(from_amount, slippage_bps, cap=request.amount_in, venue=self.venue)
            return Quote(
                out=out,
                min_out=to_amount_min if to_amount_min is not None else out,
                amount_in=from_amount,
                max_in=max_in,
                approval_target=normalize_address(approval_target),
                calls=(Call(target=normalize_address(tx_to), data=data, value=max_in if wants_native_in else 0),),
                wants_native_in=wants_native_in,
                venue=self.venue,
            )

        if to_amount is None and to_amount_min is None:
            raise MalformedQuoteError("LiFi quote missing output amount", venue=self.venue)
        out = to_amount if to_amount is not None else to_amount_min
        min_out = to_amount_min if to_amount_min is not None else apply_slippage_floor(out, slippage_bps)

        amount_in = int(request.amount_in)
        return Quote(
            out=out,
            min_out=min_out,
            amount_in=amount_in,
            max_in=amount_in,
            approval_target=normalize_address(approval_target),
            calls=(Call(target=normalize_address(tx_to), data=data, value=amount_in if wants_native_in else 0),),
            wants_native_in=wants_native_in,
            venue=self.venue,
        )

    async def close(self) -> None:
        await self.http.close()
