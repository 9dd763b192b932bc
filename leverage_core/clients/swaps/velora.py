"""Velora (ParaSwap market API) quote adapter.

Exact-in quotes use the returned calldata as-is. Exact-out quotes are only
accepted for the generic ``swapExactAmountOut`` method, whose calldata layout
exposes fixed offsets the on-chain Velora adapter patches at execution time.
"""

from __future__ import annotations

import re
from typing import Any, Final, Mapping

import httpx
from web3 import Web3

from leverage_core.clients.base_client import BaseHTTPClient
from leverage_core.clients.errors import MalformedQuoteError, UnsupportedMethodError, VenueError
from leverage_core.clients.swaps.codec import is_native, normalize_address
from leverage_core.clients.swaps.slippage import apply_slippage_floor, exact_out_max_in, validate_slippage_bps
from leverage_core.logging import log
from leverage_core.models.chain import ZERO_ADDRESS
from leverage_core.models.quote import Call, HEX_DATA_REGEX, Quote, QuoteRequest, VeloraData, VeloraOffsets

DEFAULT_VELORA_BASE_URL: Final[str] = "https://api.paraswap.io"

# The offsets below are only valid for this API/Augustus version.
VELORA_API_VERSION: Final[str] = "6.2"
VELORA_EXACT_OUT_METHODS: Final[frozenset[str]] = frozenset({"swapExactAmountOut"})
VELORA_EXACT_OUT_OFFSETS: Final[VeloraOffsets] = VeloraOffsets(
    exact_amount=132,
    limit_amount=100,
    quoted_amount=164,
)

_UINT_REGEX: Final[re.Pattern[str]] = re.compile(r"^\d+$")


def _parse_amount(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise MalformedQuoteError(f"Velora {field_name} is not an integer: {value!r}", venue="velora")
    if isinstance(value, int):
        if value < 0:
            raise MalformedQuoteError(f"Velora {field_name} is negative: {value}", venue="velora")
        return value
    if isinstance(value, str) and _UINT_REGEX.match(value):
        return int(value)
    raise MalformedQuoteError(f"Velora {field_name} is not a non-negative integer: {value!r}", venue="velora")


class VeloraQuoteAdapter:
    venue = "velora"

    def __init__(
        self,
        router: str,
        chain_id: int = 8453,
        from_address: str | None = None,
        slippage_bps: int = 50,
        base_url: str = DEFAULT_VELORA_BASE_URL,
        token_decimals: Mapping[str, int] | None = None,
        default_decimals: int = 18,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        self.router = normalize_address(router)
        self.chain_id = int(chain_id)
        self.from_address = normalize_address(from_address) if from_address else self.router
        self.slippage_bps = validate_slippage_bps(slippage_bps)
        self.token_decimals = {k.lower(): int(v) for k, v in (token_decimals or {}).items()}
        self.default_decimals = int(default_decimals)
        self.http = BaseHTTPClient(base_url, timeout=timeout, venue=self.venue, client=http_client)

    def _decimals(self, token: str) -> int:
        if is_native(token):
            return 18
        return self.token_decimals.get(token.lower(), self.default_decimals)

    @staticmethod
    def _api_token(token: str) -> str:
        return ZERO_ADDRESS if is_native(token) else normalize_address(token)

    def build_params(self, request: QuoteRequest) -> dict[str, str]:
        slippage_bps = request.slippage_bps if request.slippage_bps is not None else self.slippage_bps
        params = {
            "srcToken": self._api_token(request.in_token),
            "destToken": self._api_token(request.out_token),
            "network": str(self.chain_id),
            "userAddress": self.from_address,
            "receiver": self.router,
            "version": VELORA_API_VERSION,
            "srcDecimals": str(self._decimals(request.in_token)),
            "destDecimals": str(self._decimals(request.out_token)),
            "slippage": str(slippage_bps),
        }
        if request.intent == "exactOut":
            params["side"] = "BUY"
            params["amount"] = str(request.amount_out)
            params["includeContractMethods"] = ",".join(sorted(VELORA_EXACT_OUT_METHODS))
        else:
            params["side"] = "SELL"
            params["amount"] = str(request.amount_in)
        return params

    async def __call__(self, request: QuoteRequest) -> Quote:
        params = self.build_params(request)
        payload = await self.http.get_json("/swap", params)

        if isinstance(payload, dict) and payload.get("error"):
            message = str(payload["error"])
            log.error(f"Velora error from API message={message} side={params['side']} amount={params['amount']}")
            raise VenueError(message, venue=self.venue)

        slippage_bps = int(params["slippage"])
        quote = self._map_response(payload, request, slippage_bps)
        log.debug(
            f"Velora quote intent={request.intent} in={request.in_token} out={request.out_token} "
            f"amount_in={quote.amount_in} out_amount={quote.out} min_out={quote.min_out} max_in={quote.max_in}"
        )
        return quote

    def _map_response(self, payload: Any, request: QuoteRequest, slippage_bps: int) -> Quote:
        if not isinstance(payload, dict):
            raise MalformedQuoteError("Velora response is not an object", venue=self.venue)
        price_route = payload.get("priceRoute")
        tx_params = payload.get("txParams")
        if not isinstance(price_route, dict) or not isinstance(tx_params, dict):
            raise MalformedQuoteError("Velora response missing priceRoute or txParams", venue=self.venue)

        src_amount = _parse_amount(price_route.get("srcAmount"), "srcAmount")
        dest_amount = _parse_amount(price_route.get("destAmount"), "destAmount")

        contract_address = price_route.get("contractAddress")
        if not isinstance(contract_address, str) or not Web3.is_address(contract_address):
            raise MalformedQuoteError(f"Velora contractAddress is invalid: {contract_address!r}", venue=self.venue)
        augustus = normalize_address(contract_address)

        data = tx_params.get("data")
        if not isinstance(data, str) or len(data) <= 2 or not HEX_DATA_REGEX.match(data):
            raise MalformedQuoteError("Velora transaction data is not valid hex", venue=self.venue)

        wants_native_in = is_native(request.in_token)
        method = str(price_route.get("contractMethod") or "")

        if request.intent == "exactOut":
            if method not in VELORA_EXACT_OUT_METHODS:
                raise UnsupportedMethodError(method or "<missing>", venue=self.venue)
            max_in = exact_out_max_in(src_amount, slippage_bps, cap=request.amount_in, venue=self.venue)
            return Quote(
                out=dest_amount,
                min_out=dest_amount,
                amount_in=src_amount,
                max_in=max_in,
                approval_target=augustus,
                calls=(Call(target=augustus, data=data, value=max_in if wants_native_in else 0),),
                wants_native_in=wants_native_in,
                velora_data=VeloraData(augustus=augustus, offsets=VELORA_EXACT_OUT_OFFSETS),
                venue=self.venue,
            )

        return Quote(
            out=dest_amount,
            min_out=apply_slippage_floor(dest_amount, slippage_bps),
            amount_in=src_amount,
            max_in=src_amount,
            approval_target=augustus,
            calls=(Call(target=augustus, data=data, value=src_amount if wants_native_in else 0),),
            wants_native_in=wants_native_in,
            venue=self.venue,
        )

    async def close(self) -> None:
        await self.http.close()
