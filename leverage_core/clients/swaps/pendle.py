"""Pendle hosted SDK quote adapter (``/v2/sdk/{chainId}/convert``).

Pendle only converts exact-in, so this venue serves mint legs and exact-in
payout swaps. The response is validated strictly before any field is used.
"""

from __future__ import annotations

from typing import Any, Final

import httpx
from pydantic import BaseModel, Field, ValidationError, field_validator
from web3 import Web3

from leverage_core.clients.base_client import BaseHTTPClient
from leverage_core.clients.errors import MalformedQuoteError, QuoteRequestError, VenueError
from leverage_core.clients.swaps.codec import is_native, normalize_address, same_address
from leverage_core.clients.swaps.slippage import apply_slippage_floor, bps_to_decimal_string, validate_slippage_bps
from leverage_core.logging import log
from leverage_core.models.chain import ZERO_ADDRESS
from leverage_core.models.quote import Call, HEX_DATA_REGEX, Quote, QuoteRequest

DEFAULT_PENDLE_BASE_URL: Final[str] = "https://api-v2.pendle.finance/core"


def _checksum(value: Any) -> str:
    if not isinstance(value, str) or not Web3.is_address(value):
        raise ValueError(f"invalid address: {value!r}")
    return normalize_address(value)


def _uint(value: Any) -> int:
    if isinstance(value, str) and value.isdigit():
        return int(value)
    raise ValueError(f"amount must be a decimal string: {value!r}")


class PendleTokenAmount(BaseModel):
    token: str
    amount: int

    @field_validator("token", mode="before")
    @classmethod
    def validate_token(cls, value: Any) -> str:
        return _checksum(value)

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, value: Any) -> int:
        return _uint(value)


class PendleContractParamInfo(BaseModel):
    method: str
    call_params_names: list[str] = Field(alias="contractCallParamsName")
    call_params: list[Any] = Field(alias="contractCallParams")


class PendleTx(BaseModel):
    data: str
    to: str
    sender: str = Field(alias="from")
    value: int

    @field_validator("data")
    @classmethod
    def validate_data(cls, value: str) -> str:
        if len(value) <= 2 or not HEX_DATA_REGEX.match(value):
            raise ValueError("tx.data must be non-empty 0x-prefixed hex")
        return value

    @field_validator("to", "sender", mode="before")
    @classmethod
    def validate_address(cls, value: Any) -> str:
        return _checksum(value)

    @field_validator("value", mode="before")
    @classmethod
    def validate_value(cls, value: Any) -> int:
        return _uint(value)


class PendleRoute(BaseModel):
    contract_param_info: PendleContractParamInfo = Field(alias="contractParamInfo")
    tx: PendleTx
    outputs: list[PendleTokenAmount]


class PendleConvertResponse(BaseModel):
    action: str
    inputs: list[PendleTokenAmount]
    required_approvals: list[PendleTokenAmount] = Field(alias="requiredApprovals")
    routes: list[PendleRoute]


class PendleQuoteAdapter:
    """Quotes Pendle conversions with the leverage router as receiver."""

    venue = "pendle"

    def __init__(
        self,
        router: str,
        chain_id: int = 8453,
        slippage_bps: int = 50,
        base_url: str = DEFAULT_PENDLE_BASE_URL,
        enable_aggregator: bool = False,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        self.router = normalize_address(router)
        self.chain_id = int(chain_id)
        self.slippage_bps = validate_slippage_bps(slippage_bps)
        self.enable_aggregator = enable_aggregator
        self.http = BaseHTTPClient(base_url, timeout=timeout, venue=self.venue, client=http_client)

    @staticmethod
    def _api_token(token: str) -> str:
        return ZERO_ADDRESS if is_native(token) else normalize_address(token)

    def build_params(self, request: QuoteRequest) -> dict[str, str]:
        slippage_bps = request.slippage_bps if request.slippage_bps is not None else self.slippage_bps
        return {
            "receiver": self.router,
            "slippage": bps_to_decimal_string(slippage_bps),
            "enableAggregator": "true" if self.enable_aggregator else "false",
            "tokensIn": self._api_token(request.in_token),
            "amountsIn": str(request.amount_in),
            "tokensOut": self._api_token(request.out_token),
            "redeemRewards": "false",
            "needScale": "false",
        }

    async def __call__(self, request: QuoteRequest) -> Quote:
        if request.intent != "exactIn":
            raise QuoteRequestError("Pendle adapter supports exactIn quotes only", venue=self.venue)

        slippage_bps = request.slippage_bps if request.slippage_bps is not None else self.slippage_bps
        params = self.build_params(request)
        payload = await self.http.get_json(f"/v2/sdk/{self.chain_id}/convert", params)
        if isinstance(payload, dict) and payload.get("error"):
            message = str(payload["error"])
            log.error(f"Pendle error from API message={message} amount_in={request.amount_in}")
            raise VenueError(message, venue=self.venue)

        try:
            response = PendleConvertResponse.model_validate(payload)
        except ValidationError as exc:
            raise MalformedQuoteError(f"Pendle response failed validation: {exc}", venue=self.venue) from exc

        quote = self._map_response(response, request, slippage_bps)
        log.debug(
            f"Pendle quote action={response.action} in={request.in_token} out={request.out_token} "
            f"amount_in={request.amount_in} out_amount={quote.out} min_out={quote.min_out}"
        )
        return quote

    def _map_response(self, response: PendleConvertResponse, request: QuoteRequest, slippage_bps: int) -> Quote:
        if not response.routes:
            raise VenueError("Pendle returned no routes", venue=self.venue)
        route = response.routes[0]

        out_token = self._api_token(request.out_token)
        output = next((o for o in route.outputs if same_address(o.token, out_token)), None)
        if output is None:
            raise MalformedQuoteError(f"Pendle route has no output for {out_token}", venue=self.venue)

        in_token = self._api_token(request.in_token)
        for item in response.inputs:
            if same_address(item.token, in_token) and item.amount != request.amount_in:
                raise MalformedQuoteError(
                    f"Pendle quoted input {item.amount} differs from requested {request.amount_in}",
                    venue=self.venue,
                )

        wants_native_in = is_native(request.in_token)
        amount_in = int(request.amount_in)
        return Quote(
            out=output.amount,
            min_out=apply_slippage_floor(output.amount, slippage_bps),
            amount_in=amount_in,
            max_in=amount_in,
            approval_target=route.tx.to,
            calls=(Call(target=route.tx.to, data=route.tx.data, value=route.tx.value if wants_native_in else 0),),
            wants_native_in=wants_native_in,
            venue=self.venue,
        )

    async def close(self) -> None:
        await self.http.close()
