"""Recorded-quote adapter for offline planning and deterministic tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from leverage_core.clients.errors import MalformedQuoteError, QuoteRequestError
from leverage_core.clients.swaps.codec import normalize_address, same_address
from leverage_core.logging import log
from leverage_core.models.quote import Call, HEX_DATA_REGEX, Quote, QuoteRequest


class StaticQuoteSnapshot(BaseModel):
    in_token: str
    out_token: str
    amount_in: int = Field(ge=0)
    amount_out: int = Field(ge=0)
    min_amount_out: Optional[int] = Field(default=None, ge=0)
    approval_target: str
    call_target: Optional[str] = None
    calldata: str

    model_config = {
        "frozen": True,
    }

    @field_validator("in_token", "out_token", "approval_target", "call_target")
    @classmethod
    def validate_address(cls, value: Optional[str]) -> Optional[str]:
        return normalize_address(value) if value else value

    @field_validator("calldata")
    @classmethod
    def validate_calldata(cls, value: str) -> str:
        if not HEX_DATA_REGEX.match(value):
            raise ValueError("calldata must be 0x-prefixed hex")
        return value

    @model_validator(mode="before")
    @classmethod
    def default_call_target(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("call_target"):
            data = {**data, "call_target": data.get("approval_target")}
        return data


def _to_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise MalformedQuoteError(f"Invalid {field_name} value for static quote", venue="static")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip():
        return int(value.strip())
    raise MalformedQuoteError(f"Invalid {field_name} value for static quote", venue="static")


def _is_snapshot_shape(payload: dict[str, Any]) -> bool:
    return all(key in payload for key in ("inToken", "outToken", "amountIn", "amountOut", "approvalTarget", "calldata"))


def _is_lifi_shape(payload: dict[str, Any]) -> bool:
    action = payload.get("action")
    if not isinstance(action, dict):
        return False
    from_token = action.get("fromToken") or {}
    to_token = action.get("toToken") or {}
    return isinstance(from_token.get("address"), str) and isinstance(to_token.get("address"), str)


def normalize_static_quote(payload: Any) -> StaticQuoteSnapshot:
    """Build a snapshot from either the flat recorded shape or a raw LiFi ``/quote`` step."""
    if not isinstance(payload, dict):
        raise MalformedQuoteError("Unsupported static quote payload format", venue="static")

    if _is_snapshot_shape(payload):
        min_out = payload.get("minAmountOut")
        return StaticQuoteSnapshot(
            in_token=payload["inToken"],
            out_token=payload["outToken"],
            amount_in=_to_int(payload["amountIn"], "amountIn"),
            amount_out=_to_int(payload["amountOut"], "amountOut"),
            min_amount_out=_to_int(min_out, "minAmountOut") if min_out is not None else None,
            approval_target=payload["approvalTarget"],
            call_target=payload.get("callTarget"),
            calldata=payload["calldata"],
        )

    if _is_lifi_shape(payload):
        action = payload["action"]
        estimate = payload.get("estimate") or {}
        tx = payload.get("transactionRequest") or {}
        approval = estimate.get("approvalAddress") or tx.get("to")
        if not approval:
            raise MalformedQuoteError("Static LiFi quote missing approval target", venue="static")
        calldata = tx.get("data")
        if not isinstance(calldata, str):
            raise MalformedQuoteError("Static LiFi quote missing transactionRequest.data", venue="static")
        min_out = estimate.get("toAmountMin")
        return StaticQuoteSnapshot(
            in_token=action["fromToken"]["address"],
            out_token=action["toToken"]["address"],
            amount_in=_to_int(action.get("fromAmount") or estimate.get("fromAmount"), "fromAmount"),
            amount_out=_to_int(estimate.get("toAmount"), "toAmount"),
            min_amount_out=_to_int(min_out, "toAmountMin") if min_out else None,
            approval_target=approval,
            call_target=tx.get("to") or approval,
            calldata=calldata,
        )

    raise MalformedQuoteError("Unsupported static quote payload format", venue="static")


def load_static_quote_snapshot(path: str | Path, selector: str | None = None) -> StaticQuoteSnapshot:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if selector and isinstance(payload, dict):
        payload = payload.get(selector, payload)
    return normalize_static_quote(payload)


class StaticQuoteAdapter:
    """Replays one recorded exact-in quote.

    With ``enforce_tokens``/``enforce_amount_in`` (the defaults) any request that
    differs from the recording is rejected instead of silently reusing it.
    """

    venue = "static"

    def __init__(
        self,
        snapshot: StaticQuoteSnapshot,
        enforce_amount_in: bool = True,
        enforce_tokens: bool = True,
        label: str | None = None,
    ) -> None:
        self.snapshot = snapshot
        self.enforce_amount_in = enforce_amount_in
        self.enforce_tokens = enforce_tokens
        self.description = f"[static-quote:{label}]" if label else "[static-quote]"
        if not same_address(snapshot.call_target, snapshot.approval_target):
            log.warning(
                f"{self.description} approval target {snapshot.approval_target} differs from "
                f"call target {snapshot.call_target}"
            )

    async def __call__(self, request: QuoteRequest) -> Quote:
        snap = self.snapshot
        if request.intent != "exactIn":
            raise QuoteRequestError(f"{self.description} only supports exactIn quotes", venue=self.venue)
        if self.enforce_tokens:
            if not same_address(request.in_token, snap.in_token):
                raise QuoteRequestError(
                    f"{self.description} requested inToken {request.in_token} does not match "
                    f"recorded inToken {snap.in_token}",
                    venue=self.venue,
                )
            if not same_address(request.out_token, snap.out_token):
                raise QuoteRequestError(
                    f"{self.description} requested outToken {request.out_token} does not match "
                    f"recorded outToken {snap.out_token}",
                    venue=self.venue,
                )
        if self.enforce_amount_in and request.amount_in != snap.amount_in:
            raise QuoteRequestError(
                f"{self.description} amountIn {request.amount_in} does not match "
                f"recorded amountIn {snap.amount_in}",
                venue=self.venue,
            )

        min_out = snap.min_amount_out if snap.min_amount_out is not None else snap.amount_out
        return Quote(
            out=snap.amount_out,
            min_out=min_out,
            amount_in=snap.amount_in,
            max_in=snap.amount_in,
            approval_target=snap.approval_target,
            calls=(Call(target=snap.call_target, data=snap.calldata),),
            venue=self.venue,
        )
