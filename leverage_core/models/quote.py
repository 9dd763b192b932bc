"""Venue-agnostic quote models shared by every swap adapter and planner."""

from __future__ import annotations

import re
from typing import Final, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from web3 import Web3

HEX_DATA_REGEX: Final[re.Pattern[str]] = re.compile(r"^0x(?:[0-9a-fA-F]{2})*$")

QuoteIntent = Literal["exactIn", "exactOut"]


def _checksum(value: str) -> str:
    if not isinstance(value, str) or not Web3.is_address(value):
        raise ValueError(f"Invalid Ethereum address: {value}")
    return Web3.to_checksum_address(value)


class Call(BaseModel):
    """One step of the ordered multicall a planner hands to the executor."""

    target: str
    data: str
    value: int = Field(default=0, ge=0)

    model_config = {
        "frozen": True,
    }

    @field_validator("target")
    @classmethod
    def validate_target(cls, value: str) -> str:
        return _checksum(value)

    @field_validator("data", mode="before")
    @classmethod
    def validate_data(cls, value: str | bytes) -> str:
        if isinstance(value, (bytes, bytearray)):
            value = "0x" + bytes(value).hex()
        if not isinstance(value, str) or not HEX_DATA_REGEX.match(value):
            raise ValueError(f"Invalid calldata: {value!r}")
        return value.lower()

    def as_tuple(self) -> tuple[str, int, bytes]:
        """On-chain struct order ``(target, value, data)``."""
        return (self.target, int(self.value), bytes.fromhex(self.data[2:]))


class QuoteRequest(BaseModel):
    """Swap intent passed to a quote adapter.

    ``exactIn`` needs ``amount_in``; ``exactOut`` needs ``amount_out``. The
    other amount may be given as a reference (for exact-out it is treated as
    an explicit spending cap by adapters that support one).
    """

    in_token: str
    out_token: str
    intent: QuoteIntent = "exactIn"
    amount_in: Optional[int] = Field(default=None, ge=0)
    amount_out: Optional[int] = Field(default=None, ge=0)
    slippage_bps: Optional[int] = Field(default=None, ge=0, le=10_000)

    model_config = {
        "frozen": True,
    }

    @field_validator("in_token", "out_token")
    @classmethod
    def validate_token(cls, value: str) -> str:
        return _checksum(value)

    @model_validator(mode="after")
    def validate_intent_amounts(self) -> "QuoteRequest":
        if self.intent == "exactIn" and not self.amount_in:
            raise ValueError("exactIn quote requires a positive amount_in")
        if self.intent == "exactOut" and not self.amount_out:
            raise ValueError("exactOut quote requires a positive amount_out")
        if self.in_token == self.out_token:
            raise ValueError(f"in_token and out_token must differ (got {self.in_token})")
        return self

    @property
    def exact_amount(self) -> int:
        return int(self.amount_in if self.intent == "exactIn" else self.amount_out)


class VeloraOffsets(BaseModel):
    """Byte offsets into ``swapExactAmountOut`` calldata used for amount patching."""

    exact_amount: int = Field(ge=0)
    limit_amount: int = Field(ge=0)
    quoted_amount: int = Field(ge=0)

    model_config = {
        "frozen": True,
    }

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.exact_amount, self.limit_amount, self.quoted_amount)


class VeloraData(BaseModel):
    augustus: str
    offsets: VeloraOffsets

    model_config = {
        "frozen": True,
    }

    @field_validator("augustus")
    @classmethod
    def validate_augustus(cls, value: str) -> str:
        return _checksum(value)


class Quote(BaseModel):
    """Venue-agnostic swap result.

    ``out``/``amount_in`` are the expected amounts, ``min_out``/``max_in`` the
    slippage-bounded ones. ``calls`` is the ordered call sequence that performs
    the swap; for single-call venues ``calldata`` is that call's data.
    """

    out: int = Field(ge=0)
    min_out: int = Field(ge=0)
    amount_in: int = Field(default=0, ge=0)
    max_in: int = Field(default=0, ge=0)
    approval_target: str
    calls: tuple[Call, ...]
    wants_native_in: bool = False
    deadline: Optional[int] = None
    velora_data: Optional[VeloraData] = None
    venue: str = "unknown"

    model_config = {
        "frozen": True,
    }

    @field_validator("approval_target")
    @classmethod
    def validate_approval_target(cls, value: str) -> str:
        return _checksum(value)

    @field_validator("calls")
    @classmethod
    def validate_calls(cls, value: tuple[Call, ...]) -> tuple[Call, ...]:
        if not value:
            raise ValueError("Quote must carry at least one call")
        return value

    @property
    def calldata(self) -> str:
        return self.calls[-1].data
