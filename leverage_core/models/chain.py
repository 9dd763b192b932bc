"""Typed chain/network models and the default leverage deployment registry."""

from __future__ import annotations

import re
from typing import Final
from urllib.parse import urlparse

from pydantic import BaseModel, field_validator

ADDRESS_REGEX: Final[re.Pattern[str]] = re.compile(r"^0x[a-fA-F0-9]{40}$")

ETH_SENTINEL: Final[str] = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"
ZERO_ADDRESS: Final[str] = "0x0000000000000000000000000000000000000000"
BASE_WETH: Final[str] = "0x4200000000000000000000000000000000000006"
MAINNET_WETH: Final[str] = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"


class ChainConfig(BaseModel):
    """Runtime chain configuration for leverage-token planning and execution."""

    name: str
    chain_id: int
    weth: str
    leverage_manager: str | None = None
    leverage_router: str | None = None
    multicall_executor: str | None = None
    velora_adapter: str | None = None
    uniswap_v2_router: str | None = None
    uniswap_v3_quoter: str | None = None
    uniswap_v3_swap_router: str | None = None
    uniswap_v4_quoter: str | None = None
    universal_router: str | None = None
    explorer_base_url: str | None = None
    is_testnet: bool = False

    model_config = {
        "frozen": True,
    }

    @field_validator(
        "weth",
        "leverage_manager",
        "leverage_router",
        "multicall_executor",
        "velora_adapter",
        "uniswap_v2_router",
        "uniswap_v3_quoter",
        "uniswap_v3_swap_router",
        "uniswap_v4_quoter",
        "universal_router",
    )
    @classmethod
    def validate_address(cls, value: str | None) -> str | None:
        if value is None:
            return value
        if not ADDRESS_REGEX.match(value):
            raise ValueError(f"Invalid Ethereum address: {value}")
        return value

    @field_validator("explorer_base_url")
    @classmethod
    def validate_explorer_base_url(cls, value: str | None) -> str | None:
        if value is None:
            return value
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"Invalid explorer URL: {value}")
        return value.rstrip("/")

    def explorer_tx_url(self, tx_hash: str) -> str | None:
        if not self.explorer_base_url:
            return None
        if not tx_hash.startswith("0x"):
            tx_hash = f"0x{tx_hash}"
        return f"{self.explorer_base_url}/tx/{tx_hash}"

    def explorer_address_url(self, address: str) -> str | None:
        if not self.explorer_base_url:
            return None
        return f"{self.explorer_base_url}/address/{address}"


LEVERAGE_CHAIN_CONFIGS: dict[str, ChainConfig] = {
    "base": ChainConfig(
        name="base",
        chain_id=8453,
        weth=BASE_WETH,
        leverage_manager="0x959c574EC9A40b64245A3cF89b150Dc278e9E55C",
        leverage_router="0xfd46483b299197c616671b7df295ca5186c805c2",
        multicall_executor="0xbc097fd3c71c8ec436d8d81e13bceac207fd72cd",
        uniswap_v2_router="0x4752ba5DBc23f44D87826276BF6Fd6b1C372aD24",
        uniswap_v3_quoter="0x3d4e44Eb1374240CE5F1B871ab261CD16335B76a",
        uniswap_v3_swap_router="0x2626664c2603336E57B271c5C0b26F421741e481",
        uniswap_v4_quoter="0x0d5e0f971ed27fbff6c2837bf31316121532048d",
        universal_router="0x6ff5693b99212da76ad316178a184ab56d299b43",
        explorer_base_url="https://basescan.org",
    ),
    "ethereum": ChainConfig(
        name="ethereum",
        chain_id=1,
        weth=MAINNET_WETH,
        uniswap_v2_router="0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D",
        uniswap_v3_quoter="0x61fFE014bA17989E743c5F6cB21bF9697530B21e",
        uniswap_v3_swap_router="0x68b3465833fb72A70ecDF485E0e4C7bD8665Fc45",
        uniswap_v4_quoter="0x52f0e24d1c21c8a0cb1e5a5dd6198556bd9e1203",
        universal_router="0x66a9893cc07d91d95644aedd05d03f95e1dba8af",
        explorer_base_url="https://etherscan.io",
    ),
}

CHAIN_KEY_BY_ID: dict[int, str] = {config.chain_id: key for key, config in LEVERAGE_CHAIN_CONFIGS.items()}
