"""ABI encoding helpers shared by venue adapters and planners."""

from __future__ import annotations

from typing import Any, Sequence

from web3 import Web3

from leverage_core.models.chain import ETH_SENTINEL, ZERO_ADDRESS
from leverage_core.models.quote import Call

# Provider-less instance, used only for ABI encoding/decoding.
_W3 = Web3()


def _contract(abi: list[dict[str, Any]]):
    return _W3.eth.contract(abi=abi)


def encode_call(abi: list[dict[str, Any]], fn_name: str, args: Sequence[Any]) -> str:
    contract = _contract(abi)
    if hasattr(contract, "encode_abi"):
        data = contract.encode_abi(fn_name, args=list(args))
    else:
        data = contract.encodeABI(fn_name=fn_name, args=list(args))
    return data if isinstance(data, str) else Web3.to_hex(data)


def decode_call(abi: list[dict[str, Any]], data: str | bytes) -> tuple[str, dict[str, Any]]:
    """Return ``(function name, decoded params)`` for calldata produced by ``encode_call``."""
    func, params = _contract(abi).decode_function_input(data)
    return func.fn_name, dict(params)


def build_call(
    target: str,
    abi: list[dict[str, Any]],
    fn_name: str,
    args: Sequence[Any],
    value: int = 0,
) -> Call:
    return Call(target=target, data=encode_call(abi, fn_name, args), value=int(value))


def normalize_address(address: str) -> str:
    return Web3.to_checksum_address(address)


def is_native(token: str) -> bool:
    lowered = token.lower()
    return lowered == ETH_SENTINEL.lower() or lowered == ZERO_ADDRESS


def same_address(a: str | None, b: str | None) -> bool:
    if not a or not b:
        return False
    return a.lower() == b.lower()


def deadline_from_timestamp(block_timestamp: int, seconds: int) -> int:
    return int(block_timestamp) + int(seconds)
