"""Call builders shared by the mint and redeem planners."""

from __future__ import annotations

from leverage_core.clients.swaps.codec import build_call, normalize_address
from leverage_core.models.quote import Call, Quote
from leverage_core.settings.config import ERC20_ABI, WETH_ABI


class PlanningError(ValueError):
    """Raised when a plan cannot be built safely from the current state and quote."""


def approve_call(token: str, spender: str, amount: int) -> Call:
    return build_call(token, ERC20_ABI, "approve", [normalize_address(spender), int(amount)])


def weth_withdraw_call(weth: str, amount: int) -> Call:
    return build_call(weth, WETH_ABI, "withdraw", [int(amount)])


def build_swap_calls(asset: str, quote: Quote, amount: int, use_native: bool) -> list[Call]:
    """Calls that spend ``amount`` of ``asset`` through ``quote``.

    ERC-20 path: approve the venue then swap. Native path: unwrap ``asset``
    (the wrapped native token) then swap with ``amount`` attached as value.
    """
    if amount <= 0:
        raise PlanningError("swap amount must be positive")
    if use_native:
        *head, last = quote.calls
        return [
            weth_withdraw_call(asset, amount),
            *head,
            Call(target=last.target, data=last.data, value=int(amount)),
        ]
    return [approve_call(asset, quote.approval_target, amount), *quote.calls]
