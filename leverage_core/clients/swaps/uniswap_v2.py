"""Constant-product (UniswapV2-style) quote adapter.

Amounts come from pair reserves read on-chain, with the venue fee taken on the
input leg. Works with any V2 fork exposing ``factory()/getPair/getReserves``.
"""

from __future__ import annotations

from typing import Callable, Sequence

from leverage_core.clients.errors import QuoteRequestError, VenueError
from leverage_core.clients.swaps.codec import (
    deadline_from_timestamp,
    encode_call,
    is_native,
    normalize_address,
    same_address,
)
from leverage_core.clients.swaps.slippage import (
    BPS_DENOMINATOR,
    apply_slippage_floor,
    exact_out_max_in,
    validate_slippage_bps,
)
from leverage_core.logging import log
from leverage_core.models.chain import ZERO_ADDRESS
from leverage_core.models.quote import Call, Quote, QuoteRequest
from leverage_core.settings.config import (
    UNISWAP_V2_FACTORY_ABI,
    UNISWAP_V2_PAIR_ABI,
    UNISWAP_V2_ROUTER_ABI,
)

ResolvePath = Callable[[str, str], Sequence[str]]


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int = 30) -> int:
    if amount_in <= 0:
        raise VenueError("UniswapV2 insufficient input amount", venue="uniswap_v2")
    if reserve_in <= 0 or reserve_out <= 0:
        raise VenueError("UniswapV2 insufficient liquidity", venue="uniswap_v2")
    amount_in_with_fee = amount_in * (BPS_DENOMINATOR - fee_bps)
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * BPS_DENOMINATOR + amount_in_with_fee
    return numerator // denominator


def get_amount_in(amount_out: int, reserve_in: int, reserve_out: int, fee_bps: int = 30) -> int:
    if amount_out <= 0:
        raise VenueError("UniswapV2 insufficient output amount", venue="uniswap_v2")
    if reserve_in <= 0 or reserve_out <= amount_out:
        raise VenueError("UniswapV2 insufficient liquidity", venue="uniswap_v2")
    numerator = reserve_in * amount_out * BPS_DENOMINATOR
    denominator = (reserve_out - amount_out) * (BPS_DENOMINATOR - fee_bps)
    return numerator // denominator + 1


class UniswapV2QuoteAdapter:
    venue = "uniswap_v2"

    def __init__(
        self,
        w3,
        router: str,
        recipient: str,
        wrapped_native: str | None = None,
        fee_bps: int = 30,
        resolve_path: ResolvePath | None = None,
        slippage_bps: int = 50,
        deadline_seconds: int = 15 * 60,
    ) -> None:
        self.w3 = w3
        self.router = normalize_address(router)
        self.recipient = normalize_address(recipient)
        self.wrapped_native = normalize_address(wrapped_native) if wrapped_native else None
        self.fee_bps = validate_slippage_bps(fee_bps)
        self.resolve_path = resolve_path or (lambda token_in, token_out: [token_in, token_out])
        self.slippage_bps = validate_slippage_bps(slippage_bps)
        self.deadline_seconds = int(deadline_seconds)
        self._router_contract = w3.eth.contract(address=self.router, abi=UNISWAP_V2_ROUTER_ABI)
        self._factory = None

    def _path(self, token_in: str, token_out: str) -> list[str]:
        path = [normalize_address(token) for token in self.resolve_path(token_in, token_out)]
        if len(path) < 2:
            raise QuoteRequestError("UniswapV2 path must include at least two tokens", venue=self.venue)
        if not same_address(path[0], token_in):
            raise QuoteRequestError("resolve_path must return a path that starts with the input token", venue=self.venue)
        if not same_address(path[-1], token_out):
            raise QuoteRequestError("resolve_path must return a path that ends with the output token", venue=self.venue)
        return path

    async def _factory_contract(self):
        if self._factory is None:
            factory_address = await self._router_contract.functions.factory().call()
            self._factory = self.w3.eth.contract(
                address=normalize_address(factory_address),
                abi=UNISWAP_V2_FACTORY_ABI,
            )
        return self._factory

    async def reserves(self, token_a: str, token_b: str) -> tuple[int, int]:
        """Return ``(reserve_a, reserve_b)`` for the pair, oriented to the arguments."""
        factory = await self._factory_contract()
        pair_address = await factory.functions.getPair(token_a, token_b).call()
        if not pair_address or same_address(pair_address, ZERO_ADDRESS):
            raise VenueError(f"UniswapV2 pair not found for {token_a}/{token_b}", venue=self.venue)
        pair = self.w3.eth.contract(address=normalize_address(pair_address), abi=UNISWAP_V2_PAIR_ABI)
        reserve0, reserve1, _ = await pair.functions.getReserves().call()
        token0 = await pair.functions.token0().call()
        if same_address(token0, token_a):
            return int(reserve0), int(reserve1)
        return int(reserve1), int(reserve0)

    async def amounts_out(self, amount_in: int, path: Sequence[str]) -> list[int]:
        amounts = [int(amount_in)]
        for token_a, token_b in zip(path, path[1:]):
            reserve_in, reserve_out = await self.reserves(token_a, token_b)
            amounts.append(get_amount_out(amounts[-1], reserve_in, reserve_out, self.fee_bps))
        return amounts

    async def amounts_in(self, amount_out: int, path: Sequence[str]) -> list[int]:
        amounts = [int(amount_out)]
        for token_a, token_b in reversed(list(zip(path, path[1:]))):
            reserve_in, reserve_out = await self.reserves(token_a, token_b)
            amounts.insert(0, get_amount_in(amounts[0], reserve_in, reserve_out, self.fee_bps))
        return amounts

    async def __call__(self, request: QuoteRequest) -> Quote:
        native_in = is_native(request.in_token)
        if native_in and not self.wrapped_native:
            raise QuoteRequestError(
                "UniswapV2 adapter requires wrapped_native when using the native sentinel input",
                venue=self.venue,
            )
        token_in = self.wrapped_native if native_in else request.in_token
        path = self._path(token_in, request.out_token)
        slippage_bps = request.slippage_bps if request.slippage_bps is not None else self.slippage_bps

        block = await self.w3.eth.get_block("latest")
        deadline = deadline_from_timestamp(block["timestamp"], self.deadline_seconds)

        if request.intent == "exactOut":
            amounts = await self.amounts_in(request.amount_out, path)
            expected_in, out = amounts[0], int(request.amount_out)
            max_in = exact_out_max_in(expected_in, slippage_bps, cap=request.amount_in, venue=self.venue)
            min_out = out
            if native_in:
                data = encode_call(
                    UNISWAP_V2_ROUTER_ABI,
                    "swapETHForExactTokens",
                    [out, path, self.recipient, deadline],
                )
            else:
                data = encode_call(
                    UNISWAP_V2_ROUTER_ABI,
                    "swapTokensForExactTokens",
                    [out, max_in, path, self.recipient, deadline],
                )
            value = max_in if native_in else 0
        else:
            amounts = await self.amounts_out(request.amount_in, path)
            expected_in, out = int(request.amount_in), amounts[-1]
            if out <= 0:
                raise VenueError("UniswapV2 quote returned zero output", venue=self.venue)
            max_in = expected_in
            min_out = apply_slippage_floor(out, slippage_bps)
            if native_in:
                data = encode_call(
                    UNISWAP_V2_ROUTER_ABI,
                    "swapExactETHForTokens",
                    [min_out, path, self.recipient, deadline],
                )
            else:
                data = encode_call(
                    UNISWAP_V2_ROUTER_ABI,
                    "swapExactTokensForTokens",
                    [expected_in, min_out, path, self.recipient, deadline],
                )
            value = expected_in if native_in else 0

        log.debug(
            f"UniswapV2 quote intent={request.intent} path={path} amount_in={expected_in} "
            f"out={out} min_out={min_out} max_in={max_in}"
        )
        return Quote(
            out=out,
            min_out=min_out,
            amount_in=expected_in,
            max_in=max_in,
            approval_target=self.router,
            calls=(Call(target=self.router, data=data, value=value),),
            wants_native_in=native_in,
            deadline=deadline,
            venue=self.venue,
        )
