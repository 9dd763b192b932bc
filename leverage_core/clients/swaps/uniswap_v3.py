"""Concentrated-liquidity (UniswapV3-style) single-pool quote adapter."""

from __future__ import annotations

from typing import Literal

from leverage_core.clients.errors import QuoteRequestError, VenueError
from leverage_core.clients.swaps.codec import deadline_from_timestamp, encode_call, is_native, normalize_address
from leverage_core.clients.swaps.slippage import (
    apply_slippage_floor,
    exact_out_max_in,
    mul_div_ceil,
    validate_slippage_bps,
)
from leverage_core.logging import log
from leverage_core.models.quote import Call, Quote, QuoteRequest
from leverage_core.settings.config import (
    V3_POOL_SLOT0_ABI,
    V3_QUOTER_V2_ABI,
    V3_SWAP_ROUTER02_ABI,
    V3_SWAP_ROUTER_ABI,
)

RouterKind = Literal["swap_router02", "swap_router"]

FEE_DENOMINATOR = 1_000_000
Q192 = 2**192


def estimate_exact_input(amount_in: int, sqrt_price_x96: int, fee: int, token_in_is_token0: bool) -> int:
    """Spot-price estimate from ``slot0`` for pools without a quoter deployment."""
    price_x192 = sqrt_price_x96 * sqrt_price_x96
    amount_after_fee = amount_in * (FEE_DENOMINATOR - fee) // FEE_DENOMINATOR
    if token_in_is_token0:
        return amount_after_fee * price_x192 // Q192
    return amount_after_fee * Q192 // price_x192


def estimate_exact_output(amount_out: int, sqrt_price_x96: int, fee: int, token_in_is_token0: bool) -> int:
    price_x192 = sqrt_price_x96 * sqrt_price_x96
    if token_in_is_token0:
        pre_fee = amount_out * Q192 // price_x192
    else:
        pre_fee = amount_out * price_x192 // Q192
    return mul_div_ceil(pre_fee, FEE_DENOMINATOR, FEE_DENOMINATOR - fee)


class UniswapV3QuoteAdapter:
    venue = "uniswap_v3"

    def __init__(
        self,
        w3,
        router: str,
        recipient: str,
        fee: int = 500,
        quoter: str | None = None,
        pool_address: str | None = None,
        wrapped_native: str | None = None,
        slippage_bps: int = 50,
        deadline_seconds: int = 15 * 60,
        router_kind: RouterKind = "swap_router02",
    ) -> None:
        if not quoter and not pool_address:
            raise ValueError("UniswapV3 adapter needs a quoter or a pool_address for slot0 estimates")
        self.w3 = w3
        self.router = normalize_address(router)
        self.recipient = normalize_address(recipient)
        self.fee = int(fee)
        self.wrapped_native = normalize_address(wrapped_native) if wrapped_native else None
        self.slippage_bps = validate_slippage_bps(slippage_bps)
        self.deadline_seconds = int(deadline_seconds)
        self.router_kind = router_kind
        self.router_abi = V3_SWAP_ROUTER02_ABI if router_kind == "swap_router02" else V3_SWAP_ROUTER_ABI
        self._quoter = (
            w3.eth.contract(address=normalize_address(quoter), abi=V3_QUOTER_V2_ABI) if quoter else None
        )
        self._pool = (
            w3.eth.contract(address=normalize_address(pool_address), abi=V3_POOL_SLOT0_ABI) if pool_address else None
        )

    def _normalize_token(self, token: str) -> str:
        if is_native(token):
            if not self.wrapped_native:
                raise QuoteRequestError(
                    "Wrapped native token address required for native sentinel input",
                    venue=self.venue,
                )
            return self.wrapped_native
        return normalize_address(token)

    async def _sqrt_price_x96(self) -> int:
        slot0 = await self._pool.functions.slot0().call()
        return int(slot0[0])

    async def quote_exact_in(self, token_in: str, token_out: str, amount_in: int) -> int:
        if self._quoter is None:
            sqrt_price = await self._sqrt_price_x96()
            return estimate_exact_input(amount_in, sqrt_price, self.fee, token_in.lower() < token_out.lower())
        try:
            result = await self._quoter.functions.quoteExactInputSingle(
                (token_in, token_out, int(amount_in), self.fee, 0)
            ).call()
        except Exception as exc:
            raise VenueError(f"UniswapV3 quoteExactInputSingle failed: {exc}", venue=self.venue) from exc
        return int(result[0])

    async def quote_exact_out(self, token_in: str, token_out: str, amount_out: int) -> int:
        if self._quoter is None:
            sqrt_price = await self._sqrt_price_x96()
            return estimate_exact_output(amount_out, sqrt_price, self.fee, token_in.lower() < token_out.lower())
        try:
            result = await self._quoter.functions.quoteExactOutputSingle(
                (token_in, token_out, int(amount_out), self.fee, 0)
            ).call()
        except Exception as exc:
            raise VenueError(f"UniswapV3 quoteExactOutputSingle failed: {exc}", venue=self.venue) from exc
        return int(result[0])

    def _swap_params(self, token_in: str, token_out: str, deadline: int, amount: int, bound: int) -> tuple:
        if self.router_kind == "swap_router02":
            return (token_in, token_out, self.fee, self.recipient, amount, bound, 0)
        return (token_in, token_out, self.fee, self.recipient, deadline, amount, bound, 0)

    async def __call__(self, request: QuoteRequest) -> Quote:
        native_in = is_native(request.in_token)
        token_in = self._normalize_token(request.in_token)
        token_out = self._normalize_token(request.out_token)
        slippage_bps = request.slippage_bps if request.slippage_bps is not None else self.slippage_bps

        block = await self.w3.eth.get_block("latest")
        deadline = deadline_from_timestamp(block["timestamp"], self.deadline_seconds)

        if request.intent == "exactOut":
            target_out = int(request.amount_out)
            required_in = await self.quote_exact_out(token_in, token_out, target_out)
            if required_in <= 0:
                raise VenueError("UniswapV3 quoter returned zero input for exact-out", venue=self.venue)
            max_in = exact_out_max_in(required_in, slippage_bps, cap=request.amount_in, venue=self.venue)
            data = encode_call(
                self.router_abi,
                "exactOutputSingle",
                [self._swap_params(token_in, token_out, deadline, target_out, max_in)],
            )
            quote = Quote(
                out=target_out,
                min_out=target_out,
                amount_in=required_in,
                max_in=max_in,
                approval_target=self.router,
                calls=(Call(target=self.router, data=data, value=max_in if native_in else 0),),
                wants_native_in=native_in,
                deadline=deadline,
                venue=self.venue,
            )
        else:
            amount_in = int(request.amount_in)
            amount_out = await self.quote_exact_in(token_in, token_out, amount_in)
            if amount_out <= 0:
                raise VenueError("UniswapV3 quoter returned zero output", venue=self.venue)
            min_out = apply_slippage_floor(amount_out, slippage_bps)
            data = encode_call(
                self.router_abi,
                "exactInputSingle",
                [self._swap_params(token_in, token_out, deadline, amount_in, min_out)],
            )
            quote = Quote(
                out=amount_out,
                min_out=min_out,
                amount_in=amount_in,
                max_in=amount_in,
                approval_target=self.router,
                calls=(Call(target=self.router, data=data, value=amount_in if native_in else 0),),
                wants_native_in=native_in,
                deadline=deadline,
                venue=self.venue,
            )

        log.debug(
            f"UniswapV3 quote intent={request.intent} fee={self.fee} token_in={token_in} token_out={token_out} "
            f"amount_in={quote.amount_in} out={quote.out} min_out={quote.min_out} max_in={quote.max_in}"
        )
        return quote
