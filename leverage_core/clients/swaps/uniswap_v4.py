"""Tick-based (UniswapV4-style) adapter encoding swaps for the Universal Router.

The router call is ``execute(commands, inputs, deadline)`` with a single
``V4_SWAP`` command whose input is the ``(bytes actions, bytes[] params)``
unlock payload. Action order is fixed per intent:

- exact-in:  SWAP_EXACT_IN_SINGLE, SETTLE_ALL, TAKE_ALL  (``0x060c0f``)
- exact-out: SWAP_EXACT_OUT_SINGLE, SETTLE_ALL, TAKE_ALL (``0x080c0f``)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from web3 import Web3

from leverage_core.clients.errors import QuoteRequestError, VenueError
from leverage_core.clients.swaps.codec import (
    decode_call,
    deadline_from_timestamp,
    encode_call,
    is_native,
    normalize_address,
)
from leverage_core.clients.swaps.slippage import apply_slippage_floor, exact_out_max_in, validate_slippage_bps
from leverage_core.logging import log
from leverage_core.models.chain import ZERO_ADDRESS
from leverage_core.models.quote import Call, Quote, QuoteRequest
from leverage_core.settings.config import UNIVERSAL_ROUTER_EXECUTE_ABI, V4_QUOTER_ABI

V4_SWAP_COMMAND: Final[int] = 0x10

SWAP_EXACT_IN_SINGLE: Final[int] = 0x06
SWAP_EXACT_OUT_SINGLE: Final[int] = 0x08
SETTLE_ALL: Final[int] = 0x0C
TAKE_ALL: Final[int] = 0x0F

EXACT_IN_ACTIONS: Final[bytes] = bytes([SWAP_EXACT_IN_SINGLE, SETTLE_ALL, TAKE_ALL])
EXACT_OUT_ACTIONS: Final[bytes] = bytes([SWAP_EXACT_OUT_SINGLE, SETTLE_ALL, TAKE_ALL])

POOL_KEY_TYPE: Final[str] = "(address,address,uint24,int24,address)"
# Both single-pool swap structs share this layout; the two uint128 fields are
# (amountIn, amountOutMinimum) for exact-in and (amountOut, amountInMaximum) for exact-out.
SWAP_SINGLE_TYPE: Final[str] = f"({POOL_KEY_TYPE},bool,uint128,uint128,bytes)"
UNLOCK_TYPES: Final[list[str]] = ["bytes", "bytes[]"]
CURRENCY_AMOUNT_TYPES: Final[list[str]] = ["address", "uint256"]

# Some quoter deployments report the amount by reverting with QuoteSwap(uint256).
QUOTE_SWAP_SELECTOR: Final[str] = Web3.keccak(text="QuoteSwap(uint256)")[:4].hex().removeprefix("0x")


def normalize_currency(token: str) -> str:
    """Map the native sentinel (and zero address) to the V4 native currency."""
    if is_native(token):
        return ZERO_ADDRESS
    return normalize_address(token)


@dataclass(frozen=True)
class PoolKey:
    currency0: str
    currency1: str
    fee: int
    tick_spacing: int
    hooks: str = ZERO_ADDRESS

    def normalized(self) -> "PoolKey":
        return PoolKey(
            currency0=normalize_currency(self.currency0),
            currency1=normalize_currency(self.currency1),
            fee=int(self.fee),
            tick_spacing=int(self.tick_spacing),
            hooks=normalize_address(self.hooks),
        )

    def as_tuple(self) -> tuple[str, str, int, int, str]:
        return (self.currency0, self.currency1, self.fee, self.tick_spacing, self.hooks)

    def zero_for_one(self, currency_in: str, currency_out: str) -> bool:
        c0, c1 = self.currency0.lower(), self.currency1.lower()
        pair = (currency_in.lower(), currency_out.lower())
        if pair == (c0, c1):
            return True
        if pair == (c1, c0):
            return False
        raise QuoteRequestError(
            "Requested token pair does not match configured UniswapV4 pool key",
            venue=UniswapV4QuoteAdapter.venue,
        )


@dataclass(frozen=True)
class V4SwapCall:
    """Decoded view of an ``execute`` call built by this module."""

    commands: bytes
    actions: bytes
    params: tuple[bytes, ...]
    deadline: int

    @property
    def is_exact_in(self) -> bool:
        return self.actions == EXACT_IN_ACTIONS

    def swap_params(self) -> tuple[Any, ...]:
        return abi_decode([SWAP_SINGLE_TYPE], self.params[0])[0]

    def settle_params(self) -> tuple[str, int]:
        return tuple(abi_decode(CURRENCY_AMOUNT_TYPES, self.params[1]))

    def take_params(self) -> tuple[str, int]:
        return tuple(abi_decode(CURRENCY_AMOUNT_TYPES, self.params[2]))


def encode_v4_swap(
    pool_key: PoolKey,
    zero_for_one: bool,
    exact_in: bool,
    amount: int,
    bound: int,
    currency_in: str,
    currency_out: str,
    deadline: int,
    hook_data: bytes = b"",
) -> str:
    """Encode ``execute`` calldata for one single-pool V4 swap.

    For exact-in ``amount`` is the input and ``bound`` the minimum output; for
    exact-out ``amount`` is the output and ``bound`` the maximum input.
    """
    swap = abi_encode(
        [SWAP_SINGLE_TYPE],
        [(pool_key.as_tuple(), bool(zero_for_one), int(amount), int(bound), bytes(hook_data))],
    )
    settle_amount, take_amount = (amount, bound) if exact_in else (bound, amount)
    settle = abi_encode(CURRENCY_AMOUNT_TYPES, [currency_in, int(settle_amount)])
    take = abi_encode(CURRENCY_AMOUNT_TYPES, [currency_out, int(take_amount)])
    actions = EXACT_IN_ACTIONS if exact_in else EXACT_OUT_ACTIONS
    unlock_data = abi_encode(UNLOCK_TYPES, [actions, [swap, settle, take]])
    return encode_call(
        UNIVERSAL_ROUTER_EXECUTE_ABI,
        "execute",
        [bytes([V4_SWAP_COMMAND]), [unlock_data], int(deadline)],
    )


def decode_v4_swap(calldata: str | bytes) -> V4SwapCall:
    fn_name, params = decode_call(UNIVERSAL_ROUTER_EXECUTE_ABI, calldata)
    if fn_name != "execute":
        raise ValueError(f"Expected execute calldata, got {fn_name}")
    inputs = params["inputs"]
    if len(inputs) != 1:
        raise ValueError(f"Expected a single V4_SWAP input, got {len(inputs)}")
    actions, action_params = abi_decode(UNLOCK_TYPES, inputs[0])
    return V4SwapCall(
        commands=bytes(params["commands"]),
        actions=bytes(actions),
        params=tuple(bytes(p) for p in action_params),
        deadline=int(params["deadline"]),
    )


def _quote_swap_revert_amount(exc: Exception) -> int | None:
    data = getattr(exc, "data", None)
    if isinstance(data, dict):
        data = data.get("data")
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).hex()
    if not isinstance(data, str):
        return None
    payload = data.removeprefix("0x")
    if not payload.startswith(QUOTE_SWAP_SELECTOR):
        return None
    (amount,) = abi_decode(["uint256"], bytes.fromhex(payload[8:]))
    return int(amount)


class UniswapV4QuoteAdapter:
    venue = "uniswap_v4"

    def __init__(
        self,
        w3,
        quoter: str,
        universal_router: str,
        pool_key: PoolKey,
        slippage_bps: int = 50,
        deadline_seconds: int = 15 * 60,
        hook_data: bytes = b"",
    ) -> None:
        self.w3 = w3
        self.universal_router = normalize_address(universal_router)
        self.pool_key = pool_key.normalized()
        self.slippage_bps = validate_slippage_bps(slippage_bps)
        self.deadline_seconds = int(deadline_seconds)
        self.hook_data = bytes(hook_data)
        self._quoter = w3.eth.contract(address=normalize_address(quoter), abi=V4_QUOTER_ABI)

    async def _quote(self, fn_name: str, zero_for_one: bool, exact_amount: int) -> int:
        params = (self.pool_key.as_tuple(), zero_for_one, int(exact_amount), self.hook_data)
        try:
            result = await getattr(self._quoter.functions, fn_name)(params).call()
        except Exception as exc:
            amount = _quote_swap_revert_amount(exc)
            if amount is None:
                raise VenueError(f"UniswapV4 {fn_name} failed: {exc}", venue=self.venue) from exc
            return amount
        return int(result[0])

    async def __call__(self, request: QuoteRequest) -> Quote:
        currency_in = normalize_currency(request.in_token)
        currency_out = normalize_currency(request.out_token)
        zero_for_one = self.pool_key.zero_for_one(currency_in, currency_out)
        native_in = currency_in == ZERO_ADDRESS
        slippage_bps = request.slippage_bps if request.slippage_bps is not None else self.slippage_bps

        block = await self.w3.eth.get_block("latest")
        deadline = deadline_from_timestamp(block["timestamp"], self.deadline_seconds)

        if request.intent == "exactOut":
            target_out = int(request.amount_out)
            required_in = await self._quote("quoteExactOutputSingle", zero_for_one, target_out)
            if required_in <= 0:
                raise VenueError("UniswapV4 quoter returned zero input for exact-out quote", venue=self.venue)
            max_in = exact_out_max_in(required_in, slippage_bps, cap=request.amount_in, venue=self.venue)
            data = encode_v4_swap(
                self.pool_key, zero_for_one, False, target_out, max_in,
                currency_in, currency_out, deadline, self.hook_data,
            )
            out, min_out, amount_in, value = target_out, target_out, required_in, max_in
        else:
            amount_in = int(request.amount_in)
            out = await self._quote("quoteExactInputSingle", zero_for_one, amount_in)
            if out <= 0:
                raise VenueError("UniswapV4 quoter returned zero output", venue=self.venue)
            min_out = apply_slippage_floor(out, slippage_bps)
            max_in = amount_in
            data = encode_v4_swap(
                self.pool_key, zero_for_one, True, amount_in, min_out,
                currency_in, currency_out, deadline, self.hook_data,
            )
            value = amount_in

        log.debug(
            f"UniswapV4 quote intent={request.intent} zero_for_one={zero_for_one} "
            f"amount_in={amount_in} out={out} min_out={min_out} max_in={max_in}"
        )
        return Quote(
            out=out,
            min_out=min_out,
            amount_in=amount_in,
            max_in=max_in,
            approval_target=self.universal_router,
            calls=(Call(target=self.universal_router, data=data, value=value if native_in else 0),),
            wants_native_in=native_in,
            deadline=deadline,
            venue=self.venue,
        )
