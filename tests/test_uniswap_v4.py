from __future__ import annotations

import asyncio

import pytest
from eth_abi import encode as abi_encode

from leverage_core.clients.errors import QuoteRequestError, VenueError
from leverage_core.clients.swaps.uniswap_v4 import (
    EXACT_IN_ACTIONS,
    EXACT_OUT_ACTIONS,
    QUOTE_SWAP_SELECTOR,
    PoolKey,
    UniswapV4QuoteAdapter,
    decode_v4_swap,
    encode_v4_swap,
)
from leverage_core.models.chain import ETH_SENTINEL, ZERO_ADDRESS
from leverage_core.models.quote import QuoteRequest
from tests.fakes import make_async_w3

QUOTER = "0x0d5e0f971ed27fbff6c2837bf31316121532048d"
UNIVERSAL_ROUTER = "0x6ff5693b99212da76ad316178a184ab56d299b43"
USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
CBBTC = "0xcbB7C0000aB88B473b1f5aFd9ef808440eed33Bf"

ETH_USDC_KEY = PoolKey(currency0=ZERO_ADDRESS, currency1=USDC, fee=500, tick_spacing=10)


class _QuoteSwapRevert(Exception):
    def __init__(self, amount: int):
        super().__init__("execution reverted")
        self.data = "0x" + QUOTE_SWAP_SELECTOR + abi_encode(["uint256"], [amount]).hex()


def _adapter(exact_in_out=2_000, exact_out_in=1_000):
    w3 = make_async_w3(
        {
            QUOTER: {
                "quoteExactInputSingle": lambda params: (exact_in_out, 100_000),
                "quoteExactOutputSingle": lambda params: exact_out_in
                if isinstance(exact_out_in, Exception)
                else (exact_out_in, 100_000),
            }
        },
        timestamp=10_000,
    )
    return UniswapV4QuoteAdapter(w3, quoter=QUOTER, universal_router=UNIVERSAL_ROUTER, pool_key=ETH_USDC_KEY)


def test_encode_decode_exact_in_layout():
    data = encode_v4_swap(ETH_USDC_KEY.normalized(), True, True, 1_000, 990, ZERO_ADDRESS, USDC, 123)
    decoded = decode_v4_swap(data)

    assert decoded.commands == b"\x10"
    assert decoded.actions == EXACT_IN_ACTIONS == bytes.fromhex("060c0f")
    assert decoded.is_exact_in is True
    assert len(decoded.params) == 3
    assert decoded.deadline == 123

    pool_key, zero_for_one, amount, bound, hook_data = decoded.swap_params()
    assert pool_key[2:4] == (500, 10)
    assert (zero_for_one, amount, bound, hook_data) == (True, 1_000, 990, b"")
    assert decoded.settle_params()[1] == 1_000
    assert decoded.take_params()[0].lower() == USDC.lower()
    assert decoded.take_params()[1] == 990


def test_exact_in_native_quote_sets_value_and_min_out():
    adapter = _adapter()
    quote = asyncio.run(adapter(QuoteRequest(in_token=ETH_SENTINEL, out_token=USDC, amount_in=1_000)))

    assert quote.out == 2_000
    assert quote.min_out == 1_990
    assert quote.approval_target.lower() == UNIVERSAL_ROUTER.lower()
    assert quote.calls[0].value == 1_000
    assert quote.deadline == 10_900

    decoded = decode_v4_swap(quote.calldata)
    assert decoded.settle_params()[0].lower() == ZERO_ADDRESS
    assert decoded.settle_params()[1] == 1_000
    assert decoded.take_params()[1] == 1_990


def test_exact_out_reverse_direction_settles_max_in():
    adapter = _adapter(exact_out_in=1_000)
    request = QuoteRequest(in_token=USDC, out_token=ETH_SENTINEL, intent="exactOut", amount_out=500, amount_in=2_000)
    quote = asyncio.run(adapter(request))

    assert quote.amount_in == 1_000
    assert quote.max_in == 1_005
    assert quote.calls[0].value == 0

    decoded = decode_v4_swap(quote.calldata)
    assert decoded.actions == EXACT_OUT_ACTIONS == bytes.fromhex("080c0f")
    _, zero_for_one, amount, bound, _ = decoded.swap_params()
    assert (zero_for_one, amount, bound) == (False, 500, 1_005)
    assert decoded.settle_params()[1] == 1_005
    assert decoded.take_params()[1] == 500


def test_quote_swap_revert_is_decoded_as_amount():
    adapter = _adapter(exact_out_in=_QuoteSwapRevert(1_234))
    request = QuoteRequest(in_token=ETH_SENTINEL, out_token=USDC, intent="exactOut", amount_out=500)
    quote = asyncio.run(adapter(request))
    assert quote.amount_in == 1_234


def test_other_reverts_and_pair_mismatch_fail():
    adapter = _adapter(exact_out_in=RuntimeError("boom"))
    with pytest.raises(VenueError, match="quoteExactOutputSingle failed"):
        asyncio.run(adapter(QuoteRequest(in_token=ETH_SENTINEL, out_token=USDC, intent="exactOut", amount_out=5)))

    with pytest.raises(QuoteRequestError):
        asyncio.run(adapter(QuoteRequest(in_token=CBBTC, out_token=USDC, amount_in=5)))
