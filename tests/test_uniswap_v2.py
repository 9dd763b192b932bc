from __future__ import annotations

import asyncio

import pytest

from leverage_core.clients.errors import QuoteRequestError, VenueError
from leverage_core.clients.swaps.codec import decode_call
from leverage_core.clients.swaps.uniswap_v2 import UniswapV2QuoteAdapter, get_amount_in, get_amount_out
from leverage_core.models.chain import ETH_SENTINEL
from leverage_core.models.quote import QuoteRequest
from leverage_core.settings.config import UNISWAP_V2_ROUTER_ABI
from tests.fakes import make_async_w3

ROUTER = "0x4752ba5DBc23f44D87826276BF6Fd6b1C372aD24"
FACTORY = "0x8909Dc15e40173Ff4699343b6eB8132c65e18eC6"
PAIR = "0x88A43bbDF9D098eEC7bCEda4e2494615dfD9bB9C"
RECIPIENT = "0xfd46483b299197c616671b7df295ca5186c805c2"
WETH = "0x4200000000000000000000000000000000000006"
USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"


def _adapter(reserve_weth=1_000_000, reserve_usdc=2_000_000, pair=PAIR):
    w3 = make_async_w3(
        {
            ROUTER: {"factory": lambda: FACTORY},
            FACTORY: {"getPair": lambda a, b: pair},
            PAIR: {
                "getReserves": lambda: (reserve_weth, reserve_usdc, 0),
                "token0": lambda: WETH,
            },
        },
        timestamp=1_000,
    )
    return UniswapV2QuoteAdapter(w3, router=ROUTER, recipient=RECIPIENT, wrapped_native=WETH)


def test_constant_product_math():
    assert get_amount_out(1_000, 1_000_000, 2_000_000) == 1_992
    assert get_amount_in(1_992, 1_000_000, 2_000_000) == 1_000
    with pytest.raises(VenueError):
        get_amount_out(0, 1, 1)
    with pytest.raises(VenueError):
        get_amount_in(10, 1_000, 10)


def test_exact_in_quote_encodes_router_swap_to_recipient():
    adapter = _adapter()
    quote = asyncio.run(adapter(QuoteRequest(in_token=WETH, out_token=USDC, amount_in=1_000)))

    assert quote.out == 1_992
    assert quote.min_out == 1_982
    assert quote.max_in == 1_000
    assert quote.deadline == 1_000 + 15 * 60
    assert quote.approval_target == ROUTER
    assert quote.calls[0].value == 0

    fn_name, params = decode_call(UNISWAP_V2_ROUTER_ABI, quote.calldata)
    assert fn_name == "swapExactTokensForTokens"
    assert params["amountIn"] == 1_000
    assert params["amountOutMin"] == 1_982
    assert params["to"].lower() == RECIPIENT.lower()
    assert [p.lower() for p in params["path"]] == [WETH.lower(), USDC.lower()]


def test_exact_out_quote_caps_max_in():
    adapter = _adapter()
    request = QuoteRequest(in_token=WETH, out_token=USDC, intent="exactOut", amount_out=1_992, amount_in=1_003)
    quote = asyncio.run(adapter(request))

    assert quote.amount_in == 1_000
    assert quote.max_in == 1_003
    assert quote.out == 1_992
    fn_name, params = decode_call(UNISWAP_V2_ROUTER_ABI, quote.calldata)
    assert fn_name == "swapTokensForExactTokens"
    assert params["amountInMax"] == 1_003

    with pytest.raises(VenueError):
        asyncio.run(
            adapter(QuoteRequest(in_token=WETH, out_token=USDC, intent="exactOut", amount_out=1_992, amount_in=999))
        )


def test_native_input_uses_eth_entrypoint_and_value():
    adapter = _adapter()
    quote = asyncio.run(adapter(QuoteRequest(in_token=ETH_SENTINEL, out_token=USDC, amount_in=1_000)))

    assert quote.wants_native_in is True
    assert quote.calls[0].value == 1_000
    fn_name, params = decode_call(UNISWAP_V2_ROUTER_ABI, quote.calldata)
    assert fn_name == "swapExactETHForTokens"
    assert params["path"][0].lower() == WETH.lower()


def test_missing_pair_and_missing_wrapped_native_fail(async_w3_factory):
    adapter = _adapter(pair="0x0000000000000000000000000000000000000000")
    with pytest.raises(VenueError, match="pair not found"):
        asyncio.run(adapter(QuoteRequest(in_token=WETH, out_token=USDC, amount_in=1_000)))

    no_weth = UniswapV2QuoteAdapter(async_w3_factory(), router=ROUTER, recipient=RECIPIENT)
    with pytest.raises(QuoteRequestError):
        asyncio.run(no_weth(QuoteRequest(in_token=ETH_SENTINEL, out_token=USDC, amount_in=1_000)))
