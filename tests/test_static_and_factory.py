from __future__ import annotations

import asyncio
import json

import pytest

from leverage_core.clients.errors import MalformedQuoteError, QuoteRequestError
from leverage_core.clients.swaps.factory import create_quote_adapter
from leverage_core.clients.swaps.lifi import LifiQuoteAdapter
from leverage_core.clients.swaps.pendle import PendleQuoteAdapter
from leverage_core.clients.swaps.static import (
    StaticQuoteAdapter,
    load_static_quote_snapshot,
    normalize_static_quote,
)
from leverage_core.clients.swaps.uniswap_v2 import UniswapV2QuoteAdapter
from leverage_core.clients.swaps.uniswap_v4 import PoolKey, UniswapV4QuoteAdapter
from leverage_core.clients.swaps.velora import VeloraQuoteAdapter
from leverage_core.models.chain import LEVERAGE_CHAIN_CONFIGS, ZERO_ADDRESS
from leverage_core.models.quote import QuoteRequest
from tests.fakes import make_async_w3

USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
WEETH = "0x04C0599Ae5A44757c0af6F9eC3b93da8976c150A"
SPENDER = "0x1231DEB6f5749EF6cE6943a275A1D3E7486F4EaE"
CALL_TARGET = "0x6A000F20005980200259B80c5102003040001068"

BASE = LEVERAGE_CHAIN_CONFIGS["base"]


def _flat_snapshot(**overrides):
    payload = {
        "inToken": USDC,
        "outToken": WEETH,
        "amountIn": "1000",
        "amountOut": "2000",
        "minAmountOut": "1980",
        "approvalTarget": SPENDER,
        "calldata": "0x1234",
    }
    payload.update(overrides)
    return payload


def test_static_adapter_replays_recorded_quote():
    adapter = StaticQuoteAdapter(normalize_static_quote(_flat_snapshot()), label="usdc-weeth")
    quote = asyncio.run(adapter(QuoteRequest(in_token=USDC, out_token=WEETH, amount_in=1_000)))

    assert quote.out == 2_000
    assert quote.min_out == 1_980
    assert quote.max_in == 1_000
    assert quote.calls[0].target == quote.approval_target
    assert quote.venue == "static"


def test_static_adapter_rejects_mismatched_requests():
    adapter = StaticQuoteAdapter(normalize_static_quote(_flat_snapshot()))
    with pytest.raises(QuoteRequestError, match="amountIn"):
        asyncio.run(adapter(QuoteRequest(in_token=USDC, out_token=WEETH, amount_in=999)))
    with pytest.raises(QuoteRequestError, match="outToken"):
        asyncio.run(adapter(QuoteRequest(in_token=USDC, out_token=SPENDER, amount_in=1_000)))
    with pytest.raises(QuoteRequestError, match="exactIn"):
        asyncio.run(adapter(QuoteRequest(in_token=USDC, out_token=WEETH, intent="exactOut", amount_out=5)))

    relaxed = StaticQuoteAdapter(normalize_static_quote(_flat_snapshot()), enforce_amount_in=False)
    quote = asyncio.run(relaxed(QuoteRequest(in_token=USDC, out_token=WEETH, amount_in=999)))
    assert quote.amount_in == 1_000


def test_static_snapshot_from_lifi_step_and_file(tmp_path):
    step = {
        "action": {"fromToken": {"address": USDC}, "toToken": {"address": WEETH}, "fromAmount": "1000"},
        "estimate": {"toAmount": "2000", "toAmountMin": "1990", "approvalAddress": SPENDER},
        "transactionRequest": {"to": CALL_TARGET, "data": "0xabcd"},
    }
    path = tmp_path / "quotes.json"
    path.write_text(json.dumps({"usdc_weeth": step}), encoding="utf-8")

    snapshot = load_static_quote_snapshot(path, selector="usdc_weeth")
    assert snapshot.amount_in == 1_000
    assert snapshot.min_amount_out == 1_990
    assert snapshot.call_target.lower() == CALL_TARGET.lower()
    assert snapshot.approval_target.lower() == SPENDER.lower()

    with pytest.raises(MalformedQuoteError):
        normalize_static_quote({"unexpected": True})
    with pytest.raises(MalformedQuoteError):
        normalize_static_quote(_flat_snapshot(amountIn=True))


def test_factory_builds_http_venues_with_router_and_executor():
    velora = create_quote_adapter("velora", BASE, slippage_bps=75)
    assert isinstance(velora, VeloraQuoteAdapter)
    assert velora.router.lower() == BASE.leverage_router.lower()
    assert velora.from_address.lower() == BASE.multicall_executor.lower()
    assert velora.slippage_bps == 75

    lifi = create_quote_adapter(" LiFi ", BASE, executor=SPENDER)
    assert isinstance(lifi, LifiQuoteAdapter)
    assert lifi.from_address.lower() == SPENDER.lower()

    pendle = create_quote_adapter("pendle", BASE, slippage_bps=30)
    assert isinstance(pendle, PendleQuoteAdapter)
    assert pendle.router.lower() == BASE.leverage_router.lower()
    assert pendle.chain_id == 8453


def test_factory_builds_onchain_venues_and_validates_inputs():
    w3 = make_async_w3()
    v2 = create_quote_adapter("uniswap_v2", BASE, w3=w3)
    assert isinstance(v2, UniswapV2QuoteAdapter)
    assert v2.recipient.lower() == BASE.leverage_router.lower()

    pool_key = PoolKey(currency0=ZERO_ADDRESS, currency1=USDC, fee=500, tick_spacing=10)
    v4 = create_quote_adapter("uniswap_v4", BASE, w3=w3, pool_key=pool_key)
    assert isinstance(v4, UniswapV4QuoteAdapter)

    with pytest.raises(ValueError, match="requires a web3 instance"):
        create_quote_adapter("uniswap_v3", BASE)
    with pytest.raises(ValueError, match="pool_key"):
        create_quote_adapter("uniswap_v4", BASE, w3=w3)
    with pytest.raises(ValueError, match="Unsupported venue"):
        create_quote_adapter("balancer", BASE)
    with pytest.raises(ValueError, match="leverage_router"):
        create_quote_adapter("velora", LEVERAGE_CHAIN_CONFIGS["ethereum"])
