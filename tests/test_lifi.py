from __future__ import annotations

import asyncio

import httpx
import pytest

from leverage_core.clients.errors import MalformedQuoteError, VenueError
from leverage_core.clients.swaps.lifi import LifiQuoteAdapter
from leverage_core.models.chain import BASE_WETH
from leverage_core.models.plan import ActionData
from leverage_core.models.quote import QuoteRequest
from leverage_core.planning import plan_redeem

TOKEN = "0xA2fceEAe99d2cAeEe978DA27bE2d95b0381dBB8c"
ROUTER = "0xfd46483b299197c616671b7df295ca5186c805c2"
EXECUTOR = "0xbc097fd3c71c8ec436d8d81e13bceac207fd72cd"
LIFI_DIAMOND = "0x1231DEB6f5749EF6cE6943a275A1D3E7486F4EaE"
USDC = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
WEETH = "0x04C0599Ae5A44757c0af6F9eC3b93da8976c150A"


def _step(to_amount="2000", to_amount_min="1990", data="0xabcdef"):
    return {
        "action": {"fromToken": {"address": USDC}, "toToken": {"address": WEETH}, "fromAmount": "1000"},
        "estimate": {"toAmount": to_amount, "toAmountMin": to_amount_min, "approvalAddress": LIFI_DIAMOND},
        "transactionRequest": {"to": LIFI_DIAMOND, "data": data, "value": "0x0"},
    }


def _adapter(payload, seen=None, **kwargs):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(200, json=payload)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return LifiQuoteAdapter(router=ROUTER, chain_id=8453, from_address=EXECUTOR, http_client=client, **kwargs)


def test_same_chain_params_and_headers():
    seen = []
    adapter = _adapter(_step(), seen=seen, api_key="secret", integrator="leverage-core")
    quote = asyncio.run(adapter(QuoteRequest(in_token=USDC, out_token=WEETH, amount_in=1_000)))

    request = seen[0]
    params = request.url.params
    assert request.url.path == "/v1/quote"
    assert params["fromChain"] == params["toChain"] == "8453"
    assert params["fromAmount"] == "1000"
    assert params["slippage"] == "0.005"
    assert params["allowBridges"] == "none"
    assert params["integrator"] == "leverage-core"
    assert params["fromAddress"].lower() == EXECUTOR.lower()
    assert request.headers["x-lifi-api-key"] == "secret"

    assert quote.out == 2_000
    assert quote.min_out == 1_990
    assert quote.max_in == 1_000
    assert quote.approval_target.lower() == LIFI_DIAMOND.lower()
    assert quote.calldata == "0xabcdef"


def _exact_out_step(from_amount="1000", to_amount="2000", data="0xfeed"):
    return {
        "action": {"fromToken": {"address": WEETH}, "toToken": {"address": USDC}, "fromAmount": from_amount},
        "estimate": {"fromAmount": from_amount, "toAmount": to_amount, "toAmountMin": to_amount, "approvalAddress": LIFI_DIAMOND},
        "transactionRequest": {"to": LIFI_DIAMOND, "data": data, "value": "0x0"},
    }


def test_exact_out_uses_to_amount_endpoint_and_bounds_input():
    seen = []
    adapter = _adapter(_exact_out_step(), seen=seen)
    request = QuoteRequest(in_token=WEETH, out_token=USDC, intent="exactOut", amount_out=2_000, amount_in=3_000)
    quote = asyncio.run(adapter(request))

    params = seen[0].url.params
    assert seen[0].url.path == "/v1/quote/toAmount"
    assert params["toAmount"] == "2000"
    assert "fromAmount" not in params
    assert quote.out == 2_000
    assert quote.amount_in == 1_000
    assert quote.max_in == 1_005
    assert quote.calldata == "0xfeed"


def test_exact_out_quote_above_available_input_fails():
    adapter = _adapter(_exact_out_step(from_amount="3500"))
    request = QuoteRequest(in_token=WEETH, out_token=USDC, intent="exactOut", amount_out=2_000, amount_in=3_000)
    with pytest.raises(VenueError):
        asyncio.run(adapter(request))

    adapter = _adapter({**_exact_out_step(), "estimate": {"toAmount": "2000", "approvalAddress": LIFI_DIAMOND}})
    with pytest.raises(MalformedQuoteError, match="input amount"):
        asyncio.run(adapter(QuoteRequest(in_token=WEETH, out_token=USDC, intent="exactOut", amount_out=2_000)))


def test_request_slippage_overrides_adapter_default():
    seen = []
    adapter = _adapter(_step(to_amount_min=None), seen=seen, slippage_bps=50)
    quote = asyncio.run(adapter(QuoteRequest(in_token=USDC, out_token=WEETH, amount_in=1_000, slippage_bps=100)))

    assert seen[0].url.params["slippage"] == "0.01"
    assert quote.min_out == 1_980


class _Manager:
    async def get_collateral_asset(self, token):
        return WEETH

    async def get_debt_asset(self, token):
        return USDC

    async def preview_redeem(self, token, shares):
        return ActionData(collateral=3_000, debt=2_000, shares=shares)


def test_redeem_plan_can_repay_through_lifi():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/quote/toAmount"
        return httpx.Response(200, json=_exact_out_step())

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    adapter = LifiQuoteAdapter(router=ROUTER, chain_id=8453, from_address=EXECUTOR, http_client=client)
    plan = asyncio.run(plan_redeem(_Manager(), TOKEN, 1_000, 50, adapter, BASE_WETH))

    assert plan.max_collateral_for_debt == 1_005
    assert plan.min_collateral_for_sender == 1_995
    assert plan.expected_collateral == 2_000
    approve, swap = plan.calls
    assert approve.target.lower() == WEETH.lower()
    assert swap.target.lower() == LIFI_DIAMOND.lower()
    assert swap.data == "0xfeed"


def test_missing_min_amount_falls_back_to_slippage_floor():
    adapter = _adapter(_step(to_amount_min=None))
    quote = asyncio.run(adapter(QuoteRequest(in_token=USDC, out_token=WEETH, amount_in=1_000)))
    assert quote.min_out == 1_990


def test_error_body_and_malformed_step():
    adapter = _adapter({"message": "No available quotes for the requested transfer"})
    with pytest.raises(VenueError, match="No available quotes"):
        asyncio.run(adapter(QuoteRequest(in_token=USDC, out_token=WEETH, amount_in=1_000)))

    adapter = _adapter(_step(data="0x"))
    with pytest.raises(MalformedQuoteError):
        asyncio.run(adapter(QuoteRequest(in_token=USDC, out_token=WEETH, amount_in=1_000)))
