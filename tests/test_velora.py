from __future__ import annotations

import asyncio

import httpx
import pytest
from loguru import logger

from leverage_core.clients.errors import MalformedQuoteError, QuoteTransportError, UnsupportedMethodError, VenueError
from leverage_core.clients.swaps.velora import VELORA_API_VERSION, VELORA_EXACT_OUT_OFFSETS, VeloraQuoteAdapter
from leverage_core.models.chain import ETH_SENTINEL, ZERO_ADDRESS
from leverage_core.models.quote import QuoteRequest

ROUTER = "0xfd46483b299197c616671b7df295ca5186c805c2"
EXECUTOR = "0xbc097fd3c71c8ec436d8d81e13bceac207fd72cd"
AUGUSTUS = "0x6A000F20005980200259B80c5102003040001068"
WEETH = "0x04C0599Ae5A44757c0af6F9eC3b93da8976c150A"
WETH = "0x4200000000000000000000000000000000000006"


def _swap_payload(src="1000", dest="2000", method="swapExactAmountOut", data="0xdeadbeef"):
    return {
        "priceRoute": {
            "srcAmount": src,
            "destAmount": dest,
            "contractAddress": AUGUSTUS,
            "contractMethod": method,
        },
        "txParams": {"to": AUGUSTUS, "data": data},
    }


def _adapter(payload, status_code=200, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return VeloraQuoteAdapter(router=ROUTER, chain_id=8453, from_address=EXECUTOR, http_client=client)


def test_exact_out_request_params_and_offsets():
    seen = []
    adapter = _adapter(_swap_payload(), seen=seen)
    request = QuoteRequest(in_token=ETH_SENTINEL, out_token=WEETH, intent="exactOut", amount_out=2_000, amount_in=1_010)
    quote = asyncio.run(adapter(request))

    params = seen[0].url.params
    assert seen[0].url.path == "/swap"
    assert params["side"] == "BUY"
    assert params["amount"] == "2000"
    assert params["srcToken"] == ZERO_ADDRESS
    assert params["slippage"] == "50"
    assert params["version"] == VELORA_API_VERSION
    assert params["includeContractMethods"] == "swapExactAmountOut"
    assert params["userAddress"].lower() == EXECUTOR.lower()
    assert params["receiver"].lower() == ROUTER.lower()

    assert quote.amount_in == 1_000
    assert quote.max_in == 1_005
    assert quote.out == 2_000
    assert quote.calls[0].value == 1_005
    assert quote.velora_data is not None
    assert quote.velora_data.offsets == VELORA_EXACT_OUT_OFFSETS
    assert quote.velora_data.offsets.as_tuple() == (132, 100, 164)
    assert quote.calldata == "0xdeadbeef"


def test_exact_in_quote_applies_slippage_floor():
    seen = []
    adapter = _adapter(_swap_payload(method="swapExactAmountIn"), seen=seen)
    quote = asyncio.run(adapter(QuoteRequest(in_token=WETH, out_token=WEETH, amount_in=1_000)))

    assert seen[0].url.params["side"] == "SELL"
    assert quote.out == 2_000
    assert quote.min_out == 1_990
    assert quote.velora_data is None
    assert quote.calls[0].value == 0


def test_exact_out_rejects_methods_outside_allow_list():
    adapter = _adapter(_swap_payload(method="swapOnUniswapV3"))
    request = QuoteRequest(in_token=WETH, out_token=WEETH, intent="exactOut", amount_out=2_000)
    with pytest.raises(UnsupportedMethodError) as exc_info:
        asyncio.run(adapter(request))
    assert exc_info.value.method == "swapOnUniswapV3"


def test_exact_out_over_cap_is_rejected():
    adapter = _adapter(_swap_payload(src="1200"))
    request = QuoteRequest(in_token=WETH, out_token=WEETH, intent="exactOut", amount_out=2_000, amount_in=1_100)
    with pytest.raises(VenueError, match="exceeds maximum input"):
        asyncio.run(adapter(request))


def test_api_error_is_logged_once_and_raised():
    messages = []
    sink_id = logger.add(lambda message: messages.append(str(message)), level="ERROR")
    try:
        adapter = _adapter({"error": "No routes found with enough liquidity"})
        with pytest.raises(VenueError, match="No routes found"):
            asyncio.run(adapter(QuoteRequest(in_token=WETH, out_token=WEETH, amount_in=1_000)))
    finally:
        logger.remove(sink_id)

    velora_errors = [m for m in messages if "Velora error from API" in m]
    assert len(velora_errors) == 1


def test_transport_and_payload_failures():
    adapter = _adapter({"message": "internal"}, status_code=500)
    with pytest.raises(QuoteTransportError) as exc_info:
        asyncio.run(adapter(QuoteRequest(in_token=WETH, out_token=WEETH, amount_in=1_000)))
    assert exc_info.value.status_code == 500

    adapter = _adapter(_swap_payload(dest="-5", method="swapExactAmountIn"))
    with pytest.raises(MalformedQuoteError):
        asyncio.run(adapter(QuoteRequest(in_token=WETH, out_token=WEETH, amount_in=1_000)))

    adapter = _adapter({"priceRoute": {}})
    with pytest.raises(MalformedQuoteError):
        asyncio.run(adapter(QuoteRequest(in_token=WETH, out_token=WEETH, amount_in=1_000)))
