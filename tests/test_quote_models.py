from __future__ import annotations

import pytest
from pydantic import ValidationError

from leverage_core.models.chain import ETH_SENTINEL
from leverage_core.models.plan import ActionData
from leverage_core.models.quote import Call, Quote, QuoteRequest

TOKEN_A = "0x1111111111111111111111111111111111111111"
TOKEN_B = "0x2222222222222222222222222222222222222222"
TARGET = "0x3333333333333333333333333333333333333333"


def test_quote_request_requires_amount_for_intent():
    request = QuoteRequest(in_token=TOKEN_A, out_token=TOKEN_B, amount_in=10)
    assert request.intent == "exactIn"
    assert request.exact_amount == 10

    exact_out = QuoteRequest(in_token=ETH_SENTINEL, out_token=TOKEN_B, intent="exactOut", amount_out=7, amount_in=20)
    assert exact_out.exact_amount == 7

    with pytest.raises(ValidationError):
        QuoteRequest(in_token=TOKEN_A, out_token=TOKEN_B, intent="exactOut", amount_in=10)
    with pytest.raises(ValidationError):
        QuoteRequest(in_token=TOKEN_A, out_token=TOKEN_B, amount_in=0)


def test_quote_request_rejects_same_token_and_bad_addresses():
    with pytest.raises(ValidationError):
        QuoteRequest(in_token=TOKEN_A, out_token=TOKEN_A.upper().replace("0X", "0x"), amount_in=1)
    with pytest.raises(ValidationError):
        QuoteRequest(in_token="0x1234", out_token=TOKEN_B, amount_in=1)
    with pytest.raises(ValidationError):
        QuoteRequest(in_token=TOKEN_A, out_token=TOKEN_B, amount_in=1, slippage_bps=10_001)


def test_call_normalizes_data_and_orders_struct_fields():
    call = Call(target=TARGET, data=b"\xde\xad\xbe\xef", value=3)
    assert call.data == "0xdeadbeef"
    assert call.as_tuple() == (TARGET, 3, b"\xde\xad\xbe\xef")

    with pytest.raises(ValidationError):
        Call(target=TARGET, data="deadbeef")
    with pytest.raises(ValidationError):
        Call(target=TARGET, data="0x", value=-1)


def test_quote_requires_calls_and_exposes_last_calldata():
    quote = Quote(
        out=10,
        min_out=9,
        amount_in=5,
        max_in=5,
        approval_target=TARGET,
        calls=(Call(target=TARGET, data="0x01"), Call(target=TARGET, data="0x02")),
    )
    assert quote.calldata == "0x02"

    with pytest.raises(ValidationError):
        Quote(out=1, min_out=1, approval_target=TARGET, calls=())


def test_action_data_from_contract_result():
    action = ActionData.from_result((100, 50, 25, 1, 2))
    assert action.collateral == 100
    assert action.debt == 50
    assert action.shares == 25
    assert action.treasury_fee == 2
