from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from leverage_core.clients.leverage.client import MAX_UINT256, LeverageClient, LeverageClientError
from leverage_core.clients.leverage.rpc import RPCError
from leverage_core.clients.leverage.simulation import simulate_transaction
from leverage_core.clients.swaps.codec import decode_call
from leverage_core.settings.config import ERC20_ABI
from tests.fakes import make_async_w3

PRIVATE_KEY = "0x59c6995e998f97a5a004497e5f6f3f0f4f8eb59eac220d8d9f87f84d888fff44"
WALLET = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
WEETH = "0x04C0599Ae5A44757c0af6F9eC3b93da8976c150A"
SPENDER = "0xfd46483b299197c616671b7df295ca5186c805c2"
TX_HASH = b"\x12" * 32


def _app_settings(**overrides):
    values = {
        "private_key": PRIVATE_KEY,
        "rpc_url": "http://dummy",
        "chain": "base",
        "leverage_manager_address": None,
        "leverage_router_address": None,
        "multicall_executor_address": None,
        "velora_adapter_address": None,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class _DummyRPC:
    def __init__(self, w3=None, chain_id=8453, revert=False, receipt_status=1):
        self.w3 = w3 or make_async_w3()
        self._chain_id = chain_id
        self.revert = revert
        self.receipt_status = receipt_status
        self.sent = []
        self.calls = []

    async def chain_id(self):
        return self._chain_id

    async def estimate_gas(self, tx):
        return 21_000

    async def nonce(self, address):
        return 3

    async def simulate(self, tx):
        self.calls.append(tx)
        if self.revert:
            raise RPCError("Simulation failed: execution reverted")
        return b""

    async def send_raw(self, raw_tx):
        self.sent.append(raw_tx)
        return TX_HASH

    async def wait_for_receipt(self, tx_hash, timeout=120.0):
        return {"status": self.receipt_status, "blockNumber": 10, "gasUsed": 50_000}


def _client(rpc=None, **settings_overrides):
    return LeverageClient(app_settings=_app_settings(**settings_overrides), rpc=rpc or _DummyRPC())


def test_client_resolves_wallet_and_deployment():
    client = _client()
    assert client.address == WALLET
    assert client.chain == "base"
    assert client.chain_config.chain_id == 8453
    assert client.require_router().address.lower() == client.chain_config.leverage_router.lower()
    assert client.get_explorer_tx_url("ab") == "https://basescan.org/tx/0xab"


def test_client_requires_key_and_known_chain():
    with pytest.raises(LeverageClientError, match="Missing private key"):
        _client(private_key=None)
    with pytest.raises(LeverageClientError, match="Unsupported chain"):
        _client(chain="solana")

    ethereum = _client(chain="ethereum")
    with pytest.raises(LeverageClientError, match="router not configured"):
        ethereum.require_router()


def test_verify_chain_detects_mismatch():
    client = _client(rpc=_DummyRPC(chain_id=1))
    with pytest.raises(LeverageClientError, match="does not match"):
        asyncio.run(client.verify_chain())


def test_build_transaction_adds_gas_nonce_and_chain_id():
    client = _client()
    tx = asyncio.run(client.build_transaction(to=SPENDER, data="0x1234"))

    assert tx["from"] == WALLET
    assert tx["gas"] == 25_200
    assert tx["nonce"] == 3
    assert tx["chainId"] == 8453
    assert tx["type"] == 2
    assert tx["maxFeePerGas"] >= tx["maxPriorityFeePerGas"] > 0


def test_build_transaction_checks_gas_balance():
    client = _client(rpc=_DummyRPC(w3=make_async_w3(balance=0)))
    with pytest.raises(LeverageClientError, match="Insufficient native token balance"):
        asyncio.run(client.build_transaction(to=SPENDER, data="0x1234"))


def test_submit_signs_and_returns_hex_hash():
    rpc = _DummyRPC()
    client = _client(rpc=rpc)
    tx = asyncio.run(client.build_transaction(to=SPENDER, data="0x1234"))
    tx_hash = asyncio.run(client.submit(tx))

    assert tx_hash == "0x" + "12" * 32
    assert len(rpc.sent) == 1


def test_simulation_revert_becomes_failed_result():
    rpc = _DummyRPC(revert=True)
    result = asyncio.run(simulate_transaction(rpc, {"to": SPENDER, "data": "0x"}))
    assert result.ok is False
    assert "execution reverted" in result.result

    client = _client(rpc=rpc)
    result = asyncio.run(client.simulate({"from": WALLET, "to": SPENDER, "data": "0x", "value": 0, "nonce": 1}))
    assert result.ok is False
    assert "nonce" not in rpc.calls[-1]


def test_wait_for_receipt_raises_on_revert():
    client = _client(rpc=_DummyRPC(receipt_status=0))
    with pytest.raises(LeverageClientError, match="reverted"):
        asyncio.run(client.wait_for_receipt("0x" + "12" * 32))


def test_ensure_allowance_skips_or_resets_then_approves_max():
    w3 = make_async_w3({WEETH: {"allowance": lambda owner, spender: 10**30}})
    client = _client(rpc=_DummyRPC(w3=w3))
    assert asyncio.run(client.ensure_allowance(WEETH, SPENDER, 10**18)) is None

    rpc = _DummyRPC(w3=make_async_w3({WEETH: {"allowance": lambda owner, spender: 5}}))
    client = _client(rpc=rpc)
    last_hash = asyncio.run(client.ensure_allowance(WEETH, SPENDER, 10**18, reset_then_max=True))

    assert last_hash == "0x" + "12" * 32
    assert len(rpc.sent) == 2
    amounts = [decode_call(ERC20_ABI, tx["data"])[1]["amount"] for tx in rpc.calls]
    assert amounts == [0, MAX_UINT256]
