"""Signing client for leverage router transactions.

Holds the wallet, the async RPC wrapper and the resolved chain deployment, and
exposes the simulate / submit / receipt primitives the orchestration layer
composes. Nothing here retries.
"""

from __future__ import annotations

from typing import Any

from eth_account import Account
from web3 import Web3

from leverage_core.clients.leverage.gas import GasManager
from leverage_core.clients.leverage.manager import LeverageManagerReader
from leverage_core.clients.leverage.router import LeverageRouter
from leverage_core.clients.leverage.rpc import RPC
from leverage_core.clients.leverage.simulation import SimulationResult, simulate_transaction
from leverage_core.clients.swaps.codec import encode_call, normalize_address
from leverage_core.logging import log
from leverage_core.settings.config import ERC20_ABI, Settings, resolve_chain_config, settings

MAX_UINT256 = 2**256 - 1


class LeverageClientError(Exception):
    """Raised for leverage client failures."""


class LeverageClient:
    def __init__(
        self,
        private_key: str | None = None,
        rpc_url: str | None = None,
        chain: str | int | None = None,
        app_settings: Settings | None = None,
        rpc: RPC | None = None,
    ) -> None:
        app_settings = app_settings or settings

        resolved_private_key = private_key or app_settings.private_key
        if not resolved_private_key:
            raise LeverageClientError("Missing private key: provide private_key or set PRIVATE_KEY in .env")

        resolved_rpc = rpc_url or app_settings.rpc_url
        if rpc is None and not resolved_rpc:
            raise LeverageClientError("Missing RPC URL: provide rpc_url or set RPC_URL in .env")

        self.account = Account.from_key(resolved_private_key)
        self.address = Web3.to_checksum_address(self.account.address)

        self.rpc = rpc or RPC(resolved_rpc)
        self.w3 = self.rpc.w3
        self.gas = GasManager(self.w3)

        try:
            self.chain_config = resolve_chain_config(app_settings, chain)
        except ValueError as exc:
            raise LeverageClientError(str(exc)) from exc
        self.chain = self.chain_config.name

        self.manager = (
            LeverageManagerReader(self.w3, self.chain_config.leverage_manager)
            if self.chain_config.leverage_manager
            else None
        )
        self.router = (
            LeverageRouter(self.w3, self.chain_config.leverage_router)
            if self.chain_config.leverage_router
            else None
        )

        log.info(
            f"LeverageClient initialized chain={self.chain} chain_id={self.chain_config.chain_id} "
            f"wallet={self.address} router={self.chain_config.leverage_router}"
        )
        self._validate_operation_support()

    def _validate_operation_support(self) -> None:
        if not self.chain_config.leverage_manager:
            log.warning(f"No leverage_manager configured for chain={self.chain}; planning reads are disabled")
        if not self.chain_config.leverage_router:
            log.warning(f"No leverage_router configured for chain={self.chain}; mint/redeem submission is disabled")
        if not self.chain_config.multicall_executor:
            log.warning(f"No multicall_executor configured for chain={self.chain}; pass one explicitly when executing")
        if not self.chain_config.explorer_base_url:
            log.warning(f"No explorer configured for chain={self.chain}; explorer URLs will be unavailable")

    async def verify_chain(self) -> int:
        """Fail when the RPC endpoint serves a different chain than the resolved deployment."""
        chain_id = await self.rpc.chain_id()
        if chain_id != self.chain_config.chain_id:
            raise LeverageClientError(
                f"RPC chain_id={chain_id} does not match chain={self.chain} ({self.chain_config.chain_id})"
            )
        return chain_id

    def get_explorer_tx_url(self, tx_hash: str) -> str | None:
        return self.chain_config.explorer_tx_url(tx_hash)

    def get_explorer_address_url(self, address: str | None = None) -> str | None:
        return self.chain_config.explorer_address_url(address or self.address)

    def require_router(self) -> LeverageRouter:
        if self.router is None:
            raise LeverageClientError(f"Leverage router not configured for chain={self.chain}")
        return self.router

    def require_manager(self) -> LeverageManagerReader:
        if self.manager is None:
            raise LeverageClientError(f"Leverage manager not configured for chain={self.chain}")
        return self.manager

    async def build_transaction(
        self,
        to: str,
        data: str,
        value: int = 0,
        gas_limit: int | None = None,
        gas_multiplier: float = 1.2,
    ) -> dict[str, Any]:
        base_tx: dict[str, Any] = {
            "from": self.address,
            "to": normalize_address(to),
            "data": data,
            "value": int(value),
        }
        if gas_limit is None:
            gas_limit = int(await self.rpc.estimate_gas(base_tx) * gas_multiplier)

        gas_quote = await self.gas.aggressive_fast(gas_limit)
        if not await self.gas.has_balance_for_gas(self.address, gas_quote, value=value):
            raise LeverageClientError("Insufficient native token balance for gas")

        return {
            **base_tx,
            **gas_quote.to_tx_params(),
            "nonce": await self.rpc.nonce(self.address),
            "chainId": self.chain_config.chain_id,
        }

    async def simulate(self, tx: dict[str, Any]) -> SimulationResult:
        call_tx = {key: tx[key] for key in ("from", "to", "data", "value") if key in tx}
        result = await simulate_transaction(self.rpc, call_tx)
        if not result.ok:
            log.warning(f"Simulation reverted to={call_tx.get('to')} reason={result.result}")
        return result

    async def submit(self, tx: dict[str, Any]) -> str:
        signed = self.account.sign_transaction(tx)
        raw_tx = getattr(signed, "raw_transaction", None) or getattr(signed, "rawTransaction", None)
        if raw_tx is None:
            raise LeverageClientError("Signed transaction has no raw payload")
        tx_hash = Web3.to_hex(await self.rpc.send_raw(raw_tx))

        log.info(f"Broadcasted tx hash={tx_hash} nonce={tx.get('nonce')} to={tx.get('to')}")
        explorer_url = self.get_explorer_tx_url(tx_hash)
        if explorer_url:
            log.info(f"Tx explorer url={explorer_url}")
        return tx_hash

    async def wait_for_receipt(self, tx_hash: str, timeout: float = 120.0):
        receipt = await self.rpc.wait_for_receipt(tx_hash, timeout=timeout)
        status = int(receipt.get("status", 0))
        if status != 1:
            raise LeverageClientError(f"Transaction {tx_hash} reverted (status={status})")
        log.info(f"Tx confirmed hash={tx_hash} block={receipt.get('blockNumber')} gas_used={receipt.get('gasUsed')}")
        return receipt

    async def ensure_allowance(
        self,
        token: str,
        spender: str,
        min_amount: int,
        reset_then_max: bool = False,
    ) -> str | None:
        """Approve ``spender`` for the max amount when the current allowance is below ``min_amount``.

        Returns the last approval tx hash, or ``None`` when no approval was needed.
        Does not wait for confirmation. ``reset_then_max`` approves zero first for
        tokens that refuse changing a non-zero allowance.
        """
        token_contract = self.w3.eth.contract(address=normalize_address(token), abi=ERC20_ABI)
        spender = normalize_address(spender)
        allowance = int(await token_contract.functions.allowance(self.address, spender).call())
        if allowance >= int(min_amount):
            return None

        last_hash = None
        amounts = [0, MAX_UINT256] if reset_then_max and allowance > 0 else [MAX_UINT256]
        for amount in amounts:
            data = encode_call(ERC20_ABI, "approve", [spender, amount])
            tx = await self.build_transaction(to=token_contract.address, data=data)
            sim = await self.simulate(tx)
            if not sim.ok:
                raise LeverageClientError(f"Approval simulation failed: {sim.result}")
            last_hash = await self.submit(tx)
            log.info(f"Broadcasted ERC20 approval tx hash={last_hash} token={token} spender={spender} amount={amount}")
        return last_hash
