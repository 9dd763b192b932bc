"""RPC helpers for leverage router reads and writes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from web3 import AsyncHTTPProvider, AsyncWeb3


class RPCError(Exception):
    """Raised when RPC interactions fail."""


class SimulationError(RPCError):
    """Raised when a transaction reverts in ``eth_call`` simulation."""

    def __init__(self, message: str, tx: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.tx = tx


@dataclass(frozen=True)
class RPCNetworkInfo:
    chain_id: int
    block_number: int


class RPC:
    """Thin wrapper around an async web3 provider with normalized error handling."""

    def __init__(self, url: str | None = None, w3: AsyncWeb3 | None = None) -> None:
        if w3 is None and not url:
            raise RPCError("RPC requires a url or a web3 instance")
        self.url = url
        self.w3 = w3 or AsyncWeb3(AsyncHTTPProvider(url))

    async def ensure_connected(self) -> None:
        if not await self.w3.is_connected():
            raise RPCError(f"RPC connection failed for url={self.url}")

    async def chain_id(self) -> int:
        return int(await self.w3.eth.chain_id)

    async def network_info(self) -> RPCNetworkInfo:
        return RPCNetworkInfo(
            chain_id=int(await self.w3.eth.chain_id),
            block_number=int(await self.w3.eth.block_number),
        )

    async def nonce(self, address: str) -> int:
        try:
            return int(await self.w3.eth.get_transaction_count(address, "pending"))
        except Exception as exc:
            raise RPCError(f"Failed to fetch nonce for {address}: {exc}") from exc

    async def estimate_gas(self, tx: dict[str, Any]) -> int:
        try:
            return int(await self.w3.eth.estimate_gas(tx))
        except Exception as exc:
            raise RPCError(f"Gas estimation failed: {exc}") from exc

    async def simulate(self, tx: dict[str, Any]) -> bytes:
        try:
            return await self.w3.eth.call(tx)
        except Exception as exc:
            raise RPCError(f"Simulation failed: {exc}") from exc

    async def send_raw(self, raw_tx: bytes):
        try:
            return await self.w3.eth.send_raw_transaction(raw_tx)
        except Exception as exc:
            raise RPCError(f"Failed to send raw transaction: {exc}") from exc

    async def wait_for_receipt(self, tx_hash, timeout: float = 120.0, poll_latency: float = 1.0):
        try:
            return await self.w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=timeout,
                poll_latency=poll_latency,
            )
        except Exception as exc:
            raise RPCError(f"Failed waiting for receipt of {tx_hash}: {exc}") from exc
