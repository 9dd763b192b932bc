"""Transaction simulation helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from leverage_core.clients.leverage.rpc import RPCError


@dataclass(frozen=True)
class SimulationResult:
    ok: bool
    result: Any


async def simulate_transaction(rpc, tx: dict[str, Any]) -> SimulationResult:
    """Run ``tx`` through ``eth_call``; a revert yields ``ok=False`` with the reason."""
    try:
        result = await rpc.simulate(tx)
        return SimulationResult(ok=True, result=result)
    except RPCError as exc:
        return SimulationResult(ok=False, result=str(exc))
