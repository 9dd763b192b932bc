"""On-chain leverage protocol clients."""

from leverage_core.clients.leverage.client import LeverageClient, LeverageClientError
from leverage_core.clients.leverage.gas import GasManager, GasQuote
from leverage_core.clients.leverage.manager import LeverageManagerReader
from leverage_core.clients.leverage.router import LeverageRouter
from leverage_core.clients.leverage.rpc import RPC, RPCError, RPCNetworkInfo, SimulationError
from leverage_core.clients.leverage.simulation import SimulationResult, simulate_transaction

__all__ = [
    "GasManager",
    "GasQuote",
    "LeverageClient",
    "LeverageClientError",
    "LeverageManagerReader",
    "LeverageRouter",
    "RPC",
    "RPCError",
    "RPCNetworkInfo",
    "SimulationError",
    "SimulationResult",
    "simulate_transaction",
]
