"""Bind a finished plan to a simulate-then-submit router transaction.

Orchestration never retries and never waits for the receipt; callers await
``client.wait_for_receipt`` themselves and re-read balances afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from leverage_core.clients.leverage.client import LeverageClient, LeverageClientError
from leverage_core.clients.leverage.rpc import SimulationError
from leverage_core.clients.swaps.codec import same_address
from leverage_core.logging import log
from leverage_core.models.plan import MintPlan, RedeemPlan


@dataclass(frozen=True)
class OrchestrationResult:
    tx_hash: str
    plan: MintPlan | RedeemPlan
    explorer_url: str | None = None


def _resolve_executor(client: LeverageClient, multicall_executor: str | None) -> str:
    executor = multicall_executor or client.chain_config.multicall_executor
    if not executor:
        raise LeverageClientError(
            f"No multicall executor configured for chain={client.chain}; pass multicall_executor explicitly"
        )
    return executor


async def _simulate_and_submit(client: LeverageClient, to: str, data: str, label: str) -> str:
    base_tx: dict[str, Any] = {"from": client.address, "to": to, "data": data, "value": 0}
    sim = await client.simulate(base_tx)
    if not sim.ok:
        raise SimulationError(f"{label} simulation reverted: {sim.result}", tx=base_tx)

    tx = await client.build_transaction(to=to, data=data)
    tx_hash = await client.submit(tx)
    log.info(f"{label} submitted tx_hash={tx_hash}")
    return tx_hash


async def orchestrate_mint(
    client: LeverageClient,
    plan: MintPlan,
    multicall_executor: str | None = None,
) -> OrchestrationResult:
    router = client.require_router()
    executor = _resolve_executor(client, multicall_executor)
    data = router.encode_deposit(
        plan.token,
        plan.equity_in_input_asset,
        plan.flash_loan_amount,
        plan.min_shares,
        executor,
        plan.calls,
    )
    log.info(
        f"Orchestrating mint token={plan.token} equity={plan.equity_in_input_asset} "
        f"flash_loan={plan.flash_loan_amount} min_shares={plan.min_shares} calls={len(plan.calls)}"
    )
    tx_hash = await _simulate_and_submit(client, router.address, data, "Mint")
    return OrchestrationResult(tx_hash=tx_hash, plan=plan, explorer_url=client.get_explorer_tx_url(tx_hash))


async def orchestrate_redeem(
    client: LeverageClient,
    plan: RedeemPlan,
    multicall_executor: str | None = None,
) -> OrchestrationResult:
    """Submit a redeem plan.

    Collateral-payout plans whose repayment leg was quoted on Velora go through
    ``redeemWithVelora`` when the chain has a Velora adapter. Everything else,
    including debt payouts, uses the generic ``redeem`` entrypoint with the
    plan's full call array.
    """
    router = client.require_router()
    velora_adapter = client.chain_config.velora_adapter
    # redeemWithVelora only executes the repayment swap
    collateral_payout = same_address(plan.payout_asset, plan.collateral_asset)
    if plan.velora_data is not None and plan.velora_swap_data and velora_adapter and collateral_payout:
        data = router.encode_redeem_with_velora(
            plan.token,
            plan.shares_to_redeem,
            plan.min_collateral_for_sender,
            velora_adapter,
            plan.velora_data.augustus,
            plan.velora_data.offsets,
            plan.velora_swap_data,
        )
        route = "velora"
    else:
        executor = _resolve_executor(client, multicall_executor)
        data = router.encode_redeem(
            plan.token,
            plan.shares_to_redeem,
            plan.min_collateral_for_sender,
            executor,
            plan.calls,
        )
        route = "multicall"
    log.info(
        f"Orchestrating redeem token={plan.token} route={route} shares={plan.shares_to_redeem} "
        f"min_collateral_for_sender={plan.min_collateral_for_sender} calls={len(plan.calls)}"
    )
    tx_hash = await _simulate_and_submit(client, router.address, data, "Redeem")
    return OrchestrationResult(tx_hash=tx_hash, plan=plan, explorer_url=client.get_explorer_tx_url(tx_hash))
