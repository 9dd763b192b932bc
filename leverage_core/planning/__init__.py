"""Mint/redeem planners and the orchestration layer that submits their plans."""

from leverage_core.planning.calls import PlanningError, approve_call, build_swap_calls, weth_withdraw_call
from leverage_core.planning.mint import plan_mint, quote_debt_for_missing_collateral
from leverage_core.planning.orchestrate import OrchestrationResult, orchestrate_mint, orchestrate_redeem
from leverage_core.planning.redeem import plan_redeem, validate_redeem_plan

__all__ = [
    "OrchestrationResult",
    "PlanningError",
    "approve_call",
    "build_swap_calls",
    "orchestrate_mint",
    "orchestrate_redeem",
    "plan_mint",
    "plan_redeem",
    "quote_debt_for_missing_collateral",
    "validate_redeem_plan",
    "weth_withdraw_call",
]
