"""
Typed models for chains, quotes and plans.
"""
from leverage_core.models.chain import (
    BASE_WETH,
    ETH_SENTINEL,
    ZERO_ADDRESS,
    ChainConfig,
)
from leverage_core.models.plan import ActionData, LeverageTokenState, MintPlan, RedeemPlan
from leverage_core.models.quote import Call, Quote, QuoteRequest, VeloraData, VeloraOffsets

__all__ = [
    "BASE_WETH",
    "ETH_SENTINEL",
    "ZERO_ADDRESS",
    "ChainConfig",
    "ActionData",
    "LeverageTokenState",
    "MintPlan",
    "RedeemPlan",
    "Call",
    "Quote",
    "QuoteRequest",
    "VeloraData",
    "VeloraOffsets",
]
