"""Leverage protocol read models and planner outputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from leverage_core.models.quote import Call, VeloraData


@dataclass(frozen=True)
class ActionData:
    """Result of a manager/router deposit or redeem preview."""

    collateral: int
    debt: int
    shares: int
    token_fee: int = 0
    treasury_fee: int = 0

    @classmethod
    def from_result(cls, result: Sequence[Any]) -> "ActionData":
        collateral, debt, shares, token_fee, treasury_fee = (int(x) for x in result)
        return cls(
            collateral=collateral,
            debt=debt,
            shares=shares,
            token_fee=token_fee,
            treasury_fee=treasury_fee,
        )


@dataclass(frozen=True)
class LeverageTokenState:
    collateral_in_debt_asset: int
    debt: int
    equity: int
    collateral_ratio: int

    @classmethod
    def from_result(cls, result: Sequence[Any]) -> "LeverageTokenState":
        collateral_in_debt_asset, debt, equity, collateral_ratio = (int(x) for x in result)
        return cls(
            collateral_in_debt_asset=collateral_in_debt_asset,
            debt=debt,
            equity=equity,
            collateral_ratio=collateral_ratio,
        )


@dataclass(frozen=True)
class MintPlan:
    token: str
    input_asset: str
    collateral_asset: str
    debt_asset: str
    equity_in_input_asset: int
    flash_loan_amount: int
    expected_debt: int
    expected_total_collateral: int
    expected_shares: int
    min_shares: int
    expected_excess_debt: int
    slippage_bps: int
    calls: tuple[Call, ...] = field(default_factory=tuple)

    def call_tuples(self) -> list[tuple[str, int, bytes]]:
        return [call.as_tuple() for call in self.calls]


@dataclass(frozen=True)
class RedeemPlan:
    token: str
    shares_to_redeem: int
    collateral_asset: str
    debt_asset: str
    slippage_bps: int
    expected_debt: int
    expected_collateral: int
    expected_total_collateral: int
    expected_excess_collateral: int
    expected_debt_payout: int
    min_collateral_for_sender: int
    payout_asset: str
    payout_amount: int
    max_collateral_for_debt: int = 0
    calls: tuple[Call, ...] = field(default_factory=tuple)
    velora_data: VeloraData | None = None
    velora_swap_data: str | None = None

    def call_tuples(self) -> list[tuple[str, int, bytes]]:
        return [call.as_tuple() for call in self.calls]
