"""Redeem planner.

The debt leg is quoted exact-out for the previewed debt, so the flash loan is
repaid exactly whatever the price does; the cost is a bounded amount of
collateral (``max_in``) committed to the swap. What the user is guaranteed to
keep is the released collateral minus that bound.
"""

from __future__ import annotations

from leverage_core.clients.swaps.codec import normalize_address, same_address
from leverage_core.clients.swaps.slippage import BPS_DENOMINATOR, apply_slippage_floor
from leverage_core.clients.swaps.types import QuoteFn
from leverage_core.logging import log
from leverage_core.models.chain import ETH_SENTINEL
from leverage_core.models.plan import RedeemPlan
from leverage_core.models.quote import QuoteRequest
from leverage_core.planning.calls import PlanningError, build_swap_calls


async def plan_redeem(
    manager,
    token: str,
    shares_to_redeem: int,
    slippage_bps: int,
    quote_collateral_to_debt: QuoteFn,
    wrapped_native: str,
    output_asset: str | None = None,
) -> RedeemPlan:
    """Build a redeem plan for ``shares_to_redeem``.

    ``output_asset`` selects the payout: the collateral asset (default) or the
    debt asset, in which case the residual collateral is swapped exact-in to debt.
    """
    if shares_to_redeem <= 0:
        raise PlanningError("shares_to_redeem must be positive")

    collateral_asset = await manager.get_collateral_asset(token)
    debt_asset = await manager.get_debt_asset(token)
    if output_asset and not (same_address(output_asset, collateral_asset) or same_address(output_asset, debt_asset)):
        raise PlanningError(f"Unsupported payout asset {output_asset}; expected collateral or debt asset")
    wants_debt_output = bool(output_asset) and same_address(output_asset, debt_asset)

    preview = await manager.preview_redeem(token, shares_to_redeem)
    total_collateral = preview.collateral
    debt_to_repay = preview.debt

    use_native = same_address(collateral_asset, wrapped_native)
    in_token = ETH_SENTINEL if use_native else collateral_asset

    if debt_to_repay <= 0:
        return await _plan_without_debt(
            token,
            shares_to_redeem,
            collateral_asset,
            debt_asset,
            total_collateral,
            slippage_bps,
            quote_collateral_to_debt,
            in_token,
            use_native,
            wants_debt_output,
        )

    if total_collateral <= 0:
        raise PlanningError("No collateral available to repay debt")

    repay_quote = await quote_collateral_to_debt(
        QuoteRequest(
            in_token=in_token,
            out_token=debt_asset,
            intent="exactOut",
            amount_out=debt_to_repay,
            amount_in=total_collateral,
            slippage_bps=slippage_bps,
        )
    )
    if repay_quote.out < debt_to_repay:
        raise PlanningError(
            f"Repayment quote delivers {repay_quote.out} below debt {debt_to_repay}"
        )
    max_in = repay_quote.max_in
    if max_in <= 0:
        raise PlanningError("Repayment quote returned zero maximum input")
    if max_in > total_collateral:
        raise PlanningError("Insufficient collateral to repay debt")

    calls = build_swap_calls(collateral_asset, repay_quote, max_in, use_native)
    expected_remaining = total_collateral - (repay_quote.amount_in or max_in)
    guaranteed_remaining = total_collateral - max_in

    expected_collateral = expected_remaining
    min_collateral_for_sender = guaranteed_remaining
    expected_debt_payout = 0
    payout_asset = normalize_address(collateral_asset)
    payout_amount = expected_remaining

    if wants_debt_output:
        expected_collateral = 0
        min_collateral_for_sender = 0
        payout_asset = normalize_address(debt_asset)
        payout_amount = 0
        if guaranteed_remaining > 0:
            payout_quote = await quote_collateral_to_debt(
                QuoteRequest(
                    in_token=in_token,
                    out_token=debt_asset,
                    intent="exactIn",
                    amount_in=guaranteed_remaining,
                    slippage_bps=slippage_bps,
                )
            )
            calls.extend(build_swap_calls(collateral_asset, payout_quote, guaranteed_remaining, use_native))
            expected_debt_payout = payout_quote.out
            payout_amount = payout_quote.out

    plan = RedeemPlan(
        token=token,
        shares_to_redeem=shares_to_redeem,
        collateral_asset=collateral_asset,
        debt_asset=debt_asset,
        slippage_bps=slippage_bps,
        expected_debt=debt_to_repay,
        expected_collateral=expected_collateral,
        expected_total_collateral=total_collateral,
        expected_excess_collateral=expected_remaining,
        expected_debt_payout=expected_debt_payout,
        min_collateral_for_sender=min_collateral_for_sender,
        payout_asset=payout_asset,
        payout_amount=payout_amount,
        max_collateral_for_debt=max_in,
        calls=tuple(calls),
        velora_data=repay_quote.velora_data,
        velora_swap_data=repay_quote.calldata if repay_quote.velora_data else None,
    )
    log.info(
        f"Built redeem plan token={token} venue={repay_quote.venue} shares={shares_to_redeem} "
        f"debt={debt_to_repay} max_collateral_for_debt={max_in} "
        f"min_collateral_for_sender={min_collateral_for_sender} payout_asset={payout_asset} "
        f"payout_amount={payout_amount} calls={len(plan.calls)}"
    )
    return plan


async def _plan_without_debt(
    token: str,
    shares_to_redeem: int,
    collateral_asset: str,
    debt_asset: str,
    total_collateral: int,
    slippage_bps: int,
    quote_collateral_to_debt: QuoteFn,
    in_token: str,
    use_native: bool,
    wants_debt_output: bool,
) -> RedeemPlan:
    """Nothing to repay: hand back the collateral, or swap all of it to debt."""
    calls = []
    expected_collateral = total_collateral
    min_collateral_for_sender = apply_slippage_floor(total_collateral, slippage_bps)
    expected_debt_payout = 0
    payout_asset = normalize_address(collateral_asset)
    payout_amount = total_collateral

    if wants_debt_output:
        expected_collateral = 0
        min_collateral_for_sender = 0
        payout_asset = normalize_address(debt_asset)
        payout_amount = 0
        if total_collateral > 0:
            payout_quote = await quote_collateral_to_debt(
                QuoteRequest(
                    in_token=in_token,
                    out_token=debt_asset,
                    intent="exactIn",
                    amount_in=total_collateral,
                    slippage_bps=slippage_bps,
                )
            )
            calls = build_swap_calls(collateral_asset, payout_quote, total_collateral, use_native)
            expected_debt_payout = payout_quote.out
            payout_amount = payout_quote.out

    plan = RedeemPlan(
        token=token,
        shares_to_redeem=shares_to_redeem,
        collateral_asset=collateral_asset,
        debt_asset=debt_asset,
        slippage_bps=slippage_bps,
        expected_debt=0,
        expected_collateral=expected_collateral,
        expected_total_collateral=total_collateral,
        expected_excess_collateral=total_collateral,
        expected_debt_payout=expected_debt_payout,
        min_collateral_for_sender=min_collateral_for_sender,
        payout_asset=payout_asset,
        payout_amount=payout_amount,
        calls=tuple(calls),
    )
    log.info(
        f"Built redeem plan token={token} shares={shares_to_redeem} debt=0 "
        f"payout_asset={payout_asset} payout_amount={payout_amount} calls={len(plan.calls)}"
    )
    return plan


def validate_redeem_plan(plan: RedeemPlan) -> bool:
    """Sanity checks before a plan is handed to orchestration."""
    if plan.shares_to_redeem <= 0:
        return False
    if plan.expected_collateral < 0 or plan.min_collateral_for_sender < 0:
        return False
    if plan.expected_debt_payout < 0 or plan.payout_amount < 0:
        return False
    if plan.slippage_bps < 0 or plan.slippage_bps > BPS_DENOMINATOR:
        return False
    if plan.min_collateral_for_sender > plan.expected_collateral:
        return False
    if plan.expected_debt > 0 and not plan.calls:
        return False
    return True
