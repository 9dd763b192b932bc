"""Mint planner: size the flash loan, quote debt->collateral and assemble executor calls.

Flow:
1. Router preview of the user's collateral gives the ideal total collateral and debt.
2. Exact-in quote of the ideal debt, rescaled once when the output falls short.
3. Manager preview of the resulting total collateral gives required debt and shares.
4. A bounded refinement keeps the borrowed amount at or below the required debt
   and the collateral at or below the target, then shaves one bp if still over.
"""

from __future__ import annotations

from dataclasses import dataclass

from leverage_core.clients.swaps.codec import same_address
from leverage_core.clients.swaps.slippage import BPS_DENOMINATOR, apply_slippage_floor, mul_div_floor
from leverage_core.clients.swaps.types import QuoteFn
from leverage_core.logging import log
from leverage_core.models.chain import ETH_SENTINEL
from leverage_core.models.plan import ActionData, MintPlan
from leverage_core.models.quote import Quote, QuoteRequest
from leverage_core.planning.calls import PlanningError, build_swap_calls

DEFAULT_MAX_ADJUST_PASSES = 3
DEFAULT_MARGIN_BPS = 0


@dataclass
class _DebtSwap:
    debt_in: int
    quote: Quote
    final: ActionData


async def _quote_exact_in(quote_fn: QuoteFn, in_token: str, out_token: str, amount_in: int) -> Quote:
    return await quote_fn(QuoteRequest(in_token=in_token, out_token=out_token, amount_in=amount_in, intent="exactIn"))


async def quote_debt_for_missing_collateral(
    quote_fn: QuoteFn,
    in_token: str,
    out_token: str,
    ideal_debt: int,
    needed_out: int,
) -> tuple[int, Quote]:
    """Quote ``ideal_debt`` exact-in; if the output misses ``needed_out``, scale the input down once."""
    debt_in = ideal_debt
    quote = await _quote_exact_in(quote_fn, in_token, out_token, debt_in)
    if quote.out < needed_out:
        adjusted = mul_div_floor(ideal_debt, quote.out, needed_out)
        if 0 < adjusted < debt_in:
            debt_in = adjusted
            quote = await _quote_exact_in(quote_fn, in_token, out_token, debt_in)
    return debt_in, quote


async def _finalize_debt_quote(
    manager,
    token: str,
    quote_fn: QuoteFn,
    in_token: str,
    collateral_asset: str,
    user_collateral: int,
    target_collateral: int,
    debt_in: int,
    quote: Quote,
    max_passes: int,
    margin_bps: int,
) -> _DebtSwap:
    async def requote(amount: int) -> tuple[Quote, ActionData]:
        new_quote = await _quote_exact_in(quote_fn, in_token, collateral_asset, amount)
        preview = await manager.preview_deposit(token, user_collateral + new_quote.out)
        return new_quote, preview

    final = await manager.preview_deposit(token, user_collateral + quote.out)

    for pass_index in range(max_passes):
        # Reprice guard: never borrow more than the manager requires for the collateral we get.
        max_borrow = final.debt * (BPS_DENOMINATOR - margin_bps) // BPS_DENOMINATOR if final.debt > 0 else 0
        if debt_in > max_borrow:
            debt_in = max_borrow
            if debt_in <= 0:
                log.debug(f"Mint plan converged pass={pass_index} reason=zero-debt-after-clamp")
                break
            quote, final = await requote(debt_in)
            log.debug(
                f"Mint plan clamp pass={pass_index} debt_in={debt_in} out={quote.out} "
                f"required_debt={final.debt} shares={final.shares}"
            )

        # Collateral guard
        total_now = user_collateral + quote.out
        if total_now >= target_collateral:
            log.debug(f"Mint plan converged pass={pass_index} reason=collateral-ok")
            break

        scaled = mul_div_floor(
            debt_in * (BPS_DENOMINATOR - margin_bps),
            total_now,
            max(target_collateral, 1) * BPS_DENOMINATOR,
        )
        if 0 < scaled < debt_in:
            next_debt_in = scaled
        else:
            next_debt_in = debt_in - 1 if debt_in > 0 else 0
        if next_debt_in == debt_in or next_debt_in == 0:
            log.debug(f"Mint plan converged pass={pass_index} reason=no-further-progress")
            break

        debt_in = next_debt_in
        quote, final = await requote(debt_in)
        log.debug(
            f"Mint plan adjust pass={pass_index} debt_in={debt_in} out={quote.out} "
            f"required_debt={final.debt} shares={final.shares}"
        )

    if debt_in > final.debt:
        shaved = final.debt * (BPS_DENOMINATOR - 1) // BPS_DENOMINATOR
        if 0 < shaved < debt_in:
            debt_in = shaved
            quote, final = await requote(debt_in)
            log.debug(
                f"Mint plan shave debt_in={debt_in} out={quote.out} "
                f"required_debt={final.debt} shares={final.shares}"
            )

    return _DebtSwap(debt_in=debt_in, quote=quote, final=final)


async def plan_mint(
    manager,
    router,
    token: str,
    input_asset: str,
    equity_in_input_asset: int,
    slippage_bps: int,
    quote_debt_to_collateral: QuoteFn,
    wrapped_native: str,
    max_passes: int = DEFAULT_MAX_ADJUST_PASSES,
    margin_bps: int = DEFAULT_MARGIN_BPS,
) -> MintPlan:
    """Build a mint plan for ``equity_in_input_asset`` of collateral.

    ``manager`` needs ``get_collateral_asset``, ``get_debt_asset`` and
    ``preview_deposit``; ``router`` needs ``preview_deposit``. Preview reverts
    and quote failures propagate unchanged.
    """
    if equity_in_input_asset <= 0:
        raise PlanningError("equity_in_input_asset must be positive")

    collateral_asset = await manager.get_collateral_asset(token)
    debt_asset = await manager.get_debt_asset(token)
    if not same_address(input_asset, collateral_asset):
        raise PlanningError("Mint requires collateral-only input")
    user_collateral = int(equity_in_input_asset)

    ideal = await router.preview_deposit(token, user_collateral)
    needed_from_debt_swap = ideal.collateral - user_collateral
    log.debug(
        f"Mint plan ideal user_collateral={user_collateral} ideal_debt={ideal.debt} "
        f"target_collateral={ideal.collateral}"
    )
    if needed_from_debt_swap <= 0:
        raise PlanningError("Preview indicates no debt swap needed")
    if ideal.debt <= 0:
        raise PlanningError("Preview returned zero debt for a leveraged deposit")

    use_native = same_address(debt_asset, wrapped_native)
    in_token = ETH_SENTINEL if use_native else debt_asset

    debt_in, quote = await quote_debt_for_missing_collateral(
        quote_debt_to_collateral,
        in_token,
        collateral_asset,
        ideal.debt,
        needed_from_debt_swap,
    )
    refined = await _finalize_debt_quote(
        manager,
        token,
        quote_debt_to_collateral,
        in_token,
        collateral_asset,
        user_collateral,
        ideal.collateral,
        debt_in,
        quote,
        max_passes,
        margin_bps,
    )

    min_shares = apply_slippage_floor(refined.final.shares, slippage_bps)
    if min_shares <= 0:
        raise PlanningError("Mint plan would accept zero shares")

    calls = build_swap_calls(debt_asset, refined.quote, refined.debt_in, use_native)
    excess_debt = max(refined.debt_in - refined.final.debt, 0)

    plan = MintPlan(
        token=token,
        input_asset=input_asset,
        collateral_asset=collateral_asset,
        debt_asset=debt_asset,
        equity_in_input_asset=user_collateral,
        flash_loan_amount=refined.debt_in,
        expected_debt=refined.final.debt,
        expected_total_collateral=user_collateral + refined.quote.out,
        expected_shares=refined.final.shares,
        min_shares=min_shares,
        expected_excess_debt=excess_debt,
        slippage_bps=slippage_bps,
        calls=tuple(calls),
    )
    log.info(
        f"Built mint plan token={token} venue={refined.quote.venue} equity={user_collateral} "
        f"flash_loan={plan.flash_loan_amount} expected_shares={plan.expected_shares} "
        f"min_shares={plan.min_shares} calls={len(plan.calls)} native={use_native}"
    )
    return plan
