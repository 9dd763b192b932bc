"""Slippage utilities. Integer arithmetic only."""

from __future__ import annotations

from leverage_core.clients.errors import VenueError

BPS_DENOMINATOR = 10_000


class SlippageError(ValueError):
    """Raised when invalid slippage values are supplied."""


def validate_slippage_bps(slippage_bps: int) -> int:
    if isinstance(slippage_bps, bool) or not isinstance(slippage_bps, int):
        raise SlippageError(f"slippage_bps must be an integer, got {slippage_bps!r}")
    if slippage_bps < 0 or slippage_bps > BPS_DENOMINATOR:
        raise SlippageError("slippage_bps must be in [0, 10000]")
    return slippage_bps


def apply_slippage_floor(amount: int, slippage_bps: int) -> int:
    """Return minimum acceptable amount using basis-points slippage."""
    if amount < 0:
        raise SlippageError("amount must be non-negative")
    validate_slippage_bps(slippage_bps)
    return amount * (BPS_DENOMINATOR - slippage_bps) // BPS_DENOMINATOR


def apply_slippage_ceiling(amount: int, slippage_bps: int) -> int:
    """Return maximum acceptable amount using basis-points slippage, rounded up."""
    if amount < 0:
        raise SlippageError("amount must be non-negative")
    validate_slippage_bps(slippage_bps)
    return mul_div_ceil(amount, BPS_DENOMINATOR + slippage_bps, BPS_DENOMINATOR)


def mul_div_floor(a: int, b: int, d: int) -> int:
    if d == 0:
        raise ZeroDivisionError("Division by zero in mul_div_floor")
    return (a * b) // d


def mul_div_ceil(a: int, b: int, d: int) -> int:
    if d == 0:
        raise ZeroDivisionError("Division by zero in mul_div_ceil")
    numerator = a * b
    return 0 if numerator == 0 else (numerator + d - 1) // d


def exact_out_max_in(expected_in: int, slippage_bps: int, cap: int | None = None, venue: str | None = None) -> int:
    """Spending bound for an exact-out swap, never above a caller-supplied ``cap``."""
    if cap is not None and expected_in > cap:
        raise VenueError(f"Quoted input {expected_in} exceeds maximum input {cap}", venue=venue)
    bound = apply_slippage_ceiling(expected_in, slippage_bps)
    return bound if cap is None else min(bound, cap)


def bps_to_decimal_string(bps: int) -> str:
    """50 -> "0.005". Exact decimal rendering without float rounding."""
    validate_slippage_bps(bps)
    whole, frac = divmod(bps, BPS_DENOMINATOR)
    if frac == 0:
        return str(whole)
    return f"{whole}.{frac:04d}".rstrip("0")
