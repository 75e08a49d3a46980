"""
IRR and NPV Calculations

NPV discounting and a bracketed bisection IRR solver. Results that cannot be
computed are returned as None rather than NaN or infinity.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 140
TOLERANCE = 1e-7
LOWER_BOUND = -0.9999
UPPER_BOUND = 5.0
MAX_BRACKET_EXPANSIONS = 20


def _npv_value(cash_flows: np.ndarray, rate: float) -> float:
    """Raw NPV; may be inf or nan at extreme rates."""
    periods = np.arange(len(cash_flows), dtype=float)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore", under="ignore"):
        return float(np.sum(cash_flows / np.power(1.0 + rate, periods)))


def _as_finite_array(cash_flows: Sequence[float]) -> Optional[np.ndarray]:
    try:
        values = np.asarray(cash_flows, dtype=float)
    except (TypeError, ValueError):
        return None
    if values.ndim != 1 or not np.all(np.isfinite(values)):
        return None
    return values


def calculate_npv(cash_flows: Sequence[float], discount_rate: float) -> Optional[float]:
    """
    Calculate NPV (Net Present Value) of cash flows.

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow)
        discount_rate: Annual discount rate (e.g., 0.10 for 10%)

    Returns:
        NPV value, or None if the rate or any cash flow is not finite
    """
    if discount_rate is None or not np.isfinite(discount_rate):
        return None
    values = _as_finite_array(cash_flows)
    if values is None:
        return None
    npv = _npv_value(values, float(discount_rate))
    if not np.isfinite(npv):
        return None
    return npv


def calculate_irr(cash_flows: Sequence[float]) -> Optional[float]:
    """
    Calculate IRR (Internal Rate of Return) by bisection.

    The root is bracketed in [-0.9999, 5]. If NPV has the same sign at both
    ends the upper bound is doubled, up to 20 times. Bisection then runs for
    up to 140 iterations or until |NPV| < 1e-7.

    Args:
        cash_flows: Array of periodic cash flows

    Returns:
        IRR as decimal (e.g., 0.15 for 15%), or None when the cash flows have
        no sign change or no bracket can be found
    """
    values = _as_finite_array(cash_flows)
    if values is None:
        return None

    has_positive = bool(np.any(values > 0))
    has_negative = bool(np.any(values < 0))

    if not has_positive or not has_negative:
        return None

    lo = LOWER_BOUND
    hi = UPPER_BOUND
    f_lo = _npv_value(values, lo)
    f_hi = _npv_value(values, hi)

    tries = 0
    while f_lo * f_hi > 0 and tries < MAX_BRACKET_EXPANSIONS:
        hi *= 2
        f_hi = _npv_value(values, hi)
        tries += 1

    if f_lo * f_hi > 0:
        logger.debug(f"IRR not bracketed after {tries} expansions")
        return None

    for _ in range(MAX_ITERATIONS):
        mid = (lo + hi) / 2
        f_mid = _npv_value(values, mid)

        if not np.isfinite(f_mid):
            logger.debug(f"IRR bisection hit non-finite NPV at rate {mid}")
            return None

        if abs(f_mid) < TOLERANCE:
            return mid

        if f_lo * f_mid <= 0:
            hi = mid
        else:
            lo = mid
            f_lo = f_mid

    return (lo + hi) / 2


def calculate_multiple(cash_flows: List[float]) -> Optional[float]:
    """
    Calculate equity multiple.

    Args:
        cash_flows: Array of cash flows (investments are negative)

    Returns:
        Multiple (e.g., 2.0 = 2.0x return), or None without any outflow
    """
    total_inflows = sum(cf for cf in cash_flows if cf > 0)
    total_outflows = abs(sum(cf for cf in cash_flows if cf < 0))

    if total_outflows == 0:
        return None

    return total_inflows / total_outflows


def calculate_profit(cash_flows: List[float]) -> float:
    """Calculate profit (total inflows minus total outflows)."""
    return sum(cash_flows)
