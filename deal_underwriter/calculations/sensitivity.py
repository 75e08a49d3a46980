"""
Sensitivity Grid

Sweeps a tracked metric over purchase price x exit cap rate. Each cell is a
full run_model call with only those two inputs changed.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from deal_underwriter.calculations.inputs import ModelInputs, with_overrides
from deal_underwriter.calculations.model import Metric, metric_value, run_model

logger = logging.getLogger(__name__)

PRICE_MULTIPLIERS = [-0.10, -0.05, 0.0, 0.05, 0.10]
EXIT_CAP_DELTAS = [-0.01, -0.005, 0.0, 0.005, 0.01]  # +/- 100 bps
MIN_SWEPT_EXIT_CAP = 0.0001


@dataclass(frozen=True)
class SensitivityGrid:
    """
    Metric values by exit cap (rows) and purchase price (columns).

    grid[i][j] is the metric at exit_cap_rates[i] and purchase_prices[j].
    """

    metric: Metric
    base_value: Optional[float]
    price_multipliers: List[float]
    exit_cap_deltas: List[float]
    purchase_prices: List[float]
    exit_cap_rates: List[float]
    grid: List[List[Optional[float]]]


def shifted_exit_cap(base: float, delta: float) -> float:
    """Apply a cap rate shift, keeping the result above a small floor."""
    if delta == 0:
        return base
    return max(MIN_SWEPT_EXIT_CAP, base + delta)


def build_sensitivity_grid(
    inputs: ModelInputs, metric: Metric = Metric.levered_irr
) -> SensitivityGrid:
    """
    Build the 5x5 purchase price / exit cap sensitivity grid.

    The zero-shift cell reuses the base inputs unchanged, so it always equals
    the base case value.
    """
    base_value = metric_value(run_model(inputs), metric)

    prices = [inputs.purchase_price * (1 + m) for m in PRICE_MULTIPLIERS]
    caps = [shifted_exit_cap(inputs.exit_cap_rate, d) for d in EXIT_CAP_DELTAS]

    grid = []
    for cap in caps:
        row = []
        for price in prices:
            scenario = with_overrides(inputs, purchase_price=price, exit_cap_rate=cap)
            row.append(metric_value(run_model(scenario), metric))
        grid.append(row)

    logger.debug(f"Sensitivity grid for {metric.value}: {len(caps)}x{len(prices)} cells")

    return SensitivityGrid(
        metric=metric,
        base_value=base_value,
        price_multipliers=list(PRICE_MULTIPLIERS),
        exit_cap_deltas=list(EXIT_CAP_DELTAS),
        purchase_prices=prices,
        exit_cap_rates=caps,
        grid=grid,
    )
