"""
Tornado Analysis

Moves one assumption at a time to a low and a high case, re-runs the model,
and ranks assumptions by how far they swing the tracked metric.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from deal_underwriter.calculations.inputs import ModelInputs, with_overrides
from deal_underwriter.calculations.model import Metric, metric_value, run_model
from deal_underwriter.calculations.sensitivity import MIN_SWEPT_EXIT_CAP

logger = logging.getLogger(__name__)

MIN_SWING = 0.000001


@dataclass(frozen=True)
class Driver:
    """An assumption and how to build its low and high cases."""

    name: str
    low: Callable[[ModelInputs], Dict[str, float]]
    high: Callable[[ModelInputs], Dict[str, float]]


DRIVERS: List[Driver] = [
    Driver(
        "Purchase Price",
        low=lambda i: {"purchase_price": i.purchase_price * 0.95},
        high=lambda i: {"purchase_price": i.purchase_price * 1.05},
    ),
    Driver(
        "Exit Cap Rate",
        low=lambda i: {"exit_cap_rate": max(MIN_SWEPT_EXIT_CAP, i.exit_cap_rate - 0.005)},
        high=lambda i: {"exit_cap_rate": i.exit_cap_rate + 0.005},
    ),
    Driver(
        "Rent Growth",
        low=lambda i: {"rent_growth": i.rent_growth - 0.01},
        high=lambda i: {"rent_growth": i.rent_growth + 0.01},
    ),
    Driver(
        "Other Income Growth",
        low=lambda i: {"other_income_growth": i.other_income_growth - 0.01},
        high=lambda i: {"other_income_growth": i.other_income_growth + 0.01},
    ),
    Driver(
        "Vacancy Rate",
        low=lambda i: {"vacancy_rate": max(0.0, i.vacancy_rate - 0.01)},
        high=lambda i: {"vacancy_rate": i.vacancy_rate + 0.01},
    ),
    Driver(
        "Interest Rate",
        low=lambda i: {"interest_rate": max(0.0, i.interest_rate - 0.01)},
        high=lambda i: {"interest_rate": i.interest_rate + 0.01},
    ),
    Driver(
        "OpEx (Pct of Rev)",
        low=lambda i: {"opex_pct_of_revenue": max(0.0, i.opex_pct_of_revenue - 0.03)},
        high=lambda i: {"opex_pct_of_revenue": i.opex_pct_of_revenue + 0.03},
    ),
]


@dataclass(frozen=True)
class TornadoRow:
    name: str
    low_value: Optional[float]
    high_value: Optional[float]
    delta_low: Optional[float]
    delta_high: Optional[float]
    swing: float


@dataclass(frozen=True)
class TornadoResult:
    metric: Metric
    base_value: Optional[float]
    rows: List[TornadoRow]
    max_swing: float


def _delta(value: Optional[float], base: Optional[float]) -> Optional[float]:
    if value is None or base is None:
        return None
    return value - base


def build_tornado(inputs: ModelInputs, metric: Metric = Metric.levered_irr) -> TornadoResult:
    """
    Rank drivers by their impact on a metric.

    Swing is the larger absolute delta from base; it is 0 when either case
    leaves the metric undefined. Rows are sorted by swing, largest first.
    """
    base_value = metric_value(run_model(inputs), metric)

    rows = []
    for driver in DRIVERS:
        low_value = metric_value(run_model(with_overrides(inputs, **driver.low(inputs))), metric)
        high_value = metric_value(run_model(with_overrides(inputs, **driver.high(inputs))), metric)

        delta_low = _delta(low_value, base_value)
        delta_high = _delta(high_value, base_value)

        if delta_low is None or delta_high is None:
            swing = 0.0
        else:
            swing = max(abs(delta_low), abs(delta_high))

        rows.append(
            TornadoRow(
                name=driver.name,
                low_value=low_value,
                high_value=high_value,
                delta_low=delta_low,
                delta_high=delta_high,
                swing=swing,
            )
        )

    rows.sort(key=lambda row: row.swing, reverse=True)
    max_swing = max([MIN_SWING] + [row.swing for row in rows])

    logger.debug(f"Tornado for {metric.value}: top driver {rows[0].name!r}")

    return TornadoResult(metric=metric, base_value=base_value, rows=rows, max_swing=max_swing)
