"""
Underwriting Model

The single pure pipeline: inputs -> projection -> cash flows -> metrics ->
recommendation. Sensitivity and tornado analysis call run_model repeatedly.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from deal_underwriter.calculations.cashflow import (
    CashFlowSet,
    YearSeries,
    build_cash_flows,
    project_years,
)
from deal_underwriter.calculations.inputs import ModelInputs
from deal_underwriter.calculations.metrics import ReturnMetrics, compute_return_metrics
from deal_underwriter.calculations.recommendation import (
    RecommendationResult,
    build_recommendation,
)

logger = logging.getLogger(__name__)


class Metric(str, enum.Enum):
    """Outputs that what-if analysis can track."""

    levered_irr = "levered_irr"
    levered_npv = "levered_npv"
    cash_on_cash = "cash_on_cash"
    dscr = "dscr"
    exit_price = "exit_price"


@dataclass(frozen=True)
class ModelResult:
    inputs: ModelInputs
    series: YearSeries
    cash_flows: CashFlowSet
    metrics: ReturnMetrics
    recommendation: RecommendationResult

    @property
    def hold_years(self) -> int:
        return self.inputs.hold_years


def run_model(inputs: ModelInputs) -> ModelResult:
    """
    Underwrite a deal.

    Args:
        inputs: Sanitized model inputs (see build_model_inputs)

    Returns:
        ModelResult with year series, cash flows, metrics and recommendation
    """
    series = project_years(inputs)
    cash_flows, sale, debt = build_cash_flows(inputs, series)
    metrics = compute_return_metrics(inputs, series, cash_flows, sale, debt)
    recommendation = build_recommendation(
        dscr=metrics.dscr,
        coc=metrics.cash_on_cash,
        levered_irr=metrics.levered_irr,
    )

    logger.debug(
        f"Model run: hold={inputs.hold_years}y price={inputs.purchase_price:,.0f} "
        f"levered_irr={metrics.levered_irr} verdict={recommendation.headline!r}"
    )

    return ModelResult(
        inputs=inputs,
        series=series,
        cash_flows=cash_flows,
        metrics=metrics,
        recommendation=recommendation,
    )


def metric_value(result: ModelResult, metric: Metric) -> Optional[float]:
    """Read one tracked metric from a model result."""
    metrics = result.metrics
    if metric == Metric.levered_irr:
        return metrics.levered_irr
    if metric == Metric.levered_npv:
        return metrics.levered_npv
    if metric == Metric.cash_on_cash:
        return metrics.cash_on_cash
    if metric == Metric.dscr:
        return metrics.dscr
    if metric == Metric.exit_price:
        return metrics.sale_price
    raise ValueError(f"Unknown metric: {metric}")
