"""
Return Metrics

Going-in yield, coverage and return measures for a projected deal. Every ratio
is guarded: a non-positive denominator yields None instead of a number.
"""

import math
from dataclasses import dataclass
from typing import Optional

from deal_underwriter.calculations import irr
from deal_underwriter.calculations.cashflow import (
    CashFlowSet,
    DebtTerms,
    SaleTerms,
    YearSeries,
)
from deal_underwriter.calculations.inputs import ModelInputs


@dataclass(frozen=True)
class ReturnMetrics:
    """Deal-level outputs. None means undefined for this deal."""

    cap_rate: Optional[float]
    dscr: Optional[float]
    cash_on_cash: Optional[float]
    unlevered_irr: Optional[float]
    levered_irr: Optional[float]
    unlevered_npv: Optional[float]
    levered_npv: Optional[float]
    unlevered_multiple: Optional[float]
    levered_multiple: Optional[float]
    exit_noi: Optional[float]
    sale_price: Optional[float]
    sale_costs: Optional[float]
    net_sale_proceeds: Optional[float]
    loan_proceeds: Optional[float]
    annual_debt_service: Optional[float]
    loan_payoff: Optional[float]
    noi_year_1: Optional[float]
    equity_invested: Optional[float]


def finite_or_none(value: Optional[float]) -> Optional[float]:
    """Pass through finite numbers; anything else becomes None."""
    if value is None or not math.isfinite(value):
        return None
    return value


def _ratio(numerator: float, denominator: float) -> Optional[float]:
    if not math.isfinite(denominator) or denominator <= 0:
        return None
    return finite_or_none(numerator / denominator)


def calculate_cap_rate(noi: float, purchase_price: float) -> Optional[float]:
    """Going-in cap rate = year-1 NOI / purchase price."""
    return _ratio(noi, purchase_price)


def calculate_dscr(noi: float, debt_service: float) -> Optional[float]:
    """
    Calculate Debt Service Coverage Ratio (DSCR).

    Args:
        noi: Net Operating Income for the period
        debt_service: Debt service for the period

    Returns:
        DSCR ratio, or None for an unlevered deal
    """
    return _ratio(noi, debt_service)


def calculate_cash_on_cash(cash_flow: float, equity_invested: float) -> Optional[float]:
    """Cash-on-cash = year-1 levered cash flow / equity invested."""
    return _ratio(cash_flow, equity_invested)


def compute_return_metrics(
    inputs: ModelInputs,
    series: YearSeries,
    cash_flows: CashFlowSet,
    sale: SaleTerms,
    debt: DebtTerms,
) -> ReturnMetrics:
    """Derive all deal metrics from the projection."""
    noi_1 = series.noi[1]
    equity = -cash_flows.levered[0]

    return ReturnMetrics(
        cap_rate=calculate_cap_rate(noi_1, inputs.purchase_price),
        dscr=calculate_dscr(noi_1, debt.annual_debt_service),
        cash_on_cash=calculate_cash_on_cash(cash_flows.levered[1], equity),
        unlevered_irr=irr.calculate_irr(cash_flows.unlevered),
        levered_irr=irr.calculate_irr(cash_flows.levered),
        unlevered_npv=irr.calculate_npv(cash_flows.unlevered, inputs.discount_rate),
        levered_npv=irr.calculate_npv(cash_flows.levered, inputs.discount_rate),
        unlevered_multiple=finite_or_none(irr.calculate_multiple(cash_flows.unlevered)),
        levered_multiple=finite_or_none(irr.calculate_multiple(cash_flows.levered)),
        exit_noi=finite_or_none(sale.exit_noi),
        sale_price=finite_or_none(sale.sale_price),
        sale_costs=finite_or_none(sale.sale_costs),
        net_sale_proceeds=finite_or_none(sale.net_sale_proceeds),
        loan_proceeds=finite_or_none(debt.loan_proceeds),
        annual_debt_service=finite_or_none(debt.annual_debt_service),
        loan_payoff=finite_or_none(debt.payoff),
        noi_year_1=finite_or_none(noi_1),
        equity_invested=finite_or_none(equity),
    )
