"""
Cash Flow Calculations

Generates annual operating projections and the unlevered and levered cash flow
vectors for an acquisition, including the terminal sale.

Year series are indexed 1..N+1 (index 0 is unused); year N+1 exists only so the
exit can be priced on forward NOI. Cash flow vectors are indexed 0..N.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from deal_underwriter.calculations.amortization import (
    calculate_annual_debt_service,
    calculate_remaining_balance,
)
from deal_underwriter.calculations.inputs import (
    CapexMode,
    ModelInputs,
    OpexMode,
    RecoveryMode,
)


@dataclass(frozen=True)
class YearSeries:
    """Per-year operating lines, indexed by year (index 0 unused)."""

    rent_revenue: List[float]
    other_income: List[float]
    total_revenue: List[float]
    recoveries: List[float]
    vacancy_loss: List[float]  # Signed negative
    effective_gross_income: List[float]
    operating_expenses: List[float]
    noi: List[float]
    capex: List[float]

    @property
    def hold_years(self) -> int:
        return len(self.noi) - 2


@dataclass(frozen=True)
class SaleTerms:
    """Terminal sale priced on forward (year N+1) NOI."""

    exit_noi: float
    sale_price: float
    sale_costs: float
    net_sale_proceeds: float


@dataclass(frozen=True)
class DebtTerms:
    loan_proceeds: float
    annual_debt_service: float
    payoff: float  # Balance outstanding at exit


@dataclass(frozen=True)
class CashFlowSet:
    """Unlevered and levered cash flows, index 0 = acquisition."""

    unlevered: List[float]
    levered: List[float]


def growth_factor(rate: float, year: int) -> float:
    """Compounding factor for year (1-indexed); year 1 is the base."""
    try:
        return (1 + rate) ** (year - 1)
    except OverflowError:
        return float("inf")


# === OPERATING EXPENSE MODELS ===
# (inputs, total revenue, expense growth factor) -> base opex


def _opex_percent_of_revenue(inputs: ModelInputs, revenue: float, factor: float) -> float:
    return inputs.opex_pct_of_revenue * revenue


def _opex_line_items(inputs: ModelInputs, revenue: float, factor: float) -> float:
    return inputs.opex_line_items * factor


def _opex_per_unit(inputs: ModelInputs, revenue: float, factor: float) -> float:
    return inputs.opex_per_unit * inputs.unit_count * factor


def _opex_hybrid(inputs: ModelInputs, revenue: float, factor: float) -> float:
    return _opex_line_items(inputs, revenue, factor) + _opex_per_unit(inputs, revenue, factor)


OPEX_MODELS: Dict[OpexMode, Callable[[ModelInputs, float, float], float]] = {
    OpexMode.percent_of_revenue: _opex_percent_of_revenue,
    OpexMode.line_items: _opex_line_items,
    OpexMode.per_unit: _opex_per_unit,
    OpexMode.hybrid: _opex_hybrid,
}


# === RECOVERY MODELS ===
# (inputs, total opex, rent growth factor) -> recoveries


def _recovery_none(inputs: ModelInputs, opex: float, factor: float) -> float:
    return 0.0


def _recovery_percent_of_opex(inputs: ModelInputs, opex: float, factor: float) -> float:
    return inputs.recovery_pct_of_opex * opex


def _recovery_flat_annual(inputs: ModelInputs, opex: float, factor: float) -> float:
    return inputs.recovery_flat_annual * factor


RECOVERY_MODELS: Dict[RecoveryMode, Callable[[ModelInputs, float, float], float]] = {
    RecoveryMode.none: _recovery_none,
    RecoveryMode.percent_of_opex: _recovery_percent_of_opex,
    RecoveryMode.flat_annual: _recovery_flat_annual,
}


# === CAPEX MODELS ===
# (inputs, capex growth factor) -> capex


def _capex_per_square_foot(inputs: ModelInputs, factor: float) -> float:
    return inputs.capex_per_square_foot * inputs.square_footage * factor


def _capex_per_unit(inputs: ModelInputs, factor: float) -> float:
    return inputs.capex_per_unit * inputs.unit_count * factor


CAPEX_MODELS: Dict[CapexMode, Callable[[ModelInputs, float], float]] = {
    CapexMode.per_square_foot: _capex_per_square_foot,
    CapexMode.per_unit: _capex_per_unit,
}


def project_years(inputs: ModelInputs) -> YearSeries:
    """
    Project revenue, expenses, NOI and capex for years 1..N+1.

    Args:
        inputs: Sanitized model inputs

    Returns:
        YearSeries with N+2 entries per line (index 0 is zero)
    """
    n = inputs.hold_years
    size = n + 2

    rent = [0.0] * size
    other = [0.0] * size
    revenue = [0.0] * size
    recoveries = [0.0] * size
    vacancy_loss = [0.0] * size
    egi = [0.0] * size
    opex = [0.0] * size
    noi = [0.0] * size
    capex = [0.0] * size

    # Variant dispatch happens once, outside the year loop
    opex_model = OPEX_MODELS[inputs.opex_mode]
    recovery_model = RECOVERY_MODELS[inputs.recovery_mode]
    capex_model = CAPEX_MODELS[inputs.capex_mode]

    base_rent = inputs.base_rent
    base_other = inputs.other_income
    units = inputs.unit_count

    for year in range(1, n + 2):
        rent_factor = growth_factor(inputs.rent_growth, year)
        expense_factor = growth_factor(inputs.expense_growth, year)

        # === REVENUE ===
        rent[year] = base_rent * rent_factor
        other[year] = base_other * growth_factor(inputs.other_income_growth, year)
        revenue[year] = rent[year] + other[year]

        # === EXPENSES ===
        base_opex = opex_model(inputs, revenue[year], expense_factor)
        management_fee = inputs.management_fee_rate * revenue[year]
        reserves = inputs.reserves_per_unit * units * expense_factor
        opex[year] = max(0.0, base_opex + management_fee + reserves)

        # === RECOVERIES & VACANCY ===
        recoveries[year] = recovery_model(inputs, opex[year], rent_factor)
        vacancy_loss[year] = -(revenue[year] + recoveries[year]) * inputs.vacancy_rate
        egi[year] = revenue[year] + recoveries[year] + vacancy_loss[year]

        # === NOI ===
        noi[year] = egi[year] - opex[year]

        # === CAPEX ===
        capex[year] = capex_model(inputs, growth_factor(inputs.capex_growth, year))

    return YearSeries(
        rent_revenue=rent,
        other_income=other,
        total_revenue=revenue,
        recoveries=recoveries,
        vacancy_loss=vacancy_loss,
        effective_gross_income=egi,
        operating_expenses=opex,
        noi=noi,
        capex=capex,
    )


def calculate_sale(inputs: ModelInputs, series: YearSeries) -> SaleTerms:
    """Price the exit at forward NOI over the exit cap rate."""
    exit_noi = series.noi[inputs.hold_years + 1]
    sale_price = exit_noi / inputs.exit_cap_rate
    sale_costs = sale_price * inputs.cost_of_sale_rate
    return SaleTerms(
        exit_noi=exit_noi,
        sale_price=sale_price,
        sale_costs=sale_costs,
        net_sale_proceeds=sale_price - sale_costs,
    )


def calculate_debt(inputs: ModelInputs) -> DebtTerms:
    """
    Size the acquisition loan.

    The exit payoff is the closed-form balance after 12 x N monthly payments;
    the same figure is reported and netted against the sale.
    """
    loan = inputs.loan_amount
    return DebtTerms(
        loan_proceeds=loan,
        annual_debt_service=calculate_annual_debt_service(
            loan, inputs.interest_rate, inputs.amortization_years
        ),
        payoff=calculate_remaining_balance(
            loan, inputs.interest_rate, inputs.amortization_years, inputs.hold_years * 12
        ),
    )


def build_cash_flows(
    inputs: ModelInputs, series: YearSeries
) -> Tuple[CashFlowSet, SaleTerms, DebtTerms]:
    """
    Build unlevered and levered cash flow vectors for periods 0..N.

    Args:
        inputs: Sanitized model inputs
        series: Year series from project_years

    Returns:
        (cash flows, sale terms, debt terms)
    """
    n = inputs.hold_years
    sale = calculate_sale(inputs, series)
    debt = calculate_debt(inputs)

    unlevered = [0.0] * (n + 1)
    levered = [0.0] * (n + 1)

    # === ACQUISITION ===
    unlevered[0] = -inputs.acquisition_cost
    levered[0] = unlevered[0] + debt.loan_proceeds

    # === OPERATIONS ===
    for year in range(1, n + 1):
        unlevered[year] = series.noi[year] - series.capex[year]
        levered[year] = unlevered[year] - debt.annual_debt_service

    # === EXIT ===
    unlevered[n] += sale.net_sale_proceeds
    levered[n] += sale.net_sale_proceeds - debt.payoff

    return CashFlowSet(unlevered=unlevered, levered=levered), sale, debt
