"""
Model exports.

Renders a ModelResult as CSV (annual table plus cash flows), a plain-text math
reference, and a plain-text IC tear sheet. Undefined values render as "—".
"""

import csv
import io
import logging
import math
from datetime import datetime
from typing import List, Optional

from deal_underwriter.calculations.model import ModelResult

logger = logging.getLogger(__name__)

MISSING = "—"

CSV_HEADER = [
    "Year",
    "RentRevenue",
    "OtherIncome",
    "TotalRevenue",
    "Recoveries",
    "VacancyLoss",
    "EGI",
    "OpEx",
    "NOI",
    "CapEx",
    "UnleveredCF",
    "LeveredCF",
]

FORMULAS = [
    "Rent_t = Rent_1 × (1 + g_rent)^(t-1)",
    "Other_t = Other_1 × (1 + g_other)^(t-1)",
    "Revenue_t = Rent_t + Other_t",
    "VacancyLoss_t = - (Revenue_t + Recoveries_t) × VacancyRate",
    "EGI_t = Revenue_t + Recoveries_t + VacancyLoss_t",
    "NOI_t = EGI_t − OpEx_t",
    "UnleveredCF_0 = −(PurchasePrice + DD + ClosingCosts)",
    "UnleveredCF_t = NOI_t − CapEx_t (t=1..N)",
    "ExitPrice = NOI_(N+1) / ExitCapRate",
    "SaleNet = ExitPrice − (ExitPrice × CostOfSalePct)",
    "LeveredCF_0 = UnleveredCF_0 + LoanProceeds",
    "DebtService = PMT(Loan, Rate, Amort) × 12",
    "Payoff = RemainingBalance(Loan, Rate, Amort, N×12)",
    "LeveredCF_N includes SaleNet − Payoff",
    "NPV(rate) = Σ CF_t / (1+rate)^t",
]


def fmt2(value: Optional[float]) -> str:
    return MISSING if value is None else f"{value:,.2f}"


def fmt_pct(value: Optional[float]) -> str:
    return MISSING if value is None else f"{value * 100:,.2f}%"


def usd0(value: Optional[float]) -> str:
    return MISSING if value is None else f"${value:,.0f}"


def _whole(value: float) -> str:
    if not math.isfinite(value):
        return MISSING
    return str(int(math.floor(value + 0.5)))


def export_model_csv(result: ModelResult) -> str:
    """
    Annual table and cash flows as CSV.

    Year 0 carries only the acquisition cash flows. A blank row separates the
    annual table from the exit trailer rows.
    """
    n = result.hold_years
    series = result.series
    flows = result.cash_flows
    metrics = result.metrics

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    writer.writerow(["0"] + [""] * 9 + [_whole(flows.unlevered[0]), _whole(flows.levered[0])])
    for year in range(1, n + 1):
        writer.writerow(
            [
                str(year),
                _whole(series.rent_revenue[year]),
                _whole(series.other_income[year]),
                _whole(series.total_revenue[year]),
                _whole(series.recoveries[year]),
                _whole(series.vacancy_loss[year]),
                _whole(series.effective_gross_income[year]),
                _whole(series.operating_expenses[year]),
                _whole(series.noi[year]),
                _whole(series.capex[year]),
                _whole(flows.unlevered[year]),
                _whole(flows.levered[year]),
            ]
        )

    writer.writerow([])
    for label, value in (
        ("ExitNOI_(N+1)", metrics.exit_noi),
        ("ExitPrice", metrics.sale_price),
        ("SaleCosts", metrics.sale_costs),
        ("Payoff", metrics.loan_payoff),
        ("NetSaleBeforeDebt", metrics.net_sale_proceeds),
    ):
        writer.writerow([label, MISSING if value is None else _whole(value)])

    return buffer.getvalue()


def export_math_reference(result: ModelResult, generated_at: Optional[datetime] = None) -> str:
    """Formulas, an assumption snapshot, outputs and the raw cash flow arrays."""
    inputs = result.inputs
    metrics = result.metrics
    generated_at = generated_at or datetime.now()

    lines: List[str] = [
        "Deal Underwriter — Math Reference",
        f"Generated: {generated_at.isoformat(timespec='seconds')}",
        "",
        "Key Formulas",
    ]
    lines += [f"{i}) {formula}" for i, formula in enumerate(FORMULAS, start=1)]
    lines += [
        "",
        "Assumptions (snapshot)",
        f"PP {usd0(inputs.purchase_price)} | Hold {inputs.hold_years}y"
        f" | g_rent {fmt_pct(inputs.rent_growth)} | g_other {fmt_pct(inputs.other_income_growth)}"
        f" | Vac {fmt_pct(inputs.vacancy_rate)} | ExitCap {fmt_pct(inputs.exit_cap_rate)}",
        f"LTV {fmt_pct(inputs.ltv)} | Rate {fmt_pct(inputs.interest_rate)}"
        f" | Amort {inputs.amortization_years}y | Disc {fmt_pct(inputs.discount_rate)}"
        f" | SaleCost {fmt_pct(inputs.cost_of_sale_rate)}",
        "",
        "Outputs",
        f"Levered IRR: {fmt_pct(metrics.levered_irr)}   Levered NPV: {usd0(metrics.levered_npv)}"
        f"   Exit Price: {usd0(metrics.sale_price)}   Payoff: {usd0(metrics.loan_payoff)}",
        f"Unlevered IRR: {fmt_pct(metrics.unlevered_irr)}   Unlevered NPV: {usd0(metrics.unlevered_npv)}"
        f"   DSCR(Y1): {fmt2(metrics.dscr)}   CoC(Y1): {fmt_pct(metrics.cash_on_cash)}",
        "",
        "Cash Flows",
        "Unlevered CF: [" + ", ".join(_whole(cf) for cf in result.cash_flows.unlevered) + "]",
        "Levered CF:   [" + ", ".join(_whole(cf) for cf in result.cash_flows.levered) + "]",
    ]
    return "\n".join(lines) + "\n"


def _table(head: List[str], body: List[List[str]]) -> List[str]:
    widths = [max(len(row[i]) for row in [head] + body) for i in range(len(head))]

    def render(row: List[str]) -> str:
        return " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row))

    rule = "-+-".join("-" * width for width in widths)
    return [render(head), rule] + [render(row) for row in body]


def export_tear_sheet(result: ModelResult, generated_at: Optional[datetime] = None) -> str:
    """Assumption, return and annual summary tables (years 1..min(N, 10))."""
    inputs = result.inputs
    metrics = result.metrics
    series = result.series
    flows = result.cash_flows
    generated_at = generated_at or datetime.now()

    assumptions = [
        ["Acquisition", "Purchase Price", usd0(inputs.purchase_price)],
        ["Acquisition", "Due Diligence", usd0(inputs.due_diligence_cost)],
        ["Acquisition", "Closing Cost %", fmt_pct(inputs.closing_cost_rate)],
        ["Timing", "Hold Period (Years)", str(inputs.hold_years)],
        ["Revenue", "Rent Growth", fmt_pct(inputs.rent_growth)],
        ["Revenue", "Other Income Growth", fmt_pct(inputs.other_income_growth)],
        ["Revenue", "Vacancy / Credit Loss", fmt_pct(inputs.vacancy_rate)],
        ["Exit", "Exit Cap Rate", fmt_pct(inputs.exit_cap_rate)],
        ["Exit", "Cost of Sale %", fmt_pct(inputs.cost_of_sale_rate)],
        ["Debt", "LTV", fmt_pct(inputs.ltv)],
        ["Debt", "Interest Rate", fmt_pct(inputs.interest_rate)],
        ["Debt", "Amort (Years)", str(inputs.amortization_years)],
        ["Returns", "Discount Rate (NPV)", fmt_pct(inputs.discount_rate)],
    ]
    returns = [
        ["Go-in Cap Rate", fmt_pct(metrics.cap_rate)],
        ["DSCR (Y1)", fmt2(metrics.dscr)],
        ["Cash-on-Cash (Y1)", fmt_pct(metrics.cash_on_cash)],
        ["Levered IRR", fmt_pct(metrics.levered_irr)],
        ["Levered NPV", usd0(metrics.levered_npv)],
        ["Exit Price", usd0(metrics.sale_price)],
        ["Payoff", usd0(metrics.loan_payoff)],
    ]
    annual = [
        [
            str(year),
            usd0(series.total_revenue[year]),
            usd0(series.operating_expenses[year]),
            usd0(series.noi[year]),
            usd0(series.capex[year]),
            usd0(flows.unlevered[year]),
            usd0(flows.levered[year]),
        ]
        for year in range(1, min(result.hold_years, 10) + 1)
    ]

    lines = [
        "Deal Underwriter — IC Tear Sheet",
        f"Generated: {generated_at.isoformat(timespec='seconds')}",
        f"Verdict: {result.recommendation.headline}",
        "",
    ]
    lines += _table(["Category", "Assumption", "Value"], assumptions)
    lines.append("")
    lines += _table(["Return", "Value"], returns)
    lines.append("")
    lines += _table(["Year", "Revenue", "OpEx", "NOI", "CapEx", "Unlev CF", "Lev CF"], annual)

    logger.debug(f"Rendered tear sheet for {result.hold_years}-year hold")
    return "\n".join(lines) + "\n"
