"""
Model Inputs

Immutable underwriting inputs and the boundary sanitization that builds them.
Every numeric field is parsed once here; anything that is not a finite number
falls back to a named default so the projection never sees an undefined value.
"""

import enum
import math
from dataclasses import dataclass, replace
from typing import Any, Iterable, Tuple


DEFAULT_HOLD_YEARS = 7
DEFAULT_EXIT_CAP_RATE = 0.065
DEFAULT_AMORTIZATION_YEARS = 30
DEFAULT_DISCOUNT_RATE = 0.12
MIN_EXIT_CAP_RATE = 1e-9


class AssetClass(str, enum.Enum):
    multifamily = "multifamily"
    office = "office"
    industrial = "industrial"
    retail = "retail"
    single_family = "single_family"


class RevenueMode(str, enum.Enum):
    """Source of year-1 rent."""

    rent_roll = "rent_roll"
    flat = "flat"


class OpexMode(str, enum.Enum):
    percent_of_revenue = "percent_of_revenue"
    line_items = "line_items"
    per_unit = "per_unit"
    hybrid = "hybrid"


class RecoveryMode(str, enum.Enum):
    none = "none"
    percent_of_opex = "percent_of_opex"
    flat_annual = "flat_annual"


class CapexMode(str, enum.Enum):
    per_square_foot = "per_square_foot"
    per_unit = "per_unit"


@dataclass(frozen=True)
class UnitType:
    """A rent roll row: a group of identical units."""

    name: str
    units: Any  # Unit count
    monthly_rent: Any  # Rent per unit per month


@dataclass(frozen=True)
class OpexLineItem:
    """A year-1 itemized operating expense."""

    name: str
    annual: Any


@dataclass(frozen=True)
class ModelInputs:
    """Sanitized underwriting assumptions. Rates are decimals (0.05 = 5%)."""

    # Property
    asset_class: AssetClass = AssetClass.multifamily
    revenue_mode: RevenueMode = RevenueMode.rent_roll
    square_footage: float = 0.0

    # Acquisition
    purchase_price: float = 0.0
    due_diligence_cost: float = 0.0
    closing_cost_rate: float = 0.0
    hold_years: int = DEFAULT_HOLD_YEARS

    # Revenue
    annual_revenue: float = 0.0
    other_income: float = 0.0
    rent_roll_gpr: float = 0.0
    rent_roll_units: int = 0
    rent_growth: float = 0.0
    other_income_growth: float = 0.0
    vacancy_rate: float = 0.0

    # Operating expenses
    opex_mode: OpexMode = OpexMode.percent_of_revenue
    opex_pct_of_revenue: float = 0.0
    opex_per_unit: float = 0.0
    opex_line_items: float = 0.0
    management_fee_rate: float = 0.0
    reserves_per_unit: float = 0.0
    expense_growth: float = 0.0

    # Recoveries
    recovery_mode: RecoveryMode = RecoveryMode.none
    recovery_pct_of_opex: float = 0.0
    recovery_flat_annual: float = 0.0

    # Capital expenditure
    capex_mode: CapexMode = CapexMode.per_square_foot
    capex_per_square_foot: float = 0.0
    capex_per_unit: float = 0.0
    capex_growth: float = 0.0

    # Exit
    exit_cap_rate: float = DEFAULT_EXIT_CAP_RATE
    cost_of_sale_rate: float = 0.0

    # Financing
    ltv: float = 0.0
    interest_rate: float = 0.0
    amortization_years: int = DEFAULT_AMORTIZATION_YEARS

    # Returns
    discount_rate: float = DEFAULT_DISCOUNT_RATE

    @property
    def base_rent(self) -> float:
        """Year-1 rent before growth."""
        if self.revenue_mode == RevenueMode.rent_roll:
            return self.rent_roll_gpr
        return self.annual_revenue

    @property
    def unit_count(self) -> int:
        """Units used by per-unit expense, reserve and capex models."""
        if self.revenue_mode == RevenueMode.rent_roll:
            return self.rent_roll_units
        return 1

    @property
    def loan_amount(self) -> float:
        return self.purchase_price * self.ltv

    @property
    def acquisition_cost(self) -> float:
        """Price plus due diligence plus closing costs."""
        return (
            self.purchase_price
            + self.due_diligence_cost
            + self.purchase_price * self.closing_cost_rate
        )


def clamp_num(value: Any, fallback: float = 0.0) -> float:
    """Parse a number, returning the fallback for anything non-finite."""
    if isinstance(value, bool) or value is None:
        return fallback
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return fallback
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(number):
        return fallback
    return number


def _non_negative(value: Any, fallback: float = 0.0) -> float:
    return max(0.0, clamp_num(value, fallback))


def _rate_or_percent(value: Any) -> float:
    """Accept 0.055 or 5.5 for 5.5%."""
    number = clamp_num(value)
    if number > 1:
        number = number / 100
    return max(0.0, number)


def _enum_or_default(enum_cls, value: Any, default):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (TypeError, ValueError):
        return default


def summarize_rent_roll(unit_types: Iterable[UnitType]) -> Tuple[float, int]:
    """
    Total a rent roll.

    Args:
        unit_types: Rent roll rows with unit counts and monthly rents

    Returns:
        (gross potential rent per year, total units)
    """
    gpr = 0.0
    total_units = 0
    for row in unit_types:
        units = int(math.floor(_non_negative(row.units)))
        rent = _non_negative(row.monthly_rent)
        if units <= 0:
            continue
        total_units += units
        gpr += units * rent * 12
    return gpr, total_units


def sum_line_items(items: Iterable[OpexLineItem]) -> float:
    """Year-1 total of itemized operating expenses."""
    return sum(_non_negative(item.annual) for item in items)


def build_model_inputs(
    *,
    asset_class: Any = AssetClass.multifamily,
    revenue_mode: Any = None,
    square_footage: Any = 0,
    purchase_price: Any = 0,
    due_diligence_cost: Any = 0,
    closing_cost_rate: Any = 0,
    hold_years: Any = DEFAULT_HOLD_YEARS,
    annual_revenue: Any = 0,
    other_income: Any = 0,
    unit_types: Iterable[UnitType] = (),
    rent_growth: Any = 0,
    other_income_growth: Any = None,
    vacancy_rate: Any = 0,
    opex_mode: Any = OpexMode.percent_of_revenue,
    opex_pct_of_revenue: Any = 0,
    opex_per_unit: Any = 0,
    opex_items: Iterable[OpexLineItem] = (),
    management_fee_rate: Any = 0,
    reserves_per_unit: Any = 0,
    expense_growth: Any = 0,
    recovery_mode: Any = RecoveryMode.none,
    recovery_pct_of_opex: Any = 0,
    recovery_flat_annual: Any = 0,
    capex_mode: Any = CapexMode.per_square_foot,
    capex_per_square_foot: Any = 0,
    capex_per_unit: Any = 0,
    capex_growth: Any = 0,
    exit_cap_rate: Any = DEFAULT_EXIT_CAP_RATE,
    cost_of_sale_rate: Any = 0,
    ltv: Any = 0,
    interest_rate: Any = 0,
    amortization_years: Any = DEFAULT_AMORTIZATION_YEARS,
    discount_rate: Any = DEFAULT_DISCOUNT_RATE,
) -> ModelInputs:
    """
    Sanitize raw assumptions into a ModelInputs value.

    Numbers may arrive as floats, ints or strings. Values that do not parse as
    finite numbers fall back to 0 or to the named default for that field.

    Args:
        revenue_mode: Defaults to rent roll for multifamily, flat otherwise
        unit_types: Rent roll rows (rent roll revenue mode)
        opex_items: Itemized expenses (line item and hybrid opex modes)
        other_income_growth: Defaults to rent growth when missing or invalid
        ltv: Fraction, or a percentage when greater than 1
        interest_rate: Fraction, or a percentage when greater than 1

    Returns:
        Immutable ModelInputs
    """
    asset = _enum_or_default(AssetClass, asset_class, AssetClass.multifamily)
    default_revenue_mode = (
        RevenueMode.rent_roll if asset == AssetClass.multifamily else RevenueMode.flat
    )
    rent_roll_gpr, rent_roll_units = summarize_rent_roll(unit_types)
    rent_g = clamp_num(rent_growth, 0.0)

    return ModelInputs(
        asset_class=asset,
        revenue_mode=_enum_or_default(RevenueMode, revenue_mode, default_revenue_mode),
        square_footage=_non_negative(square_footage),
        purchase_price=_non_negative(purchase_price),
        due_diligence_cost=_non_negative(due_diligence_cost),
        closing_cost_rate=_non_negative(closing_cost_rate),
        hold_years=max(1, int(math.floor(clamp_num(hold_years, DEFAULT_HOLD_YEARS)))),
        annual_revenue=_non_negative(annual_revenue),
        other_income=_non_negative(other_income),
        rent_roll_gpr=rent_roll_gpr,
        rent_roll_units=rent_roll_units,
        rent_growth=rent_g,
        other_income_growth=clamp_num(other_income_growth, rent_g),
        vacancy_rate=_non_negative(vacancy_rate),
        opex_mode=_enum_or_default(OpexMode, opex_mode, OpexMode.percent_of_revenue),
        opex_pct_of_revenue=_non_negative(opex_pct_of_revenue),
        opex_per_unit=_non_negative(opex_per_unit),
        opex_line_items=sum_line_items(opex_items),
        management_fee_rate=_non_negative(management_fee_rate),
        reserves_per_unit=_non_negative(reserves_per_unit),
        expense_growth=_non_negative(expense_growth),
        recovery_mode=_enum_or_default(RecoveryMode, recovery_mode, RecoveryMode.none),
        recovery_pct_of_opex=_non_negative(recovery_pct_of_opex),
        recovery_flat_annual=_non_negative(recovery_flat_annual),
        capex_mode=_enum_or_default(CapexMode, capex_mode, CapexMode.per_square_foot),
        capex_per_square_foot=_non_negative(capex_per_square_foot),
        capex_per_unit=_non_negative(capex_per_unit),
        capex_growth=_non_negative(capex_growth),
        exit_cap_rate=max(MIN_EXIT_CAP_RATE, clamp_num(exit_cap_rate, DEFAULT_EXIT_CAP_RATE)),
        cost_of_sale_rate=_non_negative(cost_of_sale_rate),
        ltv=min(1.0, _rate_or_percent(ltv)),
        interest_rate=_rate_or_percent(interest_rate),
        amortization_years=max(
            1, int(math.floor(clamp_num(amortization_years, DEFAULT_AMORTIZATION_YEARS)))
        ),
        discount_rate=_non_negative(discount_rate, DEFAULT_DISCOUNT_RATE),
    )


def with_overrides(inputs: ModelInputs, **overrides: Any) -> ModelInputs:
    """Copy inputs with selected fields replaced (used by what-if engines)."""
    return replace(inputs, **overrides)
