"""
Underwriting calculation API endpoints.

These endpoints accept raw assumptions, sanitize them once into ModelInputs,
and return calculated results or text exports.
"""

import logging
import math
from datetime import date
from typing import Any, List, Optional, Union

from fastapi import APIRouter, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel

from deal_underwriter.calculations import amortization, irr
from deal_underwriter.calculations.inputs import (
    AssetClass,
    CapexMode,
    ModelInputs,
    OpexLineItem,
    OpexMode,
    RecoveryMode,
    RevenueMode,
    UnitType,
    build_model_inputs,
)
from deal_underwriter.calculations.model import Metric, run_model
from deal_underwriter.calculations.sensitivity import build_sensitivity_grid
from deal_underwriter.calculations.tornado import build_tornado
from deal_underwriter.config import get_settings
from deal_underwriter.services import exports

logger = logging.getLogger(__name__)

router = APIRouter()

# Numbers may arrive as strings from form fields; sanitization parses them
Number = Optional[Union[float, str]]


def json_safe(value: Any) -> Any:
    """Encode a result for JSON, mapping non-finite floats to None."""
    encoded = jsonable_encoder(value)

    def scrub(item: Any) -> Any:
        if isinstance(item, float):
            return item if math.isfinite(item) else None
        if isinstance(item, dict):
            return {key: scrub(val) for key, val in item.items()}
        if isinstance(item, list):
            return [scrub(val) for val in item]
        return item

    return scrub(encoded)


class UnitTypeInput(BaseModel):
    """Rent roll row."""

    name: str = ""
    units: Number = 0.0
    monthly_rent: Number = 0.0


class OpexItemInput(BaseModel):
    """Itemized operating expense (year 1)."""

    name: str = ""
    annual: Number = 0.0


class UnderwriteInput(BaseModel):
    """Raw underwriting assumptions."""

    # Property
    asset_class: AssetClass = AssetClass.multifamily
    revenue_mode: Optional[RevenueMode] = None
    square_footage: Number = 0.0

    # Acquisition
    purchase_price: Number = 0.0
    due_diligence_cost: Number = 0.0
    closing_cost_rate: Number = 0.0
    hold_years: Number = 7.0

    # Revenue
    annual_revenue: Number = 0.0
    other_income: Number = 0.0
    unit_types: List[UnitTypeInput] = []
    rent_growth: Number = 0.0
    other_income_growth: Number = None
    vacancy_rate: Number = 0.0

    # Expenses
    opex_mode: OpexMode = OpexMode.percent_of_revenue
    opex_pct_of_revenue: Number = 0.0
    opex_per_unit: Number = 0.0
    opex_items: List[OpexItemInput] = []
    management_fee_rate: Number = 0.0
    reserves_per_unit: Number = 0.0
    expense_growth: Number = 0.0

    # Recoveries
    recovery_mode: RecoveryMode = RecoveryMode.none
    recovery_pct_of_opex: Number = 0.0
    recovery_flat_annual: Number = 0.0

    # CapEx
    capex_mode: CapexMode = CapexMode.per_square_foot
    capex_per_square_foot: Number = 0.0
    capex_per_unit: Number = 0.0
    capex_growth: Number = 0.0

    # Exit
    exit_cap_rate: Number = 0.065
    cost_of_sale_rate: Number = 0.0

    # Financing
    ltv: Number = 0.0
    interest_rate: Number = 0.0
    amortization_years: Number = 30.0

    # NPV
    discount_rate: Number = 0.12

    def to_model_inputs(self) -> ModelInputs:
        raw = self.model_dump(exclude={"unit_types", "opex_items"})
        return build_model_inputs(
            **raw,
            unit_types=[UnitType(**row.model_dump()) for row in self.unit_types],
            opex_items=[OpexLineItem(**item.model_dump()) for item in self.opex_items],
        )


@router.post("/underwrite")
async def underwrite(inputs: UnderwriteInput):
    """Run the full model: year series, cash flows, metrics, recommendation."""
    return json_safe(run_model(inputs.to_model_inputs()))


@router.post("/sensitivity")
async def sensitivity(inputs: UnderwriteInput, metric: Metric = Metric.levered_irr):
    """Purchase price x exit cap rate grid for one metric."""
    return json_safe(build_sensitivity_grid(inputs.to_model_inputs(), metric))


@router.post("/tornado")
async def tornado(inputs: UnderwriteInput, metric: Metric = Metric.levered_irr):
    """One-at-a-time driver ranking for one metric."""
    return json_safe(build_tornado(inputs.to_model_inputs(), metric))


class IRRInput(BaseModel):
    """Input for IRR calculation."""

    cash_flows: List[float]
    discount_rate: float = 0.10


class IRRResponse(BaseModel):
    """Response with IRR calculation. None means undefined."""

    irr: Optional[float] = None
    multiple: Optional[float] = None
    profit: float
    npv: Optional[float] = None


@router.post("/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """Calculate IRR for given cash flows."""
    if len(inputs.cash_flows) < 2:
        raise HTTPException(status_code=400, detail="At least 2 cash flows required")

    return IRRResponse(
        irr=irr.calculate_irr(inputs.cash_flows),
        multiple=irr.calculate_multiple(inputs.cash_flows),
        profit=irr.calculate_profit(inputs.cash_flows),
        npv=irr.calculate_npv(inputs.cash_flows, inputs.discount_rate),
    )


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    principal: float
    annual_rate: float
    amortization_years: int
    total_months: Optional[int] = None
    start_date: Optional[date] = None


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput):
    """Generate loan amortization schedule."""
    schedule = amortization.generate_amortization_schedule(
        principal=inputs.principal,
        annual_rate=inputs.annual_rate,
        amortization_years=inputs.amortization_years,
        total_months=inputs.total_months,
        start_date=inputs.start_date,
    )

    return json_safe(
        {
            "monthly_payment": amortization.calculate_payment(
                inputs.principal, inputs.annual_rate, inputs.amortization_years
            ),
            "schedule": schedule,
            "yearly": amortization.yearly_debt_summary(schedule),
            "total_interest": amortization.calculate_total_interest(schedule),
            "total_principal": sum(row["principal"] for row in schedule),
        }
    )


def _attachment(suffix: str) -> dict:
    filename = f"{get_settings().export_filename_prefix}-{suffix}"
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.post("/export/csv")
async def export_csv(inputs: UnderwriteInput):
    """Annual table and cash flows as CSV."""
    result = run_model(inputs.to_model_inputs())
    logger.info(f"CSV export for {result.hold_years}-year hold")
    return Response(
        content=exports.export_model_csv(result),
        media_type="text/csv",
        headers=_attachment("export.csv"),
    )


@router.post("/export/math", response_class=PlainTextResponse)
async def export_math(inputs: UnderwriteInput):
    """Formula reference with the raw cash flow arrays."""
    result = run_model(inputs.to_model_inputs())
    return PlainTextResponse(
        exports.export_math_reference(result), headers=_attachment("math.txt")
    )


@router.post("/export/tear-sheet", response_class=PlainTextResponse)
async def export_tear_sheet(inputs: UnderwriteInput):
    """IC tear sheet tables."""
    result = run_model(inputs.to_model_inputs())
    return PlainTextResponse(
        exports.export_tear_sheet(result), headers=_attachment("ic-tear-sheet.txt")
    )
