"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from deal_underwriter.calculations.inputs import (
    AssetClass,
    OpexLineItem,
    OpexMode,
    UnitType,
    build_model_inputs,
)


@pytest.fixture
def flat_deal():
    """$1M building, $100k flat rent, no growth or expenses, 10% exit cap, all cash."""
    return build_model_inputs(
        asset_class=AssetClass.office,
        purchase_price=1_000_000,
        hold_years=1,
        annual_revenue=100_000,
        exit_cap_rate=0.10,
    )


@pytest.fixture
def multifamily_deal():
    """Levered multifamily acquisition with a rent roll and growth."""
    return build_model_inputs(
        asset_class=AssetClass.multifamily,
        square_footage=24_000,
        purchase_price=6_000_000,
        due_diligence_cost=50_000,
        closing_cost_rate=0.01,
        hold_years=7,
        unit_types=[
            UnitType(name="1x1", units=12, monthly_rent=2400),
            UnitType(name="2x2", units=8, monthly_rent=3100),
        ],
        other_income=20_000,
        rent_growth=0.03,
        other_income_growth=0.02,
        vacancy_rate=0.05,
        opex_mode=OpexMode.percent_of_revenue,
        opex_pct_of_revenue=0.30,
        management_fee_rate=0.03,
        reserves_per_unit=250,
        expense_growth=0.03,
        capex_per_square_foot=0.30,
        capex_growth=0.03,
        exit_cap_rate=0.055,
        cost_of_sale_rate=0.02,
        ltv=0.60,
        interest_rate=0.06,
        amortization_years=30,
        discount_rate=0.10,
    )


@pytest.fixture
def office_deal():
    """Office building with itemized expenses and recoveries."""
    return build_model_inputs(
        asset_class=AssetClass.office,
        square_footage=50_000,
        purchase_price=10_000_000,
        hold_years=5,
        annual_revenue=1_200_000,
        rent_growth=0.025,
        vacancy_rate=0.08,
        opex_mode=OpexMode.line_items,
        opex_items=[
            OpexLineItem(name="Property Taxes", annual=150_000),
            OpexLineItem(name="Insurance", annual=40_000),
            OpexLineItem(name="Repairs & Maintenance", annual=60_000),
        ],
        expense_growth=0.03,
        recovery_mode="percent_of_opex",
        recovery_pct_of_opex=0.80,
        capex_per_square_foot=0.50,
        exit_cap_rate=0.07,
        cost_of_sale_rate=0.015,
        ltv=0.55,
        interest_rate=0.065,
        amortization_years=25,
    )
