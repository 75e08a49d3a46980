"""
Tests for input sanitization.
"""

import dataclasses

import pytest
from deal_underwriter.calculations.inputs import (
    AssetClass,
    CapexMode,
    OpexLineItem,
    OpexMode,
    RecoveryMode,
    RevenueMode,
    UnitType,
    build_model_inputs,
    clamp_num,
    summarize_rent_roll,
    sum_line_items,
    with_overrides,
)


class TestClampNum:
    """Test numeric parsing with fallbacks."""

    def test_parses_numbers_and_strings(self):
        assert clamp_num(5) == 5.0
        assert clamp_num("250000") == 250000.0
        assert clamp_num(" 0.065 ") == 0.065

    @pytest.mark.parametrize("value", ["abc", "", None, float("nan"), float("inf"), "inf", [1]])
    def test_falls_back(self, value):
        assert clamp_num(value, 7.0) == 7.0


class TestBuildModelInputs:
    """Test boundary sanitization into ModelInputs."""

    def test_defaults_are_complete(self):
        inputs = build_model_inputs()
        assert inputs.hold_years == 7
        assert inputs.exit_cap_rate == 0.065
        assert inputs.amortization_years == 30
        assert inputs.discount_rate == 0.12
        assert inputs.purchase_price == 0.0

    def test_hold_years_guarded(self):
        assert build_model_inputs(hold_years=0).hold_years == 1
        assert build_model_inputs(hold_years="-3").hold_years == 1
        assert build_model_inputs(hold_years="7.9").hold_years == 7
        assert build_model_inputs(hold_years="abc").hold_years == 7

    def test_loss_and_inflation_rates_clamped_to_zero(self):
        inputs = build_model_inputs(vacancy_rate=-0.05, expense_growth=-0.02, capex_growth=-0.01)
        assert inputs.vacancy_rate == 0.0
        assert inputs.expense_growth == 0.0
        assert inputs.capex_growth == 0.0

    def test_rent_growth_may_be_negative(self):
        assert build_model_inputs(rent_growth=-0.01).rent_growth == -0.01

    def test_other_income_growth_defaults_to_rent_growth(self):
        assert build_model_inputs(rent_growth=0.04).other_income_growth == 0.04
        assert build_model_inputs(rent_growth=0.04, other_income_growth="n/a").other_income_growth == 0.04
        assert build_model_inputs(rent_growth=0.04, other_income_growth=0.01).other_income_growth == 0.01

    def test_exit_cap_floor_and_default(self):
        assert build_model_inputs(exit_cap_rate=0).exit_cap_rate == 1e-9
        assert build_model_inputs(exit_cap_rate=-0.05).exit_cap_rate == 1e-9
        assert build_model_inputs(exit_cap_rate="x").exit_cap_rate == 0.065

    def test_percent_style_rates(self):
        inputs = build_model_inputs(ltv=75, interest_rate=6.5)
        assert inputs.ltv == pytest.approx(0.75)
        assert inputs.interest_rate == pytest.approx(0.065)

    def test_ltv_bounds(self):
        assert build_model_inputs(ltv=-0.2).ltv == 0.0
        assert build_model_inputs(ltv=1.0).ltv == 1.0

    def test_amortization_and_discount_guarded(self):
        assert build_model_inputs(amortization_years="0").amortization_years == 1
        assert build_model_inputs(discount_rate="bad").discount_rate == 0.12
        assert build_model_inputs(discount_rate=-0.1).discount_rate == 0.0

    def test_revenue_mode_follows_asset_class(self):
        assert build_model_inputs(asset_class="multifamily").revenue_mode == RevenueMode.rent_roll
        assert build_model_inputs(asset_class="office").revenue_mode == RevenueMode.flat
        assert (
            build_model_inputs(asset_class=AssetClass.office, revenue_mode="rent_roll").revenue_mode
            == RevenueMode.rent_roll
        )

    def test_unknown_modes_fall_back(self):
        inputs = build_model_inputs(
            asset_class="castle",
            opex_mode="guess",
            recovery_mode="???",
            capex_mode=None,
        )
        assert inputs.asset_class == AssetClass.multifamily
        assert inputs.opex_mode == OpexMode.percent_of_revenue
        assert inputs.recovery_mode == RecoveryMode.none
        assert inputs.capex_mode == CapexMode.per_square_foot

    def test_mode_strings_accepted(self):
        inputs = build_model_inputs(opex_mode="hybrid", recovery_mode="flat_annual", capex_mode="per_unit")
        assert inputs.opex_mode == OpexMode.hybrid
        assert inputs.recovery_mode == RecoveryMode.flat_annual
        assert inputs.capex_mode == CapexMode.per_unit

    def test_inputs_are_immutable(self):
        inputs = build_model_inputs(purchase_price=1_000_000)
        with pytest.raises(dataclasses.FrozenInstanceError):
            inputs.purchase_price = 2_000_000

    def test_with_overrides_copies(self):
        inputs = build_model_inputs(purchase_price=1_000_000)
        changed = with_overrides(inputs, purchase_price=900_000)
        assert changed.purchase_price == 900_000
        assert inputs.purchase_price == 1_000_000


class TestRentRoll:
    """Test rent roll and line item totals."""

    def test_summarize_rent_roll(self):
        gpr, units = summarize_rent_roll(
            [
                UnitType(name="1x1", units=12, monthly_rent=2400),
                UnitType(name="2x2", units="8", monthly_rent="3100"),
            ]
        )
        assert units == 20
        assert gpr == 12 * 2400 * 12 + 8 * 3100 * 12

    def test_rent_roll_drops_empty_and_floors_units(self):
        gpr, units = summarize_rent_roll(
            [
                UnitType(name="studio", units="2.7", monthly_rent=1000),
                UnitType(name="vacant", units=0, monthly_rent=5000),
                UnitType(name="bad", units="x", monthly_rent=5000),
                UnitType(name="negative rent", units=1, monthly_rent=-100),
            ]
        )
        assert units == 3
        assert gpr == 2 * 1000 * 12

    def test_line_items(self):
        items = [
            OpexLineItem(name="Taxes", annual="150000"),
            OpexLineItem(name="Insurance", annual=40_000),
            OpexLineItem(name="Refund", annual=-500),
        ]
        assert sum_line_items(items) == 190_000

    def test_unit_count_by_revenue_mode(self, multifamily_deal, office_deal):
        assert multifamily_deal.unit_count == 20
        assert multifamily_deal.base_rent == 643_200
        assert office_deal.unit_count == 1
        assert office_deal.base_rent == 1_200_000
