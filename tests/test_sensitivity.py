"""
Tests for the sensitivity grid and tornado analysis.
"""

import pytest
from deal_underwriter.calculations.inputs import with_overrides
from deal_underwriter.calculations.model import Metric, metric_value, run_model
from deal_underwriter.calculations.sensitivity import (
    EXIT_CAP_DELTAS,
    PRICE_MULTIPLIERS,
    build_sensitivity_grid,
    shifted_exit_cap,
)
from deal_underwriter.calculations.tornado import DRIVERS, MIN_SWING, build_tornado


class TestSensitivityGrid:
    """Test the purchase price x exit cap grid."""

    def test_shape(self, multifamily_deal):
        result = build_sensitivity_grid(multifamily_deal)
        assert result.metric == Metric.levered_irr
        assert len(result.grid) == len(EXIT_CAP_DELTAS)
        assert all(len(row) == len(PRICE_MULTIPLIERS) for row in result.grid)
        assert result.purchase_prices == pytest.approx(
            [5_400_000, 5_700_000, 6_000_000, 6_300_000, 6_600_000]
        )
        assert result.exit_cap_rates == pytest.approx([0.045, 0.050, 0.055, 0.060, 0.065])

    @pytest.mark.parametrize("metric", list(Metric))
    def test_center_cell_is_base_case(self, multifamily_deal, metric):
        result = build_sensitivity_grid(multifamily_deal, metric)
        assert result.grid[2][2] == result.base_value
        assert result.base_value == metric_value(run_model(multifamily_deal), metric)

    def test_cells_match_direct_runs(self, multifamily_deal):
        result = build_sensitivity_grid(multifamily_deal, Metric.levered_npv)
        scenario = with_overrides(
            multifamily_deal,
            purchase_price=result.purchase_prices[0],
            exit_cap_rate=result.exit_cap_rates[4],
        )
        assert result.grid[4][0] == run_model(scenario).metrics.levered_npv

    def test_irr_falls_with_price_and_cap(self, multifamily_deal):
        grid = build_sensitivity_grid(multifamily_deal).grid
        for row in grid:
            assert all(a > b for a, b in zip(row, row[1:]))
        for col in range(len(PRICE_MULTIPLIERS)):
            column = [row[col] for row in grid]
            assert all(a > b for a, b in zip(column, column[1:]))

    def test_exit_price_ignores_purchase_price(self, multifamily_deal):
        grid = build_sensitivity_grid(multifamily_deal, Metric.exit_price).grid
        for row in grid:
            assert row == pytest.approx([row[0]] * len(row))
        column = [row[0] for row in grid]
        assert all(a > b for a, b in zip(column, column[1:]))

    def test_exit_cap_floor(self, flat_deal):
        result = build_sensitivity_grid(with_overrides(flat_deal, exit_cap_rate=0.005))
        assert result.exit_cap_rates[0] == 0.0001
        assert result.exit_cap_rates[1] == 0.0001
        assert result.exit_cap_rates[2] == 0.005

    def test_shifted_exit_cap(self):
        assert shifted_exit_cap(0.065, 0.0) == 0.065
        assert shifted_exit_cap(0.065, 0.01) == pytest.approx(0.075)
        assert shifted_exit_cap(0.004, -0.01) == 0.0001


class TestTornado:
    """Test one-at-a-time driver ranking."""

    def test_rows_cover_all_drivers(self, multifamily_deal):
        result = build_tornado(multifamily_deal, Metric.levered_irr)
        assert len(result.rows) == len(DRIVERS)
        assert {row.name for row in result.rows} == {driver.name for driver in DRIVERS}

    def test_sorted_by_swing(self, multifamily_deal):
        rows = build_tornado(multifamily_deal, Metric.levered_irr).rows
        swings = [row.swing for row in rows]
        assert swings == sorted(swings, reverse=True)

    def test_swing_is_larger_delta(self, multifamily_deal):
        result = build_tornado(multifamily_deal, Metric.levered_irr)
        for row in result.rows:
            assert row.delta_low == pytest.approx(row.low_value - result.base_value)
            assert row.delta_high == pytest.approx(row.high_value - result.base_value)
            assert row.swing == max(abs(row.delta_low), abs(row.delta_high))
        assert result.max_swing == result.rows[0].swing

    def test_directions(self, multifamily_deal):
        rows = {row.name: row for row in build_tornado(multifamily_deal, Metric.levered_irr).rows}
        assert rows["Purchase Price"].delta_low > 0 > rows["Purchase Price"].delta_high
        assert rows["Exit Cap Rate"].delta_low > 0 > rows["Exit Cap Rate"].delta_high
        assert rows["Rent Growth"].delta_low < 0 < rows["Rent Growth"].delta_high
        assert rows["Interest Rate"].delta_low > 0 > rows["Interest Rate"].delta_high

    def test_interest_rate_irrelevant_without_debt(self, flat_deal):
        rows = {row.name: row for row in build_tornado(flat_deal, Metric.levered_irr).rows}
        assert rows["Interest Rate"].swing == 0.0
        assert rows["OpEx (Pct of Rev)"].delta_low == 0.0

    def test_undefined_metric_has_zero_swing(self, flat_deal):
        result = build_tornado(flat_deal, Metric.dscr)
        assert result.base_value is None
        assert all(row.swing == 0.0 for row in result.rows)
        assert all(row.delta_low is None for row in result.rows)
        assert result.max_swing == MIN_SWING
