"""Tests for size limits and the position tolerance calculator."""

import pytest

from gdt_kernel.core.errors import CalcErrorCode
from gdt_kernel.core.gdt.calculators import (
    MeasuredPosition,
    PassFailStatus,
    PositionInput,
    SizeDimensionInput,
    TruePosition,
    calculate_position,
    calculate_size_limits,
    quick_position_lmc,
    quick_position_mmc,
    quick_position_rfs,
)
from gdt_kernel.core.gdt.calculators.types import (
    calculate_bonus,
    percent_consumed,
    round_to,
)
from gdt_kernel.core.gdt.symbols import (
    FeatureClass,
    FeatureType,
    MaterialCondition,
    Unit,
)


def _hole_input(
    actual_size=10.05,
    actual_x=0.03,
    actual_y=0.04,
    material_condition=MaterialCondition.MMC,
    **kwargs,
):
    defaults = dict(
        geometric_tolerance=0.2,
        material_condition=material_condition,
        feature_type=FeatureType.HOLE,
        size_dimension=SizeDimensionInput(nominal=10.0, tolerance_plus=0.1, tolerance_minus=0.0),
        true_position=TruePosition(basic_x=0.0, basic_y=0.0),
        measured=MeasuredPosition(actual_x=actual_x, actual_y=actual_y, actual_size=actual_size),
    )
    defaults.update(kwargs)
    return PositionInput(**defaults)


class TestSizeLimits:
    """MMC/LMC role assignment by feature class."""

    def test_hole_limits(self):
        """Test a hole is at MMC on its lower limit."""
        limits = calculate_size_limits(10.0, 0.1, 0.0, FeatureType.HOLE)

        assert limits.mmc == pytest.approx(10.0)
        assert limits.lmc == pytest.approx(10.1)
        assert limits.lower_limit == pytest.approx(10.0)
        assert limits.upper_limit == pytest.approx(10.1)

    def test_pin_limits(self):
        """Test a pin is at MMC on its upper limit."""
        limits = calculate_size_limits(10.0, 0.0, 0.1, FeatureType.PIN)

        assert limits.mmc == pytest.approx(10.0)
        assert limits.lmc == pytest.approx(9.9)

    def test_unknown_feature_treated_as_internal(self):
        """Test features without a size class take internal roles."""
        limits = calculate_size_limits(5.0, 0.2, 0.1, None)

        assert limits.mmc == pytest.approx(4.9)
        assert limits.lmc == pytest.approx(5.2)

    def test_rounded_limits(self):
        """Test limits are rounded when a precision is given."""
        limits = calculate_size_limits(12.7, 0.05, 0.05, FeatureType.BOSS, precision=2)

        assert limits.upper_limit == 12.75
        assert limits.lower_limit == 12.65
        assert limits.mmc == 12.75


class TestNumericHelpers:
    """Rounding and bonus helpers."""

    @pytest.mark.parametrize(
        "value,decimals,expected",
        [(1.5, 0, 2.0), (2.5, 0, 3.0), (-1.5, 0, -1.0), (0.1118034, 3, 0.112)],
    )
    def test_round_half_up(self, value, decimals, expected):
        """Test halves round toward positive infinity."""
        assert round_to(value, decimals) == pytest.approx(expected)

    def test_percent_consumed_zero_allowable(self):
        """Test zero allowable tolerance reports zero consumption."""
        assert percent_consumed(0.1, 0.0) == 0.0

    def test_bonus_clamped_to_size_tolerance(self):
        """Test bonus never exceeds the size tolerance band."""
        limits = calculate_size_limits(10.0, 0.1, 0.0, FeatureType.HOLE)

        bonus = calculate_bonus(MaterialCondition.MMC, FeatureClass.INTERNAL, 10.5, limits)
        assert bonus == pytest.approx(0.1)

    def test_surface_earns_no_bonus(self):
        """Test surfaces earn no bonus."""
        limits = calculate_size_limits(10.0, 0.1, 0.0, FeatureType.SURFACE)

        assert calculate_bonus(MaterialCondition.MMC, FeatureClass.SURFACE, 10.05, limits) == 0.0


class TestPositionCalculator:
    """Position tolerance at MMC, LMC and RFS."""

    def test_hole_at_mmc_passes(self):
        """Test bonus, virtual condition and conformance for a hole at MMC."""
        response = calculate_position(_hole_input())

        assert response.success is True
        result = response.result
        assert result.status == PassFailStatus.PASS
        assert result.bonus_tolerance == pytest.approx(0.05)
        assert result.total_allowable_tolerance == pytest.approx(0.25)
        assert result.virtual_condition == pytest.approx(9.8)
        assert result.resultant_condition == pytest.approx(10.3)
        assert result.radial_deviation == pytest.approx(0.05)
        assert result.actual_position_tolerance == pytest.approx(0.1)
        assert result.tolerance_consumed == pytest.approx(40.0)
        assert result.size_conformance is True
        assert result.summary.startswith("PASS: Position tolerance satisfied.")

    def test_actual_at_mmc_no_bonus(self):
        """Test a feature produced at MMC earns no bonus."""
        result = calculate_position(_hole_input(actual_size=10.0)).result

        assert result.bonus_tolerance == 0.0
        assert result.total_allowable_tolerance == pytest.approx(0.2)

    def test_bonus_non_decreasing_toward_lmc(self):
        """Test bonus grows as a hole departs from MMC."""
        bonuses = [
            calculate_position(_hole_input(actual_size=size)).result.bonus_tolerance
            for size in (10.0, 10.02, 10.05, 10.1)
        ]

        assert bonuses == sorted(bonuses)
        assert bonuses[-1] == pytest.approx(0.1)

    def test_size_beyond_lmc_fails(self):
        """Test an oversize hole fails on size with the bonus capped."""
        result = calculate_position(_hole_input(actual_size=10.2)).result

        assert result.size_conformance is False
        assert result.position_conformance is True
        assert result.bonus_tolerance == pytest.approx(0.1)
        assert result.status == PassFailStatus.FAIL
        assert "WARNING: Actual size is outside size limits." in result.summary

    def test_position_exceeded(self):
        """Test a location error beyond the allowable zone fails."""
        result = calculate_position(_hole_input(actual_x=0.15, actual_y=0.0)).result

        assert result.actual_position_tolerance == pytest.approx(0.3)
        assert result.position_conformance is False
        assert result.summary.startswith("FAIL: Position tolerance exceeded.")

    def test_pin_at_mmc(self):
        """Test an external feature gains bonus as it shrinks."""
        data = _hole_input(
            feature_type=FeatureType.PIN,
            geometric_tolerance=0.1,
            size_dimension=SizeDimensionInput(10.0, 0.0, 0.1),
            measured=MeasuredPosition(0.0, 0.0, 9.95),
        )

        result = calculate_position(data).result
        assert result.bonus_tolerance == pytest.approx(0.05)
        assert result.virtual_condition == pytest.approx(10.1)
        assert result.resultant_condition == pytest.approx(9.8)

    def test_pin_at_lmc(self):
        """Test an external feature at LMC gains bonus as it grows."""
        data = _hole_input(
            feature_type=FeatureType.PIN,
            material_condition=MaterialCondition.LMC,
            geometric_tolerance=0.1,
            size_dimension=SizeDimensionInput(10.0, 0.0, 0.1),
            measured=MeasuredPosition(0.0, 0.0, 9.93),
        )

        result = calculate_position(data).result
        assert result.bonus_tolerance == pytest.approx(0.03)
        assert result.total_allowable_tolerance == pytest.approx(0.13)
        assert result.virtual_condition == pytest.approx(9.8)
        assert result.resultant_condition == pytest.approx(10.1)

    def test_hole_at_lmc(self):
        """Test LMC bonus grows as a hole shrinks toward MMC."""
        result = calculate_position(
            _hole_input(material_condition=MaterialCondition.LMC)
        ).result

        assert result.bonus_tolerance == pytest.approx(0.05)
        assert result.virtual_condition == pytest.approx(10.3)
        assert result.resultant_condition == pytest.approx(9.8)

    def test_rfs(self):
        """Test RFS earns no bonus and reports MMC/LMC boundaries."""
        result = calculate_position(
            _hole_input(material_condition=MaterialCondition.RFS)
        ).result

        assert result.bonus_tolerance == 0.0
        assert result.total_allowable_tolerance == pytest.approx(0.2)
        assert result.virtual_condition == pytest.approx(10.0)
        assert result.resultant_condition == pytest.approx(10.1)

    def test_three_dimensional_deviation(self):
        """Test Z deviation contributes when both Z values are given."""
        data = _hole_input(
            true_position=TruePosition(0.0, 0.0, basic_z=5.0),
            measured=MeasuredPosition(0.03, 0.0, 10.05, actual_z=5.04),
        )

        result = calculate_position(data).result
        assert result.deviation_z == pytest.approx(0.04)
        assert result.radial_deviation == pytest.approx(0.05)

    def test_non_diametral_zone(self):
        """Test a non-diametral zone compares the radial deviation."""
        result = calculate_position(_hole_input(diametral_zone=False)).result

        assert result.actual_position_tolerance == pytest.approx(0.05)
        assert result.deviation_z is None

    def test_inch_precision(self):
        """Test inch inputs round to four decimals by default."""
        data = _hole_input(
            unit=Unit.INCH,
            geometric_tolerance=0.01,
            size_dimension=SizeDimensionInput(0.5, 0.002, 0.0),
            measured=MeasuredPosition(0.00012, 0.0, 0.501),
        )

        result = calculate_position(data).result
        assert result.deviation_x == pytest.approx(0.0001)
        assert result.unit == Unit.INCH

    def test_precision_from_settings(self, monkeypatch):
        """Test the metric default precision follows settings."""
        monkeypatch.setenv("DEFAULT_PRECISION_MM", "2")

        result = calculate_position(_hole_input(actual_x=0.0312)).result
        assert result.deviation_x == pytest.approx(0.03)

    def test_deterministic(self):
        """Test identical inputs give identical results."""
        assert calculate_position(_hole_input()) == calculate_position(_hole_input())

    def test_input_errors_collected(self):
        """Test every failed precondition is reported."""
        response = calculate_position(_hole_input(actual_size=0.0, geometric_tolerance=0.0))

        assert response.success is False
        assert response.codes == [
            CalcErrorCode.INVALID_TOLERANCE,
            CalcErrorCode.INVALID_ACTUAL_SIZE,
        ]

    def test_invalid_size(self):
        """Test non-positive nominal and negative size tolerances."""
        response = calculate_position(
            _hole_input(size_dimension=SizeDimensionInput(0.0, -0.1, 0.0))
        )

        assert response.codes == [CalcErrorCode.INVALID_SIZE, CalcErrorCode.INVALID_SIZE_TOLERANCE]

    def test_material_condition_on_surface(self):
        """Test MMC requires a feature of size."""
        response = calculate_position(_hole_input(feature_type=FeatureType.SURFACE))

        assert response.codes == [CalcErrorCode.INVALID_FEATURE_TYPE]
        assert response.errors[0].field == "feature_type"

    def test_precision_out_of_range(self):
        """Test precision outside 1..6 is rejected."""
        response = calculate_position(_hole_input(precision=9))

        assert response.codes == [CalcErrorCode.INVALID_PRECISION]


class TestQuickPosition:
    """Minimal-input position helpers."""

    def test_quick_mmc(self):
        """Test quick MMC check with a hole."""
        result = quick_position_mmc(0.2, 10.0, 10.05, 0.03, 0.04)

        assert result.passed is True
        assert result.bonus == pytest.approx(0.05)
        assert result.total_tolerance == pytest.approx(0.25)
        assert result.actual_position == pytest.approx(0.1)

    def test_quick_mmc_external(self):
        """Test quick MMC check with a pin."""
        result = quick_position_mmc(0.1, 10.0, 9.9, 0.06, 0.0, FeatureClass.EXTERNAL)

        assert result.bonus == pytest.approx(0.1)
        assert result.passed is True

    def test_quick_lmc(self):
        """Test quick LMC check with a hole."""
        result = quick_position_lmc(0.1, 10.1, 10.0, 0.05, 0.0)

        assert result.bonus == pytest.approx(0.1)
        assert result.passed is True

    def test_quick_rfs(self):
        """Test quick RFS check never gains bonus."""
        result = quick_position_rfs(0.1, 0.06, 0.0)

        assert result.bonus == 0.0
        assert result.passed is False
