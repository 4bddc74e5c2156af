"""
Position Tolerance Calculator.

Computes bonus tolerance, virtual and resultant condition, positional
deviation and conformance for a feature of size located by a position
tolerance at MMC, LMC or RFS.

Key formulas:
- Bonus (MMC, internal) = actual size - MMC size
- Bonus (MMC, external) = MMC size - actual size
- Total allowable = stated tolerance + bonus
- Actual position (diametral zone) = 2 * sqrt(dx^2 + dy^2 + dz^2)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from gdt_kernel.core.errors import CalcErrorCode

from ..symbols import (
    Characteristic,
    FeatureClass,
    FeatureType,
    MaterialCondition,
    Unit,
    get_feature_class,
    is_feature_of_size,
)
from .size_limits import calculate_size_limits
from .types import (
    CalcError,
    CalculationFailure,
    CalculationResponse,
    CalculationSuccess,
    PassFailStatus,
    SizeDimensionInput,
    SizeLimits,
    calculate_bonus,
    calculate_resultant_condition,
    calculate_virtual_condition,
    check_precision,
    percent_consumed,
    resolve_precision,
    round_to,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TruePosition:
    """Basic (theoretically exact) location from the drawing."""

    basic_x: float
    basic_y: float
    basic_z: Optional[float] = None


@dataclass(frozen=True)
class MeasuredPosition:
    actual_x: float
    actual_y: float
    actual_size: float
    actual_z: Optional[float] = None


@dataclass(frozen=True)
class PositionInput:
    geometric_tolerance: float
    material_condition: MaterialCondition
    feature_type: FeatureType
    size_dimension: SizeDimensionInput
    true_position: TruePosition
    measured: MeasuredPosition
    diametral_zone: bool = True
    unit: Unit = Unit.MM
    precision: Optional[int] = None


@dataclass(frozen=True)
class PositionResult:
    characteristic: Characteristic
    status: PassFailStatus
    summary: str
    unit: Unit
    stated_tolerance: float
    material_condition: MaterialCondition
    size_limits: SizeLimits
    actual_size: float
    bonus_tolerance: float
    total_allowable_tolerance: float
    virtual_condition: float
    resultant_condition: float
    deviation_x: float
    deviation_y: float
    deviation_z: Optional[float]
    radial_deviation: float
    actual_position_tolerance: float
    tolerance_consumed: float
    size_conformance: bool
    position_conformance: bool


@dataclass(frozen=True)
class QuickPositionResult:
    passed: bool
    bonus: float
    total_tolerance: float
    actual_position: float


def _validate(data: PositionInput) -> List[CalcError]:
    errors: List[CalcError] = []
    if data.geometric_tolerance <= 0:
        errors.append(
            CalcError(
                CalcErrorCode.INVALID_TOLERANCE,
                "Geometric tolerance must be greater than zero",
                "geometric_tolerance",
            )
        )
    size = data.size_dimension
    if size.nominal <= 0:
        errors.append(
            CalcError(
                CalcErrorCode.INVALID_SIZE,
                "Nominal size must be greater than zero",
                "size_dimension.nominal",
            )
        )
    if size.tolerance_plus < 0 or size.tolerance_minus < 0:
        errors.append(
            CalcError(
                CalcErrorCode.INVALID_SIZE_TOLERANCE,
                "Size tolerances cannot be negative",
                "size_dimension",
            )
        )
    if data.measured.actual_size <= 0:
        errors.append(
            CalcError(
                CalcErrorCode.INVALID_ACTUAL_SIZE,
                "Actual measured size must be greater than zero",
                "measured.actual_size",
            )
        )
    if data.material_condition != MaterialCondition.RFS and not is_feature_of_size(
        data.feature_type
    ):
        errors.append(
            CalcError(
                CalcErrorCode.INVALID_FEATURE_TYPE,
                f"Feature type '{getattr(data.feature_type, 'value', data.feature_type)}' "
                f"is not valid for {MaterialCondition(data.material_condition).value} calculations",
                "feature_type",
            )
        )
    precision_error = check_precision(data.precision)
    if precision_error is not None:
        errors.append(precision_error)
    return errors


def _summary(
    status: PassFailStatus,
    actual: float,
    allowable: float,
    bonus: float,
    material_condition: MaterialCondition,
    size_ok: bool,
    position_ok: bool,
    precision: int,
) -> str:
    lines = [
        "PASS: Position tolerance satisfied."
        if status == PassFailStatus.PASS
        else "FAIL: Position tolerance exceeded."
    ]
    lines.append(f"Actual position: Ø{actual:.{precision}f} vs Allowable: Ø{allowable:.{precision}f}")
    if material_condition != MaterialCondition.RFS and bonus > 0:
        lines.append(f"Bonus tolerance: {bonus:.{precision}f} ({material_condition.value})")
    if not size_ok:
        lines.append("WARNING: Actual size is outside size limits.")
    if not position_ok:
        lines.append("Position deviation exceeds total allowable tolerance.")
    return " ".join(lines)


def calculate_position(data: PositionInput) -> CalculationResponse[PositionResult]:
    """
    Calculate position tolerance conformance.

    Args:
        data: Stated tolerance, size dimension, true position and measurement

    Returns:
        CalculationSuccess with a PositionResult, or CalculationFailure
        listing every failed precondition
    """
    errors = _validate(data)
    if errors:
        logger.debug(
            "Position input rejected",
            extra={"characteristic": "position", "error_count": len(errors)},
        )
        return CalculationFailure(errors)

    precision = resolve_precision(data.unit, data.precision)
    material_condition = MaterialCondition(data.material_condition)
    size = data.size_dimension
    limits = calculate_size_limits(
        size.nominal, size.tolerance_plus, size.tolerance_minus, data.feature_type, precision
    )
    feature_class = get_feature_class(data.feature_type) or FeatureClass.INTERNAL
    actual_size = data.measured.actual_size
    tolerance = data.geometric_tolerance

    bonus = round_to(calculate_bonus(material_condition, feature_class, actual_size, limits), precision)
    total_allowable = round_to(tolerance + bonus, precision)
    virtual_condition = round_to(
        calculate_virtual_condition(material_condition, feature_class, tolerance, limits), precision
    )
    resultant_condition = round_to(
        calculate_resultant_condition(material_condition, feature_class, tolerance, limits),
        precision,
    )

    measured = data.measured
    basic = data.true_position
    dx = measured.actual_x - basic.basic_x
    dy = measured.actual_y - basic.basic_y
    dz: Optional[float] = None
    if measured.actual_z is not None and basic.basic_z is not None:
        dz = measured.actual_z - basic.basic_z
    radial = math.sqrt(dx * dx + dy * dy + (dz * dz if dz is not None else 0.0))
    actual_position = round_to(2 * radial if data.diametral_zone else radial, precision)

    size_ok = limits.lower_limit <= actual_size <= limits.upper_limit
    position_ok = actual_position <= total_allowable
    status = PassFailStatus.PASS if size_ok and position_ok else PassFailStatus.FAIL

    result = PositionResult(
        characteristic=Characteristic.POSITION,
        status=status,
        summary=_summary(
            status,
            actual_position,
            total_allowable,
            bonus,
            material_condition,
            size_ok,
            position_ok,
            precision,
        ),
        unit=Unit(data.unit),
        stated_tolerance=tolerance,
        material_condition=material_condition,
        size_limits=limits,
        actual_size=round_to(actual_size, precision),
        bonus_tolerance=bonus,
        total_allowable_tolerance=total_allowable,
        virtual_condition=virtual_condition,
        resultant_condition=resultant_condition,
        deviation_x=round_to(dx, precision),
        deviation_y=round_to(dy, precision),
        deviation_z=round_to(dz, precision) if dz is not None else None,
        radial_deviation=round_to(radial, precision),
        actual_position_tolerance=actual_position,
        tolerance_consumed=percent_consumed(actual_position, total_allowable),
        size_conformance=size_ok,
        position_conformance=position_ok,
    )
    logger.debug(
        "Position calculated",
        extra={"characteristic": "position", "status": status.value},
    )
    return CalculationSuccess(result)


def quick_position_mmc(
    stated_tolerance: float,
    mmc_size: float,
    actual_size: float,
    deviation_x: float,
    deviation_y: float,
    feature_class: FeatureClass = FeatureClass.INTERNAL,
) -> QuickPositionResult:
    """Position check at MMC from minimal inputs (diametral zone)."""
    if feature_class == FeatureClass.EXTERNAL:
        bonus = max(0.0, mmc_size - actual_size)
    else:
        bonus = max(0.0, actual_size - mmc_size)
    return _quick(stated_tolerance + bonus, bonus, deviation_x, deviation_y)


def quick_position_lmc(
    stated_tolerance: float,
    lmc_size: float,
    actual_size: float,
    deviation_x: float,
    deviation_y: float,
    feature_class: FeatureClass = FeatureClass.INTERNAL,
) -> QuickPositionResult:
    """Position check at LMC from minimal inputs (diametral zone)."""
    if feature_class == FeatureClass.EXTERNAL:
        bonus = max(0.0, actual_size - lmc_size)
    else:
        bonus = max(0.0, lmc_size - actual_size)
    return _quick(stated_tolerance + bonus, bonus, deviation_x, deviation_y)


def quick_position_rfs(
    stated_tolerance: float, deviation_x: float, deviation_y: float
) -> QuickPositionResult:
    return _quick(stated_tolerance, 0.0, deviation_x, deviation_y)


def _quick(total: float, bonus: float, dx: float, dy: float) -> QuickPositionResult:
    actual = 2 * math.sqrt(dx * dx + dy * dy)
    return QuickPositionResult(
        passed=actual <= total,
        bonus=bonus,
        total_tolerance=total,
        actual_position=actual,
    )
