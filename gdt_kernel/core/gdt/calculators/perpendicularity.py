"""
Perpendicularity Tolerance Calculator.

Supports surface perpendicularity (always RFS) and axis perpendicularity
of a feature of size, where MMC/LMC earn bonus tolerance. The measured
deviation is given directly or derived from an angular error over a
measurement length.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from gdt_kernel.core.errors import CalcErrorCode

from ..symbols import (
    BONUS_CONDITIONS,
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
    calculate_virtual_condition,
    check_precision,
    percent_consumed,
    resolve_precision,
    round_to,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PerpendicularityInput:
    tolerance: float
    feature_type: FeatureType
    material_condition: MaterialCondition = MaterialCondition.RFS
    size_dimension: Optional[SizeDimensionInput] = None
    actual_size: Optional[float] = None
    linear_deviation: Optional[float] = None
    angular_deviation: Optional[float] = None  # degrees
    measurement_length: Optional[float] = None
    unit: Unit = Unit.MM
    precision: Optional[int] = None


@dataclass(frozen=True)
class PerpendicularityResult:
    characteristic: Characteristic
    status: PassFailStatus
    summary: str
    unit: Unit
    stated_tolerance: float
    material_condition: MaterialCondition
    bonus_tolerance: float
    total_allowable_tolerance: float
    measured_deviation: float
    tolerance_consumed: float
    virtual_condition: Optional[float] = None
    size_limits: Optional[SizeLimits] = None


@dataclass(frozen=True)
class QuickPerpendicularityResult:
    passed: bool
    bonus: float
    total_tolerance: float
    consumed: float


def angular_to_linear(angle_degrees: float, length: float) -> float:
    """Linear deviation produced by an angular error over a length."""
    return length * math.tan(math.radians(angle_degrees))


def linear_to_angular(linear_deviation: float, length: float) -> float:
    """Angular error (degrees) equivalent to a linear deviation over a length."""
    return math.degrees(math.atan(linear_deviation / length))


def _validate(data: PerpendicularityInput) -> List[CalcError]:
    errors: List[CalcError] = []
    if data.tolerance <= 0:
        errors.append(
            CalcError(
                CalcErrorCode.INVALID_TOLERANCE,
                "Perpendicularity tolerance must be greater than zero",
                "tolerance",
            )
        )
    if data.material_condition in BONUS_CONDITIONS:
        condition = MaterialCondition(data.material_condition).value
        if data.size_dimension is None:
            errors.append(
                CalcError(
                    CalcErrorCode.MISSING_SIZE_DIMENSION,
                    "Size dimension is required for MMC/LMC calculations",
                    "size_dimension",
                )
            )
        if data.actual_size is None:
            errors.append(
                CalcError(
                    CalcErrorCode.MISSING_ACTUAL_SIZE,
                    "Actual size is required for MMC/LMC calculations",
                    "actual_size",
                )
            )
        if not is_feature_of_size(data.feature_type):
            errors.append(
                CalcError(
                    CalcErrorCode.INVALID_MATERIAL_CONDITION,
                    f"Feature type '{getattr(data.feature_type, 'value', data.feature_type)}' "
                    f"does not support {condition}",
                    "material_condition",
                )
            )
    if data.linear_deviation is None and data.angular_deviation is None:
        errors.append(
            CalcError(
                CalcErrorCode.NO_MEASUREMENTS,
                "Either linear deviation or angular deviation must be provided",
                "linear_deviation",
            )
        )
    if data.angular_deviation is not None and data.measurement_length is None:
        errors.append(
            CalcError(
                CalcErrorCode.MISSING_MEASUREMENT_LENGTH,
                "Measurement length is required when using angular deviation",
                "measurement_length",
            )
        )
    precision_error = check_precision(data.precision)
    if precision_error is not None:
        errors.append(precision_error)
    return errors


def calculate_perpendicularity(
    data: PerpendicularityInput,
) -> CalculationResponse[PerpendicularityResult]:
    """
    Calculate perpendicularity conformance.

    Args:
        data: Stated tolerance, optional size data and the measured deviation

    Returns:
        CalculationSuccess with a PerpendicularityResult, or
        CalculationFailure listing every failed precondition
    """
    errors = _validate(data)
    if errors:
        logger.debug(
            "Perpendicularity input rejected",
            extra={"characteristic": "perpendicularity", "error_count": len(errors)},
        )
        return CalculationFailure(errors)

    precision = resolve_precision(data.unit, data.precision)
    material_condition = MaterialCondition(data.material_condition)
    feature_class = get_feature_class(data.feature_type)

    limits: Optional[SizeLimits] = None
    bonus = 0.0
    virtual_condition: Optional[float] = None
    if data.size_dimension is not None and data.actual_size is not None:
        size = data.size_dimension
        limits = calculate_size_limits(
            size.nominal, size.tolerance_plus, size.tolerance_minus, data.feature_type, precision
        )
        bonus = round_to(
            calculate_bonus(material_condition, feature_class, data.actual_size, limits),
            precision,
        )
        if material_condition in BONUS_CONDITIONS and feature_class != FeatureClass.SURFACE:
            virtual_condition = round_to(
                calculate_virtual_condition(
                    material_condition, feature_class, data.tolerance, limits
                ),
                precision,
            )

    total_allowable = round_to(data.tolerance + bonus, precision)
    if data.linear_deviation is not None:
        deviation = data.linear_deviation
    else:
        deviation = angular_to_linear(data.angular_deviation, data.measurement_length)
    measured = round_to(abs(deviation), precision)

    passed = measured <= total_allowable
    status = PassFailStatus.PASS if passed else PassFailStatus.FAIL
    consumed = percent_consumed(measured, total_allowable)
    verdict = "is within" if passed else "exceeds"
    summary = (
        f"{'PASS' if passed else 'FAIL'}: Perpendicularity {measured:.{precision}f} {verdict} "
        f"allowable {total_allowable:.{precision}f} ({consumed:.1f}% consumed)"
    )
    if bonus > 0:
        summary += f" Bonus tolerance: {bonus:.{precision}f} ({material_condition.value})"

    logger.debug(
        "Perpendicularity calculated",
        extra={"characteristic": "perpendicularity", "status": status.value},
    )
    return CalculationSuccess(
        PerpendicularityResult(
            characteristic=Characteristic.PERPENDICULARITY,
            status=status,
            summary=summary,
            unit=Unit(data.unit),
            stated_tolerance=data.tolerance,
            material_condition=material_condition,
            bonus_tolerance=bonus,
            total_allowable_tolerance=total_allowable,
            measured_deviation=measured,
            tolerance_consumed=consumed,
            virtual_condition=virtual_condition,
            size_limits=limits,
        )
    )


def quick_perpendicularity_rfs(deviation: float, tolerance: float) -> QuickPerpendicularityResult:
    """Perpendicularity check at RFS from a single deviation."""
    return QuickPerpendicularityResult(
        passed=deviation <= tolerance,
        bonus=0.0,
        total_tolerance=tolerance,
        consumed=percent_consumed(deviation, tolerance),
    )


def quick_perpendicularity_mmc(
    deviation: float,
    stated_tolerance: float,
    mmc_size: float,
    actual_size: float,
    feature_class: FeatureClass = FeatureClass.INTERNAL,
) -> QuickPerpendicularityResult:
    """
    Axis perpendicularity check at MMC with bonus.

    Bonus is the departure of the actual size from MMC toward LMC; no
    upper clamp is applied since the LMC size is not known here.
    """
    if feature_class == FeatureClass.EXTERNAL:
        bonus = max(0.0, mmc_size - actual_size)
    else:
        bonus = max(0.0, actual_size - mmc_size)
    total = stated_tolerance + bonus
    return QuickPerpendicularityResult(
        passed=deviation <= total,
        bonus=bonus,
        total_tolerance=total,
        consumed=percent_consumed(deviation, total),
    )
