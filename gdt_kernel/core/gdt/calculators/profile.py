"""
Profile Tolerance Calculator.

Evaluates measured normal deviations from the true profile against a
bilateral, unilateral or unequally disposed tolerance zone. Positive
deviations lie outside the true profile (material added), negative
deviations inside.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from gdt_kernel.core.errors import CalcErrorCode

from ..symbols import Characteristic, MaterialCondition, Unit
from .types import (
    CalcError,
    CalculationFailure,
    CalculationResponse,
    CalculationSuccess,
    PassFailStatus,
    check_precision,
    percent_consumed,
    resolve_precision,
    round_to,
)

logger = logging.getLogger(__name__)


class ProfileZoneType(str, Enum):
    """Distribution of the profile zone about the true profile."""

    BILATERAL = "bilateral"
    UNILATERAL_OUTSIDE = "unilateral-outside"
    UNILATERAL_INSIDE = "unilateral-inside"
    UNEQUALLY_DISPOSED = "unequally-disposed"


ZONE_DESCRIPTIONS: Dict[ProfileZoneType, str] = {
    ProfileZoneType.BILATERAL: "Bilateral (equally disposed)",
    ProfileZoneType.UNILATERAL_OUTSIDE: "Unilateral (all outside)",
    ProfileZoneType.UNILATERAL_INSIDE: "Unilateral (all inside)",
    ProfileZoneType.UNEQUALLY_DISPOSED: "Unequally disposed",
}


@dataclass(frozen=True)
class ProfilePoint:
    position: float  # location along the profile
    deviation: float  # + outside, - inside


@dataclass(frozen=True)
class ProfileInput:
    tolerance: float
    zone_type: ProfileZoneType = ProfileZoneType.BILATERAL
    measured_points: List[ProfilePoint] = field(default_factory=list)
    outside_amount: Optional[float] = None
    material_condition: Optional[MaterialCondition] = None
    form_only: bool = False
    unit: Unit = Unit.MM
    precision: Optional[int] = None


@dataclass(frozen=True)
class ProfileResult:
    characteristic: Characteristic
    status: PassFailStatus
    summary: str
    unit: Unit
    stated_tolerance: float
    zone_type: ProfileZoneType
    zone_description: str
    allowable_outside: float
    allowable_inside: float
    max_deviation_outside: float
    max_deviation_inside: float
    total_measured_zone: float
    tolerance_consumed: float
    point_count: int
    non_conforming_points: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class QuickProfileResult:
    passed: bool
    consumed: float


def calculate_zone_boundaries(
    tolerance: float,
    zone_type: ProfileZoneType,
    outside_amount: Optional[float] = None,
) -> Tuple[float, float]:
    """
    Split a profile tolerance into allowable outside / inside deviation.

    Returns:
        (allowable_outside, allowable_inside)

    Example:
        >>> calculate_zone_boundaries(0.4, ProfileZoneType.BILATERAL)
        (0.2, 0.2)
    """
    zone_type = ProfileZoneType(zone_type)
    if zone_type == ProfileZoneType.UNILATERAL_OUTSIDE:
        return tolerance, 0.0
    if zone_type == ProfileZoneType.UNILATERAL_INSIDE:
        return 0.0, tolerance
    if zone_type == ProfileZoneType.UNEQUALLY_DISPOSED:
        outside = tolerance / 2 if outside_amount is None else outside_amount
        return max(0.0, outside), max(0.0, tolerance - outside)
    return tolerance / 2, tolerance / 2


def _validate(data: ProfileInput) -> List[CalcError]:
    errors: List[CalcError] = []
    if data.tolerance <= 0:
        errors.append(
            CalcError(
                CalcErrorCode.INVALID_TOLERANCE,
                "Profile tolerance must be greater than zero",
                "tolerance",
            )
        )
    if not data.measured_points:
        errors.append(
            CalcError(
                CalcErrorCode.NO_MEASUREMENTS,
                "At least one measured point is required",
                "measured_points",
            )
        )
    if data.zone_type == ProfileZoneType.UNEQUALLY_DISPOSED:
        if data.outside_amount is None:
            errors.append(
                CalcError(
                    CalcErrorCode.MISSING_OUTSIDE_AMOUNT,
                    "Outside amount is required for unequally disposed zones",
                    "outside_amount",
                )
            )
        elif data.outside_amount < 0 or data.outside_amount > data.tolerance:
            errors.append(
                CalcError(
                    CalcErrorCode.INVALID_OUTSIDE_AMOUNT,
                    "Outside amount must be between 0 and total tolerance",
                    "outside_amount",
                )
            )
    precision_error = check_precision(data.precision)
    if precision_error is not None:
        errors.append(precision_error)
    return errors


def calculate_profile(data: ProfileInput) -> CalculationResponse[ProfileResult]:
    """
    Calculate profile conformance.

    Each point is checked against the allowance on its own side of the
    true profile; the frame passes only when no point is non-conforming.
    Tolerance consumed is the worse of the two sides.
    """
    errors = _validate(data)
    if errors:
        logger.debug(
            "Profile input rejected",
            extra={"characteristic": "profile", "error_count": len(errors)},
        )
        return CalculationFailure(errors)

    precision = resolve_precision(data.unit, data.precision)
    zone_type = ProfileZoneType(data.zone_type)
    allow_out, allow_in = calculate_zone_boundaries(data.tolerance, zone_type, data.outside_amount)

    max_out = 0.0
    max_in = 0.0
    non_conforming: List[int] = []
    for index, point in enumerate(data.measured_points):
        if point.deviation > 0:
            max_out = max(max_out, point.deviation)
            if point.deviation > allow_out:
                non_conforming.append(index)
        else:
            depth = abs(point.deviation)
            max_in = max(max_in, depth)
            if depth > allow_in:
                non_conforming.append(index)

    max_out = round_to(max_out, precision)
    max_in = round_to(max_in, precision)
    out_used = max_out / allow_out if allow_out > 0 else 0.0
    in_used = max_in / allow_in if allow_in > 0 else 0.0
    consumed = round_to(max(out_used, in_used) * 100, 1)

    passed = not non_conforming
    status = PassFailStatus.PASS if passed else PassFailStatus.FAIL
    description = ZONE_DESCRIPTIONS[zone_type]
    head = (
        "PASS: Profile tolerance satisfied."
        if passed
        else f"FAIL: Profile tolerance exceeded at {len(non_conforming)} point(s)."
    )
    summary = " ".join(
        [
            head,
            f"Zone type: {description}",
            f"Max outside: {max_out:.{precision}f} (allowed: {allow_out:.{precision}f})",
            f"Max inside: {max_in:.{precision}f} (allowed: {allow_in:.{precision}f})",
        ]
    )
    if data.material_condition is not None:
        summary += f" Material condition: {MaterialCondition(data.material_condition).value}"
    if data.form_only:
        summary += " Form only (no datum reference)."

    logger.debug(
        "Profile calculated",
        extra={
            "characteristic": "profile",
            "status": status.value,
            "point_count": len(data.measured_points),
        },
    )
    return CalculationSuccess(
        ProfileResult(
            characteristic=Characteristic.PROFILE,
            status=status,
            summary=summary,
            unit=Unit(data.unit),
            stated_tolerance=data.tolerance,
            zone_type=zone_type,
            zone_description=description,
            allowable_outside=round_to(allow_out, precision),
            allowable_inside=round_to(allow_in, precision),
            max_deviation_outside=max_out,
            max_deviation_inside=max_in,
            total_measured_zone=round_to(max_out + max_in, precision),
            tolerance_consumed=consumed,
            point_count=len(data.measured_points),
            non_conforming_points=non_conforming,
        )
    )


def quick_profile_bilateral(
    max_deviation_outside: float, max_deviation_inside: float, tolerance: float
) -> QuickProfileResult:
    """Bilateral profile check from the two extreme deviation magnitudes."""
    half = tolerance / 2
    return QuickProfileResult(
        passed=max_deviation_outside <= half and max_deviation_inside <= half,
        consumed=percent_consumed(max(max_deviation_outside, max_deviation_inside), half),
    )


def quick_profile_unilateral(max_deviation: float, tolerance: float) -> QuickProfileResult:
    """Unilateral profile check; the whole zone lies on the deviation's side."""
    return QuickProfileResult(
        passed=max_deviation <= tolerance,
        consumed=percent_consumed(max_deviation, tolerance),
    )


def total_to_bilateral(total_deviation: float) -> Tuple[float, float]:
    """
    Split a total profile deviation evenly into (outside, inside).

    Inspection reports sometimes give only the total rather than +/- from
    the true profile.
    """
    return total_deviation / 2, total_deviation / 2


def create_envelope_points(max_outside: float, max_inside: float) -> List[ProfilePoint]:
    """Two points spanning a known deviation envelope, for calculate_profile."""
    return [
        ProfilePoint(position=0.0, deviation=max_outside),
        ProfilePoint(position=1.0, deviation=-max_inside),
    ]
