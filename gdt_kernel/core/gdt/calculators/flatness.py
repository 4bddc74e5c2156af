"""
Flatness Tolerance Calculator.

Evaluates measured surface points (or a total indicator reading) against
a flatness zone of two parallel planes. Points are referenced to a
least-squares plane fitted by orthogonal regression; flatness is the
spread of the signed point-to-plane distances.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from gdt_kernel.core.errors import CalcErrorCode

from ..symbols import Characteristic, Unit
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


@dataclass(frozen=True)
class SurfacePoint:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class FlatnessInput:
    tolerance: float
    measured_points: List[SurfacePoint] = field(default_factory=list)
    total_indicator_reading: Optional[float] = None
    unit: Unit = Unit.MM
    precision: Optional[int] = None


@dataclass(frozen=True)
class FlatnessResult:
    characteristic: Characteristic
    status: PassFailStatus
    summary: str
    unit: Unit
    stated_tolerance: float
    measured_flatness: float
    max_deviation: float
    min_deviation: float
    total_zone_width: float
    tolerance_consumed: float
    point_count: int


@dataclass(frozen=True)
class QuickFlatnessResult:
    passed: bool
    flatness: float
    consumed: float


def fit_reference_plane(points: Sequence[SurfacePoint]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Fit a least-squares reference plane through measured points.

    Fewer than three points cannot define a plane; a horizontal plane
    through their mean height is used instead.

    Returns:
        (centroid, unit normal). The normal's dominant component is
        positive so deviations have a stable sign.
    """
    coords = np.array([[p.x, p.y, p.z] for p in points], dtype=float)
    centroid = coords.mean(axis=0)
    if len(coords) < 3:
        return centroid, np.array([0.0, 0.0, 1.0])

    _, _, vt = np.linalg.svd(coords - centroid)
    normal = vt[-1]
    if normal[int(np.argmax(np.abs(normal)))] < 0:
        normal = -normal
    return centroid, normal


def plane_deviations(points: Sequence[SurfacePoint]) -> np.ndarray:
    """Signed distances of points from their reference plane."""
    centroid, normal = fit_reference_plane(points)
    coords = np.array([[p.x, p.y, p.z] for p in points], dtype=float)
    return (coords - centroid) @ normal


def _validate(data: FlatnessInput) -> List[CalcError]:
    errors: List[CalcError] = []
    if data.tolerance <= 0:
        errors.append(
            CalcError(
                CalcErrorCode.INVALID_TOLERANCE,
                "Flatness tolerance must be greater than zero",
                "tolerance",
            )
        )
    if not data.measured_points and data.total_indicator_reading is None:
        errors.append(
            CalcError(
                CalcErrorCode.NO_MEASUREMENTS,
                "Either measured points or total indicator reading must be provided",
                "measured_points",
            )
        )
    if data.total_indicator_reading is not None and data.total_indicator_reading < 0:
        errors.append(
            CalcError(
                CalcErrorCode.INVALID_TIR,
                "Total indicator reading cannot be negative",
                "total_indicator_reading",
            )
        )
    precision_error = check_precision(data.precision)
    if precision_error is not None:
        errors.append(precision_error)
    return errors


def calculate_flatness(data: FlatnessInput) -> CalculationResponse[FlatnessResult]:
    """
    Calculate flatness conformance.

    A total indicator reading, when given, is taken as the measured
    flatness directly; otherwise the measured points are evaluated
    against their least-squares plane.
    """
    errors = _validate(data)
    if errors:
        logger.debug(
            "Flatness input rejected",
            extra={"characteristic": "flatness", "error_count": len(errors)},
        )
        return CalculationFailure(errors)

    precision = resolve_precision(data.unit, data.precision)
    if data.total_indicator_reading is not None:
        tir = data.total_indicator_reading
        max_dev, min_dev = tir / 2, -tir / 2
        measured = tir
    else:
        deviations = plane_deviations(data.measured_points)
        max_dev = float(deviations.max())
        min_dev = float(deviations.min())
        measured = max_dev - min_dev

    measured = round_to(measured, precision)
    passed = measured <= data.tolerance
    consumed = percent_consumed(measured, data.tolerance)
    status = PassFailStatus.PASS if passed else PassFailStatus.FAIL
    verdict = "is within" if passed else "exceeds"
    summary = (
        f"{'PASS' if passed else 'FAIL'}: Flatness {measured:.{precision}f} {verdict} "
        f"tolerance {data.tolerance:.{precision}f} ({consumed:.1f}% consumed)"
    )

    logger.debug(
        "Flatness calculated",
        extra={
            "characteristic": "flatness",
            "status": status.value,
            "point_count": len(data.measured_points),
        },
    )
    return CalculationSuccess(
        FlatnessResult(
            characteristic=Characteristic.FLATNESS,
            status=status,
            summary=summary,
            unit=Unit(data.unit),
            stated_tolerance=data.tolerance,
            measured_flatness=measured,
            max_deviation=round_to(max_dev, precision),
            min_deviation=round_to(min_dev, precision),
            total_zone_width=measured,
            tolerance_consumed=consumed,
            point_count=len(data.measured_points),
        )
    )


def quick_flatness(total_indicator_reading: float, tolerance: float) -> QuickFlatnessResult:
    """Flatness check from a single indicator reading."""
    return QuickFlatnessResult(
        passed=total_indicator_reading <= tolerance,
        flatness=total_indicator_reading,
        consumed=percent_consumed(total_indicator_reading, tolerance),
    )


def flatness_from_min_max(
    min_deviation: float, max_deviation: float, tolerance: float
) -> QuickFlatnessResult:
    flatness = max_deviation - min_deviation
    return QuickFlatnessResult(
        passed=flatness <= tolerance,
        flatness=flatness,
        consumed=percent_consumed(flatness, tolerance),
    )
