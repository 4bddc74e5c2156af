"""
Calculation Types.

Shared result envelope, error record and numeric helpers for the
characteristic calculators. Calculators never raise on bad input: they
return a ``CalculationFailure`` listing every precondition that failed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, TypeVar, Union

from gdt_kernel.core.config import get_settings
from gdt_kernel.core.errors import CalcErrorCode

from ..symbols import FeatureClass, MaterialCondition, Unit

T = TypeVar("T")

MIN_PRECISION = 1
MAX_PRECISION = 6


class PassFailStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"


@dataclass(frozen=True)
class CalcError:
    code: CalcErrorCode
    message: str
    field: Optional[str] = None


@dataclass(frozen=True)
class CalculationSuccess(Generic[T]):
    result: T

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class CalculationFailure:
    errors: List[CalcError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return False

    @property
    def codes(self) -> List[CalcErrorCode]:
        return [e.code for e in self.errors]


CalculationResponse = Union[CalculationSuccess[T], CalculationFailure]


@dataclass(frozen=True)
class SizeDimensionInput:
    nominal: float
    tolerance_plus: float = 0.0
    tolerance_minus: float = 0.0


@dataclass(frozen=True)
class SizeLimits:
    """Size limits with material condition roles resolved."""

    nominal: float
    mmc: float
    lmc: float
    upper_limit: float
    lower_limit: float


def round_to(value: float, decimals: int) -> float:
    """Round half-up (toward +inf) to a fixed number of decimals."""
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


def default_precision(unit: Unit) -> int:
    """Display precision for a unit from runtime settings."""
    settings = get_settings()
    if Unit(unit) == Unit.INCH:
        return settings.DEFAULT_PRECISION_INCH
    return settings.DEFAULT_PRECISION_MM


def resolve_precision(unit: Unit, precision: Optional[int]) -> int:
    return default_precision(unit) if precision is None else precision


def check_precision(precision: Optional[int]) -> Optional[CalcError]:
    if precision is None or MIN_PRECISION <= precision <= MAX_PRECISION:
        return None
    return CalcError(
        code=CalcErrorCode.INVALID_PRECISION,
        message=f"Precision must be between {MIN_PRECISION} and {MAX_PRECISION}",
        field="precision",
    )


def percent_consumed(measured: float, allowable: float) -> float:
    """Share of the allowable tolerance used, as a percentage to 1 decimal."""
    if allowable <= 0:
        return 0.0
    return round_to(measured / allowable * 100, 1)


def calculate_bonus(
    material_condition: MaterialCondition,
    feature_class: Optional[FeatureClass],
    actual_size: float,
    limits: SizeLimits,
) -> float:
    """
    Bonus tolerance earned by departure from the stated material condition.

    Args:
        material_condition: Condition stated on the tolerance
        feature_class: Internal or external; surface features earn no bonus
        actual_size: Measured size of the feature
        limits: Size limits of the feature

    Returns:
        Bonus clamped to [0, |lmc - mmc|]

    Example:
        >>> # Hole: 10 +0.1/0 at MMC, actual 10.08
        >>> limits = calculate_size_limits(10.0, 0.1, 0.0, FeatureType.HOLE)
        >>> bonus = calculate_bonus(MaterialCondition.MMC, FeatureClass.INTERNAL, 10.08, limits)
        >>> round_to(bonus, 3)
        0.08
    """
    if feature_class not in (FeatureClass.INTERNAL, FeatureClass.EXTERNAL):
        return 0.0
    internal = feature_class == FeatureClass.INTERNAL
    if material_condition == MaterialCondition.MMC:
        bonus = actual_size - limits.mmc if internal else limits.mmc - actual_size
    elif material_condition == MaterialCondition.LMC:
        bonus = limits.lmc - actual_size if internal else actual_size - limits.lmc
    else:
        return 0.0
    return min(max(bonus, 0.0), abs(limits.lmc - limits.mmc))


def calculate_virtual_condition(
    material_condition: MaterialCondition,
    feature_class: Optional[FeatureClass],
    tolerance: float,
    limits: SizeLimits,
) -> float:
    """Worst-case mating boundary at the stated material condition.

    RFS reports the MMC size.
    """
    internal = feature_class != FeatureClass.EXTERNAL
    if material_condition == MaterialCondition.MMC:
        return limits.mmc - tolerance if internal else limits.mmc + tolerance
    if material_condition == MaterialCondition.LMC:
        return limits.lmc + tolerance if internal else limits.lmc - tolerance
    return limits.mmc


def calculate_resultant_condition(
    material_condition: MaterialCondition,
    feature_class: Optional[FeatureClass],
    tolerance: float,
    limits: SizeLimits,
) -> float:
    """Opposite-extreme boundary; RFS reports the LMC size."""
    internal = feature_class != FeatureClass.EXTERNAL
    if material_condition == MaterialCondition.MMC:
        return limits.lmc + tolerance if internal else limits.lmc - tolerance
    if material_condition == MaterialCondition.LMC:
        return limits.mmc - tolerance if internal else limits.mmc + tolerance
    return limits.lmc
