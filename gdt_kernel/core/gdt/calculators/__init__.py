"""
GD&T Tolerance Calculators.

Characteristic-specific calculators sharing one result envelope, plus a
dispatcher that routes an input to the calculator for its characteristic.
"""

import logging
from typing import Any, Callable, Dict, Tuple

from gdt_kernel.core.errors import CalcErrorCode

from ..symbols import Characteristic
from .flatness import (
    FlatnessInput,
    FlatnessResult,
    SurfacePoint,
    calculate_flatness,
    flatness_from_min_max,
    quick_flatness,
)
from .perpendicularity import (
    PerpendicularityInput,
    PerpendicularityResult,
    angular_to_linear,
    calculate_perpendicularity,
    linear_to_angular,
    quick_perpendicularity_mmc,
    quick_perpendicularity_rfs,
)
from .position import (
    MeasuredPosition,
    PositionInput,
    PositionResult,
    TruePosition,
    calculate_position,
    quick_position_lmc,
    quick_position_mmc,
    quick_position_rfs,
)
from .profile import (
    ProfileInput,
    ProfilePoint,
    ProfileResult,
    ProfileZoneType,
    calculate_profile,
    calculate_zone_boundaries,
    create_envelope_points,
    quick_profile_bilateral,
    quick_profile_unilateral,
    total_to_bilateral,
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
    round_to,
)

logger = logging.getLogger(__name__)

# Characteristic -> (input type, calculator)
CALCULATORS: Dict[Characteristic, Tuple[type, Callable[[Any], CalculationResponse]]] = {
    Characteristic.POSITION: (PositionInput, calculate_position),
    Characteristic.FLATNESS: (FlatnessInput, calculate_flatness),
    Characteristic.PERPENDICULARITY: (PerpendicularityInput, calculate_perpendicularity),
    Characteristic.PROFILE: (ProfileInput, calculate_profile),
}


def supported_characteristics() -> Tuple[Characteristic, ...]:
    return tuple(CALCULATORS)


def calculate(characteristic: Any, data: Any) -> CalculationResponse:
    """
    Run the calculator registered for a characteristic.

    Unknown characteristics, and inputs that do not match the
    characteristic's input type, degrade to an UNSUPPORTED_CHARACTERISTIC
    failure.
    """
    try:
        key = Characteristic(characteristic)
    except ValueError:
        key = None
    entry = CALCULATORS.get(key) if key is not None else None
    if entry is None or not isinstance(data, entry[0]):
        name = getattr(characteristic, "value", characteristic)
        logger.debug(
            "No calculator for characteristic",
            extra={
                "characteristic": str(name),
                "error_code": CalcErrorCode.UNSUPPORTED_CHARACTERISTIC.value,
            },
        )
        message = (
            f"No calculator available for characteristic '{name}'"
            if entry is None
            else f"Input of type {type(data).__name__} does not match characteristic '{name}'"
        )
        return CalculationFailure(
            [CalcError(CalcErrorCode.UNSUPPORTED_CHARACTERISTIC, message, "characteristic")]
        )
    return entry[1](data)


__all__ = [
    # Envelope
    "CalcError",
    "CalculationFailure",
    "CalculationResponse",
    "CalculationSuccess",
    "PassFailStatus",
    "SizeDimensionInput",
    "SizeLimits",
    "round_to",
    # Size limits
    "calculate_size_limits",
    # Position
    "MeasuredPosition",
    "PositionInput",
    "PositionResult",
    "TruePosition",
    "calculate_position",
    "quick_position_lmc",
    "quick_position_mmc",
    "quick_position_rfs",
    # Flatness
    "FlatnessInput",
    "FlatnessResult",
    "SurfacePoint",
    "calculate_flatness",
    "flatness_from_min_max",
    "quick_flatness",
    # Perpendicularity
    "PerpendicularityInput",
    "PerpendicularityResult",
    "angular_to_linear",
    "calculate_perpendicularity",
    "linear_to_angular",
    "quick_perpendicularity_mmc",
    "quick_perpendicularity_rfs",
    # Profile
    "ProfileInput",
    "ProfilePoint",
    "ProfileResult",
    "ProfileZoneType",
    "calculate_profile",
    "calculate_zone_boundaries",
    "create_envelope_points",
    "quick_profile_bilateral",
    "quick_profile_unilateral",
    "total_to_bilateral",
    # Dispatch
    "CALCULATORS",
    "calculate",
    "supported_characteristics",
]
