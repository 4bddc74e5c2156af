"""Shared calculation error codes.

Centralizes the error code enumeration returned inside calculation
failures so calculators and the stack-up engine report the same codes.
"""

from __future__ import annotations

from enum import Enum


class CalcErrorCode(str, Enum):
    INVALID_TOLERANCE = "INVALID_TOLERANCE"
    INVALID_SIZE = "INVALID_SIZE"
    INVALID_SIZE_TOLERANCE = "INVALID_SIZE_TOLERANCE"
    INVALID_ACTUAL_SIZE = "INVALID_ACTUAL_SIZE"
    INVALID_FEATURE_TYPE = "INVALID_FEATURE_TYPE"
    INVALID_PRECISION = "INVALID_PRECISION"
    # Measurement data
    NO_MEASUREMENTS = "NO_MEASUREMENTS"  # No points / readings supplied
    INVALID_TIR = "INVALID_TIR"  # Negative total indicator reading
    MISSING_MEASUREMENT_LENGTH = "MISSING_MEASUREMENT_LENGTH"  # Angle without length
    # Material condition prerequisites
    MISSING_SIZE_DIMENSION = "MISSING_SIZE_DIMENSION"
    MISSING_ACTUAL_SIZE = "MISSING_ACTUAL_SIZE"
    INVALID_MATERIAL_CONDITION = "INVALID_MATERIAL_CONDITION"  # MMC/LMC on a non-FOS
    # Profile zones
    MISSING_OUTSIDE_AMOUNT = "MISSING_OUTSIDE_AMOUNT"
    INVALID_OUTSIDE_AMOUNT = "INVALID_OUTSIDE_AMOUNT"
    # Stack-up
    INSUFFICIENT_DIMENSIONS = "INSUFFICIENT_DIMENSIONS"  # Fewer than two links
    INVALID_PROCESS_CAPABILITY = "INVALID_PROCESS_CAPABILITY"  # Cp must be positive
    # Dispatch
    UNSUPPORTED_CHARACTERISTIC = "UNSUPPORTED_CHARACTERISTIC"


__all__ = ["CalcErrorCode"]
