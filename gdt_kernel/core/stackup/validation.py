"""Advisory validation of a stack-up before calculation."""

import logging
from typing import List

from .models import (
    MIN_DIMENSIONS,
    AnalysisMethod,
    DimensionSign,
    StackupAnalysis,
    StackupValidationResult,
)

logger = logging.getLogger(__name__)

# Cp below this indicates an incapable process
MIN_CAPABLE_CP = 1.0


def validate_stackup_input(analysis: StackupAnalysis) -> StackupValidationResult:
    """
    Check a stack-up for blocking errors and advisory warnings.

    Errors: fewer than two dimensions, negative tolerances, Cp <= 0.
    Warnings: basic (zero tolerance) dimensions, zero sensitivity, Cp < 1.0
    under six-sigma, and chains whose links all share one sign.
    """
    errors: List[str] = []
    warnings: List[str] = []

    if len(analysis.dimensions) < MIN_DIMENSIONS:
        errors.append(f"Stack-up requires at least {MIN_DIMENSIONS} dimensions")

    six_sigma = analysis.analysis_method == AnalysisMethod.SIX_SIGMA
    for index, dim in enumerate(analysis.dimensions):
        label = f'Dimension {index + 1} "{dim.name}"'
        if dim.tolerance_plus < 0 or dim.tolerance_minus < 0:
            errors.append(f"{label}: Tolerances must be non-negative")
        if dim.tolerance_plus == 0 and dim.tolerance_minus == 0:
            warnings.append(f"{label}: Zero tolerance (basic dimension)")
        if dim.sensitivity_coefficient == 0:
            warnings.append(f"{label}: Zero sensitivity (no contribution)")
        if dim.process_capability is not None and dim.process_capability <= 0:
            errors.append(f"{label}: Process capability must be greater than zero")
        elif six_sigma and dim.process_capability is not None and dim.process_capability < MIN_CAPABLE_CP:
            warnings.append(f"{label}: Cp < 1.0 indicates incapable process")

    signs = {DimensionSign(d.sign) for d in analysis.dimensions}
    if len(signs) < 2:
        warnings.append("All dimensions have same sign. Verify sign convention is correct.")

    logger.debug(
        "Stack-up input validated",
        extra={"error_count": len(errors), "warning_count": len(warnings)},
    )
    return StackupValidationResult(valid=not errors, errors=errors, warnings=warnings)
