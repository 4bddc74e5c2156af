"""
Tolerance Stack-up Calculator.

Propagates dimensional tolerances through a one-dimensional assembly
chain under worst-case, RSS or six-sigma statistics.

Key formulas:
- Nominal = sum(sign * nominal * sensitivity)
- Mean shift = sum(sign * (tol_plus - tol_minus) / 2 * sensitivity)
- Worst case = sum(|bilateral * sensitivity|)
- RSS = sqrt(sum((bilateral * sensitivity)^2))
- Six sigma = 3 * sqrt(sum(sigma_i^2)), sigma_i = bilateral * sensitivity / (3 * Cp)
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Dict, List, Sequence

from gdt_kernel.core.errors import CalcErrorCode
from gdt_kernel.core.gdt.calculators.types import (
    CalcError,
    CalculationFailure,
    CalculationResponse,
    CalculationSuccess,
    round_to,
)

from .models import (
    DEFAULT_PROCESS_CAPABILITY,
    MIN_DIMENSIONS,
    AcceptanceCheck,
    AcceptanceCriteria,
    AnalysisMethod,
    DimensionContribution,
    StackupAnalysis,
    StackupDimension,
    StackupResult,
)
from .validation import validate_stackup_input

logger = logging.getLogger(__name__)


def get_bilateral_tolerance(dim: StackupDimension) -> float:
    """Half the total tolerance band of a dimension."""
    return (dim.tolerance_plus + dim.tolerance_minus) / 2


def get_default_process_capability() -> float:
    return DEFAULT_PROCESS_CAPABILITY


def calculate_nominal(dimensions: Sequence[StackupDimension]) -> float:
    return sum(d.sign_factor * d.nominal * d.sensitivity_coefficient for d in dimensions)


def calculate_mean_shift(dimensions: Sequence[StackupDimension]) -> float:
    """Offset of the tolerance band centre from nominal.

    50 +0.025/-0 is centred at 50.0125, not 50.
    """
    return sum(
        d.sign_factor * ((d.tolerance_plus - d.tolerance_minus) / 2) * d.sensitivity_coefficient
        for d in dimensions
    )


def calculate_worst_case(dimensions: Sequence[StackupDimension]) -> float:
    return sum(abs(get_bilateral_tolerance(d) * d.sensitivity_coefficient) for d in dimensions)


def calculate_rss(dimensions: Sequence[StackupDimension]) -> float:
    return math.sqrt(
        sum((get_bilateral_tolerance(d) * d.sensitivity_coefficient) ** 2 for d in dimensions)
    )


def _sigma(dim: StackupDimension) -> float:
    """Standard deviation of one link.

    A missing or non-positive Cp falls back to the default capability;
    analyze_stackup rejects non-positive values before calculating.
    """
    cp = dim.process_capability
    if cp is None or cp <= 0:
        cp = DEFAULT_PROCESS_CAPABILITY
    return (get_bilateral_tolerance(dim) * dim.sensitivity_coefficient) / (3 * cp)


def calculate_six_sigma(dimensions: Sequence[StackupDimension]) -> float:
    return 3 * math.sqrt(sum(_sigma(d) ** 2 for d in dimensions))


def calculate_total_tolerance(
    dimensions: Sequence[StackupDimension], method: AnalysisMethod
) -> float:
    method = AnalysisMethod(method)
    if method == AnalysisMethod.RSS:
        return calculate_rss(dimensions)
    if method == AnalysisMethod.SIX_SIGMA:
        return calculate_six_sigma(dimensions)
    return calculate_worst_case(dimensions)


def calculate_contributions(
    dimensions: Sequence[StackupDimension], method: AnalysisMethod
) -> List[DimensionContribution]:
    """
    Share of the stack variation attributable to each dimension.

    Worst case apportions linearly by |tolerance|; the statistical methods
    apportion by variance. Zero totals report 0 % for every dimension.
    """
    method = AnalysisMethod(method)
    if method == AnalysisMethod.WORST_CASE:
        magnitudes = [abs(get_bilateral_tolerance(d) * d.sensitivity_coefficient) for d in dimensions]
        total = sum(magnitudes)
        return [
            DimensionContribution(
                dimension_id=d.id,
                percent_contribution=(m / total * 100) if total > 0 else 0.0,
                variance_contribution=m * m,
            )
            for d, m in zip(dimensions, magnitudes)
        ]

    if method == AnalysisMethod.SIX_SIGMA:
        variances = [_sigma(d) ** 2 for d in dimensions]
    else:
        variances = [(get_bilateral_tolerance(d) * d.sensitivity_coefficient) ** 2 for d in dimensions]
    total = sum(variances)
    return [
        DimensionContribution(
            dimension_id=d.id,
            percent_contribution=(v / total * 100) if total > 0 else 0.0,
            variance_contribution=v,
        )
        for d, v in zip(dimensions, variances)
    ]


def check_acceptance(
    minimum_value: float, maximum_value: float, criteria: AcceptanceCriteria
) -> AcceptanceCheck:
    """Compare the stack extremes with the acceptance limits.

    A negative margin means that limit is violated.
    """
    passes = True
    margin_to_minimum = None
    margin_to_maximum = None
    if criteria.minimum is not None:
        margin_to_minimum = minimum_value - criteria.minimum
        passes = passes and minimum_value >= criteria.minimum
    if criteria.maximum is not None:
        margin_to_maximum = criteria.maximum - maximum_value
        passes = passes and maximum_value <= criteria.maximum
    return AcceptanceCheck(
        passes=passes,
        margin_to_minimum=margin_to_minimum,
        margin_to_maximum=margin_to_maximum,
    )


def calculate_stackup(analysis: StackupAnalysis) -> StackupResult:
    """
    Calculate a tolerance stack-up.

    Args:
        analysis: Dimension chain, acceptance criteria and method

    Returns:
        StackupResult; ``nominal_result`` is the drawing nominal while the
        extremes are taken about the mean-shifted centre

    Example:
        >>> result = calculate_stackup(analysis)
        >>> result.passes_acceptance_criteria
        True
    """
    dimensions = analysis.dimensions
    method = AnalysisMethod(analysis.analysis_method)

    nominal = calculate_nominal(dimensions)
    centered = nominal + calculate_mean_shift(dimensions)
    total = calculate_total_tolerance(dimensions, method)
    maximum = centered + total
    minimum = centered - total
    acceptance = check_acceptance(minimum, maximum, analysis.acceptance_criteria)

    logger.debug(
        "Stack-up calculated",
        extra={
            "method": method.value,
            "dimension_count": len(dimensions),
            "status": "pass" if acceptance.passes else "fail",
        },
    )
    return StackupResult(
        nominal_result=nominal,
        total_tolerance=total,
        maximum_value=maximum,
        minimum_value=minimum,
        passes_acceptance_criteria=acceptance.passes,
        method=method,
        contributions=calculate_contributions(dimensions, method),
        margin_to_minimum=acceptance.margin_to_minimum,
        margin_to_maximum=acceptance.margin_to_maximum,
    )


def compare_all_methods(analysis: StackupAnalysis) -> Dict[AnalysisMethod, StackupResult]:
    """Recompute the stack-up under every analysis method."""
    return {
        method: calculate_stackup(dataclasses.replace(analysis, analysis_method=method))
        for method in (AnalysisMethod.WORST_CASE, AnalysisMethod.RSS, AnalysisMethod.SIX_SIGMA)
    }


def analyze_stackup(analysis: StackupAnalysis) -> CalculationResponse[StackupResult]:
    """Validate then calculate, reporting blocking problems as calculation errors."""
    errors: List[CalcError] = []
    if len(analysis.dimensions) < MIN_DIMENSIONS:
        errors.append(
            CalcError(
                CalcErrorCode.INSUFFICIENT_DIMENSIONS,
                f"Stack-up requires at least {MIN_DIMENSIONS} dimensions",
                "dimensions",
            )
        )
    for index, dim in enumerate(analysis.dimensions):
        if dim.tolerance_plus < 0 or dim.tolerance_minus < 0:
            errors.append(
                CalcError(
                    CalcErrorCode.INVALID_TOLERANCE,
                    f'Dimension {index + 1} "{dim.name}": Tolerances must be non-negative',
                    f"dimensions[{index}]",
                )
            )
        if dim.process_capability is not None and dim.process_capability <= 0:
            errors.append(
                CalcError(
                    CalcErrorCode.INVALID_PROCESS_CAPABILITY,
                    f'Dimension {index + 1} "{dim.name}": Process capability must be greater than zero',
                    f"dimensions[{index}].process_capability",
                )
            )
    if errors:
        return CalculationFailure(errors)

    report = validate_stackup_input(analysis)
    for warning in report.warnings:
        logger.warning(
            "Stack-up warning: %s",
            warning,
            extra={"method": AnalysisMethod(analysis.analysis_method).value},
        )
    return CalculationSuccess(calculate_stackup(analysis))


def format_result(value: float, decimals: int, unit: str) -> str:
    """Render a stack value for display, e.g. ``0.112 mm``."""
    text = f"{round_to(value, decimals):.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text} {getattr(unit, 'value', unit)}"
