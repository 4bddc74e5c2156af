"""
Tolerance Stack-up Analysis.

Worst-case, RSS and six-sigma propagation of dimensional tolerances
through a one-dimensional assembly chain.
"""

from .models import (
    AcceptanceCriteria,
    AnalysisMethod,
    DimensionContribution,
    DimensionSign,
    PositiveDirection,
    StackupAnalysis,
    StackupDimension,
    StackupResult,
    StackupValidationResult,
    DEFAULT_PROCESS_CAPABILITY,
)
from .calculator import (
    analyze_stackup,
    calculate_contributions,
    calculate_mean_shift,
    calculate_nominal,
    calculate_rss,
    calculate_six_sigma,
    calculate_stackup,
    calculate_total_tolerance,
    calculate_worst_case,
    check_acceptance,
    compare_all_methods,
    format_result,
    get_bilateral_tolerance,
    get_default_process_capability,
    round_to,
)
from .validation import validate_stackup_input
from .schemas import parse_stackup_analysis

__all__ = [
    # Models
    "AcceptanceCriteria",
    "AnalysisMethod",
    "DimensionContribution",
    "DimensionSign",
    "PositiveDirection",
    "StackupAnalysis",
    "StackupDimension",
    "StackupResult",
    "StackupValidationResult",
    "DEFAULT_PROCESS_CAPABILITY",
    # Calculator
    "analyze_stackup",
    "calculate_contributions",
    "calculate_mean_shift",
    "calculate_nominal",
    "calculate_rss",
    "calculate_six_sigma",
    "calculate_stackup",
    "calculate_total_tolerance",
    "calculate_worst_case",
    "check_acceptance",
    "compare_all_methods",
    "format_result",
    "get_bilateral_tolerance",
    "get_default_process_capability",
    "round_to",
    # Validation
    "validate_stackup_input",
    # Schemas
    "parse_stackup_analysis",
]
