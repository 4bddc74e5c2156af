"""
GD&T (Geometric Dimensioning and Tolerancing) Kernel.

Feature control frame model, rule-based frame validation and the
characteristic tolerance calculators.

Reference Standards:
- ASME Y14.5-2018 - Dimensioning and Tolerancing
"""

from .symbols import (
    Characteristic,
    FeatureClass,
    FeatureType,
    FrameModifier,
    GDTCategory,
    MaterialCondition,
    Unit,
    ZoneShape,
    get_gdt_symbol,
    get_characteristics,
    GDT_SYMBOLS,
)
from .model import (
    CompositeKind,
    CompositeSegment,
    CompositeSpec,
    DatumReference,
    FeatureControlFrame,
    PatternSpec,
    ProjectedZone,
    SizeDimension,
    ToleranceSpec,
)
from .issues import (
    IssueContext,
    RuleCategory,
    Severity,
    ValidationIssue,
    ValidationResult,
    ValidationSummary,
    ISSUE_MESSAGES,
)
from .rules import (
    Finding,
    Rule,
    RuleDescriptor,
    RuleRegistry,
    get_rules,
    get_rules_by_category,
    validate_by_category,
    validate_fcf,
    validate_fcf_strict,
    DEFAULT_REGISTRY,
)
from .calculators import (
    CalcError,
    CalculationFailure,
    CalculationSuccess,
    SizeLimits,
    calculate,
    calculate_flatness,
    calculate_perpendicularity,
    calculate_position,
    calculate_profile,
    calculate_size_limits,
)
from .schemas import parse_calculator_input, parse_fcf

__all__ = [
    # Symbols
    "Characteristic",
    "FeatureClass",
    "FeatureType",
    "FrameModifier",
    "GDTCategory",
    "MaterialCondition",
    "Unit",
    "ZoneShape",
    "get_gdt_symbol",
    "get_characteristics",
    "GDT_SYMBOLS",
    # Model
    "CompositeKind",
    "CompositeSegment",
    "CompositeSpec",
    "DatumReference",
    "FeatureControlFrame",
    "PatternSpec",
    "ProjectedZone",
    "SizeDimension",
    "ToleranceSpec",
    # Validation
    "IssueContext",
    "RuleCategory",
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSummary",
    "ISSUE_MESSAGES",
    "Finding",
    "Rule",
    "RuleDescriptor",
    "RuleRegistry",
    "get_rules",
    "get_rules_by_category",
    "validate_by_category",
    "validate_fcf",
    "validate_fcf_strict",
    "DEFAULT_REGISTRY",
    # Calculators
    "CalcError",
    "CalculationFailure",
    "CalculationSuccess",
    "SizeLimits",
    "calculate",
    "calculate_flatness",
    "calculate_perpendicularity",
    "calculate_position",
    "calculate_profile",
    "calculate_size_limits",
    # Schemas
    "parse_calculator_input",
    "parse_fcf",
]
