"""
Validation Issue Types.

Issue records emitted by the FCF rule engine and the catalog of messages
keyed by rule code. ``Exxx`` codes block a frame, ``Wxxx`` codes are
advisory.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .symbols import Characteristic, FeatureType


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class RuleCategory(str, Enum):
    """Groupings of FCF rules."""

    MATERIAL_CONDITION = "material-condition"
    DATUM_REQUIREMENTS = "datum-requirements"
    COMPOSITE_CONFIGURATION = "composite-configuration"
    TOLERANCE_ZONE = "tolerance-zone"
    FEATURE_TYPE = "feature-type"
    MODIFIER_COMPATIBILITY = "modifier-compatibility"


ISSUE_MESSAGES: Dict[str, str] = {
    # Material condition
    "E001": "MMC not permitted for this characteristic",
    "E007": "Material condition requires a feature of size",
    "E011": "Runout tolerances are always applied RFS",
    "W001": "RFS is the default and need not be specified",
    "W006": "Datum material boundary requires a datum feature of size",
    # Datum requirements
    "E002": "Datums not allowed for this form tolerance",
    "E006": "Datum reference required for this characteristic",
    "E017": "Duplicate datum reference",
    "W002": "Single datum may leave the feature under-constrained",
    "W004": "Profile without datums controls form only",
    "W007": "More than three datum references",
    # Composite configuration
    "E004": "Invalid composite configuration",
    "E009": "Composite frames currently supported for position only",
    "E021": "Composite segment tolerances must decrease from top to bottom",
    "E022": "Composite segments must share the primary datum",
    "E023": "Lower composite segments cannot add datum references",
    "W003": "Composite frame without a pattern annotation",
    # Tolerance zone
    "E008": "Projected tolerance zone requires projected modifier",
    "E031": "Tolerance value cannot be negative",
    "E032": "Diameter zone not allowed for this feature type",
    "E034": "Projected zone height must be positive",
    "E036": "Size tolerance cannot be negative",
    "W005": "Zero tolerance without MMC or LMC allows no variation",
    # Feature type
    "E035": "Pattern count must be at least 1",
    "E041": "Diameter symbol not allowed on a surface",
    "E042": "Material condition not applicable to a plane",
    # Modifiers
    "E005": "Incompatible modifiers for selected feature type",
}


@dataclass(frozen=True)
class IssueContext:
    characteristic: Optional[Characteristic] = None
    feature_type: Optional[FeatureType] = None
    suggestion: Optional[str] = None


@dataclass(frozen=True)
class ValidationIssue:
    """A single rule finding located by a JSON path into the frame."""

    code: str
    message: str
    path: str
    severity: Severity
    context: Optional[IssueContext] = None


@dataclass(frozen=True)
class ValidationSummary:
    error_count: int
    warning_count: int


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    summary: ValidationSummary = ValidationSummary(0, 0)

    @property
    def codes(self) -> List[str]:
        return [issue.code for issue in self.issues]


def build_result(issues: List[ValidationIssue]) -> ValidationResult:
    """Partition issues by severity into a result."""
    errors = [i for i in issues if i.severity == Severity.ERROR]
    warnings = [i for i in issues if i.severity == Severity.WARNING]
    return ValidationResult(
        valid=not errors,
        issues=list(issues),
        errors=errors,
        warnings=warnings,
        summary=ValidationSummary(error_count=len(errors), warning_count=len(warnings)),
    )
