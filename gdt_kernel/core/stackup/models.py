"""
Tolerance Stack-up Models.

Value objects for a one-dimensional tolerance chain and its analysis
result. Count and acceptance invariants are enforced by the schema layer;
the calculator accepts any analysis and stays total.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from gdt_kernel.core.gdt.symbols import Unit

# Process capability assumed when a dimension carries none
DEFAULT_PROCESS_CAPABILITY = 1.33
MIN_DIMENSIONS = 2
MAX_DIMENSIONS = 50


class AnalysisMethod(str, Enum):
    WORST_CASE = "worst-case"
    RSS = "rss"  # Root sum square
    SIX_SIGMA = "six-sigma"


class DimensionSign(str, Enum):
    """Direction of a link relative to the positive direction of the chain."""

    POSITIVE = "positive"
    NEGATIVE = "negative"


class PositiveDirection(str, Enum):
    LEFT_TO_RIGHT = "left-to-right"
    RIGHT_TO_LEFT = "right-to-left"
    BOTTOM_TO_TOP = "bottom-to-top"
    TOP_TO_BOTTOM = "top-to-bottom"


@dataclass(frozen=True)
class StackupDimension:
    """One link in the tolerance chain."""

    id: str
    name: str
    nominal: float
    tolerance_plus: float
    tolerance_minus: float
    sign: DimensionSign = DimensionSign.POSITIVE
    sensitivity_coefficient: float = 1.0
    process_capability: Optional[float] = None
    description: Optional[str] = None
    source_drawing: Optional[str] = None
    source_revision: Optional[str] = None

    @property
    def sign_factor(self) -> int:
        return 1 if self.sign == DimensionSign.POSITIVE else -1


@dataclass(frozen=True)
class AcceptanceCriteria:
    minimum: Optional[float] = None
    maximum: Optional[float] = None


@dataclass(frozen=True)
class StackupAnalysis:
    dimensions: List[StackupDimension] = field(default_factory=list)
    acceptance_criteria: AcceptanceCriteria = AcceptanceCriteria()
    analysis_method: AnalysisMethod = AnalysisMethod.WORST_CASE
    unit: Unit = Unit.MM
    name: str = ""
    measurement_objective: str = ""
    positive_direction: Optional[PositiveDirection] = None


@dataclass(frozen=True)
class DimensionContribution:
    dimension_id: str
    percent_contribution: float
    variance_contribution: float


@dataclass(frozen=True)
class AcceptanceCheck:
    passes: bool
    margin_to_minimum: Optional[float] = None
    margin_to_maximum: Optional[float] = None


@dataclass(frozen=True)
class StackupResult:
    nominal_result: float
    total_tolerance: float
    maximum_value: float
    minimum_value: float
    passes_acceptance_criteria: bool
    method: AnalysisMethod
    contributions: List[DimensionContribution] = field(default_factory=list)
    margin_to_minimum: Optional[float] = None
    margin_to_maximum: Optional[float] = None


@dataclass(frozen=True)
class StackupValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
