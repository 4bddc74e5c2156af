"""
FCF Rule Engine.

Checks a feature control frame against ASME Y14.5-2018 composition rules.
Each rule is an independent predicate object carrying its code, category
and severity; the engine evaluates every registered rule in registration
order and aggregates the findings. Validation never raises: a malformed
frame produces issues, not exceptions.

Example:
    >>> fcf = FeatureControlFrame(
    ...     characteristic=Characteristic.FLATNESS,
    ...     feature_type=FeatureType.SURFACE,
    ...     tolerance=ToleranceSpec(value=0.05),
    ...     datums=[DatumReference("A")],
    ... )
    >>> validate_fcf(fcf).codes
    ['E002']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .issues import (
    ISSUE_MESSAGES,
    IssueContext,
    RuleCategory,
    Severity,
    ValidationIssue,
    ValidationResult,
    build_result,
)
from .model import CompositeKind, FeatureControlFrame
from .symbols import (
    BONUS_CONDITIONS,
    NON_ROTATIONAL_FEATURES,
    Characteristic,
    FeatureType,
    FrameModifier,
    GDTCategory,
    MaterialCondition,
    ZoneShape,
    get_category,
    is_feature_of_size,
)

logger = logging.getLogger(__name__)


FORM_CHARACTERISTICS = frozenset(
    c for c in Characteristic if get_category(c) == GDTCategory.FORM
)
ORIENTATION_CHARACTERISTICS = frozenset(
    c for c in Characteristic if get_category(c) == GDTCategory.ORIENTATION
)
RUNOUT_CHARACTERISTICS = frozenset(
    c for c in Characteristic if get_category(c) == GDTCategory.RUNOUT
)
DATUM_REQUIRED_CHARACTERISTICS = (
    ORIENTATION_CHARACTERISTICS | RUNOUT_CHARACTERISTICS | {Characteristic.POSITION}
)
RECOGNIZED_MODIFIERS = frozenset(m.value for m in FrameModifier)
MAX_DATUM_REFERENCES = 3


@dataclass(frozen=True)
class Finding:
    """Location of a rule violation inside the frame."""

    path: str
    suggestion: Optional[str] = None


def _always(fcf: FeatureControlFrame) -> bool:
    return True


@dataclass(frozen=True)
class Rule:
    """A registered FCF rule.

    ``evaluate`` yields findings; the rule turns them into issues tagged
    with its own code and severity.
    """

    code: str
    category: RuleCategory
    description: str
    severity: Severity
    evaluate: Callable[[FeatureControlFrame], Iterable[Finding]]
    applies: Callable[[FeatureControlFrame], bool] = _always
    message: Optional[str] = None

    def check(self, fcf: FeatureControlFrame) -> List[ValidationIssue]:
        if not self.applies(fcf):
            return []
        message = self.message or ISSUE_MESSAGES.get(self.code, self.description)
        return [
            ValidationIssue(
                code=self.code,
                message=message,
                path=finding.path,
                severity=self.severity,
                context=IssueContext(
                    characteristic=fcf.characteristic,
                    feature_type=fcf.feature_type,
                    suggestion=finding.suggestion,
                ),
            )
            for finding in self.evaluate(fcf)
        ]


# Rule descriptors are exposed as the rules themselves
RuleDescriptor = Rule


class RuleRegistry:
    """Ordered, immutable collection of rules.

    Extending the rule set produces a new registry; the default registry is
    never modified.
    """

    def __init__(self, rules: Iterable[Rule] = ()):
        ordered = tuple(rules)
        seen: Dict[str, Rule] = {}
        for rule in ordered:
            if rule.code in seen:
                raise ValueError(f"Duplicate rule code: {rule.code}")
            seen[rule.code] = rule
        self._rules: Tuple[Rule, ...] = ordered
        self._by_code = seen

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return self._rules

    def get(self, code: str) -> Optional[Rule]:
        return self._by_code.get(code)

    def by_category(self, category: RuleCategory) -> Tuple[Rule, ...]:
        return tuple(r for r in self._rules if r.category == category)

    def with_rules(self, *extra: Rule) -> "RuleRegistry":
        return RuleRegistry(self._rules + tuple(extra))


# ---------------------------------------------------------------------------
# Material condition rules
# ---------------------------------------------------------------------------


def _form_material_condition(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if fcf.tolerance.material_condition in BONUS_CONDITIONS:
        yield Finding(
            "tolerance.materialCondition",
            f"Remove {fcf.tolerance.material_condition.value}; "
            f"{fcf.characteristic.value} applies regardless of feature size",
        )
    for i, datum in enumerate(fcf.datums):
        if datum.material_condition in BONUS_CONDITIONS:
            yield Finding(
                f"datums[{i}].materialCondition",
                "Form tolerances take no datum material boundary",
            )


def _material_condition_without_size(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if fcf.tolerance.material_condition in BONUS_CONDITIONS and not is_feature_of_size(
        fcf.feature_type
    ):
        feature = fcf.feature_type.value if fcf.feature_type else "unspecified feature"
        yield Finding(
            "tolerance.materialCondition",
            f"MMC/LMC needs a hole, slot, pin or boss, not a {feature}",
        )


def _runout_material_condition(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if fcf.tolerance.material_condition in BONUS_CONDITIONS:
        yield Finding("tolerance.materialCondition", "Remove the material condition modifier")


def _datum_material_boundary(fcf: FeatureControlFrame) -> Iterator[Finding]:
    for i, datum in enumerate(fcf.datums):
        if datum.material_condition in BONUS_CONDITIONS:
            yield Finding(
                f"datums[{i}].materialCondition",
                f"Verify datum {datum.id} is a feature of size",
            )


def _explicit_rfs(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if fcf.tolerance.material_condition == MaterialCondition.RFS:
        yield Finding(
            "tolerance.materialCondition",
            "RFS applies by default under ASME Y14.5-2018; the modifier can be omitted",
        )


# ---------------------------------------------------------------------------
# Datum requirement rules
# ---------------------------------------------------------------------------


def _form_with_datums(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if fcf.datums:
        yield Finding("datums", "Remove datum references from the form tolerance")


def _missing_datums(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if not fcf.datums:
        yield Finding("datums", f"Add a datum reference frame for {fcf.characteristic.value}")


def _duplicate_datums(fcf: FeatureControlFrame) -> Iterator[Finding]:
    seen = set()
    for i, datum in enumerate(fcf.datums):
        if datum.id in seen:
            yield Finding(f"datums[{i}]", f"Datum {datum.id} is already referenced")
        else:
            seen.add(datum.id)


def _too_many_datums(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if len(fcf.datums) > MAX_DATUM_REFERENCES:
        yield Finding("datums", "Use at most primary, secondary and tertiary datums")


def _single_datum(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if len(fcf.datums) == 1:
        yield Finding("datums", "Consider secondary and tertiary datums to lock all degrees of freedom")


def _profile_without_datums(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if not fcf.datums:
        yield Finding("datums", "Add datums to control location and orientation of the profile")


# ---------------------------------------------------------------------------
# Composite configuration rules
# ---------------------------------------------------------------------------


def _composite_not_position(fcf: FeatureControlFrame) -> Iterator[Finding]:
    yield Finding("composite", "Use separate frames for this characteristic")


def _composite_segment_count(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if len(fcf.composite.segments) < 2:
        yield Finding("composite.segments", "A composite frame needs at least two segments")


def _composite_tolerance_order(fcf: FeatureControlFrame) -> Iterator[Finding]:
    segments = fcf.composite.segments
    for i in range(1, len(segments)):
        upper = segments[i - 1].tolerance.value
        lower = segments[i].tolerance.value
        if lower >= upper:
            yield Finding(
                f"composite.segments[{i}].tolerance.value",
                f"Segment {i + 1} tolerance ({lower}) must be less than segment {i} ({upper})",
            )


def _composite_primary_datum(fcf: FeatureControlFrame) -> Iterator[Finding]:
    segments = fcf.composite.segments
    if not segments or not segments[0].datums:
        return
    primary = segments[0].datums[0].id
    for i in range(1, len(segments)):
        datums = segments[i].datums
        if datums and datums[0].id != primary:
            yield Finding(
                f"composite.segments[{i}].datums[0]",
                f"Use primary datum {primary} in segment {i + 1}",
            )


def _composite_datum_count(fcf: FeatureControlFrame) -> Iterator[Finding]:
    segments = fcf.composite.segments
    for i in range(1, len(segments)):
        upper_count = len(segments[i - 1].datums)
        lower_count = len(segments[i].datums)
        if lower_count > upper_count:
            yield Finding(
                f"composite.segments[{i}].datums",
                f"Segment {i + 1} references {lower_count} datums, "
                f"segment {i} only {upper_count}",
            )


def _composite_without_pattern(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if fcf.pattern is None:
        yield Finding("pattern", "Annotate the pattern, e.g. 4X")


# ---------------------------------------------------------------------------
# Tolerance zone rules
# ---------------------------------------------------------------------------


def _negative_tolerance(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if fcf.tolerance.value < 0:
        yield Finding("tolerance.value", "Use a tolerance of zero or greater")
    if fcf.composite is not None:
        for i, segment in enumerate(fcf.composite.segments):
            if segment.tolerance.value < 0:
                yield Finding(
                    f"composite.segments[{i}].tolerance.value",
                    "Use a tolerance of zero or greater",
                )


def _projected_zone_height(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if fcf.projected_zone.height <= 0:
        yield Finding("projectedZone.height", "Specify the projection height")


def _projected_zone_modifier(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if not fcf.has_modifier(FrameModifier.PROJECTED_TOLERANCE_ZONE):
        yield Finding("modifiers", "Add the projected tolerance zone modifier")


def _diameter_zone_on_flat(fcf: FeatureControlFrame) -> Iterator[Finding]:
    tolerance = fcf.tolerance
    if tolerance.diameter or tolerance.zone_shape == ZoneShape.CYLINDRICAL:
        yield Finding(
            "tolerance.diameter",
            f"A {fcf.feature_type.value} takes a two-parallel-planes zone",
        )


def _negative_size_tolerance(fcf: FeatureControlFrame) -> Iterator[Finding]:
    size = fcf.size_dimension
    if size.tolerance_plus < 0:
        yield Finding("sizeDimension.tolerancePlus")
    if size.tolerance_minus < 0:
        yield Finding("sizeDimension.toleranceMinus")


def _zero_tolerance_without_bonus(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if fcf.tolerance.value == 0 and fcf.tolerance.material_condition not in BONUS_CONDITIONS:
        yield Finding("tolerance.value", "Zero tolerance is meaningful only at MMC or LMC")


# ---------------------------------------------------------------------------
# Feature type rules
# ---------------------------------------------------------------------------


def _surface_diameter(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if fcf.tolerance.diameter:
        yield Finding("tolerance.diameter", "Remove the diameter symbol")


def _plane_material_condition(fcf: FeatureControlFrame) -> Iterator[Finding]:
    if fcf.tolerance.material_condition in BONUS_CONDITIONS:
        yield Finding("tolerance.materialCondition", "A plane has no size to modify")


def _pattern_count(fcf: FeatureControlFrame) -> Iterator[Finding]:
    count = fcf.pattern.count
    if count is not None and count < 1:
        yield Finding("pattern.count")


# ---------------------------------------------------------------------------
# Modifier compatibility rules
# ---------------------------------------------------------------------------


def _unrecognized_modifiers(fcf: FeatureControlFrame) -> Iterator[Finding]:
    for i, modifier in enumerate(fcf.modifiers):
        if modifier not in RECOGNIZED_MODIFIERS:
            yield Finding(f"modifiers[{i}]", f"Unknown modifier: {modifier}")


def _uses_bonus_condition(fcf: FeatureControlFrame) -> bool:
    return fcf.tolerance.material_condition in BONUS_CONDITIONS


_BUILTIN_RULES: List[Rule] = [
    Rule(
        code="E001",
        category=RuleCategory.MATERIAL_CONDITION,
        description="Form tolerances cannot use MMC or LMC",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.characteristic in FORM_CHARACTERISTICS,
        evaluate=_form_material_condition,
    ),
    Rule(
        code="E007",
        category=RuleCategory.MATERIAL_CONDITION,
        description="MMC/LMC requires a feature of size",
        severity=Severity.ERROR,
        applies=_uses_bonus_condition,
        evaluate=_material_condition_without_size,
    ),
    Rule(
        code="E011",
        category=RuleCategory.MATERIAL_CONDITION,
        description="Runout tolerances cannot use MMC or LMC",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.characteristic in RUNOUT_CHARACTERISTICS,
        evaluate=_runout_material_condition,
    ),
    Rule(
        code="W006",
        category=RuleCategory.MATERIAL_CONDITION,
        description="Datum MMB/LMB requires the datum feature to be a feature of size",
        severity=Severity.WARNING,
        evaluate=_datum_material_boundary,
    ),
    Rule(
        code="E002",
        category=RuleCategory.DATUM_REQUIREMENTS,
        description="Form tolerances cannot reference datums",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.characteristic in FORM_CHARACTERISTICS,
        evaluate=_form_with_datums,
    ),
    Rule(
        code="E006",
        category=RuleCategory.DATUM_REQUIREMENTS,
        description="Orientation, location and runout tolerances require datums",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.characteristic in DATUM_REQUIRED_CHARACTERISTICS,
        evaluate=_missing_datums,
    ),
    Rule(
        code="E017",
        category=RuleCategory.DATUM_REQUIREMENTS,
        description="Datum references must be unique",
        severity=Severity.ERROR,
        evaluate=_duplicate_datums,
    ),
    Rule(
        code="W007",
        category=RuleCategory.DATUM_REQUIREMENTS,
        description="More than three datum references",
        severity=Severity.WARNING,
        evaluate=_too_many_datums,
    ),
    Rule(
        code="E009",
        category=RuleCategory.COMPOSITE_CONFIGURATION,
        description="Composite frames are supported for position only",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.is_composite()
        and fcf.characteristic != Characteristic.POSITION,
        evaluate=_composite_not_position,
    ),
    Rule(
        code="E004",
        category=RuleCategory.COMPOSITE_CONFIGURATION,
        description="Composite frames require at least two segments",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.is_composite(),
        evaluate=_composite_segment_count,
    ),
    Rule(
        code="E021",
        category=RuleCategory.COMPOSITE_CONFIGURATION,
        description="Composite segment tolerances must strictly decrease",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.is_composite(),
        evaluate=_composite_tolerance_order,
    ),
    Rule(
        code="E022",
        category=RuleCategory.COMPOSITE_CONFIGURATION,
        description="Composite segments must share the top segment's primary datum",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.is_composite()
        and fcf.composite.kind == CompositeKind.COMPOSITE,
        evaluate=_composite_primary_datum,
    ),
    Rule(
        code="E023",
        category=RuleCategory.COMPOSITE_CONFIGURATION,
        description="Lower composite segments cannot reference more datums",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.is_composite(),
        evaluate=_composite_datum_count,
    ),
    Rule(
        code="E031",
        category=RuleCategory.TOLERANCE_ZONE,
        description="Tolerance values must be non-negative",
        severity=Severity.ERROR,
        evaluate=_negative_tolerance,
    ),
    Rule(
        code="E034",
        category=RuleCategory.TOLERANCE_ZONE,
        description="Projected zone height must be positive",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.projected_zone is not None,
        evaluate=_projected_zone_height,
    ),
    Rule(
        code="E008",
        category=RuleCategory.TOLERANCE_ZONE,
        description="Projected zone requires the projected tolerance zone modifier",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.projected_zone is not None,
        evaluate=_projected_zone_modifier,
    ),
    Rule(
        code="E032",
        category=RuleCategory.TOLERANCE_ZONE,
        description="Diameter zones require a rotational feature",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.feature_type in NON_ROTATIONAL_FEATURES,
        evaluate=_diameter_zone_on_flat,
    ),
    Rule(
        code="E036",
        category=RuleCategory.TOLERANCE_ZONE,
        description="Size dimension tolerances must be non-negative",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.size_dimension is not None,
        evaluate=_negative_size_tolerance,
    ),
    Rule(
        code="E041",
        category=RuleCategory.FEATURE_TYPE,
        description="Surfaces cannot carry a diameter symbol",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.feature_type == FeatureType.SURFACE,
        evaluate=_surface_diameter,
    ),
    Rule(
        code="E042",
        category=RuleCategory.FEATURE_TYPE,
        description="Planes cannot use MMC or LMC",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.feature_type == FeatureType.PLANE,
        evaluate=_plane_material_condition,
    ),
    Rule(
        code="E035",
        category=RuleCategory.FEATURE_TYPE,
        description="Pattern count must be at least 1",
        severity=Severity.ERROR,
        applies=lambda fcf: fcf.pattern is not None,
        evaluate=_pattern_count,
    ),
    Rule(
        code="E005",
        category=RuleCategory.MODIFIER_COMPATIBILITY,
        description="Frame modifiers must be recognized",
        severity=Severity.ERROR,
        evaluate=_unrecognized_modifiers,
    ),
    Rule(
        code="W001",
        category=RuleCategory.MATERIAL_CONDITION,
        description="Explicit RFS is redundant",
        severity=Severity.WARNING,
        evaluate=_explicit_rfs,
    ),
    Rule(
        code="W002",
        category=RuleCategory.DATUM_REQUIREMENTS,
        description="Position or orientation with a single datum",
        severity=Severity.WARNING,
        applies=lambda fcf: not fcf.is_composite()
        and (
            fcf.characteristic == Characteristic.POSITION
            or fcf.characteristic in ORIENTATION_CHARACTERISTICS
        ),
        evaluate=_single_datum,
    ),
    Rule(
        code="W003",
        category=RuleCategory.COMPOSITE_CONFIGURATION,
        description="Composite frame without a pattern",
        severity=Severity.WARNING,
        applies=lambda fcf: fcf.is_composite(),
        evaluate=_composite_without_pattern,
    ),
    Rule(
        code="W004",
        category=RuleCategory.DATUM_REQUIREMENTS,
        description="Profile without datums",
        severity=Severity.WARNING,
        applies=lambda fcf: fcf.characteristic == Characteristic.PROFILE,
        evaluate=_profile_without_datums,
    ),
    Rule(
        code="W005",
        category=RuleCategory.TOLERANCE_ZONE,
        description="Zero tolerance without a material condition",
        severity=Severity.WARNING,
        evaluate=_zero_tolerance_without_bonus,
    ),
]

DEFAULT_REGISTRY = RuleRegistry(_BUILTIN_RULES)


def _collect(fcf: FeatureControlFrame, rules: Iterable[Rule]) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for rule in rules:
        issues.extend(rule.check(fcf))
    return issues


def validate_fcf(
    fcf: FeatureControlFrame, registry: Optional[RuleRegistry] = None
) -> ValidationResult:
    """
    Validate a feature control frame against every registered rule.

    Args:
        fcf: Frame to check
        registry: Rule set to apply (default rules when omitted)

    Returns:
        ValidationResult; ``valid`` is False iff any error-severity issue
        was found. Warnings never affect validity.
    """
    rules = registry if registry is not None else DEFAULT_REGISTRY
    result = build_result(_collect(fcf, rules))
    logger.debug(
        "FCF validated",
        extra={
            "characteristic": fcf.characteristic.value,
            "error_count": result.summary.error_count,
            "warning_count": result.summary.warning_count,
        },
    )
    return result


def validate_fcf_strict(
    fcf: FeatureControlFrame, registry: Optional[RuleRegistry] = None
) -> bool:
    """True when the frame has no error-severity issues."""
    return validate_fcf(fcf, registry).valid


def validate_by_category(
    fcf: FeatureControlFrame,
    category: RuleCategory,
    registry: Optional[RuleRegistry] = None,
) -> List[ValidationIssue]:
    """Issues raised by the rules of a single category."""
    rules = registry if registry is not None else DEFAULT_REGISTRY
    return _collect(fcf, rules.by_category(RuleCategory(category)))


def get_rules(registry: Optional[RuleRegistry] = None) -> Tuple[Rule, ...]:
    return (registry if registry is not None else DEFAULT_REGISTRY).rules


def get_rules_by_category(
    category: RuleCategory, registry: Optional[RuleRegistry] = None
) -> Tuple[Rule, ...]:
    rules = registry if registry is not None else DEFAULT_REGISTRY
    return rules.by_category(RuleCategory(category))
