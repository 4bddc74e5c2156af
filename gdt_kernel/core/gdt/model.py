"""
Feature Control Frame Model.

Immutable value objects describing a feature control frame as authored.
Numeric and structural invariants (non-negative tolerance, unique datums,
composite ordering) are checked by the rule engine, not at construction,
so that an invalid frame can still be described and reported on.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .symbols import (
    Characteristic,
    FeatureType,
    FrameModifier,
    MaterialCondition,
    Unit,
    ZoneShape,
)


class CompositeKind(str, Enum):
    """Composite (shared primary) vs. multiple single-segment frames."""

    COMPOSITE = "composite"
    MULTI_SEGMENT = "multiSegment"


@dataclass(frozen=True)
class DatumReference:
    """A datum letter in the datum reference frame, with optional MMB/LMB."""

    id: str
    material_condition: Optional[MaterialCondition] = None


@dataclass(frozen=True)
class ToleranceSpec:
    """Tolerance compartment of the frame."""

    value: float
    diameter: bool = False  # Preceded by Ø
    material_condition: Optional[MaterialCondition] = None
    zone_shape: Optional[ZoneShape] = None


@dataclass(frozen=True)
class CompositeSegment:
    tolerance: ToleranceSpec
    datums: List[DatumReference] = field(default_factory=list)


@dataclass(frozen=True)
class CompositeSpec:
    """Stacked segments; index 0 is the pattern-locating (top) segment."""

    segments: List[CompositeSegment] = field(default_factory=list)
    kind: CompositeKind = CompositeKind.COMPOSITE


@dataclass(frozen=True)
class PatternSpec:
    count: Optional[int] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class ProjectedZone:
    height: float


@dataclass(frozen=True)
class SizeDimension:
    nominal: float
    tolerance_plus: float = 0.0
    tolerance_minus: float = 0.0


@dataclass(frozen=True)
class FeatureControlFrame:
    """A feature control frame as authored on the drawing."""

    characteristic: Characteristic
    tolerance: ToleranceSpec
    feature_type: Optional[FeatureType] = None
    datums: List[DatumReference] = field(default_factory=list)
    modifiers: List[str] = field(default_factory=list)  # FrameModifier values
    projected_zone: Optional[ProjectedZone] = None
    pattern: Optional[PatternSpec] = None
    composite: Optional[CompositeSpec] = None
    size_dimension: Optional[SizeDimension] = None
    source_unit: Unit = Unit.MM
    notes: List[str] = field(default_factory=list)

    @property
    def datum_ids(self) -> List[str]:
        return [d.id for d in self.datums]

    def has_modifier(self, modifier: FrameModifier) -> bool:
        return modifier.value in self.modifiers

    def is_composite(self) -> bool:
        return self.composite is not None
