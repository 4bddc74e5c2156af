"""Canonical JSON schemas for frames and calculator inputs.

Parse camelCase JSON documents into kernel value objects. Enumerations are
closed and rejected here; numeric invariants of a frame (negative
tolerance, duplicate datums, composite ordering) are deliberately left to
the rule engine so they surface as coded issues.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .calculators.flatness import FlatnessInput, SurfacePoint
from .calculators.perpendicularity import PerpendicularityInput
from .calculators.position import MeasuredPosition, PositionInput, TruePosition
from .calculators.profile import ProfileInput, ProfilePoint, ProfileZoneType
from .calculators.types import SizeDimensionInput
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
from .symbols import Characteristic, FeatureType, MaterialCondition, Unit, ZoneShape


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DatumSchema(_CamelModel):
    id: str = Field(min_length=1)
    material_condition: Optional[MaterialCondition] = Field(
        default=None, alias="materialCondition"
    )

    def to_model(self) -> DatumReference:
        return DatumReference(id=self.id, material_condition=self.material_condition)


def _coerce_datums(value: Any) -> Any:
    # Bare letters ("A") are shorthand for {"id": "A"}
    if isinstance(value, list):
        return [{"id": v} if isinstance(v, str) else v for v in value]
    return value


DatumList = Annotated[List[DatumSchema], BeforeValidator(_coerce_datums)]


class ToleranceSchema(_CamelModel):
    value: float
    diameter: bool = False
    material_condition: Optional[MaterialCondition] = Field(
        default=None, alias="materialCondition"
    )
    zone_shape: Optional[ZoneShape] = Field(default=None, alias="zoneShape")

    def to_model(self) -> ToleranceSpec:
        return ToleranceSpec(
            value=self.value,
            diameter=self.diameter,
            material_condition=self.material_condition,
            zone_shape=self.zone_shape,
        )


class CompositeSegmentSchema(_CamelModel):
    tolerance: ToleranceSchema
    datums: DatumList = Field(default_factory=list)


class CompositeSchema(_CamelModel):
    kind: CompositeKind = Field(default=CompositeKind.COMPOSITE, alias="type")
    segments: List[CompositeSegmentSchema] = Field(default_factory=list)

    def to_model(self) -> CompositeSpec:
        return CompositeSpec(
            kind=self.kind,
            segments=[
                CompositeSegment(
                    tolerance=s.tolerance.to_model(),
                    datums=[d.to_model() for d in s.datums],
                )
                for s in self.segments
            ],
        )


class PatternSchema(_CamelModel):
    count: Optional[int] = None
    note: Optional[str] = None


class ProjectedZoneSchema(_CamelModel):
    height: float


class SizeDimensionSchema(_CamelModel):
    nominal: float
    tolerance_plus: float = Field(default=0.0, alias="tolerancePlus")
    tolerance_minus: float = Field(default=0.0, alias="toleranceMinus")


class FcfSchema(_CamelModel):
    """Canonical feature control frame document."""

    characteristic: Characteristic
    feature_type: Optional[FeatureType] = Field(default=None, alias="featureType")
    source_unit: Unit = Field(default=Unit.MM, alias="sourceUnit")
    tolerance: ToleranceSchema
    datums: DatumList = Field(default_factory=list)
    modifiers: List[str] = Field(default_factory=list)
    pattern: Optional[PatternSchema] = None
    size_dimension: Optional[SizeDimensionSchema] = Field(default=None, alias="sizeDimension")
    projected_zone: Optional[ProjectedZoneSchema] = Field(default=None, alias="projectedZone")
    composite: Optional[CompositeSchema] = None
    notes: List[str] = Field(default_factory=list)

    def to_model(self) -> FeatureControlFrame:
        return FeatureControlFrame(
            characteristic=self.characteristic,
            feature_type=self.feature_type,
            tolerance=self.tolerance.to_model(),
            datums=[d.to_model() for d in self.datums],
            modifiers=list(self.modifiers),
            projected_zone=(
                ProjectedZone(height=self.projected_zone.height)
                if self.projected_zone is not None
                else None
            ),
            pattern=(
                PatternSpec(count=self.pattern.count, note=self.pattern.note)
                if self.pattern is not None
                else None
            ),
            composite=self.composite.to_model() if self.composite is not None else None,
            size_dimension=(
                SizeDimension(
                    nominal=self.size_dimension.nominal,
                    tolerance_plus=self.size_dimension.tolerance_plus,
                    tolerance_minus=self.size_dimension.tolerance_minus,
                )
                if self.size_dimension is not None
                else None
            ),
            source_unit=self.source_unit,
            notes=list(self.notes),
        )


def parse_fcf(data: Dict[str, Any]) -> FeatureControlFrame:
    """Parse a canonical FCF document; raises pydantic.ValidationError."""
    return FcfSchema.model_validate(data).to_model()


# ---------------------------------------------------------------------------
# Calculator inputs
# ---------------------------------------------------------------------------


class _CalculatorSchema(_CamelModel):
    unit: Unit = Unit.MM
    precision: Optional[int] = None


class SizeDimensionInputSchema(_CamelModel):
    nominal: float
    tolerance_plus: float = Field(default=0.0, alias="tolerancePlus")
    tolerance_minus: float = Field(default=0.0, alias="toleranceMinus")

    def to_model(self) -> SizeDimensionInput:
        return SizeDimensionInput(
            nominal=self.nominal,
            tolerance_plus=self.tolerance_plus,
            tolerance_minus=self.tolerance_minus,
        )


class TruePositionSchema(_CamelModel):
    basic_x: float = Field(alias="basicX")
    basic_y: float = Field(alias="basicY")
    basic_z: Optional[float] = Field(default=None, alias="basicZ")


class MeasuredPositionSchema(_CamelModel):
    actual_x: float = Field(alias="actualX")
    actual_y: float = Field(alias="actualY")
    actual_size: float = Field(alias="actualSize")
    actual_z: Optional[float] = Field(default=None, alias="actualZ")


class PositionInputSchema(_CalculatorSchema):
    geometric_tolerance: float = Field(alias="geometricTolerance")
    material_condition: MaterialCondition = Field(
        default=MaterialCondition.RFS, alias="materialCondition"
    )
    feature_type: FeatureType = Field(alias="featureType")
    size_dimension: SizeDimensionInputSchema = Field(alias="sizeDimension")
    true_position: TruePositionSchema = Field(alias="truePosition")
    measured: MeasuredPositionSchema
    diametral_zone: bool = Field(default=True, alias="diametralZone")

    def to_model(self) -> PositionInput:
        return PositionInput(
            geometric_tolerance=self.geometric_tolerance,
            material_condition=self.material_condition,
            feature_type=self.feature_type,
            size_dimension=self.size_dimension.to_model(),
            true_position=TruePosition(**self.true_position.model_dump()),
            measured=MeasuredPosition(**self.measured.model_dump()),
            diametral_zone=self.diametral_zone,
            unit=self.unit,
            precision=self.precision,
        )


class SurfacePointSchema(_CamelModel):
    x: float
    y: float
    z: float


class FlatnessInputSchema(_CalculatorSchema):
    tolerance: float
    measured_points: List[SurfacePointSchema] = Field(
        default_factory=list, alias="measuredPoints"
    )
    total_indicator_reading: Optional[float] = Field(default=None, alias="totalIndicatorReading")

    def to_model(self) -> FlatnessInput:
        return FlatnessInput(
            tolerance=self.tolerance,
            measured_points=[SurfacePoint(p.x, p.y, p.z) for p in self.measured_points],
            total_indicator_reading=self.total_indicator_reading,
            unit=self.unit,
            precision=self.precision,
        )


class PerpendicularityInputSchema(_CalculatorSchema):
    tolerance: float
    feature_type: FeatureType = Field(alias="featureType")
    material_condition: MaterialCondition = Field(
        default=MaterialCondition.RFS, alias="materialCondition"
    )
    size_dimension: Optional[SizeDimensionInputSchema] = Field(
        default=None, alias="sizeDimension"
    )
    actual_size: Optional[float] = Field(default=None, alias="actualSize")
    linear_deviation: Optional[float] = Field(default=None, alias="linearDeviation")
    angular_deviation: Optional[float] = Field(default=None, alias="angularDeviation")
    measurement_length: Optional[float] = Field(default=None, alias="measurementLength")

    def to_model(self) -> PerpendicularityInput:
        return PerpendicularityInput(
            tolerance=self.tolerance,
            feature_type=self.feature_type,
            material_condition=self.material_condition,
            size_dimension=self.size_dimension.to_model() if self.size_dimension else None,
            actual_size=self.actual_size,
            linear_deviation=self.linear_deviation,
            angular_deviation=self.angular_deviation,
            measurement_length=self.measurement_length,
            unit=self.unit,
            precision=self.precision,
        )


class ProfilePointSchema(_CamelModel):
    position: float = 0.0
    deviation: float


class ProfileInputSchema(_CalculatorSchema):
    tolerance: float
    zone_type: ProfileZoneType = Field(default=ProfileZoneType.BILATERAL, alias="zoneType")
    measured_points: List[ProfilePointSchema] = Field(default_factory=list, alias="measuredPoints")
    outside_amount: Optional[float] = Field(default=None, alias="outsideAmount")
    material_condition: Optional[MaterialCondition] = Field(
        default=None, alias="materialCondition"
    )
    form_only: bool = Field(default=False, alias="formOnly")

    def to_model(self) -> ProfileInput:
        return ProfileInput(
            tolerance=self.tolerance,
            zone_type=self.zone_type,
            measured_points=[ProfilePoint(p.position, p.deviation) for p in self.measured_points],
            outside_amount=self.outside_amount,
            material_condition=self.material_condition,
            form_only=self.form_only,
            unit=self.unit,
            precision=self.precision,
        )


INPUT_SCHEMAS: Dict[Characteristic, type] = {
    Characteristic.POSITION: PositionInputSchema,
    Characteristic.FLATNESS: FlatnessInputSchema,
    Characteristic.PERPENDICULARITY: PerpendicularityInputSchema,
    Characteristic.PROFILE: ProfileInputSchema,
}

CalculatorInput = Union[PositionInput, FlatnessInput, PerpendicularityInput, ProfileInput]


def parse_position_input(data: Dict[str, Any]) -> PositionInput:
    return PositionInputSchema.model_validate(data).to_model()


def parse_flatness_input(data: Dict[str, Any]) -> FlatnessInput:
    return FlatnessInputSchema.model_validate(data).to_model()


def parse_perpendicularity_input(data: Dict[str, Any]) -> PerpendicularityInput:
    return PerpendicularityInputSchema.model_validate(data).to_model()


def parse_profile_input(data: Dict[str, Any]) -> ProfileInput:
    return ProfileInputSchema.model_validate(data).to_model()


def parse_calculator_input(characteristic: Characteristic, data: Dict[str, Any]) -> CalculatorInput:
    """Parse the input document for a characteristic's calculator.

    Raises:
        KeyError: no calculator input schema for the characteristic
        pydantic.ValidationError: the document does not match the schema
    """
    schema = INPUT_SCHEMAS[Characteristic(characteristic)]
    return schema.model_validate(data).to_model()
