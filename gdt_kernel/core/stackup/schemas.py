"""Canonical JSON schema for tolerance stack-up analyses."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from gdt_kernel.core.gdt.symbols import Unit

from .models import (
    MAX_DIMENSIONS,
    MIN_DIMENSIONS,
    AcceptanceCriteria,
    AnalysisMethod,
    DimensionSign,
    PositiveDirection,
    StackupAnalysis,
    StackupDimension,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class StackupDimensionSchema(_CamelModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: Optional[str] = None
    nominal: float
    tolerance_plus: float = Field(ge=0, alias="tolerancePlus")
    tolerance_minus: float = Field(ge=0, alias="toleranceMinus")
    sign: DimensionSign
    sensitivity_coefficient: float = Field(default=1.0, alias="sensitivityCoefficient")
    process_capability: Optional[float] = Field(default=None, gt=0, alias="processCapability")
    source_drawing: Optional[str] = Field(default=None, alias="sourceDrawing")
    source_revision: Optional[str] = Field(default=None, alias="sourceRevision")

    def to_model(self) -> StackupDimension:
        return StackupDimension(
            id=self.id,
            name=self.name,
            nominal=self.nominal,
            tolerance_plus=self.tolerance_plus,
            tolerance_minus=self.tolerance_minus,
            sign=self.sign,
            sensitivity_coefficient=self.sensitivity_coefficient,
            process_capability=self.process_capability,
            description=self.description,
            source_drawing=self.source_drawing,
            source_revision=self.source_revision,
        )


class AcceptanceCriteriaSchema(_CamelModel):
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    @model_validator(mode="after")
    def _validate_limits(self) -> "AcceptanceCriteriaSchema":
        if self.minimum is None and self.maximum is None:
            raise ValueError("At least one of minimum or maximum is required")
        if self.minimum is not None and self.maximum is not None and self.minimum > self.maximum:
            raise ValueError("minimum must be <= maximum")
        return self


class StackupAnalysisSchema(_CamelModel):
    name: str = ""
    measurement_objective: str = Field(default="", alias="measurementObjective")
    acceptance_criteria: AcceptanceCriteriaSchema = Field(alias="acceptanceCriteria")
    positive_direction: Optional[PositiveDirection] = Field(default=None, alias="positiveDirection")
    dimensions: List[StackupDimensionSchema] = Field(
        min_length=MIN_DIMENSIONS, max_length=MAX_DIMENSIONS
    )
    analysis_method: AnalysisMethod = Field(default=AnalysisMethod.WORST_CASE, alias="analysisMethod")
    unit: Unit = Unit.MM

    def to_model(self) -> StackupAnalysis:
        return StackupAnalysis(
            dimensions=[d.to_model() for d in self.dimensions],
            acceptance_criteria=AcceptanceCriteria(
                minimum=self.acceptance_criteria.minimum,
                maximum=self.acceptance_criteria.maximum,
            ),
            analysis_method=self.analysis_method,
            unit=self.unit,
            name=self.name,
            measurement_objective=self.measurement_objective,
            positive_direction=self.positive_direction,
        )


def parse_stackup_analysis(data: Dict[str, Any]) -> StackupAnalysis:
    """Parse a stack-up document; raises pydantic.ValidationError."""
    return StackupAnalysisSchema.model_validate(data).to_model()
