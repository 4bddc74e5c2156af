"""Tests for the GD&T symbol table and the JSON input schemas."""

import pytest
from pydantic import ValidationError

from gdt_kernel.core.gdt import (
    Characteristic,
    CompositeKind,
    FeatureClass,
    FeatureType,
    GDTCategory,
    MaterialCondition,
    calculate,
    get_characteristics,
    get_gdt_symbol,
    parse_calculator_input,
    parse_fcf,
    validate_fcf,
)
from gdt_kernel.core.gdt.calculators import PositionInput, ProfileZoneType
from gdt_kernel.core.gdt.schemas import parse_profile_input
from gdt_kernel.core.gdt.symbols import get_category, get_feature_class, is_feature_of_size


POSITION_FCF = {
    "characteristic": "position",
    "featureType": "hole",
    "tolerance": {"value": 0.25, "diameter": True, "materialCondition": "MMC"},
    "datums": [{"id": "A"}, {"id": "B"}, {"id": "C"}],
}


class TestSymbols:
    """Characteristic symbol table lookups."""

    def test_symbol_lookup(self):
        info = get_gdt_symbol(Characteristic.PERPENDICULARITY)

        assert info.symbol_unicode == "⊥"
        assert info.category == GDTCategory.ORIENTATION
        assert info.requires_datum is True

    def test_profile_datums_optional(self):
        assert get_gdt_symbol(Characteristic.PROFILE).requires_datum is None

    def test_form_characteristics(self):
        """Test the form category holds the four form tolerances."""
        assert get_characteristics(GDTCategory.FORM) == [
            Characteristic.FLATNESS,
            Characteristic.STRAIGHTNESS,
            Characteristic.CIRCULARITY,
            Characteristic.CYLINDRICITY,
        ]
        assert get_category(Characteristic.TOTAL_RUNOUT) == GDTCategory.RUNOUT

    def test_feature_classification(self):
        assert is_feature_of_size(FeatureType.SLOT) is True
        assert is_feature_of_size(FeatureType.EDGE) is False
        assert is_feature_of_size(None) is False
        assert get_feature_class(FeatureType.BOSS) == FeatureClass.EXTERNAL
        assert get_feature_class(FeatureType.PLANE) == FeatureClass.SURFACE
        assert get_feature_class(None) is None


class TestFcfSchema:
    """Parsing canonical FCF documents."""

    def test_parse_position(self):
        """Test a camelCase document becomes a valid frame."""
        fcf = parse_fcf(POSITION_FCF)

        assert fcf.characteristic == Characteristic.POSITION
        assert fcf.tolerance.material_condition == MaterialCondition.MMC
        assert fcf.datum_ids == ["A", "B", "C"]
        assert validate_fcf(fcf).valid is True

    def test_datum_shorthand(self):
        """Test bare datum letters are accepted."""
        fcf = parse_fcf({**POSITION_FCF, "datums": ["A", {"id": "B", "materialCondition": "MMC"}]})

        assert fcf.datum_ids == ["A", "B"]
        assert fcf.datums[1].material_condition == MaterialCondition.MMC

    def test_composite_document(self):
        """Test a composite block with its type discriminator."""
        fcf = parse_fcf(
            {
                **POSITION_FCF,
                "pattern": {"count": 4, "note": "4X"},
                "composite": {
                    "type": "composite",
                    "segments": [
                        {"tolerance": {"value": 0.25, "diameter": True}, "datums": ["A", "B", "C"]},
                        {"tolerance": {"value": 0.1, "diameter": True}, "datums": ["A"]},
                    ],
                },
            }
        )

        assert fcf.is_composite() is True
        assert fcf.composite.kind == CompositeKind.COMPOSITE
        assert fcf.pattern.count == 4
        assert validate_fcf(fcf).codes == []

    def test_rule_violations_are_not_schema_errors(self):
        """Test numeric problems parse and surface as rule issues."""
        fcf = parse_fcf({**POSITION_FCF, "tolerance": {"value": -0.1}})

        assert "E031" in validate_fcf(fcf).codes

    def test_unknown_characteristic(self):
        with pytest.raises(ValidationError):
            parse_fcf({**POSITION_FCF, "characteristic": "roundness"})

    def test_missing_tolerance(self):
        data = dict(POSITION_FCF)
        del data["tolerance"]

        with pytest.raises(ValidationError):
            parse_fcf(data)


class TestCalculatorSchemas:
    """Parsing calculator input documents."""

    def test_parse_position_input(self):
        """Test a position document parses and calculates."""
        data = parse_calculator_input(
            Characteristic.POSITION,
            {
                "geometricTolerance": 0.2,
                "materialCondition": "MMC",
                "featureType": "hole",
                "sizeDimension": {"nominal": 10.0, "tolerancePlus": 0.1},
                "truePosition": {"basicX": 0.0, "basicY": 0.0},
                "measured": {"actualX": 0.03, "actualY": 0.04, "actualSize": 10.05},
            },
        )

        assert isinstance(data, PositionInput)
        assert data.size_dimension.tolerance_minus == 0.0
        assert calculate(Characteristic.POSITION, data).success is True

    def test_parse_profile_input(self):
        data = parse_profile_input(
            {
                "tolerance": 0.3,
                "zoneType": "unequally-disposed",
                "outsideAmount": 0.1,
                "measuredPoints": [{"position": 0, "deviation": 0.05}],
            }
        )

        assert data.zone_type == ProfileZoneType.UNEQUALLY_DISPOSED
        assert data.measured_points[0].deviation == 0.05

    def test_missing_required_field(self):
        with pytest.raises(ValidationError):
            parse_calculator_input(Characteristic.FLATNESS, {"measuredPoints": []})

    def test_no_schema_for_characteristic(self):
        with pytest.raises(KeyError):
            parse_calculator_input(Characteristic.RUNOUT, {})


class TestPackageExports:
    def test_lazy_top_level_api(self):
        """Test the top-level package resolves the public API on access."""
        import gdt_kernel

        assert gdt_kernel.validate_fcf is validate_fcf
        assert gdt_kernel.calculate is calculate
        assert "calculate_stackup" in gdt_kernel.__all__

    def test_unknown_attribute(self):
        import gdt_kernel

        with pytest.raises(AttributeError):
            gdt_kernel.not_a_module
