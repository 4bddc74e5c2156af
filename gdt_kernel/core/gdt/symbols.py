"""
GD&T Symbols and Characteristics.

Defines the closed vocabularies of the kernel (characteristics, feature
types, material conditions, zone shapes, frame modifiers) together with
the characteristic symbol table and the feature groupings the rule
engine and calculators share, per ASME Y14.5-2018.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional


class GDTCategory(str, Enum):
    """Categories of geometric characteristics."""

    FORM = "form"
    ORIENTATION = "orientation"
    LOCATION = "location"
    PROFILE = "profile"
    RUNOUT = "runout"
    OTHER = "other"


class Characteristic(str, Enum):
    """Geometric characteristics accepted in a feature control frame."""

    # Form tolerances - no datum allowed
    FLATNESS = "flatness"  # ⏥
    STRAIGHTNESS = "straightness"  # ⎯
    CIRCULARITY = "circularity"  # ○
    CYLINDRICITY = "cylindricity"  # ⌭

    # Orientation tolerances - datum required
    PERPENDICULARITY = "perpendicularity"  # ⊥
    PARALLELISM = "parallelism"  # ∥
    ANGULARITY = "angularity"  # ∠

    # Location tolerances - datum required
    POSITION = "position"  # ⌖

    # Profile tolerances - datums optional
    PROFILE = "profile"  # ⌓

    # Runout tolerances - datum required
    RUNOUT = "runout"  # ↗
    TOTAL_RUNOUT = "totalRunout"  # ⌰

    OTHER = "other"


class FeatureType(str, Enum):
    """Kinds of toleranced features."""

    # Features of size
    HOLE = "hole"
    SLOT = "slot"
    PIN = "pin"
    BOSS = "boss"
    # Non-size features
    SURFACE = "surface"
    PLANE = "plane"
    EDGE = "edge"


class FeatureClass(str, Enum):
    """Material side of a feature, used for size limit roles."""

    INTERNAL = "internal"  # hole, slot
    EXTERNAL = "external"  # pin, boss
    SURFACE = "surface"  # surface, plane, edge


class MaterialCondition(str, Enum):
    """Material condition modifiers (MMB/LMB when applied to datums)."""

    MMC = "MMC"  # Maximum Material Condition
    LMC = "LMC"  # Least Material Condition
    RFS = "RFS"  # Regardless of Feature Size


class ZoneShape(str, Enum):
    """Shapes of tolerance zones."""

    CYLINDRICAL = "cylindrical"
    SPHERICAL = "spherical"
    TWO_PARALLEL_PLANES = "twoParallelPlanes"
    TWO_PARALLEL_LINES = "twoParallelLines"


class FrameModifier(str, Enum):
    """Recognized frame modifiers."""

    FREE_STATE = "FREE_STATE"  # Ⓕ
    PROJECTED_TOLERANCE_ZONE = "PROJECTED_TOLERANCE_ZONE"  # Ⓟ
    TANGENT_PLANE = "TANGENT_PLANE"  # Ⓣ
    UNEQUALLY_DISPOSED = "UNEQUALLY_DISPOSED"  # Ⓤ


class Unit(str, Enum):
    MM = "mm"
    INCH = "inch"


@dataclass(frozen=True)
class GDTSymbolInfo:
    """Information about a GD&T characteristic symbol."""

    characteristic: Characteristic
    category: GDTCategory
    symbol_unicode: str
    name_en: str
    requires_datum: Optional[bool]  # None: datums optional


# Characteristic symbol table
GDT_SYMBOLS: Dict[Characteristic, Dict] = {
    Characteristic.FLATNESS: {
        "category": GDTCategory.FORM,
        "symbol": "⏥",
        "name_en": "Flatness",
        "requires_datum": False,
    },
    Characteristic.STRAIGHTNESS: {
        "category": GDTCategory.FORM,
        "symbol": "⎯",
        "name_en": "Straightness",
        "requires_datum": False,
    },
    Characteristic.CIRCULARITY: {
        "category": GDTCategory.FORM,
        "symbol": "○",
        "name_en": "Circularity",
        "requires_datum": False,
    },
    Characteristic.CYLINDRICITY: {
        "category": GDTCategory.FORM,
        "symbol": "⌭",
        "name_en": "Cylindricity",
        "requires_datum": False,
    },
    Characteristic.PERPENDICULARITY: {
        "category": GDTCategory.ORIENTATION,
        "symbol": "⊥",
        "name_en": "Perpendicularity",
        "requires_datum": True,
    },
    Characteristic.PARALLELISM: {
        "category": GDTCategory.ORIENTATION,
        "symbol": "∥",
        "name_en": "Parallelism",
        "requires_datum": True,
    },
    Characteristic.ANGULARITY: {
        "category": GDTCategory.ORIENTATION,
        "symbol": "∠",
        "name_en": "Angularity",
        "requires_datum": True,
    },
    Characteristic.POSITION: {
        "category": GDTCategory.LOCATION,
        "symbol": "⌖",
        "name_en": "Position",
        "requires_datum": True,
    },
    Characteristic.PROFILE: {
        "category": GDTCategory.PROFILE,
        "symbol": "⌓",
        "name_en": "Profile of a Surface",
        "requires_datum": None,
    },
    Characteristic.RUNOUT: {
        "category": GDTCategory.RUNOUT,
        "symbol": "↗",
        "name_en": "Circular Runout",
        "requires_datum": True,
    },
    Characteristic.TOTAL_RUNOUT: {
        "category": GDTCategory.RUNOUT,
        "symbol": "⌰",
        "name_en": "Total Runout",
        "requires_datum": True,
    },
    Characteristic.OTHER: {
        "category": GDTCategory.OTHER,
        "symbol": "",
        "name_en": "Other",
        "requires_datum": None,
    },
}


FEATURES_OF_SIZE: FrozenSet[FeatureType] = frozenset(
    {FeatureType.HOLE, FeatureType.SLOT, FeatureType.PIN, FeatureType.BOSS}
)
INTERNAL_FEATURES: FrozenSet[FeatureType] = frozenset({FeatureType.HOLE, FeatureType.SLOT})
EXTERNAL_FEATURES: FrozenSet[FeatureType] = frozenset({FeatureType.PIN, FeatureType.BOSS})
NON_ROTATIONAL_FEATURES: FrozenSet[FeatureType] = frozenset(
    {FeatureType.SURFACE, FeatureType.PLANE, FeatureType.EDGE}
)
BONUS_CONDITIONS: FrozenSet[MaterialCondition] = frozenset(
    {MaterialCondition.MMC, MaterialCondition.LMC}
)


def get_gdt_symbol(characteristic: Characteristic) -> Optional[GDTSymbolInfo]:
    """Look up symbol information for a characteristic."""
    data = GDT_SYMBOLS.get(characteristic)
    if data is None:
        return None
    return GDTSymbolInfo(
        characteristic=characteristic,
        category=data["category"],
        symbol_unicode=data["symbol"],
        name_en=data["name_en"],
        requires_datum=data["requires_datum"],
    )


def get_category(characteristic: Characteristic) -> GDTCategory:
    return GDT_SYMBOLS[characteristic]["category"]


def get_characteristics(category: GDTCategory) -> List[Characteristic]:
    """All characteristics belonging to a category, in table order."""
    return [c for c, data in GDT_SYMBOLS.items() if data["category"] == category]


def is_feature_of_size(feature_type: Optional[FeatureType]) -> bool:
    return feature_type in FEATURES_OF_SIZE


def get_feature_class(feature_type: Optional[FeatureType]) -> Optional[FeatureClass]:
    """Classify a feature type; None when the type is absent."""
    if feature_type in INTERNAL_FEATURES:
        return FeatureClass.INTERNAL
    if feature_type in EXTERNAL_FEATURES:
        return FeatureClass.EXTERNAL
    if feature_type in NON_ROTATIONAL_FEATURES:
        return FeatureClass.SURFACE
    return None
