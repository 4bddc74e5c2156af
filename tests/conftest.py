import os

import pytest


# List of environment variables that may be modified by tests
_ENV_VARS_TO_ISOLATE = [
    "LOG_LEVEL",
    "LOG_JSON",
    "DEFAULT_PRECISION_MM",
    "DEFAULT_PRECISION_INCH",
]


@pytest.fixture(autouse=True)
def env_isolation():
    """Isolate environment variables between tests."""
    backup = {k: os.environ.get(k) for k in _ENV_VARS_TO_ISOLATE}
    try:
        yield
    finally:
        for k, v in backup.items():
            if v is None:
                os.environ.pop(k, None)
            else:
                os.environ[k] = v


@pytest.fixture(autouse=True)
def config_cache_isolation():
    """Reset config settings cache between tests."""
    import gdt_kernel.core.config as cfg

    backup_cache = cfg._settings_cache
    cfg._settings_cache = None
    yield
    cfg._settings_cache = backup_cache


@pytest.fixture
def position_hole_fcf():
    """Position of a hole pattern at MMC to A|B|C."""
    from gdt_kernel.core.gdt import (
        Characteristic,
        DatumReference,
        FeatureControlFrame,
        FeatureType,
        MaterialCondition,
        ToleranceSpec,
    )

    return FeatureControlFrame(
        characteristic=Characteristic.POSITION,
        feature_type=FeatureType.HOLE,
        tolerance=ToleranceSpec(
            value=0.25, diameter=True, material_condition=MaterialCondition.MMC
        ),
        datums=[DatumReference("A"), DatumReference("B"), DatumReference("C")],
    )


@pytest.fixture
def two_dimension_stackup():
    """Housing bore depth minus shaft length, bilateral tolerances."""
    from gdt_kernel.core.stackup import (
        AcceptanceCriteria,
        AnalysisMethod,
        DimensionSign,
        StackupAnalysis,
        StackupDimension,
    )

    return StackupAnalysis(
        name="Shaft end clearance",
        dimensions=[
            StackupDimension(
                id="d1",
                name="Housing depth",
                nominal=50.0,
                tolerance_plus=0.1,
                tolerance_minus=0.1,
                sign=DimensionSign.POSITIVE,
            ),
            StackupDimension(
                id="d2",
                name="Shaft length",
                nominal=49.8,
                tolerance_plus=0.05,
                tolerance_minus=0.05,
                sign=DimensionSign.NEGATIVE,
            ),
        ],
        acceptance_criteria=AcceptanceCriteria(minimum=0.05),
        analysis_method=AnalysisMethod.RSS,
    )
