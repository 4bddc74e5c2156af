import json
import logging

import pytest

from gdt_kernel.core.config import get_settings, reset_settings_cache
from gdt_kernel.core.gdt import Characteristic, FeatureType, Severity, validate_fcf
from gdt_kernel.core.gdt.calculators.types import default_precision
from gdt_kernel.core.gdt.symbols import Unit
from gdt_kernel.utils.logging import JsonFormatter, setup_logging
from gdt_kernel.utils.serialize import to_jsonable


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def test_settings_defaults():
    settings = get_settings()

    assert settings.LOG_LEVEL == "INFO"
    assert settings.LOG_JSON is True
    assert settings.DEFAULT_PRECISION_MM == 3
    assert settings.DEFAULT_PRECISION_INCH == 4


def test_settings_env_override(monkeypatch):
    monkeypatch.setenv("DEFAULT_PRECISION_INCH", "5")
    monkeypatch.setenv("log_level", "debug")
    reset_settings_cache()

    assert default_precision(Unit.INCH) == 5
    assert default_precision(Unit.MM) == 3
    assert get_settings().LOG_LEVEL == "debug"


def test_settings_cached():
    assert get_settings() is get_settings()


def test_json_formatter_structured_fields():
    record = logging.LogRecord(
        name="gdt_kernel.core.gdt.rules",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="FCF validated",
        args=(),
        exc_info=None,
    )
    record.characteristic = "position"
    record.error_count = 2

    payload = json.loads(JsonFormatter().format(record))

    assert payload == {
        "level": "INFO",
        "message": "FCF validated",
        "logger": "gdt_kernel.core.gdt.rules",
        "characteristic": "position",
        "error_count": 2,
    }


def test_setup_logging(restore_root_logging):
    setup_logging("warning", json_output=False)

    root = restore_root_logging
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert not isinstance(root.handlers[0].formatter, JsonFormatter)

    setup_logging(None)
    assert root.level == logging.INFO
    assert isinstance(root.handlers[0].formatter, JsonFormatter)


def test_validation_logged_at_debug(caplog, position_hole_fcf):
    with caplog.at_level(logging.DEBUG, logger="gdt_kernel.core.gdt.rules"):
        validate_fcf(position_hole_fcf)

    record = next(r for r in caplog.records if r.getMessage() == "FCF validated")
    assert record.characteristic == "position"
    assert record.error_count == 0


def test_to_jsonable_validation_result():
    from gdt_kernel.core.gdt import DatumReference, FeatureControlFrame, ToleranceSpec

    fcf = FeatureControlFrame(
        characteristic=Characteristic.FLATNESS,
        feature_type=FeatureType.SURFACE,
        tolerance=ToleranceSpec(value=0.05),
        datums=[DatumReference("A")],
    )

    payload = to_jsonable(validate_fcf(fcf))

    assert payload["valid"] is False
    assert payload["errors"][0]["severity"] == Severity.ERROR.value
    assert payload["errors"][0]["context"]["feature_type"] == "surface"
    assert list(payload) == ["valid", "issues", "errors", "warnings", "summary"]
    json.dumps(payload)
