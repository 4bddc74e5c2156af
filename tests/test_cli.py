import json
import logging

import pytest

from gdt_kernel.cli import EXIT_BAD_INPUT, EXIT_FAILED, EXIT_OK, main


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture()
def write_json(tmp_path):
    def _write(name, payload):
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)

    return _write


POSITION_FCF = {
    "characteristic": "position",
    "featureType": "hole",
    "tolerance": {"value": 0.25, "diameter": True, "materialCondition": "MMC"},
    "datums": ["A", "B", "C"],
}

STACKUP = {
    "acceptanceCriteria": {"minimum": 0.05},
    "analysisMethod": "rss",
    "dimensions": [
        {"id": "d1", "name": "Housing", "nominal": 50.0, "tolerancePlus": 0.1,
         "toleranceMinus": 0.1, "sign": "positive"},
        {"id": "d2", "name": "Shaft", "nominal": 49.8, "tolerancePlus": 0.05,
         "toleranceMinus": 0.05, "sign": "negative"},
    ],
}


def test_validate_valid_frame(write_json, capsys):
    code = main(["validate", write_json("fcf.json", POSITION_FCF)])

    assert code == EXIT_OK
    payload = json.loads(capsys.readouterr().out)
    assert payload["valid"] is True
    assert payload["summary"] == {"error_count": 0, "warning_count": 0}


def test_validate_invalid_frame(write_json, capsys):
    fcf = {**POSITION_FCF, "characteristic": "flatness", "tolerance": {"value": 0.05}}

    code = main(["validate", write_json("fcf.json", fcf)])

    assert code == EXIT_FAILED
    payload = json.loads(capsys.readouterr().out)
    assert [i["code"] for i in payload["errors"]] == ["E002"]
    assert payload["errors"][0]["severity"] == "error"
    assert payload["errors"][0]["context"]["characteristic"] == "flatness"


def test_validate_by_category(write_json, capsys):
    fcf = {**POSITION_FCF, "datums": ["A"], "tolerance": {"value": 0.1, "materialCondition": "RFS"}}

    code = main(["validate", "--category", "material-condition", write_json("fcf.json", fcf)])

    assert code == EXIT_OK
    payload = json.loads(capsys.readouterr().out)
    assert [i["code"] for i in payload["issues"]] == ["W001"]


def test_calculate_position(write_json, capsys):
    data = {
        "geometricTolerance": 0.2,
        "materialCondition": "MMC",
        "featureType": "hole",
        "sizeDimension": {"nominal": 10.0, "tolerancePlus": 0.1},
        "truePosition": {"basicX": 0.0, "basicY": 0.0},
        "measured": {"actualX": 0.03, "actualY": 0.04, "actualSize": 10.05},
    }

    code = main(["calculate", "position", write_json("pos.json", data)])

    assert code == EXIT_OK
    payload = json.loads(capsys.readouterr().out)
    assert payload["success"] is True
    assert payload["result"]["status"] == "pass"
    assert payload["result"]["bonus_tolerance"] == pytest.approx(0.05)


def test_calculate_failure(write_json, capsys):
    code = main(["calculate", "flatness", write_json("flat.json", {"tolerance": 0.05})])

    assert code == EXIT_FAILED
    payload = json.loads(capsys.readouterr().out)
    assert payload["errors"][0]["code"] == "NO_MEASUREMENTS"


def test_stackup(write_json, capsys):
    code = main(["stackup", write_json("stack.json", STACKUP)])

    assert code == EXIT_OK
    payload = json.loads(capsys.readouterr().out)
    assert payload["result"]["method"] == "rss"
    assert payload["validation"]["valid"] is True


def test_stackup_compare(write_json, capsys):
    code = main(["stackup", "--compare", write_json("stack.json", STACKUP)])

    payload = json.loads(capsys.readouterr().out)
    assert list(payload["results"]) == ["worst-case", "rss", "six-sigma"]
    assert code in (EXIT_OK, EXIT_FAILED)


def test_rules_listing(capsys):
    code = main(["rules", "--category", "composite-configuration"])

    assert code == EXIT_OK
    payload = json.loads(capsys.readouterr().out)
    assert [r["code"] for r in payload] == ["E009", "E004", "E021", "E022", "E023", "W003"]


def test_missing_file(tmp_path, capsys):
    code = main(["validate", str(tmp_path / "missing.json")])

    assert code == EXIT_BAD_INPUT
    assert "Cannot read" in capsys.readouterr().err


def test_malformed_json(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")

    assert main(["validate", str(path)]) == EXIT_BAD_INPUT
    assert "Invalid JSON" in capsys.readouterr().err


def test_schema_error(write_json, capsys):
    code = main(["validate", write_json("fcf.json", {"characteristic": "position"})])

    assert code == EXIT_BAD_INPUT
    assert "tolerance" in capsys.readouterr().err
