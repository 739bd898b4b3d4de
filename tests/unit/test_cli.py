"""Command-line host tests."""

import json
import logging

import pytest
import structlog

from editor_config.__main__ import main

CONFIG = """
export function getProperties(values, defaultProperties) {
    return values.hideAdvanced ? hidePropertyIn(defaultProperties, "advanced") : defaultProperties;
}
export function check(values) {
    return values.name ? [] : [{ property: "name", message: "Name is required" }];
}
"""


@pytest.fixture(autouse=True)
def restore_logging():
    """main() configures logging against captured streams; undo it afterwards."""
    yield
    structlog.reset_defaults()
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)


@pytest.fixture
def files(tmp_path, widget_definition_json):
    config = tmp_path / "Widget.editorConfig.js"
    config.write_text(CONFIG, encoding="utf-8")
    values = tmp_path / "values.json"
    values.write_text(json.dumps({"hideAdvanced": True}), encoding="utf-8")
    definition = tmp_path / "definition.json"
    definition.write_text(json.dumps(widget_definition_json), encoding="utf-8")
    return {"config": str(config), "values": str(values), "definition": str(definition)}


def run(capsys, *argv):
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


@pytest.mark.unit
def test_cli_evaluate(capsys, files):
    code, out, _ = run(
        capsys, "evaluate", "-c", files["config"], "-v", files["values"], "-d", files["definition"]
    )
    result = json.loads(out)

    assert code == 0
    assert result["visible_keys"] == ["name"]
    assert result["validation_errors"][0]["message"] == "Name is required"
    assert "propertyGroups" in result["filtered_groups"][0]


@pytest.mark.unit
def test_cli_visible_keys(capsys, files):
    code, out, _ = run(capsys, "visible-keys", "-c", files["config"], "-d", files["definition"])
    assert code == 0
    assert json.loads(out) == ["advanced", "name"]


@pytest.mark.unit
def test_cli_validate(capsys, files):
    code, out, _ = run(capsys, "validate", "-c", files["config"], "-v", files["values"])
    assert code == 0
    assert json.loads(out) == [{"property": "name", "message": "Name is required", "url": None}]


@pytest.mark.unit
def test_cli_counts(capsys, files):
    code, out, _ = run(capsys, "counts", "-c", files["config"], "-v", files["values"], "-d", files["definition"])
    assert code == 0
    assert json.loads(out) == {"visible_keys": ["name"], "group_counts": {"General": 1}}


@pytest.mark.unit
def test_cli_reports_script_errors(capsys, tmp_path):
    broken = tmp_path / "broken.js"
    broken.write_text("function check(values {", encoding="utf-8")

    code, out, err = run(capsys, "validate", "-c", str(broken))
    assert code == 1
    assert out == ""
    assert "error: Failed to evaluate editor config" in err


@pytest.mark.unit
def test_cli_reports_missing_files(capsys, tmp_path):
    code, _, err = run(capsys, "validate", "-c", str(tmp_path / "missing.js"))
    assert code == 1
    assert "error:" in err
