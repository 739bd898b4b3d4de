"""Public operation tests."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from editor_config import (
    EvaluationResult,
    PropertyGroup,
    ScriptEvaluationError,
    SerializationError,
    ValidationError,
    WidgetDefinition,
    evaluate_editor_config,
    get_property_visibility_with_counts,
    get_visible_property_keys,
    validate_editor_config_values,
)
from editor_config.properties import extract_all_property_keys

HIDE_ADVANCED = """
function getProperties(values, defaultProperties) {
    if (values.hideAdvanced) {
        return hidePropertyIn(defaultProperties, "advanced");
    }
    return defaultProperties;
}
"""

REQUIRE_NAME = """
function check(values) {
    return [{ property: "name", message: "Name is required" }];
}
"""


@pytest.mark.unit
def test_evaluate_without_functions(widget_definition):
    """A script with no contract functions leaves the schema untouched."""
    result = evaluate_editor_config("// nothing here", {}, widget_definition)

    assert isinstance(result, EvaluationResult)
    assert result.visible_keys == ["advanced", "datasource", "name", "pageSize"]
    assert result.filtered_groups == widget_definition.property_groups
    assert result.validation_errors == []


@pytest.mark.unit
def test_evaluate_passthrough_keeps_key_set(evaluator, widget_definition):
    source = "function getProperties(values, defaultProperties) { return defaultProperties; }"
    result = evaluator.evaluate(source, {}, widget_definition)
    assert result.visible_keys == extract_all_property_keys(widget_definition.property_groups)


@pytest.mark.unit
def test_evaluate_hides_property(evaluator, general_group):
    definition = WidgetDefinition(property_groups=[general_group])
    result = evaluator.evaluate(HIDE_ADVANCED, {"hideAdvanced": True}, definition)

    assert result.visible_keys == ["name"]
    assert [p["key"] for p in result.filtered_groups[0].properties] == ["name"]


@pytest.mark.unit
def test_evaluate_runs_both_functions(evaluator, general_group):
    source = HIDE_ADVANCED + REQUIRE_NAME
    result = evaluator.evaluate(source, {"hideAdvanced": False}, WidgetDefinition(property_groups=[general_group]))

    assert result.visible_keys == ["advanced", "name"]
    assert result.validation_errors == [ValidationError(property="name", message="Name is required")]


@pytest.mark.unit
def test_evaluate_accepts_plain_definition(evaluator, widget_definition_json):
    result = evaluator.evaluate(HIDE_ADVANCED, {"hideAdvanced": True}, widget_definition_json)
    assert result.visible_keys == ["name"]


@pytest.mark.unit
def test_evaluate_rejects_malformed_definition(evaluator):
    with pytest.raises(SerializationError) as exc_info:
        evaluator.evaluate("", {}, {"propertyGroups": "not a list"})
    assert exc_info.value.stage == "deserialize_definition"


@pytest.mark.unit
def test_evaluate_does_not_mutate_definition(evaluator, widget_definition):
    """Scripts that edit their defaults in place leave the caller's schema alone."""
    source = """
function getProperties(values, defaultProperties) {
    defaultProperties[0].properties.pop();
    defaultProperties[0].caption = "Changed";
    return defaultProperties;
}
"""
    before = widget_definition.model_copy(deep=True)
    result = evaluator.evaluate(source, {}, widget_definition)

    assert result.filtered_groups[0].caption == "Changed"
    assert widget_definition == before


@pytest.mark.unit
def test_evaluate_script_error_is_fatal(evaluator, widget_definition):
    source = HIDE_ADVANCED + "function check(values) { throw new Error('check exploded'); }"
    with pytest.raises(ScriptEvaluationError) as exc_info:
        evaluator.evaluate(source, {}, widget_definition)
    assert exc_info.value.stage == "check"


@pytest.mark.unit
def test_evaluate_load_error(evaluator, widget_definition):
    with pytest.raises(ScriptEvaluationError):
        evaluator.evaluate("function (", {}, widget_definition)


@pytest.mark.unit
def test_visible_keys_none_without_get_properties(widget_definition):
    assert get_visible_property_keys(REQUIRE_NAME, {}, widget_definition) is None


@pytest.mark.unit
def test_visible_keys_empty_when_everything_hidden(widget_definition):
    source = "function getProperties(values, defaultProperties) { return []; }"
    assert get_visible_property_keys(source, {}, widget_definition) == []


@pytest.mark.unit
def test_visible_keys_with_es_module_script(general_group):
    source = """
import { hidePropertiesIn } from "@mendix/pluggable-widgets-tools";
export const getProperties = (values, defaultProperties) =>
    hidePropertiesIn(defaultProperties, values.hidden);
"""
    keys = get_visible_property_keys(source, {"hidden": ["name"]}, WidgetDefinition(property_groups=[general_group]))
    assert keys == ["advanced"]


@pytest.mark.unit
def test_visible_keys_skip_deleted_properties():
    source = """
function getProperties(values, defaultProperties) {
    delete defaultProperties[0].properties[1];
    return defaultProperties;
}
"""
    definition = {"propertyGroups": [{"caption": "General", "properties": [{"key": "a"}, {"key": "b"}]}]}
    assert get_visible_property_keys(source, {}, definition) == ["a"]


@pytest.mark.unit
def test_evaluate_keeps_non_object_properties(evaluator):
    source = """
function getProperties(values, defaultProperties) {
    defaultProperties[0].properties.push(null, "note", 3);
    return defaultProperties;
}
"""
    definition = {"propertyGroups": [{"caption": "General", "properties": [{"key": "a"}]}]}
    result = evaluator.evaluate(source, {}, definition)

    assert result.visible_keys == ["a"]
    assert result.filtered_groups[0].properties == [{"key": "a"}, None, "note", 3]


@pytest.mark.unit
def test_validate_reports_errors():
    errors = validate_editor_config_values(REQUIRE_NAME, {"name": ""})
    assert len(errors) == 1
    assert errors[0].property == "name"
    assert errors[0].message == "Name is required"


@pytest.mark.unit
def test_validate_without_check():
    assert validate_editor_config_values("// no functions", {}) == []


@pytest.mark.unit
def test_validate_uses_values(evaluator):
    source = """
function check(values) {
    var errors = [];
    if (values.pageSize < 1) {
        errors.push({ property: "pageSize", message: "Page size must be positive" });
    }
    return errors;
}
"""
    assert evaluator.validate(source, {"pageSize": 10}) == []
    assert evaluator.validate(source, {"pageSize": 0})[0].property == "pageSize"


@pytest.mark.unit
def test_visibility_counts_without_get_properties():
    definition = WidgetDefinition(
        property_groups=[PropertyGroup(key="general", caption="General", properties=[{"key": "name"}])]
    )
    result = get_property_visibility_with_counts("// no getProperties function", {}, definition)

    assert result.visible_keys is None
    assert result.group_counts == {"General": 1}


@pytest.mark.unit
def test_visibility_counts_with_filter(widget_definition):
    source = 'function getProperties(values, props) { return hidePropertyIn(props, "name"); }'
    result = get_property_visibility_with_counts(source, {}, widget_definition)

    assert result.visible_keys == ["advanced", "datasource", "pageSize"]
    assert result.group_counts == {"General": 1, "Data": 2, "Data.Paging": 1}


@pytest.mark.unit
def test_each_call_gets_a_fresh_interpreter(evaluator):
    """Globals set by one evaluation are gone in the next."""
    source = """
var runs = (typeof runs === 'undefined') ? 1 : runs + 1;
function check(values) { return [{ message: String(runs) }]; }
"""
    assert evaluator.validate(source, {})[0].message == "1"
    assert evaluator.validate(source, {})[0].message == "1"


@pytest.mark.unit
def test_concurrent_evaluations_are_isolated(evaluator, general_group):
    """A script that clobbers a builtin cannot affect a concurrent one."""
    definition = WidgetDefinition(property_groups=[general_group])
    clobbering = """
Array.prototype.filter = function() { return []; };
function getProperties(values, props) { return hidePropertyIn(props, "name"); }
"""
    well_behaved = 'function getProperties(values, props) { return hidePropertyIn(props, "advanced"); }'

    def run(source):
        return evaluator.get_visible_property_keys(source, {}, definition)

    sources = [clobbering, well_behaved] * 10
    with ThreadPoolExecutor(max_workers=6) as pool:
        results = list(pool.map(run, sources))

    for source, keys in zip(sources, results):
        assert keys == ([] if source is clobbering else ["name"])


@pytest.mark.slow
def test_deep_recursion_fits_worker_stack(evaluator):
    source = """
function depth(n) { return n === 0 ? 0 : 1 + depth(n - 1); }
function check(values) { return [{ message: String(depth(values.n)) }]; }
"""
    assert evaluator.validate(source, {"n": 2000})[0].message == "2000"


@pytest.mark.slow
def test_runaway_recursion_is_a_script_error(evaluator):
    source = """
function forever(n) { return forever(n + 1) + 1; }
function check(values) { return forever(0); }
"""
    with pytest.raises(ScriptEvaluationError) as exc_info:
        evaluator.validate(source, {})
    assert exc_info.value.stage == "check"
