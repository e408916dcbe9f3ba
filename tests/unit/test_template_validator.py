import pytest

from step_templates import TemplateValidationError, load_template, validate_template
from step_templates.builtin import BUILTIN_TEMPLATES


def _template(*steps):
    return {"id": "t", "name": "T", "version": "1.0.0", "steps": list(steps)}


def _step(step_id, step_type="question", **extra):
    data = {"id": step_id, "type": step_type, "content": f"{step_id}?", "next_steps": {"default": "exit"}}
    data.update(extra)
    return data


def test_builtins_are_valid():
    for template in BUILTIN_TEMPLATES:
        validate_template(template)


def test_valid_template_loads():
    result = load_template(_template(_step("a", next_steps={"default": "b"}), _step("b")))
    assert result.is_valid
    assert result.errors == []


def test_missing_target_is_rejected():
    with pytest.raises(TemplateValidationError, match="Invalid next step reference: ghost"):
        load_template(_template(_step("a", next_steps={"default": "ghost"})))


def test_two_step_cycle_is_rejected():
    with pytest.raises(TemplateValidationError, match="Circular reference"):
        load_template(_template(_step("a", next_steps={"default": "b"}), _step("b", next_steps={"default": "a"})))


def test_self_loop_is_rejected():
    with pytest.raises(TemplateValidationError, match="Circular reference"):
        load_template(_template(_step("a", next_steps={"default": "a"})))


def test_duplicate_ids_are_rejected():
    with pytest.raises(TemplateValidationError, match="Duplicate step ID: a"):
        load_template(_template(_step("a"), _step("a")))


def test_required_fields():
    with pytest.raises(TemplateValidationError, match="missing required fields"):
        load_template({"id": "t", "version": "1", "steps": [_step("a")]})
    with pytest.raises(TemplateValidationError, match="at least one step"):
        load_template(_template())


def test_bad_step_type():
    with pytest.raises(TemplateValidationError, match="Invalid step type: quiz"):
        load_template(_template(_step("a", step_type="quiz")))


def test_step_without_next_steps():
    with pytest.raises(TemplateValidationError, match="at least one next step"):
        load_template(_template(_step("a", next_steps={})))


def test_condition_outcome_must_map_to_a_step():
    step = _step("a", conditions=[{"type": "regex", "value": "yes", "outcome": "approved"}])
    with pytest.raises(TemplateValidationError, match="has no next step"):
        load_template(_template(step))


def test_exit_outcome_needs_no_mapping():
    step = _step("a", conditions=[{"type": "regex", "value": "^no", "outcome": "exit"}])
    assert load_template(_template(step)).is_valid


@pytest.mark.parametrize(
    "condition, message",
    [
        ({"type": "fuzzy", "value": "x", "outcome": "exit"}, "Invalid condition type"),
        ({"type": "regex", "value": "", "outcome": "exit"}, "must have a value"),
        ({"type": "regex", "value": "x", "outcome": ""}, "must have an outcome"),
        ({"type": "numeric", "value": "about 5", "outcome": "exit"}, "Invalid numeric condition"),
        ({"type": "regex", "value": "(unclosed", "outcome": "exit"}, "Invalid regex pattern"),
    ],
)
def test_bad_conditions(condition, message):
    with pytest.raises(TemplateValidationError, match=message):
        load_template(_template(_step("a", conditions=[condition])))


def test_camel_case_template_files_are_accepted():
    raw = {
        "id": "t",
        "name": "T",
        "version": "1.0.0",
        "steps": [
            {
                "id": "a",
                "type": "validation",
                "content": "Salary?",
                "conditions": [{"type": "numeric", "value": "<=10", "outcome": "ok", "ignoreCase": False}],
                "nextSteps": {"default": "exit", "ok": "exit"},
                "availableTools": [],
            }
        ],
    }
    assert load_template(raw).is_valid


def test_shape_errors_become_validation_errors():
    with pytest.raises(TemplateValidationError, match="invalid shape"):
        load_template({"id": "t", "name": "T", "version": "1", "steps": "not a list"})
