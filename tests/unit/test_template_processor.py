import pytest

from step_templates import Step, StepProcessingError, evaluate_conditions, process_step, validate_response
from step_templates.builtin import ICU_NURSE
from step_templates.processor import EMPTY_RESPONSE, NOT_A_NUMBER, check_condition, parse_number


def _salary_step():
    return ICU_NURSE.step("salary")


@pytest.mark.parametrize(
    "text, expected",
    [("65000", 65000.0), ("$65,000", 65000.0), ("$85,000 base", 85000.0), ("  42.5 years", 42.5), ("-3", -3.0), ("abc", None), ("", None)],
)
def test_parse_number(text, expected):
    assert parse_number(text) == expected


def test_numeric_condition_routes_salary():
    step = _salary_step()
    assert evaluate_conditions(step, "65000") == "license"
    assert evaluate_conditions(step, "72000") == "license"
    assert evaluate_conditions(step, "90000") == "salary_negotiation"


def test_non_numeric_answer_fails_validation():
    result = process_step(_salary_step(), "depends on the shifts")
    assert not result.is_valid
    assert result.errors == [NOT_A_NUMBER]
    assert result.next_step_id is None


def test_empty_answer_fails_validation():
    assert validate_response(_salary_step(), "   ").errors == [EMPTY_RESPONSE]


def test_question_steps_accept_anything():
    assert validate_response(ICU_NURSE.step("name"), "").is_valid


def test_regex_with_ignore_case():
    step = ICU_NURSE.step("interest_check")
    assert evaluate_conditions(step, "No thanks") == "not_interested"
    assert evaluate_conditions(step, "Sure") == "name"


def test_first_matching_condition_wins():
    step = Step.model_validate(
        {
            "id": "s",
            "type": "question",
            "conditions": [
                {"type": "regex", "value": "a", "outcome": "first"},
                {"type": "regex", "value": "a", "outcome": "second"},
            ],
            "next_steps": {"default": "d", "first": "one", "second": "two"},
        }
    )
    assert evaluate_conditions(step, "banana") == "one"
    assert evaluate_conditions(step, "xyz") == "d"


def test_exit_outcome_without_mapping_ends():
    step = Step.model_validate(
        {
            "id": "s",
            "type": "question",
            "conditions": [{"type": "regex", "value": "^no", "outcome": "exit"}],
            "next_steps": {"default": "next"},
        }
    )
    assert process_step(step, "no").next_step_id == "exit"


def test_custom_condition_never_matches():
    step = Step.model_validate(
        {
            "id": "s",
            "type": "question",
            "conditions": [{"type": "custom", "value": "tool:score", "outcome": "ok"}],
            "next_steps": {"default": "d", "ok": "o"},
        }
    )
    assert evaluate_conditions(step, "anything") == "d"


def test_unknown_condition_type_raises():
    step = Step.model_validate(
        {"id": "s", "type": "question", "conditions": [{"type": "llm", "value": "x", "outcome": "o"}], "next_steps": {"default": "d"}}
    )
    with pytest.raises(StepProcessingError):
        check_condition(step.conditions[0], "x")
