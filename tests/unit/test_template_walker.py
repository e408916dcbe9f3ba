import pytest

from step_templates import advance_run, start_run
from step_templates.builtin import ICU_NURSE, SOFTWARE_ENGINEER


def _walk(template, answers):
    outcome = start_run(template)
    for answer in answers:
        outcome = advance_run(outcome.run, template, answer)
    return outcome


def test_start_asks_entry_question():
    outcome = start_run(ICU_NURSE)
    assert outcome.run.current_step_id == "interest_check"
    assert outcome.reply == ICU_NURSE.step("interest_check").content
    assert not outcome.run.completed


def test_happy_path_reaches_ending():
    outcome = _walk(ICU_NURSE, ["yes", "Jane Doe", "65000", "yes", "yes", "A long story about a code blue."])
    run = outcome.run
    assert run.completed
    assert not run.ended_early
    assert run.current_step_id == "ending"
    assert run.answers["salary"] == "65000"
    assert run.path == ["interest_check", "name", "salary", "license", "experience_years", "experience_story", "ending"]
    assert outcome.reply == ICU_NURSE.step("ending").content


def test_invalid_salary_keeps_step_and_clarifies():
    outcome = _walk(ICU_NURSE, ["yes", "Jane Doe", "a fair amount"])
    assert not outcome.advanced
    assert outcome.run.current_step_id == "salary"
    assert outcome.reply == "Please specify a numeric salary, for example 65000."
    assert "salary" not in outcome.run.answers


def test_over_budget_then_refusal_ends_early():
    outcome = _walk(ICU_NURSE, ["yes", "Jane Doe", "90000", "no way"])
    assert outcome.run.completed
    assert outcome.run.ended_early
    assert outcome.run.end_reason == "Exited at step over_budget"


def test_not_interested_ends_early():
    outcome = _walk(ICU_NURSE, ["no"])
    assert outcome.run.ended_early
    assert outcome.run.current_step_id == "not_interested"


def test_license_timing_branch():
    late = _walk(ICU_NURSE, ["yes", "Jane", "60000", "no", "9"])
    assert late.run.current_step_id == "license_too_late"
    soon = _walk(ICU_NURSE, ["yes", "Jane", "60000", "no", "3"])
    assert soon.run.current_step_id == "experience_years"


def test_completed_run_does_not_move():
    done = _walk(ICU_NURSE, ["no"])
    again = advance_run(done.run, ICU_NURSE, "yes")
    assert again.run == done.run
    assert not again.advanced


def test_software_engineer_template():
    outcome = _walk(SOFTWARE_ENGINEER, ["sure", "5", "React and TypeScript with Node", "140000", "yes"])
    assert outcome.run.current_step_id == "success_exit"
    assert not outcome.run.ended_early
    junior = _walk(SOFTWARE_ENGINEER, ["sure", "1"])
    assert junior.run.ended_early


@pytest.mark.parametrize("answer", ["Now is fine", "Nothing would stop me"])
def test_words_starting_with_no_are_not_refusals(answer):
    outcome = _walk(ICU_NURSE, [answer])
    assert outcome.run.current_step_id == "name"
    assert not outcome.run.completed


def test_software_engineer_availability_word_boundary():
    answers = ["Now works", "5", "React and TypeScript with Node", "140000"]
    assert _walk(SOFTWARE_ENGINEER, [*answers, "Notice period is two weeks"]).run.current_step_id == "success_exit"
    assert _walk(SOFTWARE_ENGINEER, [*answers, "No, sorry"]).run.ended_early
