import pytest

from services import template_runs
from storage import get_template_run


def test_begin_persists_run(context):
    run_id, outcome = template_runs.begin(context, "rn-icu-interview")
    assert outcome.run.current_step_id == "interest_check"
    assert get_template_run(run_id) == outcome.run


def test_answer_advances_and_saves(context):
    run_id, _ = template_runs.begin(context, "rn-icu-interview")
    outcome = template_runs.answer(context, run_id, "yes")
    assert outcome.advanced
    assert get_template_run(run_id).current_step_id == "name"


def test_invalid_answer_is_not_saved(context):
    run_id, _ = template_runs.begin(context, "rn-icu-interview")
    for text in ("yes", "Jane"):
        template_runs.answer(context, run_id, text)
    outcome = template_runs.answer(context, run_id, "whatever you offer")
    assert not outcome.advanced
    assert get_template_run(run_id).current_step_id == "salary"


def test_unknown_template_and_run(context):
    with pytest.raises(template_runs.UnknownTemplateError):
        template_runs.begin(context, "astronaut")
    with pytest.raises(template_runs.UnknownRunError):
        template_runs.answer(context, "missing", "yes")
