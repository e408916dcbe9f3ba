import pytest

from interview import InterviewState, apply, extract
from interview.state_marker import append_marker, parse_marker, strip_marker


def _reachable_states():
    state = InterviewState()
    yield state
    for text in ["yes", "Jane Doe", "$85,000", "okay", "no", "3 months", "yes, 4 years",
                 "I once ran a code blue while the attending was stuck in traffic."]:
        state = apply(state, extract(text, state))
        yield state
    yield apply(InterviewState(), extract("no", InterviewState()))


@pytest.mark.parametrize("state", list(_reachable_states()))
def test_marker_round_trip(state):
    text = append_marker("What is your desired salary?", state)
    assert parse_marker(text) == state
    assert strip_marker(text) == "What is your desired salary?"


def test_missing_marker_yields_none():
    assert parse_marker("Just a question?") is None


def test_unreadable_marker_yields_none():
    assert parse_marker('Hi [STATE:{"stage": "moon"}]') is None
    assert parse_marker("Hi [STATE:{not json}]") is None


def test_last_marker_wins():
    first = InterviewState(stage="basic_info")
    second = InterviewState(stage="salary_discussion", candidate_name="Ana")
    text = f"{append_marker('a', first)} then {append_marker('b', second)}"
    assert parse_marker(text) == second


def test_append_refuses_double_marker():
    text = append_marker("Hello", InterviewState())
    with pytest.raises(ValueError):
        append_marker(text, InterviewState())
