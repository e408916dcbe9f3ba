"""Keyword/regex field extraction for each interview stage."""
from __future__ import annotations

import re
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional

from config.interview import InterviewConfig

from .state import InterviewState, PartialState, is_known_stage

# (raw text, trimmed lowercase text, config) -> update
StageRule = Callable[[str, str, InterviewConfig], PartialState]

YES_WORDS = ("yes", "sure", "okay", "interested")
ACCEPT_WORDS = ("yes", "okay", "accept", "fine")
REFUSE_WORDS = ("no", "can't", "won't")
LICENSED_WORDS = ("yes", "licensed", "i am", "i have")
UNLICENSED_WORDS = ("no", "not licensed", "don't have")
EXPERIENCED_WORDS = ("yes", "year", "experience")
INEXPERIENCED_WORDS = ("no", "don't have", "new grad")
ACUTE_WORDS = ("yes", "acute", "hospital")

NOT_INTERESTED = "Candidate not interested in discussing the role"
OVER_BUDGET = "Salary expectations beyond budget"
TIMELINE_TOO_LONG = "License timeline too long (>{months} months)"
NO_LICENSE_PLANS = "No plans to obtain required license"

_NAME_PATTERNS = (
    re.compile(r"(?:my name is|i'm|i am|call me)\s+([a-zA-Z\s]+)", re.IGNORECASE),
    re.compile(r"^([a-zA-Z\s]{2,30})$"),
)
_NAME_FALSE_POSITIVES = ("nurse", "position", "applying")
_SALARY_RE = re.compile(r"\$?(\d+(?:,\d{3})*(?:\.\d{2})?)")
# at least one digit, so ordinary words like "license" are not taken as numbers
_LICENSE_RE = re.compile(r"(?=[A-Z0-9]*\d)([A-Z0-9]{6,})", re.IGNORECASE)
_EXPIRY_RE = re.compile(r"(\d{1,2}/\d{1,2}/\d{2,4}|\b\d{4}\b|next year|this year)", re.IGNORECASE)
_MONTHS_RE = re.compile(r"(\d+)\s*month", re.IGNORECASE)
_YEARS_RE = re.compile(r"(\d+)\s*year", re.IGNORECASE)


def _has_any(lower: str, words: Iterable[str]) -> bool:
    return any(word in lower for word in words)


def _terminate(reason: str) -> PartialState:
    return {"ended_early": True, "completed": True, "end_reason": reason}


def _finish() -> PartialState:
    return {"stage": "completed", "completed": True}


def extract_name(text: str) -> Optional[str]:
    """Return a plausible candidate name from ``text`` or None."""

    for pattern in _NAME_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        name = match.group(1).strip()
        if len(name) <= 1:
            continue
        if _has_any(name.lower(), _NAME_FALSE_POSITIVES):
            continue
        return name
    return None


def extract_salary(text: str) -> Optional[int]:
    match = _SALARY_RE.search(text)
    if not match:
        return None
    return int(float(match.group(1).replace(",", "")))


def _greeting(text: str, lower: str, cfg: InterviewConfig) -> PartialState:
    # "not interested" would otherwise hit the "interested" yes-word
    if "not interested" in lower:
        return _terminate(NOT_INTERESTED)
    if _has_any(lower, YES_WORDS):
        return {"stage": "basic_info"}
    if "no" in lower:
        return _terminate(NOT_INTERESTED)
    name = extract_name(text)
    if name:
        return {"candidate_name": name, "stage": "salary_discussion"}
    return {}


def _basic_info(text: str, lower: str, cfg: InterviewConfig) -> PartialState:
    name = extract_name(text)
    if name:
        return {"candidate_name": name, "stage": "salary_discussion"}
    return {}


def _salary_discussion(text: str, lower: str, cfg: InterviewConfig) -> PartialState:
    salary = extract_salary(text)
    if salary is None or not cfg.salary_in_band(salary):
        return {}
    if salary <= cfg.max_salary:
        return {"desired_salary": salary, "salary_acceptable": True, "stage": "license_check"}
    return {"desired_salary": salary, "stage": "salary_negotiation"}


def _salary_negotiation(text: str, lower: str, cfg: InterviewConfig) -> PartialState:
    if _has_any(lower, ACCEPT_WORDS):
        return {"salary_acceptable": True, "stage": "license_check"}
    if _has_any(lower, REFUSE_WORDS):
        return _terminate(OVER_BUDGET)
    return {}


def _license_check(text: str, lower: str, cfg: InterviewConfig) -> PartialState:
    if _has_any(lower, LICENSED_WORDS):
        return {"has_license": True, "stage": "license_details"}
    if _has_any(lower, UNLICENSED_WORDS):
        return {"has_license": False, "stage": "license_timeline"}
    return {}


def _license_details(text: str, lower: str, cfg: InterviewConfig) -> PartialState:
    update: PartialState = {}
    number = _LICENSE_RE.search(text)
    if number:
        update["license_number"] = number.group(1)
    expiry = _EXPIRY_RE.search(text)
    if expiry:
        update["license_expiry"] = expiry.group(1)
    if len(text) > 10:
        update["stage"] = "experience"
    return update


def _license_timeline(text: str, lower: str, cfg: InterviewConfig) -> PartialState:
    if _has_any(lower, ("month", "week", "soon")):
        months = _MONTHS_RE.search(text)
        if months and int(months.group(1)) > cfg.license_grace_months:
            return _terminate(TIMELINE_TOO_LONG.format(months=cfg.license_grace_months))
        return {"stage": "experience"}
    if _has_any(lower, ("no", "not planning")):
        return _terminate(NO_LICENSE_PLANS)
    return {}


def _experience(text: str, lower: str, cfg: InterviewConfig) -> PartialState:
    if _has_any(lower, EXPERIENCED_WORDS):
        update: PartialState = {"has_experience": True, "stage": "experience_details"}
        years = _YEARS_RE.search(text)
        if years:
            update["experience_years"] = int(years.group(1))
        return update
    if _has_any(lower, INEXPERIENCED_WORDS):
        return {"has_experience": False, "stage": "alternative_experience"}
    return {}


def _experience_details(text: str, lower: str, cfg: InterviewConfig) -> PartialState:
    if len(text.strip()) > cfg.experience_details_min_chars:
        return _finish()
    return {}


def _alternative_experience(text: str, lower: str, cfg: InterviewConfig) -> PartialState:
    if _has_any(lower, ACUTE_WORDS):
        return {"stage": "experience_details"}
    return _finish()


DEFAULT_RULES: Mapping[str, StageRule] = MappingProxyType(
    {
        "greeting": _greeting,
        "basic_info": _basic_info,
        "salary_discussion": _salary_discussion,
        "salary_negotiation": _salary_negotiation,
        "license_check": _license_check,
        "license_details": _license_details,
        "license_timeline": _license_timeline,
        "experience": _experience,
        "experience_details": _experience_details,
        "alternative_experience": _alternative_experience,
    }
)


def extract(
    text: str,
    state: InterviewState,
    cfg: Optional[InterviewConfig] = None,
    *,
    rules: Mapping[str, StageRule] = DEFAULT_RULES,
) -> PartialState:
    """Return the partial update implied by ``text`` at the state's stage.

    Pure: no I/O and ``state`` is not touched. Unrecognised input, finished
    conversations and stages without a rule all yield an empty update.
    """

    if state.completed or not is_known_stage(state.stage):
        return {}
    rule = rules.get(state.stage)
    if rule is None:
        return {}
    cfg = cfg or InterviewConfig()
    return rule(text, text.lower().strip(), cfg)


__all__ = [
    "DEFAULT_RULES",
    "NOT_INTERESTED",
    "NO_LICENSE_PLANS",
    "OVER_BUDGET",
    "StageRule",
    "TIMELINE_TOO_LONG",
    "extract",
    "extract_name",
    "extract_salary",
]
