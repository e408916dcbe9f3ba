"""Response validation and branching for template steps."""
from __future__ import annotations

import operator
import re
from typing import Callable, Dict, List, Optional

from .models import (
    DEFAULT_OUTCOME,
    EXIT,
    Condition,
    Step,
    StepProcessingError,
    ValidationResult,
)
from .validator import NUMERIC_CONDITION

NOT_A_NUMBER = "Response must be a number"
EMPTY_RESPONSE = "Response cannot be empty"

_LEADING_FLOAT = re.compile(r"^\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")
_OPERATORS: Dict[str, Callable[[float, float], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "=": operator.eq,
}


def parse_number(response: str) -> Optional[float]:
    """Parse the leading number of ``response``, or None when it has none.

    Unlike a bare float parse, a leading ``$`` and thousands separators are
    stripped first, so "$65,000" reads as 65000.
    """

    cleaned = response.strip().lstrip("$").replace(",", "")
    match = _LEADING_FLOAT.match(cleaned)
    if not match:
        return None
    return float(match.group(0))


def _numeric_matches(condition: Condition, response: str) -> bool:
    parsed = NUMERIC_CONDITION.match(condition.value)
    if not parsed:
        raise StepProcessingError(f"Invalid numeric condition: {condition.value}")
    number = parse_number(response)
    if number is None:
        return False
    op, literal = parsed.groups()
    return _OPERATORS[op](number, float(literal))


def _regex_matches(condition: Condition, response: str) -> bool:
    flags = re.IGNORECASE if condition.ignore_case else 0
    try:
        return re.search(condition.value, response, flags) is not None
    except re.error as exc:
        raise StepProcessingError(f"Invalid regex pattern: {condition.value}") from exc


def check_condition(condition: Condition, response: str) -> bool:
    if condition.type == "regex":
        return _regex_matches(condition, response)
    if condition.type == "numeric":
        return _numeric_matches(condition, response)
    if condition.type == "custom":
        return False
    raise StepProcessingError(f"Unknown condition type: {condition.type}")


def _resolve(step: Step, outcome: str) -> str:
    if outcome in step.next_steps:
        return step.next_steps[outcome]
    if outcome == EXIT:
        return EXIT
    return step.next_steps.get(DEFAULT_OUTCOME, EXIT)


def evaluate_conditions(step: Step, response: str) -> str:
    """Return the next step id; first matching condition wins, else ``default``."""

    for condition in step.conditions:
        if check_condition(condition, response):
            return _resolve(step, condition.outcome)
    return step.next_steps.get(DEFAULT_OUTCOME, EXIT)


def validate_response(step: Step, response: str) -> ValidationResult:
    """Check that ``response`` is usable by a validation step's conditions."""

    if step.type != "validation":
        return ValidationResult(is_valid=True)
    if not response.strip():
        return ValidationResult(is_valid=False, errors=[EMPTY_RESPONSE])
    errors: List[str] = []
    for condition in step.conditions:
        if condition.type == "numeric" and parse_number(response) is None:
            errors.append(NOT_A_NUMBER)
            break
    return ValidationResult(is_valid=not errors, errors=errors)


def process_step(step: Step, response: str) -> ValidationResult:
    """Validate ``response`` and pick the next step; invalid responses do not advance."""

    result = validate_response(step, response)
    if not result.is_valid:
        return result
    return ValidationResult(is_valid=True, next_step_id=evaluate_conditions(step, response))


__all__ = [
    "EMPTY_RESPONSE",
    "NOT_A_NUMBER",
    "check_condition",
    "evaluate_conditions",
    "parse_number",
    "process_step",
    "validate_response",
]
