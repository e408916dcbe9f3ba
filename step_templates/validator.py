"""Load-time validation of interview templates."""
from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Set, Union

from pydantic import ValidationError

from .models import (
    CONDITION_TYPES,
    EXIT,
    STEP_TYPES,
    Condition,
    Step,
    Template,
    TemplateValidationError,
    ValidationResult,
)

NUMERIC_CONDITION = re.compile(r"^\s*(<=|>=|<|>|=)\s*(-?\d+(?:\.\d+)?)\s*$")


def coerce_template(raw: Union[Template, Mapping[str, Any]]) -> Template:
    """Build a ``Template`` from a mapping, reporting shape errors as validation errors."""

    if isinstance(raw, Template):
        return raw
    try:
        return Template.model_validate(raw)
    except ValidationError as exc:
        raise TemplateValidationError(f"Template has an invalid shape: {exc}") from exc


def load_template(raw: Union[Template, Mapping[str, Any]]) -> ValidationResult:
    """Validate ``raw`` and return a successful result.

    Raises:
        TemplateValidationError: On the first structural problem found.
    """

    validate_template(coerce_template(raw))
    return ValidationResult(is_valid=True)


def validate_template(template: Template) -> None:
    if not template.id or not template.name or not template.version:
        raise TemplateValidationError("Template missing required fields")
    if not template.steps:
        raise TemplateValidationError("Template must have at least one step")

    seen: Set[str] = set()
    for step in template.steps:
        _validate_step(step, seen)
    _validate_connections(template.steps)


def _validate_step(step: Step, seen: Set[str]) -> None:
    if not step.id:
        raise TemplateValidationError("Step missing id")
    if step.id in seen:
        raise TemplateValidationError(f"Duplicate step ID: {step.id}")
    seen.add(step.id)

    if step.type not in STEP_TYPES:
        raise TemplateValidationError(f"Invalid step type: {step.type}")

    if not step.next_steps:
        raise TemplateValidationError(f"Step {step.id} must have at least one next step")

    for condition in step.conditions:
        _validate_condition(step, condition)


def _validate_condition(step: Step, condition: Condition) -> None:
    if condition.type not in CONDITION_TYPES:
        raise TemplateValidationError(f"Invalid condition type: {condition.type}")
    if not condition.value:
        raise TemplateValidationError(f"Condition in step {step.id} must have a value")
    if not condition.outcome:
        raise TemplateValidationError(f"Condition in step {step.id} must have an outcome")
    if condition.outcome != EXIT and condition.outcome not in step.next_steps:
        raise TemplateValidationError(
            f"Condition outcome '{condition.outcome}' in step {step.id} has no next step"
        )
    if condition.type == "numeric" and not NUMERIC_CONDITION.match(condition.value):
        raise TemplateValidationError(f"Invalid numeric condition: {condition.value}")
    if condition.type == "regex":
        flags = re.IGNORECASE if condition.ignore_case else 0
        try:
            re.compile(condition.value, flags)
        except re.error as exc:
            raise TemplateValidationError(f"Invalid regex pattern: {condition.value}") from exc


def _validate_connections(steps: List[Step]) -> None:
    by_id: Dict[str, Step] = {step.id: step for step in steps}

    for step in steps:
        for target in step.next_steps.values():
            if target != EXIT and target not in by_id:
                raise TemplateValidationError(f"Invalid next step reference: {target}")

    visited: Set[str] = set()
    on_path: Set[str] = set()

    def visit(step_id: str) -> None:
        visited.add(step_id)
        on_path.add(step_id)
        for target in by_id[step_id].next_steps.values():
            if target == EXIT:
                continue
            if target in on_path:
                raise TemplateValidationError(f"Circular reference detected at step: {step_id}")
            if target not in visited:
                visit(target)
        on_path.discard(step_id)

    visit(steps[0].id)


__all__ = ["NUMERIC_CONDITION", "coerce_template", "load_template", "validate_template"]
