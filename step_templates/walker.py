"""Walk a validated template one candidate response at a time."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .models import EXIT, Step, Template
from .processor import NOT_A_NUMBER, process_step

DEFAULT_CLOSING = "Thank you for your time! We'll be in touch soon."
EARLY_EXIT_TAG = "early_exit"


class TemplateRun(BaseModel):
    """Serializable progress through one template."""

    template_id: str
    template_version: str
    current_step_id: str
    answers: Dict[str, str] = Field(default_factory=dict)
    path: List[str] = Field(default_factory=list)
    completed: bool = False
    ended_early: bool = False
    end_reason: Optional[str] = None


class StepOutcome(BaseModel):
    run: TemplateRun
    reply: str
    advanced: bool
    errors: List[str] = Field(default_factory=list)


def _clarification(step: Step, errors: List[str]) -> str:
    if NOT_A_NUMBER in errors:
        for condition in step.conditions:
            if condition.type == "numeric" and condition.metadata.error_message:
                return condition.metadata.error_message
    return errors[0] if errors else step.content


def _finish(run: TemplateRun, step: Optional[Step]) -> TemplateRun:
    update: Dict[str, object] = {"completed": True}
    if step is not None:
        update["current_step_id"] = step.id
        update["path"] = [*run.path, step.id]
        if EARLY_EXIT_TAG in step.metadata.tags:
            update["ended_early"] = True
            update["end_reason"] = f"Exited at step {step.id}"
    return run.model_copy(update=update)


def start_run(template: Template) -> StepOutcome:
    """Open a run at the entry step and return its question."""

    entry = template.entry_step
    run = TemplateRun(
        template_id=template.id,
        template_version=template.version,
        current_step_id=entry.id,
        path=[entry.id],
    )
    if entry.type == "exit":
        return StepOutcome(run=_finish(run, None), reply=entry.content or DEFAULT_CLOSING, advanced=False)
    return StepOutcome(run=run, reply=entry.content, advanced=False)


def advance_run(run: TemplateRun, template: Template, response: str) -> StepOutcome:
    """Apply ``response`` to the current step and move along the graph.

    Invalid responses keep the run on the same step and return a
    clarification. Reaching ``exit`` or an exit-type step completes the run.
    """

    step = template.step(run.current_step_id)
    if run.completed or step is None:
        return StepOutcome(run=run, reply=DEFAULT_CLOSING, advanced=False)

    result = process_step(step, response)
    if not result.is_valid:
        return StepOutcome(
            run=run,
            reply=_clarification(step, result.errors),
            advanced=False,
            errors=result.errors,
        )

    answered = run.model_copy(update={"answers": {**run.answers, step.id: response}})
    next_id = result.next_step_id or EXIT
    next_step = None if next_id == EXIT else template.step(next_id)
    if next_step is None:
        return StepOutcome(run=_finish(answered, None), reply=DEFAULT_CLOSING, advanced=True)
    if next_step.type == "exit":
        return StepOutcome(
            run=_finish(answered, next_step),
            reply=next_step.content or DEFAULT_CLOSING,
            advanced=True,
        )
    moved = answered.model_copy(update={"current_step_id": next_step.id, "path": [*answered.path, next_step.id]})
    return StepOutcome(run=moved, reply=next_step.content, advanced=True)


__all__ = ["DEFAULT_CLOSING", "StepOutcome", "TemplateRun", "advance_run", "start_run"]
