"""Start and advance template-driven interviews."""
from __future__ import annotations

from typing import Optional, Tuple

from observability import log_event
from step_templates import StepOutcome, advance_run, start_run
from storage import get_template_run, save_template_run

from .sessions import ScreeningContext, new_conversation_id


class UnknownTemplateError(LookupError):
    pass


class UnknownRunError(LookupError):
    pass


def begin(ctx: ScreeningContext, template_id: str, version: Optional[str] = None) -> Tuple[str, StepOutcome]:
    """Open a run on the latest (or requested) version and persist it."""

    template = ctx.catalog.get(template_id, version)
    if template is None:
        raise UnknownTemplateError(template_id)
    run_id = new_conversation_id()
    outcome = start_run(template)
    save_template_run(run_id, outcome.run)
    log_event("template_run_started", run_id, template=template.id, step=outcome.run.current_step_id)
    return run_id, outcome


def answer(ctx: ScreeningContext, run_id: str, response: str) -> StepOutcome:
    """Apply one response to a stored run. Invalid answers leave the run on its step."""

    with ctx.locks.hold(run_id):
        run = get_template_run(run_id)
        if run is None:
            raise UnknownRunError(run_id)
        template = ctx.catalog.get(run.template_id, run.template_version)
        if template is None:
            raise UnknownTemplateError(run.template_id)
        outcome = advance_run(run, template, response)
        if outcome.advanced:
            save_template_run(run_id, outcome.run)
    log_event(
        "template_turn",
        run_id,
        template=template.id,
        step=outcome.run.current_step_id,
        outcome="completed" if outcome.run.completed else ("advanced" if outcome.advanced else "retry"),
    )
    return outcome


__all__ = ["UnknownRunError", "UnknownTemplateError", "answer", "begin"]
