"""Line-oriented console interviews for the scripted and template variants."""
from __future__ import annotations

from typing import Callable, Optional

from interview import InterviewState, compose
from services.sessions import ScreeningContext, new_conversation_id
from services.turns import run_turn
from step_templates import Template, advance_run, start_run

QUIT_WORDS = ("quit", "exit")

# Returns None at end of input
ReadLine = Callable[[str], Optional[str]]
WriteLine = Callable[[str], None]


def stdin_reader(prompt: str) -> Optional[str]:
    try:
        return input(prompt)
    except EOFError:
        return None


def _wants_out(line: Optional[str]) -> bool:
    return line is None or line.strip().lower() in QUIT_WORDS


def run_scripted(
    ctx: ScreeningContext,
    read_line: ReadLine,
    write_line: WriteLine,
    conversation_id: Optional[str] = None,
) -> InterviewState:
    """Interview the candidate until the state completes or input ends."""

    conversation_id = conversation_id or new_conversation_id()
    state = InterviewState()
    write_line(compose(state, ctx.interview).fallback_question)
    while not state.completed:
        line = read_line("> ")
        if _wants_out(line):
            break
        result = run_turn(ctx, conversation_id, line)
        state = result.state
        write_line(result.reply)
    return state


def run_template(template: Template, read_line: ReadLine, write_line: WriteLine) -> dict:
    """Walk ``template`` in memory and return the collected answers."""

    outcome = start_run(template)
    write_line(outcome.reply)
    run = outcome.run
    while not run.completed:
        line = read_line("> ")
        if _wants_out(line):
            break
        outcome = advance_run(run, template, line)
        run = outcome.run
        write_line(outcome.reply)
    return dict(run.answers)


__all__ = ["QUIT_WORDS", "ReadLine", "WriteLine", "run_scripted", "run_template", "stdin_reader"]
