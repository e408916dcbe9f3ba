"""Stage transition engine: merge extracted updates into interview state."""
from __future__ import annotations

from typing import Mapping, Any

from pydantic import ValidationError

from .state import InterviewState


class StateUpdateError(ValueError):
    """Raised when an update would produce an invalid interview state."""


def apply(current: InterviewState, update: Mapping[str, Any]) -> InterviewState:
    """Shallow-merge ``update`` onto ``current`` and return the new state.

    A completed conversation is frozen: ``current`` is returned unchanged.
    ``current`` is never mutated. The proposed stage is trusted as long as it
    is one of the known stages.
    """

    if current.completed:
        return current
    if not update:
        return current
    merged = current.model_dump()
    merged.update(update)
    if merged.get("ended_early"):
        merged["completed"] = True
    try:
        return InterviewState.model_validate(merged)
    except ValidationError as exc:
        raise StateUpdateError(f"Invalid state update {dict(update)!r}: {exc}") from exc


__all__ = ["StateUpdateError", "apply"]
