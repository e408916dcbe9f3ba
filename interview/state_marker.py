"""Inline ``[STATE:{json}]`` marker used by older chat transcripts.

New responses carry state in a separate field; these helpers remain so stored
assistant messages from the web client can be cleaned and recovered.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Optional

from pydantic import ValidationError

from .state import InterviewState

logger = logging.getLogger(__name__)

MARKER_PREFIX = "[STATE:"
_MARKER_RE = re.compile(r"\[STATE:(\{[\s\S]*?\})\]")


def append_marker(text: str, state: InterviewState) -> str:
    if MARKER_PREFIX in text:
        raise ValueError("Text already contains a state marker")
    return f"{text}{MARKER_PREFIX}{state.to_json()}]"


def strip_marker(text: str) -> str:
    """Remove every state marker and surrounding whitespace."""
    return _MARKER_RE.sub("", text).strip()


def parse_marker(text: str) -> Optional[InterviewState]:
    """Recover the last marker's state, or None when absent or unreadable."""

    matches = _MARKER_RE.findall(text)
    # lazy match can stop at a nested "}]"; try longer spans before giving up
    for raw in reversed(matches):
        state = _load(raw)
        if state is not None:
            return state
    start = text.rfind(MARKER_PREFIX)
    if start == -1:
        return None
    end = text.rfind("]")
    if end <= start:
        return None
    return _load(text[start + len(MARKER_PREFIX) : end])


def _load(raw: str) -> Optional[InterviewState]:
    try:
        return InterviewState.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Ignoring unreadable state marker: %s", exc)
        return None


__all__ = ["MARKER_PREFIX", "append_marker", "parse_marker", "strip_marker"]
