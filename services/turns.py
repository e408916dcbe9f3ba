"""Turn orchestration for the scripted screening interview.

One candidate message runs extract -> apply -> compose, then either the LLM
rephrases the next question or the scripted fallback is used. The user and
assistant messages are persisted with the new state in one transaction.
"""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Literal, Optional, Sequence, Tuple

from interview import ComposedPrompt, InterviewState, Message, apply, compose, extract
from interview.state_marker import strip_marker
from llm_gateway import LlmGatewayError, LlmUnavailableError, complete, stream_complete
from observability import log_event, span
from storage import get_conversation, upsert_conversation

from .sessions import ScreeningContext, new_conversation_id

logger = logging.getLogger(__name__)

ReplySource = Literal["llm", "fallback"]


@dataclass(frozen=True)
class TurnResult:
    conversation_id: str
    reply: str
    state: InterviewState
    source: ReplySource
    events: List[Dict[str, Any]]


@dataclass(frozen=True)
class _Prepared:
    state: InterviewState
    prompt: ComposedPrompt
    user_message: Message
    history: List[Dict[str, str]]
    was_completed: bool


class TokenBuffer:
    """Forward streamed chunks while keeping the full text for the final commit."""

    def __init__(self) -> None:
        self._parts: List[str] = []
        self.finished = False

    def feed(self, chunks: Iterable[str]) -> Iterator[str]:
        for chunk in chunks:
            self._parts.append(chunk)
            yield chunk
        self.finished = True

    @property
    def text(self) -> str:
        return "".join(self._parts)


def chat_history(messages: Sequence[Message]) -> List[Dict[str, str]]:
    """Transcript in chat-completions shape, with legacy state markers removed."""
    return [{"role": msg.role, "content": strip_marker(msg.content)} for msg in messages]


def _prepare(ctx: ScreeningContext, conversation_id: str, text: str, events: List[Dict[str, Any]]) -> _Prepared:
    existing = get_conversation(conversation_id)
    current = existing.state if existing else InterviewState()
    transcript = existing.messages if existing else []
    with span(events, "extract"):
        update = extract(text, current, ctx.interview, rules=ctx.rules)
    with span(events, "apply"):
        state = apply(current, update)
    user_message = Message(role="user", content=text)
    return _Prepared(
        state=state,
        prompt=compose(state, ctx.interview),
        user_message=user_message,
        history=chat_history([*transcript, user_message]),
        was_completed=current.completed,
    )


def _llm_reply(ctx: ScreeningContext, prepared: _Prepared, conversation_id: str) -> Tuple[str, ReplySource]:
    if prepared.was_completed:
        return prepared.prompt.fallback_question, "fallback"
    try:
        text = complete(prepared.prompt.system_prompt, prepared.history, cfg=ctx.route, client=ctx.client)
    except LlmUnavailableError as exc:
        logger.debug("LLM unavailable for conversation=%s: %s", conversation_id, exc)
        return prepared.prompt.fallback_question, "fallback"
    except LlmGatewayError as exc:
        logger.warning("LLM failed for conversation=%s, using scripted question: %s", conversation_id, exc)
        return prepared.prompt.fallback_question, "fallback"
    reply = strip_marker(text)
    if not reply:
        logger.warning("LLM returned an empty reply for conversation=%s", conversation_id)
        return prepared.prompt.fallback_question, "fallback"
    return reply, "llm"


def _commit(conversation_id: str, prepared: _Prepared, reply: str, events: List[Dict[str, Any]]) -> None:
    with span(events, "persist"):
        upsert_conversation(
            conversation_id,
            prepared.state,
            [prepared.user_message, Message(role="assistant", content=reply)],
        )


def run_turn(ctx: ScreeningContext, conversation_id: Optional[str], text: str) -> TurnResult:
    """Process one candidate message and return the interviewer's reply.

    The candidate always gets a question back: LLM failures fall back to the
    scripted text. Storage errors propagate and nothing is committed.
    """

    conversation_id = conversation_id or new_conversation_id()
    events: List[Dict[str, Any]] = []
    with ctx.locks.hold(conversation_id):
        prepared = _prepare(ctx, conversation_id, text, events)
        with span(events, "reply"):
            reply, source = _llm_reply(ctx, prepared, conversation_id)
        _commit(conversation_id, prepared, reply, events)
    log_event(
        "turn",
        conversation_id,
        stage=prepared.state.stage,
        source=source,
        ms=sum(evt["ms"] for evt in events),
        outcome="completed" if prepared.state.completed else "open",
    )
    return TurnResult(
        conversation_id=conversation_id,
        reply=reply,
        state=prepared.state,
        source=source,
        events=events,
    )


def stream_turn(ctx: ScreeningContext, conversation_id: str, text: str) -> Iterator[str]:
    """Yield the reply as it is produced; commit only once the stream ends cleanly.

    If the LLM fails before its first chunk the scripted question is yielded
    instead. A failure or a closed consumer mid-stream commits nothing, so the
    conversation stays in its pre-turn state.
    """

    events: List[Dict[str, Any]] = []
    with ctx.locks.hold(conversation_id):
        prepared = _prepare(ctx, conversation_id, text, events)
        source: ReplySource = "llm"
        first: Optional[str] = None
        chunks: Iterator[str] = iter(())
        if not prepared.was_completed:
            chunks = stream_complete(prepared.prompt.system_prompt, prepared.history, cfg=ctx.route, client=ctx.client)
            try:
                first = next(chunks, None)
            except LlmUnavailableError:
                first = None
            except LlmGatewayError as exc:
                logger.warning("LLM stream failed for conversation=%s, using scripted question: %s", conversation_id, exc)
                first = None

        if first is None:
            source = "fallback"
            reply = prepared.prompt.fallback_question
            yield reply
        else:
            buffer = TokenBuffer()
            try:
                yield from buffer.feed(itertools.chain([first], chunks))
            except LlmGatewayError as exc:
                log_event("stream_aborted", conversation_id, level=logging.WARNING, stage=prepared.state.stage, error=str(exc))
                return
            reply = strip_marker(buffer.text) or prepared.prompt.fallback_question

        _commit(conversation_id, prepared, reply, events)
    log_event(
        "turn",
        conversation_id,
        stage=prepared.state.stage,
        source=source,
        ms=sum(evt["ms"] for evt in events),
        outcome="streamed",
    )


__all__ = ["ReplySource", "TokenBuffer", "TurnResult", "chat_history", "run_turn", "stream_turn"]
