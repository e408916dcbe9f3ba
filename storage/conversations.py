"""Persistence helpers for screening conversations."""
from __future__ import annotations

import datetime as dt
import sqlite3
from typing import List, Optional, Sequence, Union

from pydantic import ValidationError

from interview.state import Conversation, ConversationSummary, InterviewState, Message

from .sqlite import get_conn


class StorageError(RuntimeError):
    """Raised when a conversation cannot be read or written."""


def _now() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def upsert_conversation(
    conversation_id: str,
    state: InterviewState,
    message: Union[Message, Sequence[Message]],
) -> None:
    """Write the conversation row, its state and new messages in one transaction.

    Either every row lands or none do, so a conversation never exists without
    its state and a message is never stored against a stale state.
    """

    messages = [message] if isinstance(message, Message) else list(message)
    timestamp = _now()
    try:
        with get_conn() as conn:
            conn.execute(
                """INSERT INTO conversations (id, candidate_name, created_at, updated_at)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                     candidate_name = COALESCE(excluded.candidate_name, conversations.candidate_name),
                     updated_at = excluded.updated_at""",
                (conversation_id, state.candidate_name, timestamp, timestamp),
            )
            conn.execute(
                """INSERT INTO interview_states (conversation_id, stage, completed, state_json, updated_at)
                   VALUES (?, ?, ?, ?, ?)
                   ON CONFLICT(conversation_id) DO UPDATE SET
                     stage = excluded.stage,
                     completed = excluded.completed,
                     state_json = excluded.state_json,
                     updated_at = excluded.updated_at""",
                (conversation_id, state.stage, int(state.completed), state.to_json(), timestamp),
            )
            conn.executemany(
                """INSERT INTO messages (id, conversation_id, role, content, timestamp)
                   VALUES (?, ?, ?, ?, ?)""",
                [
                    (msg.id, conversation_id, msg.role, msg.content, msg.timestamp.isoformat())
                    for msg in messages
                ],
            )
    except sqlite3.Error as exc:
        raise StorageError(f"Could not save conversation {conversation_id}: {exc}") from exc


def get_conversation(conversation_id: str) -> Optional[Conversation]:
    """Load a conversation with its state and ordered transcript, or ``None``."""

    try:
        with get_conn() as conn:
            row = conn.execute(
                """SELECT c.id, c.candidate_name, c.created_at, c.updated_at, s.state_json
                   FROM conversations c
                   JOIN interview_states s ON s.conversation_id = c.id
                   WHERE c.id = ?""",
                (conversation_id,),
            ).fetchone()
            if row is None:
                return None
            message_rows = conn.execute(
                """SELECT id, role, content, timestamp FROM messages
                   WHERE conversation_id = ? ORDER BY seq""",
                (conversation_id,),
            ).fetchall()
    except sqlite3.Error as exc:
        raise StorageError(f"Could not load conversation {conversation_id}: {exc}") from exc

    try:
        return Conversation(
            id=row["id"],
            state=InterviewState.model_validate_json(row["state_json"]),
            messages=[Message(**dict(item)) for item in message_rows],
            candidate_name=row["candidate_name"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
    except ValidationError as exc:
        raise StorageError(f"Stored conversation {conversation_id} is invalid: {exc}") from exc


def list_conversations(limit: int = 100) -> List[ConversationSummary]:
    """Most recently updated conversations first."""

    try:
        with get_conn() as conn:
            rows = conn.execute(
                """SELECT c.id, c.candidate_name, c.updated_at, s.state_json,
                          (SELECT m.content FROM messages m
                           WHERE m.conversation_id = c.id
                           ORDER BY m.seq DESC LIMIT 1) AS last_message
                   FROM conversations c
                   JOIN interview_states s ON s.conversation_id = c.id
                   ORDER BY c.updated_at DESC, c.rowid DESC
                   LIMIT ?""",
                (limit,),
            ).fetchall()
    except sqlite3.Error as exc:
        raise StorageError(f"Could not list conversations: {exc}") from exc

    summaries: List[ConversationSummary] = []
    for row in rows:
        try:
            state = InterviewState.model_validate_json(row["state_json"])
        except ValidationError as exc:
            raise StorageError(f"Stored conversation {row['id']} is invalid: {exc}") from exc
        summaries.append(
            ConversationSummary(
                id=row["id"],
                candidate_name=row["candidate_name"],
                stage=state.stage,
                completed=state.completed,
                ended_early=state.ended_early,
                end_reason=state.end_reason,
                last_message=row["last_message"],
                updated_at=row["updated_at"],
            )
        )
    return summaries


def delete_conversation(conversation_id: str) -> bool:
    """Delete a conversation and everything attached to it; ``False`` if absent."""

    try:
        with get_conn() as conn:
            cur = conn.execute("DELETE FROM conversations WHERE id = ?", (conversation_id,))
            return cur.rowcount > 0
    except sqlite3.Error as exc:
        raise StorageError(f"Could not delete conversation {conversation_id}: {exc}") from exc


__all__ = [
    "StorageError",
    "delete_conversation",
    "get_conversation",
    "list_conversations",
    "upsert_conversation",
]
