"""Tests for the SQLite migration and conversation persistence helpers."""
from __future__ import annotations

import os
import sqlite3

import pytest

from interview import InterviewState, Message
from step_templates import start_run
from step_templates.builtin import ICU_NURSE
from storage import (
    StorageError,
    delete_conversation,
    get_conversation,
    get_template_run,
    list_conversations,
    migrate,
    save_template_run,
    upsert_conversation,
)
from storage.sqlite import get_conn


def _msg(role, content):
    return Message(role=role, content=content)


def test_migrate_creates_tables(tmp_db):
    assert os.path.exists(tmp_db)
    migrate(tmp_db)  # idempotent
    conn = sqlite3.connect(tmp_db)
    try:
        names = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    finally:
        conn.close()
    assert {"conversations", "interview_states", "messages", "template_runs"} <= names


def test_unknown_conversation_is_none():
    assert get_conversation("nope") is None


def test_upsert_and_reload():
    state = InterviewState(stage="basic_info")
    upsert_conversation("c1", state, [_msg("user", "yes"), _msg("assistant", "Your name?")])
    later = InterviewState(stage="salary_discussion", candidate_name="Jane Doe")
    upsert_conversation("c1", later, _msg("user", "Jane Doe"))

    found = get_conversation("c1")
    assert found.state == later
    assert found.candidate_name == "Jane Doe"
    assert [m.content for m in found.messages] == ["yes", "Your name?", "Jane Doe"]
    assert [m.role for m in found.messages] == ["user", "assistant", "user"]


def test_failed_write_leaves_nothing_behind():
    message = _msg("user", "hello")
    upsert_conversation("c1", InterviewState(), message)
    # same message id again violates the unique constraint, so the state write must roll back too
    with pytest.raises(StorageError):
        upsert_conversation("c1", InterviewState(stage="basic_info"), [_msg("user", "new"), message])
    found = get_conversation("c1")
    assert found.state.stage == "greeting"
    assert [m.content for m in found.messages] == ["hello"]


def test_failed_first_write_creates_no_conversation():
    message = _msg("user", "hello")
    with pytest.raises(StorageError):
        upsert_conversation("c2", InterviewState(), [message, message])
    assert get_conversation("c2") is None
    assert list_conversations() == []


def test_corrupt_state_is_reported():
    upsert_conversation("c1", InterviewState(), _msg("user", "hi"))
    with get_conn() as conn:
        conn.execute("UPDATE interview_states SET state_json = ? WHERE conversation_id = ?", ('{"stage": "moon"}', "c1"))
    with pytest.raises(StorageError):
        get_conversation("c1")


def test_list_and_delete():
    upsert_conversation("a", InterviewState(), _msg("user", "first"))
    ended = InterviewState(stage="greeting", completed=True, ended_early=True, end_reason="Candidate not interested in discussing the role")
    upsert_conversation("b", ended, [_msg("user", "no"), _msg("assistant", "Thanks anyway")])

    summaries = {s.id: s for s in list_conversations()}
    assert set(summaries) == {"a", "b"}
    assert summaries["b"].ended_early is True
    assert summaries["b"].last_message == "Thanks anyway"
    assert summaries["a"].stage == "greeting"

    assert delete_conversation("b") is True
    assert delete_conversation("b") is False
    assert get_conversation("b") is None
    with get_conn() as conn:
        orphans = conn.execute("SELECT COUNT(*) FROM messages WHERE conversation_id = 'b'").fetchone()[0]
    assert orphans == 0


def test_template_run_round_trip():
    run = start_run(ICU_NURSE).run
    save_template_run("r1", run)
    assert get_template_run("r1") == run
    moved = run.model_copy(update={"current_step_id": "name", "path": [*run.path, "name"]})
    save_template_run("r1", moved)
    assert get_template_run("r1").current_step_id == "name"
    assert get_template_run("missing") is None
