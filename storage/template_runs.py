"""Persistence helpers for template walker runs."""
from __future__ import annotations

import datetime as dt
import sqlite3
from typing import Optional

from pydantic import ValidationError

from step_templates.walker import TemplateRun

from .conversations import StorageError
from .sqlite import get_conn


def save_template_run(run_id: str, run: TemplateRun) -> None:
    timestamp = dt.datetime.now(dt.timezone.utc).isoformat()
    try:
        with get_conn() as conn:
            conn.execute(
                """INSERT INTO template_runs (id, template_id, template_version, run_json, updated_at)
                   VALUES (?, ?, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                     run_json = excluded.run_json,
                     updated_at = excluded.updated_at""",
                (run_id, run.template_id, run.template_version, run.model_dump_json(), timestamp),
            )
    except sqlite3.Error as exc:
        raise StorageError(f"Could not save template run {run_id}: {exc}") from exc


def get_template_run(run_id: str) -> Optional[TemplateRun]:
    try:
        with get_conn() as conn:
            row = conn.execute("SELECT run_json FROM template_runs WHERE id = ?", (run_id,)).fetchone()
    except sqlite3.Error as exc:
        raise StorageError(f"Could not load template run {run_id}: {exc}") from exc
    if row is None:
        return None
    try:
        return TemplateRun.model_validate_json(row["run_json"])
    except ValidationError as exc:
        raise StorageError(f"Stored template run {run_id} is invalid: {exc}") from exc


__all__ = ["get_template_run", "save_template_run"]
