"""Helpers for bootstrapping the objects a screening turn needs."""
from __future__ import annotations

import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, Mapping, Optional

from config import InterviewConfig, LlmRoute, Settings, load_route, settings
from interview.extractor import DEFAULT_RULES, StageRule
from llm_gateway import HttpClient
from step_templates import TemplateCatalog


class ConversationLocks:
    """One lock per conversation id so turns on the same conversation never interleave.

    A lock lives only while some turn holds or waits on it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._users: Dict[str, int] = {}

    @contextmanager
    def hold(self, conversation_id: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(conversation_id, threading.Lock())
            self._users[conversation_id] = self._users.get(conversation_id, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[conversation_id] -= 1
                if not self._users[conversation_id]:
                    del self._users[conversation_id]
                    del self._locks[conversation_id]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


@dataclass(frozen=True)
class ScreeningContext:
    """Everything a turn reads besides the stored conversation; built once at startup."""

    interview: InterviewConfig
    catalog: TemplateCatalog
    route: Optional[LlmRoute] = None
    client: Optional[HttpClient] = None
    rules: Mapping[str, StageRule] = field(default_factory=lambda: DEFAULT_RULES)
    locks: ConversationLocks = field(default_factory=ConversationLocks)


def new_conversation_id() -> str:
    return uuid.uuid4().hex


def build_context(source: Optional[Settings] = None, *, client: Optional[HttpClient] = None) -> ScreeningContext:
    """Create a ``ScreeningContext`` from settings.

    A missing LLM config file leaves ``route`` unset and every reply uses the
    scripted fallback question.
    """

    cfg = source or settings
    template_dir = Path(cfg.TEMPLATE_DIR) if cfg.TEMPLATE_DIR else None
    return ScreeningContext(
        interview=InterviewConfig.from_settings(cfg),
        catalog=TemplateCatalog.with_builtins(template_dir),
        route=load_route(Path(cfg.LLM_CONFIG_PATH), cfg.LLM_ROUTE),
        client=client,
    )


__all__ = ["ConversationLocks", "ScreeningContext", "build_context", "new_conversation_id"]
