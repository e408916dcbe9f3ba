"""LLM route configuration loaded from JSON."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field


class LlmRoute(BaseModel):
    """LLM endpoint configuration."""

    name: str
    base_url: str
    endpoint: str = "/v1/chat/completions"
    model: str
    timeout_s: float = Field(default=30.0, ge=0.1)
    max_retries: int = Field(default=1, ge=0)
    api_key_env: str | None = "OPENAI_API_KEY"
    temperature: float | None = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)


class AppConfig(BaseModel):
    """Application configuration root."""

    llm_routes: Dict[str, LlmRoute]


def load_config(path: Path) -> AppConfig:
    """Load configuration from disk."""

    data = path.read_text(encoding="utf-8")
    return AppConfig.model_validate_json(data)


def resolve_route(cfg: AppConfig, name: str) -> LlmRoute:
    """Look up a named route."""

    if name not in cfg.llm_routes:
        raise KeyError(f"Route '{name}' missing from LLM config")
    return cfg.llm_routes[name]


def load_route(path: Path, name: str) -> Optional[LlmRoute]:
    """Load ``name`` from ``path``; None when the config file does not exist."""

    if not path.exists():
        return None
    return resolve_route(load_config(path), name)
