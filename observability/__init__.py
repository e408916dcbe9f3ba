"""Structured logging and timing helpers for screening turns."""
from .logger import log_event
from .tracing import span

__all__ = ["log_event", "span"]
