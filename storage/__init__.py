"""SQLite persistence for conversations and template runs."""
from .conversations import (
    StorageError,
    delete_conversation,
    get_conversation,
    list_conversations,
    upsert_conversation,
)
from .migrate import migrate
from .template_runs import get_template_run, save_template_run

__all__ = [
    "StorageError",
    "delete_conversation",
    "get_conversation",
    "get_template_run",
    "list_conversations",
    "migrate",
    "save_template_run",
    "upsert_conversation",
]
