"""Scripted screening interview: extraction, transitions and prompts."""
from .engine import StateUpdateError, apply
from .extractor import DEFAULT_RULES, StageRule, extract
from .prompts import ComposedPrompt, compose
from .state import STAGES, Conversation, ConversationSummary, InterviewState, Message, PartialState, Stage

__all__ = [
    "ComposedPrompt",
    "Conversation",
    "ConversationSummary",
    "DEFAULT_RULES",
    "InterviewState",
    "Message",
    "PartialState",
    "STAGES",
    "Stage",
    "StageRule",
    "StateUpdateError",
    "apply",
    "compose",
    "extract",
]
