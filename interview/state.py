"""Interview state, transcript and conversation records."""
from __future__ import annotations

import datetime as dt
import uuid
from typing import Any, Dict, List, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

Stage = Literal[
    "greeting",
    "basic_info",
    "salary_discussion",
    "salary_negotiation",
    "license_check",
    "license_details",
    "license_timeline",
    "experience",
    "experience_details",
    "alternative_experience",
    "completed",
]

STAGES: tuple[str, ...] = get_args(Stage)

# Field name -> value; only the keys an extraction step wants to change.
PartialState = Dict[str, Any]


def is_known_stage(value: Any) -> bool:
    return isinstance(value, str) and value in STAGES


class InterviewState(BaseModel):
    """Structured facts gathered from the candidate plus the current stage.

    Serialised with camelCase keys so stored blobs stay readable by the web
    client that consumed the legacy ``[STATE:...]`` marker.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    stage: Stage = "greeting"
    candidate_name: Optional[str] = None
    desired_salary: Optional[int] = None
    salary_acceptable: Optional[bool] = None
    has_license: Optional[bool] = None
    license_number: Optional[str] = None
    license_expiry: Optional[str] = None
    has_experience: Optional[bool] = None
    experience_years: Optional[int] = None
    completed: bool = False
    ended_early: Optional[bool] = None
    end_reason: Optional[str] = None

    @model_validator(mode="after")
    def _early_end_is_terminal(self) -> "InterviewState":
        if self.ended_early and not self.completed:
            raise ValueError("ended_early requires completed")
        return self

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


Role = Literal["user", "assistant"]


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Message(BaseModel):
    """Single transcript entry; never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: Role
    content: str
    timestamp: dt.datetime = Field(default_factory=_utcnow)


class Conversation(BaseModel):
    id: str
    state: InterviewState = Field(default_factory=InterviewState)
    messages: List[Message] = Field(default_factory=list)
    candidate_name: Optional[str] = None
    created_at: dt.datetime = Field(default_factory=_utcnow)
    updated_at: dt.datetime = Field(default_factory=_utcnow)


class ConversationSummary(BaseModel):
    id: str
    candidate_name: Optional[str] = None
    stage: Stage
    completed: bool
    ended_early: Optional[bool] = None
    end_reason: Optional[str] = None
    last_message: Optional[str] = None
    updated_at: dt.datetime


__all__ = [
    "Conversation",
    "ConversationSummary",
    "InterviewState",
    "Message",
    "PartialState",
    "Role",
    "STAGES",
    "Stage",
    "is_known_stage",
]
