"""Pydantic schemas for the screening chat API."""
from __future__ import annotations

import datetime as dt
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from interview.state import InterviewState, Message


class ChatReq(BaseModel):
    conversation_id: Optional[str] = None
    message: str = Field(min_length=1)


class ChatResp(BaseModel):
    conversation_id: str
    reply: str
    state: InterviewState
    source: Literal["llm", "fallback"]
    event_log: List[Dict] = Field(default_factory=list)


class ConversationResp(BaseModel):
    id: str
    candidate_name: Optional[str] = None
    state: InterviewState
    messages: List[Message] = Field(default_factory=list)
    created_at: dt.datetime
    updated_at: dt.datetime


class TemplateSummary(BaseModel):
    id: str
    name: str
    version: str
    description: str = ""
    role_type: Optional[str] = None
    step_count: int


class StartRunReq(BaseModel):
    version: Optional[str] = None


class TemplateTurnReq(BaseModel):
    run_id: str
    response: str


class TemplateTurnResp(BaseModel):
    run_id: str
    template_id: str
    reply: str
    current_step_id: str
    advanced: bool
    completed: bool
    ended_early: bool = False
    end_reason: Optional[str] = None
    errors: List[str] = Field(default_factory=list)
