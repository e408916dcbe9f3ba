"""FastAPI routes for screening chats and template-driven interviews."""
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from api.schemas import (
    ChatReq,
    ChatResp,
    ConversationResp,
    StartRunReq,
    TemplateSummary,
    TemplateTurnReq,
    TemplateTurnResp,
)
from interview.state import ConversationSummary
from services import template_runs
from services.sessions import ScreeningContext, new_conversation_id
from services.turns import run_turn, stream_turn
from step_templates import StepOutcome
from storage import delete_conversation, get_conversation, list_conversations


router = APIRouter(prefix="/api")


def get_context(request: Request) -> ScreeningContext:
    return request.app.state.screening


def _turn_resp(run_id: str, outcome: StepOutcome) -> TemplateTurnResp:
    run = outcome.run
    return TemplateTurnResp(
        run_id=run_id,
        template_id=run.template_id,
        reply=outcome.reply,
        current_step_id=run.current_step_id,
        advanced=outcome.advanced,
        completed=run.completed,
        ended_early=run.ended_early,
        end_reason=run.end_reason,
        errors=outcome.errors,
    )


@router.post("/chat", response_model=ChatResp)
def chat(req: ChatReq, ctx: ScreeningContext = Depends(get_context)) -> ChatResp:
    result = run_turn(ctx, req.conversation_id, req.message)
    return ChatResp(
        conversation_id=result.conversation_id,
        reply=result.reply,
        state=result.state,
        source=result.source,
        event_log=result.events,
    )


@router.post("/chat/stream")
def chat_stream(req: ChatReq, ctx: ScreeningContext = Depends(get_context)) -> StreamingResponse:
    conversation_id = req.conversation_id or new_conversation_id()
    return StreamingResponse(
        stream_turn(ctx, conversation_id, req.message),
        media_type="text/plain; charset=utf-8",
        headers={"X-Conversation-Id": conversation_id},
    )


@router.get("/conversations", response_model=List[ConversationSummary])
def conversations(limit: int = 100) -> List[ConversationSummary]:
    return list_conversations(limit=limit)


@router.get("/conversations/{conversation_id}", response_model=ConversationResp)
def conversation(conversation_id: str) -> ConversationResp:
    found = get_conversation(conversation_id)
    if found is None:
        raise HTTPException(status_code=404, detail="conversation not found")
    return ConversationResp(
        id=found.id,
        candidate_name=found.candidate_name,
        state=found.state,
        messages=found.messages,
        created_at=found.created_at,
        updated_at=found.updated_at,
    )


@router.delete("/conversations/{conversation_id}", status_code=204)
def remove_conversation(conversation_id: str, ctx: ScreeningContext = Depends(get_context)) -> None:
    with ctx.locks.hold(conversation_id):
        deleted = delete_conversation(conversation_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="conversation not found")


@router.get("/templates", response_model=List[TemplateSummary])
def templates(role: Optional[str] = None, ctx: ScreeningContext = Depends(get_context)) -> List[TemplateSummary]:
    found = ctx.catalog.by_role(role) if role else ctx.catalog.latest()
    return [
        TemplateSummary(
            id=template.id,
            name=template.name,
            version=template.version,
            description=template.description,
            role_type=template.metadata.role_type or None,
            step_count=len(template.steps),
        )
        for template in found
    ]


@router.post("/templates/{template_id}/runs", response_model=TemplateTurnResp)
def start_template_run(
    template_id: str,
    req: Optional[StartRunReq] = None,
    ctx: ScreeningContext = Depends(get_context),
) -> TemplateTurnResp:
    version = req.version if req else None
    try:
        run_id, outcome = template_runs.begin(ctx, template_id, version)
    except template_runs.UnknownTemplateError:
        raise HTTPException(status_code=404, detail="template not found")
    return _turn_resp(run_id, outcome)


@router.post("/template-runs/turn", response_model=TemplateTurnResp)
def template_turn(req: TemplateTurnReq, ctx: ScreeningContext = Depends(get_context)) -> TemplateTurnResp:
    try:
        outcome = template_runs.answer(ctx, req.run_id, req.response)
    except template_runs.UnknownRunError:
        raise HTTPException(status_code=404, detail="run not found")
    except template_runs.UnknownTemplateError:
        raise HTTPException(status_code=409, detail="template for this run is no longer loaded")
    return _turn_resp(req.run_id, outcome)
