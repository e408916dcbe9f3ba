"""Application factory for the screening interview API."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import router
from config.settings import settings
from interview.engine import StateUpdateError
from services.sessions import ScreeningContext, build_context
from storage import StorageError, migrate


logger = logging.getLogger(__name__)


def create_app(context: Optional[ScreeningContext] = None) -> FastAPI:
    """Build the app around one shared ``ScreeningContext`` and a migrated database."""

    migrate(settings.DB_PATH)
    app = FastAPI(title="Screening Interview API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Conversation-Id"],
    )
    app.state.screening = context or build_context()
    app.include_router(router)

    @app.exception_handler(StorageError)
    def _storage_failed(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage failure on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": "storage unavailable"})

    @app.exception_handler(StateUpdateError)
    def _state_rejected(request: Request, exc: StateUpdateError) -> JSONResponse:
        logger.error("Rejected state update on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": "invalid interview state"})

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app
