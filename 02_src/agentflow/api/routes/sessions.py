"""Chat session API routes."""

import uuid
from datetime import datetime
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ...app import IApplication
from ...logging_config import get_logger
from ...models import Category

logger = get_logger(__name__)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionResponse(_CamelModel):
    """Response model for a chat session."""

    session_id: str
    created_at: datetime
    is_active: bool


class ChatMessageResponse(_CamelModel):
    """Response model for a persisted chat message."""

    id: int | None
    session_id: str
    message: str
    is_user: bool
    agent_type: Category | None
    sql_query: str | None
    chart_data: dict[str, Any] | None
    timestamp: datetime


def create_sessions_router(app: IApplication) -> APIRouter:
    """Create sessions router."""
    router = APIRouter(prefix="/api", tags=["sessions"])

    @router.post("/sessions", response_model=SessionResponse)
    async def create_session():
        """Create a new chat session with a generated id."""
        try:
            session = await app.storage.create_session(uuid.uuid4().hex)
        except Exception as e:
            logger.error(f"Failed to create session: {e}", exc_info=True)
            return JSONResponse(status_code=500, content={"error": "Failed to create session"})
        return SessionResponse(
            session_id=session.session_id,
            created_at=session.created_at,
            is_active=session.is_active,
        )

    @router.get("/sessions/{session_id}/messages", response_model=list[ChatMessageResponse])
    async def get_messages(session_id: str):
        """Get the chat history of a session in order."""
        try:
            messages = await app.storage.get_chat_messages(session_id)
        except Exception as e:
            logger.error(f"Failed to fetch messages: {e}", exc_info=True)
            return JSONResponse(status_code=500, content={"error": "Failed to fetch messages"})
        return [
            ChatMessageResponse(
                id=m.id,
                session_id=m.session_id,
                message=m.message,
                is_user=m.is_user,
                agent_type=m.agent_type,
                sql_query=m.sql_query,
                chart_data=m.chart_data,
                timestamp=m.timestamp,
            )
            for m in messages
        ]

    return router
