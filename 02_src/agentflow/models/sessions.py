"""Chat session and message models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .analytics import Category


@dataclass
class Session:
    """A chat session owned by storage."""

    session_id: str
    created_at: datetime
    is_active: bool = True


@dataclass
class ChatMessage:
    """A persisted user query or agent result."""

    session_id: str
    message: str
    is_user: bool
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    agent_type: Category | None = None
    sql_query: str | None = None
    chart_data: dict[str, Any] | None = None
    id: int | None = None  # assigned by storage
