"""Tracker: persists pipeline milestones as TraceEvents."""

import uuid
from datetime import datetime, timezone
from typing import Protocol

from ..logging_config import get_logger
from ..models import TraceEvent
from ..storage import IStorage

logger = get_logger(__name__)


class ITracker(Protocol):
    """Records pipeline milestones as TraceEvents."""

    async def track(self, event_type: str, actor: str, data: dict) -> None:
        """Persist one milestone."""
        ...


class Tracker:
    """Writes each tracked milestone straight to Storage."""

    def __init__(self, storage: IStorage):
        self._storage = storage

    async def track(self, event_type: str, actor: str, data: dict) -> None:
        event = TraceEvent(
            id=str(uuid.uuid4()),
            event_type=event_type,
            actor=actor,
            data=dict(data),
            timestamp=datetime.now(timezone.utc),
        )
        await self._storage.save_trace_event(event)
        logger.debug(
            f"Tracked {event_type}",
            extra={
                "context": {
                    "actor": actor,
                    "session_id": data.get("session_id"),
                }
            },
        )
