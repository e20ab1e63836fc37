"""REST client for chat history and production trends."""

from datetime import date, datetime
from typing import Any, Protocol

import httpx

from ..logging_config import get_logger
from ..models import Category, ChatMessage, Session

logger = get_logger(__name__)


class IHistoryClient(Protocol):
    """Reads persisted state over the REST API."""

    async def create_session(self) -> Session:
        """Create a new server-side session."""
        ...

    async def get_messages(self, session_id: str) -> list[ChatMessage]:
        """Get the chat history of a session."""
        ...


class HistoryClient:
    """httpx-backed client for the /api routes."""

    def __init__(
        self,
        api_url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._api_url = api_url.rstrip("/")
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    async def start(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)

    async def stop(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def create_session(self) -> Session:
        data = await self._request("POST", "/api/sessions")
        return Session(
            session_id=data["sessionId"],
            created_at=datetime.fromisoformat(data["createdAt"]),
            is_active=data["isActive"],
        )

    async def get_messages(self, session_id: str) -> list[ChatMessage]:
        rows = await self._request("GET", f"/api/sessions/{session_id}/messages")
        return [
            ChatMessage(
                id=row.get("id"),
                session_id=row["sessionId"],
                message=row["message"],
                is_user=row["isUser"],
                agent_type=Category(row["agentType"]) if row.get("agentType") else None,
                sql_query=row.get("sqlQuery"),
                chart_data=row.get("chartData"),
                timestamp=datetime.fromisoformat(row["timestamp"]),
            )
            for row in rows
        ]

    async def get_production_trends(self, months: int = 6) -> list[dict[str, Any]]:
        """Raw production records; ``date`` is parsed, other fields stay camelCase."""
        rows = await self._request(
            "GET", "/api/production/trends", params={"months": months}
        )
        for row in rows:
            row["date"] = date.fromisoformat(row["date"])
        return rows

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        if self._client is None:
            raise RuntimeError("HistoryClient not started")

        response = await self._client.request(method, f"{self._api_url}{path}", **kwargs)
        if response.status_code != 200:
            logger.error("API error %s on %s %s", response.status_code, method, path)
        response.raise_for_status()
        return response.json()
