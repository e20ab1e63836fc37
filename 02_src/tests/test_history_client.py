"""Tests for HistoryClient."""

import json

import httpx
import pytest

from agentflow.client import HistoryClient
from agentflow.models import Category


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestHistoryClient:
    """Tests for HistoryClient requests."""

    @pytest.mark.asyncio
    async def test_create_session(self):
        """Test parsing the created session."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "POST"
            assert request.url.path == "/api/sessions"
            return httpx.Response(
                200,
                json={
                    "sessionId": "abc",
                    "createdAt": "2025-05-01T10:00:00+00:00",
                    "isActive": True,
                },
            )

        client = HistoryClient("http://test/", client=mock_client(handler))
        session = await client.create_session()

        assert session.session_id == "abc"
        assert session.created_at.year == 2025
        assert session.is_active is True

    @pytest.mark.asyncio
    async def test_get_messages(self):
        """Test parsing chat history rows."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/sessions/s1/messages"
            return httpx.Response(
                200,
                json=[
                    {
                        "id": 1,
                        "sessionId": "s1",
                        "message": "Why?",
                        "isUser": True,
                        "agentType": None,
                        "sqlQuery": None,
                        "chartData": None,
                        "timestamp": "2025-05-01T10:00:00Z",
                    },
                    {
                        "id": 2,
                        "sessionId": "s1",
                        "message": "Because.",
                        "isUser": False,
                        "agentType": "diagnostic",
                        "sqlQuery": "SELECT 1",
                        "chartData": None,
                        "timestamp": "2025-05-01T10:00:05Z",
                    },
                ],
            )

        client = HistoryClient("http://test", client=mock_client(handler))
        user, result = await client.get_messages("s1")

        assert user.is_user is True
        assert user.agent_type is None
        assert result.agent_type is Category.DIAGNOSTIC
        assert result.sql_query == "SELECT 1"

    @pytest.mark.asyncio
    async def test_production_trends_params(self):
        """Test that the month count is sent as a query parameter."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["months"] == "3"
            return httpx.Response(200, content=json.dumps([{"date": "2025-05-01"}]))

        client = HistoryClient("http://test", client=mock_client(handler))
        rows = await client.get_production_trends(months=3)

        assert rows[0]["date"].isoformat() == "2025-05-01"

    @pytest.mark.asyncio
    async def test_server_error_raises(self):
        """Test that non-200 responses raise HTTPStatusError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "Failed to fetch messages"})

        client = HistoryClient("http://test", client=mock_client(handler))
        with pytest.raises(httpx.HTTPStatusError):
            await client.get_messages("s1")

    @pytest.mark.asyncio
    async def test_not_started(self):
        """Test that requests need start() without an injected client."""
        client = HistoryClient("http://test")
        with pytest.raises(RuntimeError, match="not started"):
            await client.get_messages("s1")

    @pytest.mark.asyncio
    async def test_start_stop_owns_client(self):
        """Test that start() creates and stop() closes an owned client."""
        client = HistoryClient("http://test")
        await client.start()
        assert client._client is not None

        await client.stop()
        assert client._client is None
