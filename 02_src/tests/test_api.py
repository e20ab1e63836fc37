"""Tests for the FastAPI routes and the /ws endpoint."""

import json

import pytest
from fastapi.testclient import TestClient

from agentflow.api import create_fastapi_app
from agentflow.app import Application
from agentflow.streaming import AsyncioScheduler


@pytest.fixture
def client():
    """TestClient over an in-memory application with instant steps."""
    application = Application(
        db_path=":memory:",
        scheduler=AsyncioScheduler(scale=0),
        seed_demo_data=True,
    )
    with TestClient(create_fastapi_app(application)) as test_client:
        yield test_client


def query_frame(query: str, session_id: str = "s1") -> str:
    return json.dumps({"kind": "query", "data": {"query": query, "sessionId": session_id}})


def receive_until_final(ws) -> list[dict]:
    frames = []
    while True:
        frame = ws.receive_json()
        frames.append(frame)
        if frame["kind"] in ("response", "error"):
            return frames


class TestSessionsRoutes:
    """Tests for /api/sessions."""

    def test_create_session(self, client):
        """Test creating a session over REST."""
        response = client.post("/api/sessions")

        assert response.status_code == 200
        body = response.json()
        assert body["sessionId"]
        assert body["isActive"] is True
        assert "createdAt" in body

    def test_messages_empty(self, client):
        """Test history of an unknown session."""
        response = client.get("/api/sessions/unknown/messages")
        assert response.status_code == 200
        assert response.json() == []


class TestProductionRoutes:
    """Tests for /api/production."""

    def test_trends_default_window(self, client):
        """Test that six months cover the whole sample set."""
        response = client.get("/api/production/trends")

        assert response.status_code == 200
        rows = response.json()
        assert len(rows) == 10
        assert rows[0]["date"] == "2025-01-01"
        assert "productionVolume" in rows[0]

    def test_trends_narrow_window(self, client):
        """Test a one month window ending at the latest record."""
        rows = client.get("/api/production/trends", params={"months": 1}).json()
        assert {row["date"] for row in rows} == {"2025-04-01", "2025-04-05", "2025-05-01"}

    def test_trends_invalid_months(self, client):
        """Test that a non-positive month count is rejected."""
        assert client.get("/api/production/trends", params={"months": 0}).status_code == 422


class TestObservabilityRoutes:
    """Tests for /api/trace-events."""

    def test_invalid_after(self, client):
        """Test that a bad timestamp returns 400."""
        response = client.get("/api/trace-events", params={"after": "yesterday"})
        assert response.status_code == 400


class TestStreamEndpoint:
    """Tests for the /ws endpoint."""

    def test_query_round_trip(self, client):
        """Test steps, the final response and the stored history."""
        with client.websocket_connect("/ws") as ws:
            ws.send_text(query_frame("Show me the production trend"))
            frames = receive_until_final(ws)

        kinds = [frame["kind"] for frame in frames]
        assert kinds == ["agent_step"] * 14 + ["response"]
        assert frames[0]["data"] == {
            "agent": "orchestrator",
            "action": "Analyzing query structure and intent...",
            "delay": 1000,
            "status": "processing",
            "index": 0,
        }
        assert frames[-1]["data"]["category"] == "descriptive"
        assert frames[-1]["sessionId"] == "s1"

        messages = client.get("/api/sessions/s1/messages").json()
        assert [m["isUser"] for m in messages] == [True, False]
        assert messages[1]["agentType"] == "descriptive"

        events = client.get("/api/trace-events", params={"event_type": "response_sent"}).json()
        assert len(events) == 1

    def test_queries_are_serialized(self, client):
        """Test that two queries on one connection do not interleave."""
        with client.websocket_connect("/ws") as ws:
            ws.send_text(query_frame("trend"))
            ws.send_text(query_frame("Why was production low?"))
            first = receive_until_final(ws)
            second = receive_until_final(ws)

        assert len(first) == 15
        assert first[-1]["data"]["category"] == "descriptive"
        assert len(second) == 29
        assert second[-1]["data"]["category"] == "diagnostic"

    def test_malformed_message_keeps_connection(self, client):
        """Test that a bad frame gets an error and the socket stays usable."""
        with client.websocket_connect("/ws") as ws:
            ws.send_text("not json")
            error = ws.receive_json()
            ws.send_text(json.dumps({"kind": "response", "data": {}}))
            unsupported = ws.receive_json()
            ws.send_text(query_frame("recommend improvements"))
            frames = receive_until_final(ws)

        assert error["kind"] == "error"
        assert unsupported["data"]["message"] == "Unsupported message kind: response"
        assert frames[-1]["kind"] == "response"
        assert frames[-1]["data"]["recommendations"]

    def test_binary_frames_are_decoded(self, client):
        """Test that binary frames are parsed like text and bad ones get an error."""
        with client.websocket_connect("/ws") as ws:
            ws.send_bytes(b"\xff not json")
            error = ws.receive_json()
            ws.send_bytes(query_frame("recommend improvements").encode())
            frames = receive_until_final(ws)
            ws.send_text(query_frame("Show me production trends for last 6 months"))
            after = receive_until_final(ws)

        assert error["kind"] == "error"
        assert error["data"]["message"].startswith("Message must be valid JSON")
        assert frames[-1]["kind"] == "response"
        assert frames[-1]["data"]["category"] == "prescriptive"
        assert after[-1]["kind"] == "response"

    def test_long_trend_window_still_answers(self, client):
        """Test that an oversized month count is clamped instead of failing."""
        with client.websocket_connect("/ws") as ws:
            ws.send_text(query_frame("show me the trend for the last 99999 months"))
            frames = receive_until_final(ws)

        assert frames[-1]["kind"] == "response"
        assert frames[-1]["data"]["category"] == "descriptive"
