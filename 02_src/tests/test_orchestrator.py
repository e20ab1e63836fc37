"""Tests for SessionOrchestrator."""

from unittest.mock import AsyncMock, Mock

import pytest

from agentflow import wire
from agentflow.models import Category, EnvelopeKind, StepStatus
from agentflow.orchestrator import GENERIC_ERROR_MESSAGE


class TestHandleQuery:
    """Tests for SessionOrchestrator.handle_query()."""

    @pytest.mark.asyncio
    async def test_steps_then_response(self, orchestrator, connection):
        """Test that all steps precede exactly one response."""
        response = await orchestrator.handle_query(connection, "Show me the trend", "s1")

        assert response is not None
        kinds = connection.kinds()
        assert kinds == ["agent_step"] * 14 + ["response"]

        final = connection.sent[-1]
        assert final.session_id == "s1"
        assert final.payload["category"] == "descriptive"
        assert final.payload["sessionId"] == "s1"
        assert final.payload["text"] == response.text

    @pytest.mark.asyncio
    async def test_step_order(self, orchestrator, connection):
        """Test that every step completes before the next one starts."""
        await orchestrator.handle_query(connection, "Top 5 days with low production", "s1")

        steps = [
            wire.step_from_payload(e.payload)
            for e in connection.sent
            if e.kind is EnvelopeKind.AGENT_STEP
        ]
        assert len(steps) == 20
        for position, step in enumerate(steps):
            assert step.index == position // 2
            expected = StepStatus.PROCESSING if position % 2 == 0 else StepStatus.COMPLETE
            assert step.status is expected

    @pytest.mark.asyncio
    async def test_persists_query_and_result(self, orchestrator, connection, seeded_storage):
        """Test that the session and both messages are stored in order."""
        await orchestrator.handle_query(connection, "Why was output low?", "s1")

        assert await seeded_storage.get_session("s1") is not None
        user, result = await seeded_storage.get_chat_messages("s1")
        assert user.is_user is True
        assert user.message == "Why was output low?"
        assert result.is_user is False
        assert result.agent_type is Category.DIAGNOSTIC
        assert result.sql_query is not None

    @pytest.mark.asyncio
    async def test_chart_data_persisted(self, orchestrator, connection, seeded_storage):
        """Test that the chart series is stored with the result."""
        await orchestrator.handle_query(connection, "Show me the trend", "s1")

        _, result = await seeded_storage.get_chat_messages("s1")
        assert result.chart_data["labels"][0] == "Jan 2025"
        assert result.chart_data["kind"] == "line"

    @pytest.mark.asyncio
    async def test_existing_session_reused(self, orchestrator, connection, seeded_storage):
        """Test that a second query appends to the same session."""
        await orchestrator.handle_query(connection, "trend", "s1")
        await orchestrator.handle_query(connection, "recommend something", "s1")

        messages = await seeded_storage.get_chat_messages("s1")
        assert len(messages) == 4

    @pytest.mark.asyncio
    async def test_plan_context_uses_lowest_dates(self, orchestrator, connection):
        """Test that the diagnostic plan names the lowest production dates."""
        await orchestrator.handle_query(connection, "Why?", "s1")

        step = wire.step_from_payload(connection.sent[6].payload)
        assert step.index == 3
        assert "2025-01-21, 2025-03-14, 2025-02-10, 2025-04-05, 2025-05-01" in step.action

    @pytest.mark.asyncio
    async def test_tracks_milestones(self, orchestrator, connection, seeded_storage):
        """Test the trace events of a successful query."""
        await orchestrator.handle_query(connection, "trend", "s1")

        events = await seeded_storage.get_trace_events(actor="session_orchestrator")
        assert {e.event_type for e in events} == {
            "query_received",
            "query_classified",
            "response_sent",
        }

    @pytest.mark.asyncio
    async def test_failure_sends_generic_error(self, orchestrator, connection, seeded_storage):
        """Test that a pipeline exception becomes one error envelope."""
        orchestrator._assembler.assemble = AsyncMock(side_effect=ValueError("db exploded"))

        response = await orchestrator.handle_query(connection, "trend", "s1")

        assert response is None
        assert connection.kinds().count("error") == 1
        assert "response" not in connection.kinds()
        assert connection.sent[-1].payload == {"message": GENERIC_ERROR_MESSAGE}

        messages = await seeded_storage.get_chat_messages("s1")
        assert [m.is_user for m in messages] == [True]

    @pytest.mark.asyncio
    async def test_planner_failure(self, orchestrator, connection):
        """Test that a planning error produces no steps."""
        orchestrator._planner.plan = Mock(side_effect=RuntimeError("no plan"))

        response = await orchestrator.handle_query(connection, "trend", "s1")

        assert response is None
        assert connection.kinds() == ["error"]

    @pytest.mark.asyncio
    async def test_tracking_failure_after_response(self, orchestrator, connection):
        """Test that a failed delivery milestone does not follow the response with an error."""

        async def track(event_type, actor, data):
            if event_type == "response_sent":
                raise RuntimeError("trace store unavailable")

        orchestrator._tracker.track = AsyncMock(side_effect=track)

        response = await orchestrator.handle_query(connection, "trend", "s1")

        assert response is not None
        assert connection.kinds()[-1] == "response"
        assert "error" not in connection.kinds()

    @pytest.mark.asyncio
    async def test_closed_mid_stream_still_persists(
        self, orchestrator, make_connection, seeded_storage
    ):
        """Test that a dropped connection keeps the history complete."""
        connection = make_connection(close_after=3)

        response = await orchestrator.handle_query(connection, "trend", "s1")

        assert response is not None
        assert len(connection.sent) == 3
        assert "response" not in connection.kinds()

        messages = await seeded_storage.get_chat_messages("s1")
        assert len(messages) == 2

        events = await seeded_storage.get_trace_events(event_types=["response_skipped"])
        assert len(events) == 1
        assert events[0].data["steps_delivered"] is False
