"""Tests for Tracker."""

from datetime import datetime, timezone

import pytest


class TestTrackerTrack:
    """Tests for Tracker.track() method."""

    @pytest.mark.asyncio
    async def test_track_creates_event(self, tracker, storage):
        """Test that track() creates a TraceEvent."""
        await tracker.track(
            event_type="query_received",
            actor="session_orchestrator",
            data={"session_id": "s1"},
        )

        events = await storage.get_trace_events()
        assert len(events) == 1
        assert events[0].event_type == "query_received"
        assert events[0].actor == "session_orchestrator"
        assert events[0].data == {"session_id": "s1"}

    @pytest.mark.asyncio
    async def test_track_generates_unique_ids(self, tracker, storage):
        """Test that each event gets its own ID."""
        await tracker.track(event_type="a", actor="x", data={})
        await tracker.track(event_type="b", actor="x", data={})

        events = await storage.get_trace_events()
        assert len({e.id for e in events}) == 2

    @pytest.mark.asyncio
    async def test_track_generates_timestamp(self, tracker, storage):
        """Test that track() stamps events with the current UTC time."""
        before = datetime.now(timezone.utc)
        await tracker.track(event_type="a", actor="x", data={})
        after = datetime.now(timezone.utc)

        events = await storage.get_trace_events()
        assert before <= events[0].timestamp <= after
