"""Pytest configuration and fixtures."""

import asyncio
import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


class RecordingScheduler:
    """Virtual clock: records every requested delay and yields once."""

    def __init__(self):
        self.delays: list[float] = []

    async def after(self, seconds: float) -> None:
        self.delays.append(seconds)
        await asyncio.sleep(0)


class GatedScheduler:
    """Scheduler whose delays only elapse when ``release`` is called."""

    def __init__(self):
        self.delays: list[float] = []
        self._gate = asyncio.Event()

    def release(self) -> None:
        self._gate.set()

    async def after(self, seconds: float) -> None:
        self.delays.append(seconds)
        await self._gate.wait()


class FakeConnection:
    """In-memory IConnection that can close itself after N sends."""

    def __init__(self, connection_id: str = "conn-1", close_after: int | None = None):
        self._connection_id = connection_id
        self._close_after = close_after
        self._open = True
        self.sent = []

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @property
    def is_open(self) -> bool:
        return self._open

    def close(self) -> None:
        self._open = False

    async def send(self, envelope) -> bool:
        if not self._open:
            return False
        self.sent.append(envelope)
        if self._close_after is not None and len(self.sent) >= self._close_after:
            self._open = False
        return True

    def kinds(self) -> list[str]:
        return [envelope.kind.value for envelope in self.sent]


@pytest_asyncio.fixture
async def storage():
    """Create in-memory storage for testing."""
    from agentflow.storage import Storage

    st = Storage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest_asyncio.fixture
async def seeded_storage(storage):
    """In-memory storage loaded with the sample production data."""
    from agentflow.storage import seed_demo_data

    await seed_demo_data(storage)
    return storage


@pytest.fixture
def scheduler():
    """Create a recording scheduler."""
    return RecordingScheduler()


@pytest.fixture
def gated_scheduler():
    """Create a scheduler that blocks until released."""
    return GatedScheduler()


@pytest.fixture
def make_connection():
    """Factory for fake connections."""
    return FakeConnection


@pytest.fixture
def connection():
    """An open fake connection."""
    return FakeConnection()


@pytest.fixture
def tracker(storage):
    """Create Tracker with storage."""
    from agentflow.tracker import Tracker

    return Tracker(storage=storage)


@pytest.fixture
def assembler(seeded_storage):
    """ResultAssembler with the three analysts registered."""
    from agentflow.analysis import (
        DescriptiveAnalyst,
        DiagnosticAnalyst,
        PrescriptiveAnalyst,
        ResultAssembler,
    )

    return ResultAssembler(
        [
            DescriptiveAnalyst(seeded_storage),
            DiagnosticAnalyst(seeded_storage),
            PrescriptiveAnalyst(seeded_storage),
        ]
    )


@pytest.fixture
def orchestrator(seeded_storage, scheduler, tracker, assembler):
    """SessionOrchestrator wired with real components and a virtual clock."""
    from agentflow.classification import QueryClassifier
    from agentflow.orchestrator import SessionOrchestrator
    from agentflow.planning import WorkflowPlanner
    from agentflow.streaming import StepStreamer

    return SessionOrchestrator(
        storage=seeded_storage,
        classifier=QueryClassifier(),
        planner=WorkflowPlanner(),
        streamer=StepStreamer(scheduler),
        assembler=assembler,
        tracker=tracker,
    )
