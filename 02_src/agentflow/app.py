"""Application bootstrap and lifecycle management."""

import os
from typing import Protocol

from .analysis import (
    DescriptiveAnalyst,
    DiagnosticAnalyst,
    PrescriptiveAnalyst,
    ResultAssembler,
)
from .classification import QueryClassifier
from .config import env_flag, get_step_delay_scale, resolve_db_path
from .connections import ConnectionRegistry
from .logging_config import get_logger
from .orchestrator import ISessionOrchestrator, SessionOrchestrator
from .planning import WorkflowPlanner
from .storage import IStorage, Storage, seed_demo_data
from .streaming import AsyncioScheduler, IScheduler, StepStreamer
from .tracker import ITracker, Tracker

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    @property
    def storage(self) -> IStorage:
        ...

    @property
    def orchestrator(self) -> ISessionOrchestrator:
        ...

    @property
    def registry(self) -> ConnectionRegistry:
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        db_path: str | None = None,
        scheduler: IScheduler | None = None,
        seed_demo_data: bool | None = None,
    ):
        env_db_path = os.getenv("DATABASE_URL") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)
        self._scheduler = scheduler
        self._seed = env_flag("SEED_DEMO_DATA", True) if seed_demo_data is None else seed_demo_data

        # Components (will be initialized in start())
        self._storage: IStorage | None = None
        self._tracker: ITracker | None = None
        self._assembler: ResultAssembler | None = None
        self._orchestrator: ISessionOrchestrator | None = None
        self._registry: ConnectionRegistry | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Storage (no dependencies)
        self._storage = Storage(self._db_path)
        await self._storage.init()
        logger.info("Storage initialized")

        if self._seed:
            await seed_demo_data(self._storage)

        # 2. Tracker (depends on Storage)
        self._tracker = Tracker(self._storage)

        # 3. ResultAssembler with one analyst per category
        self._assembler = ResultAssembler()
        self._assembler.register_analyst(DescriptiveAnalyst(self._storage))
        self._assembler.register_analyst(DiagnosticAnalyst(self._storage))
        self._assembler.register_analyst(PrescriptiveAnalyst(self._storage))
        logger.info("ResultAssembler started with %s analysts", len(self._assembler.categories))

        # 4. Streamer paced by the scheduler
        scheduler = self._scheduler or AsyncioScheduler(get_step_delay_scale())
        streamer = StepStreamer(scheduler)

        # 5. SessionOrchestrator (depends on everything above)
        self._orchestrator = SessionOrchestrator(
            storage=self._storage,
            classifier=QueryClassifier(),
            planner=WorkflowPlanner(),
            streamer=streamer,
            assembler=self._assembler,
            tracker=self._tracker,
        )

        self._registry = ConnectionRegistry()
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._registry and len(self._registry):
            logger.info("Stopping with %s open connections", len(self._registry))
        if self._storage:
            await self._storage.close()
            logger.info("Storage closed")

    @property
    def storage(self) -> IStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def orchestrator(self) -> ISessionOrchestrator:
        """Get session orchestrator instance."""
        if not self._orchestrator:
            raise RuntimeError("Application not started")
        return self._orchestrator

    @property
    def registry(self) -> ConnectionRegistry:
        """Get connection registry instance."""
        if self._registry is None:
            raise RuntimeError("Application not started")
        return self._registry
