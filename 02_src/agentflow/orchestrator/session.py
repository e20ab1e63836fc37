"""SessionOrchestrator implementation."""

from dataclasses import asdict
from typing import Protocol

from .. import wire
from ..analysis import IResultAssembler
from ..classification import IQueryClassifier
from ..connections import IConnection
from ..logging_config import get_logger
from ..models import AgentResponse, Category, ChatMessage, Envelope, EnvelopeKind
from ..planning import IWorkflowPlanner
from ..storage import IStorage
from ..streaming import IStepStreamer
from ..tracker import ITracker

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred processing your request"
PLAN_CONTEXT_DAYS = 5


class ISessionOrchestrator(Protocol):
    """Runs the query pipeline for one connection."""

    async def handle_query(
        self, connection: IConnection, query: str, session_id: str
    ) -> AgentResponse | None:
        """Classify, stream steps, assemble, persist and send the result."""
        ...


class SessionOrchestrator:
    """Drives one query from classification to the final response envelope."""

    def __init__(
        self,
        storage: IStorage,
        classifier: IQueryClassifier,
        planner: IWorkflowPlanner,
        streamer: IStepStreamer,
        assembler: IResultAssembler,
        tracker: ITracker,
    ):
        self._storage = storage
        self._classifier = classifier
        self._planner = planner
        self._streamer = streamer
        self._assembler = assembler
        self._tracker = tracker

    async def handle_query(
        self, connection: IConnection, query: str, session_id: str
    ) -> AgentResponse | None:
        """Run the pipeline. Returns None if an error envelope was sent instead."""
        log_context = {
            "connection_id": connection.connection_id,
            "session_id": session_id,
        }
        logger.info("Query received: %s", query[:100], extra={"context": log_context})

        try:
            return await self._run(connection, query, session_id)
        except Exception as e:
            logger.error(
                f"Query pipeline failed: {e}",
                exc_info=True,
                extra={"context": log_context},
            )
            await connection.send(Envelope.error(GENERIC_ERROR_MESSAGE, session_id))
            return None

    async def _run(
        self, connection: IConnection, query: str, session_id: str
    ) -> AgentResponse:
        if await self._storage.get_session(session_id) is None:
            await self._storage.create_session(session_id)

        await self._storage.save_chat_message(
            ChatMessage(session_id=session_id, message=query, is_user=True)
        )

        await self._tracker.track(
            event_type="query_received",
            actor="session_orchestrator",
            data={"session_id": session_id, "query": query},
        )

        category = self._classifier.classify(query)
        plan = self._planner.plan(category, query, await self._plan_context(category))

        await self._tracker.track(
            event_type="query_classified",
            actor="session_orchestrator",
            data={
                "session_id": session_id,
                "category": category.value,
                "variant": plan.variant.value,
                "steps": len(plan),
            },
        )

        delivered = await self._streamer.stream(plan, connection, session_id)

        # History stays complete even if the client went away mid-plan
        response = await self._assembler.assemble(category, query)

        await self._storage.save_chat_message(
            ChatMessage(
                session_id=session_id,
                message=response.text,
                is_user=False,
                agent_type=response.category,
                sql_query=response.sql_query,
                chart_data=asdict(response.chart_series) if response.chart_series else None,
            )
        )

        sent = await connection.send(
            Envelope(
                kind=EnvelopeKind.RESPONSE,
                payload=wire.response_to_payload(response, session_id),
                session_id=session_id,
            )
        )

        # The response is out; a tracking failure must not add an error envelope
        try:
            await self._tracker.track(
                event_type="response_sent" if sent else "response_skipped",
                actor="session_orchestrator",
                data={
                    "session_id": session_id,
                    "category": category.value,
                    "steps_delivered": delivered,
                },
            )
        except Exception as e:
            logger.warning(
                f"Failed to track response delivery: {e}",
                exc_info=True,
                extra={"context": {"session_id": session_id}},
            )
        return response

    async def _plan_context(self, category: Category) -> dict[str, str]:
        if category is Category.DESCRIPTIVE:
            return {}

        records = await self._storage.get_lowest_production_days(limit=PLAN_CONTEXT_DAYS)
        if not records:
            return {}
        return {
            "low_production_dates": ", ".join(r.date.isoformat() for r in records)
        }
