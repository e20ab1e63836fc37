"""StepStreamer: timed, ordered emission of a plan over one connection."""

from typing import Protocol

from .. import wire
from ..connections import IConnection
from ..logging_config import get_logger
from ..models import Envelope, EnvelopeKind, Plan, Step, StepStatus
from .scheduler import IScheduler

logger = get_logger(__name__)


class IStepStreamer(Protocol):
    """Emits a plan's steps as progress events."""

    async def stream(self, plan: Plan, connection: IConnection, session_id: str) -> bool:
        """Emit every step. Returns False if the connection closed first."""
        ...


class StepStreamer:
    """Emits steps strictly in plan order.

    Each step is sent as ``processing``, held for its delay, then sent as
    ``complete`` before the next step starts. Every send is checked; once the
    connection is gone the remaining steps are dropped silently.
    """

    def __init__(self, scheduler: IScheduler):
        self._scheduler = scheduler

    async def stream(self, plan: Plan, connection: IConnection, session_id: str) -> bool:
        for step in plan.steps:
            if not await self._emit(connection, step.with_status(StepStatus.PROCESSING), session_id):
                self._log_interrupted(connection, plan, step)
                return False

            await self._scheduler.after(step.delay_ms / 1000)

            if not await self._emit(connection, step.with_status(StepStatus.COMPLETE), session_id):
                self._log_interrupted(connection, plan, step)
                return False

        logger.debug(
            "Plan streamed",
            extra={
                "context": {
                    "connection_id": connection.connection_id,
                    "session_id": session_id,
                    "steps": len(plan),
                }
            },
        )
        return True

    async def _emit(self, connection: IConnection, step: Step, session_id: str) -> bool:
        if not connection.is_open:
            return False
        envelope = Envelope(
            kind=EnvelopeKind.AGENT_STEP,
            payload=wire.step_to_payload(step),
            session_id=session_id,
        )
        return await connection.send(envelope)

    @staticmethod
    def _log_interrupted(connection: IConnection, plan: Plan, step: Step) -> None:
        logger.info(
            "Connection closed during plan, %s of %s steps not sent",
            len(plan) - step.index,
            len(plan),
            extra={"context": {"connection_id": connection.connection_id}},
        )
