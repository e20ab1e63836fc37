"""ClientStreamConsumer: the receiving end of the step stream."""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Protocol

from .. import wire
from ..errors import MalformedMessageError
from ..logging_config import get_logger
from ..models import AgentName, AgentResponse, EnvelopeKind, Step
from ..streaming import AsyncioScheduler, IScheduler
from .reveal import DEFAULT_REVEAL_INTERVAL, TextReveal
from .steps import StepBoard

logger = get_logger(__name__)

NOT_CONNECTED_MESSAGE = "Not connected to server"
PARSE_FAILED_MESSAGE = "Failed to parse server response"


class ConnectionState(str, Enum):
    """Client view of the connection."""

    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    EXHAUSTED = "exhausted"


class IClientTransport(Protocol):
    """An open text-frame connection to the server."""

    async def send_text(self, data: str) -> None:
        """Send one frame. Raises ConnectionError when closed."""
        ...

    async def receive_text(self) -> str:
        """Wait for the next frame. Raises ConnectionError when closed."""
        ...

    async def close(self) -> None:
        """Close the connection."""
        ...


ConnectFactory = Callable[[], Awaitable[IClientTransport]]


@dataclass(frozen=True)
class ReconnectPolicy:
    """Exponential backoff: attempt ``n`` waits ``base ** n`` seconds."""

    max_attempts: int = 5
    base: float = 2.0

    def delay_for(self, attempt: int) -> float:
        return self.base ** attempt


class StreamListener:
    """Receives consumer updates. Override the hooks you need."""

    def on_connection_change(self, state: ConnectionState) -> None:
        pass

    def on_steps(self, steps: list[Step]) -> None:
        pass

    def on_reveal(self, text: str) -> None:
        pass

    def on_response(self, response: AgentResponse) -> None:
        pass

    def on_error(self, message: str) -> None:
        pass

    def on_reconnect_exhausted(self) -> None:
        pass


class ClientStreamConsumer:
    """Keeps a connection alive and turns server envelopes into client state.

    ``run`` is the supervisory loop: it connects, reads frames until the
    connection closes, then backs off according to the policy. A successful
    open resets the retry counter. Once the policy is used up the consumer
    stays in ``EXHAUSTED`` until started again.
    """

    def __init__(
        self,
        connect: ConnectFactory,
        listener: StreamListener | None = None,
        scheduler: IScheduler | None = None,
        policy: ReconnectPolicy | None = None,
        reveal_interval: float = DEFAULT_REVEAL_INTERVAL,
    ):
        self._connect = connect
        self._listener = listener or StreamListener()
        self._scheduler = scheduler or AsyncioScheduler()
        self._policy = policy or ReconnectPolicy()

        self._board = StepBoard()
        self._reveal = TextReveal(
            self._scheduler, reveal_interval, on_update=self._listener.on_reveal
        )
        self._transport: IClientTransport | None = None
        self._state = ConnectionState.CLOSED
        self._retry_count = 0
        self._response: AgentResponse | None = None
        self._processing = False
        self._stopping = False
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.OPEN and self._transport is not None

    @property
    def is_processing(self) -> bool:
        return self._processing

    @property
    def retry_count(self) -> int:
        return self._retry_count

    @property
    def steps(self) -> list[Step]:
        return self._board.get_all()

    @property
    def active_agents(self) -> list[AgentName]:
        if not self._processing:
            return []
        return self._board.active_agents()

    @property
    def response(self) -> AgentResponse | None:
        return self._response

    @property
    def reveal(self) -> TextReveal:
        return self._reveal

    @property
    def revealed_text(self) -> str:
        return self._reveal.text

    def start(self) -> asyncio.Task:
        """Start the supervisory loop unless it is already running."""
        if self._task is not None and not self._task.done():
            return self._task
        self._stopping = False
        self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        """Close the connection and stop reconnecting."""
        self._stopping = True
        self._reveal.cancel()

        if self._transport is not None:
            await self._transport.close()

        if self._task is not None and not self._task.done():
            self._task.cancel()
            await asyncio.wait({self._task})

        self._transport = None
        self._processing = False
        self._set_state(ConnectionState.CLOSED)

    async def run(self) -> None:
        """Connect, consume, and reconnect with backoff until stopped or exhausted."""
        while not self._stopping:
            self._set_state(ConnectionState.CONNECTING)
            try:
                transport = await self._connect()
            except (ConnectionError, OSError) as e:
                logger.info(f"Connect failed: {e}")
            else:
                self._transport = transport
                self._retry_count = 0
                self._set_state(ConnectionState.OPEN)
                await self._receive_loop(transport)
                self._transport = None
                self._processing = False

            if self._stopping:
                break

            self._set_state(ConnectionState.CLOSED)
            if self._retry_count >= self._policy.max_attempts:
                logger.warning(
                    "Giving up after %s reconnect attempts", self._retry_count
                )
                self._set_state(ConnectionState.EXHAUSTED)
                self._listener.on_reconnect_exhausted()
                return

            self._retry_count += 1
            delay = self._policy.delay_for(self._retry_count)
            logger.info(
                "Reconnecting in %ss",
                delay,
                extra={"context": {"attempt": self._retry_count}},
            )
            await self._scheduler.after(delay)

    async def send_query(self, text: str, session_id: str) -> bool:
        """Reset client state and send a new query. Returns False if not sent."""
        transport = self._transport
        if transport is None or self._state is not ConnectionState.OPEN:
            self._listener.on_error(NOT_CONNECTED_MESSAGE)
            return False

        # A new query never cancels work already running on the server
        self._reveal.cancel()
        self._board.clear()
        self._response = None
        self._processing = True
        self._listener.on_steps([])

        try:
            await transport.send_text(wire.encode(wire.query_envelope(text, session_id)))
        except ConnectionError:
            self._processing = False
            self._listener.on_error(NOT_CONNECTED_MESSAGE)
            return False
        return True

    def handle_message(self, raw: str) -> None:
        """Apply one server frame to the client state."""
        try:
            envelope = wire.decode(raw)
            if envelope.kind is EnvelopeKind.AGENT_STEP:
                self._apply_step(wire.step_from_payload(envelope.payload))
            elif envelope.kind is EnvelopeKind.RESPONSE:
                self._apply_response(wire.response_from_payload(envelope.payload))
            elif envelope.kind is EnvelopeKind.ERROR:
                self._apply_error(wire.error_from_payload(envelope.payload))
            else:
                logger.warning(f"Ignoring {envelope.kind.value} envelope from server")
        except MalformedMessageError as e:
            logger.warning(f"Unparseable server frame: {e.message}")
            self._listener.on_error(PARSE_FAILED_MESSAGE)

    async def _receive_loop(self, transport: IClientTransport) -> None:
        while True:
            try:
                raw = await transport.receive_text()
            except ConnectionError:
                return
            self.handle_message(raw)

    def _apply_step(self, step: Step) -> None:
        self._processing = True
        self._board.upsert(step)
        self._listener.on_steps(self._board.get_all())

    def _apply_response(self, response: AgentResponse) -> None:
        self._response = response
        self._processing = False
        self._reveal.start(response.text)
        self._listener.on_response(response)

    def _apply_error(self, message: str) -> None:
        self._processing = False
        self._listener.on_error(message)

    def _set_state(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        self._state = state
        self._listener.on_connection_change(state)
