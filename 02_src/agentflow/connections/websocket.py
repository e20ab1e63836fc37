"""Server-side connection abstraction over a WebSocket."""

import uuid
from typing import Protocol

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from .. import wire
from ..logging_config import get_logger
from ..models import Envelope

logger = get_logger(__name__)


class IConnection(Protocol):
    """A long-lived connection envelopes are sent on."""

    @property
    def connection_id(self) -> str:
        """Connection identifier."""
        ...

    @property
    def is_open(self) -> bool:
        """Whether sends can still be attempted."""
        ...

    async def send(self, envelope: Envelope) -> bool:
        """Send an envelope. Returns False when the connection is gone."""
        ...


class WebSocketConnection:
    """IConnection backed by a Starlette WebSocket.

    Sends on a closed socket are skipped and reported through the return
    value; transport errors never propagate to the caller.
    """

    def __init__(self, websocket: WebSocket, connection_id: str | None = None):
        self._websocket = websocket
        self._connection_id = connection_id or uuid.uuid4().hex
        self._closed = False

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @property
    def websocket(self) -> WebSocket:
        return self._websocket

    @property
    def is_open(self) -> bool:
        return (
            not self._closed
            and self._websocket.client_state == WebSocketState.CONNECTED
            and self._websocket.application_state == WebSocketState.CONNECTED
        )

    def mark_closed(self) -> None:
        """Record that the peer went away."""
        self._closed = True

    async def send(self, envelope: Envelope) -> bool:
        if not self.is_open:
            return False

        try:
            await self._websocket.send_text(wire.encode(envelope))
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            self._closed = True
            logger.info(
                "Send skipped, connection closed: %s",
                e,
                extra={"context": {"connection_id": self._connection_id}},
            )
            return False

        return True
