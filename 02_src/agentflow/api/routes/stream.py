"""WebSocket endpoint carrying queries in and step events out."""

import asyncio

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ... import wire
from ...app import IApplication
from ...connections import WebSocketConnection
from ...errors import MalformedMessageError
from ...logging_config import get_logger
from ...models import Envelope

logger = get_logger(__name__)


def create_stream_router(app: IApplication) -> APIRouter:
    """Create the /ws router."""
    router = APIRouter(tags=["stream"])

    @router.websocket("/ws")
    async def stream(websocket: WebSocket) -> None:
        """One receive loop feeding one worker, so queries never interleave."""
        await websocket.accept()
        connection = WebSocketConnection(websocket)
        app.registry.register(connection.connection_id, connection)

        queue: asyncio.Queue[wire.QueryData | None] = asyncio.Queue()
        worker = asyncio.create_task(_process_queries(app, connection, queue))

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000))
                # Binary frames carry the same JSON envelope
                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes") or b""
                try:
                    query = wire.parse_query(wire.decode(raw))
                except MalformedMessageError as e:
                    logger.warning(
                        f"Malformed message: {e.message}",
                        extra={"context": {"connection_id": connection.connection_id}},
                    )
                    await connection.send(Envelope.error(e.message))
                    continue
                queue.put_nowait(query)
        except WebSocketDisconnect:
            logger.info(
                "WebSocket disconnected",
                extra={"context": {"connection_id": connection.connection_id}},
            )
        finally:
            connection.mark_closed()
            dropped = _drop_pending(queue)
            if dropped:
                logger.info(
                    "Dropped %s queued queries",
                    dropped,
                    extra={"context": {"connection_id": connection.connection_id}},
                )
            # The running pipeline finishes; its sends are skipped
            queue.put_nowait(None)
            await worker
            app.registry.unregister(connection.connection_id)

    return router


async def _process_queries(
    app: IApplication,
    connection: WebSocketConnection,
    queue: "asyncio.Queue[wire.QueryData | None]",
) -> None:
    while True:
        query = await queue.get()
        if query is None:
            return
        await app.orchestrator.handle_query(connection, query.query, query.session_id)


def _drop_pending(queue: asyncio.Queue) -> int:
    dropped = 0
    while True:
        try:
            queue.get_nowait()
        except asyncio.QueueEmpty:
            return dropped
        dropped += 1
