"""ConnectionRegistry: lifecycle bookkeeping for live connections."""

from typing import Protocol

from ..logging_config import get_logger
from .websocket import IConnection

logger = get_logger(__name__)


class IConnectionRegistry(Protocol):
    """Tracks live connections by identifier."""

    def register(self, connection_id: str, connection: IConnection) -> None:
        """Add a connection."""
        ...

    def unregister(self, connection_id: str) -> IConnection | None:
        """Remove a connection, returning it if it was registered."""
        ...


class ConnectionRegistry:
    """In-memory registry of live connections."""

    def __init__(self):
        self._connections: dict[str, IConnection] = {}

    def register(self, connection_id: str, connection: IConnection) -> None:
        if connection_id in self._connections:
            logger.warning("Connection %s re-registered, replacing", connection_id)
        self._connections[connection_id] = connection
        logger.info(
            "Connection registered",
            extra={
                "context": {
                    "connection_id": connection_id,
                    "connection_count": len(self._connections),
                }
            },
        )

    def unregister(self, connection_id: str) -> IConnection | None:
        connection = self._connections.pop(connection_id, None)
        logger.info(
            "Connection unregistered",
            extra={
                "context": {
                    "connection_id": connection_id,
                    "connection_count": len(self._connections),
                }
            },
        )
        return connection

    def get(self, connection_id: str) -> IConnection | None:
        return self._connections.get(connection_id)

    @property
    def connection_ids(self) -> list[str]:
        return list(self._connections)

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._connections
