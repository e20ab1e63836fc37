"""Connection lifecycle module."""

from .registry import ConnectionRegistry, IConnectionRegistry
from .websocket import IConnection, WebSocketConnection

__all__ = [
    "ConnectionRegistry",
    "IConnectionRegistry",
    "IConnection",
    "WebSocketConnection",
]
