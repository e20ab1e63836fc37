"""Client stream consumer module."""

from .consumer import (
    ClientStreamConsumer,
    ConnectionState,
    IClientTransport,
    ReconnectPolicy,
    StreamListener,
)
from .history import HistoryClient, IHistoryClient
from .reveal import CancellationToken, TextReveal
from .steps import StepBoard

__all__ = [
    "ClientStreamConsumer",
    "ConnectionState",
    "IClientTransport",
    "ReconnectPolicy",
    "StreamListener",
    "HistoryClient",
    "IHistoryClient",
    "CancellationToken",
    "TextReveal",
    "StepBoard",
]
