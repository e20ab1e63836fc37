"""Core data models for agentflow."""

from .analytics import (
    AgentName,
    AgentResponse,
    Category,
    ChartSeries,
    Plan,
    PlanVariant,
    Step,
    StepStatus,
)
from .production import MaintenanceLog, ProductionRecord
from .protocol import Envelope, EnvelopeKind
from .sessions import ChatMessage, Session
from .tracing import TraceEvent

__all__ = [
    # Analytics
    "Category",
    "AgentName",
    "StepStatus",
    "PlanVariant",
    "Step",
    "Plan",
    "ChartSeries",
    "AgentResponse",
    # Protocol
    "Envelope",
    "EnvelopeKind",
    # Sessions
    "Session",
    "ChatMessage",
    # Production
    "ProductionRecord",
    "MaintenanceLog",
    # Tracing
    "TraceEvent",
]
