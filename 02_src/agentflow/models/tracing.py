"""Tracing and observability data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class TraceEvent:
    """A single observability event for the pipeline."""

    id: str
    event_type: str  # e.g. "query_received", "response_sent"
    actor: str  # who created this event
    data: dict  # self-contained data for display
    timestamp: datetime
