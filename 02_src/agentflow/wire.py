"""JSON envelope codec for the streaming connection.

Frames are JSON objects ``{"kind": ..., "data": {...}}`` with an optional
top-level ``sessionId``. Payload field names are camelCase on the wire and
snake_case in Python; the pydantic models below do the mapping and the
validation in both directions.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .errors import MalformedMessageError
from .models import (
    AgentName,
    AgentResponse,
    Category,
    ChartSeries,
    Envelope,
    EnvelopeKind,
    Step,
    StepStatus,
)


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EnvelopeFrame(_WireModel):
    """Outer frame of every message."""

    kind: EnvelopeKind
    data: dict[str, Any] = Field(default_factory=dict)
    session_id: str | None = None


class QueryData(_WireModel):
    """Client query payload."""

    query: str = Field(min_length=1)
    session_id: str = Field(min_length=1)


class StepData(_WireModel):
    """Progress event payload."""

    agent: AgentName
    action: str
    delay: int = Field(ge=0)
    status: StepStatus
    index: int = Field(ge=0)


class ChartSeriesData(_WireModel):
    label: str
    labels: list[str]
    values: list[float]
    kind: str = "line"


class ResponseData(_WireModel):
    """Final result payload."""

    text: str
    category: Category
    session_id: str | None = None
    sql_query: str | None = None
    data: list[dict[str, Any]] | None = None
    chart_series: ChartSeriesData | None = None
    insights: list[str] | None = None
    recommendations: list[str] | None = None


class ErrorData(_WireModel):
    message: str


def encode(envelope: Envelope) -> str:
    """Serialize an envelope to a JSON text frame."""
    frame: dict[str, Any] = {"kind": envelope.kind.value, "data": envelope.payload}
    if envelope.session_id:
        frame["sessionId"] = envelope.session_id
    return json.dumps(frame, default=str)


def decode(raw: str | bytes) -> Envelope:
    """Parse a JSON text frame into an envelope.

    Raises:
        MalformedMessageError: If the frame is not JSON or not an envelope.
    """
    try:
        obj = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedMessageError(f"Message must be valid JSON: {e}") from e

    if not isinstance(obj, dict):
        raise MalformedMessageError("Message must be a JSON object")

    try:
        frame = EnvelopeFrame.model_validate(obj)
    except ValidationError as e:
        raise MalformedMessageError(f"Invalid envelope: {e.errors()[0]['msg']}") from e

    return Envelope(kind=frame.kind, payload=frame.data, session_id=frame.session_id)


def parse_query(envelope: Envelope) -> QueryData:
    """Extract the query payload of a client envelope."""
    if envelope.kind is not EnvelopeKind.QUERY:
        raise MalformedMessageError(f"Unsupported message kind: {envelope.kind.value}")

    data = dict(envelope.payload)
    if envelope.session_id and "sessionId" not in data:
        data["sessionId"] = envelope.session_id

    try:
        return QueryData.model_validate(data)
    except ValidationError as e:
        raise MalformedMessageError(f"Invalid query payload: {e.errors()[0]['msg']}") from e


def query_envelope(query: str, session_id: str) -> Envelope:
    """Build the envelope a client sends for a new query."""
    payload = QueryData(query=query, session_id=session_id).model_dump(by_alias=True)
    return Envelope(kind=EnvelopeKind.QUERY, payload=payload)


def step_to_payload(step: Step) -> dict[str, Any]:
    return StepData(
        agent=step.agent,
        action=step.action,
        delay=step.delay_ms,
        status=step.status,
        index=step.index,
    ).model_dump(mode="json", by_alias=True)


def step_from_payload(payload: dict[str, Any]) -> Step:
    try:
        data = StepData.model_validate(payload)
    except ValidationError as e:
        raise MalformedMessageError(f"Invalid step payload: {e.errors()[0]['msg']}") from e
    return Step(
        agent=data.agent,
        action=data.action,
        delay_ms=data.delay,
        index=data.index,
        status=data.status,
    )


def response_to_payload(response: AgentResponse, session_id: str) -> dict[str, Any]:
    chart = None
    if response.chart_series is not None:
        series = response.chart_series
        chart = ChartSeriesData(
            label=series.label,
            labels=series.labels,
            values=series.values,
            kind=series.kind,
        )

    return ResponseData(
        text=response.text,
        category=response.category,
        session_id=session_id,
        sql_query=response.sql_query,
        data=response.data,
        chart_series=chart,
        insights=response.insights or None,
        recommendations=response.recommendations or None,
    ).model_dump(mode="json", by_alias=True, exclude_none=True)


def response_from_payload(payload: dict[str, Any]) -> AgentResponse:
    try:
        data = ResponseData.model_validate(payload)
    except ValidationError as e:
        raise MalformedMessageError(
            f"Invalid response payload: {e.errors()[0]['msg']}"
        ) from e

    chart = None
    if data.chart_series is not None:
        chart = ChartSeries(
            label=data.chart_series.label,
            labels=data.chart_series.labels,
            values=data.chart_series.values,
            kind=data.chart_series.kind,
        )

    return AgentResponse(
        text=data.text,
        category=data.category,
        sql_query=data.sql_query,
        data=data.data,
        chart_series=chart,
        insights=data.insights or [],
        recommendations=data.recommendations or [],
    )


def error_from_payload(payload: dict[str, Any]) -> str:
    try:
        return ErrorData.model_validate(payload).message
    except ValidationError as e:
        raise MalformedMessageError("Invalid error payload") from e
