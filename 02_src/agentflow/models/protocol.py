"""Connection envelope models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EnvelopeKind(str, Enum):
    """Kinds of envelope exchanged over the connection."""

    QUERY = "query"
    AGENT_STEP = "agent_step"
    RESPONSE = "response"
    ERROR = "error"


@dataclass
class Envelope:
    """The only unit ever sent on the connection."""

    kind: EnvelopeKind
    payload: dict[str, Any] = field(default_factory=dict)
    session_id: str | None = None

    @classmethod
    def error(cls, message: str, session_id: str | None = None) -> "Envelope":
        return cls(
            kind=EnvelopeKind.ERROR,
            payload={"message": message},
            session_id=session_id,
        )
