"""Exception hierarchy for the query pipeline and wire protocol."""


class AgentflowError(Exception):
    """Base exception for agentflow errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedMessageError(AgentflowError):
    """A frame received on the connection could not be decoded."""


class PlanNotFoundError(AgentflowError):
    """No step plan is registered for a category and variant."""


class PipelineError(AgentflowError):
    """The query pipeline could not produce a result."""
