"""ResultAssembler implementation."""

from typing import Protocol

from ..errors import PipelineError
from ..logging_config import get_logger
from ..models import AgentResponse, Category
from .analysts import IAnalyst

logger = get_logger(__name__)


class IResultAssembler(Protocol):
    """Produces the final result for a classified query."""

    def register_analyst(self, analyst: IAnalyst) -> None:
        """Register an analyst for its category."""
        ...

    async def assemble(self, category: Category, query: str) -> AgentResponse:
        """Compute the result for a query of the given category."""
        ...


class ResultAssembler:
    """Routes classified queries to the analyst registered for the category."""

    def __init__(self, analysts: list[IAnalyst] | None = None):
        self._analysts: dict[Category, IAnalyst] = {}
        for analyst in analysts or []:
            self.register_analyst(analyst)

    def register_analyst(self, analyst: IAnalyst) -> None:
        """Register an analyst for its category."""
        if analyst.category in self._analysts:
            logger.warning("Replacing analyst for %s", analyst.category.value)
        self._analysts[analyst.category] = analyst

    @property
    def categories(self) -> list[Category]:
        return list(self._analysts)

    async def assemble(self, category: Category, query: str) -> AgentResponse:
        analyst = self._analysts.get(category)
        if analyst is None:
            raise PipelineError(f"No analyst registered for {category.value}")

        response = await analyst.analyze(query)
        logger.debug(
            "Result assembled",
            extra={
                "context": {
                    "category": category.value,
                    "rows": len(response.data or []),
                    "insights": len(response.insights),
                }
            },
        )
        return response
