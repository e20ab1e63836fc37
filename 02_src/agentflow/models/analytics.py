"""Query classification, step plan and result models."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterator


class Category(str, Enum):
    """Analysis type a query is routed to."""

    DESCRIPTIVE = "descriptive"
    DIAGNOSTIC = "diagnostic"
    PRESCRIPTIVE = "prescriptive"


class AgentName(str, Enum):
    """Agents that appear in a step plan."""

    ORCHESTRATOR = "orchestrator"
    DESCRIPTIVE = "descriptive"
    DIAGNOSTIC = "diagnostic"
    PRESCRIPTIVE = "prescriptive"
    RESPONSE = "response"


class StepStatus(str, Enum):
    """Phase of a single step."""

    PROCESSING = "processing"
    COMPLETE = "complete"


class PlanVariant(str, Enum):
    """Sub-pattern selecting one of several plans for a category."""

    STANDARD = "standard"
    LOW_PRODUCTION_TOP_DAYS = "low_production_top_days"


@dataclass(frozen=True)
class Step:
    """One unit of simulated progress."""

    agent: AgentName
    action: str
    delay_ms: int
    index: int
    status: StepStatus = StepStatus.PROCESSING

    def __post_init__(self) -> None:
        if self.delay_ms < 0:
            raise ValueError(f"Step delay must be non-negative, got {self.delay_ms}")
        if self.index < 0:
            raise ValueError(f"Step index must be non-negative, got {self.index}")

    def with_status(self, status: StepStatus) -> "Step":
        """Copy of this step in another phase."""
        return replace(self, status=status)


@dataclass(frozen=True)
class Plan:
    """Ordered steps generated for one query."""

    category: Category
    variant: PlanVariant
    steps: tuple[Step, ...]

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("Plan must contain at least one step")
        indices = [step.index for step in self.steps]
        if indices != list(range(len(self.steps))):
            raise ValueError(f"Plan step indices must be 0..n-1, got {indices}")
        if self.steps[0].agent is not AgentName.ORCHESTRATOR:
            raise ValueError("Plan must start with an orchestrator step")
        if self.steps[-1].agent is not AgentName.RESPONSE:
            raise ValueError("Plan must end with a response step")

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)


@dataclass
class ChartSeries:
    """A single labelled series for the client chart."""

    label: str
    labels: list[str]
    values: list[float]
    kind: str = "line"  # "line" or "bar"


@dataclass
class AgentResponse:
    """Final structured result for one query."""

    text: str
    category: Category
    sql_query: str | None = None
    data: list[dict[str, Any]] | None = None
    chart_series: ChartSeries | None = None
    insights: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
