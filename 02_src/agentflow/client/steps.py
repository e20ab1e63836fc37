"""StepBoard implementation."""

from ..models import AgentName, Step, StepStatus


class StepBoard:
    """Client view of the current plan, one entry per step index."""

    def __init__(self):
        self._steps: list[Step] = []

    def upsert(self, step: Step) -> None:
        """Replace the step with the same index, or append it."""
        for position, existing in enumerate(self._steps):
            if existing.index == step.index:
                self._steps[position] = step
                return
        self._steps.append(step)

    def get(self, index: int) -> Step | None:
        for step in self._steps:
            if step.index == index:
                return step
        return None

    def get_all(self) -> list[Step]:
        """Get all steps in arrival order."""
        return self._steps.copy()

    def active_agents(self) -> list[AgentName]:
        """Agents with at least one step still processing."""
        active: list[AgentName] = []
        for step in self._steps:
            if step.status is StepStatus.PROCESSING and step.agent not in active:
                active.append(step.agent)
        return active

    def clear(self) -> None:
        """Clear the board."""
        self._steps.clear()

    def __len__(self) -> int:
        return len(self._steps)
