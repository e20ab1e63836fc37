"""WorkflowPlanner: resolves a query to its step plan."""

from typing import Mapping, Protocol

from ..errors import PlanNotFoundError
from ..models import Category, Plan, PlanVariant, Step
from .plans import DEFAULT_PLAN_CONTEXT, PLAN_TEMPLATES, StepTemplate


def detect_variant(category: Category, text: str) -> PlanVariant:
    """Pick the plan variant for a category from the query text."""
    lowered = text.lower()
    if (
        category is Category.DESCRIPTIVE
        and "low production" in lowered
        and "top 5 days" in lowered
    ):
        return PlanVariant.LOW_PRODUCTION_TOP_DAYS
    return PlanVariant.STANDARD


class IWorkflowPlanner(Protocol):
    """Produces the step plan for a classified query."""

    def plan(
        self,
        category: Category,
        text: str,
        context: Mapping[str, str] | None = None,
    ) -> Plan:
        """Build the plan for a query."""
        ...


class WorkflowPlanner:
    """Table lookup over (category, variant) step templates."""

    def __init__(
        self,
        templates: Mapping[tuple[Category, PlanVariant], tuple[StepTemplate, ...]] = PLAN_TEMPLATES,
    ):
        self._templates = templates

    def plan(
        self,
        category: Category,
        text: str,
        context: Mapping[str, str] | None = None,
    ) -> Plan:
        """Build the plan for a query.

        Args:
            category: Category assigned by the classifier.
            text: Raw query text, used for variant detection.
            context: Values substituted into ``{placeholders}`` of step actions.

        Raises:
            PlanNotFoundError: If no template exists for the category and variant.
        """
        variant = detect_variant(category, text)
        templates = self._templates.get((category, variant))
        if templates is None:
            raise PlanNotFoundError(
                f"No plan for category={category.value} variant={variant.value}"
            )

        values = {**DEFAULT_PLAN_CONTEXT, **(context or {})}
        steps = tuple(
            Step(
                agent=template.agent,
                action=template.action.format_map(values),
                delay_ms=template.delay_ms,
                index=index,
            )
            for index, template in enumerate(templates)
        )
        return Plan(category=category, variant=variant, steps=steps)
