"""Keyword rule table that routes a query to an analysis category."""

from dataclasses import dataclass
from typing import Callable, Protocol

from ..models import Category

QueryPredicate = Callable[[str], bool]


@dataclass(frozen=True)
class ClassificationRule:
    """A named predicate over lower-cased query text."""

    name: str
    predicate: QueryPredicate
    category: Category


def contains_any(*phrases: str) -> QueryPredicate:
    """Predicate matching text that contains any of the phrases."""

    def predicate(text: str) -> bool:
        return any(phrase in text for phrase in phrases)

    return predicate


def mentions_low_production_without_top_days(text: str) -> bool:
    return "low production" in text and "top 5 days" not in text


# Evaluated top to bottom, first match wins.
CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        name="descriptive_keywords",
        predicate=contains_any("top 5 days", "trend", "show me", "last"),
        category=Category.DESCRIPTIVE,
    ),
    ClassificationRule(
        name="diagnostic_keywords",
        predicate=contains_any("why", "reason", "cause"),
        category=Category.DIAGNOSTIC,
    ),
    ClassificationRule(
        name="low_production",
        predicate=mentions_low_production_without_top_days,
        category=Category.DIAGNOSTIC,
    ),
    ClassificationRule(
        name="prescriptive_keywords",
        predicate=contains_any("recommend", "improve", "should", "what to do"),
        category=Category.PRESCRIPTIVE,
    ),
)

DEFAULT_CATEGORY = Category.DESCRIPTIVE


class IQueryClassifier(Protocol):
    """Maps query text to a category."""

    def classify(self, text: str) -> Category:
        """Return the category for a query. Never fails."""
        ...


class QueryClassifier:
    """Case-insensitive keyword classifier with fixed rule precedence."""

    def __init__(
        self,
        rules: tuple[ClassificationRule, ...] = CLASSIFICATION_RULES,
        default: Category = DEFAULT_CATEGORY,
    ):
        self._rules = rules
        self._default = default

    @property
    def rules(self) -> tuple[ClassificationRule, ...]:
        return self._rules

    def match(self, text: str) -> ClassificationRule | None:
        """Return the first rule matching the text, if any."""
        lowered = text.lower()
        for rule in self._rules:
            if rule.predicate(lowered):
                return rule
        return None

    def classify(self, text: str) -> Category:
        """Return the category of the first matching rule, or the default."""
        rule = self.match(text)
        return rule.category if rule else self._default
