"""Query classification module."""

from .classifier import (
    CLASSIFICATION_RULES,
    DEFAULT_CATEGORY,
    ClassificationRule,
    IQueryClassifier,
    QueryClassifier,
)

__all__ = [
    "CLASSIFICATION_RULES",
    "DEFAULT_CATEGORY",
    "ClassificationRule",
    "IQueryClassifier",
    "QueryClassifier",
]
