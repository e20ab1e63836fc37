"""Workflow planning module."""

from .planner import IWorkflowPlanner, WorkflowPlanner, detect_variant
from .plans import PLAN_TEMPLATES, StepTemplate

__all__ = [
    "IWorkflowPlanner",
    "WorkflowPlanner",
    "detect_variant",
    "PLAN_TEMPLATES",
    "StepTemplate",
]
