"""Session orchestration module."""

from .session import GENERIC_ERROR_MESSAGE, ISessionOrchestrator, SessionOrchestrator

__all__ = ["GENERIC_ERROR_MESSAGE", "ISessionOrchestrator", "SessionOrchestrator"]
