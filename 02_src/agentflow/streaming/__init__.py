"""Step streaming module."""

from .scheduler import AsyncioScheduler, IScheduler
from .streamer import IStepStreamer, StepStreamer

__all__ = ["AsyncioScheduler", "IScheduler", "IStepStreamer", "StepStreamer"]
