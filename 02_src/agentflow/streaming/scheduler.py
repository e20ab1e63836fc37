"""Time source used to pace step emission and client timers."""

import asyncio
from typing import Protocol


class IScheduler(Protocol):
    """Suspends the caller for a duration."""

    async def after(self, seconds: float) -> None:
        """Resume after ``seconds`` have elapsed."""
        ...


class AsyncioScheduler:
    """Real-time scheduler backed by asyncio.sleep."""

    def __init__(self, scale: float = 1.0):
        if scale < 0:
            raise ValueError("scale must not be negative")
        self._scale = scale

    @property
    def scale(self) -> float:
        return self._scale

    async def after(self, seconds: float) -> None:
        await asyncio.sleep(max(0.0, seconds * self._scale))
