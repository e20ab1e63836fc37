"""Character-by-character reveal of the final response text."""

import asyncio
from typing import Callable

from ..logging_config import get_logger
from ..streaming import IScheduler

logger = get_logger(__name__)

DEFAULT_REVEAL_INTERVAL = 0.015


class CancellationToken:
    """Flag checked by a running reveal before every tick."""

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class TextReveal:
    """Single-flight reveal ticker.

    ``start`` cancels any reveal in progress before arming a new one, so at
    most one ticker ever writes to ``text``.
    """

    def __init__(
        self,
        scheduler: IScheduler,
        interval: float = DEFAULT_REVEAL_INTERVAL,
        on_update: Callable[[str], None] | None = None,
        on_complete: Callable[[str], None] | None = None,
    ):
        self._scheduler = scheduler
        self._interval = interval
        self._on_update = on_update
        self._on_complete = on_complete
        self._task: asyncio.Task | None = None
        self._token: CancellationToken | None = None
        self._text = ""
        self._complete = False

    @property
    def text(self) -> str:
        """Text revealed so far."""
        return self._text

    @property
    def is_complete(self) -> bool:
        return self._complete

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, text: str) -> None:
        """Reveal ``text`` from its first character."""
        self.cancel()
        self._text = ""
        self._complete = False
        self._token = CancellationToken()
        self._task = asyncio.create_task(self._run(text, self._token))

    def cancel(self) -> None:
        """Stop the running reveal, keeping what was revealed so far."""
        if self._token is not None:
            self._token.cancel()
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait(self) -> None:
        """Wait for the current reveal to finish or be cancelled."""
        if self._task is not None:
            await asyncio.wait({self._task})

    async def _run(self, text: str, token: CancellationToken) -> None:
        for end in range(1, len(text) + 1):
            await self._scheduler.after(self._interval)
            if token.cancelled:
                return
            self._text = text[:end]
            if self._on_update:
                self._on_update(self._text)

        if token.cancelled:
            return
        self._text = text
        self._complete = True
        logger.debug("Reveal complete", extra={"context": {"length": len(text)}})
        if self._on_complete:
            self._on_complete(text)
