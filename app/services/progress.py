"""Crawl progress state machine.

Phases advance ``initializing → discovering → crawling → aggregating →
complete``; ``error`` is reachable from any phase for callers that wrap the
crawl.  Every update is delivered to the callback before the crawl moves on,
so a slow consumer slows the crawl down rather than dropping events.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from app.models.progress import CrawlProgress

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[CrawlProgress], Union[None, Awaitable[None]]]


class ProgressReporter:
    def __init__(self, callback: Optional[ProgressCallback] = None, **initial: Any) -> None:
        self.callback = callback
        self.progress = CrawlProgress(**initial)

    async def emit(self, **updates: Any) -> CrawlProgress:
        """Apply *updates* to the shared record and deliver a snapshot."""
        phase = updates.get("phase")
        if phase is not None and phase != self.progress.phase:
            logger.info("Crawl phase %s -> %s", self.progress.phase, phase)
        for field, value in updates.items():
            setattr(self.progress, field, value)

        snapshot = self.progress.model_copy(deep=True)
        if self.callback is not None:
            result = self.callback(snapshot)
            if inspect.isawaitable(result):
                await result
        return snapshot

    async def fail(self, message: str) -> CrawlProgress:
        return await self.emit(phase="error", message=message)
