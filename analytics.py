"""
analytics.py — fire-and-forget recognition events.

Usage:
    import analytics
    analytics.dispatch(sink, event)   # returns immediately
    await analytics.drain()           # on shutdown / in tests

The sink is any `async def sink(event) -> None`; the default used by
main.py is database.log_recognition_event. Failures are logged, not raised.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from artwork_analyzer import ArtworkMetadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecognitionEvent:
    artwork_id: str
    metadata: ArtworkMetadata
    session_id: Optional[str] = None


AnalyticsSink = Callable[[RecognitionEvent], Awaitable[None]]

# Strong references so pending tasks are not garbage-collected mid-flight
_pending: set[asyncio.Task] = set()


async def _record(sink: AnalyticsSink, event: RecognitionEvent) -> None:
    try:
        await sink(event)
        logger.info("📊 Tracked: image recognition for artwork %s", event.artwork_id)
    except Exception as exc:
        logger.warning("Failed to record recognition event for %s: %s", event.artwork_id, exc)


def dispatch(sink: AnalyticsSink, event: RecognitionEvent) -> asyncio.Task:
    """Schedule sink(event) in the background and return without waiting."""
    task = asyncio.create_task(_record(sink, event))
    _pending.add(task)
    task.add_done_callback(_pending.discard)
    return task


async def drain() -> None:
    """Wait for every in-flight event to finish."""
    if _pending:
        await asyncio.gather(*list(_pending), return_exceptions=True)
