# File: pageripper/counter/reader.py
"""Best-effort access to the usage counter: nothing here may fail a rip."""

from __future__ import annotations

import asyncio

from pageripper.counter.store import CounterStore
from pageripper.logger import get_logger
from pageripper.models import Event, Signal

__all__ = ["read_count", "bump_count"]

logger = get_logger("counter")


async def read_count(store: CounterStore, key: str, queue: asyncio.Queue[Event]) -> None:
    """Send ``COUNT`` when the store holds a positive value, then ``COUNT_DONE``."""
    try:
        value = await store.read(key)
    except Exception as exc:
        logger.warning("Could not read rip count %r: %s", key, exc)
        value = None
    if value:
        await queue.put(Event(Signal.COUNT, int(value)))
    else:
        logger.debug("No rip count recorded for %r", key)
    await queue.put(Event(Signal.COUNT_DONE))


async def bump_count(store: CounterStore, key: str) -> None:
    """Increment the counter; failures are logged and swallowed."""
    try:
        await store.increment(key)
    except Exception as exc:
        logger.warning("Could not update rip count %r: %s", key, exc)
