# File: pageripper/rip.py
"""pageripper.rip: runs the parser and the counter reader side by side and fans in their output."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Dict, Literal

from pageripper.counter.reader import read_count
from pageripper.counter.store import CounterStore
from pageripper.logger import get_logger
from pageripper.models import Event, RipResult, ScrapeTarget, Signal
from pageripper.parser.link_parser import ByteStream, LinkJoin, parse

__all__ = ["rip", "Completion"]

logger = get_logger("rip")

Completion = Literal["both", "first"]


async def _guard(producer: Awaitable[None], done: Signal, queue: asyncio.Queue[Event]) -> None:
    """Run *producer*; if it crashes, still report it as finished."""
    try:
        await producer
    except Exception:
        logger.exception("Producer behind %s failed", done.value)
        await queue.put(Event(done))


async def rip(
    target: ScrapeTarget,
    body: ByteStream,
    store: CounterStore,
    *,
    counter_key: str = "system",
    completion: Completion = "both",
    chunk_size: int = 8192,
    link_join: LinkJoin = "uri",
    queue_size: int = 256,
) -> RipResult:
    """Collect links, hosts and the usage count for *target* from *body*.

    With ``completion="both"`` the loop waits until the parser and the counter
    reader have both finished. ``"first"`` stops as soon as either finishes,
    dropping whatever the other one has not sent yet. The producer still
    running at that point is cancelled, which also closes *body*.
    """
    queue: asyncio.Queue[Event] = asyncio.Queue(maxsize=queue_size)
    tasks: Dict[Signal, asyncio.Task[None]] = {
        Signal.PARSE_DONE: asyncio.create_task(
            _guard(
                parse(target, body, queue, chunk_size=chunk_size, link_join=link_join),
                Signal.PARSE_DONE,
                queue,
            )
        ),
        Signal.COUNT_DONE: asyncio.create_task(
            _guard(read_count(store, counter_key, queue), Signal.COUNT_DONE, queue)
        ),
    }
    pending = set(tasks)
    result = RipResult()

    try:
        while pending:
            message = await queue.get()
            if message.kind is Signal.LINK:
                result.links.append(str(message.value))
            elif message.kind is Signal.HOST:
                result.hosts.append(str(message.value))
            elif message.kind is Signal.COUNT:
                result.count = int(message.value)  # type: ignore[arg-type]
            elif message.kind in pending:
                pending.discard(message.kind)
                if completion == "first":
                    break
    finally:
        unfinished = [task for task in tasks.values() if not task.done()]
        for task in unfinished:
            task.cancel()
        await asyncio.gather(*unfinished, return_exceptions=True)

    result.parse_complete = Signal.PARSE_DONE not in pending
    result.count_complete = Signal.COUNT_DONE not in pending
    logger.debug(
        "Rip of %s finished: %d links, %d hosts, parse_complete=%s",
        target,
        len(result.links),
        len(result.hosts),
        result.parse_complete,
    )
    return result
