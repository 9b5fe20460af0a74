# File: pageripper/engine.py
"""pageripper.engine: validate → fetch → count → rip → tally, producing a RipReport."""

from __future__ import annotations

import asyncio
from typing import Coroutine, Optional, Set

from aiohttp import ClientSession

from pageripper.config import RipperConfig
from pageripper.counter.reader import bump_count
from pageripper.counter.store import CounterStore, open_counter_store
from pageripper.fetcher import Fetcher
from pageripper.logger import logger
from pageripper.models import RipReport, RipResult, ScrapeTarget
from pageripper.rip import rip
from pageripper.tally import tally_counts

__all__ = ["Engine", "build_report", "start_rip"]


def build_report(result: RipResult, *, drop_empty_hosts: bool = False) -> RipReport:
    """Tally the collected hosts and assemble the report."""
    hosts = [h for h in result.hosts if h] if drop_empty_hosts else result.hosts
    return RipReport(
        links=list(result.links),
        hostnames=tally_counts(hosts),
        ripcount=result.count or 0,
    )


class Engine:
    """Facade used by the web service and the CLI: one call per ripped page."""

    def __init__(
        self,
        config: RipperConfig,
        store: CounterStore,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.config = config
        self.store = store
        self.session = session
        self._background: Set[asyncio.Task[None]] = set()

    async def rip(self, raw_target: Optional[str]) -> RipReport:
        """
        Rip *raw_target*.

        Raises InvalidTargetError for a bad target and FetchError when the page
        cannot be retrieved; everything after a successful fetch degrades
        instead of failing.
        """
        target = ScrapeTarget.parse(raw_target)
        async with Fetcher(self.config, self.session) as fetcher:
            body = await fetcher.open(target)
            # the count is cosmetic, so it must not delay the response
            self._spawn(bump_count(self.store, self.config.counter.key))
            result = await rip(
                target,
                body,
                self.store,
                counter_key=self.config.counter.key,
                completion=self.config.completion,
                chunk_size=self.config.chunk_size,
                link_join=self.config.link_join,
                queue_size=self.config.queue_size,
            )
        logger.debug(
            "Rip finished: %s", target, extra={"target": str(target), "links": len(result.links)}
        )
        return build_report(result, drop_empty_hosts=self.config.drop_empty_hosts)

    async def count(self) -> int:
        """Current value of the usage counter, 0 when unknown."""
        try:
            return await self.store.read(self.config.counter.key) or 0
        except Exception as exc:
            logger.warning("Could not read rip count: %s", exc)
            return 0

    async def drain(self) -> None:
        """Wait for pending counter updates."""
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    def _spawn(self, coro: Coroutine[None, None, None]) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)


async def start_rip(config: RipperConfig, target: str) -> RipReport:
    """Open the configured counter store, rip *target* once and close everything."""
    store = await open_counter_store(config.counter)
    try:
        engine = Engine(config, store)
        try:
            return await engine.rip(target)
        finally:
            await engine.drain()
    finally:
        await store.close()
