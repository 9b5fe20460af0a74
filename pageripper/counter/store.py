# File: pageripper/counter/store.py
"""Persistent usage counter shared by every rip.

Two implementations of :class:`CounterStore` are provided:

* :class:`MemoryCounterStore` – process-local, for tests and throwaway runs;
* :class:`SqlCounterStore` – SQLite through async SQLAlchemy (aiosqlite); the
  increment is a single upsert statement, so concurrent rips never lose updates.
"""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

import sqlalchemy as sa
from sqlalchemy import event
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from pageripper.config import CounterConfig

__all__ = ("CounterStore", "MemoryCounterStore", "SqlCounterStore", "open_counter_store")

TABLE_NAME = "pageripper"

metadata = sa.MetaData()

rip_counts = sa.Table(
    TABLE_NAME,
    metadata,
    sa.Column("url", sa.String, primary_key=True),
    sa.Column("c", sa.Integer, nullable=False, server_default="0"),
)


class CounterStore(Protocol):
    async def increment(self, key: str) -> None: ...

    async def read(self, key: str) -> Optional[int]: ...

    async def close(self) -> None: ...


class MemoryCounterStore:
    """Counter kept in a dict; the lock makes read-modify-write atomic."""

    def __init__(self, initial: Optional[Dict[str, int]] = None) -> None:
        self._counts: Dict[str, int] = dict(initial or {})
        self._lock = asyncio.Lock()

    async def increment(self, key: str) -> None:
        async with self._lock:
            self._counts[key] = self._counts.get(key, 0) + 1

    async def read(self, key: str) -> Optional[int]:
        return self._counts.get(key)

    async def close(self) -> None:
        return None


class SqlCounterStore:
    """Counter rows in SQLite, one row per key."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine

    @classmethod
    async def open(cls, db_path: Union[str, Path], echo: bool = False) -> SqlCounterStore:
        """Create the engine, enable WAL and make sure the table exists."""
        engine = create_async_engine(
            f"sqlite+aiosqlite:///{db_path}",
            echo=echo,
            connect_args={"timeout": 30},
        )

        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, connection_record: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        return cls(engine)

    async def increment(self, key: str) -> None:
        stmt = sqlite_insert(rip_counts).values(url=key, c=1)
        stmt = stmt.on_conflict_do_update(
            index_elements=[rip_counts.c.url],
            set_={"c": rip_counts.c.c + 1},
        )
        async with self.engine.begin() as conn:
            await conn.execute(stmt)

    async def read(self, key: str) -> Optional[int]:
        async with self.engine.connect() as conn:
            result = await conn.execute(sa.select(rip_counts.c.c).where(rip_counts.c.url == key))
            return result.scalar_one_or_none()

    async def close(self) -> None:
        await self.engine.dispose()


async def open_counter_store(config: CounterConfig) -> CounterStore:
    """Open the store described by *config*: SQLite when ``db_path`` is set, memory otherwise."""
    if config.db_path is None:
        return MemoryCounterStore()
    return await SqlCounterStore.open(config.db_path)
