"""pageripper.counter: global usage counter (store and best-effort reader)."""

from pageripper.counter.reader import bump_count, read_count
from pageripper.counter.store import (
    CounterStore,
    MemoryCounterStore,
    SqlCounterStore,
    open_counter_store,
)

__all__ = [
    "CounterStore",
    "MemoryCounterStore",
    "SqlCounterStore",
    "open_counter_store",
    "read_count",
    "bump_count",
]
