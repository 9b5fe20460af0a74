# File: tests/conftest.py
import asyncio
from typing import Callable, List, Optional, Sequence

import pytest

from pageripper.config import RipperConfig
from pageripper.counter.store import MemoryCounterStore
from pageripper.logger import configure
from pageripper.models import ScrapeTarget


class FakeStream:
    """Byte stream serving pre-cut chunks, optionally slowly or ending with an error."""

    def __init__(
        self,
        chunks: Sequence[bytes],
        delay: float = 0.0,
        error: Optional[BaseException] = None,
    ) -> None:
        self._chunks: List[bytes] = list(chunks)
        self.delay = delay
        self.error = error
        self.closed = False
        self.reads = 0

    async def read(self, n: int = -1) -> bytes:
        self.reads += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self._chunks:
            return self._chunks.pop(0)
        if self.error is not None:
            raise self.error
        return b""

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def fresh_logger():
    """Bind the project logger to the stdout of the running test (the CLI rebinds it)."""
    configure(level="DEBUG")
    yield


@pytest.fixture()
def make_stream() -> Callable[..., FakeStream]:
    """
    Return a factory building FakeStream objects from str/bytes chunks.
    """
    def factory(*chunks, delay: float = 0.0, error: Optional[BaseException] = None) -> FakeStream:
        data = [c.encode("utf-8") if isinstance(c, str) else c for c in chunks]
        return FakeStream(data, delay=delay, error=error)

    return factory


@pytest.fixture()
def target() -> ScrapeTarget:
    return ScrapeTarget.parse("https://site.test/page")


@pytest.fixture()
def memory_store() -> MemoryCounterStore:
    return MemoryCounterStore()


@pytest.fixture()
def basic_config() -> RipperConfig:
    """
    Return a RipperConfig suited for tests: short timeout, in-memory counter.
    """
    return RipperConfig(timeout=2.0, user_agent="TestAgent/1.0")
