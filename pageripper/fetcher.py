# File: pageripper/fetcher.py
"""
Fetcher module: opens the target page and hands its body over as a byte stream.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientError, ClientResponse, ClientSession, ClientTimeout

from pageripper.config import RipperConfig
from pageripper.errors import FetchError
from pageripper.logger import get_logger
from pageripper.models import ScrapeTarget

__all__ = ("ResponseStream", "Fetcher")

logger = get_logger("fetcher")


class ResponseStream:
    """Adapts an aiohttp response to the ``read``/``close`` pair the parser consumes."""

    def __init__(self, response: ClientResponse) -> None:
        self.response = response

    async def read(self, n: int = -1) -> bytes:
        return await self.response.content.read(n)

    def close(self) -> None:
        self.response.close()


class Fetcher:
    """Issues the single GET a rip needs, within the configured timeout."""

    def __init__(self, config: RipperConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._own_session = session is None

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._own_session and self.session and not self.session.closed:
            await self.session.close()

    async def open(self, target: ScrapeTarget) -> ResponseStream:
        """
        Send the request and return the still-unread body.

        Any status code is accepted, like a browser would show the page;
        connection failures and timeouts raise FetchError.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        logger.debug("Ripping target %s", target, extra={"target": str(target)})
        try:
            response = await self.session.get(str(target))
        except (ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.debug("Could not fetch %s: %s", target, exc, extra={"target": str(target)})
            raise FetchError(str(target)) from exc
        return ResponseStream(response)
