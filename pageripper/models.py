# File: pageripper/models.py
"""pageripper.models: value types shared by the scrape pipeline and its collaborators."""

from __future__ import annotations

import enum
import json
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Union
from urllib.parse import urlsplit

from pageripper.errors import InvalidTargetError

__all__ = ("ScrapeTarget", "Signal", "Event", "RipResult", "RipReport")

RELATIVE_TARGET_MESSAGE = (
    "Relative URLs such as /example.html are not supported. "
    "Please supply a full qualified URL such as https://www.example.com"
)


@dataclass(frozen=True, slots=True)
class ScrapeTarget:
    """An absolute URL of the single page to scrape."""

    url: str

    @classmethod
    def parse(cls, raw: Optional[str]) -> ScrapeTarget:
        """Validate *raw* and return a target, or raise :class:`InvalidTargetError`."""
        if not raw:
            raise InvalidTargetError()
        try:
            parts = urlsplit(raw)
        except ValueError as exc:
            raise InvalidTargetError() from exc
        if parts.scheme:
            if not parts.netloc:
                raise InvalidTargetError()
            return cls(raw)
        if raw.startswith("/"):
            raise InvalidTargetError(RELATIVE_TARGET_MESSAGE)
        raise InvalidTargetError()

    @property
    def hostname(self) -> str:
        return urlsplit(self.url).hostname or ""

    def __str__(self) -> str:
        return self.url


class Signal(enum.Enum):
    """Kinds of messages travelling through the fan-in queue."""

    LINK = "link"
    HOST = "host"
    COUNT = "count"
    PARSE_DONE = "parse_done"
    COUNT_DONE = "count_done"


@dataclass(frozen=True, slots=True)
class Event:
    kind: Signal
    value: Union[str, int, None] = None


@dataclass(slots=True)
class RipResult:
    """Everything the orchestrator collected before it stopped listening."""

    links: List[str] = field(default_factory=list)
    hosts: List[str] = field(default_factory=list)
    count: Optional[int] = None
    parse_complete: bool = False
    count_complete: bool = False


@dataclass(slots=True)
class RipReport:
    """Final report: links in discovery order, hostname tally and the usage counter."""

    links: List[str] = field(default_factory=list)
    hostnames: Dict[str, int] = field(default_factory=dict)
    ripcount: int = 0

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)

    def json(self, *, pretty: bool = False) -> str:
        """Return the JSON body served to clients."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)
