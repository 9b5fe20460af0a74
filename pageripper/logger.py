# File: pageripper/logger.py
"""Logging for **PageRipper**.

Every module logs through children of the ``PageRipper`` logger::

    from pageripper.logger import get_logger
    logger = get_logger("parser")
    logger.debug("Parsed %s", target, extra={"links": 12})

Output goes to stdout (optionally to a rotating file as well), either as
plain text or, with ``log_format="json"``, as one JSON object per line. In JSON
mode anything passed through ``extra=`` becomes a field of its own, so a rip
can be followed by ``target`` across the fetcher, the engine and the web layer.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Final, Union

__all__ = ["logger", "configure", "get_logger", "JsonFormatter", "LOGGER_NAME", "JSON_FORMAT"]

LOGGER_NAME: Final[str] = "PageRipper"
JSON_FORMAT: Final[str] = "json"
TEXT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

#: attributes every LogRecord has; the rest came in through ``extra=``
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """One JSON object per record: time, level, logger, msg, extra fields, error."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                entry[key] = value
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def _formatter(log_format: str) -> logging.Formatter:
    if log_format == JSON_FORMAT:
        return JsonFormatter()
    return logging.Formatter(log_format)


def configure(
    *,
    level: Union[int, str] = "INFO",
    log_file: str | Path | None = None,
    log_format: str = TEXT_FORMAT,
) -> logging.Logger:
    """(Re)configure the project logger, replacing its handlers.

    *log_format* is a :class:`logging.Formatter` format string, or ``"json"``.
    """
    formatter = _formatter(log_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(str(log_file), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        )

    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    for old in lg.handlers:
        old.close()
    lg.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        lg.addHandler(handler)
    lg.propagate = False
    return lg


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the project logger or one of its children (``PageRipper.<name>``)."""
    return logging.getLogger(LOGGER_NAME if not name else f"{LOGGER_NAME}.{name}")


logger: logging.Logger = configure()
