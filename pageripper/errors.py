# File: pageripper/errors.py
"""pageripper.errors: exceptions raised by the collaborator layer (validation, fetching)."""

from __future__ import annotations

__all__ = ("RipperError", "InvalidTargetError", "FetchError", "GENERIC_TARGET_MESSAGE")

GENERIC_TARGET_MESSAGE = "Please submit a valid, absolute URL such as https://example.com"


class RipperError(Exception):
    """Base class for every error PageRipper reports to its caller."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidTargetError(RipperError):
    """The submitted target is missing, unparseable or relative."""

    def __init__(self, message: str = GENERIC_TARGET_MESSAGE) -> None:
        super().__init__(message)


class FetchError(RipperError):
    """The target page could not be retrieved."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Could not retrieve URL: {url}")
        self.url = url
