# File: pageripper/tally.py
"""pageripper.tally: hostname frequency counting."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable

__all__ = ["tally_counts"]


def tally_counts(hosts: Iterable[str]) -> Dict[str, int]:
    """Return how many times each hostname occurs in *hosts*."""
    return dict(Counter(hosts))
