"""Staleness decisions for a document against its matched changes."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..models import RecentChange

_ONE_DAY = timedelta(days=1)


def is_stale(last_doc_update: Optional[datetime], matches: Sequence[RecentChange]) -> bool:
    """Return True when any matched change is strictly newer than the document.

    A document with no known modification time is always flagged so it gets
    reviewed rather than skipped.
    """
    if last_doc_update is None:
        return True
    return any(change.timestamp > last_doc_update for change in matches)


def staleness_days(last_doc_update: Optional[datetime], matches: Sequence[RecentChange]) -> int:
    """Whole days (rounded up) between the document and its newest matched change.

    Returns 0 when the document's modification time is unknown, even though
    `is_stale` flags such documents.
    """
    if last_doc_update is None or not matches:
        return 0
    latest = max(change.timestamp for change in matches)
    days = math.ceil((latest - last_doc_update) / _ONE_DAY)
    return max(0, days)


__all__ = ["is_stale", "staleness_days"]
