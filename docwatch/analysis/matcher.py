"""Resolve a declared reference to the recent changes that touched it."""

from __future__ import annotations

from typing import Dict, List

from ..logging import get_logger
from ..models import RecentChange
from .index import ChangeIndex
from .paths import GlobMatcher, normalize_path

_LOGGER = get_logger("analysis.matcher")


def find_matching_changes(
    reference: str,
    index: ChangeIndex,
    matcher: GlobMatcher | None = None,
) -> List[RecentChange]:
    """Return the distinct commits whose changed files match `reference`."""
    matcher = matcher or GlobMatcher()
    normalized = normalize_path(reference)

    by_sha: Dict[str, RecentChange] = {}
    for file_path, changes in index.items():
        if not matcher.matches(normalized, file_path):
            continue
        for change in changes:
            by_sha.setdefault(change.sha, change)

    _LOGGER.debug("Reference %s matched %d commit(s)", reference, len(by_sha))
    return list(by_sha.values())


__all__ = ["find_matching_changes"]
