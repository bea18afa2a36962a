"""Lookup from changed-file paths to the commits that touched them."""

from __future__ import annotations

from typing import Dict, Iterable, List

from ..models import RecentChange

ChangeIndex = Dict[str, List[RecentChange]]


def build_change_index(changes: Iterable[RecentChange]) -> ChangeIndex:
    """Group changes under every filename they touched.

    Keys are used verbatim; changed-file paths are already repo-root-relative.
    """
    index: ChangeIndex = {}
    for change in changes:
        for changed_file in change.files:
            bucket = index.setdefault(changed_file.filename, [])
            # a commit may list the same path twice (e.g. rename + edit)
            if bucket and bucket[-1] is change:
                continue
            bucket.append(change)
    return index


__all__ = ["ChangeIndex", "build_change_index"]
