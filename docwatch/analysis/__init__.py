"""Stale-documentation detection engine."""

from .aggregator import ChangeStatistics, change_statistics, dedupe_by_doc, find_stale_references
from .index import ChangeIndex, build_change_index
from .matcher import find_matching_changes
from .paths import GlobMatcher, glob_to_regex, normalize_path, path_matches
from .staleness import is_stale, staleness_days

__all__ = [
    "ChangeIndex",
    "ChangeStatistics",
    "GlobMatcher",
    "build_change_index",
    "change_statistics",
    "dedupe_by_doc",
    "find_matching_changes",
    "find_stale_references",
    "glob_to_regex",
    "is_stale",
    "normalize_path",
    "path_matches",
    "staleness_days",
]
