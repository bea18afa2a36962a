"""Reference path normalisation and glob matching."""

from __future__ import annotations

import re
from typing import Dict

_LEADING_SLASHES = re.compile(r"^/+")
_REPEATED_SLASHES = re.compile(r"/{2,}")

_GLOBSTAR = "**"
_STAR = "*"
_ANY_DEPTH = ".*"
_ONE_SEGMENT = "[^/]*"


def normalize_path(path: str) -> str:
    """Strip leading slashes and collapse repeated separators."""
    return _REPEATED_SLASHES.sub("/", _LEADING_SLASHES.sub("", path))


def glob_to_regex(glob: str) -> str:
    """Translate a `*` / `**` glob into an anchored regular expression string.

    `**` matches across path separators, a lone `*` stays within one segment,
    and every other character is matched literally.
    """
    parts = ["^"]
    index = 0
    while index < len(glob):
        if glob.startswith(_GLOBSTAR, index):
            parts.append(_ANY_DEPTH)
            index += len(_GLOBSTAR)
        elif glob[index] == _STAR:
            parts.append(_ONE_SEGMENT)
            index += 1
        else:
            parts.append(re.escape(glob[index]))
            index += 1
    parts.append("$")
    return "".join(parts)


class GlobMatcher:
    """Matches reference paths against changed-file paths.

    Checks run in a fixed order and stop at the first hit: exact equality,
    glob pattern (references containing `*`), directory prefix, then path
    suffix. Compiled patterns are cached per instance, keyed by the exact
    reference string.
    """

    def __init__(self) -> None:
        self._patterns: Dict[str, re.Pattern[str]] = {}

    def matches(self, reference: str, changed_path: str) -> bool:
        if reference == changed_path:
            return True
        if _STAR in reference and self._compile(reference).match(changed_path):
            return True
        if changed_path.startswith(f"{reference}/"):
            return True
        return changed_path.endswith(reference)

    def _compile(self, reference: str) -> re.Pattern[str]:
        pattern = self._patterns.get(reference)
        if pattern is None:
            pattern = re.compile(glob_to_regex(reference), re.DOTALL)
            self._patterns[reference] = pattern
        return pattern


def path_matches(reference: str, changed_path: str) -> bool:
    """Return True when `changed_path` satisfies `reference` once normalised."""
    return GlobMatcher().matches(normalize_path(reference), changed_path)


__all__ = ["GlobMatcher", "glob_to_regex", "normalize_path", "path_matches"]
