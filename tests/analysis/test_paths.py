"""Tests for reference path normalisation and glob matching."""

from __future__ import annotations

import re

import pytest

from docwatch.analysis.paths import GlobMatcher, glob_to_regex, normalize_path, path_matches


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("/src/app.ts", "src/app.ts"),
        ("///src//lib///x.ts", "src/lib/x.ts"),
        ("src/./x.ts", "src/./x.ts"),
        ("Src/X.ts", "Src/X.ts"),
        ("", ""),
        ("/", ""),
    ],
)
def test_normalize_path(raw: str, expected: str) -> None:
    assert normalize_path(raw) == expected


@pytest.mark.parametrize("raw", ["a//b", "//a/b//", "plain", "///", "a/../b"])
def test_normalize_path_is_idempotent(raw: str) -> None:
    once = normalize_path(raw)
    assert normalize_path(once) == once


def test_exact_match_wins() -> None:
    assert path_matches("src/x.ts", "src/x.ts")
    assert path_matches("/src//x.ts", "src/x.ts")


def test_single_star_stays_within_segment() -> None:
    assert path_matches("src/*.ts", "src/a.ts")
    assert not path_matches("src/*.ts", "src/a/b.ts")


def test_globstar_crosses_segments() -> None:
    assert path_matches("src/**/*.ts", "src/a/b.ts")
    assert path_matches("src/**/*.ts", "src/a/b/c.ts")
    assert path_matches("src/**", "src/deep/nested/file.py")


def test_glob_is_anchored() -> None:
    assert not path_matches("src/*.ts", "other/src/a.ts")
    assert not path_matches("*.ts", "src/a.tsx")


def test_glob_escapes_regex_metacharacters() -> None:
    assert path_matches("lib/a+b(1)/*.ts", "lib/a+b(1)/x.ts")
    assert not path_matches("lib/a.b/*.ts", "lib/aXb/x.ts")
    assert not path_matches("src/?.ts*", "src/a.ts")


def test_directory_prefix() -> None:
    assert path_matches("docs", "docs/readme.md")
    assert not path_matches("docs", "docsx/readme.md")


def test_suffix_match_for_relative_references() -> None:
    assert path_matches("utils/foo.ts", "packages/a/utils/foo.ts")
    assert not path_matches("utils/foo.ts", "packages/a/utils/foo.tsx")


def test_failed_glob_falls_through_to_suffix() -> None:
    # literal star in a filename still resolves via the suffix check
    assert path_matches("weird*name.txt", "data/weird*name.txt")


def test_no_match_returns_false() -> None:
    assert not path_matches("src/x.ts", "lib/y.ts")


def test_glob_to_regex_translation() -> None:
    assert glob_to_regex("src/**/*.ts") == "^src/.*/[^/]*\\.ts$"
    assert re.match(glob_to_regex("a/**"), "a/b/c")


def test_matcher_caches_compiled_patterns_per_instance() -> None:
    matcher = GlobMatcher()
    assert matcher.matches("src/*.ts", "src/a.ts")
    assert matcher.matches("src/*.ts", "src/b.ts")
    assert list(matcher._patterns) == ["src/*.ts"]
    assert GlobMatcher()._patterns == {}
