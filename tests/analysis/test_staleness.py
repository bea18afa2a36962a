"""Tests for staleness decisions."""

from __future__ import annotations

from datetime import UTC, datetime

from docwatch.analysis.staleness import is_stale, staleness_days

DOC_UPDATE = datetime(2024, 1, 1, tzinfo=UTC)


def test_unknown_doc_update_is_always_stale(make_change) -> None:
    change = make_change("c1", "2020-01-01", ["src/a.ts"])
    assert is_stale(None, [change]) is True
    assert is_stale(None, []) is True
    assert staleness_days(None, [change]) == 0


def test_newer_change_is_stale(make_change) -> None:
    assert is_stale(DOC_UPDATE, [make_change("c1", "2024-01-01T00:00:01Z")])


def test_equal_timestamp_is_not_stale(make_change) -> None:
    assert not is_stale(DOC_UPDATE, [make_change("c1", "2024-01-01T00:00:00+00:00")])


def test_comparison_is_chronological_not_lexical(make_change) -> None:
    # 2024-01-01T02:00+05:00 is 2023-12-31T21:00Z
    assert not is_stale(DOC_UPDATE, [make_change("c1", "2024-01-01T02:00:00+05:00")])


def test_staleness_days_rounds_up(make_change) -> None:
    assert staleness_days(DOC_UPDATE, [make_change("c1", "2024-01-01T00:00:01Z")]) == 1
    assert staleness_days(DOC_UPDATE, [make_change("c1", "2024-02-01")]) == 31


def test_staleness_days_uses_latest_change(make_change) -> None:
    changes = [
        make_change("c1", "2024-01-05"),
        make_change("c2", "2024-01-20"),
        make_change("c3", "2024-01-10"),
    ]
    assert staleness_days(DOC_UPDATE, changes) == 19


def test_staleness_days_clamps_to_zero(make_change) -> None:
    assert staleness_days(DOC_UPDATE, [make_change("c1", "2023-12-01")]) == 0


def test_staleness_days_empty_matches(make_change) -> None:
    assert staleness_days(DOC_UPDATE, []) == 0


def test_staleness_is_monotonic_in_latest_change(make_change) -> None:
    dates = ["2023-12-01", "2024-01-01", "2024-01-02T12:00:00Z", "2024-03-01", "2025-01-01"]
    days = [staleness_days(DOC_UPDATE, [make_change("c", date)]) for date in dates]
    assert days == sorted(days)
