from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

import pytest

from docwatch.models import ChangedFile, DocReference, RecentChange
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable repo builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def make_change() -> Callable[..., RecentChange]:
    """Build a RecentChange touching the given files."""

    def _make(
        sha: str,
        date: str,
        files: Sequence[str] = (),
        *,
        author: str = "alice",
        pr_number: int | None = None,
    ) -> RecentChange:
        return RecentChange(
            sha=sha,
            date=date,
            author=author,
            message=f"commit {sha}",
            files=tuple(ChangedFile(filename=name, status="modified") for name in files),
            pr_number=pr_number,
        )

    return _make


@pytest.fixture
def make_doc() -> Callable[..., DocReference]:
    """Build a DocReference with the given references."""

    def _make(
        doc_path: str, references: Sequence[str], last_modified: str | None = None
    ) -> DocReference:
        return DocReference(
            doc_path=doc_path, references=tuple(references), last_modified=last_modified
        )

    return _make
