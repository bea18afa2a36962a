"""Run-level analysis: find, deduplicate and rank stale documentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from ..logging import get_logger
from ..models import AnalysisResult, DocReference, RecentChange, StaleReference
from .index import build_change_index
from .matcher import find_matching_changes
from .paths import GlobMatcher
from .staleness import is_stale, staleness_days

_LOGGER = get_logger("analysis")


@dataclass(frozen=True)
class ChangeStatistics:
    """Aggregate counts describing the commits in a scan window."""

    total_commits: int
    total_files_changed: int
    unique_authors: int
    prs_included: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalCommits": self.total_commits,
            "totalFilesChanged": self.total_files_changed,
            "uniqueAuthors": self.unique_authors,
            "prsIncluded": self.prs_included,
        }


def find_stale_references(
    docs: Sequence[DocReference],
    changes: Sequence[RecentChange],
    *,
    scan_period_days: int,
) -> AnalysisResult:
    """Report documents whose referenced sources changed after they did."""
    index = build_change_index(changes)
    matcher = GlobMatcher()
    _LOGGER.debug("Indexed %d changed path(s) from %d commit(s)", len(index), len(changes))

    findings: List[StaleReference] = []
    total_references_checked = 0

    for doc in docs:
        last_update = doc.last_modified_at
        for reference in doc.references:
            total_references_checked += 1
            matches = find_matching_changes(reference, index, matcher)
            if not matches or not is_stale(last_update, matches):
                continue
            findings.append(
                StaleReference(
                    doc_path=doc.doc_path,
                    source_file=reference,
                    last_doc_update=doc.last_modified,
                    recent_source_changes=tuple(matches),
                    staleness_days=staleness_days(last_update, matches),
                )
            )

    unique = dedupe_by_doc(findings)
    unique.sort(key=lambda ref: ref.staleness_days, reverse=True)
    _LOGGER.debug(
        "Checked %d reference(s) across %d doc(s); %d stale",
        total_references_checked,
        len(docs),
        len(unique),
    )

    return AnalysisResult(
        stale_references=tuple(unique),
        total_docs_analyzed=len(docs),
        total_references_checked=total_references_checked,
        scan_period_days=scan_period_days,
    )


def dedupe_by_doc(refs: Iterable[StaleReference]) -> List[StaleReference]:
    """Keep the most stale entry per document; the first one seen wins ties."""
    by_doc: Dict[str, StaleReference] = {}
    for ref in refs:
        existing = by_doc.get(ref.doc_path)
        if existing is None or ref.staleness_days > existing.staleness_days:
            by_doc[ref.doc_path] = ref
    return list(by_doc.values())


def change_statistics(changes: Sequence[RecentChange]) -> ChangeStatistics:
    """Summarise commit, file, author and pull-request counts."""
    return ChangeStatistics(
        total_commits=len(changes),
        total_files_changed=sum(len(change.files) for change in changes),
        unique_authors=len({change.author for change in changes}),
        prs_included=sum(1 for change in changes if change.pr_number),
    )


__all__ = [
    "ChangeStatistics",
    "change_statistics",
    "dedupe_by_doc",
    "find_stale_references",
]
