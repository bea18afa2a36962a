"""Pipeline orchestration for scan and analyze flows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Mapping, Optional

from .analysis import ChangeStatistics, change_statistics, find_stale_references
from .config import DEFAULT_LOOKBACK_DAYS, DocWatchConfig, load_config
from .docs import DocScanner
from .git.history import HistoryScanner
from .logging import get_logger
from .models import AnalysisResult, DocReference, RecentChange
from .report import ReportWriter


@dataclass
class ScanOutcome:
    """Result of scanning a repository for stale documentation."""

    result: AnalysisResult
    statistics: ChangeStatistics
    scan_date: datetime
    report_path: Optional[Path]


class Orchestrator:
    """Wires history, doc discovery, analysis and reporting together."""

    def __init__(
        self,
        history: HistoryScanner | None = None,
        doc_scanner: DocScanner | None = None,
        report_writer: ReportWriter | None = None,
    ) -> None:
        self.history = history or HistoryScanner()
        self.doc_scanner = doc_scanner or DocScanner(self.history)
        self.report_writer = report_writer or ReportWriter()
        self.logger = get_logger("orchestrator")

    def run_scan(
        self,
        path: str,
        *,
        lookback_days: int | None = None,
        branch: str | None = None,
        output_dir: Path | None = None,
        write_report: bool = True,
        include_patches: bool = False,
        now: datetime | None = None,
    ) -> ScanOutcome:
        """Scan a local checkout and report docs behind their referenced sources."""
        repo_path = Path(path).expanduser().resolve()
        config = self._load_config(repo_path)
        lookback = lookback_days or config.lookback_days
        ref = branch or config.branch
        scan_date = now or datetime.now(UTC)

        self.logger.info("Scanning %s (branch %s, last %d days)", repo_path, ref or "HEAD", lookback)
        changes = self.history.recent_changes(
            str(repo_path),
            lookback_days=lookback,
            branch=ref,
            now=scan_date,
            include_patches=include_patches,
        )
        statistics = change_statistics(changes)
        self.logger.info(
            "Found %d commits, %d files changed, %d authors, %d PRs",
            statistics.total_commits,
            statistics.total_files_changed,
            statistics.unique_authors,
            statistics.prs_included,
        )

        docs = self.doc_scanner.scan(
            str(repo_path),
            docs_dirs=config.docs.dirs,
            suffixes=config.docs.suffixes,
            branch=ref,
        )
        self.logger.info("Found %d docs with references", len(docs))
        if not docs:
            self.logger.info(
                "Add `references: [path/to/file]` front matter to docs to track them."
            )

        result = find_stale_references(docs, changes, scan_period_days=lookback)
        self.logger.info("Found %d potentially stale docs", len(result.stale_references))

        report_path = None
        if write_report:
            target_dir = output_dir or config.output_dir
            report_path = self.report_writer.write(
                target_dir, result, statistics, scan_date=scan_date
            )
            self.logger.info("Report written to %s", report_path)

        return ScanOutcome(
            result=result,
            statistics=statistics,
            scan_date=scan_date,
            report_path=report_path,
        )

    def run_analyze(
        self, payload: Mapping[str, Any], *, scan_period_days: int | None = None
    ) -> AnalysisResult:
        """Analyze pre-collected `docReferences` and `recentChanges` records."""
        docs = [DocReference.from_dict(item) for item in payload.get("docReferences") or ()]
        changes = [RecentChange.from_dict(item) for item in payload.get("recentChanges") or ()]
        period = scan_period_days or payload.get("scanPeriodDays") or DEFAULT_LOOKBACK_DAYS
        return find_stale_references(docs, changes, scan_period_days=int(period))

    def _load_config(self, repo_path: Path) -> DocWatchConfig:
        config = load_config(repo_path)
        self.logger.debug(
            "Config: docs dirs %s, suffixes %s", config.docs.dirs, config.docs.suffixes
        )
        return config
