"""JSON report output for analysis runs."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from .analysis import ChangeStatistics
from .models import AnalysisResult

LATEST_FILENAME = "latest.json"


def report_filename(scan_date: datetime) -> str:
    return f"doc-staleness-{scan_date.strftime('%Y-%m-%d')}.json"


def build_report(
    result: AnalysisResult, statistics: ChangeStatistics, *, scan_date: datetime
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "scanDate": scan_date.isoformat().replace("+00:00", "Z"),
        "statistics": statistics.to_dict(),
    }
    payload.update(result.to_dict())
    return payload


@dataclass
class ReportWriter:
    """Persists analysis results as a dated report plus a `latest.json` copy."""

    def write(
        self,
        output_dir: Path,
        result: AnalysisResult,
        statistics: ChangeStatistics,
        *,
        scan_date: datetime,
    ) -> Path:
        output_dir.mkdir(parents=True, exist_ok=True)
        text = json.dumps(
            build_report(result, statistics, scan_date=scan_date), indent=2, sort_keys=True
        )
        target = output_dir / report_filename(scan_date)
        target.write_text(text + "\n", encoding="utf-8")
        (output_dir / LATEST_FILENAME).write_text(text + "\n", encoding="utf-8")
        return target


__all__ = ["LATEST_FILENAME", "ReportWriter", "build_report", "report_filename"]
