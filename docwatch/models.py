"""Core data models shared across docwatch components."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Dict, Mapping, Optional, Tuple


class InvalidTimestampError(ValueError):
    """Raised when a change date or doc modification time is not ISO-8601."""


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating offset-less values as UTC."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidTimestampError(f"Expected an ISO-8601 timestamp, got {value!r}")
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidTimestampError(f"Invalid ISO-8601 timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True)
class ChangedFile:
    """One file touched by a single commit."""

    filename: str
    status: str = "modified"
    additions: int = 0
    deletions: int = 0
    patch: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ChangedFile":
        return cls(
            filename=str(payload["filename"]),
            status=str(payload.get("status") or "modified"),
            additions=int(payload.get("additions") or 0),
            deletions=int(payload.get("deletions") or 0),
            patch=payload.get("patch"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "filename": self.filename,
            "status": self.status,
            "additions": self.additions,
            "deletions": self.deletions,
        }
        if self.patch is not None:
            data["patch"] = self.patch
        return data


@dataclass(frozen=True)
class RecentChange:
    """A commit inside the lookback window, optionally linked to a pull request."""

    sha: str
    date: str
    author: str = ""
    message: str = ""
    files: Tuple[ChangedFile, ...] = field(default_factory=tuple)
    pr_number: Optional[int] = None
    pr_title: Optional[str] = None

    def __post_init__(self) -> None:
        parse_timestamp(self.date)
        if not isinstance(self.files, tuple):
            object.__setattr__(self, "files", tuple(self.files))

    @property
    def timestamp(self) -> datetime:
        return parse_timestamp(self.date)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "RecentChange":
        pr_number = payload.get("pr_number")
        return cls(
            sha=str(payload["sha"]),
            date=payload["date"],
            author=str(payload.get("author") or ""),
            message=str(payload.get("message") or ""),
            files=tuple(ChangedFile.from_dict(item) for item in payload.get("files") or ()),
            pr_number=int(pr_number) if pr_number is not None else None,
            pr_title=payload.get("pr_title"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "sha": self.sha,
            "date": self.date,
            "author": self.author,
            "message": self.message,
            "files": [item.to_dict() for item in self.files],
        }
        if self.pr_number is not None:
            data["pr_number"] = self.pr_number
        if self.pr_title is not None:
            data["pr_title"] = self.pr_title
        return data


@dataclass(frozen=True)
class DocReference:
    """A documentation file and the source paths its front matter declares."""

    doc_path: str
    references: Tuple[str, ...] = field(default_factory=tuple)
    last_modified: Optional[str] = None

    def __post_init__(self) -> None:
        if self.last_modified is not None:
            parse_timestamp(self.last_modified)
        references = self.references
        if isinstance(references, str):
            references = (references,)
        if not isinstance(references, (list, tuple)):
            raise ValueError(
                f"{self.doc_path}: references must be a list of paths, got {references!r}"
            )
        for ref in references:
            if not isinstance(ref, str):
                raise ValueError(f"{self.doc_path}: reference {ref!r} is not a string")
        object.__setattr__(self, "references", tuple(references))

    @property
    def last_modified_at(self) -> Optional[datetime]:
        if self.last_modified is None:
            return None
        return parse_timestamp(self.last_modified)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DocReference":
        return cls(
            doc_path=str(payload["docPath"]),
            references=payload.get("references") or (),
            last_modified=payload.get("lastModified"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"docPath": self.doc_path, "references": list(self.references)}
        if self.last_modified is not None:
            data["lastModified"] = self.last_modified
        return data


@dataclass(frozen=True)
class StaleReference:
    """A reference inside a document that changed after the document did."""

    doc_path: str
    source_file: str
    last_doc_update: Optional[str]
    recent_source_changes: Tuple[RecentChange, ...]
    staleness_days: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "docPath": self.doc_path,
            "sourceFile": self.source_file,
            "lastDocUpdate": self.last_doc_update,
            "recentSourceChanges": [change.to_dict() for change in self.recent_source_changes],
            "stalenessDays": self.staleness_days,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Deduplicated, sorted findings for one analysis run."""

    stale_references: Tuple[StaleReference, ...]
    total_docs_analyzed: int
    total_references_checked: int
    scan_period_days: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "staleReferences": [ref.to_dict() for ref in self.stale_references],
            "totalDocsAnalyzed": self.total_docs_analyzed,
            "totalReferencesChecked": self.total_references_checked,
            "scanPeriodDays": self.scan_period_days,
        }
