"""Commit history inspection for a local git checkout."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..logging import get_logger
from ..models import ChangedFile, RecentChange

_RECORD_SEP = "\x1e"
_FIELD_SEP = "\x1f"
_LOG_FORMAT = f"--format={_RECORD_SEP}%H{_FIELD_SEP}%aI{_FIELD_SEP}%an{_FIELD_SEP}%s"

_PR_SUFFIX = re.compile(r"^(?P<title>.*?)\s*\(#(?P<number>\d+)\)\s*$")
_SUMMARY_LINE = re.compile(r"^(?P<kind>create|delete) mode \d+ (?P<path>.+)$")
_DIFF_HEADER = "diff --git "
_NULL_PATH = "/dev/null"


@dataclass
class _FilePatch:
    old_path: Optional[str] = None
    new_path: Optional[str] = None
    hunks: List[str] = field(default_factory=list)

    @property
    def path(self) -> Optional[str]:
        return self.new_path or self.old_path


@dataclass
class _CommitDraft:
    sha: str
    date: str
    author: str
    subject: str
    numstat: List[Tuple[str, int, int, bool]] = field(default_factory=list)
    created: set[str] = field(default_factory=set)
    deleted: set[str] = field(default_factory=set)
    patches: List[_FilePatch] = field(default_factory=list)

    def patch_by_path(self) -> Dict[str, str]:
        found: Dict[str, str] = {}
        for patch in self.patches:
            text = "\n".join(patch.hunks).rstrip("\n")
            if patch.path and text:
                found[patch.path] = text
        return found


class HistoryScanner:
    """Reads recent commits, per-file modification times and file contents from git."""

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner
        self.logger = get_logger("git.history")

    def recent_changes(
        self,
        repo_path: str,
        *,
        lookback_days: int,
        branch: str | None = None,
        now: datetime | None = None,
        include_patches: bool = False,
    ) -> List[RecentChange]:
        """Return non-merge commits authored within the lookback window.

        With `include_patches` every changed file carries the unified-diff hunks
        git produced for it; binary files and pure renames have none.
        """
        repo = self._require_repo(repo_path)
        since = ((now or datetime.now(UTC)) - timedelta(days=lookback_days)).replace(microsecond=0)
        args = ["git", "-c", "core.quotepath=false", "log"]
        if branch:
            args.append(branch)
        args.extend(
            [
                f"--since={since.isoformat()}",
                "--no-merges",
                _LOG_FORMAT,
                "--numstat",
                "--summary",
            ]
        )
        if include_patches:
            args.append("--patch")
        output = self._run(args, cwd=repo, capture_output=True)
        changes = [self._finish(draft) for draft in _parse_log(output)]
        self.logger.debug("Read %d commit(s) since %s", len(changes), since.isoformat())
        return changes

    def last_modified(
        self, repo_path: str, path: str, *, branch: str | None = None
    ) -> Optional[str]:
        """Return the author date of the newest commit touching `path`, if any."""
        repo = self._require_repo(repo_path)
        args = ["git", "log", "-1", "--format=%aI"]
        if branch:
            args.append(branch)
        args.extend(["--", path])
        output = self._run(args, cwd=repo, capture_output=True).strip()
        return output or None

    def list_files(self, repo_path: str, ref: str, directory: str) -> List[str]:
        """List repo-relative paths of every file under `directory` at `ref`."""
        repo = self._require_repo(repo_path)
        args = [
            "git",
            "-c",
            "core.quotepath=false",
            "ls-tree",
            "-r",
            "--name-only",
            ref,
            "--",
            directory,
        ]
        output = self._run(args, cwd=repo, capture_output=True)
        return [line for line in output.splitlines() if line.strip()]

    def read_file(self, repo_path: str, ref: str, path: str) -> str:
        """Return the contents of `path` as committed at `ref`."""
        repo = self._require_repo(repo_path)
        return self._run(["git", "show", f"{ref}:{path}"], cwd=repo, capture_output=True)

    # ------------------------------------------------------------------
    # Internals

    @staticmethod
    def _require_repo(repo_path: str) -> Path:
        repo = Path(repo_path)
        if not (repo / ".git").exists():
            raise RuntimeError(f"{repo_path} is not a Git repository")
        return repo

    @staticmethod
    def _finish(draft: _CommitDraft) -> RecentChange:
        patches = draft.patch_by_path()
        files: List[ChangedFile] = []
        for filename, additions, deletions, renamed in draft.numstat:
            if renamed:
                status = "renamed"
            elif filename in draft.created:
                status = "added"
            elif filename in draft.deleted:
                status = "removed"
            else:
                status = "modified"
            files.append(
                ChangedFile(
                    filename=filename,
                    status=status,
                    additions=additions,
                    deletions=deletions,
                    patch=patches.get(filename),
                )
            )

        pr_number = None
        pr_title = None
        match = _PR_SUFFIX.match(draft.subject)
        if match:
            pr_number = int(match.group("number"))
            pr_title = match.group("title")

        return RecentChange(
            sha=draft.sha,
            date=draft.date,
            author=draft.author,
            message=draft.subject,
            files=tuple(files),
            pr_number=pr_number,
            pr_title=pr_title,
        )

    def _run(
        self,
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        return self._runner(args, cwd=cwd, capture_output=capture_output)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        import subprocess

        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


def _parse_log(output: str) -> List[_CommitDraft]:
    drafts: List[_CommitDraft] = []
    for record in output.split(_RECORD_SEP):
        if not record.strip():
            continue
        header, _, body = record.partition("\n")
        parts = header.split(_FIELD_SEP)
        if len(parts) != 4:
            continue
        sha, date, author, subject = parts
        draft = _CommitDraft(sha=sha.strip(), date=date.strip(), author=author, subject=subject)
        current: Optional[_FilePatch] = None
        for line in body.splitlines():
            if line.startswith(_DIFF_HEADER):
                current = _FilePatch()
                draft.patches.append(current)
                continue
            if current is not None:
                _add_patch_line(current, line)
                continue
            if not line.strip():
                continue
            if "\t" in line:
                _add_numstat(draft, line)
                continue
            summary = _SUMMARY_LINE.match(line.strip())
            if summary:
                target = draft.created if summary.group("kind") == "create" else draft.deleted
                target.add(summary.group("path"))
        drafts.append(draft)
    return drafts


def _add_numstat(draft: _CommitDraft, line: str) -> None:
    added, deleted, raw_path = line.split("\t", 2)
    renamed = " => " in raw_path
    filename = _rename_target(raw_path) if renamed else raw_path
    # binary files report "-" for both counts
    additions = int(added) if added.isdigit() else 0
    deletions = int(deleted) if deleted.isdigit() else 0
    draft.numstat.append((filename, additions, deletions, renamed))


def _add_patch_line(patch: _FilePatch, line: str) -> None:
    if patch.hunks or line.startswith("@@"):
        patch.hunks.append(line)
        return
    # header lines before the first hunk
    if line.startswith("--- "):
        patch.old_path = _diff_path(line[4:], "a/")
    elif line.startswith("+++ "):
        patch.new_path = _diff_path(line[4:], "b/")
    elif line.startswith("rename to "):
        patch.new_path = line[len("rename to ") :]
    elif line.startswith("rename from "):
        patch.old_path = line[len("rename from ") :]


def _diff_path(raw: str, prefix: str) -> Optional[str]:
    # git appends a tab to names containing spaces
    raw = raw.rstrip("\t")
    if raw == _NULL_PATH:
        return None
    return raw[len(prefix) :] if raw.startswith(prefix) else raw


def _rename_target(raw_path: str) -> str:
    """Resolve `src/{old => new}/x.py` or `old => new` to the new path."""
    if "{" in raw_path and "}" in raw_path:
        prefix, rest = raw_path.split("{", 1)
        inner, suffix = rest.split("}", 1)
        new = inner.split(" => ", 1)[1]
        return re.sub(r"/{2,}", "/", f"{prefix}{new}{suffix}").lstrip("/")
    return raw_path.split(" => ", 1)[1]


__all__ = ["HistoryScanner"]
