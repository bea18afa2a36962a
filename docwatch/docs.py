"""Discovery of documentation files and their declared source references."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Iterator, List, Sequence, Tuple

import yaml

from .git.history import HistoryScanner
from .logging import get_logger
from .models import DocReference

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
    ".docusaurus",
    "build",
}

_FRONT_MATTER = re.compile(r"\A---[ \t]*\r?\n(?P<body>.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


def parse_references(text: str) -> List[str]:
    """Return the `references` list declared in a document's YAML front matter."""
    match = _FRONT_MATTER.match(text)
    if not match:
        return []
    try:
        meta = yaml.safe_load(match.group("body"))
    except yaml.YAMLError:
        return []
    if not isinstance(meta, dict):
        return []
    return _as_reference_list(meta.get("references"))


def _as_reference_list(value: Any) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    refs: List[str] = []
    for item in value:
        if not isinstance(item, str):
            continue
        stripped = item.strip()
        if stripped:
            refs.append(stripped)
    return refs


class DocScanner:
    """Collects declared references from documentation files.

    Without a branch the checked-out working tree is walked. With a branch the
    doc tree and file contents are read from that ref through git, so the
    references compared against the branch history are the branch's own.
    """

    def __init__(self, history: HistoryScanner | None = None) -> None:
        self.history = history or HistoryScanner()
        self.logger = get_logger("docs")

    def scan(
        self,
        repo_path: str,
        *,
        docs_dirs: Sequence[str],
        suffixes: Sequence[str],
        branch: str | None = None,
    ) -> List[DocReference]:
        """Return a DocReference for every doc file that declares references."""
        root = Path(repo_path).expanduser().resolve()
        if not root.is_dir():
            raise FileNotFoundError(f"Repository path not found: {repo_path}")

        lowered = tuple(suffix.lower() for suffix in suffixes)
        found: List[DocReference] = []
        for doc_dir in docs_dirs:
            if branch:
                documents = self._branch_docs(root, branch, doc_dir, lowered)
            else:
                documents = self._worktree_docs(root, doc_dir, lowered)
            for rel_path, text in documents:
                references = parse_references(text)
                if not references:
                    continue
                last_modified = self.history.last_modified(str(root), rel_path, branch=branch)
                found.append(
                    DocReference(
                        doc_path=rel_path,
                        references=tuple(references),
                        last_modified=last_modified,
                    )
                )

        self.logger.debug("Found %d doc(s) declaring references", len(found))
        return found

    def _worktree_docs(
        self, root: Path, doc_dir: str, suffixes: Tuple[str, ...]
    ) -> Iterator[Tuple[str, str]]:
        base = root / doc_dir
        if not base.is_dir():
            self.logger.debug("Skipping missing docs directory %s", doc_dir)
            return
        for path in _iter_docs(base, suffixes):
            rel_path = path.relative_to(root).as_posix()
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                self.logger.warning("Failed to read %s: %s", rel_path, exc)
                continue
            yield rel_path, text

    def _branch_docs(
        self, root: Path, branch: str, doc_dir: str, suffixes: Tuple[str, ...]
    ) -> Iterator[Tuple[str, str]]:
        directory = doc_dir.strip("/") or "."
        paths = self.history.list_files(str(root), branch, directory)
        if not paths:
            self.logger.debug("No files under %s on %s", doc_dir, branch)
        for rel_path in sorted(paths):
            parts = rel_path.split("/")
            if any(part in _EXCLUDED_DIRS for part in parts[:-1]):
                continue
            if not parts[-1].lower().endswith(suffixes):
                continue
            yield rel_path, self.history.read_file(str(root), branch, rel_path)


def _iter_docs(base: Path, suffixes: Tuple[str, ...]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(base):
        dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
        for filename in sorted(filenames):
            if filename.lower().endswith(suffixes):
                yield Path(dirpath) / filename


__all__ = ["DocScanner", "parse_references"]
