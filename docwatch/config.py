"""Configuration loading for docwatch (.docwatch.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

CONFIG_FILENAME = ".docwatch.yml"

DEFAULT_LOOKBACK_DAYS = 7
DEFAULT_OUTPUT_DIR = "reports"
DEFAULT_DOCS_DIRS = ("docs",)
DEFAULT_DOC_SUFFIXES = (".md", ".mdx")

ENV_LOOKBACK_DAYS = "DOCWATCH_LOOKBACK_DAYS"
ENV_BRANCH = "DOCWATCH_BRANCH"
ENV_OUTPUT_DIR = "DOCWATCH_OUTPUT_DIR"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class DocsConfig:
    """Where documentation lives and which files count as docs."""

    dirs: List[str] = field(default_factory=lambda: list(DEFAULT_DOCS_DIRS))
    suffixes: List[str] = field(default_factory=lambda: list(DEFAULT_DOC_SUFFIXES))


@dataclass
class DocWatchConfig:
    """Represents the settings defined in .docwatch.yml plus environment overrides."""

    root: Path
    lookback_days: int = DEFAULT_LOOKBACK_DAYS
    branch: Optional[str] = None
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    docs: DocsConfig = field(default_factory=DocsConfig)


def load_config(config_path: Path, *, env: Mapping[str, str] | None = None) -> DocWatchConfig:
    """Load configuration from disk, then apply DOCWATCH_* environment overrides."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    environ = os.environ if env is None else env

    data: Dict[str, Any] = {}
    if config_file.exists():
        loaded = _read_config(config_file)
        if not isinstance(loaded, dict):
            raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")
        data = loaded

    lookback_days = _as_positive_int(data.get("lookback_days")) or DEFAULT_LOOKBACK_DAYS
    branch = _as_str(data.get("branch"))
    output_dir_str = _as_str(data.get("output_dir")) or DEFAULT_OUTPUT_DIR

    docs = DocsConfig()
    docs_data = _as_dict(data.get("docs"))
    if docs_data:
        docs.dirs = _as_str_list(docs_data.get("dirs")) or docs.dirs
        docs.suffixes = _as_str_list(docs_data.get("suffixes")) or docs.suffixes

    env_lookback = _as_positive_int(environ.get(ENV_LOOKBACK_DAYS))
    if env_lookback:
        lookback_days = env_lookback
    branch = environ.get(ENV_BRANCH) or branch
    output_dir_str = environ.get(ENV_OUTPUT_DIR) or output_dir_str

    return DocWatchConfig(
        root=root,
        lookback_days=lookback_days,
        branch=branch,
        output_dir=root / output_dir_str,
        docs=docs,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            return None
        return parsed if parsed > 0 else None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "DocWatchConfig", "DocsConfig", "load_config"]
