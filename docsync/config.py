"""Configuration loading for docsync (.docsync.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .errors import ConfigurationError
from .generator import DEFAULT_CONCURRENCY

CONFIG_FILENAME = ".docsync.yml"
SRC_DIR_ENV = "DOCSYNC_SRC_DIR"
DEFAULT_PROJECT_ROOT = "../playwright"
SOURCE_SUBDIR = ("docs", "src")
DEFAULT_API_FILE = ("docs", "api.yml")


@dataclass
class StarsConfig:
    """Settings for the GitHub star-count badge patched after batch runs."""

    enabled: bool = True
    repository: str = "microsoft/playwright"
    target: Optional[Path] = None
    request_timeout: float = 30.0


@dataclass
class DocsyncConfig:
    """Represents the settings defined in .docsync.yml."""

    workspace: Path
    project_root: Path
    languages: List[str] = field(default_factory=list)
    api_file: Optional[Path] = None
    concurrency: int = DEFAULT_CONCURRENCY
    exclude_paths: List[str] = field(default_factory=list)
    link_template: Optional[str] = None
    stars: StarsConfig = field(default_factory=StarsConfig)

    @property
    def source_root(self) -> Path:
        return self.project_root.joinpath(*SOURCE_SUBDIR)


def load_config(config_path: Path, environ: Mapping[str, str] | None = None) -> DocsyncConfig:
    """Load configuration from disk, applying the source-root environment override."""
    env = os.environ if environ is None else environ
    config_file = _resolve_config_path(config_path)
    workspace = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    project_value = env.get(SRC_DIR_ENV) or _as_str(data.get("project_root")) or DEFAULT_PROJECT_ROOT
    project_root = (workspace / Path(project_value).expanduser()).resolve()

    languages = _as_str_list(data.get("languages"))

    api_value = _as_str(data.get("api_file"))
    if api_value:
        api_file: Optional[Path] = (workspace / api_value).resolve()
        if not api_file.is_file():
            raise ConfigurationError(f"Configured api_file not found: {api_file}")
    else:
        candidate = project_root.joinpath(*DEFAULT_API_FILE)
        api_file = candidate if candidate.is_file() else None

    concurrency = _as_int(data.get("concurrency"))
    if concurrency is not None and concurrency < 1:
        raise ConfigurationError("concurrency must be a positive integer")

    stars_data = _as_dict(data.get("stars"))
    stars = StarsConfig(target=workspace / "src" / "components" / "GitHubStarButton" / "index.tsx")
    if stars_data:
        enabled = _as_bool(stars_data.get("enabled"))
        if enabled is not None:
            stars.enabled = enabled
        stars.repository = _as_str(stars_data.get("repository")) or stars.repository
        target = _as_str(stars_data.get("target"))
        if target:
            stars.target = workspace / target
        timeout = _as_float(stars_data.get("request_timeout"))
        if timeout is not None:
            stars.request_timeout = timeout

    return DocsyncConfig(
        workspace=workspace,
        project_root=project_root,
        languages=languages,
        api_file=api_file,
        concurrency=concurrency or DEFAULT_CONCURRENCY,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        link_template=_as_str(data.get("link_template")),
        stars=stars,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigurationError(f"{path.name} must contain a mapping at the root")
    return loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "DocsyncConfig",
    "SRC_DIR_ENV",
    "StarsConfig",
    "load_config",
]
