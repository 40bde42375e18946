"""Source tree enumeration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .errors import ConfigurationError
from .models import DOCUMENT_SUFFIXES, SourceFile

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "__pycache__",
    ".docsync",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}


@dataclass
class IgnoreRule:
    """An exclusion pattern from .docsync.yml, gitignore-style."""

    pattern: str
    directory_only: bool
    anchored: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False
        if self.anchored or "/" in self.pattern:
            return fnmatchcase(rel_path, self.pattern)
        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rules(patterns: Sequence[str]) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    for raw in patterns:
        pattern = raw.strip()
        if not pattern:
            continue
        directory_only = pattern.endswith("/")
        pattern = pattern.rstrip("/")
        anchored = pattern.startswith("/")
        rules.append(IgnoreRule(pattern=pattern.lstrip("/"), directory_only=directory_only, anchored=anchored))
    return rules


class SourceScanner:
    """Walks the source root and classifies files as documents or assets."""

    def __init__(self, exclude_paths: Sequence[str] = ()) -> None:
        self.rules = build_ignore_rules(exclude_paths)

    def scan(self, root: Path) -> List[SourceFile]:
        """Return every source file under ``root`` in a stable order."""
        check_source_root(root)
        files = [
            SourceFile(path=rel_path, kind=_classify(rel_path))
            for rel_path in self._iter_files(root)
        ]
        files.sort(key=lambda entry: entry.path)
        return files

    def _iter_files(self, root: Path) -> Iterator[str]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept = []
            for name in sorted(dirnames):
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if name in _EXCLUDED_DIRS or name.startswith(".") or self._ignored(rel_path, True):
                    continue
                kept.append(name)
            dirnames[:] = kept

            for filename in sorted(filenames):
                if filename in _EXCLUDED_FILES or filename.startswith("."):
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if self._ignored(rel_path, False):
                    continue
                yield rel_path

    def _ignored(self, rel_path: str, is_dir: bool) -> bool:
        return any(rule.matches(rel_path, is_dir) for rule in self.rules)


def check_source_root(root: Path) -> None:
    """Raise ConfigurationError unless ``root`` is a readable directory."""
    if not root.exists():
        raise ConfigurationError(f"Source root not found: {root}")
    if not root.is_dir():
        raise ConfigurationError(f"Source root is not a directory: {root}")
    if not os.access(root, os.R_OK | os.X_OK):
        raise ConfigurationError(f"Source root is not readable: {root}")


def _classify(rel_path: str) -> str:
    return "document" if rel_path.lower().endswith(DOCUMENT_SUFFIXES) else "asset"


__all__ = ["IgnoreRule", "SourceScanner", "build_ignore_rules", "check_source_root"]
