"""Helper utilities for constructing throwaway documentation workspaces in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Dict, Mapping, Union

from docsync.config import DocsyncConfig, StarsConfig
from docsync.driver import DOCS_SUBDIR


class DocTreeBuilder:
    """Lays out a source project and a site workspace side by side under tmp_path."""

    def __init__(self, tmp_path: Path) -> None:
        self.workspace = tmp_path / "site"
        self.project_root = tmp_path / "project"
        self.source_root = self.project_root / "docs" / "src"
        self.workspace.mkdir()
        self.source_root.mkdir(parents=True)

    def write(self, files: Mapping[str, Union[str, bytes]]) -> None:
        """Write `path -> contents` entries into the source tree."""
        for relative, content in files.items():
            path = self.source_root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")

    def destination(self, folder: str) -> Path:
        return self.workspace / folder / DOCS_SUBDIR

    def config(self, **overrides: object) -> DocsyncConfig:
        values: Dict[str, object] = {
            "workspace": self.workspace,
            "project_root": self.project_root,
            "stars": StarsConfig(enabled=False),
        }
        values.update(overrides)
        return DocsyncConfig(**values)  # type: ignore[arg-type]

    @staticmethod
    def snapshot(root: Path) -> Dict[str, bytes]:
        """Return every file under ``root`` keyed by relative posix path."""
        return {
            path.relative_to(root).as_posix(): path.read_bytes()
            for path in sorted(root.rglob("*"))
            if path.is_file()
        }


__all__ = ["DocTreeBuilder"]
