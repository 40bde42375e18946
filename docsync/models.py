"""Core data models shared across docsync components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List, Optional, Tuple, Union

from .snippets import Snippet

DOCUMENT_SUFFIXES = (".md", ".mdx")


@dataclass(frozen=True)
class SourceFile:
    """A file discovered under the source documentation root."""

    path: str
    kind: str  # "document" or "asset"

    @property
    def is_document(self) -> bool:
        return self.kind == "document"


@dataclass(frozen=True)
class Prose:
    """Markdown text copied through with language placeholders substituted."""

    text: str
    langs: Optional[FrozenSet[str]] = None

    def applies_to(self, language: str) -> bool:
        return self.langs is None or language in self.langs


@dataclass(frozen=True)
class CodeSample:
    """A neutral snippet spec rendered once per target language."""

    snippet: Snippet
    line: int
    indent: str = ""
    langs: Optional[FrozenSet[str]] = None

    def applies_to(self, language: str) -> bool:
        return self.langs is None or language in self.langs


@dataclass(frozen=True)
class ApiReference:
    """An inline reference to a class or one of its members."""

    kind: str
    symbol: str
    member_path: Tuple[str, ...] = ()
    line: int = 0
    langs: Optional[FrozenSet[str]] = None

    @property
    def member(self) -> Optional[str]:
        return self.member_path[0] if self.member_path else None

    @property
    def argument(self) -> Optional[str]:
        return self.member_path[1] if len(self.member_path) > 1 else None

    def applies_to(self, language: str) -> bool:
        return self.langs is None or language in self.langs

    def describe(self) -> str:
        target = ".".join((self.symbol, *self.member_path))
        return f"{self.kind}: {target}"


ContentBlock = Union[Prose, CodeSample, ApiReference]


@dataclass
class DocumentNode:
    """A parsed source document."""

    path: str
    content: str
    blocks: List[ContentBlock] = field(default_factory=list)


@dataclass(frozen=True)
class OutputFile:
    """Rendered content bound to its destination path."""

    path: Path
    content: bytes


@dataclass
class GenerationReport:
    """Summary of one generation pass for a single language."""

    language: str
    written: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    copied: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.written) + len(self.unchanged) + len(self.copied)


__all__ = [
    "ApiReference",
    "CodeSample",
    "ContentBlock",
    "DOCUMENT_SUFFIXES",
    "DocumentNode",
    "GenerationReport",
    "OutputFile",
    "Prose",
    "SourceFile",
]
