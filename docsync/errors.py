"""Exception taxonomy shared by the generation pipeline and its glue."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence


class DocsyncError(RuntimeError):
    """Base class for docsync failures."""


class ConfigurationError(DocsyncError):
    """Raised when a source or destination root, or the config file, is unusable."""


class ParseError(DocsyncError):
    """Raised when a source document has malformed structural markers."""

    def __init__(self, message: str, *, path: str | None = None, line: int | None = None) -> None:
        self.path = path
        self.line = line
        self.reason = message
        super().__init__(self._describe())

    def with_path(self, path: str) -> "ParseError":
        """Return a copy of the error located in ``path``."""
        return ParseError(self.reason, path=path, line=self.line)

    def _describe(self) -> str:
        location = self.path or "<document>"
        if self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location}: {self.reason}"


class UnsupportedConstructError(DocsyncError):
    """Raised when a formatter has no rendering for a construct in its language."""

    def __init__(self, language: str, construct: str, detail: str | None = None) -> None:
        self.language = language
        self.construct = construct
        self.detail = detail
        message = f"{language} formatter cannot render {construct}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class NetworkError(DocsyncError):
    """Raised when the auxiliary star-count request fails."""


@dataclass
class DocumentFailure:
    """A single document that could not be generated."""

    path: str
    error: BaseException

    def describe(self) -> str:
        return f"{self.path}: {self.error}"


class GenerationError(DocsyncError):
    """Raised after a pass when at least one document (or language) failed."""

    def __init__(self, failures: Sequence[DocumentFailure], *, language: Optional[str] = None) -> None:
        self.failures: List[DocumentFailure] = list(failures)
        self.language = language
        scope = f"{language} generation" if language else "generation"
        summary = f"{scope} failed for {len(self.failures)} document(s)"
        details = "\n".join(f"  - {failure.describe()}" for failure in self.failures)
        super().__init__(f"{summary}\n{details}" if details else summary)


__all__ = [
    "ConfigurationError",
    "DocsyncError",
    "DocumentFailure",
    "GenerationError",
    "NetworkError",
    "ParseError",
    "UnsupportedConstructError",
]
