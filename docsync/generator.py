"""One generation pass: source tree in, one language's rendered tree out."""

from __future__ import annotations

import asyncio
import hashlib
import logging
from pathlib import Path
from typing import Dict, List, Optional

import aiofiles
import aiofiles.os

from .errors import ConfigurationError, DocumentFailure, GenerationError, ParseError, UnsupportedConstructError
from .formatters import Formatter
from .logging import get_logger
from .models import ApiReference, CodeSample, DocumentNode, GenerationReport, OutputFile, Prose, SourceFile
from .parser import parse_document
from .source_tree import SourceScanner, check_source_root

LANG_PLACEHOLDER = "%%LANG%%"
LANG_ID_PLACEHOLDER = "%%LANG_ID%%"
DEFAULT_CONCURRENCY = 8

_DOCUMENT_ERRORS = (ParseError, UnsupportedConstructError, OSError, UnicodeDecodeError)


class Generator:
    """Renders every document under ``source_root`` into ``destination_root`` for one language."""

    def __init__(
        self,
        language: str,
        source_root: Path,
        destination_root: Path,
        formatter: Formatter,
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
        scanner: SourceScanner | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if formatter.language != language:
            raise ConfigurationError(
                f"Formatter for '{formatter.language}' cannot generate '{language}' documentation"
            )
        self.language = language
        self.source_root = Path(source_root)
        self.destination_root = Path(destination_root)
        self.formatter = formatter
        self.concurrency = max(1, concurrency)
        self.scanner = scanner or SourceScanner()
        self.logger = logger or get_logger(f"generator.{language}")
        self.output_digests: Dict[str, str] = {}

    async def generate(self) -> GenerationReport:
        """Regenerate the destination tree; raises GenerationError if any document failed."""
        self._check_roots()
        sources = self.scanner.scan(self.source_root)
        self.logger.debug(
            "Rendering %d source files from %s into %s", len(sources), self.source_root, self.destination_root
        )

        report = GenerationReport(language=self.language)
        failures: List[DocumentFailure] = []
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _run(source: SourceFile) -> None:
            async with semaphore:
                try:
                    outcome = await self._process(source)
                except _DOCUMENT_ERRORS as exc:
                    self.logger.error("[%s] %s", self.language, _describe(source.path, exc))
                    failures.append(DocumentFailure(path=source.path, error=exc))
                    return
            getattr(report, outcome).append(source.path)

        await asyncio.gather(*(_run(source) for source in sources))

        for paths in (report.written, report.unchanged, report.copied):
            paths.sort()
        failures.sort(key=lambda failure: failure.path)
        if failures:
            raise GenerationError(failures, language=self.language)
        self.logger.info(
            "[%s] %d written, %d unchanged, %d assets copied",
            self.language,
            len(report.written),
            len(report.unchanged),
            len(report.copied),
        )
        return report

    def destination_for(self, relative_path: str) -> Path:
        return self.destination_root.joinpath(*relative_path.split("/"))

    def render_document(self, document: DocumentNode) -> OutputFile:
        """Render a parsed document for this generator's language."""
        return OutputFile(
            path=self.destination_for(document.path),
            content=self.render(document).encode("utf-8"),
        )

    def render(self, document: DocumentNode) -> str:
        parts: List[str] = []
        for block in document.blocks:
            if not block.applies_to(self.language):
                continue
            if isinstance(block, Prose):
                parts.append(self.substitute_placeholders(block.text))
            elif isinstance(block, CodeSample):
                parts.append(self._render_sample(document.path, block))
            elif isinstance(block, ApiReference):
                parts.append(self._render_reference(document.path, block))
        return "".join(parts)

    def substitute_placeholders(self, text: str) -> str:
        return text.replace(LANG_ID_PLACEHOLDER, self.language).replace(
            LANG_PLACEHOLDER, self.formatter.display_name
        )

    def _render_sample(self, path: str, block: CodeSample) -> str:
        try:
            body = self.formatter.render_code_sample(block.snippet)
        except UnsupportedConstructError as exc:
            raise _locate(exc, path, block.line) from exc
        indent = block.indent
        lines = [f"{indent}```{self.formatter.code_fence}"]
        lines.extend(f"{indent}{line}" if line else line for line in body.splitlines())
        lines.append(f"{indent}```")
        return "\n".join(lines) + "\n"

    def _render_reference(self, path: str, block: ApiReference) -> str:
        try:
            return self.formatter.render_api_reference(block)
        except UnsupportedConstructError as exc:
            raise _locate(exc, path, block.line) from exc

    def _check_roots(self) -> None:
        check_source_root(self.source_root)
        if self.destination_root.exists() and not self.destination_root.is_dir():
            raise ConfigurationError(f"Destination root is not a directory: {self.destination_root}")
        if self.destination_root.resolve() == self.source_root.resolve():
            raise ConfigurationError("Destination root must differ from the source root")

    async def _process(self, source: SourceFile) -> str:
        source_path = self.source_root.joinpath(*source.path.split("/"))
        if source.is_document:
            async with aiofiles.open(source_path, "r", encoding="utf-8", newline="") as handle:
                content = await handle.read()
            output = self.render_document(parse_document(source.path, content))
            changed = await self._write_if_changed(source.path, output)
            return "written" if changed else "unchanged"

        async with aiofiles.open(source_path, "rb") as handle:
            data = await handle.read()
        await self._write_if_changed(source.path, OutputFile(path=self.destination_for(source.path), content=data))
        return "copied"

    async def _write_if_changed(self, relative_path: str, output: OutputFile) -> bool:
        digest = hashlib.sha256(output.content).hexdigest()
        self.output_digests[relative_path] = digest
        existing = await _read_existing(output.path)
        if existing == output.content:
            return False
        await aiofiles.os.makedirs(output.path.parent, exist_ok=True)
        async with aiofiles.open(output.path, "wb") as handle:
            await handle.write(output.content)
        self.logger.debug("[%s] wrote %s", self.language, output.path)
        return True


async def _read_existing(path: Path) -> Optional[bytes]:
    if not await aiofiles.os.path.isfile(path):
        return None
    async with aiofiles.open(path, "rb") as handle:
        return await handle.read()


def _locate(exc: UnsupportedConstructError, path: str, line: int) -> UnsupportedConstructError:
    detail = f"{exc.detail}; " if exc.detail else ""
    return UnsupportedConstructError(exc.language, exc.construct, f"{detail}{path}:{line}")


def _describe(path: str, exc: BaseException) -> str:
    message = str(exc)
    return message if message.startswith(path) else f"{path}: {message}"


__all__ = ["DEFAULT_CONCURRENCY", "Generator", "LANG_ID_PLACEHOLDER", "LANG_PLACEHOLDER"]
