"""Wires one Generator per target language and runs them as a batch."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional

from .api import ApiSurface, load_api_surface
from .config import DocsyncConfig
from .errors import ConfigurationError, DocumentFailure, GenerationError
from .formatters import DEFAULT_LINK_TEMPLATE, Formatter, create_formatter
from .generator import Generator
from .logging import get_logger
from .models import GenerationReport
from .source_tree import SourceScanner

LANGUAGE_FOLDERS: Mapping[str, str] = MappingProxyType(
    {
        "js": "nodejs",
        "python": "python",
        "java": "java",
        "csharp": "dotnet",
    }
)
DOCS_SUBDIR = "docs"

FormatterFactory = Callable[..., Formatter]


@dataclass(frozen=True)
class LanguageTarget:
    """One row of the language table resolved against a workspace."""

    language: str
    folder: str
    destination_root: Path


def resolve_targets(workspace: Path, languages: Optional[List[str]] = None) -> List[LanguageTarget]:
    selected = list(languages) if languages else list(LANGUAGE_FOLDERS)
    unknown = [language for language in selected if language not in LANGUAGE_FOLDERS]
    if unknown:
        known = ", ".join(LANGUAGE_FOLDERS)
        raise ConfigurationError(f"Unknown language(s) {', '.join(unknown)} (expected one of: {known})")
    return [
        LanguageTarget(
            language=language,
            folder=LANGUAGE_FOLDERS[language],
            destination_root=workspace / LANGUAGE_FOLDERS[language] / DOCS_SUBDIR,
        )
        for language in selected
    ]


class Driver:
    """Owns the per-language generators for one workspace."""

    def __init__(
        self,
        config: DocsyncConfig,
        *,
        formatter_factory: FormatterFactory = create_formatter,
        api: ApiSurface | None = None,
    ) -> None:
        self.config = config
        self.logger = get_logger("driver")
        if api is None and config.api_file is not None:
            api = load_api_surface(config.api_file)
        self.api = api
        self.targets = resolve_targets(config.workspace, config.languages)
        scanner = SourceScanner(config.exclude_paths)
        link_template = config.link_template or DEFAULT_LINK_TEMPLATE
        self.generators: Dict[str, Generator] = {
            target.language: Generator(
                target.language,
                config.source_root,
                target.destination_root,
                formatter_factory(target.language, api, link_template=link_template),
                concurrency=config.concurrency,
                scanner=scanner,
            )
            for target in self.targets
        }

    @property
    def source_root(self) -> Path:
        return self.config.source_root

    def target_for_folder(self, folder: str) -> LanguageTarget:
        for target in self.targets:
            if target.folder == folder or target.language == folder:
                return target
        known = ", ".join(target.folder for target in self.targets)
        raise ConfigurationError(f"Unknown destination folder '{folder}' (expected one of: {known})")

    async def generate_all(self) -> List[GenerationReport]:
        """Run every language's generation pass concurrently.

        Every language is attempted even when another fails. A configuration
        problem is re-raised as-is; document failures from all languages are
        merged into one GenerationError.
        """
        languages = list(self.generators)
        self.logger.info("Generating docs for %s from %s", ", ".join(languages), self.source_root)
        results = await asyncio.gather(
            *(self.generators[language].generate() for language in languages),
            return_exceptions=True,
        )

        reports: List[GenerationReport] = []
        failures: List[DocumentFailure] = []
        for language, result in zip(languages, results):
            if isinstance(result, ConfigurationError):
                raise result
            if isinstance(result, GenerationError):
                failures.extend(
                    DocumentFailure(path=f"{language}:{failure.path}", error=failure.error)
                    for failure in result.failures
                )
            elif isinstance(result, BaseException):
                raise result
            else:
                reports.append(result)

        if failures:
            raise GenerationError(failures)
        return reports


__all__ = ["DOCS_SUBDIR", "Driver", "LANGUAGE_FOLDERS", "LanguageTarget", "resolve_targets"]
