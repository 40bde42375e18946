"""Log setup shared by the batch run, watch mode and the stars updater."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT_LOGGER = "docsync"
CONSOLE_FORMAT = "[docsync] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``docsync.<name>``, e.g. ``docsync.generator.python``."""
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """Send docsync records to stderr, and to ``log_file`` when given.

    stdout is left to the CLI's one-line run summary. Calling this again
    replaces the handlers installed by the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.propagate = False

    for stale in list(root.handlers):
        root.removeHandler(stale)
        stale.close()

    root.addHandler(_with_format(logging.StreamHandler(sys.stderr), level, CONSOLE_FORMAT))
    if log_file is not None:
        root.addHandler(_with_format(logging.FileHandler(log_file, encoding="utf-8"), level, FILE_FORMAT))
    return root


def _with_format(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


__all__ = ["configure_logging", "get_logger"]
