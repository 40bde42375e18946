"""CLI entrypoint for docsync."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List

from .config import DocsyncConfig, load_config
from .driver import Driver
from .errors import ConfigurationError, GenerationError, NetworkError
from .logging import configure_logging, get_logger
from .models import GenerationReport
from .stars import StarsUpdater
from .watch import run_watch

logger = get_logger("cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsync",
        description="Render the language-neutral docs source into per-language documentation trees.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .docsync.yml or the workspace containing it (defaults to current directory).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    parser.add_argument(
        "--watch",
        nargs="?",
        const="",
        default=None,
        metavar="FOLDER",
        help=(
            "Keep regenerating on source changes. With FOLDER (e.g. python, nodejs), also "
            "mirror edits made in that destination folder back into the source tree."
        ),
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docsync."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(Path(args.config))
        driver = Driver(config)
    except ConfigurationError as exc:
        parser.exit(1, f"{exc}\n")

    if args.watch is not None:
        try:
            asyncio.run(run_watch(driver, args.watch or None))
        except KeyboardInterrupt:
            print("Stopped watching.")
        except ConfigurationError as exc:
            parser.exit(1, f"{exc}\n")
        except Exception as exc:  # pragma: no cover
            parser.exit(1, f"docsync watch failed: {exc}\nRun with --verbose for more details.\n")
        return

    try:
        reports = asyncio.run(_run_batch(driver, config))
    except ConfigurationError as exc:
        parser.exit(1, f"{exc}\n")
    except GenerationError as exc:
        parser.exit(1, f"docsync failed: {exc}\nRun with --verbose for more details.\n")
    except Exception as exc:  # pragma: no cover
        parser.exit(1, f"docsync failed: {exc}\nRun with --verbose for more details.\n")
    print(_summarize(reports))


async def _run_batch(driver: Driver, config: DocsyncConfig) -> List[GenerationReport]:
    reports = await driver.generate_all()
    if config.stars.enabled and config.stars.target is not None:
        updater = StarsUpdater(
            config.stars.repository,
            config.stars.target,
            request_timeout=config.stars.request_timeout,
        )
        try:
            await updater.update()
        except (NetworkError, ConfigurationError, OSError) as exc:
            # Documentation output stands; only the badge is stale.
            logger.error("Failed to update GitHub stars button: %s", exc)
    return reports


def _summarize(reports: List[GenerationReport]) -> str:
    written = sum(len(report.written) for report in reports)
    unchanged = sum(len(report.unchanged) for report in reports)
    copied = sum(len(report.copied) for report in reports)
    return (
        f"Generated docs for {len(reports)} language(s): "
        f"{written} written, {unchanged} unchanged, {copied} assets copied"
    )


if __name__ == "__main__":
    main(sys.argv[1:])
