"""Watch mode: regenerate on source changes and mirror destination edits back."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import AsyncIterator, Callable, Iterable, List, Optional, Set, Tuple

from watchfiles import Change, awatch

from .driver import Driver
from .errors import DocsyncError
from .logging import get_logger
from .mirror import MirrorEvent, MirrorEventKind, MirrorSync
from .source_tree import check_source_root

Changes = Set[Tuple[Change, str]]
Watcher = Callable[..., AsyncIterator[Changes]]

logger = get_logger("watch")


def mirror_events(changes: Iterable[Tuple[Change, str]], mirror: MirrorSync) -> List[MirrorEvent]:
    """Translate a batch of watchfiles changes into mirror events, parents first."""
    events: List[MirrorEvent] = []
    for change, raw_path in sorted(changes, key=lambda item: (item[1], item[0].value)):
        path = Path(raw_path)
        if change == Change.deleted:
            counterpart = mirror.source_path_for(path)
            kind = MirrorEventKind.UNLINK_DIR if counterpart.is_dir() else MirrorEventKind.UNLINK
        elif path.is_dir():
            kind = MirrorEventKind.ADD_DIR
        elif change == Change.added:
            kind = MirrorEventKind.ADD
        else:
            kind = MirrorEventKind.CHANGE
        events.append(MirrorEvent(kind=kind, path=path))
    return events


async def regenerate(driver: Driver) -> bool:
    """Run one generation pass for every language, logging instead of raising."""
    try:
        await driver.generate_all()
    except DocsyncError as exc:
        logger.error("Error auto syncing docs (generating): %s", exc)
        return False
    except Exception:  # pragma: no cover - a bad pass must not end the session
        logger.exception("Error auto syncing docs (generating)")
        return False
    return True


async def run_watch(
    driver: Driver,
    mirror_folder: Optional[str] = None,
    *,
    stop_event: asyncio.Event | None = None,
    watcher: Watcher = awatch,
) -> None:
    """Generate once, then keep regenerating and mirroring until ``stop_event`` is set."""
    check_source_root(driver.source_root)
    stop_event = stop_event or asyncio.Event()
    watchers = [_watch_sources(driver, stop_event, watcher)]

    if mirror_folder:
        target = driver.target_for_folder(mirror_folder)
        target.destination_root.mkdir(parents=True, exist_ok=True)
        mirror = MirrorSync(
            driver.source_root,
            target.destination_root,
            generated=driver.generators[target.language].output_digests,
        )
        watchers.append(_watch_destination(mirror, stop_event, watcher))
        logger.info("Mirroring edits from %s into %s", target.destination_root, driver.source_root)

    await regenerate(driver)
    logger.info("Watching %s for changes", driver.source_root)
    await asyncio.gather(*watchers)


async def _watch_sources(driver: Driver, stop_event: asyncio.Event, watcher: Watcher) -> None:
    passes: Set[asyncio.Task[bool]] = set()
    async for changes in watcher(driver.source_root, stop_event=stop_event):
        logger.debug("Source change detected (%d paths)", len(changes))
        # In-flight passes keep running; overlapping writes are idempotent.
        task = asyncio.create_task(regenerate(driver))
        passes.add(task)
        task.add_done_callback(passes.discard)
    if passes:
        await asyncio.gather(*passes)


async def _watch_destination(mirror: MirrorSync, stop_event: asyncio.Event, watcher: Watcher) -> None:
    async for changes in watcher(mirror.destination_root, stop_event=stop_event):
        for event in mirror_events(changes, mirror):
            try:
                await mirror.apply(event)
            except (OSError, ValueError) as exc:
                logger.error("Error auto syncing docs (mirroring %s): %s", event.path, exc)


__all__ = ["mirror_events", "regenerate", "run_watch"]
