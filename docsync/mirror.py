"""Mirror edits made in a rendered destination tree back into the source tree."""

from __future__ import annotations

import asyncio
import hashlib
import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

import aiofiles
import aiofiles.os

from .logging import get_logger


class MirrorEventKind(str, Enum):
    ADD = "add"
    ADD_DIR = "add_dir"
    CHANGE = "change"
    UNLINK = "unlink"
    UNLINK_DIR = "unlink_dir"


@dataclass(frozen=True)
class MirrorEvent:
    """A filesystem change observed under the destination root."""

    kind: MirrorEventKind
    path: Path


class MirrorSync:
    """Replays destination-tree events onto the source tree by relative path.

    ``generated`` maps relative paths to the digest of the content the generator
    last wrote there; events carrying exactly that content came from generation
    rather than an editor and are not mirrored. Concurrent edits of the same path
    on both sides resolve as last write wins.
    """

    def __init__(
        self,
        source_root: Path,
        destination_root: Path,
        *,
        generated: Mapping[str, str] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.source_root = Path(source_root).resolve()
        self.destination_root = Path(destination_root).resolve()
        self.generated = generated if generated is not None else {}
        self.logger = logger or get_logger("mirror")

    def relative_path(self, path: Path) -> str:
        resolved = Path(path).resolve()
        try:
            relative = resolved.relative_to(self.destination_root)
        except ValueError:
            raise ValueError(f"{path} is outside the mirrored tree {self.destination_root}") from None
        return relative.as_posix()

    def source_path_for(self, path: Path) -> Path:
        """Map a destination path to its counterpart under the source root."""
        relative = self.relative_path(path)
        if relative == ".":
            return self.source_root
        return self.source_root.joinpath(*relative.split("/"))

    async def apply(self, event: MirrorEvent) -> Optional[Path]:
        """Apply ``event`` to the source tree; returns the touched path, if any."""
        target = self.source_path_for(event.path)
        if target == self.source_root:
            return None

        if event.kind is MirrorEventKind.ADD_DIR:
            await aiofiles.os.makedirs(target, exist_ok=True)
            self.logger.debug("Mirrored directory %s", target)
            return target

        if event.kind in (MirrorEventKind.ADD, MirrorEventKind.CHANGE):
            return await self._copy(event.path, target)

        if event.kind is MirrorEventKind.UNLINK:
            if not await aiofiles.os.path.isfile(target):
                self.logger.debug("Nothing to remove at %s", target)
                return None
            await aiofiles.os.remove(target)
            self.logger.info("Removed %s", target)
            return target

        if event.kind is MirrorEventKind.UNLINK_DIR:
            if not await aiofiles.os.path.isdir(target):
                self.logger.debug("Nothing to remove at %s", target)
                return None
            await asyncio.to_thread(shutil.rmtree, target)
            self.logger.info("Removed directory %s", target)
            return target

        raise ValueError(f"Unsupported mirror event: {event.kind}")

    async def _copy(self, source: Path, target: Path) -> Optional[Path]:
        async with aiofiles.open(source, "rb") as handle:
            data = await handle.read()

        relative = self.relative_path(source)
        if self.generated.get(relative) == hashlib.sha256(data).hexdigest():
            self.logger.debug("Skipping generated output %s", relative)
            return None

        if await aiofiles.os.path.isfile(target):
            async with aiofiles.open(target, "rb") as handle:
                if await handle.read() == data:
                    return None

        await aiofiles.os.makedirs(target.parent, exist_ok=True)
        async with aiofiles.open(target, "wb") as handle:
            await handle.write(data)
        self.logger.info("Mirrored %s", relative)
        return target


__all__ = ["MirrorEvent", "MirrorEventKind", "MirrorSync"]
