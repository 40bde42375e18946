"""Patch the GitHub star count into the site's star button component."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

import aiofiles

from .errors import ConfigurationError, NetworkError
from .logging import get_logger

GITHUB_REPO_URL = "https://api.github.com/repos/{repository}"
USER_AGENT = "docsync-generator"
MARKER_COMMENT = "// NOTE: this line is generated by docsync. Do not change!"

Fetcher = Callable[[str, float], Dict[str, Any]]


def fetch_repository_info(url: str, timeout: float) -> Dict[str, Any]:
    """GET repository metadata from the GitHub REST API."""
    request = Request(url, headers={"User-Agent": USER_AGENT, "Accept": "application/vnd.github+json"})
    try:
        with urlopen(request, timeout=timeout) as response:  # type: ignore[arg-type]
            raw = response.read()
    except HTTPError as exc:
        detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
        raise NetworkError(f"Request failed with status code {exc.code}: {detail.strip() or exc.reason}") from exc
    except URLError as exc:
        raise NetworkError(f"Request to {url} failed: {exc.reason}") from exc
    except TimeoutError as exc:
        raise NetworkError(f"Request to {url} timed out") from exc

    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise NetworkError(f"{url} returned invalid JSON") from exc
    if not isinstance(payload, dict):
        raise NetworkError(f"{url} returned an unexpected payload")
    return payload


def format_stars_line(stargazers: int) -> str:
    return f"const STARS = '{stargazers // 1000}k+'; {MARKER_COMMENT}"


def patch_stars_line(text: str, stargazers: int) -> str:
    """Replace the marker line in ``text`` with the rounded star count."""
    lines = text.split("\n")
    for index, line in enumerate(lines):
        if MARKER_COMMENT in line:
            indent = line[: len(line) - len(line.lstrip())]
            lines[index] = f"{indent}{format_stars_line(stargazers)}"
            return "\n".join(lines)
    raise ConfigurationError("Star button source has no generated STARS line")


class StarsUpdater:
    """Fetches the repository star count and rewrites the marker line in ``target``."""

    def __init__(
        self,
        repository: str,
        target: Path,
        *,
        request_timeout: float = 30.0,
        fetcher: Optional[Fetcher] = None,
    ) -> None:
        self.repository = repository
        self.target = Path(target)
        self.request_timeout = request_timeout
        self._fetcher = fetcher or fetch_repository_info
        self.logger = get_logger("stars")

    async def update(self) -> int:
        """Return the star count written to the target file."""
        url = GITHUB_REPO_URL.format(repository=self.repository)
        payload = await asyncio.to_thread(self._fetcher, url, self.request_timeout)
        stargazers = payload.get("stargazers_count")
        if isinstance(stargazers, bool) or not isinstance(stargazers, int):
            raise NetworkError(f"{url} response has no stargazers_count")

        try:
            async with aiofiles.open(self.target, "r", encoding="utf-8", newline="") as handle:
                text = await handle.read()
        except FileNotFoundError as exc:
            raise ConfigurationError(f"Star button source not found: {self.target}") from exc

        patched = patch_stars_line(text, stargazers)
        if patched != text:
            async with aiofiles.open(self.target, "w", encoding="utf-8", newline="") as handle:
                await handle.write(patched)
        self.logger.info("Star button now shows %sk+", stargazers // 1000)
        return stargazers


__all__ = [
    "MARKER_COMMENT",
    "StarsUpdater",
    "fetch_repository_info",
    "format_stars_line",
    "patch_stars_line",
]
