"""Parse language-neutral markdown sources into content blocks."""

from __future__ import annotations

import re
from typing import FrozenSet, List, Optional

from .errors import ParseError
from .formatters import SUPPORTED_LANGUAGES
from .models import ApiReference, CodeSample, ContentBlock, DocumentNode, Prose
from .snippets import parse_snippet

REFERENCE_KINDS = ("class", "method", "property", "event", "param", "option")
SAMPLE_FENCE = "sample"

_FENCE_RE = re.compile(r"^([ \t]*)```(.*?)\s*$")
_LANGS_OPEN_RE = re.compile(r"^<!--\s*langs:(.*?)-->$")
_LANGS_CLOSE_RE = re.compile(r"^<!--\s*/langs\s*-->$")
_REFERENCE_START_RE = re.compile(r"\[`([A-Za-z]+):")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_FENCE_LANGUAGES = {
    "js": "js",
    "javascript": "js",
    "ts": "js",
    "typescript": "js",
    "python": "python",
    "py": "python",
    "java": "java",
    "csharp": "csharp",
    "cs": "csharp",
}

# kind -> number of dotted segments after the class name
_REFERENCE_DEPTH = {
    "class": 0,
    "method": 1,
    "property": 1,
    "event": 1,
    "param": 2,
    "option": 2,
}


def parse_document(path: str, content: str) -> DocumentNode:
    """Split ``content`` into prose, code samples and API references."""
    try:
        blocks = _DocumentParser(content).parse()
    except ParseError as exc:
        raise exc.with_path(path) from exc
    return DocumentNode(path=path, content=content, blocks=blocks)


class _DocumentParser:
    def __init__(self, content: str) -> None:
        self.lines = content.splitlines(keepends=True)
        self.blocks: List[ContentBlock] = []
        self.buffer: List[str] = []
        self.region: Optional[FrozenSet[str]] = None
        self.region_line = 0

    def parse(self) -> List[ContentBlock]:
        index = 0
        while index < len(self.lines):
            line = self.lines[index]
            number = index + 1
            stripped = line.strip()

            opening = _LANGS_OPEN_RE.match(stripped)
            if opening:
                if self.region is not None:
                    raise ParseError(
                        f"language region opened while region from line {self.region_line} is still open",
                        line=number,
                    )
                self._flush()
                self.region = _parse_langs(opening.group(1), number)
                self.region_line = number
                index += 1
                continue
            if _LANGS_CLOSE_RE.match(stripped):
                if self.region is None:
                    raise ParseError("language region closed but never opened", line=number)
                self._flush()
                self.region = None
                index += 1
                continue

            fence = _FENCE_RE.match(line.rstrip("\r\n"))
            if fence:
                index = self._consume_fence(index, fence.group(1), fence.group(2).strip())
                continue

            self._scan_references(line, number)
            index += 1

        if self.region is not None:
            raise ParseError("unterminated language region", line=self.region_line)
        self._flush()
        return self.blocks

    def _consume_fence(self, start: int, indent: str, info: str) -> int:
        end = start + 1
        while end < len(self.lines) and self.lines[end].strip() != "```":
            end += 1
        if end >= len(self.lines):
            raise ParseError("unterminated code block", line=start + 1)

        word = info.split()[0].lower() if info else ""
        if word == SAMPLE_FENCE:
            body = "".join(_dedent(line, indent) for line in self.lines[start + 1 : end])
            self._flush()
            self.blocks.append(
                CodeSample(
                    snippet=parse_snippet(body, first_line=start + 2),
                    line=start + 1,
                    indent=indent,
                    langs=self.region,
                )
            )
        elif word in _FENCE_LANGUAGES:
            language = frozenset({_FENCE_LANGUAGES[word]})
            langs = language if self.region is None else self.region & language
            self._flush()
            self.blocks.append(Prose(text="".join(self.lines[start : end + 1]), langs=langs))
        else:
            self.buffer.extend(self.lines[start : end + 1])
        return end + 1

    def _scan_references(self, line: str, number: int) -> None:
        position = 0
        while True:
            match = _REFERENCE_START_RE.search(line, position)
            if match is None:
                break
            close = line.find("`]", match.end())
            if close == -1:
                raise ParseError("unterminated API reference", line=number)
            if line.startswith("(", close + 2):
                # [`text: ...`](url) is an ordinary markdown link.
                self.buffer.append(line[position : close + 2])
                position = close + 2
                continue
            self.buffer.append(line[position : match.start()])
            self._flush()
            self.blocks.append(
                _parse_reference(match.group(1), line[match.end() : close].strip(), number, self.region)
            )
            position = close + 2
        self.buffer.append(line[position:])

    def _flush(self) -> None:
        text = "".join(self.buffer)
        self.buffer = []
        if text:
            self.blocks.append(Prose(text=text, langs=self.region))


def _parse_reference(kind: str, target: str, number: int, langs: Optional[FrozenSet[str]]) -> ApiReference:
    if kind not in _REFERENCE_DEPTH:
        raise ParseError(f"unknown API reference kind '{kind}'", line=number)
    parts = target.split(".") if target else []
    if not parts or not all(_IDENTIFIER_RE.match(part) for part in parts):
        raise ParseError(f"malformed API reference '{kind}: {target}'", line=number)
    depth = _REFERENCE_DEPTH[kind]
    if len(parts) != depth + 1:
        expected = ".".join(["Class", "member", "name"][: depth + 1])
        raise ParseError(f"{kind} reference must look like '{expected}', got '{target}'", line=number)
    return ApiReference(kind=kind, symbol=parts[0], member_path=tuple(parts[1:]), line=number, langs=langs)


def _parse_langs(raw: str, number: int) -> FrozenSet[str]:
    names = [name.strip() for name in raw.split(",") if name.strip()]
    if not names:
        raise ParseError("language region lists no languages", line=number)
    unknown = sorted(set(names) - set(SUPPORTED_LANGUAGES))
    if unknown:
        raise ParseError(f"unknown language(s) in region: {', '.join(unknown)}", line=number)
    return frozenset(names)


def _dedent(line: str, indent: str) -> str:
    if indent and line.startswith(indent):
        return line[len(indent) :]
    return line


__all__ = ["REFERENCE_KINDS", "parse_document"]
