"""Identifier case conversion used by the formatters."""

from __future__ import annotations

import re
from typing import List

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def split_words(identifier: str) -> List[str]:
    """Split ``snake_case`` or ``camelCase`` identifiers into lowercase words."""
    words: List[str] = []
    for chunk in identifier.split("_"):
        if not chunk:
            continue
        words.extend(part.lower() for part in _CAMEL_BOUNDARY_RE.split(chunk) if part)
    return words


def is_class_name(identifier: str) -> bool:
    stripped = identifier.lstrip("_")
    return bool(stripped) and stripped[0].isupper()


def camel_case(identifier: str) -> str:
    if is_class_name(identifier):
        return identifier
    words = split_words(identifier)
    if not words:
        return identifier
    return words[0] + "".join(word.capitalize() for word in words[1:])


def pascal_case(identifier: str) -> str:
    if is_class_name(identifier):
        return identifier
    words = split_words(identifier)
    if not words:
        return identifier
    return "".join(word.capitalize() for word in words)


def snake_case(identifier: str) -> str:
    if is_class_name(identifier):
        return identifier
    return "_".join(split_words(identifier)) or identifier


def kebab_case(identifier: str) -> str:
    return "-".join(split_words(identifier))


def lower_first(identifier: str) -> str:
    return identifier[:1].lower() + identifier[1:]


__all__ = [
    "camel_case",
    "is_class_name",
    "kebab_case",
    "lower_first",
    "pascal_case",
    "snake_case",
    "split_words",
]
