"""Per-language formatter implementations and lookup."""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping

from ..api import ApiSurface
from .base import (
    DEFAULT_LINK_TEMPLATE,
    FUNCTION_IMPORT,
    KEYWORD_SPREAD,
    TUPLE_TYPE,
    UNION_TYPE,
    Formatter,
)
from .csharp import CSharpFormatter
from .java import JavaFormatter
from .javascript import JavaScriptFormatter
from .python import PythonFormatter

_BUILTIN_FORMATTERS: Mapping[str, Callable[..., Formatter]] = MappingProxyType(
    {
        "js": JavaScriptFormatter,
        "python": PythonFormatter,
        "java": JavaFormatter,
        "csharp": CSharpFormatter,
    }
)

SUPPORTED_LANGUAGES = tuple(_BUILTIN_FORMATTERS)


def create_formatter(
    language: str,
    api: ApiSurface | None = None,
    *,
    link_template: str = DEFAULT_LINK_TEMPLATE,
) -> Formatter:
    """Return the formatter bound to ``language``."""
    try:
        factory = _BUILTIN_FORMATTERS[language]
    except KeyError:
        known = ", ".join(SUPPORTED_LANGUAGES)
        raise ValueError(f"Unknown language '{language}' (expected one of: {known})") from None
    return factory(api, link_template=link_template)


__all__ = [
    "CSharpFormatter",
    "DEFAULT_LINK_TEMPLATE",
    "FUNCTION_IMPORT",
    "Formatter",
    "JavaFormatter",
    "JavaScriptFormatter",
    "KEYWORD_SPREAD",
    "PythonFormatter",
    "SUPPORTED_LANGUAGES",
    "TUPLE_TYPE",
    "UNION_TYPE",
    "create_formatter",
]
