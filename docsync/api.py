"""The mapped API surface that API references are resolved against (api.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

import yaml

from .errors import ConfigurationError

MEMBER_KINDS = ("method", "property", "event")


@dataclass(frozen=True)
class ApiMember:
    """A method, property or event of an API class."""

    name: str
    kind: str = "method"
    is_async: bool = False
    langs: Optional[FrozenSet[str]] = None
    params: Tuple[str, ...] = ()

    def available_in(self, language: str) -> bool:
        return self.langs is None or language in self.langs


@dataclass(frozen=True)
class ApiClass:
    """A documented class and its members."""

    name: str
    langs: Optional[FrozenSet[str]] = None
    members: Mapping[str, ApiMember] = field(default_factory=dict)

    def available_in(self, language: str) -> bool:
        return self.langs is None or language in self.langs


@dataclass(frozen=True)
class ApiSurface:
    """Every class and member known to the documentation, with per-language availability."""

    classes: Mapping[str, ApiClass] = field(default_factory=dict)

    def lookup_class(self, symbol: str, language: str) -> Optional[ApiClass]:
        entry = self.classes.get(symbol)
        if entry is None or not entry.available_in(language):
            return None
        return entry

    def lookup_member(self, symbol: str, member: str, language: str) -> Optional[ApiMember]:
        entry = self.lookup_class(symbol, language)
        if entry is None:
            return None
        found = entry.members.get(member)
        if found is None or not found.available_in(language):
            return None
        return found


def load_api_surface(path: Path) -> ApiSurface:
    """Load and validate an API surface description from YAML."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read API surface {path}: {exc}") from exc
    try:
        data = yaml.safe_load(text) if text.strip() else {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse {path.name}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path.name} must contain a mapping of class names")
    return parse_api_surface(data, source=path.name)


def parse_api_surface(data: Mapping[str, Any], *, source: str = "api.yml") -> ApiSurface:
    classes: Dict[str, ApiClass] = {}
    for class_name, raw_class in data.items():
        class_name = str(class_name)
        class_data = raw_class or {}
        if not isinstance(class_data, dict):
            raise ConfigurationError(f"{source}: entry for class '{class_name}' must be a mapping")
        members: Dict[str, ApiMember] = {}
        raw_members = class_data.get("members") or {}
        if not isinstance(raw_members, dict):
            raise ConfigurationError(f"{source}: members of '{class_name}' must be a mapping")
        for member_name, raw_member in raw_members.items():
            member_name = str(member_name)
            members[member_name] = _parse_member(class_name, member_name, raw_member or {}, source)
        classes[class_name] = ApiClass(
            name=class_name,
            langs=_as_langs(class_data.get("langs"), f"{source}: {class_name}"),
            members=members,
        )
    return ApiSurface(classes=classes)


def _parse_member(class_name: str, member_name: str, raw: Any, source: str) -> ApiMember:
    location = f"{source}: {class_name}.{member_name}"
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{location} must be a mapping")
    kind = str(raw.get("kind", "method"))
    if kind not in MEMBER_KINDS:
        raise ConfigurationError(f"{location} has unknown kind '{kind}'")
    params = raw.get("params") or []
    if not isinstance(params, list):
        raise ConfigurationError(f"{location} params must be a list")
    return ApiMember(
        name=member_name,
        kind=kind,
        is_async=bool(raw.get("async", False)),
        langs=_as_langs(raw.get("langs"), location),
        params=tuple(str(param) for param in params),
    )


def _as_langs(value: Any, location: str) -> Optional[FrozenSet[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return frozenset({value})
    if isinstance(value, list):
        return frozenset(str(item) for item in value)
    raise ConfigurationError(f"{location} langs must be a string or list")


__all__ = ["ApiClass", "ApiMember", "ApiSurface", "load_api_surface", "parse_api_surface"]
