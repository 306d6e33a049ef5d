"""Value records shared between the registries and the styling engine."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional


def _frozen(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Copy a caller mapping into a read-only view."""
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class ElementRegistration:
    """One observed element: its tag and the props it was created with."""
    tag: str
    props: Mapping[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        # Stored props never alias the caller's dict
        object.__setattr__(self, "props", _frozen(self.props))

    def to_dict(self) -> dict:
        return {"tag": self.tag, "props": dict(self.props), "timestamp": self.timestamp}


@dataclass(frozen=True)
class ThemeDefinition:
    """Named theme definitions. Re-registering a name replaces the entry."""
    name: str
    definitions: Mapping[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        object.__setattr__(self, "definitions", _frozen(self.definitions))

    def to_dict(self) -> dict:
        return {"name": self.name, "definitions": dict(self.definitions), "timestamp": self.timestamp}


@dataclass(frozen=True)
class StyleSnapshot:
    """
    Copy of both registries at approximately one instant.

    The element and theme halves are read one after the other, so a write
    landing in between shows up in at most one of them.
    """
    registered_elements: dict[str, ElementRegistration] = field(default_factory=dict)
    themes: dict[str, ThemeDefinition] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "registered_elements": {k: v.to_dict() for k, v in self.registered_elements.items()},
            "themes": {k: v.to_dict() for k, v in self.themes.items()},
            "timestamp": self.timestamp,
        }
