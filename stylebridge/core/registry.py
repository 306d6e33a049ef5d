"""
Styling registries - record rendered elements and theme definitions for an
external styling engine.

Writers are render passes (one registration per created element) and theme
producers; the reader is a styling pass that asks for a snapshot. All
operations are short and guarded by a per-registry lock.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Mapping, Optional

from .models import ElementRegistration, StyleSnapshot, ThemeDefinition

logger = logging.getLogger(__name__)


class ElementRegistry:
    """
    Append-only store of element registrations.

    Each registration gets a fresh id of the form ``"{tag}-{timestamp_ns}"``.
    Nothing is evicted except by clear(); owners should clear at the start of
    each render cycle.
    """

    def __init__(self):
        self._elements: dict[str, ElementRegistration] = {}
        self._lock = threading.RLock()
        self._last_ns = 0

    def _next_timestamp(self) -> int:
        # Strictly increasing within this registry so ids never collide
        now = time.time_ns()
        if now <= self._last_ns:
            now = self._last_ns + 1
        self._last_ns = now
        return now

    def register_element(self, tag: str, props: Optional[Mapping[str, Any]] = None) -> str:
        """Record an element and return its generated id."""
        registration = ElementRegistration(tag, props or {})
        with self._lock:
            element_id = f"{tag}-{self._next_timestamp()}"
            self._elements[element_id] = registration
        return element_id

    def get_elements(self) -> dict[str, ElementRegistration]:
        """Get a copy of all registrations keyed by id."""
        with self._lock:
            return dict(self._elements)

    def clear(self) -> None:
        with self._lock:
            self._elements.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._elements)

    def __len__(self) -> int:
        return self.size()


class ThemeRegistry:
    """
    Named theme definitions with last-write-wins updates.

    Also tracks which theme is current, so hosts can hand the styling engine
    a single payload of ``{"current": ..., "themes": ...}``.
    """

    def __init__(self):
        self._themes: dict[str, ThemeDefinition] = {}
        self._current: Optional[str] = None
        self._lock = threading.RLock()
        self._listeners: list[Callable[[str], None]] = []

    def register_theme(self, name: str, definitions: Optional[Mapping[str, Any]] = None) -> None:
        """Insert or replace the theme stored under ``name``."""
        theme = ThemeDefinition(name, definitions or {})
        with self._lock:
            self._themes[name] = theme
            listeners = self._listeners.copy()

        # Notify listeners outside the lock
        for listener in listeners:
            try:
                listener(name)
            except Exception as e:
                logger.warning(f"Theme listener failed for '{name}': {e}")

    def get_theme(self, name: str) -> Optional[ThemeDefinition]:
        with self._lock:
            return self._themes.get(name)

    def get_themes(self) -> dict[str, ThemeDefinition]:
        """Get a copy of all themes keyed by name."""
        with self._lock:
            return dict(self._themes)

    def set_current_theme(self, name: Optional[str]) -> None:
        """Mark ``name`` as the active theme. It need not be registered yet."""
        with self._lock:
            self._current = name

    def get_current_theme(self) -> Optional[str]:
        with self._lock:
            return self._current

    def get_theme_payload(self) -> dict:
        """Get the current theme name and every theme's definitions."""
        with self._lock:
            return {
                "current": self._current,
                "themes": {name: dict(t.definitions) for name, t in self._themes.items()},
            }

    def on_change(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """
        Register a callback invoked with the theme name after each registration.

        Returns:
            Function that removes the callback
        """
        with self._lock:
            self._listeners.append(callback)

        def remove():
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return remove

    def clear(self) -> None:
        """Remove all themes and reset the current theme."""
        with self._lock:
            self._themes.clear()
            self._current = None

    def size(self) -> int:
        with self._lock:
            return len(self._themes)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, name: str) -> bool:
        return self.get_theme(name) is not None


class StylingRegistry:
    """Owns one element registry and one theme registry."""

    def __init__(self):
        self._element_registry = ElementRegistry()
        self._theme_registry = ThemeRegistry()

    def get_element_registry(self) -> ElementRegistry:
        return self._element_registry

    def get_theme_registry(self) -> ThemeRegistry:
        return self._theme_registry

    def register_element(self, tag: str, props: Optional[Mapping[str, Any]] = None) -> str:
        return self._element_registry.register_element(tag, props)

    def register_theme(self, name: str, definitions: Optional[Mapping[str, Any]] = None) -> None:
        self._theme_registry.register_theme(name, definitions)

    def get_snapshot(self) -> StyleSnapshot:
        """
        Copy both registries into a StyleSnapshot.

        Elements are read before themes with no lock spanning the two reads.
        """
        elements = self._element_registry.get_elements()
        themes = self._theme_registry.get_themes()
        return StyleSnapshot(registered_elements=elements, themes=themes)

    def clear(self) -> None:
        self._element_registry.clear()
        self._theme_registry.clear()


# Global instance for singleton access
_registry_instance: Optional[StylingRegistry] = None
_registry_lock = threading.Lock()


def get_styling_registry() -> StylingRegistry:
    """Get or create the global StylingRegistry instance."""
    global _registry_instance
    if _registry_instance is None:
        with _registry_lock:
            if _registry_instance is None:
                _registry_instance = StylingRegistry()
    return _registry_instance


def reset_styling_registry() -> None:
    """Drop the global instance (for testing)."""
    global _registry_instance
    with _registry_lock:
        _registry_instance = None
