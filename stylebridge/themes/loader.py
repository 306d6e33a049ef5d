"""
Theme loader - discovers YAML theme files, registers them, and hot-reloads
them on change.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from ..core.registry import ThemeRegistry

logger = logging.getLogger(__name__)

THEME_SUFFIXES = (".yaml", ".yml")


class ThemeChangeHandler(FileSystemEventHandler):
    """Watchdog handler that reloads a theme file when it changes."""

    def __init__(self, loader: "ThemeLoader"):
        self.loader = loader

    def on_modified(self, event):
        if event.is_directory:
            return
        if str(event.src_path).endswith(THEME_SUFFIXES):
            self.loader.reload(event.src_path)

    def on_created(self, event):
        self.on_modified(event)


class ThemeLoader:
    """
    Loads theme definitions from YAML files into a ThemeRegistry.

    Each file is one theme. The theme name is the file stem unless the file
    sets a top-level ``name``; everything else is the definitions mapping.

    Usage:
        loader = ThemeLoader(registry.get_theme_registry(), ["themes"])
        loader.load_all()
        loader.start_watching()
    """

    def __init__(self, registry: ThemeRegistry, paths: Optional[list[Union[str, Path]]] = None):
        self.registry = registry
        self.paths = [Path(p) for p in (paths or [])]
        self._observers: list[Observer] = []
        self._watching = False

    def load_all(self) -> int:
        """
        Discover and register every theme file under the configured paths.

        Returns:
            Number of themes registered
        """
        count = 0
        for base_path in self.paths:
            if not base_path.exists():
                logger.debug(f"Theme path {base_path} does not exist")
                continue
            for suffix in THEME_SUFFIXES:
                for theme_file in sorted(base_path.rglob(f"*{suffix}")):
                    if self._load_file(theme_file) is not None:
                        count += 1
        return count

    def _load_file(self, file_path: Path) -> Optional[str]:
        """Load one theme file. Returns the theme name, or None if skipped."""
        try:
            with open(file_path, "r") as f:
                data = yaml.safe_load(f)
        except (yaml.YAMLError, IOError) as e:
            # Log but don't crash on bad files
            logger.warning(f"Failed to load theme {file_path}: {e}")
            return None

        if not data:
            return None
        if not isinstance(data, dict):
            logger.warning(f"Theme file {file_path} is not a mapping, skipping")
            return None

        definitions = dict(data)
        name = str(definitions.pop("name", None) or file_path.stem)
        self.registry.register_theme(name, definitions)
        logger.debug(f"Registered theme '{name}' from {file_path}")
        return name

    def reload(self, file_path: Union[str, Path]) -> Optional[str]:
        """Re-read a single theme file."""
        return self._load_file(Path(file_path))

    @property
    def watching(self) -> bool:
        return self._watching

    def start_watching(self) -> None:
        """Start watching theme directories for changes."""
        if self._watching:
            return

        for base_path in self.paths:
            if not base_path.exists():
                continue
            observer = Observer()
            observer.schedule(ThemeChangeHandler(self), str(base_path), recursive=True)
            observer.start()
            self._observers.append(observer)

        self._watching = True

    def stop_watching(self) -> None:
        """Stop watching theme directories."""
        for observer in self._observers:
            observer.stop()
            observer.join()
        self._observers.clear()
        self._watching = False
