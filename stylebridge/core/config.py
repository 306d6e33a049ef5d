"""Bridge configuration with clean, readable structure."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_PATH = Path(os.environ.get("STYLEBRIDGE_CONFIG", PROJECT_ROOT / "config.json"))

DEFAULT_TRANSPILER_MODULE = "relay_hook_transpiler"


@dataclass
class ThemeSettings:
    """Where theme files live and which theme starts active."""
    paths: list[str] = field(default_factory=list)
    watch: bool = False
    current: Optional[str] = None

    def to_dict(self) -> dict:
        d = {"paths": list(self.paths), "watch": self.watch}
        if self.current:
            d["current"] = self.current
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "ThemeSettings":
        if isinstance(d, str):
            # "themes": "path/to/dir" -> single directory
            return cls(paths=[d])
        if not isinstance(d, dict):
            return cls()
        paths = d.get("paths", [])
        if isinstance(paths, str):
            paths = [paths]
        return cls(
            paths=list(paths),
            watch=bool(d.get("watch", False)),
            current=d.get("current"),
        )


@dataclass
class ServerSettings:
    """Network settings for the styling engine surface."""
    host: str = "127.0.0.1"
    port: int = 7790


@dataclass
class BridgeConfig:
    """Main configuration combining all sections."""
    themes: ThemeSettings = field(default_factory=ThemeSettings)
    server: ServerSettings = field(default_factory=ServerSettings)
    transpiler_module: str = DEFAULT_TRANSPILER_MODULE
    log_level: str = "INFO"

    def to_dict(self) -> dict:
        return {
            "themes": self.themes.to_dict(),
            "server": {"host": self.server.host, "port": self.server.port},
            "transpiler_module": self.transpiler_module,
            "log_level": self.log_level,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "BridgeConfig":
        themes = ThemeSettings.from_dict(d.get("themes", {}))

        server_dict = d.get("server", {})
        server_known = {f.name for f in ServerSettings.__dataclass_fields__.values()}
        server = ServerSettings(**{k: v for k, v in server_dict.items() if k in server_known})

        return cls(
            themes=themes,
            server=server,
            transpiler_module=d.get("transpiler_module", DEFAULT_TRANSPILER_MODULE),
            log_level=str(d.get("log_level", "INFO")).upper(),
        )

    def save(self, path: Optional[Path] = None):
        path = path or CONFIG_PATH
        temp = path.with_suffix(".tmp")
        temp.write_text(json.dumps(self.to_dict(), indent=2))
        temp.replace(path)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "BridgeConfig":
        path = path or CONFIG_PATH
        try:
            if path.exists():
                return cls.from_dict(json.loads(path.read_text()))
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Failed to load config {path}: {e}")
        return cls()


# Global instance
_config: Optional[BridgeConfig] = None


def get_config() -> BridgeConfig:
    """Get current config."""
    global _config
    if _config is None:
        _config = BridgeConfig.load()
    return _config


def set_config(config: Optional[BridgeConfig]):
    """Replace the current config (None forces a reload on next access)."""
    global _config
    _config = config
