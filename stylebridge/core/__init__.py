"""Core - value records, registries, errors, and configuration."""

from .models import ElementRegistration, StyleSnapshot, ThemeDefinition
from .registry import (
    ElementRegistry,
    StylingRegistry,
    ThemeRegistry,
    get_styling_registry,
    reset_styling_registry,
)
from .errors import (
    ExecutionError,
    HookError,
    ParseError,
    RenderError,
    TranspilerMissingError,
)
from .config import BridgeConfig, ServerSettings, ThemeSettings, get_config, set_config

__all__ = [
    # Records
    "ElementRegistration",
    "ThemeDefinition",
    "StyleSnapshot",
    # Registries
    "ElementRegistry",
    "ThemeRegistry",
    "StylingRegistry",
    "get_styling_registry",
    "reset_styling_registry",
    # Errors
    "HookError",
    "ParseError",
    "ExecutionError",
    "TranspilerMissingError",
    "RenderError",
    # Config
    "BridgeConfig",
    "ThemeSettings",
    "ServerSettings",
    "get_config",
    "set_config",
]
