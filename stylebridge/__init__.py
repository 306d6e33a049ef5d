"""stylebridge - styling registry and markdown render pipeline for hook components."""

from .core.models import ElementRegistration, StyleSnapshot, ThemeDefinition
from .core.registry import ElementRegistry, StylingRegistry, ThemeRegistry, get_styling_registry
from .render.markdown import MarkdownRenderer, normalize_markup, render_markdown
from .render.navigation import resolve_href
from .transpiler import TranspileResult, TranspilerBridge

__all__ = [
    "ElementRegistration",
    "ThemeDefinition",
    "StyleSnapshot",
    "ElementRegistry",
    "ThemeRegistry",
    "StylingRegistry",
    "get_styling_registry",
    "MarkdownRenderer",
    "normalize_markup",
    "render_markdown",
    "resolve_href",
    "TranspilerBridge",
    "TranspileResult",
]
