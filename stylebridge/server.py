#!/usr/bin/env python3
"""stylebridge MCP Server: the surface an external styling engine talks to.

Tools read snapshots of the styling registry, feed it themes, transpile hook
source, and render markdown with every created element reported into it. Tool
handlers reach the registry and transpiler through the server lifespan (no
globals), so tests can pass their own.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import Annotated, Any, Optional

from fastmcp import Context, FastMCP
from pydantic import Field

from .core.config import BridgeConfig, get_config
from .core.registry import StylingRegistry
from .render.markdown import MarkdownRenderer
from .themes.loader import ThemeLoader
from .transpiler import DEFAULT_FILENAME, TranspilerBridge, looks_like_ts_or_jsx

logger = logging.getLogger(__name__)

# --- Helpers ---


def _registry(ctx: Context) -> StylingRegistry:
    return ctx.fastmcp._lifespan_result["registry"]


def _transpiler(ctx: Context) -> TranspilerBridge:
    return ctx.fastmcp._lifespan_result["transpiler"]


# --- Tool implementations ---


async def get_snapshot(ctx: Context = None) -> dict:
    """Snapshot of every registered element and theme."""
    return _registry(ctx).get_snapshot().to_dict()


async def get_theme_payload(ctx: Context = None) -> dict:
    """Current theme name plus the definitions of every registered theme."""
    return _registry(ctx).get_theme_registry().get_theme_payload()


async def register_theme(
    name: Annotated[str, Field(description="Theme name. Registering an existing name replaces it.")],
    definitions: Annotated[
        dict[str, Any],
        Field(description="Theme definitions, e.g. colors, spacing, per-tag styles."),
    ],
    ctx: Context = None,
) -> dict:
    """Register or replace a theme."""
    themes = _registry(ctx).get_theme_registry()
    themes.register_theme(name, definitions)
    return {"status": "ok", "theme": name, "themes": themes.size()}


async def set_current_theme(
    name: Annotated[str, Field(description="Name of the theme to make current.")],
    ctx: Context = None,
) -> dict:
    """Select the current theme."""
    themes = _registry(ctx).get_theme_registry()
    themes.set_current_theme(name)
    result = {"status": "ok", "current": name}
    if name not in themes:
        result["warning"] = f"Theme '{name}' is not registered yet"
    return result


async def render_markdown(
    content: Annotated[str, Field(description="Markdown source to render.")],
    location: Annotated[
        str, Field(description="Path of the document, used to resolve relative links.")
    ] = "/",
    ctx: Context = None,
) -> dict:
    """Render markdown, reporting each created element to the registry."""
    registry = _registry(ctx)
    reported = 0

    def on_element(tag: str, props: dict) -> None:
        nonlocal reported
        registry.register_element(tag, props)
        reported += 1

    renderer = MarkdownRenderer(content, on_element=on_element, location=location)
    root = renderer.render()
    return {
        "tree": root.to_dict(),
        "reported": reported,
        "callback_errors": renderer.callback_errors,
        "error": renderer.last_error.to_user_message() if renderer.last_error else None,
    }


async def transpile(
    source: Annotated[str, Field(description="Hook source code (JSX, TSX or plain JavaScript).")],
    filename: Annotated[
        str, Field(description="Source filename; .ts/.tsx selects TypeScript.")
    ] = DEFAULT_FILENAME,
    ctx: Context = None,
) -> dict:
    """Transpile hook source to JavaScript. Plain JavaScript is returned as-is."""
    if not looks_like_ts_or_jsx(source, filename):
        return {"status": "ok", "code": source, "transpiled": False}

    result = _transpiler(ctx).transpile(source, filename)
    if not result.ok:
        return {
            "status": "error",
            "error": result.error.to_user_message(),
            "detail": result.error.to_detailed_message(),
        }
    return {"status": "ok", "code": result.code, "transpiled": True}


async def clear(ctx: Context = None) -> dict:
    """Clear all element registrations and themes (start of a render cycle)."""
    _registry(ctx).clear()
    return {"status": "ok"}


# --- Tool lists ---

_TOOLS = [
    get_snapshot,
    get_theme_payload,
    register_theme,
    set_current_theme,
    render_markdown,
    transpile,
    clear,
]


# --- App factory ---


def create_app(
    registry: Optional[StylingRegistry] = None,
    transpiler: Optional[TranspilerBridge] = None,
):
    """Create the stylebridge MCP server.

    Args:
        registry: StylingRegistry to serve. A fresh one is created if omitted.
        transpiler: Bridge used by the transpile tool. Absent if omitted.
    """
    registry = registry or StylingRegistry()
    if transpiler is None:
        transpiler = TranspilerBridge()

    @asynccontextmanager
    async def registry_lifespan(server):
        yield {"registry": registry, "transpiler": transpiler}

    app = FastMCP("stylebridge", lifespan=registry_lifespan)

    for fn in _TOOLS:
        app.tool()(fn)

    return app


# --- Server ---


def build_registry(config: BridgeConfig) -> tuple[StylingRegistry, ThemeLoader]:
    """Create a registry preloaded with the configured theme files."""
    registry = StylingRegistry()
    loader = ThemeLoader(registry.get_theme_registry(), config.themes.paths)
    count = loader.load_all()
    logger.info(f"Loaded {count} theme(s) from {len(loader.paths)} path(s)")
    if config.themes.current:
        registry.get_theme_registry().set_current_theme(config.themes.current)
    return registry, loader


def build_transpiler(config: BridgeConfig) -> TranspilerBridge:
    """Locate the configured transpiler module."""
    bridge = TranspilerBridge.locate(config.transpiler_module)
    if bridge.available:
        logger.info(f"Using transpiler '{bridge.name}' version {bridge.get_version()}")
    return bridge


async def run(
    config: BridgeConfig,
    registry: Optional[StylingRegistry] = None,
    transpiler: Optional[TranspilerBridge] = None,
):
    """Serve the MCP app over streamable HTTP."""
    import uvicorn

    app = create_app(registry, transpiler)
    asgi = app.http_app(transport="streamable-http")
    server_cfg = uvicorn.Config(asgi, host=config.server.host, port=config.server.port, log_level="warning")
    logger.info(f"Serving stylebridge on http://{config.server.host}:{config.server.port}")
    await uvicorn.Server(server_cfg).serve()


def main():
    """Entry point for server mode."""
    config = get_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        stream=sys.stderr,
        format="%(name)s %(levelname)s: %(message)s",
    )

    registry, loader = build_registry(config)
    transpiler = build_transpiler(config)
    if config.themes.watch:
        loader.start_watching()

    try:
        asyncio.run(run(config, registry, transpiler))
    except KeyboardInterrupt:
        pass
    finally:
        loader.stop_watching()


if __name__ == "__main__":
    main()
