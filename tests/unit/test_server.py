"""In-memory MCP server tests using FastMCP 2.x Client.

Exercises the styling engine tool surface through the MCP protocol without
subprocess or network. The registry is injected via the create_app() factory.
"""

import pytest
import pytest_asyncio
from fastmcp import Client

from stylebridge.core.config import BridgeConfig, ThemeSettings
from stylebridge.core.registry import StylingRegistry
from stylebridge.server import build_registry, build_transpiler, create_app
from stylebridge.transpiler import TranspilerBridge

# --- Fixtures ---


@pytest.fixture
def served_registry():
    registry = StylingRegistry()
    registry.register_theme("light", {"text": "#111"})
    return registry


@pytest_asyncio.fixture
async def mcp_client(served_registry):
    """In-memory MCP client connected to a test app."""
    app = create_app(served_registry)
    async with Client(app) as c:
        yield c


# --- Tool surface ---


@pytest.mark.asyncio
async def test_tool_surface(mcp_client):
    tools = await mcp_client.list_tools()
    names = {t.name for t in tools}

    assert names == {
        "get_snapshot",
        "get_theme_payload",
        "register_theme",
        "set_current_theme",
        "render_markdown",
        "transpile",
        "clear",
    }

    # ctx not leaked into any schema
    for tool in tools:
        assert "ctx" not in tool.inputSchema.get("properties", {}), f"ctx leaked in {tool.name}"


# --- Registry tools ---


@pytest.mark.asyncio
async def test_get_snapshot(mcp_client, served_registry):
    served_registry.register_element("div", {"className": "card"})
    result = await mcp_client.call_tool("get_snapshot", {})

    snapshot = result.data
    assert snapshot["themes"]["light"]["definitions"] == {"text": "#111"}
    [element] = snapshot["registered_elements"].values()
    assert element["tag"] == "div"
    assert element["props"] == {"className": "card"}


@pytest.mark.asyncio
async def test_register_theme(mcp_client, served_registry):
    result = await mcp_client.call_tool(
        "register_theme", {"name": "dark", "definitions": {"text": "#eee"}}
    )
    assert result.data == {"status": "ok", "theme": "dark", "themes": 2}
    assert served_registry.get_theme_registry().get_theme("dark").definitions == {"text": "#eee"}


@pytest.mark.asyncio
async def test_set_current_theme_and_payload(mcp_client):
    result = await mcp_client.call_tool("set_current_theme", {"name": "light"})
    assert result.data == {"status": "ok", "current": "light"}

    payload = (await mcp_client.call_tool("get_theme_payload", {})).data
    assert payload == {"current": "light", "themes": {"light": {"text": "#111"}}}


@pytest.mark.asyncio
async def test_set_unregistered_current_theme_warns(mcp_client):
    result = await mcp_client.call_tool("set_current_theme", {"name": "sepia"})
    assert result.data["current"] == "sepia"
    assert "not registered" in result.data["warning"]


@pytest.mark.asyncio
async def test_render_markdown_reports_into_registry(mcp_client, served_registry):
    result = await mcp_client.call_tool(
        "render_markdown", {"content": "# Title\n\n<script>x()</script>\n"}
    )
    data = result.data

    assert data["tree"]["tag"] == "div"
    assert data["tree"]["props"] == {"className": "markdown-content"}
    assert data["tree"]["children"][0] == {"tag": "h1", "props": {}, "children": ["Title"]}
    assert data["reported"] == 2
    assert data["callback_errors"] == 0
    assert data["error"] is None

    tags = sorted(r.tag for r in served_registry.get_snapshot().registered_elements.values())
    assert tags == ["div", "h1"]


@pytest.mark.asyncio
async def test_clear(mcp_client, served_registry):
    served_registry.register_element("p", {})
    result = await mcp_client.call_tool("clear", {})
    assert result.data == {"status": "ok"}
    snapshot = served_registry.get_snapshot()
    assert snapshot.registered_elements == {}
    assert snapshot.themes == {}


# --- Startup ---


def test_build_registry_loads_themes(theme_dir):
    config = BridgeConfig(themes=ThemeSettings(paths=[str(theme_dir)], current="midnight"))
    registry, loader = build_registry(config)

    themes = registry.get_theme_registry()
    assert set(themes.get_themes()) == {"light", "midnight"}
    assert themes.get_current_theme() == "midnight"
    assert not loader.watching


def test_build_transpiler_uses_configured_module():
    config = BridgeConfig(transpiler_module="stylebridge_no_such_transpiler")
    bridge = build_transpiler(config)
    assert not bridge.available
    assert bridge.name == "stylebridge_no_such_transpiler"


# --- Transpile tool ---


class UppercaseTranspiler:
    """Stand-in transpiler collaborator."""

    def transpile(self, source, filename, is_typescript):
        return f"/* ts={is_typescript} */ {source.upper()}"

    def get_version(self):
        return "0.0.1"


@pytest.mark.asyncio
async def test_transpile_jsx():
    app = create_app(StylingRegistry(), TranspilerBridge(UppercaseTranspiler()))
    async with Client(app) as c:
        result = await c.call_tool("transpile", {"source": "<App />", "filename": "app.tsx"})
    assert result.data == {"status": "ok", "code": "/* ts=True */ <APP />", "transpiled": True}


@pytest.mark.asyncio
async def test_transpile_plain_javascript_passes_through():
    collaborator = UppercaseTranspiler()
    app = create_app(StylingRegistry(), TranspilerBridge(collaborator))
    async with Client(app) as c:
        result = await c.call_tool("transpile", {"source": "const a = 1;", "filename": "hook.js"})
    assert result.data == {"status": "ok", "code": "const a = 1;", "transpiled": False}


@pytest.mark.asyncio
async def test_transpile_without_transpiler_reports_error(mcp_client):
    result = await mcp_client.call_tool("transpile", {"source": "<App />"})
    data = result.data
    assert data["status"] == "error"
    assert "relay_hook_transpiler" in data["error"]
    assert data["detail"].startswith("Execution Error")


@pytest.mark.asyncio
async def test_render_markdown_returns_parse_error(mcp_client, monkeypatch):
    import stylebridge.render.markdown as markdown_module

    def broken_parse(text):
        raise ValueError("parser exploded")

    monkeypatch.setattr(markdown_module._md, "parse", broken_parse)
    result = await mcp_client.call_tool("render_markdown", {"content": "# raw"})
    assert result.data["tree"]["children"] == ["# raw"]
    assert "parser exploded" in result.data["error"]
