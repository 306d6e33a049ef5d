"""
Markdown -> element tree rendering via markdown-it-py.

The renderer builds an element tree instead of an HTML string so that every
element creation passes through one factory, where it is reported to an
``on_element`` callback (usually a styling registry). Inline and block HTML
is split into elements too; denylisted tags are dropped along with their
content, whatever overrides the caller passes.

Example::

    registry = StylingRegistry()
    renderer = MarkdownRenderer(
        "# Title\\n\\nSee [setup](../setup).",
        navigate=router.push,
        on_element=registry.register_element,
        location="/docs/guide/intro",
    )
    root = renderer.render()
    renderer.click(root.find("a"))   # router.push("/docs/setup")
"""

from __future__ import annotations

import logging
import re
from html.parser import HTMLParser
from typing import Any, Callable, Mapping, Optional, Union

from markdown_it import MarkdownIt
from markdown_it.token import Token

from ..core.errors import HookError, ParseError, RenderError
from .elements import Child, Element, create_element
from .navigation import ClickEvent, LinkInterceptor, Location

logger = logging.getLogger(__name__)

CONTAINER_TAG = "div"
CONTAINER_CLASS = "markdown-content"

# Never materialized or reported, regardless of overrides
DENYLISTED_TAGS = frozenset({"script", "iframe"})

# Built-in renames applied before caller overrides
DEFAULT_OVERRIDES: dict[str, Any] = {
    "s": "del",  # markdown-it emits <s> for ~~strikethrough~~
}

VOID_TAGS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
})

# HTML attribute names -> element prop names
ATTRIBUTE_PROPS = {"class": "className", "for": "htmlFor"}

ElementCallback = Callable[[str, dict], None]
Component = Callable[[dict, list], Optional[Element]]
Override = Union[str, Component, Mapping[str, Any]]

_TAG_RE = re.compile(r"<([^>]+?)>")
_NEWLINE_INDENT_RE = re.compile(r"\n\s*")
_WHITESPACE_RE = re.compile(r"\s+")

_UNMOUNTED = object()

_md = MarkdownIt("commonmark", {"html": True})
_md.enable(["table", "strikethrough"])


def normalize_markup(content: str) -> str:
    """
    Collapse newlines and whitespace runs inside ``<...>`` tags.

    The parser rejects multi-line tag bodies, so each tag is flattened onto a
    single line. Text between tags is left alone.
    """
    def _collapse(match: re.Match) -> str:
        tag = _NEWLINE_INDENT_RE.sub(" ", match.group(0))
        return _WHITESPACE_RE.sub(" ", tag)

    return _TAG_RE.sub(_collapse, content)


def _props_from_attrs(attrs) -> dict[str, Any]:
    props = {}
    for name, value in attrs:
        props[ATTRIBUTE_PROPS.get(name, name)] = "" if value is None else value
    return props


class _Node:
    """Parsed node, before overrides and reporting are applied."""

    __slots__ = ("tag", "props", "children")

    def __init__(self, tag: str, props: Optional[dict] = None, children: Optional[list] = None):
        self.tag = tag
        self.props = props or {}
        self.children: list[Union["_Node", str]] = children or []


class _TreeBuilder:
    """Stack-based builder shared by markdown tokens and raw HTML fragments."""

    def __init__(self):
        self.root = _Node(CONTAINER_TAG)
        self._stack = [self.root]

    def _append(self, child) -> None:
        children = self._stack[-1].children
        if isinstance(child, str) and children and isinstance(children[-1], str):
            children[-1] += child
        else:
            children.append(child)

    def open(self, tag: str, props: Optional[dict] = None) -> None:
        node = _Node(tag, props)
        self._append(node)
        self._stack.append(node)

    def close(self, tag: str) -> None:
        # Pop to the nearest matching open tag; stray closers are ignored
        for i in range(len(self._stack) - 1, 0, -1):
            if self._stack[i].tag == tag:
                del self._stack[i:]
                return

    def leaf(self, tag: str, props: Optional[dict] = None, children: Optional[list] = None) -> None:
        self._append(_Node(tag, props, children))

    def text(self, content: str) -> None:
        if content:
            self._append(content)

    def feed_html(self, fragment: str) -> None:
        parser = _HtmlFragmentParser(self)
        parser.feed(fragment)
        parser.close()


class _HtmlFragmentParser(HTMLParser):
    """Forwards tags and text from an HTML fragment into a _TreeBuilder."""

    def __init__(self, builder: _TreeBuilder):
        super().__init__(convert_charrefs=True)
        self.builder = builder

    def handle_starttag(self, tag, attrs):
        if tag in VOID_TAGS:
            self.builder.leaf(tag, _props_from_attrs(attrs))
        else:
            self.builder.open(tag, _props_from_attrs(attrs))

    def handle_startendtag(self, tag, attrs):
        self.builder.leaf(tag, _props_from_attrs(attrs))

    def handle_endtag(self, tag):
        self.builder.close(tag)

    def handle_data(self, data):
        self.builder.text(data)


def _build_tree(tokens: list[Token], builder: _TreeBuilder) -> None:
    for token in tokens:
        if token.type == "inline":
            _build_tree(token.children or [], builder)
        elif token.hidden:
            # Paragraph wrappers inside tight lists
            continue
        elif token.nesting == 1:
            builder.open(token.tag, _props_from_attrs(token.attrs.items()))
        elif token.nesting == -1:
            builder.close(token.tag)
        elif token.type in ("text", "text_special"):
            builder.text(token.content)
        elif token.type == "code_inline":
            builder.leaf("code", {}, [token.content])
        elif token.type in ("fence", "code_block"):
            lang = token.info.strip().split(" ")[0] if token.info else ""
            code_props = {"className": f"lang-{lang}"} if lang else {}
            builder.leaf("pre", {}, [_Node("code", code_props, [token.content])])
        elif token.type == "softbreak":
            builder.text("\n")
        elif token.type == "hardbreak":
            builder.leaf("br")
        elif token.type == "image":
            props = _props_from_attrs(token.attrs.items())
            props["alt"] = token.content
            builder.leaf("img", props)
        elif token.type == "hr":
            builder.leaf("hr")
        elif token.type in ("html_inline", "html_block"):
            builder.feed_html(token.content)
        else:
            logger.debug(f"Skipping unhandled token type {token.type!r}")


class MarkdownRenderer:
    """
    Renders markdown content into an Element tree.

    Args:
        content: Markdown source
        navigate: Called with a resolved path when an internal link is clicked.
            Without it, link clicks run default behavior.
        on_element: Called with (tag, props) for every plain-tag element created
        overrides: Per-tag replacements: a tag name, a component
            ``component(props, children) -> Element | None``, or a mapping
            ``{"component": ..., "props": {...}}``
        location: Current document path (or a callable returning it), used to
            resolve relative links
    """

    def __init__(
        self,
        content: str,
        navigate: Optional[Callable[[str], None]] = None,
        on_element: Optional[ElementCallback] = None,
        overrides: Optional[Mapping[str, Override]] = None,
        location: Location = "/",
    ):
        self.content = content
        self.on_element = on_element
        self.overrides: dict[str, Override] = {**DEFAULT_OVERRIDES, **(overrides or {})}
        self.links = LinkInterceptor(navigate, location)
        self.callback_errors = 0
        self.last_callback_error: Optional[BaseException] = None
        self.last_error: Optional[HookError] = None
        self._mounted_for: Any = _UNMOUNTED
        self._root: Optional[Element] = None

    @property
    def root(self) -> Optional[Element]:
        """Tree from the most recent render, if any."""
        return self._root

    def _report(self, tag: str, props: dict) -> None:
        if self.on_element is None:
            return
        try:
            self.on_element(tag, dict(props))
        except Exception as e:
            # A failing observer must not abort rendering
            self.callback_errors += 1
            self.last_callback_error = e
            logger.warning(f"Element callback failed for <{tag}>: {e}")

    def _resolve(self, tag: str, props: dict) -> tuple[Union[str, Component], dict]:
        override = self.overrides.get(tag)
        if override is None:
            return tag, props
        if isinstance(override, Mapping):
            component = override.get("component", tag)
            extra = override.get("props")
            if extra:
                props = {**props, **extra}
            return component, props
        return override, props

    def _materialize(self, node: _Node) -> Optional[Element]:
        if node.tag in DENYLISTED_TAGS:
            return None
        component, props = self._resolve(node.tag, node.props)
        if isinstance(component, str) and component in DENYLISTED_TAGS:
            return None

        children: list[Child] = []
        for child in node.children:
            if isinstance(child, _Node):
                element = self._materialize(child)
                if element is not None:
                    children.append(element)
            else:
                children.append(child)

        if callable(component):
            try:
                return component(props, children)
            except Exception as e:
                # Drop the failing subtree, keep the rest of the document
                logger.warning(f"Override for <{node.tag}> failed: {e}")
                self.last_error = RenderError(f"Override for <{node.tag}> failed: {e}", element=node.tag)
                self.last_error.__cause__ = e
                return None
        self._report(component, props)
        return create_element(component, props, children)

    def _mount(self) -> None:
        # The container is announced once to each observer
        if self._mounted_for is not self.on_element:
            self._mounted_for = self.on_element
            self._report(CONTAINER_TAG, {"className": CONTAINER_CLASS})

    def render(self) -> Element:
        """
        Render the content and return the container element.

        Parse failures and failing override components do not raise; they
        are left on ``last_error`` (ParseError / RenderError).
        """
        self._mount()
        self.last_error = None
        container = create_element(CONTAINER_TAG, {"className": CONTAINER_CLASS})

        try:
            builder = _TreeBuilder()
            _build_tree(_md.parse(normalize_markup(self.content)), builder)
        except Exception as e:
            logger.error(f"Error parsing markdown: {e}")
            self.last_error = ParseError(f"Error parsing markdown: {e}", source=self.content)
            self.last_error.__cause__ = e
            container.children.append(self.content)
            self._root = container
            return container

        for child in builder.root.children:
            if isinstance(child, _Node):
                element = self._materialize(child)
                if element is not None:
                    container.children.append(element)
            else:
                container.children.append(child)

        self._root = container
        return container

    def click(self, target: Element) -> bool:
        """
        Dispatch a click on an element of the rendered tree.

        Returns:
            True if the click was intercepted (default behavior suppressed)
        """
        if self._root is None:
            return False
        event = ClickEvent(target)
        self.links.handle(event, self._root)
        return event.default_prevented


def render_markdown(content: str, **kwargs) -> Element:
    """Render markdown content to an element tree in one call."""
    return MarkdownRenderer(content, **kwargs).render()
