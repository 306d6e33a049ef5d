"""Content rendering - markdown to element trees, with link interception."""

from .elements import Element, closest, create_element, path_to
from .navigation import ClickEvent, LinkInterceptor, is_external_href, resolve_href
from .markdown import (
    CONTAINER_CLASS,
    DENYLISTED_TAGS,
    MarkdownRenderer,
    normalize_markup,
    render_markdown,
)

__all__ = [
    "Element",
    "create_element",
    "path_to",
    "closest",
    "ClickEvent",
    "LinkInterceptor",
    "is_external_href",
    "resolve_href",
    "CONTAINER_CLASS",
    "DENYLISTED_TAGS",
    "MarkdownRenderer",
    "normalize_markup",
    "render_markdown",
]
