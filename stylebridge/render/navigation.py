"""
In-document link interception.

Clicks on anchors with internal hrefs are handed to a host navigate callback
instead of running default navigation. Relative hrefs are resolved against
the directory of the current document location.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union
from urllib.parse import urljoin, urlsplit

from .elements import Element, closest

logger = logging.getLogger(__name__)

EXTERNAL_PREFIXES = ("http", "mailto:", "tel:")

# Scratch origin for resolving paths with URL semantics
_BASE_ORIGIN = "http://localhost"

Location = Union[str, Callable[[], str]]


def is_external_href(href: str) -> bool:
    """Whether the href leaves the document (web URL, mail or phone link)."""
    return href.startswith(EXTERNAL_PREFIXES)


def resolve_href(href: str, location: str = "/") -> Optional[str]:
    """
    Resolve an anchor href to an internal navigation path.

    Args:
        href: Raw href attribute
        location: Path of the current document, e.g. "/docs/guide/intro"

    Returns:
        Path to navigate to, or None for external hrefs
    """
    if is_external_href(href):
        return None
    if href.startswith("/"):
        return href
    if href.startswith("."):
        base = location[: location.rfind("/")] if "/" in location else ""
        return urlsplit(urljoin(f"{_BASE_ORIGIN}{base}/", href)).path
    return href


@dataclass
class ClickEvent:
    """A click dispatched at an element of a rendered tree."""
    target: Element
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class LinkInterceptor:
    """Routes internal anchor clicks to a navigate callback."""

    def __init__(self, navigate: Optional[Callable[[str], None]] = None, location: Location = "/"):
        self.navigate = navigate
        self._location = location

    @property
    def location(self) -> str:
        if callable(self._location):
            return self._location()
        return self._location

    def handle(self, event: ClickEvent, root: Element) -> bool:
        """
        Handle a click inside ``root``.

        Returns:
            True if default behavior was suppressed and navigate was called
        """
        if self.navigate is None:
            return False

        anchor = closest(root, event.target, "a")
        if anchor is None:
            return False
        href = anchor.props.get("href")
        if not href:
            return False

        path = resolve_href(href, self.location)
        if path is None:
            return False

        event.prevent_default()
        logger.debug(f"Intercepted link {href!r} -> {path!r}")
        self.navigate(path)
        return True
