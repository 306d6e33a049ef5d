"""
Element tree produced by the render pipeline.

An Element is a tag (or component callable) with props and children, where
children are Elements or plain strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional, Union

Child = Union["Element", str]


@dataclass
class Element:
    """A single node in the rendered tree."""
    tag: Union[str, Callable]
    props: dict[str, Any] = field(default_factory=dict)
    children: list[Child] = field(default_factory=list)

    @property
    def tag_name(self) -> str:
        if isinstance(self.tag, str):
            return self.tag
        return getattr(self.tag, "__name__", repr(self.tag))

    def iter(self) -> Iterator["Element"]:
        """Walk this element and its descendants in document order."""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter()

    def find_all(self, tag: str) -> list["Element"]:
        return [el for el in self.iter() if el.tag == tag]

    def find(self, tag: str) -> Optional["Element"]:
        for el in self.iter():
            if el.tag == tag:
                return el
        return None

    def text_content(self) -> str:
        parts = []
        for child in self.children:
            if isinstance(child, Element):
                parts.append(child.text_content())
            else:
                parts.append(child)
        return "".join(parts)

    def to_dict(self) -> dict:
        """Serialize to plain data, dropping props that are not JSON-friendly."""
        return {
            "tag": self.tag_name,
            "props": {k: v for k, v in self.props.items() if not callable(v)},
            "children": [c.to_dict() if isinstance(c, Element) else c for c in self.children],
        }


def _flatten(children) -> Iterator[Child]:
    for child in children:
        if child is None or child is False:
            continue
        if isinstance(child, (list, tuple)):
            yield from _flatten(child)
        elif isinstance(child, Element):
            yield child
        else:
            yield str(child)


def create_element(tag: Union[str, Callable], props: Optional[dict] = None, *children) -> Element:
    """Build an Element, flattening nested child lists and dropping None."""
    return Element(tag, dict(props or {}), list(_flatten(children)))


def path_to(root: Element, target: Element) -> list[Element]:
    """
    Find the ancestor chain of ``target`` within ``root``.

    Returns:
        Elements from target up to root (target first), or [] if not found
    """
    if root is target:
        return [root]
    for child in root.children:
        if isinstance(child, Element):
            path = path_to(child, target)
            if path:
                path.append(root)
                return path
    return []


def closest(root: Element, target: Element, tag: str) -> Optional[Element]:
    """Nearest element with ``tag`` starting at target and walking up to root."""
    for el in path_to(root, target):
        if el.tag == tag:
            return el
    return None
