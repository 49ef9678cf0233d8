#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/llmdocs/dom.py
"""Minimal read-only node interface over a BeautifulSoup tree.

The converter never touches BeautifulSoup objects directly. Everything it
needs (node kind, tag name, attribute map, ordered children and text) is
exposed through :class:`Node`, which keeps the rendering code independent of
the tree builder selected in ``HtmlToMarkdownOptions.html_parser``.

"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Iterator, Optional

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, PageElement, PreformattedString, Tag
from bs4.exceptions import FeatureNotFound

from llmdocs.constants import HtmlParser
from llmdocs.exceptions import DependencyError

logger = logging.getLogger(__name__)

_PARSER_PACKAGES: dict[str, str] = {
    "html5lib": "html5lib",
    "lxml": "lxml",
}


class NodeKind(Enum):
    """Discriminates the node types the converter cares about."""

    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"
    OTHER = "other"


def _classify(element: PageElement) -> NodeKind:
    if isinstance(element, Tag):
        return NodeKind.ELEMENT
    if isinstance(element, Comment):
        return NodeKind.COMMENT
    # Doctype, CData, Declaration and ProcessingInstruction
    if isinstance(element, PreformattedString):
        return NodeKind.OTHER
    if isinstance(element, NavigableString):
        return NodeKind.TEXT
    return NodeKind.OTHER


class Node:
    """Read-only view of a single parsed HTML node.

    Two ``Node`` instances compare equal only when they wrap the very same
    underlying parser object; structurally identical siblings stay distinct.

    Parameters
    ----------
    element : PageElement
        The BeautifulSoup element being wrapped.

    """

    __slots__ = ("_element", "kind")

    def __init__(self, element: PageElement):
        self._element = element
        self.kind = _classify(element)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Node) and other._element is self._element

    def __hash__(self) -> int:
        return id(self._element)

    def __repr__(self) -> str:
        if self.kind is NodeKind.ELEMENT:
            return f"Node(<{self.tag}>)"
        return f"Node({self.kind.value}, {str(self._element)[:20]!r})"

    @property
    def is_element(self) -> bool:
        return self.kind is NodeKind.ELEMENT

    @property
    def is_text(self) -> bool:
        return self.kind is NodeKind.TEXT

    @property
    def tag(self) -> str:
        """Lower-cased tag name, or an empty string for non-element nodes."""
        if self.kind is not NodeKind.ELEMENT:
            return ""
        return (self._element.name or "").lower()

    @property
    def attributes(self) -> dict[str, str]:
        """Attribute map with multi-valued attributes joined by single spaces."""
        if self.kind is not NodeKind.ELEMENT:
            return {}
        result: dict[str, str] = {}
        for name, value in self._element.attrs.items():
            if isinstance(value, (list, tuple)):
                value = " ".join(value)
            result[name.lower()] = "" if value is None else str(value)
        return result

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return a single attribute value, or ``default`` when it is absent."""
        return self.attributes.get(name.lower(), default)

    def has_attribute(self, name: str) -> bool:
        return name.lower() in self.attributes

    @property
    def classes(self) -> tuple[str, ...]:
        """Whitespace-separated tokens of the ``class`` attribute."""
        return tuple(token for token in (self.get("class") or "").split() if token)

    def has_class(self, token: str) -> bool:
        lowered = token.lower()
        return any(candidate.lower() == lowered for candidate in self.classes)

    @property
    def children(self) -> list[Node]:
        if self.kind is not NodeKind.ELEMENT:
            return []
        return [Node(child) for child in self._element.children]

    @property
    def element_children(self) -> list[Node]:
        return [child for child in self.children if child.kind is NodeKind.ELEMENT]

    @property
    def parent(self) -> Optional[Node]:
        parent = self._element.parent
        return Node(parent) if parent is not None else None

    @property
    def text(self) -> str:
        """Concatenated text of the node and all of its descendants.

        Comments are not part of an element's text.
        """
        if self.kind is NodeKind.ELEMENT:
            return self._element.get_text()
        return str(self._element)

    def iter_descendants(self) -> Iterator[Node]:
        """Yield descendant elements in document order."""
        if self.kind is not NodeKind.ELEMENT:
            return
        for descendant in self._element.descendants:
            if isinstance(descendant, Tag):
                yield Node(descendant)

    def find(self, predicate: Callable[[Node], bool]) -> Optional[Node]:
        """Return the first descendant element matching ``predicate``."""
        return next((node for node in self.iter_descendants() if predicate(node)), None)

    def find_all(self, predicate: Callable[[Node], bool]) -> list[Node]:
        return [node for node in self.iter_descendants() if predicate(node)]

    def find_tag(self, tag: str) -> Optional[Node]:
        return self.find(lambda node: node.tag == tag)

    def has_ancestor(self, tag: str) -> bool:
        ancestor = self.parent
        while ancestor is not None:
            if ancestor.tag == tag:
                return True
            ancestor = ancestor.parent
        return False

    def contains(self, other: Node) -> bool:
        """Return True when ``other`` is this node or one of its descendants."""
        current: Optional[Node] = other
        while current is not None:
            if current == self:
                return True
            current = current.parent
        return False

    @property
    def outer_html(self) -> str:
        """Serialize the node back to HTML markup."""
        return str(self._element)


def parse_html(html: str, parser: HtmlParser = "html.parser") -> Node:
    """Parse an HTML document or fragment into a root :class:`Node`.

    Parameters
    ----------
    html : str
        HTML markup. Malformed markup is repaired by the tree builder.
    parser : {"html.parser", "html5lib", "lxml"}, default "html.parser"
        BeautifulSoup tree builder to use.

    Returns
    -------
    Node
        The document root. Its children are the top-level parsed nodes.

    Raises
    ------
    DependencyError
        If the requested tree builder is not installed.

    """
    try:
        soup = BeautifulSoup(html, parser)
    except FeatureNotFound as e:
        package = _PARSER_PACKAGES.get(parser)
        missing_packages = [(package, "")] if package else []
        raise DependencyError(
            "HTML to Markdown conversion",
            missing_packages=missing_packages,
            message=f"Selected html_parser not found: {parser!r}." if not missing_packages else None,
            original_error=e,
        ) from e

    logger.debug("Parsed %d characters of HTML with %s", len(html), parser)
    return Node(soup)
