#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/llmdocs/converters/html2markdown.py
"""HTML to Markdown conversion module.

This module converts HTML documents and fragments into clean Markdown meant
for consumption by language models. It walks the parsed DOM once, classifies
every node as block or inline, and renders each subtree with a small set of
mutually recursive renderers.

Key Features
------------
- Headings, paragraphs, blockquotes, thematic breaks and fenced code
- Ordered and unordered lists with nesting, ``start`` offsets and ``value``
  overrides, including block content inside list items
- Definition lists rendered as ``term`` / ``: definition`` pairs
- Tables with header promotion, pipe escaping, multi-line cells and
  rowspan/colspan handling (see :mod:`llmdocs.converters.tables`)
- Syntax-highlighted ``<figure class="code">`` blocks turned back into fenced
  code (see :mod:`llmdocs.converters.figures`)
- Links and images filtered against a scheme allow-list; label text is
  escaped without breaking nested Markdown
- Explicit ``<br>`` hard breaks survive whitespace collapsing

Rendering Model
---------------
Every call to :meth:`HTMLToMarkdown.convert` creates a fresh render session
holding the list-context stack. Inline content is accumulated in
:class:`~llmdocs.converters.inline.InlineBuffer` objects, one per subtree.
Nothing is cached on the converter, so a single instance can be shared
between threads.

Examples
--------
Basic HTML string conversion:

    >>> from llmdocs import html_to_markdown
    >>> html_to_markdown('<h1>Title</h1><p>Hello <strong>world</strong>.</p>')
    '# Title\\n\\nHello **world**.'

Reusing a converter with custom options:

    >>> from llmdocs import HTMLToMarkdown, HtmlToMarkdownOptions
    >>> converter = HTMLToMarkdown(HtmlToMarkdownOptions(html_parser="html5lib"))
    >>> markdown = converter.convert('<ol start="3"><li>A</li><li>B</li></ol>')

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

from llmdocs.constants import (
    BLOCK_CONTAINERS,
    BLOCK_TAGS,
    HEADING_LEVELS,
    IGNORE_TAGS,
    INLINE_EM_TAGS,
    INLINE_STRONG_TAGS,
    LANGUAGE_CLASS_PATTERN,
    LIST_INDENT,
    LIST_TAGS,
    THEMATIC_BREAK,
    UNORDERED_LIST_MARKER,
)
from llmdocs.converters.figures import FigureCodeBlockRenderer
from llmdocs.converters.inline import Fragment, FragmentKind, InlineBuffer
from llmdocs.converters.tables import TableRenderer
from llmdocs.dom import Node, parse_html
from llmdocs.exceptions import ValidationError
from llmdocs.options import HtmlToMarkdownOptions
from llmdocs.utils.escape import escape_link_title, escape_markdown_label, format_link_destination
from llmdocs.utils.security import is_bare_separator, is_safe_link_destination, sanitize_language_identifier
from llmdocs.utils.text import (
    code_fence_for,
    inline_code_span,
    normalize_line_endings,
    normalize_output,
    normalize_whitespace,
    parse_integer,
)

logger = logging.getLogger(__name__)

_HEADING_BREAK_PATTERN = re.compile(r" *\n+ *")


def is_block_like(node: Node) -> bool:
    """Return True if ``node`` starts a new block instead of flowing inline.

    Headings, the fixed block tags and transparent containers are block
    level; every other element, including unknown tags, is inline.
    """
    if not node.is_element:
        return False
    tag = node.tag
    return tag in HEADING_LEVELS or tag in BLOCK_CONTAINERS or tag in BLOCK_TAGS


class SegmentKind(Enum):
    """Kinds of content found inside a single ``<li>``."""

    INLINE = "inline"
    BLOCK = "block"
    NESTED_LIST = "nested_list"


@dataclass(frozen=True)
class ListItemSegment:
    """A run of list item children that render together.

    ``INLINE`` segments hold one or more consecutive inline nodes; ``BLOCK``
    and ``NESTED_LIST`` segments hold exactly one element. ``rendered`` keeps
    the Markdown of a block that was already rendered while choosing the
    marker-line text, so it is not rendered twice.
    """

    kind: SegmentKind
    nodes: tuple[Node, ...]
    rendered: Optional[str] = None

    @property
    def node(self) -> Node:
        return self.nodes[0]


@dataclass
class ListContext:
    """Numbering state of one open list."""

    ordered: bool
    next_index: int = 1


class _RenderSession:
    """Per-call rendering state and the mutually recursive renderers."""

    def __init__(self, options: HtmlToMarkdownOptions):
        self.options = options
        self.list_stack: list[ListContext] = []
        self.tables = TableRenderer(block_renderer=self.render_blocks, inline_collapser=self.collapse_inline)
        self.figures = FigureCodeBlockRenderer(
            block_renderer=self.render_blocks,
            inline_collapser=self.collapse_inline,
            min_fence_length=options.min_code_fence_length,
            detect_language=options.detect_code_language,
        )

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def render_blocks(self, nodes: list[Node]) -> str:
        """Render a sibling sequence, separating non-empty blocks by a blank line.

        Runs of text and inline elements between blocks are buffered and
        rendered together as one collapsed paragraph.
        """
        parts: list[str] = []
        pending: list[Node] = []

        def flush() -> None:
            if pending:
                rendered = self.collapse_inline_nodes(pending)
                pending.clear()
                if rendered:
                    parts.append(rendered)

        for node in nodes:
            if node.is_text:
                pending.append(node)
                continue
            if not node.is_element or node.tag in IGNORE_TAGS:
                continue

            if is_block_like(node):
                flush()
                rendered = self.render_block(node)
                if rendered.strip():
                    parts.append(rendered)
            else:
                pending.append(node)

        flush()
        return "\n\n".join(parts)

    def render_block(self, node: Node) -> str:
        tag = node.tag

        if tag == "table":
            return self.tables.render(node)
        if tag == "hr":
            return THEMATIC_BREAK
        if tag in HEADING_LEVELS:
            text = _HEADING_BREAK_PATTERN.sub(" ", self.collapse_inline(node))
            if not text:
                return ""
            return f"{'#' * HEADING_LEVELS[tag]} {text}"
        if tag == "blockquote":
            return self._render_blockquote(node)
        if tag == "pre":
            return self._render_fenced_code(node)
        if tag in LIST_TAGS:
            return self.render_list(node, depth=0)
        if tag == "dl":
            return self._render_definition_list(node)
        if tag == "figure":
            rendered = self.figures.render(node)
            if rendered is not None:
                return rendered
        if tag in BLOCK_CONTAINERS:
            blocks = self.render_blocks(node.children)
            return blocks if blocks.strip() else self.collapse_inline(node)

        # p, figcaption and anything else reaching block position
        return self.collapse_inline(node)

    def _render_blockquote(self, node: Node) -> str:
        if any(is_block_like(child) for child in node.element_children):
            inner = self.render_blocks(node.children)
        else:
            inner = self.collapse_inline(node)
        if not inner.strip():
            return ""
        return "\n".join(f"> {line}" if line.strip() else ">" for line in inner.split("\n"))

    def _render_fenced_code(self, node: Node) -> str:
        code_node = node.find_tag("code")
        code = normalize_line_endings((code_node or node).text)
        if code.startswith("\n"):
            code = code[1:]
        code = code.rstrip()

        fence = code_fence_for(code, self.options.min_code_fence_length)
        language = self._code_language(code_node, node) if self.options.detect_code_language else ""
        return f"{fence}{language}\n{code}\n{fence}"

    @staticmethod
    def _code_language(*nodes: Optional[Node]) -> str:
        """Extract a language from ``language-*``/``lang-*`` classes or data attributes."""
        for node in nodes:
            if node is None:
                continue
            for attr in ("data-language", "data-lang"):
                value = (node.get(attr) or "").strip()
                if value:
                    return sanitize_language_identifier(value)
            for token in node.classes:
                match = LANGUAGE_CLASS_PATTERN.match(token)
                if match:
                    return sanitize_language_identifier(match.group(1))
        return ""

    def _render_definition_list(self, node: Node) -> str:
        entries: list[str] = []
        term: Optional[str] = None
        definitions: list[str] = []

        def flush() -> None:
            if term is not None and definitions:
                entries.append("\n".join([term] + [f": {definition}" for definition in definitions]))

        for child in node.element_children:
            if child.tag == "dt":
                flush()
                term = self.collapse_inline(child)
                definitions = []
            elif child.tag == "dd" and term is not None:
                definitions.append(self.collapse_inline(child))

        flush()
        return "\n\n".join(entries)

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def render_list(self, node: Node, depth: int) -> str:
        """Render a ``<ul>``/``<ol>`` with its items indented by ``depth`` levels."""
        ordered = node.tag == "ol"
        start = parse_integer(node.get("start")) if ordered else None
        self.list_stack.append(ListContext(ordered=ordered, next_index=1 if start is None else start))
        try:
            items = [self._render_list_item(child, depth) for child in node.element_children if child.tag == "li"]
        finally:
            self.list_stack.pop()
        return "\n".join(items)

    def _render_list_item(self, item: Node, depth: int) -> str:
        context = self.list_stack[-1]
        indent = LIST_INDENT * depth

        if context.ordered:
            override = parse_integer(item.get("value"))
            if override is not None:
                context.next_index = override
            marker = f"{indent}{context.next_index}. "
            context.next_index += 1
        else:
            marker = f"{indent}{UNORDERED_LIST_MARKER} "

        leading, segments = self._extract_leading_text(self._list_item_segments(item))
        if leading:
            continuation = "\n" + " " * len(marker)
            lines = [marker + leading.replace("\n", continuation)]
        else:
            lines = [marker.rstrip()]

        previous: Optional[SegmentKind] = None
        for segment in segments:
            segment_lines = self._render_list_segment(segment, depth)
            if not segment_lines:
                continue

            if segment.kind is not SegmentKind.NESTED_LIST or previous in (SegmentKind.BLOCK, SegmentKind.INLINE):
                if lines[-1]:
                    lines.append("")
            lines.extend(segment_lines)
            previous = segment.kind

        return "\n".join(lines)

    @staticmethod
    def _list_item_segments(item: Node) -> list[ListItemSegment]:
        segments: list[ListItemSegment] = []
        inline: list[Node] = []

        def flush() -> None:
            if inline:
                segments.append(ListItemSegment(SegmentKind.INLINE, tuple(inline)))
                inline.clear()

        for child in item.children:
            if child.is_element and child.tag in LIST_TAGS:
                flush()
                segments.append(ListItemSegment(SegmentKind.NESTED_LIST, (child,)))
            elif is_block_like(child):
                flush()
                segments.append(ListItemSegment(SegmentKind.BLOCK, (child,)))
            else:
                inline.append(child)

        flush()
        return segments

    def _extract_leading_text(self, segments: list[ListItemSegment]) -> tuple[str, list[ListItemSegment]]:
        """Pick the text that goes on the marker line.

        Empty inline runs are skipped. A leading block is only pulled onto the
        marker line when it renders as a single line.
        """
        while segments:
            first = segments[0]
            if first.kind is SegmentKind.INLINE:
                segments = segments[1:]
                candidate = self.collapse_inline_nodes(list(first.nodes))
                if candidate:
                    return candidate, segments
                continue
            if first.kind is SegmentKind.BLOCK:
                rendered = self.render_block(first.node)
                if "\n" not in rendered:
                    return rendered.strip(), segments[1:]
                return "", [replace(first, rendered=rendered)] + segments[1:]
            break
        return "", segments

    def _render_list_segment(self, segment: ListItemSegment, depth: int) -> list[str]:
        if segment.kind is SegmentKind.NESTED_LIST:
            nested = self.render_list(segment.node, depth + 1)
            return nested.split("\n") if nested else []

        if segment.rendered is not None:
            rendered = segment.rendered
        elif segment.kind is SegmentKind.BLOCK:
            rendered = self.render_block(segment.node)
        else:
            rendered = self.collapse_inline_nodes(list(segment.nodes))
        if not rendered.strip():
            return []

        indent = LIST_INDENT * (depth + 1)
        return [f"{indent}{line}" if line.strip() else "" for line in rendered.split("\n")]

    # ------------------------------------------------------------------
    # Inline content
    # ------------------------------------------------------------------

    def collapse_inline(self, node: Node) -> str:
        """Render the children of ``node`` inline and collapse whitespace."""
        return self.inline_buffer(node.children).collapse()

    def collapse_inline_nodes(self, nodes: list[Node]) -> str:
        return self.inline_buffer(nodes).collapse()

    def inline_buffer(self, nodes: list[Node]) -> InlineBuffer:
        buffer = InlineBuffer()
        self._render_inline_nodes(nodes, buffer)
        return buffer

    def _render_inline_nodes(self, nodes: list[Node], buffer: InlineBuffer) -> None:
        drop_separator = False
        for node in nodes:
            if drop_separator and node.is_text and is_bare_separator(node.text):
                drop_separator = False
                continue
            drop_separator = self._render_inline(node, buffer)

    def _render_inline(self, node: Node, buffer: InlineBuffer) -> bool:
        """Render one inline node into ``buffer``.

        Returns True when the node was a link dropped for its unsafe
        destination, so the caller can skip a separator that follows it.
        """
        if node.is_text:
            buffer.append_text(_escape_text(node.text))
            return False
        if not node.is_element:
            return False

        tag = node.tag
        if tag in IGNORE_TAGS:
            return False
        if tag == "a":
            return not self._render_link(node, buffer)

        if tag == "br":
            buffer.append_break()
        elif tag == "img":
            buffer.append_markup(self._render_image(node))
        elif tag in INLINE_STRONG_TAGS:
            buffer.wrap(self.inline_buffer(node.children), "**")
        elif tag in INLINE_EM_TAGS:
            buffer.wrap(self.inline_buffer(node.children), "*")
        elif tag == "code":
            buffer.append_markup(inline_code_span(node.text))
        else:
            self._render_inline_nodes(node.children, buffer)
        return False

    def _render_link(self, node: Node, buffer: InlineBuffer) -> bool:
        href = (node.get("href") or "").strip()
        if href and not is_safe_link_destination(href):
            logger.debug("Dropping link with unsafe destination: %r", href)
            buffer.prune_trailing_separator()
            return False

        label = self.inline_buffer(node.children)
        if not href:
            fragments = label.collapsed_fragments()
            if fragments:
                buffer.append_surrounded(label, fragments)
            else:
                buffer.append_edge_space(label)
            return True

        text = label.collapse(escape=escape_markdown_label)
        markup = Fragment(FragmentKind.MARKUP, f"[{text}]({format_link_destination(href)})")
        buffer.append_surrounded(label, [markup])
        return True

    @staticmethod
    def _render_image(node: Node) -> str:
        src = (node.get("src") or "").strip()
        if not src:
            return ""
        if not is_safe_link_destination(src):
            logger.debug("Dropping image with unsafe source: %r", src)
            return ""

        alt = escape_markdown_label(normalize_whitespace(node.get("alt") or "").strip())
        title = node.get("title") or ""
        title_part = f' "{escape_link_title(title)}"' if title else ""
        return f"![{alt}]({format_link_destination(src)}{title_part})"


def _escape_text(text: str) -> str:
    """Re-escape angle brackets in parser-decoded text so no tag can be injected.

    The tree builder has already decoded entities; decoding again would turn
    a literal ``&amp;copy;`` into a copyright sign.
    """
    return text.replace("<", "&lt;").replace(">", "&gt;")


class HTMLToMarkdown:
    """HTML to Markdown converter.

    The converter itself only holds immutable options. All rendering state
    lives in a session created per :meth:`convert` call.

    Parameters
    ----------
    options : HtmlToMarkdownOptions, optional
        Conversion options. Defaults are used when omitted.

    Examples
    --------
    >>> converter = HTMLToMarkdown()
    >>> converter.convert('<ul><li>Item</li></ul><p>Next</p>')
    '- Item\\n\\nNext'

    """

    def __init__(self, options: Optional[HtmlToMarkdownOptions] = None):
        self.options = options or HtmlToMarkdownOptions()

    def convert(self, html: Optional[str]) -> str:
        """Convert an HTML document or fragment to Markdown.

        Parameters
        ----------
        html : str or None
            HTML markup. ``None``, empty and whitespace-only input yield ``""``.

        Returns
        -------
        str
            Markdown text without leading or trailing blank lines.

        Raises
        ------
        ValidationError
            If ``html`` is not a string.
        DependencyError
            If the configured parser backend is not installed.

        """
        if html is None:
            return ""
        if not isinstance(html, str):
            raise ValidationError(
                f"HTML input must be a string, got {type(html).__name__}",
                parameter_name="html",
                parameter_value=html,
            )
        if not html.strip():
            return ""

        root = parse_html(html, self.options.html_parser)
        rendered = _RenderSession(self.options).render_blocks(root.children)
        return normalize_output(rendered, max_blank=self.options.max_blank_lines)


def html_to_markdown(html: Optional[str], options: Optional[HtmlToMarkdownOptions] = None, **kwargs: Any) -> str:
    """Convert HTML to Markdown.

    Parameters
    ----------
    html : str or None
        HTML document or fragment.
    options : HtmlToMarkdownOptions, optional
        Conversion options.
    **kwargs : Any
        Individual option overrides applied on top of ``options``
        (e.g., ``html_parser="lxml"``).

    Returns
    -------
    str
        The rendered Markdown.

    Raises
    ------
    ValidationError
        If ``html`` is not a string or an override names an unknown option.
    DependencyError
        If the selected parser backend is not installed.

    Examples
    --------
    >>> html_to_markdown('<p>Foo | <a href="javascript:bad()">Bad</a></p>')
    'Foo'

    """
    if options is None:
        options = HtmlToMarkdownOptions()
    if kwargs:
        options = options.create_updated(**kwargs)
    return HTMLToMarkdown(options).convert(html)
