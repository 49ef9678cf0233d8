#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/llmdocs/converters/figures.py
"""Turn syntax-highlighted ``<figure class="code">`` blocks back into fenced code.

Static site generators (Jekyll/Rouge, Hugo, Octopress) wrap highlighted code
in a figure that also holds a line-number gutter, a caption with the file
name and one ``<span>`` or ``<div class="line">`` per source line. Rendering
such a figure as a plain container would interleave gutter numbers with the
code, so the code lines are extracted and emitted as a single fenced block
whose info string carries the language and the caption.

"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from llmdocs.constants import GENERIC_CODE_CLASSES, LANGUAGE_ATTRIBUTES, LANGUAGE_CLASS_PATTERN, MIN_CODE_FENCE_LENGTH
from llmdocs.dom import Node
from llmdocs.utils.security import sanitize_language_identifier
from llmdocs.utils.text import code_fence_for, normalize_line_endings, normalize_whitespace

logger = logging.getLogger(__name__)


def is_code_figure(figure: Node) -> bool:
    return figure.has_class("code")


def find_code_pre(figure: Node) -> Optional[Node]:
    """Locate the ``<pre>`` that holds the actual code, skipping line-number gutters."""

    def pre_inside(containers: list[Node]) -> Optional[Node]:
        for container in containers:
            pre = container.find_tag("pre")
            if pre is not None:
                return pre
        return None

    cells = figure.find_all(lambda node: node.tag == "td")
    return (
        pre_inside([cell for cell in cells if cell.has_class("main")])
        or pre_inside([cell for cell in cells if not cell.has_class("line-numbers")])
        or pre_inside(figure.find_all(lambda node: node.tag == "div" and node.has_class("highlight")))
        or figure.find_tag("pre")
    )


def _line_text(line: Node) -> str:
    return line.text.replace("\u00a0", " ").replace("\r", "").replace("\n", "").rstrip()


def extract_code_lines(pre: Node) -> list[str]:
    """Return the code lines of ``pre`` without leading/trailing blank lines."""
    line_nodes = pre.find_all(lambda node: node.has_class("line"))
    if line_nodes:
        lines = [_line_text(line) for line in line_nodes]
    else:
        code = pre.find_tag("code") or pre
        lines = normalize_line_endings(code.text).split("\n")

    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


def language_from_node(node: Node) -> str:
    """Read a language hint from data attributes or the first non-generic class token."""
    for attr in LANGUAGE_ATTRIBUTES:
        value = (node.get(attr) or "").strip()
        if value:
            return value

    for token in node.classes:
        match = LANGUAGE_CLASS_PATTERN.match(token)
        if match and match.group(1).strip():
            return match.group(1).strip()
        if token.lower() not in GENERIC_CODE_CLASSES:
            return token
    return ""


def detect_figure_language(figure: Node) -> str:
    first_main = figure.find(lambda node: node.tag == "td" and node.has_class("main"))
    first_highlight = figure.find(lambda node: node.tag == "div" and node.has_class("highlight"))
    candidates = [figure.find_tag("code"), figure.find_tag("pre"), first_main, first_highlight, figure]
    candidates.extend(
        figure.find_all(lambda node: any(node.has_attribute(attr) for attr in LANGUAGE_ATTRIBUTES + ("class",)))
    )

    for candidate in candidates:
        if candidate is None:
            continue
        language = language_from_node(candidate)
        if language:
            return sanitize_language_identifier(language)
    return ""


class FigureCodeBlockRenderer:
    """Render code figures as fenced code surrounded by the figure's other content.

    Parameters
    ----------
    block_renderer : callable
        Renders the figure children before and after the code.
    inline_collapser : callable
        Renders the ``<figcaption>`` text.
    min_fence_length : int, default 3
        Minimum backtick fence length.
    detect_language : bool, default True
        Put the detected language in the info string.

    """

    def __init__(
        self,
        block_renderer: Callable[[list[Node]], str],
        inline_collapser: Callable[[Node], str],
        min_fence_length: int = MIN_CODE_FENCE_LENGTH,
        detect_language: bool = True,
    ):
        self._render_blocks = block_renderer
        self._collapse_inline = inline_collapser
        self.min_fence_length = min_fence_length
        self.detect_language = detect_language

    def render(self, figure: Node) -> Optional[str]:
        """Render ``figure`` or return None when it does not hold code."""
        if not is_code_figure(figure):
            return None

        pre = find_code_pre(figure)
        if pre is None:
            return None
        lines = extract_code_lines(pre)
        if not lines:
            return None

        caption_node = figure.find_tag("figcaption")
        caption = normalize_whitespace(self._collapse_inline(caption_node)) if caption_node is not None else ""
        language = detect_figure_language(figure) if self.detect_language else ""
        info_string = " ".join(part for part in (language, caption.replace("`", "")) if part)

        code = "\n".join(lines)
        fence = code_fence_for(code, self.min_fence_length)
        code_block = f"{fence}{info_string}\n{code}\n{fence}"
        logger.debug("Extracted %d code lines from figure (info string %r)", len(lines), info_string)

        before: list[Node] = []
        after: list[Node] = []
        holder_seen = False
        for child in figure.children:
            if caption_node is not None and child == caption_node:
                continue
            if not holder_seen and child.contains(pre):
                holder_seen = True
                continue
            (after if holder_seen else before).append(child)

        parts = [self._render_blocks(before), code_block, self._render_blocks(after)]
        return "\n\n".join(part for part in parts if part.strip())
