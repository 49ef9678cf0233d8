#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/llmdocs/converters/inline.py
"""Inline accumulator used while rendering runs of text and inline elements.

Rendered inline output is kept as an ordered list of fragments rather than a
flat string:

- ``TEXT`` fragments hold literal document text. They may still be escaped
  when the run becomes a link label.
- ``MARKUP`` fragments hold Markdown that was already produced by a child
  element (``**bold**``, an image, an inner link, a code span). They are
  never escaped or whitespace-collapsed again.
- ``BREAK`` fragments stand for explicit ``<br>`` hard breaks. They survive
  whitespace collapsing as real newlines, while every other newline in the
  source is incidental and collapses to a space.

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional

from llmdocs.constants import WHITESPACE_RUN_PATTERN
from llmdocs.utils.security import TRAILING_SEPARATOR_PATTERN

_WHITESPACE_SPLIT_PATTERN = re.compile(f"({WHITESPACE_RUN_PATTERN.pattern})")


class FragmentKind(Enum):
    TEXT = "text"
    MARKUP = "markup"
    BREAK = "break"


@dataclass(frozen=True)
class Fragment:
    """A single piece of rendered inline output."""

    kind: FragmentKind
    content: str


class InlineBuffer:
    """Accumulates the inline rendering of one subtree.

    A buffer belongs to exactly one render call. Children render into their
    own buffer and the parent copies the finished result in with
    :meth:`extend` or :meth:`wrap`.
    """

    def __init__(self, fragments: Optional[Iterable[Fragment]] = None):
        self.fragments: list[Fragment] = list(fragments or ())

    def __bool__(self) -> bool:
        return bool(self.fragments)

    def __repr__(self) -> str:
        return f"InlineBuffer({self.fragments!r})"

    def append_text(self, text: str) -> None:
        if text:
            self.fragments.append(Fragment(FragmentKind.TEXT, text))

    def append_markup(self, markup: str) -> None:
        if markup:
            self.fragments.append(Fragment(FragmentKind.MARKUP, markup))

    def append_break(self) -> None:
        self.fragments.append(Fragment(FragmentKind.BREAK, "\n"))

    def extend(self, fragments: Iterable[Fragment]) -> None:
        self.fragments.extend(fragments)

    def wrap(self, child: InlineBuffer, delimiter: str) -> None:
        """Append ``child`` collapsed and surrounded by ``delimiter`` markup.

        Whitespace at either edge of the child is moved outside the
        delimiters. A child that collapses to an empty run leaves at most a
        single space behind, so ``<strong> </strong>`` never produces ``****``.
        """
        inner = child.collapsed_fragments()
        if not inner:
            self.append_edge_space(child)
            return

        markup = Fragment(FragmentKind.MARKUP, delimiter)
        self.append_surrounded(child, [markup, *inner, markup])

    def append_surrounded(self, child: InlineBuffer, fragments: Iterable[Fragment]) -> None:
        """Append ``fragments`` rendered from ``child``, keeping its edge whitespace.

        A ``TEXT`` fragment of ``child`` that starts or ends with whitespace
        puts a single space before or after the appended fragments, so that
        ``see<a href="/u"> here </a>now`` keeps its word boundaries.
        """
        leading, trailing = child.edge_whitespace()
        if leading:
            self.append_text(" ")
        self.extend(fragments)
        if trailing:
            self.append_text(" ")

    def append_edge_space(self, child: InlineBuffer) -> None:
        """Stand in for a ``child`` that collapsed to nothing."""
        if any(fragment.kind is FragmentKind.TEXT for fragment in child.fragments):
            self.append_text(" ")

    def edge_whitespace(self) -> tuple[bool, bool]:
        """Return whether the first and last fragments are text starting or ending with whitespace."""
        if not self.fragments:
            return False, False
        first, last = self.fragments[0], self.fragments[-1]
        leading = first.kind is FragmentKind.TEXT and bool(WHITESPACE_RUN_PATTERN.match(first.content[:1]))
        trailing = last.kind is FragmentKind.TEXT and bool(WHITESPACE_RUN_PATTERN.match(last.content[-1:]))
        return leading, trailing

    @property
    def raw(self) -> str:
        """Uncollapsed buffer contents.

        Inspection view only; rendering always goes through
        :meth:`collapsed_fragments`.
        """
        return "".join(fragment.content for fragment in self.fragments)

    @property
    def line_break_indices(self) -> list[int]:
        """Offsets in :attr:`raw` of newlines that came from explicit hard breaks.

        Inspection view of the ``BREAK`` fragments, which is how the renderer
        itself tells hard breaks from incidental newlines.
        """
        indices: list[int] = []
        position = 0
        for fragment in self.fragments:
            if fragment.kind is FragmentKind.BREAK:
                indices.extend(range(position, position + len(fragment.content)))
            position += len(fragment.content)
        return indices

    def collapsed_fragments(self, escape: Optional[Callable[[str], str]] = None) -> list[Fragment]:
        """Return the fragments with incidental whitespace collapsed.

        Each run of ASCII whitespace between two pieces of content becomes a
        single space, or ``n`` newlines when the run contains ``n`` hard
        breaks. Whitespace and breaks at either edge are dropped.

        Parameters
        ----------
        escape : callable, optional
            Applied to every non-whitespace piece of ``TEXT`` content, used to
            escape literal text inside link labels.

        """
        result: list[Fragment] = []
        pending_space = False
        pending_breaks = 0

        def emit(kind: FragmentKind, content: str) -> None:
            nonlocal pending_space, pending_breaks
            if result:
                if pending_breaks:
                    result.append(Fragment(FragmentKind.BREAK, "\n" * pending_breaks))
                elif pending_space:
                    result.append(Fragment(FragmentKind.TEXT, " "))
            pending_space = False
            pending_breaks = 0
            result.append(Fragment(kind, content))

        for fragment in self.fragments:
            if fragment.kind is FragmentKind.BREAK:
                pending_breaks += len(fragment.content)
            elif fragment.kind is FragmentKind.MARKUP:
                emit(FragmentKind.MARKUP, fragment.content)
            else:
                for piece in _WHITESPACE_SPLIT_PATTERN.split(fragment.content):
                    if not piece:
                        continue
                    if WHITESPACE_RUN_PATTERN.fullmatch(piece):
                        pending_space = True
                    else:
                        emit(FragmentKind.TEXT, escape(piece) if escape else piece)

        return result

    def collapse(self, escape: Optional[Callable[[str], str]] = None) -> str:
        """Render the buffer as a single collapsed string."""
        return "".join(fragment.content for fragment in self.collapsed_fragments(escape))

    def prune_trailing_separator(self) -> None:
        """Drop a dangling ``|`` separator and trailing whitespace from the end.

        Called after an unsafe link was removed so that ``"Foo | "`` does not
        leave ``"Foo |"`` behind.
        """
        while self.fragments:
            last = self.fragments[-1]
            if last.kind is FragmentKind.MARKUP:
                return

            if last.kind is FragmentKind.TEXT:
                pruned = TRAILING_SEPARATOR_PATTERN.sub("", last.content)
                if pruned != last.content:
                    trimmed = pruned.rstrip()
                    if trimmed:
                        self.fragments[-1] = Fragment(FragmentKind.TEXT, trimmed)
                    else:
                        self.fragments.pop()
                    continue

            if last.content.strip():
                return
            self.fragments.pop()
