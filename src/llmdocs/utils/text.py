#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/llmdocs/utils/text.py
"""Text helpers shared by the renderers and the output normalizer.

Functions
---------
- normalize_whitespace: Collapse ASCII whitespace runs to a single space
- longest_run: Length of the longest run of a character
- code_fence_for: Backtick fence long enough to wrap a code block
- inline_code_span: Render text as a CommonMark code span
- parse_integer: Strict integer parsing for HTML attributes
- squeeze_blank_lines_outside_fences: Fence-aware blank-line limiter
- normalize_output: Final cleanup applied to rendered Markdown

"""

from __future__ import annotations

import re
from typing import Optional

from llmdocs.constants import (
    DEFAULT_MAX_BLANK_LINES,
    FENCE_CHARS,
    MIN_CODE_FENCE_LENGTH,
    WHITESPACE_RUN_PATTERN,
)

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
_LINE_ENDING_PATTERN = re.compile(r"\r\n?")


def normalize_line_endings(text: str) -> str:
    """Convert ``\\r\\n`` and lone ``\\r`` line endings to ``\\n``."""
    return _LINE_ENDING_PATTERN.sub("\n", text)


def normalize_whitespace(text: str) -> str:
    """Collapse every run of ASCII whitespace into a single space.

    Non-breaking spaces are not ASCII whitespace and are left untouched.
    """
    return WHITESPACE_RUN_PATTERN.sub(" ", text)


def longest_run(text: str, char: str = "`") -> int:
    """Return the length of the longest consecutive run of ``char`` in ``text``."""
    longest = 0
    current = 0
    for c in text:
        if c == char:
            current += 1
            if current > longest:
                longest = current
        else:
            current = 0
    return longest


def code_fence_for(code: str, min_length: int = MIN_CODE_FENCE_LENGTH) -> str:
    """Return a backtick fence that cannot be closed by anything inside ``code``.

    Parameters
    ----------
    code : str
        Code block content.
    min_length : int, default 3
        Minimum fence length.

    Returns
    -------
    str
        A run of ``max(min_length, longest_backtick_run + 1)`` backticks.

    Examples
    --------
        >>> code_fence_for("print('hi')")
        '```'
        >>> code_fence_for("```\\nnested\\n```")
        '````'

    """
    return "`" * max(min_length, longest_run(code, "`") + 1)


def inline_code_span(text: str) -> str:
    """Render ``text`` as an inline code span.

    Newlines become spaces and the text is stripped. The fence is one
    backtick longer than the longest backtick run inside the text; a side
    whose content starts or ends with a backtick gets one padding space.

    Examples
    --------
        >>> inline_code_span("puts 'hi'")
        "`puts 'hi'`"
        >>> inline_code_span("puts `foo`")
        '``puts `foo` ``'

    """
    content = re.sub(r"\n+", " ", normalize_line_endings(text)).strip()
    if not content:
        return ""

    fence = "`" * (longest_run(content, "`") + 1)
    leading = " " if content.startswith("`") else ""
    trailing = " " if content.endswith("`") else ""
    return f"{fence}{leading}{content}{trailing}{fence}"


def parse_integer(raw: Optional[str]) -> Optional[int]:
    """Parse an optionally signed decimal integer attribute value.

    Returns None for absent or non-integer values ("3px", "2.5", "").
    """
    if raw is None:
        return None
    value = raw.strip()
    if not _INTEGER_PATTERN.match(value):
        return None
    return int(value)


def _fence_opening(line: str) -> Optional[tuple[str, int]]:
    stripped = line.lstrip()
    if not stripped or stripped[0] not in FENCE_CHARS:
        return None
    char = stripped[0]
    length = len(stripped) - len(stripped.lstrip(char))
    if length < MIN_CODE_FENCE_LENGTH:
        return None
    return char, length


def _closes_fence(line: str, char: str, length: int) -> bool:
    stripped = line.strip()
    if not stripped or stripped[0] != char:
        return False
    run = len(stripped) - len(stripped.lstrip(char))
    return run >= length and not stripped[run:].strip()


def squeeze_blank_lines_outside_fences(text: str, max_blank: int = DEFAULT_MAX_BLANK_LINES) -> str:
    """Limit runs of blank lines to ``max_blank`` everywhere except inside fences.

    A fence opens on a line whose first non-blank characters are three or
    more backticks or tildes, and closes on a line holding only a run of the
    same character at least as long as the opening one. Lines inside a
    fence pass through untouched, however many of them are blank.

    Parameters
    ----------
    text : str
        Markdown text with ``\\n`` line endings.
    max_blank : int, default 2
        Maximum number of consecutive blank lines kept outside fences.

    Returns
    -------
    str
        Text with excess blank lines removed.

    """
    if not text:
        return ""

    out: list[str] = []
    fence: Optional[tuple[str, int]] = None
    blank_streak = 0

    for line in text.split("\n"):
        if fence is not None:
            out.append(line)
            if _closes_fence(line, *fence):
                fence = None
            continue

        opening = _fence_opening(line)
        if opening is not None:
            fence = opening
            blank_streak = 0
            out.append(line)
            continue

        if line.strip():
            blank_streak = 0
            out.append(line)
        else:
            blank_streak += 1
            if blank_streak <= max_blank:
                out.append(line)

    return "\n".join(out)


def normalize_output(markdown: str, max_blank: int = DEFAULT_MAX_BLANK_LINES) -> str:
    """Apply the final cleanup to rendered Markdown.

    Line endings are normalized, trailing whitespace is stripped from every
    line, blank-line runs outside fenced code are limited to ``max_blank``
    and leading/trailing blank lines of the whole document are removed.
    """
    lines = [line.rstrip(" \t") for line in normalize_line_endings(markdown).split("\n")]
    squeezed = squeeze_blank_lines_outside_fences("\n".join(lines), max_blank=max_blank)
    return squeezed.strip("\n")
