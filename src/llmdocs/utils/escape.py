#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/llmdocs/utils/escape.py
"""Markdown escaping utilities.

This module provides the escape functions used when literal text ends up in
positions where Markdown would otherwise interpret it: link labels, image
alt text, link destinations and table cells.

"""

from __future__ import annotations

import re

from llmdocs.constants import MARKDOWN_LABEL_ESCAPE_PATTERN

_DESTINATION_WRAP_PATTERN = re.compile(r"[\s()]")


def _has_closing_run(line: str, start: int, run: int) -> bool:
    return re.search(rf"(?<!`)`{{{run}}}(?!`)", line[start:]) is not None


def escape_markdown_label(text: str) -> str:
    r"""Escape Markdown metacharacters in link labels and image alt text.

    Parameters
    ----------
    text : str
        Literal text to escape

    Returns
    -------
    str
        Text with ``\ [ ] ( ) * _ ` !`` backslash-escaped

    Examples
    --------
        >>> escape_markdown_label("C++ [beta]_release")
        'C++ \\[beta\\]\\_release'

    """
    if not text:
        return text
    return MARKDOWN_LABEL_ESCAPE_PATTERN.sub(lambda m: "\\" + m.group(0), text)


def format_link_destination(url: str) -> str:
    """Format a URL for use as a Markdown link or image destination.

    Destinations containing whitespace or parentheses are wrapped in angle
    brackets, the CommonMark form that keeps them unambiguous.

    Examples
    --------
        >>> format_link_destination("https://example.com/foo(bar)")
        '<https://example.com/foo(bar)>'

    """
    if not url:
        return ""
    if _DESTINATION_WRAP_PATTERN.search(url):
        return f"<{url}>"
    return url


def escape_link_title(title: str) -> str:
    """Escape double quotes and backslashes for a ``"title"`` link attribute."""
    return title.replace("\\", "\\\\").replace('"', '\\"')


def escape_table_cell_line(line: str) -> str:
    r"""Escape literal pipes in one line of table cell content.

    Pipes inside backtick code spans are left alone, and so is any character
    that is already backslash-escaped. The result is stripped.

    Examples
    --------
        >>> escape_table_cell_line("A | B")
        'A \\| B'
        >>> escape_table_cell_line("`foo|bar`")
        '`foo|bar`'

    """
    if not line:
        return ""

    out: list[str] = []
    index = 0
    length = len(line)
    code_fence = 0

    while index < length:
        char = line[index]

        if char == "\\":
            out.append(line[index : index + 2])
            index += 2
            continue

        if char == "`":
            run = 1
            while index + run < length and line[index + run] == "`":
                run += 1
            out.append("`" * run)
            index += run
            if not code_fence:
                if _has_closing_run(line, index, run):
                    code_fence = run
            elif run == code_fence:
                code_fence = 0
            continue

        if char == "|" and not code_fence:
            out.append("\\|")
        else:
            out.append(char)
        index += 1

    return "".join(out).strip()
