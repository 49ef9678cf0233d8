#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for HTML to Markdown conversion.

Options are immutable frozen dataclasses. Use ``create_updated`` to derive a
modified copy instead of mutating an instance.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any, get_args

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from llmdocs.constants import DEFAULT_MAX_BLANK_LINES, MIN_CODE_FENCE_LENGTH, HtmlParser
from llmdocs.exceptions import ValidationError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        Raises
        ------
        ValidationError
            If a keyword does not name an option field.

        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ValidationError(
                f"Unknown option(s) for {type(self).__name__}: {', '.join(unknown)}",
                parameter_name=unknown[0],
                parameter_value=kwargs[unknown[0]],
            )
        return replace(self, **kwargs)


@dataclass(frozen=True)
class HtmlToMarkdownOptions(CloneFrozenMixin):
    """Options controlling HTML to Markdown conversion.

    Parameters
    ----------
    html_parser : {"html.parser", "html5lib", "lxml"}, default "html.parser"
        BeautifulSoup tree builder used to parse the input.
    detect_code_language : bool, default True
        Emit a language info string on fenced code blocks when the markup
        carries a ``language-*``/``lang-*`` class or a ``data-lang`` attribute.
    max_blank_lines : int, default 2
        Maximum run of consecutive blank lines kept outside fenced code.
    min_code_fence_length : int, default 3
        Minimum backtick count for fenced code blocks.

    """

    html_parser: HtmlParser = field(
        default="html.parser",
        metadata={
            "help": "BeautifulSoup parser to use: 'html.parser' (built-in), "
            "'html5lib' (browser-compatible, slower) or 'lxml' (fast, C library)",
            "choices": list(get_args(HtmlParser)),
        },
    )
    detect_code_language: bool = field(
        default=True,
        metadata={"help": "Add a language info string to fenced code detected from class/data attributes"},
    )
    max_blank_lines: int = field(
        default=DEFAULT_MAX_BLANK_LINES,
        metadata={"help": "Maximum consecutive blank lines kept outside code fences", "type": int},
    )
    min_code_fence_length: int = field(
        default=MIN_CODE_FENCE_LENGTH,
        metadata={"help": "Minimum number of backticks in a fenced code block", "type": int},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValidationError
            If any field value is outside its valid range.

        """
        if self.html_parser not in get_args(HtmlParser):
            raise ValidationError(
                f"html_parser must be one of {', '.join(get_args(HtmlParser))}, got {self.html_parser!r}",
                parameter_name="html_parser",
                parameter_value=self.html_parser,
            )
        if self.max_blank_lines < 1:
            raise ValidationError(
                f"max_blank_lines must be at least 1, got {self.max_blank_lines}",
                parameter_name="max_blank_lines",
                parameter_value=self.max_blank_lines,
            )
        if self.min_code_fence_length < MIN_CODE_FENCE_LENGTH:
            raise ValidationError(
                f"min_code_fence_length must be at least {MIN_CODE_FENCE_LENGTH}, got {self.min_code_fence_length}",
                parameter_name="min_code_fence_length",
                parameter_value=self.min_code_fence_length,
            )
