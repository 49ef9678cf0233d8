#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/llmdocs/utils/__init__.py
"""Utility modules for the llmdocs package.

This package contains the escaping, link-safety and text-normalization
helpers used by the HTML to Markdown renderers.
"""

from llmdocs.utils.escape import escape_markdown_label, format_link_destination
from llmdocs.utils.security import is_safe_link_destination
from llmdocs.utils.text import code_fence_for, normalize_output, squeeze_blank_lines_outside_fences

__all__ = [
    "escape_markdown_label",
    "format_link_destination",
    "is_safe_link_destination",
    "code_fence_for",
    "normalize_output",
    "squeeze_blank_lines_outside_fences",
]
