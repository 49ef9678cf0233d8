#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/llmdocs/converters/__init__.py
"""Renderers that turn parsed HTML into Markdown."""

from llmdocs.converters.html2markdown import HTMLToMarkdown, html_to_markdown

__all__ = ["HTMLToMarkdown", "html_to_markdown"]
