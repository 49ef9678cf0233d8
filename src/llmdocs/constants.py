#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the llmdocs library.

This module centralizes the fixed lookup tables and default configuration
values used by the HTML to Markdown converter. All tables are immutable.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Tag Classification - Block, container, inline and ignored tag sets
3. Markdown Formatting - Escaping, fences and blank-line limits
4. Security Constants - Link destination scheme allow-list
5. CLI - Environment variables and exit codes
"""

from __future__ import annotations

import re
from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

HtmlParser = Literal["html.parser", "html5lib", "lxml"]

# =============================================================================
# Tag Classification
# =============================================================================

HEADING_LEVELS: dict[str, int] = {
    "h1": 1,
    "h2": 2,
    "h3": 3,
    "h4": 4,
    "h5": 5,
    "h6": 6,
}

# Transparent containers render their children as blocks
BLOCK_CONTAINERS = frozenset(
    {"div", "aside", "figure", "article", "section", "main", "header", "footer", "nav", "body", "html"}
)

BLOCK_TAGS = frozenset({"p", "pre", "ul", "ol", "dl", "table", "blockquote", "hr", "figcaption"})

LIST_TAGS = frozenset({"ul", "ol"})

INLINE_STRONG_TAGS = frozenset({"strong", "b"})
INLINE_EM_TAGS = frozenset({"em", "i"})

# Elements whose content never reaches the output
IGNORE_TAGS = frozenset({"script", "style", "head", "noscript", "iframe", "svg", "canvas", "template"})

TABLE_CELL_TAGS = frozenset({"th", "td"})

# Class tokens on highlighted code figures that never name a language
GENERIC_CODE_CLASSES = frozenset(
    {"highlight", "code", "main", "gutter", "numbers", "line-numbers", "line-number", "line", "wrap", "table"}
)

LANGUAGE_ATTRIBUTES = ("data-language", "data-lang", "lang")

# =============================================================================
# Markdown Formatting
# =============================================================================

# Characters escaped in link labels and image alt text
MARKDOWN_LABEL_ESCAPE_PATTERN = re.compile(r"[\\\[\]()*_`!]")

# ASCII whitespace only; non-breaking spaces survive collapsing
WHITESPACE_RUN_PATTERN = re.compile(r"[ \t\r\n\f\v]+")

MIN_CODE_FENCE_LENGTH = 3
DEFAULT_MAX_BLANK_LINES = 2
FENCE_CHARS = ("`", "~")

LIST_INDENT = "  "
UNORDERED_LIST_MARKER = "-"
THEMATIC_BREAK = "---"

# Code fence language identifier security (markdown injection prevention)
SAFE_LANGUAGE_IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z0-9_+\-.#]+$")
LANGUAGE_CLASS_PATTERN = re.compile(r"^(?:language|lang)-(.+)$", re.IGNORECASE)

# =============================================================================
# Security Constants
# =============================================================================

SAFE_LINK_SCHEMES = frozenset({"http", "https", "mailto", "ftp", "tel"})

DANGEROUS_SCHEME_PATTERN = re.compile(r"^(?:javascript|vbscript|data)\s*:", re.IGNORECASE)
URI_SCHEME_PATTERN = re.compile(r"^([a-z][a-z0-9+\-.]*):", re.IGNORECASE)

RELATIVE_URL_PREFIXES = ("#", "/", "./", "../")

# Control characters and spaces browsers discard while resolving a scheme
URL_SCHEME_NOISE_PATTERN = re.compile(r"[\x00-\x20\x7f]+")

# =============================================================================
# CLI
# =============================================================================

ENV_HTML_PARSER = "LLMDOCS_HTML_PARSER"
ENV_LOG_LEVEL = "LLMDOCS_LOG_LEVEL"

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_DEPENDENCY_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
