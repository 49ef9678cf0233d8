#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/llmdocs/utils/security.py
"""Link safety filtering for rendered Markdown.

No link or image in the output may point at a destination whose scheme is
not on the allow-list. When a link is rejected, the separator that usually
sits next to it in navigation bars ("Source: <a>show</a> | <a>GitHub</a>")
is pruned as well so that no dangling ``|`` is left behind.

Functions
---------
- is_safe_link_destination: Check a destination against the scheme allow-list
- sanitize_language_identifier: Validate a code fence info string language
- is_bare_separator: Detect separator-only text nodes
- TRAILING_SEPARATOR_PATTERN: Regex matching a dangling trailing ``|``

"""

from __future__ import annotations

import logging
import re

from llmdocs.constants import (
    DANGEROUS_SCHEME_PATTERN,
    RELATIVE_URL_PREFIXES,
    SAFE_LANGUAGE_IDENTIFIER_PATTERN,
    SAFE_LINK_SCHEMES,
    URI_SCHEME_PATTERN,
    URL_SCHEME_NOISE_PATTERN,
)

logger = logging.getLogger(__name__)

MAX_LANGUAGE_IDENTIFIER_LENGTH = 50

TRAILING_SEPARATOR_PATTERN = re.compile(r"[ \t]*\|\s*\Z")


def is_safe_link_destination(url: str | None) -> bool:
    """Check whether a link or image destination may be emitted.

    Relative destinations (``#``, ``/``, ``./``, ``../`` prefixes and plain
    paths without a scheme) are always safe. Otherwise the scheme must be
    one of ``http``, ``https``, ``mailto``, ``ftp`` or ``tel``. Control
    characters and spaces embedded in the scheme are ignored while checking,
    as browsers do, so ``java\\tscript:`` is rejected like ``javascript:``.

    Parameters
    ----------
    url : str or None
        Raw ``href``/``src`` attribute value

    Returns
    -------
    bool
        True if the destination is allowed

    Examples
    --------
    >>> is_safe_link_destination("https://example.com")
    True
    >>> is_safe_link_destination("../guide.html")
    True
    >>> is_safe_link_destination("JavaScript:alert(1)")
    False
    >>> is_safe_link_destination("file:///etc/passwd")
    False

    """
    if url is None:
        return False

    stripped = url.strip()
    if not stripped:
        return False
    if stripped.startswith(RELATIVE_URL_PREFIXES):
        return True

    compact = URL_SCHEME_NOISE_PATTERN.sub("", stripped)
    if DANGEROUS_SCHEME_PATTERN.match(compact):
        return False

    match = URI_SCHEME_PATTERN.match(compact)
    if match:
        return match.group(1).lower() in SAFE_LINK_SCHEMES
    return True


def is_bare_separator(text: str) -> bool:
    """Return True for text consisting only of a ``|`` and surrounding whitespace."""
    return text.strip() == "|"


def sanitize_language_identifier(language: str | None) -> str:
    r"""Sanitize a code fence language identifier.

    Parameters
    ----------
    language : str or None
        Raw language identifier taken from a class or data attribute

    Returns
    -------
    str
        The identifier, or an empty string if it contains characters that
        could break out of the fence info string

    Examples
    --------
    >>> sanitize_language_identifier("python")
    'python'
    >>> sanitize_language_identifier("c++")
    'c++'
    >>> sanitize_language_identifier("python\nmalicious")
    ''

    """
    if not language:
        return ""

    language = language.strip()
    if len(language) > MAX_LANGUAGE_IDENTIFIER_LENGTH:
        logger.debug("Dropping over-long code language identifier (%d chars)", len(language))
        return ""
    if not SAFE_LANGUAGE_IDENTIFIER_PATTERN.match(language):
        logger.debug("Dropping unsafe code language identifier: %r", language)
        return ""
    return language
