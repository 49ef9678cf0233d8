#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/llmdocs/cli.py
"""Command-line interface for the llmdocs HTML to Markdown converter.

Reads one HTML document from a file or standard input and writes the
Markdown rendering to a file or standard output.

Environment Variable Support
----------------------------
``LLMDOCS_HTML_PARSER`` and ``LLMDOCS_LOG_LEVEL`` provide defaults for
``--html-parser`` and ``--log-level``. CLI arguments always override
environment variables.

Examples
--------
Convert a file to standard output::

    $ llmdocs page.html

Specify output file::

    $ llmdocs page.html --out page.md

Read from a pipe using the html5lib parser::

    $ curl -s https://example.com | llmdocs --html-parser html5lib

"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, get_args

from llmdocs import __version__
from llmdocs.constants import (
    ENV_HTML_PARSER,
    ENV_LOG_LEVEL,
    EXIT_DEPENDENCY_ERROR,
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    HtmlParser,
)
from llmdocs.converters.html2markdown import HTMLToMarkdown
from llmdocs.exceptions import DependencyError, FileError, LlmDocsError, ValidationError
from llmdocs.logging_utils import configure_logging
from llmdocs.options import HtmlToMarkdownOptions

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser, taking defaults from the environment."""
    parser = argparse.ArgumentParser(
        prog="llmdocs",
        description="Convert HTML documents into clean Markdown for LLM consumption.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="HTML file to convert; '-' or omitted reads standard input",
    )
    parser.add_argument("--out", "-o", metavar="PATH", help="Write Markdown to PATH instead of standard output")
    parser.add_argument(
        "--html-parser",
        default=os.environ.get(ENV_HTML_PARSER, "html.parser"),
        help=f"BeautifulSoup parser: {', '.join(get_args(HtmlParser))} (env: {ENV_HTML_PARSER})",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=_LOG_LEVELS,
        default=os.environ.get(ENV_LOG_LEVEL, "WARNING").upper(),
        help=f"Logging level (env: {ENV_LOG_LEVEL})",
    )
    parser.add_argument("--log-file", metavar="PATH", help="Also write log records to PATH")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")
    parser.add_argument(
        "--no-code-language",
        dest="detect_code_language",
        action="store_false",
        help="Do not add language info strings to fenced code blocks",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    if isinstance(exception, (DependencyError, ImportError)):
        return EXIT_DEPENDENCY_ERROR
    if isinstance(exception, ValidationError):
        return EXIT_VALIDATION_ERROR
    if isinstance(exception, FileError):
        return EXIT_FILE_ERROR
    return EXIT_ERROR


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise FileError(f"Cannot read input file: {e.strerror or e}", file_path=str(path), original_error=e) from e


def _write_output(markdown: str, destination: Optional[str]) -> None:
    text = markdown + "\n" if markdown else ""
    if destination is None:
        sys.stdout.write(text)
        return
    path = Path(destination)
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise FileError(f"Cannot write output file: {e.strerror or e}", file_path=str(path), original_error=e) from e
    logger.info("Wrote %d characters to %s", len(text), path)


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return a process exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    log_level = logging.DEBUG if parsed_args.trace else parsed_args.log_level
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)

    try:
        options = HtmlToMarkdownOptions(
            html_parser=parsed_args.html_parser,
            detect_code_language=parsed_args.detect_code_language,
        )
        html = _read_input(parsed_args.input)
        logger.debug("Read %d characters from %s", len(html), parsed_args.input)
        markdown = HTMLToMarkdown(options).convert(html)
        _write_output(markdown, parsed_args.out)
    except LlmDocsError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return get_exit_code_for_exception(e)
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
