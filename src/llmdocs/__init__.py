#  Copyright (c) 2025 Tom Villani, Ph.D.
"""llmdocs - clean HTML to Markdown conversion for LLM-ready documentation.

llmdocs turns real-world documentation HTML (nested lists, tables with
row/col spans, highlighted code figures, definition lists, unsafe links)
into predictable, well-formed Markdown.

Requirements
------------
- Python 3.10+
- beautifulsoup4; html5lib or lxml optionally, when selected as the parser

Examples
--------
Basic usage:

    >>> from llmdocs import convert
    >>> convert('<h1>Title</h1><p>Hello <strong>world</strong>.</p>')
    '# Title\\n\\nHello **world**.'

Custom options:

    >>> from llmdocs import HtmlToMarkdownOptions, convert
    >>> markdown = convert('<pre><code class="language-python">x = 1</code></pre>',
    ...                    HtmlToMarkdownOptions(detect_code_language=False))

"""

from llmdocs.converters.html2markdown import HTMLToMarkdown, html_to_markdown
from llmdocs.exceptions import DependencyError, FileError, LlmDocsError, ValidationError
from llmdocs.options import HtmlToMarkdownOptions

__version__ = "0.1.0"

convert = html_to_markdown

__all__ = [
    "__version__",
    "convert",
    "html_to_markdown",
    "HTMLToMarkdown",
    "HtmlToMarkdownOptions",
    "LlmDocsError",
    "ValidationError",
    "FileError",
    "DependencyError",
]
