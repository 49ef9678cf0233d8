"""Property-based tests for conversion invariants.

These tests use Hypothesis to generate HTML inputs and check properties that
must hold for every document:

- Fenced code blocks use a fence longer than any backtick run in the code
- Inline code spans cannot be closed early by their content
- Ordered list numbering follows ``start`` and ``value`` attributes
- Table separator rows match the header cell count
- Links with disallowed schemes never reach the output
- Output never has trailing whitespace or edge blank lines
"""

import html

import pytest
from hypothesis import given
from hypothesis import strategies as st

from llmdocs import html_to_markdown
from llmdocs.utils.security import is_safe_link_destination
from llmdocs.utils.text import longest_run

code_text = st.text(alphabet="`ab \n", min_size=1, max_size=40)
cell_text = st.text(alphabet="abcxyz ", max_size=6)
span_value = st.sampled_from([None, "1", "2", "3", "0", "x"])


def _mixed_case(word):
    return st.tuples(*[st.sampled_from([c.lower(), c.upper()]) for c in word]).map("".join)


unsafe_scheme = st.sampled_from(["javascript", "vbscript", "data", "file", "chrome", "about"]).flatmap(_mixed_case)
safe_scheme = st.sampled_from(["http", "https", "mailto", "ftp", "tel"]).flatmap(_mixed_case)
url_path = st.text(alphabet="abc/()?=#", max_size=12)


@pytest.mark.property
class TestCodeProperties:
    """Fence selection for block and inline code."""

    @given(code_text)
    def test_block_fence_is_longer_than_any_backtick_run(self, code):
        markdown = html_to_markdown(f"<pre><code>{html.escape(code)}</code></pre>")
        lines = markdown.split("\n")
        fence = "`" * max(3, longest_run(code) + 1)

        assert lines[0] == fence
        assert lines[-1] == fence
        assert longest_run("\n".join(lines[1:-1])) < len(fence)

    @given(st.text(alphabet="`ab ", min_size=1, max_size=20))
    def test_inline_code_span_is_closed_by_its_own_fence(self, text):
        markdown = html_to_markdown(f"<p><code>{html.escape(text)}</code></p>")
        content = text.strip()
        if not content:
            assert markdown == ""
            return

        fence = "`" * (longest_run(content) + 1)
        assert markdown.startswith(fence)
        assert markdown.endswith(fence)
        inner = markdown[len(fence) : -len(fence)]
        assert inner.strip(" ") == content
        assert longest_run(inner) < len(fence)


@pytest.mark.property
class TestListProperties:
    @given(
        start=st.integers(min_value=-5, max_value=50),
        count=st.integers(min_value=1, max_value=6),
        override=st.one_of(st.none(), st.tuples(st.integers(min_value=0, max_value=5), st.integers(0, 99))),
    )
    def test_numbering_follows_start_and_value(self, start, count, override):
        items = []
        for index in range(count):
            value = ""
            if override is not None and override[0] == index:
                value = f' value="{override[1]}"'
            items.append(f"<li{value}>item{index}</li>")
        markdown = html_to_markdown(f'<ol start="{start}">{"".join(items)}</ol>')

        expected = []
        number = start
        for index in range(count):
            if override is not None and override[0] == index:
                number = override[1]
            expected.append(f"{number}. item{index}")
            number += 1
        assert markdown.split("\n") == expected


@pytest.mark.property
class TestTableProperties:
    @given(
        st.lists(
            st.lists(st.tuples(cell_text, span_value, span_value), min_size=1, max_size=4),
            min_size=1,
            max_size=4,
        )
    )
    def test_separator_matches_header_cell_count(self, rows):
        parts = ["<table>"]
        for row in rows:
            parts.append("<tr>")
            for text, rowspan, colspan in row:
                attrs = ""
                if rowspan is not None:
                    attrs += f' rowspan="{rowspan}"'
                if colspan is not None:
                    attrs += f' colspan="{colspan}"'
                parts.append(f"<td{attrs}>{text}</td>")
            parts.append("</tr>")
        parts.append("</table>")

        lines = html_to_markdown("".join(parts)).split("\n")
        header, separator = lines[0], lines[1]

        assert set(separator) <= {"|", "-"}
        assert header.count("|") == separator.count("|")


@pytest.mark.property
class TestLinkSafetyProperties:
    @given(scheme=unsafe_scheme, path=url_path)
    def test_disallowed_schemes_are_dropped(self, scheme, path):
        href = f"{scheme}:{path}"
        markdown = html_to_markdown(f'<p>before <a href="{html.escape(href)}">label</a> after</p>')
        assert "](" not in markdown
        assert "label" not in markdown
        assert markdown == "before after"

    @given(scheme=safe_scheme, path=url_path)
    def test_allowed_schemes_are_kept(self, scheme, path):
        href = f"{scheme}:{path}"
        markdown = html_to_markdown(f'<p><a href="{html.escape(href)}">label</a></p>')
        assert markdown.startswith("[label](")

    @given(st.sampled_from(["#", "/", "./", "../"]), st.text(max_size=20))
    def test_relative_prefixes_are_safe(self, prefix, rest):
        assert is_safe_link_destination(prefix + rest)


@pytest.mark.property
class TestOutputProperties:
    @given(
        st.lists(
            st.sampled_from(
                [
                    "<p>para</p>",
                    "<br>",
                    "<h2>head</h2>",
                    "<ul><li>a<ul><li>b</li></ul></li></ul>",
                    "<pre>x\n\n\n\ny</pre>",
                    "<blockquote>q</blockquote>",
                    "  \n\n ",
                    "text ",
                    "<p>a<br><br><br><br>b</p>",
                ]
            ),
            max_size=8,
        )
    )
    def test_output_is_normalized(self, fragments):
        markdown = html_to_markdown("".join(fragments))

        assert markdown == markdown.strip("\n")
        for line in markdown.split("\n"):
            assert line == line.rstrip(" \t")
