"""Unit tests for ordered, unordered and nested list rendering."""

import time

import pytest


@pytest.mark.unit
class TestListNumbering:
    """Test ordered list numbering rules."""

    def test_default_numbering(self, converter):
        assert converter.convert("<ol><li>A</li><li>B</li><li>C</li></ol>") == "1. A\n2. B\n3. C"

    def test_start_and_value_overrides(self, converter):
        html = """
        <ol start="3">
          <li>Starts at three</li>
          <li value="7">Jumps to seven</li>
          <li>Then eight</li>
        </ol>
        """
        assert converter.convert(html) == "3. Starts at three\n7. Jumps to seven\n8. Then eight"

    def test_zero_start_and_zero_override(self, converter):
        html = """
        <ol start="0">
          <li>Zero</li>
          <li>One</li>
          <li value="0">Reset to zero</li>
          <li>Back to one</li>
        </ol>
        """
        assert converter.convert(html) == "0. Zero\n1. One\n0. Reset to zero\n1. Back to one"

    def test_negative_start(self, converter):
        assert converter.convert('<ol start="-1"><li>A</li><li>B</li></ol>') == "-1. A\n0. B"

    @pytest.mark.parametrize("start", ["", "abc", "3px", "2.5"])
    def test_invalid_start_defaults_to_one(self, converter, start):
        assert converter.convert(f'<ol start="{start}"><li>A</li><li>B</li></ol>') == "1. A\n2. B"

    def test_invalid_value_is_ignored(self, converter):
        html = '<ol start="5"><li>A</li><li value="x">B</li></ol>'
        assert converter.convert(html) == "5. A\n6. B"

    def test_start_is_ignored_on_unordered_lists(self, converter):
        assert converter.convert('<ul start="4"><li>A</li></ul>') == "- A"

    def test_nested_list_has_independent_counter(self, converter):
        html = '<ol><li>One<ol start="5"><li>Five</li><li>Six</li></ol></li><li>Two</li></ol>'
        assert converter.convert(html) == "1. One\n  5. Five\n  6. Six\n2. Two"

    def test_sibling_lists_restart_numbering(self, converter):
        assert converter.convert("<ol><li>A</li></ol><ol><li>B</li></ol>") == "1. A\n\n1. B"


@pytest.mark.unit
class TestNestedLists:
    """Test nesting and indentation."""

    def test_nested_list(self, converter):
        html = """
        <ul>
          <li>
            Parent
            <ul>
              <li>Child</li>
            </ul>
          </li>
        </ul>
        """
        assert converter.convert(html) == "- Parent\n  - Child"

    def test_all_nested_items_are_indented(self, converter):
        html = """
        <ul>
          <li>
            Parent
            <ul>
              <li>Child 1</li>
              <li>Child 2</li>
              <li>Child 3</li>
            </ul>
          </li>
        </ul>
        """
        assert converter.convert(html) == "- Parent\n  - Child 1\n  - Child 2\n  - Child 3"

    def test_three_levels(self, converter):
        html = "<ul><li>A<ul><li>B<ul><li>C</li></ul></li></ul></li></ul>"
        assert converter.convert(html) == "- A\n  - B\n    - C"

    def test_mixed_ordered_inside_unordered(self, converter):
        html = "<ul><li>Steps<ol><li>First</li><li>Second</li></ol></li></ul>"
        assert converter.convert(html) == "- Steps\n  1. First\n  2. Second"

    def test_item_starting_with_nested_list(self, converter):
        assert converter.convert("<ul><li><ul><li>Child</li></ul></li></ul>") == "-\n  - Child"

    def test_empty_item_keeps_marker(self, converter):
        assert converter.convert("<ul><li></li><li>B</li></ul>") == "-\n- B"

    def test_whitespace_between_items_is_ignored(self, converter):
        assert converter.convert("<ul>\n  <li>A</li>\n  <li>B</li>\n</ul>") == "- A\n- B"


@pytest.mark.unit
class TestListItemBlocks:
    """Test block content inside list items."""

    def test_block_descendants(self, converter):
        html = """
        <ul>
          <li>
            <p>Intro</p>
            <pre><code>puts "hi"</code></pre>
            <blockquote><p>Note</p></blockquote>
          </li>
        </ul>
        """
        assert converter.convert(html) == '- Intro\n\n  ```\n  puts "hi"\n  ```\n\n  > Note'

    def test_paragraph_after_leading_text(self, converter):
        assert converter.convert("<ol><li>A<p>Para</p></li></ol>") == "1. A\n\n  Para"

    def test_block_then_nested_list_gets_blank_line(self, converter):
        html = "<ul><li>Intro<p>Para</p><ul><li>Sub</li></ul></li></ul>"
        assert converter.convert(html) == "- Intro\n\n  Para\n\n  - Sub"

    def test_list_inside_block_is_not_double_indented(self, converter):
        html = "<ul><li>Item<div><ul><li>Deep</li></ul></div></li></ul>"
        assert converter.convert(html) == "- Item\n\n  - Deep"

    def test_multiline_leading_block_is_not_pulled_onto_marker(self, converter):
        assert converter.convert("<ul><li><pre>code</pre></li></ul>") == "-\n\n  ```\n  code\n  ```"

    def test_leading_text_break_is_indented(self, converter):
        assert converter.convert("<ul><li>Line<br>Next</li></ul>") == "- Line\n  Next"

    def test_ordered_leading_text_break_aligns_with_content(self, converter):
        assert converter.convert("<ol><li>Line<br>Next</li></ol>") == "1. Line\n   Next"

    def test_inline_run_after_block(self, converter):
        assert converter.convert("<ul><li>Intro<p>Para</p>tail <em>end</em></li></ul>") == (
            "- Intro\n\n  Para\n\n  tail *end*"
        )

    def test_nested_item_with_blocks(self, converter):
        html = "<ul><li>Top<ul><li>Inner<p>Detail</p></li></ul></li></ul>"
        assert converter.convert(html) == "- Top\n  - Inner\n\n    Detail"

    def test_link_and_emphasis_in_items(self, converter):
        html = '<ul><li><a href="/a">A</a> and <strong>B</strong></li></ul>'
        assert converter.convert(html) == "- [A](/a) and **B**"


@pytest.mark.unit
class TestDeeplyNestedItems:
    """Item blocks wrapping further lists are rendered once per level."""

    @staticmethod
    def _nested_html(depth):
        return "<ul><li><div><p>x</p>" * depth + "<p>y</p>" + "</div></li></ul>" * depth

    def test_leading_block_rendered_once(self, converter, monkeypatch):
        from llmdocs.converters.html2markdown import _RenderSession

        calls = []
        original = _RenderSession.render_block

        def counting_render_block(self, node):
            if node.tag == "div":
                calls.append(node)
            return original(self, node)

        monkeypatch.setattr(_RenderSession, "render_block", counting_render_block)
        converter.convert(self._nested_html(6))
        assert len(calls) == 6

    def test_deep_nesting_renders_quickly(self, converter):
        depth = 30
        start = time.perf_counter()
        markdown = converter.convert(self._nested_html(depth))
        elapsed = time.perf_counter() - start

        assert elapsed < 5.0
        assert markdown.count("x") == depth
        assert markdown.endswith("y")
