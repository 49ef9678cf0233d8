#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/llmdocs/converters/tables.py
"""HTML table to Markdown table rendering.

Each ``<table>`` is rendered in one of four modes:

1. The table contains a nested ``<table>``: nested tables cannot be
   flattened, so the original HTML is emitted verbatim.
2. Some cell has a significant ``rowspan``: the full grid is expanded,
   spanned positions become empty placeholder cells and multi-line cells
   expand into additional rows.
3. Some cell has a significant ``colspan``: every row is rendered with its
   own cells only, with literal pipes escaped. Multi-line cells expand into
   additional rows as in the rowspan grid.
4. Otherwise the standard grid is rendered. Columns holding multi-line
   cells are padded to a common width.

In every mode the separator row has exactly as many cells as the header row.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from llmdocs.constants import TABLE_CELL_TAGS
from llmdocs.dom import Node
from llmdocs.utils.escape import escape_table_cell_line
from llmdocs.utils.text import normalize_line_endings, parse_integer

logger = logging.getLogger(__name__)

BlockRenderer = Callable[[list[Node]], str]
InlineCollapser = Callable[[Node], str]


def is_significant_span(raw: Optional[str]) -> bool:
    """Return True when a ``rowspan``/``colspan`` value changes the table layout.

    Absent attributes and an explicit ``1`` are insignificant. Anything else
    (empty, non-numeric, zero, negative or greater than one) is significant.
    """
    if raw is None:
        return False
    return raw.strip() != "1"


def _span(raw: Optional[str]) -> int:
    value = parse_integer(raw)
    return value if value is not None and value > 0 else 1


@dataclass
class TableRow:
    header: bool
    cells: list[Node]
    values: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CellLines:
    """Cell content split into display lines, blank lines removed."""

    lines: tuple[str, ...]

    @classmethod
    def from_value(cls, value: str) -> CellLines:
        lines = tuple(
            escaped
            for escaped in (escape_table_cell_line(line) for line in normalize_line_endings(value).split("\n"))
            if escaped.strip()
        )
        return cls(lines or ("",))

    @property
    def width(self) -> int:
        return max(len(line) for line in self.lines)


@dataclass(frozen=True)
class ColumnSpec:
    width: int
    pad: bool


def _pad_row(values: list[str], length: int) -> list[str]:
    return (values + [""] * length)[:length]


def _separator(widths: list[int]) -> str:
    return "|" + "|".join("-" * max(width + 2, 3) for width in widths) + "|"


def _bordered(content: str) -> str:
    return f"| {content or ' '} |"


class TableRenderer:
    """Render ``<table>`` elements as Markdown tables.

    Parameters
    ----------
    block_renderer : callable
        Renders a list of nodes as Markdown blocks; used for cell content.
    inline_collapser : callable
        Renders a node's children as a collapsed inline string; used for
        captions and cells without block content.

    """

    def __init__(self, block_renderer: BlockRenderer, inline_collapser: InlineCollapser):
        self._render_blocks = block_renderer
        self._collapse_inline = inline_collapser

    def render(self, table: Node) -> str:
        if table.find_tag("table") is not None:
            logger.debug("Table contains a nested table; emitting raw HTML")
            return table.outer_html

        rows = self._collect_rows(table)
        cells = [cell for row in rows for cell in row.cells]

        if any(is_significant_span(cell.get("rowspan")) for cell in cells):
            logger.debug("Rendering table with rowspan cells as an expanded grid")
            markdown = self._render_rowspan_table(rows)
        elif any(is_significant_span(cell.get("colspan")) for cell in cells):
            logger.debug("Rendering table with colspan cells row by row")
            markdown = self._render_colspan_table(rows)
        else:
            markdown = self._render_standard_table(rows)

        if markdown is None:
            return table.outer_html if cells else ""

        caption = self._caption_text(table)
        return f"{caption}\n\n{markdown}" if caption else markdown

    def render_cell(self, cell: Node) -> str:
        content = self._render_blocks(cell.children).strip()
        return content or self._collapse_inline(cell)

    def _collect_rows(self, table: Node) -> list[TableRow]:
        rows: list[TableRow] = []
        for row in table.find_all(lambda node: node.tag == "tr"):
            cells = [child for child in row.element_children if child.tag in TABLE_CELL_TAGS]
            if not cells:
                continue
            header = row.has_ancestor("thead") or all(cell.tag == "th" for cell in cells)
            rows.append(TableRow(header=header, cells=cells))
        return rows

    def _caption_text(self, table: Node) -> str:
        caption = table.find_tag("caption")
        if caption is None:
            return ""
        return self._collapse_inline(caption).strip()

    @staticmethod
    def _header_index(rows: list[TableRow]) -> int:
        return next((index for index, row in enumerate(rows) if row.header), 0)

    # ------------------------------------------------------------------
    # Standard grid
    # ------------------------------------------------------------------

    def _render_standard_table(self, rows: list[TableRow]) -> Optional[str]:
        if not rows:
            return None
        for row in rows:
            row.values = [self.render_cell(cell) for cell in row.cells]

        header_index = self._header_index(rows)
        header_values = rows[header_index].values
        data_values = [row.values for index, row in enumerate(rows) if index != header_index]

        column_count = max([len(header_values)] + [len(values) for values in data_values]) or 1

        header_cells = [CellLines.from_value(value) for value in _pad_row(header_values, column_count)]
        data_cells = [
            [CellLines.from_value(value) for value in _pad_row(values, column_count)] for values in data_values
        ]

        specs = self._column_specs(header_cells, data_cells)
        lines = self._format_row(header_cells, specs)
        lines.append(_separator([spec.width for spec in specs]))
        for row_cells in data_cells:
            lines.extend(self._format_row(row_cells, specs))
        return "\n".join(lines)

    @staticmethod
    def _column_specs(header_cells: list[CellLines], data_cells: list[list[CellLines]]) -> list[ColumnSpec]:
        specs: list[ColumnSpec] = []
        for index, header_cell in enumerate(header_cells):
            column = [header_cell] + [row[index] for row in data_cells]
            pad = any(len(cell.lines) > 1 for cell in column)
            width = max(cell.width for cell in column) if pad else header_cell.width
            specs.append(ColumnSpec(width=max(width, 1), pad=pad))
        return specs

    @staticmethod
    def _format_row(cells: list[CellLines], specs: list[ColumnSpec]) -> list[str]:
        height = max(len(cell.lines) for cell in cells)
        lines: list[str] = []
        for line_index in range(height):
            values = []
            for cell, spec in zip(cells, specs):
                line = cell.lines[line_index] if line_index < len(cell.lines) else ""
                values.append(line.ljust(spec.width) if spec.pad else line)
            if all(not value.strip() for value in values):
                continue
            lines.append(f"| {' | '.join(values)} |")

        if not lines:
            lines.append(f"| {' | '.join(' ' * spec.width for spec in specs)} |")
        return lines

    # ------------------------------------------------------------------
    # Rowspan grid
    # ------------------------------------------------------------------

    def _render_rowspan_table(self, rows: list[TableRow]) -> Optional[str]:
        if not rows:
            return None

        span_slots: dict[int, int] = {}
        for row in rows:
            row.values = self._expand_row(row.cells, span_slots)

        column_count = max(len(row.values) for row in rows) or 1
        header_index = self._header_index(rows)

        header_values = _pad_row(rows[header_index].values, column_count)
        widths = [max(CellLines.from_value(value).width, 1) for value in header_values]

        lines = [_bordered(line) for line in self._multiline_row_text(header_values)]
        lines.append(_separator(widths))
        for index, row in enumerate(rows):
            if index == header_index:
                continue
            lines.extend(_bordered(line) for line in self._multiline_row_text(_pad_row(row.values, column_count)))
        return "\n".join(lines)

    def _expand_row(self, cells: list[Node], span_slots: dict[int, int]) -> list[str]:
        """Lay out one row, inserting placeholders for cells spanned from above.

        ``span_slots`` maps a column index to the number of further rows a
        previous cell still covers; it is updated in place.
        """
        values: list[str] = []
        column = 0

        def fill_spanned() -> None:
            nonlocal column
            while span_slots.get(column, 0) > 0:
                values.append("")
                span_slots[column] -= 1
                column += 1

        for cell in cells:
            fill_spanned()
            value = self.render_cell(cell)
            colspan = _span(cell.get("colspan"))
            rowspan = _span(cell.get("rowspan"))
            for offset in range(colspan):
                values.append(value if offset == 0 else "")
                span_slots[column + offset] = rowspan - 1
            column += colspan

        fill_spanned()
        return values

    @staticmethod
    def _multiline_row_text(values: list[str]) -> list[str]:
        """Join cells with `` | `` and spread multi-line cells over several lines.

        Within a column, every non-empty line is padded to the width of the
        column's longest line so that continuation lines stay aligned.
        """
        columns = [normalize_line_endings(escape_table_cell_line(value)).split("\n") for value in values]
        if not columns:
            return [""]

        widths = [max(len(segment) for segment in segments) for segments in columns]
        height = max(len(segments) for segments in columns)

        lines = []
        for line_index in range(height):
            row = []
            for segments, width in zip(columns, widths):
                segment = segments[line_index] if line_index < len(segments) else ""
                row.append(segment.ljust(width) if segment else segment)
            lines.append(" | ".join(row))
        return lines

    # ------------------------------------------------------------------
    # Colspan rows
    # ------------------------------------------------------------------

    def _render_colspan_table(self, rows: list[TableRow]) -> Optional[str]:
        if not rows:
            return None
        for row in rows:
            row.values = [self.render_cell(cell) for cell in row.cells]

        header_index = self._header_index(rows)
        header = rows[header_index]

        header_values: list[str] = []
        for cell, value in zip(header.cells, header.values):
            header_values.extend([value] + [""] * (_span(cell.get("colspan")) - 1))

        others = [len(row.values) for index, row in enumerate(rows) if index != header_index]
        column_count = max([len(header_values)] + others) or 1
        header_values = _pad_row(header_values, column_count)

        widths = [max(CellLines.from_value(value).width, 1) for value in header_values]
        lines = [_bordered(line) for line in self._multiline_row_text(header_values)]
        lines.append(_separator(widths))
        for index, row in enumerate(rows):
            if index == header_index:
                continue
            lines.extend(_bordered(line) for line in self._multiline_row_text(row.values))
        return "\n".join(lines)
