#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/html2gmi/tables.py
"""Table classification, flattening and fixed-width rendering.

HTML tables are used for two very different things. Layout tables only
position content on screen; their cells are hoisted out and converted as
ordinary flow content. Data tables are parsed into a :class:`TableModel` and
rendered as a grid table inside a preformatted block.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from bs4.element import Tag

from html2gmi.dom import get_aria_label, get_int_attr, should_skip
from html2gmi.models import ImageLink
from html2gmi.text import TextExtractor

logger = logging.getLogger(__name__)

# Spans larger than this are treated as malformed and clamped
_MAX_SPAN = 1000


@dataclass
class TableCell:
    """A single table cell with its plain text."""

    text: str
    colspan: int = 1
    rowspan: int = 1
    is_header: bool = False


@dataclass
class TableRow:
    """An ordered list of cells."""

    cells: list[TableCell] = field(default_factory=list)

    @property
    def is_header(self) -> bool:
        """True when every cell is a header cell."""
        return bool(self.cells) and all(cell.is_header for cell in self.cells)


@dataclass
class TableModel:
    """Rows and caption of a data table.

    Parameters
    ----------
    rows : list of TableRow
        Body rows in document order
    header : TableRow or None
        Header row, rendered above a double rule
    caption : str
        Caption text, or the table's ``aria-label`` when it has no caption
    images : list of ImageLink
        Images found in the cells, in document order. Only filled when the
        extractor has a media resolver.

    """

    rows: list[TableRow] = field(default_factory=list)
    header: Optional[TableRow] = None
    caption: str = ""
    images: list[ImageLink] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when the table has no cells with any text."""
        all_rows = ([self.header] if self.header else []) + self.rows
        return not any(cell.text for row in all_rows for cell in row.cells)


def table_rows(table: Tag) -> list[Tag]:
    """Return the ``<tr>`` elements belonging to ``table`` itself (not nested tables)."""
    return [row for row in table.find_all("tr") if row.find_parent("table") is table]


def row_cells(row: Tag) -> list[Tag]:
    """Return the ``<td>``/``<th>`` cells of a row."""
    return row.find_all(["td", "th"], recursive=False)


class TableReducer:
    """Detect and flatten layout tables."""

    @staticmethod
    def is_layout_table(table: Tag) -> bool:
        """Determine whether a table is only used for layout.

        A table is a layout table when it has a single row, or at most three
        rows with a single cell in the first row. A table without rows has
        nothing tabular to render and is also treated as layout.
        """
        rows = table_rows(table)
        if len(rows) <= 1:
            return True
        return len(rows) <= 3 and len(row_cells(rows[0])) == 1

    @staticmethod
    def reduce(table: Tag) -> list[Any]:
        """Return the child nodes of every cell, in document order.

        The table itself is left untouched; the returned nodes are still
        attached to their cells.
        """
        nodes: list[Any] = []
        caption = table.find("caption")
        if isinstance(caption, Tag) and caption.find_parent("table") is table:
            nodes.append(caption)
        for row in table_rows(table):
            for cell in row_cells(row):
                nodes.extend(cell.children)
        return nodes


def _span(cell: Tag, attr: str) -> int:
    value = get_int_attr(cell, attr)
    if value is None or value < 1:
        return 1
    return min(value, _MAX_SPAN)


def parse_table(table: Tag, extractor: Optional[TextExtractor] = None) -> TableModel:
    """Parse a data table into a :class:`TableModel`.

    Parameters
    ----------
    table : Tag
        The ``<table>`` element
    extractor : TextExtractor, optional
        Extractor used for cell and caption text

    Returns
    -------
    TableModel
        The parsed table. The first row becomes the header when it sits in a
        ``<thead>`` or consists only of ``<th>`` cells.

    """
    extractor = extractor or TextExtractor()
    model = TableModel()

    caption = table.find("caption")
    if isinstance(caption, Tag) and caption.find_parent("table") is table and not should_skip(caption):
        model.caption = extractor.extract(caption)
    if not model.caption:
        model.caption = get_aria_label(table)

    for index, row in enumerate(table_rows(table)):
        if should_skip(row):
            continue

        parsed = TableRow()
        for cell in row_cells(row):
            if should_skip(cell):
                continue
            parsed.cells.append(
                TableCell(
                    text=extractor.extract(cell),
                    colspan=_span(cell, "colspan"),
                    rowspan=_span(cell, "rowspan"),
                    is_header=cell.name == "th",
                )
            )
            model.images.extend(extractor.images)

        if not parsed.cells:
            continue

        in_thead = row.find_parent("thead") is not None
        if index == 0 and model.header is None and (in_thead or parsed.is_header):
            model.header = parsed
        else:
            model.rows.append(parsed)

    return model


def _layout_grid(rows: list[TableRow]) -> list[list[str]]:
    """Expand spanned cells into a rectangular grid of strings."""
    num_rows = len(rows)
    num_cols = 0
    for row in rows:
        num_cols = max(num_cols, sum(cell.colspan for cell in row.cells))

    grid = [["" for _ in range(num_cols)] for _ in range(num_rows)]
    occupied = [[False] * num_cols for _ in range(num_rows)]

    for row_idx, row in enumerate(rows):
        col_idx = 0
        for cell in row.cells:
            while col_idx < num_cols and occupied[row_idx][col_idx]:
                col_idx += 1
            if col_idx >= num_cols:
                break

            grid[row_idx][col_idx] = cell.text
            for r in range(row_idx, min(row_idx + cell.rowspan, num_rows)):
                for c in range(col_idx, min(col_idx + cell.colspan, num_cols)):
                    occupied[r][c] = True

            col_idx += cell.colspan

    return grid


def render_table(model: TableModel) -> str:
    """Render a table model as a grid table.

    Column widths are the widest cell text in each column. A header row is
    separated from the body by a ``=`` rule, every other row by a ``-`` rule.

    Examples
    --------
    >>> model = TableModel(rows=[TableRow([TableCell("a"), TableCell("bb")])])
    >>> print(render_table(model))
    +---+----+
    | a | bb |
    +---+----+

    """
    rows = ([model.header] if model.header else []) + model.rows
    if not rows:
        return ""

    grid = _layout_grid(rows)
    if not grid or not grid[0]:
        return ""

    col_widths = [0] * len(grid[0])
    for grid_row in grid:
        for i, text in enumerate(grid_row):
            col_widths[i] = max(col_widths[i], len(text))

    separator = "+" + "+".join("-" * (width + 2) for width in col_widths) + "+"
    header_separator = "+" + "+".join("=" * (width + 2) for width in col_widths) + "+"

    lines = [separator]
    for i, grid_row in enumerate(grid):
        cells = [f" {text.ljust(col_widths[j])} " for j, text in enumerate(grid_row)]
        lines.append("|" + "|".join(cells) + "|")
        lines.append(header_separator if i == 0 and model.header else separator)

    return "\n".join(lines)


__all__ = [
    "TableCell",
    "TableModel",
    "TableReducer",
    "TableRow",
    "parse_table",
    "render_table",
    "row_cells",
    "table_rows",
]
