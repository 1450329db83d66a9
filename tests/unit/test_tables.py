"""Unit tests for table classification, parsing and rendering."""

import pytest

from html2gmi.media import MediaResolver
from html2gmi.tables import TableCell, TableModel, TableReducer, TableRow, parse_table, render_table
from html2gmi.text import TextExtractor


@pytest.mark.unit
class TestLayoutDetection:
    """Test the layout-table heuristic."""

    def test_single_row_is_layout(self, soup):
        table = soup("<table><tr><td>A</td><td>B</td><td>C</td></tr></table>").table

        assert TableReducer.is_layout_table(table)

    def test_short_table_with_single_first_cell_is_layout(self, soup):
        table = soup(
            "<table><tr><td>Banner</td></tr><tr><td>Left</td><td>Right</td></tr><tr><td>x</td><td>y</td></tr></table>"
        ).table

        assert TableReducer.is_layout_table(table)

    def test_two_by_two_is_data(self, soup):
        table = soup("<table><tr><td>A</td><td>B</td></tr><tr><td>1</td><td>2</td></tr></table>").table

        assert not TableReducer.is_layout_table(table)

    def test_four_rows_with_single_first_cell_is_data(self, soup):
        rows = "<tr><td>Title</td></tr>" + "<tr><td>a</td><td>b</td></tr>" * 3
        table = soup(f"<table>{rows}</table>").table

        assert not TableReducer.is_layout_table(table)

    def test_nested_table_rows_not_counted(self, soup):
        table = soup(
            "<table><tr><td><table><tr><td>a</td></tr><tr><td>b</td></tr></table></td></tr></table>"
        ).table

        assert TableReducer.is_layout_table(table)


@pytest.mark.unit
class TestReduce:
    """Test layout-table flattening."""

    def test_reduce_returns_cell_children_in_order(self, soup):
        table = soup("<table><tr><td>A</td><td><b>B</b></td></tr></table>").table

        nodes = TableReducer.reduce(table)

        assert [str(node) for node in nodes] == ["A", "<b>B</b>"]

    def test_reduce_does_not_mutate_table(self, soup):
        table = soup("<table><tr><td>A</td><td><b>B</b></td></tr></table>").table

        TableReducer.reduce(table)

        assert len(table.find_all("td")) == 2
        assert table.find("b").parent.name == "td"


@pytest.mark.unit
class TestParseTable:
    """Test parsing into the table model."""

    def test_header_from_th_row(self, soup):
        table = soup(
            "<table><tr><th>Name</th><th>Age</th></tr><tr><td>Alice</td><td>30</td></tr></table>"
        ).table

        model = parse_table(table)

        assert [cell.text for cell in model.header.cells] == ["Name", "Age"]
        assert [[cell.text for cell in row.cells] for row in model.rows] == [["Alice", "30"]]

    def test_header_from_thead(self, soup):
        table = soup(
            "<table><thead><tr><td>H1</td><td>H2</td></tr></thead>"
            "<tbody><tr><td>a</td><td>b</td></tr></tbody></table>"
        ).table

        model = parse_table(table)

        assert model.header is not None
        assert len(model.rows) == 1

    def test_caption_and_aria_label(self, soup):
        captioned = soup("<table><caption> Scores </caption><tr><td>a</td></tr></table>").table
        labelled = soup('<table aria-label="Results"><tr><td>a</td></tr></table>').table

        assert parse_table(captioned).caption == "Scores"
        assert parse_table(labelled).caption == "Results"

    def test_spans_parsed_and_malformed_spans_clamped(self, soup):
        table = soup('<table><tr><td colspan="2">wide</td><td rowspan="x">odd</td></tr></table>').table

        cells = parse_table(table).rows[0].cells

        assert (cells[0].colspan, cells[0].rowspan) == (2, 1)
        assert (cells[1].colspan, cells[1].rowspan) == (1, 1)

    def test_empty_table(self, soup):
        model = parse_table(soup("<table><tr><td> </td></tr></table>").table)

        assert model.is_empty

    def test_cell_images_collected_with_media_resolver(self, soup):
        table = soup(
            "<table><tr><td>a</td><td><img src='/one.png' alt='One'></td></tr>"
            "<tr><td><img src='/two.png'></td><td>b</td></tr></table>"
        ).table

        model = parse_table(table, TextExtractor(media=MediaResolver("https://example.com/")))

        assert [image.source for image in model.images] == ["https://example.com/one.png", "https://example.com/two.png"]
        assert model.rows[0].cells[1].text == ""

    def test_cell_images_ignored_without_media_resolver(self, soup):
        table = soup("<table><tr><td>a</td><td><img src='/one.png'></td></tr></table>").table

        assert parse_table(table).images == []


@pytest.mark.unit
class TestRenderTable:
    """Test fixed-width grid rendering."""

    def test_render_with_header(self):
        model = TableModel(
            header=TableRow([TableCell("Name", is_header=True), TableCell("Age", is_header=True)]),
            rows=[TableRow([TableCell("Alice"), TableCell("30")])],
        )

        assert render_table(model) == (
            "+-------+-----+\n"
            "| Name  | Age |\n"
            "+=======+=====+\n"
            "| Alice | 30  |\n"
            "+-------+-----+"
        )

    def test_render_without_header(self):
        model = TableModel(rows=[TableRow([TableCell("a"), TableCell("bb")]), TableRow([TableCell("ccc")])])

        assert render_table(model) == (
            "+-----+----+\n"
            "| a   | bb |\n"
            "+-----+----+\n"
            "| ccc |    |\n"
            "+-----+----+"
        )

    def test_colspan_occupies_columns(self):
        model = TableModel(
            header=TableRow([TableCell("A", colspan=2, is_header=True)]),
            rows=[TableRow([TableCell("x"), TableCell("y")])],
        )

        assert render_table(model) == "+---+---+\n| A |   |\n+===+===+\n| x | y |\n+---+---+"

    def test_rowspan_shifts_following_cells(self):
        model = TableModel(
            rows=[
                TableRow([TableCell("tall", rowspan=2), TableCell("1")]),
                TableRow([TableCell("2")]),
            ]
        )

        assert render_table(model).splitlines()[3] == "|      | 2 |"

    def test_render_is_deterministic(self):
        model = TableModel(rows=[TableRow([TableCell("a"), TableCell("b")])])

        assert render_table(model) == render_table(model)

    def test_render_empty_model(self):
        assert render_table(TableModel()) == ""
