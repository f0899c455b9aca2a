"""Tests for converting ``<table>`` markup into tables."""

from __future__ import annotations

import pytest

from tablescrape.errors import RowShapeError
from tablescrape.extract.selector import select
from tablescrape.extract.tabular import extract_table, extract_tables
from tablescrape.scraper.parser import parse_html


def _table(markup: str):
    return select(parse_html(markup), tag="table")[0]


class TestExtractTable:
    def test_header_row_becomes_fields(self) -> None:
        table = extract_table(_table(
            "<table>"
            "<tr><th>Name</th><th>Score</th></tr>"
            "<tr><td>Alice</td><td>95</td></tr>"
            "<tr><td>Bob</td><td>88</td></tr>"
            "</table>"
        ))
        assert table.fields == ("Name", "Score")
        assert table.rows == (("Alice", "95"), ("Bob", "88"))

    def test_thead_and_tbody(self) -> None:
        table = extract_table(_table(
            "<table><thead><tr><th>A</th><th>B</th></tr></thead>"
            "<tbody><tr><td> 1 </td><td>\n2</td></tr></tbody></table>"
        ))
        assert table.fields == ("A", "B")
        assert table[0] == {"A": "1", "B": "2"}

    def test_no_header_names_fields_by_position(self) -> None:
        table = extract_table(
            _table("<table><tr><td>a</td><td>b</td></tr><tr><td>c</td></tr></table>"),
            header=False,
        )
        assert table.fields == ("X1", "X2")
        assert table.rows == (("a", "b"), ("c", ""))

    def test_short_row_padded_and_long_row_truncated(self) -> None:
        table = extract_table(_table(
            "<table>"
            "<tr><th>A</th><th>B</th></tr>"
            "<tr><td>1</td></tr>"
            "<tr><td>1</td><td>2</td><td>3</td></tr>"
            "</table>"
        ))
        assert table.rows == (("1", ""), ("1", "2"))

    def test_fill_false_raises_row_shape_error(self) -> None:
        node = _table(
            "<table>"
            "<tr><th>A</th><th>B</th></tr>"
            "<tr><td>1</td><td>2</td></tr>"
            "<tr><td>1</td></tr>"
            "</table>"
        )
        with pytest.raises(RowShapeError) as excinfo:
            extract_table(node, fill=False)
        assert excinfo.value.row == 1
        assert excinfo.value.expected == 2
        assert excinfo.value.actual == 1

    def test_colspan_repeats_text(self) -> None:
        table = extract_table(_table(
            "<table>"
            "<tr><th>A</th><th>B</th><th>C</th></tr>"
            "<tr><td colspan='2'>wide</td><td>3</td></tr>"
            "</table>"
        ))
        assert table[0] == {"A": "wide", "B": "wide", "C": "3"}

    def test_rowspan_carries_down(self) -> None:
        table = extract_table(_table(
            "<table>"
            "<tr><th>Region</th><th>Country</th></tr>"
            "<tr><td rowspan='2'>Africa</td><td>Nigeria</td></tr>"
            "<tr><td>Egypt</td></tr>"
            "<tr><td>Asia</td><td>Japan</td></tr>"
            "</table>"
        ))
        assert table.column("Region") == ["Africa", "Africa", "Asia"]
        assert table.column("Country") == ["Nigeria", "Egypt", "Japan"]

    def test_rowspan_carried_past_short_row(self) -> None:
        table = extract_table(_table(
            "<table>"
            "<tr><td rowspan='2'>a</td><td>b</td><td rowspan='2'>c</td></tr>"
            "<tr></tr>"
            "<tr><td>x</td><td>y</td><td>z</td></tr>"
            "</table>"
        ), header=False)
        assert table.rows == (("a", "b", "c"), ("a", "", "c"), ("x", "y", "z"))

    def test_invalid_span_treated_as_one(self) -> None:
        table = extract_table(_table(
            "<table><tr><th>A</th><th>B</th></tr>"
            "<tr><td colspan='x'>1</td><td rowspan='0'>2</td></tr></table>"
        ))
        assert table.rows == (("1", "2"),)

    def test_nested_table_rows_ignored(self) -> None:
        table = extract_table(_table(
            "<table>"
            "<tr><th>Outer</th></tr>"
            "<tr><td><table><tr><td>inner</td></tr></table></td></tr>"
            "</table>"
        ))
        assert len(table) == 1
        assert table.fields == ("Outer",)

    def test_blank_and_duplicate_header_names(self) -> None:
        table = extract_table(_table(
            "<table><tr><th></th><th>Value</th><th>Value</th></tr>"
            "<tr><td>1</td><td>2</td><td>3</td></tr></table>"
        ))
        assert table.fields == ("X1", "Value", "Value_2")

    def test_generated_names_avoid_existing_ones(self) -> None:
        table = extract_table(_table(
            "<table><tr><th>a</th><th>a</th><th>a_2</th><th></th><th>X4</th></tr>"
            "<tr><td>1</td><td>2</td><td>3</td><td>4</td><td>5</td></tr></table>"
        ))
        assert table.fields == ("a", "a_2", "a_2_2", "X4", "X4_2")

    def test_empty_table(self) -> None:
        table = extract_table(_table("<table></table>"))
        assert table.fields == ()
        assert len(table) == 0

    def test_trim_false_keeps_whitespace(self) -> None:
        table = extract_table(
            _table("<table><tr><th>A</th></tr><tr><td> x </td></tr></table>"),
            trim=False,
        )
        assert table.rows == ((" x ",),)


class TestExtractTables:
    def test_every_table_in_order(self) -> None:
        doc = parse_html(
            "<table><tr><th>A</th></tr><tr><td>1</td></tr></table>"
            "<table><tr><th>B</th></tr><tr><td>2</td></tr></table>"
        )
        tables = extract_tables(doc)
        assert [t.fields for t in tables] == [("A",), ("B",)]
