"""Tests for the table model, the tabulator and serialization."""

from __future__ import annotations

from datetime import date

import pytest

from tablescrape.errors import FieldLengthMismatchError, RowShapeError, SchemaMismatchError
from tablescrape.extract.selector import select
from tablescrape.scraper.parser import parse_html
from tablescrape.table.models import Table
from tablescrape.table.serialize import from_csv, from_json, to_csv, to_json
from tablescrape.table.tabulate import tabulate


class TestTable:
    def test_records_share_schema(self) -> None:
        table = Table(fields=("a", "b"), rows=((1, 2), (3, 4)))
        assert [sorted(r) for r in table] == [["a", "b"], ["a", "b"]]
        assert table[1] == {"a": 3, "b": 4}
        assert table.records == [{"a": 1, "b": 2}, {"a": 3, "b": 4}]

    def test_row_width_checked(self) -> None:
        with pytest.raises(SchemaMismatchError):
            Table(fields=("a", "b"), rows=((1,),))

    def test_duplicate_fields_rejected(self) -> None:
        with pytest.raises(ValueError):
            Table(fields=("a", "a"))

    def test_default_labels(self) -> None:
        assert Table(fields=("a",), rows=((1,), (2,))).labels == (0, 1)

    def test_label_count_checked(self) -> None:
        with pytest.raises(ValueError):
            Table(fields=("a",), rows=((1,), (2,)), labels=(0,))

    def test_from_records(self) -> None:
        table = Table.from_records([{"x": 1, "y": "a"}, {"y": "b", "x": 2}])
        assert table.fields == ("x", "y")
        assert table.rows == ((1, "a"), (2, "b"))

    def test_from_records_schema_mismatch(self) -> None:
        with pytest.raises(SchemaMismatchError) as excinfo:
            Table.from_records([{"x": 1}, {"x": 2, "y": 3}])
        assert excinfo.value.index == 1

    def test_unknown_column(self) -> None:
        with pytest.raises(KeyError):
            Table(fields=("a",)).column("b")


class TestTabulate:
    def test_zips_columns_in_order(self) -> None:
        table = tabulate({"date": ["Jan 21", "Jan 23"], "lie": ["one", "two"]})
        assert table.fields == ("date", "lie")
        assert table.rows == (("Jan 21", "one"), ("Jan 23", "two"))

    def test_nodesets_are_text_extracted(self) -> None:
        doc = parse_html("<b> x </b><b>y</b><i>1</i><i>2</i>")
        table = tabulate({"b": select(doc, tag="b"), "i": select(doc, tag="i")})
        assert table.rows == (("x", "1"), ("y", "2"))

    def test_length_mismatch_raises(self) -> None:
        with pytest.raises(FieldLengthMismatchError) as excinfo:
            tabulate({"a": [1, 2, 3], "b": [1, 2]})
        assert excinfo.value.lengths == {"a": 3, "b": 2}

    def test_empty(self) -> None:
        assert len(tabulate({})) == 0
        assert tabulate({"a": []}).fields == ("a",)


class TestSerialize:
    @pytest.fixture
    def typed(self) -> Table:
        return Table(
            fields=("Country", "Population", "Share", "Updated", "Note"),
            rows=(
                ("China", 1400000000, 18.5, date(2017, 1, 21), None),
                ("India, Republic of", 1300000000, 17.7, date(2017, 2, 1), "say \"hi\""),
            ),
            labels=(1, 4),
        )

    def test_json_round_trip_exact(self, typed) -> None:
        restored = from_json(to_json(typed))
        assert restored == typed
        assert restored.fields == typed.fields
        assert restored.labels == (1, 4)
        assert isinstance(restored.rows[0][1], int)
        assert isinstance(restored.rows[0][3], date)

    def test_csv_round_trip_of_strings(self) -> None:
        table = Table(
            fields=("Rank", "Country"),
            rows=(("1", "China"), ("2", "India, Republic of"), ("3", 'quoted "name"')),
        )
        assert from_csv(to_csv(table)) == table

    def test_csv_writes_missing_as_empty_and_dates_iso(self, typed) -> None:
        text = to_csv(typed)
        lines = text.splitlines()
        assert lines[0] == "Country,Population,Share,Updated,Note"
        assert lines[1] == "China,1400000000,18.5,2017-01-21,"
        assert '"India, Republic of"' in lines[2]

    def test_csv_types_on_read(self) -> None:
        text = "Country,Population\nChina,1400000000\nNowhere,\n"
        table = from_csv(text, types={"Population": int})
        assert table.column("Population") == [1400000000, None]

    def test_csv_unknown_type_field(self) -> None:
        with pytest.raises(KeyError):
            from_csv("a\n1\n", types={"b": int})

    @pytest.mark.parametrize("line", ["1,2,3", "1"])
    def test_csv_row_of_wrong_width(self, line) -> None:
        with pytest.raises(RowShapeError) as excinfo:
            from_csv(f"a,b\nx,y\n{line}\n")
        assert excinfo.value.row == 1
        assert excinfo.value.expected == 2
        assert excinfo.value.actual == len(line.split(","))

    def test_csv_delimiter(self) -> None:
        table = Table(fields=("a", "b"), rows=(("1", "2"),))
        assert to_csv(table, delimiter="\t") == "a\tb\n1\t2\n"
        assert from_csv("a\tb\n1\t2\n", delimiter="\t") == table

    def test_empty_csv(self) -> None:
        assert from_csv("").fields == ()
