"""Table package: data model, normalization, assembly and serialization."""

from tablescrape.table.models import Record, Scalar, Table
from tablescrape.table.normalize import (
    CURRENCY,
    FOOTNOTE,
    THOUSANDS,
    CoercionFailure,
    Retyped,
    drop_row,
    map_field,
    parse_date,
    parse_number,
    reindex,
    rename_field,
    retype_field,
    strip_pattern,
)
from tablescrape.table.serialize import from_csv, from_json, to_csv, to_json
from tablescrape.table.tabulate import tabulate

__all__ = [
    "Table",
    "Record",
    "Scalar",
    "FOOTNOTE",
    "CURRENCY",
    "THOUSANDS",
    "strip_pattern",
    "parse_number",
    "parse_date",
    "drop_row",
    "reindex",
    "rename_field",
    "map_field",
    "retype_field",
    "Retyped",
    "CoercionFailure",
    "tabulate",
    "to_csv",
    "from_csv",
    "to_json",
    "from_json",
]
