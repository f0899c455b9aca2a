"""Text serialization of tables.

CSV is the interchange format for other tools; every value is written as
text and missing values as empty cells.  JSON keeps the scalar types, so a
table survives ``from_json(to_json(table))`` unchanged.
"""

from __future__ import annotations

import csv
import io
import json
from datetime import date
from typing import Any, Callable, Dict, Mapping, Optional

from tablescrape.errors import RowShapeError
from tablescrape.table.models import Scalar, Table

_DATE_TAG = "$date"


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

def _csv_cell(value: Scalar) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def to_csv(table: Table, delimiter: str = ",") -> str:
    """Render *table* as delimited text with a header line."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=delimiter, lineterminator="\n")
    writer.writerow(table.fields)
    for row in table.rows:
        writer.writerow([_csv_cell(value) for value in row])
    return buffer.getvalue()


def from_csv(
    text: str,
    delimiter: str = ",",
    types: Optional[Mapping[str, Callable[[str], Scalar]]] = None,
) -> Table:
    """Parse delimited text written by :func:`to_csv`.

    Values are read back as strings unless *types* maps a field name to a
    conversion; empty cells of converted fields become ``None``.

    Raises:
        RowShapeError: If a non-blank line does not have one cell per field.
    """
    reader = csv.reader(io.StringIO(text), delimiter=delimiter)
    try:
        fields = next(reader)
    except StopIteration:
        return Table(fields=())

    converters = dict(types or {})
    unknown = set(converters) - set(fields)
    if unknown:
        raise KeyError(f"Unknown fields in types: {sorted(unknown)}")

    rows = []
    for index, cells in enumerate(reader):
        if not cells:
            continue
        if len(cells) != len(fields):
            raise RowShapeError(
                f"CSV row {index} has {len(cells)} cells, expected {len(fields)}",
                row=index,
                expected=len(fields),
                actual=len(cells),
            )
        row = []
        for name, cell in zip(fields, cells):
            convert = converters.get(name)
            if convert is None:
                row.append(cell)
            else:
                row.append(convert(cell) if cell != "" else None)
        rows.append(tuple(row))
    return Table(fields=tuple(fields), rows=tuple(rows))


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def _encode(value: Scalar) -> Any:
    if isinstance(value, date):
        return {_DATE_TAG: value.isoformat()}
    return value


def _decode(value: Any) -> Scalar:
    if isinstance(value, dict) and set(value) == {_DATE_TAG}:
        return date.fromisoformat(value[_DATE_TAG])
    return value


def to_json(table: Table, indent: Optional[int] = None) -> str:
    """Serialize *table* with its field order, row labels and scalar types."""
    payload: Dict[str, Any] = {
        "fields": list(table.fields),
        "labels": list(table.labels),
        "rows": [[_encode(value) for value in row] for row in table.rows],
    }
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def from_json(text: str) -> Table:
    """Rebuild a table written by :func:`to_json`."""
    payload = json.loads(text)
    rows = tuple(tuple(_decode(value) for value in row) for row in payload["rows"])
    return Table(
        fields=tuple(payload["fields"]),
        rows=rows,
        labels=tuple(payload.get("labels") or ()),
    )
