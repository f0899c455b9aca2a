"""Tabular data model: records sharing one field schema."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from tablescrape.errors import SchemaMismatchError

# ``None`` is the "not available" value.
Scalar = Union[str, int, float, date, None]
Record = Dict[str, Scalar]


@dataclass(frozen=True)
class Table:
    """An ordered sequence of records with a shared field schema.

    ``rows`` holds one tuple of values per record, aligned with ``fields``.
    ``labels`` records where each row came from; they survive row drops
    unchanged until :func:`tablescrape.table.normalize.reindex` renumbers
    them.
    """

    fields: Tuple[str, ...]
    rows: Tuple[Tuple[Scalar, ...], ...] = ()
    labels: Tuple[int, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "rows", tuple(tuple(row) for row in self.rows))
        if len(set(self.fields)) != len(self.fields):
            raise ValueError(f"Duplicate field names in {list(self.fields)}")
        for index, row in enumerate(self.rows):
            if len(row) != len(self.fields):
                raise SchemaMismatchError(index, self.fields, [f"<{len(row)} values>"])
        if not self.labels:
            object.__setattr__(self, "labels", tuple(range(len(self.rows))))
        else:
            object.__setattr__(self, "labels", tuple(self.labels))
            if len(self.labels) != len(self.rows):
                raise ValueError(
                    f"{len(self.labels)} labels given for {len(self.rows)} rows"
                )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Scalar]],
        fields: Optional[Sequence[str]] = None,
    ) -> "Table":
        """Build a table from mappings that all share the same keys.

        The first record fixes the field order unless *fields* is given.

        Raises:
            SchemaMismatchError: If any record's keys differ from the schema.
        """
        records = list(records)
        if fields is None:
            fields = list(records[0].keys()) if records else []
        expected = set(fields)
        rows = []
        for index, record in enumerate(records):
            if set(record.keys()) != expected:
                raise SchemaMismatchError(index, fields, list(record.keys()))
            rows.append(tuple(record[name] for name in fields))
        return cls(fields=tuple(fields), rows=tuple(rows))

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Record]:
        for row in self.rows:
            yield dict(zip(self.fields, row))

    def __getitem__(self, index: int) -> Record:
        """Return the record at *index* (position, not label)."""
        return dict(zip(self.fields, self.rows[index]))

    def loc(self, label: int) -> Record:
        """Return the record whose row label is *label*.

        Raises:
            KeyError: If no row carries that label.
        """
        try:
            position = self.labels.index(label)
        except ValueError:
            raise KeyError(label) from None
        return self[position]

    def column(self, name: str) -> List[Scalar]:
        """Return the values of field *name* in row order."""
        position = self.field_position(name)
        return [row[position] for row in self.rows]

    def field_position(self, name: str) -> int:
        try:
            return self.fields.index(name)
        except ValueError:
            raise KeyError(f"Unknown field {name!r}; fields are {list(self.fields)}") from None

    @property
    def records(self) -> List[Record]:
        return list(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fields": list(self.fields),
            "labels": list(self.labels),
            "rows": [list(row) for row in self.rows],
        }
