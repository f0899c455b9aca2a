"""String cleaning, type coercion and schema edits for tables.

The string helpers are pure functions.  The table helpers never mutate their
input; each returns a new :class:`Table`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, List, Optional, Pattern, Sequence, Union

from tablescrape.config import settings
from tablescrape.errors import NotDateError, NotNumericError
from tablescrape.table.models import Scalar, Table

logger = logging.getLogger(__name__)

# Bracketed reference markers: [1], [a], [note 3], [citation needed]
FOOTNOTE = re.compile(r"\[(?:\d+|[a-z]|note \d+|citation needed)\]", re.IGNORECASE)
CURRENCY = re.compile(r"[$€£¥]")
# A comma used as a thousands separator, i.e. between two digits.
THOUSANDS = re.compile(r"(?<=\d),(?=\d)")

_NUMBER = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")

POLICIES = ("collect", "fail")


# ---------------------------------------------------------------------------
# String helpers
# ---------------------------------------------------------------------------

def strip_pattern(text: str, pattern: Union[str, Pattern[str]]) -> str:
    """Remove every substring of *text* matching *pattern*.

    Removal repeats until nothing matches, so ``"[1[2]]"`` loses both
    markers and applying the function twice gives the same result as once.
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    while True:
        stripped = regex.sub("", text)
        if stripped == text:
            return stripped
        text = stripped


def parse_number(text: Any) -> Union[int, float]:
    """Return the first number in *text*, ignoring surrounding symbols.

    Thousands-separator commas are dropped first, so ``"1,234,567[2]"``
    gives ``1234567`` and ``"$958,483,377"`` gives ``958483377``.  Tokens
    without a fraction or exponent come back as ``int``.

    Raises:
        NotNumericError: If *text* holds no numeric token.
    """
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return text
    if not isinstance(text, str):
        raise NotNumericError(f"Cannot parse a number from {type(text).__name__}", text)

    match = _NUMBER.search(THOUSANDS.sub("", text))
    if match is None:
        raise NotNumericError(f"No number found in {text!r}", text)

    token = match.group(0)
    if any(ch in token for ch in ".eE"):
        return float(token)
    return int(token)


def parse_date(text: Any, formats: Optional[Sequence[str]] = None) -> date:
    """Parse *text* with the first matching ``strptime`` format.

    Args:
        text: The raw date string; surrounding whitespace is ignored.
        formats: Formats to try in order, ``settings.date_formats`` by default.

    Raises:
        NotDateError: If no format matches.
    """
    if isinstance(text, date):
        return text
    if not isinstance(text, str):
        raise NotDateError(f"Cannot parse a date from {type(text).__name__}", text)

    candidate = text.strip()
    for fmt in formats or settings.date_formats:
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue
    raise NotDateError(f"{text!r} matches none of the accepted date formats", text)


# ---------------------------------------------------------------------------
# Table edits
# ---------------------------------------------------------------------------

def drop_row(table: Table, index: int) -> Table:
    """Return *table* without the row at position *index*.

    Remaining rows keep their labels, so anything remembered by label is
    stale until :func:`reindex` is called.

    Raises:
        IndexError: If *index* is out of range.
    """
    count = len(table)
    if not -count <= index < count:
        raise IndexError(f"Row {index} is out of range for a table of {count} rows")
    index %= count
    rows = table.rows[:index] + table.rows[index + 1:]
    labels = table.labels[:index] + table.labels[index + 1:]
    return Table(fields=table.fields, rows=rows, labels=labels)


def reindex(table: Table) -> Table:
    """Renumber row labels ``0 .. n-1`` in current row order."""
    return Table(fields=table.fields, rows=table.rows)


def rename_field(table: Table, old: str, new: str) -> Table:
    """Rename field *old* to *new* across every record.

    Raises:
        KeyError: If *old* is not a field.
        ValueError: If *new* already names another field.
    """
    position = table.field_position(old)
    if new == old:
        return table
    if new in table.fields:
        raise ValueError(f"Field {new!r} already exists")
    fields = list(table.fields)
    fields[position] = new
    return Table(fields=tuple(fields), rows=table.rows, labels=table.labels)


def map_field(table: Table, name: str, func: Callable[[Any], Scalar]) -> Table:
    """Apply *func* to every non-missing value of field *name*."""
    position = table.field_position(name)
    rows = []
    for row in table.rows:
        value = row[position]
        if value is not None:
            row = row[:position] + (func(value),) + row[position + 1:]
        rows.append(row)
    return Table(fields=table.fields, rows=tuple(rows), labels=table.labels)


@dataclass(frozen=True)
class CoercionFailure:
    """One cell that could not be coerced."""

    index: int
    label: int
    value: Any
    error: Exception


@dataclass
class Retyped:
    """Result of :func:`retype_field`: the new table plus the failed cells."""

    table: Table
    failures: List[CoercionFailure] = field(default_factory=list)

    @property
    def failed_indices(self) -> List[int]:
        return [failure.index for failure in self.failures]

    @property
    def ok(self) -> bool:
        return not self.failures


def retype_field(
    table: Table,
    name: str,
    coercion: Callable[[Any], Scalar],
    policy: str = "collect",
) -> Retyped:
    """Apply *coercion* to every value of field *name*.

    With ``policy="collect"`` (the default) a cell whose coercion raises
    ``ValueError`` or ``TypeError`` becomes ``None``, and the failure is
    recorded and logged; the remaining rows are still converted.  With
    ``policy="fail"`` the first such error propagates.

    Missing values (``None``) stay missing and are not failures.
    """
    if policy not in POLICIES:
        raise ValueError(f"Unknown policy {policy!r}; expected one of {POLICIES}")

    position = table.field_position(name)
    rows = []
    failures: List[CoercionFailure] = []
    for index, row in enumerate(table.rows):
        value = row[position]
        if value is not None:
            try:
                converted = coercion(value)
            except (ValueError, TypeError) as exc:
                if policy == "fail":
                    raise
                failures.append(CoercionFailure(index, table.labels[index], value, exc))
                converted = None
            row = row[:position] + (converted,) + row[position + 1:]
        rows.append(row)

    if failures:
        logger.warning(
            "%d of %d values in field %r could not be converted and were set to None (rows %s)",
            len(failures), len(rows), name, [failure.index for failure in failures],
        )
    return Retyped(
        table=Table(fields=table.fields, rows=tuple(rows), labels=table.labels),
        failures=failures,
    )
