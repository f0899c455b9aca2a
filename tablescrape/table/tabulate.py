"""Column-wise assembly of extracted values into a :class:`Table`."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from tablescrape.errors import FieldLengthMismatchError
from tablescrape.extract.extractor import extract_texts
from tablescrape.extract.selector import NodeSet
from tablescrape.table.models import Table

logger = logging.getLogger(__name__)


def tabulate(columns: Mapping[str, Sequence[Any]]) -> Table:
    """Zip equal-length *columns* into a table, one field per key.

    ``NodeSet`` values are text-extracted first.  Field order follows the
    mapping order.

    Raises:
        FieldLengthMismatchError: If the columns differ in length.
    """
    values = {
        name: extract_texts(column) if isinstance(column, NodeSet) else list(column)
        for name, column in columns.items()
    }
    lengths = {name: len(column) for name, column in values.items()}
    if len(set(lengths.values())) > 1:
        raise FieldLengthMismatchError(lengths)

    fields = tuple(values)
    rows = tuple(zip(*values.values())) if values else ()
    logger.debug("Tabulated %d rows x %d fields", len(rows), len(fields))
    return Table(fields=fields, rows=rows)
