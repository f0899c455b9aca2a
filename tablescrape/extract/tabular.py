"""Turn a ``<table>`` subtree into a :class:`Table` of strings."""

from __future__ import annotations

import logging
from typing import Dict, List, Set

from bs4 import Tag

from tablescrape.errors import RowShapeError
from tablescrape.extract.selector import Source, cell_grid, select
from tablescrape.table.models import Table

logger = logging.getLogger(__name__)


def _field_names(cells: List[str]) -> List[str]:
    names: List[str] = []
    taken: Set[str] = set()
    counters: Dict[str, int] = {}
    for position, cell in enumerate(cells, start=1):
        base = cell or f"X{position}"
        name = base
        while name in taken:
            counters[base] = counters.get(base, 1) + 1
            name = f"{base}_{counters[base]}"
        taken.add(name)
        names.append(name)
    return names


def extract_table(
    node: Tag,
    header: bool = True,
    fill: bool = True,
    trim: bool = True,
) -> Table:
    """Convert the ``<table>`` element *node* into a :class:`Table`.

    Args:
        node: The ``<table>`` element.  Rows of nested tables are ignored.
        header: Use the first row as field names.  Otherwise fields are
            named ``X1 .. Xn`` after the widest row.
        fill: Pad short rows with ``""`` and truncate long ones.  When false
            a row of the wrong width raises :class:`RowShapeError`.
        trim: Strip surrounding whitespace from every cell.

    Every cell value is a string; coercion is left to the normalizer.
    """
    grid = cell_grid(node, trim)
    if not grid:
        return Table(fields=())

    if header:
        fields = _field_names(grid[0])
        body = grid[1:]
    else:
        fields = [f"X{i}" for i in range(1, max(len(row) for row in grid) + 1)]
        body = grid

    width = len(fields)
    rows = []
    reshaped = 0
    for index, cells in enumerate(body):
        if len(cells) != width:
            if not fill:
                raise RowShapeError(
                    f"Row {index} has {len(cells)} cells, expected {width}",
                    row=index,
                    expected=width,
                    actual=len(cells),
                )
            reshaped += 1
            cells = (cells + [""] * width)[:width]
        rows.append(tuple(cells))

    if reshaped:
        logger.info("Padded or truncated %d of %d rows to %d columns", reshaped, len(rows), width)
    return Table(fields=tuple(fields), rows=tuple(rows))


def extract_tables(source: Source, header: bool = True, fill: bool = True) -> List[Table]:
    """Extract every table under *source*, in document order."""
    return [extract_table(node, header=header, fill=fill) for node in select(source, tag="table")]
