"""Utilities for rendering tables in the CLI."""

from __future__ import annotations

from datetime import date
from typing import List

from tablescrape.table.models import Scalar, Table


def _cell(value: Scalar) -> str:
    if value is None:
        return "NA"
    if isinstance(value, date):
        return value.isoformat()
    return str(value).replace("\n", " ")


def _clip(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    return text[: max(width - 1, 0)] + "…"


def render_table(table: Table, max_width: int = 40) -> str:
    """Render *table* as an ASCII grid.

    Args:
        table: The table to render.
        max_width: Longest cell shown before it is clipped with an ellipsis.

    Returns:
        String representation of the table, row labels in the first column.
    """
    header = ["#"] + list(table.fields)
    body: List[List[str]] = [
        [str(label)] + [_clip(_cell(value), max_width) for value in row]
        for label, row in zip(table.labels, table.rows)
    ]
    header = [_clip(name, max_width) for name in header]

    widths = [len(name) for name in header]
    for cells in body:
        for i, cell in enumerate(cells):
            widths[i] = max(widths[i], len(cell))

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def line(cells: List[str]) -> str:
        return "| " + " | ".join(cell.ljust(w) for cell, w in zip(cells, widths)) + " |"

    lines = [border, line(header), border]
    lines.extend(line(cells) for cells in body)
    lines.append(border)
    lines.append(f"{len(table)} rows × {len(table.fields)} fields")
    return "\n".join(lines)
