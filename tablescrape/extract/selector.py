"""Node selection over a parsed :class:`Document`.

Two predicates compose: a tag name and a class token.  Queries run against a
whole document or against a previously selected :class:`NodeSet`, in which
case only the descendants of its members are searched.  Results are always
unique and in document order.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Union

from bs4 import Tag

from tablescrape.errors import TableNotFoundError
from tablescrape.scraper.models import Document

logger = logging.getLogger(__name__)


class NodeSet(Sequence[Tag]):
    """An immutable, ordered selection of elements from one document."""

    __slots__ = ("document", "_nodes")

    def __init__(self, document: Document, nodes: Sequence[Tag] = ()) -> None:
        self.document = document
        self._nodes = tuple(nodes)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return NodeSet(self.document, self._nodes[index])
        return self._nodes[index]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Tag]:
        return iter(self._nodes)

    def __repr__(self) -> str:
        names = ", ".join(node.name for node in self._nodes[:5])
        more = ", ..." if len(self._nodes) > 5 else ""
        return f"NodeSet([{names}{more}])"

    def select(self, tag: Optional[str] = None, class_: Optional[str] = None) -> "NodeSet":
        """Search the descendants of this selection."""
        return select(self, tag=tag, class_=class_)

    def stride(self, size: int, offset: int) -> "NodeSet":
        """Return every *size*-th node starting at *offset*."""
        from tablescrape.extract.extractor import stride

        return stride(self, size, offset)


Source = Union[Document, NodeSet]


def _matches(node: Tag, tag: Optional[str], class_: Optional[str]) -> bool:
    if tag is not None and node.name != tag.lower():
        return False
    if class_ is not None and class_ not in (node.get("class") or []):
        return False
    return True


def select(source: Source, tag: Optional[str] = None, class_: Optional[str] = None) -> NodeSet:
    """Return the elements under *source* matching every given predicate.

    Args:
        source: A document, or a selection whose descendants are searched.
        tag: Element name, e.g. ``"table"``.
        class_: A token that must appear in the element's class list.

    With no predicate every element matches.  An empty result is valid.
    """
    if isinstance(source, Document):
        found = [node for node in source.elements() if _matches(node, tag, class_)]
        return NodeSet(source, found)

    document = source.document
    seen: dict[int, Tag] = {}
    for parent in source:
        for node in parent.find_all(True):
            if id(node) not in seen and _matches(node, tag, class_):
                seen[id(node)] = node
    ordered = sorted(seen.values(), key=document.position)
    return NodeSet(document, ordered)


# ---------------------------------------------------------------------------
# Table lookup by signature
# ---------------------------------------------------------------------------

def own_rows(table: Tag) -> List[Tag]:
    """Return the ``<tr>`` rows of *table*, skipping rows of nested tables."""
    return [row for row in table.find_all("tr") if row.find_parent("table") is table]


def _span(cell: Tag, name: str) -> int:
    try:
        value = int(cell.get(name, 1))
    except (TypeError, ValueError):
        return 1
    return value if value > 0 else 1


def cell_grid(table: Tag, trim: bool = True) -> List[List[str]]:
    """Expand the rows of *table* into a grid, resolving colspan/rowspan.

    A ``colspan`` repeats the cell text across the columns it covers; a
    ``rowspan`` carries it down into the same column of the following rows.
    A row that ends before a carried column is padded with ``""`` up to it.
    """
    grid: List[List[str]] = []
    # column -> [rows still to fill, text]
    pending: Dict[int, list] = {}

    def carry(out: List[str], column: int) -> int:
        while column in pending:
            remaining, text = pending[column]
            out.append(text)
            if remaining <= 1:
                del pending[column]
            else:
                pending[column][0] = remaining - 1
            column += 1
        return column

    for row in own_rows(table):
        out: List[str] = []
        column = 0
        carried_before = set(pending)
        for cell in row.find_all(["th", "td"], recursive=False):
            column = carry(out, column)
            text = cell.get_text()
            if trim:
                text = text.strip()
            rowspan = _span(cell, "rowspan")
            for _ in range(_span(cell, "colspan")):
                out.append(text)
                if rowspan > 1:
                    pending[column] = [rowspan - 1, text]
                column += 1
        column = carry(out, column)
        waiting = [c for c in carried_before if c in pending and c >= column]
        while waiting and column <= max(waiting):
            if column in pending:
                column = carry(out, column)
            else:
                out.append("")
                column += 1
        grid.append(out)
    return grid


def header_cells(table: Tag) -> List[str]:
    """Return the trimmed first row of *table*, with colspans expanded."""
    grid = cell_grid(table)
    return grid[0] if grid else []


def select_table(
    source: Source,
    header: Optional[Sequence[str]] = None,
    column_count: Optional[int] = None,
    index: Optional[int] = None,
) -> Tag:
    """Pick one ``<table>`` by its structural signature.

    Args:
        source: Document or selection to search.
        header: Leading field names the first row must start with, in order.
        column_count: Exact width of the first row, colspans expanded.
        index: Ordinal among the tables passing the other checks.  On its own
            this is the page-shape dependent fallback: prefer *header*.

    Raises:
        TableNotFoundError: If no table satisfies the signature.
    """
    candidates = []
    for table in select(source, tag="table"):
        cells = header_cells(table)
        if header is not None and cells[: len(header)] != list(header):
            continue
        if column_count is not None and len(cells) != column_count:
            continue
        candidates.append(table)

    position = index if index is not None else 0
    if index is not None and header is None and column_count is None:
        logger.info("Selecting table by ordinal position %d only", index)
    if not -len(candidates) <= position < len(candidates):
        raise TableNotFoundError(
            "No table matches the requested signature",
            context={
                "header": list(header) if header is not None else None,
                "column_count": column_count,
                "index": index,
                "candidates": len(candidates),
            },
        )
    return candidates[position]
