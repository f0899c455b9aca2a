"""Text / attribute extraction and positional decoding of sibling groups."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from bs4 import Tag

from tablescrape.errors import MissingAttributeError, RowShapeError
from tablescrape.extract.selector import NodeSet

logger = logging.getLogger(__name__)

POLICIES = ("raise", "collect")


@dataclass
class Extraction:
    """Values pulled from a selection plus the positions that failed."""

    values: List[Any] = field(default_factory=list)
    failures: List[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


# ---------------------------------------------------------------------------
# Per-node extraction
# ---------------------------------------------------------------------------

def extract_text(node: Tag) -> str:
    """Return all descendant text of *node*, trimmed at both ends."""
    return node.get_text().strip()


def extract_texts(nodes: Sequence[Tag]) -> List[str]:
    return [extract_text(node) for node in nodes]


def extract_attribute(node: Tag, name: str) -> str:
    """Return attribute *name* of *node*.

    Multi-valued attributes such as ``class`` are joined with single spaces.

    Raises:
        MissingAttributeError: If *node* has no such attribute.
    """
    value = node.get(name)
    if value is None:
        raise MissingAttributeError(name, node.name)
    if isinstance(value, list):
        return " ".join(value)
    return value


def extract_attributes(
    nodes: Sequence[Tag],
    name: str,
    policy: str = "raise",
    default: Optional[str] = None,
) -> Extraction:
    """Return attribute *name* for every node, in order.

    With ``policy="collect"`` a missing attribute yields *default* and its
    position is recorded in ``failures``; with ``"raise"`` the first one
    propagates as :class:`MissingAttributeError`.
    """
    if policy not in POLICIES:
        raise ValueError(f"Unknown policy {policy!r}; expected one of {POLICIES}")

    result = Extraction()
    for position, node in enumerate(nodes):
        try:
            result.values.append(extract_attribute(node, name))
        except MissingAttributeError:
            if policy == "raise":
                raise
            result.values.append(default)
            result.failures.append(position)

    if result.failures:
        logger.warning(
            "Attribute %r missing on %d of %d nodes (positions %s)",
            name, len(result.failures), len(result.values), result.failures,
        )
    return result


# ---------------------------------------------------------------------------
# Positional decoding
# ---------------------------------------------------------------------------

def stride(nodes: NodeSet, size: int, offset: int) -> NodeSet:
    """Return the nodes at ``offset, offset + size, offset + 2 * size, ...``.

    Raises:
        ValueError: If ``size < 1`` or *offset* is outside ``[0, size)``.
    """
    if size < 1:
        raise ValueError(f"Group size must be at least 1, got {size}")
    if not 0 <= offset < size:
        raise ValueError(f"Offset must be in [0, {size}), got {offset}")
    return nodes[offset::size]


@dataclass(frozen=True)
class GroupShape:
    """Layout of a repeating group of sibling nodes.

    ``size`` is the number of nodes per logical record and ``fields`` maps a
    field name to its offset inside the group.  A page whose groups gain or
    lose a node needs a new shape, not new code.
    """

    size: int
    fields: Mapping[str, int]

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError(f"Group size must be at least 1, got {self.size}")
        if not self.fields:
            raise ValueError("A group shape needs at least one field")
        for name, offset in self.fields.items():
            if not 0 <= offset < self.size:
                raise ValueError(
                    f"Offset {offset} of field {name!r} is outside a group of {self.size}"
                )

    @classmethod
    def parse(cls, size: int, specs: Sequence[str]) -> "GroupShape":
        """Build a shape from ``"name=offset"`` strings."""
        fields: Dict[str, int] = {}
        for spec in specs:
            name, sep, offset = spec.partition("=")
            if not sep or not name.strip():
                raise ValueError(f"Expected 'name=offset', got {spec!r}")
            fields[name.strip()] = int(offset)
        return cls(size=size, fields=fields)


def decode_groups(
    nodes: NodeSet,
    shape: GroupShape,
    extract: Callable[[Tag], Any] = extract_text,
    strict: bool = True,
) -> Dict[str, List[Any]]:
    """Split a flat selection into one column per field of *shape*.

    Raises:
        RowShapeError: With *strict*, when the node count is not a multiple
            of the group size.  Otherwise the trailing partial group is
            dropped so every column keeps the same length.
    """
    remainder = len(nodes) % shape.size
    if remainder:
        if strict:
            raise RowShapeError(
                f"{len(nodes)} nodes do not split into groups of {shape.size}",
                row=len(nodes) // shape.size,
                expected=shape.size,
                actual=remainder,
            )
        logger.warning("Dropping %d trailing nodes of an incomplete group", remainder)
        nodes = nodes[: len(nodes) - remainder]

    return {
        name: [extract(node) for node in stride(nodes, shape.size, offset)]
        for name, offset in shape.fields.items()
    }
