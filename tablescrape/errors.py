"""Exception hierarchy for the scraping pipeline.

Every error carries a ``context`` dict with the details needed to diagnose
it (URL, selector, row index, offending value ...).  ``str(exc)`` renders the
message followed by that context, one key per line.

Fetch and parse errors are fatal for the page they concern.  Extraction and
coercion errors are recoverable: the collecting APIs record them next to the
partial result instead of raising.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence


class ScrapeError(Exception):
    """Base class for every error raised by tablescrape."""

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.context:
            return self.message
        parts = [self.message]
        for key, value in self.context.items():
            parts.append(f"  {key}: {value}")
        return "\n".join(parts)


# ---------------------------------------------------------------------------
# Fetch / parse
# ---------------------------------------------------------------------------

class NetworkError(ScrapeError):
    """The page could not be fetched: unreachable host, timeout or non-2xx status."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None) -> None:
        self.url = url
        self.status_code = status_code
        context: Dict[str, Any] = {"url": url}
        if status_code is not None:
            context["status_code"] = status_code
        super().__init__(message, context=context)


class MalformedMarkupError(ScrapeError):
    """The markup could not be tokenized at all."""


# ---------------------------------------------------------------------------
# Selection / extraction
# ---------------------------------------------------------------------------

class SelectionError(ScrapeError):
    """A structural lookup did not find what the caller asked for."""


class TableNotFoundError(SelectionError):
    """No ``<table>`` matched the requested signature."""


class ExtractionError(ScrapeError):
    """Base class for recoverable extraction failures."""


class MissingAttributeError(ExtractionError):
    """A node does not carry the requested attribute."""

    def __init__(self, attribute: str, tag: str) -> None:
        self.attribute = attribute
        self.tag = tag
        super().__init__(
            f"<{tag}> has no attribute {attribute!r}",
            context={"attribute": attribute, "tag": tag},
        )


class RowShapeError(ExtractionError):
    """A row (or a group of sibling nodes) does not have the expected width."""

    def __init__(self, message: str, row: Optional[int], expected: int, actual: int) -> None:
        self.row = row
        self.expected = expected
        self.actual = actual
        super().__init__(
            message,
            context={"row": row, "expected": expected, "actual": actual},
        )


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------

class CoercionError(ScrapeError, ValueError):
    """A raw string could not be converted to the requested type."""

    def __init__(self, message: str, value: Any) -> None:
        self.value = value
        super().__init__(message, context={"value": repr(value)})


class NotNumericError(CoercionError):
    """No numeric token could be found in the text."""


class NotDateError(CoercionError):
    """The text matched none of the accepted date formats."""


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

class TableError(ScrapeError):
    """Base class for table assembly errors."""


class FieldLengthMismatchError(TableError):
    """Columns handed to the tabulator have different lengths.

    This almost always means two selectors drifted out of alignment upstream,
    so it is never recovered from automatically.
    """

    def __init__(self, lengths: Dict[str, int]) -> None:
        self.lengths = dict(lengths)
        super().__init__(
            "Columns have different lengths",
            context={"lengths": self.lengths},
        )


class SchemaMismatchError(TableError):
    """A record does not carry exactly the table's field names."""

    def __init__(self, index: int, expected: Sequence[str], actual: Sequence[str]) -> None:
        self.index = index
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        super().__init__(
            f"Record {index} does not match the table schema",
            context={"expected": list(self.expected), "actual": list(self.actual)},
        )
