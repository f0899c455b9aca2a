"""tablescrape CLI: entry-point for scraping tables and text from web pages.

Usage:
    python cli/main.py --help

Commands:
    tables  → list the tables on a page with their header rows
    table   → extract one table (picked by header signature or position)
    nodes   → print the text or an attribute of matching nodes
    groups  → decode repeating sibling nodes into a table
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from tablescrape.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import logging
from typing import List, Optional

import typer

from cli.rendering import render_table
from tablescrape.config import settings
from tablescrape.errors import ScrapeError
from tablescrape.extract.extractor import GroupShape, extract_attributes, extract_texts
from tablescrape.extract.selector import header_cells, select
from tablescrape.pipeline import fetch_document, scrape_groups, scrape_table
from tablescrape.scraper.fetcher import FetchOptions
from tablescrape.table.models import Table
from tablescrape.table.normalize import (
    FOOTNOTE,
    drop_row,
    map_field,
    parse_number,
    reindex,
    retype_field,
    strip_pattern,
)
from tablescrape.table.serialize import to_csv, to_json

app = typer.Typer(
    name="tablescrape",
    help="Scrape HTML tables and repeating text into tabular form.",
    no_args_is_help=True,
)

FORMATS = ("text", "csv", "json")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output."),
) -> None:
    """Configure logging for every command."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("tablescrape").setLevel(level)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _options(timeout: Optional[float], user_agent: Optional[str]) -> FetchOptions:
    return FetchOptions(timeout=timeout, user_agent=user_agent)


def _emit(table: Table, fmt: str) -> None:
    if fmt == "csv":
        typer.echo(to_csv(table), nl=False)
    elif fmt == "json":
        typer.echo(to_json(table, indent=2))
    else:
        typer.echo(render_table(table))


def _check_format(fmt: str) -> None:
    if fmt not in FORMATS:
        typer.echo(f"Error: unknown format {fmt!r}. Use: {' | '.join(FORMATS)}", err=True)
        raise typer.Exit(1)


def _fail(exc: ScrapeError) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(1)


def _drop_rows(table: Table, positions: List[int]) -> Table:
    count = len(table)
    resolved = set()
    for position in positions:
        if not -count <= position < count:
            raise IndexError(f"Row {position} is out of range for a table of {count} rows")
        resolved.add(position % count)
    for position in sorted(resolved, reverse=True):
        table = drop_row(table, position)
    return reindex(table) if resolved else table


def _strip_footnotes(table: Table) -> Table:
    for name in table.fields:
        table = map_field(
            table, name, lambda v: strip_pattern(v, FOOTNOTE) if isinstance(v, str) else v
        )
    return table


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command("tables")
def tables_cmd(
    url: str = typer.Argument(..., help="URL of the page."),
    timeout: Optional[float] = typer.Option(None, help="Abort the request after N seconds."),
    user_agent: Optional[str] = typer.Option(None, "--user-agent", help="Override the User-Agent."),
) -> None:
    """List the tables on a page with their first row, to pick a signature."""
    try:
        document = fetch_document(url, options=_options(timeout, user_agent))
    except ScrapeError as exc:
        _fail(exc)

    found = select(document, tag="table")
    if not found:
        typer.echo("No tables found.")
        return
    for position, node in enumerate(found):
        cells = header_cells(node)
        typer.echo(f"[{position}] {len(cells)} columns: {', '.join(cells) or '(empty first row)'}")


@app.command("table")
def table_cmd(
    url: str = typer.Argument(..., help="URL of the page."),
    match_header: Optional[str] = typer.Option(
        None, "--match-header", help="Comma separated leading header names, e.g. 'Rank,Country'."
    ),
    columns: Optional[int] = typer.Option(None, "--columns", help="Exact column count."),
    index: Optional[int] = typer.Option(None, "--index", help="Ordinal among matching tables."),
    header: bool = typer.Option(True, "--header/--no-header", help="First row holds field names."),
    fill: bool = typer.Option(True, "--fill/--no-fill", help="Pad or truncate uneven rows."),
    drop: List[int] = typer.Option([], "--drop-row", help="Row position to drop (repeatable)."),
    strip_footnotes: bool = typer.Option(False, "--strip-footnotes", help="Remove [1]-style markers."),
    number: List[str] = typer.Option([], "--number", help="Field to convert to numbers (repeatable)."),
    fmt: str = typer.Option("text", "--format", help="Output format: text | csv | json."),
    timeout: Optional[float] = typer.Option(None, help="Abort the request after N seconds."),
    user_agent: Optional[str] = typer.Option(None, "--user-agent", help="Override the User-Agent."),
) -> None:
    """Extract one table from a page."""
    _check_format(fmt)
    signature = [name.strip() for name in match_header.split(",")] if match_header else None

    try:
        table = scrape_table(
            url,
            header=signature,
            column_count=columns,
            index=index,
            has_header=header,
            fill=fill,
            options=_options(timeout, user_agent),
        )
        table = _drop_rows(table, drop)
        if strip_footnotes:
            table = _strip_footnotes(table)
        for name in number:
            retyped = retype_field(table, name, parse_number)
            for failure in retyped.failures:
                typer.echo(
                    f"[table] {name}: row {failure.index} value {failure.value!r} is not numeric",
                    err=True,
                )
            table = retyped.table
    except ScrapeError as exc:
        _fail(exc)
    except (IndexError, KeyError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    _emit(table, fmt)


@app.command("nodes")
def nodes_cmd(
    url: str = typer.Argument(..., help="URL of the page."),
    tag: Optional[str] = typer.Option(None, "--tag", help="Element name to match."),
    class_: Optional[str] = typer.Option(None, "--class", help="Class token to match."),
    attr: Optional[str] = typer.Option(None, "--attr", help="Print this attribute instead of text."),
    timeout: Optional[float] = typer.Option(None, help="Abort the request after N seconds."),
    user_agent: Optional[str] = typer.Option(None, "--user-agent", help="Override the User-Agent."),
) -> None:
    """Print the text (or an attribute) of every matching node, one per line."""
    try:
        document = fetch_document(url, options=_options(timeout, user_agent))
    except ScrapeError as exc:
        _fail(exc)

    found = select(document, tag=tag, class_=class_)
    if attr:
        result = extract_attributes(found, attr, policy="collect", default="")
        values = result.values
        if result.failures:
            typer.echo(f"[nodes] {len(result.failures)} node(s) lack {attr!r}", err=True)
    else:
        values = extract_texts(found)

    for value in values:
        typer.echo(value)


@app.command("groups")
def groups_cmd(
    url: str = typer.Argument(..., help="URL of the page."),
    size: int = typer.Option(..., "--size", help="Nodes per record."),
    field: List[str] = typer.Option(..., "--field", help="name=offset inside a group (repeatable)."),
    tag: Optional[str] = typer.Option(None, "--tag", help="Element name to match."),
    class_: Optional[str] = typer.Option(None, "--class", help="Class token to match."),
    strict: bool = typer.Option(True, "--strict/--lenient", help="Reject an incomplete last group."),
    fmt: str = typer.Option("text", "--format", help="Output format: text | csv | json."),
    timeout: Optional[float] = typer.Option(None, help="Abort the request after N seconds."),
    user_agent: Optional[str] = typer.Option(None, "--user-agent", help="Override the User-Agent."),
) -> None:
    """Decode repeating groups of sibling nodes into one record per group."""
    _check_format(fmt)
    try:
        shape = GroupShape.parse(size, field)
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    try:
        table = scrape_groups(
            url,
            shape,
            class_=class_,
            tag=tag,
            strict=strict,
            options=_options(timeout, user_agent),
        )
    except ScrapeError as exc:
        _fail(exc)

    _emit(table, fmt)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
