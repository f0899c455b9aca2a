"""End-to-end helpers: fetch → parse → select → extract → tabulate.

Each call owns its document from fetch to table; nothing is shared between
runs.  Only :func:`fetch_many` uses threads, and it stops at raw pages so
parsing stays single-document and single-threaded.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import httpx

from tablescrape.config import settings
from tablescrape.errors import NetworkError
from tablescrape.extract.extractor import GroupShape, decode_groups
from tablescrape.extract.selector import select, select_table
from tablescrape.extract.tabular import extract_table
from tablescrape.scraper.fetcher import FetchOptions, fetch_url
from tablescrape.scraper.models import Document, RawPage
from tablescrape.scraper.parser import parse_page
from tablescrape.table.models import Table
from tablescrape.table.tabulate import tabulate

logger = logging.getLogger(__name__)


def fetch_document(
    url: str,
    options: Optional[FetchOptions] = None,
    client: Optional[httpx.Client] = None,
) -> Document:
    """Fetch *url* and parse it."""
    return parse_page(fetch_url(url, options=options, client=client))


def scrape_table(
    url: str,
    header: Optional[Sequence[str]] = None,
    column_count: Optional[int] = None,
    index: Optional[int] = None,
    has_header: bool = True,
    fill: bool = True,
    options: Optional[FetchOptions] = None,
    client: Optional[httpx.Client] = None,
) -> Table:
    """Fetch *url* and extract the table matching the given signature.

    See :func:`~tablescrape.extract.selector.select_table` for how *header*,
    *column_count* and *index* pick the table, and
    :func:`~tablescrape.extract.tabular.extract_table` for *has_header* and
    *fill*.
    """
    document = fetch_document(url, options=options, client=client)
    node = select_table(document, header=header, column_count=column_count, index=index)
    table = extract_table(node, header=has_header, fill=fill)
    logger.info("Extracted %d rows x %d fields from %s", len(table), len(table.fields), url)
    return table


def scrape_groups(
    url: str,
    shape: GroupShape,
    class_: Optional[str] = None,
    tag: Optional[str] = None,
    strict: bool = True,
    options: Optional[FetchOptions] = None,
    client: Optional[httpx.Client] = None,
) -> Table:
    """Fetch *url*, select repeating sibling nodes and decode them by *shape*.

    Each group of ``shape.size`` consecutive matches becomes one record.
    """
    document = fetch_document(url, options=options, client=client)
    nodes = select(document, tag=tag, class_=class_)
    logger.info("Selected %d nodes from %s", len(nodes), url)
    return tabulate(decode_groups(nodes, shape, strict=strict))


# ---------------------------------------------------------------------------
# Concurrent fetching
# ---------------------------------------------------------------------------

@dataclass
class FetchBatch:
    """Pages fetched by :func:`fetch_many`, keyed by URL, in input order."""

    pages: Dict[str, RawPage] = field(default_factory=dict)
    errors: Dict[str, NetworkError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def fetch_many(
    urls: Sequence[str],
    options: Optional[FetchOptions] = None,
    max_workers: Optional[int] = None,
) -> FetchBatch:
    """Fetch several URLs in parallel using a ``ThreadPoolExecutor``.

    Fetches are independent, so no locking is involved.  A failed fetch is
    recorded in ``errors`` rather than aborting the batch.
    """
    unique: List[str] = list(dict.fromkeys(urls))
    limit = max_workers or settings.max_concurrent_fetches
    batch = FetchBatch()

    with ThreadPoolExecutor(max_workers=max(1, min(limit, len(unique) or 1))) as pool:
        futures = {url: pool.submit(fetch_url, url, options) for url in unique}
        for url, future in futures.items():
            try:
                batch.pages[url] = future.result()
            except NetworkError as exc:
                logger.warning("Skipping %s: %s", url, exc.message)
                batch.errors[url] = exc

    logger.info("Fetched %d of %d URLs", len(batch.pages), len(unique))
    return batch
