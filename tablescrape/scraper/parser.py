"""Markup parser: raw HTML in, :class:`Document` out.

Parsing is lenient.  Unclosed tags, missing ``<html>``/``<body>`` wrappers and
similar damage are repaired by the tree builder; only markup that cannot be
tokenized at all is rejected.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from tablescrape.config import settings
from tablescrape.errors import MalformedMarkupError
from tablescrape.scraper.models import Document, RawPage

logger = logging.getLogger(__name__)


def _decode(markup: bytes, url: str) -> str:
    try:
        return markup.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedMarkupError(
            "Markup is not valid UTF-8",
            context={"url": url, "position": exc.start},
        ) from exc


def parse_html(
    markup: Union[str, bytes],
    url: str = "",
    builder: Optional[str] = None,
) -> Document:
    """Parse *markup* into a :class:`Document`.

    Args:
        markup: HTML text, or UTF-8 encoded bytes.
        url: Address the markup was fetched from, kept for error context.
        builder: BeautifulSoup tree builder; defaults to ``settings.html_parser``.

    Raises:
        MalformedMarkupError: If *markup* is not text, cannot be decoded, or
            the tree builder rejects it.
    """
    if isinstance(markup, bytes):
        markup = _decode(markup, url)
    if not isinstance(markup, str):
        raise MalformedMarkupError(
            f"Cannot parse markup of type {type(markup).__name__}",
            context={"url": url},
        )

    builder = builder or settings.html_parser
    try:
        soup = BeautifulSoup(markup, builder)
    except ParserRejectedMarkup as exc:
        raise MalformedMarkupError(
            f"Parser {builder!r} rejected the markup: {exc}",
            context={"url": url},
        ) from exc

    document = Document(soup=soup, url=url)
    logger.debug("Parsed %s with %s", url or "<markup>", builder)
    return document


def parse_page(raw: RawPage, builder: Optional[str] = None) -> Document:
    """Parse the body of a fetched page."""
    return parse_html(raw.html, url=raw.url, builder=builder)
