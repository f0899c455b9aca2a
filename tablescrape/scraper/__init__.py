"""Scraper package: web fetch & markup parsing."""

from tablescrape.scraper.fetcher import FetchOptions, fetch_url
from tablescrape.scraper.models import Document, RawPage
from tablescrape.scraper.parser import parse_html, parse_page

__all__ = ["fetch_url", "FetchOptions", "parse_html", "parse_page", "Document", "RawPage"]
