"""Centralised settings for tablescrape.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_DATE_FORMATS = "%Y-%m-%d|%B %d, %Y|%b %d, %Y|%d %B %Y|%m/%d/%Y"


def _split_formats(raw: str) -> List[str]:
    return [fmt.strip() for fmt in raw.split("|") if fmt.strip()]


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "USER_AGENT",
            "Mozilla/5.0 (compatible; tablescrape/0.1; +https://github.com/tablescrape)",
        )
    )
    max_concurrent_fetches: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONCURRENT_FETCHES", "4"))
    )

    # ------------------------------------------------------------------
    # Parser
    # ------------------------------------------------------------------
    html_parser: str = field(
        default_factory=lambda: os.environ.get("HTML_PARSER", "html.parser")
    )

    # ------------------------------------------------------------------
    # Normalizer
    # ------------------------------------------------------------------
    date_formats: List[str] = field(
        default_factory=lambda: _split_formats(
            os.environ.get("DATE_FORMATS", _DEFAULT_DATE_FORMATS)
        )
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "WARNING").upper()
    )


# Module-level singleton, import this everywhere:
#   from tablescrape.config import settings
settings = Settings()
