"""HTTP fetcher: address in, raw markup out."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx

from tablescrape.config import settings
from tablescrape.errors import NetworkError
from tablescrape.scraper.models import RawPage

logger = logging.getLogger(__name__)


@dataclass
class FetchOptions:
    """Per-request configuration.

    ``timeout`` aborts the request after that many seconds; ``user_agent``
    overrides the client identity string.  Both fall back to ``settings``
    when left unset.
    """

    timeout: Optional[float] = None
    user_agent: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)

    def resolved_timeout(self) -> float:
        return self.timeout if self.timeout is not None else settings.request_timeout

    def resolved_headers(self) -> Dict[str, str]:
        headers = {"User-Agent": self.user_agent or settings.user_agent}
        headers.update(self.headers)
        return headers


def _get(client: httpx.Client, url: str, options: FetchOptions) -> httpx.Response:
    return client.get(
        url,
        headers=options.resolved_headers(),
        timeout=options.resolved_timeout(),
        follow_redirects=True,
    )


def fetch_url(
    url: str,
    options: Optional[FetchOptions] = None,
    client: Optional[httpx.Client] = None,
) -> RawPage:
    """Fetch *url* and return a :class:`RawPage`.

    A caller-owned ``httpx.Client`` can be passed in; it is used as-is and
    left open.  Otherwise a client is created for this single request.

    Raises:
        NetworkError: On an invalid URL, an unreachable host, a timeout, or a
            4xx/5xx status code.  The underlying ``httpx`` exception is chained.
    """
    options = options or FetchOptions()
    logger.debug("Fetching %s (timeout=%ss)", url, options.resolved_timeout())

    try:
        if client is not None:
            response = _get(client, url, options)
        else:
            with httpx.Client() as own_client:
                response = _get(own_client, url, options)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        logger.warning("Fetch of %s failed with HTTP %s", url, status)
        raise NetworkError(f"HTTP {status} while fetching {url}", url, status) from exc
    except httpx.TimeoutException as exc:
        logger.warning("Fetch of %s timed out", url)
        raise NetworkError(f"Timed out while fetching {url}", url) from exc
    except httpx.InvalidURL as exc:
        logger.warning("Refusing to fetch invalid URL %r: %s", url, exc)
        raise NetworkError(f"Invalid URL {url!r}: {exc}", url) from exc
    except httpx.HTTPError as exc:
        logger.warning("Fetch of %s failed: %s", url, exc)
        raise NetworkError(f"Could not fetch {url}: {exc}", url) from exc

    logger.info("Fetched %s: HTTP %s, %d chars", url, response.status_code, len(response.text))
    return RawPage(url=url, html=response.text, status_code=response.status_code)
