"""
Reference HTTP fetcher. Retrieves one page, follows redirects and times the
exchange, producing the FetchResult the audit engine consumes.
"""
from __future__ import annotations

import logging
import time
from typing import Optional

import requests

from config import DEFAULT_REQUEST_TIMEOUT, DEFAULT_USER_AGENT
from crawler.probes import make_session
from models import FetchedPage, FetchError, FetchResult

logger = logging.getLogger(__name__)

# urllib3 reports the protocol as an int (10, 11, 20)
_HTTP_VERSIONS = {10: "1.0", 11: "1.1", 20: "2", 30: "3"}


def fetch_page(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: int = DEFAULT_REQUEST_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
) -> FetchedPage:
    """
    Fetch `url` and return its HTML with the FetchResult describing the exchange.
    Raises FetchError on any transport failure.
    """
    session = session or make_session(user_agent)

    try:
        t0 = time.perf_counter()
        resp = session.get(url, timeout=timeout, allow_redirects=True)
        elapsed_ms = (time.perf_counter() - t0) * 1000
    except requests.exceptions.SSLError as exc:
        raise FetchError(f"SSL Error: {exc}") from exc
    except requests.exceptions.Timeout as exc:
        raise FetchError("Request timed out") from exc
    except requests.exceptions.TooManyRedirects as exc:
        raise FetchError("Too many redirects") from exc
    except requests.RequestException as exc:
        raise FetchError(f"Connection Error: {exc}") from exc

    fetch = FetchResult(
        final_url=resp.url or url,
        headers={k.lower(): v for k, v in resp.headers.items()},
        fetch_duration_ms=elapsed_ms,
        status_code=resp.status_code,
        http_version=_http_version(resp),
    )
    logger.debug("Fetched %s -> %s (%d) in %.0f ms", url, fetch.final_url, resp.status_code, elapsed_ms)
    return FetchedPage(url=url, html=resp.text, fetch=fetch)


def _http_version(resp: requests.Response) -> str:
    raw_version = getattr(resp.raw, "version", None)
    return _HTTP_VERSIONS.get(raw_version, "")
