"""
External reference checker for SnippetBook documents.

Verifies that the URLs in entry reference lists still answer. Tries HEAD
first and falls back to GET for servers that refuse HEAD.

Configuration from environment variables:
    LINK_CHECK_TIMEOUT     - seconds per request (default 10)
    LINK_CHECK_RETRIES     - attempts per URL (default 2)
    LINK_CHECK_BACKOFF     - seconds, multiplied by attempt number (default 1.0)
    LINK_CHECK_USER_AGENT  - User-Agent header
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import requests

from .catalog import Catalog

logger = logging.getLogger(__name__)

LINK_CHECK_TIMEOUT = float(os.environ.get("LINK_CHECK_TIMEOUT", "10"))
LINK_CHECK_RETRIES = int(os.environ.get("LINK_CHECK_RETRIES", "2"))
LINK_CHECK_BACKOFF = float(os.environ.get("LINK_CHECK_BACKOFF", "1.0"))
LINK_CHECK_USER_AGENT = os.environ.get("LINK_CHECK_USER_AGENT", "snippetbook-link-checker/1.0")

# Servers that answer these to HEAD often accept GET
HEAD_FALLBACK_CODES = {403, 404, 405, 501}


@dataclass
class LinkStatus:
    url: str
    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "url": self.url,
            "ok": self.ok,
            "status_code": self.status_code,
            "error": self.error,
        }


def _request_status(session: requests.Session, url: str, timeout: float) -> int:
    headers = {"User-Agent": LINK_CHECK_USER_AGENT}
    response = session.head(url, headers=headers, timeout=timeout, allow_redirects=True)
    if response.status_code in HEAD_FALLBACK_CODES:
        logger.debug(f"HEAD {url} returned {response.status_code}, retrying with GET")
        response = session.get(url, headers=headers, timeout=timeout, allow_redirects=True, stream=True)
        response.close()
    return response.status_code


def check_url(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: float = LINK_CHECK_TIMEOUT,
    retries: int = LINK_CHECK_RETRIES,
    backoff: float = LINK_CHECK_BACKOFF,
) -> LinkStatus:
    """
    Check a single URL.

    Args:
        url: Absolute http(s) URL
        session: Optional requests session to reuse connections
        timeout: Seconds per request
        retries: Number of attempts before giving up on network errors
        backoff: Sleep between attempts, multiplied by attempt number

    Returns:
        LinkStatus; network failures are reported, never raised
    """
    if not url.startswith(("http://", "https://")):
        return LinkStatus(url=url, ok=False, error="Not an http(s) URL")

    if session is None:
        with requests.Session() as owned:
            return check_url(url, session=owned, timeout=timeout, retries=retries, backoff=backoff)

    for attempt in range(1, retries + 1):
        try:
            status_code = _request_status(session, url, timeout)
            ok = status_code < 400
            if not ok:
                logger.info(f"✗ {url} answered {status_code}")
            return LinkStatus(url=url, ok=ok, status_code=status_code)
        except requests.RequestException as exc:
            logger.warning(f"Link check attempt {attempt} for {url} failed: {exc}")
            if attempt == retries:
                return LinkStatus(url=url, ok=False, error=str(exc))
            time.sleep(backoff * attempt)

    return LinkStatus(url=url, ok=False, error="No attempts made")


def check_urls(urls: Iterable[str], session: Optional[requests.Session] = None, **kwargs) -> List[LinkStatus]:
    """Check each distinct URL once, preserving first-seen order."""
    if session is None:
        with requests.Session() as owned:
            return check_urls(urls, session=owned, **kwargs)

    seen = []
    for url in urls:
        if url not in seen:
            seen.append(url)
    logger.debug(f"Checking {len(seen)} distinct URLs")
    return [check_url(url, session=session, **kwargs) for url in seen]


def check_catalog_links(catalog: Catalog, **kwargs) -> List[LinkStatus]:
    """Check every external reference URL of every entry in the catalog."""
    urls = [
        ref.url
        for entry in catalog
        for ref in entry.references
        if ref.url.startswith(("http://", "https://"))
    ]
    return check_urls(urls, **kwargs)
