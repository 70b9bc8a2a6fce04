"""Fetch source pages over HTTP, retrying with different browser user agents."""
from __future__ import annotations

import asyncio
import logging
from urllib.parse import urlparse

import httpx

from med_quiz.errors import FetchError

_log = logging.getLogger("med_quiz.fetch")

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:89.0) Gecko/20100101 Firefox/89.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:89.0) Gecko/20100101 Firefox/89.0",
)

BASE_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "DNT": "1",
    "Upgrade-Insecure-Requests": "1",
}

MAX_REDIRECTS = 5

BLOCKED_MESSAGE = (
    "The website is blocking automated access. Try a different medical information source like:\n"
    "• Wikipedia medical articles\n"
    "• NIH/PubMed articles\n"
    "• University health pages\n"
    "• Government health sites (.gov domains)"
)
NOT_FOUND_MESSAGE = "The URL was not found. Please check the link and try again."
CONNECT_MESSAGE = "Unable to connect to the website. Please check the URL and try again."
TIMEOUT_MESSAGE = "The website took too long to respond. Please try again or use a different source."
GENERIC_MESSAGE = (
    "Failed to fetch the source URL. Some websites block automated access. "
    "Try using medical articles from Wikipedia, NIH, or university websites instead."
)


def is_valid_http_url(candidate: str) -> bool:
    try:
        u = urlparse(candidate)
    except ValueError:
        return False
    return u.scheme in ("http", "https") and bool(u.netloc)


def _error_for(exc: Exception | None) -> FetchError:
    if isinstance(exc, httpx.HTTPStatusError):
        if exc.response.status_code == 403:
            return FetchError(BLOCKED_MESSAGE)
        if exc.response.status_code == 404:
            return FetchError(NOT_FOUND_MESSAGE)
    if isinstance(exc, httpx.TimeoutException):
        return FetchError(TIMEOUT_MESSAGE)
    if isinstance(exc, httpx.ConnectError):
        return FetchError(CONNECT_MESSAGE)
    return FetchError(GENERIC_MESSAGE, status_code=500)


async def fetch_html(url: str, timeout: float = 15.0, retry_delay: float = 1.0) -> str:
    """GET *url* once per user agent until one attempt succeeds.

    Raises FetchError carrying a user-facing message when every attempt fails.
    """
    last_error: Exception | None = None
    for attempt, agent in enumerate(USER_AGENTS):
        try:
            async with httpx.AsyncClient(
                timeout=timeout,
                follow_redirects=True,
                max_redirects=MAX_REDIRECTS,
            ) as client:
                resp = await client.get(url, headers={**BASE_HEADERS, "User-Agent": agent})
                resp.raise_for_status()
                return resp.text
        except httpx.HTTPError as e:
            last_error = e
            _log.info("Attempt %d failed: %s", attempt + 1, e)
            if attempt < len(USER_AGENTS) - 1:
                await asyncio.sleep(retry_delay)

    _log.warning("All attempts failed. Last error: %s", last_error)
    raise _error_for(last_error)
