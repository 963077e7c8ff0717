"""HTTP fetch client and the URL checks that bracket it."""

from __future__ import annotations

import logging

import httpx

from jobdesc.config import settings
from jobdesc.errors import FetchFailed, GenericRedirectDetected, ManualInputRequired
from jobdesc.scraper.models import FetchedPage, ParsedUrl

logger = logging.getLogger(__name__)

FETCHABLE_SCHEMES = frozenset({"http", "https"})


def ensure_fetchable(url: str) -> None:
    """Reject URLs that cannot be fetched over HTTP.

    Raises:
        ManualInputRequired: For any scheme other than ``http``/``https``.
    """
    if ParsedUrl.from_string(url).scheme not in FETCHABLE_SCHEMES:
        raise ManualInputRequired(url)


def _extends_path(original: str, effective: str) -> bool:
    """Return ``True`` if *effective* is a deeper path below *original*."""
    prefix = original.rstrip("/") + "/"
    return effective.rstrip("/") != original.rstrip("/") and effective.startswith(prefix)


def check_redirect(original_url: str, effective_url: str) -> None:
    """Detect a job link that was redirected to a generic listing page.

    Job boards that keep the posting id in the query string often drop it and
    land on their careers index when there is no browser session.  A redirect
    that loses the query string trips this check unless the id moved into a
    deeper path (``/jobs?id=5`` → ``/jobs/5``).  Redirects to another host
    (link shorteners, tracking links) are left alone.

    Raises:
        GenericRedirectDetected: When the query string was stripped.
    """
    original = ParsedUrl.from_string(original_url)
    effective = ParsedUrl.from_string(effective_url)

    if not original.query or effective.query:
        return
    if effective.host != original.host:
        return
    if _extends_path(original.path, effective.path):
        return
    raise GenericRedirectDetected(original_url, effective_url)


def _read_capped(response: httpx.Response, limit: int) -> bytes:
    """Read at most *limit* bytes of a streamed response body."""
    chunks: list[bytes] = []
    size = 0
    for chunk in response.iter_bytes():
        chunks.append(chunk)
        size += len(chunk)
        if size >= limit:
            logger.info("Body of %s reached %d bytes; truncating", response.url, limit)
            break
    return b"".join(chunks)[:limit]


def fetch_page(url: str) -> FetchedPage:
    """Fetch *url* once and return a :class:`FetchedPage`.

    Redirects are followed; the final URL is kept as ``effective_url``.
    The body is streamed and reading stops at ``settings.max_body_bytes``,
    so an oversized response never sits in memory whole.

    Raises:
        FetchFailed: On transport errors and 4xx/5xx responses.
    """
    logger.info("Fetching %s", url)
    try:
        with httpx.Client(
            headers=settings.request_headers,
            timeout=settings.request_timeout,
            follow_redirects=True,
        ) as client:
            with client.stream("GET", url) as response:
                response.raise_for_status()
                body = _read_capped(response, settings.max_body_bytes)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchFailed(url, str(exc)) from exc

    effective_url = str(response.url)
    logger.info("HTTP %d from %s", response.status_code, effective_url)

    return FetchedPage(
        url=url,
        effective_url=effective_url,
        status_code=response.status_code,
        content_type=response.headers.get("content-type", ""),
        body=body,
    )
