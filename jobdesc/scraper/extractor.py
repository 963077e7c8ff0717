"""Job-description extraction: turns a fetched body into Markdown.

``extract`` is the engine entry point.  It is a pure, deterministic function
of its inputs and never touches the network.  ``fetch_job_description`` wires
it to the bundled fetch client.
"""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup

from jobdesc.errors import EmptyDescription
from jobdesc.scraper.dom import locate_content_root, prepare_document
from jobdesc.scraper.encoding import decode_body
from jobdesc.scraper.fetcher import check_redirect, ensure_fetchable, fetch_page
from jobdesc.scraper.markdown import render_markdown
from jobdesc.scraper.models import CandidateOrigin, ExtractionCandidate
from jobdesc.scraper.sanitizer import sanitize_text
from jobdesc.scraper.scoring import MIN_CLEANED_CHARS, choose_best
from jobdesc.scraper.structured import extract_structured_description
from jobdesc.scraper.text import collapse_whitespace, strip_tags

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _is_html(content_type: str) -> bool:
    content_type = (content_type or "").lower()
    return any(kind in content_type for kind in HTML_CONTENT_TYPES)


def _plain_text(text: str) -> str:
    return sanitize_text(collapse_whitespace(text))


def _render_content(soup: BeautifulSoup) -> str:
    root = locate_content_root(soup)
    if root is None:
        return ""
    return render_markdown(root)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def clean_html(html: str) -> str:
    """Render the visible main content of *html* as Markdown.

    Noise and hidden elements are pruned, the content root is located and
    rendered.  Returns ``""`` when nothing usable is found.
    """
    return _render_content(prepare_document(html))


def collect_candidates(html: str) -> list[ExtractionCandidate]:
    """Run every applicable HTML strategy; candidates come back in priority order."""
    candidates: list[ExtractionCandidate] = []

    soup = prepare_document(html)
    cleaned = _render_content(soup)
    if cleaned:
        candidates.append(ExtractionCandidate(cleaned, CandidateOrigin.CLEANED_DOM))

    structured = extract_structured_description(html)
    if structured:
        candidates.append(ExtractionCandidate(structured, CandidateOrigin.STRUCTURED_DATA))

    # Minimal markup or client-side rendering: add a plainer extraction of
    # the whole pruned page, so hidden and form text stays out of it too.
    if len(cleaned) < MIN_CLEANED_CHARS:
        fallback = _plain_text(strip_tags(str(soup)))
        if fallback:
            candidates.append(ExtractionCandidate(fallback, CandidateOrigin.PLAIN_TEXT_FALLBACK))

    return candidates


def extract(body: bytes, content_type: str, original_url: str, effective_url: str) -> str:
    """Extract the job description in *body* as Markdown.

    Args:
        body: Raw response body.
        content_type: The response's Content-Type header (may carry a charset).
        original_url: The URL that was requested.
        effective_url: The URL the response came from after redirects.

    Returns:
        A non-empty Markdown string.

    Raises:
        GenericRedirectDetected: If the request was bounced to a generic page.
        EmptyDescription: If no strategy produced any text.
    """
    check_redirect(original_url, effective_url)

    text = decode_body(body, content_type)

    if _is_html(content_type):
        best = choose_best(collect_candidates(text))
        markdown = ""
        if best is not None:
            logger.debug("Using %s candidate for %s", best.origin.value, effective_url)
            markdown = best.text.strip()
    else:
        markdown = _plain_text(text)

    if not markdown:
        raise EmptyDescription()
    return markdown


def fetch_job_description(url: str) -> str:
    """Fetch *url* and return its job description as Markdown.

    Raises:
        ManualInputRequired: If *url* is not http(s).
        FetchFailed: If the HTTP request fails.
        GenericRedirectDetected: If the site bounced the link to a generic page.
        EmptyDescription: If nothing could be extracted.
    """
    ensure_fetchable(url)
    page = fetch_page(url)
    return extract(page.body, page.content_type, page.url, page.effective_url)
