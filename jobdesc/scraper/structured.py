"""JSON-LD fallback: pull ``JobPosting.description`` out of structured data.

Many job boards render the visible posting client-side but still embed a
schema.org ``JobPosting`` object for search engines.  Its ``description`` is an
HTML fragment, which is rendered with the same Markdown renderer as the page.
"""

from __future__ import annotations

import json
import logging
import re
from html import unescape
from typing import Any, Iterator

from jobdesc.scraper.dom import parse_html
from jobdesc.scraper.markdown import MAX_RENDER_DEPTH, render_markdown

logger = logging.getLogger(__name__)

_JSON_LD_RE = re.compile(
    r"<script[^>]*type=[\"']application/ld\+json[\"'][^>]*>(.*?)</script>",
    re.IGNORECASE | re.DOTALL,
)

JOB_POSTING_TYPE = "jobposting"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def iter_json_ld_payloads(html: str) -> Iterator[Any]:
    """Yield each parseable JSON-LD payload in document order.

    Payloads that are empty or not strict JSON (``NaN`` and ``Infinity`` are
    rejected) are skipped.
    """
    for match in _JSON_LD_RE.finditer(html):
        payload = unescape(match.group(1).strip())
        if not payload:
            continue
        try:
            yield json.loads(payload, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as exc:
            logger.debug("Skipping unparseable JSON-LD block: %s", exc)


def is_job_posting(data: dict[str, Any]) -> bool:
    """Return ``True`` if ``@type`` is (or contains) ``JobPosting``, any case."""
    value = data.get("@type")
    if isinstance(value, str):
        return value.lower() == JOB_POSTING_TYPE
    if isinstance(value, list):
        return any(isinstance(item, str) and item.lower() == JOB_POSTING_TYPE for item in value)
    return False


def find_job_posting_description(data: Any, depth: int = 0) -> str | None:
    """Depth-first search for the first ``JobPosting`` with a description.

    Both objects and arrays are searched (``@graph`` wrappers, lists of
    postings, nested ``mainEntity`` objects...).
    """
    if depth > MAX_RENDER_DEPTH:
        return None

    if isinstance(data, dict):
        if is_job_posting(data):
            description = data.get("description")
            if isinstance(description, str) and description.strip():
                return description.strip()
        children = list(data.values())
    elif isinstance(data, list):
        children = data
    else:
        return None

    for child in children:
        found = find_job_posting_description(child, depth + 1)
        if found:
            return found
    return None


def html_fragment_to_markdown(fragment: str) -> str:
    """Render an HTML *fragment* (not a full document) as Markdown."""
    fragment = fragment.replace("\u00a0", " ")
    soup = parse_html(f"<html><body>{fragment}</body></html>")
    if soup.body is None:
        return ""
    return render_markdown(soup.body)


def extract_structured_description(html: str) -> str | None:
    """Return the first non-empty Markdown JobPosting description in *html*."""
    for data in iter_json_ld_payloads(html):
        description = find_job_posting_description(data)
        if not description:
            continue
        markdown = html_fragment_to_markdown(description)
        if markdown:
            return markdown
    return None
