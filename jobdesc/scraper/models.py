"""Data models for the job-description scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from urllib.parse import urlsplit


@dataclass
class FetchedPage:
    """The raw HTTP response for a single job URL fetch."""

    url: str
    effective_url: str
    status_code: int
    content_type: str
    body: bytes


@dataclass(frozen=True)
class ParsedUrl:
    """The parts of a URL that matter for redirect detection."""

    scheme: str
    host: str
    path: str
    query: str

    @classmethod
    def from_string(cls, url: str) -> ParsedUrl:
        parts = urlsplit(url.strip())
        return cls(
            scheme=parts.scheme.lower(),
            host=(parts.hostname or "").lower(),
            path=parts.path or "/",
            query=parts.query,
        )


class CandidateOrigin(str, Enum):
    """Which extraction strategy produced a candidate, in priority order."""

    CLEANED_DOM = "cleaned_dom"
    STRUCTURED_DATA = "structured_data"
    PLAIN_TEXT_FALLBACK = "plain_text_fallback"


@dataclass(frozen=True)
class ExtractionCandidate:
    """One strategy's Markdown output, compared only through its score."""

    text: str
    origin: CandidateOrigin


@dataclass(frozen=True)
class RenderContext:
    """Per-call state for the block renderer.

    ``list_depth`` drives nested-list indentation, ``item_index`` is the
    1-based position inside the current ordered list and ``level`` counts
    element nesting for the recursion bound.  Every recursive call gets its
    own copy, so siblings never observe each other's state.
    """

    list_depth: int = 0
    item_index: int = 0
    level: int = 0

    def descend(self) -> RenderContext:
        return replace(self, level=self.level + 1)

    def nested_list(self) -> RenderContext:
        return replace(self, list_depth=self.list_depth + 1, item_index=0, level=self.level + 1)

    def list_item(self, index: int) -> RenderContext:
        return replace(self, item_index=index)
