"""Candidate scoring: pick the richest of the competing extractions.

The weights reward Markdown structure (list items, headings, links) over raw
length, so a short but well-structured list can beat a long blob of prose.
They were tuned by hand against real job boards; treat them as a starting point.
"""

from __future__ import annotations

import logging
from typing import Iterable

from jobdesc.scraper.models import ExtractionCandidate

logger = logging.getLogger(__name__)

LINE_BREAK_WEIGHT = 1.5
LIST_MARKER_WEIGHT = 20
HEADING_MARKER_WEIGHT = 10
LINK_MARKER_WEIGHT = 5

# A cleaned-DOM result shorter than this also triggers the plain-text fallback.
MIN_CLEANED_CHARS = 200


def score_candidate(text: str) -> float:
    """Return the structural richness score of a Markdown string."""
    list_markers = text.count("- ") + text.count("* ")
    return (
        len(text)
        + text.count("\n") * LINE_BREAK_WEIGHT
        + list_markers * LIST_MARKER_WEIGHT
        + text.count("#") * HEADING_MARKER_WEIGHT
        + text.count("[") * LINK_MARKER_WEIGHT
    )


def choose_best(candidates: Iterable[ExtractionCandidate]) -> ExtractionCandidate | None:
    """Return the highest-scoring non-blank candidate.

    Ties keep the earliest candidate, so callers pass them in priority order.
    Returns ``None`` when every candidate is blank.
    """
    best: ExtractionCandidate | None = None
    best_score = 0.0

    for candidate in candidates:
        if not candidate.text.strip():
            continue
        score = score_candidate(candidate.text)
        logger.debug("Candidate %s scored %.1f", candidate.origin.value, score)
        if best is None or score > best_score:
            best, best_score = candidate, score

    return best
