"""DOM preparation: parse, prune noise and hidden elements, find the content root.

The soup built by :func:`parse_html` is owned by a single extraction call, so
the filters prune it in place with ``decompose()`` before any renderer walks it.
"""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

# Elements that never carry job-description prose.
NOISE_TAGS = (
    "script",
    "style",
    "noscript",
    "template",
    "svg",
    "iframe",
    "canvas",
    "form",
    "fieldset",
    "legend",
    "input",
    "select",
    "textarea",
    "button",
    "label",
    "meta",
    "link",
    "base",
)

# Class tokens for "visually hidden" idioms.
HIDDEN_CLASSES = frozenset({"sr-only", "visually-hidden", "screen-reader-text", "hidden"})

# Compared against the style attribute with all whitespace removed.
HIDDEN_STYLES = ("display:none", "visibility:hidden", "opacity:0")

NOISE_CONTAINER_TAGS = frozenset({"nav", "footer", "header", "form"})

# Substrings of the class attribute that mark page chrome.
NOISE_CLASS_MARKERS = (
    "footer",
    "header",
    "nav",
    "breadcrumb",
    "breadcrumbs",
    "menu",
    "sidebar",
    "subscribe",
    "newsletter",
    "cookie",
    "consent",
    "modal",
)

# Tried in priority order; the first non-noise match is the content root.
CONTENT_ROOT_SELECTORS = (
    "main",
    '[role="main"]',
    "#jobDescription, #job-description",
    ".job-description",
    "article",
)

DENSITY_SCAN_TAGS = ("article", "section", "div")

# The density scan only trusts a container with at least this much text.
MIN_DENSITY_CHARS = 200

_WHITESPACE_RE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _attr_text(tag: Tag, name: str) -> str:
    """Return attribute *name* as a string (``class`` comes back as a list)."""
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return " ".join(value)


def _class_tokens(tag: Tag) -> list[str]:
    return _attr_text(tag, "class").split()


def is_hidden(tag: Tag) -> bool:
    """Return ``True`` if *tag* is hidden from sighted readers."""
    if tag.has_attr("hidden"):
        return True
    if _attr_text(tag, "aria-hidden").strip().lower() == "true":
        return True
    if HIDDEN_CLASSES.intersection(_class_tokens(tag)):
        return True

    style = _WHITESPACE_RE.sub("", _attr_text(tag, "style")).lower()
    return any(marker in style for marker in HIDDEN_STYLES)


def is_noise_container(tag: Tag) -> bool:
    """Return ``True`` if *tag* is navigation, footer or similar page chrome."""
    if tag.name in NOISE_CONTAINER_TAGS:
        return True
    classes = _attr_text(tag, "class").lower()
    return any(marker in classes for marker in NOISE_CLASS_MARKERS)


def _decompose_all(tags: list[Tag]) -> int:
    removed = 0
    for tag in tags:
        # A tag inside an already removed subtree is gone too.
        if tag.decomposed:
            continue
        tag.decompose()
        removed += 1
    return removed


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_html(html: str) -> BeautifulSoup:
    """Parse *html* permissively; broken markup yields a best-effort tree."""
    return BeautifulSoup(html, "lxml")


def remove_noise(soup: BeautifulSoup) -> None:
    """Remove every :data:`NOISE_TAGS` element together with its subtree."""
    removed = _decompose_all(soup.find_all(NOISE_TAGS))
    logger.debug("Removed %d noise elements", removed)


def remove_hidden_elements(soup: BeautifulSoup) -> None:
    """Remove every element that :func:`is_hidden` flags."""
    removed = _decompose_all([tag for tag in soup.find_all(True) if is_hidden(tag)])
    logger.debug("Removed %d hidden elements", removed)


def locate_content_root(soup: BeautifulSoup) -> Tag | None:
    """Return the subtree most likely to hold the job description.

    Tries :data:`CONTENT_ROOT_SELECTORS` first.  Failing that, picks the
    ``article``/``section``/``div`` with the most text, provided it has at
    least :data:`MIN_DENSITY_CHARS` characters, and otherwise the ``<body>``.
    Returns ``None`` only when the document has no body.
    """
    for selector in CONTENT_ROOT_SELECTORS:
        node = soup.select_one(selector)
        if node is not None and not is_noise_container(node):
            logger.debug("Content root matched selector %r", selector)
            return node

    best: Tag | None = None
    best_length = 0
    for candidate in soup.find_all(DENSITY_SCAN_TAGS):
        if is_noise_container(candidate):
            continue
        length = len(candidate.get_text().strip())
        if length > best_length:
            best, best_length = candidate, length

    if best is not None and best_length >= MIN_DENSITY_CHARS:
        logger.debug("Content root chosen by density scan (%d chars)", best_length)
        return best

    logger.debug("Content root falls back to <body>")
    return soup.body


def prepare_document(html: str) -> BeautifulSoup:
    """Parse *html* and prune noise and hidden elements from the tree."""
    soup = parse_html(html)
    remove_noise(soup)
    remove_hidden_elements(soup)
    return soup
