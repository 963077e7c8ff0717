"""Whitespace and tag-stripping helpers shared by the renderers and sanitizer."""

from __future__ import annotations

import re
from html import unescape

_LINE_ENDINGS_RE = re.compile(r"\r\n|\r")
_SPACES_RE = re.compile(r"[ \t]+")
_SPACE_AROUND_NEWLINE_RE = re.compile(r" *\n *")
_BLANK_RUN_RE = re.compile(r"\n{3,}")

_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")

# Opening or closing tags that start a new line of text.
_BLOCK_TAG_RE = re.compile(
    r"</?(?:address|article|aside|blockquote|br|dd|div|dl|dt|figcaption|figure|footer"
    r"|h[1-6]|header|hr|li|main|nav|ol|p|pre|section|table|td|th|tr|ul)\b[^>]*>",
    re.IGNORECASE,
)


def collapse_whitespace(text: str) -> str:
    """Normalise line endings to ``\\n`` and squeeze runs of spaces/tabs."""
    text = _LINE_ENDINGS_RE.sub("\n", text)
    return _SPACES_RE.sub(" ", text)


def collapse_blank_lines(text: str) -> str:
    """Reduce any run of three or more newlines to a single blank line."""
    return _BLANK_RUN_RE.sub("\n\n", text)


def normalize_inline_whitespace(text: str) -> str:
    """Whitespace pass applied to every rendered inline span.

    Idempotent: running it on its own output changes nothing.
    """
    text = _SPACES_RE.sub(" ", text)
    text = _SPACE_AROUND_NEWLINE_RE.sub("\n", text)
    text = collapse_blank_lines(text)
    return text.strip()


def strip_tags(html: str) -> str:
    """Drop comments and tags from *html*, keeping every text run.

    Block-level tags become line breaks so text from separate blocks stays on
    separate lines; inline tags vanish without a trace.

    Script and stylesheet bodies survive on purpose; the plain-text sanitizer
    is what filters them out.
    """
    text = _COMMENT_RE.sub("", html)
    text = _BLOCK_TAG_RE.sub("\n", text)
    return unescape(_TAG_RE.sub("", text))
