"""Plain-text fallback: a line filter for stylesheet and JSON debris.

Used for non-HTML bodies and for the tag-stripped text of pages whose markup
gave the DOM renderer too little to work with.  Tag stripping keeps the text of
``<style>`` and ``<script>`` blocks, so CSS rules and JSON blobs show up as
lines of text here.  This is a heuristic, not a CSS or JSON parser.
"""

from __future__ import annotations

import re

from jobdesc.scraper.text import collapse_blank_lines

_LINE_SPLIT_RE = re.compile(r"\r\n|\r|\n")

# A selector line that opens a rule block, e.g. ``body {`` or ``@media print {``.
_CSS_BLOCK_START_RE = re.compile(r"^[\w.#@:*][^{]{0,200}\{\s*$")

# A single declaration, e.g. ``color: red;``.
_CSS_DECLARATION_RE = re.compile(r"^[\w-]+\s*:\s*[^;]+;$")

# A quoted JSON key, e.g. ``"title": "Engineer",``.
_JSON_KEY_RE = re.compile(r'^"\w[^"]*":')

_JSON_MARKERS = ('"@context"', '"@type"')


def _brace_delta(line: str) -> int:
    return line.count("{") - line.count("}")


def _bracket_delta(line: str) -> int:
    return _brace_delta(line) + line.count("[") - line.count("]")


def starts_css_block(line: str) -> bool:
    return "{" in line and bool(_CSS_BLOCK_START_RE.match(line))


def starts_json_block(line: str) -> bool:
    if line in ("{", "["):
        return True
    return line.startswith("{") and "}" not in line


def looks_like_json_line(line: str) -> bool:
    if line.startswith(_JSON_MARKERS):
        return True
    return bool(_JSON_KEY_RE.match(line))


def looks_like_css_line(line: str) -> bool:
    if "{" in line or "}" in line:
        return True
    if ":" not in line or ";" not in line:
        return False
    return bool(_CSS_DECLARATION_RE.match(line))


def sanitize_text(text: str) -> str:
    """Drop CSS and JSON looking lines from *text*.

    Multi-line CSS rule blocks and JSON documents are skipped as a whole by
    tracking brace depth from their opening line.  Runs of blank lines are
    collapsed to one and the result is trimmed.
    """
    kept: list[str] = []
    css_depth = 0
    json_depth = 0

    for line in _LINE_SPLIT_RE.split(text):
        stripped = line.strip()

        if not stripped:
            if not kept or kept[-1] != "":
                kept.append("")
            continue

        if css_depth > 0:
            css_depth = max(0, css_depth + _brace_delta(stripped))
            continue

        if json_depth > 0:
            json_depth = max(0, json_depth + _bracket_delta(stripped))
            continue

        if starts_css_block(stripped):
            css_depth = max(1, _brace_delta(stripped))
            continue

        if starts_json_block(stripped):
            json_depth = max(1, _bracket_delta(stripped))
            continue

        if looks_like_json_line(stripped) or looks_like_css_line(stripped):
            continue

        kept.append(line)

    return collapse_blank_lines("\n".join(kept)).strip()
