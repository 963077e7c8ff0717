"""Body decoding: raw response bytes to ``str``."""

from __future__ import annotations

import re

from bs4 import UnicodeDammit

# Tried in order after the charset the server declared, if any.
FALLBACK_ENCODINGS = ("utf-8", "windows-1252", "iso-8859-1")

_CHARSET_RE = re.compile(r"charset\s*=\s*[\"']?([\w.:-]+)", re.IGNORECASE)


def charset_from_content_type(content_type: str) -> str | None:
    """Return the ``charset`` parameter of a Content-Type header, if present."""
    match = _CHARSET_RE.search(content_type or "")
    if match:
        return match.group(1).lower()
    return None


def decode_body(body: bytes | str, content_type: str = "") -> str:
    """Decode *body* using the declared charset, then common web encodings.

    A byte-order mark wins over everything else.  Undecodable bytes never
    raise: ``iso-8859-1`` maps every byte, and as a last resort invalid UTF-8
    sequences are replaced.
    """
    if isinstance(body, str):
        return body

    encodings = list(FALLBACK_ENCODINGS)
    declared = charset_from_content_type(content_type)
    if declared:
        encodings.insert(0, declared)

    dammit = UnicodeDammit(body, encodings, is_html=True)
    if dammit.unicode_markup is None:
        return body.decode("utf-8", errors="replace")
    return dammit.unicode_markup
