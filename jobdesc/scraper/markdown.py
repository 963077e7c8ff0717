"""HTML subtree to Markdown.

Two layers:

* **Block rendering** turns each qualifying child of a container into one
  Markdown block (heading, paragraph, list, table, quote, code, rule) and joins
  blocks with a blank line.  Unknown elements are transparent containers.
* **Inline rendering** turns the content of a block into a single span:
  ``**bold**``, ``_italic_``, `` `code` ``, ``[links](href)`` and hard line
  breaks, followed by a whitespace normalisation pass.

Markdown metacharacters in page text are passed through unescaped.

Both layers stop descending past :data:`MAX_RENDER_DEPTH` nested elements;
anything deeper is dropped, since source pages are untrusted.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable

from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from jobdesc.scraper.models import RenderContext
from jobdesc.scraper.text import (
    collapse_blank_lines,
    collapse_whitespace,
    normalize_inline_whitespace,
)

logger = logging.getLogger(__name__)

MAX_RENDER_DEPTH = 200

LIST_TAGS = frozenset({"ul", "ol"})
TABLE_CELL_TAGS = frozenset({"th", "td"})


class BlockKind(Enum):
    HEADING = auto()
    PARAGRAPH = auto()
    UNORDERED_LIST = auto()
    ORDERED_LIST = auto()
    BLOCKQUOTE = auto()
    PREFORMATTED = auto()
    TABLE = auto()
    RULE = auto()
    LINE_BREAK = auto()
    CONTAINER = auto()


class InlineKind(Enum):
    STRONG = auto()
    EMPHASIS = auto()
    CODE = auto()
    LINK = auto()
    LINE_BREAK = auto()
    TRANSPARENT = auto()


_BLOCK_KINDS = {
    "h1": BlockKind.HEADING,
    "h2": BlockKind.HEADING,
    "h3": BlockKind.HEADING,
    "h4": BlockKind.HEADING,
    "h5": BlockKind.HEADING,
    "h6": BlockKind.HEADING,
    "p": BlockKind.PARAGRAPH,
    "ul": BlockKind.UNORDERED_LIST,
    "ol": BlockKind.ORDERED_LIST,
    "blockquote": BlockKind.BLOCKQUOTE,
    "pre": BlockKind.PREFORMATTED,
    "table": BlockKind.TABLE,
    "hr": BlockKind.RULE,
    "br": BlockKind.LINE_BREAK,
}

# span, u, small, sup, sub and anything unknown render as TRANSPARENT.
_INLINE_KINDS = {
    "strong": InlineKind.STRONG,
    "b": InlineKind.STRONG,
    "em": InlineKind.EMPHASIS,
    "i": InlineKind.EMPHASIS,
    "code": InlineKind.CODE,
    "a": InlineKind.LINK,
    "br": InlineKind.LINE_BREAK,
}

_INLINE_WRAPPERS = {
    InlineKind.STRONG: "**",
    InlineKind.EMPHASIS: "_",
    InlineKind.CODE: "`",
}


def block_kind(tag_name: str) -> BlockKind:
    return _BLOCK_KINDS.get(tag_name, BlockKind.CONTAINER)


def inline_kind(tag_name: str) -> InlineKind:
    return _INLINE_KINDS.get(tag_name, InlineKind.TRANSPARENT)


def _is_text(node: PageElement) -> bool:
    """Plain text nodes only; comments, CDATA and doctypes are skipped."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


# ---------------------------------------------------------------------------
# Inline rendering
# ---------------------------------------------------------------------------

def render_inline_children(
    node: Tag,
    level: int = 0,
    skip: frozenset[str] = frozenset(),
) -> str:
    """Render the children of *node* as one normalised inline span.

    Child elements whose tag is in *skip* are left out.
    """
    parts = []
    for child in node.children:
        if isinstance(child, Tag) and child.name in skip:
            continue
        parts.append(_render_inline(child, level + 1))
    return normalize_inline_whitespace("".join(parts))


def _render_inline(node: PageElement, level: int) -> str:
    if _is_text(node):
        return collapse_whitespace(str(node))
    if not isinstance(node, Tag) or level > MAX_RENDER_DEPTH:
        return ""

    kind = inline_kind(node.name)
    if kind is InlineKind.LINE_BREAK:
        return "\n"
    if kind is InlineKind.LINK:
        return _render_anchor(node, level)

    content = render_inline_children(node, level)
    wrapper = _INLINE_WRAPPERS.get(kind)
    if wrapper and content:
        return f"{wrapper}{content}{wrapper}"
    return content


def _render_anchor(node: Tag, level: int) -> str:
    content = render_inline_children(node, level)
    href = (node.get("href") or "").strip()
    if not href:
        return content
    return f"[{content or href}]({href})"


# ---------------------------------------------------------------------------
# Block rendering
# ---------------------------------------------------------------------------

def _render_block_children(node: Tag, ctx: RenderContext) -> str:
    child_ctx = ctx.descend()
    blocks = []
    for child in node.children:
        block = _render_block(child, child_ctx)
        if block and block.strip():
            blocks.append(block.strip())
    return "\n\n".join(blocks)


def _render_block(node: PageElement, ctx: RenderContext) -> str | None:
    if _is_text(node):
        text = collapse_whitespace(str(node)).strip()
        return text or None
    if not isinstance(node, Tag):
        return None
    if ctx.level > MAX_RENDER_DEPTH:
        logger.debug("Render depth limit reached at <%s>; subtree dropped", node.name)
        return None

    return _BLOCK_RENDERERS[block_kind(node.name)](node, ctx)


def _render_heading(node: Tag, ctx: RenderContext) -> str | None:
    level = max(1, min(6, int(node.name[1])))
    content = render_inline_children(node, ctx.level)
    if not content:
        return None
    return f"{'#' * level} {content}"


def _render_paragraph(node: Tag, ctx: RenderContext) -> str | None:
    return render_inline_children(node, ctx.level) or None


def _render_list(node: Tag, ctx: RenderContext, ordered: bool) -> str | None:
    if ctx.level > MAX_RENDER_DEPTH:
        return None
    items = []
    index = 1
    for child in node.children:
        if not isinstance(child, Tag) or child.name != "li":
            continue
        item = _render_list_item(child, ctx.list_item(index), ordered)
        if item:
            items.append(item)
        index += 1
    return "\n".join(items) or None


def _render_list_item(node: Tag, ctx: RenderContext, ordered: bool) -> str:
    marker = f"{ctx.item_index}." if ordered else "-"
    indent = "  " * ctx.list_depth

    # Nested lists get their own indented lines below the item text.
    content = render_inline_children(node, ctx.level, skip=LIST_TAGS)
    lines = [f"{indent}{marker} {content}" if content else f"{indent}{marker}"]

    for child in node.children:
        if isinstance(child, Tag) and child.name in LIST_TAGS:
            nested = _render_list(child, ctx.nested_list(), child.name == "ol")
            if nested:
                lines.append(nested)
    return "\n".join(lines)


def _render_unordered_list(node: Tag, ctx: RenderContext) -> str | None:
    return _render_list(node, ctx, ordered=False)


def _render_ordered_list(node: Tag, ctx: RenderContext) -> str | None:
    return _render_list(node, ctx, ordered=True)


def _render_blockquote(node: Tag, ctx: RenderContext) -> str | None:
    content = _render_block_children(node, ctx)
    if not content:
        return None
    return "\n".join(f"> {line.lstrip()}" for line in content.split("\n"))


def _render_preformatted(node: Tag, ctx: RenderContext) -> str | None:
    text = "".join(str(child) for child in node.children if _is_text(child))
    if not text:
        return None
    return "```\n" + text.rstrip("\n") + "\n```"


def _render_table(node: Tag, ctx: RenderContext) -> str | None:
    rows = []
    columns = 0
    for row in node.find_all("tr"):
        cells = [
            render_inline_children(cell, ctx.level)
            for cell in row.children
            if isinstance(cell, Tag) and cell.name in TABLE_CELL_TAGS
        ]
        if not cells:
            continue
        if not rows:
            columns = len(cells)
        rows.append("| " + " | ".join(cells) + " |")

    if not rows:
        return None
    if columns > 0:
        rows.insert(1, "| " + " | ".join(["---"] * columns) + " |")
    return "\n".join(rows)


def _render_rule(node: Tag, ctx: RenderContext) -> str | None:
    return "---"


def _render_line_break(node: Tag, ctx: RenderContext) -> str | None:
    return None


def _render_container(node: Tag, ctx: RenderContext) -> str | None:
    if node.contents:
        return _render_block_children(node, ctx) or None
    return _render_inline(node, ctx.level) or None


_BLOCK_RENDERERS: dict[BlockKind, Callable[[Tag, RenderContext], str | None]] = {
    BlockKind.HEADING: _render_heading,
    BlockKind.PARAGRAPH: _render_paragraph,
    BlockKind.UNORDERED_LIST: _render_unordered_list,
    BlockKind.ORDERED_LIST: _render_ordered_list,
    BlockKind.BLOCKQUOTE: _render_blockquote,
    BlockKind.PREFORMATTED: _render_preformatted,
    BlockKind.TABLE: _render_table,
    BlockKind.RULE: _render_rule,
    BlockKind.LINE_BREAK: _render_line_break,
    BlockKind.CONTAINER: _render_container,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render_markdown(root: Tag) -> str:
    """Render the children of *root* as Markdown blocks.

    Returns an empty string when nothing renderable is found.
    """
    markdown = _render_block_children(root, RenderContext())
    return collapse_blank_lines(markdown).strip()
