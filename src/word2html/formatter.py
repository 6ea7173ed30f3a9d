"""Serialize the cleaned tree and lay the HTML out one block per line."""

from __future__ import annotations

import re

from bs4.element import PageElement, Tag

from word2html.html_utils import INLINE_TAGS, has_meaningful_text, is_tag, is_whitespace, serialize_node

_BLOCK_NAMES = r"(?:p|h[1-6]|ul|ol|li|blockquote|div|table|thead|tbody|tfoot|tr|td|th)"
_BLOCK_OPEN_RE = re.compile(rf"\s*(<{_BLOCK_NAMES}\b[^>]*>)")
_BLOCK_CLOSE_RE = re.compile(rf"(</{_BLOCK_NAMES}\s*>)\s*")
_BREAK_RE = re.compile(r"<br>\s*")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")
_LIST_ITEMS_RE = re.compile(r"</li>\s*<li\b")
_LIST_PAIR_RES = (
    (re.compile(r"</ul>\s*<ul\b"), "</ul>\n\n<ul"),
    (re.compile(r"</ol>\s*<ol\b"), "</ol>\n\n<ol"),
)
_HEADING_PAIR_RE = re.compile(r"(</h[1-6]>)\s*(<h[1-6]\b)")

_SPACE_BEFORE_PUNCT_RE = re.compile(r"(\S)(?:\s|&nbsp;|&#160;)+([.,!?;:])")
_TAG_SPACE_PUNCT_RE = re.compile(r">\s+([.,!?;:])")
_ENTITY_BEFORE_PUNCT_RE = re.compile(r"(?:&nbsp;|&#160;)+([.,!?;:])")

_ROOT_INLINE_TAGS = INLINE_TAGS | {"br"}
_ASCII_WHITESPACE = " \t\n\r\f"


def _is_inline(node: PageElement) -> bool:
    return not isinstance(node, Tag) or node.name in _ROOT_INLINE_TAGS


def serialize_root(root: Tag) -> str:
    """Serialize the direct children of ``root`` in document order.

    Each maximal run of inline nodes and text that carries visible text is
    wrapped in one ``<p>``; runs without visible text are dropped. Breaks and
    whitespace trailing a run are dropped as well.
    """
    parts: list[str] = []
    run: list[PageElement] = []

    def flush() -> None:
        while run and (is_whitespace(run[-1]) or is_tag(run[-1], "br")):
            run.pop()
        if run and any(has_meaningful_text(node) for node in run):
            inner = "".join(serialize_node(node) for node in run).strip(_ASCII_WHITESPACE)
            parts.append(f"<p>{inner}</p>")
        run.clear()

    for child in root.contents:
        if _is_inline(child):
            run.append(child)
        else:
            flush()
            parts.append(serialize_node(child))
    flush()
    return "".join(parts)


def format_html(html: str) -> str:
    """Put every block on its own line and tidy list and heading spacing."""
    formatted = _BLOCK_OPEN_RE.sub(r"\n\1", html)
    formatted = _BLOCK_CLOSE_RE.sub(r"\1\n", formatted)
    formatted = _BREAK_RE.sub("<br>\n", formatted)
    formatted = _EXCESS_NEWLINES_RE.sub("\n\n", formatted)
    formatted = _LIST_ITEMS_RE.sub("</li>\n<li", formatted)
    for pattern, replacement in _LIST_PAIR_RES:
        formatted = pattern.sub(replacement, formatted)
    formatted = _HEADING_PAIR_RE.sub(r"\1\n\n\2", formatted)
    return formatted.strip()


def remove_space_before_punctuation_html(html: str) -> str:
    """Pull punctuation tight against the preceding character in serialized HTML."""
    cleaned = _SPACE_BEFORE_PUNCT_RE.sub(r"\1\2", html)
    cleaned = _TAG_SPACE_PUNCT_RE.sub(r">\1", cleaned)
    return _ENTITY_BEFORE_PUNCT_RE.sub(r"\1", cleaned)
