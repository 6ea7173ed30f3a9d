"""Section boundary detection on cleaned HTML."""

from __future__ import annotations

import re

from word2html.html_utils import (
    HEADING_TAGS,
    LIST_TAGS,
    element_children,
    parse_fragment,
)
from word2html.schemas import SectionMarker

_KEY_TAKEAWAYS = "key takeaways"
_FAQ = "frequently asked questions"
_READ_ALSO = "read also"
_SOURCES = "sources"


def normalize_section_text(text: str) -> str:
    """Normalize element text for comparison."""
    return re.sub(r"\s+", " ", text.strip().lower())


def detect_section_markers(html: str | None, parser: str | None = None) -> list[SectionMarker]:
    """Find the first element opening each known section.

    Only top-level elements are inspected, so run this on cleaned output.
    Markers are returned in document order.
    """
    if not html or not html.strip():
        return []

    _, root = parse_fragment(html, parser)
    children = element_children(root)
    markers: list[SectionMarker] = []
    seen: set[str] = set()

    for index, element in enumerate(children):
        text = normalize_section_text(element.get_text())
        kind = None
        if element.name in HEADING_TAGS:
            if _KEY_TAKEAWAYS in text:
                kind = "key_takeaways"
            elif _FAQ in text:
                kind = "faq"
        elif element.name == "p":
            if _READ_ALSO in text:
                kind = "read_also"
            elif text.startswith(_SOURCES) and _followed_by_list(children, index):
                kind = "sources"

        if kind is None or kind in seen:
            continue
        seen.add(kind)
        markers.append(SectionMarker(kind=kind, tag=element.name, index=index, text=text))
    return markers


def _followed_by_list(children: list, index: int) -> bool:
    return index + 1 < len(children) and children[index + 1].name in LIST_TAGS
