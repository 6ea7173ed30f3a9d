"""Promote style-only formatting to semantic tags and rename legacy tags."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from bs4 import BeautifulSoup
from bs4.element import Tag

from word2html.html_utils import (
    has_block_descendant,
    is_attached,
    move_children,
    parse_style_declarations,
)

logger = logging.getLogger(__name__)

_BOLD_VALUES = ("700", "bold")
_ITALIC_VALUES = ("italic", "oblique")
_LEGACY_RENAMES = {"b": "strong", "i": "em"}


@dataclass(frozen=True)
class StyleIntent:
    """Formatting intent recovered from an inline style attribute."""

    bold: bool = False
    italic: bool = False
    offset: Literal["sup", "sub"] | None = None

    def __bool__(self) -> bool:
        return self.bold or self.italic or self.offset is not None


def detect_style_intent(style: str | None) -> StyleIntent:
    """Read bold, italic and super/subscript intent from a style attribute."""
    bold = italic = False
    offset: Literal["sup", "sub"] | None = None
    for declaration in parse_style_declarations(style):
        value = declaration.value.lower()
        if declaration.property == "font-weight" and value.startswith(_BOLD_VALUES):
            bold = True
        elif declaration.property == "font-style" and value.startswith(_ITALIC_VALUES):
            italic = True
        elif declaration.property == "vertical-align":
            if value.startswith("super"):
                offset = "sup"
            elif value.startswith("sub"):
                offset = "sub"
    return StyleIntent(bold=bold, italic=italic, offset=offset)


def build_semantic_replacement(
    soup: BeautifulSoup, container: Tag, intent: StyleIntent, *, contains_block: bool
) -> Tag | None:
    """Create the semantic element for ``intent`` and move the children into it.

    A super/subscript offset wins over bold/italic unless the container holds
    block content. Bold plus italic nests as ``<strong><em>``.
    """
    if intent.offset and not contains_block:
        replacement = soup.new_tag(intent.offset)
        return move_children(container, replacement)
    if intent.bold and intent.italic:
        replacement = soup.new_tag("strong")
        replacement.append(move_children(container, soup.new_tag("em")))
        return replacement
    if intent.bold:
        return move_children(container, soup.new_tag("strong"))
    if intent.italic:
        return move_children(container, soup.new_tag("em"))
    return None


def convert_styled_container(soup: BeautifulSoup, container: Tag) -> Tag | None:
    """Replace ``container`` with its semantic equivalent, if its style asks for one."""
    intent = detect_style_intent(container.get("style"))
    if not intent:
        return None
    replacement = build_semantic_replacement(
        soup, container, intent, contains_block=has_block_descendant(container)
    )
    if replacement is None:
        return None
    container.replace_with(replacement)
    return replacement


def promote_styled_spans(soup: BeautifulSoup, root: Tag) -> int:
    """Turn ``<span style=...>`` formatting into strong/em/sup/sub.

    Spans are visited innermost-first (reverse document order) so replacing
    an outer span never strands a nested one that has not been looked at.
    Spans wrapping block content are converted too; extracting the blocks
    is left to the structural repair passes.
    """
    converted = 0
    for span in reversed(root.find_all("span", style=True)):
        if not is_attached(span, root):
            continue
        if convert_styled_container(soup, span) is not None:
            converted += 1
    logger.debug("Promoted %d styled spans", converted)
    return converted


def normalize_legacy_tags(root: Tag) -> int:
    """Rename ``<b>`` to ``<strong>`` and ``<i>`` to ``<em>`` in place."""
    renamed = 0
    for tag in root.find_all(list(_LEGACY_RENAMES)):
        tag.name = _LEGACY_RENAMES[tag.name]
        renamed += 1
    return renamed
