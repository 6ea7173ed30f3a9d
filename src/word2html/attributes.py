"""Remove vendor and non-portable attributes from every element."""

from __future__ import annotations

import logging

from bs4.element import Tag

from word2html.html_utils import LAYOUT_STYLE_TAGS, class_string, parse_style_declarations

logger = logging.getLogger(__name__)

_DROPPED_ATTRIBUTES = frozenset({"lang", "dir", "aria-level", "role", "id"})
_VENDOR_ATTRIBUTE_PREFIXES = ("mso-", "o:")
_LAYOUT_PROPERTY_PREFIXES = ("border", "padding", "margin")
_VENDOR_CLASS_MARKER = "mso"


def scrub_attributes(root: Tag) -> None:
    """Strip style, vendor classes, vendor attributes, lang/dir/role/id.

    Layout elements (div, table, td, th) keep their border, padding and
    margin declarations verbatim; everything else in ``style`` is dropped.
    """
    for element in root.find_all(True):
        for name in list(element.attrs):
            lowered = name.lower()
            if lowered == "style":
                _scrub_style(element, name)
            elif lowered == "class":
                if _VENDOR_CLASS_MARKER in class_string(element).lower():
                    del element[name]
            elif lowered in _DROPPED_ATTRIBUTES or lowered.startswith(_VENDOR_ATTRIBUTE_PREFIXES):
                del element[name]


def filter_layout_style(style: str | None) -> str:
    """Keep only border/padding/margin declarations, joined with ``"; "``."""
    kept = [
        declaration.source
        for declaration in parse_style_declarations(style)
        if declaration.property.startswith(_LAYOUT_PROPERTY_PREFIXES)
    ]
    return "; ".join(kept)


def _scrub_style(element: Tag, name: str) -> None:
    if element.name not in LAYOUT_STYLE_TAGS:
        del element[name]
        return

    preserved = filter_layout_style(element.get(name))
    if preserved:
        element[name] = preserved
        logger.debug("Preserved layout style on <%s>: %s", element.name, preserved)
    else:
        del element[name]
