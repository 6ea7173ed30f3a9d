"""Remove span and font wrappers that carry no meaning after promotion."""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup
from bs4.element import Tag

from word2html.html_utils import has_block_descendant, is_attached
from word2html.semantic import convert_styled_container

logger = logging.getLogger(__name__)


def remove_wrappers(soup: BeautifulSoup, root: Tag) -> int:
    """Unwrap every ``<span>`` and ``<font>``, innermost first.

    A span around block content is always unwrapped. Otherwise a span that
    still carries bold/italic/offset styling is converted before it goes.
    Font tags are unwrapped unconditionally.
    """
    removed = 0
    for span in reversed(root.find_all("span")):
        if not is_attached(span, root):
            continue
        if has_block_descendant(span):
            span.unwrap()
        elif convert_styled_container(soup, span) is None:
            span.unwrap()
        removed += 1

    for font in reversed(root.find_all("font")):
        if is_attached(font, root):
            font.unwrap()
            removed += 1

    logger.debug("Removed %d span/font wrappers", removed)
    return removed
