"""Detect and undo upside-down word-processor exports."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from bs4.element import PageElement, Tag

from word2html.config import (
    REORDER_CONTENT_FRACTION,
    REORDER_CONTENT_MIN,
    REORDER_MIN_CONTENT_BEFORE_LAST_H1,
    REORDER_TAIL_FRACTION,
    REORDER_TAIL_MIN_CHILDREN,
)
from word2html.html_utils import HEADING_TAGS, LIST_TAGS, element_children, is_whitespace

logger = logging.getLogger(__name__)

_CONTENT_TAGS = HEADING_TAGS | LIST_TAGS | {"p"}
_LOWER_HEADINGS = frozenset({"h2", "h3"})


@dataclass(frozen=True)
class ReorderDecision:
    """Outcome of the reversed-order heuristic."""

    reverse: bool
    rule: str | None = None
    h1_index: int = -1
    child_count: int = 0


def detect_reversed_order(root: Tag) -> ReorderDecision:
    """Decide whether the top-level children of ``root`` are upside down.

    Only direct element children are considered. The document is flagged
    when the first ``<h1>``:

    * is the last child with at least five content elements before it, or
    * sits in the tail window and an ``<h2>``/``<h3>`` comes before it, or
    * sits in the tail window and more than 30% of the children (at least
      ten) are content elements before it.

    The tail window starts at whichever comes later: the final 10% of the
    children or the last ten of them.
    """
    children = element_children(root)
    count = len(children)
    if count < 2:
        return ReorderDecision(reverse=False, child_count=count)

    names = [child.name for child in children]
    if "h1" not in names:
        return ReorderDecision(reverse=False, child_count=count)

    h1_index = names.index("h1")
    before = names[:h1_index]
    content_before = sum(1 for name in before if name in _CONTENT_TAGS)
    lower_headings_before = any(name in _LOWER_HEADINGS for name in before)
    window_start = max(
        math.floor(count * (1 - REORDER_TAIL_FRACTION)), count - REORDER_TAIL_MIN_CHILDREN
    )
    near_end = h1_index >= window_start

    rule = None
    if h1_index == count - 1 and content_before >= REORDER_MIN_CONTENT_BEFORE_LAST_H1:
        rule = "h1-last"
    elif near_end and lower_headings_before:
        rule = "h1-after-lower-headings"
    elif near_end and content_before > max(count * REORDER_CONTENT_FRACTION, REORDER_CONTENT_MIN):
        rule = "h1-after-bulk-content"

    return ReorderDecision(
        reverse=rule is not None, rule=rule, h1_index=h1_index, child_count=count
    )


def reverse_top_level(root: Tag) -> None:
    """Reverse the order of the non-whitespace direct children of ``root``."""
    nodes: list[PageElement] = [child for child in root.contents if not is_whitespace(child)]
    for node in nodes:
        node.extract()
    for node in reversed(nodes):
        root.append(node)


def fix_reversed_document_order(root: Tag) -> bool:
    """Reverse the document in place when it looks upside down.

    Returns whether a reversal happened.
    """
    decision = detect_reversed_order(root)
    if not decision.reverse:
        return False
    logger.info(
        "Detected reversed document order (%s): h1 at index %d of %d, reversing",
        decision.rule,
        decision.h1_index,
        decision.child_count,
    )
    reverse_top_level(root)
    return True
