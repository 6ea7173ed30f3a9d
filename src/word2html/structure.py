"""Repair the invalid structure word processors emit.

Every pass mutates the tree in place, is idempotent and can be re-run.
:func:`repair_structure` runs them in their required order.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, Tag

from word2html.config import EMPTY_TAG_MAX_ITERATIONS, NESTING_REPAIR_MAX_ITERATIONS
from word2html.html_utils import (
    ALLOWED_TAGS,
    BLOCK_TAGS,
    EMPTY_SEMANTIC_TAGS,
    HEADING_TAGS,
    INLINE_TAGS,
    LIST_TAGS,
    class_string,
    has_block_descendant,
    has_meaningful_text,
    insert_after,
    is_attached,
    is_block,
    is_tag,
    is_whitespace,
    iter_text_nodes,
    next_significant_sibling,
    previous_significant_sibling,
    replace_text,
    text_of,
)

logger = logging.getLogger(__name__)

_NBSP = "\xa0"
_DROPPED_ELEMENTS = frozenset(
    {
        "script", "style", "meta", "link", "title", "noscript", "template", "xml",
        "head", "img", "svg", "iframe", "object", "embed", "hr", "col", "colgroup",
    }
)
_CONTAINER_TAGS = frozenset(
    {
        "div", "section", "article", "header", "footer", "main", "nav", "aside",
        "figure", "center", "address", "td", "th", "caption", "dt", "dd",
        "figcaption", "pre",
    }
)
_LAYOUT_CONTAINERS = frozenset({"div", "table", "thead", "tbody", "tfoot", "tr", "td", "th"})
_SOURCES_STOP_TAGS = BLOCK_TAGS | {"section"}
_MAX_BREAK_RUN = 3
_INTERCHANGE_MARKER = "apple-interchange"
_WHITESPACE_RE = re.compile(r"\s+")


def repair_structure(
    soup: BeautifulSoup, root: Tag, *, keep_layout_containers: bool = False
) -> None:
    """Run every structural pass in order."""
    passes: list[tuple[str, Callable[[], object]]] = [
        ("enforce_vocabulary", lambda: enforce_vocabulary(root, keep_layout_containers=keep_layout_containers)),
        ("unwrap_document_wrapper", lambda: unwrap_document_wrapper(root)),
        ("remove_empty_semantic_tags", lambda: remove_empty_semantic_tags(root)),
        ("unwrap_block_wrapping_inline_tags", lambda: unwrap_block_wrapping_inline_tags(soup, root)),
        ("fix_strong_wrapping_blocks", lambda: fix_strong_wrapping_blocks(soup, root)),
        ("remove_strong_inside_headings", lambda: remove_strong_inside_headings(root)),
        ("normalize_list_children", lambda: normalize_list_children(soup, root)),
        ("flatten_list_item_paragraphs", lambda: flatten_list_item_paragraphs(root)),
        ("remove_breaks_in_list_items", lambda: remove_breaks_in_list_items(root)),
        ("remove_breaks_in_lists", lambda: remove_breaks_in_lists(root)),
        ("remove_breaks_around_lists", lambda: remove_breaks_around_lists(root)),
        ("absorb_trailing_sources", lambda: absorb_trailing_sources(soup, root)),
        ("repair_invalid_nesting", lambda: repair_invalid_nesting(root)),
        ("remove_leftover_empty_tags", lambda: remove_empty_semantic_tags(root)),
        ("remove_empty_lists", lambda: remove_empty_lists(root)),
        ("clean_line_breaks", lambda: clean_line_breaks(root)),
        ("remove_empty_paragraphs", lambda: remove_empty_paragraphs(root)),
    ]
    for name, run in passes:
        result = run()
        logger.debug("Structure pass %s: %s", name, result)


# ---------------------------------------------------------------------------
# Tag vocabulary
# ---------------------------------------------------------------------------


def enforce_vocabulary(root: Tag, *, keep_layout_containers: bool = False) -> int:
    """Drop, convert or unwrap every tag outside the output vocabulary."""
    changed = 0
    for tag in root.find_all(_DROPPED_ELEMENTS):
        if is_attached(tag, root):
            tag.decompose()
            changed += 1

    for tag in reversed(root.find_all(True)):
        if not is_attached(tag, root):
            continue
        name = tag.name
        if name in ALLOWED_TAGS:
            if name == "a" and not tag.get("href"):
                tag.unwrap()
                changed += 1
            continue
        if keep_layout_containers and name in _LAYOUT_CONTAINERS:
            continue
        if name in _CONTAINER_TAGS:
            _dissolve_container(tag)
        else:
            tag.unwrap()
        changed += 1
    return changed


def _dissolve_container(tag: Tag) -> None:
    if any(is_block(child) for child in tag.children):
        tag.unwrap()
    elif tag.find_parent(["p", *HEADING_TAGS]) is not None:
        tag.unwrap()
    elif not has_meaningful_text(tag) and _NBSP not in text_of(tag):
        tag.decompose()
    else:
        tag.name = "p"
        tag.attrs = {}


# ---------------------------------------------------------------------------
# Inline tags around blocks
# ---------------------------------------------------------------------------


def unwrap_document_wrapper(root: Tag) -> bool:
    """Unwrap a lone strong/b element that wraps the entire document."""
    children = [child for child in root.children if not is_whitespace(child)]
    if len(children) != 1:
        return False
    wrapper = children[0]
    if not is_tag(wrapper, "strong", "b") or not has_block_descendant(wrapper):
        return False
    wrapper.unwrap()
    logger.debug("Unwrapped document-level <%s> wrapper", wrapper.name)
    return True


def remove_empty_semantic_tags(root: Tag, max_iterations: int = EMPTY_TAG_MAX_ITERATIONS) -> int:
    """Unwrap strong/em/b/i/u/span elements without visible text.

    Repeated until nothing changes, since removing a tag can leave its
    parent empty.
    """
    total = 0
    for _ in range(max_iterations):
        removed = 0
        for tag in reversed(root.find_all(EMPTY_SEMANTIC_TAGS)):
            if is_attached(tag, root) and not has_meaningful_text(tag):
                tag.unwrap()
                removed += 1
        total += removed
        if not removed:
            break
    return total


def unwrap_block_wrapping_inline_tags(soup: BeautifulSoup, root: Tag) -> int:
    """Unwrap inline tags whose direct children are all block elements."""
    unwrapped = 0
    for tag in reversed(root.find_all(EMPTY_SEMANTIC_TAGS)):
        if not is_attached(tag, root) or not _wraps_only_blocks(tag):
            continue
        if tag.name == "strong":
            _carry_bold_into_headings(soup, tag)
        tag.unwrap()
        unwrapped += 1
    return unwrapped


def fix_strong_wrapping_blocks(soup: BeautifulSoup, root: Tag) -> int:
    """Unwrap ``<strong>`` elements holding any direct block child."""
    fixed = 0
    for strong in reversed(root.find_all("strong")):
        if not is_attached(strong, root):
            continue
        if not any(is_block(child) for child in strong.children):
            continue
        _carry_bold_into_headings(soup, strong)
        strong.unwrap()
        fixed += 1
    return fixed


def _wraps_only_blocks(tag: Tag) -> bool:
    has_block = False
    for child in tag.children:
        if is_whitespace(child):
            continue
        if not is_block(child):
            return False
        has_block = True
    return has_block


def _carry_bold_into_headings(soup: BeautifulSoup, strong: Tag) -> None:
    """Wrap the first text run of each directly wrapped heading in its own strong."""
    for heading in strong.find_all(HEADING_TAGS, recursive=False):
        if heading.find("strong", recursive=False) is not None:
            continue
        for child in heading.children:
            if isinstance(child, NavigableString) and child.strip():
                _wrap_text_in_strong(soup, child)
                break


def _wrap_text_in_strong(soup: BeautifulSoup, node: NavigableString) -> None:
    text = str(node)
    stripped = text.strip()
    leading = text[: len(text) - len(text.lstrip())]
    trailing = text[len(text.rstrip()) :]
    inner = soup.new_tag("strong")
    inner.string = stripped
    node.replace_with(inner)
    if leading:
        inner.insert_before(leading)
    if trailing:
        inner.insert_after(trailing)


def remove_strong_inside_headings(root: Tag) -> int:
    """Headings are bold already; a nested strong adds nothing."""
    removed = 0
    for heading in root.find_all(HEADING_TAGS):
        for strong in heading.find_all("strong"):
            strong.unwrap()
            removed += 1
    return removed


def repair_invalid_nesting(root: Tag, max_iterations: int = NESTING_REPAIR_MAX_ITERATIONS) -> int:
    """Hoist block descendants out of inline elements.

    The outermost blocks inside an inline element become its following
    siblings, in their original order. An inline element left empty is
    removed. Bounded by ``max_iterations`` sweeps.
    """
    hoisted = 0
    for _ in range(max_iterations):
        changed = False
        for inline in root.find_all(INLINE_TAGS):
            if not is_attached(inline, root):
                continue
            blocks = _outermost_blocks(inline)
            if not blocks:
                continue
            for block in blocks:
                block.extract()
            insert_after(inline, blocks)
            hoisted += len(blocks)
            changed = True
            if all(is_whitespace(child) for child in inline.contents):
                inline.decompose()
        if not changed:
            break
    return hoisted


def _outermost_blocks(inline: Tag) -> list[Tag]:
    blocks = []
    for block in inline.find_all(BLOCK_TAGS):
        nested = False
        for parent in block.parents:
            if parent is inline:
                break
            if parent.name in BLOCK_TAGS:
                nested = True
                break
        if not nested:
            blocks.append(block)
    return blocks


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------


def normalize_list_children(soup: BeautifulSoup, root: Tag) -> int:
    """Make every direct child of ul/ol a list item.

    Stray runs of content become new items; a nested list directly under a
    list joins the preceding item.
    """
    created = 0
    for lst in root.find_all(LIST_TAGS):
        if not is_attached(lst, root):
            continue
        run: list[PageElement] = []
        previous_item: Tag | None = None
        for child in list(lst.contents):
            if is_tag(child, "li"):
                created += _flush_list_run(soup, run, before=child)
                run = []
                previous_item = child
            elif is_whitespace(child):
                child.extract()
            elif is_tag(child, *LIST_TAGS) and previous_item is not None and not run:
                previous_item.append(child)
            else:
                run.append(child)
        created += _flush_list_run(soup, run, before=None, parent=lst)
    return created


def _flush_list_run(
    soup: BeautifulSoup,
    run: list[PageElement],
    *,
    before: Tag | None,
    parent: Tag | None = None,
) -> int:
    if not run:
        return 0
    if not any(has_meaningful_text(node) for node in run):
        for node in run:
            node.extract()
        return 0
    item = soup.new_tag("li")
    if before is not None:
        before.insert_before(item)
    else:
        parent.append(item)
    for node in run:
        item.append(node)
    return 1


def flatten_list_item_paragraphs(root: Tag) -> int:
    """Splice paragraph content directly into the enclosing list item."""
    flattened = 0
    for item in root.find_all("li"):
        for paragraph in item.find_all("p"):
            previous = paragraph.previous_sibling
            if previous is not None and has_meaningful_text(previous):
                if not text_of(previous)[-1].isspace():
                    paragraph.insert_before(" ")
            paragraph.unwrap()
            flattened += 1
    return flattened


def remove_breaks_in_list_items(root: Tag) -> int:
    removed = 0
    for item in root.find_all("li"):
        for br in item.find_all("br"):
            _drop_break(br)
            removed += 1
    return removed


def remove_breaks_in_lists(root: Tag) -> int:
    """Drop line breaks sitting directly inside ul/ol, outside any item."""
    removed = 0
    for lst in root.find_all(LIST_TAGS):
        for br in lst.find_all("br"):
            _drop_break(br)
            removed += 1
    return removed


def _drop_break(br: Tag) -> None:
    """Remove ``br``, leaving a space if it separated two pieces of text."""
    previous = br.previous_sibling
    following = br.next_sibling
    if (
        has_meaningful_text(previous)
        and has_meaningful_text(following)
        and not is_block(previous)
        and not is_block(following)
        and not text_of(previous)[-1].isspace()
        and not text_of(following)[0].isspace()
    ):
        br.insert_before(" ")
    br.decompose()


def remove_breaks_around_lists(root: Tag) -> int:
    """Strip whitespace and line breaks directly before and after lists."""
    removed = 0
    for lst in root.find_all(LIST_TAGS):
        removed += _strip_break_siblings(lst, forward=False)
        removed += _strip_break_siblings(lst, forward=True)
    return removed


def _strip_break_siblings(lst: Tag, *, forward: bool) -> int:
    removed = 0
    node = lst.next_sibling if forward else lst.previous_sibling
    while node is not None and (is_whitespace(node) or is_tag(node, "br")):
        following = node.next_sibling if forward else node.previous_sibling
        node.extract()
        removed += 1
        node = following
    return removed


def absorb_trailing_sources(soup: BeautifulSoup, root: Tag) -> int:
    """Fold citations ejected after a "Sources" list back into the list.

    Content following the list up to the next block element is grouped on
    line breaks; every group with visible text becomes a new list item.
    """
    appended = 0
    for lst in root.find_all(LIST_TAGS):
        if not is_attached(lst, root):
            continue
        if not _is_sources_paragraph(previous_significant_sibling(lst)):
            continue
        for group in _collect_trailing_groups(lst):
            if not any(has_meaningful_text(node) for node in group):
                for node in group:
                    node.extract()
                continue
            item = soup.new_tag("li")
            for node in group:
                item.append(node)
            _tidy_item_text(item)
            lst.append(item)
            appended += 1
    return appended


def _is_sources_paragraph(node: PageElement | None) -> bool:
    if not is_tag(node, "p"):
        return False
    return text_of(node).strip().lower().startswith("sources")


def _collect_trailing_groups(lst: Tag) -> list[list[PageElement]]:
    groups: list[list[PageElement]] = []
    current: list[PageElement] = []
    sibling = lst.next_sibling
    while sibling is not None:
        following = sibling.next_sibling
        if is_tag(sibling, "br"):
            sibling.extract()
            if current:
                groups.append(current)
                current = []
        elif isinstance(sibling, Tag) and sibling.name in _SOURCES_STOP_TAGS:
            break
        elif is_whitespace(sibling) and not current:
            sibling.extract()
        else:
            current.append(sibling)
        sibling = following
    if current:
        groups.append(current)
    return groups


def _tidy_item_text(item: Tag) -> None:
    nodes = list(iter_text_nodes(item))
    for index, node in enumerate(nodes):
        text = _WHITESPACE_RE.sub(" ", str(node))
        if index == 0:
            text = text.lstrip()
        if index == len(nodes) - 1:
            text = text.rstrip()
        replace_text(node, text)


def remove_empty_lists(root: Tag) -> int:
    """Remove lists with no items, or whose items are all empty."""
    removed = 0
    for lst in reversed(root.find_all(LIST_TAGS)):
        if not is_attached(lst, root):
            continue
        items = lst.find_all("li")
        if not items or not any(has_meaningful_text(item) for item in items):
            lst.decompose()
            removed += 1
    return removed


# ---------------------------------------------------------------------------
# Line breaks and empty blocks
# ---------------------------------------------------------------------------


def clean_line_breaks(root: Tag) -> int:
    """Remove redundant line breaks; keep the ones inside paragraph text."""
    removed = 0
    for br in root.find_all("br"):
        if not is_attached(br, root):
            continue
        if _is_redundant_break(br, root):
            br.decompose()
            removed += 1
    return removed + _collapse_break_runs(root)


def _is_redundant_break(br: Tag, root: Tag) -> bool:
    if _INTERCHANGE_MARKER in class_string(br).lower():
        return True
    parent = br.parent
    previous = previous_significant_sibling(br)
    following = next_significant_sibling(br)

    if parent.name == "p":
        return _is_trailing_break(br)
    if parent.name in BLOCK_TAGS and is_block(following):
        return True
    if is_block(previous) and is_block(following):
        return True
    if parent.name in HEADING_TAGS and (following is None or is_tag(following, "br")):
        return True
    if parent is root:
        return previous is None or following is None or is_block(previous) or is_block(following)
    return False


def _is_trailing_break(br: Tag) -> bool:
    """A break with nothing but other breaks after it and content before it."""
    node = br.next_sibling
    while node is not None:
        if is_tag(node, "br") or is_whitespace(node):
            node = node.next_sibling
            continue
        return False
    node = br.previous_sibling
    while node is not None:
        if not is_tag(node, "br") and has_meaningful_text(node):
            return True
        node = node.previous_sibling
    return False


def _collapse_break_runs(root: Tag) -> int:
    """Cut runs of four or more consecutive breaks down to two."""
    removed = 0
    for br in root.find_all("br"):
        if not is_attached(br, root) or is_tag(previous_significant_sibling(br), "br"):
            continue
        run = [br]
        node = next_significant_sibling(br)
        while is_tag(node, "br"):
            run.append(node)
            node = next_significant_sibling(node)
        if len(run) > _MAX_BREAK_RUN:
            for extra in run[2:]:
                extra.decompose()
                removed += 1
    return removed


def remove_empty_paragraphs(root: Tag) -> int:
    """Remove paragraphs and headings without text.

    A paragraph holding only non-breaking spaces is deliberate spacing and
    is kept as a single ``&nbsp;``.
    """
    removed = 0
    for block in reversed(root.find_all(["p", *HEADING_TAGS])):
        if not is_attached(block, root):
            continue
        text = text_of(block)
        if text.strip():
            continue
        if block.name == "p" and _NBSP in text:
            if text != _NBSP or len(block.contents) != 1:
                block.clear()
                block.append(_NBSP)
            continue
        block.decompose()
        removed += 1
    return removed
