"""Whitespace and punctuation normalization on the cleaned tree."""

from __future__ import annotations

import logging
import re

from bs4.element import NavigableString, Tag

from word2html.html_utils import BLOCK_TAGS, iter_text_nodes, replace_text

logger = logging.getLogger(__name__)

_ASCII_WHITESPACE_RE = re.compile(r"[ \t\n\r\f\v]+")
_NBSP_RUN_RE = re.compile(r"\xa0{3,}")
_WHITESPACE_RE = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"(\S)\s+([.,!?;:])")
_LEADING_SPACE_PUNCT_RE = re.compile(r"^\s+(?=[.,!?;:])")
_PUNCTUATION = ".,!?;:"
_PRESERVE_TAGS = ("code",)


def normalize_whitespace(root: Tag) -> None:
    """Run every whitespace pass in order."""
    collapse_text_whitespace(root)
    normalize_anchor_text(root)
    space_links(root)
    tighten_punctuation(root)


def _is_preserved(node: NavigableString) -> bool:
    return node.find_parent(_PRESERVE_TAGS) is not None


def collapse_text_whitespace(root: Tag) -> int:
    """Collapse runs of ASCII whitespace to one space.

    Three or more consecutive non-breaking spaces become one; shorter runs
    are kept since they are usually intentional. Adjacent strings are merged
    first, and a leading space is dropped when the previous text in the same
    block already ends in one.
    """
    root.smooth()
    changed = 0
    previous = None
    for node in list(iter_text_nodes(root)):
        if _is_preserved(node):
            previous = None
            continue
        text = _ASCII_WHITESPACE_RE.sub(" ", str(node))
        text = _NBSP_RUN_RE.sub("\xa0", text)
        if (
            previous is not None
            and text.startswith(" ")
            and str(previous).endswith(" ")
            and _block_of(previous, root) is _block_of(node, root)
        ):
            text = text.lstrip(" ")
        if text != str(node):
            node = replace_text(node, text)
            changed += 1
        if text:
            previous = node
    return changed


def normalize_anchor_text(root: Tag) -> int:
    """Trim anchor text and pull punctuation tight inside links."""
    changed = 0
    for anchor in root.find_all("a"):
        if all(isinstance(child, NavigableString) for child in anchor.contents):
            text = _WHITESPACE_RE.sub(" ", anchor.get_text()).strip()
            text = _SPACE_BEFORE_PUNCT_RE.sub(r"\1\2", text)
            if text != anchor.get_text():
                anchor.string = text
                changed += 1
            continue

        nodes = list(iter_text_nodes(anchor))
        for index, node in enumerate(nodes):
            text = _WHITESPACE_RE.sub(" ", str(node))
            if index == 0:
                text = text.lstrip()
            if index == len(nodes) - 1:
                text = text.rstrip()
            if text != str(node):
                replace_text(node, text)
                changed += 1
    return changed


def space_links(root: Tag) -> int:
    """Insert a space where a link is glued to surrounding words."""
    inserted = 0
    for anchor in root.find_all("a"):
        text = anchor.get_text()
        if not text:
            continue
        before = anchor.previous_sibling
        if isinstance(before, NavigableString) and _is_word_char(before[-1:]) and _is_word_char(text[0]):
            anchor.insert_before(" ")
            inserted += 1
        after = anchor.next_sibling
        if isinstance(after, NavigableString) and _is_word_char(after[:1]) and _is_word_char(text[-1]):
            anchor.insert_after(" ")
            inserted += 1
    return inserted


def _is_word_char(char: str) -> bool:
    return bool(char) and (char.isalnum() or char == "_")


def tighten_punctuation(root: Tag) -> int:
    """Remove whitespace that sits directly before punctuation.

    Handles whitespace inside one text node and whitespace split across two
    neighbouring text nodes of the same block (``<a>link</a> .``).
    """
    changed = 0
    nodes = [node for node in iter_text_nodes(root) if not _is_preserved(node)]
    texts = [_SPACE_BEFORE_PUNCT_RE.sub(r"\1\2", str(node)) for node in nodes]
    blocks = [_block_of(node, root) for node in nodes]

    for index in range(len(texts) - 1):
        if blocks[index] is not blocks[index + 1]:
            continue
        current, following = texts[index], texts[index + 1]
        if following[:1] in _PUNCTUATION and following[:1] and current.rstrip() != current and current.strip():
            texts[index] = current.rstrip()
        elif _LEADING_SPACE_PUNCT_RE.match(following) and current[-1:] and not current[-1:].isspace():
            texts[index + 1] = _LEADING_SPACE_PUNCT_RE.sub("", following)

    for node, text in zip(nodes, texts):
        if text != str(node):
            replace_text(node, text)
            changed += 1
    if changed:
        logger.debug("Tightened punctuation in %d text nodes", changed)
    return changed


def _block_of(node: NavigableString, root: Tag) -> Tag:
    block = node.find_parent(BLOCK_TAGS)
    return block if block is not None else root
