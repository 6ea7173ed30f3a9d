"""Pipeline entry points: turn pasted word-processor HTML into clean HTML."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from bs4.element import Tag

from word2html.attributes import scrub_attributes
from word2html.config import WORD2HTML_PARSER, WORD2HTML_VERBOSE
from word2html.formatter import format_html, remove_space_before_punctuation_html, serialize_root
from word2html.html_utils import element_children, parse_fragment, remove_comments
from word2html.reorder import fix_reversed_document_order
from word2html.schemas import CleanResult
from word2html.semantic import normalize_legacy_tags, promote_styled_spans
from word2html.structure import repair_structure
from word2html.vendor import strip_vendor_markup, unwrap_bold_wrapper
from word2html.whitespace import normalize_whitespace
from word2html.wrappers import remove_wrappers

logger = logging.getLogger(__name__)

_SNAPSHOT_TEXT_CHARS = 50


@dataclass
class CleanOptions:
    """Options for a cleaning run.

    Attributes:
        verbose: Log per-stage progress and the top-level document order
            before and after cleaning at DEBUG level.
        parser: BeautifulSoup tree builder ("html5lib", "lxml", "html.parser").
        keep_layout_containers: Keep div and table elements, with their
            border/padding/margin styles, instead of dissolving them.
        fix_reversed_order: Detect and reverse upside-down exports.
        unwrap_bold_wrapper: Remove a ``<b>`` wrapping the whole document
            at string level before parsing.
    """

    verbose: bool = WORD2HTML_VERBOSE
    parser: str = WORD2HTML_PARSER
    keep_layout_containers: bool = False
    fix_reversed_order: bool = True
    unwrap_bold_wrapper: bool = False


def clean_html(html: str | None, options: CleanOptions | None = None) -> str:
    """Clean pasted HTML and return the formatted result.

    Empty or whitespace-only input yields ``""``.
    """
    return clean_document(html, options).html


def clean_document(html: str | None, options: CleanOptions | None = None) -> CleanResult:
    """Run the full cleaning pipeline and report what it did.

    Raises:
        ParseError: If the configured parser backend is not installed.
    """
    options = options or CleanOptions()
    if not html or not html.strip():
        return CleanResult(html="")

    stages: list[str] = []

    def done(stage: str) -> None:
        stages.append(stage)
        if options.verbose:
            logger.debug("Stage complete: %s", stage)

    raw = strip_vendor_markup(html)
    done("strip_vendor_markup")
    if options.unwrap_bold_wrapper:
        raw = unwrap_bold_wrapper(raw, options.parser)
        done("unwrap_bold_wrapper")

    soup, root = parse_fragment(raw, options.parser)
    done("parse")
    if options.verbose:
        _log_order_snapshot("before cleaning", root)

    remove_comments(root)
    done("remove_comments")
    promote_styled_spans(soup, root)
    done("promote_styled_spans")
    scrub_attributes(root)
    done("scrub_attributes")
    remove_wrappers(soup, root)
    done("remove_wrappers")
    normalize_legacy_tags(root)
    done("normalize_legacy_tags")
    repair_structure(soup, root, keep_layout_containers=options.keep_layout_containers)
    done("repair_structure")

    reordered = False
    if options.fix_reversed_order:
        reordered = fix_reversed_document_order(root)
        done("fix_reversed_document_order")

    normalize_whitespace(root)
    done("normalize_whitespace")
    if options.verbose:
        _log_order_snapshot("after cleaning", root)

    formatted = format_html(serialize_root(root))
    done("serialize")
    cleaned = remove_space_before_punctuation_html(formatted)
    done("remove_space_before_punctuation")

    return CleanResult(
        html=cleaned,
        reordered=reordered,
        stages=stages,
        top_level_tags=_top_level_tags(cleaned, options.parser),
    )


def _top_level_tags(html: str, parser: str) -> list[str]:
    if not html:
        return []
    _, root = parse_fragment(html, parser)
    return [child.name for child in element_children(root)]


def _log_order_snapshot(label: str, root: Tag) -> None:
    children = element_children(root)
    logger.debug("Top-level order %s (%d elements)", label, len(children))
    for index, child in enumerate(children):
        text = " ".join(child.get_text().split())[:_SNAPSHOT_TEXT_CHARS]
        logger.debug("  %d: <%s> %s", index, child.name, text)
