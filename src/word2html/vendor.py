"""Text-level removal of word-processor vendor markup before parsing.

A standards parser "repairs" Office markup (conditional comments, ``o:p``
elements, namespaced attributes) in ways that move content around, so these
constructs are stripped from the raw string first.
"""

from __future__ import annotations

import logging
import re

from word2html.config import BOLD_WRAPPER_MAX_CONTEXT, BOLD_WRAPPER_MIN_CONTENT
from word2html.html_utils import element_children, parse_fragment, serialize_node

logger = logging.getLogger(__name__)

_CONDITIONAL_COMMENT_RE = re.compile(r"<!--\[if.*?endif\]-->", re.IGNORECASE | re.DOTALL)
# Word list bullets rendered for clients without list support.
_SUPPORT_LISTS_RE = re.compile(
    r"<!\[if\s+!supportLists\]>.*?<!\[endif\]>", re.IGNORECASE | re.DOTALL
)
_DOWNLEVEL_MARKER_RE = re.compile(r"<!\[(?:if[^\]]*|endif)\]>", re.IGNORECASE)

_EMPTY_VENDOR_ELEMENT_RE = re.compile(r"<o:p>\s*</o:p>", re.IGNORECASE)
_FILLED_VENDOR_ELEMENT_RE = re.compile(r"<o:p>.*?</o:p>", re.IGNORECASE | re.DOTALL)
_VENDOR_TAG_RE = re.compile(r"</?(?:o|w|v|m|st\d*):[^>]*>", re.IGNORECASE)

_START_TAG_RE = re.compile(r"<[a-zA-Z][^<>]*>")
_VENDOR_CLASS_RE = re.compile(r"""\s+class\s*=\s*(["']?)Mso[a-zA-Z]+\1(?=[\s/>])""", re.IGNORECASE)
_STYLE_ATTR_RE = re.compile(r"""(\sstyle\s*=\s*)(["'])(.*?)\2""", re.IGNORECASE | re.DOTALL)
_VENDOR_DECLARATION_RE = re.compile(r"mso-[^;]*;?", re.IGNORECASE)
_VENDOR_ATTR_RE = re.compile(
    r"""\s+(?:mso-|o:)[a-z-]+(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]+))?""", re.IGNORECASE
)
_XMLNS_ATTR_RE = re.compile(r"""\s+xmlns(?::\w+)?\s*=\s*(?:"[^"]*"|'[^']*')""", re.IGNORECASE)

_BOLD_OPEN_RE = re.compile(r"<b(?:\s[^>]*)?>", re.IGNORECASE)
_BOLD_CLOSE_RE = re.compile(r"</b\s*>", re.IGNORECASE)


def strip_vendor_markup(html: str) -> str:
    """Remove Office conditional comments, namespaced tags, classes and styles.

    Unmatched patterns are left untouched; this never fails.
    """
    if not html:
        return ""

    cleaned = _CONDITIONAL_COMMENT_RE.sub("", html)
    cleaned = _SUPPORT_LISTS_RE.sub("", cleaned)
    cleaned = _DOWNLEVEL_MARKER_RE.sub("", cleaned)

    cleaned = _START_TAG_RE.sub(_clean_start_tag, cleaned)

    cleaned = _EMPTY_VENDOR_ELEMENT_RE.sub("", cleaned)
    # A filled <o:p> usually stands for an intentional blank paragraph.
    cleaned = _FILLED_VENDOR_ELEMENT_RE.sub("&nbsp;", cleaned)
    cleaned = _VENDOR_TAG_RE.sub("", cleaned)
    return cleaned


def _clean_start_tag(match: re.Match[str]) -> str:
    tag = match.group(0)
    tag = _VENDOR_CLASS_RE.sub("", tag)
    tag = _STYLE_ATTR_RE.sub(_strip_vendor_declarations, tag)
    tag = _VENDOR_ATTR_RE.sub("", tag)
    return _XMLNS_ATTR_RE.sub("", tag)


def _strip_vendor_declarations(match: re.Match[str]) -> str:
    prefix, quote, value = match.groups()
    value = _VENDOR_DECLARATION_RE.sub("", value)
    return f"{prefix}{quote}{value}{quote}"


def unwrap_bold_wrapper(html: str, parser: str | None = None) -> str:
    """Remove a ``<b>`` element that wraps (almost) the whole document.

    The first ``<b>`` is matched to its balancing ``</b>`` by counting
    nested ``<b>`` tags. It only counts as a wrapper when little text sits
    outside it and it holds substantial content. The wrapped content is
    re-parsed on its own so an upside-down export inside the wrapper can be
    put back in order.
    """
    opening = _BOLD_OPEN_RE.search(html)
    if not opening:
        return html

    depth = 1
    pos = opening.end()
    closing = None
    while depth:
        next_open = _BOLD_OPEN_RE.search(html, pos)
        next_close = _BOLD_CLOSE_RE.search(html, pos)
        if next_close is None:
            logger.debug("No closing </b> for wrapper at offset %d", opening.start())
            return html
        if next_open is not None and next_open.start() < next_close.start():
            depth += 1
            pos = next_open.end()
            continue
        depth -= 1
        pos = next_close.end()
        closing = next_close

    before = html[: opening.start()]
    content = html[opening.end() : closing.start()]
    after = html[closing.end() :]
    if (
        len(before.strip()) >= BOLD_WRAPPER_MAX_CONTEXT
        or len(after.strip()) >= BOLD_WRAPPER_MAX_CONTEXT
        or len(content) <= BOLD_WRAPPER_MIN_CONTENT
    ):
        return html

    logger.debug("Unwrapped document-level <b> wrapper")
    return before + _restore_wrapped_order(content, parser) + after


def _restore_wrapped_order(content: str, parser: str | None) -> str:
    _, root = parse_fragment(content, parser)
    children = element_children(root)
    names = [child.name for child in children]
    if "h1" not in names:
        return content

    h1_index = names.index("h1")
    lower_before = any(name in {"h2", "h3"} for name in names[:h1_index])
    if h1_index > len(children) / 2 and lower_before:
        logger.info(
            "Content inside <b> wrapper appears reversed (h1 at %d of %d), restoring order",
            h1_index,
            len(children),
        )
        return "".join(serialize_node(child) for child in reversed(children))
    return content
