"""Shared HTML tree utilities for word-processor document cleaning."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from word2html.config import WORD2HTML_PARSER
from word2html.exceptions import ParseError

try:
    from bs4 import BeautifulSoup, FeatureNotFound
    from bs4.dammit import EntitySubstitution, UnicodeDammit
    from bs4.element import NavigableString, PageElement, PreformattedString, Tag
    from bs4.formatter import HTMLFormatter
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise ParseError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc


HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
LIST_TAGS = frozenset({"ul", "ol"})
BLOCK_TAGS = HEADING_TAGS | LIST_TAGS | {"p", "li", "div", "blockquote"}
INLINE_TAGS = frozenset({"b", "strong", "i", "em", "u", "span", "a", "code", "sup", "sub"})
# Inline tags that are dropped once they carry no visible text.
EMPTY_SEMANTIC_TAGS = ("strong", "em", "b", "i", "u", "span")
LAYOUT_STYLE_TAGS = frozenset({"div", "table", "td", "th"})
ALLOWED_TAGS = (
    HEADING_TAGS
    | LIST_TAGS
    | {"p", "a", "li", "strong", "em", "b", "i", "u", "br", "blockquote", "code", "sup", "sub"}
)

_NBSP = "\xa0"


def _substitute_entities(text: str) -> str:
    return EntitySubstitution.substitute_xml(text).replace(_NBSP, "&nbsp;")


# Minimal escaping, HTML5 void elements (<br>), and &nbsp; kept visible.
OUTPUT_FORMATTER = HTMLFormatter(
    entity_substitution=_substitute_entities,
    void_element_close_prefix=None,
)


@dataclass(frozen=True)
class StyleDeclaration:
    """A single ``property: value`` pair from a style attribute."""

    property: str
    value: str
    source: str


def decode_markup(content: bytes, declared: str | None = None) -> str:
    """Decode raw HTML bytes.

    ``declared`` (e.g. an HTTP charset) wins when given. Otherwise the byte
    order mark and any ``<meta charset>`` are honoured, falling back to
    sniffing; Word's "Save as Web Page" files are usually windows-1252.
    """
    dammit = UnicodeDammit(
        content, known_definite_encodings=[declared] if declared else [], is_html=True
    )
    if dammit.unicode_markup is None:
        raise ParseError("Could not determine the character encoding of the input")
    return dammit.unicode_markup


def parse_fragment(html: str, parser: str | None = None) -> tuple[BeautifulSoup, Tag]:
    """Parse an HTML string and return the soup and its content root."""
    builder = parser or WORD2HTML_PARSER
    try:
        soup = BeautifulSoup(html, builder)
    except FeatureNotFound as exc:
        raise ParseError(
            f"HTML parser backend {builder!r} is not available (pip install {builder})."
        ) from exc
    return soup, find_document_root(soup)


def find_document_root(soup: BeautifulSoup) -> Tag:
    """Return the element whose children are the document content.

    Searches for the document root in the following order:
    1. <body> element
    2. The soup itself as fallback
    """
    if soup.body:
        return soup.body
    return soup


def remove_comments(root: Tag) -> int:
    """Drop comments, CDATA, doctype and processing instructions from the tree."""
    nodes = [node for node in root.descendants if isinstance(node, PreformattedString)]
    for node in nodes:
        node.extract()
    return len(nodes)


def serialize_node(node: PageElement) -> str:
    if isinstance(node, Tag):
        return node.decode(formatter=OUTPUT_FORMATTER)
    return node.output_ready(formatter=OUTPUT_FORMATTER)


def is_tag(node: PageElement | None, *names: str) -> bool:
    if not isinstance(node, Tag):
        return False
    return not names or node.name in names


def is_block(node: PageElement | None) -> bool:
    return isinstance(node, Tag) and node.name in BLOCK_TAGS


def is_whitespace(node: PageElement | None) -> bool:
    """True for text nodes holding only whitespace (non-breaking space included)."""
    return isinstance(node, NavigableString) and not node.strip()


def text_of(node: PageElement | None) -> str:
    if node is None:
        return ""
    if isinstance(node, Tag):
        return node.get_text()
    return str(node)


def has_meaningful_text(node: PageElement | None) -> bool:
    return bool(text_of(node).strip())


def has_block_descendant(tag: Tag) -> bool:
    return tag.find(BLOCK_TAGS) is not None


def is_attached(node: PageElement, root: Tag) -> bool:
    """True when ``node`` is still reachable from ``root``."""
    return any(parent is root for parent in node.parents)


def next_significant_sibling(node: PageElement) -> PageElement | None:
    """Next sibling, skipping whitespace-only text."""
    sibling = node.next_sibling
    while sibling is not None and is_whitespace(sibling):
        sibling = sibling.next_sibling
    return sibling


def previous_significant_sibling(node: PageElement) -> PageElement | None:
    """Previous sibling, skipping whitespace-only text."""
    sibling = node.previous_sibling
    while sibling is not None and is_whitespace(sibling):
        sibling = sibling.previous_sibling
    return sibling


def element_children(tag: Tag) -> list[Tag]:
    return [child for child in tag.children if isinstance(child, Tag)]


def iter_text_nodes(root: Tag) -> Iterator[NavigableString]:
    """Yield text nodes under ``root`` in document order."""
    for node in root.descendants:
        if isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
            yield node


def replace_text(node: NavigableString, text: str) -> NavigableString:
    """Swap a text node's payload, returning the node now in the tree."""
    if text == str(node):
        return node
    replacement = NavigableString(text)
    node.replace_with(replacement)
    return replacement


def move_children(source: Tag, target: Tag) -> Tag:
    """Move every child of ``source`` to the end of ``target``, keeping order."""
    for child in list(source.contents):
        target.append(child)
    return target


def insert_after(anchor: PageElement, nodes: list[PageElement]) -> None:
    """Insert ``nodes`` after ``anchor`` in their given order."""
    current = anchor
    for node in nodes:
        current.insert_after(node)
        current = node


def parse_style_declarations(style: str | None) -> list[StyleDeclaration]:
    """Split a style attribute into declarations; malformed ones are skipped."""
    declarations: list[StyleDeclaration] = []
    for chunk in (style or "").split(";"):
        chunk = chunk.strip()
        if not chunk or ":" not in chunk:
            continue
        prop, _, value = chunk.partition(":")
        declarations.append(
            StyleDeclaration(property=prop.strip().lower(), value=value.strip(), source=chunk)
        )
    return declarations


def class_string(tag: Tag) -> str:
    value = tag.get("class")
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return " ".join(value)
