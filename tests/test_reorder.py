"""Tests for reversed document order detection."""

from __future__ import annotations

from word2html.reorder import detect_reversed_order, fix_reversed_document_order, reverse_top_level


def _paragraphs(count: int, start: int = 0) -> str:
    return "".join(f"<p>Paragraph {index}</p>" for index in range(start, start + count))


class TestDetectReversedOrder:
    """Tests for detect_reversed_order."""

    def test_h1_last_after_content(self, parse) -> None:
        """Six paragraphs then a trailing h1 triggers the last-element rule."""
        _, root = parse(_paragraphs(6) + "<h1>Title</h1>")
        decision = detect_reversed_order(root)
        assert decision.reverse is True
        assert decision.rule == "h1-last"
        assert decision.h1_index == 6

    def test_h1_last_with_little_content(self, parse) -> None:
        _, root = parse(_paragraphs(3) + "<h1>Title</h1>")
        assert detect_reversed_order(root).reverse is False

    def test_no_h1(self, parse) -> None:
        _, root = parse(_paragraphs(12))
        decision = detect_reversed_order(root)
        assert decision.reverse is False
        assert decision.rule is None

    def test_h1_first(self, parse) -> None:
        _, root = parse("<h1>Title</h1>" + _paragraphs(8))
        assert detect_reversed_order(root).reverse is False

    def test_h1_near_end_after_lower_heading(self, parse) -> None:
        html = "<p>Intro</p><h2>Section</h2>" + _paragraphs(16) + "<h1>Title</h1><p>Tail</p>"
        _, root = parse(html)
        decision = detect_reversed_order(root)
        assert decision.reverse is True
        assert decision.rule == "h1-after-lower-headings"

    def test_h1_near_end_after_bulk_content(self, parse) -> None:
        _, root = parse(_paragraphs(38) + "<h1>Title</h1><p>Tail</p>")
        decision = detect_reversed_order(root)
        assert decision.reverse is True
        assert decision.rule == "h1-after-bulk-content"

    def test_h1_in_middle_of_long_document(self, parse) -> None:
        _, root = parse(_paragraphs(20) + "<h2>Sub</h2><h1>Title</h1>" + _paragraphs(20, 20))
        assert detect_reversed_order(root).reverse is False

    def test_short_document_with_lower_heading_before_mid_h1(self, parse) -> None:
        """An h2 before an h1 in the middle of a short document is ordinary."""
        _, root = parse("<h2>Intro</h2><p>a</p><h1>Title</h1><p>b</p><p>c</p><p>d</p>")
        decision = detect_reversed_order(root)
        assert decision.reverse is False
        assert decision.rule is None

    def test_h1_in_middle_of_twenty_children(self, parse) -> None:
        """The tail window of twenty children covers only the last two."""
        _, root = parse("<h2>Sub</h2>" + _paragraphs(9) + "<h1>Title</h1>" + _paragraphs(9, 9))
        assert detect_reversed_order(root).reverse is False

    def test_short_document_h1_second_to_last(self, parse) -> None:
        """In a short document only the final child counts as near the end."""
        _, root = parse("<h2>Sub</h2>" + _paragraphs(3) + "<h1>Title</h1><p>Tail</p>")
        assert detect_reversed_order(root).reverse is False

    def test_single_child(self, parse) -> None:
        _, root = parse("<h1>Only</h1>")
        assert detect_reversed_order(root).reverse is False


class TestFixReversedDocumentOrder:
    """Tests for fix_reversed_document_order and reverse_top_level."""

    def test_reverses_literally(self, parse) -> None:
        _, root = parse(_paragraphs(6) + "<h1>Title</h1>")
        assert fix_reversed_document_order(root) is True
        texts = [child.get_text() for child in root.find_all(True, recursive=False)]
        assert texts[0] == "Title"
        assert texts[1:] == [f"Paragraph {index}" for index in reversed(range(6))]

    def test_leaves_normal_document(self, parse) -> None:
        _, root = parse("<h1>Title</h1>" + _paragraphs(3))
        assert fix_reversed_document_order(root) is False
        assert root.find(True).name == "h1"

    def test_reverse_keeps_text_nodes(self, parse) -> None:
        _, root = parse("<p>a</p>loose<p>b</p>")
        reverse_top_level(root)
        assert [str(node) if node.name is None else node.get_text() for node in root.contents] == [
            "b",
            "loose",
            "a",
        ]
