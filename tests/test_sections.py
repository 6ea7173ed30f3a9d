"""Tests for section marker detection."""

from __future__ import annotations

from word2html.sections import detect_section_markers, normalize_section_text

ARTICLE = (
    "<h1>Guide</h1>"
    "<h2>Key Takeaways</h2><ul><li>One</li></ul>"
    "<p>Body text.</p>"
    "<p><strong>Read also:</strong> <a href=\"/x\">Other</a></p>"
    "<h2>Frequently Asked  Questions</h2><p>Q?</p>"
    "<p>Sources:</p><ul><li>Ref</li></ul>"
)


class TestNormalizeSectionText:
    """Tests for normalize_section_text."""

    def test_lowercases_and_collapses(self) -> None:
        assert normalize_section_text("  Key\n  TAKEAWAYS ") == "key takeaways"


class TestDetectSectionMarkers:
    """Tests for detect_section_markers."""

    def test_finds_all_kinds_in_order(self) -> None:
        markers = detect_section_markers(ARTICLE)
        assert [(m.kind, m.tag, m.index) for m in markers] == [
            ("key_takeaways", "h2", 1),
            ("read_also", "p", 4),
            ("faq", "h2", 5),
            ("sources", "p", 7),
        ]
        assert markers[2].text == "frequently asked questions"

    def test_sources_needs_following_list(self) -> None:
        markers = detect_section_markers("<p>Sources: none</p><p>End</p>")
        assert markers == []

    def test_only_first_of_each_kind(self) -> None:
        markers = detect_section_markers("<h2>Key takeaways</h2><h3>Key takeaways again</h3>")
        assert len(markers) == 1

    def test_empty_input(self) -> None:
        assert detect_section_markers("") == []
        assert detect_section_markers(None) == []
