"""Tests for serialization and layout."""

from __future__ import annotations

from word2html.formatter import format_html, remove_space_before_punctuation_html, serialize_root


class TestSerializeRoot:
    """Tests for serialize_root."""

    def test_blocks_in_order(self, parse) -> None:
        _, root = parse("<h1>Title</h1><p>Body</p>")
        assert serialize_root(root) == "<h1>Title</h1><p>Body</p>"

    def test_inline_run_wrapped_in_paragraph(self, parse) -> None:
        _, root = parse("<em>x</em><strong>y</strong><p>z</p>")
        assert serialize_root(root) == "<p><em>x</em><strong>y</strong></p><p>z</p>"

    def test_bare_text_wrapped(self, parse) -> None:
        _, root = parse("just text")
        assert serialize_root(root) == "<p>just text</p>"

    def test_whitespace_between_blocks_dropped(self, parse) -> None:
        _, root = parse("<p>a</p>\n  \n<p>b</p>")
        assert serialize_root(root) == "<p>a</p><p>b</p>"

    def test_nbsp_and_br_rendering(self, parse) -> None:
        _, root = parse("<p>a&nbsp;b<br>c &amp; d</p>")
        assert serialize_root(root) == "<p>a&nbsp;b<br>c &amp; d</p>"

    def test_trailing_break_dropped_from_run(self, parse) -> None:
        _, root = parse("Line one<br> \n<p>next</p>")
        assert serialize_root(root) == "<p>Line one</p><p>next</p>"

    def test_inner_break_kept_in_run(self, parse) -> None:
        _, root = parse("one<br>two")
        assert serialize_root(root) == "<p>one<br>two</p>"


class TestFormatHtml:
    """Tests for format_html."""

    def test_one_block_per_line(self) -> None:
        assert format_html("<h1>T</h1><p>a</p><p>b</p>") == "<h1>T</h1>\n<p>a</p>\n<p>b</p>"

    def test_list_items_on_own_lines(self) -> None:
        assert format_html("<ul><li>a</li><li>b</li></ul>") == "<ul>\n<li>a</li>\n<li>b</li>\n</ul>"

    def test_blank_line_between_headings(self) -> None:
        assert format_html("<h2>A</h2><h3>B</h3>") == "<h2>A</h2>\n\n<h3>B</h3>"

    def test_blank_line_between_lists(self) -> None:
        assert format_html("<ul><li>a</li></ul><ul><li>b</li></ul>") == (
            "<ul>\n<li>a</li>\n</ul>\n\n<ul>\n<li>b</li>\n</ul>"
        )

    def test_break_followed_by_newline(self) -> None:
        assert format_html("<p>a<br>b</p>") == "<p>a<br>\nb</p>"

    def test_idempotent(self) -> None:
        html = "<h1>T</h1><h2>S</h2><p>a<br>b</p><ul><li>x</li></ul><ol><li>y</li></ol>"
        once = format_html(html)
        assert format_html(once) == once

    def test_pre_and_link_tags_not_treated_as_blocks(self) -> None:
        assert format_html("<p>a <pre>b</pre></p>") == "<p>a <pre>b</pre></p>"


class TestRemoveSpaceBeforePunctuationHtml:
    """Tests for remove_space_before_punctuation_html."""

    def test_plain_space(self) -> None:
        assert remove_space_before_punctuation_html("<p>Hi , there .</p>") == "<p>Hi, there.</p>"

    def test_after_closing_tag(self) -> None:
        html = '<p><a href="/x">link</a> .</p>'
        assert remove_space_before_punctuation_html(html) == '<p><a href="/x">link</a>.</p>'

    def test_entity_before_punctuation(self) -> None:
        assert remove_space_before_punctuation_html("<p>Wait&nbsp;!</p>") == "<p>Wait!</p>"
        assert remove_space_before_punctuation_html("<p>Wait&#160;?</p>") == "<p>Wait?</p>"
