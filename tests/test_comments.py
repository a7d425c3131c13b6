"""Tests for comment stripping."""

from __future__ import annotations

from treesmith.core.comments import remove_comments


class TestRemoveComments:
    def test_line_comments(self):
        code = "const a = 1; // one\n# python style\nb = 2\n"
        assert remove_comments(code) == "const a = 1; \nb = 2"

    def test_block_comments(self):
        code = "/* header\n spanning */\nint x;\n<!-- note -->\n<div></div>\n"
        assert remove_comments(code) == "int x;\n<div></div>"

    def test_blank_lines_dropped(self):
        assert remove_comments("a\n\n\n   \nb") == "a\nb"

    def test_empty_input(self):
        assert remove_comments("") == ""

    def test_markers_in_strings_are_removed_too(self):
        assert remove_comments('url = "http://example.com"') == 'url = "http:'
