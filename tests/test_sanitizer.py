"""Tests for the plain-text sanitizer and the tag stripper that feeds it."""

from __future__ import annotations

import pytest

from jobdesc.scraper.sanitizer import (
    looks_like_css_line,
    looks_like_json_line,
    sanitize_text,
    starts_css_block,
    starts_json_block,
)
from jobdesc.scraper.text import strip_tags


class TestLineClassifiers:
    @pytest.mark.parametrize("line", ["body {", ".card > a:hover {", "@media (max-width: 600px) {", "#app{"])
    def test_css_block_start(self, line: str) -> None:
        assert starts_css_block(line)

    @pytest.mark.parametrize("line", ["body { color: red; }", "Benefits {see below}", "{"])
    def test_not_css_block_start(self, line: str) -> None:
        assert not starts_css_block(line)

    @pytest.mark.parametrize("line", ["color: red;", "margin-top : 4px;", "a { b }", "}"])
    def test_css_lines(self, line: str) -> None:
        assert looks_like_css_line(line)

    @pytest.mark.parametrize("line", ["Salary: competitive", "Note: bring a laptop; we supply the rest", "Plain prose."])
    def test_prose_is_not_css(self, line: str) -> None:
        assert not looks_like_css_line(line)

    @pytest.mark.parametrize("line", ['"@context": "https://schema.org",', '"@type": "JobPosting"', '"title": "Engineer",'])
    def test_json_lines(self, line: str) -> None:
        assert looks_like_json_line(line)

    @pytest.mark.parametrize("line", ["{", "[", '{"a": 1,'])
    def test_json_block_start(self, line: str) -> None:
        assert starts_json_block(line)

    def test_closed_object_is_not_a_block_start(self) -> None:
        assert not starts_json_block('{"a": 1}')


class TestSanitizeText:
    def test_multiline_stylesheet_dropped_prose_kept_in_order(self) -> None:
        text = "\n".join(
            [
                "About the role",
                "body {",
                "  color: red;",
                "  margin: 0;",
                "}",
                "You will own the billing service.",
                "@media print {",
                "  .nav { display: none; }",
                "}",
                ".card { padding: 4px; }",
                "Apply by Friday.",
            ]
        )
        assert sanitize_text(text) == (
            "About the role\nYou will own the billing service.\nApply by Friday."
        )

    def test_multiline_json_dropped(self) -> None:
        text = "\n".join(
            [
                "Intro",
                "{",
                '  "@context": "https://schema.org",',
                '  "hiringOrganization": {',
                '    "name": "Acme"',
                "  },",
                '  "skills": [',
                '    "Python"',
                "  ]",
                "}",
                "Outro",
            ]
        )
        assert sanitize_text(text) == "Intro\nOutro"

    def test_json_array_block(self) -> None:
        assert sanitize_text('Before\n[\n{"a": 1},\n{"b": 2}\n]\nAfter') == "Before\nAfter"

    def test_stray_json_keys_dropped(self) -> None:
        assert sanitize_text('Role\n"@type": "JobPosting",\n"title": "X",\nDetails') == "Role\nDetails"

    def test_blank_runs_collapse_and_trim(self) -> None:
        assert sanitize_text("\n\nFirst\n\n\n\n\nSecond\n\n") == "First\n\nSecond"

    def test_blank_lines_inside_block_are_not_kept_twice(self) -> None:
        assert sanitize_text("A\n\nbody {\n\n color: red;\n}\n\nB") == "A\n\nB"

    def test_unbalanced_closing_braces_do_not_go_negative(self) -> None:
        assert sanitize_text("div {\n}}\nProse after") == "Prose after"

    def test_prose_only_is_unchanged(self) -> None:
        text = "Senior Engineer\n\nLead projects.\nCoach teammates."
        assert sanitize_text(text) == text


class TestStripTags:
    def test_drops_tags_and_comments_keeps_text(self) -> None:
        html = "<div><!-- <p>hidden</p> --><p>Hello <b>world</b></p><style>p{}</style></div>"
        assert strip_tags(html).strip() == "Hello world\np{}"

    def test_decodes_entities(self) -> None:
        assert strip_tags("<p>R&amp;D &lt;team&gt; &eacute;</p>") == "R&D <team> é"

    def test_multiline_comment(self) -> None:
        assert strip_tags("a<!--\nline\n-->b") == "ab"

    def test_block_tags_keep_text_on_separate_lines(self) -> None:
        text = strip_tags("<div>deep</div><div>Visible</div><ul><li>One</li><li>Two</li></ul>")
        assert "deepVisible" not in text
        assert [line for line in text.split("\n") if line] == ["deep", "Visible", "One", "Two"]

    def test_inline_tags_do_not_break_lines(self) -> None:
        assert strip_tags("<p>Work <strong>remotely</strong> with <a href=\"/team\">us</a><br>today</p>").strip() == (
            "Work remotely with us\ntoday"
        )
