"""Tests for annolint.cleaning."""
import tempfile
from pathlib import Path

import pytest

from annolint.cleaning import (
    CompositeCleaner,
    LatexCleaner,
    MarkdownCleaner,
    ReplacementCleaner,
    TextCleanerError,
)
from annolint.strings import AnnotatedString, Range


def _latex(text: str, **kwargs) -> AnnotatedString:
    kwargs.setdefault("ignore_before_document", False)
    return LatexCleaner(**kwargs).clean(AnnotatedString(text))


class TestLatexComments:
    def test_line_and_trailing_comments(self) -> None:
        s = AnnotatedString("Hello % comment\n% full line\nworld")
        out = LatexCleaner().clean_comments(s)
        assert str(out) == "Hello \nworld"

    def test_escaped_percent_kept(self) -> None:
        out = LatexCleaner().clean_comments(AnnotatedString("50\\% done"))
        assert str(out) == "50\\% done"

    def test_ignore_block(self) -> None:
        text = "a\n% annolint: ignore begin\nb\n% annolint: ignore end\nc"
        out = LatexCleaner().clean_comments(AnnotatedString(text))
        assert str(out) == "a\nc"

    def test_comment_environment(self) -> None:
        text = "a\n\\begin{comment}\nx\n\\end{comment}\nb"
        out = LatexCleaner().clean_comments(AnnotatedString(text))
        assert str(out) == "a\nb"

    def test_input_left_untouched(self) -> None:
        s = AnnotatedString("a % b")
        LatexCleaner().clean_comments(s)
        assert str(s) == "a % b"
        assert s.history == ()


class TestLatexClean:
    def test_commands_removed_with_provenance(self) -> None:
        out = _latex("Some \\textbf{bold} text.")
        assert str(out) == "Some bold text."
        assert out.backward_range(Range(5, 8)) == Range(13, 16)

    def test_preamble_removed(self) -> None:
        text = (
            "\\documentclass{article}\n\\begin{document}\n"
            "Hello world.\n\\end{document}"
        )
        out = LatexCleaner().clean(AnnotatedString(text))
        assert str(out) == "Hello world."
        assert out.backward_range(Range(0, 4)) == Range(41, 45)

    def test_no_document_gives_empty_text(self) -> None:
        out = LatexCleaner().clean(AnnotatedString("Just text."))
        assert str(out) == ""

    def test_environment_removed(self) -> None:
        out = _latex("Before.\n\\begin{equation}\nx = 1\n\\end{equation}\nAfter.")
        assert str(out) == "Before.\nAfter."

    def test_display_math_removed(self) -> None:
        out = _latex("Before.\n\\[\nx = 1\n\\]\nAfter.")
        assert str(out) == "Before.\nAfter."

    def test_user_environment(self) -> None:
        text = "A.\n\\begin{proof}\nTrivial.\n\\end{proof}\nB."
        assert str(_latex(text, remove_environments=["proof"])) == "A.\nB."
        assert "Trivial." in str(_latex(text))

    def test_inline_math(self) -> None:
        assert str(_latex("Let $x$ be.")) == "Let X be."

    def test_citation_and_tilde(self) -> None:
        assert str(_latex("As shown~\\cite{knuth}.")) == "As shown [0]."

    def test_references(self) -> None:
        assert str(_latex("See Figure~\\ref{fig:a}.")) == "See Figure X."

    def test_accents(self) -> None:
        assert str(_latex("Caf\\'{e}")) == "Caf\u00e9"

    def test_user_macros(self) -> None:
        assert str(_latex("Text \\todo{fix this} here.", remove_macros=["todo"])) == "Text  here."

    def test_blank_lines_removed(self) -> None:
        assert str(_latex("One.\n\n\nTwo.")) == "One.\nTwo."

    def test_inner_files(self) -> None:
        cleaner = LatexCleaner(ignore_before_document=False)
        cleaner.clean(AnnotatedString("\\input{chapter1}\n\\include{chap2.tex}\nText."))
        assert cleaner.inner_files() == ["chapter1.tex", "chap2.tex"]


class TestMarkdown:
    def test_markup_removed(self) -> None:
        text = (
            "# Title\n\nSome *bold* and `code`.\n\n```\nx = 1\n```\n"
            "A [link](http://x)."
        )
        out = MarkdownCleaner().clean(AnnotatedString(text))
        assert str(out) == "Title\n\nSome bold and X.\n\nA link."

    def test_link_label_provenance(self) -> None:
        out = MarkdownCleaner().clean(AnnotatedString("A [link](http://x)."))
        assert str(out) == "A link."
        assert out.backward_range(Range(2, 5)) == Range(2, 17)

    def test_html_comment(self) -> None:
        out = MarkdownCleaner().clean_comments(AnnotatedString("a <!-- hidden --> b"))
        assert str(out) == "a  b"

    def test_ignore_block(self) -> None:
        text = "x\n<!-- annolint: ignore begin -->\ny\n<!-- annolint: ignore end -->\nz"
        out = MarkdownCleaner().clean(AnnotatedString(text))
        assert str(out) == "x\nz"

    def test_bullets(self) -> None:
        out = MarkdownCleaner().clean(AnnotatedString("- one\n- two"))
        assert str(out) == "\u2022 one\n\u2022 two"


class TestReplacementCleaner:
    def test_from_lines(self) -> None:
        cleaner = ReplacementCleaner.from_lines(["# comment", "", "foo\tbar", "bad line"])
        assert cleaner.replacements == {"foo": "bar"}
        out = cleaner.clean(AnnotatedString("foo baz foo"))
        assert str(out) == "bar baz bar"

    def test_load(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "replace.txt"
            path.write_text("colour\tcolor\n", encoding="utf-8")
            cleaner = ReplacementCleaner.load(path)
        assert cleaner.replacements == {"colour": "color"}

    def test_bad_pattern(self) -> None:
        with pytest.raises(TextCleanerError):
            ReplacementCleaner({"(": "x"}).clean(AnnotatedString("abc"))

    def test_clean_comments_is_copy(self) -> None:
        s = AnnotatedString("foo")
        out = ReplacementCleaner({"foo": "bar"}).clean_comments(s)
        assert str(out) == "foo"
        assert out is not s


class TestCompositeCleaner:
    def test_runs_in_order(self) -> None:
        cleaner = CompositeCleaner(
            LatexCleaner(ignore_before_document=False),
            ReplacementCleaner({"bold": "strong"}),
        )
        out = cleaner.clean(AnnotatedString("\\textbf{bold}"))
        assert str(out) == "strong"
        assert out.backward_range(Range(0, 5)) == Range(8, 11)

    def test_add_and_inner_files(self) -> None:
        cleaner = CompositeCleaner().add(LatexCleaner(ignore_before_document=False))
        cleaner.clean(AnnotatedString("\\input{a}\nText."))
        assert cleaner.inner_files() == ["a.tex"]
