"""Markdown markup removal."""
from __future__ import annotations

import re

from annolint.cleaning.base import TextCleaner
from annolint.strings import AnnotatedString

IGNORE_BEGIN = "<!-- annolint: ignore begin -->"
IGNORE_END = "<!-- annolint: ignore end -->"

_HTML_COMMENT_RE = re.compile(r"<!--.*?-->")

_MARKUP_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    (r"\*", ""),
    (r"`.*?`", "X"),
    (r"!\[(.*?)\]\(.*?\)", r"\1"),  # images
    (r"\[(.*?)\]\(.*?\)", r"\1"),  # links
    (r"^[ \t]*?- ", "• "),
    (r"^[ \t]*#+[ \t]*", ""),
    (r"^[ \t]*=+[ \t]*$", ""),
)


class MarkdownCleaner(TextCleaner):
    """Removes Markdown markup; blank lines are kept as paragraph breaks."""

    def clean(self, s: AnnotatedString) -> AnnotatedString:
        out = self.clean_comments(s)
        out = self._remove_environments(out)
        for pattern, replacement in _MARKUP_REPLACEMENTS:
            out.replace_all(pattern, replacement, flags=re.MULTILINE)
        return out

    def clean_comments(self, s: AnnotatedString) -> AnnotatedString:
        out = s.copy()
        ignoring = False
        i = 0
        while i < out.line_count() and not out.is_empty():
            line = out.get_line(i).strip()
            if line == IGNORE_BEGIN:
                ignoring = True
            if ignoring:
                out.remove_line(i)
            else:
                i += 1
            if line == IGNORE_END:
                ignoring = False
        return out.replace_all(_HTML_COMMENT_RE, "")

    def _remove_environments(self, out: AnnotatedString) -> AnnotatedString:
        """Delete fenced code blocks, fences included."""
        in_fence = False
        i = 0
        while i < out.line_count() and not out.is_empty():
            fence = out.get_line(i).lstrip().startswith("```")
            if in_fence or fence:
                out.remove_line(i)
            else:
                i += 1
            if fence:
                in_fence = not in_fence
        return out
