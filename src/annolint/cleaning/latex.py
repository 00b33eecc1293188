"""LaTeX markup removal.

Cleaning happens in three passes, each made of ordinary string stages so
that provenance survives:

1. comments: whole-line ``%`` comments, ``comment`` environments and
   ``% annolint: ignore begin`` / ``% annolint: ignore end`` blocks are
   deleted line by line, then trailing ``%`` comments are cut;
2. environments: the preamble (up to ``\\begin{document}``) and the lines
   of non-text environments (equations, tables, figures, listings...) are
   deleted;
3. markup: commands are replaced by nothing or by a placeholder (``X`` for
   math and references, ``[0]`` for citations), then blank lines go.
"""
from __future__ import annotations

import logging
import re
import unicodedata
from collections.abc import Iterable

from annolint.cleaning.base import TextCleaner
from annolint.strings import AnnotatedString

log = logging.getLogger(__name__)

IGNORE_BEGIN = "annolint: ignore begin"
IGNORE_END = "annolint: ignore end"

DEFAULT_REMOVED_ENVIRONMENTS: tuple[str, ...] = (
    "align", "equation", "table", "tabular", "verbatim", "lstlisting",
    "IEEEkeywords", "figure", "wrapfigure",
)

_BEGIN_DOCUMENT_RE = re.compile(r"^[^%]*\\begin\s*\{\s*document")
_BEGIN_COMMENT_RE = re.compile(r"\\begin\s*\{\s*comment")
_END_COMMENT_RE = re.compile(r"\\end\s*\{\s*comment")
_IGNORE_BEGIN_RE = re.compile(r"^\s*%+.*" + re.escape(IGNORE_BEGIN))
_IGNORE_END_RE = re.compile(r"^\s*%+.*" + re.escape(IGNORE_END))
_TRAILING_COMMENT_RE = re.compile(r"(?<!\\)%.*$", re.MULTILINE)
_INNER_FILE_RE = re.compile(r"\\(?:input|include)\s*\{(.*?)\}")

# Combining marks for \`{e}, \'{e}, \^{e}, \~{e}, \"{e}
_ACCENT_MARKS: dict[str, str] = {
    "`": "\u0300",
    "'": "\u0301",
    "^": "\u0302",
    "~": "\u0303",
    '"': "\u0308",
}
_ACCENT_RE = re.compile(r"\\([`'^~\"])\{?([A-Za-z])\}?")

_MARKUP_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    # French quotes and ligatures
    (r"\\og\{\}", "«"),
    (r"\\fg\{\}", "»"),
    (r"\\oe\{\}", "œ"),
    (r"\\ae\{\}", "æ"),
    # Environments whose content is regular text
    (r"\\(?:begin|end)\{(?:itemize|enumerate|inparaenum|document|thm|abstract"
     r"|eqnarray|compactitem|query|center|minipage)\}", ""),
    (r"\\item[ \t]*", ""),
    (r"\\includegraphics.*$", ""),
    (r"\\label\{.*?\}", ""),
    (r"\\footnote\{.*?\}", ""),
    (r"\\(?:cite|citep|citet|citel)(?:\[.*?\])*\{.*?\}", "[0]"),
    (r"\\verb\+[^+]*?\+", "[0]"),
    (r"\\verb\"[^\"]*?\"", "[0]"),
    (r"\\(?:ref|url|eqref|autoref|cref)\{.*?\}", "X"),
    (r"\\maketitle|\\newpage", ""),
    (r"\\(?:input|include|documentclass|usepackage|noindent|vskip|vspace"
     r"|hspace|rule|urlstyle|fancyfoot|fancyhead|pagestyle|thispagestyle"
     r"|newcommand|renewcommand|bibliographystyle|bibliography|scalebox"
     r"|printbibliography)\b.*$", ""),
    (r"\\-", ""),
    (r"~", " "),
    # Inline math
    (r"([^\\])\$.*?[^\\]\$", r"\1X"),
    (r"^\$.*?[^\\]\$", "X"),
)

_COMMAND_OPENER = r"\\\w+\{"
_BRACES = r"\{|\}"


def _accent(m: re.Match[str]) -> str:
    return unicodedata.normalize("NFC", m.group(2) + _ACCENT_MARKS[m.group(1)])


def _environment_res(names: Iterable[str]) -> tuple[re.Pattern[str], re.Pattern[str]]:
    alternatives = "|".join(re.escape(n) for n in names)
    return (
        re.compile(r"\\begin\s*\{\s*(?:" + alternatives + r")"),
        re.compile(r"\\end\s*\{\s*(?:" + alternatives + r")"),
    )


class LatexCleaner(TextCleaner):
    """Removes LaTeX markup while keeping track of character provenance."""

    def __init__(
        self,
        *,
        ignore_before_document: bool = True,
        remove_environments: Iterable[str] = (),
        remove_macros: Iterable[str] = (),
    ) -> None:
        self.ignore_before_document = ignore_before_document
        self.removed_environments = (
            DEFAULT_REMOVED_ENVIRONMENTS + tuple(remove_environments)
        )
        self.removed_macros = tuple(remove_macros)
        self._begin_env_re, self._end_env_re = _environment_res(
            self.removed_environments,
        )
        self._inner_files: list[str] = []

    def clean(self, s: AnnotatedString) -> AnnotatedString:
        out = self.clean_comments(s)
        self._inner_files = self._find_inner_files(str(out))
        out = self._remove_environments(out)
        out = self._remove_markup(out)
        return out

    def inner_files(self) -> list[str]:
        return list(self._inner_files)

    def clean_comments(self, s: AnnotatedString) -> AnnotatedString:
        out = s.copy()
        in_comment = False
        i = 0
        while i < out.line_count() and not out.is_empty():
            line = out.get_line(i)
            if _BEGIN_COMMENT_RE.search(line) or _IGNORE_BEGIN_RE.search(line):
                in_comment = True
            leaves_comment = (
                in_comment and _END_COMMENT_RE.search(line) is not None
            ) or _IGNORE_END_RE.search(line) is not None
            if in_comment or line.lstrip().startswith("%"):
                out.remove_line(i)
            else:
                i += 1
            if leaves_comment:
                in_comment = False
        return out.replace_all(_TRAILING_COMMENT_RE, "")

    def _remove_environments(self, out: AnnotatedString) -> AnnotatedString:
        depth = 0
        in_document = not self.ignore_before_document
        i = 0
        while i < out.line_count() and not out.is_empty():
            line = out.get_line(i)
            if not in_document:
                # Everything up to and including \begin{document} goes
                if _BEGIN_DOCUMENT_RE.search(line):
                    in_document = True
                out.remove_line(i)
                continue
            if self._begin_env_re.search(line) or "\\[" in line:
                depth += 1
            removed = depth > 0
            if removed:
                out.remove_line(i)
            if self._end_env_re.search(line) or "\\]" in line:
                depth = max(0, depth - 1)
            if not removed:
                i += 1
        if not in_document:
            log.debug("No \\begin{document} found; whole input discarded")
        return out

    def _remove_markup(self, out: AnnotatedString) -> AnnotatedString:
        out.replace_all(_ACCENT_RE, _accent)
        for pattern, replacement in _MARKUP_REPLACEMENTS:
            out.replace_all(pattern, replacement, flags=re.MULTILINE)
        if self.removed_macros:
            names = "|".join(re.escape(m) for m in self.removed_macros)
            out.replace_all(r"\\(?:" + names + r")(?:\[.*?\])*(?:\{.*?\})?", "")
        out.replace_all(_COMMAND_OPENER, "")
        out.replace_all(_BRACES, "")
        return _remove_blank_lines(out)

    @staticmethod
    def _find_inner_files(text: str) -> list[str]:
        files: list[str] = []
        for m in _INNER_FILE_RE.finditer(text):
            name = m.group(1).strip()
            if not name:
                continue
            if not name.endswith(".tex"):
                name += ".tex"
            files.append(name)
        return files


def _remove_blank_lines(out: AnnotatedString) -> AnnotatedString:
    i = 0
    while i < out.line_count() and not out.is_empty():
        if out.get_line(i).strip():
            i += 1
        else:
            out.remove_line(i)
    return out
