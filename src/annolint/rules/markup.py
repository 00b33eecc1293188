"""Checks on LaTeX markup habits: manual line breaks and citation styles."""
from __future__ import annotations

import re

from annolint.rules.base import Advice, Rule
from annolint.strings import AnnotatedString, Range

# Environments where \\ is the normal way to end a row or a line
_BREAKING_ENVIRONMENTS = (
    "equation", "align", "gather", "multline", "eqnarray", "table", "tabular",
    "tabularx", "array", "verbatim", "lstlisting", "IEEEkeywords", "figure",
    "matrix", "bmatrix", "Bmatrix", "pmatrix", "vmatrix", "Vmatrix",
    "smallmatrix", "cases", "verse", "tikzpicture",
)
_ENV_NAMES = "|".join(_BREAKING_ENVIRONMENTS)
_BEGIN_ENV_RE = re.compile(
    r"\\begin\s*\{\s*(?:" + _ENV_NAMES + r")\*?\s*\}|(?<!\\)\\\[",
)
_END_ENV_RE = re.compile(
    r"\\end\s*\{\s*(?:" + _ENV_NAMES + r")\*?\s*\}|(?<!\\)\\\]",
)
_BREAK_RE = re.compile(r"\\\\")

_NATBIB_CITE = r"\\cite[pt]\b"
_PLAIN_CITE = r"\\cite(?=[\s\[{])"


class CheckNoBreak(Rule):
    """``\\\\`` must not be used to break lines in running text."""

    description = "Don't use manual line breaks in text"

    def __init__(self) -> None:
        super().__init__("sh:nobreak")

    def evaluate(self, s: AnnotatedString) -> list[Advice]:
        advice: list[Advice] = []
        depth = 0
        for line in s.get_lines():
            depth += len(_BEGIN_ENV_RE.findall(line.text))
            if depth == 0:
                m = _BREAK_RE.search(line.text)
                if m is not None:
                    start = line.offset + m.start()
                    advice.append(self.make_advice(
                        s,
                        Range(start, start + 1),
                        "You should not break lines manually in a paragraph. "
                        "Either start a new paragraph or stay in the current one.",
                    ))
            depth = max(0, depth - len(_END_ENV_RE.findall(line.text)))
        return advice


class CheckCiteMix(Rule):
    """A document uses either ``\\cite`` or the natbib ``\\citep``/``\\citet``."""

    description = "No mix of citation styles"

    def __init__(self) -> None:
        super().__init__("sh:c:itemix")

    def evaluate(self, s: AnnotatedString) -> list[Advice]:
        natbib = s.find(_NATBIB_CITE)
        plain = s.find(_PLAIN_CITE)
        if natbib is None or plain is None:
            return []
        return [self.make_advice(
            s,
            Range(natbib.position, natbib.end - 1),
            "Do not mix \\cite with \\citep or \\citet in the same document.",
        )]
