"""Figure labels, references and image paths."""
from __future__ import annotations

import re

from annolint.rules.base import Advice, Rule
from annolint.strings import AnnotatedString, Range

_BEGIN_FIGURE_RE = re.compile(r"\\begin\s*\{\s*(?:figure|wrapfigure)\*?\s*\}")
_END_FIGURE_RE = re.compile(r"\\end\s*\{\s*(?:figure|wrapfigure)\*?\s*\}")
_LABEL_RE = re.compile(r"\\label\s*\{(.*?)\}")
_GRAPHICS_RE = re.compile(r"\\includegraphics\s*(?:\[.*?\])*\{(.*?)\}")
_ABSOLUTE_RE = re.compile(r"[A-Za-z]:|/")


def reference_pattern(label: str) -> str:
    """Regex matching a ``\\ref``-like command that lists *label*."""
    return (
        r"\\(?:ref|cref|Cref|autoref|vref)\s*\{(?:[^}]*,)?\s*"
        + re.escape(label)
        + r"\s*(?:,[^}]*)?\}"
    )


class CheckFigureReferences(Rule):
    """Every figure must have a label, and every label must be referenced."""

    description = "Every figure must be referenced"

    def __init__(self) -> None:
        super().__init__("sh:figref")

    def evaluate(self, s: AnnotatedString) -> list[Advice]:
        advice: list[Advice] = []
        labels: dict[str, int] = {}
        in_figure = False
        found_label = False
        for line in s.get_lines():
            if _BEGIN_FIGURE_RE.search(line.text):
                in_figure = True
                found_label = False
                continue
            if _END_FIGURE_RE.search(line.text):
                if in_figure and not found_label:
                    advice.append(self.make_advice(
                        s,
                        Range(line.offset, line.offset + max(len(line.text) - 1, 0)),
                        "This figure is missing a label",
                    ))
                in_figure = False
                continue
            if not in_figure:
                continue
            m = _LABEL_RE.search(line.text)
            if m is not None:
                labels.setdefault(m.group(1).strip(), line.offset + m.start(1))
                found_label = True
        for label, offset in labels.items():
            if not label or s.find(reference_pattern(label)) is not None:
                continue
            advice.append(self.make_advice(
                s,
                Range(offset, offset + len(label) - 1),
                f"Figure {label} is never referenced in the text",
            ))
        return advice


class CheckFigurePaths(Rule):
    """``\\includegraphics`` paths must be relative to the document."""

    description = "Absolute paths in figures"

    def __init__(self) -> None:
        super().__init__("sh:relpath")

    @staticmethod
    def is_absolute(path: str) -> bool:
        """Drive letters, leading slashes and parent directories are flagged."""
        return _ABSOLUTE_RE.match(path) is not None or ".." in path

    def evaluate(self, s: AnnotatedString) -> list[Advice]:
        advice: list[Advice] = []
        for line in s.get_lines():
            for m in _GRAPHICS_RE.finditer(line.text):
                if not m.group(1) or not self.is_absolute(m.group(1).strip()):
                    continue
                start = line.offset + m.start(1)
                advice.append(self.make_advice(
                    s,
                    Range(start, start + len(m.group(1)) - 1),
                    "Do not use an absolute path for a figure",
                ))
        return advice
