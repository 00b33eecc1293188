"""Checks on sectioning commands: stacking, nesting and section length."""
from __future__ import annotations

import re
from dataclasses import dataclass

from annolint.rules.base import Advice, Rule
from annolint.strings import AnnotatedString, Line, Range

# Sectioning commands, outermost first
LEVELS: tuple[str, ...] = (
    "part", "chapter", "section", "subsection", "subsubsection", "paragraph",
)

_HEADING_RE = re.compile(
    r"\\(part|chapter|section|subsection|subsubsection|paragraph)\*?\s*\{",
)


@dataclass(slots=True)
class SectionInfo:
    """An open sectioning command while a document is scanned."""

    name: str
    range: Range
    children: int = 0
    words: int = 0

    @property
    def level(self) -> int:
        return LEVELS.index(self.name) if self.name else -1


def _heading(line: Line, pattern: re.Pattern[str] = _HEADING_RE) -> SectionInfo | None:
    """Section opened on *line*; its range covers the command name."""
    m = pattern.search(line.text)
    if m is None:
        return None
    start = line.offset + m.start(1)
    return SectionInfo(m.group(1), Range(start, start + len(m.group(1)) - 1))


def _root() -> SectionInfo:
    return SectionInfo("", Range(0, 0))


class CheckStackedHeadings(Rule):
    """Two headings must have some text in between."""

    description = "Stacked headings"

    def __init__(self) -> None:
        super().__init__("sh:stacked")

    def evaluate(self, s: AnnotatedString) -> list[Advice]:
        advice: list[Advice] = []
        found_text = True
        for line in s.get_lines():
            section = _heading(line)
            if section is None:
                if line.text.strip():
                    found_text = True
                continue
            if not found_text:
                advice.append(self.make_advice(
                    s,
                    section.range,
                    "Avoid stacked headings, i.e. consecutive headings "
                    "without text in between.",
                ))
            found_text = False
        return advice


class CheckSubsections(Rule):
    """A section that is subdivided must have at least two subdivisions."""

    description = "Sections with a single sub-section"

    def __init__(self) -> None:
        super().__init__("sh:nsubdiv")

    def evaluate(self, s: AnnotatedString) -> list[Advice]:
        advice: list[Advice] = []
        stack = [_root()]
        for line in s.get_lines():
            section = _heading(line)
            if section is None:
                continue
            while stack[-1].level >= section.level:
                self._close(s, stack.pop(), advice)
            stack[-1].children += 1
            stack.append(section)
        while len(stack) > 1:
            self._close(s, stack.pop(), advice)
        return advice

    def _close(self, s: AnnotatedString, section: SectionInfo, advice: list[Advice]) -> None:
        if section.children == 1:
            advice.append(self.make_advice(
                s,
                section.range,
                "If a section has sub-sections, it should have more than "
                "one such sub-section.",
            ))


class CheckLevelSkip(Rule):
    """A heading must be at most one level below the heading that contains it.

    ``\\part`` and the top of the document may be followed by any level.
    """

    description = "Skipped heading levels"

    def __init__(self) -> None:
        super().__init__("sh:secskip")

    def evaluate(self, s: AnnotatedString) -> list[Advice]:
        advice: list[Advice] = []
        stack = [_root()]
        for line in s.get_lines():
            section = _heading(line)
            if section is None:
                continue
            while stack[-1].level >= section.level:
                stack.pop()
            parent = stack[-1]
            if parent.name not in ("", "part") and section.level > parent.level + 1:
                advice.append(self.make_advice(
                    s,
                    section.range,
                    f"A {section.name} should not appear directly under a "
                    f"{parent.name}; a level is missing in between.",
                ))
            stack.append(section)
        return advice


class CheckSubsectionSize(Rule):
    """Sections must hold at least ``min_words`` words, sub-sections included."""

    description = "Short sub-sections"

    _SIZED_RE = re.compile(r"\\(chapter|section|subsection|subsubsection)\*?\s*\{")

    def __init__(self, min_words: int = 150) -> None:
        super().__init__("sh:seclen")
        self.min_words = min_words

    def evaluate(self, s: AnnotatedString) -> list[Advice]:
        advice: list[Advice] = []
        stack = [_root()]
        for line in s.get_lines():
            section = _heading(line, self._SIZED_RE)
            if section is None:
                words = len(line.text.split())
                for open_section in stack:
                    open_section.words += words
                continue
            while stack[-1].level >= section.level:
                self._close(s, stack.pop(), advice)
            stack.append(section)
        while len(stack) > 1:
            self._close(s, stack.pop(), advice)
        return advice

    def _close(self, s: AnnotatedString, section: SectionInfo, advice: list[Advice]) -> None:
        if section.words < self.min_words:
            advice.append(self.make_advice(
                s,
                section.range,
                f"This {section.name} is very short (about {section.words} "
                "words). You should consider merging it with another section "
                "or make it longer.",
            ))
