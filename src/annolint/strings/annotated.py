"""AnnotatedString: a string that remembers where its characters came from.

An ``AnnotatedString`` starts as a copy of some original text. Every
rewrite (``substring``, ``replace``, ``remove_line``, ...) is applied as a
stage and appended to an append-only history, together with the stage's
local range mapping. At any time the current text can be related back to
the original text (``track_to_input`` / ``backward_range``) or the
original forward to the current text (``track_to_output`` /
``forward_range``). The history is folded into one end-to-end mapping
the first time such a query is made.

Usage::

    s = AnnotatedString("abcdefg")
    s.replace("def", "foo").substring(2, 4)
    str(s)                          # "cf"
    s.track_to_input(Range(0, 0))   # [Range(start=2, end=2)]
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Self

from annolint.io_utils import read_file
from annolint.strings.crawl import compose_all
from annolint.strings.mapping import RangeMapping
from annolint.strings.stages import (
    InsertAt,
    RemoveLine,
    Replace,
    Replacement,
    Shift,
    Stage,
    Truncate,
    apply_stage,
    compile_pattern,
)
from annolint.strings.types import (
    LINE_SEPARATOR,
    NOWHERE,
    Line,
    Match,
    Position,
    PositionRange,
    Range,
    index_from_starts,
    line_starts,
    position_from_starts,
    unite_ranges,
)


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """A stage applied to an annotated string and the mapping it produced."""

    stage: Stage
    mapping: RangeMapping


class AnnotatedString:
    """Mutable current text over an immutable original, with provenance."""

    def __init__(
        self,
        text: str = "",
        *,
        newline: str = LINE_SEPARATOR,
        resource_name: str = "",
    ) -> None:
        if not newline:
            raise ValueError("newline must be a non-empty string")
        self.newline = newline
        self.resource_name = resource_name
        self._original = text
        self._original_starts = line_starts(text, newline)
        self._text = text
        self._starts: list[int] | None = None
        self._history: list[HistoryEntry] = []
        self._composed: RangeMapping | None = None

    @classmethod
    def from_file(cls, path: Path, *, newline: str = LINE_SEPARATOR) -> AnnotatedString:
        """Read *path* (UTF-8, CP1252 fallback) into a fresh annotated string."""
        return cls(read_file(path), newline=newline, resource_name=str(path))

    def copy(self) -> AnnotatedString:
        """Independent string sharing the original text and the history so far."""
        out = AnnotatedString(
            self._original, newline=self.newline, resource_name=self.resource_name,
        )
        out._text = self._text
        out._starts = self._starts
        out._history = list(self._history)
        out._composed = self._composed
        return out

    # -- basic accessors ----------------------------------------------------

    @property
    def original(self) -> str:
        return self._original

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._history)

    @property
    def mappings(self) -> tuple[RangeMapping, ...]:
        return tuple(entry.mapping for entry in self._history)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return (
            f"AnnotatedString({self._text!r}, stages={len(self._history)}, "
            f"resource={self.resource_name!r})"
        )

    def __len__(self) -> int:
        return len(self._text)

    def is_empty(self) -> bool:
        return not self._text

    # -- stage application --------------------------------------------------

    def apply(self, stage: Stage) -> Self:
        """Apply *stage* to the current text and record it in the history."""
        self._text, mapping = apply_stage(stage, self._text)
        self._history.append(HistoryEntry(stage, mapping))
        self._starts = None
        self._composed = None
        return self

    def substring(self, start: int, end: int | None = None) -> Self:
        """Keep ``text[start:end]`` of the current text."""
        return self.apply(Truncate(start, end))

    def replace(
        self,
        pattern: str | re.Pattern[str],
        to: Replacement,
        start: int = 0,
        flags: int = 0,
    ) -> Self:
        """Replace the first match of *pattern* at or after *start*."""
        return self.apply(Replace(pattern, to, start=start, flags=flags))

    def replace_all(
        self, pattern: str | re.Pattern[str], to: Replacement, flags: int = 0,
    ) -> Self:
        """Replace every non-overlapping match of *pattern*."""
        return self.apply(Replace(pattern, to, all_matches=True, flags=flags))

    def remove_line(self, line_nb: int) -> Self:
        return self.apply(RemoveLine(line_nb, self.newline))

    def insert_at(self, text: str, index: int) -> Self:
        return self.apply(InsertAt(text, index))

    def shift(self, by: int) -> Self:
        return self.apply(Shift(by))

    # -- search -------------------------------------------------------------

    def find(
        self, pattern: str | re.Pattern[str], start: int = 0, flags: int = 0,
    ) -> Match | None:
        """First match of *pattern* in the current text at or after *start*."""
        regex = compile_pattern(pattern, flags)
        if start > len(self._text):
            return None
        m = regex.search(self._text, max(start, 0))
        if m is None:
            return None
        groups = tuple(m.group(i) for i in range(regex.groups + 1))
        return Match(m.group(0), m.start(), groups)

    def index_of(self, sub: str, start: int = 0) -> int:
        """Offset of *sub* in the current text at or after *start*, or -1."""
        return self._text.find(sub, start)

    # -- lines --------------------------------------------------------------

    def _current_starts(self) -> list[int]:
        if self._starts is None:
            self._starts = line_starts(self._text, self.newline)
        return self._starts

    def line_count(self) -> int:
        return len(self._current_starts())

    def get_line(self, line_nb: int) -> str:
        """Text of line *line_nb* without its terminator.

        Raises IndexError when the line does not exist.
        """
        return self._line(self._text, self._current_starts(), line_nb).text

    def get_lines(self) -> list[Line]:
        starts = self._current_starts()
        return [self._line(self._text, starts, i) for i in range(len(starts))]

    def line_of(self, index: int) -> Line | None:
        """Current-text line containing *index*."""
        p = self.to_position(index)
        if p == NOWHERE:
            return None
        return self._line(self._text, self._current_starts(), p.line)

    def get_original_line(self, line_nb: int) -> Line:
        return self._line(self._original, self._original_starts, line_nb)

    def original_line_of(self, index: int) -> Line | None:
        """Original-text line containing *index*."""
        p = self.original_position(index)
        if p == NOWHERE:
            return None
        return self.get_original_line(p.line)

    def _line(self, text: str, starts: list[int], line_nb: int) -> Line:
        if line_nb < 0 or line_nb >= len(starts):
            raise IndexError(f"Line {line_nb} does not exist")
        start = starts[line_nb]
        if line_nb + 1 < len(starts):
            end = starts[line_nb + 1] - len(self.newline)
        else:
            end = len(text)
        return Line(text[start:end], start)

    # -- coordinate conversion ----------------------------------------------

    def to_position(self, index: int) -> Position:
        return position_from_starts(self._current_starts(), len(self._text), index)

    def to_index(self, position: Position) -> int | None:
        return index_from_starts(self._current_starts(), len(self._text), position)

    def original_position(self, index: int) -> Position:
        return position_from_starts(
            self._original_starts, len(self._original), index,
        )

    def original_index(self, position: Position) -> int | None:
        return index_from_starts(
            self._original_starts, len(self._original), position,
        )

    def position_range(self, r: Range, *, original: bool = True) -> PositionRange:
        """Line/column view of *r*, read in the original or current text."""
        convert = self.original_position if original else self.to_position
        return PositionRange(convert(r.start), convert(r.end))

    # -- provenance ---------------------------------------------------------

    def track_to_input(self, r: Range) -> list[Range]:
        """Disjoint original ranges that contributed to current range *r*."""
        clipped = _clip(r, len(self._text))
        if clipped is None:
            return []
        return self.composed_mapping().track_to_input(clipped)

    def track_to_output(self, r: Range) -> list[Range]:
        """Disjoint current ranges derived from original range *r*."""
        clipped = _clip(r, len(self._original))
        if clipped is None:
            return []
        return self.composed_mapping().track_to_output(clipped)

    def backward_range(self, r: Range) -> Range | None:
        """Bounding original range of current range *r*; None if untracked."""
        return unite_ranges(self.track_to_input(r))

    def forward_range(self, r: Range) -> Range | None:
        """Bounding current range of original range *r*; None if deleted."""
        return unite_ranges(self.track_to_output(r))

    def find_original_index(self, position: Position) -> int | None:
        """Original offset of the character at *position* in the current text."""
        index = self.to_index(position)
        if index is None:
            return None
        found = self.backward_range(Range(index, index))
        return None if found is None else found.start

    def composed_mapping(self) -> RangeMapping:
        """End-to-end mapping from the original text to the current text."""
        if self._composed is None:
            composed = compose_all(self.mappings)
            if composed is None:
                composed = RangeMapping.identity(len(self._original))
            self._composed = composed
        return self._composed


def _clip(r: Range, length: int) -> Range | None:
    if length == 0:
        return None
    return r.intersect(Range(0, length - 1))
