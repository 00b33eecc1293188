"""Position and range value types for the provenance engine.

Two coordinate systems coexist:

- linear offsets (``Range``), used for all provenance bookkeeping;
- line/column pairs (``Position`` / ``PositionRange``), used only when
  reporting to a user. A ``PositionRange`` is always derived from a
  ``Range`` through :func:`to_position`, never stored by the engine.

Both ``Range`` endpoints are inclusive: ``len(Range(2, 4)) == 3``.
"""
from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

LINE_SEPARATOR = "\n"


# ---------------------------------------------------------------------------
# Position
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """A 0-based (line, column) location. Ordered by line, then column."""

    line: int
    column: int

    def __post_init__(self) -> None:
        if (self.line, self.column) == (-1, -1):
            return  # the NOWHERE sentinel
        if self.line < 0 or self.column < 0:
            raise ValueError(
                f"Position must have line >= 0 and column >= 0, "
                f"got ({self.line}, {self.column})"
            )

    def move_by(self, columns: int) -> Position:
        return Position(self.line, self.column + columns)

    def __str__(self) -> str:
        return f"L{self.line + 1}C{self.column + 1}"


ZERO = Position(0, 0)
NOWHERE = Position(-1, -1)


# ---------------------------------------------------------------------------
# Range
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, order=True)
class Range:
    """Closed interval ``[start, end]`` of linear character offsets."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"Range.start must be >= 0, got {self.start}")
        if self.end < self.start:
            raise ValueError(
                f"Range.end ({self.end}) must be >= start ({self.start})"
            )

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __str__(self) -> str:
        return f"[{self.start},{self.end}]"

    def contains(self, index: int) -> bool:
        return self.start <= index <= self.end

    def overlaps(self, other: Range) -> bool:
        return self.start <= other.end and other.start <= self.end

    def intersect(self, other: Range) -> Range | None:
        """Return the common part of both ranges, or None when disjoint."""
        if not self.overlaps(other):
            return None
        return Range(max(self.start, other.start), min(self.end, other.end))

    def shift(self, by: int) -> Range:
        return Range(self.start + by, self.end + by)

    def is_multi_line(self, text: str, newline: str = LINE_SEPARATOR) -> bool:
        """Check whether the range spans more than one line of *text*."""
        start = to_position(text, self.start, newline)
        end = to_position(text, self.end, newline)
        if start == NOWHERE or end == NOWHERE:
            return False
        return start.line != end.line


@dataclass(frozen=True, slots=True, order=True)
class PositionRange:
    """Line/column view of a ``Range``, for reporting only."""

    start: Position
    end: Position

    def is_multi_line(self) -> bool:
        return self.start.line != self.end.line

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


# ---------------------------------------------------------------------------
# Range sets
# ---------------------------------------------------------------------------


def normalize_ranges(ranges: list[Range]) -> list[Range]:
    """Sort ranges and merge the ones that overlap or abut.

    ``[8,13], [0,3], [4,6], [10,15]`` becomes ``[0,6], [8,15]``.
    """
    merged: list[Range] = []
    for r in sorted(ranges):
        if merged and r.start <= merged[-1].end + 1:
            if r.end > merged[-1].end:
                merged[-1] = Range(merged[-1].start, r.end)
        else:
            merged.append(r)
    return merged


def unite_ranges(ranges: list[Range]) -> Range | None:
    """Smallest single range containing every range; None for no ranges."""
    if not ranges:
        return None
    return Range(min(r.start for r in ranges), max(r.end for r in ranges))


# ---------------------------------------------------------------------------
# Linear <-> line/column conversion
# ---------------------------------------------------------------------------


def line_starts(text: str, newline: str = LINE_SEPARATOR) -> list[int]:
    """Offsets of the first character of every line of *text*."""
    starts = [0]
    pos = text.find(newline)
    while pos >= 0:
        starts.append(pos + len(newline))
        pos = text.find(newline, pos + len(newline))
    return starts


def position_from_starts(
    starts: list[int], length: int, index: int,
) -> Position:
    """Resolve *index* against precomputed line starts of a text of *length*.

    A line terminator belongs to the line it ends, so the position of a
    newline character is that line's last column.
    """
    if index < 0 or index >= length:
        return NOWHERE
    line = bisect_right(starts, index) - 1
    return Position(line, index - starts[line])


def index_from_starts(
    starts: list[int], length: int, position: Position,
) -> int | None:
    """Inverse of :func:`position_from_starts`; None when out of bounds."""
    if position == NOWHERE or position.line >= len(starts):
        return None
    line_start = starts[position.line]
    if position.line + 1 < len(starts):
        # Non-final line: its terminator is addressable
        line_end = starts[position.line + 1]
    else:
        line_end = length
    if position.column >= line_end - line_start:
        return None
    return line_start + position.column


def to_position(
    text: str, index: int, newline: str = LINE_SEPARATOR,
) -> Position:
    """Line/column of the *index*-th character; NOWHERE out of bounds."""
    return position_from_starts(line_starts(text, newline), len(text), index)


def to_index(
    text: str, position: Position, newline: str = LINE_SEPARATOR,
) -> int | None:
    """Linear offset of *position* in *text*; None out of bounds."""
    return index_from_starts(line_starts(text, newline), len(text), position)


# ---------------------------------------------------------------------------
# Search results and lines
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Match:
    """A regex match in the current text of an annotated string."""

    match: str
    position: int
    groups: tuple[str | None, ...] = ()

    @property
    def end(self) -> int:
        """Offset just past the match."""
        return self.position + len(self.match)

    def group(self, index: int) -> str | None:
        return self.groups[index]

    def group_count(self) -> int:
        return len(self.groups)

    def __str__(self) -> str:
        return f"{self.match} ({self.position})"


@dataclass(frozen=True, slots=True)
class Line:
    """One line of text along with the offset of its first character."""

    text: str
    offset: int

    def __str__(self) -> str:
        return self.text

    def __len__(self) -> int:
        return len(self.text)
