"""Concrete text-rewriting stages.

Each stage is a frozen dataclass describing one rewrite; :func:`apply_stage`
runs it on a string and returns the new string together with the
``RangeMapping`` between the input and the output. Stages never raise on a
well-formed stage description: bounds are clamped, missing matches and
missing lines are no-ops. The only construction-time failure is a malformed
regular expression (``PatternError``) or a negative shift.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeAlias

from annolint.strings.mapping import RangeMapping, RangePair
from annolint.strings.types import LINE_SEPARATOR, line_starts

log = logging.getLogger(__name__)

# Upper bound on the number of matches a global replacement processes
MAX_ITERATIONS = 10_000

Replacement: TypeAlias = str | Callable[[re.Match[str]], str]


class PatternError(ValueError):
    """A regular expression given to a stage or a search does not compile."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


def compile_pattern(pattern: str | re.Pattern[str], flags: int = 0) -> re.Pattern[str]:
    """Compile *pattern*, turning ``re.error`` into ``PatternError``.

    Flags cannot be added to an already compiled pattern (``ValueError``).
    """
    if isinstance(pattern, re.Pattern):
        if flags:
            raise ValueError("cannot process flags argument with a compiled pattern")
        return pattern
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise PatternError(pattern, str(exc)) from exc


# ---------------------------------------------------------------------------
# Stage descriptions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Truncate:
    """Keep ``text[start:end]``; ``end=None`` keeps everything after start."""

    start: int
    end: int | None = None


@dataclass(frozen=True, slots=True)
class Replace:
    """Replace the first match (or every match) of a pattern.

    *replacement* is a template expanded with ``re.Match.expand`` or a
    callable receiving the match. Provenance is tracked for the whole match
    only: the replacement text maps to the whole matched region.
    """

    pattern: str | re.Pattern[str]
    replacement: Replacement
    all_matches: bool = False
    start: int = 0
    flags: int = 0
    regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "regex", compile_pattern(self.pattern, self.flags))


@dataclass(frozen=True, slots=True)
class RemoveLine:
    """Delete one line along with its terminator."""

    line: int
    newline: str = LINE_SEPARATOR


@dataclass(frozen=True, slots=True)
class InsertAt:
    """Insert a literal string at an offset."""

    text: str
    index: int


@dataclass(frozen=True, slots=True)
class Shift:
    """Leave the text alone but re-anchor its coordinates by ``by``."""

    by: int

    def __post_init__(self) -> None:
        if self.by < 0:
            raise ValueError(f"Shift.by must be >= 0, got {self.by}")


Stage: TypeAlias = Truncate | Replace | RemoveLine | InsertAt | Shift


# ---------------------------------------------------------------------------
# Stage evaluation
# ---------------------------------------------------------------------------


def apply_stage(stage: Stage, text: str) -> tuple[str, RangeMapping]:
    """Run *stage* on *text*; return the output and its range mapping."""
    match stage:
        case Truncate():
            return _truncate(stage, text)
        case Replace():
            return _replace(stage, text)
        case RemoveLine():
            return _remove_line(stage, text)
        case InsertAt():
            return _insert_at(stage, text)
        case Shift():
            return _shift(stage, text)
    raise TypeError(f"Not a stage: {stage!r}")


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _truncate(stage: Truncate, text: str) -> tuple[str, RangeMapping]:
    start = _clamp(stage.start, 0, len(text))
    end = len(text) if stage.end is None else _clamp(stage.end, start, len(text))
    if end == start:
        return "", RangeMapping()
    return text[start:end], RangeMapping.of(
        RangePair.make(start, end - 1, 0, end - start - 1),
    )


def _replace(stage: Replace, text: str) -> tuple[str, RangeMapping]:
    parts: list[str] = []
    pairs: list[RangePair] = []
    out_len = 0
    consumed = 0

    def copy_until(stop: int) -> None:
        nonlocal out_len
        if stop > consumed:
            size = stop - consumed
            pairs.append(RangePair.make(
                consumed, stop - 1, out_len, out_len + size - 1,
            ))
            parts.append(text[consumed:stop])
            out_len += size

    pos = _clamp(stage.start, 0, len(text))
    iterations = 0
    while pos <= len(text):
        if iterations >= MAX_ITERATIONS:
            log.debug(
                "Stopped replacing %r after %d matches",
                stage.regex.pattern, iterations,
            )
            break
        m = stage.regex.search(text, pos)
        if m is None:
            break
        iterations += 1
        copy_until(m.start())
        if callable(stage.replacement):
            replaced = stage.replacement(m)
        else:
            replaced = m.expand(stage.replacement)
        if replaced and m.end() > m.start():
            pairs.append(RangePair.make(
                m.start(), m.end() - 1, out_len, out_len + len(replaced) - 1,
            ))
        parts.append(replaced)
        out_len += len(replaced)
        consumed = m.end()
        if not stage.all_matches:
            break
        # Step over empty matches so the scan always advances
        pos = m.end() if m.end() > m.start() else m.end() + 1
    copy_until(len(text))
    return "".join(parts), RangeMapping(tuple(pairs))


def _remove_line(stage: RemoveLine, text: str) -> tuple[str, RangeMapping]:
    starts = line_starts(text, stage.newline)
    if stage.line < 0 or stage.line >= len(starts):
        return text, RangeMapping.identity(len(text))
    nl = len(stage.newline)
    if stage.line + 1 < len(starts):
        cut_start = starts[stage.line]
        cut_end = starts[stage.line + 1]
    elif stage.line > 0:
        # Last line: drop the terminator that precedes it
        cut_start = starts[stage.line] - nl
        cut_end = len(text)
    else:
        return "", RangeMapping()
    pairs: list[RangePair] = []
    if cut_start > 0:
        pairs.append(RangePair.make(0, cut_start - 1, 0, cut_start - 1))
    if cut_end < len(text):
        remaining = len(text) - cut_end
        pairs.append(RangePair.make(
            cut_end, len(text) - 1, cut_start, cut_start + remaining - 1,
        ))
    return text[:cut_start] + text[cut_end:], RangeMapping(tuple(pairs))


def _insert_at(stage: InsertAt, text: str) -> tuple[str, RangeMapping]:
    point = _clamp(stage.index, 0, len(text))
    inserted = len(stage.text)
    pairs: list[RangePair] = []
    if point > 0:
        pairs.append(RangePair.make(0, point - 1, 0, point - 1))
    if point < len(text):
        remaining = len(text) - point
        pairs.append(RangePair.make(
            point, len(text) - 1,
            point + inserted, point + inserted + remaining - 1,
        ))
    return text[:point] + stage.text + text[point:], RangeMapping(tuple(pairs))


def _shift(stage: Shift, text: str) -> tuple[str, RangeMapping]:
    if not text:
        return text, RangeMapping()
    return text, RangeMapping.of(
        RangePair.make(stage.by, stage.by + len(text) - 1, 0, len(text) - 1),
    )
