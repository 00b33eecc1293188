"""Local range mappings recorded by a single text-rewriting stage.

A stage turns an input string into an output string and records a
``RangeMapping``: pairs associating a range of the input with a range of
the output. Output characters covered by no pair have no provenance
(literal text introduced by the stage).

Pairs whose two sides have different lengths (a whole regex match replaced
by a shorter or longer string) are resized proportionally when only part of
one side is queried; see :func:`resize_range`.
"""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from annolint.strings.types import Range, normalize_ranges


@dataclass(frozen=True, slots=True)
class RangePair:
    """One association between an input range and an output range."""

    in_range: Range
    out_range: Range

    @classmethod
    def make(cls, in_start: int, in_end: int, out_start: int, out_end: int) -> RangePair:
        return cls(Range(in_start, in_end), Range(out_start, out_end))

    def shift(self, by: int) -> RangePair:
        return RangePair(self.in_range.shift(by), self.out_range)

    def __str__(self) -> str:
        return f"{self.in_range}->{self.out_range}"


def resize_range(original: Range, resized: Range, counterpart: Range) -> Range:
    """Mirror on *counterpart* the resizing that turned *original* into *resized*.

    *resized* must lie within *original*. Each boundary is handled on its
    own and only moves if the matching boundary of *original* moved. The
    displacement is scaled by ``len(counterpart) / len(original)`` (floor),
    which is an exact offset when both sides have the same length, and the
    result is clamped inside *counterpart*.

    >>> resize_range(Range(10, 15), Range(12, 13), Range(0, 5))
    Range(start=2, end=3)
    """
    if resized == original:
        return counterpart
    ratio_num = len(counterpart)
    ratio_den = len(original)
    start = counterpart.start
    if resized.start != original.start:
        start += (resized.start - original.start) * ratio_num // ratio_den
    end = counterpart.end
    if resized.end != original.end:
        end -= (original.end - resized.end) * ratio_num // ratio_den
    start = min(start, counterpart.end)
    end = max(end, start)
    return Range(start, end)


@dataclass(frozen=True, slots=True)
class RangeMapping:
    """Ordered, immutable set of range pairs produced by one stage."""

    pairs: tuple[RangePair, ...] = ()

    @classmethod
    def of(cls, *pairs: RangePair) -> RangeMapping:
        return cls(tuple(pairs))

    @classmethod
    def identity(cls, length: int) -> RangeMapping:
        """Mapping of a string of *length* characters onto itself."""
        if length <= 0:
            return cls()
        whole = Range(0, length - 1)
        return cls((RangePair(whole, whole),))

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[RangePair]:
        return iter(self.pairs)

    def track_to_input(self, r: Range) -> list[Range]:
        """Input ranges that produced the output range *r*."""
        found: list[Range] = []
        for pair in self.pairs:
            part = pair.out_range.intersect(r)
            if part is not None:
                found.append(resize_range(pair.out_range, part, pair.in_range))
        return normalize_ranges(found)

    def track_to_output(self, r: Range) -> list[Range]:
        """Output ranges derived from the input range *r*."""
        found: list[Range] = []
        for pair in self.pairs:
            part = pair.in_range.intersect(r)
            if part is not None:
                found.append(resize_range(pair.in_range, part, pair.out_range))
        return normalize_ranges(found)

    def outputs_disjoint(self) -> bool:
        """Check that no output character is claimed by two pairs."""
        outs = sorted(p.out_range for p in self.pairs)
        return all(a.end < b.start for a, b in zip(outs, outs[1:]))


def shift_mapping(mapping: RangeMapping, by: int) -> RangeMapping:
    """Offset the input side of every pair by *by*."""
    return RangeMapping(tuple(p.shift(by) for p in mapping.pairs))


def compose_mappings(first: RangeMapping, second: RangeMapping) -> RangeMapping:
    """Transitive mapping from *first*'s input to *second*'s output.

    *second*'s input space is *first*'s output space. Each pair of *second*
    is restricted to the portions of *first*'s output ranges it overlaps;
    those portions are expressed back in *first*'s input coordinates.
    """
    pairs: list[RangePair] = []
    for b in second.pairs:
        for a in first.pairs:
            common = a.out_range.intersect(b.in_range)
            if common is None:
                continue
            pairs.append(RangePair(
                resize_range(a.out_range, common, a.in_range),
                resize_range(b.in_range, common, b.out_range),
            ))
    pairs.sort(key=lambda p: (p.out_range, p.in_range))
    return RangeMapping(tuple(pairs))
