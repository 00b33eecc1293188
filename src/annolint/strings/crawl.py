"""Composition of stage mappings and provenance crawling.

Given the mappings of a chain of stages ``S1 .. Sn``, answer which ranges of
one end of the chain correspond to a range of the other end. The chain is
first folded into one end-to-end mapping (:func:`compose_all`); a crawl is
a single query against that mapping. Resizing proportionally at every stage
would split pairs at different boundaries than the fold does, so every
provenance answer goes through the composed pairs.
"""
from __future__ import annotations

from collections.abc import Sequence

from annolint.strings.mapping import RangeMapping, compose_mappings
from annolint.strings.types import Range


def compose_all(mappings: Sequence[RangeMapping]) -> RangeMapping | None:
    """Left fold of :func:`compose_mappings`; None for an empty chain."""
    if not mappings:
        return None
    composed = mappings[0]
    for mapping in mappings[1:]:
        composed = compose_mappings(composed, mapping)
    return composed


def crawl_backward(mappings: Sequence[RangeMapping], r: Range) -> list[Range]:
    """Disjoint ranges of the first input that contributed to *r*.

    *r* is expressed in the output of the last mapping. The result is
    sorted by start offset and empty when no stage kept provenance for any
    part of *r*.
    """
    composed = compose_all(mappings)
    if composed is None:
        return [r]
    return composed.track_to_input(r)


def crawl_forward(mappings: Sequence[RangeMapping], r: Range) -> list[Range]:
    """Disjoint ranges of the last output derived from *r* of the first input."""
    composed = compose_all(mappings)
    if composed is None:
        return [r]
    return composed.track_to_output(r)
