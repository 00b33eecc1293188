"""String provenance engine: annotated strings, stages and range mappings."""

from annolint.strings.annotated import AnnotatedString, HistoryEntry
from annolint.strings.crawl import compose_all, crawl_backward, crawl_forward
from annolint.strings.mapping import (
    RangeMapping,
    RangePair,
    compose_mappings,
    resize_range,
    shift_mapping,
)
from annolint.strings.stages import (
    MAX_ITERATIONS,
    InsertAt,
    PatternError,
    RemoveLine,
    Replace,
    Shift,
    Stage,
    Truncate,
    apply_stage,
    compile_pattern,
)
from annolint.strings.types import (
    LINE_SEPARATOR,
    NOWHERE,
    ZERO,
    Line,
    Match,
    Position,
    PositionRange,
    Range,
    normalize_ranges,
    to_index,
    to_position,
    unite_ranges,
)

__all__ = [
    "AnnotatedString",
    "HistoryEntry",
    "InsertAt",
    "LINE_SEPARATOR",
    "Line",
    "MAX_ITERATIONS",
    "Match",
    "NOWHERE",
    "PatternError",
    "Position",
    "PositionRange",
    "Range",
    "RangeMapping",
    "RangePair",
    "RemoveLine",
    "Replace",
    "Shift",
    "Stage",
    "Truncate",
    "ZERO",
    "apply_stage",
    "compile_pattern",
    "compose_all",
    "compose_mappings",
    "crawl_backward",
    "crawl_forward",
    "normalize_ranges",
    "resize_range",
    "shift_mapping",
    "to_index",
    "to_position",
    "unite_ranges",
]
