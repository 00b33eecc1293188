"""Tests for range mappings, composition and crawling."""
from annolint.strings import (
    Range,
    RangeMapping,
    RangePair,
    compose_all,
    compose_mappings,
    crawl_backward,
    crawl_forward,
    resize_range,
    shift_mapping,
)


class TestResizeRange:
    def test_unchanged_returns_counterpart(self) -> None:
        assert resize_range(Range(0, 4), Range(0, 4), Range(10, 20)) == Range(10, 20)

    def test_same_length_is_exact_offset(self) -> None:
        assert resize_range(Range(10, 15), Range(12, 13), Range(0, 5)) == Range(2, 3)

    def test_only_moved_boundaries_move(self) -> None:
        assert resize_range(Range(0, 9), Range(0, 4), Range(20, 29)) == Range(20, 24)
        assert resize_range(Range(0, 9), Range(5, 9), Range(20, 29)) == Range(25, 29)

    def test_shrinking_counterpart_is_clamped(self) -> None:
        # 13 characters collapsed to one: any part maps to that character
        assert resize_range(Range(0, 12), Range(4, 6), Range(0, 0)) == Range(0, 0)

    def test_growing_counterpart(self) -> None:
        assert resize_range(Range(0, 0), Range(0, 0), Range(3, 7)) == Range(3, 7)


class TestRangeMapping:
    def test_identity(self) -> None:
        m = RangeMapping.identity(5)
        assert m.track_to_input(Range(1, 3)) == [Range(1, 3)]
        assert RangeMapping.identity(0).pairs == ()

    def test_unmapped_output_has_no_input(self) -> None:
        m = RangeMapping.of(RangePair.make(0, 4, 3, 7))
        assert m.track_to_input(Range(0, 2)) == []
        assert m.track_to_input(Range(3, 7)) == [Range(0, 4)]

    def test_results_are_normalized(self) -> None:
        m = RangeMapping.of(RangePair.make(0, 2, 0, 2), RangePair.make(3, 5, 3, 5))
        assert m.track_to_input(Range(0, 5)) == [Range(0, 5)]
        assert m.track_to_output(Range(1, 4)) == [Range(1, 4)]

    def test_outputs_disjoint(self) -> None:
        ok = RangeMapping.of(RangePair.make(0, 2, 0, 2), RangePair.make(5, 6, 3, 4))
        bad = RangeMapping.of(RangePair.make(0, 2, 0, 2), RangePair.make(5, 6, 2, 4))
        assert ok.outputs_disjoint()
        assert not bad.outputs_disjoint()

    def test_shift_mapping_moves_inputs(self) -> None:
        m = shift_mapping(RangeMapping.of(RangePair.make(0, 2, 0, 2)), 4)
        assert m.pairs == (RangePair.make(4, 6, 0, 2),)


class TestComposition:
    # "abcdefg" -> replace def by foo -> substring(2, 4)
    FIRST = RangeMapping.of(
        RangePair.make(0, 2, 0, 2),
        RangePair.make(3, 5, 3, 5),
        RangePair.make(6, 6, 6, 6),
    )
    SECOND = RangeMapping.of(RangePair.make(2, 3, 0, 1))

    def test_compose(self) -> None:
        composed = compose_mappings(self.FIRST, self.SECOND)
        assert composed.track_to_input(Range(0, 0)) == [Range(2, 2)]
        assert composed.track_to_input(Range(1, 1)) == [Range(3, 3)]

    def test_crawl_matches_composition(self) -> None:
        mappings = [self.FIRST, self.SECOND]
        composed = compose_all(mappings)
        assert composed is not None
        for start in range(2):
            for end in range(start, 2):
                r = Range(start, end)
                assert crawl_backward(mappings, r) == composed.track_to_input(r)

    def test_crawl_forward(self) -> None:
        assert crawl_forward([self.FIRST, self.SECOND], Range(2, 4)) == [Range(0, 1)]
        assert crawl_forward([self.FIRST, self.SECOND], Range(5, 6)) == []

    def test_empty_chain(self) -> None:
        assert compose_all([]) is None
        assert crawl_backward([], Range(1, 2)) == [Range(1, 2)]
