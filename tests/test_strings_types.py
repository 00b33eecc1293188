"""Tests for annolint.strings.types."""
import pytest

from annolint.strings import (
    NOWHERE,
    Position,
    PositionRange,
    Range,
    normalize_ranges,
    to_index,
    to_position,
    unite_ranges,
)


class TestPosition:
    def test_ordering(self) -> None:
        assert Position(0, 5) < Position(1, 0)
        assert Position(1, 2) < Position(1, 3)

    def test_str_is_one_based(self) -> None:
        assert str(Position(0, 2)) == "L1C3"

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            Position(-1, 0)
        with pytest.raises(ValueError):
            Position(0, -2)

    def test_nowhere_sentinel_allowed(self) -> None:
        assert NOWHERE == Position(-1, -1)

    def test_move_by(self) -> None:
        assert Position(2, 3).move_by(4) == Position(2, 7)


class TestRange:
    def test_length_is_inclusive(self) -> None:
        assert len(Range(2, 4)) == 3
        assert len(Range(5, 5)) == 1

    def test_invalid_bounds(self) -> None:
        with pytest.raises(ValueError):
            Range(-1, 3)
        with pytest.raises(ValueError):
            Range(4, 3)

    def test_intersect(self) -> None:
        assert Range(0, 5).intersect(Range(3, 9)) == Range(3, 5)
        assert Range(0, 2).intersect(Range(3, 9)) is None

    def test_overlaps_and_contains(self) -> None:
        assert Range(0, 3).overlaps(Range(3, 4))
        assert not Range(0, 2).overlaps(Range(3, 4))
        assert Range(2, 4).contains(4)
        assert not Range(2, 4).contains(5)

    def test_shift_and_str(self) -> None:
        assert Range(1, 2).shift(3) == Range(4, 5)
        assert str(Range(1, 2)) == "[1,2]"

    def test_is_multi_line(self) -> None:
        text = "abc\ndef"
        assert Range(1, 5).is_multi_line(text)
        assert not Range(4, 6).is_multi_line(text)


class TestRangeSets:
    def test_normalize_merges_overlapping_and_adjacent(self) -> None:
        ranges = [Range(8, 13), Range(0, 3), Range(4, 6), Range(10, 15)]
        assert normalize_ranges(ranges) == [Range(0, 6), Range(8, 15)]

    def test_normalize_keeps_gaps(self) -> None:
        assert normalize_ranges([Range(5, 6), Range(0, 3)]) == [Range(0, 3), Range(5, 6)]

    def test_normalize_empty(self) -> None:
        assert normalize_ranges([]) == []

    def test_unite(self) -> None:
        assert unite_ranges([Range(4, 6), Range(0, 1)]) == Range(0, 6)
        assert unite_ranges([]) is None


class TestConversion:
    TEXT = "abc\ndef\nghi"

    def test_to_position(self) -> None:
        assert to_position(self.TEXT, 0) == Position(0, 0)
        assert to_position(self.TEXT, 4) == Position(1, 0)
        assert to_position(self.TEXT, 10) == Position(2, 2)

    def test_newline_belongs_to_its_line(self) -> None:
        assert to_position(self.TEXT, 3) == Position(0, 3)

    def test_out_of_bounds(self) -> None:
        assert to_position(self.TEXT, 11) == NOWHERE
        assert to_position(self.TEXT, -1) == NOWHERE
        assert to_index(self.TEXT, Position(5, 0)) is None
        assert to_index(self.TEXT, Position(2, 3)) is None

    def test_round_trip_on_every_index(self) -> None:
        for i in range(len(self.TEXT)):
            assert to_index(self.TEXT, to_position(self.TEXT, i)) == i

    def test_custom_newline(self) -> None:
        text = "ab\r\ncd"
        assert to_position(text, 4, "\r\n") == Position(1, 0)
        assert to_index(text, Position(1, 1), "\r\n") == 5

    def test_position_range_str(self) -> None:
        pr = PositionRange(Position(0, 0), Position(0, 2))
        assert str(pr) == "L1C1-L1C3"
        assert not pr.is_multi_line()
