"""Tests for the serialized text wrapper."""

import pytest

from rdf_termlocator.models import InvalidOffsetError, Position
from rdf_termlocator.text import SerializedText


class TestPositions:
    """Offset to (line, ch) conversion."""

    @pytest.fixture
    def text(self):
        return SerializedText("ab\ncde\n\nf")

    def test_line_starts(self, text):
        assert [text.line_start(i) for i in range(4)] == [0, 3, 7, 8]

    def test_position_at(self, text):
        assert text.position_at(0) == Position(0, 0)
        assert text.position_at(4) == Position(1, 1)
        assert text.position_at(7) == Position(2, 0)
        assert text.position_at(9) == Position(3, 1)

    def test_offset_of_roundtrip(self, text):
        for offset in range(len(text)):
            assert text.offset_of(text.position_at(offset)) == offset

    def test_range_for(self, text):
        rng = text.range_for(3, 3)
        assert rng.start == Position(1, 0)
        assert rng.end == Position(1, 3)
        assert (rng.offset, rng.length) == (3, 3)

    def test_empty_range_rejected(self, text):
        with pytest.raises(InvalidOffsetError):
            text.range_for(3, 0)

    def test_range_past_end_rejected(self, text):
        with pytest.raises(InvalidOffsetError):
            text.range_for(8, 5)

    def test_position_past_end_rejected(self, text):
        with pytest.raises(InvalidOffsetError):
            text.position_at(100)


class TestLines:
    """Lazy line access."""

    def test_line_count(self):
        assert SerializedText("a\nb\n").line_count == 3

    def test_iter_lines_subset_in_order(self):
        text = SerializedText("a\nbb\nccc\ndddd")
        visited = list(text.iter_lines({3, 1, 42}))
        assert visited == [(1, 2, "bb"), (3, 9, "dddd")]

    def test_line_bounds(self):
        text = SerializedText("ab\ncde\nf")
        assert text.line_bounds(4) == (3, 6)

    def test_find_all_within_span(self):
        text = SerializedText("ex:p ex:p\nex:p")
        assert list(text.find_all("ex:p")) == [0, 5, 10]
        assert list(text.find_all("ex:p", 0, 9)) == [0, 5]


class TestTripleQuotes:
    """Triple-quote parity lookups."""

    def test_inside_and_outside(self):
        content = 'a """x\ny""" b'
        text = SerializedText(content)
        assert text.inside_triple_quotes(content.index("a")) is False
        assert text.inside_triple_quotes(content.index("x")) is True
        assert text.inside_triple_quotes(content.index("y")) is True
        assert text.inside_triple_quotes(content.index("b")) is False

    def test_escaped_delimiter_ignored(self):
        content = 'a \\""" b'
        text = SerializedText(content)
        assert text.inside_triple_quotes(content.index("b")) is False
