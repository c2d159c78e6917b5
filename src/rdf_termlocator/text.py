"""
Serialized text wrapper.

Holds the editor content for the duration of one locate call. Lines,
line start offsets and triple-quote delimiter offsets are computed lazily
and cached on the instance, so repeated lookups while scanning many
candidates stay cheap.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from typing import Iterator, List, Optional, Tuple

from rdf_termlocator.models import InvalidOffsetError, Position, Range

TRIPLE_QUOTE = '"""'
_TRIPLE_QUOTE_RE = re.compile(r'"""')


class SerializedText:
    """Immutable view over the editor buffer for a single locate call."""

    def __init__(self, content: str):
        self.content = content
        self._lines: Optional[List[str]] = None
        self._line_starts: Optional[List[int]] = None
        self._triple_quote_ends: Optional[List[int]] = None

    def __len__(self) -> int:
        return len(self.content)

    @property
    def lines(self) -> List[str]:
        if self._lines is None:
            self._lines = self.content.split("\n")
        return self._lines

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def _starts(self) -> List[int]:
        if self._line_starts is None:
            starts = []
            offset = 0
            for line in self.lines:
                starts.append(offset)
                offset += len(line) + 1
            self._line_starts = starts
        return self._line_starts

    def line_start(self, index: int) -> int:
        """Character offset of the first character of line ``index``."""
        return self._starts()[index]

    def position_at(self, offset: int) -> Position:
        """Convert a character offset to a (line, ch) position."""
        if offset < 0 or offset > len(self.content):
            raise InvalidOffsetError(f"Offset {offset} outside text of length {len(self.content)}")
        starts = self._starts()
        line = bisect_right(starts, offset) - 1
        return Position(line=line, ch=offset - starts[line])

    def offset_of(self, position: Position) -> int:
        if position.line < 0 or position.line >= self.line_count:
            raise InvalidOffsetError(f"Line {position.line} outside text")
        return self.line_start(position.line) + position.ch

    def range_for(self, offset: int, length: int) -> Range:
        """Build a non-empty Range, failing loudly on malformed offsets."""
        if length <= 0:
            raise InvalidOffsetError(f"Empty range at offset {offset}")
        if offset < 0 or offset + length > len(self.content):
            raise InvalidOffsetError(
                f"Range {offset}+{length} outside text of length {len(self.content)}"
            )
        return Range(
            start=self.position_at(offset),
            end=self.position_at(offset + length),
            offset=offset,
            length=length,
        )

    # -------------------------------------------------------------------------
    # Triple-quoted literals
    # -------------------------------------------------------------------------

    def _triple_quotes(self) -> List[int]:
        if self._triple_quote_ends is None:
            ends = []
            for match in _TRIPLE_QUOTE_RE.finditer(self.content):
                start = match.start()
                if start > 0 and self.content[start - 1] == "\\":
                    continue
                ends.append(match.end())
            self._triple_quote_ends = ends
        return self._triple_quote_ends

    def inside_triple_quotes(self, offset: int) -> bool:
        """True if an odd number of ``\"\"\"`` delimiters end before ``offset``."""
        return bisect_right(self._triple_quotes(), offset) % 2 == 1

    # -------------------------------------------------------------------------
    # Line helpers
    # -------------------------------------------------------------------------

    def line_bounds(self, offset: int) -> Tuple[int, int]:
        """Start and end offsets of the line containing ``offset``."""
        starts = self._starts()
        index = bisect_right(starts, offset) - 1
        start = starts[index]
        return start, start + len(self.lines[index])

    def iter_lines(self, indices=None) -> Iterator[Tuple[int, int, str]]:
        """
        Yield ``(index, start_offset, line)`` triples.

        Args:
            indices: Optional subset of line indices to visit (visited in
                ascending order). ``None`` visits every line.
        """
        lines = self.lines
        starts = self._starts()
        if indices is None:
            ordered = range(len(lines))
        else:
            ordered = sorted(i for i in indices if 0 <= i < len(lines))
        for index in ordered:
            yield index, starts[index], lines[index]

    def find_all(self, needle: str, start: int = 0, end: Optional[int] = None) -> Iterator[int]:
        """Yield every non-overlapping offset of ``needle`` in [start, end)."""
        if not needle:
            return
        content = self.content
        limit = len(content) if end is None else end
        index = content.find(needle, start, limit)
        while index != -1:
            yield index
            index = content.find(needle, index + len(needle), limit)

    def line_index_of(self, offset: int) -> int:
        return bisect_right(self._starts(), offset) - 1

