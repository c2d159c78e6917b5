"""
Structural classification of text matches.

A substring match of a term's spelling is only interesting when it plays
a structural role in the serialization: a subject, a predicate, or a
JSON-LD key. Matches that fall inside string literals are incidental.

Rules are applied in order:

1. JSON-LD key: a quoted match followed by a colon (or the inner content
   of such a quoted key) is structural regardless of quoting state.
2. Inside a triple-quoted literal: not structural.
3. Inside an ordinary double-quoted literal on the same line: not
   structural.
4. Turtle/TriG position: preceded by whitespace, ``;``, ``{`` or the start
   of text and followed by whitespace or the end of text; any bracketed
   IRI (``<...>``) is accepted.
"""

from __future__ import annotations

from typing import Union

from rdf_termlocator.models import InvalidOffsetError
from rdf_termlocator.text import TRIPLE_QUOTE, SerializedText

VALID_BEFORE = frozenset(" \t\r\n;{")


def _skip_whitespace(content: str, index: int) -> int:
    while index < len(content) and content[index].isspace():
        index += 1
    return index


class StructuralClassifier:
    """Decides whether an occurrence is structural for one serialized text."""

    def __init__(self, text: Union[SerializedText, str]):
        if isinstance(text, str):
            text = SerializedText(text)
        self.text = text

    def is_structural(self, offset: int, length: int) -> bool:
        content = self.text.content
        if length <= 0 or offset < 0 or offset + length > len(content):
            raise InvalidOffsetError(
                f"Occurrence {offset}+{length} outside text of length {len(content)}"
            )

        if self.is_json_key(offset, length):
            return True

        if self.text.inside_triple_quotes(offset):
            return False

        if self.inside_line_literal(offset):
            return False

        return self.has_turtle_position(offset, length)

    def is_json_key(self, offset: int, length: int) -> bool:
        """A quoted string immediately followed by ``:``."""
        content = self.text.content
        end = offset + length

        if content[offset] == '"':
            index = _skip_whitespace(content, end)
            return index < len(content) and content[index] == ":"

        if offset > 0 and content[offset - 1] == '"':
            if end < len(content) and content[end] == '"':
                index = _skip_whitespace(content, end + 1)
                return index < len(content) and content[index] == ":"

        return False

    def inside_line_literal(self, offset: int) -> bool:
        """Odd number of unescaped single quotes before ``offset`` on its line."""
        content = self.text.content
        line_start, _ = self.text.line_bounds(offset)
        quotes = 0
        i = line_start
        while i < offset:
            if content.startswith(TRIPLE_QUOTE, i):
                i += 3
                continue
            if content[i] == '"' and (i == 0 or content[i - 1] != "\\"):
                quotes += 1
            i += 1
        return quotes % 2 == 1

    def has_turtle_position(self, offset: int, length: int) -> bool:
        content = self.text.content
        end = offset + length

        if content[offset] == "<" and content[end - 1] == ">":
            return True

        valid_before = offset == 0 or content[offset - 1] in VALID_BEFORE
        valid_after = end >= len(content) or content[end].isspace()
        return valid_before and valid_after


def is_structural_occurrence(text: Union[SerializedText, str], offset: int, length: int) -> bool:
    """Convenience wrapper around :class:`StructuralClassifier`."""
    return StructuralClassifier(text).is_structural(offset, length)
