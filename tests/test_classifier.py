"""Tests for structural classification of matches."""

import pytest

from rdf_termlocator.classifier import StructuralClassifier, is_structural_occurrence
from rdf_termlocator.models import InvalidOffsetError
from rdf_termlocator.text import SerializedText


def occurrence(text: str, needle: str, start: int = 0):
    offset = text.index(needle, start)
    return offset, len(needle)


# ============================================================================
# JSON-LD keys
# ============================================================================

class TestJsonKeys:
    """A quoted match followed by a colon is a key."""

    def test_quoted_key(self):
        text = '{"schema:publisher": "x"}'
        offset, length = occurrence(text, '"schema:publisher"')
        assert is_structural_occurrence(text, offset, length) is True

    def test_inner_key_content(self):
        text = '{"schema:publisher": "x"}'
        offset, length = occurrence(text, "schema:publisher")
        assert is_structural_occurrence(text, offset, length) is True

    def test_whitespace_before_colon(self):
        text = '{\n  "schema:name"   : "x"\n}'
        offset, length = occurrence(text, '"schema:name"')
        assert is_structural_occurrence(text, offset, length) is True

    def test_quoted_value_is_not_key(self):
        text = '{"a": "schema:publisher"}'
        offset, length = occurrence(text, '"schema:publisher"')
        assert is_structural_occurrence(text, offset, length) is False

    def test_inner_value_is_not_key(self):
        text = '{"a": "schema:publisher"}'
        offset, length = occurrence(text, "schema:publisher")
        assert is_structural_occurrence(text, offset, length) is False

    def test_key_inside_triple_quotes_still_key(self):
        text = 'x """ {"ex:p": 1} """'
        offset, length = occurrence(text, '"ex:p"')
        assert is_structural_occurrence(text, offset, length) is True


# ============================================================================
# Literals
# ============================================================================

class TestLiterals:
    """Matches inside string literals are incidental."""

    def test_inside_single_line_literal(self):
        text = 'ex:s ex:label "see ex:p here" .'
        offset, length = occurrence(text, "ex:p")
        assert is_structural_occurrence(text, offset, length) is False

    def test_escaped_quote_does_not_close_literal(self):
        text = 'ex:s ex:label "a \\" ex:p b" .'
        offset, length = occurrence(text, "ex:p")
        assert is_structural_occurrence(text, offset, length) is False

    def test_escaped_quote_does_not_open_literal(self):
        text = 'ex:s ex:label "a \\"" ; ex:p "v" .'
        offset, length = occurrence(text, "ex:p")
        assert is_structural_occurrence(text, offset, length) is True

    def test_inside_triple_quoted_literal(self):
        text = 'ex:s ex:d """first\n<urn:p> second\n""" .'
        offset, length = occurrence(text, "<urn:p>")
        assert is_structural_occurrence(text, offset, length) is False

    def test_after_triple_quoted_literal(self):
        text = 'ex:s ex:d """first\n<urn:p>\n""" ;\n    <urn:p> "x" .'
        first = text.index("<urn:p>")
        second = text.index("<urn:p>", first + 1)
        classifier = StructuralClassifier(text)
        assert classifier.is_structural(first, 7) is False
        assert classifier.is_structural(second, 7) is True


# ============================================================================
# Turtle positions
# ============================================================================

class TestTurtlePositions:
    """Subject and predicate positions in Turtle/TriG."""

    def test_predicate_between_spaces(self):
        text = 'ex:s ex:p "v" .'
        offset, length = occurrence(text, "ex:p")
        assert is_structural_occurrence(text, offset, length) is True

    def test_start_of_text(self):
        text = "ex:s ex:p ex:o ."
        assert is_structural_occurrence(text, 0, 4) is True

    def test_after_semicolon_and_brace(self):
        text = 'ex:g {ex:s ex:a "1";ex:p "2" .}'
        assert is_structural_occurrence(text, *occurrence(text, "ex:s")) is True
        assert is_structural_occurrence(text, *occurrence(text, "ex:p")) is True

    def test_prefix_of_longer_name(self):
        text = 'ex:s ex:pp "1" .'
        offset, length = occurrence(text, "ex:p")
        assert is_structural_occurrence(text, offset, length) is False

    def test_inside_longer_name(self):
        text = 'ex:s myex:p "1" .'
        offset, length = occurrence(text, "ex:p", 5)
        assert is_structural_occurrence(text, offset, length) is False

    def test_bracketed_iri_in_object_position(self):
        text = "ex:s ex:p <urn:o>."
        offset, length = occurrence(text, "<urn:o>")
        assert is_structural_occurrence(text, offset, length) is True

    def test_end_of_text(self):
        text = "ex:s ex:p ex:o"
        offset, length = occurrence(text, "ex:o")
        assert is_structural_occurrence(text, offset, length) is True


# ============================================================================
# Contract
# ============================================================================

class TestContract:
    """Malformed offsets abort instead of producing a result."""

    def test_zero_length(self):
        with pytest.raises(InvalidOffsetError):
            is_structural_occurrence("ex:s ex:p ex:o .", 0, 0)

    def test_out_of_bounds(self):
        with pytest.raises(InvalidOffsetError):
            is_structural_occurrence("ex:s", 2, 10)

    def test_negative_offset(self):
        with pytest.raises(InvalidOffsetError):
            is_structural_occurrence("ex:s", -1, 2)

    def test_accepts_serialized_text(self):
        text = SerializedText('ex:s ex:p "v" .')
        assert StructuralClassifier(text).text is text
