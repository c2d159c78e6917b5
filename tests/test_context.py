"""Tests for context block scanning."""

import pytest

from rdf_termlocator.config import SearchConfig
from rdf_termlocator.context import ContextScanner, starts_with_token
from rdf_termlocator.models import Position
from rdf_termlocator.prefixes import custom_only_shrink
from rdf_termlocator.text import SerializedText
from rdf_termlocator.variants import VariantGenerator

EX = {"ex": "http://example.org/"}
ALICE = "http://example.org/alice"

DATA = (
    "@prefix ex: <http://example.org/> .\n"
    "\n"
    "ex:alice a ex:Person ;\n"
    '    ex:name "Alice" ;\n'
    "    ex:age 30 .\n"
    "\n"
    "ex:bob a ex:Person ;\n"
    '    ex:name "Bob" .\n'
)


@pytest.fixture
def scanner():
    return ContextScanner(VariantGenerator(prefixes=EX))


class TestTokens:
    """Subject token boundaries."""

    def test_followed_by_space(self):
        assert starts_with_token("ex:alice a ex:Person", "ex:alice")

    def test_followed_by_punctuation(self):
        assert starts_with_token("ex:alice;", "ex:alice")

    def test_longer_name_rejected(self):
        assert not starts_with_token("ex:alicex a", "ex:alice")
        assert not starts_with_token("ex:alice-b a", "ex:alice")

    def test_bracketed_needs_no_boundary(self):
        assert starts_with_token("<urn:a>x", "<urn:a>")

    def test_whole_line(self):
        assert starts_with_token("ex:alice", "ex:alice")


class TestContextLines:
    """Finding subject block starts."""

    def test_prefixed_subject(self, scanner):
        assert scanner.find_context_lines(DATA.split("\n"), ALICE) == [2]

    def test_bracketed_subject(self, scanner):
        lines = ["<http://example.org/alice> <urn:p> 1 ."]
        assert scanner.find_context_lines(lines, ALICE) == [0]

    def test_unknown_subject(self, scanner):
        lines = DATA.split("\n")
        assert scanner.find_context_lines(lines, "http://example.org/carol") == []

    def test_relaxed_scan(self):
        scanner = ContextScanner(VariantGenerator(shrink=custom_only_shrink))
        lines = ["    ex:thing ex:p 1 .", "ex:thing ex:p 2 ."]
        assert scanner.find_context_lines(lines, "http://other.org/thing") == [1]

    def test_relaxed_bracketed_shrunk_form(self):
        scanner = ContextScanner(VariantGenerator(prefixes={"o": "http://other.org/"}))
        lines = ["<o:thing> ex:p 1 ."]
        assert scanner.find_context_lines(lines, "http://other.org/thing") == [0]

    def test_scan_stops_after_limit(self, scanner):
        lines = ["ex:alice ex:p 1 ."] * 15
        assert len(scanner.find_context_lines(lines, ALICE)) == 11

    def test_configured_limit(self):
        scanner = ContextScanner(VariantGenerator(prefixes=EX), SearchConfig(max_context_matches=2))
        lines = ["ex:alice ex:p 1 ."] * 5
        assert scanner.find_context_lines(lines, ALICE) == [0, 1, 2]


class TestBlocks:
    """Lines covered by a context block."""

    def test_block_ends_before_next_subject(self, scanner):
        lines = DATA.split("\n")
        assert scanner.build_lines_to_search(lines, [2]) == {2, 3, 4, 5}

    def test_directive_does_not_end_block(self, scanner):
        lines = ["ex:alice ex:p 1 ;", "@prefix x: <urn:x> .", "    ex:q 2 .", "ex:bob ex:p 3 ."]
        assert scanner.build_lines_to_search(lines, [0]) == {0, 1, 2}

    def test_window_bound(self):
        scanner = ContextScanner(VariantGenerator(prefixes=EX), SearchConfig(block_window=3))
        lines = ["ex:alice ex:p 1 ;"] + ["    ex:q 2 ;"] * 10
        assert scanner.build_lines_to_search(lines, [0]) == {0, 1, 2}

    def test_indented_block_ends_at_sibling_subject(self, scanner):
        lines = [
            "<urn:g> {",
            "    ex:alice ex:name \"A\" ;",
            "        ex:age 3 .",
            "    ex:bob ex:name \"B\" .",
            "}",
        ]
        assert scanner.build_lines_to_search(lines, [1]) == {1, 2}

    def test_indented_continuation_kept(self, scanner):
        lines = ["    ex:alice ex:name \"A\" ;", "    ex:age 3 .", "    ex:bob ex:p 1 ."]
        assert scanner.build_lines_to_search(lines, [0]) == {0, 1}

    def test_several_blocks(self, scanner):
        lines = ["ex:alice ex:p 1 .", "ex:bob ex:p 2 .", "ex:alice ex:q 3 ;", "    ex:r 4 ."]
        assert scanner.build_lines_to_search(lines, [0, 2]) == {0, 2, 3}

    def test_anchor(self):
        assert ContextScanner.context_anchor([4, 9]) == Position(4, 0)
        assert ContextScanner.context_anchor([]) is None

    def test_subject_ranges(self, scanner):
        text = SerializedText(DATA)
        ranges = scanner.subject_ranges(text, [2], ALICE)
        assert len(ranges) == 1
        assert ranges[0].start == Position(2, 0)
        assert ranges[0].end == Position(2, 8)
