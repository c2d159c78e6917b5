"""Tests for candidate selection and the two predicate matchers."""

import pytest

from rdf_termlocator.classifier import StructuralClassifier
from rdf_termlocator.context import ContextScanner
from rdf_termlocator.matching import collect_candidates, select_ranges
from rdf_termlocator.models import (
    CandidateOccurrence,
    LocateCondition,
    Position,
    Quad,
    Variant,
    VariantKind,
)
from rdf_termlocator.quad_matcher import QuadBackedMatcher
from rdf_termlocator.text import SerializedText
from rdf_termlocator.text_matcher import TextFallbackMatcher
from rdf_termlocator.variants import VariantGenerator

EX = {"ex": "http://example.org/"}
ALICE = "http://example.org/alice"
BOB = "http://example.org/bob"
NAME = "http://example.org/name"

DATA = (
    'ex:alice ex:name "Alice" .\n'
    'ex:bob ex:name "Bob" .\n'
)


class Components:
    """Wires the per-call objects the way the locator does."""

    def __init__(self, content, prefixes=EX):
        self.text = SerializedText(content)
        self.variants = VariantGenerator(prefixes=prefixes)
        self.classifier = StructuralClassifier(self.text)
        self.scanner = ContextScanner(self.variants)

    def quad_matcher(self, quads):
        return QuadBackedMatcher(quads, self.text, self.variants, self.classifier, self.scanner)

    def text_matcher(self):
        return TextFallbackMatcher(self.text, self.variants, self.classifier, self.scanner)


# ============================================================================
# Candidate selection
# ============================================================================

class TestSelection:
    """Collecting and ordering candidates."""

    def test_literal_occurrence_rejected(self):
        text = SerializedText('ex:s ex:p "ex:p" .')
        variant = Variant("ex:p", VariantKind.PREFIXED_NAME)
        candidates = collect_candidates(text, StructuralClassifier(text), [variant])
        assert [c.offset for c in candidates] == [5]

    def test_restricted_to_lines(self):
        text = SerializedText("ex:s ex:p 1 .\nex:t ex:p 2 .")
        variant = Variant("ex:p", VariantKind.PREFIXED_NAME)
        candidates = collect_candidates(text, StructuralClassifier(text), [variant], {1})
        assert [c.offset for c in candidates] == [19]

    def test_overlaps_collapse_to_longest(self):
        text = SerializedText('{"ex:p": 1}')
        quoted = Variant('"ex:p"', VariantKind.QUOTED_JSON_KEY)
        inner = Variant("ex:p", VariantKind.PREFIXED_NAME)
        candidates = [CandidateOccurrence(2, 4, inner), CandidateOccurrence(1, 6, quoted)]
        ranges = select_ranges(text, candidates)
        assert [(r.offset, r.length) for r in ranges] == [(1, 6)]

    def test_sorted_and_limited(self):
        text = SerializedText("ex:p ex:p ex:p")
        variant = Variant("ex:p", VariantKind.PREFIXED_NAME)
        candidates = [CandidateOccurrence(o, 4, variant) for o in (10, 0, 5)]
        assert [r.offset for r in select_ranges(text, candidates)] == [0, 5, 10]
        assert [r.offset for r in select_ranges(text, candidates, limit=2)] == [0, 5]


# ============================================================================
# Quad-backed matching
# ============================================================================

class TestQuadBackedMatcher:
    """Quads decide which spellings to look for and how many."""

    @pytest.fixture
    def parts(self):
        return Components(DATA)

    def test_count_caps_ranges(self, parts):
        result = parts.quad_matcher([Quad(ALICE, NAME)]).locate_predicate(NAME)
        assert len(result.ranges) == 1
        assert result.ranges[0].start == Position(0, 9)
        assert result.strategy == "quads"

    def test_all_occurrences_when_counted(self, parts):
        quads = [Quad(ALICE, NAME), Quad(BOB, NAME)]
        result = parts.quad_matcher(quads).locate_predicate(NAME)
        assert [r.start for r in result.ranges] == [Position(0, 9), Position(1, 7)]

    def test_context_restricts_block(self, parts):
        quads = [Quad(ALICE, NAME), Quad(BOB, NAME)]
        result = parts.quad_matcher(quads).locate_predicate(NAME, BOB)
        assert [r.start for r in result.ranges] == [Position(1, 7)]
        assert result.context_anchor == Position(1, 0)

    def test_absent_predicate_is_stale(self, parts):
        result = parts.quad_matcher([Quad(ALICE, NAME)]).locate_predicate("http://example.org/age")
        assert result.condition is LocateCondition.STALE_MODEL
        assert not result

    def test_context_without_quads_is_stale(self, parts):
        result = parts.quad_matcher([Quad(ALICE, NAME)]).locate_predicate(NAME, BOB)
        assert result.condition is LocateCondition.STALE_MODEL

    def test_context_missing_from_text(self, parts):
        carol = "http://example.org/carol"
        result = parts.quad_matcher([Quad(carol, NAME)]).locate_predicate(NAME, carol)
        assert result.condition is LocateCondition.NOT_FOUND

    def test_no_guessed_spellings(self):
        parts = Components("x sdo:name 1 .", prefixes={})
        matcher = parts.quad_matcher([Quad("urn:x", "https://schema.org/name")])
        spellings, count = matcher.spellings_for("https://schema.org/name")
        assert count == 1
        assert not any(v.guessed for v in spellings)


# ============================================================================
# Text fallback
# ============================================================================

class TestTextFallbackMatcher:
    """Heuristic scan without quads."""

    @pytest.fixture
    def parts(self):
        return Components(DATA)

    def test_whole_text(self, parts):
        result = parts.text_matcher().locate_by_text(NAME)
        assert len(result.ranges) == 2
        assert result.strategy == "text"

    def test_within_context(self, parts):
        result = parts.text_matcher().locate_by_text(NAME, ALICE)
        assert [r.start for r in result.ranges] == [Position(0, 9)]
        assert result.context_anchor == Position(0, 0)

    def test_falls_back_to_subject(self, parts):
        result = parts.text_matcher().locate_by_text("http://example.org/age", ALICE)
        assert result.strategy == "context-subject"
        assert result.ranges[0].start == Position(0, 0)
        assert result.ranges[0].end == Position(0, 8)

    def test_missing_context(self, parts):
        result = parts.text_matcher().locate_by_text(NAME, "http://example.org/carol")
        assert not result
        assert result.context_anchor is None
