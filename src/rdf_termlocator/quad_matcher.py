"""
Quad-backed predicate matching.

When the editor's parsed quads are available they are authoritative: the
spellings searched for come only from predicates actually present, and
the number of matching quads caps how many ranges are returned.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from rdf_termlocator.classifier import StructuralClassifier
from rdf_termlocator.context import ContextScanner
from rdf_termlocator.matching import collect_candidates, select_ranges
from rdf_termlocator.models import LocateCondition, LocateResult, Quad, Variant
from rdf_termlocator.text import SerializedText
from rdf_termlocator.variants import VariantGenerator

logger = logging.getLogger(__name__)


class QuadBackedMatcher:
    """
    Locates predicate occurrences using the quad snapshot.

    Args:
        quads: Snapshot of the parsed quads (may be stale)
        text: Serialized text being searched
        variants: Variant generator for the text
        classifier: Structural classifier for the text
        scanner: Context scanner for the text
        quoted: Include JSON-LD quoted spellings
    """

    def __init__(
        self,
        quads: Optional[Sequence[Quad]],
        text: SerializedText,
        variants: VariantGenerator,
        classifier: StructuralClassifier,
        scanner: ContextScanner,
        quoted: bool = True,
    ):
        self.quads = list(quads or [])
        self.text = text
        self.variants = variants
        self.classifier = classifier
        self.scanner = scanner
        self.quoted = quoted

    def spellings_for(self, term: str, context_term: Optional[str] = None) -> Tuple[Tuple[Variant, ...], int]:
        """
        Spellings of ``term`` derived from matching quads, and their count.

        Returns:
            ``(variants, expected_count)``; no variants when the term is
            absent from the snapshot
        """
        count = 0
        for quad in self.quads:
            if quad.predicate != term:
                continue
            if context_term is not None and quad.subject != context_term:
                continue
            count += 1

        if count == 0:
            return (), 0

        # No guessed prefixes on the authoritative path
        spellings = self.variants.variants_for(term, quoted=self.quoted, guess=False)
        return spellings, count

    def locate_predicate(self, term: str, context_term: Optional[str] = None) -> LocateResult:
        spellings, expected = self.spellings_for(term, context_term)
        if not spellings:
            logger.debug(f"Predicate {term} not in quad snapshot; model is stale or unloaded")
            return LocateResult(condition=LocateCondition.STALE_MODEL)

        anchor = None
        line_indices = None
        if context_term is not None:
            lines = self.text.lines
            context_lines = self.scanner.find_context_lines(lines, context_term)
            if not context_lines:
                logger.debug(f"Context {context_term} not found in text")
                return LocateResult(condition=LocateCondition.NOT_FOUND)
            anchor = self.scanner.context_anchor(context_lines)
            line_indices = self.scanner.build_lines_to_search(lines, context_lines)

        candidates = collect_candidates(self.text, self.classifier, spellings, line_indices)
        ranges = select_ranges(self.text, candidates, limit=expected)
        logger.debug(
            f"Quad-backed match for {term}: {len(ranges)} of {expected} expected occurrences"
        )
        return LocateResult.found(ranges, context_anchor=anchor, strategy="quads")
