"""
Text-fallback matching, used when quads are absent or stale.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from rdf_termlocator.classifier import StructuralClassifier
from rdf_termlocator.context import ContextScanner
from rdf_termlocator.matching import collect_candidates, select_ranges
from rdf_termlocator.models import LocateResult, Variant
from rdf_termlocator.text import SerializedText
from rdf_termlocator.variants import VariantGenerator

logger = logging.getLogger(__name__)


class TextFallbackMatcher:
    """Scans heuristic spellings of a term directly against the text."""

    def __init__(
        self,
        text: SerializedText,
        variants: VariantGenerator,
        classifier: StructuralClassifier,
        scanner: ContextScanner,
        quoted: bool = True,
    ):
        self.text = text
        self.variants = variants
        self.classifier = classifier
        self.scanner = scanner
        self.quoted = quoted

    def locate_by_text(self, term: str, context_term: Optional[str] = None) -> LocateResult:
        spellings = self.variants.variants_for(term, quoted=self.quoted)
        return self.locate_spellings(spellings, context_term)

    def locate_spellings(
        self,
        spellings: Sequence[Variant],
        context_term: Optional[str] = None,
        strategy: str = "text",
    ) -> LocateResult:
        """
        Scan explicit spellings, optionally inside a context block.

        With a context and no match, the context subject's own range is
        returned instead so the caller still has something to show.
        """
        if context_term is None:
            candidates = collect_candidates(self.text, self.classifier, spellings)
            return LocateResult.found(select_ranges(self.text, candidates), strategy=strategy)

        lines = self.text.lines
        context_lines = self.scanner.find_context_lines(lines, context_term)
        if not context_lines:
            logger.debug(f"Context {context_term} not found; nothing to scan")
            return LocateResult()

        anchor = self.scanner.context_anchor(context_lines)
        line_indices = self.scanner.build_lines_to_search(lines, context_lines)
        candidates = collect_candidates(self.text, self.classifier, spellings, line_indices)
        ranges = select_ranges(self.text, candidates)
        if ranges:
            return LocateResult.found(ranges, context_anchor=anchor, strategy=strategy)

        logger.debug(f"No match inside context {context_term}; falling back to the subject")
        subject_ranges = self.scanner.subject_ranges(self.text, context_lines, context_term)
        return LocateResult.found(subject_ranges, context_anchor=anchor, strategy="context-subject")
