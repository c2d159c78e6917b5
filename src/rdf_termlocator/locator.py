"""
Term Locator.

Answers "where is term T (optionally within context C)?" for the text an
editor currently shows. The strategy depends on the request:

- No context: subject-anchored match, then predicate match (quad-backed,
  then text), then progressively looser local-name spellings.
- Context in the shapes editor: the term is the value of an ``sh:path``
  statement inside the shape's block; only the value is highlighted.
- Context in the data editor: quad-backed predicate match inside the
  focus node's block, then the text fallback, then the focus node itself.

Every step only runs when the previous one produced no ranges. "Not found"
is an empty :class:`LocateResult`, never an exception.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from rdf_termlocator.classifier import StructuralClassifier
from rdf_termlocator.config import LocatorConfig
from rdf_termlocator.context import ContextScanner
from rdf_termlocator.models import (
    GraphModel,
    HighlightRequest,
    LocateCondition,
    LocateResult,
    PrefixShrink,
    PrefixTable,
    Quad,
    SerializationFormat,
)
from rdf_termlocator.prefixes import SH, custom_only_shrink, declared_prefixes, shrink_iri
from rdf_termlocator.quad_matcher import QuadBackedMatcher
from rdf_termlocator.text import SerializedText
from rdf_termlocator.text_matcher import TextFallbackMatcher
from rdf_termlocator.variants import VariantGenerator

logger = logging.getLogger(__name__)

SH_PATH = f"{SH}path"

# Characters that may follow a path value in Turtle
_VALUE_END = r"(?=[\s;,.\])]|$)"


class LocateSession:
    """
    Components for a single locate call.

    Built fresh for every call: the prefix table and the text may have
    changed since the previous one, so nothing here is reused.
    """

    def __init__(
        self,
        text: SerializedText,
        quads: Optional[Sequence[Quad]],
        prefixes: Optional[PrefixTable],
        shrink: PrefixShrink,
        config: LocatorConfig,
        quoted: bool,
    ):
        self.text = text
        self.config = config
        self.variants = VariantGenerator(
            prefixes=prefixes,
            shrink=shrink,
            config=config.variants,
            declared=declared_prefixes(text.content),
        )
        self.classifier = StructuralClassifier(text)
        self.scanner = ContextScanner(self.variants, config.search)
        self.quad_matcher = QuadBackedMatcher(
            quads, text, self.variants, self.classifier, self.scanner, quoted=quoted
        )
        self.text_matcher = TextFallbackMatcher(
            text, self.variants, self.classifier, self.scanner, quoted=quoted
        )
        self.has_quads = bool(quads)

    # -------------------------------------------------------------------------
    # Strategies
    # -------------------------------------------------------------------------

    def locate_without_context(self, term: str) -> LocateResult:
        result = self.locate_subject(term)
        if result:
            return result

        result = self.locate_predicate(term)
        if result:
            return result

        for group in self.variants.local_name_fallbacks(term):
            logger.debug(f"Trying last-resort spellings {[v.spelling for v in group]}")
            result = self.text_matcher.locate_spellings(group, strategy="local-name")
            if result:
                return result

        return LocateResult()

    def locate_subject(self, term: str) -> LocateResult:
        """Lines that start with the term in subject position."""
        variants = self.scanner.subject_variants(term)
        ranges = []
        for index, start, line in self.text.iter_lines():
            match = self.scanner.match_subject(line, variants)
            if match is None:
                continue
            column, spelling = match
            offset = start + column
            if self.text.inside_triple_quotes(offset):
                continue
            ranges.append(self.text.range_for(offset, len(spelling)))
        return LocateResult.found(ranges, strategy="subject")

    def locate_predicate(self, term: str, context_term: Optional[str] = None) -> LocateResult:
        if self.has_quads:
            result = self.quad_matcher.locate_predicate(term, context_term)
            if result:
                return result
            if result.condition is LocateCondition.STALE_MODEL:
                logger.debug(f"Quads do not mention {term}; using text fallback")
        return self.text_matcher.locate_by_text(term, context_term)

    def locate_data_property(self, term: str, focus_node: str) -> LocateResult:
        return self.locate_predicate(term, focus_node)

    def locate_shape_path(self, term: str, shape: str) -> LocateResult:
        """
        ``sh:path`` values equal to ``term`` inside the shape's block.

        Only the value after the path predicate is returned, not the
        whole statement.
        """
        lines = self.text.lines
        context_lines = self.scanner.find_context_lines(lines, shape)
        if not context_lines:
            logger.debug(f"Shape {shape} not found in text")
            return LocateResult()

        anchor = self.scanner.context_anchor(context_lines)
        line_indices = self.scanner.build_lines_to_search(lines, context_lines)
        pattern = self._path_pattern(term)

        ranges = []
        for index, start, line in self.text.iter_lines(line_indices):
            for match in pattern.finditer(line):
                predicate = match.group("predicate")
                if not self.classifier.is_structural(start + match.start("predicate"), len(predicate)):
                    continue
                value = match.group("value")
                ranges.append(self.text.range_for(start + match.start("value"), len(value)))

        return LocateResult.found(ranges, context_anchor=anchor, strategy="shapes-path")

    def _path_pattern(self, term: str) -> re.Pattern:
        predicates = ["sh:path", f"<{SH_PATH}>"] + self.variants.prefixed_forms(SH_PATH)
        values = [f"<{term}>"] + (
            self.variants.prefixed_forms(term) or self.variants.guessed_forms(term)
        )
        return re.compile(
            "(?P<predicate>" + _alternation(predicates) + r")\s+"
            "(?P<value>" + _alternation(values) + ")" + _VALUE_END
        )


def _alternation(spellings: List[str]) -> str:
    unique = sorted(set(spellings), key=len, reverse=True)
    return "|".join(re.escape(s) for s in unique)


class Locator:
    """
    Resolves highlight requests to character ranges.

    Holds only configuration; every call builds its own
    :class:`LocateSession`.

    Args:
        config: Locator configuration (defaults when omitted)
        shrink: Injected prefix-shrink function
    """

    def __init__(self, config: Optional[LocatorConfig] = None, shrink: Optional[PrefixShrink] = None):
        self.config = config or LocatorConfig()
        if shrink is None:
            shrink = shrink_iri if self.config.variants.use_well_known_prefixes else custom_only_shrink
        self.shrink = shrink

    def locate(
        self,
        request: HighlightRequest,
        text: str,
        quads: Optional[Sequence[Quad]] = None,
        prefixes: Optional[PrefixTable] = None,
        format: Optional[SerializationFormat] = None,
    ) -> LocateResult:
        """
        Locate the request's term in ``text``.

        Args:
            request: Term, optional context and target editor model
            text: Current editor content
            quads: Parsed quads for the text; may be missing or stale
            prefixes: Caller's prefix table for shrinking
            format: Serialization shown; JSON-LD (or unknown) enables
                quoted spellings

        Returns:
            LocateResult, empty when nothing was found or the document
            is too large
        """
        serialized = SerializedText(text)
        if serialized.line_count > self.config.search.max_document_lines:
            logger.warning(
                f"Document has {serialized.line_count} lines, above the "
                f"{self.config.search.max_document_lines} line limit; skipping search"
            )
            return LocateResult(condition=LocateCondition.DOCUMENT_TOO_LARGE)

        if not request.term:
            return LocateResult()

        quoted = format is None or format == SerializationFormat.JSON_LD
        session = LocateSession(serialized, quads, prefixes, self.shrink, self.config, quoted)

        if request.context:
            if request.model == GraphModel.SHAPES:
                result = session.locate_shape_path(request.term, request.context)
            else:
                result = session.locate_data_property(request.term, request.context)
        else:
            result = session.locate_without_context(request.term)

        logger.debug(
            f"Located {request.term} (context={request.context}, model={request.model.value}): "
            f"{len(result.ranges)} ranges via {result.strategy}"
        )
        return result
