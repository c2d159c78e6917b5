"""
Context scanning: locating a subject's statement block.

In Turtle and TriG a subject starts its block at the beginning of a line,
and the block continues on indented lines until a new non-indented line
starts the next subject. The scanner finds the block starts for a context
term and the set of lines each block covers.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Set, Tuple

from rdf_termlocator.config import SearchConfig
from rdf_termlocator.models import Position, Range, TermRole, Variant
from rdf_termlocator.text import SerializedText
from rdf_termlocator.variants import VariantGenerator

logger = logging.getLogger(__name__)


def _is_name_char(char: str) -> bool:
    return char.isalnum() or char in "_-:"


def starts_with_token(stripped: str, spelling: str) -> bool:
    """``stripped`` starts with ``spelling`` followed by a token boundary."""
    if not stripped.startswith(spelling):
        return False
    if spelling.endswith(">") or len(stripped) == len(spelling):
        return True
    return not _is_name_char(stripped[len(spelling)])


def _is_indented(line: str) -> bool:
    return line.startswith(" ") or line.startswith("\t")


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


class ContextScanner:
    """
    Finds the lines belonging to a context (subject / focus node) block.

    Args:
        variants: Variant generator for the text being scanned
        config: Search bounds
    """

    def __init__(self, variants: VariantGenerator, config: Optional[SearchConfig] = None):
        self.variants = variants
        self.config = config or SearchConfig()

    def subject_variants(self, context_term: str) -> Tuple[Variant, ...]:
        return self.variants.variants_for(context_term, role=TermRole.SUBJECT, guess=False)

    def relaxed_variants(self, context_term: str) -> Tuple[Variant, ...]:
        return self.variants.relaxed_subject_spellings(
            context_term, self.config.relaxed_context_prefixes
        )

    def match_subject(self, line: str, variants: Sequence[Variant], relaxed: bool = False) -> Optional[Tuple[int, str]]:
        """
        Column and spelling of the subject at the start of ``line``.

        Returns:
            ``(column, spelling)`` or None when the line does not start
            with any of the variants
        """
        stripped = line.lstrip()
        indent = len(line) - len(stripped)
        for variant in variants:
            spelling = variant.spelling
            if starts_with_token(stripped, spelling):
                return indent, spelling
            if relaxed and starts_with_token(stripped, f"<{spelling}>"):
                return indent, f"<{spelling}>"
        return None

    def find_context_lines(self, lines: Sequence[str], context_term: str) -> List[int]:
        """
        Indices of lines whose subject is ``context_term``.

        Scanning stops once more than ``max_context_matches`` lines are
        found, so at most ``max_context_matches + 1`` indices come back.
        """
        limit = self.config.max_context_matches
        indices = self._scan(lines, self.subject_variants(context_term), limit)

        if not indices:
            indices = self._scan(
                lines,
                self.relaxed_variants(context_term),
                limit,
                relaxed=True,
            )
            if indices:
                logger.debug(f"Context {context_term} found by relaxed scan on {len(indices)} lines")

        return indices

    def _scan(self, lines: Sequence[str], variants: Sequence[Variant], limit: int, relaxed: bool = False) -> List[int]:
        indices: List[int] = []
        if not variants:
            return indices
        for index, line in enumerate(lines):
            if relaxed and (not line or _is_indented(line)):
                continue
            if self.match_subject(line, variants, relaxed=relaxed) is not None:
                indices.append(index)
            if len(indices) > limit:
                logger.debug(f"More than {limit} context lines; stopping scan")
                break
        return indices

    def build_lines_to_search(self, lines: Sequence[str], context_line_indices: Sequence[int]) -> Set[int]:
        """
        Lines covered by each context block.

        Each block is its start line plus up to ``block_window - 1``
        following lines. It ends before the first later line that starts
        a new top-level subject (non-indented, not an ``@`` directive), or
        before a line indented no deeper than the block start once the
        previous statement was closed with ``.`` (the next subject inside
        a TriG graph block).
        """
        to_search: Set[int] = set()
        window = self.config.block_window
        for start in context_line_indices:
            base_indent = _indent_of(lines[start])
            previous = lines[start].rstrip()
            for i in range(start, min(start + window, len(lines))):
                trimmed = lines[i].strip()
                if i > start and trimmed and not trimmed.startswith("@"):
                    if not _is_indented(lines[i]):
                        break
                    if _indent_of(lines[i]) <= base_indent and previous.endswith("."):
                        break
                to_search.add(i)
                if trimmed:
                    previous = lines[i].rstrip()
        return to_search

    @staticmethod
    def context_anchor(context_line_indices: Sequence[int]) -> Optional[Position]:
        """Start of the first context line, used for scroll anchoring."""
        if not context_line_indices:
            return None
        return Position(line=context_line_indices[0], ch=0)

    def subject_ranges(self, text: SerializedText, context_line_indices: Sequence[int], context_term: str) -> List[Range]:
        """The subject spelling at the start of each context line."""
        primary = self.subject_variants(context_term)
        relaxed = self.relaxed_variants(context_term)
        ranges = []
        for index, start, line in text.iter_lines(context_line_indices):
            match = self.match_subject(line, primary) or self.match_subject(line, relaxed, relaxed=True)
            if match is None:
                continue
            column, spelling = match
            ranges.append(text.range_for(start + column, len(spelling)))
        return ranges
