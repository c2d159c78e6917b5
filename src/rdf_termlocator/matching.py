"""
Candidate collection and range selection shared by the matchers.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from rdf_termlocator.classifier import StructuralClassifier
from rdf_termlocator.models import CandidateOccurrence, Range, Variant
from rdf_termlocator.text import SerializedText

logger = logging.getLogger(__name__)

# Per line and spelling; bounds the scan on pathological lines
MAX_MATCHES_PER_LINE = 100


def collect_candidates(
    text: SerializedText,
    classifier: StructuralClassifier,
    variants: Iterable[Variant],
    line_indices: Optional[Iterable[int]] = None,
) -> List[CandidateOccurrence]:
    """
    Find every structurally valid occurrence of any variant.

    Args:
        text: Serialized text being searched
        classifier: Structural classifier for the same text
        variants: Spellings to look for
        line_indices: Restrict the scan to these lines; ``None`` scans the
            whole text

    Returns:
        Unsorted list of structural candidates
    """
    variants = list(variants)
    candidates: List[CandidateOccurrence] = []
    rejected = 0

    if line_indices is None:
        spans = [(0, len(text))]
    else:
        spans = [
            (start, start + len(line))
            for _, start, line in text.iter_lines(line_indices)
        ]

    for start, end in spans:
        for variant in variants:
            length = len(variant.spelling)
            found = 0
            for offset in text.find_all(variant.spelling, start, end):
                found += 1
                if line_indices is not None and found > MAX_MATCHES_PER_LINE:
                    break
                if classifier.is_structural(offset, length):
                    candidates.append(CandidateOccurrence(offset, length, variant))
                else:
                    rejected += 1

    if rejected:
        logger.debug(f"Rejected {rejected} non-structural occurrences")
    return candidates


def select_ranges(
    text: SerializedText,
    candidates: Iterable[CandidateOccurrence],
    limit: Optional[int] = None,
) -> List[Range]:
    """
    Order candidates by offset, collapse overlaps and apply ``limit``.

    Overlapping candidates (a quoted key and its unquoted inner spelling)
    describe the same occurrence; the earliest, longest one is kept.
    """
    ordered = sorted(candidates, key=lambda c: (c.offset, -c.length))
    kept: List[CandidateOccurrence] = []
    last_end = -1
    for candidate in ordered:
        if candidate.offset < last_end:
            continue
        kept.append(candidate)
        last_end = candidate.end

    if limit is not None and limit > 0:
        kept = kept[:limit]

    return [text.range_for(c.offset, c.length) for c in kept]
