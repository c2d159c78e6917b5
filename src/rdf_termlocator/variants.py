"""
Variant generation.

A term can be spelled several ways in a serialization: as a bracketed
IRI, as a prefixed name (through the injected shrink function or a prefix
declared in the text itself), as a quoted JSON-LD key, or, for subjects,
as a bare local name. Guessed conventional prefixes are only produced
when nothing better is known and are tagged ``guessed=True``.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from rdf_termlocator.config import VariantConfig
from rdf_termlocator.models import PrefixShrink, PrefixTable, TermRole, Variant, VariantKind
from rdf_termlocator.prefixes import (
    declared_prefix_for,
    local_name,
    namespace_of,
    shrink_iri,
)

logger = logging.getLogger(__name__)


class _VariantSet:
    """Ordered, de-duplicated collection that drops malformed spellings."""

    def __init__(self):
        self._items: List[Variant] = []
        self._seen = set()

    def add(self, spelling: Optional[str], kind: VariantKind, guessed: bool = False) -> None:
        if spelling is None:
            return
        if not spelling.strip() or spelling in ('""', "<>") or any(c.isspace() for c in spelling):
            logger.debug(f"Skipping malformed variant {spelling!r}")
            return
        if spelling in self._seen:
            return
        self._seen.add(spelling)
        self._items.append(Variant(spelling, kind, guessed))

    def __iter__(self):
        return iter(self._items)

    def to_tuple(self) -> Tuple[Variant, ...]:
        return tuple(self._items)


class VariantGenerator:
    """
    Produces candidate spellings of a term for one serialized text.

    Args:
        prefixes: Caller's prefix table
        shrink: Injected ``(iri, prefixes) -> prefixed name | None``
        config: Guessing heuristics
        declared: Prefixes declared in the text being searched
    """

    def __init__(
        self,
        prefixes: Optional[PrefixTable] = None,
        shrink: Optional[PrefixShrink] = None,
        config: Optional[VariantConfig] = None,
        declared: Optional[PrefixTable] = None,
    ):
        self.prefixes = dict(prefixes or {})
        self.shrink = shrink or shrink_iri
        self.config = config or VariantConfig()
        self.declared = dict(declared or {})

    # -------------------------------------------------------------------------
    # Individual spellings
    # -------------------------------------------------------------------------

    def shrunk(self, term: str) -> Optional[str]:
        """Prefixed form from the injected shrink function, if different."""
        shrunk = self.shrink(term, self.prefixes)
        if not shrunk or shrunk == term or not shrunk.strip():
            return None
        return shrunk

    def declared_form(self, term: str) -> Optional[str]:
        """Prefixed form using a prefix declared in the text."""
        namespace = namespace_of(term)
        if not namespace or namespace == term:
            return None
        prefix = declared_prefix_for(namespace, self.declared)
        if prefix is None:
            return None
        return f"{prefix}:{term[len(namespace):]}"

    def prefixed_forms(self, term: str) -> List[str]:
        forms = []
        for form in (self.shrunk(term), self.declared_form(term)):
            if form and form not in forms:
                forms.append(form)
        return forms

    def guessed_forms(self, term: str) -> List[str]:
        """
        Conventional prefixed spellings for well-known vocabularies.

        Best effort only: two vocabularies commonly abbreviated with the
        same prefix can produce a false positive.
        """
        local = local_name(term)
        if not local or local == term:
            return []
        forms = []
        for root, labels in self.config.guessed_prefixes.items():
            if root in term:
                forms.extend(f"{label}:{local}" for label in labels)
        return forms

    # -------------------------------------------------------------------------
    # Variant sets
    # -------------------------------------------------------------------------

    def variants_for(
        self,
        term: str,
        quoted: bool = False,
        role: TermRole = TermRole.PREDICATE,
        guess: bool = True,
    ) -> Tuple[Variant, ...]:
        """
        All spellings of ``term`` for the current dialect.

        Args:
            term: Absolute IRI
            quoted: Also emit JSON-LD quoted spellings
            role: ``SUBJECT`` additionally allows the bare local name
            guess: Allow guessed conventional prefixes when nothing
                better is known
        """
        variants = _VariantSet()
        variants.add(f"<{term}>", VariantKind.BRACKETED_IRI)

        prefixed = self.prefixed_forms(term)
        for form in prefixed:
            variants.add(form, VariantKind.PREFIXED_NAME)

        if not prefixed and guess:
            for form in self.guessed_forms(term):
                variants.add(form, VariantKind.PREFIXED_NAME, guessed=True)

        if role is TermRole.SUBJECT:
            local = local_name(term)
            if local and local != term:
                variants.add(local, VariantKind.BARE_LOCAL_NAME)

        if quoted:
            for variant in list(variants):
                if variant.kind is VariantKind.BRACKETED_IRI:
                    continue
                variants.add(f'"{variant.spelling}"', VariantKind.QUOTED_JSON_KEY, variant.guessed)
            variants.add(f'"{term}"', VariantKind.QUOTED_JSON_KEY)

        return variants.to_tuple()

    def relaxed_subject_spellings(self, term: str, relaxed_prefixes: Iterable[str]) -> Tuple[Variant, ...]:
        """Loose subject spellings for the relaxed context pass."""
        variants = _VariantSet()
        local = local_name(term)
        variants.add(self.shrunk(term), VariantKind.PREFIXED_NAME)
        variants.add(local, VariantKind.BARE_LOCAL_NAME)
        if local and local != term:
            for prefix in relaxed_prefixes:
                variants.add(f"{prefix}:{local}", VariantKind.PREFIXED_NAME, guessed=True)
        return variants.to_tuple()

    def local_name_fallbacks(self, term: str) -> List[Tuple[Variant, ...]]:
        """
        Last-resort spelling groups, loosest last.

        Kept apart from the primary variants: each group is only tried
        when the previous one found nothing.
        """
        steps = []

        shrunk = self.shrunk(term)
        if shrunk:
            group = _VariantSet()
            group.add(f"<{shrunk}>", VariantKind.BRACKETED_IRI)
            group.add(f'"{shrunk}"', VariantKind.QUOTED_JSON_KEY)
            steps.append(group.to_tuple())

        for separator in ("/", "#"):
            if separator not in term:
                continue
            local = term.split(separator)[-1]
            if not local:
                continue
            group = _VariantSet()
            group.add(local, VariantKind.BARE_LOCAL_NAME)
            group.add(f'"{local}"', VariantKind.QUOTED_JSON_KEY)
            group_tuple = group.to_tuple()
            if group_tuple and group_tuple not in steps:
                steps.append(group_tuple)

        return steps
