"""
Core data model for term location.

All of these objects are created fresh for a single locate call and
discarded afterwards. Positions follow the editor convention: line and
column (``ch``) are both 0-based.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

# Type aliases
Term = str
PrefixTable = Mapping[str, str]
PrefixShrink = Callable[[str, Optional[PrefixTable]], Optional[str]]


class InvalidOffsetError(ValueError):
    """Raised when a range would be empty or fall outside the text."""
    pass


# =============================================================================
# Enumerations
# =============================================================================

class VariantKind(Enum):
    """Role hint of a candidate spelling."""
    BRACKETED_IRI = "bracketed-iri"
    PREFIXED_NAME = "prefixed-name"
    BARE_LOCAL_NAME = "bare-local-name"
    QUOTED_JSON_KEY = "quoted-json-key"


class TermRole(Enum):
    """Structural role the searched term is expected to play."""
    SUBJECT = "subject"
    PREDICATE = "predicate"


class GraphModel(str, Enum):
    """Which editor a highlight request targets."""
    SHAPES = "shapes"
    DATA = "data"


class SerializationFormat(str, Enum):
    """Serializations the editor may show."""
    TURTLE = "turtle"
    TRIG = "trig"
    JSON_LD = "jsonld"


class LocateCondition(Enum):
    """Outcome of a locate call."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    STALE_MODEL = "stale_model"
    DOCUMENT_TOO_LARGE = "document_too_large"


# =============================================================================
# Value objects
# =============================================================================

@dataclass(frozen=True)
class Quad:
    """An RDF statement snapshot. Only subject and predicate are consulted."""
    subject: Term
    predicate: Term
    object: str = ""
    graph: Optional[Term] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Quad":
        return cls(
            subject=data.get("subject", ""),
            predicate=data.get("predicate", ""),
            object=data.get("object", ""),
            graph=data.get("graph"),
        )


@dataclass(frozen=True)
class Variant:
    """A candidate textual spelling of a term."""
    spelling: str
    kind: VariantKind
    guessed: bool = False

    def __len__(self) -> int:
        return len(self.spelling)


@dataclass(frozen=True)
class CandidateOccurrence:
    """A raw substring match, before structural filtering."""
    offset: int
    length: int
    variant: Variant

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True, order=True)
class Position:
    line: int
    ch: int

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "ch": self.ch}


@dataclass(frozen=True)
class Range:
    """A located occurrence; the only externally visible unit of a match."""
    start: Position
    end: Position
    offset: int
    length: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "offset": self.offset,
            "length": self.length,
        }


@dataclass(frozen=True)
class LocateResult:
    """Ordered ranges plus the anchor of the context block, if one was used."""
    ranges: Tuple[Range, ...] = ()
    context_anchor: Optional[Position] = None
    condition: LocateCondition = LocateCondition.NOT_FOUND
    strategy: Optional[str] = None

    @classmethod
    def found(
        cls,
        ranges,
        context_anchor: Optional[Position] = None,
        strategy: Optional[str] = None,
    ) -> "LocateResult":
        ranges = tuple(ranges)
        return cls(
            ranges=ranges,
            context_anchor=context_anchor,
            condition=LocateCondition.FOUND if ranges else LocateCondition.NOT_FOUND,
            strategy=strategy if ranges else None,
        )

    @property
    def first(self) -> Optional[Position]:
        """Where the caret should go: the first range, else the anchor."""
        if self.ranges:
            return self.ranges[0].start
        return self.context_anchor

    def __bool__(self) -> bool:
        return bool(self.ranges)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ranges": [r.to_dict() for r in self.ranges],
            "context_anchor": self.context_anchor.to_dict() if self.context_anchor else None,
            "condition": self.condition.value,
            "strategy": self.strategy,
        }


@dataclass(frozen=True)
class HighlightRequest:
    """A click on a validation result, resolved to (term, context, model)."""
    term: Term
    context: Optional[Term] = None
    model: GraphModel = GraphModel.DATA
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
