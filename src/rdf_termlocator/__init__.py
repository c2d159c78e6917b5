"""
rdf-termlocator: locate RDF terms inside serialized graphs.

Resolves a SHACL validation result (a focus node, a result path, a source
shape) to the character ranges of the matching term in Turtle, TriG or
JSON-LD text, so an editor can highlight and scroll to it.
"""

__version__ = "0.1.0"

from rdf_termlocator.models import (
    GraphModel,
    HighlightRequest,
    InvalidOffsetError,
    LocateCondition,
    LocateResult,
    Position,
    Quad,
    Range,
    SerializationFormat,
    Variant,
    VariantKind,
)
from rdf_termlocator.config import LocatorConfig, SearchConfig, VariantConfig, ScrollConfig
from rdf_termlocator.classifier import StructuralClassifier, is_structural_occurrence
from rdf_termlocator.variants import VariantGenerator
from rdf_termlocator.context import ContextScanner
from rdf_termlocator.quad_matcher import QuadBackedMatcher
from rdf_termlocator.text_matcher import TextFallbackMatcher
from rdf_termlocator.locator import Locator
from rdf_termlocator.highlight import HighlightApplier, ThreadingScheduler
from rdf_termlocator.prefixes import shrink_iri, declared_prefixes
from rdf_termlocator.parsing import decode_quads, QuadDecodeError
from rdf_termlocator.results import (
    ValidationResult,
    read_validation_report,
    requests_for_result,
    result_message,
)

__all__ = [
    # Data model
    "GraphModel",
    "HighlightRequest",
    "InvalidOffsetError",
    "LocateCondition",
    "LocateResult",
    "Position",
    "Quad",
    "Range",
    "SerializationFormat",
    "Variant",
    "VariantKind",
    # Configuration
    "LocatorConfig",
    "SearchConfig",
    "VariantConfig",
    "ScrollConfig",
    # Engine
    "StructuralClassifier",
    "is_structural_occurrence",
    "VariantGenerator",
    "ContextScanner",
    "QuadBackedMatcher",
    "TextFallbackMatcher",
    "Locator",
    "HighlightApplier",
    "ThreadingScheduler",
    # Prefixes and decoding
    "shrink_iri",
    "declared_prefixes",
    "decode_quads",
    "QuadDecodeError",
    # Validation results
    "ValidationResult",
    "read_validation_report",
    "requests_for_result",
    "result_message",
]
