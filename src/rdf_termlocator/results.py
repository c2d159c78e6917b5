"""
SHACL validation results as highlight sources.

Reads ``sh:ValidationResult`` nodes from a validation report and turns a
click on one of them into highlight requests for the shapes editor and
the data editor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from rdflib import BNode, Graph, URIRef
from rdflib.namespace import RDF, SH

from rdf_termlocator.models import GraphModel, HighlightRequest, PrefixTable
from rdf_termlocator.prefixes import shrink_iri

logger = logging.getLogger(__name__)


class ReportReadError(Exception):
    """The validation report could not be read."""
    pass


class Severity(Enum):
    """SHACL validation severity levels."""

    VIOLATION = f"{SH}Violation"
    WARNING = f"{SH}Warning"
    INFO = f"{SH}Info"


@dataclass
class ValidationResult:
    """A single validation result."""

    focus_node: Optional[str]
    result_path: Optional[str] = None
    value: Optional[str] = None
    source_shape: Optional[str] = None
    source_constraint: Optional[str] = None
    messages: List[str] = field(default_factory=list)
    severity: Severity = Severity.VIOLATION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "focusNode": self.focus_node,
            "resultPath": self.result_path,
            "value": self.value,
            "sourceShape": self.source_shape,
            "sourceConstraintComponent": self.source_constraint,
            "resultMessage": list(self.messages),
            "resultSeverity": self.severity.value,
        }


def _node_value(node) -> Optional[str]:
    if node is None:
        return None
    if isinstance(node, BNode):
        return f"_:{node}"
    return str(node)


def _iri_value(node) -> Optional[str]:
    """Only IRIs; complex paths and blank shapes have no spelling to find."""
    if isinstance(node, URIRef):
        return str(node)
    return None


def _severity(node) -> Severity:
    try:
        return Severity(str(node))
    except ValueError:
        return Severity.VIOLATION


def read_validation_report(data: str, format: str = "turtle") -> List[ValidationResult]:
    """
    Read the results of a SHACL validation report.

    Args:
        data: Serialized validation report
        format: rdflib parser name

    Returns:
        Results sorted by focus node and path for stable display

    Raises:
        ReportReadError: If the report cannot be parsed
    """
    graph = Graph()
    try:
        graph.parse(data=data, format=format)
    except Exception as e:
        raise ReportReadError(f"Cannot parse validation report: {e}") from e

    results = []
    for node in graph.subjects(RDF.type, SH.ValidationResult):
        results.append(ValidationResult(
            focus_node=_node_value(graph.value(node, SH.focusNode)),
            result_path=_iri_value(graph.value(node, SH.resultPath)),
            value=_node_value(graph.value(node, SH.value)),
            source_shape=_node_value(graph.value(node, SH.sourceShape)),
            source_constraint=_iri_value(graph.value(node, SH.sourceConstraintComponent)),
            messages=sorted(str(m) for m in graph.objects(node, SH.resultMessage)),
            severity=_severity(graph.value(node, SH.resultSeverity)),
        ))

    results.sort(key=lambda r: (r.focus_node or "", r.result_path or "", r.source_constraint or ""))
    logger.debug(f"Read {len(results)} validation results")
    return results


def violations(results: List[ValidationResult]) -> List[ValidationResult]:
    """Only results with ``sh:Violation`` severity."""
    return [r for r in results if r.severity == Severity.VIOLATION]


def result_message(result: ValidationResult, prefixes: Optional[PrefixTable] = None) -> str:
    """Human readable message for a result."""
    if result.messages:
        return "; ".join(result.messages)
    if result.source_constraint:
        shrunk = shrink_iri(result.source_constraint, prefixes) or result.source_constraint
        return f"Violated {shrunk}"
    return "Unspecified error"


def requests_for_result(result: ValidationResult) -> List[HighlightRequest]:
    """
    Highlight requests for a click on ``result``.

    The shapes editor gets the result path (or the constraint component
    when there is no path), scoped to the source shape when the shape is
    named by an IRI. The data editor gets the result path under the focus
    node, or the focus node itself when there is no path.
    """
    requests = []

    shapes_term = result.result_path or result.source_constraint
    if shapes_term:
        shape = result.source_shape
        context = shape if shape and result.result_path and not shape.startswith("_:") else None
        requests.append(HighlightRequest(term=shapes_term, context=context, model=GraphModel.SHAPES))

    if result.focus_node:
        if result.result_path:
            requests.append(HighlightRequest(
                term=result.result_path,
                context=result.focus_node,
                model=GraphModel.DATA,
            ))
        else:
            requests.append(HighlightRequest(term=result.focus_node, model=GraphModel.DATA))

    return requests
