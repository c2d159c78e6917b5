"""
Quad decoding for editor content.

Turtle and TriG are parsed with pyoxigraph (Rust parser); JSON-LD goes
through rdflib. The result is a plain snapshot of :class:`Quad` values for
the locator. A failure to decode is reported as :class:`QuadDecodeError`;
callers treat it as "quads unavailable" and let the locator fall back to
scanning text.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from pyoxigraph import BlankNode, DefaultGraph, Literal, NamedNode, RdfFormat
from pyoxigraph import parse as oxigraph_parse
from rdflib import BNode, Dataset
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID

from rdf_termlocator.models import Quad, SerializationFormat

logger = logging.getLogger(__name__)


class QuadDecodeError(Exception):
    """The text could not be decoded into quads."""
    pass


_FORMAT_ALIASES = {
    "turtle": SerializationFormat.TURTLE,
    "ttl": SerializationFormat.TURTLE,
    "text/turtle": SerializationFormat.TURTLE,
    "trig": SerializationFormat.TRIG,
    "application/trig": SerializationFormat.TRIG,
    "jsonld": SerializationFormat.JSON_LD,
    "json-ld": SerializationFormat.JSON_LD,
    "json": SerializationFormat.JSON_LD,
    "application/ld+json": SerializationFormat.JSON_LD,
}

_OXIGRAPH_FORMATS = {
    SerializationFormat.TURTLE: RdfFormat.TURTLE,
    SerializationFormat.TRIG: RdfFormat.TRIG,
}


def format_from_name(name: Union[str, SerializationFormat, None]) -> Optional[SerializationFormat]:
    """
    Map a format name, file extension or media type to a format.

    Returns:
        The format, or None when ``name`` is empty or unknown
    """
    if name is None or isinstance(name, SerializationFormat):
        return name
    key = name.strip().lower()
    if ";" in key:
        key = key.split(";", 1)[0].strip()
    key = key.lstrip(".")
    return _FORMAT_ALIASES.get(key)


def _oxigraph_term(term) -> Optional[str]:
    if isinstance(term, DefaultGraph):
        return None
    if isinstance(term, NamedNode):
        return term.value
    if isinstance(term, BlankNode):
        return f"_:{term.value}"
    if isinstance(term, Literal):
        return term.value
    return str(term)


def _rdflib_term(term) -> str:
    if isinstance(term, BNode):
        return f"_:{term}"
    return str(term)


def _decode_with_oxigraph(text: str, rdf_format, base_iri: Optional[str]) -> List[Quad]:
    quads = []
    for parsed in oxigraph_parse(text, rdf_format, base_iri=base_iri):
        graph = getattr(parsed, "graph_name", None)
        quads.append(Quad(
            subject=_oxigraph_term(parsed.subject),
            predicate=parsed.predicate.value,
            object=_oxigraph_term(parsed.object) or "",
            graph=_oxigraph_term(graph) if graph is not None else None,
        ))
    return quads


def _decode_with_rdflib(text: str, base_iri: Optional[str]) -> List[Quad]:
    dataset = Dataset()
    dataset.parse(data=text, format="json-ld", publicID=base_iri)
    quads = []
    for s, p, o, g in dataset.quads((None, None, None, None)):
        graph = getattr(g, "identifier", g)
        quads.append(Quad(
            subject=_rdflib_term(s),
            predicate=str(p),
            object=_rdflib_term(o),
            graph=None if graph is None or graph == DATASET_DEFAULT_GRAPH_ID else _rdflib_term(graph),
        ))
    return quads


def decode_quads(
    text: str,
    format: Union[str, SerializationFormat],
    base_iri: Optional[str] = None,
) -> List[Quad]:
    """
    Decode serialized RDF into a quad snapshot.

    Args:
        text: Serialized RDF
        format: Serialization format (enum or name)
        base_iri: Base IRI for relative references

    Returns:
        Decoded quads, in document order

    Raises:
        QuadDecodeError: If the format is unknown or the text is invalid
    """
    resolved = format_from_name(format)
    if resolved is None:
        raise QuadDecodeError(f"Unsupported format: {format}")

    try:
        if resolved == SerializationFormat.JSON_LD:
            quads = _decode_with_rdflib(text, base_iri)
        else:
            quads = _decode_with_oxigraph(text, _OXIGRAPH_FORMATS[resolved], base_iri)
    except Exception as e:
        logger.warning(f"Failed to decode {resolved.value} content: {e}")
        raise QuadDecodeError(f"Invalid {resolved.value} content: {e}") from e

    logger.debug(f"Decoded {len(quads)} quads from {resolved.value}")
    return quads
