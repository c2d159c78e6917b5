"""
Prefix handling: IRI shrinking and prefix detection.

The engine receives its shrink function by injection; ``shrink_iri`` is
the default, backed by the caller's prefix table and the namespace
bindings rdflib ships with.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Dict, Optional

from rdflib import Graph
from rdflib.namespace import NamespaceManager

from rdf_termlocator.models import PrefixTable

logger = logging.getLogger(__name__)

SH = "http://www.w3.org/ns/shacl#"

_LOCAL_NAME_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_\-.]*(?<!\.)$")
_PREFIX_LABEL = r"([A-Za-z][\w.\-]*)?"
_TURTLE_PREFIX_RE = re.compile(r"@prefix\s+" + _PREFIX_LABEL + r":\s*<([^>]*)>")
_SPARQL_PREFIX_RE = re.compile(r"(?im)^\s*PREFIX\s+" + _PREFIX_LABEL + r":\s*<([^>]*)>")
_JSONLD_PREFIX_RE = re.compile(r'"([A-Za-z][\w.\-]*)"\s*:\s*"([a-z][\w+.\-]*:[^"\s]*[/#])"')


@lru_cache(maxsize=1)
def _rdflib_bindings() -> tuple:
    manager = NamespaceManager(Graph(bind_namespaces="none"), bind_namespaces="rdflib")
    return tuple((prefix, str(namespace)) for prefix, namespace in manager.namespaces())


def well_known_prefixes() -> Dict[str, str]:
    """Prefix table of the vocabularies rdflib binds by default."""
    return dict(_rdflib_bindings())


def local_name(iri: str) -> str:
    """Part after the last ``/``, then after the last ``#``."""
    return iri.split("/")[-1].split("#")[-1]


def namespace_of(iri: str) -> str:
    """Everything up to and including the last ``/`` or ``#``."""
    return iri[: max(iri.rfind("/"), iri.rfind("#")) + 1]


def _shrink_with(iri: str, table: PrefixTable) -> Optional[str]:
    best_prefix = None
    best_namespace = ""
    for prefix, namespace in table.items():
        if not namespace or not iri.startswith(namespace):
            continue
        if len(namespace) > len(best_namespace):
            best_prefix, best_namespace = prefix, namespace

    if best_prefix is None:
        return None

    local = iri[len(best_namespace):]
    if not _LOCAL_NAME_RE.match(local):
        return None
    return f"{best_prefix}:{local}"


def shrink_iri(iri: str, prefixes: Optional[PrefixTable] = None) -> Optional[str]:
    """
    Shrink an IRI to a prefixed name.

    Args:
        iri: Absolute IRI
        prefixes: Custom prefix table, consulted before the well-known one

    Returns:
        ``prefix:local`` or None when no prefix applies
    """
    if prefixes:
        shrunk = _shrink_with(iri, prefixes)
        if shrunk:
            return shrunk
    return _shrink_with(iri, well_known_prefixes())


def custom_only_shrink(iri: str, prefixes: Optional[PrefixTable] = None) -> Optional[str]:
    """Shrink using only the caller's prefix table."""
    if not prefixes:
        return None
    return _shrink_with(iri, prefixes)


def declared_prefixes(content: str) -> Dict[str, str]:
    """
    Collect the prefix declarations written in a serialization.

    Recognises Turtle ``@prefix``, SPARQL-style ``PREFIX`` and JSON-LD
    context entries mapping a term to a namespace IRI.
    """
    found: Dict[str, str] = {}
    for pattern in (_TURTLE_PREFIX_RE, _SPARQL_PREFIX_RE, _JSONLD_PREFIX_RE):
        for match in pattern.finditer(content):
            prefix = match.group(1) or ""
            found.setdefault(prefix, match.group(2))
    if found:
        logger.debug(f"Detected {len(found)} declared prefixes")
    return found


def declared_prefix_for(namespace: str, declared: PrefixTable) -> Optional[str]:
    """First declared prefix label bound to ``namespace``."""
    for prefix, bound in declared.items():
        if bound == namespace:
            return prefix
    return None
