"""
Highlight API Endpoints - REST API for term location

Provides endpoints for:
- Locating a term (optionally within a context) in serialized RDF
- Reading a SHACL validation report into clickable results
- Service status
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from rdf_termlocator import __version__
from rdf_termlocator.config import LocatorConfig
from rdf_termlocator.locator import Locator
from rdf_termlocator.models import GraphModel, HighlightRequest, Quad
from rdf_termlocator.parsing import QuadDecodeError, decode_quads, format_from_name
from rdf_termlocator.results import (
    ReportReadError,
    read_validation_report,
    requests_for_result,
    result_message,
    violations,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Pydantic Models
# ============================================================================

class QuadInput(BaseModel):
    """A quad from the editor's parse."""
    subject: str
    predicate: str
    object: str = ""
    graph: Optional[str] = None


class LocateRequest(BaseModel):
    """Request to locate a term in serialized RDF."""
    text: str = Field(..., description="Current editor content")
    term: str = Field(..., description="IRI to locate")
    context: Optional[str] = Field(None, description="Subject / shape scoping the search")
    model: GraphModel = Field(GraphModel.DATA, description="Editor the request targets")
    format: Optional[str] = Field(None, description="turtle, trig or jsonld")
    prefixes: dict[str, str] = Field(default_factory=dict)
    quads: Optional[list[QuadInput]] = Field(None, description="Parsed quads, if the client has them")
    decode_quads: bool = Field(False, description="Decode quads from text when none are given")


class PositionModel(BaseModel):
    line: int
    ch: int


class RangeModel(BaseModel):
    start: PositionModel
    end: PositionModel
    offset: int
    length: int


class LocateResponse(BaseModel):
    ranges: list[RangeModel]
    context_anchor: Optional[PositionModel] = None
    condition: str
    strategy: Optional[str] = None


class ReportRequest(BaseModel):
    """A SHACL validation report."""
    report: str
    format: str = "turtle"
    prefixes: dict[str, str] = Field(default_factory=dict)
    violations_only: bool = True


class RequestModel(BaseModel):
    term: str
    context: Optional[str] = None
    model: GraphModel


class ResultModel(BaseModel):
    focus_node: Optional[str] = None
    result_path: Optional[str] = None
    source_shape: Optional[str] = None
    severity: str
    message: str
    requests: list[RequestModel]


class ReportResponse(BaseModel):
    count: int
    results: list[ResultModel]


class HighlightStatusResponse(BaseModel):
    available: bool
    version: str
    formats: list[str]
    max_document_lines: int


# ============================================================================
# Router
# ============================================================================

def create_highlight_router(config: Optional[LocatorConfig] = None) -> APIRouter:
    """
    Create the highlight API router.

    Args:
        config: Locator configuration shared by every request

    Returns:
        APIRouter mounted under ``/highlight``
    """
    router = APIRouter(prefix="/highlight", tags=["Highlight"])
    locator = Locator(config or LocatorConfig())

    @router.get("/status", response_model=HighlightStatusResponse)
    async def get_status():
        """Check service availability and limits."""
        return HighlightStatusResponse(
            available=True,
            version=__version__,
            formats=["turtle", "trig", "jsonld"],
            max_document_lines=locator.config.search.max_document_lines,
        )

    @router.post("/locate", response_model=LocateResponse)
    async def locate(request: LocateRequest):
        """
        Locate a term in the given text.

        Quads are taken from the request, or decoded from the text when
        ``decode_quads`` is set. A decode failure is not an error: the
        locator falls back to scanning the text.
        """
        fmt = format_from_name(request.format)
        if request.format and fmt is None:
            raise HTTPException(status_code=400, detail=f"Unsupported format: {request.format}")

        quads = None
        if request.quads is not None:
            quads = [Quad(**q.model_dump()) for q in request.quads]
        elif request.decode_quads and fmt is not None:
            try:
                quads = decode_quads(request.text, fmt)
            except QuadDecodeError as e:
                logger.info(f"Locating without quads: {e}")

        result = locator.locate(
            HighlightRequest(term=request.term, context=request.context, model=request.model),
            request.text,
            quads=quads,
            prefixes=request.prefixes,
            format=fmt,
        )
        return LocateResponse(**result.to_dict())

    @router.post("/results", response_model=ReportResponse)
    async def read_results(request: ReportRequest):
        """Read a validation report into messages and highlight requests."""
        try:
            results = read_validation_report(request.report, request.format)
        except ReportReadError as e:
            raise HTTPException(status_code=400, detail=str(e))

        if request.violations_only:
            results = violations(results)

        items = []
        for result in results:
            items.append(ResultModel(
                focus_node=result.focus_node,
                result_path=result.result_path,
                source_shape=result.source_shape,
                severity=result.severity.value,
                message=result_message(result, request.prefixes),
                requests=[
                    RequestModel(term=r.term, context=r.context, model=r.model)
                    for r in requests_for_result(result)
                ],
            ))
        return ReportResponse(count=len(items), results=items)

    return router
