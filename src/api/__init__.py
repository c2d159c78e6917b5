"""
rdf-termlocator API Layer

FastAPI-based REST API for the term locator.
Separates API concerns from the core engine (rdf_termlocator).
"""

from api.highlight_api import create_highlight_router

# api.web is not imported here; import create_app from api.web directly

__all__ = [
    "create_highlight_router",
]
