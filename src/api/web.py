"""
rdf-termlocator Web API

FastAPI application exposing the term locator to browser editors.
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rdf_termlocator import __version__
from rdf_termlocator.config import LocatorConfig
from api.highlight_api import create_highlight_router


def create_app(config: Optional[LocatorConfig] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Locator configuration (read from ``RDF_TERMLOCATOR_CONFIG``
            when omitted)

    Returns:
        Configured FastAPI application
    """
    config = config or LocatorConfig.from_env()

    app = FastAPI(
        title="rdf-termlocator API",
        description="Locate RDF terms inside serialized graphs for SHACL result highlighting",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.include_router(create_highlight_router(config))

    @app.get("/", tags=["Info"])
    async def root():
        """API root with basic info."""
        return {
            "name": "rdf-termlocator",
            "version": __version__,
            "docs": "/docs",
        }

    return app
