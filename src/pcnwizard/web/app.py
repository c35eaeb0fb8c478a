"""FastAPI application for the parking notice contest wizard.

Run with ``uvicorn pcnwizard.web.app:create_app --factory``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from pcnwizard import __version__
from pcnwizard.analyzer.base import Analyzer
from pcnwizard.analyzer.llm_analyzer import LLMAnalyzer
from pcnwizard.core.config import Settings
from pcnwizard.web.sessions import StoreFactory, WizardSessionManager
from pcnwizard.web.wizard_router import router as wizard_router
from pcnwizard.wizard.catalog import GroundsCatalog, load_catalog


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str = __version__


def create_app(
    settings: Settings | None = None,
    analyzer: Analyzer | None = None,
    catalog: GroundsCatalog | None = None,
    store_factory: StoreFactory | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Uses the factory pattern so tests can create isolated app instances
    with a fake analyzer and in-memory stores.

    Args:
        settings: Application settings. Defaults to Settings().
        analyzer: Optional pre-built analyzer. Defaults to an LLMAnalyzer
            over ``settings.llm``.
        catalog: Optional grounds catalogue.
        store_factory: Optional per-session case store factory.

    Returns:
        A configured FastAPI instance.
    """
    if settings is None:
        settings = Settings()

    logging.getLogger("pcnwizard").setLevel(settings.log_level.upper())

    app = FastAPI(
        title="PCN Wizard",
        description="Guided contest of UK parking notices",
        version=__version__,
    )

    # CORS for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if catalog is None:
        catalog = load_catalog(settings.wizard.grounds_path)
    if analyzer is None:
        analyzer = LLMAnalyzer(settings.llm, catalog=catalog)

    # Store on app state for access in route handlers
    app.state.settings = settings
    app.state.analyzer = analyzer
    app.state.wizard_sessions = WizardSessionManager(
        analyzer=analyzer,
        settings=settings,
        catalog=catalog,
        store_factory=store_factory,
    )

    app.include_router(wizard_router)

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", service="pcnwizard")

    return app
