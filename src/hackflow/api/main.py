"""
hackflow.api.main.

FastAPI entrypoint for HackFlow.

Responsibilities
----------------
• API initialization and CORS for the web frontend
• Health monitoring
• Listing/searching persisted hackathons
• Live web search through the ad-hoc extraction pipeline

Environment
-----------
Requires DATABASE_URL (or DB_* variables); GEMINI_API_KEY and
TAVILY_API_KEY enable /api/search.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from hackflow.api.queries import list_hackathons
from hackflow.configs.config import Config
from hackflow.configs.settings import Settings, get_settings
from hackflow.ingestion.errors import ExtractionError, PersistenceError, SearchError
from hackflow.ingestion.normalization.extractor import HackathonExtractor
from hackflow.ingestion.normalization.llm_client import create_llm_client
from hackflow.search.pipeline import AdhocSearchPipeline
from hackflow.search.tavily import TavilySearchClient
from hackflow.storage.base import HackathonStore
from hackflow.storage.postgres import PostgresHackathonStore, create_pool, ensure_schema

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# BOOTSTRAP
# ---------------------------------------------------------------------------


def build_search_pipeline(settings: Settings) -> AdhocSearchPipeline | None:
    """Wire the ad-hoc pipeline, or None when API keys are missing."""
    llm_key = settings.llm_api_key()
    if not settings.TAVILY_API_KEY or not llm_key:
        logger.warning("Missing API keys for AI search, /api/search is disabled")
        return None

    llm = create_llm_client(
        provider=settings.LLM_PROVIDER,
        model_name=settings.SEARCH_LLM_MODEL,
        api_key=llm_key,
        temperature=settings.SEARCH_LLM_TEMPERATURE,
        timeout_s=settings.LLM_TIMEOUT_S,
    )
    search_options = Config.get_search_options()
    return AdhocSearchPipeline(
        TavilySearchClient(
            settings.TAVILY_API_KEY.get_secret_value(),
            timeout_s=settings.SEARCH_TIMEOUT_S,
        ),
        HackathonExtractor(llm),
        query_prefix=search_options.get("query_prefix", "Hackathons IT events in Kazakhstan"),
        max_results=int(search_options.get("max_results", 5)),
        search_depth=search_options.get("search_depth", "advanced"),
    )


def create_app(
    store: HackathonStore | None = None,
    search_pipeline: AdhocSearchPipeline | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    When ``store`` is None a PostgreSQL pool is opened on startup and closed
    on shutdown. Tests pass their own store and pipeline.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle app startup and shutdown events."""
        pool = None
        if app.state.store is None:
            pool = create_pool(settings.get_psycopg2_params(), maxconn=20)
            ensure_schema(pool)
            app.state.store = PostgresHackathonStore(pool)
        if app.state.search_pipeline is None:
            app.state.search_pipeline = build_search_pipeline(settings)

        yield

        if pool is not None:
            pool.closeall()

    app = FastAPI(
        title="HackFlow API",
        version="1.0.0",
        description="Hackathon announcements aggregated from Telegram channels and the web.",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.search_pipeline = search_pipeline

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept"],
    )

    app.include_router(_build_router())
    return app


# ---------------------------------------------------------------------------
# DEPENDENCIES
# ---------------------------------------------------------------------------


def get_store(request: Request) -> HackathonStore:
    """Injected store handle owned by the application."""
    return request.app.state.store


def get_search_pipeline(request: Request) -> AdhocSearchPipeline | None:
    return request.app.state.search_pipeline


# ---------------------------------------------------------------------------
# ROUTES
# ---------------------------------------------------------------------------


def _build_router() -> APIRouter:
    router = APIRouter()

    @router.get("/health", tags=["Monitoring"])
    def health_check() -> dict[str, str]:
        """
        Check API health.

        Returns
        -------
        dict
            Service status indicator.
        """
        return {"status": "ok"}

    @router.get("/api/hackathons", tags=["Hackathons"])
    def get_hackathons(
        q: str = Query(default=""),
        store: HackathonStore = Depends(get_store),
    ) -> list[dict[str, Any]]:
        """
        List persisted hackathons, optionally filtered by title/city.

        Raises
        ------
        HTTPException
            If the database query fails.
        """
        try:
            records = list_hackathons(store, q)
        except PersistenceError as e:
            logger.error(f"Failed to fetch hackathons from database: {e}", extra={"query": q})
            raise HTTPException(status_code=500, detail="Failed to fetch data")
        return [r.to_public_dict() for r in records]

    @router.get("/api/search", tags=["Search"])
    def search_ai(
        q: str = Query(default=""),
        pipeline: AdhocSearchPipeline | None = Depends(get_search_pipeline),
    ) -> list[dict[str, Any]]:
        """
        Live web search + LLM extraction. Results are not persisted.

        Raises
        ------
        HTTPException
            400 without a query, 500 when misconfigured or the extraction
            call fails, 502 when the search provider fails.
        """
        query = q.strip()
        if not query:
            raise HTTPException(status_code=400, detail="Query parameter 'q' is required")
        if pipeline is None:
            raise HTTPException(status_code=500, detail="Server misconfigured: missing API keys")
        try:
            records = pipeline.run(query)
        except SearchError as e:
            logger.error(f"Web search failed: {e}", extra={"query": query})
            raise HTTPException(status_code=502, detail="Failed to search the web")
        except ExtractionError as e:
            logger.error(f"AI extraction failed: {e}", extra={"query": query})
            raise HTTPException(status_code=500, detail="Failed to process search results")
        return [r.to_public_dict() for r in records]

    return router
