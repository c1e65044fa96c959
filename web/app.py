"""
FastAPI application for the comparable finder.

Production deployment configuration via environment variables.
"""

import logging
import os
from typing import Any, Dict, Optional, Union

import requests
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from core import (
    ComparisonRequest,
    InvalidParameter,
    MissingParameter,
    SimilarPropertyFinder,
    TargetNotFound,
    get_similar_property_finder,
)
from core.similarity_engine import __version__ as ENGINE_VERSION
from provider import ProviderError


logger = logging.getLogger(__name__)

# =============================================================================
# Environment Configuration
# =============================================================================

# Production mode detection
IS_PRODUCTION = os.getenv("RAILWAY_ENVIRONMENT") is not None or os.getenv("PRODUCTION", "").lower() == "true"

# CORS configuration - locked down for production
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "").split(",") if os.getenv("ALLOWED_ORIGINS") else []
if not ALLOWED_ORIGINS and not IS_PRODUCTION:
    # Development fallback only
    ALLOWED_ORIGINS = ["http://localhost:8000", "http://127.0.0.1:8000"]

# Debug mode - NEVER enabled in production
DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true" and not IS_PRODUCTION


# =============================================================================
# API Request/Response Models
# =============================================================================

class SimilarPropertiesRequest(BaseModel):
    """Request body for a comparable search."""
    # Appraisal roll ids are numeric; accept them as numbers or strings
    propertyId: Optional[Union[str, int]] = None
    limit: Optional[int] = None
    # JSON object, or a JSON string holding one
    customAlgorithm: Optional[Union[Dict[str, Any], str]] = None


def create_app(finder: Optional[SimilarPropertyFinder] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        finder: Finder to serve requests with (default: the application
            singleton, created on first use)
    """
    app = FastAPI(
        title="Subdivision Comparable Finder",
        description="Ranks the most similar parcels within a property's legal subdivision",
        version=ENGINE_VERSION,
        docs_url=None if IS_PRODUCTION else "/docs",
        redoc_url=None if IS_PRODUCTION else "/redoc",
        openapi_url=None if IS_PRODUCTION else "/openapi.json",
        debug=DEBUG_MODE,
    )

    # Healthchecks are synchronous, perform NO IO, and return immediately.
    @app.get("/", include_in_schema=False)
    def root():
        """Root healthcheck. No dependencies, no IO."""
        return {"status": "ok"}

    @app.get("/health", include_in_schema=False)
    def health():
        """Secondary health endpoint. No dependencies, no IO."""
        return {"status": "healthy"}

    if ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    def get_finder() -> SimilarPropertyFinder:
        return finder if finder is not None else get_similar_property_finder()

    async def run_search(request: ComparisonRequest) -> dict:
        """Run a search and translate domain errors to HTTP errors."""
        try:
            result = await get_finder().find(request)
        except (MissingParameter, InvalidParameter) as e:
            raise HTTPException(status_code=400, detail=str(e))
        except TargetNotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        except (requests.RequestException, ProviderError) as e:
            logger.error("Property data fetch failed for %s: %s", request.property_id, e)
            raise HTTPException(status_code=502, detail="Property data provider unavailable")

        return result.to_dict()

    @app.get("/api/properties/{property_id}/similar")
    async def similar_properties(
        property_id: str,
        limit: Optional[int] = Query(None, description="Maximum comparables to return"),
        custom_algorithm: Optional[str] = Query(
            None,
            description="JSON override for weights, cutoffs and priceBias",
        ),
    ):
        """Find comparables for one parcel."""
        return await run_search(ComparisonRequest(
            property_id=property_id,
            limit=limit,
            custom_algorithm=custom_algorithm,
        ))

    @app.post("/api/similar")
    async def similar_properties_search(request_data: SimilarPropertiesRequest):
        """Find comparables using the full request shape."""
        return await run_search(ComparisonRequest(
            property_id=request_data.propertyId,
            limit=request_data.limit,
            custom_algorithm=request_data.customAlgorithm,
        ))

    @app.get("/api/algorithm/default")
    def default_algorithm():
        """The configuration overrides are merged onto."""
        return get_finder().base_algorithm.to_dict()

    @app.get("/api/health")
    def api_health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": ENGINE_VERSION,
            "environment": "production" if IS_PRODUCTION else "development",
        }

    return app


# Create app instance for uvicorn
app = create_app()
