"""
FastAPI application for the spatial asset register.

Production deployment configuration via environment variables
(see utils/config.py).
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import (
    AssetNotFoundError,
    AssetRepository,
    AssetService,
    IdentifierSpaceExhaustedError,
    InMemoryAssetRepository,
)
from utils.config import Config
from web.asset_routes import router as asset_router
from web.auth import build_accounts
from web.auth_routes import router as auth_router


logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def create_app(
    config: Optional[Config] = None,
    repository: Optional[AssetRepository] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings (default: loaded from environment)
        repository: Asset store (default: in-memory, persisted to
            ``config.data_path`` when set)
    """
    config = config or Config.load()
    repository = repository or InMemoryAssetRepository(persist_path=config.data_path)

    app = FastAPI(
        title="Spatial Asset Register",
        description="Filter, quality-check and export geolocated asset records",
        version=VERSION,
        docs_url=None if config.is_production else "/docs",
        redoc_url=None if config.is_production else "/redoc",
        openapi_url=None if config.is_production else "/openapi.json",
        debug=config.debug,
    )

    app.state.config = config
    app.state.accounts = build_accounts(config)
    app.state.service = AssetService(repository, max_id_attempts=config.max_id_attempts)

    # Healthchecks: no dependencies, no IO
    @app.get("/", include_in_schema=False)
    def root():
        return {"status": "ok"}

    @app.get("/health", include_in_schema=False)
    def health():
        return {"status": "healthy"}

    @app.get("/api/health")
    def api_health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": VERSION,
            "environment": "production" if config.is_production else "development",
            "assets": repository.count(),
        }

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["*"],
        )

    # Error bodies omit the rejected input, which may be NaN
    @app.exception_handler(RequestValidationError)
    async def request_invalid(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ]
        return JSONResponse(status_code=422, content={"detail": errors})

    @app.exception_handler(AssetNotFoundError)
    async def asset_not_found(request: Request, exc: AssetNotFoundError):
        return JSONResponse(status_code=404, content={"detail": "Asset not found"})

    @app.exception_handler(IdentifierSpaceExhaustedError)
    async def identifier_space_exhausted(request: Request, exc: IdentifierSpaceExhaustedError):
        return JSONResponse(
            status_code=503,
            content={"detail": "Could not allocate a unique asset ID, please retry"},
            headers={"Retry-After": "1"},
        )

    app.include_router(auth_router)
    app.include_router(asset_router)

    logger.info(
        "Spatial Asset Register ready (%d assets, %s)",
        repository.count(),
        "production" if config.is_production else "development",
    )
    return app


# Create app instance for uvicorn
app = create_app()
