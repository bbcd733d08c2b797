# src/matchgate/main.py
"""Main entry point for the matchgate application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from matchgate.api.v1 import (
    identity_router,
    messages_router,
    photos_router,
    profiles_router,
    swipes_router,
)
from matchgate.api.v1.dependencies import API_PREFIX
from matchgate.core.errors import AccessDenied, IdentityNotFound
from matchgate.core.log_config import configure_logging
from matchgate.core.settings import settings
from matchgate.services.crypto import get_key_deriver
from matchgate.services.identity import get_identity_resolver

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="matchgate API",
    description="Pseudonymous matching with encrypted conversations",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(identity_router, prefix=API_PREFIX)
app.include_router(swipes_router, prefix=API_PREFIX)
app.include_router(photos_router, prefix=API_PREFIX)
app.include_router(profiles_router, prefix=API_PREFIX)
app.include_router(messages_router, prefix=API_PREFIX)


def _access_denied_response() -> JSONResponse:
    # Unknown targets and policy denials must be indistinguishable.
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": "Access denied"})


@app.exception_handler(IdentityNotFound)
async def identity_not_found_handler(request: Request, exc: IdentityNotFound) -> JSONResponse:
    logger.debug("Unresolvable opaque id on %s", request.url.path)
    return _access_denied_response()


@app.exception_handler(AccessDenied)
async def access_denied_handler(request: Request, exc: AccessDenied) -> JSONResponse:
    logger.debug("Access denied (%s) on %s", exc, request.url.path)
    return _access_denied_response()


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging(settings.log_level)
    # Fail fast when either secret is missing.
    get_identity_resolver()
    get_key_deriver()
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "matchgate API",
        "version": settings.app_version,
        "description": "Pseudonymous matching with encrypted conversations",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("matchgate.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
