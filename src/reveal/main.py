"""Main entry point for the Reveal application."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from reveal.api.v1 import comments_router, posts_router, system_router, votes_router
from reveal.api.v1.errors import register_exception_handlers
from reveal.core.settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

# Initialize FastAPI app
app = FastAPI(
    title="Reveal API",
    description="Anonymous posting with community moderation",
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


@app.middleware("http")
async def log_and_harden(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Attach security headers and log one line per request."""
    started = time.perf_counter()
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    logger.info(
        "%3d | %8.2fms | %s %s",
        response.status_code,
        (time.perf_counter() - started) * 1000,
        request.method,
        request.url.path,
    )
    return response


register_exception_handlers(app)

# Include API routers
app.include_router(system_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    if settings.uses_default_salt:
        logger.warning(
            "SALT_KEY is not set; identity hashes use the public default salt. "
            "Set SALT_KEY before exposing this service."
        )


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Reveal API",
        "version": settings.app_version,
        "description": "Anonymous posting with community moderation",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("reveal.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
