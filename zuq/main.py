"""FastAPI application entry point for ZUQ."""

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from zuq import __version__
from zuq.config import settings
from zuq.database import close_db, init_db, ping_db
from zuq.dependencies import Repos
from zuq.services.import_service import ImportServiceError

logger = logging.getLogger(__name__)

# Rate limiter configuration
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_per_minute}/minute"],
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["X-Permitted-Cross-Domain-Policies"] = "none"

        # Reports are self-contained HTML with inline styles
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "style-src 'self' 'unsafe-inline'; "
            "frame-ancestors 'none'; "
            "object-src 'none';"
        )

        if settings.enforce_https:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains; preload"
            )

        return response


def _is_production() -> bool:
    """Check if we're running in production mode (not debug and not testing)."""
    return not settings.debug and not os.getenv("PYTEST_CURRENT_TEST")


def _validate_security_configuration() -> None:
    """Validate security configuration at startup.

    Raises:
        RuntimeError: If critical security issues are detected in production.
    """
    issues = []

    secret_key = settings.secret_key
    if not secret_key or len(secret_key) < 32:
        issues.append(
            "SECRET_KEY is missing or too short (minimum 32 characters). "
            "Set ZUQ_SECRET_KEY environment variable."
        )

    if _is_production():
        mongodb_url = settings.mongodb_url
        if "localhost" in mongodb_url or "127.0.0.1" in mongodb_url:
            logger.warning(
                "SECURITY WARNING: MongoDB URL points to localhost in production."
            )
        if not settings.enforce_https:
            logger.warning(
                "SECURITY WARNING: HTTPS enforcement is disabled. "
                "Consider enabling enforce_https=true for production."
            )

    if issues and _is_production():
        for issue in issues:
            logger.error("SECURITY ERROR: %s", issue)
        raise RuntimeError(
            "Application startup blocked due to security configuration issues. "
            "See logs for details."
        )
    for issue in issues:
        logger.warning("SECURITY WARNING (development mode): %s", issue)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    _validate_security_configuration()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    await init_db()
    logger.info("%s %s started", settings.app_name, __version__)

    yield

    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="RFID equipment inventory with bulk spreadsheet import",
    version=__version__,
    lifespan=lifespan,
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(ImportServiceError)
async def import_error_handler(request: Request, exc: ImportServiceError) -> JSONResponse:
    """Import errors not translated by a router become 400 responses."""
    logger.warning("Unhandled import error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# Only allow origins from the whitelist; empty list means same-origin only
if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
        max_age=600,
    )

app.add_middleware(SecurityHeadersMiddleware)


@app.get("/health", tags=["Health"])
async def health_check(repos: Repos) -> JSONResponse:
    """Service health: database reachability and the most recent import."""
    database_ok = await ping_db()
    last_import = None
    if database_ok:
        history = await repos.import_history.find(sort="-created_at")
        if history:
            latest = history[0]
            last_import = {
                "data_type": latest["data_type"],
                "status": latest["status"],
                "created_at": latest["created_at"].isoformat(),
            }

    return JSONResponse(
        content={
            "status": "healthy" if database_ok else "degraded",
            "version": __version__,
            "app_name": settings.app_name,
            "database": "connected" if database_ok else "unavailable",
            "last_import": last_import,
        }
    )


# Import and include routers
from zuq.routers import (  # noqa: E402
    auth,
    equipment,
    export,
    import_router,
    maintenance,
    movements,
    orders,
    reports,
)

app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(import_router.router, prefix="/api/import", tags=["Import"])
app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])
app.include_router(export.router, prefix="/api/export", tags=["Export"])
app.include_router(equipment.router, prefix="/api/equipment", tags=["Equipment"])
app.include_router(movements.router, prefix="/api/movements", tags=["Movements"])
app.include_router(maintenance.router, prefix="/api/maintenance", tags=["Maintenance"])
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
