"""
FastAPI Application - NASA Picture Of The Day & Mars Rover Gateway
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import RedirectResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from nasa_gateway.auth import principal_strategies
from nasa_gateway.config import settings
from nasa_gateway.database import SessionLocal, get_db, init_database
from nasa_gateway.error_handlers import register_error_handlers
from nasa_gateway.middleware.authorization import AuthorizationMiddleware
from nasa_gateway.observability import (
    MetricsMiddleware,
    configure_logging,
    metrics_response,
)
from nasa_gateway.routers.api import router as api_router
from nasa_gateway.routers.auth import router as auth_router
from nasa_gateway.routers.ui import router as ui_router
from nasa_gateway.security.policy import default_policy
from nasa_gateway.services.members import seed_members
from nasa_gateway.staticfiles import STATIC_DIR, CachedStaticFiles

configure_logging(settings.log_level.upper())
logger = logging.getLogger("nasa_gateway")


# ==========================================
# Application Lifespan
# ==========================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application", extra={"environment": settings.environment})
    init_database()
    with SessionLocal() as db:
        created = seed_members(db, settings)
    if created:
        logger.info("Seeded members", extra={"user_ids": created})
    logger.info("Application ready")
    yield
    logger.info("Shutting down application")


# ==========================================
# FastAPI Application
# ==========================================
IS_PROD = settings.is_production

app = FastAPI(
    title="NASA Gateway",
    description="Astronomy Picture Of The Day and Mars Rover photos",
    version="1.0.0",
    lifespan=lifespan,
    docs_url=None if IS_PROD else "/docs",
    redoc_url=None if IS_PROD else "/redoc",
    openapi_url=None if IS_PROD else "/openapi.json",
)
# Order (inner → outer): authorization → metrics → compression → correlation id → CORS
app.add_middleware(
    AuthorizationMiddleware,
    policy=default_policy,
    strategies=principal_strategies,
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID")
if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Accept", "Content-Type", "Authorization"],
    )
register_error_handlers(app)
app.mount("/static", CachedStaticFiles(directory=STATIC_DIR), name="static")


# ==========================================
# Health & readiness
# ==========================================
@app.get("/healthz", tags=["system"], summary="Health check", response_model=dict)
def health_check() -> dict:
    return {"status": "healthy", "version": app.version}


@app.get("/readyz", tags=["system"], summary="Readiness check", response_model=dict)
def readiness_check(db: Session = Depends(get_db)) -> dict:
    try:
        db.execute(text("SELECT 1"))
    except Exception as exc:
        logger.warning("Database not ready", extra={"error": str(exc)})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database unavailable"
        ) from exc
    return {"status": "ready", "database": "connected"}


@app.get("/metrics", include_in_schema=False)
def metrics():
    """Prometheus metrics endpoint (ROLE_ADMIN via the authorization policy)."""
    return metrics_response()


@app.get("/", include_in_schema=False)
def index():
    return RedirectResponse("/nasa/home-page", status_code=status.HTTP_302_FOUND)


# ==========================================
# Routers
# ==========================================
app.include_router(ui_router)
app.include_router(api_router)
app.include_router(auth_router)
