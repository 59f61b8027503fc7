"""
FastAPI Application

Main entry point for the Warehouse Analytics API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
import structlog

from warehouse_analytics.config import get_settings
from warehouse_analytics.config.logging import configure_logging
from warehouse_analytics.database.connection import init_database, close_database
from warehouse_analytics.serving.api.middleware import RequestLoggingMiddleware
from warehouse_analytics.serving.api.routes import (
    health_router,
    reports_router,
    analytics_router,
)

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()
    logger.info("Starting Warehouse Analytics API", environment=settings.app_env)

    # The API still starts without a database; health reports it and data routes answer 503
    try:
        init_database()
        logger.info("Database initialized")
    except Exception as e:
        logger.warning(f"Database init failed: {e}")

    yield

    logger.info("Shutting down...")
    close_database()


app = FastAPI(
    title="Warehouse Analytics API",
    description="Customer and product reports over the sales warehouse",
    version=settings.version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(health_router, prefix="/api/v1", tags=["Health"])
app.include_router(reports_router, prefix="/api/v1/reports", tags=["Reports"])
app.include_router(analytics_router, prefix="/api/v1/analytics", tags=["Analytics"])


@app.get("/api/v1/info")
def api_info():
    """API information endpoint."""
    return {
        "name": "Warehouse Analytics API",
        "version": settings.version,
        "environment": settings.app_env,
        "documentation": "/docs",
    }
