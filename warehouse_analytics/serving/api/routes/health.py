"""
Health Check Endpoints

Provides health and readiness checks for orchestration systems.
"""

from datetime import datetime
from typing import Dict, Any

from fastapi import APIRouter, Response
from pydantic import BaseModel

from warehouse_analytics.config import get_settings
from warehouse_analytics.database.connection import check_database_health

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Application status and database connectivity."""
    settings = get_settings()
    db_health = check_database_health()
    status = "healthy" if db_health.get("status") == "healthy" else "unhealthy"

    return HealthResponse(
        status=status,
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.utcnow(),
        checks={"database": db_health},
    )


@router.get("/health/live")
def liveness_check() -> Dict[str, str]:
    """Returns 200 while the application is running."""
    return {"status": "alive"}


@router.get("/health/ready")
def readiness_check(response: Response) -> Dict[str, str]:
    """Returns 200 once the warehouse database answers, 503 before."""
    db_health = check_database_health()
    if db_health.get("status") != "healthy":
        response.status_code = 503
        return {"status": "not_ready", "reason": "database_unavailable"}
    return {"status": "ready"}
