"""Health check endpoint with database connectivity check."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and container health checks.
    """
    connected = check_db_connected(db)
    return HealthResponse(
        status="healthy" if connected else "degraded",
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
        timestamp=datetime.now(UTC),
    )
