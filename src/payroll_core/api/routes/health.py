"""Health check endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Response, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from payroll_core.api.dependencies import Payroll

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    database: str
    active_tax_rules: int | None = None
    tax_rule_issues: int | None = None


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
)
async def health_check(service: Payroll) -> HealthResponse:
    """Check database access and the shape of the active tax brackets.

    A rule set with gaps or overlaps still computes, so it degrades the
    status rather than failing it.
    """
    try:
        rules = await service.get_active_tax_rules()
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return HealthResponse(
            status="degraded",
            timestamp=datetime.now(timezone.utc),
            database="unhealthy",
        )

    issues = await service.validate_active_rules()
    return HealthResponse(
        status="healthy" if not issues else "degraded",
        timestamp=datetime.now(timezone.utc),
        database="healthy",
        active_tax_rules=len(rules),
        tax_rule_issues=len(issues),
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check(service: Payroll, response: Response) -> dict[str, str]:
    """Ready once at least one active tax bracket exists."""
    try:
        rules = await service.get_active_tax_rules()
    except SQLAlchemyError:
        logger.exception("Readiness check failed")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "unavailable"}

    if not rules:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "no active tax rules"}
    return {"status": "ready"}


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    """Liveness check for container orchestration."""
    return {"status": "alive"}
