from datetime import datetime, timezone

from fastapi import APIRouter, status

from authgate.core.config import settings
from authgate.schemas.health import HealthCheck

router = APIRouter()
group_tags = ["Health"]


@router.get(
    "/health",
    tags=group_tags,
    response_model=HealthCheck,
    status_code=status.HTTP_200_OK,
    summary="Service health check",
)
def get_health() -> HealthCheck:
    return HealthCheck(
        status="OK",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
    )
