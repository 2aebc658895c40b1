"""Health payload used by the API health-check."""

from datetime import datetime

from vcoin.schemas.health import HealthResponse

SERVICE_NAME = "vcoin"


def get_health(version: str, data_source: str, now: datetime) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version=version,
        data_source=data_source,
        timestamp=now,
    )
