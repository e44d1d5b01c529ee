"""Health and service metadata endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...deps import SettingsDependency
from ...schemas.system import HealthCheckResponse, RootResponse

router = APIRouter(tags=["system"])


@router.get("/", response_model=RootResponse, summary="Service metadata")
async def read_root(settings: SettingsDependency) -> RootResponse:
    """Expose minimal service metadata at the root endpoint."""
    return RootResponse(
        name=settings.project_name,
        environment=settings.environment,
        version=settings.version,
        api_prefix=settings.router_prefix,
    )


@router.get(
    "/healthz",
    response_model=HealthCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def read_health() -> HealthCheckResponse:
    """Return a simple heartbeat payload for health checks."""
    return HealthCheckResponse(status="ok")
