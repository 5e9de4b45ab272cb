"""Health check endpoints for Kubernetes probes."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel, Field

from storageaccessor.core.config import Settings
from storageaccessor.core.exceptions import CertificateError
from storageaccessor.core.logging import get_logger

logger = get_logger(__name__)

# Track application start time
APP_START_TIME = datetime.now(timezone.utc)


class HealthStatus(BaseModel):
    """Health check response model."""

    status: str = Field(..., description="Overall health status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    uptime_seconds: float = Field(..., description="Application uptime in seconds")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Application environment")
    checks: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict, description="Individual component health checks"
    )


class ReadinessStatus(BaseModel):
    """Readiness check response model."""

    ready: bool = Field(..., description="Whether the application is ready")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    checks: Dict[str, bool] = Field(
        default_factory=dict, description="Individual readiness checks"
    )
    message: Optional[str] = Field(None, description="Additional status message")


def check_component_health(request: Request, component: str) -> Dict[str, Any]:
    """Check health of a specific component."""
    state = request.app.state

    if component == "logging":
        logger.debug("Health check test log")
        return {"status": "healthy", "message": "Logging operational"}

    elif component == "admission":
        if getattr(state, "admission_handler", None) is not None:
            return {"status": "healthy", "message": "Admission handler configured"}
        return {"status": "unhealthy", "message": "Admission handler missing"}

    elif component == "certificate":
        source = getattr(state, "certificate_source", None)
        if source is None:
            # TLS terminated outside the app (tests, sidecar)
            return {"status": "healthy", "message": "No certificate source"}
        try:
            source.current_context()
        except CertificateError as e:
            return {"status": "degraded", "message": str(e)}
        return {"status": "healthy", "message": "Certificate loaded"}

    return {"status": "unknown", "message": f"No health check for {component}"}


async def health_check(request: Request, response: Response) -> HealthStatus:
    """
    Health check endpoint for Kubernetes liveness probe.

    Returns overall application health status and individual component checks.
    """
    app_settings = request.app.state.settings
    uptime = (datetime.now(timezone.utc) - APP_START_TIME).total_seconds()

    checks = {
        "logging": check_component_health(request, "logging"),
        "admission": check_component_health(request, "admission"),
        "certificate": check_component_health(request, "certificate"),
    }

    unhealthy_count = sum(
        1 for check in checks.values() if check["status"] == "unhealthy"
    )
    degraded_count = sum(
        1 for check in checks.values() if check["status"] == "degraded"
    )

    if unhealthy_count > 0:
        overall_status = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif degraded_count > 0:
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    if overall_status != "healthy":
        logger.warning(
            "Health check failed", extra={"status": overall_status, "checks": checks}
        )

    return HealthStatus(
        status=overall_status,
        uptime_seconds=uptime,
        version=app_settings.app_version,
        environment=app_settings.environment.value,
        checks=checks,
    )


async def readiness_check(request: Request, response: Response) -> ReadinessStatus:
    """Ready once an admission handler and a usable certificate are in place."""
    checks = {
        "admission": check_component_health(request, "admission")["status"]
        == "healthy",
        "certificate": check_component_health(request, "certificate")["status"]
        == "healthy",
    }

    is_ready = all(checks.values())

    if not is_ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        message = "Application not ready"
        logger.warning("Readiness check failed", extra={"checks": checks})
    else:
        message = "Application ready to receive admission reviews"

    return ReadinessStatus(ready=is_ready, checks=checks, message=message)


def build_router(settings: Settings) -> APIRouter:
    """Register the probes at the configured paths."""
    router = APIRouter()
    router.add_api_route(
        settings.health_check_path,
        health_check,
        methods=["GET"],
        response_model=HealthStatus,
        responses={
            200: {"description": "Application is healthy"},
            503: {"description": "Application is unhealthy"},
        },
        summary="Health Check",
        description="Kubernetes liveness probe endpoint",
    )
    router.add_api_route(
        settings.readiness_check_path,
        readiness_check,
        methods=["GET"],
        response_model=ReadinessStatus,
        responses={
            200: {"description": "Application is ready"},
            503: {"description": "Application is not ready"},
        },
        summary="Readiness Check",
        description="Kubernetes readiness probe endpoint",
    )
    return router
