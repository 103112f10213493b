"""Health check endpoints for readiness and liveness checks."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from comput3_agent.constants import API_CONFIG, SERVICE_NAME, SERVICE_VERSION

router = APIRouter(tags=["health"])


def _settings_checks(request: Request) -> dict[str, str]:
    """Check plugin initialization and required settings."""
    runtime = getattr(request.app.state, "runtime", None)
    plugin = getattr(request.app.state, "plugin", None)

    checks = {"plugin": "healthy" if plugin is not None else "not_initialized"}
    for setting in API_CONFIG["REQUIRED_SETTINGS"]:
        configured = runtime is not None and runtime.get_setting(setting) is not None
        checks[setting] = "configured" if configured else "missing"
    return checks


@router.get(
    "/v1/readiness",
    summary="Readiness check",
    description="Check if the service is ready to accept requests",
    status_code=status.HTTP_200_OK,
)
async def readiness(request: Request) -> JSONResponse:
    """Readiness check endpoint.

    Returns 200 if the plugin is initialized and every required setting is
    present, 503 otherwise.

    Returns:
        JSONResponse with readiness status
    """
    checks = _settings_checks(request)
    ready = all(value in ("healthy", "configured") for value in checks.values())

    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if ready else "not_ready",
            "checks": checks,
        },
    )


@router.get(
    "/v1/liveness",
    summary="Liveness check",
    description="Check if the service is alive",
    status_code=status.HTTP_200_OK,
)
async def liveness() -> dict:
    """Liveness check endpoint.

    Returns:
        Simple status dict
    """
    return {
        "status": "alive",
    }


@router.get(
    "/v1/health",
    summary="General health check",
    description="Comprehensive health check with detailed status",
    status_code=status.HTTP_200_OK,
)
async def health(request: Request) -> dict:
    """Comprehensive health check endpoint.

    Reports the settings checks plus whether model-assisted extraction is
    available.

    Returns:
        Detailed health status dict
    """
    checks = _settings_checks(request)
    runtime = getattr(request.app.state, "runtime", None)
    checks["language_model"] = (
        "configured" if runtime is not None and runtime.model_available else "not_configured"
    )

    degraded = any(value in ("missing", "not_initialized") for value in checks.values())

    return {
        "status": "degraded" if degraded else "healthy",
        "version": SERVICE_VERSION,
        "service": SERVICE_NAME,
        "checks": checks,
    }
