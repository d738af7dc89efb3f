"""Service descriptor and documentation endpoints."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from agent_health.config import AppSettings
from agent_health.domain import SERVICE_DISPLAY_NAME

ROUTE_METHODS = ["GET", "HEAD"]

API_ENDPOINTS: tuple[dict[str, str], ...] = (
    {
        "method": "GET",
        "path": "/health",
        "description": "Comprehensive health check with system metrics and dependencies",
        "response": "Full health data including status, metrics, and dependencies",
    },
    {
        "method": "GET",
        "path": "/health/live",
        "description": "Liveness probe - is the application running?",
        "response": "Simple alive status",
    },
    {
        "method": "GET",
        "path": "/health/ready",
        "description": "Readiness probe - is the application ready to serve traffic?",
        "response": "Ready status, HTTP 503 when not ready",
    },
    {
        "method": "GET",
        "path": "/health/status",
        "description": "Detailed status information with version and timestamp",
        "response": "Service metadata and build info",
    },
    {
        "method": "GET",
        "path": "/docs",
        "description": "API documentation",
        "response": "This documentation",
    },
    {
        "method": "GET",
        "path": "/",
        "description": "Service descriptor",
        "response": "Service name, version, and entry links",
    },
)


def api_create_foundation_router(settings: AppSettings) -> APIRouter:
    """Create router for the service descriptor and static documentation.

    Args:
        settings: Validated application settings used for version and examples.

    Returns:
        APIRouter: Router exposing `/` and `/docs`.

    Raises:
        ValueError: Raised when settings is None.
    """

    if settings is None:
        raise ValueError("settings must not be None")

    base_url = f"http://localhost:{settings.application_port}"
    router = APIRouter(tags=["foundation"])

    @router.api_route("/", methods=ROUTE_METHODS)
    def api_foundation_index() -> JSONResponse:
        """Return the static service descriptor.

        Returns:
            JSONResponse: Service name, version and entry links.
        """

        payload = {
            "message": SERVICE_DISPLAY_NAME,
            "version": settings.service_version,
            "docs": "/docs",
            "health": "/health",
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.api_route("/docs", methods=ROUTE_METHODS)
    def api_foundation_docs() -> JSONResponse:
        """Return the static route list with descriptions and usage examples.

        Returns:
            JSONResponse: API documentation payload.
        """

        payload = {
            "title": f"{SERVICE_DISPLAY_NAME} Documentation",
            "version": settings.service_version,
            "endpoints": [dict(endpoint) for endpoint in API_ENDPOINTS],
            "examples": {
                "healthCheck": f"curl {base_url}/health",
                "liveness": f"curl {base_url}/health/live",
                "readiness": f"curl {base_url}/health/ready",
                "status": f"curl {base_url}/health/status",
            },
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
