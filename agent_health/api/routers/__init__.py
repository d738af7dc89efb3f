"""API router package for endpoint composition."""

from .foundation import ROUTE_METHODS, api_create_foundation_router
from .health import api_create_health_router, api_request_context

__all__ = ["ROUTE_METHODS", "api_create_foundation_router", "api_create_health_router", "api_request_context"]
