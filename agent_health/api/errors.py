"""Error response builders and exception handler registration."""

from __future__ import annotations

from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

GENERIC_ERROR_MESSAGE = "Something went wrong"


def api_request_id(request: Request) -> str | None:
    """Return the correlation ID assigned to a request, if any.

    Args:
        request: Incoming request.

    Returns:
        str | None: Correlation ID set by the correlation middleware.
    """

    request_context = getattr(request.state, "request_context", None)
    return None if request_context is None else request_context.request_id


def api_build_internal_error_response(request_id: str, error: Exception, hide_details: bool) -> JSONResponse:
    """Build the 500 response for an unhandled exception.

    Args:
        request_id: Correlation ID of the failed request.
        error: Unhandled exception.
        hide_details: Replace the exception message with a generic one.

    Returns:
        JSONResponse: Internal server error payload.
    """

    payload = {
        "error": "Internal Server Error",
        "requestId": request_id,
        "message": GENERIC_ERROR_MESSAGE if hide_details else str(error),
    }
    return JSONResponse(content=payload, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def api_register_exception_handlers(application: FastAPI) -> None:
    """Register HTTP error handlers producing correlation-aware payloads.

    Args:
        application: Application receiving the handlers.
    """

    @application.exception_handler(StarletteHTTPException)
    async def api_http_exception_handler(request: Request, error: StarletteHTTPException) -> JSONResponse:
        """Render routing and HTTP errors such as 404 and 405.

        Returns:
            JSONResponse: Error payload carrying path and correlation ID.
        """

        try:
            error_name = HTTPStatus(error.status_code).phrase
        except ValueError:
            error_name = str(error.detail)
        payload = {
            "error": error_name,
            "path": request.url.path,
            "requestId": api_request_id(request),
        }
        return JSONResponse(
            content=payload,
            status_code=error.status_code,
            headers=getattr(error, "headers", None),
        )
