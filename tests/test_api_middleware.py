"""Tests for correlation, security header, error handling and rate limit middleware."""

from __future__ import annotations

from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from agent_health.api.application import create_api_application
from agent_health.api.rate_limiting import RATE_LIMIT_MESSAGE, FixedWindowRateLimiter
from agent_health.config import AppSettings
from agent_health.dependencies import DependencyStatusAggregator
from agent_health.domain import ReadinessResult
from agent_health.health import ProcessClock
from agent_health.metrics import MetricsSnapshotProvider, StaticMetricsSource

_SECURITY_HEADERS = {
    "x-frame-options": "DENY",
    "x-content-type-options": "nosniff",
    "x-xss-protection": "1; mode=block",
}


class _RaisingReadinessProbe:
    """Test double that fails while evaluating readiness."""

    def readiness_check(self) -> ReadinessResult:
        """Raise deterministic readiness failure.

        Returns:
            ReadinessResult: This method does not return.

        Raises:
            RuntimeError: Always raised by this test double.
        """

        raise RuntimeError("readiness backend exploded")


class _FakeMonotonic:
    """Manually advanced monotonic clock test double."""

    def __init__(self) -> None:
        self.value = 50.0

    def __call__(self) -> float:
        return self.value


def _build_client(
    environment_name: str = "test",
    rate_limiter: FixedWindowRateLimiter | None = None,
    request_id_factory=None,
) -> TestClient:
    """Create a test client with a failing readiness probe for error paths.

    Args:
        environment_name: Runtime environment label.
        rate_limiter: Optional rate limiter override.
        request_id_factory: Optional correlation ID generator override.

    Returns:
        TestClient: Client bound to the application.

    Raises:
        ValueError: Raised when application wiring is invalid.
    """

    settings = AppSettings(
        environment_name=environment_name,
        application_port=3000,
        service_version="1.0.0",
        cors_allow_origins=["*"],
    )
    optional_arguments: dict[str, object] = {}
    if request_id_factory is not None:
        optional_arguments["request_id_factory"] = request_id_factory
    application = create_api_application(
        settings=settings,
        clock=ProcessClock(),
        metrics_provider=MetricsSnapshotProvider(source=StaticMetricsSource()),
        dependency_aggregator=DependencyStatusAggregator.from_settings(settings),
        readiness_probe=_RaisingReadinessProbe(),
        rate_limiter=rate_limiter or FixedWindowRateLimiter(max_requests=100, window_seconds=900),
        **optional_arguments,
    )
    return TestClient(application)


def test_api_unknown_route_returns_not_found_payload() -> None:
    """Return HTTP 404 with path and correlation ID for unmatched routes.

    Returns:
        None: Assertions validate response behavior.

    Raises:
        AssertionError: Raised when response does not match expected payload.
    """

    response = _build_client().get("/nonexistent")

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "Not Found"
    assert body["path"] == "/nonexistent"
    assert body["requestId"] == response.headers["x-request-id"]


def test_api_wrong_method_returns_method_not_allowed_payload() -> None:
    """Return HTTP 405 with correlation ID for non-GET requests on known routes.

    Returns:
        None: Assertions validate response behavior.

    Raises:
        AssertionError: Raised when response does not match expected payload.
    """

    response = _build_client().post("/docs")

    assert response.status_code == 405
    assert response.json()["error"] == "Method Not Allowed"
    assert response.json()["requestId"] == response.headers["x-request-id"]


def test_api_unhandled_error_returns_detailed_message_outside_production() -> None:
    """Return HTTP 500 with the raw error message in non-production environments.

    Returns:
        None: Assertions validate response behavior.

    Raises:
        AssertionError: Raised when response does not match expected payload.
    """

    response = _build_client(environment_name="development").get("/health/ready")

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Internal Server Error"
    assert body["message"] == "readiness backend exploded"
    assert body["requestId"] == response.headers["x-request-id"]


def test_api_unhandled_error_hides_message_in_production() -> None:
    """Return HTTP 500 with a generic message in production.

    Returns:
        None: Assertions validate response behavior.

    Raises:
        AssertionError: Raised when response leaks error details.
    """

    response = _build_client(environment_name="production").get("/health/ready")

    assert response.status_code == 500
    assert response.json()["message"] == "Something went wrong"
    assert response.json()["requestId"] == response.headers["x-request-id"]


def test_api_unhandled_error_is_logged_with_stack_trace(caplog) -> None:
    """Log unhandled errors with exception info and correlation ID.

    Args:
        caplog: Pytest log capture fixture.

    Returns:
        None: Assertions validate logging behavior.

    Raises:
        AssertionError: Raised when the error log is missing.
    """

    caplog.set_level("INFO")

    response = _build_client().get("/health/ready")

    error_records = [record for record in caplog.records if record.getMessage() == "Unhandled error"]
    assert len(error_records) == 1
    assert error_records[0].exc_info is not None
    assert error_records[0].path == "/health/ready"
    assert response.headers["x-request-id"]


def test_api_security_and_cors_headers_present_on_every_status() -> None:
    """Attach security and CORS headers to success, not-found and error responses.

    Returns:
        None: Assertions validate header presence.

    Raises:
        AssertionError: Raised when a header is missing.
    """

    client = _build_client()

    for path, expected_status in (("/", 200), ("/health", 200), ("/missing", 404), ("/health/ready", 500)):
        response = client.get(path)
        assert response.status_code == expected_status, path
        for header_name, header_value in _SECURITY_HEADERS.items():
            assert response.headers[header_name] == header_value, (path, header_name)
        assert response.headers["access-control-allow-origin"] == "*", path
        assert response.headers["x-request-id"], path


def test_api_cors_request_with_origin_is_allowed() -> None:
    """Allow cross-origin requests carrying an Origin header.

    Returns:
        None: Assertions validate CORS behavior.

    Raises:
        AssertionError: Raised when CORS headers are missing.
    """

    response = _build_client().get("/health", headers={"Origin": "http://example.com"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_api_request_id_factory_is_used_for_header_and_body() -> None:
    """Use the injected correlation ID generator for header and body.

    Returns:
        None: Assertions validate correlation behavior.

    Raises:
        AssertionError: Raised when the injected ID is not propagated.
    """

    response = _build_client(request_id_factory=lambda: "fixed-request-id").get("/health")

    assert response.headers["x-request-id"] == "fixed-request-id"
    assert response.json()["requestId"] == "fixed-request-id"


def test_api_rate_limit_rejects_excess_health_requests() -> None:
    """Reject `/health` requests beyond the configured threshold within one window.

    Returns:
        None: Assertions validate rate limiting behavior.

    Raises:
        AssertionError: Raised when excess requests are not rejected.
    """

    client = _build_client(
        rate_limiter=FixedWindowRateLimiter(max_requests=3, window_seconds=60, monotonic_provider=_FakeMonotonic()),
    )

    accepted = [client.get("/health") for _ in range(3)]
    rejected = [client.get("/health/live") for _ in range(2)]

    assert [response.status_code for response in accepted] == [200, 200, 200]
    assert accepted[-1].headers["x-ratelimit-remaining"] == "0"
    for response in rejected:
        assert response.status_code == 429
        assert response.json() == {"error": "Too Many Requests", "message": RATE_LIMIT_MESSAGE}
        assert response.headers["retry-after"] == "60"
        assert response.headers["x-request-id"]
        assert response.headers["x-frame-options"] == "DENY"


def test_api_rate_limit_does_not_apply_to_root_and_docs() -> None:
    """Serve `/` and `/docs` regardless of the `/health` request budget.

    Returns:
        None: Assertions validate rate limiting scope.

    Raises:
        AssertionError: Raised when non-health routes are throttled.
    """

    client = _build_client(
        rate_limiter=FixedWindowRateLimiter(max_requests=1, window_seconds=60, monotonic_provider=_FakeMonotonic()),
    )

    assert client.get("/health").status_code == 200
    assert client.get("/health").status_code == 429
    assert all(client.get("/docs").status_code == 200 for _ in range(5))
    assert all(client.get("/").status_code == 200 for _ in range(5))


def test_api_head_requests_return_headers_without_body() -> None:
    """Answer HEAD on every GET route with status and headers only.

    Returns:
        None: Assertions validate HEAD handling.

    Raises:
        AssertionError: Raised when HEAD is rejected or carries a body.
    """

    client = _build_client()

    for path in ("/health/live", "/health", "/health/status", "/", "/docs"):
        response = client.head(path)
        assert response.status_code == 200, path
        assert response.content == b"", path
        assert response.headers["x-request-id"], path
        assert response.headers["content-type"] == "application/json", path
        assert response.headers["x-frame-options"] == "DENY", path


def test_api_health_trailing_slash_served_without_redirect() -> None:
    """Serve `/health/` directly and count it once against the rate limit.

    Returns:
        None: Assertions validate trailing slash routing.

    Raises:
        AssertionError: Raised when the request is redirected or double counted.
    """

    client = _build_client(rate_limiter=FixedWindowRateLimiter(max_requests=2, window_seconds=60))

    responses = [client.get("/health/", follow_redirects=False) for _ in range(2)]

    assert [response.status_code for response in responses] == [200, 200]
    assert responses[0].json()["status"] == "healthy"
    assert responses[-1].headers["x-ratelimit-remaining"] == "0"


def test_api_gzip_applies_only_to_large_bodies() -> None:
    """Compress bodies of at least 1000 bytes and leave smaller bodies alone.

    Returns:
        None: Assertions validate the compression threshold.

    Raises:
        AssertionError: Raised when compression ignores the threshold.
    """

    client = _build_client()
    client.app.add_api_route(
        "/bulk",
        lambda: JSONResponse(content={"items": ["agent-health" * 10] * 20}),
        methods=["GET"],
    )
    gzip_headers = {"Accept-Encoding": "gzip"}

    small_response = client.get("/health/live", headers=gzip_headers)
    large_response = client.get("/bulk", headers=gzip_headers)

    assert "content-encoding" not in small_response.headers
    assert large_response.headers["content-encoding"] == "gzip"
    assert large_response.json()["items"][0] == "agent-health" * 10
    assert large_response.headers["x-request-id"]
