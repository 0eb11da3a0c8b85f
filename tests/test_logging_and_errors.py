"""Tests for logging, error handling and health."""

from structlog.contextvars import merge_contextvars
from structlog.testing import capture_logs

from cashledger.core.errors import (
    ErrorDetail,
    InvalidStateError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from cashledger.core.logging import (
    NO_REQUEST_ID,
    clear_request_id,
    get_logger,
    get_request_id,
    set_request_id,
)


class TestErrorClasses:
    """Test custom exception classes."""

    def test_validation_error_creates_correct_response(self):
        exc = ValidationError("Invalid amount", details={"field": "ending_cash"})

        assert exc.code == "VALIDATION_ERROR"
        assert exc.status_code == 422
        assert exc.details == {"field": "ending_cash"}

        response = exc.to_response()
        assert isinstance(response, ErrorDetail)
        assert response.code == "VALIDATION_ERROR"

    def test_not_found_error_includes_resource_context(self):
        exc = NotFoundError(resource="CashierSession", resource_id="123")

        assert exc.code == "NOT_FOUND"
        assert exc.status_code == 404
        assert exc.details["resource"] == "CashierSession"
        assert exc.details["resource_id"] == "123"

    def test_store_unavailable_is_retriable_503(self):
        exc = StoreUnavailableError("delete", details={"error": "OperationalError"})

        assert exc.code == "STORE_UNAVAILABLE"
        assert exc.status_code == 503
        assert exc.details == {"operation": "delete", "error": "OperationalError"}
        assert "delete" in exc.message

    def test_invalid_state_response_drops_empty_details(self):
        response = InvalidStateError("Session is not open").to_response()
        assert response.details is None


class TestRequestIDContext:
    """Test request ID injection."""

    def test_set_and_get_request_id(self):
        set_request_id("test-request-123")
        assert get_request_id() == "test-request-123"
        clear_request_id()

    def test_request_id_default(self):
        clear_request_id()
        assert get_request_id() == NO_REQUEST_ID

    def test_bound_request_id_is_merged_into_log_lines(self):
        set_request_id("test-request-456")
        try:
            with capture_logs(processors=[merge_contextvars]) as logs:
                get_logger("tests").info("something.happened")
        finally:
            clear_request_id()

        assert logs[0]["request_id"] == "test-request-456"


class TestHealthAndMiddleware:
    """Health endpoint and request ID middleware."""

    async def test_health_endpoint_returns_ok(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["checks"]["database"]["status"] == "ok"

    async def test_request_id_header_in_response(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "external-123"})
        assert response.headers.get("X-Request-ID") == "external-123"

    async def test_request_id_reaches_repository_log_lines(self, client):
        with capture_logs(processors=[merge_contextvars]) as logs:
            response = await client.get(
                "/api/session-history", headers={"X-Request-ID": "history-req-1"}
            )

        assert response.status_code == 200
        loaded = [entry for entry in logs if entry["event"] == "session_history.loaded"]
        assert loaded
        assert loaded[0]["request_id"] == "history-req-1"
        assert get_request_id() == NO_REQUEST_ID

    async def test_request_id_generated_when_missing(self, client):
        response = await client.get("/health")

        assert "X-Request-ID" in response.headers
        assert len(response.headers["X-Request-ID"]) > 0
