from __future__ import annotations

from pos_core.error_mapper import map_error
from pos_core.exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ValidationError,
)


def test_error_mapper_classes() -> None:
    assert isinstance(map_error(401, {"code": "INVALID_TOKEN", "message": "bad"}, "trace"), AuthError)
    assert isinstance(map_error(403, {"code": "PERMISSION_DENIED", "message": "no"}, "trace"), AuthError)
    assert isinstance(map_error(404, {"code": "NOT_FOUND", "message": "missing"}, "trace"), NotFoundError)
    assert isinstance(map_error(422, {"code": "VALIDATION_ERROR", "message": "bad"}, "trace"), ValidationError)
    assert isinstance(map_error(409, {"code": "CONFLICT", "message": "dup"}, "trace"), ConflictError)
    assert isinstance(map_error(429, {"code": "SLOW_DOWN", "message": "later"}, "trace"), RateLimitError)
    assert isinstance(map_error(502, {}, "trace"), ServerError)
    assert type(map_error(418, {}, "trace")) is ApiError


def test_error_mapper_trace_and_defaults() -> None:
    err = map_error(500, None, "trace-500")
    assert err.code == "HTTP_ERROR"
    assert err.message == "Request failed"
    assert "trace_id=trace-500" in str(err)

    err = map_error(409, {"code": "CONFLICT", "message": "dup", "trace_id": "server-trace"}, "client-trace")
    assert err.trace_id == "server-trace"
    assert err.status_code == 409
    assert err.raw_payload["code"] == "CONFLICT"
