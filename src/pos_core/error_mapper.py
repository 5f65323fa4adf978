from __future__ import annotations

from typing import Mapping

from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ValidationError,
)

_STATUS_TYPES: dict[int, type[ApiError]] = {
    400: ValidationError,
    401: AuthError,
    403: AuthError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: RateLimitError,
}


def map_error(status_code: int, payload: Mapping[str, object] | None, trace_id: str | None) -> ApiError:
    payload = payload or {}
    payload_trace_id = payload.get("trace_id")
    mapped = _STATUS_TYPES.get(status_code)
    if mapped is None:
        mapped = ServerError if status_code >= 500 else ApiError
    return mapped(
        code=str(payload.get("code") or "HTTP_ERROR"),
        message=str(payload.get("message") or "Request failed"),
        details=payload.get("details"),
        trace_id=str(payload_trace_id) if payload_trace_id is not None else trace_id,
        status_code=status_code,
        raw_payload=dict(payload),
    )
