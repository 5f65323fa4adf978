from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Mapping

TRACE_HEADER = "X-Trace-ID"


def _trace_from_headers(headers: Mapping[str, str]) -> str | None:
    wanted = TRACE_HEADER.lower()
    for key, value in headers.items():
        if key.lower() == wanted and value:
            return value
    return None


def _trace_from_payload(payload: object) -> str | None:
    if not isinstance(payload, Mapping):
        return None
    value = payload.get("trace_id")
    return value if isinstance(value, str) and value else None


@dataclass
class TraceContext:
    """Trace id shared by the remote calls of one till session.

    The server may answer with its own id (header first, then error body);
    later calls carry that one so both sides log the same value.
    """

    trace_id: str | None = None

    def ensure(self) -> str:
        if not self.trace_id:
            self.trace_id = str(uuid.uuid4())
        return self.trace_id

    def headers(self) -> dict[str, str]:
        return {TRACE_HEADER: self.ensure()}

    def adopt(self, headers: Mapping[str, str], payload: object = None) -> None:
        self.trace_id = _trace_from_headers(headers) or _trace_from_payload(payload) or self.trace_id
