from __future__ import annotations

from requests.structures import CaseInsensitiveDict

from pos_core.tracing import TRACE_HEADER, TraceContext


def test_trace_id_is_created_once() -> None:
    trace = TraceContext()

    first = trace.ensure()

    assert first
    assert trace.ensure() == first
    assert trace.headers() == {TRACE_HEADER: first}


def test_trace_id_adopted_from_header_then_payload() -> None:
    trace = TraceContext(trace_id="local")

    trace.adopt({"x-trace-id": "from-header"}, {"trace_id": "from-payload"})
    assert trace.trace_id == "from-header"

    trace.adopt(CaseInsensitiveDict({"X-TRACE-ID": "from-response"}))
    assert trace.trace_id == "from-response"

    trace.adopt({}, {"trace_id": "from-payload"})
    assert trace.trace_id == "from-payload"

    trace.adopt({"X-Trace-ID": ""}, {"trace_id": ""})
    assert trace.trace_id == "from-payload"
