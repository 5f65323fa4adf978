from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urljoin

import requests

from .config import PosConfig
from .error_mapper import map_error
from .exceptions import TransportError
from .tracing import TraceContext

logger = logging.getLogger(__name__)

JsonPayload = dict[str, Any] | list[Any] | None


@dataclass
class HttpClient:
    config: PosConfig
    trace: TraceContext = field(default_factory=TraceContext)
    session: requests.Session | None = None
    cache_ttl_seconds: float = 30.0
    _cache: dict[str, tuple[float, JsonPayload]] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()

    def _build_url(self, path: str) -> str:
        base = self.config.require_api_base_url().rstrip("/") + "/"
        return urljoin(base, path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        retry_mutation: bool = False,
        use_cache: bool = False,
    ) -> JsonPayload:
        """Send one request, retrying 5xx and transport failures.

        Mutations are attempted once unless ``retry_mutation`` is set, which
        callers only do when the request carries an idempotency key.
        """
        request_headers = {"Accept": "application/json"}
        if headers:
            request_headers.update(headers)
        request_headers.update(self.trace.headers())

        normalized_method = method.upper()
        url = self._build_url(path)
        cache_key = None
        if use_cache and normalized_method == "GET":
            cache_key = json.dumps({"url": url, "params": params or {}}, sort_keys=True)
            cached = self._read_cache(cache_key)
            if cached is not None:
                return cached

        can_retry = normalized_method in {"GET", "HEAD"} or retry_mutation
        attempts = self.config.retries + 1 if can_retry else 1
        response: requests.Response | None = None
        for attempt in range(attempts):
            try:
                response = self.session.request(
                    method=normalized_method,
                    url=url,
                    headers=request_headers,
                    json=json_body,
                    params=params,
                    timeout=(self.config.connect_timeout_seconds, self.config.read_timeout_seconds),
                    verify=self.config.verify_ssl,
                )
            except requests.RequestException as exc:
                if attempt >= attempts - 1:
                    raise TransportError(
                        code="TRANSPORT_ERROR",
                        message=str(exc),
                        details={"type": type(exc).__name__},
                        trace_id=self.trace.trace_id,
                        status_code=0,
                        raw_payload=None,
                    ) from exc
                logger.warning("%s %s attempt %s failed: %s", normalized_method, url, attempt + 1, exc)
            else:
                if response.status_code < 500 or attempt >= attempts - 1:
                    break
            time.sleep(self.config.retry_backoff_seconds * (2**attempt))

        if response.ok:
            self.trace.adopt(response.headers)
            if normalized_method not in {"GET", "HEAD"}:
                # a recorded sale changes stock the cached catalog shows
                self.clear_cache()
            if not response.content:
                return None
            parsed = response.json()
            if cache_key:
                self._cache[cache_key] = (time.monotonic() + self.cache_ttl_seconds, parsed)
            return parsed

        try:
            payload = response.json()
        except json.JSONDecodeError:
            payload = {"message": response.text}
        if not isinstance(payload, dict):
            payload = {"details": payload}
        self.trace.adopt(response.headers, payload)
        raise map_error(response.status_code, payload, self.trace.trace_id)

    def clear_cache(self) -> None:
        self._cache.clear()

    def _read_cache(self, key: str) -> JsonPayload:
        record = self._cache.get(key)
        if not record:
            return None
        expires_at, payload = record
        if time.monotonic() >= expires_at:
            self._cache.pop(key, None)
            return None
        return payload
