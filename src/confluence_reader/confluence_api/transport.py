"""Async HTTP transport for the Confluence Cloud REST API.

Each request goes through the same lifecycle:

1. Wait for a slot in the shared token bucket.
2. Send the request with the bearer token and ``Accept: application/json``.
3. ``2xx`` -- return the parsed JSON body (``{}`` when empty; a body that
   is not JSON raises
   :class:`~confluence_reader.errors.ConfluenceReaderValidationError`).
4. ``429`` -- sleep for ``Retry-After`` (or the backoff) and retry.
5. ``5xx`` or a timeout / connection error -- back off and retry.  Other
   transport failures (protocol errors, bad proxies) are not retried.
6. Any other status -- raise the matching
   :class:`~confluence_reader.errors.ConfluenceReaderAPIError`.
7. Out of attempts -- raise
   :class:`~confluence_reader.errors.ConfluenceReaderRetryExhaustedError`
   (or :class:`~confluence_reader.errors.ConfluenceReaderNetworkError` when
   the last attempt never got a response).
"""

from __future__ import annotations

import asyncio
import json
import sys
import time
from typing import Any
from urllib.parse import parse_qs, urlparse

import httpx

from confluence_reader.config import ConfluenceReaderConfig
from confluence_reader.errors import (
    ConfluenceReaderAPIError,
    ConfluenceReaderAuthError,
    ConfluenceReaderNetworkError,
    ConfluenceReaderNotFoundError,
    ConfluenceReaderPermissionError,
    ConfluenceReaderRetryExhaustedError,
    ConfluenceReaderValidationError,
)
from confluence_reader.observability import NoopMetricsHook, get_logger
from confluence_reader.utils.redact import redact

from .rate_limit import AsyncTokenBucket
from .retries import RetryPolicy

log = get_logger("confluence_reader.transport")

_BURST = 10

_STATUS_ERRORS: dict[int, type[ConfluenceReaderAPIError]] = {
    401: ConfluenceReaderAuthError,
    403: ConfluenceReaderPermissionError,
    404: ConfluenceReaderNotFoundError,
}


def build_auth_headers(token: str) -> dict[str, str]:
    """Headers for every request.  Only scoped bearer tokens are supported."""
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/json",
    }


def next_cursor(data: dict[str, Any]) -> str | None:
    """Continuation cursor of a v2 list response, or ``None`` on the last page.

    The v2 API links the next page as a relative URL in ``_links.next``;
    the opaque cursor is that URL's ``cursor`` query parameter.
    """
    link = (data.get("_links") or {}).get("next")
    if not link:
        return None
    values = parse_qs(urlparse(link).query).get("cursor")
    return values[0] if values else None


def _parse_retry_after(response: httpx.Response) -> float | None:
    """``Retry-After`` in seconds; HTTP-date values are ignored."""
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(body: Any, response: httpx.Response) -> str:
    """Pick the most useful message out of a v1 or v2 error body."""
    if isinstance(body, dict):
        if body.get("message"):
            return str(body["message"])
        errors = body.get("errors")
        if errors and isinstance(errors[0], dict):
            detail = errors[0].get("detail") or errors[0].get("title")
            if detail:
                return str(detail)
    return response.text[:500]


def _success_body(response: httpx.Response, method: str, path: str) -> dict:
    """Parsed JSON of a 2xx response; ``{}`` when the body is empty."""
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError as exc:
        raise ConfluenceReaderValidationError(
            f"Confluence API returned a non-JSON body with status "
            f"{response.status_code} on {method} {path}",
            context={
                "status_code": response.status_code,
                "method": method,
                "path": path,
                "body": {},
            },
            cause=exc,
        ) from exc


def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Raise the error class mapped to a non-retryable status."""
    status = response.status_code
    body = _json_or_none(response)
    context: dict[str, Any] = {"status_code": status, "method": method, "path": path}
    error_cls = _STATUS_ERRORS.get(status, ConfluenceReaderValidationError)
    if error_cls is ConfluenceReaderValidationError:
        context["body"] = body if body is not None else {}
    raise error_cls(
        f"Confluence API error {status} on {method} {path}: {_error_message(body, response)}",
        context=context,
    )


def _dump_payload(
    method: str,
    url: str,
    params: Any | None,
    response_status: int | None,
    response_body: Any | None,
    token: str | None = None,
) -> None:
    """Print a redacted request/response summary to stderr."""
    dump: dict[str, Any] = {"method": method, "url": url}
    for key, value in (
        ("params", params),
        ("response_status", response_status),
        ("response_body", response_body),
    ):
        if value is not None:
            dump[key] = value
    print(json.dumps(redact(dump, token), indent=2, default=str), file=sys.stderr)


class AsyncConfluenceTransport:
    """``httpx.AsyncClient`` wrapper with auth, pacing and retries.

    Parameters
    ----------
    config:
        Client configuration; its routing (cloud id or base URL) must be
        set, otherwise construction raises
        :class:`~confluence_reader.errors.ConfluenceReaderConfigError`.
    """

    def __init__(self, config: ConfluenceReaderConfig) -> None:
        self._config = config
        self._retry = RetryPolicy.from_config(config)
        self._bucket = AsyncTokenBucket(rate_rps=config.rate_limit_rps, burst=_BURST)
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.AsyncClient(
            base_url=config.api_base_url,
            headers=build_auth_headers(config.token),
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
        )

    async def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Send *method* *path* and return the JSON body.

        *path* is relative to the configured API root, e.g.
        ``/wiki/api/v2/pages/123``.  Keyword arguments go to
        :meth:`httpx.AsyncClient.request`.

        Raises
        ------
        ConfluenceReaderAPIError
            Auth (401), permission (403), not-found (404) or validation
            (other 4xx) subclass.  A 2xx body that is not JSON raises the
            validation subclass too.
        ConfluenceReaderRetryExhaustedError
            Every attempt got a retryable status.
        ConfluenceReaderNetworkError
            The last attempt failed without a response, or the failure
            was not transient.
        """
        last_status: int | None = None

        for attempt in range(self._retry.max_attempts):
            await self._pace(method)

            started = time.monotonic()
            try:
                response = await self._client.request(method, path, **kwargs)
            except httpx.TransportError as exc:
                await self._after_network_error(method, path, exc, attempt)
                continue

            last_status = response.status_code
            self._observe(method, path, response, started, kwargs.get("params"))

            if response.is_success:
                return _success_body(response, method, path)
            if not self._retry.is_retryable(status_code=last_status):
                _raise_for_status(response, method, path)
            if not self._retry.has_attempts_left(attempt):
                break
            await asyncio.sleep(self._retry_delay(method, path, response, attempt))

        raise ConfluenceReaderRetryExhaustedError(
            f"All {self._retry.max_attempts} attempts exhausted for {method} {path} "
            f"(last status: {last_status})",
            context={"attempts": self._retry.max_attempts, "last_status_code": last_status},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> AsyncConfluenceTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # -- internals ---------------------------------------------------------

    async def _pace(self, method: str) -> None:
        waited = await self._bucket.acquire()
        if waited > 0:
            self._metrics.timing(
                "confluence_reader.rate_limit_wait_ms", waited * 1000, tags={"method": method},
            )
            log.debug(
                "Request paced by token bucket",
                extra={
                    "extra_fields": {
                        "method": method,
                        "wait_s": round(waited, 3),
                        "tokens_owed": max(-self._bucket.balance, 0.0),
                    }
                },
            )

    def _observe(
        self,
        method: str,
        path: str,
        response: httpx.Response,
        started: float,
        params: Any,
    ) -> None:
        """Record metrics and, when enabled, the debug dump for *response*."""
        tags = {"method": method, "status": str(response.status_code)}
        self._metrics.increment("confluence_reader.requests_total", tags=tags)
        self._metrics.timing(
            "confluence_reader.request_duration_ms",
            (time.monotonic() - started) * 1000,
            tags=tags,
        )
        if self._config.debug_dump_payload:
            body = _json_or_none(response)
            _dump_payload(
                method,
                str(response.url),
                params,
                response.status_code,
                body if body is not None else response.text[:1000],
                token=self._config.token,
            )

    def _retry_delay(
        self,
        method: str,
        path: str,
        response: httpx.Response,
        attempt: int,
    ) -> float:
        retry_after = None
        reason = "server_error"
        if response.status_code == 429:
            retry_after = _parse_retry_after(response)
            reason = "rate_limited"
            self._metrics.increment("confluence_reader.rate_limited_total", tags={"method": method})
            log.warning(
                "Rate limited by Confluence API",
                extra={
                    "extra_fields": {
                        "method": method,
                        "path": path,
                        "retry_after": retry_after,
                        "attempt": attempt + 1,
                    }
                },
            )
        self._metrics.increment(
            "confluence_reader.retries_total", tags={"method": method, "reason": reason},
        )
        return self._retry.delay(attempt, retry_after)

    async def _after_network_error(
        self,
        method: str,
        path: str,
        exc: Exception,
        attempt: int,
    ) -> None:
        """Back off after *exc*; raise if it is permanent or attempts ran out."""
        self._metrics.increment(
            "confluence_reader.requests_total", tags={"method": method, "status": "error"},
        )
        log.warning(
            "Request network error",
            extra={
                "extra_fields": {
                    "method": method,
                    "path": path,
                    "attempt": attempt + 1,
                    "error": str(exc),
                }
            },
        )
        if not (
            self._retry.is_retryable(exception=exc) and self._retry.has_attempts_left(attempt)
        ):
            raise ConfluenceReaderNetworkError(
                f"Network error on {method} {path}: {exc}",
                context={"method": method, "path": path, "attempts": attempt + 1},
                cause=exc,
            ) from exc
        self._metrics.increment(
            "confluence_reader.retries_total", tags={"method": method, "reason": "network_error"},
        )
        await asyncio.sleep(self._retry.delay(attempt))
