from __future__ import annotations

from time import perf_counter
from typing import Any, Callable

import structlog
from opentelemetry.trace import Span
from starlette.datastructures import Headers

from webapp.observability.metrics import HttpMetrics
from webapp.observability.tracing import current_span, set_attributes, set_error


def _quietly(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    try:
        fn(*args, **kwargs)
    except Exception:
        # Telemetry must not break the response that is being finalized.
        pass


def _route_label(scope: dict[str, Any]) -> str:
    """Matched route template, or the raw path when routing found nothing."""

    route_path = getattr(scope.get("route"), "path", None)
    if isinstance(route_path, str):
        return route_path
    return scope.get("path", "")


def _request_url(scope: dict[str, Any]) -> str:
    url = scope.get("path", "")
    query = scope.get("query_string", b"")
    if query:
        url = f"{url}?{query.decode('latin-1')}"
    return url


class RequestTelemetryMiddleware:
    """Times each request, then records metrics, span attributes and an access log.

    The completion step runs once per request, just before the final body chunk
    is sent (or after the app raised without finishing), in a fixed order:
    metrics, span, log.
    """

    def __init__(self, app: Callable[..., Any], metrics: HttpMetrics) -> None:
        self.app = app
        self.metrics = metrics

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        start = perf_counter()
        span = current_span()

        # Handlers receive the span through request.state (see webapp.api.deps).
        scope.setdefault("state", {})["span"] = span

        status_code: int = 500
        completed = False

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code, completed

            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 500))
            elif message.get("type") == "http.response.body" and not message.get("more_body", False):
                # The server span ends once the last body chunk goes out, so annotate it first.
                completed = True
                self._complete(scope, span, status_code, perf_counter() - start)

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            if not completed:
                self._complete(scope, span, status_code, perf_counter() - start)

    def _complete(self, scope: dict[str, Any], span: Span | None, status_code: int, elapsed: float) -> None:
        method = scope.get("method", "")
        url = _request_url(scope)
        user_agent = Headers(scope=scope).get("user-agent")
        client = scope.get("client")

        _quietly(
            self.metrics.observe_http_request,
            method=method,
            route=_route_label(scope),
            status_code=status_code,
            elapsed_seconds=elapsed,
        )

        if span is not None:
            set_attributes(
                span,
                {
                    "http.method": method,
                    "http.url": url,
                    "http.status_code": status_code,
                    "http.user_agent": user_agent or "",
                    "http.request_duration": elapsed,
                },
            )
            if status_code >= 400:
                set_error(span, f"HTTP {status_code}")

        _quietly(
            structlog.get_logger("access").info,
            "HTTP Request",
            method=method,
            url=url,
            statusCode=status_code,
            duration=elapsed,
            userAgent=user_agent,
            ip=client[0] if client else None,
        )
