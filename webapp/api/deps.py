from __future__ import annotations

from datetime import datetime, timezone

from fastapi import Request
from opentelemetry.trace import Span

from webapp.config import Settings
from webapp.observability.metrics import HttpMetrics
from webapp.services.user_store import UserStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_http_metrics(request: Request) -> HttpMetrics:
    return request.app.state.http_metrics


def request_span(request: Request) -> Span | None:
    """Span opened for this request by the tracing middleware, if any."""

    return getattr(request.state, "span", None)


def iso_now() -> str:
    """UTC timestamp with millisecond precision and a ``Z`` suffix."""

    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
