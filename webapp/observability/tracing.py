from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

import structlog
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span, Status, StatusCode
from opentelemetry.util.types import AttributeValue

if TYPE_CHECKING:
    from fastapi import FastAPI

    from webapp.config import Settings


def configure_tracing(settings: Settings) -> TracerProvider | None:
    """Build a tracer provider that ships spans to the collector over OTLP-HTTP."""

    if not settings.enable_tracing:
        structlog.get_logger("tracing").info("Tracing disabled")
        return None

    resource = Resource.create(
        {
            "service.name": settings.service_name,
            "service.version": settings.service_version,
            "service.namespace": settings.service_namespace,
            "deployment.environment": settings.environment,
        }
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otlp_traces_endpoint)))

    structlog.get_logger("tracing").info("Tracing configured", endpoint=settings.otlp_traces_endpoint)
    return provider


def instrument_app(app: FastAPI, provider: TracerProvider | None) -> None:
    """Run every request inside a server span from ``provider``."""

    if provider is None:
        return
    FastAPIInstrumentor.instrument_app(app, tracer_provider=provider)


def shutdown_tracing(provider: TracerProvider | None) -> None:
    """Flush spans still queued for export, then stop the exporters."""

    if provider is None:
        return
    provider.force_flush()
    provider.shutdown()


def current_span() -> Span | None:
    """Return the active span, or None when nothing is being recorded."""

    try:
        span = trace.get_current_span()
    except Exception:
        return None
    if not span.is_recording():
        return None
    return span


# The helpers below never raise: telemetry failures stay out of the response path.


def add_event(span: Span | None, name: str) -> None:
    if span is None:
        return
    try:
        span.add_event(name)
    except Exception:
        pass


def set_attributes(span: Span | None, attributes: Mapping[str, AttributeValue]) -> None:
    if span is None:
        return
    try:
        span.set_attributes(attributes)
    except Exception:
        pass


def set_error(span: Span | None, message: str) -> None:
    if span is None:
        return
    try:
        span.set_status(Status(StatusCode.ERROR, message))
    except Exception:
        pass
