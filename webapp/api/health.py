from __future__ import annotations

from time import monotonic

import structlog
from fastapi import APIRouter, Depends
from opentelemetry.trace import Span

from webapp.api.deps import get_app_settings, iso_now, request_span
from webapp.config import Settings
from webapp.models.schemas import HealthResponse
from webapp.observability.tracing import add_event, set_attributes


_STARTED_AT = monotonic()

router = APIRouter(prefix="/api", tags=["health"])


def uptime_seconds() -> float:
    return max(0.0, monotonic() - _STARTED_AT)


@router.get("/health", response_model=HealthResponse)
async def health(
    settings: Settings = Depends(get_app_settings),
    span: Span | None = Depends(request_span),
) -> HealthResponse:
    add_event(span, "Health check requested")
    set_attributes(span, {"custom.route": "health", "custom.health_status": "ok"})

    structlog.get_logger(__name__).info("Health check endpoint accessed")

    return HealthResponse(
        status="ok",
        timestamp=iso_now(),
        uptime=uptime_seconds(),
        version=settings.service_version,
    )
