"""Synthetic endpoints for exercising latency and error dashboards."""

from __future__ import annotations

import asyncio
import random

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from opentelemetry.trace import Span

from webapp.api.deps import iso_now, request_span
from webapp.models.schemas import SlowResponse
from webapp.observability.tracing import add_event, set_attributes, set_error

router = APIRouter(prefix="/api", tags=["testing"])

SLOW_MIN_MS = 1000
SLOW_MAX_MS = 4000


def _pick_delay_ms() -> int:
    return random.randrange(SLOW_MIN_MS, SLOW_MAX_MS)


@router.get("/slow", response_model=SlowResponse)
async def slow(span: Span | None = Depends(request_span)) -> SlowResponse:
    delay = _pick_delay_ms()

    add_event(span, "Slow endpoint accessed")
    set_attributes(span, {"custom.route": "slow", "custom.delay_ms": delay})

    structlog.get_logger(__name__).info("Slow endpoint accessed", delay=delay)

    await asyncio.sleep(delay / 1000)

    return SlowResponse(message="This was intentionally slow", delay=delay, timestamp=iso_now())


@router.get("/error")
async def error(span: Span | None = Depends(request_span)) -> JSONResponse:
    add_event(span, "Error endpoint accessed")
    set_attributes(span, {"custom.route": "error", "custom.error_type": "intentional"})
    set_error(span, "Intentional error for testing")

    structlog.get_logger(__name__).error("Intentional error triggered")

    return JSONResponse(
        status_code=500,
        content={"error": "This is an intentional error for testing", "timestamp": iso_now()},
    )
