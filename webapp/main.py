from __future__ import annotations

import platform
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from opentelemetry.trace import Span

from webapp.api.deps import request_span
from webapp.api.health import router as health_router
from webapp.api.metrics import router as metrics_router
from webapp.api.testing import router as testing_router
from webapp.api.users import router as users_router
from webapp.config import Settings, get_settings
from webapp.observability.logging import configure_logging
from webapp.observability.metrics import HttpMetrics
from webapp.observability.middleware import RequestTelemetryMiddleware
from webapp.observability.tracing import (
    add_event,
    configure_tracing,
    instrument_app,
    set_attributes,
    shutdown_tracing,
)
from webapp.services.user_store import UserStore


templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

ENDPOINTS = [
    ("GET", "/api/users", "Get all users"),
    ("GET", "/api/users/:id", "Get user by ID"),
    ("POST", "/api/users", "Create a new user"),
    ("GET", "/api/health", "Health check"),
    ("GET", "/api/slow", "Slow endpoint (for testing)"),
    ("GET", "/api/error", "Error endpoint (for testing)"),
    ("GET", "/metrics", "Prometheus metrics"),
]


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    logger = structlog.get_logger(__name__)
    logger.info(
        "Server started",
        port=settings.port,
        environment=settings.environment,
        pythonVersion=platform.python_version(),
    )

    yield

    # uvicorn turns SIGTERM into a lifespan shutdown, so queued spans get flushed here.
    try:
        shutdown_tracing(app.state.tracer_provider)
    except Exception:
        logger.exception("Error terminating tracing")
    else:
        if app.state.tracer_provider is not None:
            logger.info("Tracing terminated")


async def index(request: Request, span: Span | None = Depends(request_span)) -> HTMLResponse:
    add_event(span, "Handling root request")
    set_attributes(span, {"custom.route": "root", "custom.response_type": "html"})

    structlog.get_logger(__name__).info("Root endpoint accessed")

    return templates.TemplateResponse(request, "index.html", {"endpoints": ENDPOINTS})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Local O11y Stack - Sample App", version=settings.service_version, lifespan=_lifespan)
    app.state.settings = settings
    app.state.user_store = UserStore()
    app.state.http_metrics = HttpMetrics(app_label=settings.metrics_app_label)
    app.state.tracer_provider = configure_tracing(settings)

    app.add_middleware(RequestTelemetryMiddleware, metrics=app.state.http_metrics)
    # Added after our middleware so the server span wraps it.
    instrument_app(app, app.state.tracer_provider)

    app.add_api_route("/", index, methods=["GET"], response_class=HTMLResponse)
    app.include_router(health_router)
    app.include_router(users_router)
    app.include_router(testing_router)
    app.include_router(metrics_router)
    return app


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "webapp.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
