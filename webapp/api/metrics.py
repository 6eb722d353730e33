from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from webapp.api.deps import get_http_metrics
from webapp.observability.metrics import HttpMetrics


router = APIRouter(tags=["metrics"])


@router.get("/metrics")
async def metrics(http_metrics: HttpMetrics = Depends(get_http_metrics)) -> Response:
    return Response(content=http_metrics.render(), media_type=http_metrics.content_type)
