"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint.

    Exposes:
    - travel_provider_latency_ms{provider, outcome}
    - travel_provider_errors_total{provider, reason}
    - itinerary_transfers_total{direction, outcome}
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
