"""Export/import endpoints - GET /itineraries/{id}/export, POST /itineraries/import."""

from typing import Any

from fastapi import APIRouter, Body, status
from fastapi.responses import JSONResponse

from backend.shiori.api.deps import CodecDep
from backend.shiori.models.transfer import ImportResult

router = APIRouter(prefix="/itineraries", tags=["transfer"])


@router.get("/{itinerary_id}/export")
async def export_itinerary(itinerary_id: str, codec: CodecDep) -> JSONResponse:
    """Download the itinerary as a transfer document."""
    document = await codec.export_itinerary(itinerary_id)
    return JSONResponse(
        content=document.model_dump(mode="json", by_alias=True),
        headers={"Content-Disposition": f'attachment; filename="itinerary-{itinerary_id}.json"'},
    )


@router.post("/import", response_model=ImportResult, status_code=status.HTTP_201_CREATED)
async def import_itinerary(
    codec: CodecDep,
    document: Any = Body(...),
) -> ImportResult:
    """Create a new itinerary from a transfer document.

    The body is taken as raw JSON so a malformed document is reported as
    ``invalid_format`` rather than a request validation error.
    """
    return await codec.import_itinerary(document)
