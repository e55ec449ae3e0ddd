"""Map typed planner errors onto HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.shiori.errors import (
    ConflictError,
    GeocodingError,
    InvalidFormatError,
    InvalidInputError,
    NotFoundError,
    PlannerError,
    RoutingError,
    StorageError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[PlannerError], int] = {
    NotFoundError: 404,
    InvalidInputError: 400,
    InvalidFormatError: 400,
    ConflictError: 409,
    GeocodingError: 422,
    RoutingError: 502,
    StorageError: 500,
}


def status_for(exc: PlannerError) -> int:
    for error_cls, code in STATUS_BY_ERROR.items():
        if isinstance(exc, error_cls):
            return code
    return 500


async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    """Render a PlannerError as ``{"error": kind, "detail": message}``."""
    code = status_for(exc)
    if code >= 500:
        logger.error(f"[{request.method} {request.url.path}] {exc.kind}: {exc.message}")
    return JSONResponse(status_code=code, content={"error": exc.kind, "detail": exc.message})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PlannerError, planner_error_handler)  # type: ignore[arg-type]
