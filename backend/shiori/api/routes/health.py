"""Health check endpoints."""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from backend.shiori.db.engine import get_async_engine

router = APIRouter()


async def check_db() -> tuple[bool, str]:
    """Check database connectivity.

    Returns:
        (is_ok, status_message)
    """
    try:
        async with get_async_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return (True, "ok")
    except (SQLAlchemyError, OSError, ValueError) as e:
        return (False, f"error: {type(e).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness check; 200 whenever the application is running."""
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz() -> dict[str, Any] | JSONResponse:
    """Readiness check including the database.

    Returns:
        200 with component status if the database answers, 503 otherwise
    """
    db_ok, db_status = await check_db()
    body = {"status": "ok" if db_ok else "degraded", "components": {"db": db_status}}
    if not db_ok:
        return JSONResponse(content=body, status_code=503)
    return body
