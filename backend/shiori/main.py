"""FastAPI application."""

from fastapi import FastAPI

from backend.shiori.api.errors import register_error_handlers
from backend.shiori.api.routes.budgets import router as budgets_router
from backend.shiori.api.routes.events import router as events_router
from backend.shiori.api.routes.expenses import router as expenses_router
from backend.shiori.api.routes.health import router as health_router
from backend.shiori.api.routes.itineraries import router as itineraries_router
from backend.shiori.api.routes.metrics import router as metrics_router
from backend.shiori.api.routes.packing_items import router as packing_items_router
from backend.shiori.api.routes.reservations import router as reservations_router
from backend.shiori.api.routes.transfer import router as transfer_router
from backend.shiori.api.routes.travel import router as travel_router

app = FastAPI(title="Shiori Travel Planner API", version="0.1.0")

register_error_handlers(app)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(transfer_router)
app.include_router(itineraries_router)
app.include_router(events_router)
app.include_router(packing_items_router)
app.include_router(budgets_router)
app.include_router(expenses_router)
app.include_router(reservations_router)
app.include_router(travel_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Shiori Travel Planner API", "version": "0.1.0"}
