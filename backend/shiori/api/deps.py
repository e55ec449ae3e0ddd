"""FastAPI dependencies for the planner core."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.shiori.config import get_settings
from backend.shiori.db.engine import get_session
from backend.shiori.planning.manager import ItineraryManager
from backend.shiori.transfer.codec import TransferCodec
from backend.shiori.travel.estimator import TravelEstimator


async def get_manager(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ItineraryManager:
    """One manager per request, bound to the request's session."""
    return ItineraryManager(session, settings=get_settings())


async def get_codec(
    manager: Annotated[ItineraryManager, Depends(get_manager)],
) -> TransferCodec:
    return TransferCodec(manager)


_estimator: TravelEstimator | None = None


def get_estimator() -> TravelEstimator:
    """Process-wide estimator so the geocoding rate limiter is shared by all requests."""
    global _estimator
    if _estimator is None:
        _estimator = TravelEstimator.from_settings(get_settings())
    return _estimator


ManagerDep = Annotated[ItineraryManager, Depends(get_manager)]
CodecDep = Annotated[TransferCodec, Depends(get_codec)]
EstimatorDep = Annotated[TravelEstimator, Depends(get_estimator)]
