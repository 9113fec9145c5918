from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.database.config import get_session_factory
from app.repositories import StatsAggregator
from app.schemas import IssueStats

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("", response_model=IssueStats)
async def get_stats(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """Issue counts: total and per status (pending, in progress, resolved)."""
    return await StatsAggregator(session_factory).compute()
