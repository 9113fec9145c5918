import asyncio
import logging

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.database import models
from app.schemas import IssueStats, IssueStatus

logger = logging.getLogger(__name__)

# Rejected issues only show up in the total
STATUS_BREAKDOWN = {
    "pending": IssueStatus.PENDING,
    "in_progress": IssueStatus.IN_PROGRESS,
    "resolved": IssueStatus.RESOLVED,
}


class StatsAggregator:
    """
    Counts issues overall and per status.

    Every count runs on its own session so the queries can be issued
    concurrently. A count that fails is logged and reported as 0 while
    the remaining counts are still returned.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    def _queries(self) -> dict[str, Select]:
        queries = {"total": select(func.count()).select_from(models.Issue)}
        for field, status in STATUS_BREAKDOWN.items():
            queries[field] = (
                select(func.count())
                .select_from(models.Issue)
                .where(models.Issue.status == status.value)
            )
        return queries

    async def compute(self) -> IssueStats:
        queries = self._queries()
        counts = await asyncio.gather(
            *(self._count(field, query) for field, query in queries.items())
        )
        return IssueStats(**dict(zip(queries, counts)))

    async def _count(self, field: str, query: Select) -> int:
        try:
            async with self.session_factory() as session:
                result = await session.execute(query)
                return result.scalar_one()
        except Exception:
            logger.exception(
                f"Count for {field} failed, reporting 0",
                extra={"field": field},
            )
            return 0
