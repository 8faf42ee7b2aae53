"""
BatchRunLog repository.

Data access layer for the append-only batch run log.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invest_engine.models.batch_run_log import BatchRunLog
from invest_engine.models.enums import BatchRunOutcome
from invest_engine.repositories.base import BaseRepository


class BatchRunLogRepository(BaseRepository[BatchRunLog]):
    """Batch run log queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize batch run log repository."""
        super().__init__(BatchRunLog, session)

    async def record(
        self,
        job_name: str,
        attempt: int,
        outcome: BatchRunOutcome,
        details: str | None = None,
        error: str | None = None,
        processed_count: int = 0,
        active_count: int = 0,
    ) -> BatchRunLog:
        """Append a log entry."""
        return await self.create(
            job_name=job_name,
            attempt=attempt,
            outcome=outcome.value,
            details=details,
            error=error,
            processed_count=processed_count,
            active_count=active_count,
        )

    async def get_recent(self, job_name: str, limit: int = 20) -> list[BatchRunLog]:
        """
        Most recent entries for a job, newest first.

        Args:
            job_name: Job name
            limit: Max number of results
        """
        stmt = (
            select(BatchRunLog)
            .where(BatchRunLog.job_name == job_name)
            .order_by(BatchRunLog.id.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
