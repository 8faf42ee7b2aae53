"""
Distribution scheduler.

Runs the distribution step over all active investments, retrying the
whole batch a bounded number of times and recording every run in the
batch run log.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from invest_engine.config.settings import settings
from invest_engine.models.enums import BatchRunOutcome
from invest_engine.repositories.batch_run_log_repository import BatchRunLogRepository
from invest_engine.repositories.investment_repository import InvestmentRepository
from invest_engine.services.investment.distribution import (
    DistributionOutcome,
    DistributionProcessor,
)
from invest_engine.utils.datetime_utils import utc_now

JOB_NAME = "profit_distribution"


@dataclass
class BatchStats:
    """Statistics for one batch pass."""

    active_count: int = 0
    distributed_count: int = 0
    skipped_count: int = 0
    completed_count: int = 0
    phase_transitions: int = 0
    total_distributed: Decimal = Decimal("0")
    total_matching: Decimal = Decimal("0")
    skipped_reasons: dict[str, int] = field(default_factory=dict)

    def add(self, outcome: DistributionOutcome) -> None:
        """Fold one distribution outcome into the totals."""
        if outcome.distributed:
            self.distributed_count += 1
            self.total_distributed += outcome.amount
            self.total_matching += outcome.matching_total
        elif outcome.skipped_reason:
            self.skipped_count += 1
            self.skipped_reasons[outcome.skipped_reason] = (
                self.skipped_reasons.get(outcome.skipped_reason, 0) + 1
            )
        if outcome.completed:
            self.completed_count += 1
        if outcome.phase_transitioned:
            self.phase_transitions += 1

    def summary(self) -> str:
        """One-line summary for the batch run log."""
        return (
            f"active={self.active_count} distributed={self.distributed_count} "
            f"skipped={self.skipped_count} completed={self.completed_count} "
            f"transitions={self.phase_transitions} "
            f"profit={self.total_distributed} matching={self.total_matching}"
        )


@dataclass
class BatchRunReport:
    """Outcome of a scheduler run (all attempts)."""

    success: bool
    attempts: int
    stats: BatchStats | None = None
    error: str | None = None
    skipped: bool = False


class DistributionScheduler:
    """
    Batch driver for profit distribution.

    run() never raises: the final failure is logged and recorded.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        maturity_interval: timedelta | None = None,
        max_attempts: int | None = None,
        retry_delay_seconds: float | None = None,
        emergency_stop: bool | None = None,
    ) -> None:
        """
        Initialize scheduler.

        Unset arguments fall back to settings.

        Args:
            session_factory: Session factory; each attempt opens a fresh session
            maturity_interval: Minimum time between two distributions
            max_attempts: Batch attempts before giving up
            retry_delay_seconds: Fixed delay between attempts
            emergency_stop: Skip distribution entirely
        """
        self.session_factory = session_factory
        self.maturity_interval = maturity_interval or timedelta(
            seconds=settings.maturity_interval_seconds
        )
        self.max_attempts = max_attempts or settings.distribution_max_attempts
        self.retry_delay_seconds = (
            settings.distribution_retry_delay_seconds
            if retry_delay_seconds is None
            else retry_delay_seconds
        )
        self.emergency_stop = (
            settings.emergency_stop_distribution if emergency_stop is None else emergency_stop
        )

    async def run_once(self, now: datetime | None = None) -> BatchStats:
        """
        Process every active investment once, in ascending id order.

        Each investment commits on its own, so progress made before an
        error is kept.

        Raises:
            Exception: Any error from a distribution step
        """
        stats = BatchStats()
        async with self.session_factory() as session:
            investment_ids = await InvestmentRepository(session).get_active_ids()
            stats.active_count = len(investment_ids)

            processor = DistributionProcessor(session, self.maturity_interval)
            for investment_id in investment_ids:
                outcome = await processor.process(investment_id, now or utc_now())
                stats.add(outcome)

        return stats

    async def run(self, now: datetime | None = None) -> BatchRunReport:
        """
        Run the batch with bounded retries.

        Returns:
            BatchRunReport
        """
        if self.emergency_stop:
            logger.warning("Profit distribution skipped: emergency stop is enabled")
            await self._record(
                attempt=0,
                outcome=BatchRunOutcome.SUCCESS,
                details="Skipped: emergency stop enabled",
            )
            return BatchRunReport(success=True, attempts=0, skipped=True)

        last_error: Exception | None = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                stats = await self.run_once(now)
            except Exception as e:
                last_error = e
                # Error text may contain braces, so it is passed as an argument
                logger.bind(attempt=attempt, error_type=type(e).__name__).warning(
                    "Profit distribution attempt {}/{} failed: {}",
                    attempt,
                    self.max_attempts,
                    e,
                )
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.retry_delay_seconds)
                continue

            logger.bind(attempt=attempt, active_count=stats.active_count).info(
                "Profit distribution completed: {}", stats.summary()
            )
            await self._record(
                attempt=attempt,
                outcome=BatchRunOutcome.SUCCESS,
                details=stats.summary(),
                processed_count=stats.distributed_count,
                active_count=stats.active_count,
            )
            return BatchRunReport(success=True, attempts=attempt, stats=stats)

        logger.opt(exception=last_error).error(
            f"Profit distribution failed after {self.max_attempts} attempts"
        )
        await self._record(
            attempt=self.max_attempts,
            outcome=BatchRunOutcome.FAILED,
            details=f"Failed after {self.max_attempts} attempts",
            error=f"{type(last_error).__name__}: {last_error}",
        )
        return BatchRunReport(
            success=False, attempts=self.max_attempts, error=str(last_error)
        )

    async def _record(
        self,
        attempt: int,
        outcome: BatchRunOutcome,
        details: str | None = None,
        error: str | None = None,
        processed_count: int = 0,
        active_count: int = 0,
    ) -> None:
        try:
            async with self.session_factory() as session:
                await BatchRunLogRepository(session).record(
                    job_name=JOB_NAME,
                    attempt=attempt,
                    outcome=outcome,
                    details=details,
                    error=error,
                    processed_count=processed_count,
                    active_count=active_count,
                )
                await session.commit()
        except Exception as e:
            # The run outcome is already logged above
            logger.exception(f"Failed to write batch run log: {e}")
