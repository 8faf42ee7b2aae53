"""
Profit distribution task.

Runs the distribution batch over all active investments. Triggered on an
interval by the scheduler process.
"""

import dramatiq
from loguru import logger

from invest_engine.services.investment.scheduler import (
    BatchRunReport,
    DistributionScheduler,
)
from jobs.async_runner import run_async, task_session_factory


@dramatiq.actor(max_retries=0, time_limit=3_600_000)  # 1 hour; retries happen in-process
def process_profit_distribution() -> None:
    """
    Distribute monthly profit for every due investment.

    The batch retries itself (bounded, fixed delay) and records each run
    in the batch run log, so the actor never retries at the broker level.
    """
    logger.info("Starting profit distribution...")

    report = run_async(_process_profit_distribution_async())

    if report.skipped:
        logger.warning("Profit distribution skipped (emergency stop)")
    elif report.success:
        logger.info(
            f"Profit distribution complete after {report.attempts} attempt(s): "
            f"{report.stats.summary() if report.stats else ''}"
        )
    else:
        logger.error(f"Profit distribution failed: {report.error}")


async def _process_profit_distribution_async() -> BatchRunReport:
    """Async implementation of profit distribution."""
    async with task_session_factory() as session_factory:
        scheduler = DistributionScheduler(session_factory)
        return await scheduler.run()
