"""
Scheduler process.

Enqueues the profit distribution actor on a fixed interval and serves the
health endpoint. Workers are started separately:

    dramatiq jobs.broker jobs.tasks.profit_distribution
    python -m jobs.scheduler
"""

import asyncio
import signal

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from invest_engine.config.logging import setup_logging
from invest_engine.config.settings import settings
from invest_engine.services.investment.scheduler import JOB_NAME
from jobs.health import set_scheduler, start_health_server, stop_health_server


def enqueue_profit_distribution() -> None:
    """Send the distribution actor message."""
    from jobs.tasks.profit_distribution import process_profit_distribution

    process_profit_distribution.send()
    logger.info("Profit distribution enqueued")


def create_scheduler(interval_minutes: int | None = None) -> AsyncIOScheduler:
    """
    Build the scheduler with the distribution job.

    The job never overlaps itself: max_instances=1 and missed runs are
    coalesced into one.

    Args:
        interval_minutes: Trigger interval (defaults to settings)
    """
    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        enqueue_profit_distribution,
        IntervalTrigger(minutes=interval_minutes or settings.distribution_interval_minutes),
        id=JOB_NAME,
        name="Profit distribution",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler


async def main() -> None:
    """Run the scheduler until SIGINT/SIGTERM."""
    import jobs.broker  # noqa: F401  # sets the Redis broker before actors are used

    setup_logging()

    scheduler = create_scheduler()
    scheduler.start()
    set_scheduler(scheduler)
    logger.info(
        f"Scheduler started: profit distribution every "
        f"{settings.distribution_interval_minutes} minutes"
    )

    runner = await start_health_server(port=settings.health_check_port)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    try:
        await stop_event.wait()
    finally:
        scheduler.shutdown(wait=False)
        set_scheduler(None)
        await stop_health_server(runner)
        logger.info("Scheduler stopped")


if __name__ == "__main__":
    asyncio.run(main())
