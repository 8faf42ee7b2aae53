"""Tests for the scheduler process, health endpoint and distribution actor."""

import json
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import dramatiq
import pytest
from aiohttp.test_utils import make_mocked_request

from invest_engine.services.investment import JOB_NAME, BatchRunReport, BatchStats
from jobs import health
from jobs.scheduler import create_scheduler, enqueue_profit_distribution
from jobs.tasks.profit_distribution import process_profit_distribution


@pytest.fixture(autouse=True)
def clean_state():
    """Reset the health scheduler reference and the stub queues."""
    yield
    health.set_scheduler(None)
    dramatiq.get_broker().flush_all()


class TestHealthHandler:
    """Tests for the health endpoint."""

    @pytest.mark.asyncio
    async def test_no_scheduler(self):
        """Unhealthy before a scheduler is registered."""
        response = await health.health_handler(make_mocked_request("GET", "/health"))

        assert response.status == 503
        assert json.loads(response.text)["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_running_scheduler(self):
        """Healthy while the scheduler runs."""
        job = MagicMock(id=JOB_NAME, next_run_time=None)
        job.name = "Profit distribution"
        scheduler = MagicMock(running=True)
        scheduler.get_jobs.return_value = [job]
        health.set_scheduler(scheduler)

        response = await health.health_handler(make_mocked_request("GET", "/health"))
        body = json.loads(response.text)

        assert response.status == 200
        assert body["status"] == "healthy"
        assert body["jobs"] == [
            {"id": JOB_NAME, "name": "Profit distribution", "next_run_time": None}
        ]

    @pytest.mark.asyncio
    async def test_stopped_scheduler(self):
        """A stopped scheduler reports 503."""
        scheduler = MagicMock(running=False)
        scheduler.get_jobs.return_value = []
        health.set_scheduler(scheduler)

        response = await health.health_handler(make_mocked_request("GET", "/health"))
        assert response.status == 503

    @pytest.mark.asyncio
    async def test_liveness(self):
        """Liveness is always OK."""
        response = await health.liveness_handler(make_mocked_request("GET", "/liveness"))
        assert response.status == 200


class TestScheduler:
    """Tests for the APScheduler setup."""

    def test_distribution_job(self):
        """The distribution job never overlaps itself."""
        scheduler = create_scheduler(interval_minutes=15)
        job = scheduler.get_job(JOB_NAME)

        assert job is not None
        assert job.trigger.interval == timedelta(minutes=15)
        assert job.max_instances == 1
        assert job.coalesce is True

    def test_enqueue(self):
        """The scheduled job sends one actor message."""
        enqueue_profit_distribution()

        queue = dramatiq.get_broker().queues[process_profit_distribution.queue_name]
        assert queue.qsize() == 1


class TestProfitDistributionActor:
    """Tests for the dramatiq actor."""

    def test_actor_options(self):
        """Broker-level retries are disabled."""
        assert process_profit_distribution.options["max_retries"] == 0

    def test_runs_batch(self):
        """Calling the actor runs the batch once."""
        report = BatchRunReport(success=True, attempts=1, stats=BatchStats())
        batch = AsyncMock(return_value=report)

        with patch("jobs.tasks.profit_distribution._process_profit_distribution_async", batch):
            process_profit_distribution()

        batch.assert_awaited_once()

    def test_failed_batch_does_not_raise(self):
        """A failed report is logged, not raised."""
        report = BatchRunReport(success=False, attempts=3, error="db down")

        with patch(
            "jobs.tasks.profit_distribution._process_profit_distribution_async",
            AsyncMock(return_value=report),
        ):
            process_profit_distribution()
