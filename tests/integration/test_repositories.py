"""Integration tests for repositories against an in-memory database."""

from decimal import Decimal

import pytest

from invest_engine.models import (
    BatchRunOutcome,
    ConfigScope,
    Investment,
    InvestmentStatus,
    Participant,
    RewardRecord,
    RewardType,
)
from invest_engine.repositories import (
    BatchRunLogRepository,
    InvestmentRepository,
    ParticipantRepository,
    PlanConfigRepository,
    RewardRecordRepository,
)
from invest_engine.utils.exceptions import ImmutableRecordError


async def add_investment(session, participant_id, amount=Decimal("1000")):
    """Insert a pending investment."""
    investment = Investment(
        participant_id=participant_id,
        amount=amount,
        product_variant="without_product",
    )
    session.add(investment)
    await session.flush()
    return investment


class TestInvestmentRepository:
    """Tests for investment lookups."""

    @pytest.mark.asyncio
    async def test_active_and_by_participant(self, session, make_chain):
        """Status filters select the right rows in id order."""
        owner, upline = await make_chain(1)
        pending = await add_investment(session, owner.id)
        active = await add_investment(session, owner.id)
        active.status = InvestmentStatus.ACTIVE.value
        other = await add_investment(session, upline.id)
        other.status = InvestmentStatus.ACTIVE.value
        await session.flush()

        repo = InvestmentRepository(session)

        assert [i.id for i in await repo.get_active()] == [active.id, other.id]
        assert await repo.get_active_ids() == [active.id, other.id]
        assert [i.id for i in await repo.get_by_participant(owner.id)] == [
            pending.id,
            active.id,
        ]
        only_pending = await repo.get_by_participant(owner.id, InvestmentStatus.PENDING)
        assert [i.id for i in only_pending] == [pending.id]


class TestParticipantRepository:
    """Tests for participant lookups."""

    @pytest.mark.asyncio
    async def test_direct_downline(self, session, make_chain):
        """Only participants directly below are returned."""
        owner, level1, level2 = await make_chain(2)
        sibling = Participant(display_name="Sibling", upline_id=level1.id)
        session.add(sibling)
        await session.flush()

        repo = ParticipantRepository(session)

        downline = await repo.get_direct_downline(level1.id)
        assert [p.id for p in downline] == [owner.id, sibling.id]
        assert [p.id for p in await repo.get_direct_downline(level2.id)] == [level1.id]
        assert await repo.get_direct_downline(owner.id) == []

    @pytest.mark.asyncio
    async def test_upline_ids(self, session, make_chain):
        """Upline ids are listed nearest first."""
        owner, level1, level2 = await make_chain(2)
        ids = await ParticipantRepository(session).get_upline_ids(owner.id)
        assert ids == [level1.id, level2.id]


class TestRewardRecordRepository:
    """Tests for the reward ledger."""

    @pytest.mark.asyncio
    async def test_summary_by_type(self, session, make_chain):
        """Earnings are grouped per type with a total."""
        owner, upline = await make_chain(1)
        investment = await add_investment(session, owner.id)
        repo = RewardRecordRepository(session)

        await repo.create(
            investment_id=investment.id, recipient_id=upline.id,
            reward_type=RewardType.REFERRAL_BONUS.value, amount=Decimal("60"),
            level=1, rate=Decimal("0.06"),
        )
        await repo.create(
            investment_id=investment.id, recipient_id=upline.id,
            reward_type=RewardType.MATCHING_BONUS.value, amount=Decimal("4.2"),
            level=1, rate=Decimal("0.06"),
        )

        summary = await repo.get_summary_by_type(upline.id)
        assert summary["referral_bonus"] == Decimal("60")
        assert summary["matching_bonus"] == Decimal("4.2")
        assert summary["profit_share"] == Decimal("0")
        assert summary["total"] == Decimal("64.2")
        assert await repo.get_lifetime_earnings(upline.id) == Decimal("64.2")
        assert await repo.get_lifetime_earnings(owner.id) == Decimal("0")

    @pytest.mark.asyncio
    async def test_records_are_append_only(self, session, make_chain):
        """Updating or deleting a persisted reward record is refused."""
        owner, upline = await make_chain(1)
        investment = await add_investment(session, owner.id)
        record = await RewardRecordRepository(session).create(
            investment_id=investment.id, recipient_id=upline.id,
            reward_type=RewardType.REFERRAL_BONUS.value, amount=Decimal("60"),
            level=1, rate=Decimal("0.06"),
        )
        record_id = record.id
        await session.commit()

        record.amount = Decimal("1")
        with pytest.raises(ImmutableRecordError):
            await session.flush()
        await session.rollback()

        stored = await session.get(RewardRecord, record_id)
        await session.delete(stored)
        with pytest.raises(ImmutableRecordError):
            await session.flush()

    @pytest.mark.asyncio
    async def test_no_mutation_api(self, session):
        """The ledger repository exposes no update or delete."""
        repo = RewardRecordRepository(session)
        assert not hasattr(repo, "update")
        assert not hasattr(repo, "delete")


class TestBatchRunLogRepository:
    """Tests for the batch run log."""

    @pytest.mark.asyncio
    async def test_recent_newest_first(self, session):
        """get_recent returns entries for one job, newest first."""
        repo = BatchRunLogRepository(session)
        await repo.record("profit_distribution", 1, BatchRunOutcome.FAILED, error="boom")
        await repo.record("profit_distribution", 2, BatchRunOutcome.SUCCESS, details="ok")
        await repo.record("other_job", 1, BatchRunOutcome.SUCCESS)

        recent = await repo.get_recent("profit_distribution")
        assert [entry.attempt for entry in recent] == [2, 1]
        assert recent[0].outcome == "success"
        assert recent[1].error == "boom"

    @pytest.mark.asyncio
    async def test_log_is_append_only(self, session):
        """Log entries cannot be edited."""
        entry = await BatchRunLogRepository(session).record(
            "profit_distribution", 1, BatchRunOutcome.SUCCESS
        )
        entry.details = "changed"
        with pytest.raises(ImmutableRecordError):
            await session.flush()


class TestPlanConfigRepository:
    """Tests for configuration layers."""

    @pytest.mark.asyncio
    async def test_upsert_increments_version(self, session):
        """Each upsert of the same scope bumps the version."""
        repo = PlanConfigRepository(session)
        first = await repo.upsert(ConfigScope.ORG_UNIT, 7, profit_cap_multiplier=Decimal("4"))
        assert first.version == 1

        second = await repo.upsert(ConfigScope.ORG_UNIT, 7, horizon_months=12)
        assert second.id == first.id
        assert second.version == 2
        assert second.profit_cap_multiplier is None
        assert second.horizon_months == 12

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, session):
        """Only override fields can be stored."""
        with pytest.raises(ValueError):
            await PlanConfigRepository(session).upsert(ConfigScope.GLOBAL, colour="red")
