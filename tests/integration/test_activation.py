"""Integration tests for investment activation and rejection."""

from decimal import Decimal

import pytest

from invest_engine.models import ConfigScope, InvestmentStatus, RewardType
from invest_engine.repositories import (
    InvestmentRepository,
    PlanConfigRepository,
    RewardRecordRepository,
)
from invest_engine.services.investment import InvestmentActivationService
from invest_engine.services.plan import ConfigurationResolver
from invest_engine.utils.exceptions import ConfigurationError, ParticipantNotFoundError


class TestCreatePending:
    """Tests for pending investment creation."""

    @pytest.mark.asyncio
    async def test_defaults_from_owner(self, seeded_session, make_chain, million):
        """Referrer and org unit are taken from the owner."""
        owner, upline = await make_chain(1, org_unit_id=4)
        investment = await InvestmentActivationService(seeded_session).create_pending(
            owner.id, million, "with_product"
        )

        assert investment.status == InvestmentStatus.PENDING.value
        assert investment.referrer_id == upline.id
        assert investment.org_unit_id == 4
        assert investment.product_variant == "with_product"
        assert investment.profit_cap == Decimal("0")

    @pytest.mark.asyncio
    async def test_invalid_amount(self, seeded_session, make_chain):
        """Amounts must be positive."""
        owner, _ = await make_chain(1)
        owner_id = owner.id
        with pytest.raises(ValueError):
            await InvestmentActivationService(seeded_session).create_pending(
                owner_id, Decimal("0"), "without_product"
            )

    @pytest.mark.asyncio
    async def test_invalid_variant(self, seeded_session, make_chain, million):
        """Unknown product variants are rejected."""
        owner, _ = await make_chain(1)
        owner_id = owner.id
        with pytest.raises(ValueError):
            await InvestmentActivationService(seeded_session).create_pending(
                owner_id, million, "gold"
            )

    @pytest.mark.asyncio
    async def test_unknown_owner(self, seeded_session, million):
        """The owner must exist."""
        with pytest.raises(ParticipantNotFoundError):
            await InvestmentActivationService(seeded_session).create_pending(
                999, million, "without_product"
            )


class TestActivation:
    """Tests for pending -> active."""

    @pytest.mark.asyncio
    async def test_full_referral_cascade(self, seeded_session, make_chain, million, activated_at):
        """An eight-level upline shares 16% of the principal."""
        chain = await make_chain(8)
        service = InvestmentActivationService(seeded_session)
        pending = await service.create_pending(chain[0].id, million, "without_product")

        result = await service.activate(pending.id, now=activated_at)

        assert result.success is True
        assert result.rewards_count == 8
        assert result.referral_total == Decimal("160000")

        records = await RewardRecordRepository(seeded_session).get_by_investment(
            pending.id, reward_type=RewardType.REFERRAL_BONUS
        )
        assert [record.level for record in records] == [1, 2, 3, 4, 5, 6, 7, 8]
        assert [record.recipient_id for record in records] == [p.id for p in chain[1:]]
        assert records[0].amount == Decimal("60000")
        assert records[-1].amount == Decimal("5000")

    @pytest.mark.asyncio
    async def test_state_after_activation(self, seeded_session, make_chain, million, activated_at):
        """Activation sets phase 1, the cap and the plan snapshot."""
        owner, _ = await make_chain(1)
        service = InvestmentActivationService(seeded_session)
        pending = await service.create_pending(owner.id, million, "without_product")

        result = await service.activate(pending.id, now=activated_at)
        investment = result.investment

        assert investment.status == InvestmentStatus.ACTIVE.value
        assert investment.current_phase == 1
        assert investment.current_rate == Decimal("0.07")
        assert investment.months_completed == 0
        assert investment.profit_cap == Decimal("5000000")
        assert investment.total_profit_earned == Decimal("0")
        assert investment.activated_at == activated_at
        assert investment.plan_snapshot["horizon_months"] == 12

    @pytest.mark.asyncio
    async def test_root_owner_gets_no_bonus(self, seeded_session, make_chain, million, activated_at):
        """Without an upline nothing is paid but activation succeeds."""
        (owner,) = await make_chain(0)
        service = InvestmentActivationService(seeded_session)
        pending = await service.create_pending(owner.id, million, "without_product")

        result = await service.activate(pending.id, now=activated_at)
        assert result.success is True
        assert result.rewards_count == 0
        assert result.referral_total == Decimal("0")

    @pytest.mark.asyncio
    async def test_volumes_and_ranks(self, seeded_session, make_chain, activated_at):
        """Activation updates volumes and promotes the qualifying upline."""
        owner, level1, level2 = await make_chain(2)
        service = InvestmentActivationService(seeded_session)
        pending = await service.create_pending(owner.id, Decimal("2000000"), "without_product")

        result = await service.activate(pending.id, now=activated_at)

        assert [change.participant_id for change in result.promotions] == [level1.id]
        for participant in (owner, level1, level2):
            await seeded_session.refresh(participant)
        assert owner.self_volume == Decimal("2000000")
        assert level1.direct_volume == Decimal("2000000")
        assert level2.total_volume == Decimal("2000000")
        assert level1.rank == 1
        assert level2.rank == 0

    @pytest.mark.asyncio
    async def test_activate_twice_fails(self, seeded_session, make_chain, million, activated_at):
        """A second activation is refused and pays nothing more."""
        owner, _ = await make_chain(1)
        service = InvestmentActivationService(seeded_session)
        pending = await service.create_pending(owner.id, million, "without_product")
        investment_id = pending.id

        first = await service.activate(investment_id, now=activated_at)
        second = await service.activate(investment_id, now=activated_at)

        assert first.success is True
        assert second.success is False
        assert second.error_message
        assert await RewardRecordRepository(seeded_session).count_by_investment(investment_id) == 1

    @pytest.mark.asyncio
    async def test_activate_missing(self, seeded_session):
        """Unknown investments are reported, not raised."""
        result = await InvestmentActivationService(seeded_session).activate(12345)
        assert result.success is False

    @pytest.mark.asyncio
    async def test_missing_configuration_rolls_back(self, session, make_chain, million):
        """Without a global configuration the investment stays pending."""
        owner, _ = await make_chain(1)
        service = InvestmentActivationService(session)
        pending = await service.create_pending(owner.id, million, "without_product")
        investment_id = pending.id

        with pytest.raises(ConfigurationError):
            await service.activate(investment_id)

        stored = await InvestmentRepository(session).get_by_id(investment_id)
        await session.refresh(stored)
        assert stored.status == InvestmentStatus.PENDING.value
        assert await RewardRecordRepository(session).count_by_investment(investment_id) == 0

    @pytest.mark.asyncio
    async def test_snapshot_locks_configuration(self, seeded_session, make_chain, million, activate):
        """Overrides added after activation do not affect the investment."""
        owner, _ = await make_chain(1)
        investment = await activate(owner, million)

        await PlanConfigRepository(seeded_session).upsert(
            ConfigScope.PARTICIPANT, owner.id, profit_cap_multiplier=Decimal("2")
        )
        await seeded_session.commit()

        resolver = ConfigurationResolver(seeded_session)
        locked = await resolver.resolve_for_investment(investment)
        current = await resolver.resolve(owner.id)

        assert locked.profit_cap_multiplier == Decimal("5")
        assert current.profit_cap_multiplier == Decimal("2")

    @pytest.mark.asyncio
    async def test_participant_override_applies(self, seeded_session, make_chain, million, activate):
        """A participant override active at activation sets the cap."""
        owner, _ = await make_chain(1)
        await PlanConfigRepository(seeded_session).upsert(
            ConfigScope.PARTICIPANT, owner.id, profit_cap_multiplier=Decimal("3")
        )
        await seeded_session.commit()

        investment = await activate(owner, million)
        assert investment.profit_cap == Decimal("3000000")


class TestRejection:
    """Tests for pending -> rejected."""

    @pytest.mark.asyncio
    async def test_reject_pending(self, seeded_session, make_chain, million, activated_at):
        """Rejection records the reason and touches nothing else."""
        owner, upline = await make_chain(1)
        service = InvestmentActivationService(seeded_session)
        pending = await service.create_pending(owner.id, million, "without_product")

        result = await service.reject(pending.id, reason="KYC failed", now=activated_at)

        assert result.success is True
        assert result.investment.status == InvestmentStatus.REJECTED.value
        assert result.investment.rejection_reason == "KYC failed"
        assert await RewardRecordRepository(seeded_session).count_by_investment(pending.id) == 0
        await seeded_session.refresh(upline)
        assert upline.total_volume == Decimal("0")

    @pytest.mark.asyncio
    async def test_reject_active_fails(self, seeded_session, make_chain, million, activate):
        """Active investments cannot be rejected."""
        owner, _ = await make_chain(1)
        investment = await activate(owner, million)
        investment_id = investment.id

        result = await InvestmentActivationService(seeded_session).reject(investment_id)
        assert result.success is False

    @pytest.mark.asyncio
    async def test_rejected_cannot_activate(self, seeded_session, make_chain, million):
        """Rejection is terminal."""
        owner, _ = await make_chain(1)
        service = InvestmentActivationService(seeded_session)
        pending = await service.create_pending(owner.id, million, "without_product")
        investment_id = pending.id
        await service.reject(investment_id)

        result = await service.activate(investment_id)
        assert result.success is False
