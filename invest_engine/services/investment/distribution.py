"""
Profit distribution step.

Distributes one month of profit for a single investment: phase rate,
profit cap, profit-share record, matching cascade, phase transition and
completion.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from invest_engine.models.enums import (
    CompletionReason,
    InvestmentStatus,
    ProductVariant,
    RewardType,
)
from invest_engine.repositories.investment_repository import InvestmentRepository
from invest_engine.repositories.participant_repository import ParticipantRepository
from invest_engine.repositories.reward_record_repository import RewardRecordRepository
from invest_engine.services.plan.config_resolver import ConfigurationResolver
from invest_engine.services.referral.bonus_cascade import BonusCascade
from invest_engine.utils.datetime_utils import ensure_utc, utc_now
from invest_engine.utils.db_decorators import with_rollback_on_error
from plan_calculator.core.phase_model import PhaseModel
from plan_calculator.core.profit_cap import ProfitCapGuard

# Skip reasons
SKIP_NOT_FOUND = "not_found"
SKIP_NOT_ACTIVE = "not_active"
SKIP_OWNER_INACTIVE = "owner_inactive"
SKIP_NOT_MATURE = "not_mature"


@dataclass
class DistributionOutcome:
    """Result of one distribution step."""

    investment_id: int
    distributed: bool = False
    skipped_reason: str | None = None
    amount: Decimal = Decimal("0")
    matching_total: Decimal = Decimal("0")
    cap_reached: bool = False
    phase_transitioned: bool = False
    completed: bool = False


class DistributionProcessor:
    """Per-investment distribution step. Commits once per investment."""

    def __init__(self, session: AsyncSession, maturity_interval: timedelta) -> None:
        """
        Initialize distribution processor.

        Args:
            session: Async database session
            maturity_interval: Minimum time between two distributions
        """
        self.session = session
        self.maturity_interval = maturity_interval
        self.investment_repo = InvestmentRepository(session)
        self.participant_repo = ParticipantRepository(session)
        self.reward_repo = RewardRecordRepository(session)
        self.resolver = ConfigurationResolver(session)
        self.cascade = BonusCascade(session)
        self.cap_guard = ProfitCapGuard()

    @with_rollback_on_error
    async def process(
        self, investment_id: int, now: datetime | None = None
    ) -> DistributionOutcome:
        """
        Distribute one month of profit if the investment is due.

        Args:
            investment_id: Investment to process
            now: Distribution time (defaults to current UTC time)

        Returns:
            DistributionOutcome
        """
        now = now or utc_now()
        outcome = DistributionOutcome(investment_id=investment_id)

        investment = await self.investment_repo.get_for_update(investment_id)
        if investment is None:
            outcome.skipped_reason = SKIP_NOT_FOUND
            return outcome
        if investment.status != InvestmentStatus.ACTIVE.value:
            outcome.skipped_reason = SKIP_NOT_ACTIVE
            await self.session.commit()
            return outcome

        owner = await self.participant_repo.get_by_id(investment.participant_id)
        if owner is None or not owner.is_active:
            outcome.skipped_reason = SKIP_OWNER_INACTIVE
            await self.session.commit()
            return outcome

        reference = ensure_utc(investment.last_distribution_at or investment.activated_at)
        if reference is not None and now - reference < self.maturity_interval:
            outcome.skipped_reason = SKIP_NOT_MATURE
            await self.session.commit()
            return outcome

        configuration = await self.resolver.resolve_for_investment(investment)
        phase_model = PhaseModel(
            configuration.phases_for(ProductVariant(investment.product_variant))
        )

        rate = phase_model.rate_for_phase(investment.current_phase)
        raw_profit = investment.amount * rate
        check = self.cap_guard.check(
            investment.total_profit_earned, investment.profit_cap, raw_profit
        )
        outcome.cap_reached = check.cap_reached

        if check.allowed_amount > 0:
            await self.reward_repo.create(
                investment_id=investment.id,
                recipient_id=investment.participant_id,
                reward_type=RewardType.PROFIT_SHARE.value,
                amount=check.allowed_amount,
                level=0,
                rate=rate,
                description=(
                    f"Monthly profit phase {investment.current_phase} "
                    f"for investment {investment.id}"
                ),
            )
            matching = await self.cascade.distribute_matching(
                investment, check.allowed_amount, configuration
            )
            await self.investment_repo.record_distribution(
                investment.id, check.allowed_amount, now
            )
            await self.session.refresh(investment)

            outcome.distributed = True
            outcome.amount = check.allowed_amount
            outcome.matching_total = matching.total_rewards

        months_in_phase = investment.months_completed - phase_model.months_before_phase(
            investment.current_phase
        )
        transition = phase_model.evaluate_transition(
            investment.current_phase, months_in_phase
        )
        if transition.transitioned:
            logger.info(
                "Investment phase transition",
                extra={
                    "investment_id": investment.id,
                    "from_phase": investment.current_phase,
                    "to_phase": transition.phase.phase,
                    "rate": str(transition.phase.rate),
                },
            )
            investment.current_phase = transition.phase.phase
            investment.current_rate = transition.phase.rate
            investment.phase_started_at = now
            outcome.phase_transitioned = True

        completion_reason = None
        if check.cap_reached:
            completion_reason = CompletionReason.CAP_REACHED
        elif investment.months_completed >= configuration.horizon_months:
            completion_reason = CompletionReason.HORIZON_ELAPSED

        if completion_reason is not None:
            investment.status = InvestmentStatus.COMPLETED.value
            investment.completed_at = now
            investment.completion_reason = completion_reason.value
            outcome.completed = True
            logger.info(
                "Investment completed",
                extra={
                    "investment_id": investment.id,
                    "reason": completion_reason.value,
                    "total_profit_earned": str(investment.total_profit_earned),
                    "months_completed": investment.months_completed,
                },
            )

        await self.session.commit()

        if outcome.distributed:
            logger.info(
                "Profit distributed",
                extra={
                    "investment_id": investment.id,
                    "amount": str(outcome.amount),
                    "rate": str(rate),
                    "cap_reached": check.cap_reached,
                    "matching_total": str(outcome.matching_total),
                },
            )
        return outcome
