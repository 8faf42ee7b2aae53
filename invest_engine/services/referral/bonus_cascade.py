"""
Bonus cascades.

Instant referral bonus on activation and matching bonus on every profit
distribution. Both walk the owner's upline and append reward records; the
caller owns the transaction.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from invest_engine.models.enums import RewardType
from invest_engine.models.investment import Investment
from invest_engine.models.participant import Participant
from invest_engine.repositories.participant_repository import ParticipantRepository
from invest_engine.repositories.reward_record_repository import RewardRecordRepository
from invest_engine.services.referral.graph_walker import ReferralGraphWalker
from plan_calculator.core.models import EffectiveConfiguration


@dataclass
class CascadeResult:
    """Result of a bonus cascade."""

    reward_type: RewardType
    total_rewards: Decimal = Decimal("0")
    rewards_count: int = 0
    levels_visited: int = 0


class BonusCascade:
    """Creates referral and matching bonus records along the upline."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize bonus cascade.

        Args:
            session: Async database session
        """
        self.session = session
        self.walker = ReferralGraphWalker(session)
        self.participant_repo = ParticipantRepository(session)
        self.reward_repo = RewardRecordRepository(session)

    async def distribute_instant(
        self, investment: Investment, configuration: EffectiveConfiguration
    ) -> CascadeResult:
        """
        Referral bonus on a newly activated principal.

        Level L of the owner's upline receives principal * referral_rate[L].

        Args:
            investment: Investment that was just activated
            configuration: Configuration locked at activation

        Returns:
            CascadeResult
        """
        return await self._cascade(
            investment=investment,
            reward_type=RewardType.REFERRAL_BONUS,
            rates=configuration.referral_bonus_rates,
            base_amount=investment.amount,
        )

    async def distribute_matching(
        self,
        investment: Investment,
        distributed_amount: Decimal,
        configuration: EffectiveConfiguration,
    ) -> CascadeResult:
        """
        Matching bonus on a profit distribution.

        Level L of the owner's upline receives distributed_amount *
        matching_rate[L]. distributed_amount is the capped increment.

        Args:
            investment: Investment whose profit was distributed
            distributed_amount: Profit actually credited to the owner
            configuration: Configuration locked at activation

        Returns:
            CascadeResult
        """
        return await self._cascade(
            investment=investment,
            reward_type=RewardType.MATCHING_BONUS,
            rates=configuration.matching_bonus_rates,
            base_amount=distributed_amount,
        )

    async def _cascade(
        self,
        investment: Investment,
        reward_type: RewardType,
        rates: Sequence[Decimal],
        base_amount: Decimal,
    ) -> CascadeResult:
        result = CascadeResult(reward_type=reward_type)
        if base_amount <= 0 or not rates:
            return result

        owner = await self.participant_repo.get_by_id(investment.participant_id)
        if owner is None or owner.upline_id is None:
            logger.debug(
                "No upline for bonus cascade",
                extra={
                    "investment_id": investment.id,
                    "participant_id": investment.participant_id,
                    "reward_type": reward_type.value,
                },
            )
            return result

        label = "Referral bonus" if reward_type == RewardType.REFERRAL_BONUS else "Matching bonus"

        async def emit(
            participant: Participant, level: int, rate: Decimal, amount: Decimal
        ) -> None:
            await self.reward_repo.create(
                investment_id=investment.id,
                recipient_id=participant.id,
                reward_type=reward_type.value,
                amount=amount,
                level=level,
                rate=rate,
                description=f"{label} level {level} from investment {investment.id}",
            )

        walk = await self.walker.walk(owner.upline_id, rates, base_amount, emit)
        result.total_rewards = walk.total_emitted
        result.rewards_count = walk.emitted_count
        result.levels_visited = walk.levels_visited

        logger.info(
            f"{label} cascade processed",
            extra={
                "investment_id": investment.id,
                "base_amount": str(base_amount),
                "total_rewards": str(result.total_rewards),
                "rewards_count": result.rewards_count,
            },
        )
        return result
