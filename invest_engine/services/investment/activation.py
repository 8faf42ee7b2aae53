"""
Investment activation.

Approval entry point: pending -> active (with instant referral bonus,
business volume and rank updates) or pending -> rejected.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from invest_engine.models.enums import InvestmentStatus, ProductVariant
from invest_engine.models.investment import Investment
from invest_engine.repositories.investment_repository import InvestmentRepository
from invest_engine.repositories.participant_repository import ParticipantRepository
from invest_engine.services.plan.config_resolver import (
    ConfigurationResolver,
    configuration_to_layer,
)
from invest_engine.services.referral.bonus_cascade import BonusCascade
from invest_engine.services.referral.business_volume import BusinessVolumeUpdater
from invest_engine.services.referral.rank_progression import (
    RankChange,
    RankProgressionEvaluator,
)
from invest_engine.utils.datetime_utils import utc_now
from invest_engine.utils.db_decorators import with_rollback_on_error
from invest_engine.utils.exceptions import (
    InvalidStateTransitionError,
    ParticipantNotFoundError,
)
from plan_calculator.core.phase_model import PhaseModel
from plan_calculator.core.profit_cap import ProfitCapGuard


@dataclass
class ActivationResult:
    """Result of an activation or rejection."""

    success: bool
    investment: Investment | None = None
    error_message: str | None = None
    referral_total: Decimal = Decimal("0")
    rewards_count: int = 0
    promotions: list[RankChange] = field(default_factory=list)


class InvestmentActivationService:
    """
    Investment approval workflow.

    Activation runs in one transaction: state change, plan snapshot,
    referral bonus cascade, business volume and rank progression. Any
    error rolls the whole activation back.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize activation service.

        Args:
            session: Async database session
        """
        self.session = session
        self.investment_repo = InvestmentRepository(session)
        self.participant_repo = ParticipantRepository(session)
        self.resolver = ConfigurationResolver(session)
        self.cascade = BonusCascade(session)
        self.volume_updater = BusinessVolumeUpdater(session)
        self.rank_evaluator = RankProgressionEvaluator(session)
        self.cap_guard = ProfitCapGuard()

    @with_rollback_on_error
    async def create_pending(
        self,
        participant_id: int,
        amount: Decimal,
        product_variant: ProductVariant | str,
        referrer_id: int | None = None,
    ) -> Investment:
        """
        Record a new investment awaiting approval.

        The referrer defaults to the owner's upline and the organizational
        unit is copied from the owner.

        Raises:
            ValueError: Non-positive amount or unknown product variant
            ParticipantNotFoundError: Owner does not exist
        """
        if amount <= 0:
            raise ValueError(f"Investment amount must be positive, got {amount}")
        variant = ProductVariant(product_variant)

        owner = await self.participant_repo.get_by_id(participant_id)
        if owner is None:
            raise ParticipantNotFoundError(participant_id)

        investment = await self.investment_repo.create(
            participant_id=participant_id,
            referrer_id=referrer_id if referrer_id is not None else owner.upline_id,
            org_unit_id=owner.org_unit_id,
            amount=amount,
            product_variant=variant.value,
            status=InvestmentStatus.PENDING.value,
        )
        await self.session.commit()

        logger.info(
            "Investment created",
            extra={
                "investment_id": investment.id,
                "participant_id": participant_id,
                "amount": str(amount),
                "product_variant": variant.value,
            },
        )
        return investment

    async def activate(
        self, investment_id: int, now: datetime | None = None
    ) -> ActivationResult:
        """
        Activate a pending investment.

        Args:
            investment_id: Investment to activate
            now: Activation time (defaults to current UTC time)

        Returns:
            ActivationResult. Status errors are reported in the result;
            configuration and database errors propagate.

        Raises:
            ConfigurationError: No usable plan configuration
        """
        try:
            return await self._activate(investment_id, now or utc_now())
        except InvalidStateTransitionError as e:
            logger.warning(
                "Investment activation refused",
                extra={"investment_id": investment_id, "status": e.current},
            )
            return ActivationResult(success=False, error_message=str(e))

    @with_rollback_on_error
    async def _activate(self, investment_id: int, now: datetime) -> ActivationResult:
        investment = await self.investment_repo.get_for_update(investment_id)
        if investment is None:
            return ActivationResult(
                success=False, error_message=f"Investment {investment_id} not found"
            )
        if investment.status != InvestmentStatus.PENDING.value:
            raise InvalidStateTransitionError(
                investment_id, investment.status, InvestmentStatus.PENDING.value
            )

        configuration = await self.resolver.resolve(
            investment.participant_id, investment.org_unit_id
        )
        variant = ProductVariant(investment.product_variant)
        phase_model = PhaseModel(configuration.phases_for(variant))
        first_phase = phase_model.select_phase(0).phase

        investment.status = InvestmentStatus.ACTIVE.value
        investment.activated_at = now
        investment.phase_started_at = now
        investment.current_phase = first_phase.phase
        investment.current_rate = first_phase.rate
        investment.months_completed = 0
        investment.total_profit_earned = Decimal("0")
        investment.profit_cap = self.cap_guard.calculate_cap(
            investment.amount, configuration.profit_cap_multiplier
        )
        investment.plan_snapshot = configuration_to_layer(configuration)
        await self.session.flush()

        cascade = await self.cascade.distribute_instant(investment, configuration)
        await self.volume_updater.apply(investment.participant_id, investment.amount)
        ranks = await self.rank_evaluator.evaluate_upline(
            investment.participant_id, configuration.rank_targets, variant
        )

        await self.session.commit()

        logger.info(
            "Investment activated",
            extra={
                "investment_id": investment.id,
                "participant_id": investment.participant_id,
                "amount": str(investment.amount),
                "profit_cap": str(investment.profit_cap),
                "phase": investment.current_phase,
                "referral_total": str(cascade.total_rewards),
                "promotions": len(ranks.promotions),
            },
        )

        return ActivationResult(
            success=True,
            investment=investment,
            referral_total=cascade.total_rewards,
            rewards_count=cascade.rewards_count,
            promotions=ranks.promotions,
        )

    async def reject(
        self, investment_id: int, reason: str | None = None, now: datetime | None = None
    ) -> ActivationResult:
        """
        Reject a pending investment. No rewards or volumes are touched.

        Returns:
            ActivationResult (success=False for non-pending investments)
        """
        try:
            return await self._reject(investment_id, reason, now or utc_now())
        except InvalidStateTransitionError as e:
            logger.warning(
                "Investment rejection refused",
                extra={"investment_id": investment_id, "status": e.current},
            )
            return ActivationResult(success=False, error_message=str(e))

    @with_rollback_on_error
    async def _reject(
        self, investment_id: int, reason: str | None, now: datetime
    ) -> ActivationResult:
        investment = await self.investment_repo.get_for_update(investment_id)
        if investment is None:
            return ActivationResult(
                success=False, error_message=f"Investment {investment_id} not found"
            )
        if investment.status != InvestmentStatus.PENDING.value:
            raise InvalidStateTransitionError(
                investment_id, investment.status, InvestmentStatus.PENDING.value
            )

        investment.status = InvestmentStatus.REJECTED.value
        investment.rejected_at = now
        investment.rejection_reason = reason
        await self.session.commit()

        logger.info(
            "Investment rejected",
            extra={"investment_id": investment_id, "reason": reason},
        )
        return ActivationResult(success=True, investment=investment)
