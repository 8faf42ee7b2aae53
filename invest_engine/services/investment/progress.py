"""
Investment progress.

Read-only progress metrics for one investment.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from invest_engine.models.enums import ProductVariant
from invest_engine.repositories.investment_repository import InvestmentRepository
from invest_engine.services.plan.config_resolver import ConfigurationResolver
from plan_calculator.core.phase_model import PhaseModel


class InvestmentProgress(BaseModel):
    """Progress figures for one investment."""

    investment_id: int
    status: str
    amount: Decimal
    profit_cap: Decimal
    total_profit_earned: Decimal
    remaining_profit: Decimal
    profit_percentage: Decimal  # earned / cap * 100
    time_percentage: Decimal  # months_completed / horizon * 100
    months_completed: int
    horizon_months: int
    current_phase: int
    current_rate: Decimal
    next_phase: int | None = None
    next_phase_rate: Decimal | None = None
    last_distribution_at: datetime | None = None


class InvestmentProgressService:
    """Computes investment progress metrics."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.investment_repo = InvestmentRepository(session)
        self.resolver = ConfigurationResolver(session)

    async def get_progress(self, investment_id: int) -> InvestmentProgress | None:
        """
        Progress of an investment.

        Returns:
            InvestmentProgress or None if the investment does not exist
        """
        investment = await self.investment_repo.get_by_id(investment_id)
        if investment is None:
            return None

        configuration = await self.resolver.resolve_for_investment(investment)
        phase_model = PhaseModel(
            configuration.phases_for(ProductVariant(investment.product_variant))
        )
        next_phase = phase_model.get_phase(investment.current_phase + 1)

        profit_percentage = Decimal("0")
        if investment.profit_cap > 0:
            profit_percentage = investment.total_profit_earned / investment.profit_cap * 100

        time_percentage = (
            Decimal(investment.months_completed) / Decimal(configuration.horizon_months) * 100
        )

        return InvestmentProgress(
            investment_id=investment.id,
            status=investment.status,
            amount=investment.amount,
            profit_cap=investment.profit_cap,
            total_profit_earned=investment.total_profit_earned,
            remaining_profit=investment.remaining_profit,
            profit_percentage=profit_percentage.quantize(Decimal("0.01")),
            time_percentage=min(time_percentage, Decimal("100")).quantize(Decimal("0.01")),
            months_completed=investment.months_completed,
            horizon_months=configuration.horizon_months,
            current_phase=investment.current_phase,
            current_rate=phase_model.rate_for_phase(investment.current_phase),
            next_phase=next_phase.phase if next_phase else None,
            next_phase_rate=next_phase.rate if next_phase else None,
            last_distribution_at=investment.last_distribution_at,
        )
