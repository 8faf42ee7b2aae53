"""
Investment repository.

Data access layer for Investment model.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from invest_engine.models.enums import InvestmentStatus
from invest_engine.models.investment import Investment
from invest_engine.repositories.base import MutableRepository


class InvestmentRepository(MutableRepository[Investment]):
    """Investment repository with lifecycle queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize investment repository."""
        super().__init__(Investment, session)

    async def get_active_ids(self) -> list[int]:
        """
        Ids of active investments in ascending order.

        The distribution batch iterates these ids and locks each row
        individually.
        """
        stmt = (
            select(Investment.id)
            .where(Investment.status == InvestmentStatus.ACTIVE.value)
            .order_by(Investment.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_active(self) -> list[Investment]:
        """Active investments ordered by id."""
        return await self.find_by(status=InvestmentStatus.ACTIVE.value)

    async def get_by_participant(
        self, participant_id: int, status: InvestmentStatus | None = None
    ) -> list[Investment]:
        """
        Get a participant's investments.

        Args:
            participant_id: Owner participant ID
            status: Optional status filter

        Returns:
            List of investments
        """
        filters: dict[str, object] = {"participant_id": participant_id}
        if status:
            filters["status"] = status.value
        return await self.find_by(**filters)

    async def record_distribution(
        self, investment_id: int, amount: Decimal, distributed_at: datetime
    ) -> None:
        """
        Atomically add a distributed amount.

        Increments total_profit_earned by amount and months_completed by one,
        and stamps last_distribution_at.
        """
        stmt = (
            update(Investment)
            .where(Investment.id == investment_id)
            .values(
                total_profit_earned=Investment.total_profit_earned + amount,
                months_completed=Investment.months_completed + 1,
                last_distribution_at=distributed_at,
            )
        )
        await self.session.execute(stmt)
