"""
RewardRecord repository.

Data access layer for the append-only reward ledger. Exposes no update
or delete operations.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from invest_engine.models.enums import RewardType
from invest_engine.models.reward_record import RewardRecord
from invest_engine.repositories.base import BaseRepository


def _to_decimal(value: object) -> Decimal:
    # SUM() comes back as float on backends without a native decimal type
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class RewardRecordRepository(BaseRepository[RewardRecord]):
    """Reward ledger queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize reward record repository."""
        super().__init__(RewardRecord, session)

    async def get_by_recipient(
        self,
        recipient_id: int,
        reward_type: RewardType | None = None,
        limit: int | None = None,
    ) -> list[RewardRecord]:
        """
        Get rewards credited to a participant.

        Args:
            recipient_id: Recipient participant ID
            reward_type: Optional type filter
            limit: Max number of results

        Returns:
            Reward records, oldest first
        """
        filters: dict[str, object] = {"recipient_id": recipient_id}
        if reward_type:
            filters["reward_type"] = reward_type.value
        return await self.find_by(limit=limit, **filters)

    async def get_by_investment(
        self, investment_id: int, reward_type: RewardType | None = None
    ) -> list[RewardRecord]:
        """Rewards generated by one investment, oldest first."""
        filters: dict[str, object] = {"investment_id": investment_id}
        if reward_type:
            filters["reward_type"] = reward_type.value
        return await self.find_by(**filters)

    async def count_by_investment(
        self, investment_id: int, reward_type: RewardType | None = None
    ) -> int:
        """Count rewards generated by one investment."""
        filters: dict[str, object] = {"investment_id": investment_id}
        if reward_type:
            filters["reward_type"] = reward_type.value
        return await self.count(**filters)

    async def get_lifetime_earnings(self, recipient_id: int) -> Decimal:
        """
        Total credited to a participant across all reward types.

        Args:
            recipient_id: Recipient participant ID

        Returns:
            Sum of reward amounts
        """
        stmt = select(func.sum(RewardRecord.amount)).where(
            RewardRecord.recipient_id == recipient_id
        )
        result = await self.session.execute(stmt)
        return _to_decimal(result.scalar())

    async def get_summary_by_type(self, recipient_id: int) -> dict[str, Decimal]:
        """
        Earnings grouped by reward type in a single query.

        Returns:
            Dict with one key per RewardType value plus "total", e.g.
            {"profit_share": ..., "matching_bonus": ..., "referral_bonus": ..., "total": ...}
        """
        stmt = (
            select(
                RewardRecord.reward_type,
                func.sum(RewardRecord.amount).label("total"),
            )
            .where(RewardRecord.recipient_id == recipient_id)
            .group_by(RewardRecord.reward_type)
        )
        result = await self.session.execute(stmt)

        summary = {reward_type.value: Decimal("0") for reward_type in RewardType}
        for row in result.all():
            summary[row.reward_type] = _to_decimal(row.total)
        summary["total"] = sum(summary.values(), Decimal("0"))
        return summary
