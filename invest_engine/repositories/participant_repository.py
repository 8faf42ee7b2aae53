"""
Participant repository.

Data access layer for Participant model.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from invest_engine.models.participant import Participant
from invest_engine.repositories.base import MutableRepository


class ParticipantRepository(MutableRepository[Participant]):
    """Participant repository with volume and rank updates."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize participant repository."""
        super().__init__(Participant, session)

    async def get_direct_downline(self, participant_id: int) -> list[Participant]:
        """Participants whose upline is participant_id."""
        return await self.find_by(upline_id=participant_id)

    async def get_upline_ids(self, participant_id: int) -> list[int]:
        """
        Upline chain ids, nearest first.

        Stops at a root or at the first repeated id.
        """
        chain: list[int] = []
        seen = {participant_id}
        cursor = participant_id

        while True:
            stmt = select(Participant.upline_id).where(Participant.id == cursor)
            result = await self.session.execute(stmt)
            upline_id = result.scalar_one_or_none()
            if upline_id is None or upline_id in seen:
                return chain
            chain.append(upline_id)
            seen.add(upline_id)
            cursor = upline_id

    async def add_volumes(
        self,
        participant_id: int,
        self_amount: Decimal = Decimal("0"),
        direct_amount: Decimal = Decimal("0"),
        total_amount: Decimal = Decimal("0"),
    ) -> None:
        """
        Atomically increment volume counters.

        Uses UPDATE ... SET x = x + :amount so concurrent activations in
        the same chain never lose an increment.
        """
        values = {}
        if self_amount:
            values["self_volume"] = Participant.self_volume + self_amount
        if direct_amount:
            values["direct_volume"] = Participant.direct_volume + direct_amount
        if total_amount:
            values["total_volume"] = Participant.total_volume + total_amount
        if not values:
            return

        stmt = (
            update(Participant)
            .where(Participant.id == participant_id)
            .values(**values)
        )
        await self.session.execute(stmt)

    async def set_rank(self, participant_id: int, rank: int, at: datetime) -> None:
        """
        Raise a participant's rank.

        The WHERE clause keeps ranks monotonic.
        """
        stmt = (
            update(Participant)
            .where(Participant.id == participant_id, Participant.rank < rank)
            .values(rank=rank, rank_updated_at=at)
        )
        await self.session.execute(stmt)
