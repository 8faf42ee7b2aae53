"""
Business volume updater.

Adds an activated principal to the owner's and upline's volume counters.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from invest_engine.models.participant import Participant
from invest_engine.repositories.participant_repository import ParticipantRepository
from invest_engine.services.referral.graph_walker import ReferralGraphWalker


class BusinessVolumeUpdater:
    """
    Volume counters on activation.

    Owner: self_volume += principal. Direct upline: direct_volume and
    total_volume += principal. Every further ancestor: total_volume +=
    principal. All increments are atomic SQL updates.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize volume updater."""
        self.session = session
        self.participant_repo = ParticipantRepository(session)
        self.walker = ReferralGraphWalker(session)

    async def apply(self, participant_id: int, amount: Decimal) -> int:
        """
        Apply a principal to the volume counters.

        Args:
            participant_id: Investment owner
            amount: Activated principal

        Returns:
            Number of ancestors updated
        """
        if amount <= 0:
            return 0

        await self.participant_repo.add_volumes(participant_id, self_amount=amount)

        owner = await self.participant_repo.get_by_id(participant_id)
        if owner is None or owner.upline_id is None:
            return 0

        async def credit(ancestor: Participant, level: int) -> None:
            if level == 1:
                await self.participant_repo.add_volumes(
                    ancestor.id, direct_amount=amount, total_amount=amount
                )
            else:
                await self.participant_repo.add_volumes(ancestor.id, total_amount=amount)

        updated, _ = await self.walker.walk_upline(owner.upline_id, credit)

        logger.debug(
            "Business volume updated",
            extra={
                "participant_id": participant_id,
                "amount": str(amount),
                "ancestors_updated": updated,
            },
        )
        return updated
