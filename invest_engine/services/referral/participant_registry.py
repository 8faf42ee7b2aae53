"""
Participant registry.

Creates participants and attaches uplines while keeping the referral
forest acyclic.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from invest_engine.models.participant import Participant
from invest_engine.repositories.participant_repository import ParticipantRepository
from invest_engine.utils.exceptions import ParticipantNotFoundError, ReferralLoopError


class ParticipantRegistry:
    """Participant creation and upline attachment."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize registry."""
        self.session = session
        self.participant_repo = ParticipantRepository(session)

    async def register(
        self,
        display_name: str,
        upline_id: int | None = None,
        org_unit_id: int | None = None,
    ) -> Participant:
        """
        Create a participant.

        A brand new participant cannot close a cycle, so only the upline's
        existence is checked.

        Raises:
            ParticipantNotFoundError: If upline_id does not exist
        """
        if upline_id is not None and not await self.participant_repo.exists(id=upline_id):
            raise ParticipantNotFoundError(upline_id)

        participant = await self.participant_repo.create(
            display_name=display_name,
            upline_id=upline_id,
            org_unit_id=org_unit_id,
        )
        logger.info(
            "Participant registered",
            extra={"participant_id": participant.id, "upline_id": upline_id},
        )
        return participant

    async def attach_upline(self, participant_id: int, upline_id: int) -> Participant:
        """
        Set or change a participant's upline.

        Raises:
            ParticipantNotFoundError: If either participant does not exist
            ReferralLoopError: On self-referral or if upline_id is already
                below participant_id
        """
        if participant_id == upline_id:
            raise ReferralLoopError(f"Participant {participant_id} cannot refer itself")

        participant = await self.participant_repo.get_for_update(participant_id)
        if participant is None:
            raise ParticipantNotFoundError(participant_id)
        if not await self.participant_repo.exists(id=upline_id):
            raise ParticipantNotFoundError(upline_id)

        ancestors = await self.participant_repo.get_upline_ids(upline_id)
        if participant_id in ancestors:
            raise ReferralLoopError(
                f"Attaching {participant_id} under {upline_id} would create a referral loop"
            )

        participant.upline_id = upline_id
        await self.session.flush()

        logger.info(
            "Upline attached",
            extra={"participant_id": participant_id, "upline_id": upline_id},
        )
        return participant
