"""
Rank progression evaluator.

Re-evaluates ranks up the whole upline chain after an activation has
updated business volumes.
"""

from dataclasses import dataclass, field

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from invest_engine.models.participant import Participant
from invest_engine.repositories.participant_repository import ParticipantRepository
from invest_engine.services.referral.graph_walker import ReferralGraphWalker
from invest_engine.utils.datetime_utils import utc_now
from plan_calculator.core.models import ProductVariant, RankTarget
from plan_calculator.core.rank_rules import qualifying_rank


@dataclass
class RankChange:
    """One rank promotion."""

    participant_id: int
    old_rank: int
    new_rank: int


@dataclass
class RankEvaluation:
    """Result of a rank evaluation walk."""

    evaluated: int = 0
    promotions: list[RankChange] = field(default_factory=list)


class RankProgressionEvaluator:
    """Promotes ancestors whose volumes meet the next rank targets."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize rank evaluator."""
        self.session = session
        self.participant_repo = ParticipantRepository(session)
        self.walker = ReferralGraphWalker(session)

    async def evaluate_upline(
        self,
        participant_id: int,
        targets: tuple[RankTarget, ...],
        variant: ProductVariant | str,
    ) -> RankEvaluation:
        """
        Evaluate every ancestor of participant_id.

        Starts at the participant's upline and continues to the root. Ranks
        never decrease; a non-promoted ancestor does not stop the walk.

        Args:
            participant_id: Owner of the triggering investment
            targets: Rank targets from the investment's configuration
            variant: Product variant of the triggering investment

        Returns:
            RankEvaluation with the promotions made
        """
        evaluation = RankEvaluation()

        owner = await self.participant_repo.get_by_id(participant_id)
        if owner is None or owner.upline_id is None:
            return evaluation

        async def evaluate(ancestor: Participant, level: int) -> None:
            evaluation.evaluated += 1
            new_rank = qualifying_rank(
                ancestor.rank,
                ancestor.direct_volume,
                ancestor.total_volume,
                targets,
                variant,
            )
            if new_rank > ancestor.rank:
                old_rank = ancestor.rank
                await self.participant_repo.set_rank(ancestor.id, new_rank, utc_now())
                evaluation.promotions.append(
                    RankChange(participant_id=ancestor.id, old_rank=old_rank, new_rank=new_rank)
                )
                logger.info(
                    "Participant promoted",
                    extra={
                        "participant_id": ancestor.id,
                        "old_rank": old_rank,
                        "new_rank": new_rank,
                    },
                )

        await self.walker.walk_upline(owner.upline_id, evaluate)
        return evaluation
