"""
Referral graph walker.

Walks the upline chain one parent pointer at a time, calling a visitor per
level. All upline traversals (bonus cascades, business volume, rank
progression) go through this walker so the cycle guard lives in one place.
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from invest_engine.models.participant import Participant
from invest_engine.repositories.participant_repository import ParticipantRepository

# Visitor(participant, level) -> False stops the walk
UplineVisitor = Callable[[Participant, int], Awaitable[bool | None]]

# Emitter(participant, level, rate, amount)
BonusEmitter = Callable[[Participant, int, Decimal, Decimal], Awaitable[None]]

# Scale of money columns (DECIMAL(18, 8))
MONEY_PRECISION = Decimal("0.00000001")


@dataclass
class WalkResult:
    """Result of a rate-driven upline walk."""

    levels_visited: int = 0
    emitted_count: int = 0
    total_emitted: Decimal = Decimal("0")
    cycle_detected: bool = False


class ReferralGraphWalker:
    """Upline traversal with a visited-set cycle guard."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize walker.

        Args:
            session: Async database session
        """
        self.session = session
        self.participant_repo = ParticipantRepository(session)

    async def walk_upline(
        self,
        start_id: int | None,
        visitor: UplineVisitor,
        max_levels: int | None = None,
    ) -> tuple[int, bool]:
        """
        Visit start_id and its ancestors, nearest first.

        Level 1 is start_id itself. The walk stops at a root, a missing
        participant, max_levels, a visitor returning False, or a repeated
        participant (cycle).

        Args:
            start_id: First participant to visit (None visits nothing)
            visitor: Async callback(participant, level)
            max_levels: Level limit (None = unbounded)

        Returns:
            Tuple of (levels visited, cycle detected)
        """
        visited: set[int] = set()
        cursor = start_id
        level = 0

        while cursor is not None:
            if max_levels is not None and level >= max_levels:
                break

            if cursor in visited:
                logger.warning(
                    "Referral cycle detected, stopping upline walk",
                    extra={"start_id": start_id, "participant_id": cursor, "level": level},
                )
                return level, True

            participant = await self.participant_repo.get_by_id(cursor)
            if participant is None:
                logger.warning(
                    "Upline participant not found, stopping walk",
                    extra={"start_id": start_id, "participant_id": cursor, "level": level},
                )
                break

            visited.add(cursor)
            level += 1

            if await visitor(participant, level) is False:
                break

            cursor = participant.upline_id

        return level, False

    async def walk(
        self,
        start_id: int | None,
        rates: Sequence[Decimal],
        base_amount: Decimal,
        emit: BonusEmitter,
    ) -> WalkResult:
        """
        Rate-driven walk used by the bonus cascades.

        For level L (1-based) the amount is base_amount * rates[L-1], rounded
        down to 8 places. The emitter is called only for positive amounts. The walk visits at most
        len(rates) participants.

        Args:
            start_id: Level-1 participant (the owner's upline)
            rates: Per-level rates
            base_amount: Amount the rates apply to
            emit: Async callback(participant, level, rate, amount)

        Returns:
            WalkResult
        """
        result = WalkResult()

        async def visit(participant: Participant, level: int) -> None:
            rate = rates[level - 1]
            amount = (base_amount * rate).quantize(MONEY_PRECISION, rounding=ROUND_DOWN)
            if amount > 0:
                await emit(participant, level, rate, amount)
                result.emitted_count += 1
                result.total_emitted += amount

        result.levels_visited, result.cycle_detected = await self.walk_upline(
            start_id, visit, max_levels=len(rates)
        )
        return result
