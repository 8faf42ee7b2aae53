"""
RewardRecord model.

Append-only ledger of profit shares and bonuses.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    event,
)
from sqlalchemy.orm import Mapped, mapped_column

from invest_engine.models.base import Base
from invest_engine.models.types import MoneyType, RateType
from invest_engine.utils.exceptions import ImmutableRecordError


class RewardRecord(Base):
    """
    RewardRecord entity.

    One row per credited amount. Level is 0 for profit shares and the
    upline depth (1..N) for bonuses. Rows are never updated or deleted.
    """

    __tablename__ = "reward_records"
    __table_args__ = (
        CheckConstraint('amount > 0', name='check_reward_amount_positive'),
        CheckConstraint('level >= 0', name='check_reward_level_non_negative'),
        CheckConstraint(
            "reward_type IN ('profit_share', 'matching_bonus', 'referral_bonus')",
            name='check_reward_type'
        ),
        Index('idx_reward_recipient_type', 'recipient_id', 'reward_type'),
    )

    # Primary key
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    investment_id: Mapped[int] = mapped_column(
        ForeignKey("investments.id"),
        nullable=False,
        index=True
    )
    recipient_id: Mapped[int] = mapped_column(
        ForeignKey("participants.id"),
        nullable=False,
        index=True
    )

    reward_type: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rate: Mapped[Decimal] = mapped_column(RateType, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<RewardRecord(id={self.id}, type={self.reward_type}, "
            f"recipient_id={self.recipient_id}, level={self.level}, amount={self.amount})>"
        )


@event.listens_for(RewardRecord, "before_update")
def _reject_reward_update(mapper, connection, target: RewardRecord) -> None:
    raise ImmutableRecordError(f"Reward record {target.id} is append-only")


@event.listens_for(RewardRecord, "before_delete")
def _reject_reward_delete(mapper, connection, target: RewardRecord) -> None:
    raise ImmutableRecordError(f"Reward record {target.id} cannot be deleted")
