"""
Participant model.

Represents a member of the referral forest.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from invest_engine.models.base import Base
from invest_engine.models.types import MoneyType


class Participant(Base):
    """
    Participant entity.

    Each participant has at most one upline (referrer). The upline relation
    forms a forest and is kept acyclic by ParticipantRegistry.

    Attributes:
        id: Primary key
        display_name: Human-readable name
        upline_id: Referrer (None for roots)
        org_unit_id: Organizational unit (branch) for config overrides
        is_active: Inactive participants receive no profit distributions
        self_volume: Sum of own activated principals
        direct_volume: Sum of principals activated by direct downline
        total_volume: Sum of principals activated anywhere below
        rank: Achieved rank (0 = unranked), never decreases
    """

    __tablename__ = "participants"
    __table_args__ = (
        CheckConstraint('self_volume >= 0', name='check_participant_self_volume_non_negative'),
        CheckConstraint('direct_volume >= 0', name='check_participant_direct_volume_non_negative'),
        CheckConstraint('total_volume >= 0', name='check_participant_total_volume_non_negative'),
        CheckConstraint('rank >= 0', name='check_participant_rank_non_negative'),
        CheckConstraint('upline_id IS NULL OR upline_id != id', name='check_participant_not_own_upline'),
    )

    # Primary key
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    display_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Referral forest
    upline_id: Mapped[int | None] = mapped_column(
        ForeignKey("participants.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    org_unit_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True, index=True
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )

    # Business volume
    self_volume: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    direct_volume: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    total_volume: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )

    # Rank
    rank: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rank_updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Participant(id={self.id}, upline_id={self.upline_id}, "
            f"rank={self.rank}, total_volume={self.total_volume})>"
        )
