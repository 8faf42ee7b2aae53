"""
Investment model.

Represents a participant's principal moving through the plan lifecycle.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from invest_engine.models.base import Base
from invest_engine.models.enums import InvestmentStatus
from invest_engine.models.types import JSONType, MoneyType, RateType


class Investment(Base):
    """
    Investment entity.

    Lifecycle: pending -> active -> completed, or pending -> rejected.
    Never deleted.
    """

    __tablename__ = "investments"
    __table_args__ = (
        CheckConstraint('amount > 0', name='check_investment_amount_positive'),
        CheckConstraint('current_phase >= 1', name='check_investment_phase_positive'),
        CheckConstraint('months_completed >= 0', name='check_investment_months_non_negative'),
        CheckConstraint(
            'total_profit_earned >= 0',
            name='check_investment_profit_non_negative'
        ),
        CheckConstraint(
            'total_profit_earned <= profit_cap',
            name='check_investment_profit_not_exceeds_cap'
        ),
        CheckConstraint(
            "product_variant IN ('with_product', 'without_product')",
            name='check_investment_product_variant'
        ),
        CheckConstraint(
            "status IN ('pending', 'active', 'completed', 'rejected')",
            name='check_investment_status'
        ),
        Index('idx_investment_status_id', 'status', 'id'),
    )

    # Primary key
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Participants
    participant_id: Mapped[int] = mapped_column(
        ForeignKey("participants.id"),
        nullable=False,
        index=True
    )
    referrer_id: Mapped[int | None] = mapped_column(
        ForeignKey("participants.id"),
        nullable=True,
    )
    org_unit_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True
    )

    # Plan
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    product_variant: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InvestmentStatus.PENDING.value, index=True
    )

    # Phase tracking
    current_phase: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    current_rate: Mapped[Decimal] = mapped_column(
        RateType, nullable=False, default=Decimal("0")
    )  # reference copy of the active phase rate
    phase_started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    months_completed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Profit tracking
    total_profit_earned: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    profit_cap: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    last_distribution_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Effective configuration locked at activation
    plan_snapshot: Mapped[dict[str, Any] | None] = mapped_column(
        JSONType, nullable=True
    )

    # Lifecycle
    activated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completion_reason: Mapped[str | None] = mapped_column(
        String(20), nullable=True
    )  # cap_reached, horizon_elapsed
    rejected_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

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
            f"<Investment(id={self.id}, participant_id={self.participant_id}, "
            f"amount={self.amount}, status={self.status}, phase={self.current_phase})>"
        )

    @property
    def is_active(self) -> bool:
        """Check if investment accrues profit."""
        return self.status == InvestmentStatus.ACTIVE.value

    @property
    def remaining_profit(self) -> Decimal:
        """Profit space left under the cap."""
        return max(self.profit_cap - self.total_profit_earned, Decimal("0"))
