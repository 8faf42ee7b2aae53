"""
PlanConfiguration model.

Global, organizational-unit and participant configuration layers. Every
override field is nullable; None means "inherit from the layer below".
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from invest_engine.models.base import Base
from invest_engine.models.types import JSONType, MultiplierType


class PlanConfiguration(Base):
    """
    PlanConfiguration entity.

    JSON fields hold plain JSON (rates as strings):
        referral_bonus_rates / matching_bonus_rates: ["0.06", "0.025", ...]
        with_product_phases / without_product_phases:
            [{"phase": 1, "months": 4, "rate": "0.05", "description": ...}]
        rank_targets:
            [{"rank_id": 1, "title": ..., "without_product": {"direct": ..., "total": ...},
              "with_product": {...}}]
    """

    __tablename__ = "plan_configurations"
    __table_args__ = (
        UniqueConstraint('scope', 'scope_id', name='uq_plan_configuration_scope'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    scope: Mapped[str] = mapped_column(String(20), nullable=False)  # global, org_unit, participant
    scope_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Overrides
    referral_bonus_rates: Mapped[list[Any] | None] = mapped_column(JSONType, nullable=True)
    matching_bonus_rates: Mapped[list[Any] | None] = mapped_column(JSONType, nullable=True)
    with_product_phases: Mapped[list[Any] | None] = mapped_column(JSONType, nullable=True)
    without_product_phases: Mapped[list[Any] | None] = mapped_column(JSONType, nullable=True)
    rank_targets: Mapped[list[Any] | None] = mapped_column(JSONType, nullable=True)
    profit_cap_multiplier: Mapped[Decimal | None] = mapped_column(MultiplierType, nullable=True)
    horizon_months: Mapped[int | None] = mapped_column(Integer, nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

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
            f"<PlanConfiguration(id={self.id}, scope={self.scope}, "
            f"scope_id={self.scope_id}, version={self.version})>"
        )

    def as_layer(self) -> dict[str, Any]:
        """Override fields as an overlay layer (None = inherit)."""
        return {
            "referral_bonus_rates": self.referral_bonus_rates,
            "matching_bonus_rates": self.matching_bonus_rates,
            "with_product_phases": self.with_product_phases,
            "without_product_phases": self.without_product_phases,
            "rank_targets": self.rank_targets,
            "profit_cap_multiplier": self.profit_cap_multiplier,
            "horizon_months": self.horizon_months,
        }
