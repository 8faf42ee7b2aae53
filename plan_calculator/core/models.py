"""Pydantic models for plan calculations."""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ProductVariant(str, Enum):
    """Investment plan variants."""

    WITH_PRODUCT = "with_product"
    WITHOUT_PRODUCT = "without_product"


class PhaseDefinition(BaseModel):
    """One contiguous span of months paying a fixed monthly rate."""

    model_config = ConfigDict(frozen=True)

    phase: int = Field(..., ge=1, description="Phase number (1-based)")
    months: int = Field(..., ge=1, description="Phase length in months")
    rate: Decimal = Field(..., ge=0, description="Monthly rate as a fraction (0.07 = 7%)")
    description: str | None = Field(default=None, description="Optional phase description")


class VolumeThreshold(BaseModel):
    """Business volume required for a rank."""

    model_config = ConfigDict(frozen=True)

    direct: Decimal = Field(..., ge=0, description="Direct-downline volume requirement")
    total: Decimal = Field(..., ge=0, description="Total-downline volume requirement")


class RankTarget(BaseModel):
    """Rank tier with per-variant volume thresholds."""

    model_config = ConfigDict(frozen=True)

    rank_id: int = Field(..., ge=1, description="Rank number (1 = lowest)")
    title: str = Field(..., description="Rank display title")
    without_product: VolumeThreshold
    with_product: VolumeThreshold

    def threshold_for(self, variant: ProductVariant | str) -> VolumeThreshold:
        """Thresholds applying to the given product variant."""
        if ProductVariant(variant) == ProductVariant.WITH_PRODUCT:
            return self.with_product
        return self.without_product


class EffectiveConfiguration(BaseModel):
    """
    Fully merged plan configuration.

    Produced by overlaying global, organizational-unit and participant
    configuration layers. Frozen: an investment keeps the value it was
    activated with.
    """

    model_config = ConfigDict(frozen=True)

    referral_bonus_rates: tuple[Decimal, ...]
    matching_bonus_rates: tuple[Decimal, ...]
    with_product_phases: tuple[PhaseDefinition, ...]
    without_product_phases: tuple[PhaseDefinition, ...]
    rank_targets: tuple[RankTarget, ...]
    profit_cap_multiplier: Decimal = Field(..., gt=0)
    horizon_months: int = Field(..., ge=1)

    @field_validator("referral_bonus_rates", "matching_bonus_rates")
    @classmethod
    def validate_rates(cls, v: tuple[Decimal, ...]) -> tuple[Decimal, ...]:
        """Bonus rates must be non-negative fractions."""
        for rate in v:
            if rate < 0 or rate > 1:
                raise ValueError(f"Bonus rate out of range: {rate}")
        return v

    @field_validator("with_product_phases", "without_product_phases")
    @classmethod
    def validate_phases(
        cls, v: tuple[PhaseDefinition, ...]
    ) -> tuple[PhaseDefinition, ...]:
        """Phases must be numbered 1..N in order."""
        if not v:
            raise ValueError("At least one phase is required")
        for index, phase in enumerate(v, start=1):
            if phase.phase != index:
                raise ValueError(
                    f"Phases must be numbered contiguously from 1, got {phase.phase} at {index}"
                )
        return v

    @field_validator("rank_targets")
    @classmethod
    def validate_rank_order(cls, v: tuple[RankTarget, ...]) -> tuple[RankTarget, ...]:
        """Rank targets must be strictly ascending by rank id."""
        ids = [target.rank_id for target in v]
        if ids != sorted(set(ids)):
            raise ValueError("Rank targets must be strictly ascending by rank_id")
        return v

    @model_validator(mode="after")
    def validate_horizon(self) -> "EffectiveConfiguration":
        """Every variant's phases must add up to the horizon."""
        for variant in ProductVariant:
            total = sum(phase.months for phase in self.phases_for(variant))
            if total != self.horizon_months:
                raise ValueError(
                    f"{variant.value} phases cover {total} months, "
                    f"expected {self.horizon_months}"
                )
        return self

    def phases_for(self, variant: ProductVariant | str) -> tuple[PhaseDefinition, ...]:
        """Ordered phase list for a product variant."""
        if ProductVariant(variant) == ProductVariant.WITH_PRODUCT:
            return self.with_product_phases
        return self.without_product_phases


class PhaseSelection(BaseModel):
    """Phase located by elapsed months."""

    model_config = ConfigDict(frozen=True)

    phase: PhaseDefinition
    start_month: int = Field(..., ge=0, description="First month (inclusive)")
    end_month: int = Field(..., ge=1, description="Upper bound (exclusive)")
    clamped: bool = Field(default=False, description="Elapsed count was past the last phase")


class PhaseTransition(BaseModel):
    """Outcome of a phase transition check."""

    model_config = ConfigDict(frozen=True)

    transitioned: bool
    phase: PhaseDefinition


class CapCheck(BaseModel):
    """Outcome of a profit cap check."""

    model_config = ConfigDict(frozen=True)

    allowed_amount: Decimal = Field(..., ge=0)
    cap_reached: bool


class PhaseSummary(BaseModel):
    """Per-phase figures shown in plan details."""

    phase: int
    months: int
    monthly_rate: Decimal
    monthly_rate_percentage: str
    total_phase_return: Decimal
    total_phase_return_percentage: str
    description: str | None = None


class PlanDetails(BaseModel):
    """Plan description for one product variant."""

    name: str
    product_variant: ProductVariant
    duration_months: int
    profit_cap_multiplier: Decimal
    total_phases: int
    phases: list[PhaseSummary]
    total_return: Decimal
    total_return_percentage: str
