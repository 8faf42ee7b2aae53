"""
Default plan constants.

Single source of truth for the global plan configuration. The global
configuration row is seeded from these values; organizational-unit and
participant overrides are layered on top at resolution time.
"""

from decimal import Decimal

from plan_calculator.core.models import (
    EffectiveConfiguration,
    PhaseDefinition,
    RankTarget,
    VolumeThreshold,
)

# Instant referral bonus on the principal, levels 1-8 (16% in total)
REFERRAL_BONUS_RATES: tuple[Decimal, ...] = (
    Decimal("0.06"),
    Decimal("0.025"),
    Decimal("0.02"),
    Decimal("0.015"),
    Decimal("0.015"),
    Decimal("0.01"),
    Decimal("0.01"),
    Decimal("0.005"),
)

# Matching bonus on each distributed profit share, levels 1-8
MATCHING_BONUS_RATES: tuple[Decimal, ...] = (
    Decimal("0.06"),
    Decimal("0.05"),
    Decimal("0.04"),
    Decimal("0.03"),
    Decimal("0.03"),
    Decimal("0.02"),
    Decimal("0.02"),
    Decimal("0.01"),
)

BONUS_DEPTH = len(REFERRAL_BONUS_RATES)

PROFIT_CAP_MULTIPLIER = Decimal("5")
HORIZON_MONTHS = 12

WITH_PRODUCT_PHASES: tuple[PhaseDefinition, ...] = (
    PhaseDefinition(phase=1, months=4, rate=Decimal("0.05"), description="First 4 months at 5% monthly"),
    PhaseDefinition(phase=2, months=4, rate=Decimal("0.06"), description="Second 4 months at 6% monthly"),
    PhaseDefinition(phase=3, months=4, rate=Decimal("0.07"), description="Third 4 months at 7% monthly"),
)

WITHOUT_PRODUCT_PHASES: tuple[PhaseDefinition, ...] = (
    PhaseDefinition(phase=1, months=3, rate=Decimal("0.07"), description="First 3 months at 7% monthly"),
    PhaseDefinition(phase=2, months=3, rate=Decimal("0.08"), description="Second 3 months at 8% monthly"),
    PhaseDefinition(phase=3, months=3, rate=Decimal("0.09"), description="Third 3 months at 9% monthly"),
    PhaseDefinition(phase=4, months=3, rate=Decimal("0.10"), description="Fourth 3 months at 10% monthly"),
)

_RANK_TITLES = (
    "Sales Executive",
    "Sales Officer",
    "Sales Manager",
    "Regional Sales Manager",
    "Regional Director",
    "Zonal Head",
    "Director",
    "Ambassador",
)


def _build_rank_targets() -> tuple[RankTarget, ...]:
    # Each rank triples the previous one, starting at 1.5M direct volume
    targets = []
    base = Decimal("1500000")
    for rank_id, title in enumerate(_RANK_TITLES, start=1):
        targets.append(
            RankTarget(
                rank_id=rank_id,
                title=title,
                without_product=VolumeThreshold(direct=base, total=base * 2),
                with_product=VolumeThreshold(direct=base * 2, total=base * 4),
            )
        )
        base *= 3
    return tuple(targets)


RANK_TARGETS: tuple[RankTarget, ...] = _build_rank_targets()

DEFAULT_CONFIGURATION = EffectiveConfiguration(
    referral_bonus_rates=REFERRAL_BONUS_RATES,
    matching_bonus_rates=MATCHING_BONUS_RATES,
    with_product_phases=WITH_PRODUCT_PHASES,
    without_product_phases=WITHOUT_PRODUCT_PHASES,
    rank_targets=RANK_TARGETS,
    profit_cap_multiplier=PROFIT_CAP_MULTIPLIER,
    horizon_months=HORIZON_MONTHS,
)


def get_rank_target(rank_id: int) -> RankTarget | None:
    """
    Get default rank target by id.

    Args:
        rank_id: Rank number (1-8)

    Returns:
        RankTarget or None if not defined
    """
    for target in RANK_TARGETS:
        if target.rank_id == rank_id:
            return target
    return None
