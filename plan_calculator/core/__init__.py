"""
Core plan logic.

Phase selection, profit cap truncation, rank qualification and
configuration overlay. Projection lives in plan_calculator.core.projection.
"""

from plan_calculator.core.models import (
    CapCheck,
    EffectiveConfiguration,
    PhaseDefinition,
    PhaseSelection,
    PhaseTransition,
    ProductVariant,
    RankTarget,
    VolumeThreshold,
)
from plan_calculator.core.overlay import overlay_configuration
from plan_calculator.core.phase_model import PhaseModel
from plan_calculator.core.profit_cap import ProfitCapGuard
from plan_calculator.core.rank_rules import qualifying_rank

__all__ = [
    "CapCheck",
    "EffectiveConfiguration",
    "PhaseDefinition",
    "PhaseModel",
    "PhaseSelection",
    "PhaseTransition",
    "ProductVariant",
    "ProfitCapGuard",
    "RankTarget",
    "VolumeThreshold",
    "overlay_configuration",
    "qualifying_rank",
]
