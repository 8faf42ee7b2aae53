"""
Plan calculator.

Standalone package for phased investment plan calculations.

Example:
    >>> from decimal import Decimal
    >>> from plan_calculator import DEFAULT_CONFIGURATION, PhaseModel
    >>>
    >>> model = PhaseModel(DEFAULT_CONFIGURATION.without_product_phases)
    >>> model.select_phase(4).phase.rate
    Decimal('0.08')
"""

from plan_calculator.constants import (
    DEFAULT_CONFIGURATION,
    MATCHING_BONUS_RATES,
    RANK_TARGETS,
    REFERRAL_BONUS_RATES,
    get_rank_target,
)
from plan_calculator.core import (
    CapCheck,
    EffectiveConfiguration,
    PhaseDefinition,
    PhaseModel,
    PhaseSelection,
    PhaseTransition,
    ProductVariant,
    ProfitCapGuard,
    RankTarget,
    VolumeThreshold,
    overlay_configuration,
    qualifying_rank,
)
from plan_calculator.core.models import PhaseSummary, PlanDetails
from plan_calculator.core.projection import PlanProjector
from plan_calculator.utils import format_currency, format_percentage, format_rate


__version__ = "1.0.0"
__all__ = [
    # Core
    "PhaseModel",
    "ProfitCapGuard",
    "PlanProjector",
    "overlay_configuration",
    "qualifying_rank",
    # Models
    "CapCheck",
    "EffectiveConfiguration",
    "PhaseDefinition",
    "PhaseSelection",
    "PhaseSummary",
    "PhaseTransition",
    "PlanDetails",
    "ProductVariant",
    "RankTarget",
    "VolumeThreshold",
    # Constants
    "DEFAULT_CONFIGURATION",
    "MATCHING_BONUS_RATES",
    "RANK_TARGETS",
    "REFERRAL_BONUS_RATES",
    "get_rank_target",
    # Formatters
    "format_currency",
    "format_percentage",
    "format_rate",
]
