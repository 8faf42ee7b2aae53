"""
Enumerations shared by models and services.
"""

from enum import StrEnum

from plan_calculator.core.models import ProductVariant


class InvestmentStatus(StrEnum):
    """Investment lifecycle status."""

    PENDING = "pending"  # Awaiting approval
    ACTIVE = "active"  # Accruing profit
    COMPLETED = "completed"  # Cap reached or horizon elapsed
    REJECTED = "rejected"  # Declined during approval


class CompletionReason(StrEnum):
    """Why an investment completed."""

    CAP_REACHED = "cap_reached"
    HORIZON_ELAPSED = "horizon_elapsed"


class RewardType(StrEnum):
    """Reward record type."""

    PROFIT_SHARE = "profit_share"  # Owner's monthly profit
    MATCHING_BONUS = "matching_bonus"  # Upline share of a profit distribution
    REFERRAL_BONUS = "referral_bonus"  # Upline share of a new principal


class ConfigScope(StrEnum):
    """Plan configuration scope, most general first."""

    GLOBAL = "global"
    ORG_UNIT = "org_unit"
    PARTICIPANT = "participant"


class BatchRunOutcome(StrEnum):
    """Batch run log outcome."""

    SUCCESS = "success"
    FAILED = "failed"


__all__ = [
    "BatchRunOutcome",
    "CompletionReason",
    "ConfigScope",
    "InvestmentStatus",
    "ProductVariant",
    "RewardType",
]
