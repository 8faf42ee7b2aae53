"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from invest_engine.models.base import Base
from invest_engine.models.batch_run_log import BatchRunLog
from invest_engine.models.enums import (
    BatchRunOutcome,
    CompletionReason,
    ConfigScope,
    InvestmentStatus,
    ProductVariant,
    RewardType,
)
from invest_engine.models.investment import Investment
from invest_engine.models.participant import Participant
from invest_engine.models.plan_config import PlanConfiguration
from invest_engine.models.reward_record import RewardRecord

__all__ = [
    "Base",
    "BatchRunLog",
    "BatchRunOutcome",
    "CompletionReason",
    "ConfigScope",
    "Investment",
    "InvestmentStatus",
    "Participant",
    "PlanConfiguration",
    "ProductVariant",
    "RewardRecord",
    "RewardType",
]
