"""Referral graph services."""

from invest_engine.services.referral.bonus_cascade import BonusCascade, CascadeResult
from invest_engine.services.referral.business_volume import BusinessVolumeUpdater
from invest_engine.services.referral.graph_walker import ReferralGraphWalker, WalkResult
from invest_engine.services.referral.participant_registry import ParticipantRegistry
from invest_engine.services.referral.rank_progression import (
    RankChange,
    RankEvaluation,
    RankProgressionEvaluator,
)

__all__ = [
    "BonusCascade",
    "BusinessVolumeUpdater",
    "CascadeResult",
    "ParticipantRegistry",
    "RankChange",
    "RankEvaluation",
    "RankProgressionEvaluator",
    "ReferralGraphWalker",
    "WalkResult",
]
