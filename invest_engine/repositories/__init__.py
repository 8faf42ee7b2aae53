"""Repositories."""

from invest_engine.repositories.base import BaseRepository, MutableRepository
from invest_engine.repositories.batch_run_log_repository import BatchRunLogRepository
from invest_engine.repositories.investment_repository import InvestmentRepository
from invest_engine.repositories.participant_repository import ParticipantRepository
from invest_engine.repositories.plan_config_repository import PlanConfigRepository
from invest_engine.repositories.reward_record_repository import RewardRecordRepository

__all__ = [
    "BaseRepository",
    "BatchRunLogRepository",
    "InvestmentRepository",
    "MutableRepository",
    "ParticipantRepository",
    "PlanConfigRepository",
    "RewardRecordRepository",
]
