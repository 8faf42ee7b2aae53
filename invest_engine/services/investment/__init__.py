"""Investment lifecycle services."""

from invest_engine.services.investment.activation import (
    ActivationResult,
    InvestmentActivationService,
)
from invest_engine.services.investment.distribution import (
    DistributionOutcome,
    DistributionProcessor,
)
from invest_engine.services.investment.progress import (
    InvestmentProgress,
    InvestmentProgressService,
)
from invest_engine.services.investment.scheduler import (
    JOB_NAME,
    BatchRunReport,
    BatchStats,
    DistributionScheduler,
)

__all__ = [
    "JOB_NAME",
    "ActivationResult",
    "BatchRunReport",
    "BatchStats",
    "DistributionOutcome",
    "DistributionProcessor",
    "DistributionScheduler",
    "InvestmentActivationService",
    "InvestmentProgress",
    "InvestmentProgressService",
]
