"""
BatchRunLog model.

Append-only log of distribution batch attempts.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, String, Text, event
from sqlalchemy.orm import Mapped, mapped_column

from invest_engine.models.base import Base
from invest_engine.utils.exceptions import ImmutableRecordError


class BatchRunLog(Base):
    """BatchRunLog entity - one row per finished batch run."""

    __tablename__ = "batch_run_logs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    job_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    attempt: Mapped[int] = mapped_column(Integer, nullable=False)
    outcome: Mapped[str] = mapped_column(String(20), nullable=False)  # success, failed
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    processed_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    active_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False, index=True
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<BatchRunLog(id={self.id}, job={self.job_name}, "
            f"attempt={self.attempt}, outcome={self.outcome})>"
        )


@event.listens_for(BatchRunLog, "before_update")
def _reject_log_update(mapper, connection, target: BatchRunLog) -> None:
    raise ImmutableRecordError(f"Batch run log {target.id} is append-only")


@event.listens_for(BatchRunLog, "before_delete")
def _reject_log_delete(mapper, connection, target: BatchRunLog) -> None:
    raise ImmutableRecordError(f"Batch run log {target.id} cannot be deleted")
