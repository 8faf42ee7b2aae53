"""
PlanConfiguration repository.

Data access layer for configuration layers.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from invest_engine.models.enums import ConfigScope
from invest_engine.models.plan_config import PlanConfiguration
from invest_engine.repositories.base import MutableRepository

OVERRIDE_FIELDS = (
    "referral_bonus_rates",
    "matching_bonus_rates",
    "with_product_phases",
    "without_product_phases",
    "rank_targets",
    "profit_cap_multiplier",
    "horizon_months",
)


class PlanConfigRepository(MutableRepository[PlanConfiguration]):
    """Configuration layer lookups and upserts."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize plan configuration repository."""
        super().__init__(PlanConfiguration, session)

    async def get_global(self) -> PlanConfiguration | None:
        """The global configuration row."""
        return await self.get_for_scope(ConfigScope.GLOBAL)

    async def get_for_scope(
        self, scope: ConfigScope, scope_id: int | None = None
    ) -> PlanConfiguration | None:
        """
        Get a configuration layer.

        Args:
            scope: Layer scope
            scope_id: Org unit or participant id (None for global)

        Returns:
            PlanConfiguration or None
        """
        if scope == ConfigScope.GLOBAL:
            scope_id = None
        return await self.get_by(scope=scope.value, scope_id=scope_id)

    async def upsert(
        self,
        scope: ConfigScope,
        scope_id: int | None = None,
        **overrides: Any,
    ) -> PlanConfiguration:
        """
        Create or replace a configuration layer.

        Fields not passed are stored as None (inherit). The version is
        incremented on every upsert.

        Raises:
            ValueError: On unknown override fields
        """
        unknown = set(overrides) - set(OVERRIDE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown configuration fields: {', '.join(sorted(unknown))}")

        if scope == ConfigScope.GLOBAL:
            scope_id = None

        values = {field: overrides.get(field) for field in OVERRIDE_FIELDS}
        existing = await self.get_for_scope(scope, scope_id)

        if existing is None:
            return await self.create(
                scope=scope.value, scope_id=scope_id, version=1, **values
            )

        return await self.update(
            existing.id, for_update=True, version=existing.version + 1, **values
        )
