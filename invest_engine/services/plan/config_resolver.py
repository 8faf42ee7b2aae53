"""
Configuration resolver.

Produces the effective plan configuration for a participant by overlaying
the global, organizational-unit and participant configuration layers.
"""

from typing import Any

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from invest_engine.models.enums import ConfigScope
from invest_engine.models.investment import Investment
from invest_engine.models.plan_config import PlanConfiguration
from invest_engine.repositories.plan_config_repository import PlanConfigRepository
from invest_engine.utils.exceptions import ConfigurationError
from plan_calculator.constants import DEFAULT_CONFIGURATION
from plan_calculator.core.models import EffectiveConfiguration
from plan_calculator.core.overlay import overlay_configuration


def configuration_to_layer(configuration: EffectiveConfiguration) -> dict[str, Any]:
    """JSON-safe dict of a configuration (Decimals as strings)."""
    return configuration.model_dump(mode="json")


class ConfigurationResolver:
    """
    Resolves effective configurations.

    Precedence: participant > organizational unit > global. A field left
    None in a layer inherits from the layer below. A missing global row is
    a configuration error.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize configuration resolver.

        Args:
            session: Async database session
        """
        self.session = session
        self.config_repo = PlanConfigRepository(session)

    async def resolve(
        self, participant_id: int | None = None, org_unit_id: int | None = None
    ) -> EffectiveConfiguration:
        """
        Resolve the effective configuration.

        Args:
            participant_id: Participant whose override applies (optional)
            org_unit_id: Organizational unit whose override applies (optional)

        Returns:
            Frozen EffectiveConfiguration

        Raises:
            ConfigurationError: No global row, or the merged layers are invalid
        """
        global_config = await self.config_repo.get_global()
        if global_config is None:
            raise ConfigurationError("Global plan configuration is missing")

        layers: list[PlanConfiguration] = [global_config]

        if org_unit_id is not None:
            org_config = await self.config_repo.get_for_scope(
                ConfigScope.ORG_UNIT, org_unit_id
            )
            if org_config:
                layers.append(org_config)

        if participant_id is not None:
            participant_config = await self.config_repo.get_for_scope(
                ConfigScope.PARTICIPANT, participant_id
            )
            if participant_config:
                layers.append(participant_config)

        try:
            configuration = overlay_configuration(layer.as_layer() for layer in layers)
        except ValueError as e:
            logger.error(
                "Invalid plan configuration",
                extra={
                    "participant_id": participant_id,
                    "org_unit_id": org_unit_id,
                    "layers": [f"{layer.scope}:{layer.scope_id}" for layer in layers],
                    "error": str(e),
                },
            )
            raise ConfigurationError(str(e)) from e

        logger.debug(
            "Plan configuration resolved",
            extra={
                "participant_id": participant_id,
                "org_unit_id": org_unit_id,
                "layers": len(layers),
            },
        )
        return configuration

    async def resolve_for_investment(self, investment: Investment) -> EffectiveConfiguration:
        """
        Configuration governing an investment.

        Uses the snapshot locked at activation. Rows without a snapshot are
        resolved again from the current layers.
        """
        if investment.plan_snapshot:
            try:
                return EffectiveConfiguration.model_validate(investment.plan_snapshot)
            except ValidationError as e:
                raise ConfigurationError(
                    f"Investment {investment.id} has an invalid plan snapshot: {e}"
                ) from e

        return await self.resolve(investment.participant_id, investment.org_unit_id)

    async def seed_defaults(self) -> PlanConfiguration:
        """
        Create the global row from the built-in defaults if it is missing.

        Returns:
            The global configuration row
        """
        existing = await self.config_repo.get_global()
        if existing is not None:
            return existing

        layer = configuration_to_layer(DEFAULT_CONFIGURATION)
        # Scalar column, not JSON
        layer["profit_cap_multiplier"] = DEFAULT_CONFIGURATION.profit_cap_multiplier
        created = await self.config_repo.upsert(ConfigScope.GLOBAL, **layer)
        logger.info("Seeded global plan configuration from defaults")
        return created
