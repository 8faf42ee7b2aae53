"""Plan configuration services."""

from invest_engine.services.plan.config_resolver import (
    ConfigurationResolver,
    configuration_to_layer,
)

__all__ = ["ConfigurationResolver", "configuration_to_layer"]
