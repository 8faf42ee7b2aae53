"""Configuration package."""

from invest_engine.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
