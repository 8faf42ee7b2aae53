"""Formatting helpers."""

from plan_calculator.utils.formatters import format_currency, format_percentage, format_rate

__all__ = [
    "format_currency",
    "format_percentage",
    "format_rate",
]
