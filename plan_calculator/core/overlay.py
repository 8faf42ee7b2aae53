"""
Configuration overlay.

Merges global, organizational-unit and participant configuration layers
into one EffectiveConfiguration. Later layers win field by field; a
missing or None field never overrides.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from plan_calculator.core.models import EffectiveConfiguration

OVERLAY_FIELDS = (
    "referral_bonus_rates",
    "matching_bonus_rates",
    "with_product_phases",
    "without_product_phases",
    "rank_targets",
    "profit_cap_multiplier",
    "horizon_months",
)


def overlay_configuration(
    layers: Iterable[Mapping[str, Any] | None],
) -> EffectiveConfiguration:
    """
    Merge configuration layers in order (most general first).

    Args:
        layers: Layer dicts, e.g. [global, org_unit, participant].
            None entries are skipped.

    Returns:
        Validated EffectiveConfiguration

    Raises:
        ValueError: If the merged result is incomplete or invalid
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        for field in OVERLAY_FIELDS:
            value = layer.get(field)
            if value is not None:
                merged[field] = value

    missing = [field for field in OVERLAY_FIELDS if field not in merged]
    if missing:
        raise ValueError(f"Configuration is missing fields: {', '.join(missing)}")

    try:
        return EffectiveConfiguration.model_validate(merged)
    except ValidationError as e:
        raise ValueError(f"Invalid merged configuration: {e}") from e
