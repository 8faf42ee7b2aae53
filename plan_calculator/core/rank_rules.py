"""
Rank qualification rules.

A participant advances one rank at a time while either volume meets the
next target's threshold for the triggering product variant.
"""

from collections.abc import Sequence
from decimal import Decimal

from plan_calculator.core.models import ProductVariant, RankTarget


def qualifying_rank(
    current_rank: int,
    direct_volume: Decimal,
    total_volume: Decimal,
    targets: Sequence[RankTarget],
    variant: ProductVariant | str,
) -> int:
    """
    Highest rank reachable from current_rank.

    Targets are checked in ascending rank order above the current rank.
    A target is met if direct >= threshold.direct OR total >= threshold.total.
    Evaluation stops at the first unmet target. The result is never lower
    than current_rank.

    Args:
        current_rank: Participant's current rank (0 = unranked)
        direct_volume: Direct-downline business volume
        total_volume: Total-downline business volume
        targets: Rank targets (any order)
        variant: Product variant selecting the threshold set

    Returns:
        New rank (>= current_rank)

    Example:
        >>> qualifying_rank(0, Decimal("1000000"), Decimal("3000000"), RANK_TARGETS, "without_product")
        1
    """
    rank = current_rank
    for target in sorted(targets, key=lambda t: t.rank_id):
        if target.rank_id <= rank:
            continue
        threshold = target.threshold_for(variant)
        if direct_volume >= threshold.direct or total_volume >= threshold.total:
            rank = target.rank_id
        else:
            break
    return rank
