"""
Tests for rank qualification.

Tests cover:
- OR logic between direct and total volume
- Ascending evaluation stopping at the first unmet target
- Ranks never decreasing
- Per-variant thresholds
"""

from decimal import Decimal

from plan_calculator.constants import RANK_TARGETS, get_rank_target
from plan_calculator.core.models import ProductVariant
from plan_calculator.core.rank_rules import qualifying_rank


class TestRankTargets:
    """Test default rank targets."""

    def test_first_rank_thresholds(self):
        """Rank 1 without product needs 1.5M direct or 3M total."""
        target = get_rank_target(1)
        assert target.without_product.direct == Decimal("1500000")
        assert target.without_product.total == Decimal("3000000")
        assert target.with_product.direct == Decimal("3000000")

    def test_targets_triple(self):
        """Each rank triples the previous base."""
        assert get_rank_target(2).without_product.direct == Decimal("4500000")
        assert get_rank_target(8).without_product.direct == Decimal("1500000") * 3 ** 7

    def test_unknown_rank(self):
        """Undefined rank ids return None."""
        assert get_rank_target(9) is None


class TestQualifyingRank:
    """Test qualifying_rank."""

    def test_total_volume_alone_promotes(self):
        """Total 3,000,000 with direct 1,000,000 meets rank 1 via total."""
        rank = qualifying_rank(
            0, Decimal("1000000"), Decimal("3000000"), RANK_TARGETS, ProductVariant.WITHOUT_PRODUCT
        )
        assert rank == 1

    def test_just_below_both_thresholds(self):
        """Direct 1,499,999 and total 2,999,999 do not promote."""
        rank = qualifying_rank(
            0, Decimal("1499999"), Decimal("2999999"), RANK_TARGETS, ProductVariant.WITHOUT_PRODUCT
        )
        assert rank == 0

    def test_direct_volume_alone_promotes(self):
        """Direct volume meeting the threshold is enough."""
        rank = qualifying_rank(
            0, Decimal("1500000"), Decimal("0"), RANK_TARGETS, "without_product"
        )
        assert rank == 1

    def test_multiple_ranks_in_one_evaluation(self):
        """Volumes meeting ranks 1-3 promote straight to 3."""
        rank = qualifying_rank(
            0, Decimal("13500000"), Decimal("0"), RANK_TARGETS, "without_product"
        )
        assert rank == 3

    def test_stops_at_first_unmet(self):
        """An unmet rank 2 keeps the participant at rank 1."""
        rank = qualifying_rank(
            1, Decimal("2000000"), Decimal("8000000"), RANK_TARGETS, "without_product"
        )
        assert rank == 1

    def test_never_decreases(self):
        """A participant above their volumes keeps their rank."""
        rank = qualifying_rank(5, Decimal("0"), Decimal("0"), RANK_TARGETS, "without_product")
        assert rank == 5

    def test_with_product_thresholds_are_higher(self):
        """The with-product variant doubles the thresholds."""
        assert qualifying_rank(
            0, Decimal("1500000"), Decimal("0"), RANK_TARGETS, ProductVariant.WITH_PRODUCT
        ) == 0
        assert qualifying_rank(
            0, Decimal("3000000"), Decimal("0"), RANK_TARGETS, ProductVariant.WITH_PRODUCT
        ) == 1
