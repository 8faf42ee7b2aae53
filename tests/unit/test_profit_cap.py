"""
Tests for profit cap management.

Tests cover:
- Profit cap calculation (principal x multiplier)
- Truncation of increments that reach the cap
- Already-capped investments
"""

from decimal import Decimal

import pytest

from plan_calculator.core.profit_cap import ProfitCapGuard


@pytest.fixture
def guard():
    """Profit cap guard instance."""
    return ProfitCapGuard()


class TestProfitCapCalculation:
    """Test calculate_cap and remaining."""

    def test_cap_is_five_times_principal(self, guard):
        """1,000,000 x 5 = 5,000,000."""
        assert guard.calculate_cap(Decimal("1000000"), Decimal("5")) == Decimal("5000000")

    def test_cap_zero_for_non_positive_input(self, guard):
        """Zero or negative principal/multiplier yields a zero cap."""
        assert guard.calculate_cap(Decimal("0"), Decimal("5")) == Decimal("0")
        assert guard.calculate_cap(Decimal("1000"), Decimal("-1")) == Decimal("0")

    def test_remaining_never_negative(self, guard):
        """Remaining space floors at zero."""
        assert guard.remaining(Decimal("100"), Decimal("40")) == Decimal("60")
        assert guard.remaining(Decimal("100"), Decimal("150")) == Decimal("0")


class TestProfitCapCheck:
    """Test check()."""

    def test_below_cap_passes_through(self, guard):
        """4,800,000 + 100,000 stays below 5,000,000: full amount, not capped."""
        result = guard.check(Decimal("4800000"), Decimal("5000000"), Decimal("100000"))
        assert result.allowed_amount == Decimal("100000")
        assert result.cap_reached is False

    def test_crossing_cap_is_truncated(self, guard):
        """4,800,000 + 300,000 crosses the cap: only 200,000 allowed."""
        result = guard.check(Decimal("4800000"), Decimal("5000000"), Decimal("300000"))
        assert result.allowed_amount == Decimal("200000")
        assert result.cap_reached is True

    def test_exactly_reaching_cap(self, guard):
        """Landing exactly on the cap counts as reached."""
        result = guard.check(Decimal("4800000"), Decimal("5000000"), Decimal("200000"))
        assert result.allowed_amount == Decimal("200000")
        assert result.cap_reached is True

    def test_already_capped(self, guard):
        """current >= cap allows nothing."""
        result = guard.check(Decimal("5000000"), Decimal("5000000"), Decimal("70000"))
        assert result.allowed_amount == Decimal("0")
        assert result.cap_reached is True

    def test_no_rounding(self, guard):
        """Fractional remainders are kept exactly."""
        result = guard.check(Decimal("99.99999999"), Decimal("100"), Decimal("1"))
        assert result.allowed_amount == Decimal("0.00000001")

    def test_sum_never_exceeds_cap(self, guard):
        """Repeated increments never push the total above the cap."""
        cap = Decimal("500")
        current = Decimal("0")
        for _ in range(20):
            result = guard.check(current, cap, Decimal("70"))
            current += result.allowed_amount
            assert current <= cap
        assert current == cap
