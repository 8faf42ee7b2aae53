"""
Profit cap guard.

Pure truncation of profit increments against an investment's profit cap.
"""

from decimal import Decimal

from plan_calculator.core.models import CapCheck


class ProfitCapGuard:
    """Keeps cumulative earned profit within the profit cap."""

    def calculate_cap(self, principal: Decimal, multiplier: Decimal) -> Decimal:
        """
        Calculate profit cap for a principal.

        Formula: principal * multiplier

        Example:
            >>> ProfitCapGuard().calculate_cap(Decimal("1000000"), Decimal("5"))
            Decimal('5000000')
        """
        if principal <= 0 or multiplier <= 0:
            return Decimal("0")
        return principal * multiplier

    def remaining(self, cap: Decimal, current: Decimal) -> Decimal:
        """Remaining profit space (never negative)."""
        return max(cap - current, Decimal("0"))

    def check(
        self, current: Decimal, cap: Decimal, proposed: Decimal
    ) -> CapCheck:
        """
        Truncate a proposed increment to the cap.

        If current + proposed reaches the cap, only the remaining space is
        allowed and the cap counts as reached. No rounding is applied.

        Args:
            current: Cumulative earned profit
            cap: Profit cap
            proposed: Proposed increment

        Returns:
            CapCheck(allowed_amount, cap_reached)

        Example:
            >>> ProfitCapGuard().check(Decimal("4800000"), Decimal("5000000"), Decimal("300000"))
            CapCheck(allowed_amount=Decimal('200000'), cap_reached=True)
        """
        proposed = max(proposed, Decimal("0"))

        if current + proposed >= cap:
            return CapCheck(
                allowed_amount=max(Decimal("0"), cap - current),
                cap_reached=True,
            )

        return CapCheck(allowed_amount=proposed, cap_reached=False)
