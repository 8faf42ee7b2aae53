"""
Plan projection.

Expected profit and per-phase plan details for a principal, before the
profit cap applies.
"""

from decimal import Decimal

from plan_calculator.constants import DEFAULT_CONFIGURATION
from plan_calculator.core.models import (
    EffectiveConfiguration,
    PhaseSummary,
    PlanDetails,
    ProductVariant,
)
from plan_calculator.utils.formatters import format_percentage

PLAN_NAMES = {
    ProductVariant.WITH_PRODUCT: "With Product Plan",
    ProductVariant.WITHOUT_PRODUCT: "Without Product Plan",
}


class PlanProjector:
    """
    Projects plan returns from an effective configuration.

    All methods are pure.
    """

    def __init__(self, configuration: EffectiveConfiguration | None = None) -> None:
        self.configuration = configuration or DEFAULT_CONFIGURATION

    def total_expected_profit(
        self, principal: Decimal, variant: ProductVariant | str
    ) -> Decimal:
        """
        Sum of monthly profit across all phases.

        Formula: sum(principal * phase.rate * phase.months)

        Example:
            >>> PlanProjector().total_expected_profit(Decimal("1000000"), "without_product")
            Decimal('1020000.00')
        """
        if principal <= 0:
            return Decimal("0")
        return sum(
            (
                principal * phase.rate * phase.months
                for phase in self.configuration.phases_for(variant)
            ),
            Decimal("0"),
        )

    def expected_capped_profit(
        self, principal: Decimal, variant: ProductVariant | str
    ) -> Decimal:
        """Expected profit limited by the profit cap."""
        cap = principal * self.configuration.profit_cap_multiplier
        return min(self.total_expected_profit(principal, variant), cap)

    def plan_details(self, variant: ProductVariant | str) -> PlanDetails:
        """
        Describe a plan variant.

        Returns:
            PlanDetails with per-phase return percentages
        """
        variant = ProductVariant(variant)
        phases = self.configuration.phases_for(variant)

        summaries = []
        total_return = Decimal("0")
        for phase in phases:
            phase_return = phase.rate * phase.months
            total_return += phase_return
            summaries.append(
                PhaseSummary(
                    phase=phase.phase,
                    months=phase.months,
                    monthly_rate=phase.rate,
                    monthly_rate_percentage=format_percentage(phase.rate * 100, decimals=0),
                    total_phase_return=phase_return,
                    total_phase_return_percentage=format_percentage(phase_return * 100, decimals=0),
                    description=phase.description,
                )
            )

        return PlanDetails(
            name=PLAN_NAMES[variant],
            product_variant=variant,
            duration_months=sum(phase.months for phase in phases),
            profit_cap_multiplier=self.configuration.profit_cap_multiplier,
            total_phases=len(phases),
            phases=summaries,
            total_return=total_return,
            total_return_percentage=format_percentage(total_return * 100, decimals=0),
        )

    def all_plans(self) -> list[PlanDetails]:
        """Details for every product variant."""
        return [self.plan_details(variant) for variant in ProductVariant]
