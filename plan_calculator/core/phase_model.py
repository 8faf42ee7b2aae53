"""
Phase model.

Pure functions locating the active phase of a plan and deciding phase
transitions. No database or app dependencies.
"""

from collections.abc import Sequence
from decimal import Decimal

from plan_calculator.core.models import PhaseDefinition, PhaseSelection, PhaseTransition


class PhaseModel:
    """
    Phase lookups over an ordered phase list.

    Phases are contiguous and non-overlapping: phase N covers the month
    range [sum(months of phases < N), sum(months of phases <= N)).
    """

    def __init__(self, phases: Sequence[PhaseDefinition]) -> None:
        """
        Initialize phase model.

        Args:
            phases: Ordered phase list (phase numbers 1..N)

        Raises:
            ValueError: If the phase list is empty
        """
        if not phases:
            raise ValueError("Phase list must not be empty")
        self.phases = tuple(phases)

    @property
    def total_months(self) -> int:
        """Total horizon covered by all phases."""
        return sum(phase.months for phase in self.phases)

    @property
    def last_phase(self) -> PhaseDefinition:
        """Final defined phase."""
        return self.phases[-1]

    def get_phase(self, phase_number: int) -> PhaseDefinition | None:
        """
        Get phase by number.

        Args:
            phase_number: Phase number (1-based)

        Returns:
            PhaseDefinition or None if not defined
        """
        for phase in self.phases:
            if phase.phase == phase_number:
                return phase
        return None

    def months_before_phase(self, phase_number: int) -> int:
        """
        Total months of all phases preceding the given phase.

        Example:
            >>> model = PhaseModel(WITHOUT_PRODUCT_PHASES)
            >>> model.months_before_phase(3)
            6
        """
        return sum(
            phase.months for phase in self.phases if phase.phase < phase_number
        )

    def select_phase(self, elapsed_months: int) -> PhaseSelection:
        """
        Find the phase whose month range contains elapsed_months.

        Counts past the final phase clamp to the final phase.

        Args:
            elapsed_months: Months elapsed since activation (>= 0)

        Returns:
            PhaseSelection with the phase and its month range
        """
        elapsed = max(elapsed_months, 0)
        start = 0
        for phase in self.phases:
            end = start + phase.months
            if elapsed < end:
                return PhaseSelection(phase=phase, start_month=start, end_month=end)
            start = end

        last = self.last_phase
        return PhaseSelection(
            phase=last,
            start_month=self.total_months - last.months,
            end_month=self.total_months,
            clamped=True,
        )

    def rate_for_phase(self, phase_number: int) -> Decimal:
        """
        Monthly rate of a phase.

        Phase numbers past the list clamp to the final phase; numbers below
        1 use the first phase.
        """
        phase = self.get_phase(phase_number)
        if phase is not None:
            return phase.rate
        if phase_number < 1:
            return self.phases[0].rate
        return self.last_phase.rate

    def evaluate_transition(
        self, current_phase: int, months_in_phase: int
    ) -> PhaseTransition:
        """
        Decide whether an investment moves to its next phase.

        A transition happens when months_in_phase reaches the current phase
        length and a next phase exists. On the final phase the investment
        stays put.

        Args:
            current_phase: Current phase number
            months_in_phase: Months completed within the current phase

        Returns:
            PhaseTransition with the phase to use from now on
        """
        phase = self.get_phase(current_phase)
        if phase is None:
            # Out-of-range phase numbers are treated as the final phase
            return PhaseTransition(transitioned=False, phase=self.last_phase)

        if months_in_phase >= phase.months:
            next_phase = self.get_phase(current_phase + 1)
            if next_phase is not None:
                return PhaseTransition(transitioned=True, phase=next_phase)

        return PhaseTransition(transitioned=False, phase=phase)
