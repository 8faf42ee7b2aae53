"""
Exception types.

All engine errors derive from InvestEngineError.
"""


class InvestEngineError(Exception):
    """Base class for engine errors."""
    pass


class ConfigurationError(InvestEngineError):
    """Raised when no usable plan configuration can be resolved."""
    pass


class InvalidStateTransitionError(InvestEngineError):
    """Raised when an investment is not in the status an operation needs."""

    def __init__(self, investment_id: int, current: str, expected: str) -> None:
        self.investment_id = investment_id
        self.current = current
        self.expected = expected
        super().__init__(
            f"Investment {investment_id} is {current}, expected {expected}"
        )


class ParticipantNotFoundError(InvestEngineError):
    """Raised when a referenced participant does not exist."""

    def __init__(self, participant_id: int) -> None:
        self.participant_id = participant_id
        super().__init__(f"Participant {participant_id} not found")


class ReferralLoopError(InvestEngineError):
    """Raised when an upline attachment would create a cycle."""
    pass


class ImmutableRecordError(InvestEngineError):
    """Raised on update or delete of an append-only record."""
    pass
