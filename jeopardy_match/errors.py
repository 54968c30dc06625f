"""
Exceptions raised when a match command is rejected.

Every error is recoverable: the command is refused and the match state is
left exactly as it was before the command arrived.
"""

from typing import Optional


class MatchError(Exception):
    """Base class for rejected match commands."""

    def __init__(self, message: str = "", participant_id: Optional[str] = None):
        self.message = message or self.__class__.__name__
        self.participant_id = participant_id
        super().__init__(self.message)


class ValidationError(MatchError):
    """Malformed input: empty text, out-of-range values, unknown categories."""


class InvalidName(ValidationError):
    """Empty or whitespace-only participant name."""


class Forbidden(MatchError):
    """A role-gated command was attempted by the wrong participant."""


class CapacityExceeded(MatchError):
    """The roster is already full."""


class MissingPoints(MatchError):
    """A question was approved without a point value."""


class InsufficientScore(MatchError):
    """Ability activation costs more than the participant's score."""

    def __init__(self, participant_id: str, score: int, cost: int):
        self.score = score
        self.cost = cost
        super().__init__(
            f"Participant {participant_id} has {score} points but the ability costs {cost}",
            participant_id,
        )


class InsufficientCharge(MatchError):
    """A contestant tried to activate an ability that is not fully charged."""

    def __init__(self, participant_id: str, charge: int, required: int):
        self.charge = charge
        self.required = required
        super().__init__(
            f"Participant {participant_id} has {charge}/{required} ability charge",
            participant_id,
        )


class InvalidAction(MatchError):
    """The command is not legal in the current phase."""


class NotFound(MatchError):
    """Unknown participant, question or board cell."""
