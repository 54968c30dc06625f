"""
Match configuration and constants.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import ValidationError


MIN_BOARD_SIZE = 3
MAX_BOARD_SIZE = 7
MIN_PARTICIPANTS = 2


@dataclass(frozen=True)
class Ability:
    """A special power ("ultimate") that can be assigned to a participant."""
    name: str
    description: str = ""

    def __str__(self) -> str:
        return self.name

    @property
    def is_blank(self) -> bool:
        """Placeholder entries with no name are never assigned."""
        return not self.name.strip()


def default_abilities() -> List[Ability]:
    """Built-in ability catalog used when no custom catalog is configured."""
    return [
        Ability("Double Down", "Your next correct answer is worth double points."),
        Ability("Steal", "Take the answer from another contestant after they miss."),
        Ability("Shield", "A wrong answer costs you nothing this round."),
        Ability("Second Chance", "Answer again after a miss."),
        Ability("Category Lock", "Choose the category of the next question."),
        Ability("Time Warp", "Get extra time on the current question."),
    ]


@dataclass
class GameConfig:
    """Configuration for match parameters."""

    # Board and lobby
    board_size: int = 5
    max_participants: int = 8

    # Abilities
    use_abilities: bool = True
    randomize_abilities: bool = True
    abilities: List[Ability] = field(default_factory=default_abilities)

    # Scoring and ability economy
    countdown_seconds: int = 60
    charge_per_correct_answer: int = 25
    max_ability_charge: int = 100
    ability_base_cost: int = 200
    ability_cost_step: int = 50

    # Category generation
    llm_model: str = "gpt-4o-mini"
    llm_temperature: float = 0.7
    category_language: str = "English"

    # Host announcements
    use_host_announcements: bool = True

    random_seed: Optional[int] = None  # Seed for ability shuffling and simulated agents

    def validate(self) -> None:
        """Raise ValidationError if a bounded setting is out of range."""
        if not _is_int(self.board_size) or not MIN_BOARD_SIZE <= self.board_size <= MAX_BOARD_SIZE:
            raise ValidationError(
                f"board_size must be an integer between {MIN_BOARD_SIZE} and {MAX_BOARD_SIZE}, got {self.board_size!r}"
            )
        if not _is_int(self.max_participants) or self.max_participants < MIN_PARTICIPANTS:
            raise ValidationError(
                f"max_participants must be an integer of at least {MIN_PARTICIPANTS}, got {self.max_participants!r}"
            )
        for name in ("countdown_seconds", "charge_per_correct_answer", "ability_base_cost", "ability_cost_step"):
            value = getattr(self, name)
            if not _is_int(value) or value < 0:
                raise ValidationError(f"{name} must be a non-negative integer, got {value!r}")
        if not _is_int(self.max_ability_charge) or self.max_ability_charge <= 0:
            raise ValidationError(f"max_ability_charge must be a positive integer, got {self.max_ability_charge!r}")

    @property
    def point_values(self) -> List[int]:
        """Legal point values for every category, one per board row."""
        return [(row + 1) * 100 for row in range(self.board_size)]

    @property
    def usable_abilities(self) -> List[Ability]:
        """Catalog entries that can actually be assigned (blank names excluded)."""
        return [ability for ability in self.abilities if not ability.is_blank]

    def find_ability(self, name: str) -> Optional[Ability]:
        """Look up a usable ability by name."""
        for ability in self.usable_abilities:
            if ability.name == name:
                return ability
        return None


def _is_int(value) -> bool:
    # bool is an int subclass; True is not a board size
    return isinstance(value, int) and not isinstance(value, bool)


# Default configuration instance
default_config = GameConfig()
