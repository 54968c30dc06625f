"""
Participant class representing a match player or the Game Master.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from ..config.game_config import Ability


class Role(Enum):
    """Participant role in the match."""
    GAME_MASTER = "game_master"
    CONTESTANT = "contestant"


def new_participant_id() -> str:
    """Stable unique identifier for a participant."""
    return uuid.uuid4().hex


@dataclass
class Participant:
    """Represents a participant in the match."""
    name: str
    role: Role = Role.CONTESTANT
    participant_id: str = field(default_factory=new_participant_id)
    is_ready: bool = False
    score: int = 0

    # Ability economy
    ability: Optional[Ability] = None
    ability_charge: int = 0  # 0 to max_ability_charge
    ability_uses: int = 0
    active_ability_name: Optional[str] = None  # Set while an activated ability's window is open

    def __str__(self) -> str:
        return f"{self.name} ({self.role.value})"

    @property
    def is_game_master(self) -> bool:
        """Check if participant is the Game Master."""
        return self.role == Role.GAME_MASTER

    @property
    def has_active_ability(self) -> bool:
        return self.active_ability_name is not None

    def add_score(self, amount: int) -> None:
        """Add (or with a negative amount, subtract) points without a floor."""
        self.score += amount

    def add_charge(self, amount: int, maximum: int = 100) -> None:
        """Add ability charge, clamped to [0, maximum]."""
        self.ability_charge = max(0, min(maximum, self.ability_charge + amount))

    def mark_ability_active(self) -> None:
        """Open the ability window for the currently assigned ability."""
        self.active_ability_name = self.ability.name if self.ability else None

    def clear_active_ability(self) -> None:
        """Close the ability window."""
        self.active_ability_name = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize participant for events and summaries."""
        return {
            "id": self.participant_id,
            "name": self.name,
            "role": self.role.value,
            "is_ready": self.is_ready,
            "score": self.score,
            "ability": self.ability.name if self.ability else None,
            "ability_charge": self.ability_charge,
            "ability_uses": self.ability_uses,
            "active_ability_name": self.active_ability_name,
        }
