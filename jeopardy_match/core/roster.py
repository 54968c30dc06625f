"""
Roster manager: participants, readiness and ability assignment.
"""

import random
from typing import Dict, List, Optional

from .participant import Participant, Role
from ..config.game_config import GameConfig
from ..errors import CapacityExceeded, Forbidden, InvalidAction, InvalidName, NotFound, ValidationError


class Roster:
    """
    Tracks the participants of one match.

    Participants are kept in join order. Exactly one Game Master exists once
    the session has been created, and that role is never reassigned.
    """

    def __init__(self, config: GameConfig):
        self.config = config
        self._participants: Dict[str, Participant] = {}

    def __len__(self) -> int:
        return len(self._participants)

    def __iter__(self):
        return iter(list(self._participants.values()))

    def __contains__(self, participant_id: str) -> bool:
        return participant_id in self._participants

    @property
    def participants(self) -> List[Participant]:
        return list(self._participants.values())

    @property
    def game_master(self) -> Optional[Participant]:
        for participant in self._participants.values():
            if participant.is_game_master:
                return participant
        return None

    @property
    def contestants(self) -> List[Participant]:
        return [p for p in self._participants.values() if not p.is_game_master]

    def get(self, participant_id: str) -> Optional[Participant]:
        """Get participant by id."""
        return self._participants.get(participant_id)

    def require(self, participant_id: str) -> Participant:
        """Get participant by id, raising NotFound if absent."""
        participant = self._participants.get(participant_id)
        if participant is None:
            raise NotFound(f"Unknown participant: {participant_id}", participant_id)
        return participant

    def require_game_master(self, caller_id: str) -> Participant:
        """Return the caller if they are the Game Master, else raise Forbidden."""
        caller = self.require(caller_id)
        if not caller.is_game_master:
            raise Forbidden(f"{caller.name} is not the Game Master", caller_id)
        return caller

    @staticmethod
    def _clean_name(name: Optional[str]) -> str:
        if name is None or not name.strip():
            raise InvalidName("Name must not be empty")
        return name.strip()

    def add_participant(self, name: str, role: Role = Role.CONTESTANT,
                        participant_id: Optional[str] = None) -> Participant:
        """
        Add a participant to the roster.

        The Game Master joins ready; contestants must mark themselves ready.

        Raises:
            CapacityExceeded: If the roster already holds max_participants
            InvalidName: If the name is empty
            Forbidden: If a second Game Master is added
        """
        if len(self._participants) >= self.config.max_participants:
            raise CapacityExceeded(
                f"Roster is full ({self.config.max_participants} participants)"
            )
        clean_name = self._clean_name(name)
        if role == Role.GAME_MASTER and self.game_master is not None:
            raise Forbidden("The match already has a Game Master")
        if participant_id is not None and participant_id in self._participants:
            raise ValidationError(f"Participant id already in use: {participant_id}", participant_id)

        participant = Participant(name=clean_name, role=role, is_ready=(role == Role.GAME_MASTER))
        if participant_id is not None:
            participant.participant_id = participant_id
        self._participants[participant.participant_id] = participant
        return participant

    def remove_participant(self, caller_id: str, target_id: str) -> Participant:
        """Kick a participant. Only the Game Master may do this, and never to themselves."""
        self.require_game_master(caller_id)
        target = self.require(target_id)
        if target.is_game_master:
            raise Forbidden("The Game Master cannot be removed", target_id)
        del self._participants[target_id]
        return target

    def set_ready(self, participant_id: str, ready: bool) -> Participant:
        participant = self.require(participant_id)
        participant.is_ready = bool(ready)
        return participant

    def rename_participant(self, participant_id: str, new_name: str) -> Participant:
        """Rename a participant; the old name is kept if the new one is blank."""
        participant = self.require(participant_id)
        participant.name = self._clean_name(new_name)
        return participant

    def assign_ability(self, caller_id: str, target_id: str, ability_name: Optional[str]) -> Participant:
        """
        Manually assign (or clear, with None) a participant's ability.

        Only available when abilities are enabled and not randomized.
        """
        self.require_game_master(caller_id)
        target = self.require(target_id)
        if not self.config.use_abilities:
            raise InvalidAction("Abilities are disabled for this match")
        if self.config.randomize_abilities:
            raise InvalidAction("Abilities are assigned randomly; manual assignment is off")

        if ability_name is None:
            target.ability = None
            return target

        ability = self.config.find_ability(ability_name)
        if ability is None:
            raise ValidationError(f"Unknown ability: {ability_name!r}")
        target.ability = ability
        return target

    def assign_random_abilities(self, rng: Optional[random.Random] = None) -> None:
        """
        Shuffle the usable catalog and deal it out in join order.

        With fewer abilities than participants the shuffled catalog repeats.
        """
        rng = rng or random.Random()
        catalog = list(self.config.usable_abilities)
        rng.shuffle(catalog)
        for index, participant in enumerate(self._participants.values()):
            participant.ability = catalog[index % len(catalog)] if catalog else None

    def clear_abilities(self) -> None:
        for participant in self._participants.values():
            participant.ability = None

    def clear_active_abilities(self) -> List[Participant]:
        """Close every open ability window; returns the participants affected."""
        cleared = [p for p in self._participants.values() if p.has_active_ability]
        for participant in cleared:
            participant.clear_active_ability()
        return cleared

    def all_ready(self) -> bool:
        """True iff every participant is ready (vacuously true when empty)."""
        return all(p.is_ready for p in self._participants.values())
