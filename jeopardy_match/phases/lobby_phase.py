"""
Lobby phase handler: roster, settings, categories and ability setup.
"""

import random
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING

from ..config.config_loader import parse_abilities
from ..core import Host, MatchPhase, MatchState, Participant, Role
from ..errors import Forbidden, InvalidAction, ValidationError
from ..agents.category_generator import CategoryGenerator, PlaceholderCategoryGenerator

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


LOBBY_SETTINGS = ("board_size", "max_participants", "use_abilities", "randomize_abilities", "abilities")


class LobbyPhaseHandler:
    """Handles everything that happens before questions are written."""

    def __init__(self, match_state: MatchState, host: Host, event_emitter: Optional['EventEmitter'] = None):
        self.match_state = match_state
        self.host = host
        self.event_emitter = event_emitter

    @property
    def roster(self):
        return self.match_state.roster

    def join(self, name: str, role: Role = Role.CONTESTANT, participant_id: Optional[str] = None) -> Participant:
        """Add a participant delivered by the roster source."""
        self.match_state.require_phase(MatchPhase.LOBBY)
        participant = self.roster.add_participant(name, role, participant_id)
        self.match_state._log_action("participant_joined", {"participant": participant.participant_id})
        if self.event_emitter:
            self.event_emitter.emit_participant_joined(participant.participant_id, participant.name, participant.role.value)
        self.host.announce(f"{participant.name} joined the lobby.")
        return participant

    def leave(self, participant_id: str) -> Participant:
        """A participant disconnected before questions were written."""
        self.match_state.require_phase(MatchPhase.LOBBY)
        participant = self.roster.require(participant_id)
        if participant.is_game_master:
            raise Forbidden("The Game Master cannot leave a running session", participant_id)
        gm = self.roster.game_master
        self.roster.remove_participant(gm.participant_id, participant_id)
        self._emit_left(participant, "left")
        return participant

    def kick(self, caller_id: str, target_id: str) -> Participant:
        self.match_state.require_phase(MatchPhase.LOBBY)
        participant = self.roster.remove_participant(caller_id, target_id)
        self._emit_left(participant, "kicked")
        self.host.announce(f"{participant.name} was removed from the lobby.")
        return participant

    def _emit_left(self, participant: Participant, reason: str) -> None:
        self.match_state._log_action("participant_left", {"participant": participant.participant_id, "reason": reason})
        if self.event_emitter:
            self.event_emitter.emit_participant_left(participant.participant_id, participant.name, reason)

    def set_ready(self, participant_id: str, ready: bool) -> Participant:
        self.match_state.require_phase(MatchPhase.LOBBY)
        return self.roster.set_ready(participant_id, ready)

    def rename(self, participant_id: str, new_name: str) -> Participant:
        self.match_state.require_phase(MatchPhase.LOBBY)
        return self.roster.rename_participant(participant_id, new_name)

    def update_settings(self, caller_id: str, **changes: Any) -> Dict[str, Any]:
        """
        Change lobby settings (GM only).

        The new values are validated on a copy first; nothing changes if any
        of them is out of range.
        """
        self.match_state.require_phase(MatchPhase.LOBBY)
        self.roster.require_game_master(caller_id)

        unknown = set(changes) - set(LOBBY_SETTINGS)
        if unknown:
            raise ValidationError(f"Unknown settings: {sorted(unknown)}")
        if "abilities" in changes:
            changes["abilities"] = parse_abilities(changes["abilities"])
            names = [a.name for a in changes["abilities"] if not a.is_blank]
            if len(names) != len(set(names)):
                raise ValidationError("Ability names must be unique")

        config = self.match_state.config
        candidate = replace(config, **changes)
        candidate.validate()
        if candidate.max_participants < len(self.roster):
            raise ValidationError(
                f"max_participants cannot be lower than the current roster size ({len(self.roster)})"
            )

        for key, value in changes.items():
            setattr(config, key, value)
        self.match_state.resize_categories()

        settings = {key: getattr(config, key) for key in LOBBY_SETTINGS if key != "abilities"}
        settings["abilities"] = [{"name": a.name, "description": a.description} for a in config.abilities]
        self.match_state._log_action("settings_updated", {"changes": sorted(changes)})
        if self.event_emitter:
            self.event_emitter.emit_settings_update(settings)
        return settings

    def set_category(self, caller_id: str, index: int, label: str) -> List[str]:
        self.match_state.require_phase(MatchPhase.LOBBY)
        self.roster.require_game_master(caller_id)
        if not 0 <= index < self.match_state.config.board_size:
            raise ValidationError(f"Category index out of range: {index}")
        label = (label or "").strip()
        others = [c for i, c in enumerate(self.match_state.categories) if i != index]
        if label and label in others:
            raise ValidationError(f"Category names must be unique: {label!r}")
        self.match_state.categories[index] = label
        return list(self.match_state.categories)

    def set_categories(self, caller_id: str, labels: Sequence[str], source: str = "manual") -> List[str]:
        self.match_state.require_phase(MatchPhase.LOBBY)
        self.roster.require_game_master(caller_id)
        size = self.match_state.config.board_size
        if len(labels) != size:
            raise ValidationError(f"Expected {size} categories, got {len(labels)}")
        cleaned = [(label or "").strip() for label in labels]
        if len(set(label for label in cleaned if label)) != len([label for label in cleaned if label]):
            raise ValidationError("Category names must be unique")
        self.match_state.categories = cleaned
        if self.event_emitter:
            self.event_emitter.emit_categories_set(cleaned, source)
        return list(cleaned)

    def generate_categories(self, caller_id: str, generator: Optional[CategoryGenerator] = None) -> List[str]:
        """
        Fill the category set from the generation service.

        Generator failures never reach the match: the placeholder labels are
        used instead.
        """
        self.match_state.require_phase(MatchPhase.LOBBY)
        self.roster.require_game_master(caller_id)
        size = self.match_state.config.board_size
        generator = generator or PlaceholderCategoryGenerator()

        labels = generator.generate(size)
        source = generator.last_source
        try:
            return self.set_categories(caller_id, labels, source=source)
        except ValidationError as e:
            # Duplicate labels from the service are treated like any other service failure
            if self.event_emitter:
                self.event_emitter.emit_category_fallback(str(e), size)
            labels = PlaceholderCategoryGenerator().generate(size)
            return self.set_categories(caller_id, labels, source="placeholder")

    def assign_ability(self, caller_id: str, target_id: str, ability_name: Optional[str]) -> Participant:
        self.match_state.require_phase(MatchPhase.LOBBY)
        return self.roster.assign_ability(caller_id, target_id, ability_name)

    def start_question_phase(self, caller_id: str, rng: Optional[random.Random] = None) -> None:
        """
        Leave the lobby and start writing questions.

        Needs at least two participants, everyone ready and a full category
        set. Abilities are dealt out here in random mode and cleared when
        they are disabled; manual assignments are kept as they are.
        """
        self.match_state.require_phase(MatchPhase.LOBBY)
        self.roster.require_game_master(caller_id)
        if len(self.roster) < 2:
            raise InvalidAction("At least two participants are needed to start")
        if not self.roster.all_ready():
            raise InvalidAction("Waiting for all participants to be ready")
        if not self.match_state.categories_ready():
            raise InvalidAction("Fill in every category first")

        config = self.match_state.config
        if config.use_abilities and config.randomize_abilities:
            self.roster.assign_random_abilities(rng or random.Random(config.random_seed))
        elif not config.use_abilities:
            self.roster.clear_abilities()

        self.match_state.start_question_phase()
        self.host.announce(
            f"Question writing has started. Categories: {', '.join(self.match_state.categories)}"
        )
