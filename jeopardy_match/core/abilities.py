"""
Ability ("ultimate") economy: charge, escalating cost and activation.
"""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from .participant import Participant
from .roster import Roster
from ..config.game_config import Ability, GameConfig
from ..errors import Forbidden, InsufficientCharge, InsufficientScore, InvalidAction

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


@dataclass
class ActivationResult:
    """Outcome of a successful ability activation."""
    participant: Participant
    ability: Ability
    cost: int
    score_after: int


def activation_cost(uses: int, base_cost: int = 200, step: int = 50) -> int:
    """Cost of the next activation after `uses` previous ones."""
    return base_cost + step * uses


class AbilityEconomy:
    """Charges abilities on correct answers and handles activation."""

    def __init__(self, roster: Roster, config: GameConfig, event_emitter: Optional['EventEmitter'] = None):
        self.roster = roster
        self.config = config
        self.event_emitter = event_emitter

    def cost_for(self, participant: Participant) -> int:
        return activation_cost(participant.ability_uses, self.config.ability_base_cost, self.config.ability_cost_step)

    def award_charge(self, participant: Participant) -> int:
        """Charge gained for a correct answer, clamped to the configured maximum."""
        before = participant.ability_charge
        participant.add_charge(self.config.charge_per_correct_answer, self.config.max_ability_charge)
        return participant.ability_charge - before

    def is_charged(self, participant: Participant) -> bool:
        return participant.ability_charge >= self.config.max_ability_charge

    def can_activate(self, caller: Participant, target: Participant) -> bool:
        """Non-raising eligibility check, for display."""
        try:
            self.check_activation(caller, target)
        except (Forbidden, InvalidAction, InsufficientScore, InsufficientCharge):
            return False
        return True

    def check_activation(self, caller: Participant, target: Participant) -> int:
        """
        Validate an activation and return its cost.

        The Game Master may trigger anyone's ability whenever the target can
        pay for it. A contestant may only trigger their own, and only with a
        full charge.
        """
        if target.ability is None:
            raise InvalidAction(f"{target.name} has no ability assigned", target.participant_id)
        if not caller.is_game_master and caller.participant_id != target.participant_id:
            raise Forbidden("Contestants can only activate their own ability", caller.participant_id)

        cost = self.cost_for(target)
        if target.score < cost:
            raise InsufficientScore(target.participant_id, target.score, cost)
        if not caller.is_game_master and not self.is_charged(target):
            raise InsufficientCharge(target.participant_id, target.ability_charge, self.config.max_ability_charge)
        return cost

    def activate(self, caller_id: str, target_id: str) -> ActivationResult:
        """
        Spend score to activate a participant's ability.

        The score may go negative only through ability costs. The activation
        stays marked active until the next question is resolved.
        """
        caller = self.roster.require(caller_id)
        target = self.roster.require(target_id)
        cost = self.check_activation(caller, target)

        target.add_score(-cost)
        target.ability_charge = 0
        target.ability_uses += 1
        target.mark_ability_active()

        if self.event_emitter:
            self.event_emitter.emit_ability_activated(
                target.participant_id,
                target.name,
                target.ability.name,
                target.ability.description,
                cost,
            )

        return ActivationResult(participant=target, ability=target.ability, cost=cost, score_after=target.score)
