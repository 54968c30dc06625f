"""
Play phase handler: cell selection, answer reveal, scoring and abilities.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, TYPE_CHECKING

from ..core import (
    AbilityEconomy, ActivationResult, Host, MatchPhase, MatchState,
    OpenQuestion, Participant, ResolutionState,
)
from ..errors import InvalidAction, ValidationError

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


SCORE_ACTIONS = ("add", "subtract", "set")


@dataclass
class ResolutionResult:
    """Outcome of closing a question."""
    question_id: str
    points: int
    share: int = 0
    recipients: List[str] = field(default_factory=list)  # Participant ids that received the share
    charged: List[str] = field(default_factory=list)  # Participant ids that gained ability charge
    skipped: bool = False
    match_complete: bool = False

    @property
    def total_awarded(self) -> int:
        return self.share * len(self.recipients)


class PlayPhaseHandler:
    """
    Runs the question cycle on the board.

    AWAITING_SELECTION -> QUESTION_OPEN -> ANSWER_SHOWN -> AWAITING_SELECTION,
    with at most one question open at a time.
    """

    def __init__(self, match_state: MatchState, host: Host, event_emitter: Optional['EventEmitter'] = None):
        self.match_state = match_state
        self.host = host
        self.event_emitter = event_emitter
        self.abilities = AbilityEconomy(match_state.roster, match_state.config, event_emitter)

    @property
    def roster(self):
        return self.match_state.roster

    def select_cell(self, caller_id: str, row: int, column: int) -> OpenQuestion:
        """GM opens an unrevealed, populated cell and starts the countdown."""
        self.roster.require_game_master(caller_id)
        self.match_state.require_resolution(ResolutionState.AWAITING_SELECTION)
        cell = self.match_state.board.cell(row, column)
        if cell.is_empty:
            raise InvalidAction(f"Cell ({row}, {column}) has no question")
        if cell.revealed:
            raise InvalidAction(f"Cell ({row}, {column}) was already played")

        opened = self.match_state.open_cell(row, column, cell.question)
        if self.event_emitter:
            self.event_emitter.emit_cell_selected(
                row,
                column,
                cell.question.question_id,
                self.match_state.categories[column],
                cell.question.points,
                cell.question.prompt,
                opened.countdown_seconds,
            )
        self.host.announce(f"{self.match_state.categories[column]} for {cell.question.points}: {cell.question.prompt}")
        return opened

    def reveal_answer(self, caller_id: str) -> str:
        self.roster.require_game_master(caller_id)
        self.match_state.require_resolution(ResolutionState.QUESTION_OPEN)
        question = self.match_state.open_question.question
        self.match_state.show_answer()
        if self.event_emitter:
            self.event_emitter.emit_answer_revealed(question.question_id, question.answer)
        self.host.announce(f"The answer is: {question.answer}")
        return question.answer

    def _validate_correct(self, correct_ids: Iterable[str]) -> List[str]:
        unique = []
        for participant_id in correct_ids:
            self.roster.require(participant_id)
            if participant_id not in unique:
                unique.append(participant_id)
        return unique

    def resolve(self, caller_id: str, correct_ids: Iterable[str]) -> ResolutionResult:
        """
        Score the open question.

        The creator always shares in the points when at least one participant
        answered correctly; the remainder of the split is dropped. Only
        correct answerers gain ability charge.
        """
        self.roster.require_game_master(caller_id)
        self.match_state.require_resolution(ResolutionState.ANSWER_SHOWN)
        return self._close(self._validate_correct(correct_ids), skipped=False)

    def skip(self, caller_id: str) -> ResolutionResult:
        """Abandon the open question without scoring; the cell still counts as played."""
        self.roster.require_game_master(caller_id)
        self.match_state.require_resolution(ResolutionState.QUESTION_OPEN, ResolutionState.ANSWER_SHOWN)
        return self._close([], skipped=True)

    def _close(self, correct_ids: List[str], skipped: bool) -> ResolutionResult:
        question = self.match_state.open_question.question
        result = ResolutionResult(question_id=question.question_id, points=question.points, skipped=skipped)

        if correct_ids:
            recipient_ids = set(correct_ids) | {question.creator_id}
            result.share = question.points // len(recipient_ids)
            # Roster order keeps the award order reproducible
            for participant in self.roster:
                if participant.participant_id in recipient_ids:
                    participant.add_score(result.share)
                    result.recipients.append(participant.participant_id)
                if participant.participant_id in correct_ids:
                    self.abilities.award_charge(participant)
                    result.charged.append(participant.participant_id)

        cleared = self.roster.clear_active_abilities()
        self.match_state._log_action("question_resolved", {
            "question_id": question.question_id,
            "share": result.share,
            "recipients": list(result.recipients),
            "skipped": skipped,
            "cleared_abilities": [p.participant_id for p in cleared],
        })
        if self.event_emitter:
            self.event_emitter.emit_question_resolved(
                question.question_id,
                question.points,
                result.share,
                list(result.recipients),
                list(result.charged),
                skipped,
            )

        if skipped:
            self.host.announce("Question skipped.")
        elif not correct_ids:
            self.host.announce("Nobody gets the points this time.")
        else:
            names = [self.roster.get(pid).name for pid in result.recipients]
            self.host.announce(f"{result.share} points each to: {', '.join(names)}")

        self.match_state.close_question()
        result.match_complete = self.match_state.phase == MatchPhase.MATCH_COMPLETE
        self.match_state._emit_match_state_update()
        return result

    def activate_ability(self, caller_id: str, target_id: str) -> ActivationResult:
        """Activate a participant's ability; see AbilityEconomy for the rules."""
        self.match_state.require_phase(MatchPhase.IN_PLAY)
        result = self.abilities.activate(caller_id, target_id)
        self.match_state._log_action("ability_activated", {
            "participant": target_id,
            "ability": result.ability.name,
            "cost": result.cost,
        })
        self.host.announce(f"{result.participant.name} activated {result.ability.name}!")
        return result

    def adjust_score(self, caller_id: str, target_id: str, action: str, amount: int) -> Participant:
        """
        Manual score correction by the GM.

        Unlike ability costs, subtracting here never takes a score below zero.
        """
        self.roster.require_game_master(caller_id)
        self.match_state.require_phase(MatchPhase.IN_PLAY)
        target = self.roster.require(target_id)
        if action not in SCORE_ACTIONS:
            raise ValidationError(f"Unknown score action: {action!r}")
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise ValidationError(f"Amount must be an integer, got {amount!r}")
        if action in ("add", "subtract") and amount <= 0:
            raise ValidationError("Amount must be positive")
        if action == "set" and amount < 0:
            raise ValidationError("Score cannot be set below zero")

        if action == "add":
            target.score += amount
        elif action == "subtract":
            target.score = max(0, target.score - amount)
        else:
            target.score = amount

        self.match_state._log_action("score_adjusted", {"participant": target_id, "action": action, "amount": amount})
        if self.event_emitter:
            self.event_emitter.emit_score_adjusted(target_id, action, amount, target.score)
        return target
