"""
Match session: the single entry point through which a match is mutated.
"""

import copy
import functools
import threading
from typing import Any, Dict, List, Optional

from .agents.category_generator import CategoryGenerator, LLMCategoryGenerator
from .config.game_config import GameConfig
from .core import (
    Board, MatchPhase, MatchState, OpenQuestion, Participant, Question,
    QuestionStatus, Role, Host, rank_participants, export_questions,
)
from .core.abilities import ActivationResult
from .errors import MatchError
from .phases import LobbyPhaseHandler, PlayPhaseHandler, QuestionPhaseHandler, ResolutionResult
from .web.event_emitter import EventEmitter


def command(method):
    """
    Run a session method under the session lock.

    Rejected commands are reported to the host and event log and then
    re-raised to the caller.
    """
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            try:
                result = method(self, *args, **kwargs)
            except MatchError as e:
                self.host.rejected(method.__name__, e)
                if self.event_emitter:
                    self.event_emitter.emit_command_rejected(
                        method.__name__, type(e).__name__, e.message, e.participant_id
                    )
                raise
            self._announce_completion()
            return result
    return wrapper


class MatchSession:
    """
    One match, from lobby to final ranking.

    Every command runs under a per-session lock, so commands from different
    participants are applied one at a time. Sessions share no state with
    each other.
    """

    def __init__(self, game_master_name: str, config: Optional[GameConfig] = None,
                 event_emitter: Optional[EventEmitter] = None,
                 category_generator: Optional[CategoryGenerator] = None):
        # Settings are edited in place from the lobby, so each session owns its copy
        self.config = copy.deepcopy(config) if config else GameConfig()
        self.config.validate()
        self.event_emitter = event_emitter
        self._lock = threading.RLock()
        self._completion_announced = False

        self.match_state = MatchState(config=self.config, event_emitter=event_emitter)
        self.host = Host(self.match_state, self.config, event_emitter=event_emitter)
        self.category_generator = category_generator or LLMCategoryGenerator(self.config, event_emitter)

        self.lobby = LobbyPhaseHandler(self.match_state, self.host, event_emitter=event_emitter)
        self.questions = QuestionPhaseHandler(self.match_state, self.host, event_emitter=event_emitter)
        self.play = PlayPhaseHandler(self.match_state, self.host, event_emitter=event_emitter)

        # The Game Master is fixed for the lifetime of the session
        self.game_master = self.match_state.roster.add_participant(game_master_name, Role.GAME_MASTER)
        if self.event_emitter:
            self.event_emitter.emit_match_start(
                self.match_state.lobby_code,
                self.game_master.to_dict(),
                {"board_size": self.config.board_size, "max_participants": self.config.max_participants},
            )

    @property
    def phase(self) -> MatchPhase:
        return self.match_state.phase

    @property
    def game_master_id(self) -> str:
        return self.game_master.participant_id

    @property
    def participants(self) -> List[Participant]:
        return self.match_state.participants

    @property
    def board(self) -> Optional[Board]:
        return self.match_state.board

    def get_participant(self, participant_id: str) -> Optional[Participant]:
        return self.match_state.get_participant(participant_id)

    # Lobby

    @command
    def join(self, name: str, participant_id: Optional[str] = None) -> Participant:
        return self.lobby.join(name, Role.CONTESTANT, participant_id)

    @command
    def leave(self, participant_id: str) -> Participant:
        return self.lobby.leave(participant_id)

    @command
    def kick(self, caller_id: str, target_id: str) -> Participant:
        return self.lobby.kick(caller_id, target_id)

    @command
    def set_ready(self, participant_id: str, ready: bool = True) -> Participant:
        return self.lobby.set_ready(participant_id, ready)

    @command
    def rename(self, participant_id: str, new_name: str) -> Participant:
        return self.lobby.rename(participant_id, new_name)

    @command
    def update_settings(self, caller_id: str, **changes: Any) -> Dict[str, Any]:
        return self.lobby.update_settings(caller_id, **changes)

    @command
    def set_category(self, caller_id: str, index: int, label: str) -> List[str]:
        return self.lobby.set_category(caller_id, index, label)

    @command
    def set_categories(self, caller_id: str, labels: List[str]) -> List[str]:
        return self.lobby.set_categories(caller_id, labels)

    @command
    def generate_categories(self, caller_id: str) -> List[str]:
        return self.lobby.generate_categories(caller_id, self.category_generator)

    @command
    def assign_ability(self, caller_id: str, target_id: str, ability_name: Optional[str]) -> Participant:
        return self.lobby.assign_ability(caller_id, target_id, ability_name)

    @command
    def start_question_phase(self, caller_id: str) -> None:
        self.lobby.start_question_phase(caller_id)

    # Question writing

    @command
    def submit_question(self, creator_id: str, category: str, prompt: str, answer: str,
                        points: Optional[int] = None) -> Question:
        return self.questions.submit(creator_id, category, prompt, answer, points)

    @command
    def review_question(self, caller_id: str, question_id: str, decision: QuestionStatus,
                        edits: Optional[Dict[str, Any]] = None) -> Question:
        return self.questions.review(caller_id, question_id, edits, decision)

    @command
    def available_points(self, category: str, exclude_question_id: Optional[str] = None) -> List[int]:
        return self.questions.available_points(category, exclude_question_id)

    @command
    def start_play(self, caller_id: str) -> Board:
        return self.questions.start_play(caller_id)

    # Play

    @command
    def select_cell(self, caller_id: str, row: int, column: int) -> OpenQuestion:
        return self.play.select_cell(caller_id, row, column)

    @command
    def reveal_answer(self, caller_id: str) -> str:
        return self.play.reveal_answer(caller_id)

    @command
    def resolve(self, caller_id: str, correct_ids: List[str]) -> ResolutionResult:
        return self.play.resolve(caller_id, correct_ids)

    @command
    def skip(self, caller_id: str) -> ResolutionResult:
        return self.play.skip(caller_id)

    @command
    def activate_ability(self, caller_id: str, target_id: str) -> ActivationResult:
        return self.play.activate_ability(caller_id, target_id)

    @command
    def adjust_score(self, caller_id: str, target_id: str, action: str, amount: int) -> Participant:
        return self.play.adjust_score(caller_id, target_id, action, amount)

    # Results

    def remaining_seconds(self) -> Optional[int]:
        with self._lock:
            return self.match_state.remaining_seconds()

    def ranking(self) -> List[Participant]:
        with self._lock:
            return rank_participants(self.match_state.participants)

    def approved_questions(self) -> List[Question]:
        with self._lock:
            return self.match_state.pipeline.approved_questions()

    def export_questions(self, fmt: str = "json") -> str:
        """Serialize the approved question set; writing it anywhere is up to the caller."""
        return export_questions(self.approved_questions(), fmt)

    def save_export(self, fmt: str = "json") -> Optional[str]:
        """Hand the approved question set to the run recorder for writing."""
        if not self.event_emitter or not self.event_emitter.run_recorder:
            return None
        questions = self.approved_questions()
        path = self.event_emitter.run_recorder.save_export(questions, fmt)
        if path is None:
            return None
        self.event_emitter.emit_export_saved(str(path), fmt, len(questions))
        return str(path)

    def get_summary(self) -> Dict[str, Any]:
        with self._lock:
            return self.match_state.get_match_summary()

    def _announce_completion(self) -> None:
        if self.match_state.phase != MatchPhase.MATCH_COMPLETE or self._completion_announced:
            return
        self._completion_announced = True
        ranking = rank_participants(self.match_state.participants)
        winner = ranking[0] if ranking else None
        if self.event_emitter:
            self.event_emitter.emit_match_complete(
                [p.to_dict() for p in ranking],
                winner.name if winner else None,
            )
        if winner:
            self.host.announce(f"The board is cleared! {winner.name} wins with {winner.score} points.")
