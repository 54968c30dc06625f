"""
Core match state and phase transitions.
"""

import random
import string
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from .board import Board
from .participant import Participant
from .questions import Question, QuestionPipeline
from .roster import Roster
from ..config.game_config import GameConfig
from ..errors import InvalidAction

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


class MatchPhase(Enum):
    """Current top-level phase of the match."""
    LOBBY = "lobby"
    QUESTION_WRITING = "question_writing"
    IN_PLAY = "in_play"
    MATCH_COMPLETE = "match_complete"


class ResolutionState(Enum):
    """Per-question cycle while the match is in play."""
    AWAITING_SELECTION = "awaiting_selection"
    QUESTION_OPEN = "question_open"
    ANSWER_SHOWN = "answer_shown"


@dataclass
class OpenQuestion:
    """The single question currently revealed to everyone."""
    row: int
    column: int
    question: Question
    opened_at: float
    countdown_seconds: int

    def remaining_seconds(self, now: float) -> int:
        """Countdown shown to players. Purely informational: nothing happens at zero."""
        elapsed = max(0.0, now - self.opened_at)
        return max(0, self.countdown_seconds - int(elapsed))


def generate_lobby_code(rng: Optional[random.Random] = None) -> str:
    """Six-character invite code."""
    rng = rng or random.Random()
    alphabet = string.ascii_uppercase + string.digits
    return "".join(rng.choice(alphabet) for _ in range(6))


@dataclass
class MatchState:
    """Complete match state."""
    config: GameConfig = field(default_factory=GameConfig)
    phase: MatchPhase = MatchPhase.LOBBY
    lobby_code: str = ""

    roster: Optional[Roster] = None
    pipeline: Optional[QuestionPipeline] = None
    categories: List[str] = field(default_factory=list)
    board: Optional[Board] = None

    # In-play question cycle
    resolution: ResolutionState = ResolutionState.AWAITING_SELECTION
    open_question: Optional[OpenQuestion] = None
    questions_resolved: int = 0

    # Match history
    action_log: List[Dict[str, Any]] = field(default_factory=list)

    clock: Callable[[], float] = time.monotonic

    # Event emitter for recording and live viewers (optional)
    event_emitter: Optional['EventEmitter'] = None

    def __post_init__(self):
        """Initialize roster, pipeline and category slots."""
        if self.roster is None:
            self.roster = Roster(self.config)
        if self.pipeline is None:
            self.pipeline = QuestionPipeline(self.roster, self.config.board_size)
        if not self.lobby_code:
            self.lobby_code = generate_lobby_code(random.Random(self.config.random_seed))
        self.resize_categories()

    @property
    def participants(self) -> List[Participant]:
        return self.roster.participants

    def get_participant(self, participant_id: str) -> Optional[Participant]:
        return self.roster.get(participant_id)

    def require_phase(self, *phases: MatchPhase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise InvalidAction(f"Not allowed during {self.phase.value} (needs {allowed})")

    def require_resolution(self, *states: ResolutionState) -> None:
        self.require_phase(MatchPhase.IN_PLAY)
        if self.resolution not in states:
            allowed = ", ".join(s.value for s in states)
            raise InvalidAction(f"Not allowed while {self.resolution.value} (needs {allowed})")

    def resize_categories(self) -> None:
        """Pad or truncate the category list to the board size."""
        size = self.config.board_size
        self.categories = [
            self.categories[index] if index < len(self.categories) else ""
            for index in range(size)
        ]
        self.pipeline.board_size = size

    def categories_ready(self) -> bool:
        labels = [category.strip() for category in self.categories]
        return (len(labels) == self.config.board_size
                and all(labels)
                and len(set(labels)) == len(labels))

    def start_question_phase(self) -> None:
        """Transition to question writing; the category set is frozen from here on."""
        self.phase = MatchPhase.QUESTION_WRITING
        self.pipeline.categories = list(self.categories)
        self._log_action("question_phase_start", {"categories": list(self.categories)})
        self._emit_phase_change()

    def start_play(self, board: Board) -> None:
        """Transition to play with a freshly assembled board."""
        self.board = board
        self.phase = MatchPhase.IN_PLAY
        self.resolution = ResolutionState.AWAITING_SELECTION
        self.open_question = None
        self._log_action("play_start", {"board_size": board.size, "cells": len(board.remaining_cells())})
        self._emit_phase_change()
        # A board with no playable cell is already exhausted
        self.check_match_complete()

    def open_cell(self, row: int, column: int, question: Question) -> OpenQuestion:
        self.open_question = OpenQuestion(
            row=row,
            column=column,
            question=question,
            opened_at=self.clock(),
            countdown_seconds=self.config.countdown_seconds,
        )
        self.resolution = ResolutionState.QUESTION_OPEN
        self._log_action("cell_selected", {"row": row, "column": column, "question_id": question.question_id})
        return self.open_question

    def show_answer(self) -> None:
        self.resolution = ResolutionState.ANSWER_SHOWN
        self._log_action("answer_revealed", {"question_id": self.open_question.question.question_id})

    def close_question(self) -> None:
        """Mark the open cell revealed and return to selection."""
        current = self.open_question
        self.board.cell(current.row, current.column).revealed = True
        self.open_question = None
        self.resolution = ResolutionState.AWAITING_SELECTION
        self.questions_resolved += 1
        self.check_match_complete()

    def remaining_seconds(self) -> Optional[int]:
        if self.open_question is None:
            return None
        return self.open_question.remaining_seconds(self.clock())

    def check_match_complete(self) -> bool:
        """End the match once every cell is revealed or empty."""
        if self.phase == MatchPhase.IN_PLAY and self.board is not None and self.board.is_exhausted():
            self.complete_match()
            return True
        return False

    def complete_match(self) -> None:
        self.phase = MatchPhase.MATCH_COMPLETE
        self._log_action("match_complete", {"questions_resolved": self.questions_resolved})
        self._emit_phase_change()

    def _log_action(self, action_type: str, data: Dict[str, Any]) -> None:
        """Log a match action."""
        self.action_log.append({
            "type": action_type,
            "phase": self.phase.value,
            "resolution": self.resolution.value,
            "data": data
        })

    def get_match_summary(self) -> Dict[str, Any]:
        """Get a summary of the current match state."""
        return {
            "lobby_code": self.lobby_code,
            "phase": self.phase.value,
            "resolution": self.resolution.value if self.phase == MatchPhase.IN_PLAY else None,
            "categories": list(self.categories),
            "participants": [p.to_dict() for p in self.participants],
            "approved_questions": self.pipeline.approved_count(),
            "required_questions": self.pipeline.required_count(),
            "questions_resolved": self.questions_resolved,
            "board": self.board.to_dict() if self.board else None,
            "remaining_seconds": self.remaining_seconds(),
        }

    def _emit_phase_change(self) -> None:
        if self.event_emitter:
            self.event_emitter.emit_phase_change(self.phase.value)
            self._emit_match_state_update()

    def _emit_match_state_update(self) -> None:
        """Emit match state update event."""
        if self.event_emitter:
            self.event_emitter.emit_match_state_update(self.get_match_summary())
