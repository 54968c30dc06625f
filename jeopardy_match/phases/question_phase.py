"""
Question phase handler: submissions, GM review and board assembly.
"""

from typing import Any, Dict, List, Optional, TYPE_CHECKING

from ..core import Board, Host, MatchPhase, MatchState, Question, QuestionStatus, assemble_board
from ..errors import InvalidAction

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


class QuestionPhaseHandler:
    """Handles question writing and moderation."""

    def __init__(self, match_state: MatchState, host: Host, event_emitter: Optional['EventEmitter'] = None):
        self.match_state = match_state
        self.host = host
        self.event_emitter = event_emitter

    @property
    def pipeline(self):
        return self.match_state.pipeline

    def submit(self, creator_id: str, category: str, prompt: str, answer: str,
               points: Optional[int] = None) -> Question:
        """Submit a question (pending for contestants, approved for the GM)."""
        self.match_state.require_phase(MatchPhase.QUESTION_WRITING)
        question = self.pipeline.submit(creator_id, category, prompt, answer, points)

        self.match_state._log_action("question_submitted", {
            "question_id": question.question_id,
            "creator": creator_id,
            "status": question.status.value,
        })
        if self.event_emitter:
            self.event_emitter.emit_question_submitted(
                question.question_id,
                question.creator_id,
                question.category,
                question.status.value,
                question.points,
            )
        return question

    def review(self, caller_id: str, question_id: str, edits: Optional[Dict[str, Any]],
               decision: QuestionStatus) -> Question:
        """GM edits and approves or rejects a question."""
        self.match_state.require_phase(MatchPhase.QUESTION_WRITING)
        question = self.pipeline.review(caller_id, question_id, edits, decision)

        self.match_state._log_action("question_reviewed", {
            "question_id": question.question_id,
            "status": question.status.value,
            "points": question.points,
        })
        if self.event_emitter:
            self.event_emitter.emit_question_reviewed(
                question.question_id,
                question.category,
                question.status.value,
                question.points,
            )
        return question

    def available_points(self, category: str, exclude_question_id: Optional[str] = None) -> List[int]:
        return self.pipeline.available_points(category, exclude_question_id)

    def progress(self) -> Dict[str, int]:
        """Approved vs. required question counts for the progress bar."""
        approved = self.pipeline.approved_count()
        required = self.pipeline.required_count()
        return {
            "approved": approved,
            "required": required,
            "missing": max(0, required - approved),
            "pending": len(self.pipeline.pending_questions()),
        }

    def start_play(self, caller_id: str) -> Board:
        """
        Build the board and start play (GM only).

        Requires exactly board_size² approved questions.
        """
        self.match_state.require_phase(MatchPhase.QUESTION_WRITING)
        self.match_state.roster.require_game_master(caller_id)
        if not self.pipeline.is_complete():
            progress = self.progress()
            raise InvalidAction(
                f"{progress['approved']} of {progress['required']} questions approved; "
                f"exactly {progress['required']} are needed to start"
            )

        board = assemble_board(
            self.match_state.categories,
            self.pipeline.approved_questions(),
            self.match_state.config.board_size,
        )
        stranded = self.pipeline.approved_count() - sum(1 for _, _, cell in board.iter_cells() if not cell.is_empty)
        if stranded:
            self.host.announce(f"{stranded} approved question(s) share a slot and were left off the board.")

        self.match_state.start_play(board)
        self.host.announce("The board is ready. Let the match begin!")
        return board
