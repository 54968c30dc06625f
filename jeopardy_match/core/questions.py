"""
Question pipeline: intake, moderation and point-slot allocation.
"""

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from .roster import Roster
from ..errors import InvalidAction, MissingPoints, NotFound, ValidationError


class QuestionStatus(Enum):
    """Moderation status of a question."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


EDITABLE_FIELDS = ("category", "prompt", "answer", "points")


@dataclass
class Question:
    """A trivia question written by a participant."""
    creator_id: str
    creator_name: str
    category: str
    prompt: str
    answer: str
    points: int = 0
    status: QuestionStatus = QuestionStatus.PENDING
    question_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def is_approved(self) -> bool:
        return self.status == QuestionStatus.APPROVED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.question_id,
            "creator_id": self.creator_id,
            "creator_name": self.creator_name,
            "category": self.category,
            "question": self.prompt,
            "answer": self.answer,
            "points": self.points,
            "status": self.status.value,
        }


class QuestionPipeline:
    """
    Collects questions and runs them through GM moderation.

    Questions are kept in submission order, which is also the order the board
    assembler sees them in. The pipeline does not stop two approved questions
    from sharing a (category, points) slot; only the authoring helpers
    (`available_points`) steer the GM away from it.
    """

    def __init__(self, roster: Roster, board_size: int, categories: Optional[Sequence[str]] = None):
        self.roster = roster
        self.board_size = board_size
        self.categories: List[str] = list(categories or [])
        self._questions: Dict[str, Question] = {}

    @property
    def questions(self) -> List[Question]:
        return list(self._questions.values())

    @property
    def point_values(self) -> List[int]:
        return [(row + 1) * 100 for row in range(self.board_size)]

    def get(self, question_id: str) -> Optional[Question]:
        return self._questions.get(question_id)

    def require(self, question_id: str) -> Question:
        question = self._questions.get(question_id)
        if question is None:
            raise NotFound(f"Unknown question: {question_id}")
        return question

    def _validate_text(self, category: Optional[str], prompt: Optional[str], answer: Optional[str]) -> None:
        for label, value in (("category", category), ("question", prompt), ("answer", answer)):
            if not isinstance(value, str):
                raise ValidationError(f"The {label} must be text, got {value!r}")
            if not value.strip():
                raise ValidationError(f"The {label} must not be empty")
        if self.categories and category not in self.categories:
            raise ValidationError(f"Unknown category: {category!r}")

    def _validate_points(self, points: Any) -> int:
        if not isinstance(points, int) or isinstance(points, bool):
            raise ValidationError(f"Points must be an integer, got {points!r}")
        if points not in self.point_values:
            raise ValidationError(f"Points must be one of {self.point_values}, got {points}")
        return points

    def submit(self, creator_id: str, category: str, prompt: str, answer: str,
               points: Optional[int] = None) -> Question:
        """
        Submit a new question.

        Contestant questions start PENDING with no points. The Game Master's
        own questions are APPROVED immediately and must carry a point value.
        """
        creator = self.roster.require(creator_id)
        self._validate_text(category, prompt, answer)

        if creator.is_game_master:
            if not points:
                raise MissingPoints("Choose a point value for the question", creator_id)
            points = self._validate_points(points)
            status = QuestionStatus.APPROVED
        else:
            points = 0
            status = QuestionStatus.PENDING

        question = Question(
            creator_id=creator.participant_id,
            creator_name=creator.name,
            category=category,
            prompt=prompt.strip(),
            answer=answer.strip(),
            points=points,
            status=status,
        )
        self._questions[question.question_id] = question
        return question

    def review(self, caller_id: str, question_id: str, edits: Optional[Dict[str, Any]],
               decision: QuestionStatus) -> Question:
        """
        Apply GM edits to a question, then approve or reject it.

        Rejecting always resets points to 0; a rejected question can be
        reviewed again later and re-approved with a fresh point value.
        """
        self.roster.require_game_master(caller_id)
        question = self.require(question_id)
        if decision not in (QuestionStatus.APPROVED, QuestionStatus.REJECTED):
            raise InvalidAction(f"Review decision must be approved or rejected, got {decision}")

        edits = dict(edits or {})
        unknown = set(edits) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot edit fields: {sorted(unknown)}")

        # Work on a copy so a rejected review leaves the stored question untouched
        candidate = replace(question, **edits)
        if isinstance(candidate.prompt, str):
            candidate.prompt = candidate.prompt.strip()
        if isinstance(candidate.answer, str):
            candidate.answer = candidate.answer.strip()
        self._validate_text(candidate.category, candidate.prompt, candidate.answer)

        if decision == QuestionStatus.REJECTED:
            candidate.points = 0
        else:
            if not candidate.points:
                raise MissingPoints("Choose a point value before approving", caller_id)
            self._validate_points(candidate.points)

        candidate.status = decision
        self._questions[question_id] = candidate
        return candidate

    def taken_points(self, category: str, exclude_question_id: Optional[str] = None) -> List[int]:
        return [
            q.points for q in self._questions.values()
            if q.is_approved and q.category == category and q.question_id != exclude_question_id
        ]

    def available_points(self, category: str, exclude_question_id: Optional[str] = None) -> List[int]:
        """Point values still free in a category (the question under edit does not block itself)."""
        taken = set(self.taken_points(category, exclude_question_id))
        return [points for points in self.point_values if points not in taken]

    def approved_questions(self) -> List[Question]:
        return [q for q in self._questions.values() if q.is_approved]

    def pending_questions(self) -> List[Question]:
        return [q for q in self._questions.values() if q.status == QuestionStatus.PENDING]

    def questions_by(self, creator_id: str) -> List[Question]:
        return [q for q in self._questions.values() if q.creator_id == creator_id]

    def approved_count(self) -> int:
        return len(self.approved_questions())

    def required_count(self) -> int:
        return self.board_size * self.board_size

    def is_complete(self) -> bool:
        """Exactly one approved question per board cell is required to start play."""
        return self.approved_count() == self.required_count()
