"""
Final ranking and question-set export.
"""

import json
from datetime import date
from typing import Iterable, List, Optional, Sequence

from .participant import Participant
from .questions import Question
from ..errors import ValidationError


EXPORT_FORMATS = ("json", "txt")


def rank_participants(participants: Iterable[Participant]) -> List[Participant]:
    """Sort by score, highest first; ties keep roster order."""
    return sorted(participants, key=lambda p: p.score, reverse=True)


def export_questions(questions: Sequence[Question], fmt: str = "json") -> str:
    """
    Serialize the approved question set.

    Args:
        questions: Questions to export (normally the approved set)
        fmt: "json" for a structured document, "txt" for human-readable text

    Returns:
        The serialized document
    """
    if fmt == "json":
        return json.dumps([q.to_dict() for q in questions], indent=2, ensure_ascii=False)
    if fmt == "txt":
        return "".join(
            f"Category: {q.category}\n"
            f"Points: {q.points}\n"
            f"Question: {q.prompt}\n"
            f"Answer: {q.answer}\n"
            f"\n---\n\n"
            for q in questions
        )
    raise ValidationError(f"Unknown export format: {fmt!r} (expected one of {EXPORT_FORMATS})")


def export_filename(fmt: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"jeopardy_questions_{today.isoformat()}.{fmt}"
