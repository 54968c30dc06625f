"""
Pytest fixtures for match tests.
"""

import pytest
from typing import Dict, List
from unittest.mock import MagicMock

from jeopardy_match.agents import PlaceholderCategoryGenerator
from jeopardy_match.config.game_config import Ability, GameConfig
from jeopardy_match.core import QuestionStatus
from jeopardy_match.session import MatchSession


CATEGORIES = ["History", "Science", "Movies"]


@pytest.fixture(autouse=True)
def no_openai_key(monkeypatch):
    """
    Make sure no test ever reaches the real OpenAI API.

    Without a key LLMCategoryGenerator never builds a client and always falls
    back to placeholder labels; tests that need a client inject a mock.
    """
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    yield


class FakeClock:
    """Manually advanced replacement for time.monotonic."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def game_config():
    """Test configuration: 3x3 board, manual ability assignment, quiet host."""
    return GameConfig(
        board_size=3,
        max_participants=4,
        use_abilities=True,
        randomize_abilities=False,
        abilities=[
            Ability("Double Down", "Double points on the next question."),
            Ability("Shield", "No penalty this round."),
            Ability("", ""),
        ],
        use_host_announcements=False,
        random_seed=7,
    )


@pytest.fixture
def session(game_config, clock):
    """A fresh session in the lobby, with Alice as Game Master."""
    match = MatchSession("Alice", game_config, category_generator=PlaceholderCategoryGenerator())
    match.match_state.clock = clock
    return match


@pytest.fixture
def gm_id(session) -> str:
    return session.game_master_id


@pytest.fixture
def contestant_ids(session) -> List[str]:
    """Bob and Carol join and get ready."""
    ids = []
    for name in ("Bob", "Carol"):
        participant = session.join(name)
        session.set_ready(participant.participant_id, True)
        ids.append(participant.participant_id)
    return ids


@pytest.fixture
def writing_session(session, gm_id, contestant_ids):
    """Session in the question-writing phase with three categories."""
    session.set_categories(gm_id, list(CATEGORIES))
    session.start_question_phase(gm_id)
    return session


def fill_board(session: MatchSession, gm_id: str, writer_ids: List[str]) -> Dict[tuple, str]:
    """
    Have the writers submit one question per slot and approve each one.

    Returns {(category, points): question_id}.
    """
    placed = {}
    turn = 0
    for category in session.match_state.categories:
        for points in session.match_state.config.point_values:
            writer = writer_ids[turn % len(writer_ids)]
            turn += 1
            question = session.submit_question(writer, category, f"{category} for {points}?", f"Answer {points}")
            session.review_question(gm_id, question.question_id, QuestionStatus.APPROVED, edits={"points": points})
            placed[(category, points)] = question.question_id
    return placed


@pytest.fixture
def placed_questions(writing_session, gm_id, contestant_ids):
    return fill_board(writing_session, gm_id, contestant_ids)


@pytest.fixture
def play_session(writing_session, gm_id, placed_questions):
    """Session in play with a complete 3x3 board."""
    writing_session.start_play(gm_id)
    return writing_session


def create_mock_completion(content: str):
    """Helper to create a mock chat completion response."""
    mock_response = MagicMock()
    mock_response.choices = [MagicMock()]
    mock_response.choices[0].message.content = content
    mock_response.usage = None
    return mock_response


@pytest.fixture
def mock_completion():
    """Factory for fake chat completion responses."""
    return create_mock_completion
