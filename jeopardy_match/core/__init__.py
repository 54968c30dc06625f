"""
Core match components: participants, questions, board, abilities and match state.
"""

from .participant import Participant, Role
from .roster import Roster
from .questions import Question, QuestionStatus, QuestionPipeline
from .board import Board, Cell, assemble_board
from .abilities import AbilityEconomy, ActivationResult, activation_cost
from .game_engine import MatchState, MatchPhase, ResolutionState, OpenQuestion
from .host import Host
from .results import rank_participants, export_questions, export_filename
from ..errors import (
    MatchError, ValidationError, InvalidName, Forbidden, CapacityExceeded,
    MissingPoints, InsufficientScore, InsufficientCharge, InvalidAction, NotFound,
)

__all__ = [
    'Participant',
    'Role',
    'Roster',
    'Question',
    'QuestionStatus',
    'QuestionPipeline',
    'Board',
    'Cell',
    'assemble_board',
    'AbilityEconomy',
    'ActivationResult',
    'activation_cost',
    'MatchState',
    'MatchPhase',
    'ResolutionState',
    'OpenQuestion',
    'Host',
    'rank_participants',
    'export_questions',
    'export_filename',
    'MatchError',
    'ValidationError',
    'InvalidName',
    'Forbidden',
    'CapacityExceeded',
    'MissingPoints',
    'InsufficientScore',
    'InsufficientCharge',
    'InvalidAction',
    'NotFound',
]
