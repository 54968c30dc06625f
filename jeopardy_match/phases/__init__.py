"""
Phase handlers for the lobby, question writing and play phases.
"""

from .lobby_phase import LobbyPhaseHandler
from .question_phase import QuestionPhaseHandler
from .play_phase import PlayPhaseHandler, ResolutionResult

__all__ = ['LobbyPhaseHandler', 'QuestionPhaseHandler', 'PlayPhaseHandler', 'ResolutionResult']
