"""
Base agent interface for simulated match participants.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..core import MatchPhase, Participant, Question
from ..config.game_config import GameConfig, default_config


@dataclass
class AgentContext:
    """Context information provided to an agent."""
    participant: Participant
    phase: MatchPhase
    categories: List[str]
    scores: Dict[str, int]
    question: Optional[Question] = None
    ability_cost: Optional[int] = None


class BaseAgent(ABC):
    """
    Abstract base class for simulated contestants.

    Agents only decide; every decision is applied through the match session
    like a real participant's command.
    """

    def __init__(self, participant: Participant, config: GameConfig = default_config):
        """
        Initialize the agent.

        Args:
            participant: The participant this agent plays
            config: Match configuration
        """
        self.participant = participant
        self.config = config

    @abstractmethod
    def write_question(self, context: AgentContext, category: str) -> Tuple[str, str]:
        """
        Write a question for a category.

        Returns:
            (question text, answer text)
        """
        pass

    @abstractmethod
    def answers_correctly(self, context: AgentContext) -> bool:
        """Decide whether this agent gets the open question right."""
        pass

    def wants_to_activate(self, context: AgentContext) -> bool:
        """
        Decide whether to use the ability now.

        Default implementation: activate as soon as it is charged and affordable.
        """
        if self.participant.ability is None or context.ability_cost is None:
            return False
        return (self.participant.ability_charge >= self.config.max_ability_charge
                and self.participant.score >= context.ability_cost)
