"""
Dummy agent with seeded random behavior.
"""

import random
from typing import Tuple

from .base_agent import BaseAgent, AgentContext
from ..core import Participant
from ..config.game_config import GameConfig, default_config


class DummyAgent(BaseAgent):
    """
    Simple dummy contestant:
    - Writes numbered placeholder questions
    - Never answers its own question
    - Answers other questions correctly with a fixed probability
    """

    def __init__(self, participant: Participant, config: GameConfig = default_config,
                 seat: int = 0, accuracy: float = 0.5):
        super().__init__(participant, config)
        # Combine seed with seat number so each agent has different but reproducible randomness
        seed = config.random_seed
        self.random = random.Random(seed + seat) if seed is not None else random.Random()
        self.accuracy = accuracy
        self.questions_written = 0

    def write_question(self, context: AgentContext, category: str) -> Tuple[str, str]:
        self.questions_written += 1
        number = self.questions_written
        prompt = f"{category} question #{number} by {self.participant.name}"
        answer = f"{category} answer #{number}"
        return prompt, answer

    def answers_correctly(self, context: AgentContext) -> bool:
        if context.question is None:
            return False
        if context.question.creator_id == self.participant.participant_id:
            return False
        return self.random.random() < self.accuracy
