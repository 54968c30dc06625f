"""
Simulated participants and the category-generation service.
"""

from .base_agent import BaseAgent, AgentContext
from .dummy_agent import DummyAgent
from .category_generator import CategoryGenerator, LLMCategoryGenerator, PlaceholderCategoryGenerator
from .exceptions import CategoryGenerationError

__all__ = [
    'BaseAgent',
    'AgentContext',
    'DummyAgent',
    'CategoryGenerator',
    'LLMCategoryGenerator',
    'PlaceholderCategoryGenerator',
    'CategoryGenerationError',
]
