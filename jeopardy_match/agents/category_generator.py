"""
Category-name generation using the OpenAI API, with a deterministic fallback.
"""

import json
import os
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from openai import OpenAI

from .exceptions import CategoryGenerationError
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


class CategoryGenerator(ABC):
    """
    Abstract source of category labels.

    `generate` must always return exactly `count` labels; implementations
    that talk to an external service fall back instead of raising.
    """

    name = "base"

    def __init__(self):
        self.last_source = self.name

    @abstractmethod
    def generate(self, count: int) -> List[str]:
        """
        Produce category labels for the board.

        Args:
            count: Number of labels (the board size)

        Returns:
            List of exactly `count` labels
        """
        pass


class PlaceholderCategoryGenerator(CategoryGenerator):
    """Deterministic "Category 1".."Category N" labels."""

    name = "placeholder"

    def generate(self, count: int) -> List[str]:
        self.last_source = self.name
        return [f"Category {index + 1}" for index in range(count)]


class LLMCategoryGenerator(CategoryGenerator):
    """Asks a chat model for trivia categories and falls back to placeholders on any failure."""

    name = "llm"

    def __init__(self, config: GameConfig = default_config, event_emitter: Optional['EventEmitter'] = None,
                 client: Optional[Any] = None):
        super().__init__()
        self.config = config
        self.model = config.llm_model or "gpt-4o-mini"
        self.temperature = config.llm_temperature
        self.event_emitter = event_emitter
        self.fallback = PlaceholderCategoryGenerator()

        if client is not None:
            self.client = client
        else:
            api_key = os.getenv("OPENAI_API_KEY")
            # Without a key every request goes straight to the fallback
            self.client = OpenAI(api_key=api_key) if api_key else None

    def build_prompt(self, count: int) -> str:
        return (
            f"Generate {count} unique, single-word trivia categories in {self.config.category_language} "
            f"suitable for a Jeopardy-style game. Focus on topics like history, science, literature, "
            f"and general knowledge. Respond with a JSON object of the form "
            f'{{"categories": ["...", "..."]}}.'
        )

    def _build_params(self, prompt: str, max_tokens: int = 300) -> Dict[str, Any]:
        api_params = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": "You write category names for a trivia game."},
                {"role": "user", "content": prompt}
            ],
            "temperature": self.temperature,
            "response_format": {"type": "json_object"},
        }

        # Newer models use max_completion_tokens and only the default temperature
        if "gpt-5" in self.model:
            api_params["max_completion_tokens"] = max_tokens
            del api_params["temperature"]
        elif "gpt-4o" in self.model:
            api_params["max_completion_tokens"] = max_tokens
        else:
            api_params["max_tokens"] = max_tokens
        return api_params

    def _request(self, count: int) -> List[str]:
        """Call the API and parse the result; any problem raises CategoryGenerationError."""
        if self.client is None:
            raise CategoryGenerationError(count, "OPENAI_API_KEY environment variable not set")

        try:
            start_time = time.time()
            response = self.client.chat.completions.create(**self._build_params(self.build_prompt(count)))
            latency_ms = (time.time() - start_time) * 1000
        except Exception as e:
            raise CategoryGenerationError(count, f"LLM API call failed: {e}") from e

        if self.event_emitter and getattr(response, "usage", None):
            self.event_emitter.emit_llm_metadata(
                "generate_categories",
                response.usage.prompt_tokens,
                response.usage.completion_tokens,
                response.usage.total_tokens,
                latency_ms,
                self.model
            )

        content = (response.choices[0].message.content or "").strip()
        if not content:
            raise CategoryGenerationError(count, "LLM returned an empty response")

        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            raise CategoryGenerationError(count, f"LLM returned invalid JSON: {e}") from e

        categories = payload.get("categories") if isinstance(payload, dict) else payload
        if not isinstance(categories, list):
            raise CategoryGenerationError(count, "LLM response has no category list")

        labels = [str(label).strip() for label in categories if isinstance(label, str) and label.strip()]
        if len(labels) < count:
            raise CategoryGenerationError(count, f"LLM returned {len(labels)} usable categories")
        return labels[:count]

    def generate(self, count: int) -> List[str]:
        try:
            labels = self._request(count)
        except CategoryGenerationError as e:
            print(f"Category generation failed, using placeholders: {e.message}")
            if self.event_emitter:
                self.event_emitter.emit_category_fallback(e.message, count)
            self.last_source = self.fallback.name
            return self.fallback.generate(count)

        self.last_source = self.name
        return labels
