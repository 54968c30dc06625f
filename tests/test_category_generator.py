"""
Tests for LLM category generation and the placeholder fallback.
"""

import json
import pytest
from unittest.mock import MagicMock, patch

from jeopardy_match.agents import LLMCategoryGenerator, PlaceholderCategoryGenerator
from jeopardy_match.config.game_config import GameConfig


@pytest.fixture
def mock_client():
    return MagicMock()


def test_placeholder_labels():
    generator = PlaceholderCategoryGenerator()
    assert generator.generate(3) == ["Category 1", "Category 2", "Category 3"]
    assert generator.last_source == "placeholder"


def test_no_api_key_falls_back():
    """Without OPENAI_API_KEY no client is built and placeholders are used."""
    generator = LLMCategoryGenerator(GameConfig())

    assert generator.client is None
    assert generator.generate(4) == ["Category 1", "Category 2", "Category 3", "Category 4"]
    assert generator.last_source == "placeholder"


def test_client_built_from_api_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    with patch("jeopardy_match.agents.category_generator.OpenAI") as mock_openai:
        generator = LLMCategoryGenerator(GameConfig())

    mock_openai.assert_called_once_with(api_key="test-key")
    assert generator.client is mock_openai.return_value


def test_generate_from_llm(mock_client, mock_completion):
    mock_client.chat.completions.create.return_value = mock_completion(
        json.dumps({"categories": ["History", "Science", "Movies", "Sports"]})
    )
    generator = LLMCategoryGenerator(GameConfig(), client=mock_client)

    labels = generator.generate(3)

    assert labels == ["History", "Science", "Movies"]
    assert generator.last_source == "llm"


def test_request_parameters(mock_client, mock_completion):
    mock_client.chat.completions.create.return_value = mock_completion('{"categories": ["A", "B", "C"]}')
    config = GameConfig(llm_model="gpt-4o-mini", category_language="German")
    generator = LLMCategoryGenerator(config, client=mock_client)

    generator.generate(3)

    kwargs = mock_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["max_completion_tokens"] == 300
    assert kwargs["response_format"] == {"type": "json_object"}
    assert "Generate 3 unique" in kwargs["messages"][1]["content"]
    assert "German" in kwargs["messages"][1]["content"]


def test_gpt5_models_use_default_temperature(mock_client):
    generator = LLMCategoryGenerator(GameConfig(llm_model="gpt-5-mini"), client=mock_client)
    params = generator._build_params("prompt")
    assert "temperature" not in params
    assert params["max_completion_tokens"] == 300


def test_legacy_models_use_max_tokens(mock_client):
    generator = LLMCategoryGenerator(GameConfig(llm_model="gpt-3.5-turbo"), client=mock_client)
    params = generator._build_params("prompt")
    assert params["max_tokens"] == 300
    assert params["temperature"] == 0.7


@pytest.mark.parametrize("content", [
    "",
    "not json",
    '{"topics": "History"}',
    '{"categories": ["Only", "Two"]}',
    '{"categories": ["A", "  ", 7]}',
])
def test_bad_responses_fall_back(mock_client, mock_completion, content):
    mock_client.chat.completions.create.return_value = mock_completion(content)
    generator = LLMCategoryGenerator(GameConfig(), client=mock_client)

    assert generator.generate(3) == ["Category 1", "Category 2", "Category 3"]
    assert generator.last_source == "placeholder"


def test_api_error_falls_back(mock_client, capsys):
    mock_client.chat.completions.create.side_effect = Exception("API Error")
    emitter = MagicMock()
    generator = LLMCategoryGenerator(GameConfig(), event_emitter=emitter, client=mock_client)

    labels = generator.generate(3)

    assert labels == ["Category 1", "Category 2", "Category 3"]
    assert "API Error" in capsys.readouterr().out
    emitter.emit_category_fallback.assert_called_once()
    assert emitter.emit_category_fallback.call_args.args[1] == 3


def test_usage_metadata_emitted(mock_client, mock_completion):
    response = mock_completion('{"categories": ["A", "B", "C"]}')
    response.usage = MagicMock(prompt_tokens=40, completion_tokens=12, total_tokens=52)
    mock_client.chat.completions.create.return_value = response
    emitter = MagicMock()
    generator = LLMCategoryGenerator(GameConfig(), event_emitter=emitter, client=mock_client)

    generator.generate(3)

    emitter.emit_llm_metadata.assert_called_once()
    args = emitter.emit_llm_metadata.call_args.args
    assert args[0] == "generate_categories"
    assert args[1:4] == (40, 12, 52)


def test_session_generate_categories(session, gm_id, mock_client, mock_completion):
    mock_client.chat.completions.create.return_value = mock_completion('{"categories": ["Art", "Math", "Food"]}')
    session.category_generator = LLMCategoryGenerator(session.config, client=mock_client)

    assert session.generate_categories(gm_id) == ["Art", "Math", "Food"]
    assert session.match_state.categories_ready()


def test_session_duplicate_llm_labels_fall_back(session, gm_id, mock_client, mock_completion):
    mock_client.chat.completions.create.return_value = mock_completion('{"categories": ["Art", "Art", "Food"]}')
    session.category_generator = LLMCategoryGenerator(session.config, client=mock_client)

    assert session.generate_categories(gm_id) == ["Category 1", "Category 2", "Category 3"]
