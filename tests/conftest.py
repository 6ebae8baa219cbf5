import json
from unittest.mock import AsyncMock

import pytest

from article_studio.models.article import GenerationRequest, ModelResponse


def model_reply(content: str, total_tokens: int = 42) -> ModelResponse:
    """Build a client response carrying the given text."""
    return ModelResponse(
        content=content,
        model="test/model",
        usage={"prompt_tokens": 10, "completion_tokens": 32, "total_tokens": total_tokens},
    )


def article_json(**overrides) -> str:
    fields = {
        "title": "Remote Work Wins",
        "content": "# Intro\nWorking from home...",
        "summary": "A look at remote work.",
        "keywords": ["remote", "productivity", "focus"],
    }
    fields.update(overrides)
    return json.dumps(fields)


@pytest.fixture
def mock_settings(tmp_path):
    """Settings isolated from the environment for testing."""
    from article_studio.models.settings import Settings

    return Settings(
        _env_file=None,
        openrouter_api_key="test_key",
        openrouter_site_url="https://articles.example.com",
        openrouter_site_name="Article Studio Tests",
        database_path=str(tmp_path / "articles.db"),
    )


@pytest.fixture
def remote_work_request():
    return GenerationRequest(
        topic="Remote Work",
        category="Business",
        tone="casual",
        language="English",
        word_count=300,
        keywords=["remote", "productivity"],
    )


@pytest.fixture
def mock_client():
    """Stand-in for OpenRouterClient with an awaitable ``complete``."""
    client = AsyncMock()
    client.complete = AsyncMock(return_value=model_reply(article_json()))
    return client


@pytest.fixture
def make_reply():
    return model_reply


@pytest.fixture
def make_article_json():
    return article_json
