"""Tests for data models."""

import pytest
from pydantic import ValidationError

from article_studio.models.article import (
    ArticleUpdate,
    ExtractedArticle,
    ExtractionMethod,
    GenerationRequest,
    MessageRole,
    ModelMessage,
    ModelResponse,
    Tone,
)


def test_generation_request_defaults():
    """Test creating a GenerationRequest with required fields only."""
    request = GenerationRequest(topic="Composting", category="Home")

    assert request.tone == Tone.PROFESSIONAL
    assert request.language == "English"
    assert request.word_count == 500
    assert request.keywords == []
    assert request.additional_instructions == ""


@pytest.mark.parametrize(
    "overrides",
    [
        {"topic": ""},
        {"topic": "x" * 201},
        {"category": ""},
        {"tone": "sarcastic"},
        {"word_count": 99},
        {"word_count": 2001},
        {"keywords": [f"k{i}" for i in range(11)]},
        {"additional_instructions": "x" * 1001},
    ],
)
def test_generation_request_validation(overrides):
    """Test that out-of-range request fields are rejected."""
    fields = {"topic": "Composting", "category": "Home"}
    fields.update(overrides)

    with pytest.raises(ValidationError):
        GenerationRequest(**fields)


def test_generation_request_is_immutable():
    request = GenerationRequest(topic="Composting", category="Home")

    with pytest.raises(ValidationError):
        request.topic = "Gardening"


def test_model_message_payload():
    message = ModelMessage(role=MessageRole.SYSTEM, content="Be brief.")

    assert message.to_payload() == {"role": "system", "content": "Be brief."}


def test_model_response_from_payload():
    """Test reading the first choice and usage from a chat completion body."""
    payload = {
        "id": "gen-1",
        "model": "deepseek/deepseek-chat-v3-0324:free",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "Hello"},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 5, "completion_tokens": 1, "total_tokens": 6},
    }

    response = ModelResponse.from_payload(payload)

    assert response.content == "Hello"
    assert response.model == "deepseek/deepseek-chat-v3-0324:free"
    assert response.finish_reason == "stop"
    assert response.usage.total_tokens == 6


def test_model_response_without_choices():
    response = ModelResponse.from_payload({"choices": []})

    assert response.content == ""
    assert response.usage.total_tokens == 0


def test_extracted_article_degraded_flag():
    clean = ExtractedArticle(title="T", content="C", summary="S")
    fallback = ExtractedArticle(
        title="T", content="C", summary="S", method=ExtractionMethod.LINE_PATTERN
    )

    assert clean.degraded is False
    assert fallback.degraded is True


def test_article_update_limits():
    with pytest.raises(ValidationError):
        ArticleUpdate(content="x" * 10001)
    with pytest.raises(ValidationError):
        ArticleUpdate(keywords=[str(i) for i in range(11)])

    update = ArticleUpdate(title="New title")
    assert update.model_dump(exclude_none=True) == {"title": "New title"}
