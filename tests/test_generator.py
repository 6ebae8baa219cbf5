"""Tests for the article generation workflow."""

import json
from unittest.mock import AsyncMock

import pytest

from article_studio.core.exceptions import GenerationError, UpstreamError
from article_studio.core.generator import (
    IDEAS_MAX_TOKENS,
    IDEAS_TEMPERATURE,
    ArticleGenerator,
    fallback_seo_metadata,
)
from article_studio.models.article import ExtractionMethod

SEO_REPLY = json.dumps(
    {"seoTitle": "Why Remote Work Wins", "seoDescription": "How remote teams stay productive."}
)


@pytest.fixture
def generator(mock_client, mock_settings):
    return ArticleGenerator(mock_client, settings=mock_settings)


@pytest.mark.asyncio
async def test_generate_article(generator, mock_client, remote_work_request):
    article = await generator.generate_article(remote_work_request)

    assert article.title == "Remote Work Wins"
    assert article.content == "# Intro\nWorking from home..."
    assert article.keywords == ["remote", "productivity", "focus"]
    assert article.method == ExtractionMethod.JSON

    messages = mock_client.complete.call_args.args[0]
    assert "Remote Work" in messages[0].content


@pytest.mark.asyncio
async def test_generate_article_upstream_error(generator, mock_client, remote_work_request):
    mock_client.complete.side_effect = UpstreamError("OpenRouter API error: 500 - boom", 500)

    with pytest.raises(GenerationError, match="Failed to generate article"):
        await generator.generate_article(remote_work_request)


@pytest.mark.asyncio
async def test_generate_article_empty_reply(
    generator, mock_client, make_reply, remote_work_request
):
    mock_client.complete.return_value = make_reply("   ")

    with pytest.raises(GenerationError, match="No content received from AI"):
        await generator.generate_article(remote_work_request)


@pytest.mark.asyncio
async def test_generate_article_plain_text_reply(
    generator, mock_client, make_reply, remote_work_request
):
    mock_client.complete.return_value = make_reply("Title: Home Office\n\nSome prose.")

    article = await generator.generate_article(remote_work_request)

    assert article.degraded
    assert article.title == "Home Office"
    assert article.summary == "Article about Remote Work"


@pytest.mark.asyncio
async def test_generate_seo_metadata(generator, mock_client, make_reply):
    mock_client.complete.return_value = make_reply(f"```json\n{SEO_REPLY}\n```")

    seo = await generator.generate_seo_metadata("Remote Work Wins", "Body text")

    assert seo.seo_title == "Why Remote Work Wins"
    assert seo.seo_description == "How remote teams stay productive."


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "failure",
    [UpstreamError("OpenRouter API error: 503 - down", 503), RuntimeError("unexpected")],
)
async def test_generate_seo_metadata_falls_back_on_error(generator, mock_client, failure):
    mock_client.complete.side_effect = failure

    seo = await generator.generate_seo_metadata("Remote Work Wins", "# Intro\nWorking from home...")

    assert seo.seo_title == "Remote Work Wins"
    assert seo.seo_description == "Intro Working from home..."


@pytest.mark.asyncio
async def test_generate_seo_metadata_falls_back_on_unparseable_reply(
    generator, mock_client, make_reply
):
    mock_client.complete.return_value = make_reply("I think a good title would be nice.")

    seo = await generator.generate_seo_metadata("Remote Work Wins", "")

    assert seo.seo_title == "Remote Work Wins"
    assert seo.seo_description == "Remote Work Wins"


def test_fallback_seo_description_is_capped():
    seo = fallback_seo_metadata("Title", "word " * 100)

    assert seo.seo_title == "Title"
    assert 0 < len(seo.seo_description) <= 160


@pytest.mark.asyncio
async def test_create_article(generator, mock_client, make_reply, make_article_json, remote_work_request):
    mock_client.complete = AsyncMock(
        side_effect=[make_reply(make_article_json()), make_reply(SEO_REPLY)]
    )

    generated = await generator.create_article(remote_work_request)

    assert generated.article.title == "Remote Work Wins"
    assert generated.seo.seo_title == "Why Remote Work Wins"
    assert mock_client.complete.await_count == 2


@pytest.mark.asyncio
async def test_create_article_survives_seo_failure(
    generator, mock_client, make_reply, make_article_json, remote_work_request
):
    mock_client.complete = AsyncMock(
        side_effect=[make_reply(make_article_json()), UpstreamError("timeout")]
    )

    generated = await generator.create_article(remote_work_request)

    assert generated.seo.seo_title == generated.article.title
    assert generated.seo.seo_description


@pytest.mark.asyncio
async def test_improve_article(generator, mock_client, make_reply):
    mock_client.complete.return_value = make_reply("Shorter text.")

    improved = await generator.improve_article("Long original text.", "Make it shorter")

    assert improved == "Shorter text."
    messages = mock_client.complete.call_args.args[0]
    assert "Make it shorter" in messages[1].content


@pytest.mark.asyncio
async def test_improve_article_empty_reply_keeps_original(generator, mock_client, make_reply):
    mock_client.complete.return_value = make_reply("")

    assert await generator.improve_article("Original", "Polish") == "Original"


@pytest.mark.asyncio
async def test_improve_article_error(generator, mock_client):
    mock_client.complete.side_effect = UpstreamError("down")

    with pytest.raises(GenerationError, match="Failed to improve article"):
        await generator.improve_article("Original", "Polish")


@pytest.mark.asyncio
async def test_suggest_ideas(generator, mock_client, make_reply, mock_settings):
    reply = json.dumps({"titles": ["Ten Garden Tips"], "keywords": ["garden", "soil"]})
    mock_client.complete.return_value = make_reply(reply)

    ideas = await generator.suggest_ideas("gardening")

    assert ideas.titles == ["Ten Garden Tips"]
    assert ideas.keywords == ["garden", "soil"]
    kwargs = mock_client.complete.call_args.kwargs
    assert kwargs["model"] == mock_settings.openrouter_ideas_model
    assert kwargs["temperature"] == IDEAS_TEMPERATURE
    assert kwargs["max_tokens"] == IDEAS_MAX_TOKENS


@pytest.mark.asyncio
async def test_suggest_ideas_error(generator, mock_client):
    mock_client.complete.side_effect = UpstreamError("down")

    with pytest.raises(GenerationError, match="Failed to get ideas from AI"):
        await generator.suggest_ideas()
