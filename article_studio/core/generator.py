"""Article generation workflow on top of the OpenRouter client."""

import logging

from article_studio.core.exceptions import GenerationError, UpstreamError
from article_studio.core.extractor import (
    extract_article,
    extract_ideas,
    extract_seo_metadata,
)
from article_studio.core.prompts import (
    SEO_PREVIEW_LENGTH,
    build_article_messages,
    build_ideas_messages,
    build_improve_messages,
    build_seo_messages,
)
from article_studio.core.utils import plain_text_excerpt
from article_studio.models.article import (
    ArticleIdeas,
    ExtractedArticle,
    GeneratedArticle,
    GenerationRequest,
    SeoMetadata,
)

logger = logging.getLogger(__name__)

SEO_DESCRIPTION_LENGTH = 160
IDEAS_MODEL = "openai/gpt-3.5-turbo"
IDEAS_TEMPERATURE = 0.9
IDEAS_MAX_TOKENS = 256


def fallback_seo_metadata(title: str, content: str) -> SeoMetadata:
    """SEO metadata derived from the article itself."""
    description = plain_text_excerpt(content, SEO_DESCRIPTION_LENGTH) or title
    return SeoMetadata(seo_title=title, seo_description=description)


class ArticleGenerator:
    """Runs prompt building, model calls and extraction for articles."""

    def __init__(self, client, settings=None):
        """Initialize the generator.

        Args:
            client: OpenRouterClient (or compatible) used for model calls
            settings: Settings instance for configuration values
        """
        self.client = client
        if settings:
            self.seo_preview_length = settings.seo_preview_length
            self.ideas_model = settings.openrouter_ideas_model
        else:
            self.seo_preview_length = SEO_PREVIEW_LENGTH
            self.ideas_model = IDEAS_MODEL

    async def generate_article(self, request: GenerationRequest) -> ExtractedArticle:
        """Generate an article for a request.

        Raises:
            GenerationError: If the model call fails or returns nothing
        """
        try:
            response = await self.client.complete(build_article_messages(request))
        except UpstreamError as e:
            logger.error(f"Error generating article: {e}")
            raise GenerationError(f"Failed to generate article: {e}") from e

        if not response.content.strip():
            logger.error("Error generating article: no content received from AI")
            raise GenerationError(
                "Failed to generate article: No content received from AI"
            )

        article = extract_article(response.content, request)
        if article.degraded:
            logger.warning(
                f"Model reply for '{request.topic}' was not valid JSON, "
                "fields recovered with the line-pattern fallback"
            )
        logger.info(
            f"Generated article '{article.title}' ({article.method.value}, "
            f"{response.usage.total_tokens} tokens)"
        )
        return article

    async def generate_seo_metadata(self, title: str, content: str) -> SeoMetadata:
        """Generate an SEO title and description; never raises.

        Any failure degrades to the article title and a content excerpt.
        """
        try:
            response = await self.client.complete(
                build_seo_messages(title, content, self.seo_preview_length)
            )
            metadata = extract_seo_metadata(response.content)
            if metadata is not None:
                return metadata
            logger.warning("SEO metadata reply could not be parsed, using fallback")
        except UpstreamError as e:
            logger.error(f"Error generating SEO metadata: {e}")
        except Exception as e:
            logger.error(f"Unexpected error generating SEO metadata: {e}")

        return fallback_seo_metadata(title, content)

    async def create_article(self, request: GenerationRequest) -> GeneratedArticle:
        """Generate an article and its SEO metadata."""
        article = await self.generate_article(request)
        seo = await self.generate_seo_metadata(article.title, article.content)
        return GeneratedArticle(article=article, seo=seo)

    async def improve_article(self, content: str, instructions: str) -> str:
        """Rewrite content following editor instructions.

        Returns:
            Improved content, or the original content if the reply is empty

        Raises:
            GenerationError: If the model call fails
        """
        try:
            response = await self.client.complete(
                build_improve_messages(content, instructions)
            )
        except UpstreamError as e:
            logger.error(f"Error improving article: {e}")
            raise GenerationError(f"Failed to improve article: {e}") from e

        return response.content or content

    async def suggest_ideas(self, topic: str = "") -> ArticleIdeas:
        """Suggest article titles and SEO keywords for a topic.

        Raises:
            GenerationError: If the model call fails
        """
        try:
            response = await self.client.complete(
                build_ideas_messages(topic),
                model=self.ideas_model,
                temperature=IDEAS_TEMPERATURE,
                max_tokens=IDEAS_MAX_TOKENS,
            )
        except UpstreamError as e:
            logger.error(f"Error getting article ideas: {e}")
            raise GenerationError("Failed to get ideas from AI") from e

        return extract_ideas(response.content)
