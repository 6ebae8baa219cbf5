"""OpenRouter API client for article generation."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from article_studio.core.exceptions import ConfigurationError, UpstreamError
from article_studio.models.article import ModelMessage, ModelResponse

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "deepseek/deepseek-chat-v3-0324:free"
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterClient:
    """Client for the OpenRouter chat-completions endpoint.

    Each call is a single request/response exchange. Failures are raised as
    ``UpstreamError`` and never retried here.
    """

    def __init__(self, api_key: str, model: str = None, settings=None):
        """Initialize OpenRouter client.

        Args:
            api_key: OpenRouter API key
            model: Model to use (defaults to the configured article model)
            settings: Settings instance for configuration values

        Raises:
            ConfigurationError: If no API key is given
        """
        if not api_key:
            raise ConfigurationError("OPENROUTER_API_KEY is required")

        self.api_key = api_key
        self.base_url = (
            settings.openrouter_base_url if settings else DEFAULT_BASE_URL
        ).rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        if settings and settings.openrouter_site_url:
            self.headers["HTTP-Referer"] = settings.openrouter_site_url
        if settings and settings.openrouter_site_name:
            self.headers["X-Title"] = settings.openrouter_site_name

        if settings:
            self.default_model = model or settings.openrouter_model
            self.temperature = settings.generation_temperature
            self.max_tokens = settings.generation_max_tokens
            self.timeout = settings.openrouter_timeout
        else:
            self.default_model = model or DEFAULT_MODEL
            self.temperature = 0.7
            self.max_tokens = 4000
            self.timeout = 60.0

    @classmethod
    def from_settings(cls, settings) -> "OpenRouterClient":
        """Create a client from application settings."""
        return cls(settings.openrouter_api_key, settings=settings)

    def _build_payload(
        self,
        messages: List[ModelMessage],
        model: Optional[str],
        temperature: Optional[float],
        max_tokens: Optional[int],
    ) -> Dict[str, Any]:
        return {
            "model": model or self.default_model,
            "messages": [message.to_payload() for message in messages],
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.max_tokens,
            "stream": False,
        }

    async def complete(
        self,
        messages: List[ModelMessage],
        model: str = None,
        temperature: float = None,
        max_tokens: int = None,
    ) -> ModelResponse:
        """Send a chat completion request.

        Args:
            messages: Ordered chat messages
            model: Specific model to use (overrides default)
            temperature: Sampling temperature (overrides default)
            max_tokens: Maximum tokens to generate (overrides default)

        Returns:
            First choice text and usage counters

        Raises:
            UpstreamError: On a non-success status, transport failure or
                an undecodable response body
        """
        payload = self._build_payload(messages, model, temperature, max_tokens)
        logger.debug(
            f"OpenRouter request: model={payload['model']} "
            f"messages={len(messages)} max_tokens={payload['max_tokens']}"
        )

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    f"{self.base_url}/chat/completions",
                    headers=self.headers,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    if not 200 <= response.status < 300:
                        error_text = await response.text()
                        logger.error(
                            f"OpenRouter API error: {response.status} - {error_text}"
                        )
                        raise UpstreamError(
                            f"OpenRouter API error: {response.status} - {error_text}",
                            status=response.status,
                            body=error_text,
                        )
                    data = await response.json(content_type=None)

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Network error in OpenRouter API request: {e}")
            raise UpstreamError(f"Network error contacting OpenRouter: {e}") from e
        except ValueError as e:
            logger.error(f"Data parsing error in OpenRouter API response: {e}")
            raise UpstreamError(f"Invalid response body from OpenRouter: {e}") from e

        if not isinstance(data, dict):
            raise UpstreamError("Invalid response format from OpenRouter API")

        try:
            result = ModelResponse.from_payload(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Unexpected OpenRouter response shape: {e}")
            raise UpstreamError("Invalid response format from OpenRouter API") from e
        logger.debug(
            f"OpenRouter response: {len(result.content)} chars, "
            f"{result.usage.total_tokens} tokens"
        )
        return result
