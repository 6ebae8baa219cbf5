"""Exceptions raised by the article generation pipeline."""

from typing import Optional


class ArticleStudioError(Exception):
    """Base class for article studio errors."""


class ConfigurationError(ArticleStudioError):
    """Required configuration (such as the OpenRouter key) is missing."""


class UpstreamError(ArticleStudioError):
    """The model provider returned a failure or could not be reached."""

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class GenerationError(ArticleStudioError):
    """User-visible failure of a generation request."""
