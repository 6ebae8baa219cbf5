"""Article models for generation, extraction and storage."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Tone(str, Enum):
    """Writing tone requested for an article."""

    PROFESSIONAL = "professional"
    CASUAL = "casual"
    FRIENDLY = "friendly"
    FORMAL = "formal"


class ArticleStatus(str, Enum):
    """Publication status of a stored article."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class MessageRole(str, Enum):
    """Role of a chat message sent to the model."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ExtractionMethod(str, Enum):
    """Layer of the response extractor that produced the article."""

    JSON = "json"
    JSON_SUBSTRING = "json_substring"
    LINE_PATTERN = "line_pattern"


class GenerationRequest(BaseModel):
    """A user's request for a new article."""

    model_config = ConfigDict(frozen=True)

    topic: str = Field(..., min_length=1, max_length=200, description="Topic")
    category: str = Field(..., min_length=1, description="Article category")
    tone: Tone = Field(Tone.PROFESSIONAL, description="Writing tone")
    language: str = Field("English", min_length=1, description="Language")
    word_count: int = Field(500, ge=100, le=2000, description="Target words")
    keywords: List[str] = Field(
        default_factory=list, max_length=10, description="SEO keywords"
    )
    additional_instructions: str = Field(
        "", max_length=1000, description="Free-text instructions"
    )


class ModelMessage(BaseModel):
    """A single chat message."""

    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str

    def to_payload(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class TokenUsage(BaseModel):
    """Token counters reported by the provider."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ModelResponse(BaseModel):
    """The first choice of a chat completion plus usage counters."""

    content: str = Field("", description="First choice message text")
    model: Optional[str] = Field(None, description="Model that answered")
    finish_reason: Optional[str] = Field(None, description="Stop reason")
    usage: TokenUsage = Field(default_factory=TokenUsage)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ModelResponse":
        """Build a response from a raw chat-completions JSON body."""
        choices = payload.get("choices") or []
        first = choices[0] if choices else {}
        message = first.get("message") or {}
        return cls(
            content=message.get("content") or "",
            model=payload.get("model"),
            finish_reason=first.get("finish_reason"),
            usage=TokenUsage(**(payload.get("usage") or {})),
        )


class ExtractedArticle(BaseModel):
    """Structured article recovered from a model reply."""

    title: str = Field(..., min_length=1, description="Article title")
    content: str = Field(..., description="Markdown content")
    summary: str = Field(..., min_length=1, description="Short summary")
    keywords: List[str] = Field(default_factory=list, description="Keywords")
    method: ExtractionMethod = Field(
        ExtractionMethod.JSON, description="Extraction layer that succeeded"
    )

    @property
    def degraded(self) -> bool:
        """True when the fields came from the line-pattern fallback."""
        return self.method == ExtractionMethod.LINE_PATTERN


class SeoMetadata(BaseModel):
    """Search engine title and description for an article."""

    seo_title: str = Field(..., description="SEO title (about 60 chars)")
    seo_description: str = Field(..., description="Meta description (about 160 chars)")


class GeneratedArticle(BaseModel):
    """Result of a full generation run."""

    article: ExtractedArticle
    seo: SeoMetadata


class ArticleIdeas(BaseModel):
    """Suggested titles and keywords for a topic."""

    titles: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)


class StoredArticle(BaseModel):
    """An article as persisted by the article store."""

    id: str
    author_id: str
    title: str
    content: str
    summary: str
    keywords: List[str] = Field(default_factory=list)
    category: str
    tone: Tone = Tone.PROFESSIONAL
    language: str = "English"
    word_count: int = 0
    status: ArticleStatus = ArticleStatus.DRAFT
    tags: List[str] = Field(default_factory=list)
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    featured_image: Optional[str] = None
    reading_time: int = 0
    created_at: datetime
    updated_at: datetime


class ArticleUpdate(BaseModel):
    """Fields an author may change on an existing article."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    tone: Optional[Tone] = None
    language: Optional[str] = Field(None, min_length=1, max_length=50)
    word_count: Optional[int] = Field(None, ge=0)
    keywords: Optional[List[str]] = Field(None, max_length=10)
    content: Optional[str] = Field(None, min_length=1, max_length=10000)
    status: Optional[ArticleStatus] = None


class ImproveRequest(BaseModel):
    """Request to rewrite article content following instructions."""

    content: str = Field(..., min_length=1)
    instructions: str = Field(..., min_length=1, max_length=1000)


class IdeasRequest(BaseModel):
    """Request for title and keyword ideas."""

    topic: Optional[str] = Field(None, description="Optional seed topic")


class DashboardStats(BaseModel):
    """Per-author article statistics."""

    total_articles: int = 0
    published_articles: int = 0
    draft_articles: int = 0
    total_words: int = 0
    average_reading_time: int = 0
    most_used_category: str = "None"


class Identity(BaseModel):
    """Caller identity resolved by the authentication layer."""

    user_id: str
    is_admin: bool = False
