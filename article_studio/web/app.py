"""FastAPI web interface for article generation and management."""

import logging
import math
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import uvicorn
from fastapi import Depends, FastAPI, Header, HTTPException, Query
from fastapi.requests import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from article_studio import __version__
from article_studio.clients.openrouter import OpenRouterClient
from article_studio.core.exceptions import ConfigurationError, GenerationError
from article_studio.core.generator import ArticleGenerator
from article_studio.core.normalizer import normalize_content, render_markdown
from article_studio.core.rate_limit import RateLimiter
from article_studio.core.store import ArticleStore
from article_studio.core.utils import sanitize_topic, strip_unsafe_html
from article_studio.models.article import (
    ArticleUpdate,
    GenerationRequest,
    IdeasRequest,
    Identity,
    ImproveRequest,
    StoredArticle,
)
from article_studio.models.settings import Settings

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again in 1 minute."
SUMMARY_FIELDS = {"content"}

app = FastAPI(
    title="Article Studio",
    description="Generate, store and edit SEO articles with OpenRouter models",
    version=__version__,
)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


@lru_cache()
def get_settings() -> Settings:
    return Settings()


@lru_cache()
def get_store() -> ArticleStore:
    return ArticleStore(get_settings().database_path)


@lru_cache()
def get_rate_limiter() -> RateLimiter:
    return RateLimiter.from_settings(get_settings())


def get_generator(settings: Settings = Depends(get_settings)) -> ArticleGenerator:
    """Build a generator; a missing OpenRouter key is a server error."""
    try:
        client = OpenRouterClient.from_settings(settings)
    except ConfigurationError as e:
        logger.error(f"Generator unavailable: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return ArticleGenerator(client, settings)


def get_identity(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> Identity:
    """Identity forwarded by the authentication layer."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return Identity(user_id=x_user_id, is_admin=(x_user_role or "").lower() == "admin")


def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if not identity.is_admin:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return identity


def _enforce_rate_limit(limiter: RateLimiter, key: str) -> None:
    if not limiter.allow(key):
        raise HTTPException(status_code=429, detail=RATE_LIMIT_MESSAGE)


def _load_own_article(store: ArticleStore, article_id: str, identity: Identity) -> StoredArticle:
    article = store.get(article_id)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    if article.author_id != identity.user_id:
        raise HTTPException(
            status_code=403,
            detail="Forbidden: You are not the author of this article",
        )
    return article


def _article_summary(article: StoredArticle) -> Dict[str, Any]:
    return article.model_dump(mode="json", exclude=SUMMARY_FIELDS)


@app.get("/api/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint."""
    return {
        "status": "healthy" if settings.openrouter_api_key else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "api_keys": {"openrouter": bool(settings.openrouter_api_key)},
        "model": settings.openrouter_model,
    }


@app.post("/api/articles/generate")
async def generate_article(
    request: GenerationRequest,
    identity: Identity = Depends(get_identity),
    store: ArticleStore = Depends(get_store),
    limiter: RateLimiter = Depends(get_rate_limiter),
    generator: ArticleGenerator = Depends(get_generator),
):
    """Generate an article with SEO metadata and store it as a draft."""
    _enforce_rate_limit(limiter, f"generate:{identity.user_id}")

    try:
        generated = await generator.create_article(request)
    except GenerationError as e:
        logger.error(f"Article generation failed for {identity.user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate article")

    article = store.create(identity.user_id, request, generated)
    return {
        "success": True,
        "article": article.model_dump(mode="json"),
        "extraction": generated.article.method.value,
        "user_stats": {"articles_generated": store.count_for_author(identity.user_id)},
    }


@app.get("/api/articles")
async def list_articles(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[str] = None,
    category: Optional[str] = None,
    identity: Identity = Depends(get_identity),
    store: ArticleStore = Depends(get_store),
):
    """List the caller's articles without their content."""
    articles, total = store.list_for_author(
        identity.user_id, page=page, limit=limit, status=status, category=category
    )
    return {
        "success": True,
        "articles": [_article_summary(article) for article in articles],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit),
        },
    }


@app.get("/api/articles/{article_id}")
async def get_article(
    article_id: str,
    identity: Identity = Depends(get_identity),
    store: ArticleStore = Depends(get_store),
):
    """Fetch an article together with its normalized content."""
    article = store.get(article_id)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return {
        "success": True,
        "article": article.model_dump(mode="json"),
        "clean_content": normalize_content(article.content),
    }


@app.put("/api/articles/{article_id}")
async def update_article(
    article_id: str,
    changes: ArticleUpdate,
    identity: Identity = Depends(get_identity),
    store: ArticleStore = Depends(get_store),
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    """Edit an article; only its author may do so."""
    _enforce_rate_limit(limiter, f"articles:{identity.user_id}")
    _load_own_article(store, article_id, identity)
    article = store.update(article_id, changes)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return {"success": True, "article": article.model_dump(mode="json")}


@app.patch("/api/articles/{article_id}")
async def improve_article(
    article_id: str,
    body: ImproveRequest,
    identity: Identity = Depends(get_identity),
    generator: ArticleGenerator = Depends(get_generator),
):
    """Rewrite submitted content following the given instructions."""
    try:
        improved = await generator.improve_article(body.content, body.instructions)
    except GenerationError as e:
        logger.error(f"Improving article {article_id} failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to improve article")
    return {"success": True, "improved": improved}


@app.delete("/api/articles/{article_id}")
async def delete_article(
    article_id: str,
    identity: Identity = Depends(get_identity),
    store: ArticleStore = Depends(get_store),
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    """Delete an article; only its author may do so."""
    _enforce_rate_limit(limiter, f"articles:{identity.user_id}")
    _load_own_article(store, article_id, identity)
    store.delete(article_id)
    return {"success": True}


@app.get("/api/dashboard/stats")
async def dashboard_stats(
    identity: Identity = Depends(get_identity),
    store: ArticleStore = Depends(get_store),
):
    """Article statistics for the caller."""
    return {"success": True, "stats": store.stats(identity.user_id).model_dump()}


@app.post("/api/ai-ideas")
async def article_ideas(
    body: IdeasRequest,
    request: Request,
    limiter: RateLimiter = Depends(get_rate_limiter),
    generator: ArticleGenerator = Depends(get_generator),
):
    """Suggest titles and keywords for an optional topic."""
    client_ip = (
        request.headers.get("x-forwarded-for")
        or request.headers.get("x-real-ip")
        or (request.client.host if request.client else "unknown")
    )
    _enforce_rate_limit(limiter, f"ideas:{client_ip}")

    try:
        ideas = await generator.suggest_ideas(sanitize_topic(body.topic or ""))
    except GenerationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return ideas.model_dump()


@app.get("/api/admin/articles")
async def admin_list_articles(
    identity: Identity = Depends(require_admin),
    store: ArticleStore = Depends(get_store),
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    """List every article (admin only)."""
    _enforce_rate_limit(limiter, f"admin:{identity.user_id}")
    return {
        "articles": [
            {
                "id": article.id,
                "title": article.title,
                "author_id": article.author_id,
                "status": article.status.value,
                "created_at": article.created_at.isoformat(),
            }
            for article in store.list_all()
        ]
    }


@app.delete("/api/admin/articles/{article_id}")
async def admin_delete_article(
    article_id: str,
    identity: Identity = Depends(require_admin),
    store: ArticleStore = Depends(get_store),
    limiter: RateLimiter = Depends(get_rate_limiter),
):
    """Delete any article (admin only)."""
    _enforce_rate_limit(limiter, f"admin:{identity.user_id}")
    if not store.delete(article_id):
        raise HTTPException(status_code=404, detail="Article not found")
    return {"success": True, "message": "Article deleted successfully"}


@app.get("/articles/{article_id}", response_class=HTMLResponse)
async def article_page(
    request: Request,
    article_id: str,
    store: ArticleStore = Depends(get_store),
):
    """Rendered article page."""
    article = store.get(article_id)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")

    return templates.TemplateResponse(
        request,
        "article.html",
        {
            "article": article,
            "page_title": article.seo_title or article.title,
            "page_description": article.seo_description or article.summary,
            "body_html": strip_unsafe_html(render_markdown(article.content)),
        },
    )


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
