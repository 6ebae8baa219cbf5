"""SQLite-backed storage for generated articles."""

import json
import logging
import sqlite3
import uuid
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple

from article_studio.core.normalizer import count_words, reading_time
from article_studio.models.article import (
    ArticleStatus,
    ArticleUpdate,
    DashboardStats,
    GeneratedArticle,
    GenerationRequest,
    StoredArticle,
)

logger = logging.getLogger(__name__)


class ArticleStore:
    """Document-style article table in a local SQLite file.

    Keyword and tag lists are stored as JSON text; word count and reading
    time are derived from the content whenever it is written.
    """

    def __init__(self, db_path: str = "articles.db"):
        """Initialize the store.

        Args:
            db_path: SQLite database file, created if missing
        """
        self.db_path = Path(db_path)
        if self.db_path.parent != Path("."):
            self.db_path.parent.mkdir(exist_ok=True, parents=True)
        self._init_database()

    def _init_database(self):
        """Create the articles table and its indexes."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS articles (
                    id TEXT PRIMARY KEY,
                    author_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    content TEXT NOT NULL,
                    summary TEXT NOT NULL,
                    keywords TEXT NOT NULL DEFAULT '[]',
                    category TEXT NOT NULL,
                    tone TEXT NOT NULL,
                    language TEXT NOT NULL,
                    word_count INTEGER NOT NULL,
                    status TEXT NOT NULL,
                    tags TEXT NOT NULL DEFAULT '[]',
                    seo_title TEXT,
                    seo_description TEXT,
                    featured_image TEXT,
                    reading_time INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
            """)

            conn.execute("CREATE INDEX IF NOT EXISTS idx_author_created ON articles(author_id, created_at)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_status_category ON articles(status, category)")
            conn.commit()

    def _row_to_article(self, row: sqlite3.Row) -> StoredArticle:
        data = dict(row)
        data["keywords"] = json.loads(data["keywords"] or "[]")
        data["tags"] = json.loads(data["tags"] or "[]")
        return StoredArticle(**data)

    def create(
        self, author_id: str, request: GenerationRequest, generated: GeneratedArticle
    ) -> StoredArticle:
        """Persist a freshly generated article as a draft."""
        now = datetime.now(timezone.utc)
        article = StoredArticle(
            id=uuid.uuid4().hex,
            author_id=author_id,
            title=generated.article.title.strip(),
            content=generated.article.content,
            summary=generated.article.summary.strip(),
            keywords=generated.article.keywords,
            category=request.category.strip(),
            tone=request.tone,
            language=request.language,
            word_count=count_words(generated.article.content),
            status=ArticleStatus.DRAFT,
            tags=list(request.keywords),
            seo_title=generated.seo.seo_title.strip(),
            seo_description=generated.seo.seo_description.strip(),
            reading_time=reading_time(generated.article.content),
            created_at=now,
            updated_at=now,
        )

        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                INSERT INTO articles (
                    id, author_id, title, content, summary, keywords, category,
                    tone, language, word_count, status, tags, seo_title,
                    seo_description, featured_image, reading_time, created_at,
                    updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                article.id,
                article.author_id,
                article.title,
                article.content,
                article.summary,
                json.dumps(article.keywords),
                article.category,
                article.tone.value,
                article.language,
                article.word_count,
                article.status.value,
                json.dumps(article.tags),
                article.seo_title,
                article.seo_description,
                article.featured_image,
                article.reading_time,
                article.created_at.isoformat(),
                article.updated_at.isoformat(),
            ))
            conn.commit()

        logger.info(f"Stored article {article.id} for author {author_id}")
        return article

    def get(self, article_id: str) -> Optional[StoredArticle]:
        """Fetch one article by id."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            row = conn.execute(
                "SELECT * FROM articles WHERE id = ?", (article_id,)
            ).fetchone()
        return self._row_to_article(row) if row else None

    def list_for_author(
        self,
        author_id: str,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        category: Optional[str] = None,
    ) -> Tuple[List[StoredArticle], int]:
        """Page through an author's articles, newest first.

        Returns:
            Tuple of (articles on the page, total matching articles)
        """
        where = ["author_id = ?"]
        params: list = [author_id]
        if status:
            where.append("status = ?")
            params.append(status)
        if category:
            where.append("category = ?")
            params.append(category)
        clause = " AND ".join(where)
        offset = (max(page, 1) - 1) * limit

        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            total = conn.execute(
                f"SELECT COUNT(*) FROM articles WHERE {clause}", params
            ).fetchone()[0]
            rows = conn.execute(
                f"""
                SELECT * FROM articles WHERE {clause}
                ORDER BY created_at DESC, rowid DESC
                LIMIT ? OFFSET ?
                """,
                params + [limit, offset],
            ).fetchall()

        return [self._row_to_article(row) for row in rows], total

    def list_all(self) -> List[StoredArticle]:
        """All articles, newest first."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(
                "SELECT * FROM articles ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
        return [self._row_to_article(row) for row in rows]

    def count_for_author(self, author_id: str) -> int:
        with sqlite3.connect(self.db_path) as conn:
            return conn.execute(
                "SELECT COUNT(*) FROM articles WHERE author_id = ?", (author_id,)
            ).fetchone()[0]

    def update(
        self, article_id: str, changes: ArticleUpdate
    ) -> Optional[StoredArticle]:
        """Apply the given changes; returns None if the article does not exist."""
        article = self.get(article_id)
        if article is None:
            return None

        values = changes.model_dump(exclude_none=True)
        if not values:
            return article

        content_changed = "content" in values and values["content"] != article.content
        updated = article.model_copy(update=values)
        if content_changed:
            updated.reading_time = reading_time(updated.content)
        updated.updated_at = datetime.now(timezone.utc)

        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                UPDATE articles SET
                    title = ?, content = ?, keywords = ?, category = ?, tone = ?,
                    language = ?, word_count = ?, status = ?, reading_time = ?,
                    updated_at = ?
                WHERE id = ?
            """, (
                updated.title,
                updated.content,
                json.dumps(updated.keywords),
                updated.category,
                updated.tone.value,
                updated.language,
                updated.word_count,
                updated.status.value,
                updated.reading_time,
                updated.updated_at.isoformat(),
                article_id,
            ))
            conn.commit()

        logger.info(f"Updated article {article_id}: {', '.join(sorted(values))}")
        return updated

    def delete(self, article_id: str) -> bool:
        """Delete an article; returns False if it did not exist."""
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM articles WHERE id = ?", (article_id,))
            conn.commit()
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(f"Deleted article {article_id}")
        return deleted

    def stats(self, author_id: str) -> DashboardStats:
        """Aggregate dashboard statistics for one author."""
        with sqlite3.connect(self.db_path) as conn:
            rows = conn.execute(
                "SELECT status, category, word_count, reading_time FROM articles WHERE author_id = ?",
                (author_id,),
            ).fetchall()

        if not rows:
            return DashboardStats()

        statuses = Counter(row[0] for row in rows)
        categories = Counter(row[1] for row in rows)
        return DashboardStats(
            total_articles=len(rows),
            published_articles=statuses[ArticleStatus.PUBLISHED.value],
            draft_articles=statuses[ArticleStatus.DRAFT.value],
            total_words=sum(row[2] for row in rows),
            average_reading_time=round(sum(row[3] for row in rows) / len(rows)),
            most_used_category=categories.most_common(1)[0][0],
        )
