from __future__ import annotations

from typing import Any, Sequence

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cryptoboard.core.cache import TTLCache
from cryptoboard.models import ArticleColumns
from cryptoboard.services.enrich import article_text, compute_trending, score_sentiment
from cryptoboard.services.normalize import Source
from cryptoboard.services.store import ArticleStore

ARTICLES_KEY = "articles"
TRENDING_KEY = "trending"

def row_to_dict(row: ArticleColumns, source: Source) -> dict[str, Any]:
    return {
        "id": row.id,
        "title": row.title or "",
        "source": source.value,
        "publicationDate": row.publication_date or "",
        "url": row.url or "",
        "description": row.description or "",
        "author": row.author or "",
        "image": row.image or "",
        "communityTag": row.community_tag or "",
        "link": row.link or "",
        "hostOrigin": row.host_origin or "Unknown",
    }

class FeedService:
    """Unified, enriched view over every source table, served through the cache."""

    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        stores: Sequence[ArticleStore],
        cache: TTLCache,
        trending_limit: int = 20,
    ):
        self._sessionmaker = sessionmaker
        self._stores = stores
        self._cache = cache
        self._trending_limit = trending_limit

    async def _load_all(self) -> list[tuple[Source, ArticleColumns]]:
        out = []
        async with self._sessionmaker() as session:
            for store in self._stores:
                for row in await store.all(session):
                    out.append((store.source, row))
        return out

    async def compute_articles(self) -> list[dict[str, Any]]:
        rows = await self._load_all()
        articles = []
        for source, row in rows:
            item = row_to_dict(row, source)
            item["sentiment"] = score_sentiment(article_text(row.title, row.description))
            articles.append(item)
        logger.info(f"Aggregated {len(articles)} articles from {len(self._stores)} sources")
        return articles

    async def compute_trending(self) -> list[dict[str, Any]]:
        rows = await self._load_all()
        return compute_trending((row for _, row in rows), limit=self._trending_limit)

    async def get_articles(self) -> list[dict[str, Any]]:
        return await self._cache.get_or_compute(ARTICLES_KEY, self.compute_articles)

    async def get_trending(self) -> list[dict[str, Any]]:
        return await self._cache.get_or_compute(TRENDING_KEY, self.compute_trending)

    async def refresh_all(self) -> None:
        await self._cache.refresh(ARTICLES_KEY, self.compute_articles)
        await self._cache.refresh(TRENDING_KEY, self.compute_trending)
