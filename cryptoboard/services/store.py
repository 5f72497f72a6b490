from __future__ import annotations

from typing import Iterable, Sequence

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cryptoboard.core.errors import PersistenceError
from cryptoboard.models import ArticleColumns, GuardianArticle, SocialArticle, TimesArticle
from cryptoboard.services.normalize import Article, Source

MODELS: dict[Source, type[ArticleColumns]] = {
    Source.GUARDIAN: GuardianArticle,
    Source.TIMES: TimesArticle,
    Source.SOCIAL: SocialArticle,
}

class ArticleStore:
    """Persistence for one source's article table.

    Rows are only ever inserted or purged as a whole; there is no update path.
    """

    def __init__(self, source: Source):
        self.source = source
        self.model = MODELS[source]

    async def all(self, session: AsyncSession) -> Sequence[ArticleColumns]:
        try:
            r = await session.execute(select(self.model).order_by(self.model.id.asc()))
            return r.scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"read {self.model.__tablename__}: {e}") from e

    async def purge(self, session: AsyncSession) -> int:
        try:
            res = await session.execute(delete(self.model))
        except SQLAlchemyError as e:
            raise PersistenceError(f"purge {self.model.__tablename__}: {e}") from e
        logger.info(f"Purged {res.rowcount} rows from {self.model.__tablename__}")
        return res.rowcount

    async def insert_if_absent(self, session: AsyncSession, articles: Iterable[Article], key_field: str) -> int:
        """Insert each article unless a row with the same dedup key exists.

        The unique constraint on ``dedup_key`` makes this a single conditional
        write per row, so concurrent ingestions cannot store a key twice.
        Returns the number of rows actually inserted. Does not commit.
        """
        inserted = 0
        try:
            for article in articles:
                stmt = (
                    insert(self.model)
                    .values(dedup_key=article.key(key_field), **article.row_values())
                    .on_conflict_do_nothing(index_elements=["dedup_key"])
                )
                res = await session.execute(stmt)
                inserted += res.rowcount
        except SQLAlchemyError as e:
            raise PersistenceError(f"insert {self.model.__tablename__}: {e}") from e
        return inserted
