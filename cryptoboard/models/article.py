from __future__ import annotations

from sqlalchemy import String, Integer, DateTime, Text, func
from sqlalchemy.orm import Mapped, mapped_column
from cryptoboard.core.db import Base

class ArticleColumns:
    """Columns shared by every per-source article table.

    Content columns are nullable on purpose: rows written by an older field set
    show up as NULLs and are picked up by drift detection.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Value of the configured dedup field at insert time
    dedup_key: Mapped[str] = mapped_column(String, nullable=False, unique=True)

    title: Mapped[str | None] = mapped_column(String, nullable=True)
    url: Mapped[str | None] = mapped_column(String, nullable=True)
    link: Mapped[str | None] = mapped_column(String, nullable=True)
    publication_date: Mapped[str | None] = mapped_column(String, nullable=True)
    host_origin: Mapped[str | None] = mapped_column(String, nullable=True)

    author: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(String, nullable=True)
    community_tag: Mapped[str | None] = mapped_column(String, nullable=True)

    fetched_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

class GuardianArticle(ArticleColumns, Base):
    __tablename__ = "guardian_articles"

class TimesArticle(ArticleColumns, Base):
    __tablename__ = "times_articles"

class SocialArticle(ArticleColumns, Base):
    __tablename__ = "social_articles"
