from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from cryptoboard.core.cache import TTLCache
from cryptoboard.core.config import Settings
from cryptoboard.core.db import create_tables, make_engine, make_sessionmaker
from cryptoboard.core.errors import PersistenceError
from cryptoboard.core.scheduler import make_scheduler, shutdown_scheduler
from cryptoboard.services.feed import FeedService
from cryptoboard.services.fetcher import Fetcher
from cryptoboard.services.ingest import SourceClient
from cryptoboard.services.normalize import Source
from cryptoboard.services.sources import GuardianSource, SocialSource, TimesSource
from cryptoboard.services.store import ArticleStore

@dataclass
class AppContext:
    """Everything the process shares between requests, built once at startup."""

    settings: Settings
    engine: AsyncEngine
    sessionmaker: async_sessionmaker[AsyncSession]
    fetcher: Fetcher
    sources: dict[Source, SourceClient]
    stores: dict[Source, ArticleStore]
    dedup_keys: dict[Source, str]
    cache: TTLCache
    feed: FeedService
    scheduler: AsyncIOScheduler

def build_sources(settings: Settings, fetcher: Fetcher) -> dict[Source, SourceClient]:
    return {
        Source.GUARDIAN: GuardianSource(
            fetcher,
            base_url=settings.guardian_base_url,
            api_key=settings.guardian_api_key,
            page_size=settings.guardian_page_size,
        ),
        Source.TIMES: TimesSource(fetcher, base_url=settings.times_base_url, api_key=settings.times_api_key),
        Source.SOCIAL: SocialSource(
            fetcher,
            token_url=settings.social_token_url,
            search_url=settings.social_search_url,
            client_id_secret=settings.social_client_id_secret,
            username=settings.social_username,
            password=settings.social_password,
            limit=settings.social_search_limit,
        ),
    }

async def open_context(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> AppContext:
    """Connect to the database and wire every component.

    Raises PersistenceError when the database cannot be reached; callers treat
    that as fatal.
    """
    engine = make_engine(settings.db_path)
    try:
        await create_tables(engine)
    except (SQLAlchemyError, OSError) as e:
        await engine.dispose()
        raise PersistenceError(f"database {settings.db_path}: {e}") from e
    logger.info(f"Connected to database at {settings.db_path}")

    sessionmaker = make_sessionmaker(engine)
    fetcher = Fetcher(settings.user_agent, settings.request_timeout_seconds, transport=transport)
    stores = {source: ArticleStore(source) for source in Source}
    cache = TTLCache(default_ttl=settings.cache_ttl_seconds)

    return AppContext(
        settings=settings,
        engine=engine,
        sessionmaker=sessionmaker,
        fetcher=fetcher,
        sources=build_sources(settings, fetcher),
        stores=stores,
        dedup_keys={
            Source.GUARDIAN: settings.guardian_dedup_key,
            Source.TIMES: settings.times_dedup_key,
            Source.SOCIAL: settings.social_dedup_key,
        },
        cache=cache,
        feed=FeedService(sessionmaker, list(stores.values()), cache, trending_limit=settings.trending_limit),
        scheduler=make_scheduler(),
    )

async def close_context(ctx: AppContext) -> None:
    shutdown_scheduler(ctx.scheduler)
    await ctx.engine.dispose()
